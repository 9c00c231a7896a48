from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, DeclarativeBase
from datetime import datetime, timezone

# TIMEZONE NOTES:
# =================================
# - ALL DateTime fields store UTC time as naive datetime
# - "Today" boundaries come from services.timezone_utils (APP_TIMEZONE)

def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass

REVIEW_STATUSES = ("pending", "approved", "rejected")


# ============================================================================
# USER MODEL
# ============================================================================

class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default="moderator")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow)

    attendance_records = relationship("AttendanceRecord", back_populates="user")
    login_logs = relationship("LoginLog", back_populates="user")
    blacklisted_tokens = relationship("TokenBlacklist", back_populates="user")

    __table_args__ = (
        CheckConstraint("role IN ('moderator', 'admin')", name="ck_users_role"),
    )

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.email

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"


# ============================================================================
# TOKEN BLACKLIST MODEL
# ============================================================================

class TokenBlacklist(Base):
    __tablename__ = 'token_blacklist'

    id = Column(Integer, primary_key=True, index=True)
    jti = Column(String(50), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    blacklisted_at = Column(DateTime, default=_utcnow)
    token_exp = Column(DateTime, nullable=False)
    reason = Column(String(50), default="user_logout")

    user = relationship("User", back_populates="blacklisted_tokens")

    __table_args__ = (
        Index('idx_blacklist_user_id', 'user_id'),
        Index('idx_blacklist_exp', 'token_exp'),
    )


# ============================================================================
# ATTENDANCE RECORD MODEL
# ============================================================================

class AttendanceRecord(Base):
    __tablename__ = 'attendance_records'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    date = Column(DateTime, nullable=False, default=_utcnow)
    # Local calendar day of `date`; backs the once-per-day constraint
    attendance_day = Column(Date, nullable=False)
    ip_address = Column(String(64), nullable=False)
    location = Column(String(255), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow)

    user = relationship("User", back_populates="attendance_records")

    __table_args__ = (
        UniqueConstraint('user_id', 'attendance_day', name='uq_attendance_user_day'),
        Index('idx_attendance_user_date', 'user_id', 'date'),
    )

    def __repr__(self):
        return f"<AttendanceRecord user={self.user_id} day={self.attendance_day}>"


# ============================================================================
# LOGIN LOG MODEL
# ============================================================================

class LoginLog(Base):
    __tablename__ = 'login_logs'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    ip_address = Column(String(64), nullable=False)
    location = Column(String(255), nullable=True)
    user_agent = Column(Text, nullable=True)
    login_time = Column(DateTime, nullable=False, default=_utcnow)
    logout_time = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="login_logs")

    __table_args__ = (
        Index('idx_login_logs_user_time', 'user_id', 'login_time'),
    )


# ============================================================================
# ADMIN ACTION MODEL (append-only audit trail)
# ============================================================================

class AdminAction(Base):
    __tablename__ = 'admin_actions'

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    action = Column(String(100), nullable=False)
    target_user_id = Column(Integer, ForeignKey('users.id'), nullable=True)
    details = Column(Text, nullable=True)
    ip_address = Column(String(64), nullable=False, default="unknown")
    created_at = Column(DateTime, default=_utcnow)

    admin = relationship("User", foreign_keys=[admin_id])
    target_user = relationship("User", foreign_keys=[target_user_id])


# ============================================================================
# TRUSTPILOT REVIEW MODEL
# ============================================================================

class TrustpilotReview(Base):
    __tablename__ = 'trustpilot_reviews'

    id = Column(Integer, primary_key=True, index=True)
    moderator_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    review_text = Column(Text, nullable=False)
    business_response = Column(Text, nullable=True)
    screenshot_url = Column(Text, nullable=True)  # URL or data URL
    status = Column(String(20), nullable=False, default="pending")
    admin_review_id = Column(Integer, ForeignKey('users.id'), nullable=True)
    admin_comments = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    submitted_at = Column(DateTime, nullable=False, default=_utcnow)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow)

    moderator = relationship("User", foreign_keys=[moderator_id])
    reviewer = relationship("User", foreign_keys=[admin_review_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_trustpilot_reviews_status"
        ),
        Index('idx_reviews_status_submitted', 'status', 'submitted_at'),
        Index('idx_reviews_moderator', 'moderator_id'),
    )


# ============================================================================
# SHIFT SCHEDULE MODEL
# ============================================================================

class ShiftSchedule(Base):
    __tablename__ = 'shift_schedules'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    agent_name = Column(String(255), nullable=False)
    team = Column(String(50), nullable=False)  # London, NY, Asia, Weekend
    monday = Column(String(50), default="Off")
    tuesday = Column(String(50), default="Off")
    wednesday = Column(String(50), default="Off")
    thursday = Column(String(50), default="Off")
    friday = Column(String(50), default="Off")
    saturday = Column(String(50), default="Off")
    sunday = Column(String(50), default="Off")
    timezone = Column(String(50), nullable=False, default="GMT")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow)

    user = relationship("User")

    __table_args__ = (
        Index('idx_schedules_user_created', 'user_id', 'created_at'),
    )


# ============================================================================
# DISCIPLINARY ACTION MODEL
# ============================================================================

class DisciplinaryAction(Base):
    __tablename__ = 'disciplinary_actions'

    id = Column(Integer, primary_key=True, index=True)
    moderator_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    admin_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    type = Column(String(20), nullable=False)
    reason = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    severity = Column(String(20), nullable=False, default="medium")
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime, nullable=True)  # For warnings that expire
    created_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow)

    moderator = relationship("User", foreign_keys=[moderator_id])
    admin = relationship("User", foreign_keys=[admin_id])

    __table_args__ = (
        CheckConstraint("type IN ('warning', 'strike')", name="ck_disciplinary_type"),
        CheckConstraint("severity IN ('low', 'medium', 'high')", name="ck_disciplinary_severity"),
        Index('idx_disciplinary_moderator_active', 'moderator_id', 'is_active'),
    )
