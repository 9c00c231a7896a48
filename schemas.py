from pydantic import BaseModel, Field, EmailStr, validator
from typing import Optional, Literal, List
from datetime import datetime, date


# ============================================================================
# AUTH / USER SCHEMAS
# ============================================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane@company.com",
                "password": "SecurePass123!",
                "first_name": "Jane",
                "last_name": "Doe"
            }
        }

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, description="Password is required")
    location: Optional[str] = Field(None, max_length=255)

class TrackLoginRequest(BaseModel):
    location: Optional[str] = Field(None, max_length=255)

class UserOut(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserStatusUpdate(BaseModel):
    is_active: bool

class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int  # Seconds until expiry
    user: UserOut

class LogoutResponse(BaseModel):
    """Response after successful logout"""
    message: str
    success: bool
    session_closed: bool


# ============================================================================
# ATTENDANCE / LOGIN LOG SCHEMAS
# ============================================================================

class MarkAttendanceRequest(BaseModel):
    location: Optional[str] = Field(None, max_length=255)

class AttendanceOut(BaseModel):
    id: int
    user_id: int
    date: datetime
    attendance_day: date
    ip_address: str
    location: Optional[str] = None
    user_agent: Optional[str] = None

    class Config:
        from_attributes = True

class LoginLogOut(BaseModel):
    id: int
    user_id: int
    ip_address: str
    location: Optional[str] = None
    user_agent: Optional[str] = None
    login_time: datetime
    logout_time: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserStatsOut(BaseModel):
    """Current-month attendance summary shown on the moderator dashboard"""
    present_days: int
    working_days: int
    attendance_rate: int
    recent_activity: List[LoginLogOut]

class CountSummary(BaseModel):
    today: int
    total: int

class ModeratorCountSummary(BaseModel):
    total: int
    active: int
    inactive: int

class AdminStatsOut(BaseModel):
    moderators: ModeratorCountSummary
    attendance: CountSummary
    logins: CountSummary


# ============================================================================
# ADMIN ACTION SCHEMAS
# ============================================================================

class AdminActionOut(BaseModel):
    id: int
    admin_id: int
    action: str
    target_user_id: Optional[int] = None
    details: Optional[str] = None
    ip_address: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================================
# TRUSTPILOT REVIEW SCHEMAS
# ============================================================================

class TrustpilotReviewCreate(BaseModel):
    """
    Review submitted by a moderator.

    The moderator is taken from the session, never from the body.
    `screenshot_url` is an opaque string: a link or a data URL encoded client-side.
    """
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    rating: int = Field(..., ge=1, le=5, description="1-5 stars")
    review_text: str = Field(..., min_length=1)
    business_response: Optional[str] = None
    screenshot_url: Optional[str] = None

    @validator('customer_name', 'review_text')
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "customer_name": "Alice",
                "customer_email": "a@x.com",
                "rating": 5,
                "review_text": "Great"
            }
        }

class ReviewDecisionRequest(BaseModel):
    status: Literal["approved", "rejected"]
    admin_comments: Optional[str] = None

class TrustpilotReviewOut(BaseModel):
    id: int
    moderator_id: int
    customer_name: str
    customer_email: str
    rating: int
    review_text: str
    business_response: Optional[str] = None
    screenshot_url: Optional[str] = None
    status: str
    admin_review_id: Optional[int] = None
    admin_comments: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    submitted_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReviewStatsOut(BaseModel):
    pending: int
    approved: int
    rejected: int
    total: int


# ============================================================================
# SHIFT SCHEDULE SCHEMAS
# ============================================================================

class ShiftScheduleCreate(BaseModel):
    user_id: int
    agent_name: str = Field(..., min_length=1, max_length=255)
    team: str = Field(..., min_length=1, max_length=50)
    monday: str = Field("Off", max_length=50)
    tuesday: str = Field("Off", max_length=50)
    wednesday: str = Field("Off", max_length=50)
    thursday: str = Field("Off", max_length=50)
    friday: str = Field("Off", max_length=50)
    saturday: str = Field("Off", max_length=50)
    sunday: str = Field("Off", max_length=50)
    timezone: str = Field("GMT", max_length=50)

class ShiftScheduleUpdate(BaseModel):
    agent_name: Optional[str] = Field(None, min_length=1, max_length=255)
    team: Optional[str] = Field(None, min_length=1, max_length=50)
    monday: Optional[str] = Field(None, max_length=50)
    tuesday: Optional[str] = Field(None, max_length=50)
    wednesday: Optional[str] = Field(None, max_length=50)
    thursday: Optional[str] = Field(None, max_length=50)
    friday: Optional[str] = Field(None, max_length=50)
    saturday: Optional[str] = Field(None, max_length=50)
    sunday: Optional[str] = Field(None, max_length=50)
    timezone: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None

class ShiftScheduleOut(BaseModel):
    id: int
    user_id: int
    agent_name: str
    team: str
    monday: str
    tuesday: str
    wednesday: str
    thursday: str
    friday: str
    saturday: str
    sunday: str
    timezone: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================================
# DISCIPLINARY ACTION SCHEMAS
# ============================================================================

class DisciplinaryActionCreate(BaseModel):
    moderator_id: int
    type: Literal["warning", "strike"]
    reason: str = Field(..., min_length=1)
    description: Optional[str] = None
    severity: Literal["low", "medium", "high"] = "medium"
    expires_at: Optional[datetime] = None

class DisciplinaryActionUpdate(BaseModel):
    type: Optional[Literal["warning", "strike"]] = None
    reason: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    severity: Optional[Literal["low", "medium", "high"]] = None
    expires_at: Optional[datetime] = None

class DisciplinaryActionOut(BaseModel):
    id: int
    moderator_id: int
    admin_id: int
    type: str
    reason: str
    description: Optional[str] = None
    severity: str
    is_active: bool
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================================
# ERROR SCHEMAS
# ============================================================================

class FieldError(BaseModel):
    field: str
    message: str

class ErrorResponse(BaseModel):
    """
    Body of every error response.

    Example:
        {
            "message": "Validation failed",
            "errors": [{"field": "rating", "message": "Input should be less than or equal to 5"}]
        }
    """
    message: str
    errors: Optional[List[FieldError]] = None
