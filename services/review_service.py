"""
Review Service - Trustpilot review submission and approval

Reviews are created pending and move once to approved or rejected.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from models import REVIEW_STATUSES, TrustpilotReview
from schemas import TrustpilotReviewCreate
from services.timezone_utils import utc_now

logger = logging.getLogger(__name__)


def create_trustpilot_review(db: Session, moderator_id: int, review: TrustpilotReviewCreate) -> TrustpilotReview:
    now = utc_now()
    db_review = TrustpilotReview(
        moderator_id=moderator_id,
        customer_name=review.customer_name,
        customer_email=str(review.customer_email),
        rating=review.rating,
        review_text=review.review_text,
        business_response=review.business_response,
        screenshot_url=review.screenshot_url,
        status="pending",
        submitted_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(db_review)
    db.commit()
    db.refresh(db_review)
    return db_review


def get_trustpilot_review(db: Session, review_id: int) -> Optional[TrustpilotReview]:
    return db.query(TrustpilotReview).filter(TrustpilotReview.id == review_id).first()


def get_trustpilot_reviews(db: Session, status: Optional[str] = None, limit: Optional[int] = None) -> List[TrustpilotReview]:
    query = db.query(TrustpilotReview)
    if status:
        query = query.filter(TrustpilotReview.status == status)
    return query.order_by(TrustpilotReview.submitted_at.desc(), TrustpilotReview.id.desc()).limit(limit).all()


def get_moderator_reviews(db: Session, moderator_id: int, limit: Optional[int] = None) -> List[TrustpilotReview]:
    return db.query(TrustpilotReview)\
        .filter(TrustpilotReview.moderator_id == moderator_id)\
        .order_by(TrustpilotReview.submitted_at.desc(), TrustpilotReview.id.desc())\
        .limit(limit)\
        .all()


def review_trustpilot_review(
    db: Session,
    review_id: int,
    admin_id: int,
    status: str,
    admin_comments: Optional[str] = None,
) -> Optional[TrustpilotReview]:
    """
    Approve or reject a pending review.

    The UPDATE only matches rows still pending, so a decided review never
    changes again. Customer and moderator fields are left untouched.

    Returns:
        The updated review, or None when no pending review has this id.
    """
    if status not in ("approved", "rejected"):
        raise ValueError(f"Invalid review decision: {status}")

    now = utc_now()
    stmt = update(TrustpilotReview)\
        .where(TrustpilotReview.id == review_id, TrustpilotReview.status == "pending")\
        .values(
            status=status,
            admin_review_id=admin_id,
            admin_comments=admin_comments,
            reviewed_at=now,
            updated_at=now,
        )\
        .execution_options(synchronize_session=False)

    result = db.execute(stmt)
    db.commit()

    if result.rowcount == 0:
        logger.info(f"Review {review_id} is missing or already decided; {status} ignored")
        return None

    return get_trustpilot_review(db, review_id)


def get_review_stats(db: Session, moderator_id: Optional[int] = None) -> dict:
    query = db.query(TrustpilotReview.status, func.count(TrustpilotReview.id))
    if moderator_id is not None:
        query = query.filter(TrustpilotReview.moderator_id == moderator_id)
    counts = dict(query.group_by(TrustpilotReview.status).all())

    stats = {status: counts.get(status, 0) for status in REVIEW_STATUSES}
    stats["total"] = sum(stats.values())
    return stats
