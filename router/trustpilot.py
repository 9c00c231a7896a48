"""
Trustpilot Router - review submission (moderators) and approval (admins)
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Literal, Optional

from db import get_db
from dependencies import allow_admin, allow_moderator, get_client_ip, get_current_user
from models import User
from schemas import ReviewDecisionRequest, ReviewStatsOut, TrustpilotReviewCreate, TrustpilotReviewOut
from services.admin_service import log_admin_action
from services.review_service import (
    create_trustpilot_review,
    get_moderator_reviews,
    get_review_stats,
    get_trustpilot_review,
    get_trustpilot_reviews,
    review_trustpilot_review,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trustpilot", tags=["Trustpilot Reviews"])


@router.post(
    "/reviews",
    response_model=TrustpilotReviewOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(allow_moderator)]
)
def submit_review(
    review: TrustpilotReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    db_review = create_trustpilot_review(db, current_user.id, review)
    logger.info(f"Review {db_review.id} submitted by {current_user.email}")
    return db_review


@router.get("/reviews", response_model=List[TrustpilotReviewOut])
def list_reviews(
    status: Optional[Literal["pending", "approved", "rejected"]] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Admins see every review (optionally filtered by status);
    moderators see only their own submissions.
    """
    if current_user.is_admin:
        return get_trustpilot_reviews(db, status=status)

    reviews = get_moderator_reviews(db, current_user.id)
    if status:
        reviews = [r for r in reviews if r.status == status]
    return reviews


@router.get("/reviews/stats", response_model=ReviewStatsOut)
def review_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    moderator_id = None if current_user.is_admin else current_user.id
    return get_review_stats(db, moderator_id=moderator_id)


@router.get("/reviews/{review_id}", response_model=TrustpilotReviewOut)
def read_review(
    review_id: int = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    review = get_trustpilot_review(db, review_id)
    if not review or (not current_user.is_admin and review.moderator_id != current_user.id):
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.patch(
    "/reviews/{review_id}/review",
    response_model=TrustpilotReviewOut,
    dependencies=[Depends(allow_admin)]
)
def decide_review(
    request: Request,
    decision: ReviewDecisionRequest,
    review_id: int = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Approve or reject a pending review. Decided reviews cannot be changed."""
    updated = review_trustpilot_review(
        db,
        review_id=review_id,
        admin_id=current_user.id,
        status=decision.status,
        admin_comments=decision.admin_comments,
    )
    if updated is None:
        if get_trustpilot_review(db, review_id) is None:
            raise HTTPException(status_code=404, detail="Review not found")
        raise HTTPException(status_code=409, detail="Review has already been reviewed")

    log_admin_action(
        db,
        admin_id=current_user.id,
        action=f"review_{decision.status}",
        target_user_id=updated.moderator_id,
        details=f"Trustpilot review {review_id}",
        ip_address=get_client_ip(request),
    )
    return updated
