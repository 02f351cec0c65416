"""Record like/dislike/hide feedback and learn preferences from it.

Feedback touches two rows with no shared transaction:

* the job posting (authoritative). It is changed with one conditional UPDATE
  keyed by posting id and owner. If that write fails the request fails with
  ``PersistenceError``.
* the user's search preferences (advisory). Counters, the learned salary
  adjustment and the avoided-company list are updated on a best-effort basis.
  A missing row, a failed write or a bug in a learning rule is logged and
  swallowed, so the caller still gets success once the posting is updated.
"""

from __future__ import annotations
import logging
from datetime import timedelta
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AuthorizationError, InputValidationError, NotFoundError, PersistenceError
from app.models.job_posting import JobPosting
from app.schemas.feedback import FeedbackReason, FeedbackRequest, FeedbackResponse, UserFeedback
from app.schemas.job import JobPostingStatus
from app.schemas.preferences import FeedbackStats
from app.services.posting_service import apply_feedback_update, get_posting
from app.services.preferences_service import get_preferences_row, update_preferences
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

SALARY_ADJUSTMENT_STEP = 10
SALARY_ADJUSTMENT_CAP = 50


def parse_feedback_request(payload: Any) -> FeedbackRequest:
    if not isinstance(payload, dict):
        raise InputValidationError("Validation error: body must be a JSON object")
    try:
        return FeedbackRequest.model_validate(payload)
    except ValidationError as exc:
        details = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InputValidationError(f"Validation error: {details}") from exc


def posting_update_for(request: FeedbackRequest) -> dict:
    if request.feedback == UserFeedback.LIKE:
        return {
            "status": JobPostingStatus.LIKED.value,
            "user_feedback": UserFeedback.LIKE.value,
            "feedback_reason": None,
            "discarded_until": None,
        }
    reason = request.reason.value if request.reason and request.feedback == UserFeedback.DISLIKE else None
    return {
        "status": JobPostingStatus.DISMISSED.value,
        "user_feedback": request.feedback.value,
        "feedback_reason": reason,
        "discarded_until": utcnow() + timedelta(days=settings.feedback_discard_days),
    }


def updated_feedback_stats(current: dict | None, request: FeedbackRequest) -> dict:
    stats = FeedbackStats.model_validate(current or {})
    if request.feedback == UserFeedback.LIKE:
        stats.total_likes += 1
    elif request.feedback == UserFeedback.DISLIKE:
        stats.total_dislikes += 1
    else:
        stats.total_hides += 1

    reasons = dict(stats.reasons)
    if request.reason and request.feedback == UserFeedback.DISLIKE:
        reasons[request.reason.value] = reasons.get(request.reason.value, 0) + 1
    stats.reasons = reasons
    return stats.model_dump()


def learned_preference_values(prefs_row, posting: JobPosting, request: FeedbackRequest) -> dict:
    """Column values to write on the preferences row.

    Stats and implicit preferences are always written. ``avoid_companies`` is
    only included when the company is actually new to the list.
    """
    implicit = dict(prefs_row.implicit_preferences or {})
    values = {"feedback_stats": updated_feedback_stats(prefs_row.feedback_stats, request)}

    reason = request.reason if request.feedback == UserFeedback.DISLIKE else None
    if reason == FeedbackReason.SALARY_TOO_LOW:
        current = implicit.get("salary_adjustment") or 0
        implicit["salary_adjustment"] = min(current + SALARY_ADJUSTMENT_STEP, SALARY_ADJUSTMENT_CAP)
    elif reason == FeedbackReason.NOT_INTERESTED_IN_COMPANY:
        company = (posting.company_name or "").strip()
        avoided = list(prefs_row.avoid_companies or [])
        if company and company not in avoided:
            values["avoid_companies"] = avoided + [company]

    values["implicit_preferences"] = implicit
    return values


def _learn_from_feedback(db: Session, user_id: str, posting: JobPosting, request: FeedbackRequest) -> None:
    try:
        prefs_row = get_preferences_row(db, user_id)
        if prefs_row is None:
            logger.warning("no search preferences for user=%s; skipping preference learning", user_id)
            return
        update_preferences(db, user_id, learned_preference_values(prefs_row, posting, request))
    except Exception:  # noqa: BLE001
        db.rollback()
        logger.exception("preference learning failed for user=%s posting=%s", user_id, posting.id)


def record_feedback(db: Session, user_id: str, payload: Any) -> FeedbackResponse:
    request = parse_feedback_request(payload)
    posting_id = str(request.job_posting_id)

    posting = get_posting(db, posting_id)
    if posting is None:
        raise NotFoundError("Job posting not found")
    if posting.user_id != user_id:
        raise AuthorizationError("Unauthorized")

    try:
        updated = apply_feedback_update(db, posting_id, user_id, posting_update_for(request))
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("failed to update posting=%s: %s", posting_id, exc)
        raise PersistenceError("Failed to update job posting") from exc
    if not updated:
        raise PersistenceError("Failed to update job posting")

    _learn_from_feedback(db, user_id, posting, request)
    logger.info(
        "recorded %s for posting=%s%s",
        request.feedback.value,
        posting_id,
        f" (reason: {request.reason.value})" if request.reason else "",
    )
    return FeedbackResponse(success=True)
