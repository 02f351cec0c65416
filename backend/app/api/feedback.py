from __future__ import annotations
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.db.database import get_db
from app.schemas.feedback import FeedbackResponse
from app.services.feedback_service import record_feedback

router = APIRouter(prefix="/job-search", tags=["job-search"])


# Raw body so validation failures surface as 400 with the feedback error shape.
@router.post("/feedback", response_model=FeedbackResponse, response_model_exclude_none=True)
def post_feedback(payload: Any = Body(default=None), user_id: str = Depends(require_user), db: Session = Depends(get_db)):
    return record_feedback(db, user_id, payload)
