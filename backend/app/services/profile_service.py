from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.schemas.profile import CandidateProfile


def get_profile(db: Session, user_id: str) -> CandidateProfile | None:
    row = db.query(Profile).filter(Profile.id == user_id).first()
    if row is None:
        return None
    return CandidateProfile.model_validate(row)
