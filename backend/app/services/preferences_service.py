from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.preferences import JobSearchPreferences
from app.schemas.preferences import SearchPreferences
from app.services.seed import default_preferences
from app.utils.time import utcnow


def get_preferences_row(db: Session, user_id: str) -> JobSearchPreferences | None:
    return db.query(JobSearchPreferences).filter(JobSearchPreferences.user_id == user_id).first()


def get_preferences(db: Session, user_id: str) -> SearchPreferences | None:
    row = get_preferences_row(db, user_id)
    if row is None:
        return None
    return SearchPreferences.model_validate(row)


def update_preferences(db: Session, user_id: str, values: dict) -> bool:
    """Assign columns on the user's row. Returns False when there is no row."""
    row = get_preferences_row(db, user_id)
    if row is None:
        return False
    # JSON columns only persist on reassignment, so values must be fresh objects
    for key, value in values.items():
        setattr(row, key, value)
    row.updated_at = utcnow()
    db.commit()
    return True


def ensure_preferences(db: Session, user_id: str) -> SearchPreferences:
    row = get_preferences_row(db, user_id)
    if row is None:
        row = JobSearchPreferences(**default_preferences(user_id))
        db.add(row)
        db.commit()
        db.refresh(row)
    return SearchPreferences.model_validate(row)


def list_active_user_ids(db: Session) -> list[str]:
    rows = (
        db.query(JobSearchPreferences.user_id)
        .filter(JobSearchPreferences.is_active.is_(True))
        .order_by(JobSearchPreferences.user_id)
        .all()
    )
    return [row[0] for row in rows]
