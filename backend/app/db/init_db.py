from __future__ import annotations
from app.db.database import Base, engine
from app.models import job_posting, preferences, profile, setting  # noqa: F401
from app.services.seed import seed_settings_if_empty


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    seed_settings_if_empty()
