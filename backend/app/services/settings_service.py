from __future__ import annotations
import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.setting import Setting
from app.schemas.score import ScoreConfig
from app.services.seed import default_score_config
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def get_setting(db: Session, key: str) -> dict:
    row = db.query(Setting).filter(Setting.key == key).first()
    if row:
        return row.value
    if key == "scoring":
        return default_score_config()
    return {}


def upsert_setting(db: Session, key: str, value: dict) -> dict:
    row = db.query(Setting).filter(Setting.key == key).first()
    if row:
        row.value = value
        row.updated_at = utcnow()
    else:
        row = Setting(key=key, value=value, updated_at=utcnow())
        db.add(row)
    db.commit()
    db.refresh(row)
    return row.value


def get_score_config(db: Session) -> dict:
    """Stored scoring config merged over defaults, so partial rows still score.

    A stored row whose weights exceed the per-factor caps is ignored.
    """
    cfg = default_score_config()
    stored = get_setting(db, "scoring")
    cfg["weights"] = {**cfg["weights"], **(stored.get("weights") or {})}
    for key in ("threshold", "borderline_margin"):
        if key in stored:
            cfg[key] = stored[key]
    try:
        return ScoreConfig.model_validate(cfg).model_dump()
    except ValidationError as exc:
        logger.warning("stored scoring config is invalid, using defaults: %s", exc)
        return default_score_config()
