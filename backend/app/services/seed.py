from __future__ import annotations

from app.db.database import SessionLocal
from app.models.setting import Setting
from app.utils.time import utcnow


def default_score_config() -> dict:
    return {
        "weights": {
            "skills": 36,
            "experience": 20,
            "location": 12,
            "salary": 15,
            "preferences": 9,
            # only counted once the user has given feedback
            "behavioral": 8,
        },
        "threshold": 70,
        "borderline_margin": 10,
    }


def default_preferences(user_id: str) -> dict:
    return {
        "user_id": user_id,
        "is_active": True,
        "preferred_job_titles": [],
        "preferred_locations": [],
        "required_skills": [],
        "company_size_preferences": [],
        "remote_policy_preferences": [],
        "required_benefits": [],
        "avoid_companies": [],
        "avoid_keywords": [],
        "ai_keywords": [],
        "ai_recommended_boards": [],
        "implicit_preferences": {},
        "feedback_stats": {"total_likes": 0, "total_dislikes": 0, "total_hides": 0, "reasons": {}},
        "email_notification_frequency": "weekly",
        "consecutive_zero_match_days": 0,
    }


def seed_settings_if_empty() -> None:
    db = SessionLocal()
    try:
        keys = {s.key for s in db.query(Setting).all()}
        if "scoring" not in keys:
            db.add(Setting(key="scoring", value=default_score_config(), updated_at=utcnow()))
        db.commit()
    finally:
        db.close()
