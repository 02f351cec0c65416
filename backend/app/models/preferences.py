from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base
from app.utils.time import utcnow


class JobSearchPreferences(Base):
    __tablename__ = "job_search_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    preferred_job_titles: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    preferred_locations: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    experience_years: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    required_skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    company_size_preferences: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    remote_policy_preferences: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    required_benefits: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    salary_min_override: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    salary_currency_override: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    avoid_companies: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    avoid_keywords: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    ai_keywords: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    ai_recommended_boards: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    ai_market_insights: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_personalized_strategy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_last_analysis_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    implicit_preferences: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    feedback_stats: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    email_notification_frequency: Mapped[str] = mapped_column(String(16), default="weekly", nullable=False)
    last_email_sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_search_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    consecutive_zero_match_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
