from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class Profile(Base):
    """Read-only here: rows are owned by the profile-editing flows."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    preferred_job_titles: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    preferred_industries: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    minimum_salary_expectation: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    salary_currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    location_preferences: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    company_size_preferences: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    career_goals: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    general_cv_analysis: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
