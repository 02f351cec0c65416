from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Float, Index, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base
from app.utils.time import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class JobPosting(Base):
    __tablename__ = "job_postings"
    __table_args__ = (
        UniqueConstraint("user_id", "content_hash", name="uq_job_postings_user_hash"),
        Index("ix_job_postings_user_status", "user_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    company_name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    work_type: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    experience_level: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    salary_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    salary_max: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    salary_currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    required_skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    benefits: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    company_size: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    source_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    source_platform: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    posted_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    discovered_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    content_hash: Mapped[str] = mapped_column(String(32), nullable=False)

    match_score: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    match_breakdown: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    match_reasons: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    status: Mapped[str] = mapped_column(String(16), default="new", nullable=False)
    user_feedback: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    feedback_reason: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    discarded_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    job_application_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
