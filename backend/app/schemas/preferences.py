from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.job import CompanySize, WorkType


class SkillProficiency(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class SkillRequirement(BaseModel):
    skill: str = Field(min_length=1)
    proficiency: SkillProficiency = SkillProficiency.INTERMEDIATE


class FeedbackStats(BaseModel):
    total_likes: int = 0
    total_dislikes: int = 0
    total_hides: int = 0
    reasons: dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.total_likes + self.total_dislikes + self.total_hides


class SearchPreferences(BaseModel):
    user_id: str
    is_active: bool = True

    preferred_job_titles: list[str] = Field(default_factory=list)
    preferred_locations: list[str] = Field(default_factory=list)
    experience_years: str | None = None
    required_skills: list[SkillRequirement] = Field(default_factory=list)
    company_size_preferences: list[CompanySize] = Field(default_factory=list)
    remote_policy_preferences: list[WorkType] = Field(default_factory=list)
    required_benefits: list[str] = Field(default_factory=list)
    salary_min_override: float | None = None
    salary_currency_override: str | None = None
    avoid_companies: list[str] = Field(default_factory=list)
    avoid_keywords: list[str] = Field(default_factory=list)

    ai_keywords: list[str] = Field(default_factory=list)
    ai_recommended_boards: list[Any] = Field(default_factory=list)
    ai_market_insights: str | None = None
    ai_personalized_strategy: str | None = None
    ai_last_analysis_at: datetime | None = None

    implicit_preferences: dict[str, Any] = Field(default_factory=dict)
    feedback_stats: FeedbackStats = Field(default_factory=FeedbackStats)

    email_notification_frequency: str = "weekly"
    last_search_at: datetime | None = None
    consecutive_zero_match_days: int = 0

    class Config:
        from_attributes = True
