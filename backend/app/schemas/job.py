from __future__ import annotations
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class WorkType(str, Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"
    FLEXIBLE = "flexible"


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class CompanySize(str, Enum):
    XS = "1-10"
    S = "11-50"
    M = "51-200"
    L = "201-500"
    XL = "501-1000"
    XXL = "1000+"


class SourcePlatform(str, Enum):
    LINKEDIN = "LinkedIn"
    INDEED = "Indeed"
    GLASSDOOR = "Glassdoor"
    WELLFOUND = "Wellfound"
    COMPANY_WEBSITE = "Company Website"
    OTHER = "Other"


class JobPostingStatus(str, Enum):
    NEW = "new"
    VIEWED = "viewed"
    APPLIED = "applied"
    DISMISSED = "dismissed"
    LIKED = "liked"


class DiscoveredJob(BaseModel):
    """A parsed, validated job candidate that has not been stored yet."""

    title: str = Field(min_length=1)
    company_name: str = Field(min_length=1)
    source_url: str = Field(min_length=1)
    description: str | None = None
    location: str | None = None
    work_type: WorkType | None = None
    experience_level: ExperienceLevel | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    salary_currency: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    company_size: CompanySize | None = None
    source_platform: SourcePlatform | None = None
    posted_date: date | None = None
    content_hash: str | None = None


class JobPostingOut(DiscoveredJob):
    id: str
    user_id: str
    discovered_at: datetime
    match_score: float
    match_breakdown: dict
    match_reasons: list[str]
    status: JobPostingStatus
    user_feedback: str | None
    feedback_reason: str | None
    discarded_until: datetime | None
    job_application_id: str | None

    class Config:
        from_attributes = True
