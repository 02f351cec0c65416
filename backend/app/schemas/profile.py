from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.job import CompanySize, WorkType


class GeneralCvAnalysis(BaseModel):
    skills: list[str] = Field(default_factory=list)
    experience_years: float | None = None
    industries: list[str] = Field(default_factory=list)
    seniority_level: str | None = None


class LocationPreferences(BaseModel):
    city: str | None = None
    country: str | None = None
    remote_policy: WorkType | None = None
    willing_to_relocate: bool = False


class CandidateProfile(BaseModel):
    id: str
    full_name: str | None = None
    preferred_job_titles: list[str] = Field(default_factory=list)
    preferred_industries: list[str] = Field(default_factory=list)
    minimum_salary_expectation: float | None = None
    salary_currency: str = "USD"
    location_preferences: LocationPreferences = Field(default_factory=LocationPreferences)
    company_size_preferences: list[CompanySize] = Field(default_factory=list)
    career_goals: str | None = None
    general_cv_analysis: GeneralCvAnalysis | None = None

    class Config:
        from_attributes = True
