from __future__ import annotations

from pydantic import BaseModel, Field


class MatchBreakdown(BaseModel):
    skills: float = Field(ge=0)
    experience: float = Field(ge=0)
    location: float = Field(ge=0)
    salary: float = Field(ge=0)
    preferences: float = Field(ge=0)
    behavioral: float | None = Field(default=None, ge=0)


class MatchResult(BaseModel):
    total_score: int = Field(ge=0, le=100, alias="totalScore")
    breakdown: MatchBreakdown
    match_reasons: list[str] = Field(default_factory=list, alias="matchReasons")
    passes_threshold: bool = Field(alias="passesThreshold")
    is_borderline: bool = Field(alias="isBorderline")

    class Config:
        populate_by_name = True
