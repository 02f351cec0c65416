from __future__ import annotations
from pydantic import BaseModel, Field


class MatchWeights(BaseModel):
    skills: float = Field(ge=0, le=36)
    experience: float = Field(ge=0, le=20)
    location: float = Field(ge=0, le=12)
    salary: float = Field(ge=0, le=15)
    preferences: float = Field(ge=0, le=9)
    behavioral: float = Field(ge=0, le=8)


class ScoreConfig(BaseModel):
    weights: MatchWeights
    threshold: int = Field(ge=0, le=100)
    borderline_margin: int = Field(ge=0, le=100)
