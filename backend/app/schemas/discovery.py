from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.job import DiscoveredJob


class DiscoveryRequest(BaseModel):
    max_jobs: int | None = Field(default=None, ge=1, le=100, alias="maxJobs")
    force_refresh: bool = Field(default=False, alias="forceRefresh")

    class Config:
        populate_by_name = True


class TokenUsage(BaseModel):
    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")

    class Config:
        populate_by_name = True


class DiscoveryResult(BaseModel):
    jobs: list[DiscoveredJob] = Field(default_factory=list)
    token_usage: TokenUsage = Field(default_factory=TokenUsage, alias="tokenUsage")
    queries_executed: int = Field(default=0, alias="queriesExecuted")
    duplicates_skipped: int = Field(default=0, alias="duplicatesSkipped")

    class Config:
        populate_by_name = True


class SearchRunResponse(BaseModel):
    success: bool
    discovered: int
    new_matches: int = Field(alias="newMatches")
    borderline_count: int = Field(alias="borderlineCount")
    top_score: int = Field(alias="topScore")
    duplicates_skipped: int = Field(alias="duplicatesSkipped")
    queries_executed: int = Field(alias="queriesExecuted")
    token_usage: TokenUsage = Field(alias="tokenUsage")

    class Config:
        populate_by_name = True
