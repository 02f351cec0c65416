from __future__ import annotations
from app.schemas.discovery import DiscoveryRequest, DiscoveryResult, SearchRunResponse, TokenUsage
from app.schemas.feedback import FeedbackReason, FeedbackRequest, FeedbackResponse, UserFeedback
from app.schemas.job import (
    CompanySize,
    DiscoveredJob,
    ExperienceLevel,
    JobPostingOut,
    JobPostingStatus,
    SourcePlatform,
    WorkType,
)
from app.schemas.match import MatchBreakdown, MatchResult
from app.schemas.preferences import FeedbackStats, SearchPreferences, SkillRequirement
from app.schemas.profile import CandidateProfile, GeneralCvAnalysis, LocationPreferences
from app.schemas.score import MatchWeights, ScoreConfig

__all__ = [
    "CandidateProfile",
    "CompanySize",
    "DiscoveredJob",
    "DiscoveryRequest",
    "DiscoveryResult",
    "ExperienceLevel",
    "FeedbackReason",
    "FeedbackRequest",
    "FeedbackResponse",
    "FeedbackStats",
    "GeneralCvAnalysis",
    "JobPostingOut",
    "JobPostingStatus",
    "LocationPreferences",
    "MatchBreakdown",
    "MatchResult",
    "MatchWeights",
    "ScoreConfig",
    "SearchPreferences",
    "SearchRunResponse",
    "SkillRequirement",
    "SourcePlatform",
    "TokenUsage",
    "UserFeedback",
    "WorkType",
]
