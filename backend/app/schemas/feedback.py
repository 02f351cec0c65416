from __future__ import annotations
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class UserFeedback(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"
    HIDE = "hide"


class FeedbackReason(str, Enum):
    SALARY_TOO_LOW = "Salary too low"
    WRONG_LOCATION = "Wrong location"
    NOT_INTERESTED_IN_COMPANY = "Not interested in company"
    SKILLS_MISMATCH = "Skills mismatch"
    OTHER = "Other"


class FeedbackRequest(BaseModel):
    job_posting_id: UUID = Field(alias="jobPostingId")
    feedback: UserFeedback
    reason: FeedbackReason | None = None

    class Config:
        populate_by_name = True


class FeedbackResponse(BaseModel):
    success: bool
    error: str | None = None
