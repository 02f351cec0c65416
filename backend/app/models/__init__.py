from __future__ import annotations
from app.models.job_posting import JobPosting
from app.models.preferences import JobSearchPreferences
from app.models.profile import Profile
from app.models.setting import Setting

__all__ = ["JobPosting", "JobSearchPreferences", "Profile", "Setting"]
