from __future__ import annotations
import asyncio
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import DataError
from sqlalchemy.orm import sessionmaker

from app.core.errors import NotFoundError
from app.db.database import Base
from app.models.job_posting import JobPosting
from app.models.preferences import JobSearchPreferences
from app.models.profile import Profile
from app.models.setting import Setting
from app.schemas.job import DiscoveredJob
from app.schemas.match import MatchBreakdown, MatchResult
from app.services.posting_service import create_postings
from app.services.search_client import SearchResponse
from app.services.search_run_service import run_search_for_user
from app.services.seed import default_score_config


class FakeSearchClient:
    def __init__(self):
        self.calls = 0

    async def search(self, query: str) -> SearchResponse:
        self.calls += 1
        return SearchResponse(
            text=json.dumps(
                [
                    {
                        "title": "Python Engineer",
                        "company_name": "Acme",
                        "source_url": "https://acme.io/jobs/1",
                        "work_type": "Remote",
                        "experience_level": "Senior",
                        "required_skills": ["python"],
                    }
                ]
            ),
            prompt_tokens=2,
            completion_tokens=3,
        )


def _session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSession()
    db.add(
        Profile(
            id="u1",
            preferred_job_titles=["Python Engineer"],
            general_cv_analysis={"skills": ["Python"], "seniority_level": "senior"},
        )
    )
    db.commit()
    return db


def test_borderline_jobs_are_stored_with_flag_and_defaults_created():
    db = _session()
    cfg = default_score_config()
    cfg["threshold"] = 90
    db.add(Setting(key="scoring", value=cfg))
    db.commit()

    result = asyncio.run(run_search_for_user(db, "u1", FakeSearchClient()))

    assert result.discovered == 1
    assert result.new_matches == 0
    assert result.borderline_count == 1
    assert result.top_score == 88

    posting = db.query(JobPosting).one()
    assert posting.status == "new"
    assert posting.match_breakdown["borderline"] is True
    assert posting.match_score == 88
    assert posting.match_reasons

    prefs = db.query(JobSearchPreferences).filter(JobSearchPreferences.user_id == "u1").one()
    assert prefs.last_search_at is not None
    assert prefs.consecutive_zero_match_days == 1


def test_passing_job_resets_zero_match_counter():
    db = _session()
    db.add(JobSearchPreferences(user_id="u1", consecutive_zero_match_days=4))
    db.commit()

    result = asyncio.run(run_search_for_user(db, "u1", FakeSearchClient()))

    assert result.new_matches == 1
    db.expire_all()
    prefs = db.query(JobSearchPreferences).one()
    assert prefs.consecutive_zero_match_days == 0


def test_missing_profile_raises_not_found():
    db = _session()
    with pytest.raises(NotFoundError):
        asyncio.run(run_search_for_user(db, "nobody", FakeSearchClient()))


def test_rejected_row_is_skipped_and_later_rows_still_stored(monkeypatch):
    db = _session()
    match = MatchResult(
        total_score=80,
        breakdown=MatchBreakdown(skills=30, experience=20, location=12, salary=10, preferences=8),
        passes_threshold=True,
        is_borderline=False,
    )
    jobs = [
        DiscoveredJob(title=title, company_name="Acme", source_url="https://acme.io/jobs/1", content_hash=title.lower())
        for title in ("Rejected", "Stored")
    ]
    real_commit = db.commit
    commits = []

    def commit_rejecting_first():
        commits.append(1)
        if len(commits) == 1:
            raise DataError("INSERT INTO job_postings", {}, Exception("value too long for type character varying"))
        real_commit()

    monkeypatch.setattr(db, "commit", commit_rejecting_first)

    created = create_postings(db, "u1", [(job, match) for job in jobs])

    assert [p.title for p in created] == ["Stored"]
    assert [p.title for p in db.query(JobPosting).all()] == ["Stored"]
