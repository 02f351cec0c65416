from __future__ import annotations
import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_search_client
from app.core.config import settings
from app.db.database import Base, get_db
from app.main import app
from app.models.job_posting import JobPosting
from app.models.preferences import JobSearchPreferences
from app.models.profile import Profile
from app.services.search_client import SearchResponse
from app.services.seed import default_preferences
from app.utils.time import utcnow

USER_ID = "6f1c2a4e-8d3b-4f5a-9c7e-1b2d3e4f5a6b"
OTHER_USER_ID = "0a9b8c7d-6e5f-4a3b-8c2d-1e0f9a8b7c6d"


class FakeSearchClient:
    async def search(self, query: str) -> SearchResponse:
        jobs = [
            {
                "title": "Python Engineer",
                "company_name": "Acme",
                "source_url": "https://acme.io/jobs/1",
                "work_type": "remote",
                "experience_level": "senior",
                "required_skills": ["Python"],
            },
            {
                "title": "Sales Lead",
                "company_name": "Beta",
                "source_url": "https://beta.io/jobs/2",
                "location": "Tokyo",
                "experience_level": "entry",
                "required_skills": ["Negotiation"],
            },
        ]
        return SearchResponse(text=json.dumps(jobs), prompt_tokens=1, completion_tokens=2)


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    session = TestingSession()
    session.add(
        Profile(
            id=USER_ID,
            preferred_job_titles=["Python Engineer"],
            location_preferences={"city": "Berlin"},
            general_cv_analysis={"skills": ["Python"], "seniority_level": "senior"},
        )
    )
    session.add(JobSearchPreferences(**default_preferences(USER_ID)))
    session.commit()

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_client] = FakeSearchClient
    yield session
    app.dependency_overrides.clear()
    session.close()


def _token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=1)
    return jwt.encode({"sub": user_id, "exp": expire}, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _client(user_id: str = USER_ID) -> TestClient:
    client = TestClient(app)
    client.headers["Authorization"] = f"Bearer {_token(user_id)}"
    return client


def _posting(db, owner=USER_ID) -> JobPosting:
    posting = JobPosting(
        user_id=owner,
        title="Engineer",
        company_name="BadCorp",
        source_url="https://badcorp.com/1",
        content_hash=uuid.uuid4().hex,
        match_score=80,
    )
    db.add(posting)
    db.commit()
    db.refresh(posting)
    return posting


def test_health():
    assert TestClient(app).get("/health").json() == {"status": "ok"}


def test_requires_bearer_token(db):
    res = TestClient(app).get("/api/v1/job-search/matches")
    assert res.status_code == 401


def test_feedback_status_mapping(db):
    mine = _posting(db)
    theirs = _posting(db, owner=OTHER_USER_ID)
    client = _client()

    ok = client.post("/api/v1/job-search/feedback", json={"jobPostingId": mine.id, "feedback": "like"})
    assert ok.status_code == 200
    assert ok.json() == {"success": True}

    bad = client.post("/api/v1/job-search/feedback", json={"jobPostingId": mine.id, "feedback": "meh"})
    assert bad.status_code == 400
    assert bad.json()["success"] is False
    assert bad.json()["error"].startswith("Validation error")

    missing = client.post("/api/v1/job-search/feedback", json={"jobPostingId": str(uuid.uuid4()), "feedback": "like"})
    assert missing.status_code == 404

    forbidden = client.post("/api/v1/job-search/feedback", json={"jobPostingId": theirs.id, "feedback": "hide"})
    assert forbidden.status_code == 403
    db.refresh(theirs)
    assert theirs.status == "new"


def test_discover_persists_matches_and_rate_limits(db):
    client = _client()

    first = client.post("/api/v1/job-search/discover", json={"maxJobs": 10})
    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert body["discovered"] == 2
    assert body["newMatches"] == 1
    assert body["borderlineCount"] == 0
    # both queries return the same two jobs
    assert body["queriesExecuted"] == 2
    assert body["duplicatesSkipped"] == 2
    assert body["tokenUsage"]["totalTokens"] == 6
    assert db.query(JobPosting).filter(JobPosting.user_id == USER_ID).count() == 1

    second = client.post("/api/v1/job-search/discover", json={})
    assert second.status_code == 429

    forced = client.post("/api/v1/job-search/discover", json={"forceRefresh": True})
    assert forced.status_code == 200
    assert forced.json()["discovered"] == 1
    assert forced.json()["duplicatesSkipped"] == 3

    matches = client.get("/api/v1/job-search/matches").json()
    assert [m["title"] for m in matches] == ["Python Engineer"]
    assert matches[0]["status"] == "new"


def test_discover_without_profile_is_not_found(db):
    res = _client(str(uuid.uuid4())).post("/api/v1/job-search/discover", json={})
    assert res.status_code == 404


def test_score_endpoint_uses_camel_case(db):
    res = _client().post(
        "/api/v1/job-search/score",
        json={"title": "Python Engineer", "company_name": "Acme", "source_url": "https://acme.io/1", "work_type": "remote"},
    )
    assert res.status_code == 200
    body = res.json()
    assert set(body) == {"totalScore", "breakdown", "matchReasons", "passesThreshold", "isBorderline"}
    assert 0 <= body["totalScore"] <= 100


def test_matches_hide_open_discard_windows(db):
    visible = _posting(db)
    hidden = _posting(db)
    hidden.status = "dismissed"
    hidden.discarded_until = utcnow() + timedelta(days=5)
    db.commit()

    ids = [m["id"] for m in _client().get("/api/v1/job-search/matches").json()]
    assert ids == [visible.id]

    all_ids = {m["id"] for m in _client().get("/api/v1/job-search/matches?include_discarded=true").json()}
    assert all_ids == {visible.id, hidden.id}


def test_scoring_settings_round_trip(db):
    client = _client()
    current = client.get("/api/v1/settings/scoring").json()
    assert current["threshold"] == 70
    assert current["weights"]["skills"] == 36

    current["threshold"] = 65
    saved = client.put("/api/v1/settings/scoring", json=current)
    assert saved.status_code == 200
    assert client.get("/api/v1/settings/scoring").json()["threshold"] == 65

    invalid = client.put("/api/v1/settings/scoring", json={"threshold": 500})
    assert invalid.status_code == 400


def test_token_subject_must_be_a_user_id(db):
    client = TestClient(app)
    client.headers["Authorization"] = f"Bearer {_token('u1')}"
    assert client.get("/api/v1/job-search/matches").status_code == 401


def test_scoring_weights_above_factor_caps_are_rejected(db):
    client = _client()
    cfg = client.get("/api/v1/settings/scoring").json()
    cfg["weights"]["skills"] = 60

    res = client.put("/api/v1/settings/scoring", json=cfg)

    assert res.status_code == 400
    assert client.get("/api/v1/settings/scoring").json()["weights"]["skills"] == 36
