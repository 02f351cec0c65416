from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_search_client, require_user
from app.core.errors import NotFoundError
from app.db.database import get_db
from app.schemas.discovery import DiscoveryRequest, SearchRunResponse
from app.schemas.job import DiscoveredJob
from app.schemas.match import MatchResult
from app.services.preferences_service import ensure_preferences
from app.services.profile_service import get_profile
from app.services.scoring import MatchScorer
from app.services.search_client import SearchClient
from app.services.search_run_service import run_search_for_user
from app.services.settings_service import get_score_config

router = APIRouter(prefix="/job-search", tags=["job-search"])


@router.post("/discover", response_model=SearchRunResponse, response_model_by_alias=True)
async def discover(
    body: DiscoveryRequest | None = None,
    user_id: str = Depends(require_user),
    client: SearchClient = Depends(get_search_client),
    db: Session = Depends(get_db),
):
    body = body or DiscoveryRequest()
    return await run_search_for_user(db, user_id, client, max_jobs=body.max_jobs, force_refresh=body.force_refresh)


@router.post("/score", response_model=MatchResult, response_model_by_alias=True)
def score_job(job: DiscoveredJob, user_id: str = Depends(require_user), db: Session = Depends(get_db)):
    profile = get_profile(db, user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    prefs = ensure_preferences(db, user_id)
    return MatchScorer(get_score_config(db)).score(job, profile, prefs)
