from __future__ import annotations
import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError, RateLimitedError
from app.schemas.discovery import SearchRunResponse
from app.schemas.job import DiscoveredJob
from app.schemas.match import MatchResult
from app.schemas.preferences import SearchPreferences
from app.services.discovery_service import discover_jobs
from app.services.posting_service import create_postings
from app.services.preferences_service import ensure_preferences, update_preferences
from app.services.profile_service import get_profile
from app.services.scoring import MatchScorer
from app.services.search_client import SearchClient
from app.services.settings_service import get_score_config
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def _check_rate_limit(prefs: SearchPreferences) -> None:
    if prefs.last_search_at is None:
        return
    next_allowed = prefs.last_search_at + timedelta(minutes=settings.search_rate_limit_minutes)
    if utcnow() < next_allowed:
        raise RateLimitedError(
            f"Search already ran recently; try again after {next_allowed.isoformat(timespec='seconds')} UTC"
        )


def _record_run(db: Session, prefs: SearchPreferences, matched: int) -> None:
    zero_days = 0 if matched else prefs.consecutive_zero_match_days + 1
    try:
        update_preferences(db, prefs.user_id, {"last_search_at": utcnow(), "consecutive_zero_match_days": zero_days})
    except Exception:  # noqa: BLE001
        db.rollback()
        logger.exception("failed to record search run for user=%s", prefs.user_id)


async def run_search_for_user(
    db: Session,
    user_id: str,
    client: SearchClient,
    max_jobs: int | None = None,
    force_refresh: bool = False,
) -> SearchRunResponse:
    profile = get_profile(db, user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    prefs = ensure_preferences(db, user_id)
    if not force_refresh:
        _check_rate_limit(prefs)

    discovery = await discover_jobs(db, profile, prefs, client, max_jobs=max_jobs, force_refresh=force_refresh)

    scorer = MatchScorer(get_score_config(db))
    keep: list[tuple[DiscoveredJob, MatchResult]] = []
    top_score = 0
    for job in discovery.jobs:
        result = scorer.score(job, profile, prefs)
        top_score = max(top_score, result.total_score)
        if result.passes_threshold or result.is_borderline:
            keep.append((job, result))

    created = create_postings(db, user_id, keep)
    borderline = sum(1 for p in created if p.match_breakdown.get("borderline"))
    new_matches = len(created) - borderline
    _record_run(db, prefs, new_matches)

    logger.info(
        "search run user=%s discovered=%d stored=%d borderline=%d top=%d",
        user_id,
        len(discovery.jobs),
        len(created),
        borderline,
        top_score,
    )
    return SearchRunResponse(
        success=True,
        discovered=len(discovery.jobs),
        new_matches=new_matches,
        borderline_count=borderline,
        top_score=top_score,
        duplicates_skipped=discovery.duplicates_skipped,
        queries_executed=discovery.queries_executed,
        token_usage=discovery.token_usage,
    )
