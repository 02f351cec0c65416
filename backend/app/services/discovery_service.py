from __future__ import annotations
import asyncio
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.discovery import DiscoveryResult, TokenUsage
from app.schemas.job import DiscoveredJob
from app.schemas.preferences import SearchPreferences
from app.schemas.profile import CandidateProfile
from app.services.candidate_parser import parse_job_candidates
from app.services.posting_service import find_existing_hashes
from app.services.query_builder import build_search_queries
from app.services.search_client import SearchClient, SearchResponse
from app.utils.hash import content_fingerprint

logger = logging.getLogger(__name__)

MAX_JOBS_LIMIT = 100


def _dedupe_batch(jobs: list[DiscoveredJob]) -> tuple[list[DiscoveredJob], int]:
    seen: set[str] = set()
    unique: list[DiscoveredJob] = []
    skipped = 0
    for job in jobs:
        key = job.content_hash or content_fingerprint(job.title, job.company_name)
        if key in seen:
            skipped += 1
            continue
        seen.add(key)
        unique.append(job)
    return unique, skipped


def _existing_hashes(db: Session, user_id: str, hashes: list[str]) -> set[str]:
    try:
        return find_existing_hashes(db, user_id, hashes)
    except Exception:  # noqa: BLE001
        db.rollback()
        logger.exception("existing-posting lookup failed for user=%s; treating batch as new", user_id)
        return set()


async def discover_jobs(
    db: Session,
    profile: CandidateProfile,
    prefs: SearchPreferences,
    client: SearchClient,
    max_jobs: int | None = None,
    force_refresh: bool = False,
) -> DiscoveryResult:
    """Run every composed query against the search collaborator and return unseen jobs.

    Queries run concurrently and fail independently: a failed query is logged
    and contributes neither jobs nor token usage. Only successful queries are
    counted in ``queries_executed``.
    """
    limit = settings.discovery_max_jobs if max_jobs is None else max_jobs
    limit = max(1, min(MAX_JOBS_LIMIT, limit))
    queries = build_search_queries(profile, prefs)
    logger.info("discovery for user=%s: %d queries (force_refresh=%s)", profile.id, len(queries), force_refresh)

    responses = await asyncio.gather(*(client.search(q) for q in queries), return_exceptions=True)

    usage = TokenUsage()
    executed = 0
    parsed: list[DiscoveredJob] = []
    for query, response in zip(queries, responses):
        if isinstance(response, BaseException):
            logger.warning("query failed (%s): %s", query[:80], response)
            continue
        if not isinstance(response, SearchResponse):
            logger.warning("query returned unexpected payload type %s", type(response).__name__)
            continue
        executed += 1
        usage.prompt_tokens += response.prompt_tokens
        usage.completion_tokens += response.completion_tokens
        try:
            jobs = parse_job_candidates(response.text)
        except Exception:  # noqa: BLE001
            logger.exception("parsing response for query (%s) failed", query[:80])
            continue
        logger.debug("query parsed %d jobs", len(jobs))
        parsed.extend(jobs)
    usage.total_tokens = usage.prompt_tokens + usage.completion_tokens

    unique, duplicates = _dedupe_batch(parsed)
    existing = _existing_hashes(db, profile.id, [j.content_hash for j in unique if j.content_hash])

    fresh: list[DiscoveredJob] = []
    for job in unique:
        if job.content_hash in existing:
            duplicates += 1
            continue
        fresh.append(job)

    logger.info(
        "discovery for user=%s done: %d jobs, %d duplicates, %d tokens",
        profile.id,
        min(len(fresh), limit),
        duplicates,
        usage.total_tokens,
    )
    return DiscoveryResult(
        jobs=fresh[:limit],
        token_usage=usage,
        queries_executed=executed,
        duplicates_skipped=duplicates,
    )
