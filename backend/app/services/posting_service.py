from __future__ import annotations
import logging
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.job_posting import JobPosting
from app.schemas.job import DiscoveredJob, JobPostingStatus
from app.schemas.match import MatchResult
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def find_existing_hashes(
    db: Session,
    user_id: str,
    hashes: list[str],
    window_days: int | None = None,
    now: datetime | None = None,
) -> set[str]:
    """Hashes this user has already seen.

    A dismissed posting stops blocking rediscovery once its discard window
    ended before the start of the dedup window.
    """
    if not hashes:
        return set()
    window_start = (now or utcnow()) - timedelta(days=window_days or settings.dedup_window_days)
    rows = (
        db.query(JobPosting.content_hash)
        .filter(
            JobPosting.user_id == user_id,
            JobPosting.content_hash.in_(set(hashes)),
            or_(
                JobPosting.status != JobPostingStatus.DISMISSED.value,
                JobPosting.discarded_until > window_start,
            ),
        )
        .all()
    )
    return {row[0] for row in rows}


def get_posting(db: Session, posting_id: str) -> JobPosting | None:
    return db.query(JobPosting).filter(JobPosting.id == posting_id).first()


def apply_feedback_update(db: Session, posting_id: str, user_id: str, values: dict) -> int:
    """Single conditional UPDATE keyed by id and owner. Returns affected rows."""
    updated = (
        db.query(JobPosting)
        .filter(JobPosting.id == posting_id, JobPosting.user_id == user_id)
        .update({**values, "updated_at": utcnow()}, synchronize_session=False)
    )
    db.commit()
    return updated


def _posting_from(user_id: str, job: DiscoveredJob, match: MatchResult) -> JobPosting:
    breakdown = match.breakdown.model_dump(exclude_none=True)
    if match.is_borderline:
        breakdown["borderline"] = True
    return JobPosting(
        user_id=user_id,
        title=job.title,
        company_name=job.company_name,
        description=job.description,
        location=job.location,
        work_type=job.work_type.value if job.work_type else None,
        experience_level=job.experience_level.value if job.experience_level else None,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        salary_currency=job.salary_currency or "USD",
        required_skills=list(job.required_skills),
        benefits=list(job.benefits),
        company_size=job.company_size.value if job.company_size else None,
        source_url=job.source_url,
        source_platform=job.source_platform.value if job.source_platform else None,
        posted_date=job.posted_date,
        content_hash=job.content_hash,
        match_score=match.total_score,
        match_breakdown=breakdown,
        match_reasons=list(match.match_reasons),
        status=JobPostingStatus.NEW.value,
    )


def create_postings(db: Session, user_id: str, scored: list[tuple[DiscoveredJob, MatchResult]]) -> list[JobPosting]:
    """Insert scored jobs one by one; unique-constraint duplicates and rejected rows are skipped."""
    created: list[JobPosting] = []
    for job, match in scored:
        record = _posting_from(user_id, job, match)
        db.add(record)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            continue
        except SQLAlchemyError:
            db.rollback()
            logger.exception("storing posting %r for user=%s failed; skipping", job.title, user_id)
            continue
        db.refresh(record)
        created.append(record)
    return created


def list_postings(
    db: Session,
    user_id: str,
    status: JobPostingStatus | None = None,
    min_score: float | None = None,
    include_discarded: bool = False,
    limit: int = 50,
    offset: int = 0,
    now: datetime | None = None,
) -> list[JobPosting]:
    query = db.query(JobPosting).filter(JobPosting.user_id == user_id)
    if status is not None:
        query = query.filter(JobPosting.status == status.value)
    if min_score is not None:
        query = query.filter(JobPosting.match_score >= min_score)
    if not include_discarded:
        query = query.filter(or_(JobPosting.discarded_until.is_(None), JobPosting.discarded_until <= (now or utcnow())))
    return (
        query.order_by(JobPosting.match_score.desc(), JobPosting.discovered_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
