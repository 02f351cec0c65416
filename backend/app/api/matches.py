from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.core.errors import NotFoundError
from app.db.database import get_db
from app.schemas.job import JobPostingOut, JobPostingStatus
from app.services.posting_service import get_posting, list_postings

router = APIRouter(prefix="/job-search", tags=["job-search"])


@router.get("/matches", response_model=list[JobPostingOut])
def list_matches(
    status: JobPostingStatus | None = None,
    min_score: float | None = Query(default=None, ge=0, le=100),
    include_discarded: bool = False,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(require_user),
    db: Session = Depends(get_db),
):
    return list_postings(
        db,
        user_id,
        status=status,
        min_score=min_score,
        include_discarded=include_discarded,
        limit=limit,
        offset=offset,
    )


@router.get("/matches/{posting_id}", response_model=JobPostingOut)
def get_match(posting_id: str, user_id: str = Depends(require_user), db: Session = Depends(get_db)):
    posting = get_posting(db, posting_id)
    # other users' postings are reported as missing
    if posting is None or posting.user_id != user_id:
        raise NotFoundError("Job posting not found")
    return posting
