from __future__ import annotations
import asyncio
import logging

from app.core.errors import JobSearchError
from app.core.logging import configure_logging
from app.db.database import SessionLocal
from app.db.init_db import init_db
from app.services.preferences_service import list_active_user_ids
from app.services.search_client import GeminiSearchClient
from app.services.search_run_service import run_search_for_user

logger = logging.getLogger("run_discovery")


async def run_all() -> dict:
    client = GeminiSearchClient()
    db = SessionLocal()
    summary = {"users": 0, "new_matches": 0, "failed_users": []}
    try:
        for user_id in list_active_user_ids(db):
            summary["users"] += 1
            try:
                result = await run_search_for_user(db, user_id, client)
            except JobSearchError as exc:
                logger.warning("search run skipped for user=%s: %s", user_id, exc.detail)
                summary["failed_users"].append(user_id)
                continue
            summary["new_matches"] += result.new_matches
    finally:
        db.close()
    return summary


if __name__ == "__main__":
    configure_logging()
    init_db()
    print(asyncio.run(run_all()))
