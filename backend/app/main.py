from __future__ import annotations
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import discovery, feedback, health, matches, settings as settings_api
from app.core.config import settings
from app.core.error_handlers import attach_error_handlers
from app.core.logging import configure_logging
from app.db.init_db import init_db

configure_logging()

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
attach_error_handlers(app)


@app.on_event("startup")
def on_startup():
    init_db()


app.include_router(health.router)
app.include_router(discovery.router, prefix=settings.api_prefix)
app.include_router(feedback.router, prefix=settings.api_prefix)
app.include_router(matches.router, prefix=settings.api_prefix)
app.include_router(settings_api.router, prefix=settings.api_prefix)
