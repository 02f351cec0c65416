"""Error taxonomy shared by services and the HTTP layer.

Services raise these; `app.core.error_handlers` turns them into JSON responses.
Upstream failures never leave the discovery orchestrator, and advisory
persistence failures never leave the feedback learner.
"""

from __future__ import annotations


class JobSearchError(Exception):
    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InputValidationError(JobSearchError):
    status_code = 400


class AuthorizationError(JobSearchError):
    status_code = 403


class NotFoundError(JobSearchError):
    status_code = 404


class RateLimitedError(JobSearchError):
    status_code = 429


class PersistenceError(JobSearchError):
    status_code = 500


class UpstreamError(JobSearchError):
    status_code = 502
