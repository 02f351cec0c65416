from __future__ import annotations
import uuid

from jose import JWTError, jwt

from app.core.config import settings


def _as_user_id(subject: object) -> str | None:
    if not isinstance(subject, str):
        return None
    try:
        return str(uuid.UUID(subject))
    except ValueError:
        return None


def user_id_from_token(token: str) -> str | None:
    """User id carried in the ``sub`` claim of a token from the shared auth system.

    The audience is only checked when ``jwt_audience`` is configured.
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError:
        return None
    return _as_user_id(claims.get("sub"))
