from __future__ import annotations
import hashlib


def _normalize(value: str | None) -> str:
    return " ".join((value or "").split()).lower()


def content_fingerprint(title: str | None, company: str | None) -> str:
    """32-char hex digest of normalized title + company, used for dedup."""
    raw = f"{_normalize(title)}::{_normalize(company)}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]
