"""Turn free-form generative search output into validated job candidates.

The collaborator is asked for a JSON array but routinely wraps it in prose,
markdown fences or a ``{"jobs": [...]}`` object, and sometimes emits trailing
commas. Extraction is an ordered chain of small strategies; each returns the
decoded JSON value or ``None`` and the first one that yields a job list wins.
Per-candidate validation then drops bad rows individually. Nothing in this
module raises on bad input.
"""

from __future__ import annotations

import bisect
import json
import logging
import math
import re
from datetime import date, datetime
from typing import Any, Callable
from urllib.parse import urlparse

from pydantic import ValidationError

from app.schemas.job import CompanySize, DiscoveredJob, ExperienceLevel, SourcePlatform, WorkType
from app.utils.hash import content_fingerprint

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 500
# Column widths of job_postings.
TITLE_LIMIT = 512
COMPANY_LIMIT = 256
LOCATION_LIMIT = 256
URL_LIMIT = 1024
# Decode attempts on bracketed spans per response.
MAX_SPAN_ATTEMPTS = 25

_FENCE_RE = re.compile(r"```[\w+-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_WORK_TYPE_RULES: tuple[tuple[WorkType, re.Pattern], ...] = (
    (WorkType.HYBRID, re.compile(r"\bhybrid\b")),
    (WorkType.REMOTE, re.compile(r"\bremote\b|work(ing)? from home|\bwfh\b|telecommut|\banywhere\b|\bdistributed\b")),
    (WorkType.ONSITE, re.compile(r"\bon[\s-]?site\b|\bin[\s-]office\b|\boffice\b|\bin[\s-]person\b")),
    (WorkType.FLEXIBLE, re.compile(r"\bflexib")),
)

_EXPERIENCE_RULES: tuple[tuple[ExperienceLevel, re.Pattern], ...] = (
    (ExperienceLevel.EXECUTIVE, re.compile(r"\bexecutive\b|\bdirector\b|\bvp\b|vice president|\bchief\b|\bhead of\b|\bc-level\b")),
    (ExperienceLevel.SENIOR, re.compile(r"\bsenior\b|\bsr\.?\b|\blead\b|\bstaff\b|\bprincipal\b")),
    (ExperienceLevel.MID, re.compile(r"\bmid\b|\bmid-level\b|\bintermediate\b|\bexperienced\b")),
    (ExperienceLevel.ENTRY, re.compile(r"\bentry\b|\bjunior\b|\bjr\.?\b|\bgraduate\b|\bintern(ship)?\b|\btrainee\b")),
)

_PLATFORM_HOSTS: tuple[tuple[str, SourcePlatform], ...] = (
    ("linkedin.com", SourcePlatform.LINKEDIN),
    ("indeed.", SourcePlatform.INDEED),
    ("glassdoor.", SourcePlatform.GLASSDOOR),
    ("wellfound.com", SourcePlatform.WELLFOUND),
    ("angel.co", SourcePlatform.WELLFOUND),
    ("greenhouse.io", SourcePlatform.COMPANY_WEBSITE),
    ("lever.co", SourcePlatform.COMPANY_WEBSITE),
    ("workable.com", SourcePlatform.COMPANY_WEBSITE),
    ("ashbyhq.com", SourcePlatform.COMPANY_WEBSITE),
    ("myworkdayjobs.com", SourcePlatform.COMPANY_WEBSITE),
    ("smartrecruiters.com", SourcePlatform.COMPANY_WEBSITE),
)

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y", "%d %b %Y", "%m/%d/%Y")


# ---------------------------------------------------------------------------
# Extraction strategies
# ---------------------------------------------------------------------------


def _loads(text: str) -> Any | None:
    text = text.strip()
    if not text:
        return None
    for candidate in (text, _TRAILING_COMMA_RE.sub(r"\1", text)):
        try:
            return json.loads(candidate)
        except (ValueError, RecursionError):
            continue
    return None


def parse_direct(text: str) -> Any | None:
    return _loads(text)


def parse_fenced_block(text: str) -> Any | None:
    match = _FENCE_RE.search(text)
    if not match:
        return None
    return _loads(match.group(1))


def _balanced_spans(text: str) -> list[tuple[int, int]]:
    """(start, end) of every balanced bracket span, ordered by start, in one pass.

    Quotes open strings only inside brackets. A mismatched closer abandons
    every span still open.
    """
    closing = {"[": "]", "{": "}"}
    spans: list[tuple[int, int]] = []
    stack: list[tuple[int, str]] = []
    in_string = False
    escaped = False
    for idx, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch in closing:
            stack.append((idx, closing[ch]))
        elif ch in "]}":
            if not stack:
                continue
            start, expected = stack.pop()
            if ch != expected:
                stack.clear()
                continue
            spans.append((start, idx))
        elif ch == '"' and stack:
            in_string = True
    spans.sort()
    return spans


def _could_hold_jobs(value: Any) -> bool:
    if isinstance(value, dict):
        return True
    return isinstance(value, list) and any(isinstance(item, dict) for item in value)


def parse_balanced_span(text: str) -> Any | None:
    """Decode the first bracketed span that could hold jobs, skipping prose like "[2]"."""
    objects = [idx for idx, ch in enumerate(text) if ch == "{"]
    attempts = 0
    for start, end in _balanced_spans(text):
        pos = bisect.bisect_left(objects, start)
        if pos == len(objects) or objects[pos] > end:
            continue
        if attempts >= MAX_SPAN_ATTEMPTS:
            logger.debug("giving up on bracketed spans after %d attempts", attempts)
            return None
        attempts += 1
        value = _loads(text[start : end + 1])
        if _could_hold_jobs(value):
            return value
    return None


def unwrap_jobs(value: Any) -> list | None:
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and isinstance(value.get("jobs"), list):
        return value["jobs"]
    return None


EXTRACTORS: tuple[Callable[[str], Any | None], ...] = (parse_direct, parse_fenced_block, parse_balanced_span)


def extract_job_items(raw: Any) -> list:
    if not isinstance(raw, str) or not raw.strip():
        return []
    for extractor in EXTRACTORS:
        items = unwrap_jobs(extractor(raw))
        if items is not None:
            return items
    return []


# ---------------------------------------------------------------------------
# Field normalization
# ---------------------------------------------------------------------------


def normalize_work_type(value: Any) -> WorkType | None:
    if isinstance(value, WorkType):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    try:
        return WorkType(text)
    except ValueError:
        pass
    for work_type, pattern in _WORK_TYPE_RULES:
        if pattern.search(text):
            return work_type
    return None


def normalize_experience_level(value: Any) -> ExperienceLevel | None:
    if isinstance(value, ExperienceLevel):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    try:
        return ExperienceLevel(text)
    except ValueError:
        pass
    for level, pattern in _EXPERIENCE_RULES:
        if pattern.search(text):
            return level
    return None


def normalize_posted_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def _salary(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "").lstrip("$€£")
    if not isinstance(value, (str, int, float)):
        return None
    try:
        amount = float(value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def _currency(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    code = value.strip().upper()
    return code if len(code) == 3 and code.isalpha() else None


def _company_size(value: Any) -> CompanySize | None:
    if not isinstance(value, str):
        return None
    try:
        return CompanySize(value.strip())
    except ValueError:
        return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _text(value: Any, limit: int | None = None) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip()[:limit].rstrip() or None


def _valid_url(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    url = value.strip()
    if len(url) > URL_LIMIT:
        return None
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


def detect_source_platform(provided: Any, source_url: str) -> SourcePlatform | None:
    if isinstance(provided, str) and provided.strip():
        wanted = provided.strip().lower()
        for platform in SourcePlatform:
            if platform.value.lower() == wanted:
                return platform
        return SourcePlatform.OTHER
    host = (urlparse(source_url).hostname or "").lower()
    for needle, platform in _PLATFORM_HOSTS:
        if needle in host:
            return platform
    return None


def to_discovered_job(item: Any) -> DiscoveredJob | None:
    if not isinstance(item, dict):
        return None
    title = _text(item.get("title"), TITLE_LIMIT)
    company_name = _text(item.get("company_name"), COMPANY_LIMIT)
    source_url = _valid_url(item.get("source_url"))
    if not title or not company_name or not source_url:
        return None

    description = item.get("description")
    skills = item.get("required_skills", item.get("skills"))
    try:
        return DiscoveredJob(
            title=title,
            company_name=company_name,
            source_url=source_url,
            description=description[:DESCRIPTION_LIMIT] if isinstance(description, str) and description else None,
            location=_text(item.get("location"), LOCATION_LIMIT),
            work_type=normalize_work_type(item.get("work_type")),
            experience_level=normalize_experience_level(item.get("experience_level")),
            salary_min=_salary(item.get("salary_min")),
            salary_max=_salary(item.get("salary_max")),
            salary_currency=_currency(item.get("salary_currency") or item.get("currency")),
            required_skills=_string_list(skills),
            benefits=_string_list(item.get("benefits")),
            company_size=_company_size(item.get("company_size")),
            source_platform=detect_source_platform(item.get("source_platform"), source_url),
            posted_date=normalize_posted_date(item.get("posted_date")),
            content_hash=content_fingerprint(title, company_name),
        )
    except ValidationError as exc:
        logger.debug("dropping candidate %r: %s", title, exc)
        return None


def parse_job_candidates(raw: Any) -> list[DiscoveredJob]:
    """Parse raw collaborator text into jobs, preserving input order."""
    jobs: list[DiscoveredJob] = []
    items = extract_job_items(raw)
    for item in items:
        job = to_discovered_job(item)
        if job is not None:
            jobs.append(job)
    if len(jobs) < len(items):
        logger.info("parsed %d of %d job candidates", len(jobs), len(items))
    return jobs
