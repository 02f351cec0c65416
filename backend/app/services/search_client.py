from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from app.core.config import settings
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a job search assistant that finds real, currently open job positions on the web.
Use web search to find postings matching the query and return them as a JSON array.
Each element must have this shape:
{
  "title": "exact job title",
  "company_name": "company name",
  "description": "short description of the role (max 500 characters)",
  "location": "city, country or Remote",
  "work_type": "remote" | "hybrid" | "onsite" | "flexible",
  "experience_level": "entry" | "mid" | "senior" | "executive",
  "salary_min": number or null,
  "salary_max": number or null,
  "salary_currency": "USD",
  "required_skills": ["skill1", "skill2"],
  "benefits": ["benefit1", "benefit2"],
  "company_size": "1-10" | "11-50" | "51-200" | "201-500" | "501-1000" | "1000+",
  "source_url": "URL of the job posting",
  "source_platform": "LinkedIn" | "Indeed" | "Glassdoor" | "Wellfound" | "Company Website" | "Other",
  "posted_date": "YYYY-MM-DD"
}
Only include positions with a working source URL. Return only the JSON array."""


@dataclass
class SearchResponse:
    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0


class SearchClient(Protocol):
    async def search(self, query: str) -> SearchResponse: ...


def _is_retriable(status: int) -> bool:
    return status >= 500 or status in {408, 429}


class GeminiSearchClient:
    """Grounded web search through the Gemini generateContent REST endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        backoff_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.gemini_timeout_seconds
        self.max_attempts = max(1, max_attempts or settings.gemini_max_retries)
        self.backoff_seconds = backoff_seconds
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, query: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": f"Search for open job positions: {query}"}]}],
            "tools": [{"google_search": {}}],
            "generationConfig": {"temperature": 0.2},
        }

    async def _post_with_retries(self, payload: dict) -> dict:
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        backoff = self.backoff_seconds
        for attempt in range(1, self.max_attempts + 1):
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.post(self.url, headers=headers, json=payload)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if not _is_retriable(status):
                    raise UpstreamError(f"search request rejected with status {status}") from exc
                if attempt == self.max_attempts:
                    raise UpstreamError(f"search request failed after {attempt} attempts (status {status})") from exc
                logger.warning("search attempt %d/%d got status %d", attempt, self.max_attempts, status)
            except httpx.RequestError as exc:
                if attempt == self.max_attempts:
                    raise UpstreamError(f"search request failed after {attempt} attempts: {exc}") from exc
                logger.warning("search attempt %d/%d failed: %s", attempt, self.max_attempts, exc)
            await asyncio.sleep(backoff)
            backoff *= 2
        raise UpstreamError("search retries exhausted")

    async def search(self, query: str) -> SearchResponse:
        if not self.api_key:
            raise UpstreamError("generative search is not configured")
        data = await self._post_with_retries(self.build_payload(query))
        return parse_generate_content(data)


def parse_generate_content(data: dict) -> SearchResponse:
    texts: list[str] = []
    for candidate in data.get("candidates") or []:
        for part in (candidate.get("content") or {}).get("parts") or []:
            text = part.get("text")
            if isinstance(text, str):
                texts.append(text)
        if texts:
            break
    usage = data.get("usageMetadata") or {}
    return SearchResponse(
        text="".join(texts),
        prompt_tokens=int(usage.get("promptTokenCount") or 0),
        completion_tokens=int(usage.get("candidatesTokenCount") or 0),
    )
