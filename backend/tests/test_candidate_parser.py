from __future__ import annotations
import json
import re
import time
from datetime import date

import pytest

from app.schemas.job import CompanySize, ExperienceLevel, SourcePlatform, WorkType
from app.services.candidate_parser import (
    normalize_experience_level,
    normalize_work_type,
    parse_balanced_span,
    parse_fenced_block,
    parse_job_candidates,
)
from app.utils.hash import content_fingerprint


def _job(**overrides) -> dict:
    job = {"title": "Developer", "company_name": "Corp", "source_url": "https://corp.com/job"}
    job.update(overrides)
    return job


def test_fenced_block_with_single_job():
    raw = "Here you go:\n```json\n" + json.dumps([_job(location="Remote")]) + "\n```\nGood luck!"

    jobs = parse_job_candidates(raw)

    assert len(jobs) == 1
    assert jobs[0].title == "Developer"
    assert re.fullmatch(r"[0-9a-f]{32}", jobs[0].content_hash)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        42,
        ["not", "a", "string"],
        "no json here at all",
        "[{broken",
        '{"jobs": "nope"}',
        "```\n```",
    ],
)
def test_unparsable_input_gives_empty_list(raw):
    assert parse_job_candidates(raw) == []


def test_accepts_common_wrappings():
    payload = [_job(), _job(title="Tester", company_name="Other")]
    variants = [
        json.dumps(payload),
        json.dumps({"jobs": payload}),
        "```\n" + json.dumps(payload) + "\n```",
        "I found these [2] roles: " + json.dumps(payload) + " -- hope that helps",
        '[{"title": "Developer", "company_name": "Corp", "source_url": "https://corp.com/job",},'
        ' {"title": "Tester", "company_name": "Other", "source_url": "https://corp.com/job",},]',
    ]
    for raw in variants:
        jobs = parse_job_candidates(raw)
        assert [j.title for j in jobs] == ["Developer", "Tester"], raw


def test_strategies_are_independent():
    assert parse_fenced_block("```python\n[1, 2]\n```") == [1, 2]
    assert parse_fenced_block("no fence") is None
    assert parse_balanced_span('prose "[x]" then {"a": "b ] }"}') == {"a": "b ] }"}
    assert parse_balanced_span("no brackets") is None


def test_bad_candidates_dropped_individually():
    raw = json.dumps(
        [
            _job(title=""),
            _job(company_name=None),
            _job(source_url="not-a-url"),
            _job(source_url="ftp://corp.com/job"),
            "just a string",
            _job(title="Survivor"),
        ]
    )

    jobs = parse_job_candidates(raw)

    assert [j.title for j in jobs] == ["Survivor"]


def test_field_normalization():
    raw = json.dumps(
        [
            _job(
                title="  Senior Developer ",
                description="x" * 900,
                work_type="Work from home",
                experience_level="Lead",
                salary_min="120,000",
                salary_max=-5,
                salary_currency="eur",
                company_size="51-200",
                skills=["Python", "", 3, "SQL"],
                benefits="not a list",
                posted_date="2026-03-01T10:00:00Z",
                source_url="https://www.linkedin.com/jobs/view/1",
                content_hash="ignored",
            ),
            _job(
                work_type="teleportation",
                experience_level="wizard",
                salary_currency="dollars",
                company_size="huge",
                posted_date="yesterday",
                source_platform="indeed",
                source_url="https://boards.greenhouse.io/corp/1",
            ),
        ]
    )

    first, second = parse_job_candidates(raw)

    assert first.title == "Senior Developer"
    assert len(first.description) == 500
    assert first.work_type == WorkType.REMOTE
    assert first.experience_level == ExperienceLevel.SENIOR
    assert first.salary_min == 120000
    assert first.salary_max is None
    assert first.salary_currency == "EUR"
    assert first.company_size == CompanySize.M
    assert first.required_skills == ["Python", "SQL"]
    assert first.benefits == []
    assert first.posted_date == date(2026, 3, 1)
    assert first.source_platform == SourcePlatform.LINKEDIN
    assert first.content_hash == content_fingerprint("Senior Developer", "Corp")

    assert second.work_type is None
    assert second.experience_level is None
    assert second.salary_currency is None
    assert second.company_size is None
    assert second.posted_date is None
    assert second.source_platform == SourcePlatform.INDEED


def test_platform_inferred_from_host_or_left_empty():
    raw = json.dumps(
        [
            _job(source_url="https://jobs.lever.co/corp/1"),
            _job(title="B", source_url="https://www.glassdoor.co.uk/job/2"),
            _job(title="C", source_url="https://careers.corp.com/3"),
            _job(title="D", source_platform="Careers page"),
        ]
    )

    platforms = [j.source_platform for j in parse_job_candidates(raw)]

    assert platforms == [SourcePlatform.COMPANY_WEBSITE, SourcePlatform.GLASSDOOR, None, SourcePlatform.OTHER]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("remote", WorkType.REMOTE),
        ("Hybrid (3 days in office)", WorkType.HYBRID),
        ("On-site", WorkType.ONSITE),
        ("in office", WorkType.ONSITE),
        ("WFH", WorkType.REMOTE),
        ("Flexible", WorkType.FLEXIBLE),
    ],
)
def test_work_type_normalization_is_idempotent(raw, expected):
    once = normalize_work_type(raw)
    assert once == expected
    assert normalize_work_type(once) == once
    assert normalize_work_type(once.value) == once


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Junior", ExperienceLevel.ENTRY),
        ("Graduate programme", ExperienceLevel.ENTRY),
        ("intermediate", ExperienceLevel.MID),
        ("Staff", ExperienceLevel.SENIOR),
        ("VP of Engineering", ExperienceLevel.EXECUTIVE),
        ("Head of Data", ExperienceLevel.EXECUTIVE),
    ],
)
def test_experience_normalization_is_idempotent(raw, expected):
    once = normalize_experience_level(raw)
    assert once == expected
    assert normalize_experience_level(once) == once
    assert normalize_experience_level(once.value) == once


def test_oversized_salary_numbers_are_dropped_not_raised():
    huge = "1" + "0" * 400
    raw = '[{"title": "Dev", "company_name": "Corp", "source_url": "https://corp.com/1", "salary_min": ' + huge + ', "salary_max": "1e400"}]'

    [job] = parse_job_candidates(raw)

    assert job.salary_min is None
    assert job.salary_max is None


@pytest.mark.parametrize(
    "raw",
    [
        "[" * 100000 + "]" * 100000,
        "[" * 20000,
        '{"a": ' * 5000 + "1" + "}" * 5000,
    ],
)
def test_deeply_nested_input_gives_empty_list(raw):
    assert parse_job_candidates(raw) == []


def test_bracket_scan_is_linear_in_noise():
    noise = "[a " * 50000
    raw = noise + json.dumps([_job()])

    started = time.perf_counter()
    jobs = parse_job_candidates(raw)
    elapsed = time.perf_counter() - started

    assert [j.title for j in jobs] == ["Developer"]
    assert elapsed < 2


def test_payload_after_unclosed_prose_bracket_is_found():
    raw = "Results (see [note below: " + json.dumps({"jobs": [_job()]}) + " enjoy"
    assert [j.title for j in parse_job_candidates(raw)] == ["Developer"]


def test_fields_are_fitted_to_storage_widths():
    raw = json.dumps(
        [
            _job(title="T" * 600, company_name="C" * 300, location="L" * 300),
            _job(title="Long link", source_url="https://corp.com/" + "a" * 1100),
        ]
    )

    [job] = parse_job_candidates(raw)

    assert len(job.title) == 512
    assert len(job.company_name) == 256
    assert len(job.location) == 256
    assert job.content_hash == content_fingerprint("T" * 512, "C" * 256)
