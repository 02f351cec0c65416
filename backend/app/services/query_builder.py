from __future__ import annotations
from datetime import date

from app.schemas.job import WorkType
from app.schemas.preferences import SearchPreferences
from app.schemas.profile import CandidateProfile

DEFAULT_TITLE = "Software Engineer"
REMOTE_COMPATIBLE = {WorkType.REMOTE, WorkType.HYBRID, WorkType.FLEXIBLE}


def _candidate_titles(profile: CandidateProfile, prefs: SearchPreferences) -> list[str]:
    titles = [t.strip() for t in prefs.preferred_job_titles if t and t.strip()]
    if not titles:
        titles = [t.strip() for t in profile.preferred_job_titles if t and t.strip()]
    return titles or [DEFAULT_TITLE]


def _candidate_locations(profile: CandidateProfile, prefs: SearchPreferences) -> list[str]:
    locations = [loc.strip() for loc in prefs.preferred_locations if loc and loc.strip()]
    if not locations and profile.location_preferences.city:
        locations = [profile.location_preferences.city.strip()]
    return locations


def _candidate_skills(profile: CandidateProfile, prefs: SearchPreferences) -> list[str]:
    cv_skills = profile.general_cv_analysis.skills if profile.general_cv_analysis else []
    skills = [s.strip() for s in cv_skills if s and s.strip()]
    if not skills:
        skills = [req.skill.strip() for req in prefs.required_skills if req.skill.strip()]
    return list(dict.fromkeys(skills))


def _wants_remote(profile: CandidateProfile, prefs: SearchPreferences) -> bool:
    policies = set(prefs.remote_policy_preferences)
    if not policies and profile.location_preferences.remote_policy:
        policies = {profile.location_preferences.remote_policy}
    if policies == {WorkType.ONSITE}:
        return False
    return bool(policies & REMOTE_COMPATIBLE)


def _query(title: str, year: int, skills: list[str], location: str = "", remote: bool = False, extra: str = "") -> str:
    parts = [f'"{title}"', " ".join(skills), f'"{location}"' if location else "", "remote" if remote else "", extra]
    parts.append(f"open positions {year}")
    return " ".join(p for p in parts if p)


def build_search_queries(profile: CandidateProfile, prefs: SearchPreferences, year: int | None = None) -> list[str]:
    """Build 2-3 web search queries for the generative search collaborator."""
    year = year or date.today().year
    titles = _candidate_titles(profile, prefs)
    locations = _candidate_locations(profile, prefs)
    skills = _candidate_skills(profile, prefs)
    industries = [i.strip() for i in profile.preferred_industries if i and i.strip()]
    remote = _wants_remote(profile, prefs)

    primary_title = titles[0]
    primary_location = locations[0] if locations else ""

    queries = [_query(primary_title, year, skills[:2], primary_location, remote)]

    if len(titles) > 1:
        queries.append(_query(titles[1], year, skills[1:3], primary_location, remote))
    elif len(skills) > 2:
        queries.append(_query(primary_title, year, skills[2:4], primary_location, remote))
    elif industries:
        queries.append(_query(primary_title, year, [], primary_location, remote, industries[0]))

    if len(titles) > 1 and len(industries) > 1:
        third_location = locations[1] if len(locations) > 1 else primary_location
        queries.append(_query(primary_title, year, skills[:1], third_location, remote, " ".join(industries[:2])))

    queries = list(dict.fromkeys(queries))
    if len(queries) < 2:
        queries.append(_query(primary_title, year, [], primary_location, remote, "hiring now"))
    return queries[:3]
