from __future__ import annotations
from dataclasses import dataclass

from app.schemas.job import DiscoveredJob, ExperienceLevel, WorkType
from app.schemas.match import MatchBreakdown, MatchResult
from app.schemas.preferences import SearchPreferences
from app.schemas.profile import CandidateProfile

# Related skills and how much of an exact match they are worth. Lookups go both ways.
SKILL_RELATIONSHIPS: dict[str, dict[str, float]] = {
    "react": {"angular": 0.7, "vue": 0.7, "svelte": 0.7, "next.js": 0.85, "nextjs": 0.85},
    "angular": {"vue": 0.7, "svelte": 0.7},
    "vue": {"svelte": 0.7, "nuxt": 0.85},
    "typescript": {"javascript": 0.9, "js": 0.9, "ts": 1.0},
    "javascript": {"js": 1.0, "ts": 0.9},
    "python": {"java": 0.5, "c#": 0.5, "csharp": 0.5, "ruby": 0.6},
    "java": {"c#": 0.7, "csharp": 0.7, "kotlin": 0.85},
    "c#": {"csharp": 1.0},
    "aws": {"gcp": 0.7, "azure": 0.7, "google cloud": 0.7, "amazon web services": 1.0},
    "gcp": {"azure": 0.7, "google cloud": 1.0},
    "azure": {"microsoft azure": 1.0},
    "postgresql": {"mysql": 0.6, "mongodb": 0.6, "postgres": 1.0, "sql": 0.8},
    "mysql": {"mongodb": 0.6, "postgres": 0.6, "sql": 0.8},
    "mongodb": {"nosql": 0.8},
    "product management": {"program management": 0.6, "project management": 0.7},
    "program management": {"project management": 0.8},
    "leadership": {"management": 0.8, "team lead": 0.9},
    "management": {"team lead": 0.7},
    "docker": {"kubernetes": 0.7, "k8s": 0.7, "containerization": 0.9},
    "kubernetes": {"k8s": 1.0, "containerization": 0.8},
    "terraform": {"cloudformation": 0.7, "pulumi": 0.8, "infrastructure as code": 0.9},
    "machine learning": {"deep learning": 0.8, "ml": 1.0, "ai": 0.7, "data science": 0.7},
    "data science": {"ml": 0.7, "analytics": 0.6},
}

EXPERIENCE_ORDER = [ExperienceLevel.ENTRY, ExperienceLevel.MID, ExperienceLevel.SENIOR, ExperienceLevel.EXECUTIVE]
EXPERIENCE_BY_DISTANCE = {0: 100, 1: 70, 2: 30}

FACTORS = ("skills", "experience", "location", "salary", "preferences", "behavioral")
MAX_REASONS = 5


@dataclass
class FactorScores:
    """Raw 0-100 ratios before weighting."""

    skills: float
    experience: float
    location: float
    salary: float
    preferences: float
    behavioral: float | None = None


def _related(a: str, b: str) -> float:
    return max(SKILL_RELATIONSHIPS.get(a, {}).get(b, 0.0), SKILL_RELATIONSHIPS.get(b, {}).get(a, 0.0))


def _candidate_skills(profile: CandidateProfile, prefs: SearchPreferences) -> list[str]:
    skills = profile.general_cv_analysis.skills if profile.general_cv_analysis else []
    if not skills:
        skills = [req.skill for req in prefs.required_skills]
    return [s.strip().lower() for s in skills if s and s.strip()]


def _candidate_level(profile: CandidateProfile) -> ExperienceLevel | None:
    raw = profile.general_cv_analysis.seniority_level if profile.general_cv_analysis else None
    if not raw:
        return None
    try:
        return ExperienceLevel(raw.strip().lower())
    except ValueError:
        return None


def skills_score(job_skills: list[str], candidate_skills: list[str]) -> float:
    wanted = [s.strip().lower() for s in job_skills if s and s.strip()]
    if not wanted:
        return 70
    have = set(candidate_skills)
    total = 0.0
    for skill in wanted:
        if skill in have:
            total += 100
            continue
        total += 100 * max((_related(skill, c) for c in have), default=0.0)
    return round(total / len(wanted))


def experience_score(job_level: ExperienceLevel | None, candidate_level: ExperienceLevel | None) -> float:
    if job_level is None or candidate_level is None:
        return 70
    distance = abs(EXPERIENCE_ORDER.index(job_level) - EXPERIENCE_ORDER.index(candidate_level))
    return EXPERIENCE_BY_DISTANCE.get(distance, 0)


def location_score(job: DiscoveredJob, profile: CandidateProfile) -> float:
    prefs = profile.location_preferences
    if job.work_type == WorkType.REMOTE:
        return 100
    if job.work_type == WorkType.FLEXIBLE:
        return 95
    if prefs.remote_policy == WorkType.REMOTE:
        return 50 if job.work_type == WorkType.HYBRID else 20
    if not job.location:
        return 70

    location = job.location.lower()
    if prefs.city and prefs.city.lower() in location:
        return 100
    if prefs.country and prefs.country.lower() in location:
        return 80 if job.work_type == WorkType.HYBRID else 70
    if prefs.willing_to_relocate:
        return 50
    return 20


def salary_score(job: DiscoveredJob, candidate_min: float | None, adjustment_pct: float = 0) -> float:
    if job.salary_min is None and job.salary_max is None:
        return 70
    if not candidate_min:
        return 100
    target = candidate_min * (1 + adjustment_pct / 100)
    offered = job.salary_max or job.salary_min or 0
    if offered >= target:
        return 100
    shortfall = (target - offered) / target
    if shortfall <= 0.10:
        return 70
    if shortfall <= 0.20:
        return 40
    return 0


def preference_score(job: DiscoveredJob, profile: CandidateProfile, prefs: SearchPreferences) -> float:
    score = 0
    sizes = prefs.company_size_preferences or profile.company_size_preferences
    if not sizes:
        score += 30
    elif job.company_size and job.company_size in sizes:
        score += 30

    industries = [i.lower() for i in profile.preferred_industries if i]
    if not industries:
        score += 30
    elif job.description and any(i in job.description.lower() for i in industries):
        score += 30

    required = [b.lower() for b in prefs.required_benefits if b]
    if not required:
        score += 20
    elif job.benefits:
        offered = [b.lower() for b in job.benefits]
        matched = sum(1 for req in required if any(req in b for b in offered))
        score += round(matched / len(required) * 20)

    company = job.company_name.lower()
    if any(a.lower() in company for a in prefs.avoid_companies if a):
        score -= 50
    else:
        score += 10

    text = f"{job.title} {job.description or ''}".lower()
    if any(k.lower() in text for k in prefs.avoid_keywords if k):
        score -= 30
    else:
        score += 10

    return max(0, min(100, score))


def behavioral_score(job: DiscoveredJob, prefs: SearchPreferences) -> float | None:
    stats = prefs.feedback_stats
    if stats.total == 0:
        return None
    score = stats.total_likes / stats.total * 100
    company = job.company_name.lower()
    if any(a.lower() == company for a in prefs.avoid_companies if a):
        score -= 50
    return max(0.0, min(100.0, score))


class MatchScorer:
    def __init__(self, cfg: dict):
        self.cfg = cfg
        self.weights = cfg["weights"]
        self.threshold = cfg["threshold"]
        self.borderline_margin = cfg["borderline_margin"]

    def factor_scores(self, job: DiscoveredJob, profile: CandidateProfile, prefs: SearchPreferences) -> FactorScores:
        candidate_min = prefs.salary_min_override or profile.minimum_salary_expectation
        adjustment = prefs.implicit_preferences.get("salary_adjustment") or 0
        if not isinstance(adjustment, (int, float)):
            adjustment = 0
        return FactorScores(
            skills=skills_score(job.required_skills, _candidate_skills(profile, prefs)),
            experience=experience_score(job.experience_level, _candidate_level(profile)),
            location=location_score(job, profile),
            salary=salary_score(job, candidate_min, adjustment),
            preferences=preference_score(job, profile, prefs),
            behavioral=behavioral_score(job, prefs),
        )

    def score(self, job: DiscoveredJob, profile: CandidateProfile, prefs: SearchPreferences) -> MatchResult:
        factors = self.factor_scores(job, profile, prefs)
        points = {}
        for name in FACTORS:
            ratio = getattr(factors, name)
            if ratio is not None:
                points[name] = round(ratio / 100 * self.weights[name], 2)

        total = max(0, min(100, int(round(sum(points.values())))))
        passes = total >= self.threshold
        return MatchResult(
            total_score=total,
            breakdown=MatchBreakdown(**points),
            match_reasons=self.reasons(job, profile, factors, points),
            passes_threshold=passes,
            is_borderline=not passes and total >= self.threshold - self.borderline_margin,
        )

    def reasons(
        self, job: DiscoveredJob, profile: CandidateProfile, factors: FactorScores, points: dict[str, float]
    ) -> list[str]:
        ranked: list[tuple[float, str]] = []

        if factors.skills >= 80:
            cv_skills = {s.lower() for s in (profile.general_cv_analysis.skills if profile.general_cv_analysis else [])}
            matched = [s for s in job.required_skills if s.lower() in cv_skills]
            if matched:
                ranked.append((points["skills"], f"Your {', '.join(matched[:3])} skills are a strong match"))
            else:
                ranked.append((points["skills"], "Your technical skills align well with this role"))
        elif factors.skills >= 60:
            ranked.append((points["skills"], "Your skills partially match with room to grow"))

        if factors.experience >= 90:
            ranked.append((points["experience"], "The experience level is exactly what you are looking for"))
        elif factors.experience >= 70:
            ranked.append((points["experience"], "The seniority level aligns with your career stage"))

        if factors.location >= 90:
            if job.work_type == WorkType.REMOTE:
                ranked.append((points["location"], "Fully remote position matches your flexibility needs"))
            else:
                ranked.append((points["location"], f"Location in {job.location or 'your area'} is convenient"))
        elif job.work_type == WorkType.HYBRID:
            ranked.append((points["location"], "Hybrid work arrangement offers flexibility"))

        if factors.salary >= 90 and job.salary_min:
            currency = job.salary_currency or "USD"
            ranked.append((points["salary"], f"Salary starting at {currency} {job.salary_min:,.0f} meets your expectations"))
        elif factors.salary >= 70:
            ranked.append((points["salary"], "Compensation is competitive for this role"))

        if factors.preferences >= 80 and job.company_size:
            ranked.append((points["preferences"], f"Company size ({job.company_size.value} employees) fits your preference"))
        if factors.preferences >= 60 and job.benefits:
            ranked.append((points["preferences"], f"Benefits include {' and '.join(job.benefits[:2])}"))

        if factors.behavioral is not None and factors.behavioral >= 70:
            ranked.append((points["behavioral"], "Similar to roles you have liked before"))

        # sorted() is stable, so equal contributions keep factor order
        reasons = [text for _, text in sorted(ranked, key=lambda item: -item[0])]
        if not reasons:
            reasons.append(f"{job.company_name} could be a good career move")
        return reasons[:MAX_REASONS]
