"""Compute maturity-weighted relevance scores for repositories."""

from __future__ import annotations

import math
from datetime import UTC, datetime

from contrib_scout.analysis.readme import WELCOMING_REASON, WORKFLOW_REASON
from contrib_scout.catalog.languages import count_related_groups
from contrib_scout.catalog.loader import get_contribution_type
from contrib_scout.models import Maturity, ReadmeAnalysis, Repository, RepositoryScore

MATURITY_WEIGHTS: dict[Maturity, dict[str, float]] = {
    Maturity.EARLY_STAGE: {
        "language": 0.20,
        "contribution_type": 0.20,
        "activity": 0.35,
        "beginner_friendly": 0.25,
    },
    Maturity.GROWING: {
        "language": 0.25,
        "contribution_type": 0.30,
        "activity": 0.25,
        "beginner_friendly": 0.20,
    },
    Maturity.MATURE: {
        "language": 0.30,
        "contribution_type": 0.30,
        "activity": 0.15,
        "beginner_friendly": 0.25,
    },
}

_README_BOOST: dict[Maturity, float] = {
    Maturity.EARLY_STAGE: 0.15,
    Maturity.GROWING: 0.10,
    Maturity.MATURE: 0.10,
}

_DOC_TOPICS = frozenset({"documentation", "docs", "tutorial", "guide"})


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(tz=UTC)


def days_since(iso_date: str | None, now: datetime | None = None) -> int | None:
    """Calculate days since an ISO 8601 date string. Returns None on failure."""
    if not iso_date:
        return None
    try:
        dt = datetime.fromisoformat(iso_date.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return (_now(now) - dt).days


def classify_maturity(repo: Repository, now: datetime | None = None) -> Maturity:
    """Classify a project as early-stage, growing or mature.

    - early-stage: < 50 stars and younger than a year
    - growing: < 500 stars or younger than two years
    - mature: everything else
    """
    stars = repo.stargazers_count
    age = days_since(repo.created_at, now)

    if stars < 50 and age is not None and age < 365:
        return Maturity.EARLY_STAGE
    if stars < 500 or (age is not None and age < 730):
        return Maturity.GROWING
    return Maturity.MATURE


def language_match_score(
    repo: Repository,
    selected_languages: list[str],
    languages: dict[str, int],
) -> float:
    """Score how well the repo's languages match the selection (max 1.0).

    Primary match is worth 0.8, a match among the other declared languages
    adds 0.4. Without any direct match a related language (e.g. TypeScript
    for JavaScript) is worth 0.3.
    """
    if not selected_languages:
        return 0.8

    selected = [lang.lower() for lang in selected_languages]
    primary = repo.language.lower() if repo.language else None
    repo_languages = [lang.lower() for lang in languages]

    score = 0.0
    if primary and primary in selected:
        score += 0.8

    if any(lang in selected and lang != primary for lang in repo_languages):
        score += 0.4

    if score == 0 and count_related_groups(selected, primary, repo_languages) > 0:
        score += 0.3

    return min(score, 1.0)


def _searchable_text(repo: Repository) -> str:
    return f"{repo.description or ''} {' '.join(repo.topics)}".lower()


def contribution_type_score(
    repo: Repository,
    contribution_types: list[str],
    good_first_issues_count: int,
) -> float:
    """Fraction of requested contribution types the repo appears to offer."""
    if not contribution_types:
        return 0.0

    text = _searchable_text(repo)
    matched = 0
    for type_id in contribution_types:
        contribution_type = get_contribution_type(type_id)
        if contribution_type is None:
            continue
        if any(keyword in text for keyword in contribution_type.keywords):
            matched += 1
        elif type_id == "good-first-issue" and good_first_issues_count > 0:
            matched += 1

    return matched / len(contribution_types)


def activity_score(
    repo: Repository,
    maturity: Maturity,
    now: datetime | None = None,
) -> float:
    """Recency-tiered activity score adjusted for project maturity."""
    days = days_since(repo.updated_at, now)

    if days is None:
        score = 0.2
    elif days <= 7:
        score = 1.0
    elif days <= 30:
        score = 0.8
    elif days <= 90:
        score = 0.6
    elif days <= 365:
        score = 0.4
    else:
        score = 0.2

    if maturity == Maturity.EARLY_STAGE:
        # Young projects live or die by recent activity
        if days is None or days > 30:
            score *= 0.5
        score += min(repo.forks_count / 5, 0.2)
    else:
        score += min(repo.stargazers_count / 1000, 0.3)

    return _clamp(score)


def beginner_friendly_score(
    repo: Repository,
    has_contributing_guide: bool,
    good_first_issues_count: int,
    readme_analysis: ReadmeAnalysis | None,
    maturity: Maturity,
) -> float:
    """Score how approachable the repo is for a first-time contributor."""
    score = 0.0

    if has_contributing_guide:
        score += 0.4
    if good_first_issues_count > 0:
        score += 0.4
    if any(topic.lower() in _DOC_TOPICS for topic in repo.topics):
        score += 0.1

    if readme_analysis is not None:
        weight = 1.5 if maturity == Maturity.EARLY_STAGE else 1.0
        if readme_analysis.is_contribution_friendly:
            score += 0.3 * weight
        if readme_analysis.has_contributing_section:
            score += 0.1 * weight
        if readme_analysis.has_issues_section:
            score += 0.1 * weight
        if "good-first-issue" in readme_analysis.contribution_types:
            score += 0.1

    if maturity == Maturity.EARLY_STAGE:
        if readme_analysis is not None and any(
            reason in (WELCOMING_REASON, WORKFLOW_REASON) for reason in readme_analysis.reasons
        ):
            score += 0.2
        if repo.stargazers_count < 20 and repo.forks_count < 10:
            score += 0.1
    elif maturity == Maturity.MATURE:
        if not has_contributing_guide and good_first_issues_count == 0:
            score *= 0.8

    return _clamp(score)


def score_repository(
    repo: Repository,
    *,
    selected_languages: list[str],
    contribution_types: list[str],
    languages: dict[str, int],
    has_contributing_guide: bool,
    good_first_issues_count: int,
    readme_analysis: ReadmeAnalysis | None,
    now: datetime | None = None,
) -> RepositoryScore:
    """Compute the composite relevance score for an enriched repository.

    Four sub-scores (language, contribution type, activity, beginner
    friendliness) are combined with maturity-dependent weights, then a
    README friendliness boost is added. The total is clamped to [0, 1].
    """
    maturity = classify_maturity(repo, now)
    weights = MATURITY_WEIGHTS[maturity]

    language = language_match_score(repo, selected_languages, languages)
    contribution = contribution_type_score(repo, contribution_types, good_first_issues_count)
    activity = activity_score(repo, maturity, now)
    beginner = beginner_friendly_score(
        repo,
        has_contributing_guide,
        good_first_issues_count,
        readme_analysis,
        maturity,
    )

    total = (
        language * weights["language"]
        + contribution * weights["contribution_type"]
        + activity * weights["activity"]
        + beginner * weights["beginner_friendly"]
    )

    boost = 0.0
    if readme_analysis is not None and readme_analysis.is_contribution_friendly:
        boost = readme_analysis.contribution_score * _README_BOOST[maturity]
    total += boost

    return RepositoryScore(
        language_match=round(language, 4),
        contribution_type_match=round(contribution, 4),
        activity=round(activity, 4),
        beginner_friendly=round(beginner, 4),
        readme_boost=round(boost, 4),
        total=round(_clamp(total), 4),
        maturity=maturity,
    )


def basic_score(repo: Repository, now: datetime | None = None) -> float:
    """Fallback score from search-result fields only (used when enrichment fails).

    Starts at 0.3 and adds:
    - updated within 30 days: +0.2 (within 90 days: +0.1)
    - stars (log scale): up to +0.2
    - description longer than 20 chars: +0.1
    - open issues: +0.1
    - topics: +0.1
    """
    score = 0.3

    days = days_since(repo.updated_at, now)
    if days is not None:
        if days <= 30:
            score += 0.2
        elif days <= 90:
            score += 0.1

    if repo.stargazers_count > 0:
        score += min(math.log10(repo.stargazers_count) / 10, 0.2)

    if repo.description and len(repo.description) > 20:
        score += 0.1

    if repo.open_issues_count > 0:
        score += 0.1

    if repo.topics:
        score += 0.1

    return round(min(score, 1.0), 4)
