"""Declarative filtering, ranking and statistics over repository lists."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime

from contrib_scout.catalog.loader import get_contribution_type
from contrib_scout.models import ContributionType, Repository, RepositoryStats, SearchFilters

_STALE_AFTER_YEARS = 2

_GOOD_FIRST_ISSUE_KEYWORDS: tuple[str, ...] = (
    "good first issue",
    "good-first-issue",
    "beginner",
    "newcomer",
    "easy",
    "starter",
    "first-timers-only",
)
_DOC_TOPICS = frozenset({"documentation", "docs", "wiki", "readme", "guide", "tutorial"})
_TRANSLATION_TOPICS = frozenset(
    {"i18n", "internationalization", "localization", "translation", "locale"}
)
_TESTING_KEYWORDS: tuple[str, ...] = ("test", "testing", "coverage", "ci", "continuous integration")


def filter_repositories(
    repositories: Iterable[Repository],
    filters: SearchFilters,
    now: datetime | None = None,
) -> list[Repository]:
    """Keep repositories that match the language and contribution-type filters
    and pass the quality gate. Survivors keep their input order.
    """
    return [
        repo
        for repo in repositories
        if matches_language_filter(repo, filters.languages)
        and matches_contribution_types(repo, filters.contribution_types)
        and passes_quality_checks(repo, now)
    ]


def matches_language_filter(repo: Repository, selected_languages: list[str]) -> bool:
    if not selected_languages:
        return True

    selected = {lang.lower() for lang in selected_languages}
    if repo.language and repo.language.lower() in selected:
        return True
    return any(lang.lower() in selected for lang in repo.languages)


def matches_contribution_types(repo: Repository, selected_types: list[str]) -> bool:
    if not selected_types:
        return True

    for type_id in selected_types:
        contribution_type = get_contribution_type(type_id)
        if contribution_type is not None and supports_contribution_type(repo, contribution_type):
            return True
    return False


def supports_contribution_type(repo: Repository, contribution_type: ContributionType) -> bool:
    """Match on catalog keywords, or on the type-specific signal when there is one."""
    text = _searchable_text(repo)
    if _contains_any(text, contribution_type.keywords):
        return True

    topics = {topic.lower() for topic in repo.topics}
    type_id = contribution_type.id
    if type_id == "good-first-issue":
        return repo.good_first_issues_count > 0 or _contains_any(text, _GOOD_FIRST_ISSUE_KEYWORDS)
    if type_id == "documentation":
        return bool(topics & _DOC_TOPICS)
    if type_id == "translation":
        return bool(topics & _TRANSLATION_TOPICS)
    if type_id == "bug-fix":
        return repo.has_issues and repo.open_issues_count > 0
    if type_id == "testing":
        return _contains_any(text, _TESTING_KEYWORDS)
    return False


def passes_quality_checks(repo: Repository, now: datetime | None = None) -> bool:
    """Reject archived/disabled, zero-activity and stale (> 2 years) repositories."""
    if repo.archived:
        return False
    if repo.disabled:
        return False
    if repo.stargazers_count == 0 and repo.forks_count == 0:
        return False

    last_update = _parse_datetime(repo.updated_at)
    if last_update is None:
        return False
    return last_update >= years_ago(now or datetime.now(tz=UTC), _STALE_AFTER_YEARS)


def sort_by_relevance(repositories: Iterable[Repository]) -> list[Repository]:
    """Return a new list ordered by score (None as 0), then stars, both descending."""
    return sorted(
        repositories,
        key=lambda repo: (-(repo.score or 0.0), -repo.stargazers_count),
    )


def extract_languages(repositories: Iterable[Repository]) -> list[str]:
    """Return the sorted union of primary and breakdown languages."""
    languages: set[str] = set()
    for repo in repositories:
        if repo.language:
            languages.add(repo.language)
        languages.update(repo.languages)
    return sorted(languages)


def get_repository_stats(repositories: list[Repository]) -> RepositoryStats:
    if not repositories:
        return RepositoryStats()

    count = len(repositories)
    language_counts = Counter(repo.language for repo in repositories if repo.language)
    return RepositoryStats(
        total_repositories=count,
        average_stars=round(sum(repo.stargazers_count for repo in repositories) / count),
        average_forks=round(sum(repo.forks_count for repo in repositories) / count),
        languages=dict(language_counts),
        has_contributing_guide=sum(1 for repo in repositories if repo.has_contributing_guide),
        has_good_first_issues=sum(1 for repo in repositories if repo.good_first_issues_count > 0),
    )


# ─── Helpers ─────────────────────────────────────────────────


def _searchable_text(repo: Repository) -> str:
    parts = [repo.description or "", " ".join(repo.topics), repo.name, repo.full_name]
    return " ".join(parts).lower()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword.lower() in text for keyword in keywords)


def _parse_datetime(iso_date: str | None) -> datetime | None:
    if not iso_date:
        return None
    try:
        dt = datetime.fromisoformat(iso_date.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=UTC)


def years_ago(now: datetime, years: int) -> datetime:
    try:
        return now.replace(year=now.year - years)
    except ValueError:
        # Feb 29 -> Feb 28
        return now.replace(year=now.year - years, day=28)
