"""RepositorySearchService -- search, enrich, score and rank GitHub repositories."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from contrib_scout.analysis.base import ReadmeAnalyzerPort
from contrib_scout.analysis.readme import DefaultReadmeAnalyzer
from contrib_scout.errors import GitHubSearchError
from contrib_scout.filtering.filter import years_ago
from contrib_scout.github.base import GitHubClientPort
from contrib_scout.models import (
    LanguageSettings,
    Repository,
    SearchFilters,
    SearchMode,
    SearchResponse,
)
from contrib_scout.scoring.scorer import basic_score, classify_maturity, score_repository

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 5
_DEFAULT_BATCH_DELAY_SECONDS = 0.1
_DEFAULT_MAX_SEARCH_PAGES = 3
_DEFAULT_PER_PAGE = 30
_DEFAULT_SCORE_THRESHOLD = 0.05


def build_search_query(languages: list[str], now: datetime | None = None) -> str:
    """Build the upstream search query.

    Only the first language goes upstream; GitHub handles OR'ed language
    qualifiers poorly, so the rest are applied by scoring. Contribution types
    are never added here so no viable candidate is excluded before scoring.
    """
    parts: list[str] = []
    if languages:
        parts.append(f"language:{languages[0].lower()}")

    parts.append("is:public")
    parts.append("archived:false")

    cutoff = years_ago(now or datetime.now(tz=UTC), 2)
    parts.append(f"pushed:>={cutoff.date().isoformat()}")
    return " ".join(parts)


def apply_language_settings(
    repositories: list[Repository],
    settings: LanguageSettings | None,
) -> list[Repository]:
    """Apply the user's include/exclude language preferences.

    Checks the primary language and every language in the breakdown,
    case-insensitively. An empty include/exclude list is a no-op.
    """
    if settings is None:
        return repositories

    def _repo_languages(repo: Repository) -> set[str]:
        names = {lang.lower() for lang in repo.languages}
        if repo.language:
            names.add(repo.language.lower())
        return names

    if settings.search_mode == SearchMode.INCLUDE:
        if not settings.included_languages:
            return repositories
        wanted = {lang.lower() for lang in settings.included_languages}
        return [repo for repo in repositories if _repo_languages(repo) & wanted]

    if not settings.excluded_languages:
        return repositories
    unwanted = {lang.lower() for lang in settings.excluded_languages}
    return [repo for repo in repositories if not _repo_languages(repo) & unwanted]


@dataclass
class RepositorySearchService:
    """Recommends repositories for a set of languages and contribution types.

    Runs 1-3 concurrent paged searches, deduplicates, enriches candidates in
    small paced batches, scores each one and returns the ranked page.

    Args:
        github: GitHub access adapter.
        analyzer: README analyzer used on fetched README text.
    """

    github: GitHubClientPort
    analyzer: ReadmeAnalyzerPort = field(default_factory=DefaultReadmeAnalyzer)
    batch_size: int = _DEFAULT_BATCH_SIZE
    batch_delay: float = _DEFAULT_BATCH_DELAY_SECONDS
    max_search_pages: int = _DEFAULT_MAX_SEARCH_PAGES
    per_page: int = _DEFAULT_PER_PAGE
    score_threshold: float = _DEFAULT_SCORE_THRESHOLD

    async def search_repositories(
        self,
        filters: SearchFilters,
        language_settings: LanguageSettings | None = None,
    ) -> SearchResponse:
        """Search, enrich, score and rank repositories.

        Args:
            filters: Validated search filters.
            language_settings: Optional include/exclude post-filter.

        Returns:
            ``SearchResponse`` whose ``total_count`` is GitHub's match count
            for the first page searched.

        Raises:
            GitHubSearchError: If any of the search requests fails.
        """
        now = datetime.now(tz=UTC)
        query = build_search_query(filters.languages, now)
        logger.debug("Searching GitHub with query %r", query)

        items, total_count = await self._search_pages(query, filters.page, filters.limit)
        candidates = _dedupe_by_id(items)[: filters.limit]

        enriched = await self.enrich_all(candidates, filters, now)
        enriched = apply_language_settings(enriched, language_settings)

        ranked = sorted(
            (repo for repo in enriched if (repo.score or 0.0) > self.score_threshold),
            key=lambda repo: repo.score or 0.0,
            reverse=True,
        )
        return SearchResponse(
            repositories=ranked[: filters.limit],
            total_count=total_count,
            page=filters.page,
        )

    async def _search_pages(self, query: str, page: int, limit: int) -> tuple[list[dict], int]:
        """Fetch consecutive pages concurrently. All pages must succeed."""
        page_count = min(math.ceil(limit / self.per_page), self.max_search_pages)
        tasks = [
            self.github.search_repositories(
                query,
                sort="stars" if current == 1 else "updated",
                order="desc",
                per_page=self.per_page,
                page=current,
            )
            for current in range(page, page + page_count)
        ]

        try:
            pages = await asyncio.gather(*tasks)
        except Exception as exc:
            logger.warning("GitHub repository search failed: %s", exc)
            raise GitHubSearchError(rate_limited=bool(getattr(exc, "rate_limited", False))) from exc

        items = [item for search_page in pages for item in search_page.items]
        total_count = pages[0].total_count if pages else 0
        return items, total_count

    async def enrich_all(
        self,
        candidates: list[Repository],
        filters: SearchFilters,
        now: datetime | None = None,
    ) -> list[Repository]:
        """Enrich candidates in sequential batches, concurrently within each batch."""
        batches = [
            candidates[i : i + self.batch_size]
            for i in range(0, len(candidates), self.batch_size)
        ]

        results: list[Repository] = []
        for index, batch in enumerate(batches):
            if index > 0:
                await asyncio.sleep(self.batch_delay)
            logger.debug("Enriching batch %d/%d (%d repos)", index + 1, len(batches), len(batch))

            settled = await asyncio.gather(
                *(self.enrich_repository(repo, filters, now) for repo in batch),
                return_exceptions=True,
            )
            for repo, outcome in zip(batch, settled, strict=True):
                if isinstance(outcome, BaseException):
                    logger.warning("Dropping %s after enrichment error: %s", repo.full_name, outcome)
                    continue
                results.append(outcome)

        return results

    async def enrich_repository(
        self,
        repo: Repository,
        filters: SearchFilters,
        now: datetime | None = None,
    ) -> Repository:
        """Fetch languages, contributing guide, good first issues and README, then score.

        Never raises for upstream failures: the repository falls back to a
        basic score computed from its search-result fields.
        """
        owner, name = repo.owner_and_name
        try:
            languages, has_contributing, good_first_issues, readme = await asyncio.gather(
                self.github.get_repository_languages(owner, name),
                self.github.check_contributing_guide(owner, name),
                self.github.get_good_first_issues(owner, name),
                self.github.get_readme_content(owner, name),
            )
            readme_analysis = self.analyzer.analyze(readme) if readme else None

            breakdown = score_repository(
                repo,
                selected_languages=filters.languages,
                contribution_types=filters.contribution_types,
                languages=languages,
                has_contributing_guide=has_contributing,
                good_first_issues_count=len(good_first_issues),
                readme_analysis=readme_analysis,
                now=now,
            )
        except Exception as exc:
            logger.warning("Failed to enrich repository %s: %s", repo.full_name, exc)
            return replace(
                repo,
                languages={},
                has_contributing_guide=False,
                good_first_issues_count=0,
                readme_analysis=None,
                score=basic_score(repo, now),
                score_breakdown=None,
                maturity=classify_maturity(repo, now),
            )

        return replace(
            repo,
            languages=dict(languages),
            has_contributing_guide=has_contributing,
            good_first_issues_count=len(good_first_issues),
            readme_analysis=readme_analysis,
            score=breakdown.total,
            score_breakdown=breakdown,
            maturity=breakdown.maturity,
        )


def _dedupe_by_id(items: list[dict]) -> list[Repository]:
    """Parse raw items and deduplicate by id; later duplicates replace earlier ones."""
    unique: dict[int, Repository] = {}
    for item in items:
        repo = Repository.from_api(item)
        unique[repo.id] = repo
    return list(unique.values())
