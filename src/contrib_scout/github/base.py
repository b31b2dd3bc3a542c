"""Port: GitHub REST API access used by the recommendation pipeline."""

from __future__ import annotations

from typing import Protocol

from contrib_scout.models import RateLimitStatus, SearchPage


class GitHubClientPort(Protocol):
    """Port for the GitHub calls the search service consumes.

    Search and repository lookup raise ``GitHubAPIError``; the enrichment
    lookups degrade to empty/false results on upstream failure.
    """

    async def get_repository_details(self, owner: str, repo: str) -> dict:
        """Fetch the raw repository object."""
        ...

    async def search_repositories(
        self,
        query: str,
        *,
        sort: str = "stars",
        order: str = "desc",
        per_page: int = 30,
        page: int = 1,
    ) -> SearchPage:
        """Run a repository search query and return one page of raw items."""
        ...

    async def get_repository_languages(self, owner: str, repo: str) -> dict[str, int]:
        """Return the language -> byte count breakdown (empty on failure)."""
        ...

    async def check_contributing_guide(self, owner: str, repo: str) -> bool:
        """Return True if any well-known CONTRIBUTING file exists."""
        ...

    async def get_readme_content(self, owner: str, repo: str) -> str | None:
        """Return decoded README text, or None when no README is found."""
        ...

    async def get_good_first_issues(self, owner: str, repo: str) -> list[dict]:
        """Return open issues carrying a beginner-friendly label (empty on failure)."""
        ...

    def rate_limit_status(self) -> RateLimitStatus:
        """Return the API budget as last reported by GitHub."""
        ...
