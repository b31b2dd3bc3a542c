"""Exception hierarchy for contrib-scout.

All exceptions inherit from ContribScoutError (single catch point).
Messages are written for LLM consumption -- clear, actionable, no stack traces.
"""

from __future__ import annotations

SEARCH_FAILED_MESSAGE = "GitHub API search failed"


class ContribScoutError(Exception):
    """Base exception for all contrib-scout errors."""


class GitHubAPIError(ContribScoutError):
    """Error communicating with the GitHub REST API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        rate_limited: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.rate_limited = rate_limited


class GitHubSearchError(GitHubAPIError):
    """The repository search itself failed; no partial results are available."""

    def __init__(self, message: str = SEARCH_FAILED_MESSAGE, *, rate_limited: bool = False) -> None:
        super().__init__(message, rate_limited=rate_limited)


class CatalogError(ContribScoutError):
    """Error loading the bundled contribution-type catalog."""


class ValidationError(ContribScoutError):
    """Tool input failed validation."""
