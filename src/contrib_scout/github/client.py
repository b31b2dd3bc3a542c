"""Async client for the GitHub REST API.

API docs: https://docs.github.com/en/rest
Base URL: https://api.github.com
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import subprocess
from datetime import UTC, datetime

import httpx

from contrib_scout.errors import GitHubAPIError
from contrib_scout.models import RateLimitStatus, SearchPage

logger = logging.getLogger(__name__)

_BASE_URL = "https://api.github.com"
_API_VERSION = "2022-11-28"
_DEFAULT_RATE_LIMIT = 5000

CONTRIBUTING_PATHS: tuple[str, ...] = (
    "CONTRIBUTING.md",
    "CONTRIBUTING",
    ".github/CONTRIBUTING.md",
    "docs/CONTRIBUTING.md",
    "docs/contributing.md",
    "contributing.md",
)

README_PATHS: tuple[str, ...] = (
    "README.md",
    "README",
    "readme.md",
    "readme",
    "Readme.md",
)

GOOD_FIRST_ISSUE_LABELS: tuple[str, ...] = (
    "good first issue",
    "good-first-issue",
    "beginner-friendly",
    "easy",
)

# ─── Auth resolution ───────────────────────────────────────

_token_resolved: bool = False
_resolved_token: str | None = None
_resolved_token_source: str = "none"  # env | gh_cli | none
_logged_no_token_hint: bool = False


def reset_auth_state() -> None:
    """Forget the resolved token and one-shot log hints (primarily for tests)."""
    global _logged_no_token_hint
    global _resolved_token
    global _resolved_token_source
    global _token_resolved

    _token_resolved = False
    _resolved_token = None
    _resolved_token_source = "none"
    _logged_no_token_hint = False


def resolve_github_token() -> tuple[str | None, str]:
    """Resolve auth token: env first, then `gh auth token` fallback."""
    global _logged_no_token_hint
    global _resolved_token
    global _resolved_token_source
    global _token_resolved

    env_token = os.environ.get("GITHUB_TOKEN", "").strip()
    if env_token:
        return env_token, "env"

    if _token_resolved:
        return _resolved_token, _resolved_token_source

    _token_resolved = True
    gh_token = _resolve_gh_cli_token()
    if gh_token:
        _resolved_token = gh_token
        _resolved_token_source = "gh_cli"
        logger.info("Using GitHub token from `gh auth token` fallback.")
        return gh_token, "gh_cli"

    _resolved_token = None
    _resolved_token_source = "none"
    if not _logged_no_token_hint:
        logger.info(
            "No GitHub auth token found (checked GITHUB_TOKEN and `gh auth token`). "
            "Unauthenticated search is limited to 10 requests per minute."
        )
        _logged_no_token_hint = True
    return None, "none"


def _resolve_gh_cli_token() -> str | None:
    """Try to read a token from local GitHub CLI auth context."""
    try:
        completed = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=2,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return None

    if completed.returncode != 0:
        return None
    token = completed.stdout.strip()
    return token or None


# ─── Query helpers ─────────────────────────────────────────


def build_advanced_query(
    *,
    languages: list[str] | None = None,
    min_stars: int | None = None,
    max_stars: int | None = None,
    has_issues: bool = False,
    licenses: list[str] | None = None,
    topics: list[str] | None = None,
    good_first_issues: bool = False,
) -> str:
    """Build a GitHub search query from structured filters.

    Multiple languages and licenses are OR'ed inside parentheses; the
    ``is:public archived:false`` qualifiers are always appended.
    """
    parts: list[str] = []

    if languages:
        joined = " OR ".join(f"language:{lang.lower()}" for lang in languages)
        parts.append(f"({joined})")
    if min_stars is not None:
        parts.append(f"stars:>={min_stars}")
    if max_stars is not None:
        parts.append(f"stars:<={max_stars}")
    if has_issues:
        parts.append("has:issues")
    if licenses:
        joined = " OR ".join(f"license:{lic.lower()}" for lic in licenses)
        parts.append(f"({joined})")
    for topic in topics or []:
        parts.append(f"topic:{topic}")
    if good_first_issues:
        parts.append("good-first-issues:>0")

    parts.append("is:public")
    parts.append("archived:false")
    return " ".join(parts)


# ─── Client ────────────────────────────────────────────────


class GitHubClient:
    """Adapter for GitHubClientPort -- holds httpx client and rate-limit state."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token: str | None = None,
        *,
        base_url: str = _BASE_URL,
    ) -> None:
        self._http = http_client
        self._explicit_token = token.strip() if token else None
        self._base_url = base_url.rstrip("/")
        self._rate_limit_remaining = _DEFAULT_RATE_LIMIT
        self._rate_limit_reset: int = 0
        self._logged_rate_limit_hint = False

    # ── Plumbing ─────────────────────────────────────────────

    def _auth(self) -> tuple[str | None, str]:
        if self._explicit_token:
            return self._explicit_token, "explicit"
        return resolve_github_token()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
        }
        token, _ = self._auth()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(self, path: str, params: dict[str, object] | None = None) -> httpx.Response:
        resp = await self._http.get(
            f"{self._base_url}{path}",
            params=params,
            headers=self._headers(),
        )
        self._update_rate_limit(resp)
        return resp

    def _update_rate_limit(self, resp: httpx.Response) -> None:
        """Record the remaining budget and warn once when it is exhausted."""
        remaining = resp.headers.get("X-RateLimit-Remaining")
        reset = resp.headers.get("X-RateLimit-Reset")
        try:
            if remaining is not None:
                self._rate_limit_remaining = int(remaining)
            if reset is not None:
                self._rate_limit_reset = int(reset)
        except ValueError:
            return

        if self._rate_limit_remaining == 0 and not self._logged_rate_limit_hint:
            _, source = self._auth()
            logger.warning(
                "GitHub API rate limit exhausted (auth: %s). Requests will fail until reset.",
                source,
            )
            self._logged_rate_limit_hint = True

    def _is_rate_limit_response(self, resp: httpx.Response) -> bool:
        if resp.status_code == 429:
            return True
        if resp.status_code != 403:
            return False
        if resp.headers.get("X-RateLimit-Remaining") == "0":
            return True
        return "rate limit" in resp.text.lower()

    def rate_limit_status(self) -> RateLimitStatus:
        token, source = self._auth()
        reset_at = (
            datetime.fromtimestamp(self._rate_limit_reset, tz=UTC)
            if self._rate_limit_reset
            else None
        )
        return RateLimitStatus(
            remaining=self._rate_limit_remaining,
            reset_at=reset_at,
            has_auth=bool(token),
            auth_source=source,
        )

    # ── Search ───────────────────────────────────────────────

    async def search_repositories(
        self,
        query: str,
        *,
        sort: str = "stars",
        order: str = "desc",
        per_page: int = 30,
        page: int = 1,
    ) -> SearchPage:
        """Search repositories.

        Args:
            query: GitHub search syntax (e.g. "language:python is:public").
            sort: stars | forks | help-wanted-issues | updated.
            order: asc | desc.
            per_page: Results per page (1-100).
            page: 1-based page number.

        Raises:
            GitHubAPIError: On any transport or HTTP error.
        """
        try:
            resp = await self._get(
                "/search/repositories",
                params={
                    "q": query,
                    "sort": sort,
                    "order": order,
                    "per_page": min(per_page, 100),
                    "page": page,
                },
            )
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"Failed to search GitHub for '{query}': {exc}") from exc

        if resp.status_code != 200:
            rate_limited = self._is_rate_limit_response(resp)
            reason = "rate limit exceeded" if rate_limited else f"HTTP {resp.status_code}"
            raise GitHubAPIError(
                f"Failed to search GitHub for '{query}': {reason}",
                status_code=resp.status_code,
                rate_limited=rate_limited,
            )

        data = resp.json()
        return SearchPage(
            total_count=int(data.get("total_count", 0)),
            items=list(data.get("items", [])),
        )

    # ── Repository lookups ───────────────────────────────────

    async def get_repository_details(self, owner: str, repo: str) -> dict:
        """Fetch the full repository object.

        Raises:
            GitHubAPIError: When the repository cannot be fetched.
        """
        try:
            resp = await self._get(f"/repos/{owner}/{repo}")
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"Failed to fetch repository '{owner}/{repo}': {exc}") from exc

        if resp.status_code != 200:
            raise GitHubAPIError(
                f"Failed to fetch repository '{owner}/{repo}': HTTP {resp.status_code}",
                status_code=resp.status_code,
                rate_limited=self._is_rate_limit_response(resp),
            )
        return resp.json()

    async def get_repository_languages(self, owner: str, repo: str) -> dict[str, int]:
        try:
            resp = await self._get(f"/repos/{owner}/{repo}/languages")
            if resp.status_code != 200:
                return {}
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Error getting languages for %s/%s: %s", owner, repo, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(name): int(count) for name, count in data.items()}

    async def get_repository_contents(
        self,
        owner: str,
        repo: str,
        path: str,
    ) -> dict | list | None:
        """Fetch a file or directory listing. Returns None when it does not exist."""
        try:
            resp = await self._get(f"/repos/{owner}/{repo}/contents/{path}")
            if resp.status_code != 200:
                return None
            return resp.json()
        except (httpx.HTTPError, ValueError):
            return None

    async def check_contributing_guide(self, owner: str, repo: str) -> bool:
        for path in CONTRIBUTING_PATHS:
            if await self.get_repository_contents(owner, repo, path):
                return True
        return False

    async def get_readme_content(self, owner: str, repo: str) -> str | None:
        """Return the first README found, base64-decoded to text."""
        for path in README_PATHS:
            content = await self.get_repository_contents(owner, repo, path)
            if not isinstance(content, dict) or "content" not in content:
                continue
            try:
                raw = base64.b64decode(content["content"])
            except (binascii.Error, TypeError, ValueError):
                continue
            return raw.decode("utf-8", errors="replace")
        return None

    async def get_repository_issues(
        self,
        owner: str,
        repo: str,
        *,
        state: str = "open",
        labels: str | None = None,
        sort: str = "created",
        direction: str = "desc",
        per_page: int = 30,
        page: int = 1,
    ) -> list[dict]:
        params: dict[str, object] = {
            "state": state,
            "sort": sort,
            "direction": direction,
            "per_page": per_page,
            "page": page,
        }
        if labels:
            params["labels"] = labels
        try:
            resp = await self._get(f"/repos/{owner}/{repo}/issues", params=params)
            if resp.status_code != 200:
                return []
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Error getting issues for %s/%s: %s", owner, repo, exc)
            return []
        return data if isinstance(data, list) else []

    async def get_good_first_issues(self, owner: str, repo: str) -> list[dict]:
        return await self.get_repository_issues(
            owner,
            repo,
            state="open",
            labels=",".join(GOOD_FIRST_ISSUE_LABELS),
            per_page=10,
        )
