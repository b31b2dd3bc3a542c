"""search_repositories tool -- raw GitHub repository search."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from contrib_scout.errors import ContribScoutError, GitHubAPIError, ValidationError
from contrib_scout.github.client import build_advanced_query
from contrib_scout.models import Repository
from contrib_scout.tools._helpers import get_context, serialize_repository

_SORT_OPTIONS = frozenset({"stars", "forks", "help-wanted-issues", "updated"})
_ORDER_OPTIONS = frozenset({"asc", "desc"})


async def search_repositories(
    ctx: Context,
    query: str | None = None,
    languages: list[str] | None = None,
    min_stars: int | None = None,
    max_stars: int | None = None,
    has_issues: bool = False,
    licenses: list[str] | None = None,
    topics: list[str] | None = None,
    good_first_issues: bool = False,
    sort: str | None = None,
    order: str | None = None,
    per_page: int = 30,
    page: int = 1,
) -> dict[str, object]:
    """Search GitHub repositories without scoring or enrichment.

    Pass either a raw GitHub search query (e.g. "language:rust topic:cli")
    or structured filters, which are turned into a query.

    Args:
        query: Raw GitHub search syntax. Takes precedence over filters.
        languages: Languages to OR together.
        min_stars: Minimum star count.
        max_stars: Maximum star count.
        has_issues: Only repos with issues enabled.
        licenses: SPDX license keys to OR together (e.g. ["mit", "apache-2.0"]).
        topics: Topics the repo must carry.
        good_first_issues: Only repos with open good-first-issues.
        sort: stars | forks | help-wanted-issues | updated (default stars).
        order: asc | desc (default desc).
        per_page: Results per page (1-100, default 30).
        page: 1-based page number.

    Returns:
        Dict with success, query (as sent), total_count and repositories.
    """
    try:
        if sort is not None and sort not in _SORT_OPTIONS:
            raise ValidationError(
                f"Invalid sort '{sort}'. Use one of: {', '.join(sorted(_SORT_OPTIONS))}."
            )
        if order is not None and order not in _ORDER_OPTIONS:
            raise ValidationError(f"Invalid order '{order}'. Use 'asc' or 'desc'.")
        if not 1 <= per_page <= 100:
            raise ValidationError(f"per_page must be between 1 and 100, got {per_page}.")
        if page < 1:
            raise ValidationError(f"page must be a positive integer, got {page}.")

        effective_query = (query or "").strip() or build_advanced_query(
            languages=languages,
            min_stars=min_stars,
            max_stars=max_stars,
            has_issues=has_issues,
            licenses=licenses,
            topics=topics,
            good_first_issues=good_first_issues,
        )

        app = get_context(ctx)
        result = await app.github.search_repositories(
            effective_query,
            sort=sort or "stars",
            order=order or "desc",
            per_page=per_page,
            page=page,
        )
        return {
            "success": True,
            "query": effective_query,
            "total_count": result.total_count,
            "repositories": [
                serialize_repository(Repository.from_api(item)) for item in result.items
            ],
        }
    except GitHubAPIError as exc:
        response: dict[str, object] = {"success": False, "error": str(exc)}
        if exc.rate_limited:
            response["rate_limited"] = True
        return response
    except ContribScoutError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in search_repositories: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
