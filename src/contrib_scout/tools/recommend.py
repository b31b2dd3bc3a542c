"""recommend_repositories tool -- rank repositories for a developer's preferences."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import Context

from contrib_scout.catalog.loader import contribution_type_ids
from contrib_scout.errors import ContribScoutError, GitHubAPIError
from contrib_scout.tools._helpers import (
    build_filters,
    build_language_settings,
    get_context,
    serialize_repository,
    service_for,
)

logger = logging.getLogger(__name__)


async def recommend_repositories(
    languages: list[str],
    contribution_types: list[str],
    ctx: Context,
    page: int = 1,
    limit: int = 30,
    search_mode: str | None = None,
    included_languages: list[str] | None = None,
    excluded_languages: list[str] | None = None,
    github_token: str | None = None,
) -> dict[str, object]:
    """Recommend open-source repositories to contribute to.

    Use this when the user wants projects to contribute to in particular
    languages. Results are ranked by a heuristic relevance score combining
    language match, contribution-type match, recent activity and
    beginner-friendliness (contributing guide, good first issues, README
    tone), weighted by project maturity.

    Args:
        languages: Preferred languages (e.g. ["Python", "TypeScript"]). Only
            the first is used in the GitHub query; the rest influence scoring.
        contribution_types: One or more of: documentation, translation,
            bug-fix, feature, testing, refactoring, good-first-issue.
        page: GitHub search page to start from (default 1).
        limit: Maximum repositories to return (1-100, default 30).
        search_mode: Optional "include" or "exclude" language post-filter.
        included_languages: Languages a repo must use (include mode).
        excluded_languages: Languages a repo must not use (exclude mode).
        github_token: Optional personal access token to use instead of
            GITHUB_TOKEN / `gh auth token`.

    Returns:
        Dict with success, repositories (each with score, score_breakdown,
        maturity, readme_analysis and license_info), total_count (GitHub's
        match count, not the number returned), page and rate_limit.
    """
    try:
        filters = build_filters(languages, contribution_types, page, limit)
        settings = build_language_settings(search_mode, included_languages, excluded_languages)

        unknown = [ct for ct in filters.contribution_types if ct not in contribution_type_ids()]
        if unknown:
            await ctx.info(f"Ignoring unknown contribution types: {', '.join(unknown)}")

        app = get_context(ctx)
        service = service_for(app, github_token)
        response = await service.search_repositories(filters, settings)

        return {
            "success": True,
            "repositories": [serialize_repository(repo) for repo in response.repositories],
            "total_count": response.total_count,
            "page": response.page,
            "rate_limit": service.github.rate_limit_status().to_dict(),
        }
    except GitHubAPIError as exc:
        result: dict[str, object] = {"success": False, "error": str(exc)}
        if exc.rate_limited:
            result["rate_limited"] = True
            result["error"] = (
                "GitHub API rate limit exceeded. Try again later or provide a github_token."
            )
        return result
    except ContribScoutError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in recommend_repositories: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
