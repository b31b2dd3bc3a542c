"""repository_stats tool -- summarize a recommendation result set."""

from __future__ import annotations

from dataclasses import asdict

from mcp.server.fastmcp import Context

from contrib_scout.errors import ContribScoutError
from contrib_scout.filtering.filter import (
    extract_languages,
    filter_repositories,
    get_repository_stats,
    sort_by_relevance,
)
from contrib_scout.tools._helpers import build_filters, get_context, service_for

_TOP_N = 5


async def repository_stats(
    languages: list[str],
    contribution_types: list[str],
    ctx: Context,
    limit: int = 30,
    github_token: str | None = None,
) -> dict[str, object]:
    """Summarize the repositories that would be recommended for a selection.

    Use this to give the user an overview before listing projects: how many
    candidates have contributing guides or good first issues, typical
    popularity, which languages show up, and how many pass the strict
    language/contribution-type/quality filter.

    Args:
        languages: Preferred languages.
        contribution_types: Desired contribution types.
        limit: How many repositories to sample (1-100, default 30).
        github_token: Optional personal access token.

    Returns:
        Dict with success, stats, languages (all languages seen),
        strict_matches (count passing the strict filter) and top
        (full names of the highest ranked strict matches).
    """
    try:
        filters = build_filters(languages, contribution_types, 1, limit)
        app = get_context(ctx)
        service = service_for(app, github_token)
        response = await service.search_repositories(filters)

        strict = sort_by_relevance(filter_repositories(response.repositories, filters))
        return {
            "success": True,
            "stats": asdict(get_repository_stats(response.repositories)),
            "languages": extract_languages(response.repositories),
            "strict_matches": len(strict),
            "top": [repo.full_name for repo in strict[:_TOP_N]],
        }
    except ContribScoutError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in repository_stats: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
