"""analyze_repository tool -- score a single repository in depth."""

from __future__ import annotations

import re

from mcp.server.fastmcp import Context

from contrib_scout.errors import ContribScoutError
from contrib_scout.models import Repository, SearchFilters
from contrib_scout.tools._helpers import get_context, serialize_repository

_FULL_NAME_RE = re.compile(
    r"^(?:https?://github\.com/)?([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+?)(?:\.git)?/?$"
)


def _parse_full_name(value: str) -> tuple[str, str] | None:
    """Accept ``owner/repo`` or a GitHub URL."""
    m = _FULL_NAME_RE.match(value.strip())
    if m:
        return m.group(1), m.group(2)
    return None


async def analyze_repository(
    repository: str,
    ctx: Context,
    languages: list[str] | None = None,
    contribution_types: list[str] | None = None,
) -> dict[str, object]:
    """Explain how contributor-friendly one repository is.

    Use this when the user asks about a specific project ("is X a good
    first project?"). Fetches the repository, its README, contributing
    guide, language breakdown and good first issues, then returns the
    README analysis and full score breakdown.

    Args:
        repository: "owner/repo" or a GitHub URL.
        languages: Optional preferred languages for the language sub-score.
        contribution_types: Optional contribution types for the type sub-score.

    Returns:
        Dict with success and repository (score, score_breakdown, maturity,
        readme_analysis with reasons, license_info).
    """
    try:
        parsed = _parse_full_name(repository)
        if parsed is None:
            return {
                "success": False,
                "error": (
                    f"Could not parse '{repository}'. "
                    "Use 'owner/repo' or https://github.com/owner/repo."
                ),
            }
        owner, name = parsed

        app = get_context(ctx)
        details = await app.github.get_repository_details(owner, name)
        repo = Repository.from_api(details)

        filters = SearchFilters(
            languages=list(languages or []),
            contribution_types=list(contribution_types or []),
        )
        enriched = await app.search_service.enrich_repository(repo, filters)

        return {"success": True, "repository": serialize_repository(enriched)}
    except ContribScoutError as exc:
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        await ctx.error(f"Unexpected error in analyze_repository: {exc}")
        return {"success": False, "error": f"Internal error: {type(exc).__name__}"}
