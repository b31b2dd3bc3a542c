"""Helpers shared by the MCP tools: context access, input validation, serialization."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import Context

from contrib_scout.catalog.licenses import get_license_info
from contrib_scout.errors import ValidationError
from contrib_scout.github.client import GitHubClient
from contrib_scout.models import LanguageSettings, Repository, SearchFilters, SearchMode
from contrib_scout.search.service import RepositorySearchService

if TYPE_CHECKING:
    from contrib_scout.server import AppContext

MAX_LIMIT = 100


def get_context(ctx: Context) -> AppContext:
    """Extract AppContext from FastMCP's lifespan context.

    Raises TypeError if the lifespan context is not an AppContext instance.
    This catches misconfiguration early with a clear error message.
    """
    from contrib_scout.server import AppContext

    app = ctx.request_context.lifespan_context
    if not isinstance(app, AppContext):
        msg = (
            f"Expected AppContext in lifespan_context, got {type(app).__name__}. "
            "Is the server configured with app_lifespan?"
        )
        raise TypeError(msg)
    return app


def service_for(app: AppContext, github_token: str | None) -> RepositorySearchService:
    """Return the shared service, or one bound to a caller-supplied token."""
    if not github_token:
        return app.search_service
    client = GitHubClient(app.http_client, token=github_token)
    return RepositorySearchService(github=client, analyzer=app.readme_analyzer)


def build_filters(
    languages: list[str],
    contribution_types: list[str],
    page: int,
    limit: int,
) -> SearchFilters:
    """Validate recommendation input and build SearchFilters.

    Raises:
        ValidationError: On empty selections or out-of-range paging.
    """
    languages = [lang.strip() for lang in languages if lang and lang.strip()]
    contribution_types = [ct.strip() for ct in contribution_types if ct and ct.strip()]
    if not languages:
        raise ValidationError("At least one language must be selected.")
    if not contribution_types:
        raise ValidationError("At least one contribution type must be selected.")
    if page < 1:
        raise ValidationError(f"page must be a positive integer, got {page}.")
    if not 1 <= limit <= MAX_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}, got {limit}.")
    return SearchFilters(
        languages=languages,
        contribution_types=contribution_types,
        page=page,
        limit=limit,
    )


def build_language_settings(
    search_mode: str | None,
    included_languages: list[str] | None,
    excluded_languages: list[str] | None,
) -> LanguageSettings | None:
    """Build LanguageSettings, or None when no search mode was given."""
    if not search_mode:
        return None
    try:
        mode = SearchMode(search_mode.lower())
    except ValueError:
        raise ValidationError(
            f"Invalid search_mode '{search_mode}'. Use 'include' or 'exclude'."
        ) from None
    return LanguageSettings(
        search_mode=mode,
        included_languages=list(included_languages or []),
        excluded_languages=list(excluded_languages or []),
    )


def serialize_repository(repo: Repository) -> dict[str, object]:
    """Convert a Repository into the dict returned to MCP clients."""
    result = repo.to_dict()
    info = get_license_info(repo.license)
    result["license_info"] = asdict(info) if info else None
    return result
