"""MCP server that recommends open-source repositories to contribute to."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from contrib_scout.analysis.base import ReadmeAnalyzerPort
from contrib_scout.analysis.readme import DefaultReadmeAnalyzer
from contrib_scout.github.base import GitHubClientPort
from contrib_scout.github.client import GitHubClient
from contrib_scout.search.service import RepositorySearchService
from contrib_scout.tools.analyze import analyze_repository
from contrib_scout.tools.recommend import recommend_repositories
from contrib_scout.tools.search import search_repositories
from contrib_scout.tools.stats import repository_stats


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations.

    Stateful / I/O adapters are injected here. Pure functions (filtering,
    scoring) remain direct module imports.
    """

    http_client: httpx.AsyncClient
    github: GitHubClientPort
    readme_analyzer: ReadmeAnalyzerPort
    search_service: RepositorySearchService


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage shared adapter lifecycle (composition root)."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(30.0, connect=10.0),
        follow_redirects=True,
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        transport=httpx.AsyncHTTPTransport(retries=3),
    ) as http_client:
        github = GitHubClient(http_client)
        readme_analyzer = DefaultReadmeAnalyzer()
        search_service = RepositorySearchService(github=github, analyzer=readme_analyzer)

        yield AppContext(
            http_client=http_client,
            github=github,
            readme_analyzer=readme_analyzer,
            search_service=search_service,
        )


mcp = FastMCP(
    "contrib-scout",
    instructions=(
        "contrib-scout finds open-source GitHub repositories a developer can "
        "contribute to, based on preferred languages and the kind of "
        "contribution they want to make.\n\n"
        "## When to use contrib-scout\n\n"
        "- The user asks for projects to contribute to, 'good first issues', "
        "or beginner-friendly repositories in some language.\n"
        "- The user asks whether a specific repository is welcoming to new "
        "contributors.\n\n"
        "## Tools\n"
        "1. **recommend_repositories** -- Main entry point. Pass languages and "
        "contribution_types (documentation, translation, bug-fix, feature, "
        "testing, refactoring, good-first-issue). Results are ranked by score; "
        "each carries a score_breakdown and README analysis reasons you can "
        "use to explain the recommendation.\n"
        "2. **analyze_repository** -- Deep-dive one repository (owner/repo).\n"
        "3. **repository_stats** -- Overview of a result set before listing.\n"
        "4. **search_repositories** -- Raw GitHub search, no scoring.\n\n"
        "### Key principles\n"
        "- total_count is GitHub's match count, not the number of recommendations.\n"
        "- Explain WHY a repository fits: contributing guide, good first issues, "
        "recent activity, welcoming README.\n"
        "- If a result says rate_limited, suggest setting GITHUB_TOKEN or "
        "passing github_token."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(recommend_repositories)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(analyze_repository)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(repository_stats)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(search_repositories)
