"""Tests for the GitHub REST adapter (github/client.py)."""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import httpx
import pytest

from contrib_scout.errors import GitHubAPIError
from contrib_scout.github import client as client_module
from contrib_scout.github.client import (
    CONTRIBUTING_PATHS,
    GitHubClient,
    build_advanced_query,
    resolve_github_token,
)

# ─── Helpers ─────────────────────────────────────────────────


def _json_response(
    data: object,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json", **(headers or {})},
    )


def _make_client(*responses: httpx.Response | Exception, token: str | None = None) -> GitHubClient:
    http = AsyncMock(spec=httpx.AsyncClient)
    if len(responses) == 1 and isinstance(responses[0], httpx.Response):
        http.get = AsyncMock(return_value=responses[0])
    else:
        http.get = AsyncMock(side_effect=list(responses))
    return GitHubClient(http, token=token)


def _sent_headers(client: GitHubClient) -> dict[str, str]:
    return client._http.get.call_args.kwargs["headers"]


# ─── Auth ────────────────────────────────────────────────────


class TestAuth:
    async def test_explicit_token_sent_as_bearer(self) -> None:
        client = _make_client(_json_response({"Python": 1}), token="abc123")
        await client.get_repository_languages("acme", "widget")
        headers = _sent_headers(client)
        assert headers["Authorization"] == "Bearer abc123"
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert client.rate_limit_status().auth_source == "explicit"

    async def test_no_token_sends_no_authorization(self) -> None:
        client = _make_client(_json_response({}))
        await client.get_repository_languages("acme", "widget")
        assert "Authorization" not in _sent_headers(client)
        status = client.rate_limit_status()
        assert status.has_auth is False
        assert status.auth_source == "none"

    async def test_env_token_used(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", " envtok ")
        client = _make_client(_json_response({}))
        await client.get_repository_languages("acme", "widget")
        assert _sent_headers(client)["Authorization"] == "Bearer envtok"
        assert client.rate_limit_status().auth_source == "env"

    def test_gh_cli_fallback_resolved_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[int] = []

        def fake_gh() -> str:
            calls.append(1)
            return "ghtok"

        monkeypatch.setattr(client_module, "_resolve_gh_cli_token", fake_gh)
        assert resolve_github_token() == ("ghtok", "gh_cli")
        assert resolve_github_token() == ("ghtok", "gh_cli")
        assert len(calls) == 1

    def test_env_takes_precedence_over_gh_cli(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(client_module, "_resolve_gh_cli_token", lambda: "ghtok")
        monkeypatch.setenv("GITHUB_TOKEN", "envtok")
        assert resolve_github_token() == ("envtok", "env")


# ─── Rate limit ──────────────────────────────────────────────


class TestRateLimit:
    async def test_headers_recorded(self) -> None:
        resp = _json_response(
            {},
            headers={"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1700000000"},
        )
        client = _make_client(resp)
        await client.get_repository_languages("acme", "widget")
        status = client.rate_limit_status()
        assert status.remaining == 42
        assert status.reset_at == datetime.fromtimestamp(1700000000, tz=UTC)

    def test_defaults_before_any_request(self) -> None:
        status = _make_client(_json_response({})).rate_limit_status()
        assert status.remaining == 5000
        assert status.reset_at is None


# ─── Search ──────────────────────────────────────────────────


class TestSearchRepositories:
    async def test_parses_page(self) -> None:
        data = {"total_count": 2, "items": [{"id": 1}, {"id": 2}]}
        client = _make_client(_json_response(data))
        page = await client.search_repositories("language:python", sort="updated", page=2)
        assert page.total_count == 2
        assert [item["id"] for item in page.items] == [1, 2]

        params = client._http.get.call_args.kwargs["params"]
        assert params == {
            "q": "language:python",
            "sort": "updated",
            "order": "desc",
            "per_page": 30,
            "page": 2,
        }

    async def test_per_page_capped(self) -> None:
        client = _make_client(_json_response({"total_count": 0, "items": []}))
        await client.search_repositories("x", per_page=500)
        assert client._http.get.call_args.kwargs["params"]["per_page"] == 100

    async def test_rate_limited_403(self) -> None:
        resp = _json_response(
            {"message": "API rate limit exceeded"},
            status_code=403,
            headers={"X-RateLimit-Remaining": "0"},
        )
        client = _make_client(resp)
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.search_repositories("x")
        assert exc_info.value.rate_limited is True
        assert exc_info.value.status_code == 403
        assert client.rate_limit_status().remaining == 0

    async def test_secondary_rate_limit_429(self) -> None:
        client = _make_client(_json_response({}, status_code=429))
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.search_repositories("x")
        assert exc_info.value.rate_limited is True

    async def test_server_error_not_rate_limited(self) -> None:
        client = _make_client(_json_response({}, status_code=500))
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.search_repositories("x")
        assert exc_info.value.rate_limited is False
        assert exc_info.value.status_code == 500

    async def test_network_error(self) -> None:
        client = _make_client(httpx.ConnectError("Connection failed"))
        with pytest.raises(GitHubAPIError, match="Failed to search GitHub"):
            await client.search_repositories("x")


# ─── Repository lookups ──────────────────────────────────────


class TestRepositoryDetails:
    async def test_returns_raw_object(self) -> None:
        client = _make_client(_json_response({"id": 7, "full_name": "acme/widget"}))
        data = await client.get_repository_details("acme", "widget")
        assert data["id"] == 7
        url = client._http.get.call_args.args[0]
        assert url == "https://api.github.com/repos/acme/widget"

    async def test_not_found_raises(self) -> None:
        client = _make_client(_json_response({"message": "Not Found"}, status_code=404))
        with pytest.raises(GitHubAPIError, match="HTTP 404") as exc_info:
            await client.get_repository_details("acme", "missing")
        assert exc_info.value.status_code == 404


class TestLanguages:
    async def test_breakdown(self) -> None:
        client = _make_client(_json_response({"Python": 1200, "Shell": 30}))
        assert await client.get_repository_languages("acme", "widget") == {
            "Python": 1200,
            "Shell": 30,
        }

    async def test_not_found_is_empty(self) -> None:
        client = _make_client(_json_response({}, status_code=404))
        assert await client.get_repository_languages("acme", "widget") == {}

    async def test_network_error_is_empty(self) -> None:
        client = _make_client(httpx.ConnectError("down"))
        assert await client.get_repository_languages("acme", "widget") == {}


class TestContributingGuide:
    async def test_found_at_second_path(self) -> None:
        client = _make_client(
            _json_response({}, status_code=404),
            _json_response({"name": "CONTRIBUTING", "type": "file"}),
        )
        assert await client.check_contributing_guide("acme", "widget") is True
        assert client._http.get.await_count == 2

    async def test_not_found_anywhere(self) -> None:
        client = _make_client(*[_json_response({}, status_code=404)] * len(CONTRIBUTING_PATHS))
        assert await client.check_contributing_guide("acme", "widget") is False
        assert client._http.get.await_count == len(CONTRIBUTING_PATHS)


class TestReadme:
    async def test_decodes_base64(self) -> None:
        encoded = base64.b64encode("# Héllo\n".encode()).decode()
        client = _make_client(_json_response({"content": encoded, "encoding": "base64"}))
        assert await client.get_readme_content("acme", "widget") == "# Héllo\n"

    async def test_missing_readme(self) -> None:
        client = _make_client(_json_response({}, status_code=404))
        assert await client.get_readme_content("acme", "widget") is None

    async def test_directory_listing_skipped(self) -> None:
        encoded = base64.b64encode(b"readme text").decode()
        client = _make_client(
            _json_response([{"name": "README.md"}]),
            _json_response({"content": encoded}),
        )
        assert await client.get_readme_content("acme", "widget") == "readme text"


class TestGoodFirstIssues:
    async def test_labels_joined(self) -> None:
        client = _make_client(_json_response([{"number": 1}, {"number": 2}]))
        issues = await client.get_good_first_issues("acme", "widget")
        assert len(issues) == 2
        params = client._http.get.call_args.kwargs["params"]
        assert params["labels"] == "good first issue,good-first-issue,beginner-friendly,easy"
        assert params["per_page"] == 10
        assert params["state"] == "open"

    async def test_error_is_empty(self) -> None:
        client = _make_client(_json_response({"message": "gone"}, status_code=410))
        assert await client.get_good_first_issues("acme", "widget") == []


# ─── Query builder ───────────────────────────────────────────


class TestBuildAdvancedQuery:
    def test_minimal(self) -> None:
        assert build_advanced_query() == "is:public archived:false"

    def test_all_filters(self) -> None:
        query = build_advanced_query(
            languages=["Python", "Rust"],
            min_stars=10,
            max_stars=500,
            has_issues=True,
            licenses=["MIT"],
            topics=["cli"],
            good_first_issues=True,
        )
        assert query == (
            "(language:python OR language:rust) stars:>=10 stars:<=500 has:issues "
            "(license:mit) topic:cli good-first-issues:>0 is:public archived:false"
        )
