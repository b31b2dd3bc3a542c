"""Shared test fixtures."""

from __future__ import annotations

import pytest

from contrib_scout.github.client import reset_auth_state


@pytest.fixture(autouse=True)
def _reset_github_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    """Forget resolved tokens and keep tests off the real `gh` CLI."""
    reset_auth_state()
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr("contrib_scout.github.client._resolve_gh_cli_token", lambda: None)
