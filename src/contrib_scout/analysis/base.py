"""Port: README contribution-friendliness analysis."""

from __future__ import annotations

from typing import Protocol

from contrib_scout.models import ReadmeAnalysis


class ReadmeAnalyzerPort(Protocol):
    """Port for scoring README text for contribution friendliness."""

    def analyze(self, readme: str | None) -> ReadmeAnalysis:
        """Analyze README markdown. Must be deterministic for identical input."""
        ...
