"""Tests for maturity classification and composite scoring (scoring/scorer.py)."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from contrib_scout.analysis.readme import WELCOMING_REASON
from contrib_scout.models import Maturity, ReadmeAnalysis, Repository
from contrib_scout.scoring.scorer import (
    MATURITY_WEIGHTS,
    activity_score,
    basic_score,
    beginner_friendly_score,
    classify_maturity,
    contribution_type_score,
    days_since,
    language_match_score,
    score_repository,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def _repo(**overrides: object) -> Repository:
    defaults: dict[str, object] = {
        "id": 1,
        "name": "widget",
        "full_name": "acme/widget",
        "owner": "acme",
        "language": "Python",
        "stargazers_count": 10,
        "forks_count": 2,
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": "2024-06-13T00:00:00Z",
    }
    defaults.update(overrides)
    return Repository(**defaults)  # type: ignore[arg-type]


class TestDaysSince:
    def test_parses_zulu_timestamp(self) -> None:
        assert days_since("2024-06-05T12:00:00Z", NOW) == 10

    def test_invalid_returns_none(self) -> None:
        assert days_since("yesterday", NOW) is None
        assert days_since("", NOW) is None


class TestClassifyMaturity:
    def test_young_and_small_is_early_stage(self) -> None:
        repo = _repo(stargazers_count=10, created_at="2024-01-01T00:00:00Z")
        assert classify_maturity(repo, NOW) == Maturity.EARLY_STAGE

    def test_old_and_small_is_growing(self) -> None:
        repo = _repo(stargazers_count=10, created_at="2015-01-01T00:00:00Z")
        assert classify_maturity(repo, NOW) == Maturity.GROWING

    def test_young_and_popular_is_growing(self) -> None:
        repo = _repo(stargazers_count=1000, created_at="2023-12-01T00:00:00Z")
        assert classify_maturity(repo, NOW) == Maturity.GROWING

    def test_old_and_popular_is_mature(self) -> None:
        repo = _repo(stargazers_count=1000, created_at="2015-01-01T00:00:00Z")
        assert classify_maturity(repo, NOW) == Maturity.MATURE

    def test_unparseable_creation_date_is_not_early_stage(self) -> None:
        assert classify_maturity(_repo(stargazers_count=10, created_at="?"), NOW) == Maturity.GROWING
        assert classify_maturity(_repo(stargazers_count=900, created_at=""), NOW) == Maturity.MATURE


class TestWeights:
    @pytest.mark.parametrize("maturity", list(Maturity))
    def test_weights_sum_to_one(self, maturity: Maturity) -> None:
        assert sum(MATURITY_WEIGHTS[maturity].values()) == pytest.approx(1.0)


class TestLanguageMatch:
    def test_related_language_scores_point_three(self) -> None:
        repo = _repo(language="TypeScript")
        score = language_match_score(repo, ["JavaScript"], {"TypeScript": 1000})
        assert score == pytest.approx(0.3)

    def test_primary_match(self) -> None:
        assert language_match_score(_repo(), ["python"], {"Python": 10}) == pytest.approx(0.8)

    def test_primary_and_secondary_match_is_capped(self) -> None:
        score = language_match_score(_repo(), ["python", "rust"], {"Python": 10, "Rust": 5})
        assert score == 1.0

    def test_secondary_only(self) -> None:
        score = language_match_score(_repo(), ["rust"], {"Python": 10, "Rust": 5})
        assert score == pytest.approx(0.4)

    def test_no_selection_is_neutral(self) -> None:
        assert language_match_score(_repo(), [], {}) == pytest.approx(0.8)

    def test_unrelated_language(self) -> None:
        assert language_match_score(_repo(), ["haskell"], {"Python": 10}) == 0.0


class TestContributionTypeScore:
    def test_all_types_matched(self) -> None:
        repo = _repo(description="Great docs and i18n support")
        assert contribution_type_score(repo, ["documentation", "translation"], 0) == 1.0

    def test_unknown_type_counts_against(self) -> None:
        repo = _repo(description="Great docs")
        assert contribution_type_score(repo, ["documentation", "design"], 0) == 0.5

    def test_good_first_issues_count_matches(self) -> None:
        assert contribution_type_score(_repo(), ["good-first-issue"], 3) == 1.0
        assert contribution_type_score(_repo(), ["good-first-issue"], 0) == 0.0

    def test_topics_are_searched(self) -> None:
        repo = _repo(topics=["testing"])
        assert contribution_type_score(repo, ["testing"], 0) == 1.0

    def test_empty_selection(self) -> None:
        assert contribution_type_score(_repo(), [], 0) == 0.0


class TestActivityScore:
    def test_recent_mature_project_is_capped(self) -> None:
        repo = _repo(stargazers_count=1000, updated_at="2024-06-13T00:00:00Z")
        assert activity_score(repo, Maturity.MATURE, NOW) == 1.0

    def test_stale_early_stage_is_halved(self) -> None:
        repo = _repo(forks_count=0, updated_at="2024-03-01T00:00:00Z")
        assert activity_score(repo, Maturity.EARLY_STAGE, NOW) == pytest.approx(0.2)

    def test_fork_bonus_for_early_stage(self) -> None:
        repo = _repo(forks_count=1, updated_at="2024-06-13T00:00:00Z")
        assert activity_score(repo, Maturity.EARLY_STAGE, NOW) == 1.0

    def test_missing_update_date(self) -> None:
        repo = _repo(stargazers_count=0, updated_at="")
        assert activity_score(repo, Maturity.GROWING, NOW) == pytest.approx(0.2)


class TestBeginnerFriendly:
    def test_mature_without_signals_is_zero(self) -> None:
        assert beginner_friendly_score(_repo(), False, 0, None, Maturity.MATURE) == 0.0

    def test_guide_and_issues(self) -> None:
        score = beginner_friendly_score(_repo(), True, 2, None, Maturity.GROWING)
        assert score == pytest.approx(0.8)

    def test_mature_penalty_without_guide_or_issues(self) -> None:
        repo = _repo(topics=["docs"])
        analysis = ReadmeAnalysis(is_contribution_friendly=True, contribution_score=0.5)
        score = beginner_friendly_score(repo, False, 0, analysis, Maturity.MATURE)
        assert score == pytest.approx((0.1 + 0.3) * 0.8)

    def test_early_stage_welcoming_readme_is_clamped(self) -> None:
        analysis = ReadmeAnalysis(
            is_contribution_friendly=True,
            contribution_score=0.6,
            reasons=[WELCOMING_REASON],
        )
        score = beginner_friendly_score(_repo(), True, 0, analysis, Maturity.EARLY_STAGE)
        assert score == 1.0


class TestScoreRepository:
    def test_total_within_bounds(self) -> None:
        analysis = ReadmeAnalysis(
            is_contribution_friendly=True,
            contribution_score=1.0,
            reasons=[WELCOMING_REASON],
            contribution_types=["good-first-issue"],
            has_contributing_section=True,
            has_issues_section=True,
        )
        result = score_repository(
            _repo(created_at="2024-05-01T00:00:00Z", description="docs"),
            selected_languages=["Python"],
            contribution_types=["documentation"],
            languages={"Python": 10},
            has_contributing_guide=True,
            good_first_issues_count=4,
            readme_analysis=analysis,
            now=NOW,
        )
        assert 0.0 <= result.total <= 1.0
        assert result.maturity == Maturity.EARLY_STAGE

    def test_readme_boost_only_when_friendly(self) -> None:
        repo = _repo(stargazers_count=1000, created_at="2015-01-01T00:00:00Z")
        kwargs: dict[str, object] = {
            "selected_languages": ["Python"],
            "contribution_types": ["testing"],
            "languages": {"Python": 10},
            "has_contributing_guide": True,
            "good_first_issues_count": 0,
            "now": NOW,
        }
        friendly = score_repository(
            repo,
            readme_analysis=ReadmeAnalysis(is_contribution_friendly=True, contribution_score=0.5),
            **kwargs,  # type: ignore[arg-type]
        )
        unfriendly = score_repository(
            repo,
            readme_analysis=ReadmeAnalysis(is_contribution_friendly=False, contribution_score=0.5),
            **kwargs,  # type: ignore[arg-type]
        )
        assert friendly.readme_boost == pytest.approx(0.05)
        assert unfriendly.readme_boost == 0.0
        assert friendly.maturity == Maturity.MATURE

    def test_components_are_weighted(self) -> None:
        repo = _repo(stargazers_count=1000, created_at="2015-01-01T00:00:00Z")
        result = score_repository(
            repo,
            selected_languages=["Python"],
            contribution_types=["documentation"],
            languages={"Python": 10},
            has_contributing_guide=False,
            good_first_issues_count=0,
            readme_analysis=None,
            now=NOW,
        )
        weights = MATURITY_WEIGHTS[Maturity.MATURE]
        expected = (
            result.language_match * weights["language"]
            + result.contribution_type_match * weights["contribution_type"]
            + result.activity * weights["activity"]
            + result.beginner_friendly * weights["beginner_friendly"]
        )
        assert result.total == pytest.approx(expected, abs=1e-3)


class TestBasicScore:
    def test_all_signals(self) -> None:
        repo = _repo(
            stargazers_count=100,
            description="A thoroughly documented widget toolkit",
            open_issues_count=3,
            topics=["widgets"],
        )
        assert basic_score(repo, NOW) == 1.0

    def test_minimal_repository(self) -> None:
        repo = _repo(stargazers_count=0, updated_at="", description=None)
        assert basic_score(repo, NOW) == pytest.approx(0.3)

    def test_quarter_old_update(self) -> None:
        repo = _repo(stargazers_count=0, updated_at="2024-04-01T00:00:00Z")
        assert basic_score(repo, NOW) == pytest.approx(0.4)
