"""Domain models for contrib-scout. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum

# ─── Enumerations ─────────────────────────────────────────────


class Maturity(StrEnum):
    EARLY_STAGE = "early-stage"
    GROWING = "growing"
    MATURE = "mature"


class SearchMode(StrEnum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


# ─── README Analysis ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ReadmeAnalysis:
    """Heuristic assessment of how welcoming a README is to contributors."""

    is_contribution_friendly: bool = False
    contribution_score: float = 0.0
    reasons: list[str] = field(default_factory=list)
    contribution_types: list[str] = field(default_factory=list)
    has_contributing_section: bool = False
    has_issues_section: bool = False
    has_license: bool = False

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


# ─── Catalog ──────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ContributionType:
    """A kind of contribution a developer can look for (docs, bug-fix, ...)."""

    id: str
    label: str
    description: str = ""
    keywords: list[str] = field(default_factory=list)


# ─── Scoring ──────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RepositoryScore:
    """Breakdown of the composite relevance score for one repository."""

    language_match: float
    contribution_type_match: float
    activity: float
    beginner_friendly: float
    readme_boost: float
    total: float
    maturity: Maturity


# ─── Repository ───────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Repository:
    """A GitHub repository as returned by search, optionally enriched."""

    id: int
    name: str
    full_name: str
    owner: str = ""
    description: str | None = None
    html_url: str = ""
    language: str | None = None
    languages: dict[str, int] = field(default_factory=dict)
    topics: list[str] = field(default_factory=list)
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    has_issues: bool = False
    created_at: str = ""
    updated_at: str = ""
    pushed_at: str = ""
    license: str | None = None
    archived: bool | None = None
    disabled: bool | None = None
    # Enrichment
    has_contributing_guide: bool = False
    good_first_issues_count: int = 0
    readme_analysis: ReadmeAnalysis | None = None
    score: float | None = None
    score_breakdown: RepositoryScore | None = None
    maturity: Maturity | None = None

    @property
    def owner_and_name(self) -> tuple[str, str]:
        """Split ``full_name`` into ``(owner, name)``."""
        owner, _, name = self.full_name.partition("/")
        return owner or self.owner, name or self.name

    @property
    def is_enriched(self) -> bool:
        return self.score is not None

    @classmethod
    def from_api(cls, item: dict) -> Repository:
        """Build a Repository from a raw GitHub search item.

        Tolerant of missing fields -- uses defaults rather than crashing.
        ``archived``/``disabled`` stay None when absent from the payload.
        """
        owner_raw = item.get("owner")
        owner = owner_raw.get("login", "") if isinstance(owner_raw, dict) else ""
        license_raw = item.get("license")
        license_id = None
        if isinstance(license_raw, dict):
            license_id = license_raw.get("spdx_id") or license_raw.get("key")

        full_name = item.get("full_name", "")
        return cls(
            id=int(item.get("id", 0)),
            name=item.get("name") or full_name.rpartition("/")[2],
            full_name=full_name,
            owner=owner or full_name.partition("/")[0],
            description=item.get("description"),
            html_url=item.get("html_url", ""),
            language=item.get("language"),
            topics=list(item.get("topics") or []),
            stargazers_count=int(item.get("stargazers_count") or 0),
            forks_count=int(item.get("forks_count") or 0),
            open_issues_count=int(item.get("open_issues_count") or 0),
            has_issues=bool(item.get("has_issues", False)),
            created_at=item.get("created_at") or "",
            updated_at=item.get("updated_at") or "",
            pushed_at=item.get("pushed_at") or "",
            license=license_id,
            archived=item.get("archived"),
            disabled=item.get("disabled"),
        )

    def to_dict(self) -> dict[str, object]:
        result = asdict(self)
        if self.maturity is not None:
            result["maturity"] = self.maturity.value
        if self.score_breakdown is not None:
            result["score_breakdown"]["maturity"] = self.score_breakdown.maturity.value
        return result


# ─── Search Request/Response ─────────────────────────────────


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """What the caller is looking for. Assumed validated on entry."""

    languages: list[str] = field(default_factory=list)
    contribution_types: list[str] = field(default_factory=list)
    page: int = 1
    limit: int = 30


@dataclass(frozen=True, slots=True)
class LanguageSettings:
    """User-level language preferences applied after scoring."""

    search_mode: SearchMode = SearchMode.INCLUDE
    included_languages: list[str] = field(default_factory=list)
    excluded_languages: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchPage:
    """One page of raw GitHub search results."""

    total_count: int
    items: list[dict] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """Ranked recommendations.

    ``total_count`` is the upstream match count, not ``len(repositories)``.
    """

    repositories: list[Repository] = field(default_factory=list)
    total_count: int = 0
    page: int = 1


# ─── Reporting ────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RepositoryStats:
    """Aggregate numbers over a list of repositories."""

    total_repositories: int = 0
    average_stars: int = 0
    average_forks: int = 0
    languages: dict[str, int] = field(default_factory=dict)
    has_contributing_guide: int = 0
    has_good_first_issues: int = 0


@dataclass(frozen=True, slots=True)
class RateLimitStatus:
    """GitHub API budget as last reported by response headers."""

    remaining: int
    reset_at: datetime | None = None
    has_auth: bool = False
    auth_source: str = "none"  # env | gh_cli | explicit | none

    def to_dict(self) -> dict[str, object]:
        return {
            "remaining": self.remaining,
            "reset_at": self.reset_at.isoformat() if self.reset_at else None,
            "has_auth": self.has_auth,
            "auth_source": self.auth_source,
        }


@dataclass(frozen=True, slots=True)
class LicenseInfo:
    """Human-facing description of a repository license."""

    name: str
    url: str = ""
    is_open_source: bool = False
