"""Score README text for contribution friendliness and infer contribution types.

Rule-based only: keyword and phrase heuristics, no model calls. The analysis
is a pure function of the text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from contrib_scout.models import ReadmeAnalysis

MIN_README_LENGTH = 100
FRIENDLY_THRESHOLD = 0.3
TOO_SHORT_REASON = "README is too short or missing"

_MAX_RAW_SCORE = 10.0

# ─── Base signal groups ───────────────────────────────────────

_CONTRIBUTION_KEYWORDS: tuple[str, ...] = (
    "contribute",
    "contributing",
    "contribution",
    "contributors",
    "pull request",
    "pr",
    "issue",
    "bug report",
    "help wanted",
    "good first issue",
    "beginner friendly",
    "open source",
    "community",
    "volunteer",
)

_CONTRIBUTING_SECTIONS: tuple[str, ...] = (
    "contributing",
    "contribution",
    "how to contribute",
    "getting involved",
    "development",
    "building",
    "setup",
    "installation for developers",
)

_ISSUE_SECTIONS: tuple[str, ...] = (
    "issues",
    "bug report",
    "reporting bugs",
    "feedback",
    "support",
    "help",
)

_LICENSE_KEYWORDS: tuple[str, ...] = ("license", "mit", "apache", "gpl")

_DEV_SETUP_KEYWORDS: tuple[str, ...] = (
    "npm install",
    "yarn install",
    "pip install",
    "docker",
    "setup",
    "development environment",
    "local development",
    "build from source",
)

_CONDUCT_KEYWORDS: tuple[str, ...] = ("code of conduct", "conduct")

_BADGE_KEYWORDS: tuple[str, ...] = ("badge", "shield", "build status", "coverage", "version")

# ─── Contribution type patterns (word-boundary matched) ───────

_TYPE_PATTERNS: dict[str, tuple[str, ...]] = {
    "bug-fix": (
        "bug", "fix", "issue", "error", "problem", "debug",
        "report bug", "bug report", "reporting issues", "found a bug",
        "troubleshooting", "known issues", "issue tracker",
    ),
    "feature": (
        "feature", "enhancement", "improvement", "new feature",
        "feature request", "roadmap", "planned features",
        "implement", "add support", "extend", "build",
    ),
    "documentation": (
        "docs", "documentation", "readme", "wiki", "guide", "tutorial",
        "api documentation", "user guide", "developer guide",
        "documentation needed", "docs needed", "help with docs",
        "improve documentation", "doc improvements",
    ),
    "testing": (
        "test", "testing", "spec", "coverage", "qa", "quality assurance",
        "unit test", "integration test", "e2e test", "automated testing",
        "need tests", "test coverage", "add tests", "testing help wanted",
    ),
    "translation": (
        "translation", "i18n", "internationalization", "locale", "language",
        "translate", "localization", "multilingual",
        "help translate", "translation needed", "add language support",
    ),
    "refactoring": (
        "refactor", "cleanup", "optimization", "performance", "code quality",
        "modernize", "improve code", "code review", "technical debt",
        "architecture", "restructure",
    ),
    "good-first-issue": (
        "beginner", "good first issue", "easy", "starter", "newcomer",
        "first time", "new contributor", "help wanted", "beginner friendly",
        "contribution welcome", "easy pick", "low hanging fruit",
    ),
}

_TYPE_REGEXES: dict[str, tuple[tuple[str, re.Pattern[str]], ...]] = {
    type_id: tuple(
        (pattern, re.compile(rf"\b{re.escape(pattern)}\b", re.IGNORECASE))
        for pattern in patterns
    )
    for type_id, patterns in _TYPE_PATTERNS.items()
}

# Phrasing that hints at open work even without direct keywords
_IMPLICIT_NEEDS: dict[str, tuple[str, ...]] = {
    "documentation": (
        "todo", "work in progress", "wip", "coming soon",
        "not yet implemented", "placeholder", "stub",
    ),
    "feature": (
        "planned", "roadmap", "future", "wishlist",
        "would like to", "hoping to add", "considering",
    ),
    "testing": (
        "untested", "no tests yet", "testing needed",
        "manual testing", "needs verification",
    ),
    "bug-fix": (
        "known bug", "limitation", "workaround",
        "current issues", "not working", "broken",
    ),
}

# ─── Tone and project-stage signals ───────────────────────────

_WELCOMING_PHRASES: tuple[str, ...] = (
    "welcome", "invite", "encourage", "love to hear",
    "contributions are welcome", "we welcome", "feel free",
    "please contribute", "join us", "get involved",
    "help wanted", "looking for contributors", "seeking help",
)

_DISCOURAGING_PHRASES: tuple[str, ...] = (
    "no contributions", "not accepting", "closed to contributions",
    "maintainers only", "internal use only", "private project",
)

_GROWTH_INDICATORS: tuple[str, ...] = (
    "vision", "goal", "mission", "aims to", "will become",
    "plan to", "working towards", "building",
    "in development", "actively maintained", "regular updates",
    "frequent commits", "ongoing work",
    "community", "team", "contributors", "collaborators",
    "growing project", "early adopters",
    "help needed", "looking for", "seeking", "volunteers",
    "maintainers wanted", "co-maintainers",
)

_INNOVATION_INDICATORS: tuple[str, ...] = (
    "novel", "new approach", "innovative", "unique", "different",
    "alternative to", "better than", "solves", "addresses",
    "experimental", "cutting-edge", "modern",
)

_PASSION_INDICATORS: tuple[str, ...] = (
    "passionate", "love", "excited", "enthusiastic",
    "personal project", "side project", "hobby",
    "weekend project", "created because",
)

_LEARNING_INDICATORS: tuple[str, ...] = (
    "learning", "beginner", "tutorial", "educational",
    "step by step", "learn by doing", "practice",
    "example", "demo", "showcase",
)

WELCOMING_REASON = "Uses welcoming language for contributors"
WORKFLOW_REASON = "Has detailed contribution workflow"
DISCOURAGING_REASON = "Contains discouraging language"


@dataclass(slots=True)
class _Draft:
    """Mutable working state; frozen into a ReadmeAnalysis at the end."""

    score: float = 0.0
    reasons: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    has_contributing_section: bool = False
    has_issues_section: bool = False
    has_license: bool = False
    forced_unfriendly: bool = False

    def adjust(self, delta: float) -> None:
        self.score = max(0.0, min(1.0, self.score + delta))

    def add_type(self, type_id: str) -> bool:
        if type_id in self.types:
            return False
        self.types.append(type_id)
        return True

    @property
    def friendly(self) -> bool:
        return not self.forced_unfriendly and self.score > FRIENDLY_THRESHOLD

    def freeze(self) -> ReadmeAnalysis:
        return ReadmeAnalysis(
            is_contribution_friendly=self.friendly,
            contribution_score=self.score,
            reasons=list(self.reasons),
            contribution_types=list(self.types),
            has_contributing_section=self.has_contributing_section,
            has_issues_section=self.has_issues_section,
            has_license=self.has_license,
        )


def _found(content: str, phrases: tuple[str, ...]) -> list[str]:
    return [phrase for phrase in phrases if phrase in content]


def _has_heading(content: str, section: str) -> bool:
    return f"## {section}" in content or f"# {section}" in content


class DefaultReadmeAnalyzer:
    """Adapter for ReadmeAnalyzerPort -- stateless."""

    def analyze(self, readme: str | None) -> ReadmeAnalysis:
        return analyze_readme(readme)


def analyze_readme(readme: str | None) -> ReadmeAnalysis:
    """Analyze README content for contribution friendliness.

    Runs the base keyword/section scoring, contribution type inference and the
    tone/project-stage adjustments, in that order. ``reasons`` records every
    heuristic that fired, in evaluation order.

    Returns a zero-score analysis when the README is missing or shorter than
    100 characters.
    """
    if not readme or len(readme.strip()) < MIN_README_LENGTH:
        return ReadmeAnalysis(reasons=[TOO_SHORT_REASON])

    content = readme.lower()
    draft = _Draft()

    draft.score = _base_score(content, draft)
    _detect_contribution_types(content, draft)
    _detect_implicit_needs(content, draft)
    _apply_tone_adjustments(content, draft)

    return draft.freeze()


def _base_score(content: str, draft: _Draft) -> float:
    """Weighted keyword/section score out of 10, normalized to [0, 1]."""
    raw = 0.0

    keywords = _found(content, _CONTRIBUTION_KEYWORDS)
    if keywords:
        raw += min(len(keywords) * 0.5, 3.0)
        draft.reasons.append(f"Found {len(keywords)} contribution-related keywords")

    for section in _CONTRIBUTING_SECTIONS:
        if _has_heading(content, section):
            raw += 1.0
            draft.has_contributing_section = True
            draft.reasons.append(f"Has '{section}' section")

    for section in _ISSUE_SECTIONS:
        if _has_heading(content, section):
            raw += 0.5
            draft.has_issues_section = True
            draft.reasons.append(f"Has '{section}' section")

    if _found(content, _LICENSE_KEYWORDS):
        raw += 0.5
        draft.has_license = True
        draft.reasons.append("Has license information")

    if _found(content, _DEV_SETUP_KEYWORDS):
        raw += 1.0
        draft.reasons.append("Has development setup instructions")

    if _found(content, _CONDUCT_KEYWORDS):
        raw += 0.5
        draft.reasons.append("Has code of conduct")

    if _found(content, _BADGE_KEYWORDS):
        raw += 0.5
        draft.reasons.append("Has project status badges")

    return min(raw / _MAX_RAW_SCORE, 1.0)


def _detect_contribution_types(content: str, draft: _Draft) -> None:
    for type_id, regexes in _TYPE_REGEXES.items():
        hits = 0
        matched_patterns = 0
        for _pattern, regex in regexes:
            count = len(regex.findall(content))
            if count:
                hits += count
                matched_patterns += 1
        if hits >= 1 or matched_patterns > 1:
            draft.add_type(type_id)


def _detect_implicit_needs(content: str, draft: _Draft) -> None:
    for type_id, phrases in _IMPLICIT_NEEDS.items():
        if _found(content, phrases) and draft.add_type(type_id):
            draft.reasons.append(f"Detected potential need for {type_id} contributions")


def _apply_tone_adjustments(content: str, draft: _Draft) -> None:
    """Adjust the base score for tone, workflow detail and project stage."""
    if _found(content, _WELCOMING_PHRASES):
        draft.adjust(0.2)
        draft.reasons.append(WELCOMING_REASON)

    if "fork" in content and "pull request" in content and "clone" in content:
        draft.adjust(0.15)
        draft.reasons.append(WORKFLOW_REASON)

    if len(_found(content, _GROWTH_INDICATORS)) > 2:
        draft.adjust(0.15)
        draft.reasons.append("Shows signs of active, growing project seeking contributors")

    if len(_found(content, _INNOVATION_INDICATORS)) > 1:
        draft.adjust(0.1)
        draft.reasons.append("Appears to be innovative or unique project")

    if _found(content, _PASSION_INDICATORS):
        draft.adjust(0.05)
        draft.reasons.append("Appears to be a passion project with engaged maintainer")

    if len(_found(content, _LEARNING_INDICATORS)) > 1:
        draft.add_type("good-first-issue")
        draft.reasons.append("Appears to be educational/learning-friendly project")

    if _found(content, _DISCOURAGING_PHRASES):
        draft.adjust(-0.3)
        draft.forced_unfriendly = True
        draft.reasons.append(DISCOURAGING_REASON)
