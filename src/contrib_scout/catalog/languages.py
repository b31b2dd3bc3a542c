"""Languages considered close enough to stand in for one another."""

from __future__ import annotations

RELATED_LANGUAGE_GROUPS: tuple[frozenset[str], ...] = (
    frozenset({"javascript", "typescript", "node.js"}),
    frozenset({"python", "python3"}),
    frozenset({"java", "kotlin", "scala"}),
    frozenset({"c", "c++", "cpp"}),
    frozenset({"c#", "csharp", "f#"}),
    frozenset({"ruby", "rails"}),
    frozenset({"php", "laravel"}),
    frozenset({"swift", "objective-c"}),
    frozenset({"rust", "go", "zig"}),
)


def count_related_groups(
    selected: list[str],
    primary: str | None,
    repo_languages: list[str],
) -> int:
    """Count groups that contain both a selected language and one of the repo's.

    All inputs are expected lower-cased.
    """
    matches = 0
    for group in RELATED_LANGUAGE_GROUPS:
        has_selected = any(lang in group for lang in selected)
        has_repo = (primary is not None and primary in group) or any(
            lang in group for lang in repo_languages
        )
        if has_selected and has_repo:
            matches += 1
    return matches
