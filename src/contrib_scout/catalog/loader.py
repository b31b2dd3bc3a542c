"""Load the contribution-type catalog from YAML files or the built-in preset."""

from __future__ import annotations

import functools
import importlib.resources
import logging
from pathlib import Path

import yaml

from contrib_scout.errors import CatalogError
from contrib_scout.models import ContributionType

logger = logging.getLogger(__name__)

_BUILTIN_PRESET = "contribution_types.yaml"


@functools.cache
def builtin_contribution_types() -> tuple[ContributionType, ...]:
    """Return the bundled contribution types (loaded once per process)."""
    try:
        ref = importlib.resources.files("contrib_scout.catalog") / "presets" / _BUILTIN_PRESET
        text = ref.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise CatalogError("Built-in contribution type catalog not found.") from None
    return tuple(parse_catalog(text, source=f"builtin:{_BUILTIN_PRESET}"))


def load_contribution_types(path: str | Path | None = None) -> list[ContributionType]:
    """Load contribution types from a YAML file, or the built-in preset when path is None.

    Raises:
        CatalogError: If the file is missing or malformed.
    """
    if path is None:
        return list(builtin_contribution_types())

    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
        return parse_catalog(text, source=str(path))
    except CatalogError:
        raise
    except Exception as exc:
        raise CatalogError(f"Failed to parse catalog file '{path}': {exc}") from exc


def get_contribution_type(type_id: str) -> ContributionType | None:
    """Look up a built-in contribution type by id (None when unknown)."""
    for contribution_type in builtin_contribution_types():
        if contribution_type.id == type_id:
            return contribution_type
    return None


def contribution_type_ids() -> list[str]:
    return [ct.id for ct in builtin_contribution_types()]


def parse_catalog(text: str, source: str = "") -> list[ContributionType]:
    """Parse YAML text into ContributionType objects."""
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise CatalogError(f"Invalid catalog format in {source}: expected a YAML mapping.")

    entries = data.get("types", [])
    if not isinstance(entries, list):
        raise CatalogError(f"Invalid catalog format in {source}: 'types' must be a list.")

    types: list[ContributionType] = []
    seen: set[str] = set()
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        type_id = str(entry["id"])
        if type_id in seen:
            logger.warning("Duplicate contribution type '%s' in %s ignored", type_id, source)
            continue
        seen.add(type_id)
        types.append(
            ContributionType(
                id=type_id,
                label=str(entry.get("label", type_id)),
                description=str(entry.get("description", "")),
                keywords=[str(k).lower() for k in entry.get("keywords", [])],
            )
        )
    return types
