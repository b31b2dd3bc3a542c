"""contrib-scout: find open-source repositories worth contributing to."""

from __future__ import annotations

import logging
import os
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version

_LOCAL_VERSION_FALLBACK = "0.0.0+local"
_LOG_LEVEL_ENV = "CONTRIB_SCOUT_LOG_LEVEL"


def _resolve_version() -> str:
    """Resolve package version from installed metadata with deterministic fallback."""
    try:
        return _distribution_version("contrib-scout")
    except PackageNotFoundError:
        return _LOCAL_VERSION_FALLBACK


__version__ = _resolve_version()


def configure_logging() -> None:
    """Send package logs to stderr; stdout is reserved for the MCP stdio channel."""
    level_name = os.environ.get(_LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelNamesMapping().get(level_name, logging.WARNING)
    logging.basicConfig(
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("contrib_scout").setLevel(level)


def main() -> None:
    """Entry point for `contrib-scout` CLI."""
    from contrib_scout.server import mcp

    configure_logging()
    mcp.run(transport="stdio")
