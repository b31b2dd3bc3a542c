"""Open-source license lookup for repository license identifiers."""

from __future__ import annotations

from contrib_scout.models import LicenseInfo

OPEN_SOURCE_LICENSES: frozenset[str] = frozenset(
    {
        "MIT",
        "Apache-2.0",
        "GPL-3.0",
        "GPL-2.0",
        "BSD-3-Clause",
        "BSD-2-Clause",
        "ISC",
        "MPL-2.0",
        "LGPL-3.0",
        "LGPL-2.1",
        "Unlicense",
        "CC0-1.0",
    }
)

_KNOWN_LICENSES: dict[str, tuple[str, str]] = {
    "MIT": ("MIT License", "https://opensource.org/licenses/MIT"),
    "Apache-2.0": ("Apache License 2.0", "https://opensource.org/licenses/Apache-2.0"),
    "GPL-3.0": ("GNU General Public License v3.0", "https://opensource.org/licenses/GPL-3.0"),
    "BSD-3-Clause": ("BSD 3-Clause License", "https://opensource.org/licenses/BSD-3-Clause"),
    "ISC": ("ISC License", "https://opensource.org/licenses/ISC"),
}


def is_open_source_license(license_id: str | None) -> bool:
    if not license_id:
        return False
    return license_id in OPEN_SOURCE_LICENSES


def get_license_info(license_id: str | None) -> LicenseInfo | None:
    """Describe a license by SPDX id. Returns None when the repo has no license."""
    if not license_id:
        return None
    name, url = _KNOWN_LICENSES.get(license_id, (license_id, ""))
    return LicenseInfo(name=name, url=url, is_open_source=is_open_source_license(license_id))
