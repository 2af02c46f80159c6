"""Pure version parsing and comparison helpers.

Covers three unrelated version strings the tool handles:

* the Azure CLI version (minimum-version gate),
* ARO cluster versions offered by ``az aro get-versions``,
* the ARO extension version embedded in the wheel file name.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from urllib.parse import urlparse

MINIMUM_AZURE_CLI_VERSION: str = "2.67.0"

_VERSION_TOKEN = re.compile(r"\d+|[^\d.\-+]+")
_WHEEL_VERSION = re.compile(r"^aro-([0-9][^-]*)-")


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def version_key(version: str) -> tuple[tuple[int, int, str], ...]:
    """Natural sort key: digit runs compare numerically, the rest lexically.

    Mirrors ``sort -V`` closely enough for release numbers:
    ``2.0.10`` sorts after ``2.0.9``.
    """
    key: list[tuple[int, int, str]] = []
    for token in _VERSION_TOKEN.findall(version.strip()):
        if token.isdigit():
            key.append((0, int(token), ""))
        else:
            key.append((1, 0, token))
    return tuple(key)


def meets_minimum(version: str, minimum: str = MINIMUM_AZURE_CLI_VERSION) -> bool:
    """Return ``True`` when *version* is at least *minimum*.

    An empty or unparsable *version* never meets the minimum.
    """
    if not version.strip():
        return False
    return version_key(version) >= version_key(minimum)


# ---------------------------------------------------------------------------
# Cluster versions
# ---------------------------------------------------------------------------

def parse_version_list(tsv: str) -> list[str]:
    """Split ``az aro get-versions -o tsv`` output into a list."""
    return [line.strip() for line in tsv.splitlines() if line.strip()]


def resolve_version_choice(
    available: Sequence[str],
    choice: str | None,
    default: str,
) -> str:
    """Map a user's numbered choice onto *available*.

    *choice* is a 1-based index.  Blank, non-numeric and out-of-range
    choices all fall back to *default*.
    """
    if choice is None:
        return default
    stripped = choice.strip()
    if not stripped.isdigit():
        return default
    index = int(stripped)
    if 1 <= index <= len(available):
        return available[index - 1]
    return default


# ---------------------------------------------------------------------------
# Extension wheel
# ---------------------------------------------------------------------------

def filename_from_url(url: str) -> str:
    """Return the last path segment of *url*."""
    path = urlparse(url).path
    return path.rstrip("/").rsplit("/", 1)[-1]


def extension_version_from_filename(filename: str) -> str | None:
    """Extract ``2.0.5b1`` from ``aro-2.0.5b1-py3-none-any.whl``."""
    match = _WHEEL_VERSION.match(filename)
    if match is None:
        return None
    return match.group(1)
