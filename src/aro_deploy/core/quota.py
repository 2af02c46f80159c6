"""Pure quota arithmetic for the cluster's VM family."""

from __future__ import annotations

from typing import Any

from aro_deploy.core.models import QuotaUsage

QUOTA_FAMILY: str = "standardDSv5Family"
QUOTA_FAMILY_DISPLAY: str = "Standard DSv5 Family"
REQUIRED_CORES: int = 44


def usage_query(family: str = QUOTA_FAMILY) -> str:
    """JMESPath filter passed to ``az vm list-usage --query``."""
    return f"[?contains(name.value, '{family}')]"


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return -1


def parse_quota_usage(entries: Any) -> QuotaUsage:
    """Read ``currentValue``/``limit`` of the first usage entry.

    Missing entries or fields count as ``0``; unreadable numbers as
    ``-1`` so the result is reported as not measurable.
    """
    first: Any = entries[0] if isinstance(entries, list) and entries else {}
    if not isinstance(first, dict):
        first = {}
    return QuotaUsage(
        current=_as_int(first.get("currentValue")),
        limit=_as_int(first.get("limit")),
    )


def has_capacity(usage: QuotaUsage, required: int = REQUIRED_CORES) -> bool:
    return usage.available >= required
