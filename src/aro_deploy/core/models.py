"""Domain models for aro-deploy.

All models are **frozen** dataclasses; immutable value objects with no
behaviour beyond data access.  Azure owns the lifecycle of the real
resources; these only describe what we ask for and what we read back.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Dependency report
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DependencyStatus:
    """Result of one dependency probe."""

    name: str
    """Component label (e.g. ``az``, ``azure-cli version``)."""

    ok: bool
    """Whether the requirement is satisfied."""

    detail: str
    """Human-readable value (path, version, or reason)."""

    install_commands: tuple[str, ...] = ()
    """Suggested commands to fix a failed requirement."""


@dataclass(frozen=True, slots=True)
class DependencyReport:
    """Ordered collection of :class:`DependencyStatus` entries."""

    checks: tuple[DependencyStatus, ...]

    @property
    def satisfied(self) -> bool:
        return all(check.ok for check in self.checks)

    def __len__(self) -> int:
        return len(self.checks)


@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of locating an executable on ``PATH``."""

    name: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Quota
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class QuotaUsage:
    """Current usage and limit of one VM family in a region."""

    current: int
    limit: int

    @property
    def measurable(self) -> bool:
        """``True`` when the numbers can be compared meaningfully."""
        return self.current >= 0 and self.limit >= self.current

    @property
    def available(self) -> int:
        return self.limit - self.current


# ---------------------------------------------------------------------------
# Role assignment plan
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RoleAssignment:
    """One ``az role assignment create`` call to issue.

    ``assignee`` is a managed-identity name, or ``None`` when the
    assignee is the ARO resource provider's first-party principal.
    """

    assignee: str | None
    role_definition_id: str
    scope: str


# ---------------------------------------------------------------------------
# Cluster read-back
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ClusterInfo:
    """Subset of ``az aro show`` output displayed by ``show``."""

    name: str
    resource_group: str
    location: str
    version: str
    console_url: str
    api_server_url: str
    provisioning_state: str


@dataclass(frozen=True, slots=True)
class ClusterCredentials:
    """``kubeadmin`` login returned by ``az aro list-credentials``."""

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class ExtensionUpdate:
    """Outcome of a ``download-ext`` run."""

    installed_before: str | None
    latest: str | None
    installed_after: str | None
    skipped: bool


def json_field(data: Any, *path: str) -> str:
    """Walk *path* through nested dicts the way ``jq -r`` prints it.

    Missing keys and JSON ``null`` render as ``"null"``; other non-string
    values are printed as compact JSON (``true``, ``3``, ``{...}``).
    """
    node: Any = data
    for key in path:
        if not isinstance(node, dict):
            return "null"
        node = node.get(key)
    if isinstance(node, str):
        return node
    return json.dumps(node)

