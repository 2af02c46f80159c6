"""Core / service layer: cluster planning and step orchestration.

Rules
-----
* No ``print()`` calls; progress is reported through :mod:`logging`.
* No direct subprocess or network access; external systems arrive
  through the protocols in :mod:`aro_deploy.core.protocols`.
* No imports from ``cli`` or ``infra``.
"""

from aro_deploy.core.dependency_service import DependencyService
from aro_deploy.core.extension_service import ExtensionService
from aro_deploy.core.models import (
    ClusterCredentials,
    ClusterInfo,
    DependencyReport,
    DependencyStatus,
    ExtensionUpdate,
    QuotaUsage,
    RoleAssignment,
    ToolStatus,
)
from aro_deploy.core.protocols import AzureCli, ExtensionSource
from aro_deploy.core.provisioner import ClusterProvisioner

__all__: list[str] = [
    "AzureCli",
    "ClusterCredentials",
    "ClusterInfo",
    "ClusterProvisioner",
    "DependencyReport",
    "DependencyService",
    "DependencyStatus",
    "ExtensionService",
    "ExtensionSource",
    "ExtensionUpdate",
    "QuotaUsage",
    "RoleAssignment",
    "ToolStatus",
]
