"""``aro-deploy -x show``: cluster information and login credentials.

Writes to stdout in a stable ``Key: value`` layout so the output can be
grepped or piped.
"""

from __future__ import annotations

from aro_deploy.cli import exit_codes
from aro_deploy.core.models import ClusterCredentials, ClusterInfo
from aro_deploy.core.provisioner import ClusterProvisioner


def _section(title: str) -> list[str]:
    return ["", title, "=" * len(title)]


def format_cluster(info: ClusterInfo, credentials: ClusterCredentials) -> str:
    lines = _section("Cluster Information:")
    lines.extend(
        [
            f"Name: {info.name}",
            f"Resource Group: {info.resource_group}",
            f"Location: {info.location}",
            f"Version: {info.version}",
            f"Console URL: {info.console_url}",
            f"API Server URL: {info.api_server_url}",
            f"Provisioning State: {info.provisioning_state}",
        ]
    )
    lines.extend(_section("Login Credentials:"))
    lines.extend(
        [
            f"Username: {credentials.username}",
            f"Password: {credentials.password}",
        ]
    )
    return "\n".join(lines)


def run_show(provisioner: ClusterProvisioner) -> int:
    """Print cluster details; :class:`ClusterNotFoundError` propagates."""
    info = provisioner.cluster_info()
    credentials = provisioner.credentials()
    print(format_cluster(info, credentials))
    return exit_codes.SUCCESS
