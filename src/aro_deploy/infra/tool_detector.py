"""Infrastructure: executable detection and platform install guidance.

Locates required tools on the system PATH and suggests how to install
them when they are missing.

Rules
-----
* Detection via :func:`shutil.which` only; no subprocess.
* No automatic installation.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from pathlib import Path

from aro_deploy.core.models import ToolStatus


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_tool(name: str) -> ToolStatus:
    """Probe the system for executable *name*.

    Returns a :class:`ToolStatus` regardless of whether the tool is
    present; the caller decides whether to abort or merely report.
    """
    result = shutil.which(name)

    if result is not None:
        return ToolStatus(
            name=name,
            found=True,
            path=Path(result).resolve(),
            install_commands=(),
        )

    return ToolStatus(
        name=name,
        found=False,
        path=None,
        install_commands=platform_install_commands(name),
    )


def install_hint(name: str) -> str | None:
    """Multi-line install guidance for *name*, or ``None`` if unknown."""
    commands = platform_install_commands(name)
    if not commands:
        return None
    lines = [f"Install {name} using one of:"]
    lines.extend(f"  {cmd}" for cmd in commands)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

_AZURE_CLI_DOCS = "https://learn.microsoft.com/cli/azure/install-azure-cli"


def platform_install_commands(name: str) -> tuple[str, ...]:
    """Return install commands for *name* appropriate for the current OS."""
    if name != "az":
        return ()
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install -e --id Microsoft.AzureCLI",
            "choco install azure-cli",
        )
    if system == "linux":
        return (
            "curl -sL https://aka.ms/InstallAzureCLIDeb | sudo bash",
            "sudo dnf install azure-cli",
        )
    if system == "darwin":
        return ("brew install azure-cli",)
    return (f"See {_AZURE_CLI_DOCS}",)
