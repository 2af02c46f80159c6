"""Custom exception hierarchy for aro-deploy.

All exceptions that cross layer boundaries must inherit from
:class:`AroDeployError`.  Raw subprocess, httpx and pydantic errors
must NEVER propagate beyond the layer that produced them; they are
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
AroDeployError
├── ConfigurationError
├── EnvironmentError
├── AzureCliNotFoundError
├── AzureCliError
├── DependencyCheckError
├── ExtensionInstallError
├── QuotaExceededError
├── ClusterNotFoundError
└── VersionSelectionError
"""

from __future__ import annotations

from collections.abc import Sequence


class AroDeployError(Exception):
    """Base exception for all aro-deploy errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(AroDeployError):
    """Raised when an environment variable holds an invalid value."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(AroDeployError):
    """Raised when a required Python package is not available."""


class AzureCliNotFoundError(AroDeployError):
    """Raised when the ``az`` executable cannot be launched."""


class DependencyCheckError(AroDeployError):
    """Raised when the dependency report is not satisfied."""


# --- Azure CLI invocation --------------------------------------------------

class AzureCliError(AroDeployError):
    """Raised when an ``az`` invocation exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.command: tuple[str, ...] = tuple(command)
        self.returncode: int | None = returncode
        self.stderr: str = stderr


class ExtensionInstallError(AroDeployError):
    """Raised when the ARO preview extension cannot be fetched."""


# --- Provisioning ----------------------------------------------------------

class QuotaExceededError(AroDeployError):
    """Raised when the regional vCPU quota cannot host the cluster."""


class ClusterNotFoundError(AroDeployError):
    """Raised when the target cluster does not exist."""


class VersionSelectionError(AroDeployError):
    """Raised when the interactive version prompt is cancelled."""


def append_login_suggestion(hint: str) -> str:
    """Append ``az login`` guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also make sure you are logged in:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    az login",
        )
    )
