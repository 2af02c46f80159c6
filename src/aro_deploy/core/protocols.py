"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations, so every service can be driven by a fake in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol


class AzureCli(Protocol):
    """Contract for an Azure CLI runner.

    *args* never include the leading ``az``.  Implementations must map
    OS and subprocess failures to
    :class:`~aro_deploy.exceptions.AroDeployError` subclasses.
    """

    def run(self, args: Sequence[str], *, capture: bool = True) -> str:
        """Run ``az <args>`` and return its stripped stdout.

        With ``capture=False`` the output streams to the terminal and
        the empty string is returned.

        Raises
        ------
        AzureCliError
            When the command exits with a non-zero status.
        AzureCliNotFoundError
            When ``az`` cannot be launched.
        """
        ...  # pragma: no cover

    def run_json(self, args: Sequence[str]) -> Any:
        """Run ``az <args> -o json`` and return the decoded document."""
        ...  # pragma: no cover

    def succeeds(self, args: Sequence[str]) -> bool:
        """Return ``True`` when ``az <args>`` exits with status 0.

        Output is discarded; used for existence probes before deletes.
        """
        ...  # pragma: no cover


class ExtensionSource(Protocol):
    """Contract for fetching the ARO preview extension wheel."""

    def resolve_latest_url(self) -> str:
        """Follow redirects of the "latest" link and return the final URL."""
        ...  # pragma: no cover

    def download(self, url: str, destination: Path) -> Path:
        """Write the wheel at *url* to *destination* and return it.

        Raises
        ------
        ExtensionInstallError
            When the HTTP transfer fails.
        """
        ...  # pragma: no cover
