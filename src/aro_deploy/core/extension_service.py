"""Core extension service: keeps the ARO preview extension current.

Compares the installed ``aro`` extension against the wheel behind the
"latest" link and reinstalls only when they differ.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from aro_deploy.core.models import ExtensionUpdate
from aro_deploy.core.protocols import AzureCli, ExtensionSource
from aro_deploy.core.versions import extension_version_from_filename, filename_from_url
from aro_deploy.exceptions import AroDeployError, ExtensionInstallError

LOG = logging.getLogger(__name__)

EXTENSION_NAME: str = "aro"


class ExtensionService:
    """Install the latest ARO preview extension into the Azure CLI.

    Parameters
    ----------
    cli:
        Runner for ``az extension`` commands.
    source:
        Resolves and downloads the extension wheel.
    """

    def __init__(self, cli: AzureCli, source: ExtensionSource) -> None:
        self._cli: AzureCli = cli
        self._source: ExtensionSource = source

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def installed_version(self) -> str | None:
        """Return the installed extension version, or ``None``."""
        try:
            version = self._cli.run(
                [
                    "extension", "list",
                    "--query", f"[?name=='{EXTENSION_NAME}'].version | [0]",
                    "-o", "tsv",
                ],
            )
        except AroDeployError as exc:
            LOG.debug("az extension list failed: %s", exc)
            return None
        return version or None

    def update(self) -> ExtensionUpdate:
        """Download and install the latest wheel unless already current.

        Raises
        ------
        ExtensionInstallError
            When the wheel cannot be resolved or downloaded.
        AzureCliError
            When ``az extension`` remove/add fails.
        """
        LOG.info("Installing ARO preview extension...")

        installed = self.installed_version()
        if installed:
            LOG.info("  ARO extension version %s is currently installed", installed)
        else:
            LOG.info("  No ARO extension found")

        url = self._source.resolve_latest_url()
        LOG.info("  Resolved URL: %s", url)

        filename = filename_from_url(url)
        if not filename:
            raise ExtensionInstallError(
                f"Could not derive a file name from {url}",
            )
        latest = extension_version_from_filename(filename)
        if latest:
            LOG.info("  Latest available version: %s", latest)
        else:
            LOG.info("  Could not determine version from URL")

        if installed and installed == latest:
            LOG.info("  Already have the latest version (%s). Skipping download.", installed)
            return ExtensionUpdate(
                installed_before=installed,
                latest=latest,
                installed_after=installed,
                skipped=True,
            )

        if self._cli.succeeds(["extension", "show", "--name", EXTENSION_NAME]):
            LOG.info("  Removing existing ARO extension version %s", installed or "unknown")
            self._cli.run(["extension", "remove", "--name", EXTENSION_NAME])

        LOG.info("  Downloading ARO preview extension...")
        # The Azure CLI derives the extension name and version from the
        # wheel's file name, so it must be kept as served.
        with tempfile.TemporaryDirectory(prefix="aro-ext-") as tmp:
            wheel = self._source.download(url, Path(tmp) / filename)
            LOG.info("  Installing ARO preview extension")
            self._cli.run(["extension", "add", "--source", str(wheel), "--yes"])

        after = self.installed_version()
        LOG.info(
            "ARO preview extension installed successfully (version: %s)",
            after or "unknown",
        )
        return ExtensionUpdate(
            installed_before=installed,
            latest=latest,
            installed_after=after,
            skipped=False,
        )
