"""Core dependency service: verifies the local toolchain.

Checks that the Azure CLI is on ``PATH`` and recent enough.  Tool
lookup and ``az`` invocation are injected so the service itself stays
free of OS access.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from aro_deploy.core.models import DependencyReport, DependencyStatus, ToolStatus
from aro_deploy.core.protocols import AzureCli
from aro_deploy.core.versions import MINIMUM_AZURE_CLI_VERSION, meets_minimum
from aro_deploy.exceptions import AroDeployError, DependencyCheckError

LOG = logging.getLogger(__name__)

REQUIRED_TOOLS: tuple[str, ...] = ("az",)


class DependencyService:
    """Build a :class:`DependencyReport` for the current machine.

    Parameters
    ----------
    cli:
        Runner used to query ``az version``.
    locate:
        Callable mapping an executable name to a :class:`ToolStatus`.
    """

    def __init__(self, cli: AzureCli, locate: Callable[[str], ToolStatus]) -> None:
        self._cli: AzureCli = cli
        self._locate: Callable[[str], ToolStatus] = locate

    def check(self) -> DependencyReport:
        """Probe every requirement; never raises for a failed probe."""
        LOG.info("Checking dependencies ...")
        checks: list[DependencyStatus] = []

        for name in REQUIRED_TOOLS:
            tool = self._locate(name)
            if tool.found:
                LOG.info("  %s: OK", name)
                checks.append(
                    DependencyStatus(name=name, ok=True, detail=str(tool.path or "found")),
                )
            else:
                LOG.info("  %s: NOT FOUND", name)
                checks.append(
                    DependencyStatus(
                        name=name,
                        ok=False,
                        detail="not found",
                        install_commands=tool.install_commands,
                    ),
                )

        checks.append(self._azure_cli_version_check())
        return DependencyReport(checks=tuple(checks))

    def require(self) -> DependencyReport:
        """Run :meth:`check` and raise when anything is missing.

        Raises
        ------
        DependencyCheckError
            When at least one requirement is unsatisfied.
        """
        report = self.check()
        if not report.satisfied:
            LOG.info("Dependencies missing. Please fix that before proceeding")
            failed = ", ".join(c.name for c in report.checks if not c.ok)
            raise DependencyCheckError(
                f"Dependencies missing: {failed}",
                hint="Run 'aro-deploy -x check-deps' for details.",
            )
        LOG.info("All dependencies satisfied")
        return report

    def _azure_cli_version_check(self) -> DependencyStatus:
        label = "azure-cli version"
        try:
            version = self._cli.run(["version", "--query", '"azure-cli"', "-o", "tsv"])
        except AroDeployError as exc:
            LOG.debug("az version failed: %s", exc)
            version = ""

        if meets_minimum(version, MINIMUM_AZURE_CLI_VERSION):
            LOG.info("  Azure CLI version: %s (OK)", version)
            return DependencyStatus(name=label, ok=True, detail=version)

        LOG.info(
            "  Azure CLI version %s is too old. Minimum required: %s",
            version or "unknown",
            MINIMUM_AZURE_CLI_VERSION,
        )
        return DependencyStatus(
            name=label,
            ok=False,
            detail=f"{version or 'unknown'} (>= {MINIMUM_AZURE_CLI_VERSION} required)",
            install_commands=("az upgrade",),
        )
