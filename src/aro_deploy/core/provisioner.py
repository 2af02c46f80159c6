"""Core provisioning service: drives the cluster lifecycle.

Every step is a short, fixed sequence of ``az`` calls issued through
an injected :class:`~aro_deploy.core.protocols.AzureCli`.  Steps run
strictly in order; the first failing command aborts the run with the
:class:`~aro_deploy.exceptions.AzureCliError` raised by the runner.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from aro_deploy.config import Settings
from aro_deploy.core import quota, topology
from aro_deploy.core.models import (
    ClusterCredentials,
    ClusterInfo,
    QuotaUsage,
    RoleAssignment,
    json_field,
)
from aro_deploy.core.protocols import AzureCli
from aro_deploy.core.versions import parse_version_list
from aro_deploy.exceptions import AzureCliError, ClusterNotFoundError, QuotaExceededError

LOG = logging.getLogger(__name__)

VersionSelector = Callable[[Sequence[str], str], str]
"""Given the offered versions and the default, return the version to install."""


def keep_default_version(_available: Sequence[str], default: str) -> str:
    return default


class ClusterProvisioner:
    """Create, inspect and delete one ARO cluster.

    Parameters
    ----------
    cli:
        Any object satisfying the :class:`AzureCli` protocol.
    settings:
        Cluster parameters (location, names, version, VM sizes).
    sleep:
        Blocking pause used for identity propagation.
    """

    def __init__(
        self,
        cli: AzureCli,
        settings: Settings,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cli: AzureCli = cli
        self._settings: Settings = settings
        self._sleep: Callable[[float], None] = sleep

    @property
    def _rg(self) -> str:
        return self._settings.resourcegroup

    # ------------------------------------------------------------------
    # Install pipeline
    # ------------------------------------------------------------------

    def install(self, select_version: VersionSelector = keep_default_version) -> str:
        """Run every provisioning step and return the installed version."""
        self.register_providers()
        self.validate_quota()
        self.create_resource_group()
        self.create_network()
        self.create_identities()
        self.wait_for_identity_propagation()
        version = self.select_version(select_version)
        self.assign_roles()
        self.create_cluster(version)
        return version

    def register_providers(self) -> None:
        LOG.info("Registering resource providers...")
        for provider in topology.RESOURCE_PROVIDERS:
            LOG.info("  Registering %s", provider)
            self._cli.run(["provider", "register", "-n", provider, "--wait"])
        LOG.info("Resource providers registered")

    def validate_quota(self) -> QuotaUsage:
        """Ensure the region has room for the cluster's vCPUs.

        Raises
        ------
        QuotaExceededError
            When fewer than :data:`quota.REQUIRED_CORES` cores are free.
        """
        LOG.info("Validating quota requirements...")
        entries = self._cli.run_json(
            [
                "vm", "list-usage",
                "-l", self._settings.location,
                "--query", quota.usage_query(),
            ],
        )
        usage = quota.parse_quota_usage(entries)

        if not usage.measurable:
            LOG.warning(
                "Cannot validate quota for %s in %s",
                quota.QUOTA_FAMILY_DISPLAY,
                self._settings.location,
            )
            return usage

        if not quota.has_capacity(usage):
            LOG.error(
                "Insufficient quota: Need %d cores, available: %d",
                quota.REQUIRED_CORES,
                usage.available,
            )
            raise QuotaExceededError(
                f"Insufficient quota: need {quota.REQUIRED_CORES} cores, "
                f"available: {usage.available}",
                hint=f"Request quota increase for {quota.QUOTA_FAMILY_DISPLAY} vCPUs "
                f"in {self._settings.location}.",
            )

        LOG.info("Quota validation passed: %d cores available", usage.available)
        return usage

    def create_resource_group(self) -> None:
        LOG.info("Creating resource group %s in %s", self._rg, self._settings.location)
        self._cli.run(
            ["group", "create", "--location", self._settings.location, "--name", self._rg],
        )

    def create_network(self) -> None:
        LOG.info("Creating virtual network and subnets...")
        self._cli.run(
            [
                "network", "vnet", "create",
                "--resource-group", self._rg,
                "--name", topology.VNET_NAME,
                "--address-prefixes", topology.VNET_ADDRESS_PREFIX,
            ],
        )
        for subnet, prefix in topology.SUBNETS:
            self._cli.run(
                [
                    "network", "vnet", "subnet", "create",
                    "--resource-group", self._rg,
                    "--vnet-name", topology.VNET_NAME,
                    "--name", subnet,
                    "--address-prefixes", prefix,
                ],
            )
        LOG.info("Virtual network created")

    def create_identities(self) -> None:
        LOG.info("Creating managed identities...")
        for identity in topology.IDENTITIES:
            LOG.info("  Creating identity: %s", identity)
            self._cli.run(
                ["identity", "create", "--resource-group", self._rg, "--name", identity],
            )
        LOG.info("Managed identities created")

    def wait_for_identity_propagation(self) -> None:
        seconds = self._settings.identity_propagation_seconds
        LOG.info("Waiting %g seconds for managed identity propagation...", seconds)
        self._sleep(seconds)

    def select_version(self, select_version: VersionSelector) -> str:
        """Offer the region's cluster versions to *select_version*.

        Falls back to the configured version when none are offered.
        """
        default = self._settings.cluster_version
        LOG.info("Fetching available ARO versions for location: %s ...", self._settings.location)
        try:
            output = self._cli.run(
                ["aro", "get-versions", "--location", self._settings.location, "-o", "tsv"],
            )
        except AzureCliError as exc:
            LOG.debug("az aro get-versions failed: %s", exc)
            output = ""

        available = parse_version_list(output)
        if not available:
            LOG.info("Could not fetch available ARO versions. Using default: %s", default)
            return default

        version = select_version(available, default)
        if version == default:
            LOG.info("Using ARO version: %s", version)
        else:
            LOG.info("Selected ARO version: %s", version)
        return version

    def assign_roles(self) -> None:
        LOG.info("Assigning role assignments...")
        subscription = self._cli.run(["account", "show", "--query", "id", "-o", "tsv"])
        plan = topology.build_role_plan(subscription, self._rg)

        principals: dict[str | None, str] = {}
        for assignment in plan:
            if assignment.assignee not in principals:
                principals[assignment.assignee] = self._principal_id(assignment.assignee)
            LOG.info("  Assigning %s", _describe(assignment))
            self._cli.run(
                [
                    "role", "assignment", "create",
                    "--assignee-object-id", principals[assignment.assignee],
                    "--assignee-principal-type", "ServicePrincipal",
                    "--role", topology.role_definition_path(
                        subscription, assignment.role_definition_id,
                    ),
                    "--scope", assignment.scope,
                ],
            )
        LOG.info("Role assignments completed")

    def create_cluster(self, version: str) -> None:
        LOG.info("Creating ARO cluster with managed identities...")
        pull_secret = self._settings.pull_secret_file
        if pull_secret.is_file():
            LOG.info("Using pull secret from %s", pull_secret)
            pull_secret_arg = pull_secret
        else:
            LOG.info(
                "Pull secret file not found: %s (cluster will be created without pull secret)",
                pull_secret,
            )
            pull_secret_arg = None

        self._cli.run(
            topology.build_cluster_create_args(
                resource_group=self._rg,
                cluster=self._settings.cluster,
                version=version,
                master_vm_size=self._settings.master_vm_size,
                worker_vm_size=self._settings.worker_vm_size,
                pull_secret_file=pull_secret_arg,
            ),
            capture=False,
        )
        LOG.info("ARO cluster created successfully")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def cluster_exists(self) -> bool:
        return self._cli.succeeds(self._cluster_args("show"))

    def cluster_info(self) -> ClusterInfo:
        """Read back the cluster's endpoints and state.

        Raises
        ------
        ClusterNotFoundError
            When ``az aro show`` fails for the configured cluster.
        """
        LOG.info("Getting cluster information...")
        if not self.cluster_exists():
            raise ClusterNotFoundError(
                f"Cluster {self._settings.cluster} not found in resource group {self._rg}",
                hint="Check CLUSTER and RESOURCEGROUP, or run 'aro-deploy -x install'.",
            )
        data = self._cli.run_json(self._cluster_args("show"))
        return ClusterInfo(
            name=self._settings.cluster,
            resource_group=self._rg,
            location=self._settings.location,
            version=json_field(data, "clusterProfile", "version"),
            console_url=json_field(data, "consoleProfile", "url"),
            api_server_url=json_field(data, "apiserverProfile", "url"),
            provisioning_state=json_field(data, "provisioningState"),
        )

    def credentials(self) -> ClusterCredentials:
        data = self._cli.run_json(self._cluster_args("list-credentials"))
        return ClusterCredentials(
            username=json_field(data, "kubeadminUsername"),
            password=json_field(data, "kubeadminPassword"),
        )

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Delete the cluster, its identities and the resource group.

        The resource group deletion is issued with ``--no-wait``.
        """
        LOG.info("Destroying ARO cluster and associated resources...")

        if self.cluster_exists():
            LOG.info("Deleting ARO cluster %s", self._settings.cluster)
            self._cli.run([*self._cluster_args("delete"), "--yes"], capture=False)
        else:
            LOG.info("Cluster %s not found, skipping cluster deletion", self._settings.cluster)

        LOG.info("Deleting managed identities...")
        for identity in topology.IDENTITIES:
            args = ["--resource-group", self._rg, "--name", identity]
            if self._cli.succeeds(["identity", "show", *args]):
                LOG.info("  Deleting identity: %s", identity)
                self._cli.run(["identity", "delete", *args])

        LOG.info("Deleting resource group %s", self._rg)
        self._cli.run(["group", "delete", "--name", self._rg, "--yes", "--no-wait"])
        LOG.info("Destruction completed")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _cluster_args(self, verb: str) -> list[str]:
        return ["aro", verb, "--name", self._settings.cluster, "--resource-group", self._rg]

    def _principal_id(self, identity: str | None) -> str:
        if identity is None:
            return self._cli.run(
                [
                    "ad", "sp", "list",
                    "--display-name", topology.ARO_RP_DISPLAY_NAME,
                    "--query", "[0].id",
                    "-o", "tsv",
                ],
            )
        return self._cli.run(
            [
                "identity", "show",
                "--resource-group", self._rg,
                "--name", identity,
                "--query", "principalId",
                "-o", "tsv",
            ],
        )


def _describe(assignment: RoleAssignment) -> str:
    assignee = assignment.assignee or topology.ARO_RP_DISPLAY_NAME
    target = assignment.scope.rsplit("/", 1)[-1]
    return f"{assignee} -> {target}"
