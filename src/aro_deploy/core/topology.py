"""Pure description of the cluster's network, identities and role plan.

Every function in this module is a **pure** transformation; no I/O,
no side effects, fully deterministic.  The provisioner turns the
values produced here into ``az`` invocations.
"""

from __future__ import annotations

from pathlib import Path

from aro_deploy.core.models import RoleAssignment


# ---------------------------------------------------------------------------
# Network layout
# ---------------------------------------------------------------------------

VNET_NAME: str = "aro-vnet"
VNET_ADDRESS_PREFIX: str = "10.0.0.0/22"
MASTER_SUBNET: str = "master"
WORKER_SUBNET: str = "worker"

SUBNETS: tuple[tuple[str, str], ...] = (
    (MASTER_SUBNET, "10.0.0.0/23"),
    (WORKER_SUBNET, "10.0.2.0/23"),
)


# ---------------------------------------------------------------------------
# Resource providers
# ---------------------------------------------------------------------------

RESOURCE_PROVIDERS: tuple[str, ...] = (
    "Microsoft.RedHatOpenShift",
    "Microsoft.Compute",
    "Microsoft.Storage",
    "Microsoft.Authorization",
)


# ---------------------------------------------------------------------------
# Managed identities
# ---------------------------------------------------------------------------

CLUSTER_IDENTITY: str = "aro-cluster"

# Creation (and deletion) order.
IDENTITIES: tuple[str, ...] = (
    CLUSTER_IDENTITY,
    "cloud-controller-manager",
    "ingress",
    "machine-api",
    "disk-csi-driver",
    "cloud-network-config",
    "image-registry",
    "file-csi-driver",
    "aro-operator",
)

# Identities the cluster identity must be able to federate.
OPERATOR_IDENTITIES: tuple[str, ...] = (
    "aro-operator",
    "cloud-controller-manager",
    "ingress",
    "machine-api",
    "disk-csi-driver",
    "cloud-network-config",
    "image-registry",
    "file-csi-driver",
)

# Order of ``--assign-platform-workload-identity`` flags on ``az aro create``.
PLATFORM_WORKLOAD_IDENTITIES: tuple[str, ...] = (
    "file-csi-driver",
    "cloud-controller-manager",
    "ingress",
    "image-registry",
    "machine-api",
    "cloud-network-config",
    "aro-operator",
    "disk-csi-driver",
)

ARO_RP_DISPLAY_NAME: str = "Azure Red Hat OpenShift RP"


# ---------------------------------------------------------------------------
# Built-in role definition ids
# ---------------------------------------------------------------------------

ROLE_FEDERATED_CREDENTIALS: str = "ef318e2a-8334-4a05-9e4a-295a196c6a6e"
ROLE_CLOUD_CONTROLLER_MANAGER: str = "a1f96423-95ce-4224-ab27-4e3dc72facd4"
ROLE_INGRESS: str = "0336e1d3-7a87-462b-b6db-342b63f7802c"
ROLE_MACHINE_API: str = "0358943c-7e01-48ba-8889-02cc51d78637"
ROLE_NETWORK_OPERATOR: str = "be7a6435-15ae-4171-8f30-4a343eff9e8f"
ROLE_FILE_STORAGE_OPERATOR: str = "0d7aedc0-15fd-4a67-a412-efad370c947e"
ROLE_IMAGE_REGISTRY: str = "8b32b316-c2f5-4ddf-b05b-83dacd2d08b5"
ROLE_SERVICE_OPERATOR: str = "4436bae4-7702-4c84-919b-c4069ff25ee2"
ROLE_NETWORK_CONTRIBUTOR: str = "4d97b98b-1d4f-4787-a291-c67834d212e7"

# (identity, role) pairs scoped to both subnets.
SUBNET_ROLES: tuple[tuple[str, str], ...] = (
    ("cloud-controller-manager", ROLE_CLOUD_CONTROLLER_MANAGER),
    ("ingress", ROLE_INGRESS),
    ("machine-api", ROLE_MACHINE_API),
)

# (identity, role) pairs scoped to the whole virtual network.
VNET_ROLES: tuple[tuple[str, str], ...] = (
    ("cloud-network-config", ROLE_NETWORK_OPERATOR),
    ("file-csi-driver", ROLE_FILE_STORAGE_OPERATOR),
    ("image-registry", ROLE_IMAGE_REGISTRY),
)


# ---------------------------------------------------------------------------
# Resource id builders
# ---------------------------------------------------------------------------

def role_definition_path(subscription_id: str, role_id: str) -> str:
    return (
        f"/subscriptions/{subscription_id}/providers/"
        f"Microsoft.Authorization/roleDefinitions/{role_id}"
    )


def identity_scope(subscription_id: str, resource_group: str, identity: str) -> str:
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/Microsoft.ManagedIdentity/userAssignedIdentities/{identity}"
    )


def vnet_scope(subscription_id: str, resource_group: str) -> str:
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/Microsoft.Network/virtualNetworks/{VNET_NAME}"
    )


def subnet_scope(subscription_id: str, resource_group: str, subnet: str) -> str:
    return f"{vnet_scope(subscription_id, resource_group)}/subnets/{subnet}"


# ---------------------------------------------------------------------------
# Role assignment plan
# ---------------------------------------------------------------------------

def build_role_plan(subscription_id: str, resource_group: str) -> list[RoleAssignment]:
    """Return every role assignment the cluster needs, in issue order.

    1. The cluster identity over each operator identity.
    2. Subnet-level roles (master then worker) for network-facing operators.
    3. VNet-level roles for the remaining operators.
    4. The ARO operator on both subnets.
    5. The ARO resource provider principal on the VNet.
    """
    plan: list[RoleAssignment] = [
        RoleAssignment(
            assignee=CLUSTER_IDENTITY,
            role_definition_id=ROLE_FEDERATED_CREDENTIALS,
            scope=identity_scope(subscription_id, resource_group, identity),
        )
        for identity in OPERATOR_IDENTITIES
    ]

    subnets = (MASTER_SUBNET, WORKER_SUBNET)
    for identity, role in SUBNET_ROLES:
        plan.extend(
            RoleAssignment(
                assignee=identity,
                role_definition_id=role,
                scope=subnet_scope(subscription_id, resource_group, subnet),
            )
            for subnet in subnets
        )

    vnet = vnet_scope(subscription_id, resource_group)
    plan.extend(
        RoleAssignment(assignee=identity, role_definition_id=role, scope=vnet)
        for identity, role in VNET_ROLES
    )

    plan.extend(
        RoleAssignment(
            assignee="aro-operator",
            role_definition_id=ROLE_SERVICE_OPERATOR,
            scope=subnet_scope(subscription_id, resource_group, subnet),
        )
        for subnet in subnets
    )

    plan.append(
        RoleAssignment(
            assignee=None,
            role_definition_id=ROLE_NETWORK_CONTRIBUTOR,
            scope=vnet,
        )
    )
    return plan


# ---------------------------------------------------------------------------
# ``az aro create`` arguments
# ---------------------------------------------------------------------------

def build_cluster_create_args(
    *,
    resource_group: str,
    cluster: str,
    version: str,
    master_vm_size: str,
    worker_vm_size: str,
    pull_secret_file: Path | None,
) -> list[str]:
    """Assemble the argument list for ``az aro create``.

    ``--pull-secret`` is emitted only when *pull_secret_file* is given.
    """
    args: list[str] = [
        "aro", "create",
        "--resource-group", resource_group,
        "--name", cluster,
        "--vnet", VNET_NAME,
        "--master-subnet", MASTER_SUBNET,
        "--worker-subnet", WORKER_SUBNET,
        "--version", version,
        "--master-vm-size", master_vm_size,
        "--worker-vm-size", worker_vm_size,
        "--enable-managed-identity",
        "--assign-cluster-identity", CLUSTER_IDENTITY,
    ]
    for identity in PLATFORM_WORKLOAD_IDENTITIES:
        args.extend(["--assign-platform-workload-identity", identity, identity])
    if pull_secret_file is not None:
        args.extend(["--pull-secret", f"@{pull_secret_file}"])
    return args
