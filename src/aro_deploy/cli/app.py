"""CLI application entry point and action routing for aro-deploy.

This module is the **sole error boundary** for the entire application.
It catches :class:`~aro_deploy.exceptions.AroDeployError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here; all work is delegated to the core
  services, wired to the infrastructure adapters.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

from aro_deploy.cli import exit_codes
from aro_deploy.cli.console import configure_logging, console, escape_markup
from aro_deploy.config import USAGE_VARIABLES, Settings, load_settings
from aro_deploy.exceptions import AroDeployError, ConfigurationError
from aro_deploy.version import __version__

if TYPE_CHECKING:
    from aro_deploy.core.dependency_service import DependencyService
    from aro_deploy.core.extension_service import ExtensionService
    from aro_deploy.core.protocols import AzureCli
    from aro_deploy.infra.az_cli import AzCli

LOG = logging.getLogger(__name__)

PROG: str = "aro-deploy"

ACTION_HELP: tuple[tuple[str, str], ...] = (
    ("install", "creates ARO cluster with managed identities"),
    ("destroy", "deletes ARO cluster and associated resources"),
    ("show", "shows cluster information and credentials"),
    ("check-deps", "checks if required dependencies are installed"),
    ("download-ext", "downloads and installs ARO preview extension"),
    ("validate-quota", "checks regional vCPU quota for the cluster"),
)

_ACTION_ALIASES: dict[str, str] = {"validateQuota": "validate-quota"}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Actions are selected with ``-x`` rather than sub-commands so that an
    unknown verb falls through to the usage text.
    """
    verbs = "\n".join(f"    {name:<16}{text}" for name, text in ACTION_HELP)
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Provision, inspect and tear down an Azure Red Hat OpenShift "
        "cluster with managed identities.",
        epilog=f"Possible verbs are:\n{verbs}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-x",
        dest="action",
        metavar="action",
        default=None,
        help="action to be executed.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log every az command line and its output.",
    )
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="keep CLUSTER_VERSION instead of asking which version to install.",
    )
    return parser


def _print_usage(parser: argparse.ArgumentParser) -> None:
    """Print help plus the effective value of each environment variable."""
    parser.print_help()
    print()
    print("Environment variables (with defaults):")
    try:
        settings: Settings | None = load_settings()
    except ConfigurationError:
        settings = None
    for env_name, field in USAGE_VARIABLES:
        if settings is not None:
            value = str(getattr(settings, field))
        else:
            value = os.environ.get(env_name, "")
        print(f"  {env_name}={value}")


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------

def _handle_install(settings: Settings, args: argparse.Namespace) -> int:
    """Full provisioning run.

    Flow:
    1. Verify dependencies.
    2. Bring the ARO preview extension up to date.
    3. Register providers, check quota, create network and identities.
    4. Ask for the cluster version (unless ``--no-prompt`` or no TTY).
    5. Assign roles and create the cluster.
    """
    from aro_deploy.core.provisioner import ClusterProvisioner, keep_default_version

    cli = _az_cli()
    _dependency_service(cli).require()
    _extension_service(cli, settings).update()

    if args.no_prompt or not sys.stdin.isatty():
        selector = keep_default_version
    else:
        from aro_deploy.cli.version_prompt import prompt_cluster_version

        selector = prompt_cluster_version

    ClusterProvisioner(cli, settings).install(selector)

    LOG.info("")
    LOG.info("ARO cluster installation completed!")
    LOG.info("Run '%s -x show' to get cluster information and credentials", PROG)
    return exit_codes.SUCCESS


def _handle_destroy(settings: Settings, _args: argparse.Namespace) -> int:
    from aro_deploy.core.provisioner import ClusterProvisioner

    ClusterProvisioner(_az_cli(), settings).destroy()
    return exit_codes.SUCCESS


def _handle_show(settings: Settings, _args: argparse.Namespace) -> int:
    from aro_deploy.cli.show import run_show
    from aro_deploy.core.provisioner import ClusterProvisioner

    return run_show(ClusterProvisioner(_az_cli(), settings))


def _handle_check_deps(_settings: Settings, _args: argparse.Namespace) -> int:
    from aro_deploy.cli.deps import run_check_deps

    return run_check_deps(_dependency_service(_az_cli()))


def _handle_download_ext(settings: Settings, _args: argparse.Namespace) -> int:
    _extension_service(_az_cli(), settings).update()
    return exit_codes.SUCCESS


def _handle_validate_quota(settings: Settings, _args: argparse.Namespace) -> int:
    from aro_deploy.core.provisioner import ClusterProvisioner

    ClusterProvisioner(_az_cli(), settings).validate_quota()
    return exit_codes.SUCCESS


_HANDLERS: dict[str, Callable[[Settings, argparse.Namespace], int]] = {
    "install": _handle_install,
    "destroy": _handle_destroy,
    "show": _handle_show,
    "check-deps": _handle_check_deps,
    "download-ext": _handle_download_ext,
    "validate-quota": _handle_validate_quota,
}


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def _az_cli() -> AzCli:
    from aro_deploy.infra.az_cli import AzCli

    return AzCli()


def _dependency_service(cli: AzureCli) -> DependencyService:
    from aro_deploy.core.dependency_service import DependencyService
    from aro_deploy.infra.tool_detector import detect_tool

    return DependencyService(cli, detect_tool)


def _extension_service(cli: AzureCli, settings: Settings) -> ExtensionService:
    from aro_deploy.core.extension_service import ExtensionService
    from aro_deploy.infra.extension_downloader import HttpExtensionSource

    source = HttpExtensionSource(
        settings.aro_extension_url,
        timeout=settings.http_timeout_seconds,
    )
    return ExtensionService(cli, source)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the aro-deploy CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    action = _ACTION_ALIASES.get(args.action, args.action) if args.action else None
    handler = _HANDLERS.get(action) if action else None
    if handler is None:
        _print_usage(parser)
        return exit_codes.GENERAL_ERROR

    configure_logging(verbose=args.verbose)
    settings = load_settings()
    return handler(settings, args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except AroDeployError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape_markup(exc)}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape_markup(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape_markup(exc)}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
