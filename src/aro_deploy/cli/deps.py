"""``aro-deploy -x check-deps``: dependency report rendering.

Collects the :class:`~aro_deploy.core.models.DependencyReport` and
renders it as a Rich table (plain-text fallback without Rich).  No
business logic resides here; it purely displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from aro_deploy.cli import exit_codes
from aro_deploy.cli.console import console
from aro_deploy.core.dependency_service import DependencyService
from aro_deploy.core.models import DependencyReport
from aro_deploy.version import __version__


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------

def _python_row() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _report_rows(report: DependencyReport) -> list[tuple[str, str, str]]:
    return [
        (
            check.name,
            check.detail,
            "[green]OK[/green]" if check.ok else "[red]FAIL[/red]",
        )
        for check in report.checks
    ]


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_table(rows: list[tuple[str, str, str]]) -> None:
    """Render the report without Rich."""
    print("\naro-deploy check-deps", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<20} {'Value':<34} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in rows:
        print(f"{label:<20} {value:<34} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def render_report(report: DependencyReport) -> None:
    """Print the report table followed by install guidance for failures."""
    rows = [("aro-deploy", __version__, "[green]OK[/green]"), _python_row()]
    rows.extend(_report_rows(report))

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_table(rows)
        for check in report.checks:
            if not check.ok and check.install_commands:
                print(f"{check.name}: try one of", file=sys.stderr)
                for cmd in check.install_commands:
                    print(f"  {cmd}", file=sys.stderr)
        return

    table = Table(
        title="aro-deploy check-deps",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in rows:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()
    for check in report.checks:
        if not check.ok and check.install_commands:
            console.print(f"[yellow]{check.name}[/yellow]: try one of")
            for cmd in check.install_commands:
                console.print(f"  [bold]{cmd}[/bold]")
            console.print()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_check_deps(service: DependencyService) -> int:
    """Execute the dependency checks and render the summary.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when every requirement is met,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    report = service.check()
    render_report(report)

    if report.satisfied:
        console.print("All dependencies satisfied.")
        return exit_codes.SUCCESS
    console.print("Dependencies missing. Please fix that before proceeding.")
    return exit_codes.GENERAL_ERROR
