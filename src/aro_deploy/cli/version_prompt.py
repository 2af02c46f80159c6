"""Interactive cluster-version selection for the CLI layer.

Shows the versions offered in the target region and lets the user pick
one with questionary's arrow-key selector.  The mapping from the picked
entry back to a version string is delegated to
:func:`~aro_deploy.core.versions.resolve_version_choice`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from aro_deploy.cli.console import console
from aro_deploy.core.versions import resolve_version_choice
from aro_deploy.exceptions import EnvironmentError, VersionSelectionError

KEEP_DEFAULT: str = ""


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _build_choice_label(index: int, version: str) -> str:
    """Label shown in the selector, e.g. ``"  3.  4.16.30"``."""
    return f"{index + 1:>3}.  {version}"


def prompt_cluster_version(available: Sequence[str], default: str) -> str:
    """Ask which of *available* to install, defaulting to *default*.

    Returns
    -------
    str
        The chosen version, or *default* when "keep default" is picked.

    Raises
    ------
    VersionSelectionError
        If the user cancels the prompt (Esc / Ctrl+C).
    """
    questionary = _import_questionary()

    console.print(f"\nAvailable ARO versions ({len(available)}):")
    console.print(f"Current default: {default}\n")

    choices = [questionary.Choice(title=f"Keep default ({default})", value=KEEP_DEFAULT)]
    choices.extend(
        questionary.Choice(title=_build_choice_label(i, version), value=str(i + 1))
        for i, version in enumerate(available)
    )

    selected: str | None = questionary.select(
        "Select the ARO version to install:",
        choices=choices,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()  # Returns None on Ctrl+C / Esc

    if selected is None:
        raise VersionSelectionError(
            "No cluster version selected.",
            hint="Re-run and press Enter to keep the default, or set CLUSTER_VERSION "
            "and pass --no-prompt.",
        )

    return resolve_version_choice(available, selected, default)
