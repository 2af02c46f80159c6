"""Subprocess-backed implementation of :class:`~aro_deploy.core.protocols.AzureCli`.

This module is the **only** place in the codebase that launches the
``az`` executable.  ``OSError`` and non-zero exit statuses are caught
here and re-raised as typed
:class:`~aro_deploy.exceptions.AroDeployError` subclasses; nothing
raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from typing import Any

from aro_deploy.exceptions import (
    AzureCliError,
    AzureCliNotFoundError,
    append_login_suggestion,
)
from aro_deploy.infra.tool_detector import install_hint

LOG = logging.getLogger(__name__)


class AzCli:
    """Concrete :class:`AzureCli` that shells out to ``az``.

    Usage::

        cli = AzCli()
        subscription = cli.run(["account", "show", "--query", "id", "-o", "tsv"])

    This class satisfies the :class:`~aro_deploy.core.protocols.AzureCli`
    protocol structurally; no explicit inheritance required.
    """

    # Substrings in az stderr that mean the session is not authenticated.
    _LOGIN_SIGNALS: tuple[str, ...] = (
        "az login",
        "not logged in",
        "interactive authentication is needed",
        "aadsts",
    )

    def __init__(self, executable: str = "az") -> None:
        self._executable: str = executable

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def run(self, args: Sequence[str], *, capture: bool = True) -> str:
        """Run ``az <args>`` and return its stripped stdout.

        Raises
        ------
        AzureCliNotFoundError
            When the executable cannot be launched.
        AzureCliError
            When the command exits with a non-zero status.
        """
        command = self._command(args)
        LOG.debug("$ %s", shlex.join(command))

        try:
            result = subprocess.run(
                command,
                capture_output=capture,
                text=True,
                check=False,
            )
        except OSError as exc:
            self._raise_not_found(exc)

        if result.returncode != 0:
            self._raise_failed(command, result.returncode, result.stderr or "")

        stdout = (result.stdout or "").strip() if capture else ""
        if stdout:
            LOG.debug("%s", stdout)
        return stdout

    def run_json(self, args: Sequence[str]) -> Any:
        """Run ``az <args> -o json`` and decode the output.

        Raises
        ------
        AzureCliError
            When the command fails or prints something that is not JSON.
        """
        output = self.run([*args, "-o", "json"])
        if not output:
            return None
        try:
            return json.loads(output)
        except ValueError as exc:
            raise AzureCliError(
                f"az {_verb(args)} returned invalid JSON",
                command=self._command(args),
            ) from exc

    def succeeds(self, args: Sequence[str]) -> bool:
        """Return ``True`` when ``az <args>`` exits with status 0."""
        command = self._command(args)
        LOG.debug("$ %s (probe)", shlex.join(command))
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            self._raise_not_found(exc)
        return result.returncode == 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _command(self, args: Sequence[str]) -> list[str]:
        # On Windows ``az`` is a ``.cmd`` shim that only which() resolves.
        executable = shutil.which(self._executable) or self._executable
        return [executable, *args]

    def _raise_not_found(self, exc: OSError) -> None:
        raise AzureCliNotFoundError(
            f"Could not run '{self._executable}': {exc.strerror or exc}",
            hint=install_hint(self._executable),
        ) from exc

    @classmethod
    def _raise_failed(cls, command: Sequence[str], returncode: int, stderr: str) -> None:
        """Translate a non-zero exit into :class:`AzureCliError`.

        Always raises.
        """
        detail = _first_error_line(stderr)
        message = f"az {_verb(command[1:])} failed with exit status {returncode}"
        if detail:
            message = f"{message}: {detail}"

        hint: str | None = None
        if any(signal in stderr.lower() for signal in cls._LOGIN_SIGNALS):
            hint = append_login_suggestion("Your Azure CLI session is not authenticated.")

        raise AzureCliError(
            message,
            command=command,
            returncode=returncode,
            stderr=stderr,
            hint=hint,
        )


def _verb(args: Sequence[str]) -> str:
    """Leading non-flag words of *args*, e.g. ``network vnet create``."""
    words: list[str] = []
    for arg in args:
        if arg.startswith("-"):
            break
        words.append(arg)
    return " ".join(words[:3])


def _first_error_line(stderr: str) -> str:
    for line in stderr.splitlines():
        stripped = line.strip()
        if stripped and not stripped.upper().startswith("WARNING"):
            return stripped
    return ""
