"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``, usage) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from aro_deploy.exceptions import EnvironmentError

# 12-hour clock, e.g. ``[03:41:07 PM]``.
LOG_TIME_FORMAT: str = "[%I:%M:%S %p]"

_HANDLER_MARKER = "_aro_deploy_handler"


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


def escape_markup(text: object) -> str:
    """Escape Rich markup in *text*; plain ``str`` when Rich is absent."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return str(text)
    return escape(str(text))


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(message)s", datefmt=LOG_TIME_FORMAT),
        )
        return handler

    handler = RichHandler(
        console=get_rich_console(),
        show_level=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
        log_time_format=LOG_TIME_FORMAT,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach one stderr handler to the ``aro_deploy`` logger.

    Safe to call repeatedly: a previously installed handler is replaced.
    """
    logger = logging.getLogger("aro_deploy")
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)

    handler = _build_handler()
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
