"""Infrastructure layer: external system integration.

This layer wraps all interaction with the ``az`` executable, the
operating system PATH, and HTTP downloads.  Every raw third-party or OS
exception must be caught here and re-raised as an
:class:`~aro_deploy.exceptions.AroDeployError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from aro_deploy.infra.az_cli import AzCli
from aro_deploy.infra.extension_downloader import HttpExtensionSource
from aro_deploy.infra.tool_detector import detect_tool, install_hint

__all__: list[str] = [
    "AzCli",
    "HttpExtensionSource",
    "detect_tool",
    "install_hint",
]
