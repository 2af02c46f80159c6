"""Shared pytest fixtures and configuration for the aro-deploy test suite.

Guidelines
----------
* No internet access and no real ``az`` binary in any test.
* The Azure CLI is faked at the protocol boundary (:class:`FakeAzureCli`).
* Configuration never leaks in from the developer's environment.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

import pytest

from aro_deploy.config import Settings

_SETTINGS_ENV = (
    "LOCATION",
    "RESOURCEGROUP",
    "CLUSTER",
    "CLUSTER_VERSION",
    "PULL_SECRET_FILE",
    "MASTER_VM_SIZE",
    "WORKER_VM_SIZE",
    "IDENTITY_PROPAGATION_SECONDS",
    "ARO_EXTENSION_URL",
    "HTTP_TIMEOUT_SECONDS",
)


class FakeAzureCli:
    """In-memory :class:`~aro_deploy.core.protocols.AzureCli`.

    Responses are keyed by argument *prefix*; the longest matching
    prefix wins.  A response that is an exception instance is raised.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.outputs: dict[tuple[str, ...], Any] = {}
        self.documents: dict[tuple[str, ...], Any] = {}
        self.probes: dict[tuple[str, ...], bool] = {}

    @staticmethod
    def _match(table: dict[tuple[str, ...], Any], args: tuple[str, ...], default: Any) -> Any:
        best: tuple[str, ...] | None = None
        for prefix in table:
            if args[: len(prefix)] == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return default
        value = table[best]
        if isinstance(value, BaseException):
            raise value
        return value

    def run(self, args: Sequence[str], *, capture: bool = True) -> str:
        key = tuple(args)
        self.calls.append(("run", key))
        return self._match(self.outputs, key, "")

    def run_json(self, args: Sequence[str]) -> Any:
        key = tuple(args)
        self.calls.append(("json", key))
        return self._match(self.documents, key, None)

    def succeeds(self, args: Sequence[str]) -> bool:
        key = tuple(args)
        self.calls.append(("probe", key))
        return self._match(self.probes, key, True)

    # -- assertion helpers ---------------------------------------------

    def commands(self, kind: str = "run") -> list[tuple[str, ...]]:
        return [args for k, args in self.calls if k == kind]

    def called_with_prefix(self, *prefix: str) -> list[tuple[str, ...]]:
        return [args for _k, args in self.calls if args[: len(prefix)] == prefix]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Strip configuration variables and run from an empty directory."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_cli() -> FakeAzureCli:
    return FakeAzureCli()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, identity_propagation_seconds=0)  # type: ignore[call-arg]


@pytest.fixture(autouse=True)
def _restore_logger() -> Iterator[None]:
    """Drop handlers that CLI runs attach to the ``aro_deploy`` logger."""
    logger = logging.getLogger("aro_deploy")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
