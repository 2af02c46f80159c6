"""Tests for the ``check-deps`` action (cli/deps.py).

The dependency service is mocked; no PATH lookup, no ``az``.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from aro_deploy.cli import exit_codes
from aro_deploy.cli.deps import _python_row, _status_plain, run_check_deps
from aro_deploy.core.models import DependencyReport, DependencyStatus


def _service(*checks: DependencyStatus) -> MagicMock:
    service = MagicMock()
    service.check.return_value = DependencyReport(checks=checks)
    return service


OK_AZ = DependencyStatus(name="az", ok=True, detail="/usr/bin/az")
OK_VERSION = DependencyStatus(name="azure-cli version", ok=True, detail="2.70.0")
MISSING_AZ = DependencyStatus(
    name="az",
    ok=False,
    detail="not found",
    install_commands=("brew install azure-cli",),
)


class TestRows:
    def test_python_row(self) -> None:
        label, value, status = _python_row()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status or "FAIL" in status

    @pytest.mark.parametrize(
        ("markup", "plain"),
        [("[green]OK[/green]", "OK"), ("[red]FAIL[/red]", "FAIL"), ("other", "other")],
    )
    def test_status_plain(self, markup: str, plain: str) -> None:
        assert _status_plain(markup) == plain


class TestRunCheckDeps:
    def test_success(self) -> None:
        assert run_check_deps(_service(OK_AZ, OK_VERSION)) == exit_codes.SUCCESS

    def test_failure(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = run_check_deps(_service(MISSING_AZ, OK_VERSION))
        assert code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "brew install azure-cli" in err
        assert "Dependencies missing" in err

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = run_check_deps(_service(MISSING_AZ, OK_VERSION))
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "aro-deploy check-deps" in err
        assert "FAIL" in err
        assert "brew install azure-cli" in err


class TestCheckDepsRouting:
    @patch("aro_deploy.cli.deps.run_check_deps", return_value=exit_codes.GENERAL_ERROR)
    def test_failure_propagates(self, mock_run: MagicMock) -> None:
        from aro_deploy.cli.app import main

        assert main(["-x", "check-deps"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_called_once()
