"""Smoke tests: verify package wiring.

These tests prove that:
* The CLI entry point is importable and routes every action.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from aro_deploy import __version__
from aro_deploy.cli import app as app_module
from aro_deploy.cli import exit_codes
from aro_deploy.cli.app import cli, main
from aro_deploy.cli.version_prompt import prompt_cluster_version
from aro_deploy.core.provisioner import keep_default_version
from aro_deploy.exceptions import (
    AroDeployError,
    AzureCliError,
    AzureCliNotFoundError,
    ClusterNotFoundError,
    ConfigurationError,
    DependencyCheckError,
    EnvironmentError,
    ExtensionInstallError,
    QuotaExceededError,
    VersionSelectionError,
    append_login_suggestion,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            EnvironmentError,
            AzureCliNotFoundError,
            AzureCliError,
            DependencyCheckError,
            ExtensionInstallError,
            QuotaExceededError,
            ClusterNotFoundError,
            VersionSelectionError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[AroDeployError]) -> None:
        assert issubclass(exc_class, AroDeployError)

    def test_hint_is_stored(self) -> None:
        err = AroDeployError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_azure_cli_error_details(self) -> None:
        err = AzureCliError("failed", command=["az", "x"], returncode=2, stderr="bad")
        assert err.command == ("az", "x")
        assert err.returncode == 2
        assert err.stderr == "bad"
        assert err.hint is None

    def test_login_suggestion_appended_once(self) -> None:
        hint = append_login_suggestion("Session expired.")
        assert hint.startswith("Session expired.")
        assert "az login" in hint
        assert append_login_suggestion(hint) == hint


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestUsage:
    def test_no_args_prints_usage_and_fails(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main([])
        out = capsys.readouterr().out
        assert code == exit_codes.GENERAL_ERROR
        assert "Possible verbs are:" in out
        assert "LOCATION=southeastasia" in out
        assert "CLUSTER_VERSION=4.19.20" in out

    def test_usage_reflects_environment(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("RESOURCEGROUP", "my-rg")
        main([])
        assert "RESOURCEGROUP=my-rg" in capsys.readouterr().out

    def test_unknown_action(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-x", "launch"]) == exit_codes.GENERAL_ERROR
        assert "usage: aro-deploy" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0


class TestRouting:
    @pytest.mark.parametrize(
        ("action", "handler"),
        [
            ("install", "install"),
            ("destroy", "destroy"),
            ("show", "show"),
            ("check-deps", "check-deps"),
            ("download-ext", "download-ext"),
            ("validate-quota", "validate-quota"),
            ("validateQuota", "validate-quota"),
        ],
    )
    def test_dispatches(
        self, monkeypatch: pytest.MonkeyPatch, action: str, handler: str,
    ) -> None:
        fake = MagicMock(return_value=exit_codes.SUCCESS)
        monkeypatch.setitem(app_module._HANDLERS, handler, fake)

        assert main(["-x", action]) == exit_codes.SUCCESS
        fake.assert_called_once()
        settings, args = fake.call_args.args
        assert settings.cluster == "cluster"
        assert args.no_prompt is False

    def test_invalid_configuration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDENTITY_PROPAGATION_SECONDS", "-5")
        with pytest.raises(ConfigurationError, match="IDENTITY_PROPAGATION_SECONDS"):
            main(["-x", "show"])


class TestInstallHandler:
    def test_runs_prerequisites_then_provisioner(self, monkeypatch: pytest.MonkeyPatch) -> None:
        deps = MagicMock()
        ext = MagicMock()
        monkeypatch.setattr(app_module, "_az_cli", MagicMock())
        monkeypatch.setattr(app_module, "_dependency_service", lambda cli: deps)
        monkeypatch.setattr(app_module, "_extension_service", lambda cli, settings: ext)

        with patch("aro_deploy.core.provisioner.ClusterProvisioner") as provisioner_cls:
            code = main(["-x", "install", "--no-prompt"])

        assert code == exit_codes.SUCCESS
        deps.require.assert_called_once()
        ext.update.assert_called_once()
        provisioner_cls.return_value.install.assert_called_once_with(keep_default_version)

    def test_dependency_failure_stops_install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        deps = MagicMock()
        deps.require.side_effect = DependencyCheckError("missing az")
        ext = MagicMock()
        monkeypatch.setattr(app_module, "_az_cli", MagicMock())
        monkeypatch.setattr(app_module, "_dependency_service", lambda cli: deps)
        monkeypatch.setattr(app_module, "_extension_service", lambda cli, settings: ext)

        with pytest.raises(DependencyCheckError):
            main(["-x", "install", "--no-prompt"])
        ext.update.assert_not_called()

    @pytest.mark.parametrize(
        ("tty", "expected"),
        [
            (False, keep_default_version),
            (True, prompt_cluster_version),
        ],
    )
    def test_selector_follows_stdin_tty(
        self, monkeypatch: pytest.MonkeyPatch, tty: bool, expected: object,
    ) -> None:
        monkeypatch.setattr(app_module, "_az_cli", MagicMock())
        monkeypatch.setattr(app_module, "_dependency_service", lambda cli: MagicMock())
        monkeypatch.setattr(app_module, "_extension_service", lambda cli, settings: MagicMock())
        stdin = MagicMock()
        stdin.isatty.return_value = tty
        monkeypatch.setattr("sys.stdin", stdin)

        with patch("aro_deploy.core.provisioner.ClusterProvisioner") as provisioner_cls:
            assert main(["-x", "install"]) == exit_codes.SUCCESS

        provisioner_cls.return_value.install.assert_called_once_with(expected)


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run(self, monkeypatch: pytest.MonkeyPatch, exc: BaseException) -> int:
        monkeypatch.setattr(app_module, "main", MagicMock(side_effect=exc))
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return int(exc_info.value.code)  # type: ignore[arg-type]

    def test_known_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run(monkeypatch, ClusterNotFoundError("gone", hint="check names"))
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "gone" in err
        assert "check names" in err

    def test_markup_like_text_is_printed_verbatim(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        exc = AzureCliError(
            "az role failed: scope [/subscriptions/x] denied",
            hint="Check [bold]access[/] on [/subscriptions/x]",
        )
        code = self._run(monkeypatch, exc)
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "[/subscriptions/x] denied" in err
        assert "[bold]access[/]" in err

    def test_unexpected_error_with_brackets(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run(monkeypatch, RuntimeError("bad [/tag]"))
        assert code == exit_codes.UNEXPECTED_ERROR
        assert "bad [/tag]" in capsys.readouterr().err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run(monkeypatch, KeyboardInterrupt()) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run(monkeypatch, RuntimeError("kaboom"))
        assert code == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: kaboom" in capsys.readouterr().err
