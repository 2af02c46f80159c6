"""Tests for executable detection (infra/tool_detector.py).

All tests mock :func:`shutil.which`; no system dependency.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from aro_deploy.core.models import ToolStatus
from aro_deploy.infra.tool_detector import detect_tool, install_hint, platform_install_commands


class TestDetectTool:
    @patch("aro_deploy.infra.tool_detector.shutil.which", return_value="/usr/bin/az")
    def test_found(self, _mock_which: object) -> None:
        status = detect_tool("az")
        assert status.found is True
        assert isinstance(status.path, Path)
        assert status.install_commands == ()

    @patch("aro_deploy.infra.tool_detector.shutil.which", return_value=None)
    def test_not_found(self, _mock_which: object) -> None:
        status = detect_tool("az")
        assert status.found is False
        assert status.path is None
        assert len(status.install_commands) > 0


class TestPlatformInstallCommands:
    @patch("aro_deploy.infra.tool_detector.platform.system", return_value="Windows")
    def test_windows(self, _mock_sys: object) -> None:
        assert "winget install -e --id Microsoft.AzureCLI" in platform_install_commands("az")

    @patch("aro_deploy.infra.tool_detector.platform.system", return_value="Linux")
    def test_linux(self, _mock_sys: object) -> None:
        cmds = platform_install_commands("az")
        assert any("InstallAzureCLIDeb" in c for c in cmds)
        assert any("dnf" in c for c in cmds)

    @patch("aro_deploy.infra.tool_detector.platform.system", return_value="Darwin")
    def test_darwin(self, _mock_sys: object) -> None:
        assert platform_install_commands("az") == ("brew install azure-cli",)

    def test_unknown_tool(self) -> None:
        assert platform_install_commands("kubectl") == ()


class TestInstallHint:
    @patch("aro_deploy.infra.tool_detector.platform.system", return_value="Darwin")
    def test_lists_commands(self, _mock_sys: object) -> None:
        assert install_hint("az") == "Install az using one of:\n  brew install azure-cli"

    def test_unknown_tool(self) -> None:
        assert install_hint("kubectl") is None


class TestToolStatus:
    def test_frozen(self) -> None:
        status = ToolStatus(name="az", found=True, path=Path("/usr/bin/az"), install_commands=())
        with pytest.raises(AttributeError):
            status.found = False  # type: ignore[misc]
