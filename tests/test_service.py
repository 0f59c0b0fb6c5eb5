"""Tests for service restart handling."""

import subprocess
from unittest.mock import Mock, call, patch

import pytest

from reality_setup.server.service import RestartReport, ServiceManager


def which_only(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestServiceManager:
    """Test ServiceManager.restart."""

    def test_empty_service_name(self):
        """Test that a service name is required."""
        with pytest.raises(ValueError, match="Service name cannot be empty"):
            ServiceManager(" ")

    @patch("reality_setup.server.service.subprocess.run")
    @patch("reality_setup.server.service.shutil.which", side_effect=which_only("systemctl", "service"))
    def test_systemctl_preferred(self, mock_which, mock_run):
        """Test restart and status through systemctl."""
        mock_run.return_value = Mock(returncode=0)

        report = ServiceManager("xray").restart()

        assert report == RestartReport(success=True, manager="systemctl", status_ok=True)
        commands = [c.args[0] for c in mock_run.call_args_list]
        assert commands == [
            ["systemctl", "restart", "xray"],
            ["systemctl", "status", "xray", "--no-pager"],
        ]

    @patch("reality_setup.server.service.subprocess.run")
    @patch("reality_setup.server.service.shutil.which", side_effect=which_only("service"))
    def test_service_fallback(self, mock_which, mock_run):
        """Test restart through the service command."""
        mock_run.return_value = Mock(returncode=0)

        report = ServiceManager("xray").restart()

        assert report.success is True
        assert report.manager == "service"
        assert mock_run.call_args_list[0] == call(
            ["service", "xray", "restart"],
            check=True,
            capture_output=True,
            text=True,
            timeout=30.0,
        )

    @patch("reality_setup.server.service.subprocess.run")
    @patch("reality_setup.server.service.shutil.which", return_value=None)
    def test_no_manager(self, mock_which, mock_run):
        """Test that a missing service manager is reported, not raised."""
        report = ServiceManager().restart()

        assert report.success is False
        assert report.manager is None
        mock_run.assert_not_called()

    @patch(
        "reality_setup.server.service.subprocess.run",
        side_effect=subprocess.CalledProcessError(1, ["systemctl", "restart", "xray"]),
    )
    @patch("reality_setup.server.service.shutil.which", side_effect=which_only("systemctl"))
    def test_restart_failure_is_reported(self, mock_which, mock_run):
        """Test that a failed restart returns a failed report."""
        report = ServiceManager().restart()

        assert report.success is False
        assert report.manager == "systemctl"
        assert report.status_ok is None
        assert "returned non-zero exit status 1" in report.message

    @patch("reality_setup.server.service.subprocess.run")
    @patch("reality_setup.server.service.shutil.which", side_effect=which_only("systemctl"))
    def test_status_failure_is_a_warning(self, mock_which, mock_run):
        """Test that a failed status query keeps the restart successful."""
        mock_run.side_effect = [
            Mock(returncode=0),
            subprocess.CalledProcessError(3, ["systemctl", "status", "xray"]),
        ]

        report = ServiceManager().restart()

        assert report.success is True
        assert report.status_ok is False

    @patch("reality_setup.server.service.subprocess.run", side_effect=OSError("exec failed"))
    @patch("reality_setup.server.service.shutil.which", side_effect=which_only("systemctl"))
    def test_os_error_is_reported(self, mock_which, mock_run):
        """Test that an OS error becomes a failed report."""
        report = ServiceManager().restart()
        assert report.success is False
        assert report.message == "exec failed"
