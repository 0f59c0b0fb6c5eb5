"""Restart the Xray service after the live configuration changes.

Restart problems never abort a provisioning run: the configuration is
already on disk, so failures are returned as a :class:`RestartReport`
and logged as warnings.
"""

import shutil
import subprocess

from pydantic import BaseModel, ConfigDict, Field

from ..common.logging import get_logger
from ..common.utils import validate_non_empty_string

logger = get_logger(__name__)


class RestartReport(BaseModel):
    """Outcome of a service restart attempt."""

    model_config = ConfigDict(frozen=True)

    success: bool
    manager: str | None = Field(default=None, description="systemctl, service or None")
    status_ok: bool | None = Field(default=None, description="None when status was not queried")
    message: str = ""


class ServiceManager:
    """Restarts a service through systemctl, falling back to service."""

    def __init__(self, service_name: str = "xray", timeout: float = 30.0) -> None:
        self.service_name = validate_non_empty_string(service_name, "Service name")
        self.timeout = timeout

    def _commands(self, manager: str) -> tuple[list[str], list[str]]:
        if manager == "systemctl":
            return (
                ["systemctl", "restart", self.service_name],
                ["systemctl", "status", self.service_name, "--no-pager"],
            )
        return (
            ["service", self.service_name, "restart"],
            ["service", self.service_name, "status"],
        )

    def detect_manager(self) -> str | None:
        """Return the first available service manager command."""
        for manager in ("systemctl", "service"):
            if shutil.which(manager):
                return manager
        return None

    def restart(self) -> RestartReport:
        """Restart the service and query its status.

        Returns:
            Report describing what happened; never raises for command failures
        """
        manager = self.detect_manager()
        if manager is None:
            logger.warning(
                "No service manager found, restart the service manually",
                service=self.service_name,
            )
            return RestartReport(
                success=False, message="Neither systemctl nor service is available"
            )

        restart_cmd, status_cmd = self._commands(manager)
        try:
            subprocess.run(
                restart_cmd, check=True, capture_output=True, text=True, timeout=self.timeout
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logger.warning(
                "Service restart failed, check the service manually",
                service=self.service_name,
                manager=manager,
                error=str(e),
            )
            return RestartReport(success=False, manager=manager, message=str(e))

        logger.info("Service restarted", service=self.service_name, manager=manager)

        try:
            subprocess.run(
                status_cmd, check=True, capture_output=True, text=True, timeout=self.timeout
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logger.warning(
                "Could not query service status, check it manually",
                service=self.service_name,
                error=str(e),
            )
            return RestartReport(
                success=True, manager=manager, status_ok=False, message=str(e)
            )

        return RestartReport(success=True, manager=manager, status_ok=True)
