"""Service adapter - queries and controls Windows services.

Reads go through Get-Service with a WMI fallback; start and stop use the
.NET ServiceController so the call can block on WaitForStatus.
"""

import logging
from typing import Any

from src.core.errors import ControlError, OutcomeKind
from src.core.models import ServiceRunState, ServiceStartMode, TelemetryService
from src.discovery.base import BaseServiceDirectory
from src.discovery.powershell import (
    DEFAULT_COMMAND_TIMEOUT,
    CommandResult,
    is_windows,
    ps_quote,
    run_powershell,
)

logger = logging.getLogger("nvtelemetry.discovery.services")

DEFAULT_SERVICE_WAIT_TIMEOUT = 30

# Outcomes for which a second opinion from WMI is pointless
_NO_FALLBACK_OUTCOMES = (OutcomeKind.NOT_FOUND, OutcomeKind.PERMISSION_DENIED)


class PowerShellServiceDirectory(BaseServiceDirectory):
    """Service control manager access through PowerShell.

    Example:
        directory = PowerShellServiceDirectory()
        service = directory.open("NvTelemetryContainer")
        if service.run_state == ServiceRunState.RUNNING:
            directory.stop(service.service_name)
    """

    def __init__(
        self,
        command_timeout: int = DEFAULT_COMMAND_TIMEOUT,
        wait_timeout: int = DEFAULT_SERVICE_WAIT_TIMEOUT,
        use_wmi_fallback: bool = True,
    ) -> None:
        """Initialize the adapter.

        Args:
            command_timeout: Timeout in seconds for each PowerShell call.
            wait_timeout: Seconds to wait for a service to reach Running/Stopped.
            use_wmi_fallback: Whether reads may fall back to WMI.
        """
        self.command_timeout = command_timeout
        self.wait_timeout = wait_timeout
        self.use_wmi_fallback = use_wmi_fallback
        self._is_windows = is_windows()

    def is_available(self) -> bool:
        return self._is_windows

    def open(self, service_name: str) -> TelemetryService:
        raw = self._query(service_name)
        return self._parse_service(raw, service_name)

    def get_run_state(self, service_name: str) -> ServiceRunState:
        return self.open(service_name).run_state

    def get_start_mode(self, service_name: str) -> ServiceStartMode:
        return self.open(service_name).start_mode

    def set_start_mode(self, service_name: str, mode: ServiceStartMode) -> None:
        self._require_windows(service_name)

        if mode in (ServiceStartMode.UNKNOWN, ServiceStartMode.BOOT, ServiceStartMode.SYSTEM):
            raise ControlError(
                OutcomeKind.OTHER_FAULT,
                f"Unsupported start mode for a service: {mode.value}",
                service_name,
            )

        result = self._run_powershell(
            f"Set-Service -Name {ps_quote(service_name)} "
            f"-StartupType {mode.powershell_name} -ErrorAction Stop"
        )
        result.raise_for_outcome(service_name)

    def start(self, service_name: str) -> None:
        self._control(service_name, "Start", ServiceRunState.RUNNING)

    def stop(self, service_name: str) -> None:
        self._control(service_name, "Stop", ServiceRunState.STOPPED)

    def _control(self, service_name: str, method: str, target: ServiceRunState) -> None:
        """Invoke Start()/Stop() and block until the service reaches target."""
        self._require_windows(service_name)

        result = self._run_powershell(
            f"$s = Get-Service -Name {ps_quote(service_name)} -ErrorAction Stop; "
            f"$s.{method}(); "
            f"$s.WaitForStatus('{target.value}', "
            f"[TimeSpan]::FromSeconds({self.wait_timeout}))",
            timeout=self.command_timeout + self.wait_timeout,
        )
        result.raise_for_outcome(service_name)

    def _query(self, service_name: str) -> dict[str, Any]:
        """Read name, display name, status and start type of a service.

        Raises:
            ControlError: If the service does not exist or cannot be read.
        """
        self._require_windows(service_name)

        result = self._run_powershell(
            f"$s = Get-Service -Name {ps_quote(service_name)} -ErrorAction Stop; "
            f"[PSCustomObject]@{{ "
            f"Name = $s.Name; "
            f"DisplayName = $s.DisplayName; "
            f"Status = [string]$s.Status; "
            f"StartType = [string]$s.StartType "
            f"}} | ConvertTo-Json -Compress"
        )

        if result.success:
            data = result.json()
            if isinstance(data, list):
                data = data[0] if data else None
            if not data:
                raise ControlError(OutcomeKind.NOT_FOUND, "Empty service query result", service_name)
            if not isinstance(data, dict):
                raise ControlError(
                    OutcomeKind.OTHER_FAULT,
                    f"Unexpected service query output: {result.output!r}",
                    service_name,
                )
            return data

        if self.use_wmi_fallback and result.outcome not in _NO_FALLBACK_OUTCOMES:
            logger.warning(f"Get-Service failed for {service_name}, trying WMI...")
            raw = self._query_wmi(service_name)
            if raw is not None:
                return raw

        raise ControlError(result.outcome, result.error, service_name)

    def _query_wmi(self, service_name: str) -> dict[str, Any] | None:
        """Read a service through WMI (fallback method).

        Returns:
            Service dictionary, or None if WMI is unavailable or errored.

        Raises:
            ControlError: If WMI answered and the service does not exist.
        """
        try:
            import wmi

            c = wmi.WMI()
            matches = c.Win32_Service(Name=service_name)

        except ImportError:
            logger.debug("WMI module not available")
            return None
        except Exception as e:
            logger.error(f"Error querying service via WMI: {e}")
            return None

        if not matches:
            raise ControlError(OutcomeKind.NOT_FOUND, "Service not found via WMI", service_name)

        svc = matches[0]
        return {
            "Name": svc.Name,
            "DisplayName": svc.DisplayName,
            "Status": svc.State,
            "StartType": svc.StartMode,
        }

    def _parse_service(self, raw: dict[str, Any], service_name: str) -> TelemetryService:
        """Build a TelemetryService from query output."""
        name = raw.get("Name") or service_name
        return TelemetryService(
            service_name=name,
            display_name=raw.get("DisplayName") or name,
            run_state=ServiceRunState.from_string(raw.get("Status")),
            start_mode=ServiceStartMode.from_value(raw.get("StartType")),
        )

    def _require_windows(self, target: str) -> None:
        if not self._is_windows:
            raise ControlError(
                OutcomeKind.OTHER_FAULT,
                "Service control is only available on Windows",
                target,
            )

    def _run_powershell(self, command: str, timeout: int | None = None) -> CommandResult:
        return run_powershell(command, timeout=timeout or self.command_timeout)
