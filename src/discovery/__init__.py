"""Discovery modules for locating telemetry tasks and services."""

from .base import BaseServiceDirectory, BaseTaskDirectory
from .powershell import CommandResult, run_powershell
from .services import PowerShellServiceDirectory
from .tasks import PowerShellTaskDirectory
from .telemetry import TelemetryDiscovery, create_telemetry_discovery

__all__ = [
    "BaseTaskDirectory",
    "BaseServiceDirectory",
    # PowerShell
    "CommandResult",
    "run_powershell",
    # Adapters
    "PowerShellTaskDirectory",
    "PowerShellServiceDirectory",
    # Telemetry
    "TelemetryDiscovery",
    "create_telemetry_discovery",
]
