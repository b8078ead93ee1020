"""Core data models for the telemetry controller.

This module defines the enums and value snapshots shared by discovery,
the directory adapters and the transition engine.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class ComponentKind(Enum):
    """Kinds of OS objects that make up the telemetry subsystem."""

    TASK = auto()
    SERVICE = auto()


class ServiceRunState(Enum):
    """Windows service runtime states."""

    RUNNING = "Running"
    STOPPED = "Stopped"
    START_PENDING = "Start Pending"
    STOP_PENDING = "Stop Pending"
    PAUSED = "Paused"
    PAUSE_PENDING = "Pause Pending"
    CONTINUE_PENDING = "Continue Pending"
    UNKNOWN = "Unknown"

    @classmethod
    def from_string(cls, state: str | None) -> "ServiceRunState":
        """Convert a state string to enum.

        Accepts both the .NET spelling ("StartPending") and the WMI
        spelling ("Start Pending").
        """
        if not state:
            return cls.UNKNOWN

        normalized = state.replace(" ", "").lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == normalized:
                return member
        return cls.UNKNOWN


class ServiceStartMode(Enum):
    """Windows service start modes."""

    BOOT = "Boot"
    SYSTEM = "System"
    AUTOMATIC = "Automatic"
    AUTOMATIC_DELAYED = "Automatic (Delayed Start)"
    MANUAL = "Manual"
    DISABLED = "Disabled"
    UNKNOWN = "Unknown"

    @classmethod
    def from_value(cls, value: int | str | None) -> "ServiceStartMode":
        """Convert a Windows start type value to enum.

        Args:
            value: Start type as int (0-4) or string.

        Returns:
            Corresponding ServiceStartMode enum.
        """
        if value is None:
            return cls.UNKNOWN

        if isinstance(value, str):
            value_lower = value.lower()
            if "boot" in value_lower:
                return cls.BOOT
            elif "system" in value_lower:
                return cls.SYSTEM
            elif "auto" in value_lower:
                if "delayed" in value_lower:
                    return cls.AUTOMATIC_DELAYED
                return cls.AUTOMATIC
            elif "manual" in value_lower or "demand" in value_lower:
                return cls.MANUAL
            elif "disabled" in value_lower:
                return cls.DISABLED
            return cls.UNKNOWN

        mapping = {
            0: cls.BOOT,
            1: cls.SYSTEM,
            2: cls.AUTOMATIC,
            3: cls.MANUAL,
            4: cls.DISABLED,
        }
        return mapping.get(value, cls.UNKNOWN)

    @property
    def powershell_name(self) -> str:
        """Name accepted by Set-Service -StartupType."""
        if self is ServiceStartMode.AUTOMATIC_DELAYED:
            return "AutomaticDelayedStart"
        return self.value


def _state_label(enabled: bool) -> str:
    return "Enabled" if enabled else "Disabled"


@dataclass(frozen=True)
class TelemetryTask:
    """Snapshot of a telemetry scheduled task.

    The snapshot is taken at discovery time and is not refreshed
    automatically; the task may be changed or deleted externally.

    Attributes:
        path: Full task path, e.g. "\\NvTmMon_{B2FE...}" (identity)
        name: Task name (last path segment)
        folder: Task folder, always ending in a backslash
        enabled: Whether the task was enabled when the snapshot was taken
        pattern: Catalog pattern the task was resolved from
    """

    path: str
    name: str
    folder: str = "\\"
    enabled: bool = True
    pattern: str = ""

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.TASK

    @property
    def state_label(self) -> str:
        return _state_label(self.enabled)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "kind": self.kind.name,
            "path": self.path,
            "name": self.name,
            "folder": self.folder,
            "enabled": self.enabled,
            "pattern": self.pattern,
        }


@dataclass(frozen=True)
class TelemetryService:
    """Snapshot of a telemetry service.

    Attributes:
        service_name: Internal service name used by the SCM (identity)
        display_name: Human-readable name
        run_state: Runtime state when the snapshot was taken
        start_mode: Start mode when the snapshot was taken
    """

    service_name: str
    display_name: str = ""
    run_state: ServiceRunState = ServiceRunState.UNKNOWN
    start_mode: ServiceStartMode = ServiceStartMode.UNKNOWN

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.SERVICE

    @property
    def is_enabled(self) -> bool:
        """Composite enablement: running with an automatic start mode.

        Every other combination of run state and start mode counts as
        disabled.
        """
        return (
            self.run_state == ServiceRunState.RUNNING
            and self.start_mode == ServiceStartMode.AUTOMATIC
        )

    @property
    def state_label(self) -> str:
        return _state_label(self.is_enabled)

    @property
    def label(self) -> str:
        """Display form used in log lines: "Display Name (ServiceName)"."""
        return f"{self.display_name or self.service_name} ({self.service_name})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "kind": self.kind.name,
            "service_name": self.service_name,
            "display_name": self.display_name,
            "run_state": self.run_state.value,
            "start_mode": self.start_mode.value,
            "enabled": self.is_enabled,
        }
