"""Base interfaces for the OS directory adapters.

Discovery and the transition engine only talk to the task scheduler and
the service control manager through these interfaces, so they can be
exercised against in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.core.models import (
        ServiceRunState,
        ServiceStartMode,
        TelemetryService,
        TelemetryTask,
    )


class BaseTaskDirectory(ABC):
    """Abstract access to the Windows task scheduler.

    Subclasses must implement:
        - find(): Resolve a name pattern to at most one task
        - is_enabled(): Read the live enabled flag of a task
        - set_enabled(): Write the enabled flag of a task

    All methods except find() raise ControlError when the underlying
    call fails.
    """

    @abstractmethod
    def find(self, pattern: str) -> "TelemetryTask | None":
        """Find the first task whose name matches a pattern.

        Args:
            pattern: Task name, wildcards allowed (e.g. "NvTmMon_*").

        Returns:
            A TelemetryTask snapshot, or None if nothing matches.

        Raises:
            ControlError: If the scheduler could not be queried.
        """
        pass

    @abstractmethod
    def is_enabled(self, task: "TelemetryTask") -> bool:
        """Return the live enabled flag of a task."""
        pass

    @abstractmethod
    def set_enabled(self, task: "TelemetryTask", enabled: bool) -> None:
        """Enable or disable a task."""
        pass

    def refresh(self, task: "TelemetryTask") -> "TelemetryTask":
        """Return a new snapshot of a task with its live enabled flag."""
        return replace(task, enabled=self.is_enabled(task))

    def is_available(self) -> bool:
        """Check if the adapter can run on the current system."""
        return True


class BaseServiceDirectory(ABC):
    """Abstract access to the Windows service control manager.

    Every method raises ControlError when the underlying call fails,
    including when the service does not exist.
    """

    @abstractmethod
    def open(self, service_name: str) -> "TelemetryService":
        """Open a service by exact name and snapshot its state."""
        pass

    @abstractmethod
    def get_run_state(self, service_name: str) -> "ServiceRunState":
        """Return the live run state of a service."""
        pass

    @abstractmethod
    def get_start_mode(self, service_name: str) -> "ServiceStartMode":
        """Return the live start mode of a service."""
        pass

    @abstractmethod
    def set_start_mode(self, service_name: str, mode: "ServiceStartMode") -> None:
        """Change the start mode of a service."""
        pass

    @abstractmethod
    def start(self, service_name: str) -> None:
        """Start a service and block until it reports Running."""
        pass

    @abstractmethod
    def stop(self, service_name: str) -> None:
        """Stop a service and block until it reports Stopped."""
        pass

    def is_available(self) -> bool:
        """Check if the adapter can run on the current system."""
        return True
