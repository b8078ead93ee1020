"""Transition engine - enables and disables telemetry tasks and services.

Each operation walks its list in order. Every sub-step reads the live
state, mutates only when the item is not already at the target, and has
its own failure boundary: a fault is logged and the next sub-step or item
is still processed. Nothing is returned; re-run discovery to observe the
resulting state.
"""

import logging
from collections.abc import Callable, Iterable

from src.core.errors import failure_reason
from src.core.models import ServiceRunState, ServiceStartMode, TelemetryService, TelemetryTask
from src.discovery.base import BaseServiceDirectory, BaseTaskDirectory
from src.discovery.services import DEFAULT_SERVICE_WAIT_TIMEOUT, PowerShellServiceDirectory
from src.discovery.tasks import PowerShellTaskDirectory


class TransitionEngine:
    """Applies enable/disable transitions to resolved telemetry components.

    Example:
        engine = create_transition_engine()
        engine.disable_telemetry_tasks(discovery.get_telemetry_tasks())
        engine.disable_telemetry_services(discovery.get_telemetry_services())
    """

    def __init__(
        self,
        task_directory: BaseTaskDirectory,
        service_directory: BaseServiceDirectory,
        logger: logging.Logger | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            task_directory: Adapter used to read and toggle tasks.
            service_directory: Adapter used to read and control services.
            logger: Destination for per-item result messages.
            dry_run: If True, read live state but do not mutate anything.
        """
        self.task_directory = task_directory
        self.service_directory = service_directory
        self.logger = logger or logging.getLogger("nvtelemetry.actions")
        self.dry_run = dry_run

    def disable_telemetry_services(self, services: Iterable[TelemetryService]) -> None:
        """Stop each service and set its start mode to Disabled.

        Args:
            services: Services to disable.
        """
        for service in services:
            name = service.service_name
            label = service.label

            self._step(
                lambda: self.service_directory.get_run_state(name) == ServiceRunState.RUNNING,
                lambda: self.service_directory.stop(name),
                f"Disabled service: {label}",
                f"Failed to disable service: {label}",
                f"stop service: {label}",
            )

            self._step(
                lambda: self.service_directory.get_start_mode(name) != ServiceStartMode.DISABLED,
                lambda: self.service_directory.set_start_mode(name, ServiceStartMode.DISABLED),
                f"Disabled service startup: {label}",
                f"Failed to disable service startup: {label}",
                f"disable service startup: {label}",
            )

    def enable_telemetry_services(self, services: Iterable[TelemetryService]) -> None:
        """Set each service's start mode to Automatic, then start it.

        The start is attempted even if the start mode could not be changed;
        it will then fail and be logged on its own.

        Args:
            services: Services to enable.
        """
        for service in services:
            name = service.service_name
            label = service.label

            self._step(
                lambda: self.service_directory.get_start_mode(name) != ServiceStartMode.AUTOMATIC,
                lambda: self.service_directory.set_start_mode(name, ServiceStartMode.AUTOMATIC),
                f"Enabled automatic service startup: {label}",
                f"Failed to enable automatic service startup: {label}",
                f"enable automatic service startup: {label}",
            )

            self._step(
                lambda: self.service_directory.get_run_state(name) != ServiceRunState.RUNNING,
                lambda: self.service_directory.start(name),
                f"Enabled service: {label}",
                f"Failed to start service: {label}",
                f"start service: {label}",
            )

    def disable_telemetry_tasks(self, tasks: Iterable[TelemetryTask]) -> None:
        """Disable each task that is currently enabled.

        Args:
            tasks: Tasks to disable.
        """
        for task in tasks:
            self._set_task(task, False)

    def enable_telemetry_tasks(self, tasks: Iterable[TelemetryTask | None]) -> None:
        """Enable each task that is currently disabled.

        None entries (unresolved lookups) are skipped.

        Args:
            tasks: Tasks to enable.
        """
        for task in tasks:
            if task is None:
                continue
            self._set_task(task, True)

    def _set_task(self, task: TelemetryTask, enabled: bool) -> None:
        action = "enable" if enabled else "disable"
        self._step(
            lambda: self.task_directory.refresh(task).enabled != enabled,
            lambda: self.task_directory.set_enabled(task, enabled),
            f"{action.capitalize()}d task: {task.path}",
            f"Failed to {action} task: {task.path}",
            f"{action} task: {task.path}",
        )

    def _step(
        self,
        needs_change: Callable[[], bool],
        apply: Callable[[], None],
        success_message: str,
        failure_message: str,
        dry_run_message: str,
    ) -> None:
        """Run one failure-isolated sub-step.

        Args:
            needs_change: Reads live state; True if a mutation is required.
            apply: Performs the mutation.
            success_message: Logged after a successful mutation.
            failure_message: Logged (with the reason) when reading or mutating faults.
            dry_run_message: Logged instead of mutating in dry-run mode.
        """
        try:
            if not needs_change():
                return

            if self.dry_run:
                self.logger.info(f"[DRY RUN] Would {dry_run_message}")
                return

            apply()

        except Exception as e:
            self.logger.info(f"{failure_message} ({failure_reason(e)})")
            return

        self.logger.info(success_message)


def create_transition_engine(
    dry_run: bool = False,
    command_timeout: int = 60,
    service_wait_timeout: int = DEFAULT_SERVICE_WAIT_TIMEOUT,
    logger: logging.Logger | None = None,
) -> TransitionEngine:
    """Create a transition engine backed by the PowerShell adapters.

    Args:
        dry_run: If True, simulate transitions
        command_timeout: Timeout in seconds for each PowerShell call
        service_wait_timeout: Seconds to wait for a service to start or stop
        logger: Destination for per-item result messages

    Returns:
        TransitionEngine instance
    """
    return TransitionEngine(
        PowerShellTaskDirectory(command_timeout=command_timeout),
        PowerShellServiceDirectory(
            command_timeout=command_timeout,
            wait_timeout=service_wait_timeout,
        ),
        logger=logger,
        dry_run=dry_run,
    )
