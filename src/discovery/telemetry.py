"""Telemetry discovery - resolves the catalog to live tasks and services.

Discovery is read-only. Entries that do not resolve are expected (task
names differ between driver versions) and are never raised to the caller;
they are only reported through the logger when logging is requested.
"""

import logging

from src.core.catalog import TELEMETRY_CATALOG, CatalogEntry, service_names, task_patterns
from src.core.errors import OutcomeKind, failure_reason
from src.core.models import TelemetryService, TelemetryTask
from src.discovery.base import BaseServiceDirectory, BaseTaskDirectory
from src.discovery.services import PowerShellServiceDirectory
from src.discovery.tasks import PowerShellTaskDirectory


class TelemetryDiscovery:
    """Resolves telemetry catalog entries into task and service snapshots.

    Example:
        discovery = create_telemetry_discovery()
        tasks = discovery.get_telemetry_tasks(log=True)
        services = discovery.get_telemetry_services(log=True)
    """

    def __init__(
        self,
        task_directory: BaseTaskDirectory,
        service_directory: BaseServiceDirectory,
        catalog: tuple[CatalogEntry, ...] = TELEMETRY_CATALOG,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize discovery.

        Args:
            task_directory: Adapter used to look up scheduled tasks.
            service_directory: Adapter used to open services.
            catalog: Entries to resolve.
            logger: Destination for resolution messages.
        """
        self.task_directory = task_directory
        self.service_directory = service_directory
        self.catalog = catalog
        self.logger = logger or logging.getLogger("nvtelemetry.discovery")

    def get_telemetry_tasks(self, log: bool = False) -> list[TelemetryTask]:
        """Return the telemetry tasks that exist on this system.

        Args:
            log: Whether to log each resolution attempt.

        Returns:
            Found tasks, in catalog order.
        """
        tasks: list[TelemetryTask] = []

        for pattern in task_patterns(self.catalog):
            try:
                task = self.task_directory.find(pattern)
            except Exception as e:
                if log:
                    self.logger.info(f"Failed to find task: {pattern} ({failure_reason(e)})")
                continue

            if task is None:
                if log:
                    self.logger.info(f"Failed to find task: {pattern}")
                continue

            if log:
                self.logger.info(f"Found task: {task.path}")
                self.logger.info(f"Task is: {task.state_label}")

            tasks.append(task)

        return tasks

    def get_telemetry_services(self, log: bool = False) -> list[TelemetryService]:
        """Return the telemetry services that exist on this system.

        A service that exists but cannot be queried is left out just like a
        missing one; the two cases produce different log lines.

        Args:
            log: Whether to log each resolution attempt.

        Returns:
            Found services, in catalog order.
        """
        services: list[TelemetryService] = []

        for name in service_names(self.catalog):
            try:
                service = self.service_directory.open(name)
            except Exception as e:
                if log:
                    if getattr(e, "outcome", None) == OutcomeKind.NOT_FOUND:
                        self.logger.info(f"Failed to find service: {name}")
                    else:
                        self.logger.info(f"Failed to query service: {name} ({failure_reason(e)})")
                continue

            if log:
                self.logger.info(f"Found service: {service.label}")
                self.logger.info(f"Service is: {service.state_label}")

            services.append(service)

        return services


def create_telemetry_discovery(
    command_timeout: int = 60,
    logger: logging.Logger | None = None,
) -> TelemetryDiscovery:
    """Create discovery backed by the PowerShell adapters.

    Args:
        command_timeout: Timeout in seconds for each PowerShell call.
        logger: Destination for resolution messages.

    Returns:
        TelemetryDiscovery instance
    """
    return TelemetryDiscovery(
        PowerShellTaskDirectory(command_timeout=command_timeout),
        PowerShellServiceDirectory(command_timeout=command_timeout),
        logger=logger,
    )
