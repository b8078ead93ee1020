"""Pytest configuration and shared fixtures."""

import logging
import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.errors import ControlError, OutcomeKind  # noqa: E402
from src.core.models import (  # noqa: E402
    ServiceRunState,
    ServiceStartMode,
    TelemetryService,
    TelemetryTask,
)
from src.discovery.base import BaseServiceDirectory, BaseTaskDirectory  # noqa: E402


class FakeTaskDirectory(BaseTaskDirectory):
    """In-memory task scheduler.

    Tasks are keyed by path; find() matches a trailing "*" as a prefix.
    Paths listed in failing_paths fault on every read and write.
    """

    def __init__(self, tasks: dict[str, bool] | None = None) -> None:
        self.tasks: dict[str, bool] = dict(tasks or {})
        self.failing_paths: set[str] = set()
        self.failing_patterns: set[str] = set()
        self.mutations: list[tuple[str, bool]] = []

    def find(self, pattern: str) -> TelemetryTask | None:
        if pattern in self.failing_patterns:
            raise ControlError(OutcomeKind.PERMISSION_DENIED, "Access is denied", pattern)

        prefix = pattern.rstrip("*")
        for path, enabled in self.tasks.items():
            name = path.rsplit("\\", 1)[-1]
            if name.startswith(prefix):
                return TelemetryTask(
                    path=path,
                    name=name,
                    folder=path[: len(path) - len(name)],
                    enabled=enabled,
                    pattern=pattern,
                )
        return None

    def is_enabled(self, task: TelemetryTask) -> bool:
        self._check(task.path)
        return self.tasks[task.path]

    def set_enabled(self, task: TelemetryTask, enabled: bool) -> None:
        self._check(task.path)
        self.mutations.append((task.path, enabled))
        self.tasks[task.path] = enabled

    def _check(self, path: str) -> None:
        if path in self.failing_paths:
            raise ControlError(OutcomeKind.PERMISSION_DENIED, "Access is denied", path)
        if path not in self.tasks:
            raise ControlError(OutcomeKind.NOT_FOUND, "Task does not exist", path)


class FakeServiceDirectory(BaseServiceDirectory):
    """In-memory service control manager.

    Starting a service whose start mode is Disabled fails, as it does on
    Windows. Names in failing_ops map to the set of operations that fault.
    """

    def __init__(self) -> None:
        self.services: dict[str, dict] = {}
        self.failing_ops: dict[str, set[str]] = {}
        self.open_errors: dict[str, OutcomeKind] = {}
        self.calls: list[tuple[str, str]] = []

    def add(
        self,
        name: str,
        display_name: str = "",
        run_state: ServiceRunState = ServiceRunState.RUNNING,
        start_mode: ServiceStartMode = ServiceStartMode.AUTOMATIC,
    ) -> None:
        self.services[name] = {
            "display_name": display_name or name,
            "run_state": run_state,
            "start_mode": start_mode,
        }

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in ("stop", "start", "set_start_mode")]

    def open(self, service_name: str) -> TelemetryService:
        if service_name in self.open_errors:
            raise ControlError(self.open_errors[service_name], "query failed", service_name)
        svc = self._get(service_name, "open")
        return TelemetryService(
            service_name=service_name,
            display_name=svc["display_name"],
            run_state=svc["run_state"],
            start_mode=svc["start_mode"],
        )

    def get_run_state(self, service_name: str) -> ServiceRunState:
        return self._get(service_name, "get_run_state")["run_state"]

    def get_start_mode(self, service_name: str) -> ServiceStartMode:
        return self._get(service_name, "get_start_mode")["start_mode"]

    def set_start_mode(self, service_name: str, mode: ServiceStartMode) -> None:
        svc = self._get(service_name, "set_start_mode")
        self.calls.append(("set_start_mode", f"{service_name}={mode.value}"))
        svc["start_mode"] = mode

    def start(self, service_name: str) -> None:
        svc = self._get(service_name, "start")
        self.calls.append(("start", service_name))
        if svc["start_mode"] == ServiceStartMode.DISABLED:
            raise ControlError(OutcomeKind.OTHER_FAULT, "service is disabled", service_name)
        svc["run_state"] = ServiceRunState.RUNNING

    def stop(self, service_name: str) -> None:
        svc = self._get(service_name, "stop")
        self.calls.append(("stop", service_name))
        svc["run_state"] = ServiceRunState.STOPPED

    def _get(self, service_name: str, op: str) -> dict:
        if op in self.failing_ops.get(service_name, set()):
            raise ControlError(OutcomeKind.TIMEOUT, f"{op} timed out", service_name)
        if service_name not in self.services:
            raise ControlError(OutcomeKind.NOT_FOUND, "no such service", service_name)
        return self.services[service_name]


@pytest.fixture
def task_directory():
    """Task directory holding the three NVIDIA telemetry tasks, all enabled."""
    return FakeTaskDirectory(
        {
            "\\NvTmMon_{B2FE1952-0186-46C3-BAEC-A80AA35AC5B8}": True,
            "\\NvTmRep_{B2FE1952-0186-46C3-BAEC-A80AA35AC5B8}": True,
            "\\NvTmRepOnLogon_{B2FE1952-0186-46C3-BAEC-A80AA35AC5B8}": True,
        }
    )


@pytest.fixture
def service_directory():
    """Service directory with a running, automatic NvTelemetryContainer."""
    directory = FakeServiceDirectory()
    directory.add("NvTelemetryContainer", "NVIDIA Telemetry Container")
    return directory


@pytest.fixture
def capture_logger():
    """A dedicated logger for caplog-based assertions."""
    logger = logging.getLogger("nvtelemetry.tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def info_lines(caplog):
    """Return a callable listing INFO messages recorded for the test logger."""
    caplog.set_level(logging.DEBUG, logger="nvtelemetry")

    def _lines(logger_name: str = "nvtelemetry.tests") -> list[str]:
        return [
            r.getMessage()
            for r in caplog.records
            if r.name == logger_name and r.levelno == logging.INFO
        ]

    return _lines
