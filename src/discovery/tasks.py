"""Scheduled task adapter - resolves and toggles Windows scheduled tasks.

Tasks are looked up with Get-ScheduledTask (which accepts wildcards in
-TaskName) and toggled with Enable-ScheduledTask / Disable-ScheduledTask.
"""

import logging
from typing import Any

from src.core.errors import ControlError, OutcomeKind
from src.core.models import TelemetryTask
from src.discovery.base import BaseTaskDirectory
from src.discovery.powershell import (
    DEFAULT_COMMAND_TIMEOUT,
    CommandResult,
    is_windows,
    ps_quote,
    run_powershell,
)

logger = logging.getLogger("nvtelemetry.discovery.tasks")


class PowerShellTaskDirectory(BaseTaskDirectory):
    """Task scheduler access through PowerShell's ScheduledTasks module.

    Example:
        directory = PowerShellTaskDirectory()
        task = directory.find("NvTmMon_*")
        if task:
            directory.set_enabled(task, False)
    """

    def __init__(self, command_timeout: int = DEFAULT_COMMAND_TIMEOUT) -> None:
        """Initialize the adapter.

        Args:
            command_timeout: Timeout in seconds for each PowerShell call.
        """
        self.command_timeout = command_timeout
        self._is_windows = is_windows()

    def is_available(self) -> bool:
        return self._is_windows

    def find(self, pattern: str) -> TelemetryTask | None:
        self._require_windows(pattern)

        result = self._run_powershell(
            f"Get-ScheduledTask -TaskName {ps_quote(pattern)} -ErrorAction SilentlyContinue | "
            f"Select-Object -First 1 TaskName, TaskPath, "
            f"@{{N='Enabled';E={{[bool]$_.Settings.Enabled}}}} | "
            f"ConvertTo-Json -Compress"
        )
        result.raise_for_outcome(pattern)

        data = result.json()
        if not data:
            logger.debug(f"No task matches {pattern}")
            return None
        if not isinstance(data, dict):
            raise ControlError(
                OutcomeKind.OTHER_FAULT,
                f"Unexpected task query output: {result.output!r}",
                pattern,
            )

        return self._parse_task(data, pattern)

    def is_enabled(self, task: TelemetryTask) -> bool:
        self._require_windows(task.path)

        result = self._run_powershell(
            f"$t = Get-ScheduledTask -TaskPath {ps_quote(task.folder)} "
            f"-TaskName {ps_quote(task.name)} -ErrorAction Stop; "
            f"[bool]$t.Settings.Enabled | ConvertTo-Json -Compress"
        )
        result.raise_for_outcome(task.path)

        value = result.json()
        if not isinstance(value, bool):
            raise ControlError(
                OutcomeKind.OTHER_FAULT,
                f"Unexpected task state output: {result.output!r}",
                task.path,
            )
        return value

    def set_enabled(self, task: TelemetryTask, enabled: bool) -> None:
        self._require_windows(task.path)

        verb = "Enable" if enabled else "Disable"
        result = self._run_powershell(
            f"{verb}-ScheduledTask -TaskPath {ps_quote(task.folder)} "
            f"-TaskName {ps_quote(task.name)} -ErrorAction Stop | Out-Null"
        )
        result.raise_for_outcome(task.path)

    def _parse_task(self, raw: dict[str, Any], pattern: str) -> TelemetryTask | None:
        """Build a TelemetryTask from Get-ScheduledTask output."""
        name = raw.get("TaskName") or ""
        if not name:
            return None

        folder = raw.get("TaskPath") or "\\"
        if not folder.endswith("\\"):
            folder += "\\"

        return TelemetryTask(
            path=folder + name,
            name=name,
            folder=folder,
            enabled=bool(raw.get("Enabled", False)),
            pattern=pattern,
        )

    def _require_windows(self, target: str) -> None:
        if not self._is_windows:
            raise ControlError(
                OutcomeKind.OTHER_FAULT,
                "Task scheduler access is only available on Windows",
                target,
            )

    def _run_powershell(self, command: str) -> CommandResult:
        return run_powershell(command, timeout=self.command_timeout)
