"""PowerShell command runner shared by the directory adapters."""

import json
import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Any

from src.core.errors import ControlError, OutcomeKind, classify_error

logger = logging.getLogger("nvtelemetry.discovery.powershell")

DEFAULT_COMMAND_TIMEOUT = 60

# Make .NET method exceptions terminating so they surface as a non-zero exit code
PREAMBLE = "$ErrorActionPreference = 'Stop'; "


@dataclass
class CommandResult:
    """Result of a PowerShell invocation.

    Attributes:
        success: Whether the command exited with code 0
        output: Stripped stdout
        error: Stripped stderr (empty on success)
        outcome: Classified outcome
    """

    success: bool
    output: str = ""
    error: str = ""
    outcome: OutcomeKind = OutcomeKind.OK

    def raise_for_outcome(self, target: str = "") -> None:
        """Raise ControlError unless the command succeeded."""
        if not self.success:
            raise ControlError(self.outcome, self.error, target)

    def json(self) -> Any:
        """Parse stdout as JSON; empty output parses to None.

        Raises:
            ControlError: If stdout is not valid JSON.
        """
        if not self.output:
            return None
        try:
            return json.loads(self.output)
        except json.JSONDecodeError as e:
            raise ControlError(OutcomeKind.OTHER_FAULT, f"Failed to parse PowerShell output: {e}") from e


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def is_windows() -> bool:
    return os.name == "nt"


def run_powershell(command: str, timeout: int = DEFAULT_COMMAND_TIMEOUT) -> CommandResult:
    """Run a PowerShell command.

    Args:
        command: Script text passed to -Command.
        timeout: Seconds before the process is killed.

    Returns:
        CommandResult; this function does not raise.
    """
    logger.debug(f"PowerShell: {command}")

    try:
        result = subprocess.run(
            ["powershell.exe", "-NoProfile", "-NonInteractive", "-Command", PREAMBLE + command],
            capture_output=True,
            text=True,
            timeout=timeout,
            creationflags=(
                subprocess.CREATE_NO_WINDOW if hasattr(subprocess, "CREATE_NO_WINDOW") else 0
            ),
        )

    except subprocess.TimeoutExpired:
        return CommandResult(
            success=False,
            error=f"Command timed out after {timeout}s",
            outcome=OutcomeKind.TIMEOUT,
        )
    except FileNotFoundError:
        return CommandResult(
            success=False,
            error="PowerShell not found",
            outcome=OutcomeKind.OTHER_FAULT,
        )
    except OSError as e:
        return CommandResult(success=False, error=str(e), outcome=classify_error(str(e)))
    except Exception as e:
        return CommandResult(success=False, error=str(e), outcome=OutcomeKind.OTHER_FAULT)

    if result.returncode != 0:
        error = result.stderr.strip()
        return CommandResult(
            success=False,
            output=result.stdout.strip(),
            error=error,
            outcome=classify_error(error),
        )

    return CommandResult(success=True, output=result.stdout.strip())
