"""Error taxonomy for OS control calls.

Every call into the service-control or task-scheduler subsystem ends in one
of the OutcomeKind values. Adapters raise ControlError for anything other
than OK; the discovery and transition layers catch it and turn it into a
log line.
"""

from enum import Enum


class OutcomeKind(Enum):
    """Outcome of a single OS call."""

    OK = "ok"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    OTHER_FAULT = "other_fault"

    def describe(self) -> str:
        """Return a short human-readable description."""
        return {
            OutcomeKind.OK: "ok",
            OutcomeKind.NOT_FOUND: "not found",
            OutcomeKind.PERMISSION_DENIED: "access denied",
            OutcomeKind.TIMEOUT: "timed out",
            OutcomeKind.OTHER_FAULT: "failed",
        }[self]


# Substrings seen in PowerShell/.NET error output, checked in order
_NOT_FOUND_MARKERS = (
    "noservicefoundforgivenname",
    "cannot find any service",
    "does not exist",
    "no msft_scheduledtask objects found",
    "cannot find the file specified",
    "was not found on computer",
)
_PERMISSION_MARKERS = (
    "access is denied",
    "access denied",
    "unauthorizedaccess",
    "permissiondenied",
    "0x80070005",
)
_TIMEOUT_MARKERS = (
    "time out has expired",
    "timeoutexception",
    "timed out",
)


def classify_error(message: str) -> OutcomeKind:
    """Map raw error text from PowerShell to an OutcomeKind.

    Args:
        message: stderr or exception text.

    Returns:
        The best matching OutcomeKind (OTHER_FAULT when nothing matches).
    """
    text = (message or "").lower()

    if any(marker in text for marker in _PERMISSION_MARKERS):
        return OutcomeKind.PERMISSION_DENIED
    if any(marker in text for marker in _TIMEOUT_MARKERS):
        return OutcomeKind.TIMEOUT
    if any(marker in text for marker in _NOT_FOUND_MARKERS):
        return OutcomeKind.NOT_FOUND
    return OutcomeKind.OTHER_FAULT


class ControlError(Exception):
    """Raised by directory adapters when an OS call does not succeed.

    Attributes:
        outcome: Classified outcome of the failed call.
        target: Service name or task path the call was made against.
    """

    def __init__(self, outcome: OutcomeKind, message: str = "", target: str = "") -> None:
        super().__init__(message or outcome.describe())
        self.outcome = outcome
        self.target = target

    @property
    def reason(self) -> str:
        """Short reason suitable for a log line."""
        return self.outcome.describe()


def failure_reason(error: Exception) -> str:
    """Return the short reason logged for a failed OS call."""
    if isinstance(error, ControlError):
        return error.reason
    return str(error) or type(error).__name__
