"""Fixed catalog of NVIDIA telemetry components."""

from dataclasses import dataclass

from src.core.models import ComponentKind


@dataclass(frozen=True)
class CatalogEntry:
    """A telemetry component the controller knows how to find.

    Attributes:
        kind: Whether the entry names a scheduled task or a service
        name: Task name pattern (wildcards allowed) or exact service name
    """

    kind: ComponentKind
    name: str


# Monitor, reporter and logon-reporter tasks. The suffix is a per-install GUID.
TASK_PATTERNS = (
    "NvTmMon_*",
    "NvTmRep_*",
    "NvTmRepOnLogon_*",
)

SERVICE_NAMES = ("NvTelemetryContainer",)

TELEMETRY_CATALOG: tuple[CatalogEntry, ...] = tuple(
    [CatalogEntry(ComponentKind.TASK, pattern) for pattern in TASK_PATTERNS]
    + [CatalogEntry(ComponentKind.SERVICE, name) for name in SERVICE_NAMES]
)


def task_patterns(catalog: tuple[CatalogEntry, ...] = TELEMETRY_CATALOG) -> list[str]:
    """Return the task patterns of a catalog, in catalog order."""
    return [entry.name for entry in catalog if entry.kind == ComponentKind.TASK]


def service_names(catalog: tuple[CatalogEntry, ...] = TELEMETRY_CATALOG) -> list[str]:
    """Return the service names of a catalog, in catalog order."""
    return [entry.name for entry in catalog if entry.kind == ComponentKind.SERVICE]
