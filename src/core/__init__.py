"""Core module - models, catalog, configuration and infrastructure."""

from .catalog import SERVICE_NAMES, TASK_PATTERNS, TELEMETRY_CATALOG, CatalogEntry
from .config import Config, ControlConfig, load_config, save_config
from .errors import ControlError, OutcomeKind
from .logging_config import get_logger, setup_logging
from .models import (
    ComponentKind,
    ServiceRunState,
    ServiceStartMode,
    TelemetryService,
    TelemetryTask,
)

__all__ = [
    # Models
    "ComponentKind",
    "ServiceRunState",
    "ServiceStartMode",
    "TelemetryTask",
    "TelemetryService",
    # Catalog
    "CatalogEntry",
    "TASK_PATTERNS",
    "SERVICE_NAMES",
    "TELEMETRY_CATALOG",
    # Errors
    "OutcomeKind",
    "ControlError",
    # Config
    "Config",
    "ControlConfig",
    "load_config",
    "save_config",
    "setup_logging",
    "get_logger",
]
