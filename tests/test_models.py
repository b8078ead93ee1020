"""Unit tests for core data models and the telemetry catalog."""

import pytest

from src.core.catalog import (
    SERVICE_NAMES,
    TASK_PATTERNS,
    TELEMETRY_CATALOG,
    CatalogEntry,
    service_names,
    task_patterns,
)
from src.core.models import (
    ComponentKind,
    ServiceRunState,
    ServiceStartMode,
    TelemetryService,
    TelemetryTask,
)


class TestServiceRunState:
    """Tests for ServiceRunState enum."""

    def test_from_string(self) -> None:
        """Test conversion from .NET and WMI spellings."""
        assert ServiceRunState.from_string("Running") == ServiceRunState.RUNNING
        assert ServiceRunState.from_string("running") == ServiceRunState.RUNNING
        assert ServiceRunState.from_string("Stopped") == ServiceRunState.STOPPED
        assert ServiceRunState.from_string("StartPending") == ServiceRunState.START_PENDING
        assert ServiceRunState.from_string("Stop Pending") == ServiceRunState.STOP_PENDING
        assert ServiceRunState.from_string("ContinuePending") == ServiceRunState.CONTINUE_PENDING

    def test_from_string_unknown(self) -> None:
        """Test unknown and empty values."""
        assert ServiceRunState.from_string("Exploded") == ServiceRunState.UNKNOWN
        assert ServiceRunState.from_string("") == ServiceRunState.UNKNOWN
        assert ServiceRunState.from_string(None) == ServiceRunState.UNKNOWN


class TestServiceStartMode:
    """Tests for ServiceStartMode enum."""

    def test_from_int(self) -> None:
        assert ServiceStartMode.from_value(0) == ServiceStartMode.BOOT
        assert ServiceStartMode.from_value(2) == ServiceStartMode.AUTOMATIC
        assert ServiceStartMode.from_value(3) == ServiceStartMode.MANUAL
        assert ServiceStartMode.from_value(4) == ServiceStartMode.DISABLED
        assert ServiceStartMode.from_value(99) == ServiceStartMode.UNKNOWN

    def test_from_string(self) -> None:
        assert ServiceStartMode.from_value("Auto") == ServiceStartMode.AUTOMATIC
        assert ServiceStartMode.from_value("Automatic") == ServiceStartMode.AUTOMATIC
        assert (
            ServiceStartMode.from_value("Automatic (Delayed Start)")
            == ServiceStartMode.AUTOMATIC_DELAYED
        )
        assert ServiceStartMode.from_value("Manual") == ServiceStartMode.MANUAL
        assert ServiceStartMode.from_value("Demand") == ServiceStartMode.MANUAL
        assert ServiceStartMode.from_value("Disabled") == ServiceStartMode.DISABLED
        assert ServiceStartMode.from_value(None) == ServiceStartMode.UNKNOWN

    def test_powershell_name(self) -> None:
        """Test names passed to Set-Service -StartupType."""
        assert ServiceStartMode.AUTOMATIC.powershell_name == "Automatic"
        assert ServiceStartMode.DISABLED.powershell_name == "Disabled"
        assert ServiceStartMode.AUTOMATIC_DELAYED.powershell_name == "AutomaticDelayedStart"


class TestTelemetryTask:
    """Tests for TelemetryTask snapshot."""

    def test_basic_creation(self) -> None:
        task = TelemetryTask(path="\\NvTmMon_{X}", name="NvTmMon_{X}")

        assert task.kind == ComponentKind.TASK
        assert task.folder == "\\"
        assert task.enabled is True
        assert task.state_label == "Enabled"

    def test_disabled_label(self) -> None:
        task = TelemetryTask(path="\\NvTmRep_{X}", name="NvTmRep_{X}", enabled=False)
        assert task.state_label == "Disabled"

    def test_identity_is_value_based(self) -> None:
        a = TelemetryTask(path="\\NvTmMon_{X}", name="NvTmMon_{X}")
        b = TelemetryTask(path="\\NvTmMon_{X}", name="NvTmMon_{X}")
        assert a == b
        assert len({a, b}) == 1

    def test_snapshot_is_immutable(self) -> None:
        task = TelemetryTask(path="\\NvTmMon_{X}", name="NvTmMon_{X}")
        with pytest.raises(AttributeError):
            task.enabled = False  # type: ignore[misc]

    def test_to_dict(self) -> None:
        task = TelemetryTask(
            path="\\NvTmMon_{X}",
            name="NvTmMon_{X}",
            enabled=False,
            pattern="NvTmMon_*",
        )
        data = task.to_dict()

        assert data["kind"] == "TASK"
        assert data["path"] == "\\NvTmMon_{X}"
        assert data["enabled"] is False
        assert data["pattern"] == "NvTmMon_*"


class TestTelemetryService:
    """Tests for TelemetryService snapshot and its composite projection."""

    @pytest.mark.parametrize(
        "run_state,start_mode,expected",
        [
            (ServiceRunState.RUNNING, ServiceStartMode.AUTOMATIC, True),
            (ServiceRunState.RUNNING, ServiceStartMode.MANUAL, False),
            (ServiceRunState.RUNNING, ServiceStartMode.DISABLED, False),
            (ServiceRunState.RUNNING, ServiceStartMode.AUTOMATIC_DELAYED, False),
            (ServiceRunState.STOPPED, ServiceStartMode.AUTOMATIC, False),
            (ServiceRunState.STOPPED, ServiceStartMode.DISABLED, False),
            (ServiceRunState.START_PENDING, ServiceStartMode.AUTOMATIC, False),
            (ServiceRunState.UNKNOWN, ServiceStartMode.UNKNOWN, False),
        ],
    )
    def test_is_enabled_projection(self, run_state, start_mode, expected) -> None:
        """Enabled only when running with an automatic start mode."""
        service = TelemetryService(
            service_name="NvTelemetryContainer",
            run_state=run_state,
            start_mode=start_mode,
        )
        assert service.is_enabled is expected
        assert service.state_label == ("Enabled" if expected else "Disabled")

    def test_label(self) -> None:
        service = TelemetryService(
            service_name="NvTelemetryContainer",
            display_name="NVIDIA Telemetry Container",
        )
        assert service.label == "NVIDIA Telemetry Container (NvTelemetryContainer)"

    def test_label_without_display_name(self) -> None:
        service = TelemetryService(service_name="NvTelemetryContainer")
        assert service.label == "NvTelemetryContainer (NvTelemetryContainer)"

    def test_to_dict(self) -> None:
        service = TelemetryService(
            service_name="NvTelemetryContainer",
            display_name="NVIDIA Telemetry Container",
            run_state=ServiceRunState.STOPPED,
            start_mode=ServiceStartMode.DISABLED,
        )
        data = service.to_dict()

        assert data["kind"] == "SERVICE"
        assert data["run_state"] == "Stopped"
        assert data["start_mode"] == "Disabled"
        assert data["enabled"] is False


class TestCatalog:
    """Tests for the fixed telemetry catalog."""

    def test_task_patterns(self) -> None:
        """Monitor, reporter and logon-reporter, in that order."""
        assert TASK_PATTERNS == ("NvTmMon_*", "NvTmRep_*", "NvTmRepOnLogon_*")
        assert task_patterns() == list(TASK_PATTERNS)

    def test_service_names(self) -> None:
        assert SERVICE_NAMES == ("NvTelemetryContainer",)
        assert service_names() == ["NvTelemetryContainer"]

    def test_catalog_entries(self) -> None:
        assert len(TELEMETRY_CATALOG) == 4
        assert TELEMETRY_CATALOG[0] == CatalogEntry(ComponentKind.TASK, "NvTmMon_*")
        assert TELEMETRY_CATALOG[-1] == CatalogEntry(ComponentKind.SERVICE, "NvTelemetryContainer")

    def test_entries_are_immutable(self) -> None:
        with pytest.raises(AttributeError):
            TELEMETRY_CATALOG[0].name = "Other_*"  # type: ignore[misc]

    def test_custom_catalog_helpers(self) -> None:
        catalog = (
            CatalogEntry(ComponentKind.SERVICE, "SvcA"),
            CatalogEntry(ComponentKind.TASK, "TaskA_*"),
        )
        assert task_patterns(catalog) == ["TaskA_*"]
        assert service_names(catalog) == ["SvcA"]
