"""Pytest configuration and fixtures."""

import tempfile
from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml

from farm_reports.common.config import AppConfig, load_config
from farm_reports.reporting.builders import ReportInputs, ReportWindow
from farm_reports.reporting.calculators import MetricCalculator
from farm_reports.reporting.config import ReportingConfig
from farm_reports.reporting.estimation import FixedEstimationPolicy
from farm_reports.reporting.orchestrator import ReportOrchestrator
from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    FieldRecord,
    MaintenanceRecord,
    TaskRecord,
    TaskStatus,
)
from farm_reports.sources.memory import InMemoryFarmData

FIXED_NOW = datetime(2024, 11, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def dev_config_path(temp_dir: Path) -> Path:
    """Create a temporary dev config file."""
    config_data = {
        "environment": "test",
        "sources": {
            "backend": "memory",
            "snapshot_path": str(temp_dir / "snapshot.json"),
        },
        "farm_api": {
            "base_url": "https://farm.example.com/api",
            "api_token": "test_token",
            "timeout_seconds": 10,
        },
        "logging": {
            "level": "DEBUG",
            "format": "console",
            "log_file": None,
        },
        "reporting": {
            "estimation_policy": "fixed",
            "fallback_supply_cost": 12000,
        },
    }
    config_path = temp_dir / "test_config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def config(dev_config_path: Path) -> AppConfig:
    """Load test configuration."""
    return load_config(dev_config_path)


@pytest.fixture
def window() -> ReportWindow:
    """The 2024 calendar year, evaluated in mid-November 2024."""
    return ReportWindow(
        start=datetime(2024, 1, 1, tzinfo=UTC),
        end=datetime(2024, 12, 31, 23, 59, 59, tzinfo=UTC),
        now=FIXED_NOW,
    )


@pytest.fixture
def calculator() -> MetricCalculator:
    """Calculator with deterministic estimates."""
    return MetricCalculator(ReportingConfig(), FixedEstimationPolicy())


@pytest.fixture
def farm_data() -> InMemoryFarmData:
    """A small farm: three fields, tasks with costs, harvests and two machines."""
    fields = [
        FieldRecord(field_id=1, name="North", crop_type="corn", size=10),
        FieldRecord(field_id=2, name="South", crop_type="wheat", size=20),
        FieldRecord(field_id=3, name="Creek Bottom", crop_type="soybeans", size=5),
    ]
    tasks = [
        TaskRecord(
            task_id=1,
            field_id=1,
            category="planting",
            status=TaskStatus.COMPLETED,
            assigned_date=datetime(2024, 4, 1, tzinfo=UTC),
            completed_date=datetime(2024, 4, 3, tzinfo=UTC),
            supply_cost=3000,
            labor_cost=1000,
            cost=4000,
        ),
        TaskRecord(
            task_id=2,
            field_id=2,
            category="fertilizing",
            status=TaskStatus.PENDING,
            created_date=datetime(2024, 6, 1, tzinfo=UTC),
            due_date=datetime(2024, 6, 10, tzinfo=UTC),
            supply_cost=1000,
            labor_cost=0,
            cost=1000,
        ),
        TaskRecord(
            task_id=3,
            field_id=3,
            category="planting",
            status=TaskStatus.COMPLETED,
            assigned_date=datetime(2023, 5, 1, tzinfo=UTC),
            due_date=datetime(2023, 5, 2, tzinfo=UTC),
            supply_cost=9999,
            labor_cost=9999,
            cost=9999,
        ),
    ]
    activities = [
        ActivityRecord(1, field_id=1, activity_type="harvest",
                       timestamp=datetime(2024, 9, 1, tzinfo=UTC), yield_amount=1500),
        ActivityRecord(2, field_id=2, activity_type="yield_measurement",
                       timestamp=datetime(2024, 7, 1, tzinfo=UTC), yield_amount=1000),
        ActivityRecord(3, field_id=2, activity_type="harvest",
                       timestamp=datetime(2024, 7, 15, tzinfo=UTC), yield_amount=600),
        ActivityRecord(4, field_id=3, activity_type="spraying",
                       timestamp=datetime(2024, 6, 1, tzinfo=UTC)),
        ActivityRecord(5, field_id=1, activity_type="harvest",
                       timestamp=datetime(2023, 9, 1, tzinfo=UTC), yield_amount=1200),
    ]
    equipment = [
        EquipmentRecord(
            equipment_id=1,
            name="Tractor",
            total_hours=100,
            utilization_rate=80,
            purchase_price=100000,
            current_value=77000,
            maintenance_history=[
                MaintenanceRecord(record_id=1, estimated_cost=1000, status="completed"),
            ],
        ),
        EquipmentRecord(equipment_id=2, name="Sprayer", total_hours=20, utilization_rate=40),
    ]
    return InMemoryFarmData(fields=fields, tasks=tasks, activities=activities, equipment=equipment)


@pytest.fixture
def report_inputs(farm_data: InMemoryFarmData) -> ReportInputs:
    """Fetched-record bundle for calling builders directly."""
    return ReportInputs(
        fields=farm_data.fields,
        tasks=farm_data.tasks,
        activities=farm_data.activities,
        equipment=farm_data.equipment,
        calculate_roi=farm_data.equipment_reader(fuel_price=0).calculate_roi,
    )


@pytest.fixture
def orchestrator(farm_data: InMemoryFarmData) -> ReportOrchestrator:
    """Orchestrator over the sample farm with a fixed clock and policy."""
    return ReportOrchestrator(
        fields=farm_data.field_reader(),
        tasks=farm_data.task_reader(),
        activities=farm_data.activity_reader(),
        equipment=farm_data.equipment_reader(fuel_price=0),
        config=ReportingConfig(),
        policy=FixedEstimationPolicy(),
        clock=lambda: FIXED_NOW,
    )
