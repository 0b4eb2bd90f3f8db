"""Tests for farm record types and reader interfaces."""

from datetime import UTC, datetime

import pytest

from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    FieldRecord,
    MaintenanceRecord,
    TaskRecord,
    TaskStatus,
)
from farm_reports.sources.memory import InMemoryEquipmentReader


class TestFieldRecord:
    def test_from_dashboard_record(self):
        field = FieldRecord.from_dict({
            "Id": 7,
            "name": "North",
            "cropType": "Corn",
            "size": "12.5",
            "status": "growing",
            "plantingDate": "2024-04-15",
        })

        assert field.field_id == 7
        assert field.name == "North"
        assert field.crop_type == "Corn"
        assert field.size == 12.5
        assert field.planting_date == datetime(2024, 4, 15, tzinfo=UTC)

    def test_missing_size_defaults_to_zero(self):
        field = FieldRecord.from_dict({"Id": 1, "name": "Bare"})
        assert field.size == 0.0
        assert field.crop_type == ""


class TestTaskRecord:
    def test_from_dashboard_record(self):
        task = TaskRecord.from_dict({
            "Id": 3,
            "fieldId": {"Id": 1, "Name": "North"},
            "title": "Plant",
            "type": "Planting",
            "status": "completed",
            "assignedDate": "2024-04-01",
            "dueDate": "2024-04-05",
            "supplyCost": 300,
            "laborCost": "150.5",
        })

        assert task.field_id == 1
        assert task.category == "planting"
        assert task.status == TaskStatus.COMPLETED
        assert task.is_completed
        assert task.supply_cost == 300
        assert task.labor_cost == 150.5
        assert task.cost == 0.0

    def test_scheduled_at_falls_back_to_created(self):
        task = TaskRecord.from_dict({"Id": 1, "createdAt": "2024-02-02"})
        assert task.scheduled_at == datetime(2024, 2, 2, tzinfo=UTC)

        task = TaskRecord.from_dict({
            "Id": 1, "assignedDate": "2024-03-03", "createdDate": "2024-02-02"
        })
        assert task.scheduled_at == datetime(2024, 3, 3, tzinfo=UTC)

    def test_finished_at_falls_back_to_due(self):
        task = TaskRecord.from_dict({"Id": 1, "dueDate": "2024-05-05"})
        assert task.finished_at == datetime(2024, 5, 5, tzinfo=UTC)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("completed", TaskStatus.COMPLETED),
            ("In Progress", TaskStatus.IN_PROGRESS),
            ("in_progress", TaskStatus.IN_PROGRESS),
            ("archived", TaskStatus.UNKNOWN),
            (None, TaskStatus.UNKNOWN),
        ],
    )
    def test_status_normalization(self, raw, expected):
        assert TaskStatus.from_raw(raw) == expected


class TestActivityRecord:
    def test_yield_bearing_types(self):
        harvest = ActivityRecord.from_dict({"Id": 1, "type": "harvest", "yieldAmount": 10})
        measurement = ActivityRecord.from_dict({"Id": 2, "type": "yield_measurement"})
        spraying = ActivityRecord.from_dict({"Id": 3, "type": "spraying"})

        assert harvest.is_yield_bearing
        assert harvest.yield_amount == 10
        assert measurement.is_yield_bearing
        assert measurement.yield_amount is None
        assert not spraying.is_yield_bearing

    def test_field_reference_object(self):
        activity = ActivityRecord.from_dict({"Id": 1, "fieldId": {"Id": 9}})
        assert activity.field_id == 9


class TestEquipmentROI:
    def test_cost_of_ownership(self):
        equipment = EquipmentRecord.from_dict({
            "Id": 1,
            "totalHours": 500,
            "purchasePrice": 50000,
            "currentValue": 40000,
            "totalFuel": 1000,
            "maintenanceHistory": [
                {"Id": 1, "estimatedCost": 400, "status": "completed"},
                {"Id": 2, "estimatedCost": 600, "status": "scheduled"},
                {"Id": 3, "estimatedCost": 999, "status": "cancelled"},
            ],
        })
        reader = InMemoryEquipmentReader([equipment], fuel_price=2.0)

        roi = reader.calculate_roi(equipment)

        assert roi.depreciation == 10000
        assert roi.maintenance_cost == 1000
        assert roi.fuel_cost == 2000
        assert roi.total_cost_of_ownership == 13000
        assert roi.cost_per_hour == 26

    def test_appreciated_equipment_has_no_depreciation(self):
        equipment = EquipmentRecord(equipment_id=1, purchase_price=100, current_value=150)
        roi = InMemoryEquipmentReader([]).calculate_roi(equipment)

        assert roi.depreciation == 0
        assert roi.total_cost_of_ownership == 0
        assert roi.cost_per_hour == 0

    def test_maintenance_record_parsing(self):
        record = MaintenanceRecord.from_dict({
            "Id": 5,
            "serviceType": "oil change",
            "date": "2024-03-01T10:00:00Z",
            "estimatedCost": "250",
            "status": "completed",
        })
        assert record.service_type == "oil change"
        assert record.estimated_cost == 250
        assert record.date == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
