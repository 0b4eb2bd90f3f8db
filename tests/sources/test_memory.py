"""Tests for in-memory readers and snapshot loading."""

import json
from pathlib import Path

import pytest
import yaml

from farm_reports.sources.interfaces import FieldRecord
from farm_reports.sources.memory import InMemoryFarmData, InMemoryFieldReader, load_snapshot

SNAPSHOT = {
    "fields": [{"Id": 1, "name": "North", "cropType": "corn", "size": 10}],
    "tasks": [{"Id": 1, "fieldId": 1, "type": "planting", "assignedDate": "2024-04-01"}],
    "activities": [
        {"Id": 1, "fieldId": 1, "type": "harvest", "timestamp": "2024-09-01T00:00:00Z",
         "yieldAmount": 1500}
    ],
    "equipment": [{"Id": 1, "name": "Tractor", "totalHours": 100}],
}


class TestInMemoryReaders:
    @pytest.mark.asyncio
    async def test_readers_return_collections(self, farm_data: InMemoryFarmData):
        assert len(await farm_data.field_reader().get_all()) == 3
        assert len(await farm_data.task_reader().get_all()) == 3
        assert len(await farm_data.activity_reader().get_all()) == 5
        assert len(await farm_data.equipment_reader().get_all()) == 2

    @pytest.mark.asyncio
    async def test_reader_returns_copy(self):
        records = [FieldRecord(field_id=1, name="North")]
        reader = InMemoryFieldReader(records)

        result = await reader.get_all()
        result.clear()

        assert len(await reader.get_all()) == 1

    def test_equipment_reader_fuel_price(self, farm_data: InMemoryFarmData):
        assert farm_data.equipment_reader(fuel_price=4.25).fuel_price == 4.25
        assert farm_data.equipment_reader().fuel_price == 3.50


class TestLoadSnapshot:
    def test_load_json(self, temp_dir: Path):
        path = temp_dir / "snapshot.json"
        path.write_text(json.dumps(SNAPSHOT))

        data = load_snapshot(path)

        assert data.fields[0].name == "North"
        assert data.tasks[0].category == "planting"
        assert data.activities[0].yield_amount == 1500
        assert data.equipment[0].total_hours == 100

    def test_load_yaml(self, temp_dir: Path):
        path = temp_dir / "snapshot.yaml"
        path.write_text(yaml.dump(SNAPSHOT))

        data = load_snapshot(path)

        assert len(data.fields) == 1
        assert data.fields[0].crop_type == "corn"

    def test_missing_collections_are_empty(self, temp_dir: Path):
        path = temp_dir / "partial.json"
        path.write_text(json.dumps({"fields": SNAPSHOT["fields"]}))

        data = load_snapshot(path)

        assert len(data.fields) == 1
        assert data.tasks == []
        assert data.activities == []
        assert data.equipment == []

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(temp_dir / "nope.json")

    def test_non_mapping_snapshot(self, temp_dir: Path):
        path = temp_dir / "list.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError):
            load_snapshot(path)

    def test_shipped_sample_snapshot_loads(self):
        sample = Path(__file__).parents[2] / "data" / "farm_snapshot.json"

        data = load_snapshot(sample)

        assert len(data.fields) == 4
        assert data.equipment[0].maintenance_history[0].estimated_cost == 650
