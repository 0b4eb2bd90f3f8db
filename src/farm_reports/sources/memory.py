"""In-memory farm record readers and snapshot loading."""

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from farm_reports.common.logging import get_logger
from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    FieldRecord,
    IActivityReader,
    IEquipmentReader,
    IFieldReader,
    ITaskReader,
    TaskRecord,
)

logger = get_logger(__name__)


class InMemoryFieldReader(IFieldReader):
    """Field reader over a list held in memory."""

    def __init__(self, records: list[FieldRecord]):
        self._records = records

    async def get_all(self) -> list[FieldRecord]:
        await asyncio.sleep(0)
        return list(self._records)


class InMemoryTaskReader(ITaskReader):
    """Task reader over a list held in memory."""

    def __init__(self, records: list[TaskRecord]):
        self._records = records

    async def get_all(self) -> list[TaskRecord]:
        await asyncio.sleep(0)
        return list(self._records)


class InMemoryActivityReader(IActivityReader):
    """Activity reader over a list held in memory."""

    def __init__(self, records: list[ActivityRecord]):
        self._records = records

    async def get_all(self) -> list[ActivityRecord]:
        await asyncio.sleep(0)
        return list(self._records)


class InMemoryEquipmentReader(IEquipmentReader):
    """Equipment reader over a list held in memory."""

    def __init__(self, records: list[EquipmentRecord], fuel_price: float | None = None):
        self._records = records
        if fuel_price is not None:
            self.fuel_price = fuel_price

    async def get_all(self) -> list[EquipmentRecord]:
        await asyncio.sleep(0)
        return list(self._records)


@dataclass
class InMemoryFarmData:
    """A full set of farm records with readers over each collection.

    Usage:
        data = load_snapshot("data/farm_snapshot.json")
        orchestrator = ReportOrchestrator(
            fields=data.field_reader(),
            tasks=data.task_reader(),
            activities=data.activity_reader(),
            equipment=data.equipment_reader(),
        )
    """

    fields: list[FieldRecord] = field(default_factory=list)
    tasks: list[TaskRecord] = field(default_factory=list)
    activities: list[ActivityRecord] = field(default_factory=list)
    equipment: list[EquipmentRecord] = field(default_factory=list)

    def field_reader(self) -> InMemoryFieldReader:
        return InMemoryFieldReader(self.fields)

    def task_reader(self) -> InMemoryTaskReader:
        return InMemoryTaskReader(self.tasks)

    def activity_reader(self) -> InMemoryActivityReader:
        return InMemoryActivityReader(self.activities)

    def equipment_reader(self, fuel_price: float | None = None) -> InMemoryEquipmentReader:
        return InMemoryEquipmentReader(self.equipment, fuel_price=fuel_price)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryFarmData":
        """Build from a raw snapshot mapping of camelCase records."""
        return cls(
            fields=[FieldRecord.from_dict(r) for r in data.get("fields") or []],
            tasks=[TaskRecord.from_dict(r) for r in data.get("tasks") or []],
            activities=[ActivityRecord.from_dict(r) for r in data.get("activities") or []],
            equipment=[EquipmentRecord.from_dict(r) for r in data.get("equipment") or []],
        )


def load_snapshot(path: str | Path) -> InMemoryFarmData:
    """Load farm records from a JSON or YAML snapshot file.

    The snapshot is a mapping with ``fields``, ``tasks``, ``activities`` and
    ``equipment`` lists. Missing collections are treated as empty.

    Args:
        path: Snapshot file path (.json, .yaml or .yml).

    Returns:
        Loaded farm data.

    Raises:
        FileNotFoundError: If the snapshot file doesn't exist.
        ValueError: If the snapshot is not a mapping.
    """
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {snapshot_path}")

    text = snapshot_path.read_text()
    if snapshot_path.suffix.lower() in (".yaml", ".yml"):
        raw = yaml.safe_load(text) or {}
    else:
        raw = json.loads(text) if text.strip() else {}

    if not isinstance(raw, dict):
        raise ValueError(f"Snapshot must be a mapping of collections: {snapshot_path}")

    data = InMemoryFarmData.from_dict(raw)
    logger.info(
        "snapshot_loaded",
        path=str(snapshot_path),
        fields=len(data.fields),
        tasks=len(data.tasks),
        activities=len(data.activities),
        equipment=len(data.equipment),
    )
    return data
