"""Farm record sources: entity types, readers and clients."""

from farm_reports.sources.client import (
    ApiActivityReader,
    ApiEquipmentReader,
    ApiFieldReader,
    ApiTaskReader,
    FarmApiClient,
    FarmApiError,
)
from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    EquipmentROI,
    FieldRecord,
    IActivityReader,
    IEquipmentReader,
    IFieldReader,
    ITaskReader,
    MaintenanceRecord,
    TaskRecord,
    TaskStatus,
)
from farm_reports.sources.memory import InMemoryFarmData, load_snapshot

__all__ = [
    "ActivityRecord",
    "EquipmentRecord",
    "EquipmentROI",
    "FieldRecord",
    "MaintenanceRecord",
    "TaskRecord",
    "TaskStatus",
    "IActivityReader",
    "IEquipmentReader",
    "IFieldReader",
    "ITaskReader",
    "InMemoryFarmData",
    "load_snapshot",
    "FarmApiClient",
    "FarmApiError",
    "ApiFieldReader",
    "ApiTaskReader",
    "ApiActivityReader",
    "ApiEquipmentReader",
]
