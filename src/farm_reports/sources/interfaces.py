"""Farm record interfaces and data types.

Records arrive in the dashboard's camelCase shape (``Id``, ``cropType``,
``assignedDate``...). The ``from_dict`` constructors normalize them into the
snake_case dataclasses used by the reporting engine and tolerate missing
optional fields.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from farm_reports.common.time_utils import parse_datetime

# Activity types that carry a harvested amount
YIELD_ACTIVITY_TYPES = frozenset({"harvest", "yield_measurement"})

# Default fuel price (USD/gallon) used for equipment cost of ownership
DEFAULT_FUEL_PRICE = 3.50


class TaskStatus(str, Enum):
    """Task status values used by the dashboard."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw: str | None) -> "TaskStatus":
        """Get status from a raw value, tolerating case and separators."""
        if not raw:
            return cls.UNKNOWN
        normalized = str(raw).strip().lower().replace("_", "-").replace(" ", "-")
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


def _ref_id(value: Any) -> Any:
    """Resolve a lookup reference that may be an id or an {Id, Name} object."""
    if isinstance(value, dict):
        return value.get("Id")
    return value


def _number(value: Any, default: float = 0.0) -> float:
    """Coerce a possibly-missing numeric field to float."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _first(raw: dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among keys."""
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


@dataclass
class FieldRecord:
    """A unit of farmland with a crop type and acreage."""

    field_id: Any
    name: str
    crop_type: str = ""
    size: float = 0.0
    status: str = ""
    planting_date: datetime | None = None
    growth_stage: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "FieldRecord":
        return cls(
            field_id=_first(raw, "Id", "id", "field_id"),
            name=str(_first(raw, "name", "Name") or ""),
            crop_type=str(_first(raw, "cropType", "crop_type") or ""),
            size=_number(raw.get("size")),
            status=str(raw.get("status") or ""),
            planting_date=parse_datetime(_first(raw, "plantingDate", "planting_date")),
            growth_stage=str(_first(raw, "growthStage", "growth_stage") or ""),
        )


@dataclass
class TaskRecord:
    """A scheduled or completed unit of work tied to a field."""

    task_id: Any
    field_id: Any = None
    title: str = ""
    category: str = ""
    status: TaskStatus = TaskStatus.UNKNOWN
    assigned_date: datetime | None = None
    created_date: datetime | None = None
    due_date: datetime | None = None
    completed_date: datetime | None = None
    supply_cost: float = 0.0
    labor_cost: float = 0.0
    cost: float = 0.0

    @property
    def scheduled_at(self) -> datetime | None:
        """Date used to place the task in a reporting window."""
        return self.assigned_date or self.created_date

    @property
    def finished_at(self) -> datetime | None:
        """Date used to place a completed task in a reporting window."""
        return self.completed_date or self.due_date

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TaskRecord":
        return cls(
            task_id=_first(raw, "Id", "id", "task_id"),
            field_id=_ref_id(_first(raw, "fieldId", "field_id")),
            title=str(_first(raw, "title", "Name") or ""),
            category=str(_first(raw, "type", "category") or "").lower(),
            status=TaskStatus.from_raw(raw.get("status")),
            assigned_date=parse_datetime(_first(raw, "assignedDate", "assigned_date")),
            created_date=parse_datetime(
                _first(raw, "createdAt", "createdDate", "created_date")
            ),
            due_date=parse_datetime(_first(raw, "dueDate", "due_date")),
            completed_date=parse_datetime(_first(raw, "completedDate", "completed_date")),
            supply_cost=_number(_first(raw, "supplyCost", "supply_cost")),
            labor_cost=_number(_first(raw, "laborCost", "labor_cost")),
            cost=_number(raw.get("cost")),
        )


@dataclass
class ActivityRecord:
    """A logged agronomic event tied to a field and timestamp."""

    activity_id: Any
    field_id: Any = None
    activity_type: str = ""
    timestamp: datetime | None = None
    yield_amount: float | None = None
    description: str = ""

    @property
    def is_yield_bearing(self) -> bool:
        return self.activity_type in YIELD_ACTIVITY_TYPES

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ActivityRecord":
        yield_amount = _first(raw, "yieldAmount", "yield_amount")
        return cls(
            activity_id=_first(raw, "Id", "id", "activity_id"),
            field_id=_ref_id(_first(raw, "fieldId", "field_id")),
            activity_type=str(_first(raw, "type", "activity_type") or "").lower(),
            timestamp=parse_datetime(raw.get("timestamp")),
            yield_amount=_number(yield_amount) if yield_amount is not None else None,
            description=str(raw.get("description") or ""),
        )


@dataclass
class MaintenanceRecord:
    """A maintenance entry attached to a piece of equipment."""

    record_id: Any
    service_type: str = ""
    date: datetime | None = None
    estimated_cost: float = 0.0
    status: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "MaintenanceRecord":
        return cls(
            record_id=_first(raw, "Id", "id"),
            service_type=str(_first(raw, "serviceType", "service_type") or ""),
            date=parse_datetime(raw.get("date")),
            estimated_cost=_number(_first(raw, "estimatedCost", "cost", "estimated_cost")),
            status=str(raw.get("status") or ""),
        )


@dataclass
class EquipmentRecord:
    """A piece of farm equipment with usage and cost data."""

    equipment_id: Any
    name: str = ""
    equipment_type: str = ""
    status: str = ""
    total_hours: float = 0.0
    utilization_rate: float = 0.0
    purchase_price: float = 0.0
    current_value: float = 0.0
    total_fuel: float = 0.0
    maintenance_history: list[MaintenanceRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "EquipmentRecord":
        history = raw.get("maintenanceHistory") or raw.get("maintenance_history") or []
        return cls(
            equipment_id=_first(raw, "Id", "id", "equipment_id"),
            name=str(_first(raw, "name", "Name") or ""),
            equipment_type=str(_first(raw, "type", "equipment_type") or ""),
            status=str(raw.get("status") or ""),
            total_hours=_number(_first(raw, "totalHours", "total_hours")),
            utilization_rate=_number(_first(raw, "utilizationRate", "utilization_rate")),
            purchase_price=_number(_first(raw, "purchasePrice", "purchase_price")),
            current_value=_number(_first(raw, "currentValue", "current_value")),
            total_fuel=_number(_first(raw, "totalFuel", "total_fuel")),
            maintenance_history=[MaintenanceRecord.from_dict(item) for item in history],
        )


@dataclass
class EquipmentROI:
    """Ownership cost figures for one piece of equipment."""

    total_cost_of_ownership: float
    depreciation: float
    maintenance_cost: float
    fuel_cost: float
    cost_per_hour: float


class IFieldReader(ABC):
    """Read access to field records."""

    @abstractmethod
    async def get_all(self) -> list[FieldRecord]:
        """Get every field record."""
        ...


class ITaskReader(ABC):
    """Read access to task records."""

    @abstractmethod
    async def get_all(self) -> list[TaskRecord]:
        """Get every task record."""
        ...


class IActivityReader(ABC):
    """Read access to activity records."""

    @abstractmethod
    async def get_all(self) -> list[ActivityRecord]:
        """Get every activity record."""
        ...


class IEquipmentReader(ABC):
    """Read access to equipment records plus ownership cost calculation."""

    fuel_price: float = DEFAULT_FUEL_PRICE

    @abstractmethod
    async def get_all(self) -> list[EquipmentRecord]:
        """Get every equipment record."""
        ...

    def calculate_roi(self, equipment: EquipmentRecord) -> EquipmentROI:
        """Calculate total cost of ownership for a piece of equipment.

        Ownership cost is depreciation (purchase price less current value,
        never negative) plus the estimated cost of every non-cancelled
        maintenance entry plus fuel burned at ``fuel_price``.

        Args:
            equipment: Equipment record.

        Returns:
            Ownership cost breakdown.
        """
        depreciation = max(equipment.purchase_price - equipment.current_value, 0.0)
        maintenance_cost = sum(
            record.estimated_cost
            for record in equipment.maintenance_history
            if record.status != "cancelled"
        )
        fuel_cost = equipment.total_fuel * self.fuel_price
        total = depreciation + maintenance_cost + fuel_cost
        return EquipmentROI(
            total_cost_of_ownership=total,
            depreciation=depreciation,
            maintenance_cost=maintenance_cost,
            fuel_cost=fuel_cost,
            cost_per_hour=total / max(equipment.total_hours, 1),
        )
