"""Metric calculators.

Stateless transformations from farm records to derived numbers. None of these
raise: empty collections degrade to zero or to the configured fallback
values, and every division is floored at a divisor of 1.
"""

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from farm_reports.common.logging import get_logger
from farm_reports.common.time_utils import in_window
from farm_reports.reporting.config import ReportingConfig
from farm_reports.reporting.estimation import EstimationPolicy, FixedEstimationPolicy
from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    EquipmentROI,
    FieldRecord,
    TaskRecord,
)

logger = get_logger(__name__)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"


@dataclass
class TaskCosts:
    """Supplies and labor cost totals from tasks."""

    supplies: float
    labor: float
    total: float
    is_fallback: bool = False


@dataclass
class EquipmentCosts:
    """Monthly equipment cost and its fixed proportional split."""

    total: float
    maintenance: float
    depreciation: float
    fuel: float
    is_fallback: bool = False


@dataclass
class ResourceUsage:
    """Consumption of one resource over a set of tasks, fields and equipment."""

    name: str
    quantity: float
    unit: str
    cost: float


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for positives, matching dashboard rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide with the denominator floored at 1."""
    return numerator / max(denominator, 1)


def same_id(left: Any, right: Any) -> bool:
    """Compare record identifiers that may arrive as int or str."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


def percentage_split(amounts: Sequence[float], total: float) -> list[int]:
    """Integer percentages of total for each amount.

    Each value is the half-up rounded share. When rounding drifts the sum
    more than one point away from 100, the entries with the largest rounding
    error are nudged until the drift is within one point.
    """
    if total <= 0:
        return [0 for _ in amounts]
    exact = [100 * amount / total for amount in amounts]
    rounded = [int(round_half_up(value)) for value in exact]
    drift = sum(rounded) - 100
    while abs(drift) > 1:
        step = 1 if drift > 0 else -1
        # Entry whose rounding moved it furthest in the drift direction
        idx = max(range(len(rounded)), key=lambda i: (rounded[i] - exact[i]) * step)
        rounded[idx] -= step
        drift -= step
    return rounded


def total_acreage(fields: Iterable[FieldRecord]) -> float:
    return sum(f.size for f in fields)


def average_utilization(equipment: Sequence[EquipmentRecord]) -> float:
    """Mean utilization rate across equipment, 0 when there is none."""
    if not equipment:
        return 0.0
    return sum(eq.utilization_rate for eq in equipment) / len(equipment)


def tasks_in_window(
    tasks: Iterable[TaskRecord], start: datetime, end: datetime
) -> list[TaskRecord]:
    """Tasks whose assigned (or created) date falls within [start, end]."""
    return [t for t in tasks if in_window(t.scheduled_at, start, end)]


def yield_activities_in_window(
    activities: Iterable[ActivityRecord], start: datetime, end: datetime
) -> list[ActivityRecord]:
    """Harvest and yield measurement activities within [start, end]."""
    return [a for a in activities if a.is_yield_bearing and in_window(a.timestamp, start, end)]


class MetricCalculator:
    """Derives yield, revenue, cost and resource figures from farm records.

    Usage:
        calc = MetricCalculator(ReportingConfig(), FixedEstimationPolicy())
        calc.estimate_yield(field)
        calc.calculate_task_costs(tasks)
    """

    def __init__(
        self,
        config: ReportingConfig | None = None,
        policy: EstimationPolicy | None = None,
    ):
        self.config = config or ReportingConfig()
        self.policy = policy or FixedEstimationPolicy()

    def estimate_yield(self, field: FieldRecord) -> float:
        """Estimated total yield (bu) for a field without harvest data.

        Base yield for the crop times acreage, scaled by the estimation
        policy's factor. Fields with no recorded size count as one acre.
        """
        acres = field.size or 1
        return acres * self.config.base_yield_for(field.crop_type) * self.policy.yield_factor(field)

    def classify_yield_trend(self, activities: Sequence[ActivityRecord]) -> str:
        """Classify the yield trend of a series of yield-bearing activities.

        The two most recent activities are compared with all earlier ones:
        "up" above the configured up ratio, "down" below the down ratio,
        otherwise "stable". Fewer than two data points is "stable".
        """
        if len(activities) < 2:
            return TREND_STABLE

        ordered = sorted(
            activities,
            key=lambda a: a.timestamp.timestamp() if a.timestamp else float("-inf"),
        )
        recent = sum(a.yield_amount or 0 for a in ordered[-2:])
        earlier = sum(a.yield_amount or 0 for a in ordered[:-2])

        if recent > earlier * self.config.trend_up_ratio:
            return TREND_UP
        if recent < earlier * self.config.trend_down_ratio:
            return TREND_DOWN
        return TREND_STABLE

    def estimate_revenue(self, field: FieldRecord) -> float:
        """Estimated revenue for a field: estimated yield times crop price."""
        return self.estimate_yield(field) * self.config.price_for(field.crop_type)

    def estimate_total_revenue(self, fields: Iterable[FieldRecord]) -> float:
        return sum(self.estimate_revenue(f) for f in fields)

    def calculate_task_costs(self, tasks: Iterable[TaskRecord]) -> TaskCosts:
        """Sum supply and labor costs, substituting fallbacks when there are none."""
        tasks = list(tasks)
        supplies = sum(t.supply_cost for t in tasks)
        labor = sum(t.labor_cost for t in tasks)
        if supplies + labor <= 0:
            logger.debug("fallback_estimate_used", metric="task_costs", tasks=len(tasks))
            supplies = self.config.fallback_supply_cost
            labor = self.config.fallback_labor_cost
            return TaskCosts(supplies=supplies, labor=labor, total=supplies + labor, is_fallback=True)
        return TaskCosts(supplies=supplies, labor=labor, total=supplies + labor)

    def calculate_equipment_costs(
        self,
        equipment: Iterable[EquipmentRecord],
        calculate_roi: Callable[[EquipmentRecord], EquipmentROI],
    ) -> EquipmentCosts:
        """Monthly equipment cost from total cost of ownership / 12.

        Maintenance, depreciation and fuel are fixed proportional splits of
        the total. When every unit's ownership cost is zero, the configured
        fallback total is split instead.
        """
        total = sum(calculate_roi(eq).total_cost_of_ownership / 12 for eq in equipment)
        is_fallback = total <= 0
        if is_fallback:
            logger.debug("fallback_estimate_used", metric="equipment_costs")
            total = self.config.fallback_equipment_total
        return EquipmentCosts(
            total=total,
            maintenance=total * self.config.maintenance_share,
            depreciation=total * self.config.depreciation_share,
            fuel=total * self.config.fuel_share,
            is_fallback=is_fallback,
        )

    def calculate_field_costs(
        self, fields: Iterable[FieldRecord], tasks: Sequence[TaskRecord]
    ) -> float:
        """Total task cost attributed to the given fields, or the fallback."""
        total = sum(
            t.cost
            for f in fields
            for t in tasks
            if same_id(t.field_id, f.field_id)
        )
        if total <= 0:
            logger.debug("fallback_estimate_used", metric="field_costs")
            return self.config.fallback_field_operations_cost
        return total

    def calculate_single_field_cost(
        self, field: FieldRecord, tasks: Sequence[TaskRecord]
    ) -> float:
        """Task cost for one field, falling back to a per-acre estimate."""
        total = sum(t.cost for t in tasks if same_id(t.field_id, field.field_id))
        return total or field.size * self.config.fallback_field_cost_per_acre

    def calculate_resource_usage(
        self,
        tasks: Sequence[TaskRecord],
        equipment: Sequence[EquipmentRecord],
        fields: Sequence[FieldRecord],
    ) -> list[ResourceUsage]:
        """Resource catalog derived from task counts, acreage and equipment hours.

        Rows with zero cost are dropped.
        """
        cfg = self.config
        planting = sum(1 for t in tasks if t.category == "planting")
        acres = total_acreage(fields)
        hours = sum(eq.total_hours for eq in equipment)
        task_count = len(tasks)

        rows = [
            ResourceUsage("Seeds", planting * cfg.seed_lbs_per_planting, "lbs",
                          planting * cfg.seed_cost_per_planting),
            ResourceUsage("Fertilizer", acres * cfg.fertilizer_lbs_per_acre, "lbs",
                          acres * cfg.fertilizer_cost_per_acre),
            ResourceUsage("Fuel", hours * cfg.fuel_gallons_per_hour, "gallons",
                          hours * cfg.fuel_cost_per_hour),
            ResourceUsage("Water", acres * cfg.water_gallons_per_acre, "gallons",
                          acres * cfg.water_cost_per_acre),
            ResourceUsage("Labor", task_count * cfg.labor_hours_per_task, "hours",
                          task_count * cfg.labor_cost_per_task),
        ]
        return [row for row in rows if row.cost > 0]

    def calculate_year_yield(
        self, fields: Sequence[FieldRecord], activities: Iterable[ActivityRecord]
    ) -> float:
        """Harvested amount for a year's activities.

        Without any recorded yield, a quarter of the summed field estimates
        stands in.
        """
        recorded = sum(a.yield_amount or 0 for a in activities if a.is_yield_bearing)
        if recorded:
            return recorded
        return sum(self.estimate_yield(f) for f in fields) / 4

    def calculate_total_yield(
        self,
        fields: Sequence[FieldRecord],
        activities: Iterable[ActivityRecord],
        start: datetime,
        end: datetime,
    ) -> float:
        """Recorded yield within [start, end], or the summed field estimates."""
        recorded = sum(
            a.yield_amount or 0 for a in yield_activities_in_window(activities, start, end)
        )
        if recorded:
            return recorded
        return sum(self.estimate_yield(f) for f in fields)

    def calculate_monthly_patterns(
        self, activities: Iterable[ActivityRecord]
    ) -> list[tuple[str, int, float]]:
        """Bucket activities by calendar month across all years.

        Returns:
            Twelve (month name, activity count, productivity score) tuples.
        """
        counts = [0] * 12
        for activity in activities:
            if activity.timestamp is not None:
                counts[activity.timestamp.month - 1] += 1
        return [
            (MONTH_NAMES[i], counts[i], counts[i] * self.policy.productivity_factor(i))
            for i in range(12)
        ]
