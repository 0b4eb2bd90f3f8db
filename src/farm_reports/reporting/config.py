"""Configuration for the reporting engine."""

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass
class ReportingConfig:
    """Constants used by the metric calculators and report builders.

    Every fallback value substituted when source data is missing lives here so
    it can be overridden per deployment (``reporting:`` section of the app
    config) or per test.

    Attributes:
        base_yields: Bushels per acre by crop type ("default" for unknown crops).
        price_per_bushel: Sale price (USD) by crop type.

        fallback_supply_cost: Supplies cost used when tasks carry no cost data.
        fallback_labor_cost: Labor cost used when tasks carry no cost data.
        fallback_equipment_total: Monthly equipment cost used when ownership
            costs are all zero.
        maintenance_share: Share of equipment cost attributed to maintenance.
        depreciation_share: Share of equipment cost attributed to depreciation.
        fuel_share: Share of equipment cost attributed to fuel.
        fallback_field_operations_cost: Field operations cost used when tasks
            carry no per-field cost.
        fallback_field_cost_per_acre: Per-acre cost for one field's revenue row.

        seed_lbs_per_planting / seed_cost_per_planting: Seeds per planting task.
        fertilizer_lbs_per_acre / fertilizer_cost_per_acre: Fertilizer per acre.
        fuel_gallons_per_hour / fuel_cost_per_hour: Fuel per equipment hour.
        water_gallons_per_acre / water_cost_per_acre: Water per acre.
        labor_hours_per_task / labor_cost_per_task: Labor per task.
        fuel_price: Price per gallon for equipment ownership cost.

        estimation_policy: "fixed" (deterministic) or "seeded" (jittered).
        estimation_seed: Seed for the "seeded" policy.

        top_fields_count: Number of fields listed as top performers.
        improvement_count: Number of worst fields listed as opportunities.
        trend_up_ratio / trend_down_ratio: Yield trend thresholds.
        max_recommendations: Cap on resource recommendations.
        seasonal_years: Number of years in the seasonal comparison.
    """

    base_yields: dict[str, float] = field(
        default_factory=lambda: {"corn": 150.0, "wheat": 60.0, "soybeans": 45.0, "default": 100.0}
    )
    price_per_bushel: dict[str, float] = field(
        default_factory=lambda: {"corn": 4.50, "wheat": 6.20, "soybeans": 12.00, "default": 5.00}
    )

    # Insufficient-data fallbacks
    fallback_supply_cost: float = 15000.0
    fallback_labor_cost: float = 8000.0
    fallback_equipment_total: float = 12000.0
    maintenance_share: float = 0.3
    depreciation_share: float = 0.5
    fuel_share: float = 0.2
    fallback_field_operations_cost: float = 8000.0
    fallback_field_cost_per_acre: float = 200.0

    # Resource consumption rates
    seed_lbs_per_planting: float = 50.0
    seed_cost_per_planting: float = 500.0
    fertilizer_lbs_per_acre: float = 100.0
    fertilizer_cost_per_acre: float = 45.0
    fuel_gallons_per_hour: float = 2.5
    fuel_cost_per_hour: float = 7.5
    water_gallons_per_acre: float = 15000.0
    water_cost_per_acre: float = 25.0
    labor_hours_per_task: float = 4.0
    labor_cost_per_task: float = 60.0
    fuel_price: float = 3.50

    estimation_policy: str = "fixed"
    estimation_seed: int | None = None

    top_fields_count: int = 5
    improvement_count: int = 3
    trend_up_ratio: float = 1.1
    trend_down_ratio: float = 0.9
    max_recommendations: int = 3
    seasonal_years: int = 3

    def base_yield_for(self, crop_type: str | None) -> float:
        """Base yield (bu/acre) for a crop type, falling back to the default."""
        key = (crop_type or "").lower()
        return self.base_yields.get(key, self.base_yields["default"])

    def price_for(self, crop_type: str | None) -> float:
        """Price per bushel for a crop type, falling back to the default."""
        key = (crop_type or "").lower()
        return self.price_per_bushel.get(key, self.price_per_bushel["default"])

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportingConfig":
        """Create config from dictionary, ignoring unknown keys.

        Crop tables are merged over the defaults so a partial table only
        overrides the crops it names.
        """
        config = cls()
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                continue
            if key in ("base_yields", "price_per_bushel"):
                merged = dict(getattr(config, key))
                merged.update({str(k).lower(): float(v) for k, v in value.items()})
                setattr(config, key, merged)
            else:
                setattr(config, key, value)
        return config
