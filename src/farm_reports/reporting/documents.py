"""Report document types.

Each report kind produces one document variant. Documents hold raw numbers;
``to_dict`` renders the dashboard card shape with formatted labels
(``"$12,500"``, ``"150.0 bu/acre"``) under camelCase keys.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class ReportKind(str, Enum):
    """The six analytical views."""

    YIELD = "yield"
    FINANCIAL = "financial"
    SEASONAL = "seasonal"
    PERFORMANCE = "performance"
    RESOURCES = "resources"
    CUSTOM = "custom"


class ExportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"


# Export pseudo-kind combining yield, financial, performance and resources
ALL_REPORTS = "all"


def format_currency(value: float) -> str:
    """Format a dollar amount with thousands separators.

    Whole amounts have no decimals; fractional amounts keep two.
    """
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if float(amount).is_integer():
        return f"{sign}${amount:,.0f}"
    return f"{sign}${amount:,.2f}"


def format_number(value: float) -> int | float:
    """Whole floats become ints so they render without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class FieldYield:
    """Yield figures for one field."""

    field_name: str
    field_id: Any
    crop_type: str
    acres: float
    yield_per_acre: float
    total_yield: float
    trend: str

    @property
    def yield_label(self) -> str:
        return f"{self.yield_per_acre:.1f} bu/acre"

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldName": self.field_name,
            "fieldId": self.field_id,
            "cropType": self.crop_type,
            "acres": format_number(self.acres),
            "yield": self.yield_label,
            "yieldPerAcre": self.yield_per_acre,
            "totalYield": format_number(self.total_yield),
            "trend": self.trend,
        }


@dataclass
class YieldSummary:
    total_fields: int
    total_yield: float
    average_yield: float
    top_performer: str
    improvement_opportunities: list[FieldYield]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFields": self.total_fields,
            "totalYield": format_number(self.total_yield),
            "averageYield": self.average_yield,
            "topPerformer": self.top_performer,
            "improvementOpportunities": [f.to_dict() for f in self.improvement_opportunities],
        }


@dataclass
class YieldAnalysis:
    """Per-field yield ranking for a window."""

    kind: ClassVar[ReportKind] = ReportKind.YIELD

    field_yields: list[FieldYield]
    top_fields: list[FieldYield]
    summary: YieldSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldYields": [f.to_dict() for f in self.field_yields],
            "topFields": [f.to_dict() for f in self.top_fields],
            "summary": self.summary.to_dict(),
        }


@dataclass
class CostBreakdownItem:
    """One cost category with its share of total costs."""

    category: str
    amount: float
    percentage: int

    @property
    def amount_label(self) -> str:
        return format_currency(self.amount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "amount": self.amount_label,
            "percentage": self.percentage,
        }


@dataclass
class FieldFinancials:
    field_name: str
    revenue: float
    costs: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldName": self.field_name,
            "revenue": format_currency(self.revenue),
            "costs": format_currency(self.costs),
        }


@dataclass
class FinancialReport:
    """Costs, revenue and profit for a window.

    Revenue is estimated from the current field snapshot and does not depend
    on the window, while costs do.
    """

    kind: ClassVar[ReportKind] = ReportKind.FINANCIAL

    total_revenue: float
    total_costs: float
    net_profit: float
    profit_margin: float | None
    cost_breakdown: list[CostBreakdownItem]
    revenue_by_field: list[FieldFinancials]

    @property
    def profit_margin_label(self) -> str:
        if self.profit_margin is None:
            return "0%"
        return f"{self.profit_margin:.1f}%"

    @property
    def summary(self) -> dict[str, str]:
        return {
            "totalRevenue": format_currency(self.total_revenue),
            "totalCosts": format_currency(self.total_costs),
            "netProfit": format_currency(self.net_profit),
            "profitMargin": self.profit_margin_label,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.summary,
            "costBreakdown": [item.to_dict() for item in self.cost_breakdown],
            "revenueByField": [row.to_dict() for row in self.revenue_by_field],
        }


@dataclass
class YearComparison:
    year: int
    total_yield: float
    change: float
    activities: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": str(self.year),
            "yield": f"{self.total_yield:.1f} bu",
            "change": self.change,
            "activities": self.activities,
        }


@dataclass
class MonthlyPattern:
    month: str
    activities: int
    productivity: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "activities": self.activities,
            "productivity": self.productivity,
        }


@dataclass
class SeasonalComparison:
    """Year-over-year yield and calendar-month activity patterns."""

    kind: ClassVar[ReportKind] = ReportKind.SEASONAL

    year_comparison: list[YearComparison]
    monthly_patterns: list[MonthlyPattern]
    best_season: MonthlyPattern
    overall_trend: str
    average_growth: float

    @property
    def summary(self) -> dict[str, Any]:
        return {
            "bestSeason": self.best_season.month,
            "overallTrend": self.overall_trend,
            "averageGrowth": self.average_growth,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "yearComparison": [y.to_dict() for y in self.year_comparison],
            "monthlyPatterns": [m.to_dict() for m in self.monthly_patterns],
            "bestSeason": self.best_season.to_dict(),
            "trends": {
                "overallTrend": self.overall_trend,
                "averageGrowth": self.average_growth,
            },
        }


@dataclass
class Kpi:
    label: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value}


@dataclass
class PerformanceSummary:
    """Headline totals with qualitative trend tags."""

    total_yield: float
    total_revenue: float
    total_costs: float
    net_profit: float
    yield_trend: str
    revenue_trend: str
    costs_trend: str
    profit_trend: str
    yield_change: str
    revenue_change: str
    costs_change: str
    profit_change: str

    @property
    def total_yield_label(self) -> str:
        return f"{self.total_yield:.1f} bu"

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalYield": self.total_yield_label,
            "totalRevenue": format_currency(self.total_revenue),
            "totalCosts": format_currency(self.total_costs),
            "netProfit": format_currency(self.net_profit),
            "yieldTrend": self.yield_trend,
            "yieldChange": self.yield_change,
            "revenueTrend": self.revenue_trend,
            "revenueChange": self.revenue_change,
            "costsTrend": self.costs_trend,
            "costsChange": self.costs_change,
            "profitTrend": self.profit_trend,
            "profitChange": self.profit_change,
        }


@dataclass
class Efficiency:
    task_efficiency: float
    equipment_utilization: float
    cost_efficiency: float
    yield_efficiency: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "taskEfficiency": self.task_efficiency,
            "equipmentUtilization": self.equipment_utilization,
            "costEfficiency": self.cost_efficiency,
            "yieldEfficiency": self.yield_efficiency,
        }


@dataclass
class PerformanceMetrics:
    """KPIs over a window."""

    kind: ClassVar[ReportKind] = ReportKind.PERFORMANCE

    summary: PerformanceSummary
    kpis: list[Kpi]
    efficiency: Efficiency
    task_completion_rate: float
    average_utilization: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "kpis": [k.to_dict() for k in self.kpis],
            "efficiency": self.efficiency.to_dict(),
        }


@dataclass
class ResourceRow:
    name: str
    quantity: float
    unit: str
    cost: float
    percentage: int

    @property
    def amount_label(self) -> str:
        if self.unit:
            return f"{format_number(self.quantity)} {self.unit}"
        return format_currency(self.cost)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount_label,
            "cost": format_number(self.cost),
            "percentage": self.percentage,
        }


@dataclass
class ResourceUsageReport:
    """Resource consumption with cost shares and recommendations."""

    kind: ClassVar[ReportKind] = ReportKind.RESOURCES

    resources: list[ResourceRow]
    total_cost: float
    cost_per_acre: float
    utilization_rate: float
    recommendations: list[str]

    @property
    def summary(self) -> dict[str, str]:
        return {
            "totalCost": format_currency(self.total_cost),
            "costPerAcre": f"${self.cost_per_acre:.0f}",
            "utilizationRate": f"{self.utilization_rate:.1f}%",
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "resources": [r.to_dict() for r in self.resources],
            "totalCost": format_currency(self.total_cost),
            "efficiency": {
                "costPerAcre": f"${self.cost_per_acre:.0f}",
                "utilizationRate": f"{self.utilization_rate:.1f}%",
            },
            "recommendations": list(self.recommendations),
        }


@dataclass
class ReportTemplate:
    name: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass
class CustomReportCatalog:
    """Available metrics and templates for custom reports."""

    kind: ClassVar[ReportKind] = ReportKind.CUSTOM

    available_metrics: list[str]
    templates: list[ReportTemplate]
    recent_custom_reports: list[dict[str, Any]] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        return {
            "metrics": len(self.available_metrics),
            "templates": len(self.templates),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "availableMetrics": list(self.available_metrics),
            "templates": [t.to_dict() for t in self.templates],
            "recentCustomReports": list(self.recent_custom_reports),
        }


ReportDocument = Union[
    YieldAnalysis,
    FinancialReport,
    SeasonalComparison,
    PerformanceMetrics,
    ResourceUsageReport,
    CustomReportCatalog,
]


@dataclass
class CombinedReport:
    """The report set exported under the "all" kind."""

    yield_analysis: YieldAnalysis
    financial: FinancialReport
    performance: PerformanceMetrics
    resources: ResourceUsageReport

    def to_dict(self) -> dict[str, Any]:
        return {
            "yield": self.yield_analysis.to_dict(),
            "financial": self.financial.to_dict(),
            "performance": self.performance.to_dict(),
            "resources": self.resources.to_dict(),
        }
