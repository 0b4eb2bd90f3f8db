"""Report builders.

One builder per report kind. Each is a synchronous, single-pass function of
already-fetched farm records and a reporting window; fetching is the
orchestrator's job.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from farm_reports.common.time_utils import in_window, utc_now
from farm_reports.reporting.calculators import (
    TREND_DOWN,
    TREND_STABLE,
    TREND_UP,
    MetricCalculator,
    average_utilization,
    percentage_split,
    round_half_up,
    safe_divide,
    same_id,
    tasks_in_window,
    total_acreage,
    yield_activities_in_window,
)
from farm_reports.reporting.documents import (
    CostBreakdownItem,
    CustomReportCatalog,
    Efficiency,
    FieldFinancials,
    FieldYield,
    FinancialReport,
    Kpi,
    MonthlyPattern,
    PerformanceMetrics,
    PerformanceSummary,
    ReportDocument,
    ReportKind,
    ReportTemplate,
    ResourceRow,
    ResourceUsageReport,
    SeasonalComparison,
    YearComparison,
    YieldAnalysis,
    YieldSummary,
)
from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    EquipmentROI,
    FieldRecord,
    TaskRecord,
)

AVAILABLE_METRICS = [
    "Yield by Field",
    "Cost Analysis",
    "Equipment Efficiency",
    "Task Performance",
    "Seasonal Trends",
    "Profitability Analysis",
]

REPORT_TEMPLATES = [
    ("Executive Summary", "High-level overview for management"),
    ("Operational Report", "Detailed operational metrics"),
    ("Financial Analysis", "Cost and revenue breakdown"),
    ("Efficiency Report", "Resource utilization and efficiency"),
]

GENERAL_RESOURCE_ADVICE = [
    "Monitor resource consumption trends monthly",
    "Implement precision agriculture to optimize resource application",
    "Consider bulk purchasing for frequently used supplies",
]


@dataclass
class ReportWindow:
    """Inclusive reporting window plus the clock reading for the request."""

    start: datetime
    end: datetime
    now: datetime = field(default_factory=utc_now)


@dataclass
class ReportInputs:
    """Farm records fetched for one report request."""

    fields: list[FieldRecord]
    tasks: list[TaskRecord]
    activities: list[ActivityRecord]
    equipment: list[EquipmentRecord]
    calculate_roi: Callable[[EquipmentRecord], EquipmentROI]


def build_yield_analysis(
    inputs: ReportInputs, window: ReportWindow, calc: MetricCalculator
) -> YieldAnalysis:
    """Rank fields by yield within the window.

    Each yield-bearing activity contributes its recorded amount, or the
    field's estimate when it has none. A field with no yield-bearing
    activity in the window is credited with its estimate.
    """
    yield_acts = yield_activities_in_window(inputs.activities, window.start, window.end)

    field_yields: list[FieldYield] = []
    for field_record in inputs.fields:
        field_acts = [a for a in yield_acts if same_id(a.field_id, field_record.field_id)]
        if field_acts:
            total = sum(a.yield_amount or calc.estimate_yield(field_record) for a in field_acts)
        else:
            total = calc.estimate_yield(field_record)

        field_yields.append(
            FieldYield(
                field_name=field_record.name,
                field_id=field_record.field_id,
                crop_type=field_record.crop_type,
                acres=field_record.size,
                yield_per_acre=round_half_up(safe_divide(total, field_record.size), 1),
                total_yield=total,
                trend=calc.classify_yield_trend(field_acts),
            )
        )

    # sorted() is stable, ties keep source order
    ranked = sorted(field_yields, key=lambda fy: fy.total_yield, reverse=True)
    total_yield = sum(fy.total_yield for fy in ranked)
    worst_count = calc.config.improvement_count

    return YieldAnalysis(
        field_yields=ranked,
        top_fields=ranked[: calc.config.top_fields_count],
        summary=YieldSummary(
            total_fields=len(inputs.fields),
            total_yield=total_yield,
            average_yield=round_half_up(total_yield / len(ranked), 1) if ranked else 0.0,
            top_performer=ranked[0].field_name if ranked else "N/A",
            improvement_opportunities=ranked[-worst_count:] if worst_count > 0 else [],
        ),
    )


def build_financial_report(
    inputs: ReportInputs, window: ReportWindow, calc: MetricCalculator
) -> FinancialReport:
    """Costs within the window against estimated revenue.

    Revenue comes from the current field snapshot regardless of the window.
    """
    period_tasks = tasks_in_window(inputs.tasks, window.start, window.end)

    task_costs = calc.calculate_task_costs(period_tasks)
    equipment_costs = calc.calculate_equipment_costs(inputs.equipment, inputs.calculate_roi)
    field_costs = calc.calculate_field_costs(inputs.fields, period_tasks)

    total_costs = task_costs.total + equipment_costs.total + field_costs
    total_revenue = calc.estimate_total_revenue(inputs.fields)
    net_profit = total_revenue - total_costs

    # Categories partition total_costs: equipment excludes its maintenance share
    categories = [
        ("Seeds & Supplies", task_costs.supplies),
        ("Equipment", equipment_costs.total - equipment_costs.maintenance),
        ("Labor", task_costs.labor),
        ("Maintenance", equipment_costs.maintenance),
        ("Field Operations", field_costs),
    ]
    percentages = percentage_split([amount for _, amount in categories], total_costs)
    breakdown = sorted(
        (
            CostBreakdownItem(category=name, amount=amount, percentage=pct)
            for (name, amount), pct in zip(categories, percentages)
        ),
        key=lambda item: item.percentage,
        reverse=True,
    )

    return FinancialReport(
        total_revenue=total_revenue,
        total_costs=total_costs,
        net_profit=net_profit,
        profit_margin=(net_profit / total_revenue * 100) if total_revenue > 0 else None,
        cost_breakdown=breakdown,
        revenue_by_field=[
            FieldFinancials(
                field_name=f.name,
                revenue=calc.estimate_revenue(f),
                costs=calc.calculate_single_field_cost(f, period_tasks),
            )
            for f in inputs.fields
        ],
    )


def build_seasonal_comparison(
    inputs: ReportInputs, window: ReportWindow, calc: MetricCalculator
) -> SeasonalComparison:
    """Compare the current year with the preceding ones.

    Years are calendar years relative to the request clock; monthly patterns
    span every recorded activity.
    """
    current_year = window.now.year
    span = max(calc.config.seasonal_years, 1)
    years = list(range(current_year - span + 1, current_year + 1))

    def activities_for(year: int) -> list[ActivityRecord]:
        return [a for a in inputs.activities if a.timestamp and a.timestamp.year == year]

    comparison: list[YearComparison] = []
    for year in years:
        year_acts = activities_for(year)
        year_yield = calc.calculate_year_yield(inputs.fields, year_acts)
        previous_yield = calc.calculate_year_yield(inputs.fields, activities_for(year - 1))
        if previous_yield > 0:
            change = round_half_up((year_yield - previous_yield) / previous_yield * 100, 1)
        else:
            change = 0.0
        comparison.append(
            YearComparison(
                year=year,
                total_yield=year_yield,
                change=change,
                activities=len(year_acts),
            )
        )

    patterns = [
        MonthlyPattern(month=month, activities=count, productivity=score)
        for month, count, score in calc.calculate_monthly_patterns(inputs.activities)
    ]
    best = patterns[0]
    for pattern in patterns[1:]:
        if pattern.productivity > best.productivity:
            best = pattern

    return SeasonalComparison(
        year_comparison=comparison,
        monthly_patterns=patterns,
        best_season=best,
        overall_trend="improving" if comparison[-1].change > 0 else "declining",
        average_growth=sum(y.change for y in comparison) / len(comparison),
    )


def _sign_trend(value: float) -> str:
    if value > 0:
        return TREND_UP
    if value < 0:
        return TREND_DOWN
    return TREND_STABLE


def build_performance_metrics(
    inputs: ReportInputs, window: ReportWindow, calc: MetricCalculator
) -> PerformanceMetrics:
    """Headline KPIs for the window."""
    fields = inputs.fields
    period_tasks = tasks_in_window(inputs.tasks, window.start, window.end)

    total_yield = calc.calculate_total_yield(fields, inputs.activities, window.start, window.end)
    total_revenue = calc.estimate_total_revenue(fields)
    total_costs = (
        calc.calculate_task_costs(period_tasks).total
        + calc.calculate_equipment_costs(inputs.equipment, inputs.calculate_roi).total
        + calc.calculate_field_costs(fields, period_tasks)
    )
    net_profit = total_revenue - total_costs

    completed = sum(
        1
        for t in inputs.tasks
        if t.is_completed and in_window(t.finished_at, window.start, window.end)
    )
    assigned = len(period_tasks)
    completion_rate = round_half_up(completed / assigned * 100, 1) if assigned > 0 else 0.0

    utilization = average_utilization(inputs.equipment)
    acreage = total_acreage(fields)
    field_count = len(fields)
    margin = net_profit / total_revenue * 100 if total_revenue > 0 else 0.0

    kpis = [
        Kpi("Yield/Acre", f"{safe_divide(total_yield, acreage):.1f} bu"),
        Kpi("Profit Margin", f"{margin:.1f}%" if total_revenue > 0 else "0%"),
        Kpi("Task Completion", f"{completion_rate:.1f}%"),
        Kpi("Equipment Usage", f"{utilization:.1f}%"),
        Kpi("Cost per Acre", f"${safe_divide(total_costs, acreage):.0f}"),
        Kpi("Revenue per Acre", f"${safe_divide(total_revenue, acreage):.0f}"),
    ]

    summary = PerformanceSummary(
        total_yield=total_yield,
        total_revenue=total_revenue,
        total_costs=total_costs,
        net_profit=net_profit,
        yield_trend=_sign_trend(net_profit),
        revenue_trend=TREND_UP if total_revenue > total_costs else TREND_DOWN,
        costs_trend=TREND_DOWN if total_costs < total_revenue else TREND_UP,
        profit_trend=TREND_UP if net_profit > 0 else TREND_DOWN,
        yield_change=f"{safe_divide(total_yield, field_count):.1f} bu avg",
        revenue_change=f"{safe_divide(total_revenue, field_count) / 1000:.1f}K avg",
        costs_change=f"{safe_divide(total_costs, field_count) / 1000:.1f}K avg",
        profit_change=f"{net_profit / 1000:.1f}K total",
    )

    return PerformanceMetrics(
        summary=summary,
        kpis=kpis,
        efficiency=Efficiency(
            task_efficiency=completion_rate,
            equipment_utilization=round_half_up(utilization, 1),
            cost_efficiency=round_half_up(margin, 1),
            yield_efficiency=round_half_up(total_yield / field_count, 1) if field_count else 0.0,
        ),
        task_completion_rate=completion_rate,
        average_utilization=utilization,
    )


def build_resource_usage(
    inputs: ReportInputs, window: ReportWindow, calc: MetricCalculator
) -> ResourceUsageReport:
    """Resource consumption within the window, most expensive first."""
    period_tasks = tasks_in_window(inputs.tasks, window.start, window.end)
    usage = calc.calculate_resource_usage(period_tasks, inputs.equipment, inputs.fields)

    total_cost = sum(row.cost for row in usage)
    percentages = percentage_split([row.cost for row in usage], total_cost)
    rows = sorted(
        (
            ResourceRow(
                name=row.name,
                quantity=row.quantity,
                unit=row.unit,
                cost=row.cost,
                percentage=pct,
            )
            for row, pct in zip(usage, percentages)
        ),
        key=lambda r: r.cost,
        reverse=True,
    )

    recommendations: list[str] = []
    if rows:
        recommendations.append(
            f"Consider optimizing {rows[0].name.lower()} usage to reduce costs"
        )
    recommendations.extend(GENERAL_RESOURCE_ADVICE)

    return ResourceUsageReport(
        resources=rows,
        total_cost=total_cost,
        cost_per_acre=safe_divide(total_cost, total_acreage(inputs.fields)),
        utilization_rate=average_utilization(inputs.equipment),
        recommendations=recommendations[: calc.config.max_recommendations],
    )


def build_custom_catalog() -> CustomReportCatalog:
    """Static catalog of metrics and templates for custom reports."""
    return CustomReportCatalog(
        available_metrics=list(AVAILABLE_METRICS),
        templates=[ReportTemplate(name, description) for name, description in REPORT_TEMPLATES],
    )


DataBuilder = Callable[[ReportInputs, ReportWindow, MetricCalculator], ReportDocument]

DATA_BUILDERS: dict[ReportKind, DataBuilder] = {
    ReportKind.YIELD: build_yield_analysis,
    ReportKind.FINANCIAL: build_financial_report,
    ReportKind.SEASONAL: build_seasonal_comparison,
    ReportKind.PERFORMANCE: build_performance_metrics,
    ReportKind.RESOURCES: build_resource_usage,
}
