"""Report export to CSV and printable text documents.

The "pdf" format is a plain-text printable document rendered with Jinja2,
not binary PDF bytes. It is labelled ``application/pdf`` so the dashboard's
download flow treats it as a printable report.
"""

import csv
import io
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from jinja2 import Environment, StrictUndefined

from farm_reports.common.logging import get_logger
from farm_reports.common.time_utils import format_iso_date, utc_now
from farm_reports.reporting.documents import (
    ALL_REPORTS,
    CombinedReport,
    ExportFormat,
    FinancialReport,
    PerformanceMetrics,
    ReportKind,
    ResourceUsageReport,
    SeasonalComparison,
    YieldAnalysis,
    format_number,
)
from farm_reports.reporting.errors import ExportUnsupportedError

logger = get_logger(__name__)

YIELD_CSV_HEADER = "Field Name,Crop Type,Acres,Yield per Acre,Total Yield,Trend"
FINANCIAL_CSV_HEADER = "Category,Amount,Percentage"
COMBINED_CSV_HEADER = "Report Type,Metric,Value"

MIME_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.PDF: "application/pdf",
}

# Kinds with a defined serialization, per format
SUPPORTED_EXPORTS = {
    ExportFormat.CSV: {ReportKind.YIELD.value, ReportKind.FINANCIAL.value, ALL_REPORTS},
    ExportFormat.PDF: {
        ReportKind.YIELD.value,
        ReportKind.FINANCIAL.value,
        ReportKind.SEASONAL.value,
        ReportKind.PERFORMANCE.value,
        ReportKind.RESOURCES.value,
        ALL_REPORTS,
    },
}

YIELD_TEXT_SECTION = """YIELD ANALYSIS
================

{% for field in yield_report.field_yields %}
{{ field.field_name }} ({{ field.crop_type }})
- Acres: {{ field.acres | number }}
- Yield: {{ field.yield_label }}
- Trend: {{ field.trend }}

{% endfor %}
"""

FINANCIAL_TEXT_SECTION = """FINANCIAL ANALYSIS
==================

Total Revenue: {{ financial.summary.totalRevenue }}
Total Costs: {{ financial.summary.totalCosts }}
Net Profit: {{ financial.summary.netProfit }}
Profit Margin: {{ financial.profit_margin_label }}

Cost Breakdown:
{% for item in financial.cost_breakdown %}
- {{ item.category }}: {{ item.amount_label }} ({{ item.percentage }}%)
{% endfor %}

"""

SEASONAL_TEXT_SECTION = """SEASONAL COMPARISON
===================

{% for year in seasonal.year_comparison %}
{{ year.year }}: {{ "%.1f"|format(year.total_yield) }} bu ({{ "%+.1f"|format(year.change) }}%), {{ year.activities }} activities
{% endfor %}

Best Season: {{ seasonal.best_season.month }}
Overall Trend: {{ seasonal.overall_trend }}

"""

PERFORMANCE_TEXT_SECTION = """PERFORMANCE METRICS
===================

{% set summary = performance.summary.to_dict() %}
Total Yield: {{ summary.totalYield }}
Total Revenue: {{ summary.totalRevenue }}
Total Costs: {{ summary.totalCosts }}
Net Profit: {{ summary.netProfit }}

Key Indicators:
{% for kpi in performance.kpis %}
- {{ kpi.label }}: {{ kpi.value }}
{% endfor %}

"""

RESOURCES_TEXT_SECTION = """RESOURCE USAGE
==============

Total Cost: {{ resources.summary.totalCost }}
Cost per Acre: {{ resources.summary.costPerAcre }}

{% for row in resources.resources %}
- {{ row.name }}: {{ row.amount_label }} ({{ row.percentage }}%)
{% endfor %}

Recommendations:
{% for rec in resources.recommendations %}
- {{ rec }}
{% endfor %}

"""

TEXT_DOCUMENT_TEMPLATE = (
    """FARM REPORT - {{ title }}
Generated: {{ generated_at }}

{% if yield_report %}"""
    + YIELD_TEXT_SECTION
    + "{% endif %}{% if financial %}"
    + FINANCIAL_TEXT_SECTION
    + "{% endif %}{% if seasonal %}"
    + SEASONAL_TEXT_SECTION
    + "{% endif %}{% if performance %}"
    + PERFORMANCE_TEXT_SECTION
    + "{% endif %}{% if resources %}"
    + RESOURCES_TEXT_SECTION
    + "{% endif %}"
)


@dataclass
class SerializedOutput:
    """An exported report ready for download."""

    content: str
    mime_type: str
    filename: str

    def to_dict(self) -> dict[str, str]:
        return {
            "content": self.content,
            "mimeType": self.mime_type,
            "filename": self.filename,
        }


class ReportExporter:
    """Serializes report documents to CSV or printable text."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock
        self.env = Environment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["number"] = format_number
        self._text_template = self.env.from_string(TEXT_DOCUMENT_TEMPLATE)

    @staticmethod
    def parse_format(kind: Any, export_format: ExportFormat | str) -> ExportFormat:
        """Resolve an export format, raising ExportUnsupportedError if unknown."""
        if isinstance(export_format, ExportFormat):
            return export_format
        try:
            return ExportFormat(str(export_format).lower())
        except ValueError:
            raise ExportUnsupportedError(kind, export_format) from None

    def export(
        self,
        kind: ReportKind | str,
        export_format: ExportFormat | str,
        document: Any,
        strict: bool = False,
    ) -> SerializedOutput:
        """Serialize a report document.

        Args:
            kind: Report kind, or "all" for a CombinedReport.
            export_format: "csv" or "pdf".
            document: The report document built for kind.
            strict: Raise instead of returning an empty document when the
                combination has no serialization.

        Returns:
            Serialized output. Unsupported combinations yield empty CSV
            content or a header-only text document.

        Raises:
            ExportUnsupportedError: In strict mode for unsupported combinations,
                and for unknown formats.
        """
        fmt = self.parse_format(kind, export_format)
        kind_name = str(getattr(kind, "value", kind)).lower()
        now = self.clock()

        if kind_name not in SUPPORTED_EXPORTS[fmt]:
            if strict:
                raise ExportUnsupportedError(kind_name, fmt)
            logger.warning("report_export_unsupported", kind=kind_name, format=fmt.value)

        if fmt == ExportFormat.CSV:
            content = self.to_csv(kind_name, document, now)
        else:
            content = self.to_text_document(kind_name, document, now)

        output = SerializedOutput(
            content=content,
            mime_type=MIME_TYPES[fmt],
            filename=f"farm_{kind_name}_report_{format_iso_date(now)}.{fmt.value}",
        )
        logger.info(
            "report_export_completed",
            kind=kind_name,
            format=fmt.value,
            filename=output.filename,
            size=len(content),
        )
        return output

    def to_csv(self, kind: str, document: Any, now: datetime) -> str:
        """Render CSV for the yield, financial and combined reports.

        Text cells are quoted, numeric cells are bare. Other kinds give "".
        """
        buffer = io.StringIO()

        if kind == ReportKind.YIELD.value and isinstance(document, YieldAnalysis):
            buffer.write(YIELD_CSV_HEADER + "\n")
            writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
            for row in document.field_yields:
                writer.writerow([
                    row.field_name,
                    row.crop_type,
                    format_number(row.acres),
                    row.yield_label,
                    format_number(row.total_yield),
                    row.trend,
                ])
        elif kind == ReportKind.FINANCIAL.value and isinstance(document, FinancialReport):
            buffer.write(FINANCIAL_CSV_HEADER + "\n")
            writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
            for item in document.cost_breakdown:
                writer.writerow([item.category, item.amount_label, item.percentage])
        elif kind == ALL_REPORTS and isinstance(document, CombinedReport):
            buffer.write(f"Farm Report - {format_iso_date(now)}\n\n")
            buffer.write(COMBINED_CSV_HEADER + "\n")
            writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
            summary = document.performance.summary.to_dict()
            writer.writerow(["Performance", "Total Yield", summary["totalYield"]])
            writer.writerow(["Performance", "Total Revenue", summary["totalRevenue"]])
            writer.writerow(["Performance", "Net Profit", summary["netProfit"]])

        return buffer.getvalue().rstrip("\n")

    def to_text_document(self, kind: str, document: Any, now: datetime) -> str:
        """Render the printable text document.

        Unsupported kinds render the title and timestamp header only.
        """
        context: dict[str, Any] = {
            "title": kind.upper(),
            "generated_at": now.strftime("%Y-%m-%d %H:%M UTC"),
            "yield_report": None,
            "financial": None,
            "seasonal": None,
            "performance": None,
            "resources": None,
        }

        if isinstance(document, CombinedReport) and kind == ALL_REPORTS:
            context.update(
                yield_report=document.yield_analysis,
                financial=document.financial,
                performance=document.performance,
                resources=document.resources,
            )
        elif isinstance(document, YieldAnalysis) and kind == ReportKind.YIELD.value:
            context["yield_report"] = document
        elif isinstance(document, FinancialReport) and kind == ReportKind.FINANCIAL.value:
            context["financial"] = document
        elif isinstance(document, SeasonalComparison) and kind == ReportKind.SEASONAL.value:
            context["seasonal"] = document
        elif isinstance(document, PerformanceMetrics) and kind == ReportKind.PERFORMANCE.value:
            context["performance"] = document
        elif isinstance(document, ResourceUsageReport) and kind == ReportKind.RESOURCES.value:
            context["resources"] = document

        return self._text_template.render(**context)
