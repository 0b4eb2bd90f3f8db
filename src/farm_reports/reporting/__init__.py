"""Reporting and analytics engine for farm records.

Pulls raw records from the field, task, activity and equipment readers,
derives statistical summaries from them, and renders those summaries into
report documents and exports.

The reporting system consists of:

1. Metric Calculators: yield, revenue, cost, trend and resource figures
2. Report Builders: one per report kind, composed into a report document
3. Orchestrator: concurrent record fetching and dispatch by report kind
4. Exporter: CSV and printable text documents
"""

from farm_reports.reporting.builders import ReportInputs, ReportWindow
from farm_reports.reporting.calculators import MetricCalculator
from farm_reports.reporting.config import ReportingConfig
from farm_reports.reporting.documents import (
    ALL_REPORTS,
    CombinedReport,
    CustomReportCatalog,
    ExportFormat,
    FinancialReport,
    PerformanceMetrics,
    ReportDocument,
    ReportKind,
    ResourceUsageReport,
    SeasonalComparison,
    YieldAnalysis,
)
from farm_reports.reporting.errors import (
    ExportUnsupportedError,
    InvalidReportKindError,
    ReportGenerationError,
    ReportingError,
    SourceUnavailableError,
)
from farm_reports.reporting.estimation import (
    EstimationPolicy,
    FixedEstimationPolicy,
    SeededEstimationPolicy,
    make_policy,
)
from farm_reports.reporting.export import ReportExporter, SerializedOutput
from farm_reports.reporting.orchestrator import ReportOrchestrator

__all__ = [
    "ALL_REPORTS",
    "CombinedReport",
    "CustomReportCatalog",
    "EstimationPolicy",
    "ExportFormat",
    "ExportUnsupportedError",
    "FinancialReport",
    "FixedEstimationPolicy",
    "InvalidReportKindError",
    "MetricCalculator",
    "PerformanceMetrics",
    "ReportDocument",
    "ReportExporter",
    "ReportGenerationError",
    "ReportInputs",
    "ReportKind",
    "ReportOrchestrator",
    "ReportWindow",
    "ReportingConfig",
    "ReportingError",
    "ResourceUsageReport",
    "SeasonalComparison",
    "SeededEstimationPolicy",
    "SerializedOutput",
    "SourceUnavailableError",
    "YieldAnalysis",
    "make_policy",
]
