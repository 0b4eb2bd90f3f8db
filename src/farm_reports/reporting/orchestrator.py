"""Report orchestration.

Fetches farm records from the four entity readers concurrently, then hands
them to the report builders. Every request recomputes from fresh reader data;
nothing is cached between requests.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime

from farm_reports.common.logging import get_logger
from farm_reports.common.time_utils import utc_now
from farm_reports.reporting.builders import (
    DATA_BUILDERS,
    ReportInputs,
    ReportWindow,
    build_custom_catalog,
)
from farm_reports.reporting.calculators import MetricCalculator
from farm_reports.reporting.config import ReportingConfig
from farm_reports.reporting.documents import (
    ALL_REPORTS,
    CombinedReport,
    ExportFormat,
    FinancialReport,
    PerformanceMetrics,
    ReportDocument,
    ReportKind,
    ResourceUsageReport,
    YieldAnalysis,
)
from farm_reports.reporting.errors import (
    InvalidReportKindError,
    ReportGenerationError,
    SourceUnavailableError,
)
from farm_reports.reporting.estimation import EstimationPolicy, make_policy
from farm_reports.reporting.export import ReportExporter, SerializedOutput
from farm_reports.sources.interfaces import (
    IActivityReader,
    IEquipmentReader,
    IFieldReader,
    ITaskReader,
)

logger = get_logger(__name__)

# Kinds built for the combined "all" export
COMBINED_KINDS = (
    ReportKind.YIELD,
    ReportKind.FINANCIAL,
    ReportKind.PERFORMANCE,
    ReportKind.RESOURCES,
)


def parse_report_kind(kind: ReportKind | str) -> ReportKind:
    """Resolve a report kind, raising InvalidReportKindError if unknown."""
    if isinstance(kind, ReportKind):
        return kind
    try:
        return ReportKind(str(kind).lower())
    except ValueError:
        raise InvalidReportKindError(kind) from None


class ReportOrchestrator:
    """Dispatches report requests to the builders.

    Usage:
        orchestrator = ReportOrchestrator(fields, tasks, activities, equipment)

        report = await orchestrator.get_report("yield", start, end)
        reports = await orchestrator.get_all_reports(start, end)
        output = await orchestrator.export_report("financial", "csv", start, end)
    """

    def __init__(
        self,
        fields: IFieldReader,
        tasks: ITaskReader,
        activities: IActivityReader,
        equipment: IEquipmentReader,
        config: ReportingConfig | None = None,
        policy: EstimationPolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the orchestrator.

        Args:
            fields: Field reader.
            tasks: Task reader.
            activities: Activity reader.
            equipment: Equipment reader (also provides ownership costs).
            config: Reporting configuration.
            policy: Estimation policy. Defaults to the one named in config.
            clock: Source of the current time (seasonal years, export dates).
        """
        self.fields = fields
        self.tasks = tasks
        self.activities = activities
        self.equipment = equipment
        self.config = config or ReportingConfig()
        self.policy = policy or make_policy(
            self.config.estimation_policy, self.config.estimation_seed
        )
        self.clock = clock
        self.calculator = MetricCalculator(self.config, self.policy)
        self.exporter = ReportExporter(clock=clock)

    async def fetch_inputs(self) -> ReportInputs:
        """Fetch all four collections concurrently.

        Waits for every fetch to settle before reporting a failure so no
        reader call is left running.

        Raises:
            SourceUnavailableError: For the first reader (in source order) that failed.
        """
        sources = ("fields", "tasks", "activities", "equipment")
        results = await asyncio.gather(
            self.fields.get_all(),
            self.tasks.get_all(),
            self.activities.get_all(),
            self.equipment.get_all(),
            return_exceptions=True,
        )

        failure: SourceUnavailableError | None = None
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    # Cancellation and interpreter exits are not source failures
                    raise result
                logger.error("entity_fetch_failed", source=source, error=str(result))
                if failure is None:
                    failure = SourceUnavailableError(source, result)
        if failure is not None:
            raise failure

        fields, tasks, activities, equipment = results
        return ReportInputs(
            fields=fields,
            tasks=tasks,
            activities=activities,
            equipment=equipment,
            calculate_roi=self.equipment.calculate_roi,
        )

    def _build(
        self, kind: ReportKind, inputs: ReportInputs, window: ReportWindow
    ) -> ReportDocument:
        try:
            document = DATA_BUILDERS[kind](inputs, window, self.calculator)
        except Exception as e:
            logger.error("report_build_failed", kind=kind.value, error=str(e))
            raise ReportGenerationError(kind, e) from e
        logger.info("report_built", kind=kind.value)
        return document

    def _window(self, start: datetime, end: datetime) -> ReportWindow:
        return ReportWindow(start=start, end=end, now=self.clock())

    async def get_report(
        self, kind: ReportKind | str, start: datetime, end: datetime
    ) -> ReportDocument:
        """Build one report for the inclusive window [start, end].

        Args:
            kind: Report kind.
            start: Window start.
            end: Window end. Callers validate start <= end.

        Returns:
            The report document.

        Raises:
            InvalidReportKindError: If the kind is unknown (before any fetch).
            ReportGenerationError: If a reader or the builder failed.
        """
        report_kind = parse_report_kind(kind)
        logger.info(
            "building_report",
            kind=report_kind.value,
            start=start.isoformat(),
            end=end.isoformat(),
        )

        if report_kind == ReportKind.CUSTOM:
            return build_custom_catalog()

        try:
            inputs = await self.fetch_inputs()
        except SourceUnavailableError as e:
            raise ReportGenerationError(report_kind, e) from e

        return self._build(report_kind, inputs, self._window(start, end))

    async def get_all_reports(
        self, start: datetime, end: datetime
    ) -> dict[ReportKind, ReportDocument]:
        """Build every report kind for the window.

        Records are fetched once for the whole request and each kind is built
        from them independently. Any failure fails the whole call.

        Raises:
            ReportGenerationError: For the first kind that failed, or with kind
                "all" when the shared fetch failed.
        """
        return await self._build_many(tuple(ReportKind), start, end)

    async def _build_many(
        self,
        kinds: tuple[ReportKind, ...],
        start: datetime,
        end: datetime,
    ) -> dict[ReportKind, ReportDocument]:
        logger.info(
            "building_reports",
            kinds=[k.value for k in kinds],
            start=start.isoformat(),
            end=end.isoformat(),
        )
        try:
            inputs = await self.fetch_inputs()
        except SourceUnavailableError as e:
            # A failed shared fetch belongs to the whole request, not one kind
            raise ReportGenerationError(ALL_REPORTS, e) from e

        window = self._window(start, end)
        reports: dict[ReportKind, ReportDocument] = {}
        for kind in kinds:
            if kind == ReportKind.CUSTOM:
                reports[kind] = build_custom_catalog()
            else:
                reports[kind] = self._build(kind, inputs, window)
        return reports

    async def get_combined_report(self, start: datetime, end: datetime) -> CombinedReport:
        """Build the yield, financial, performance and resources set."""
        reports = await self._build_many(COMBINED_KINDS, start, end)
        yield_report = reports[ReportKind.YIELD]
        financial = reports[ReportKind.FINANCIAL]
        performance = reports[ReportKind.PERFORMANCE]
        resources = reports[ReportKind.RESOURCES]
        assert isinstance(yield_report, YieldAnalysis)
        assert isinstance(financial, FinancialReport)
        assert isinstance(performance, PerformanceMetrics)
        assert isinstance(resources, ResourceUsageReport)
        return CombinedReport(
            yield_analysis=yield_report,
            financial=financial,
            performance=performance,
            resources=resources,
        )

    async def export_report(
        self,
        kind: ReportKind | str,
        export_format: ExportFormat | str,
        start: datetime,
        end: datetime,
        strict: bool = False,
    ) -> SerializedOutput:
        """Build a report and serialize it.

        Args:
            kind: Report kind, or "all" for the combined set.
            export_format: "csv" or "pdf".
            start: Window start.
            end: Window end.
            strict: Raise ExportUnsupportedError instead of returning an
                empty document for combinations with no serialization.

        Returns:
            Serialized output.
        """
        fmt = self.exporter.parse_format(kind, export_format)
        if str(getattr(kind, "value", kind)).lower() == ALL_REPORTS:
            document = await self.get_combined_report(start, end)
            return self.exporter.export(ALL_REPORTS, fmt, document, strict=strict)

        report_kind = parse_report_kind(kind)
        document = await self.get_report(report_kind, start, end)
        return self.exporter.export(report_kind, fmt, document, strict=strict)
