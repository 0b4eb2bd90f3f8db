"""Reporting engine exceptions."""

from typing import Any


class ReportingError(Exception):
    """Base exception for the reporting engine."""


class SourceUnavailableError(ReportingError):
    """An entity reader failed to return its collection."""

    def __init__(self, source: str, cause: BaseException):
        super().__init__(f"Source '{source}' unavailable: {cause}")
        self.source = source
        self.cause = cause


class ReportGenerationError(ReportingError):
    """Building one report kind failed; no partial report is returned."""

    def __init__(self, report_kind: Any, cause: BaseException):
        kind = getattr(report_kind, "value", report_kind)
        super().__init__(f"Failed to generate {kind} report: {cause}")
        self.report_kind = kind
        self.cause = cause


class InvalidReportKindError(ReportingError, ValueError):
    """The requested report kind does not exist."""

    def __init__(self, kind: Any):
        super().__init__(f"Invalid report kind: {kind!r}")
        self.kind = kind


class ExportUnsupportedError(ReportingError):
    """No serialization is defined for a (kind, format) combination."""

    def __init__(self, kind: Any, export_format: Any):
        kind = getattr(kind, "value", kind)
        export_format = getattr(export_format, "value", export_format)
        super().__init__(f"Export of '{kind}' as '{export_format}' is not supported")
        self.kind = kind
        self.export_format = export_format
