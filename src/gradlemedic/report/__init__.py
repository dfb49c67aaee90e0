"""Report rendering."""

from gradlemedic.report.printer import ReportPrinter, report_to_json

__all__ = ["ReportPrinter", "report_to_json"]
