from .report_service import (
    TextReportSink, CsvReportSink, SqliteReportSink, create_sink)

__all__ = [
    "TextReportSink",
    "CsvReportSink",
    "SqliteReportSink",
    "create_sink",
]
