"""mbox parsing: line sources, the message state machine and record sinks."""

from .diagnostics import (
    CollectingDiagnostics,
    Diagnostic,
    DiagnosticKind,
    LoggingDiagnostics,
    StrictDiagnostics,
)
from .job import FileResult, FileStatus, JobSummary, MboxIngestJob
from .line_source import FileLineSource, IterableLineSource, LineSource
from .mbox_parser import (
    BodyAccumulator,
    MboxMessageIterator,
    MboxParser,
    parse_from_line,
    parse_headers,
    parse_text,
)
from .records import Record, SeparatorFields
from .sinks import JsonLinesSink, ListSink, RecordSink

__all__ = [
    "BodyAccumulator",
    "CollectingDiagnostics",
    "Diagnostic",
    "DiagnosticKind",
    "FileLineSource",
    "FileResult",
    "FileStatus",
    "IterableLineSource",
    "JobSummary",
    "JsonLinesSink",
    "LineSource",
    "ListSink",
    "LoggingDiagnostics",
    "MboxIngestJob",
    "MboxMessageIterator",
    "MboxParser",
    "Record",
    "RecordSink",
    "SeparatorFields",
    "StrictDiagnostics",
    "parse_from_line",
    "parse_headers",
    "parse_text",
]
