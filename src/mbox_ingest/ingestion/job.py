"""Run the mbox parser over a list of files."""

import enum
import logging
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from ..errors import (
    ConfigurationError,
    MalformedHeaderError,
    MalformedSeparatorError,
    SourceReadError,
)
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticSink, LoggingDiagnostics
from .mbox_parser import MboxParser
from .sinks import RecordSink

logger = logging.getLogger(__name__)


class FileStatus(enum.Enum):
    """Outcome of processing one file."""

    OK = "ok"
    EMPTY = "empty"
    MALFORMED_SEPARATOR = "malformed_separator"
    MALFORMED_HEADER = "malformed_header"
    READ_ERROR = "read_error"


@dataclass
class FileResult:
    """Result of processing one mbox file.

    ``records`` counts the records emitted before processing stopped, so a
    failed file may still have produced some.
    """

    path: str
    status: FileStatus
    records: int = 0
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (FileStatus.OK, FileStatus.EMPTY)


@dataclass
class JobSummary:
    """Results of a whole job."""

    results: list[FileResult] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(r.records for r in self.results)

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


class MboxIngestJob:
    """Parse every configured mbox file and emit the records to a sink.

    One file is fully processed before the next is opened. A problem with one
    file is logged and recorded in its FileResult; it never stops the job.
    """

    def __init__(
        self,
        paths: Sequence[Path | str],
        sink: RecordSink,
        diagnostics: DiagnosticSink | None = None,
        encoding: str = "utf-8",
        errors: str = "replace",
    ):
        """Initialize the job.

        Args:
            paths: mbox files to process, in order.
            sink: Receives every finished record.
            diagnostics: Sink for anomalies. Defaults to logging.
            encoding: Text encoding of the files.
            errors: Codec error handler for undecodable bytes.

        Raises:
            ConfigurationError: If no paths were given.
        """
        if not paths:
            raise ConfigurationError("You must specify at least one mbox file.")
        self._paths = [str(p) for p in paths]
        self._sink = sink
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._encoding = encoding
        self._errors = errors

    def run(self) -> JobSummary:
        """Process all files.

        Returns:
            JobSummary with one FileResult per file, in order.
        """
        summary = JobSummary()
        for path in self._paths:
            result = self.process_file(path)
            summary.results.append(result)

        logger.info(
            f"Processed {len(summary.results)} files, "
            f"{summary.total_records} records, {len(summary.failed)} failed"
        )
        return summary

    def process_file(self, path: Path | str) -> FileResult:
        """Parse one file and emit its records.

        Args:
            path: Path to the mbox file.

        Returns:
            FileResult describing how far processing got.
        """
        path = str(path)
        parser = MboxParser(path, self._diagnostics, self._encoding, self._errors)
        count = 0

        try:
            with closing(parser.parse_records()) as records:
                for record in records:
                    self._sink.emit(record)
                    count += 1
        except SourceReadError as e:
            self._diagnostics.report(
                Diagnostic(
                    kind=DiagnosticKind.SOURCE_READ_ERROR,
                    source=path,
                    message=f"Error processing mbox file: {e}",
                )
            )
            return FileResult(path, FileStatus.READ_ERROR, count, str(e))
        except MalformedSeparatorError as e:
            return FileResult(path, FileStatus.MALFORMED_SEPARATOR, count, str(e))
        except MalformedHeaderError as e:
            return FileResult(path, FileStatus.MALFORMED_HEADER, count, str(e))

        if parser.empty:
            result = FileResult(path, FileStatus.EMPTY)
        elif parser.malformed_line is not None:
            result = FileResult(
                path,
                FileStatus.MALFORMED_SEPARATOR,
                count,
                f"Invalid From line syntax: {parser.malformed_line}",
            )
        else:
            result = FileResult(path, FileStatus.OK, count)

        logger.info(f"{path}: {result.status.value}, {count} records")
        return result
