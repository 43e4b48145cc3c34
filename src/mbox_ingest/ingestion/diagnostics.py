"""Diagnostic reporting for anomalies found while parsing."""

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from ..errors import MalformedHeaderError, MalformedSeparatorError

logger = logging.getLogger(__name__)


class DiagnosticKind(enum.Enum):
    """Kinds of anomaly the parser can report."""

    EMPTY_SOURCE = "empty_source"
    MALFORMED_SEPARATOR = "malformed_separator"
    MALFORMED_HEADER = "malformed_header"
    SOURCE_READ_ERROR = "source_read_error"


_LEVELS = {
    DiagnosticKind.EMPTY_SOURCE: logging.INFO,
    DiagnosticKind.MALFORMED_SEPARATOR: logging.WARNING,
    DiagnosticKind.MALFORMED_HEADER: logging.WARNING,
    DiagnosticKind.SOURCE_READ_ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single reported anomaly."""

    kind: DiagnosticKind
    source: str
    message: str
    line: str | None = None

    @property
    def level(self) -> int:
        return _LEVELS[self.kind]


class DiagnosticSink(Protocol):
    def report(self, diagnostic: Diagnostic) -> None: ...


class LoggingDiagnostics:
    """Forward diagnostics to a logger at a level matching their kind."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def report(self, diagnostic: Diagnostic) -> None:
        self._log.log(diagnostic.level, f"{diagnostic.source}: {diagnostic.message}")


class CollectingDiagnostics(LoggingDiagnostics):
    """Keep every diagnostic in memory, in addition to logging it."""

    def __init__(self, log: logging.Logger | None = None):
        super().__init__(log)
        self.diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        super().report(diagnostic)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def __len__(self) -> int:
        return len(self.diagnostics)


class StrictDiagnostics(CollectingDiagnostics):
    """Collect diagnostics and raise on malformed input.

    Malformed separators and headers become exceptions, which the job turns
    into a failed result for the file being processed.
    """

    def report(self, diagnostic: Diagnostic) -> None:
        super().report(diagnostic)
        if diagnostic.kind == DiagnosticKind.MALFORMED_HEADER:
            raise MalformedHeaderError(diagnostic.source, diagnostic.line or "")
        if diagnostic.kind == DiagnosticKind.MALFORMED_SEPARATOR:
            raise MalformedSeparatorError(diagnostic.source, diagnostic.line or "")
