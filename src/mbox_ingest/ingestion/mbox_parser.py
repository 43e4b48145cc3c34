"""Line-oriented mbox parser.

An mbox file is a sequence of messages, each introduced by a separator line
of the form ``From <sender> <24-character date><extra info>``, followed by
RFC-822 style headers, a blank line and the body. A body ends at end of
input or at a blank line immediately followed by a line starting with
``From `` (case-insensitive). A blank line followed by anything else is part
of the body.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticSink, LoggingDiagnostics
from .line_source import FileLineSource, IterableLineSource, LineSource
from .records import BODY, MESSAGE_DATE, SENDER, SENDER_INFO, Record, SeparatorFields

logger = logging.getLogger(__name__)

# "From", a space, the sender (non-whitespace), optional whitespace, exactly
# 24 characters of date, then anything else about the sender. Whitespace
# classes are ASCII only, so e.g. a non-breaking space belongs to the sender.
FROM_LINE_PATTERN = re.compile(r"From (\S*)\s*(.{24})(.*)", re.ASCII)

SEPARATOR_PREFIX = "from "


def parse_from_line(line: str) -> SeparatorFields | None:
    """Decompose a separator line.

    Args:
        line: A single line without its terminator.

    Returns:
        SeparatorFields, or None if the line is not a valid separator.
    """
    match = FROM_LINE_PATTERN.fullmatch(line)
    if not match:
        return None
    sender, date_token, extra_info = match.groups()
    return SeparatorFields(sender=sender, date_token=date_token, extra_info=extra_info)


def is_separator_candidate(line: str) -> bool:
    """Check whether the first five characters of line are "From " in any case."""
    return line[:5].lower() == SEPARATOR_PREFIX


def parse_headers(
    lines: LineSource,
    record: Record,
    diagnostics: DiagnosticSink,
) -> None:
    """Read header lines into record until a blank line or end of input.

    The blank line ending the header block is consumed. Lines without a
    colon are reported and skipped.

    Args:
        lines: Line source positioned just after the separator line.
        record: Record receiving one field per header line.
        diagnostics: Sink for malformed header reports.
    """
    while True:
        line = lines.next_line()
        if line is None or line == "":
            return

        name, colon, value = line.partition(":")
        if not colon:
            diagnostics.report(
                Diagnostic(
                    kind=DiagnosticKind.MALFORMED_HEADER,
                    source=lines.name,
                    message=(
                        "Invalid message header format. "
                        f"Expected a colon in the line {line!r}"
                    ),
                    line=line,
                )
            )
            continue

        record.add(name, value)


@dataclass(frozen=True)
class BodyLine:
    """Text to append to the body."""

    text: str


@dataclass(frozen=True)
class Boundary:
    """The body ended because the next message starts here."""

    separator_line: str


class _End:
    def __repr__(self) -> str:
        return "END"


END = _End()

BodyEvent = BodyLine | Boundary | _End


class BodyAccumulator:
    """Pull iterator over the body of one message.

    Yields BodyLine events until it yields either a Boundary carrying the
    next message's separator line, or END. The separator line is handed back
    rather than re-read from the source.
    """

    def __init__(self, lines: LineSource):
        self._lines = lines
        self._finished = False

    def __iter__(self) -> "BodyAccumulator":
        return self

    def __next__(self) -> BodyEvent:
        if self._finished:
            raise StopIteration
        event = self._step()
        if not isinstance(event, BodyLine):
            self._finished = True
        return event

    def _step(self) -> BodyEvent:
        line = self._lines.next_line()
        if line is None:
            return END
        if line != "":
            return BodyLine(line)

        # A blank line only ends the body if a separator follows it
        lookahead = self._lines.next_line()
        if lookahead is None:
            return END
        if is_separator_candidate(lookahead):
            return Boundary(lookahead)
        return BodyLine(line + lookahead)

    def accumulate(self, record: Record) -> str | None:
        """Consume the whole body and append it to record as one field.

        Returns:
            The separator line of the next message, or None at end of input.
        """
        parts: list[str] = []
        next_separator = None
        for event in self:
            if isinstance(event, BodyLine):
                parts.append(event.text)
            elif isinstance(event, Boundary):
                next_separator = event.separator_line

        record.add(BODY, "".join(parts))
        return next_separator


class MboxMessageIterator:
    """Lazy iterator of Records over one line source.

    Stops at end of input, or at the first separator line that does not
    parse; in that case ``malformed_line`` holds the offending line and the
    rest of the source is not read. Read errors from the source propagate.
    """

    def __init__(self, lines: LineSource, diagnostics: DiagnosticSink | None = None):
        self._lines = lines
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._started = False
        self._current: str | None = None
        self._index = 0
        self.empty = False
        self.malformed_line: str | None = None

    def __iter__(self) -> "MboxMessageIterator":
        return self

    def __next__(self) -> Record:
        try:
            if not self._started:
                self._started = True
                self._read_first_line()
            if self._current is None:
                raise StopIteration
            return self._next_record()
        except StopIteration:
            raise
        except Exception:
            self._current = None
            raise

    @property
    def aborted(self) -> bool:
        return self.malformed_line is not None

    @property
    def count(self) -> int:
        """Number of records produced so far."""
        return self._index

    def _read_first_line(self) -> None:
        self._current = self._lines.next_line()
        if self._current is None:
            self.empty = True
            self._diagnostics.report(
                Diagnostic(
                    kind=DiagnosticKind.EMPTY_SOURCE,
                    source=self._lines.name,
                    message="mbox file was empty",
                )
            )

    def _next_record(self) -> Record:
        line = self._current
        separator = parse_from_line(line)
        if separator is None:
            self._current = None
            self.malformed_line = line
            self._diagnostics.report(
                Diagnostic(
                    kind=DiagnosticKind.MALFORMED_SEPARATOR,
                    source=self._lines.name,
                    message=f"Invalid From line syntax: {line}",
                    line=line,
                )
            )
            raise StopIteration

        logger.debug(f"Processing message: {line}...")

        record = Record(source=self._lines.name, index=self._index)
        record.add(SENDER, separator.sender)
        record.add(MESSAGE_DATE, separator.date_token)
        if separator.extra_info:
            record.add(SENDER_INFO, separator.extra_info)

        parse_headers(self._lines, record, self._diagnostics)
        self._current = BodyAccumulator(self._lines).accumulate(record)

        record.freeze()
        self._index += 1
        return record


class MboxParser:
    """Parse one mbox file from disk into Records."""

    def __init__(
        self,
        mbox_path: Path | str,
        diagnostics: DiagnosticSink | None = None,
        encoding: str = "utf-8",
        errors: str = "replace",
    ):
        """Initialize the parser.

        Args:
            mbox_path: Path to the mbox file.
            diagnostics: Sink for parse anomalies. Defaults to logging.
            encoding: Text encoding of the file.
            errors: Codec error handler for undecodable bytes.
        """
        self._mbox_path = Path(mbox_path)
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._encoding = encoding
        self._errors = errors
        self.messages: MboxMessageIterator | None = None

    def parse_records(self) -> Iterator[Record]:
        """Iterate through all messages in the file.

        The file is open only while iteration is in progress and is closed
        when it finishes, fails, or the iterator is discarded.

        Yields:
            One frozen Record per message.

        Raises:
            SourceReadError: If the file cannot be opened or read.
        """
        with FileLineSource(self._mbox_path, self._encoding, self._errors) as lines:
            self.messages = MboxMessageIterator(lines, self._diagnostics)
            yield from self.messages

    @property
    def empty(self) -> bool:
        return self.messages is not None and self.messages.empty

    @property
    def malformed_line(self) -> str | None:
        if self.messages is None:
            return None
        return self.messages.malformed_line


def parse_text(
    text: str,
    diagnostics: DiagnosticSink | None = None,
    name: str = "<memory>",
) -> list[Record]:
    """Parse mbox text held in memory.

    Args:
        text: Whole mbox contents.
        diagnostics: Sink for parse anomalies. Defaults to logging.
        name: Name used as the record source and in diagnostics.

    Returns:
        List of parsed Records.
    """
    lines = IterableLineSource.from_text(text, name=name)
    return list(MboxMessageIterator(lines, diagnostics))
