"""Line sources feeding the mbox parser."""

import logging
from pathlib import Path
from typing import IO, Iterable, Iterator, Protocol

from ..errors import SourceReadError

logger = logging.getLogger(__name__)


class LineSource(Protocol):
    """Sequential access to the lines of one input.

    ``next_line`` returns the next line with its terminator stripped, or
    ``None`` once the input is exhausted. It may raise ``SourceReadError``.
    """

    name: str

    def next_line(self) -> str | None: ...


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        return line[:-1]
    return line


class IterableLineSource:
    """Line source over lines that are already in memory."""

    def __init__(self, lines: Iterable[str], name: str = "<memory>"):
        self.name = name
        self._lines: Iterator[str] = iter(lines)

    @classmethod
    def from_text(cls, text: str, name: str = "<memory>") -> "IterableLineSource":
        """Build a source from a block of text, splitting it into lines.

        Lines end at \\n, \\r\\n or a bare \\r. A trailing terminator does not
        produce an extra empty line.
        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return cls(lines, name=name)

    def next_line(self) -> str | None:
        line = next(self._lines, None)
        if line is None:
            return None
        return _strip_terminator(line)


class FileLineSource:
    """Line source reading a file from disk.

    Use as a context manager so the file is closed on both success and error:

        with FileLineSource(path) as lines:
            for record in MboxMessageIterator(lines):
                ...
    """

    def __init__(
        self,
        path: Path | str,
        encoding: str = "utf-8",
        errors: str = "replace",
    ):
        """Initialize the source.

        Args:
            path: Path to the mbox file.
            encoding: Text encoding used to turn bytes into lines.
            errors: Codec error handler passed to ``open``.
        """
        self._path = Path(path)
        self.name = str(self._path)
        self._encoding = encoding
        self._errors = errors
        self._file: IO[str] | None = None

    def open(self) -> "FileLineSource":
        try:
            # Universal newlines turn \r\n and bare \r into \n
            self._file = open(
                self._path,
                "r",
                encoding=self._encoding,
                errors=self._errors,
                newline=None,
            )
        except (OSError, LookupError) as e:
            raise SourceReadError(self.name, f"cannot open file: {e}") from e
        logger.debug(f"Opened {self.name}")
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.debug(f"Closed {self.name}")

    def next_line(self) -> str | None:
        if self._file is None:
            raise SourceReadError(self.name, "source is not open")
        try:
            line = self._file.readline()
        except (OSError, UnicodeDecodeError, LookupError, ValueError) as e:
            raise SourceReadError(self.name, str(e)) from e
        if not line:
            return None
        return _strip_terminator(line)

    def __enter__(self) -> "FileLineSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
