"""Tests for line sources."""

from pathlib import Path

import pytest

from mbox_ingest.errors import SourceReadError
from mbox_ingest.ingestion.line_source import FileLineSource, IterableLineSource


def drain(lines) -> list[str]:
    result = []
    while (line := lines.next_line()) is not None:
        result.append(line)
    return result


class TestIterableLineSource:
    """Tests for IterableLineSource."""

    def test_strips_newline(self) -> None:
        assert drain(IterableLineSource(["a\n", "b"])) == ["a", "b"]

    def test_from_text_line_endings(self) -> None:
        """Test \\n, \\r\\n and \\r all end a line."""
        lines = IterableLineSource.from_text("a\r\nb\rc\n\nd")
        assert drain(lines) == ["a", "b", "c", "", "d"]

    def test_from_text_trailing_newline(self) -> None:
        assert drain(IterableLineSource.from_text("a\n")) == ["a"]
        assert drain(IterableLineSource.from_text("a\n\n")) == ["a", ""]
        assert drain(IterableLineSource.from_text("")) == []

    def test_exhausted_stays_exhausted(self) -> None:
        lines = IterableLineSource(["x"])
        assert lines.next_line() == "x"
        assert lines.next_line() is None
        assert lines.next_line() is None


class TestFileLineSource:
    """Tests for FileLineSource."""

    def test_reads_lines(self, write_mbox) -> None:
        path = write_mbox("From a\r\nSubject: x\r\n\r\nbody")
        with FileLineSource(path) as lines:
            assert lines.name == str(path)
            assert drain(lines) == ["From a", "Subject: x", "", "body"]

    def test_closed_after_context(self, write_mbox) -> None:
        path = write_mbox("line\n")
        with FileLineSource(path) as lines:
            lines.next_line()
        with pytest.raises(SourceReadError):
            lines.next_line()

    def test_missing_file(self, tmp_path: Path) -> None:
        source = FileLineSource(tmp_path / "nope.mbox")
        with pytest.raises(SourceReadError) as excinfo:
            source.open()
        assert excinfo.value.source == str(tmp_path / "nope.mbox")

    def test_undecodable_bytes_replaced(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.mbox"
        path.write_bytes(b"caf\xe9\n")
        with FileLineSource(path) as lines:
            assert lines.next_line() == "caf\ufffd"

    def test_strict_decoding_error(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.mbox"
        path.write_bytes(b"caf\xe9\n")
        with FileLineSource(path, errors="strict") as lines:
            with pytest.raises(SourceReadError):
                lines.next_line()

    def test_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.mbox"
        path.write_bytes(b"caf\xe9\n")
        with FileLineSource(path, encoding="latin-1") as lines:
            assert lines.next_line() == "café"

    def test_unknown_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "archive.mbox"
        path.write_bytes(b"From a@x Fri Jul  8 12:08:34 2011\n")
        with pytest.raises(SourceReadError) as excinfo:
            FileLineSource(path, encoding="no-such-codec").open()
        assert excinfo.value.source == str(path)

    def test_unknown_error_handler(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.mbox"
        path.write_bytes(b"caf\xe9\n")
        with pytest.raises(SourceReadError):
            with FileLineSource(path, errors="no-such-handler") as lines:
                lines.next_line()
