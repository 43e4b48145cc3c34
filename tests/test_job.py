"""Tests for MboxIngestJob."""

import io
import json
import logging
from pathlib import Path

import pytest

from mbox_ingest.errors import ConfigurationError
from mbox_ingest.ingestion.diagnostics import (
    CollectingDiagnostics,
    DiagnosticKind,
    StrictDiagnostics,
)
from mbox_ingest.ingestion.job import FileStatus, MboxIngestJob
from mbox_ingest.ingestion.sinks import JsonLinesSink, ListSink

GOOD = "From a@x Fri Jul  8 12:08:34 2011\nSubject: one\n\nfirst\n"
BAD_HEADER = "From a@x Fri Jul  8 12:08:34 2011\nSubject: one\nbroken\n\nfirst\n"


class TestMboxIngestJob:
    """Tests for processing several files."""

    def test_no_paths(self) -> None:
        with pytest.raises(ConfigurationError):
            MboxIngestJob([], ListSink())

    def test_processes_files_in_order(self, write_mbox, two_messages: str) -> None:
        first = write_mbox(two_messages, "one.mbox")
        second = write_mbox(GOOD, "two.mbox")
        sink = ListSink()

        summary = MboxIngestJob([first, second], sink).run()

        assert summary.ok
        assert summary.total_records == 3
        assert [r.status for r in summary.results] == [FileStatus.OK, FileStatus.OK]
        assert [r.records for r in summary.results] == [2, 1]
        assert [r.source for r in sink.records] == [str(first), str(first), str(second)]

    def test_missing_file_does_not_stop_job(self, tmp_path: Path, write_mbox) -> None:
        good = write_mbox(GOOD)
        missing = tmp_path / "missing.mbox"
        diagnostics = CollectingDiagnostics()
        sink = ListSink()

        summary = MboxIngestJob([missing, good], sink, diagnostics).run()

        assert [r.status for r in summary.results] == [FileStatus.READ_ERROR, FileStatus.OK]
        assert summary.results[0].reason
        assert not summary.ok
        assert len(sink) == 1
        assert len(diagnostics.of_kind(DiagnosticKind.SOURCE_READ_ERROR)) == 1

    def test_empty_file(self, write_mbox) -> None:
        empty = write_mbox("", "empty.mbox")
        good = write_mbox(GOOD)
        diagnostics = CollectingDiagnostics()

        summary = MboxIngestJob([empty, good], ListSink(), diagnostics).run()

        assert summary.results[0].status == FileStatus.EMPTY
        assert summary.results[0].records == 0
        assert summary.ok
        assert [d.kind for d in diagnostics.diagnostics] == [DiagnosticKind.EMPTY_SOURCE]

    def test_malformed_separator(self, write_mbox) -> None:
        bad = write_mbox("Subject: no envelope\n\nbody\n", "bad.mbox")
        good = write_mbox(GOOD)
        diagnostics = CollectingDiagnostics()
        sink = ListSink()

        summary = MboxIngestJob([bad, good], sink, diagnostics).run()

        assert summary.results[0].status == FileStatus.MALFORMED_SEPARATOR
        assert "Subject: no envelope" in summary.results[0].reason
        assert summary.results[1].status == FileStatus.OK
        assert len(sink) == 1
        assert len(diagnostics.of_kind(DiagnosticKind.MALFORMED_SEPARATOR)) == 1

    def test_malformed_header_is_not_a_failure(self, write_mbox) -> None:
        path = write_mbox(BAD_HEADER)
        summary = MboxIngestJob([path], ListSink(), CollectingDiagnostics()).run()
        assert summary.results[0].status == FileStatus.OK
        assert summary.results[0].records == 1

    def test_strict_malformed_header_stops_file(self, write_mbox) -> None:
        bad = write_mbox(BAD_HEADER, "bad.mbox")
        good = write_mbox(GOOD)
        sink = ListSink()

        summary = MboxIngestJob([bad, good], sink, StrictDiagnostics()).run()

        assert summary.results[0].status == FileStatus.MALFORMED_HEADER
        assert summary.results[0].records == 0
        assert summary.results[1].status == FileStatus.OK
        assert len(sink) == 1

    def test_strict_malformed_separator(self, write_mbox) -> None:
        bad = write_mbox(GOOD + "\nfrom here on\n", "bad.mbox")
        summary = MboxIngestJob([bad], ListSink(), StrictDiagnostics()).run()
        assert summary.results[0].status == FileStatus.MALFORMED_SEPARATOR
        assert summary.results[0].records == 1

    def test_jsonl_output(self, write_mbox, two_messages: str) -> None:
        stream = io.StringIO()
        MboxIngestJob([write_mbox(two_messages)], JsonLinesSink(stream)).run()

        rows = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert len(rows) == 2
        assert rows[0]["index"] == 0
        assert rows[0]["fields"][0] == ["Sender", "a@x"]
        assert rows[1]["fields"][-1] == ["Body", "world"]

    def test_summary_logged(self, write_mbox, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="mbox_ingest")
        MboxIngestJob([write_mbox(GOOD)], ListSink()).run()
        assert "Processed 1 files, 1 records, 0 failed" in caplog.text

    def test_read_error_partway_through_file(self, tmp_path: Path, write_mbox) -> None:
        # The bad byte sits well past the first read buffer
        padding = "padding line\n" * 10000
        broken = tmp_path / "broken.mbox"
        broken.write_bytes(
            GOOD.encode()
            + b"\nFrom b@y Fri Jul  8 12:08:34 2011\nSubject: two\n\n"
            + padding.encode()
            + b"caf\xe9\n"
        )
        good = write_mbox(GOOD)
        diagnostics = CollectingDiagnostics()
        sink = ListSink()

        summary = MboxIngestJob([broken, good], sink, diagnostics, errors="strict").run()

        assert [r.status for r in summary.results] == [FileStatus.READ_ERROR, FileStatus.OK]
        assert summary.results[0].records == 1
        assert summary.results[1].records == 1
        assert [r.source for r in sink.records] == [str(broken), str(good)]
        assert len(diagnostics.of_kind(DiagnosticKind.SOURCE_READ_ERROR)) == 1

    def test_unknown_encoding_is_read_error(self, write_mbox) -> None:
        summary = MboxIngestJob(
            [write_mbox(GOOD)], ListSink(), encoding="no-such-codec"
        ).run()
        assert summary.results[0].status == FileStatus.READ_ERROR
        assert "no-such-codec" in summary.results[0].reason
