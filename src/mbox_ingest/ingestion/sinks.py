"""Record sinks receiving finished Records."""

import json
import logging
from typing import Protocol, TextIO

from .records import Record

logger = logging.getLogger(__name__)


class RecordSink(Protocol):
    def emit(self, record: Record) -> None: ...


class ListSink:
    """Collect records in memory."""

    def __init__(self):
        self.records: list[Record] = []

    def emit(self, record: Record) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)


class JsonLinesSink:
    """Write each record as one JSON object per line."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.count = 0

    def emit(self, record: Record) -> None:
        self._stream.write(json.dumps(record.to_dict(), ensure_ascii=False))
        self._stream.write("\n")
        self.count += 1
