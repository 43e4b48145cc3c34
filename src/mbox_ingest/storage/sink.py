"""Record sink persisting records to the database."""

import logging

from sqlalchemy.orm import Session

from ..ingestion.records import BODY, MESSAGE_DATE, SENDER, SENDER_INFO, Record
from .database import Database
from .models import StoredField, StoredMessage

logger = logging.getLogger(__name__)


def to_stored_message(record: Record) -> StoredMessage:
    """Build an ORM object holding every field of record."""
    message = StoredMessage(
        source_path=record.source,
        source_index=record.index,
        sender=record.get(SENDER, ""),
        message_date=record.get(MESSAGE_DATE, ""),
        sender_info=record.get(SENDER_INFO),
        body=record.get(BODY, ""),
    )
    message.fields = [
        StoredField(position=position, name=name, value=value)
        for position, (name, value) in enumerate(record)
    ]
    return message


class DatabaseSink:
    """Store emitted records, committing every ``batch_size`` records.

    Use as a context manager, or call ``close()`` to commit the last batch.
    """

    def __init__(self, db: Database, batch_size: int = 100):
        self._db = db
        self._batch_size = batch_size
        self._session: Session | None = None
        self._pending = 0
        self.count = 0

    def emit(self, record: Record) -> None:
        if self._session is None:
            self._session = self._db.get_session()
        self._session.add(to_stored_message(record))
        self._pending += 1
        self.count += 1

        if self._pending >= self._batch_size:
            self.flush()

    def flush(self) -> None:
        if self._session is None or not self._pending:
            return
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.debug(f"Committed {self._pending} records")
        self._pending = 0

    def close(self) -> None:
        if self._session is None:
            return
        try:
            self.flush()
        finally:
            self._session.close()
            self._session = None

    def __enter__(self) -> "DatabaseSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
