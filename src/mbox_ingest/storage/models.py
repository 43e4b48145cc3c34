"""SQLAlchemy ORM models for stored mbox records."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class StoredMessage(Base):
    """One parsed message from an mbox file."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(primary_key=True)
    source_path: Mapped[str] = mapped_column(String(1000), index=True)
    source_index: Mapped[int] = mapped_column(Integer)

    # Separator line fields, kept verbatim
    sender: Mapped[str] = mapped_column(String(500), index=True)
    message_date: Mapped[str] = mapped_column(String(24))
    sender_info: Mapped[Optional[str]] = mapped_column(Text)

    body: Mapped[str] = mapped_column(Text)
    date_imported: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )

    # Every field of the record, headers included, in order
    fields: Mapped[List["StoredField"]] = relationship(
        back_populates="message",
        cascade="all, delete-orphan",
        order_by="StoredField.position",
    )

    __table_args__ = (Index("ix_message_source", "source_path", "source_index"),)

    def __repr__(self) -> str:
        return f"<StoredMessage {self.id}: {self.sender}>"


class StoredField(Base):
    """A single (name, value) field of a message."""

    __tablename__ = "message_fields"

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[int] = mapped_column(ForeignKey("messages.id"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    name: Mapped[str] = mapped_column(String(500), index=True)
    value: Mapped[str] = mapped_column(Text)

    message: Mapped["StoredMessage"] = relationship(back_populates="fields")

    def __repr__(self) -> str:
        return f"<StoredField {self.message_id}.{self.position}: {self.name}>"
