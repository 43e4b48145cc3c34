"""Record types produced by the mbox parser."""

from dataclasses import dataclass, field
from typing import Iterator

# Field names used for data taken from the separator line and the body
SENDER = "Sender"
MESSAGE_DATE = "Message Date"
SENDER_INFO = "Sender Info"
BODY = "Body"


@dataclass(frozen=True)
class SeparatorFields:
    """Fields decomposed from a "From " separator line."""

    sender: str
    date_token: str
    extra_info: str


@dataclass
class Record:
    """One parsed email message as an ordered list of (name, value) pairs.

    Names may repeat, since a header can occur more than once. A record is
    frozen once it has been handed to a sink; appending after that raises.
    """

    source: str = ""
    index: int = 0
    _fields: list[tuple[str, str]] = field(default_factory=list, init=False)
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    def add(self, name: str, value: str) -> None:
        """Append a field, keeping insertion order.

        Args:
            name: Field name.
            value: Field value.

        Raises:
            RuntimeError: If the record has already been emitted.
        """
        if self._frozen:
            raise RuntimeError("Cannot add fields to an emitted record")
        self._fields.append((name, value))

    @property
    def fields(self) -> tuple[tuple[str, str], ...]:
        """The fields in insertion order, as a read-only snapshot."""
        return tuple(self._fields)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value stored under name."""
        for field_name, value in self._fields:
            if field_name == name:
                return value
        return default

    def get_all(self, name: str) -> list[str]:
        """Return every value stored under name, in order."""
        return [value for field_name, value in self._fields if field_name == name]

    @property
    def sender(self) -> str | None:
        return self.get(SENDER)

    @property
    def body(self) -> str | None:
        return self.get(BODY)

    def to_dict(self) -> dict:
        """Convert to a JSON-serialisable dict."""
        return {
            "source": self.source,
            "index": self.index,
            "fields": [[name, value] for name, value in self._fields],
        }

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)
