"""Parse mbox mail archives into field-tagged records."""

__version__ = "0.1.0"
