"""Exception types raised by mbox ingestion."""


class MboxIngestError(Exception):
    """Base class for all mbox ingestion errors."""


class ConfigurationError(MboxIngestError):
    """Raised when the job is misconfigured, e.g. no input files were given."""


class SourceReadError(MboxIngestError):
    """Raised when the underlying line source cannot be opened or read."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class MalformedSeparatorError(MboxIngestError):
    """A line expected to be a "From " separator did not have the right shape."""

    def __init__(self, source: str, line: str):
        super().__init__(f"Invalid From line syntax in {source}: {line}")
        self.source = source
        self.line = line


class MalformedHeaderError(MboxIngestError):
    """A header line did not contain a colon."""

    def __init__(self, source: str, line: str):
        super().__init__(f"Expected a colon in header line {line!r} ({source})")
        self.source = source
        self.line = line
