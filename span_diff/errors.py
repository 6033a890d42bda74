class LineTooLongError(ValueError):
    """Raised when a line sequence is built from input holding an over-length line."""

    def __init__(self, line_number: int, length: int, limit: int) -> None:
        self.line_number = line_number
        self.length = length
        self.limit = limit
        super().__init__(
            f"Line {line_number} is {length} characters long, "
            f"exceeding the limit of {limit} characters.")


class StateError(RuntimeError):
    """Base class for errors caused by using the engine in the wrong state."""


class NotReadyError(StateError):
    """Raised when a diff report is requested before a run has completed."""


class DiffCancelledError(StateError):
    """Raised when a running diff notices its cancel event has been set."""


class DiffDepthError(StateError):
    """Raised when range partitioning nests deeper than the configured limit."""
