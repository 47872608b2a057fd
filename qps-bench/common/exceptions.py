"""
Exception hierarchy for the QPS benchmark.
"""


class BenchmarkError(Exception):
    """Base class for all benchmark errors."""


class ConfigurationError(BenchmarkError):
    """Raised for invalid run configuration, before any backend interaction."""


class UnknownModeError(ConfigurationError):
    """Raised when a benchmark mode name is not recognized."""

    def __init__(self, mode: str, supported):
        self.mode = mode
        self.supported = tuple(supported)
        super().__init__(
            f"Unknown mode: {mode}. Supported modes: {', '.join(self.supported)}"
        )


class BackendError(BenchmarkError):
    """Opaque failure of a single storage backend call."""

    def __init__(self, operation: str, key: str, cause: Exception = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        message = f"{operation} failed for {key}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class EmptyHistogramError(BenchmarkError):
    """Raised when a histogram with no samples is queried."""

    def __init__(self):
        super().__init__("no data: histogram has no recorded samples")


class EmptyKeySetError(BenchmarkError):
    """Raised when a mode needs pre-populated keys but none exist."""
