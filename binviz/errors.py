"""Exceptions raised by binviz."""


class BinvizError(Exception):
    """Base class for every error binviz raises on purpose."""


class ConfigurationError(BinvizError, ValueError):
    """An analysis was asked for with settings that make no sense (order 0, unknown mode...)."""


class ResourceLimitError(BinvizError, MemoryError):
    """A dense count table was requested for an order it cannot hold."""


class StreamReadError(BinvizError):
    """The file source could not produce a byte stream."""

    def __init__(self, path, reason: str):
        # both values go to args so the error survives pickling across worker processes
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"cannot read {self.path}: {self.reason}"
