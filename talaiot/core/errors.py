from __future__ import annotations


class TalaiotError(Exception):
    """Base class for publishing failures."""


class ConfigurationError(TalaiotError):
    """Publisher configuration is missing required values or is malformed."""


class MappingError(TalaiotError):
    """A report record could not be turned into a point."""

    def __init__(self, message: str, measurement: str | None = None, key: str | None = None) -> None:
        super().__init__(message)
        self.measurement = measurement
        self.key = key


class WriteError(TalaiotError):
    """The store rejected a batch or could not be reached."""
