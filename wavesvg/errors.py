"""Errors raised while turning a trace into drawables.

Every error aborts the whole run: there is no partial output.
"""

from typing import Optional

from .data_model import Time, SignalId


class WaveformError(ValueError):
    """Base class for all trace processing errors."""


class MalformedTraceError(WaveformError):
    """The trace could not be decoded."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class UnknownSignalReferenceError(WaveformError):
    """A change names an identifier that was never declared."""

    def __init__(self, identifier: SignalId, time: Time) -> None:
        self.identifier = identifier
        self.time = time
        super().__init__(f"Change at time {time} references undeclared signal '{identifier}'")


class WidthMismatchError(WaveformError):
    """A recorded value's width disagrees with its signal's declared width."""

    def __init__(self, time: Time, name: str, expected: int, actual: int) -> None:
        self.time = time
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Value at time {time} in {name} has invalid width (expected {expected}, got {actual})"
        )
