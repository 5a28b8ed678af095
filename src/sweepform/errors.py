from __future__ import annotations


class SweepformError(Exception):
    """Base class for every error raised by sweepform."""


class ConfigurationError(SweepformError, ValueError):
    """Raised when a structural parameter is outside its required domain."""


class DegenerateGeometryError(ConfigurationError):
    """Raised when valid parameters combine into a collapsed cross-section."""

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter


class InvalidProfileError(SweepformError, ValueError):
    """Raised when a profile cannot be swept (too few points, non-simple)."""


class ClosureMismatchError(SweepformError, RuntimeError):
    """Raised when a closed family does not return to its starting slice."""

    def __init__(self, message: str, deviation: float) -> None:
        super().__init__(message)
        self.deviation = deviation


__all__ = [
    "SweepformError",
    "ConfigurationError",
    "DegenerateGeometryError",
    "InvalidProfileError",
    "ClosureMismatchError",
]
