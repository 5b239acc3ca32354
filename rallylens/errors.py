"""
Error types raised by the analysis engine.

Missing landmarks, short histories and empty sequences are not errors;
they resolve to default scores or neutral results.
"""

from typing import Iterable


class RallyLensError(ValueError):
    """Base class for engine errors."""


class MalformedInput(RallyLensError):
    """Pose data that cannot be scored (bad coordinates, out-of-order frames)."""


class InvalidBenchmarkLevel(RallyLensError):
    """Requested skill level is not one of the built-in benchmarks."""

    def __init__(self, level, valid_levels: Iterable[str] = ()):
        self.level = level
        self.valid_levels = list(valid_levels)
        message = f"Benchmark not found for skill level: {level!r}"
        if self.valid_levels:
            message += f" (use one of: {', '.join(self.valid_levels)})"
        super().__init__(message)
