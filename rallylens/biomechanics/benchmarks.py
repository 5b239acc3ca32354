"""
Skill-Level Benchmarks - Reference technique profiles

One fixed TechniqueMetrics profile per skill level. The profiles are
process-wide constants and cannot be modified at runtime.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List

from ..constants import SKILL_LEVELS
from ..errors import InvalidBenchmarkLevel
from .technique import TechniqueMetrics

# Default benchmark values (camelCase, as stored alongside analyses)
DEFAULT_BENCHMARKS = MappingProxyType({
    "beginner": MappingProxyType({
        "serveArmAngle": 65,
        "serveFollowThrough": 60,
        "serveBodyRotation": 55,
        "stanceWidth": 60,
        "stanceBalance": 65,
        "splitStepTiming": 60,
        "footworkAgility": 58,
        "paddleHeight": 62,
        "paddleAngle": 60,
        "paddleReadyPosition": 65,
        "bodyAlignment": 60,
        "readyPosition": 62,
        "centerOfGravity": 60,
    }),
    "intermediate": MappingProxyType({
        "serveArmAngle": 75,
        "serveFollowThrough": 73,
        "serveBodyRotation": 72,
        "stanceWidth": 75,
        "stanceBalance": 77,
        "splitStepTiming": 74,
        "footworkAgility": 73,
        "paddleHeight": 75,
        "paddleAngle": 76,
        "paddleReadyPosition": 77,
        "bodyAlignment": 75,
        "readyPosition": 74,
        "centerOfGravity": 75,
    }),
    "advanced": MappingProxyType({
        "serveArmAngle": 85,
        "serveFollowThrough": 84,
        "serveBodyRotation": 83,
        "stanceWidth": 85,
        "stanceBalance": 87,
        "splitStepTiming": 86,
        "footworkAgility": 85,
        "paddleHeight": 85,
        "paddleAngle": 86,
        "paddleReadyPosition": 87,
        "bodyAlignment": 86,
        "readyPosition": 85,
        "centerOfGravity": 85,
    }),
    "professional": MappingProxyType({
        "serveArmAngle": 93,
        "serveFollowThrough": 92,
        "serveBodyRotation": 91,
        "stanceWidth": 93,
        "stanceBalance": 94,
        "splitStepTiming": 93,
        "footworkAgility": 92,
        "paddleHeight": 93,
        "paddleAngle": 94,
        "paddleReadyPosition": 94,
        "bodyAlignment": 93,
        "readyPosition": 92,
        "centerOfGravity": 93,
    }),
})


@dataclass(frozen=True)
class Benchmark:
    """Reference technique profile for one skill level."""
    level: str
    metrics: TechniqueMetrics


class SkillBenchmarks:
    """
    Lookup for the built-in skill-level benchmarks.
    """

    LEVELS = tuple(SKILL_LEVELS)

    def __init__(self):
        self._benchmarks: Dict[str, Benchmark] = {
            level: Benchmark(level, TechniqueMetrics.from_dict(DEFAULT_BENCHMARKS[level]))
            for level in self.LEVELS
        }

    @staticmethod
    def normalize_level(level) -> str:
        if not isinstance(level, str):
            raise InvalidBenchmarkLevel(level, SKILL_LEVELS)
        return level.strip().lower()

    def get_benchmark(self, level: str) -> Benchmark:
        """
        Get the benchmark profile for a skill level.

        Args:
            level: 'beginner', 'intermediate', 'advanced' or 'professional'
                   (case-insensitive)

        Returns:
            Benchmark for that level

        Raises:
            InvalidBenchmarkLevel: If level is not a built-in profile
        """
        key = self.normalize_level(level)
        if key not in self._benchmarks:
            raise InvalidBenchmarkLevel(level, self.LEVELS)
        return self._benchmarks[key]

    def get_metric_benchmark(self, level: str, metric: str) -> float:
        """Benchmark score of one metric (snake_case name) at a level."""
        return getattr(self.get_benchmark(level).metrics, metric)

    def levels(self) -> List[str]:
        return list(self.LEVELS)


BENCHMARKS = SkillBenchmarks()
