"""
Benchmark Comparator - Compare a clip's technique to a skill level

Scores every metric against the level's benchmark, maps the difference to
a 0-100 percentile and lists strengths and weaknesses.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from ..constants import METRIC_NAMES
from .benchmarks import BENCHMARKS, SkillBenchmarks
from .technique import METRIC_SPECS, TechniqueMetrics

logger = logging.getLogger(__name__)

# A lead (or deficit) of this many points saturates the percentile
PERCENTILE_SPAN = 20.0
# Difference needed to call a metric a strength or weakness
NOTABLE_DIFFERENCE = 5.0
MAX_HIGHLIGHTS = 3


def format_metric_name(metric_name: str) -> str:
    """'serve_arm_angle' -> 'Serve Arm Angle'"""
    return metric_name.replace('_', ' ').title()


# Report category -> what the metric measures
METRIC_DESCRIPTIONS = {format_metric_name(spec.name): spec.description for spec in METRIC_SPECS}


def calculate_percentile(user_score: float, benchmark_score: float) -> float:
    """
    Percentile of a user score relative to its benchmark.

    50 at the benchmark, rising linearly to 100 at a 20-point lead and
    falling to 0 at a 20-point deficit.
    """
    difference = user_score - benchmark_score
    if difference == 0:
        return 50.0
    sign = 1.0 if difference > 0 else -1.0
    percentile = 50.0 + sign * min(abs(difference), PERCENTILE_SPAN) / PERCENTILE_SPAN * 50.0
    return min(100.0, max(0.0, percentile))


@dataclass(frozen=True)
class ComparisonResult:
    """One metric (or the Overall aggregate) compared to a benchmark."""
    user_score: float
    benchmark_score: float
    difference: float  # positive means user is above benchmark
    percentile: float  # 0-100
    category: str

    def to_dict(self) -> Dict:
        return {
            'userScore': self.user_score,
            'benchmarkScore': self.benchmark_score,
            'difference': self.difference,
            'percentile': self.percentile,
            'category': self.category,
        }


@dataclass(frozen=True)
class BenchmarkComparison:
    """Full comparison of a clip against one skill level."""
    level: str
    comparisons: List[ComparisonResult]
    overall: ComparisonResult
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'level': self.level,
            'comparisons': [c.to_dict() for c in self.comparisons],
            'overallComparison': self.overall.to_dict(),
            'strengths': list(self.strengths),
            'weaknesses': list(self.weaknesses),
        }


class BenchmarkComparator:
    """
    Compare a clip's aggregate technique metrics to skill-level benchmarks.
    """

    def __init__(self, benchmarks: Optional[SkillBenchmarks] = None):
        """
        Args:
            benchmarks: SkillBenchmarks instance or None for the built-in profiles
        """
        self.benchmarks = benchmarks or BENCHMARKS

    def compare(self, user_metrics: Union[TechniqueMetrics, Dict], level: str = 'intermediate') -> BenchmarkComparison:
        """
        Compare technique metrics to the benchmark for a skill level.

        Args:
            user_metrics: Clip-level TechniqueMetrics (or a stored metrics dict)
            level: Skill level to compare against

        Returns:
            BenchmarkComparison with per-metric and overall results

        Raises:
            InvalidBenchmarkLevel: If level is not a built-in profile
        """
        benchmark = self.benchmarks.get_benchmark(level)
        if not isinstance(user_metrics, TechniqueMetrics):
            user_metrics = TechniqueMetrics.from_dict(user_metrics)

        comparisons = []
        for metric_name in METRIC_NAMES:
            user_score = getattr(user_metrics, metric_name)
            benchmark_score = getattr(benchmark.metrics, metric_name)
            comparisons.append(ComparisonResult(
                user_score=user_score,
                benchmark_score=benchmark_score,
                difference=user_score - benchmark_score,
                percentile=calculate_percentile(user_score, benchmark_score),
                category=format_metric_name(metric_name),
            ))

        count = len(comparisons)
        overall = ComparisonResult(
            user_score=sum(c.user_score for c in comparisons) / count,
            benchmark_score=sum(c.benchmark_score for c in comparisons) / count,
            difference=sum(c.difference for c in comparisons) / count,
            percentile=sum(c.percentile for c in comparisons) / count,
            category='Overall',
        )

        # Evaluation order is kept; no re-sorting by magnitude
        strengths = [c.category for c in comparisons if c.difference > NOTABLE_DIFFERENCE][:MAX_HIGHLIGHTS]
        weaknesses = [c.category for c in comparisons if c.difference < -NOTABLE_DIFFERENCE][:MAX_HIGHLIGHTS]

        logger.debug("Compared against %s: overall percentile %.1f", benchmark.level, overall.percentile)
        return BenchmarkComparison(
            level=benchmark.level,
            comparisons=comparisons,
            overall=overall,
            strengths=strengths,
            weaknesses=weaknesses,
        )

    def generate_report(self, comparison: BenchmarkComparison) -> str:
        """
        Generate a text report from comparison results.

        Args:
            comparison: Result of compare()

        Returns:
            Formatted text report
        """
        lines = []

        lines.append("=" * 60)
        lines.append("PICKLEBALL TECHNIQUE REPORT")
        lines.append("=" * 60)
        lines.append("")

        overall = comparison.overall
        lines.append(f"Benchmark Level: {comparison.level.title()}")
        lines.append(f"Overall Score: {overall.user_score:.1f}/100 "
                     f"(benchmark {overall.benchmark_score:.1f})")
        lines.append(f"Overall Percentile: {overall.percentile:.0f}")
        lines.append("")

        lines.append("-" * 40)
        lines.append("STRENGTHS:")
        lines.append("-" * 40)
        if comparison.strengths:
            for category in comparison.strengths:
                lines.append(f"• {category}")
        else:
            lines.append("• None above benchmark yet")

        lines.append("")
        lines.append("-" * 40)
        lines.append("PRIORITY IMPROVEMENTS:")
        lines.append("-" * 40)
        if comparison.weaknesses:
            for i, category in enumerate(comparison.weaknesses, 1):
                hint = METRIC_DESCRIPTIONS.get(category)
                lines.append(f"{i}. {category}: {hint}" if hint else f"{i}. {category}")
        else:
            lines.append("• No metric more than 5 points below benchmark")

        lines.append("")
        lines.append("-" * 40)
        lines.append("METRIC BREAKDOWN:")
        lines.append("-" * 40)
        lines.append(f"{'Metric':<24} {'You':>6} {'Bench':>6} {'Diff':>7} {'Pct':>5}")
        for c in comparison.comparisons:
            lines.append(f"{c.category:<24} {c.user_score:>6.1f} {c.benchmark_score:>6.1f} "
                         f"{c.difference:>+7.1f} {c.percentile:>5.0f}")

        lines.append("")
        lines.append("=" * 60)

        return "\n".join(lines)


def compare_against_benchmark(user_metrics, level: str = 'intermediate') -> BenchmarkComparison:
    """Compare metrics against a built-in benchmark level."""
    return BenchmarkComparator().compare(user_metrics, level)
