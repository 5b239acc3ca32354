"""
Biomechanics Module - Technique metrics and benchmark comparison
"""

from .angles import PoseGeometry, calculate_angle_3points
from .technique import (
    METRIC_SPECS,
    TechniqueMetrics,
    aggregate_technique_metrics,
    extract_technique_metrics,
    technique_timeline,
)
from .benchmarks import BENCHMARKS, Benchmark, SkillBenchmarks
from .comparator import (
    BenchmarkComparator,
    BenchmarkComparison,
    ComparisonResult,
    compare_against_benchmark,
)

__all__ = [
    'PoseGeometry', 'calculate_angle_3points',
    'METRIC_SPECS', 'TechniqueMetrics', 'aggregate_technique_metrics',
    'extract_technique_metrics', 'technique_timeline',
    'BENCHMARKS', 'Benchmark', 'SkillBenchmarks',
    'BenchmarkComparator', 'BenchmarkComparison', 'ComparisonResult', 'compare_against_benchmark',
]
