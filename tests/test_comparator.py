import pytest

from rallylens.biomechanics import BENCHMARKS, BenchmarkComparator, TechniqueMetrics, compare_against_benchmark
from rallylens.biomechanics.benchmarks import DEFAULT_BENCHMARKS
from rallylens.biomechanics.comparator import calculate_percentile, format_metric_name
from rallylens.constants import METRIC_NAMES, SKILL_LEVELS
from rallylens.errors import InvalidBenchmarkLevel


class TestBenchmarks:
    def test_every_level_has_every_metric(self):
        for level in SKILL_LEVELS:
            assert len(DEFAULT_BENCHMARKS[level]) == len(METRIC_NAMES)
            benchmark = BENCHMARKS.get_benchmark(level)
            assert benchmark.level == level

    def test_levels_are_ordered(self):
        overall = [BENCHMARKS.get_benchmark(level).metrics.overall_technique for level in SKILL_LEVELS]
        assert overall == sorted(overall)

    def test_levels(self):
        assert BENCHMARKS.levels() == SKILL_LEVELS

    def test_level_lookup_ignores_case_and_whitespace(self):
        assert BENCHMARKS.get_benchmark(' Advanced ').level == 'advanced'
        assert BENCHMARKS.get_metric_benchmark('professional', 'serve_arm_angle') == 93.0

    @pytest.mark.parametrize('level', ['atlantis', '', None])
    def test_unknown_level(self, level):
        with pytest.raises(InvalidBenchmarkLevel) as excinfo:
            BENCHMARKS.get_benchmark(level)
        assert excinfo.value.level == level
        assert 'intermediate' in str(excinfo.value)

    def test_benchmarks_cannot_be_modified(self):
        with pytest.raises(TypeError):
            DEFAULT_BENCHMARKS['beginner']['serveArmAngle'] = 99


class TestPercentile:
    @pytest.mark.parametrize('user, bench, expected', [
        (75, 75, 50.0),
        (80, 75, 62.5),
        (70, 75, 37.5),
        (95, 75, 100.0),
        (100, 60, 100.0),
        (55, 75, 0.0),
        (0, 93, 0.0),
    ])
    def test_values(self, user, bench, expected):
        assert calculate_percentile(user, bench) == pytest.approx(expected)


def test_format_metric_name():
    assert format_metric_name('serve_arm_angle') == 'Serve Arm Angle'


class TestComparator:
    def test_identity_comparison(self):
        benchmark = BENCHMARKS.get_benchmark('intermediate').metrics
        result = compare_against_benchmark(benchmark, 'intermediate')
        assert all(c.difference == 0 and c.percentile == 50.0 for c in result.comparisons)
        assert result.overall.percentile == 50.0
        assert result.strengths == []
        assert result.weaknesses == []

    def test_strengths_capped_in_evaluation_order(self):
        perfect = TechniqueMetrics(**{name: 100 for name in METRIC_NAMES})
        result = BenchmarkComparator().compare(perfect, 'beginner')
        assert result.strengths == ['Serve Arm Angle', 'Serve Follow Through', 'Serve Body Rotation']
        assert result.weaknesses == []
        assert result.overall.user_score == 100.0
        assert result.overall.percentile == 100.0

    def test_weaknesses(self):
        metrics = TechniqueMetrics(stance_width=50, paddle_angle=60, ready_position=72)
        result = compare_against_benchmark(metrics, 'intermediate')
        assert result.weaknesses == ['Stance Width', 'Paddle Angle']
        assert result.strengths == []

    def test_accepts_stored_dict(self):
        result = compare_against_benchmark({'serveArmAngle': 95}, 'advanced')
        assert result.comparisons[0].category == 'Serve Arm Angle'
        assert result.comparisons[0].difference == pytest.approx(10.0)

    def test_percentiles_bounded(self):
        extremes = TechniqueMetrics(**{name: (0 if i % 2 else 100) for i, name in enumerate(METRIC_NAMES)})
        for level in SKILL_LEVELS:
            result = compare_against_benchmark(extremes, level)
            for c in result.comparisons + [result.overall]:
                assert 0.0 <= c.percentile <= 100.0

    def test_unknown_level(self):
        with pytest.raises(InvalidBenchmarkLevel):
            compare_against_benchmark(TechniqueMetrics(), 'atlantis')

    def test_to_dict(self):
        data = compare_against_benchmark(TechniqueMetrics(), 'beginner').to_dict()
        assert data['level'] == 'beginner'
        assert len(data['comparisons']) == len(METRIC_NAMES)
        assert data['overallComparison']['category'] == 'Overall'
        assert set(data['comparisons'][0]) == {'userScore', 'benchmarkScore', 'difference', 'percentile', 'category'}

    def test_report(self):
        comparator = BenchmarkComparator()
        report = comparator.generate_report(comparator.compare(TechniqueMetrics(stance_width=40), 'advanced'))
        assert 'PICKLEBALL TECHNIQUE REPORT' in report
        assert 'Benchmark Level: Advanced' in report
        assert '1. Serve Arm Angle' in report
        assert 'Center Of Gravity' in report

    def test_report_explains_priority_improvements(self):
        comparator = BenchmarkComparator()
        report = comparator.generate_report(comparator.compare(TechniqueMetrics(stance_width=40), 'advanced'))
        assert '1. Serve Arm Angle: Shoulder-elbow-wrist extension of the hitting arm' in report
