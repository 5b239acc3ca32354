from datetime import datetime, timedelta

import pytest

from rallylens.biomechanics import TechniqueMetrics
from rallylens.progress import ProgressRecord, Trend, generate_progress_insights, track_progress
from rallylens.progress.tracker import NEED_MORE_DATA_INSIGHT


def history(*scores):
    """Newest-first records, one day apart."""
    start = datetime(2026, 10, 1)
    return [ProgressRecord(date=start - timedelta(days=i), overall_score=score)
            for i, score in enumerate(scores)]


@pytest.mark.parametrize('records', [[], history(80)])
def test_not_enough_history(records):
    summary = track_progress(records)
    assert summary.trend is Trend.STABLE
    assert summary.improvement_pct == 0.0
    assert summary.best_score == summary.worst_score == summary.average_score == 0.0
    assert summary.data_points == []
    assert summary.insights == [NEED_MORE_DATA_INSIGHT]


def test_improving_history():
    summary = track_progress(history(85, 80, 75, 70))
    assert summary.improvement_pct == pytest.approx(21.428571, rel=1e-5)
    assert summary.trend is Trend.IMPROVING
    assert summary.best_score == 85
    assert summary.worst_score == 70
    assert summary.average_score == pytest.approx(77.5)
    assert len(summary.data_points) == 4
    assert summary.insights == [
        "🎉 Excellent progress! You've improved by 21.4% overall.",
        "📈 Your recent performance shows consistent improvement!",
        "🏆 Your best score (85) shows you can perform at a higher level consistently.",
    ]


def test_declining_history():
    summary = track_progress(history(60, 70, 80, 90, 100))
    assert summary.improvement_pct == pytest.approx(-40.0)
    assert summary.trend is Trend.DECLINING
    assert summary.insights == [
        "⚠️ Your scores have declined by 40.0%. Let's refocus on fundamentals.",
        "📉 Recent performance shows a decline. Review your training routine.",
        "🏆 Your best score (100) shows you can perform at a higher level consistently.",
        "📊 You have enough data for meaningful progress tracking!",
    ]


def test_good_progress_with_short_history_is_stable():
    summary = track_progress(history(80, 75))
    assert summary.trend is Trend.STABLE
    assert summary.insights[0] == "👍 Good progress! You've improved by 6.7%."
    assert summary.insights[1].startswith("➡️")


def test_zero_oldest_score():
    summary = track_progress(history(50, 0))
    assert summary.improvement_pct == 0.0
    assert summary.best_score == 50


def test_window_is_capped():
    summary = track_progress(history(*([75] * 12)))
    assert len(summary.data_points) == 10
    assert summary.trend is Trend.STABLE


def test_stored_rows_accepted():
    rows = [
        {'date': '2026-10-02', 'overallScore': 90, 'techniqueMetrics': {'serveArmAngle': 90}},
        {'date': '2026-10-01', 'overallScore': None},
    ]
    summary = track_progress(rows)
    assert summary.data_points[1].overall_score == 75.0
    assert summary.data_points[1].technique_metrics == TechniqueMetrics()
    assert summary.improvement_pct == pytest.approx(20.0)


@pytest.mark.parametrize('score', [0, 0.0, float('nan')])
def test_stored_zero_or_nan_score_uses_default(score):
    record = ProgressRecord.from_row({'date': '2026-10-01', 'overallScore': score})
    assert record.overall_score == 75.0


def test_metric_changes():
    newer = ProgressRecord('2026-10-02', 80, TechniqueMetrics(serve_arm_angle=90))
    older = ProgressRecord('2026-10-01', 70, TechniqueMetrics(serve_arm_angle=70))
    summary = track_progress([newer, older])
    assert summary.metric_changes['serveArmAngle'] == pytest.approx(20.0)
    assert summary.metric_changes['overallTechnique'] == pytest.approx(4.0)
    assert summary.metric_changes['stanceWidth'] == 0.0
    assert len(summary.metric_changes) == 14


def test_summary_to_dict():
    data = track_progress(history(85, 80)).to_dict()
    assert data['trend'] == 'stable'
    assert data['dataPoints'][0]['date'] == '2026-10-01T00:00:00'
    assert data['dataPoints'][0]['overallScore'] == 85
    assert 'metricChanges' in data


def test_insights_are_not_deduplicated():
    insights = generate_progress_insights(12.0, Trend.IMPROVING, 95.0, 80.0, 6)
    assert len(insights) == 4
    assert generate_progress_insights(0.0, Trend.STABLE, 80.0, 78.0, 2) == [
        "➡️ Your performance has been stable. Time to push for the next level!"
    ]
