"""
Progress Tracker - Trends and insights over a user's clip history

Works on a newest-first window of ProgressRecords (at most PROGRESS_WINDOW)
supplied by the caller. Fetching and persisting records is the caller's job.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Sequence, Union

import pandas as pd

from ..constants import DEFAULT_METRIC_SCORE, PROGRESS_WINDOW
from ..biomechanics.technique import TechniqueMetrics

logger = logging.getLogger(__name__)

# Scores compared for the trend: newest RECENT_COUNT vs the rest
RECENT_COUNT = 3
TREND_THRESHOLD = 2.0
MIN_RECORDS = 2

NEED_MORE_DATA_INSIGHT = "Upload more videos to track your progress over time!"


class Trend(str, Enum):
    IMPROVING = 'improving'
    STABLE = 'stable'
    DECLINING = 'declining'


@dataclass(frozen=True)
class ProgressRecord:
    """One historical clip analysis. Read-only to the engine."""
    date: Union[datetime, str]
    overall_score: float
    technique_metrics: TechniqueMetrics = field(default_factory=TechniqueMetrics)

    @classmethod
    def from_row(cls, row: Mapping) -> 'ProgressRecord':
        """
        Build a record from a stored row ({date, overallScore, techniqueMetrics}).

        A missing, zero or NaN overallScore falls back to DEFAULT_METRIC_SCORE
        and missing techniqueMetrics to the default metrics.
        """
        score = row.get('overallScore')
        if pd.isna(score) or not score:
            score = DEFAULT_METRIC_SCORE
        metrics = row.get('techniqueMetrics')
        if not isinstance(metrics, TechniqueMetrics):
            metrics = TechniqueMetrics.from_dict(metrics)
        return cls(
            date=row.get('date'),
            overall_score=float(score),
            technique_metrics=metrics,
        )

    def to_dict(self) -> Dict:
        date = self.date.isoformat() if isinstance(self.date, datetime) else self.date
        return {
            'date': date,
            'overallScore': self.overall_score,
            'techniqueMetrics': self.technique_metrics.to_dict(),
        }


@dataclass(frozen=True)
class ProgressSummary:
    improvement_pct: float
    trend: Trend
    best_score: float
    worst_score: float
    average_score: float
    data_points: List[ProgressRecord]
    insights: List[str]
    metric_changes: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'improvementPct': self.improvement_pct,
            'trend': self.trend.value,
            'bestScore': self.best_score,
            'worstScore': self.worst_score,
            'averageScore': self.average_score,
            'dataPoints': [r.to_dict() for r in self.data_points],
            'insights': list(self.insights),
            'metricChanges': dict(self.metric_changes),
        }


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def calculate_trend(scores: Sequence[float]) -> Trend:
    """
    Compare the newest scores with the older ones.

    Args:
        scores: Newest-first overall scores

    Returns:
        Trend; stable when the two means are within TREND_THRESHOLD
    """
    recent = scores[:RECENT_COUNT]
    older = scores[RECENT_COUNT:] or recent
    difference = _mean(recent) - _mean(older)
    if difference > TREND_THRESHOLD:
        return Trend.IMPROVING
    if difference < -TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.STABLE


def calculate_metric_changes(records: Sequence[ProgressRecord]) -> Dict[str, float]:
    """Newest minus oldest value of every technique metric (camelCase keys)."""
    if len(records) < MIN_RECORDS:
        return {}
    df = pd.DataFrame([r.technique_metrics.to_dict() for r in records])
    changes = df.iloc[0] - df.iloc[-1]
    return {key: float(value) for key, value in changes.items()}


def generate_progress_insights(improvement_pct: float, trend: Trend, best_score: float,
                               average_score: float, record_count: int) -> List[str]:
    """
    Templated insight messages, in a fixed order.

    Returns:
        List of messages (every applicable one, never deduplicated)
    """
    insights = []

    if improvement_pct > 10:
        insights.append(f"🎉 Excellent progress! You've improved by {improvement_pct:.1f}% overall.")
    elif improvement_pct > 5:
        insights.append(f"👍 Good progress! You've improved by {improvement_pct:.1f}%.")
    elif improvement_pct < -5:
        insights.append(f"⚠️ Your scores have declined by {abs(improvement_pct):.1f}%. "
                        "Let's refocus on fundamentals.")

    if trend == Trend.IMPROVING:
        insights.append("📈 Your recent performance shows consistent improvement!")
    elif trend == Trend.DECLINING:
        insights.append("📉 Recent performance shows a decline. Review your training routine.")
    else:
        insights.append("➡️ Your performance has been stable. Time to push for the next level!")

    if best_score > average_score + 5:
        insights.append(f"🏆 Your best score ({best_score:.0f}) shows you can perform "
                        "at a higher level consistently.")

    if record_count >= 5:
        insights.append("📊 You have enough data for meaningful progress tracking!")

    return insights


def track_progress(records: Sequence[Union[ProgressRecord, Mapping]]) -> ProgressSummary:
    """
    Summarize a user's progress.

    Args:
        records: Newest-first ProgressRecords (or stored rows); only the first
            PROGRESS_WINDOW are used

    Returns:
        ProgressSummary
    """
    records = [r if isinstance(r, ProgressRecord) else ProgressRecord.from_row(r) for r in records]
    if len(records) > PROGRESS_WINDOW:
        logger.debug("Truncating progress history from %d to %d records", len(records), PROGRESS_WINDOW)
        records = records[:PROGRESS_WINDOW]

    if len(records) < MIN_RECORDS:
        logger.debug("Not enough history for progress tracking (%d records)", len(records))
        return ProgressSummary(
            improvement_pct=0.0,
            trend=Trend.STABLE,
            best_score=0.0,
            worst_score=0.0,
            average_score=0.0,
            data_points=[],
            insights=[NEED_MORE_DATA_INSIGHT],
        )

    scores = [r.overall_score for r in records]
    newest, oldest = scores[0], scores[-1]
    improvement_pct = (newest - oldest) / oldest * 100 if oldest != 0 else 0.0

    best_score = max(scores)
    worst_score = min(scores)
    average_score = _mean(scores)
    trend = calculate_trend(scores)

    return ProgressSummary(
        improvement_pct=improvement_pct,
        trend=trend,
        best_score=best_score,
        worst_score=worst_score,
        average_score=average_score,
        data_points=list(records),
        insights=generate_progress_insights(improvement_pct, trend, best_score,
                                            average_score, len(records)),
        metric_changes=calculate_metric_changes(records),
    )
