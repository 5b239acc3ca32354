"""
Progress Tracking Module
========================
Trend statistics and templated insights over a user's clip history.
"""

from .tracker import (
    ProgressRecord,
    ProgressSummary,
    Trend,
    generate_progress_insights,
    track_progress,
)

__all__ = ['ProgressRecord', 'ProgressSummary', 'Trend', 'generate_progress_insights', 'track_progress']
