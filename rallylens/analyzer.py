"""
RallyLens - Clip Analysis
Runs every component over one pose sequence

Pose sequence -> shot boundaries -> per-shot classification and scoring
-> clip-level technique aggregate, key moments and shot statistics.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import pandas as pd

from .config import AnalysisConfig, DEFAULT_CONFIG
from .pose.types import PoseFrame, validate_sequence
from .biomechanics.technique import TechniqueMetrics, aggregate_technique_metrics
from .shots.boundary import ShotBoundaryDetector
from .shots.scorer import ShotEvent, analyze_shot

logger = logging.getLogger(__name__)

EXCELLENT_SHOT = 'excellent_shot'


@dataclass(frozen=True)
class KeyMoment:
    frame_index: int
    type: str
    description: str

    def to_dict(self) -> Dict:
        return {'frameIndex': self.frame_index, 'type': self.type, 'description': self.description}


@dataclass(frozen=True)
class ClipAnalysis:
    """Everything derived from one clip's pose sequence."""
    shots: List[ShotEvent]
    technique: TechniqueMetrics
    key_moments: List[KeyMoment] = field(default_factory=list)
    shot_statistics: Dict[str, Dict[str, float]] = field(default_factory=dict)
    total_shots: int = 0
    unreliable_frames: int = 0
    frame_count: int = 0

    def to_dict(self) -> Dict:
        return {
            'shots': [s.to_dict() for s in self.shots],
            'technique': self.technique.to_dict(),
            'keyMoments': [m.to_dict() for m in self.key_moments],
            'shotStatistics': {
                shot: {'count': s['count'], 'avgQuality': s['avg_quality'], 'avgSpeed': s['avg_speed']}
                for shot, s in self.shot_statistics.items()
            },
            'totalShots': self.total_shots,
            'unreliableFrames': self.unreliable_frames,
            'frameCount': self.frame_count,
        }


def find_key_moments(shots: Sequence[ShotEvent], min_quality: float) -> List[KeyMoment]:
    """Shots above min_quality, in shot order."""
    return [
        KeyMoment(
            frame_index=shot.source_frame_index,
            type=EXCELLENT_SHOT,
            description=f"Excellent {shot.shot_type.value} with {shot.quality:.0f}% quality",
        )
        for shot in shots if shot.quality > min_quality
    ]


def calculate_shot_statistics(shots: Sequence[ShotEvent]) -> Dict[str, Dict[str, float]]:
    """
    Count, average quality and average speed per shot type.

    Returns:
        {shot_type: {'count', 'avg_quality', 'avg_speed'}} ordered by first appearance
    """
    if not shots:
        return {}
    df = pd.DataFrame({
        'shot_type': [s.shot_type.value for s in shots],
        'quality': [s.quality for s in shots],
        'speed': [s.speed for s in shots],
    })
    grouped = df.groupby('shot_type', sort=False).agg(
        count=('quality', 'size'),
        avg_quality=('quality', 'mean'),
        avg_speed=('speed', 'mean'),
    )
    return {
        shot_type: {
            'count': int(row['count']),
            'avg_quality': float(row['avg_quality']),
            'avg_speed': float(row['avg_speed']),
        }
        for shot_type, row in grouped.iterrows()
    }


class RallyAnalyzer:
    """
    Complete rally analysis for one clip.
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG):
        self.config = config
        self.detector = ShotBoundaryDetector(config)

    def detect_shots(self, frames: Sequence[PoseFrame]) -> List[ShotEvent]:
        """Score a ShotEvent for every boundary frame (frames must be validated)."""
        shots = []
        for prev, cur in zip(frames, frames[1:]):
            if self.detector.is_boundary(prev, cur):
                shots.append(analyze_shot(prev, cur, self.config))
        return shots

    def analyze(self, frames: Sequence[PoseFrame]) -> ClipAnalysis:
        """
        Analyze one clip.

        Args:
            frames: Time-ordered PoseFrames

        Returns:
            ClipAnalysis

        Raises:
            MalformedInput: If the sequence is out of order
        """
        frames = validate_sequence(frames)

        shots = self.detect_shots(frames)
        technique = aggregate_technique_metrics(frames, self.config)
        unreliable = sum(1 for frame in frames if not frame.is_reliable())

        logger.info("Analyzed %d frames: %d shots, overall technique %.1f",
                    len(frames), len(shots), technique.overall_technique)
        if unreliable:
            logger.debug("%d of %d frames have too few confident keypoints", unreliable, len(frames))

        return ClipAnalysis(
            shots=shots,
            technique=technique,
            key_moments=find_key_moments(shots, self.config.key_moment_quality),
            shot_statistics=calculate_shot_statistics(shots),
            total_shots=len(shots),
            unreliable_frames=unreliable,
            frame_count=len(frames),
        )


def analyze_pose_sequence(frames: Sequence[PoseFrame], config: AnalysisConfig = DEFAULT_CONFIG) -> ClipAnalysis:
    return RallyAnalyzer(config).analyze(frames)
