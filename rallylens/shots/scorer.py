"""
Shot Quality & Speed Scorer
Form quality, estimated speed and placement of a single detected shot
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..pose.types import PoseFrame
from ..biomechanics.angles import PoseGeometry
from ..biomechanics.technique import TechniqueMetrics, extract_technique_metrics
from .boundary import wrist_pair
from .classifier import ShotType, classify_shot


class Placement(str, Enum):
    LEFT = 'left'
    CENTER = 'center'
    RIGHT = 'right'


@dataclass(frozen=True)
class ShotEvent:
    """One detected shot. Produced per analysis run, never persisted."""
    shot_type: ShotType
    quality: float  # 50-100
    speed: float  # estimated mph, 10-60
    placement: Placement
    technique: TechniqueMetrics
    source_frame_index: int
    low_confidence: bool = False

    def to_dict(self) -> Dict:
        return {
            'shotType': self.shot_type.value,
            'quality': self.quality,
            'speed': self.speed,
            'placement': self.placement.value,
            'technique': self.technique.to_dict(),
            'sourceFrameIndex': self.source_frame_index,
            'lowConfidence': self.low_confidence,
        }


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return float(min(high, max(low, value)))


def score_shot_quality(frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> float:
    """
    Score shot form.

    Starts from the base quality, adds the alignment bonus when both the hip
    line and the shoulder line are level, adds the extension bonus when the
    hitting arm angle is in the good range.

    Returns:
        Quality clamped to config.quality_range
    """
    geometry = PoseGeometry(frame, config)
    quality = config.base_quality

    hip_tilt = geometry.get_hip_tilt()
    shoulder_tilt = geometry.get_shoulder_tilt()
    if hip_tilt is not None and shoulder_tilt is not None:
        if hip_tilt < config.level_tolerance and shoulder_tilt < config.level_tolerance:
            quality += config.alignment_bonus

    arm_angle = geometry.get_elbow_angle()
    low, high = config.good_arm_angle
    if arm_angle is not None and low <= arm_angle <= high:
        quality += config.extension_bonus

    return _clamp(quality, config.quality_range)


def estimate_shot_speed(prev: PoseFrame, cur: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> float:
    """
    Estimate shot speed from wrist travel between two frames.

    speed = distance / elapsed * speed_factor, with elapsed falling back to
    config.default_elapsed when timestamps are missing or equal.

    Returns:
        Speed clamped to config.speed_range
    """
    pair = wrist_pair(prev, cur)
    if pair is None:
        return _clamp(config.default_speed, config.speed_range)

    before, after = pair
    travel = math.hypot(after.x - before.x, after.y - before.y) / config.scale

    elapsed = None
    if prev.timestamp is not None and cur.timestamp is not None:
        elapsed = cur.timestamp - prev.timestamp
    if not elapsed or elapsed <= 0:
        elapsed = config.default_elapsed

    return _clamp(travel / elapsed * config.speed_factor, config.speed_range)


def determine_placement(frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> Placement:
    """
    Classify the hitting wrist's horizontal position into left/center/right.

    Breakpoints are fractions of the frame width.
    """
    wrist = PoseGeometry(frame, config).dominant_wrist()
    if wrist is None:
        return Placement.CENTER

    position = wrist.x / config.frame_width
    left, right = config.placement_breakpoints
    if position < left:
        return Placement.LEFT
    if position > right:
        return Placement.RIGHT
    return Placement.CENTER


def analyze_shot(prev: PoseFrame, cur: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> ShotEvent:
    """
    Build the ShotEvent for a boundary frame.

    Args:
        prev: Frame before the boundary (for speed)
        cur: Boundary frame

    Returns:
        ShotEvent
    """
    classification = classify_shot(cur, config)
    return ShotEvent(
        shot_type=classification.shot_type,
        quality=score_shot_quality(cur, config),
        speed=estimate_shot_speed(prev, cur, config),
        placement=determine_placement(cur, config),
        technique=extract_technique_metrics(cur, config),
        source_frame_index=cur.frame_index,
        low_confidence=classification.low_confidence,
    )
