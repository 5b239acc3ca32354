"""
Shot Detection Module
=====================
Shot boundary detection, rule-based shot classification and shot scoring.
"""

from .boundary import ShotBoundaryDetector, detect_shot_boundaries
from .classifier import (
    SHOT_RULES,
    ArmGeometry,
    ShotClassification,
    ShotRule,
    ShotType,
    classify_geometry,
    classify_shot,
)
from .scorer import (
    Placement,
    ShotEvent,
    analyze_shot,
    determine_placement,
    estimate_shot_speed,
    score_shot_quality,
)

__all__ = [
    'ShotBoundaryDetector', 'detect_shot_boundaries',
    'SHOT_RULES', 'ArmGeometry', 'ShotClassification', 'ShotRule', 'ShotType',
    'classify_geometry', 'classify_shot',
    'Placement', 'ShotEvent', 'analyze_shot', 'determine_placement',
    'estimate_shot_speed', 'score_shot_quality',
]
