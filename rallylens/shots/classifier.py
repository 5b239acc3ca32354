"""
Shot Classifier
Labels a shot frame using an ordered table of geometric rules

Rules are evaluated top to bottom and the first match wins; forehand is
the fallback. Each rule only sees an ArmGeometry, so rule order can be
tested without building poses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Sequence

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..pose.types import Landmark, PoseFrame
from ..biomechanics.angles import PoseGeometry


class ShotType(str, Enum):
    SERVE = 'serve'
    FOREHAND = 'forehand'
    BACKHAND = 'backhand'
    VOLLEY = 'volley'
    DINK = 'dink'
    SMASH = 'smash'
    LOB = 'lob'


class ArmGeometry(NamedTuple):
    """
    Hitting-arm measurements in reference units.

    Elevations grow upward. cross_body is how far the wrist sits past the
    body midline toward the non-hitting side (negative = hitting side).
    """
    wrist_elevation: float
    elbow_elevation: float
    shoulder_elevation: float
    cross_body: float


@dataclass(frozen=True)
class ShotRule:
    label: ShotType
    predicate: Callable[[ArmGeometry, AnalysisConfig], bool]


@dataclass(frozen=True)
class ShotClassification:
    shot_type: ShotType
    low_confidence: bool = False


SHOT_RULES: List[ShotRule] = [
    # Wrist and elbow both above the shoulder
    ShotRule(ShotType.SERVE,
             lambda a, c: a.wrist_elevation > a.shoulder_elevation and a.elbow_elevation > a.shoulder_elevation),
    # Wrist crossed the body midline
    ShotRule(ShotType.BACKHAND, lambda a, c: a.cross_body > c.backhand_margin),
    # High contact point
    ShotRule(ShotType.VOLLEY, lambda a, c: a.wrist_elevation > a.shoulder_elevation),
    # Low contact point
    ShotRule(ShotType.DINK, lambda a, c: a.wrist_elevation < a.shoulder_elevation - c.dink_margin),
    # Elbow raised well above the shoulder
    ShotRule(ShotType.SMASH, lambda a, c: a.elbow_elevation > a.shoulder_elevation + c.smash_margin),
]


def arm_geometry(frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> Optional[ArmGeometry]:
    """
    Measure the hitting arm of a frame.

    Returns:
        ArmGeometry, or None if the wrist, elbow or shoulder of both arms is missing
    """
    geometry = PoseGeometry(frame, config)
    side = geometry.dominant_side()
    if side is None:
        return None
    shoulder, elbow, wrist = geometry.arm(side)

    other = geometry.point(Landmark.LEFT_SHOULDER if side == 'right' else Landmark.RIGHT_SHOULDER)
    midline = (shoulder.x + other.x) / 2 if other else shoulder.x
    # Right-handed backhands carry the wrist toward smaller x, left-handed toward larger x
    offset = (midline - wrist.x) if side == 'right' else (wrist.x - midline)

    return ArmGeometry(
        wrist_elevation=geometry.elevation(wrist),
        elbow_elevation=geometry.elevation(elbow),
        shoulder_elevation=geometry.elevation(shoulder),
        cross_body=geometry.to_reference(offset),
    )


def classify_geometry(arm: ArmGeometry, config: AnalysisConfig = DEFAULT_CONFIG,
                      rules: Sequence[ShotRule] = SHOT_RULES) -> ShotType:
    """First matching rule's label, forehand if none match."""
    for rule in rules:
        if rule.predicate(arm, config):
            return rule.label
    return ShotType.FOREHAND


def classify_shot(frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG,
                  rules: Sequence[ShotRule] = SHOT_RULES) -> ShotClassification:
    """
    Classify the shot type at a boundary frame.

    Args:
        frame: PoseFrame flagged as a shot boundary
        config: Analysis settings (margins, Y convention)
        rules: Ordered rule table

    Returns:
        ShotClassification; forehand with low_confidence=True when the arm is not tracked
    """
    arm = arm_geometry(frame, config)
    if arm is None:
        return ShotClassification(ShotType.FOREHAND, low_confidence=True)
    return ShotClassification(classify_geometry(arm, config, rules))
