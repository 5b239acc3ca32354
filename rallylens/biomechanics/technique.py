"""
Technique Metrics - 14 normalized 0-100 sub-scores per pose

Each metric is a raw geometric quantity mapped onto 0-100 with a min-max
normalization against a fixed ideal range. Inverted metrics score higher
when the raw value is lower. A metric whose landmarks are missing scores
DEFAULT_METRIC_SCORE for that frame.

overall_technique is never stored independently: it is always the mean of
OVERALL_COMPONENTS, recomputed whenever a TechniqueMetrics is built.
"""

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd
from scipy.ndimage import uniform_filter1d

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..constants import (
    DEFAULT_METRIC_SCORE,
    METRIC_FIELDS,
    METRIC_NAMES,
    OVERALL_COMPONENTS,
    OVERALL_METRIC,
    SCORE_MAX,
    SCORE_MIN,
)
from ..errors import MalformedInput
from ..pose.types import PoseFrame, validate_sequence
from .angles import PoseGeometry

logger = logging.getLogger(__name__)

_CAMEL_TO_FIELD = {camel: name for name, camel in METRIC_FIELDS}
_FIELD_TO_CAMEL = dict(METRIC_FIELDS + [OVERALL_METRIC])


def clamp_score(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    return float(min(high, max(low, value)))


@dataclass(frozen=True)
class TechniqueMetrics:
    """Fixed record of technique scores, each clamped to [0, 100]."""

    serve_arm_angle: float = DEFAULT_METRIC_SCORE
    serve_follow_through: float = DEFAULT_METRIC_SCORE
    serve_body_rotation: float = DEFAULT_METRIC_SCORE
    stance_width: float = DEFAULT_METRIC_SCORE
    stance_balance: float = DEFAULT_METRIC_SCORE
    split_step_timing: float = DEFAULT_METRIC_SCORE
    footwork_agility: float = DEFAULT_METRIC_SCORE
    paddle_height: float = DEFAULT_METRIC_SCORE
    paddle_angle: float = DEFAULT_METRIC_SCORE
    paddle_ready_position: float = DEFAULT_METRIC_SCORE
    body_alignment: float = DEFAULT_METRIC_SCORE
    ready_position: float = DEFAULT_METRIC_SCORE
    center_of_gravity: float = DEFAULT_METRIC_SCORE
    overall_technique: float = field(init=False)

    def __post_init__(self):
        for name in METRIC_NAMES:
            value = getattr(self, name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise MalformedInput(f"{name} must be a number, got {value!r}") from None
            if not math.isfinite(value):
                raise MalformedInput(f"{name} must be finite, got {value!r}")
            object.__setattr__(self, name, clamp_score(value))
        overall = sum(getattr(self, name) for name in OVERALL_COMPONENTS) / len(OVERALL_COMPONENTS)
        object.__setattr__(self, 'overall_technique', clamp_score(overall))

    def components(self) -> Dict[str, float]:
        """The 13 independently scored metrics, in evaluation order."""
        return {name: getattr(self, name) for name in METRIC_NAMES}

    def to_dict(self) -> Dict[str, float]:
        """camelCase dictionary, overallTechnique included."""
        return {_FIELD_TO_CAMEL[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'TechniqueMetrics':
        """
        Build metrics from a stored dictionary (camelCase or snake_case keys).

        Missing metrics take DEFAULT_METRIC_SCORE; any stored overall value is
        ignored and recomputed.
        """
        values = {}
        for key, value in (data or {}).items():
            name = _CAMEL_TO_FIELD.get(key, key)
            if name in METRIC_NAMES and value is not None:
                values[name] = value
        return cls(**values)


# ============================================
# NORMALIZATION TABLE
# ============================================

@dataclass(frozen=True)
class MetricSpec:
    """How one metric's raw geometric quantity maps onto 0-100."""
    name: str
    raw: Callable[[PoseGeometry], Optional[float]]
    low: float
    high: float
    inverted: bool = False
    description: str = ''


def normalize_score(value: Optional[float], low: float, high: float, inverted: bool = False) -> float:
    """
    Normalize a raw value to a 0-100 score against its ideal range.

    Args:
        value: Raw measurement (None or non-finite -> DEFAULT_METRIC_SCORE)
        low, high: Range mapped onto 0 and 100
        inverted: True if lower raw values are better

    Returns:
        Score in [0, 100]
    """
    if value is None or not math.isfinite(value):
        return DEFAULT_METRIC_SCORE
    score = clamp_score((value - low) / (high - low) * 100.0)
    return SCORE_MAX - score if inverted else score


def _wrist_y(g: PoseGeometry) -> Optional[float]:
    """Hitting wrist distance from the top of the frame (reference units)."""
    wrist = g.dominant_wrist()
    if wrist is None:
        return None
    from_top = wrist.y if g.config.y_axis_down else g.config.frame_height - wrist.y
    return g.to_reference(from_top)


def _wrist_above_elbow(g: PoseGeometry) -> Optional[float]:
    arm = g.arm()
    if arm is None:
        return None
    _, elbow, wrist = arm
    return g.elevation(wrist) - g.elevation(elbow)


def _body_tilt(g: PoseGeometry) -> Optional[float]:
    shoulder_tilt, hip_tilt = g.get_shoulder_tilt(), g.get_hip_tilt()
    if shoulder_tilt is None or hip_tilt is None:
        return None
    return shoulder_tilt + hip_tilt


METRIC_SPECS: List[MetricSpec] = [
    MetricSpec('serve_arm_angle', lambda g: g.get_elbow_angle(), 140, 170,
               description='Shoulder-elbow-wrist extension of the hitting arm'),
    MetricSpec('serve_follow_through', _wrist_y, 0, 200, inverted=True,
               description='Hitting wrist finishing high'),
    MetricSpec('serve_body_rotation', lambda g: g.get_rotation_separation(), 0, 30,
               description='Shoulder line turned against hip line'),
    MetricSpec('stance_width', lambda g: g.get_stance_width(), 30, 80,
               description='Ankle-to-ankle width'),
    MetricSpec('stance_balance', lambda g: g.get_balance_offset(), 0, 40, inverted=True,
               description='Hips centred over the base of support'),
    MetricSpec('split_step_timing', lambda g: g.get_mean_knee_angle(), 130, 180, inverted=True,
               description='Knees loaded for the split step'),
    MetricSpec('footwork_agility', lambda g: g.get_stance_width_ratio(), 0.8, 1.6,
               description='Stance width relative to shoulder width'),
    MetricSpec('paddle_height', _wrist_y, 100, 300,
               description='Hitting wrist height in frame'),
    MetricSpec('paddle_angle', lambda g: g.get_forearm_inclination(), 0, 60, inverted=True,
               description='Forearm close to level'),
    MetricSpec('paddle_ready_position', _wrist_above_elbow, -20, 40,
               description='Paddle hand carried above the elbow'),
    MetricSpec('body_alignment', _body_tilt, 0, 40, inverted=True,
               description='Level shoulders and hips'),
    MetricSpec('ready_position', lambda g: g.get_torso_lean(), 5, 45, inverted=True,
               description='Upright torso'),
    MetricSpec('center_of_gravity', lambda g: g.get_hip_height_ratio(), 0.4, 0.6, inverted=True,
               description='Hips low relative to shoulders'),
]


def score_frame(frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> Dict[str, float]:
    """Score the 13 component metrics of one frame."""
    geometry = PoseGeometry(frame, config)
    return {spec.name: normalize_score(spec.raw(geometry), spec.low, spec.high, spec.inverted)
            for spec in METRIC_SPECS}


def extract_technique_metrics(frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG) -> TechniqueMetrics:
    """
    Extract technique metrics from a single pose.

    Args:
        frame: PoseFrame to score
        config: Analysis settings (frame scale, Y convention)

    Returns:
        TechniqueMetrics for this frame
    """
    return TechniqueMetrics(**score_frame(frame, config))


def _metrics_dataframe(frames: Sequence[PoseFrame], config: AnalysisConfig) -> pd.DataFrame:
    rows = []
    for frame in frames:
        row = score_frame(frame, config)
        row['frame'] = frame.frame_index
        row['timestamp'] = frame.timestamp
        rows.append(row)
    return pd.DataFrame(rows, columns=['frame', 'timestamp'] + METRIC_NAMES)


def aggregate_technique_metrics(frames: Sequence[PoseFrame],
                                config: AnalysisConfig = DEFAULT_CONFIG) -> TechniqueMetrics:
    """
    Clip-level technique metrics.

    Each of the 13 component metrics is averaged over every frame of the
    sequence; overall_technique is then recomputed from those averages.

    Returns:
        TechniqueMetrics (all DEFAULT_METRIC_SCORE for an empty sequence)
    """
    frames = validate_sequence(frames)
    if not frames:
        return TechniqueMetrics()

    df = _metrics_dataframe(frames, config)
    means = df[METRIC_NAMES].mean()
    logger.debug("Aggregated technique over %d frames", len(frames))
    return TechniqueMetrics(**{name: float(means[name]) for name in METRIC_NAMES})


def technique_timeline(frames: Sequence[PoseFrame], smoothing_window: int = 1,
                       config: AnalysisConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Per-frame technique metrics as a DataFrame.

    Args:
        frames: Pose sequence
        smoothing_window: Moving-average window (frames); 1 = raw scores
        config: Analysis settings

    Returns:
        DataFrame with frame, timestamp, the 13 metric columns and overall_technique
    """
    frames = validate_sequence(frames)
    df = _metrics_dataframe(frames, config)

    if smoothing_window > 1 and len(df) > 0:
        for name in METRIC_NAMES:
            df[name] = uniform_filter1d(df[name].to_numpy(dtype=float), size=smoothing_window, mode='nearest')

    df['overall_technique'] = df[OVERALL_COMPONENTS].astype(float).mean(axis=1)
    return df
