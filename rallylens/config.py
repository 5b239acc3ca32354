# config.py
"""
Configuration file for RallyLens
Modify thresholds and frame geometry here

Distance thresholds are expressed in reference units: pixels of a frame
`reference_width` wide. They are scaled by frame_width / reference_width,
so the same numbers work for any resolution (or for normalized [0, 1]
coordinates with frame_width=1.0).
"""

from dataclasses import dataclass, fields, replace
from typing import Dict, Optional, Tuple


# Frame geometry
FRAME_CONFIG = {
    'frame_width': 640.0,
    'frame_height': 480.0,
    'reference_width': 640.0,
    'y_axis_down': True,  # image convention: Y grows downward
}

# Shot boundary detection
DETECTION_CONFIG = {
    'motion_threshold': 30.0,  # reference units of wrist travel between frames
    'min_wrist_confidence': 0.5,
}

# Shot classification margins (reference units)
CLASSIFIER_CONFIG = {
    'backhand_margin': 20.0,
    'dink_margin': 50.0,
    'smash_margin': 30.0,
}

# Shot quality, speed and placement
# NOTE: speed_factor and the +15/+15 bonuses are uncalibrated heuristics;
# recalibrate against measured ball speeds.
SCORING_CONFIG = {
    'base_quality': 70.0,
    'alignment_bonus': 15.0,
    'extension_bonus': 15.0,
    'level_tolerance': 10.0,
    'good_arm_angle': (140.0, 170.0),
    'quality_range': (50.0, 100.0),
    'speed_factor': 0.15,
    'default_elapsed': 0.033,  # seconds, ~30 fps
    'default_speed': 25.0,
    'speed_range': (10.0, 60.0),
    'placement_breakpoints': (0.3125, 0.625),  # fractions of frame width
    'key_moment_quality': 85.0,
}

ANALYSIS_CONFIG = {**FRAME_CONFIG, **DETECTION_CONFIG, **CLASSIFIER_CONFIG, **SCORING_CONFIG}


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable analysis settings shared by every component."""

    frame_width: float = FRAME_CONFIG['frame_width']
    frame_height: float = FRAME_CONFIG['frame_height']
    reference_width: float = FRAME_CONFIG['reference_width']
    y_axis_down: bool = FRAME_CONFIG['y_axis_down']

    motion_threshold: float = DETECTION_CONFIG['motion_threshold']
    min_wrist_confidence: float = DETECTION_CONFIG['min_wrist_confidence']

    backhand_margin: float = CLASSIFIER_CONFIG['backhand_margin']
    dink_margin: float = CLASSIFIER_CONFIG['dink_margin']
    smash_margin: float = CLASSIFIER_CONFIG['smash_margin']

    base_quality: float = SCORING_CONFIG['base_quality']
    alignment_bonus: float = SCORING_CONFIG['alignment_bonus']
    extension_bonus: float = SCORING_CONFIG['extension_bonus']
    level_tolerance: float = SCORING_CONFIG['level_tolerance']
    good_arm_angle: Tuple[float, float] = SCORING_CONFIG['good_arm_angle']
    quality_range: Tuple[float, float] = SCORING_CONFIG['quality_range']
    speed_factor: float = SCORING_CONFIG['speed_factor']
    default_elapsed: float = SCORING_CONFIG['default_elapsed']
    default_speed: float = SCORING_CONFIG['default_speed']
    speed_range: Tuple[float, float] = SCORING_CONFIG['speed_range']
    placement_breakpoints: Tuple[float, float] = SCORING_CONFIG['placement_breakpoints']
    key_moment_quality: float = SCORING_CONFIG['key_moment_quality']

    def __post_init__(self):
        if self.frame_width <= 0 or self.frame_height <= 0 or self.reference_width <= 0:
            raise ValueError("Frame dimensions must be positive")
        left, right = self.placement_breakpoints
        if not 0.0 <= left <= right <= 1.0:
            raise ValueError(f"Placement breakpoints must be ordered fractions: {self.placement_breakpoints}")

    @property
    def scale(self) -> float:
        """Multiplier from reference units to this frame's coordinate units."""
        return self.frame_width / self.reference_width

    def scaled(self, reference_units: float) -> float:
        """Convert a reference-unit distance to frame units."""
        return reference_units * self.scale

    def elevation(self, y: float) -> float:
        """Height value that grows upward regardless of the Y convention."""
        return -y if self.y_axis_down else y

    @classmethod
    def from_dict(cls, overrides: Optional[Dict] = None) -> 'AnalysisConfig':
        """
        Build a config from ANALYSIS_CONFIG-style keys.

        Args:
            overrides: Dictionary of setting name -> value; unknown keys are rejected

        Returns:
            AnalysisConfig with defaults for anything not overridden
        """
        known = {f.name for f in fields(cls)}
        overrides = dict(overrides or {})
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown analysis settings: {', '.join(unknown)}")
        return cls(**overrides)

    def with_frame_size(self, width: float, height: float) -> 'AnalysisConfig':
        return replace(self, frame_width=float(width), frame_height=float(height))


DEFAULT_CONFIG = AnalysisConfig()
