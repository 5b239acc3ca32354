"""
Rally Biomechanics - Joint angle and body geometry calculations

Angles and distances that the technique metrics and shot scorer are built on.
Every getter returns None when a required landmark was not tracked, so
callers decide the fallback instead of scoring phantom joints.
"""

import math
from typing import Dict, Optional, Tuple

import numpy as np

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..pose.types import Keypoint, Landmark, PoseFrame, SIDE_LANDMARKS


# ============================================
# CORE ANGLE CALCULATIONS
# ============================================

def calculate_angle_3points(p1, p2, p3) -> float:
    """
    Calculate angle at p2 given three points.

    Args:
        p1, p2, p3: Points as (x, y) pairs or arrays

    Returns:
        Angle in degrees (0-180); NaN if either limb has zero length
    """
    v1 = np.asarray(p1[:2], dtype=float) - np.asarray(p2[:2], dtype=float)
    v2 = np.asarray(p3[:2], dtype=float) - np.asarray(p2[:2], dtype=float)

    norms = np.linalg.norm(v1) * np.linalg.norm(v2)
    if norms == 0:
        return float('nan')

    cos_angle = np.dot(v1, v2) / norms
    return float(np.degrees(np.arccos(np.clip(cos_angle, -1, 1))))


def calculate_line_angle(p1, p2) -> float:
    """
    Calculate angle of line from horizontal.

    Returns:
        Angle in degrees (-180 to 180)
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    return math.degrees(math.atan2(dy, dx))


def calculate_angle_from_vertical(lower, upper, y_axis_down: bool = True) -> float:
    """
    Calculate angle of line from vertical axis.

    Args:
        lower: Lower point (e.g., hip midpoint)
        upper: Upper point (e.g., shoulder midpoint)

    Returns:
        Absolute angle in degrees (0 = vertical)
    """
    dx = upper[0] - lower[0]
    dy = (lower[1] - upper[1]) if y_axis_down else (upper[1] - lower[1])
    return abs(math.degrees(math.atan2(dx, dy)))


def line_separation(angle_a: float, angle_b: float) -> float:
    """Smallest angle between two undirected lines, in degrees (0-90)."""
    diff = abs((angle_a - angle_b + 180.0) % 360.0 - 180.0)
    return 180.0 - diff if diff > 90.0 else diff


def midpoint(a: Keypoint, b: Keypoint) -> Tuple[float, float]:
    return ((a.x + b.x) / 2, (a.y + b.y) / 2)


def distance(a: Keypoint, b: Keypoint) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


class PoseGeometry:
    """
    Body geometry of one pose frame.

    Distances are returned in reference units (frame units / config.scale)
    so thresholds tuned at the reference resolution apply unchanged.
    """

    def __init__(self, frame: PoseFrame, config: AnalysisConfig = DEFAULT_CONFIG):
        self.frame = frame
        self.config = config

    # ============================================
    # HELPER: GET POINTS FROM FRAME
    # ============================================

    def point(self, landmark: Landmark) -> Optional[Keypoint]:
        return self.frame.get(landmark)

    def joint(self, side: str, part: str) -> Optional[Keypoint]:
        return self.frame.get(SIDE_LANDMARKS[side][part])

    def _pair(self, left: Landmark, right: Landmark):
        a, b = self.frame.get(left), self.frame.get(right)
        if a is None or b is None:
            return None
        return a, b

    def dominant_side(self) -> Optional[str]:
        """Right arm if shoulder, elbow and wrist are tracked, else left, else None."""
        for side in ('right', 'left'):
            if all(self.joint(side, part) is not None for part in ('shoulder', 'elbow', 'wrist')):
                return side
        return None

    def dominant_wrist(self) -> Optional[Keypoint]:
        """Right wrist, falling back to the left wrist."""
        return self.point(Landmark.RIGHT_WRIST) or self.point(Landmark.LEFT_WRIST)

    def arm(self, side: Optional[str] = None):
        """(shoulder, elbow, wrist) keypoints of the given or dominant side, or None."""
        side = side or self.dominant_side()
        if side is None:
            return None
        parts = tuple(self.joint(side, part) for part in ('shoulder', 'elbow', 'wrist'))
        return parts if all(p is not None for p in parts) else None

    def to_reference(self, value: float) -> float:
        return value / self.config.scale

    def elevation(self, keypoint: Keypoint) -> float:
        """Keypoint height in reference units, larger = higher on screen."""
        return self.to_reference(self.config.elevation(keypoint.y))

    # ============================================
    # JOINT ANGLES
    # ============================================

    def get_elbow_angle(self, side: Optional[str] = None) -> Optional[float]:
        """
        Shoulder-elbow-wrist angle. 180 = straight arm.
        """
        arm = self.arm(side)
        if arm is None:
            return None
        shoulder, elbow, wrist = arm
        return calculate_angle_3points(shoulder.xy, elbow.xy, wrist.xy)

    def get_knee_angle(self, side: str) -> Optional[float]:
        hip, knee, ankle = (self.joint(side, p) for p in ('hip', 'knee', 'ankle'))
        if hip is None or knee is None or ankle is None:
            return None
        return calculate_angle_3points(hip.xy, knee.xy, ankle.xy)

    def get_shoulder_angle(self, side: str) -> Optional[float]:
        hip, shoulder, elbow = (self.joint(side, p) for p in ('hip', 'shoulder', 'elbow'))
        if hip is None or shoulder is None or elbow is None:
            return None
        return calculate_angle_3points(hip.xy, shoulder.xy, elbow.xy)

    def get_hip_angle(self, side: str) -> Optional[float]:
        shoulder, hip, knee = (self.joint(side, p) for p in ('shoulder', 'hip', 'knee'))
        if shoulder is None or hip is None or knee is None:
            return None
        return calculate_angle_3points(shoulder.xy, hip.xy, knee.xy)

    def get_mean_knee_angle(self) -> Optional[float]:
        angles = [a for a in (self.get_knee_angle('left'), self.get_knee_angle('right')) if a is not None]
        return float(np.mean(angles)) if angles else None

    def get_forearm_inclination(self, side: Optional[str] = None) -> Optional[float]:
        """Elbow-to-wrist line angle from horizontal (0-90 degrees)."""
        arm = self.arm(side)
        if arm is None:
            return None
        _, elbow, wrist = arm
        if elbow.xy == wrist.xy:
            return None
        return line_separation(calculate_line_angle(elbow.xy, wrist.xy), 0.0)

    # ============================================
    # TRUNK AND ROTATION
    # ============================================

    def get_shoulder_rotation(self) -> Optional[float]:
        pair = self._pair(Landmark.LEFT_SHOULDER, Landmark.RIGHT_SHOULDER)
        return calculate_line_angle(pair[0].xy, pair[1].xy) if pair else None

    def get_hip_rotation(self) -> Optional[float]:
        pair = self._pair(Landmark.LEFT_HIP, Landmark.RIGHT_HIP)
        return calculate_line_angle(pair[0].xy, pair[1].xy) if pair else None

    def get_rotation_separation(self) -> Optional[float]:
        """
        Separation between shoulder line and hip line (X-factor).

        Returns:
            Angle in degrees (0-90)
        """
        shoulder_rot = self.get_shoulder_rotation()
        hip_rot = self.get_hip_rotation()
        if shoulder_rot is None or hip_rot is None:
            return None
        return line_separation(shoulder_rot, hip_rot)

    def get_torso_lean(self) -> Optional[float]:
        """Angle of hip-midpoint -> shoulder-midpoint line from vertical."""
        shoulders = self._pair(Landmark.LEFT_SHOULDER, Landmark.RIGHT_SHOULDER)
        hips = self._pair(Landmark.LEFT_HIP, Landmark.RIGHT_HIP)
        if shoulders is None or hips is None:
            return None
        return calculate_angle_from_vertical(midpoint(*hips), midpoint(*shoulders), self.config.y_axis_down)

    def get_shoulder_tilt(self) -> Optional[float]:
        """Vertical offset between shoulders (reference units)."""
        pair = self._pair(Landmark.LEFT_SHOULDER, Landmark.RIGHT_SHOULDER)
        return self.to_reference(abs(pair[0].y - pair[1].y)) if pair else None

    def get_hip_tilt(self) -> Optional[float]:
        """Vertical offset between hips (reference units)."""
        pair = self._pair(Landmark.LEFT_HIP, Landmark.RIGHT_HIP)
        return self.to_reference(abs(pair[0].y - pair[1].y)) if pair else None

    # ============================================
    # BASE OF SUPPORT
    # ============================================

    def get_stance_width(self) -> Optional[float]:
        """Horizontal ankle-to-ankle distance (reference units)."""
        pair = self._pair(Landmark.LEFT_ANKLE, Landmark.RIGHT_ANKLE)
        return self.to_reference(abs(pair[0].x - pair[1].x)) if pair else None

    def get_shoulder_width(self) -> Optional[float]:
        pair = self._pair(Landmark.LEFT_SHOULDER, Landmark.RIGHT_SHOULDER)
        return self.to_reference(abs(pair[0].x - pair[1].x)) if pair else None

    def get_stance_width_ratio(self) -> Optional[float]:
        """
        Stance width as ratio of shoulder width.

        Returns:
            Ratio (1.0 = same as shoulder width), None if shoulders overlap
        """
        stance = self.get_stance_width()
        shoulders = self.get_shoulder_width()
        if stance is None or not shoulders:
            return None
        return stance / shoulders

    def get_balance_offset(self) -> Optional[float]:
        """Horizontal offset of hip midpoint from ankle midpoint (reference units)."""
        hips = self._pair(Landmark.LEFT_HIP, Landmark.RIGHT_HIP)
        ankles = self._pair(Landmark.LEFT_ANKLE, Landmark.RIGHT_ANKLE)
        if hips is None or ankles is None:
            return None
        return self.to_reference(abs(midpoint(*hips)[0] - midpoint(*ankles)[0]))

    def get_hip_height_ratio(self) -> Optional[float]:
        """
        Hip height above the ankles as a fraction of shoulder height above the ankles.

        Lower values mean a lower centre of gravity.
        """
        shoulders = self._pair(Landmark.LEFT_SHOULDER, Landmark.RIGHT_SHOULDER)
        hips = self._pair(Landmark.LEFT_HIP, Landmark.RIGHT_HIP)
        ankles = self._pair(Landmark.LEFT_ANKLE, Landmark.RIGHT_ANKLE)
        if shoulders is None or hips is None or ankles is None:
            return None
        ground = self.config.elevation(midpoint(*ankles)[1])
        torso_top = self.config.elevation(midpoint(*shoulders)[1]) - ground
        if torso_top <= 0:
            return None
        return (self.config.elevation(midpoint(*hips)[1]) - ground) / torso_top

    # ============================================
    # COMPREHENSIVE ANALYSIS
    # ============================================

    def calculate_body_angles(self) -> Dict[str, Optional[float]]:
        """
        Calculate the major joint angles at once.

        Returns:
            Dictionary of angle name -> degrees (None where joints are missing)
        """
        return {
            'left_elbow': self.get_elbow_angle('left'),
            'right_elbow': self.get_elbow_angle('right'),
            'left_knee': self.get_knee_angle('left'),
            'right_knee': self.get_knee_angle('right'),
            'left_shoulder': self.get_shoulder_angle('left'),
            'right_shoulder': self.get_shoulder_angle('right'),
            'left_hip': self.get_hip_angle('left'),
            'right_hip': self.get_hip_angle('right'),
            'torso_lean': self.get_torso_lean(),
        }
