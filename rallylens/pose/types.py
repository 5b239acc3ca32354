"""
Pose data types: landmarks, keypoints and pose frames.

A PoseFrame maps a closed set of Landmark identifiers straight to Keypoints,
so lookups are O(1) and landmark names are checked at import time rather
than matched as strings.
"""

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..errors import MalformedInput


class Landmark(str, Enum):
    """Body landmarks tracked by the pose-estimation collaborator (MediaPipe Pose set)."""
    NOSE = 'nose'
    LEFT_EYE_INNER = 'left_eye_inner'
    LEFT_EYE = 'left_eye'
    LEFT_EYE_OUTER = 'left_eye_outer'
    RIGHT_EYE_INNER = 'right_eye_inner'
    RIGHT_EYE = 'right_eye'
    RIGHT_EYE_OUTER = 'right_eye_outer'
    LEFT_EAR = 'left_ear'
    RIGHT_EAR = 'right_ear'
    MOUTH_LEFT = 'mouth_left'
    MOUTH_RIGHT = 'mouth_right'
    LEFT_SHOULDER = 'left_shoulder'
    RIGHT_SHOULDER = 'right_shoulder'
    LEFT_ELBOW = 'left_elbow'
    RIGHT_ELBOW = 'right_elbow'
    LEFT_WRIST = 'left_wrist'
    RIGHT_WRIST = 'right_wrist'
    LEFT_PINKY = 'left_pinky'
    RIGHT_PINKY = 'right_pinky'
    LEFT_INDEX = 'left_index'
    RIGHT_INDEX = 'right_index'
    LEFT_THUMB = 'left_thumb'
    RIGHT_THUMB = 'right_thumb'
    LEFT_HIP = 'left_hip'
    RIGHT_HIP = 'right_hip'
    LEFT_KNEE = 'left_knee'
    RIGHT_KNEE = 'right_knee'
    LEFT_ANKLE = 'left_ankle'
    RIGHT_ANKLE = 'right_ankle'
    LEFT_HEEL = 'left_heel'
    RIGHT_HEEL = 'right_heel'
    LEFT_FOOT_INDEX = 'left_foot_index'
    RIGHT_FOOT_INDEX = 'right_foot_index'


# (shoulder, elbow, wrist, hip, knee, ankle) per body side
SIDE_LANDMARKS = {
    'right': {
        'shoulder': Landmark.RIGHT_SHOULDER,
        'elbow': Landmark.RIGHT_ELBOW,
        'wrist': Landmark.RIGHT_WRIST,
        'hip': Landmark.RIGHT_HIP,
        'knee': Landmark.RIGHT_KNEE,
        'ankle': Landmark.RIGHT_ANKLE,
    },
    'left': {
        'shoulder': Landmark.LEFT_SHOULDER,
        'elbow': Landmark.LEFT_ELBOW,
        'wrist': Landmark.LEFT_WRIST,
        'hip': Landmark.LEFT_HIP,
        'knee': Landmark.LEFT_KNEE,
        'ankle': Landmark.LEFT_ANKLE,
    },
}


def _is_bad_number(value) -> bool:
    return not isinstance(value, numbers.Real) or isinstance(value, bool) or not math.isfinite(value)


@dataclass(frozen=True)
class Keypoint:
    """
    A single 2D keypoint in frame coordinates.

    Coordinates must be finite and non-negative; confidence lies in [0, 1].
    """
    name: Landmark
    x: float
    y: float
    confidence: float

    def __post_init__(self):
        try:
            object.__setattr__(self, 'name', Landmark(self.name))
        except ValueError:
            raise MalformedInput(f"Unknown landmark: {self.name!r}") from None
        for axis in ('x', 'y'):
            value = getattr(self, axis)
            if _is_bad_number(value) or value < 0:
                raise MalformedInput(f"{self.name.value}.{axis} must be a finite, non-negative number, got {value!r}")
            object.__setattr__(self, axis, float(value))
        if _is_bad_number(self.confidence) or not 0.0 <= self.confidence <= 1.0:
            raise MalformedInput(f"{self.name.value} confidence must be in [0, 1], got {self.confidence!r}")
        object.__setattr__(self, 'confidence', float(self.confidence))

    @property
    def xy(self):
        return (self.x, self.y)


@dataclass(frozen=True)
class PoseFrame:
    """
    Pose output for a single video frame.

    - keypoints only holds landmarks the pose model actually tracked
    - timestamp is clip-relative seconds, or None if the source had no timing
    """
    frame_index: int
    timestamp: Optional[float] = None
    keypoints: Mapping[Landmark, Keypoint] = field(default_factory=dict)

    def __post_init__(self):
        if (not isinstance(self.frame_index, numbers.Integral) or isinstance(self.frame_index, bool)
                or self.frame_index < 0):
            raise MalformedInput(f"frame_index must be a non-negative integer, got {self.frame_index!r}")
        object.__setattr__(self, 'frame_index', int(self.frame_index))
        if self.timestamp is not None and (_is_bad_number(self.timestamp) or self.timestamp < 0):
            raise MalformedInput(f"Frame {self.frame_index}: timestamp must be finite and non-negative")
        if self.timestamp is not None:
            object.__setattr__(self, 'timestamp', float(self.timestamp))

        keypoints: Dict[Landmark, Keypoint] = {}
        for key, keypoint in dict(self.keypoints).items():
            try:
                landmark = Landmark(key)
            except ValueError:
                raise MalformedInput(f"Frame {self.frame_index}: unknown landmark {key!r}") from None
            if keypoint.name is not landmark:
                raise MalformedInput(
                    f"Frame {self.frame_index}: keypoint {keypoint.name.value} stored under {landmark.value}"
                )
            keypoints[landmark] = keypoint
        object.__setattr__(self, 'keypoints', MappingProxyType(keypoints))

    @classmethod
    def from_keypoints(cls, frame_index: int, keypoints: Iterable[Keypoint],
                       timestamp: Optional[float] = None) -> 'PoseFrame':
        """Build a frame from a flat keypoint list (as pose models emit them)."""
        return cls(frame_index=frame_index, timestamp=timestamp,
                   keypoints={kp.name: kp for kp in keypoints})

    def get(self, landmark) -> Optional[Keypoint]:
        return self.keypoints.get(Landmark(landmark))

    def has(self, *landmarks) -> bool:
        return all(Landmark(lm) in self.keypoints for lm in landmarks)

    def is_reliable(self, min_score: float = 0.5, min_keypoints: int = 10) -> bool:
        """
        Check whether enough landmarks were tracked confidently.

        Args:
            min_score: Minimum confidence for a keypoint to count
            min_keypoints: Number of confident keypoints required

        Returns:
            True if at least min_keypoints have confidence >= min_score
        """
        confident = [kp for kp in self.keypoints.values() if kp.confidence >= min_score]
        return len(confident) >= min_keypoints


def validate_sequence(frames: Sequence[PoseFrame]) -> List[PoseFrame]:
    """
    Check a pose sequence is time-ordered.

    Frame indices must strictly increase; each timestamp must not be earlier
    than the last timestamp seen (frames without one are skipped over).

    Returns:
        The frames as a list

    Raises:
        MalformedInput: If an element is not a PoseFrame or the order is broken
    """
    frames = list(frames)
    last_timestamp = None
    for i, frame in enumerate(frames):
        if not isinstance(frame, PoseFrame):
            raise MalformedInput(f"Element {i} is not a PoseFrame: {type(frame).__name__}")
        if i > 0 and frame.frame_index <= frames[i - 1].frame_index:
            raise MalformedInput(
                f"Frames not ordered: index {frame.frame_index} follows {frames[i - 1].frame_index}"
            )
        if frame.timestamp is None:
            continue
        if last_timestamp is not None and frame.timestamp < last_timestamp:
            raise MalformedInput(
                f"Frames not time-ordered: t={frame.timestamp} at frame {frame.frame_index} "
                f"follows t={last_timestamp}"
            )
        last_timestamp = frame.timestamp
    return frames
