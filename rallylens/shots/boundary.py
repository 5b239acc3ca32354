"""
Shot Boundary Detector
Flags frames where the hitting wrist moves fast enough to be a swing
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..pose.types import Keypoint, Landmark, PoseFrame, validate_sequence

logger = logging.getLogger(__name__)

WRIST_PREFERENCE = (Landmark.RIGHT_WRIST, Landmark.LEFT_WRIST)


def wrist_pair(prev: PoseFrame, cur: PoseFrame) -> Optional[Tuple[Keypoint, Keypoint]]:
    """
    Pick the same wrist in both frames: right if tracked in both, else left.

    Returns:
        (previous wrist, current wrist) or None if no wrist is tracked in both
    """
    for landmark in WRIST_PREFERENCE:
        before, after = prev.get(landmark), cur.get(landmark)
        if before is not None and after is not None:
            return before, after
    return None


class ShotBoundaryDetector:
    """
    Detect shots from wrist displacement between consecutive frames.

    A frame is a shot boundary when the wrist travelled further than the
    motion threshold since the previous frame and the current wrist
    detection is confident.
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG):
        self.config = config

    @property
    def threshold(self) -> float:
        """Motion threshold in frame units."""
        return self.config.scaled(self.config.motion_threshold)

    def is_boundary(self, prev: PoseFrame, cur: PoseFrame) -> bool:
        pair = wrist_pair(prev, cur)
        if pair is None:
            return False
        before, after = pair
        movement = math.hypot(after.x - before.x, after.y - before.y)
        return movement > self.threshold and after.confidence > self.config.min_wrist_confidence

    def detect(self, frames: Sequence[PoseFrame]) -> List[int]:
        """
        Scan a pose sequence for shot boundaries.

        Args:
            frames: Time-ordered PoseFrames

        Returns:
            Frame indices of detected shots (empty for fewer than 2 frames)
        """
        frames = validate_sequence(frames)
        boundaries = [cur.frame_index for prev, cur in zip(frames, frames[1:])
                      if self.is_boundary(prev, cur)]
        logger.debug("Detected %d shot boundaries in %d frames", len(boundaries), len(frames))
        return boundaries


def detect_shot_boundaries(frames: Sequence[PoseFrame], config: AnalysisConfig = DEFAULT_CONFIG) -> List[int]:
    return ShotBoundaryDetector(config).detect(frames)
