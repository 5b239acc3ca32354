"""
Pose CSV loading

Reads the pose CSV layout written by the extraction tooling:
one row per frame, a 'frame' column and '<landmark>_x', '<landmark>_y',
'<landmark>_visibility' columns (optional '<landmark>_z' is ignored).
"""

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from ..errors import MalformedInput
from .types import Keypoint, Landmark, PoseFrame, validate_sequence

logger = logging.getLogger(__name__)


def frames_from_dataframe(df: pd.DataFrame, fps: Optional[float] = None,
                          frame_size: Optional[tuple] = None) -> List[PoseFrame]:
    """
    Convert a pose DataFrame into PoseFrames.

    Args:
        df: DataFrame with 'frame' and '<landmark>_x/_y[/_visibility]' columns
        fps: Frame rate used to derive timestamps when there is no 'timestamp' column
        frame_size: (width, height) to scale normalized [0, 1] coordinates to pixels

    Returns:
        Time-ordered list of PoseFrame

    Raises:
        MalformedInput: Missing 'frame' column, no landmark columns, bad values
    """
    if 'frame' not in df.columns:
        raise MalformedInput("Pose data has no 'frame' column")

    landmarks = [lm for lm in Landmark if f'{lm.value}_x' in df.columns and f'{lm.value}_y' in df.columns]
    if not landmarks:
        raise MalformedInput("Pose data has no '<landmark>_x' / '<landmark>_y' columns")

    width, height = frame_size if frame_size else (1.0, 1.0)
    has_timestamp = 'timestamp' in df.columns

    frames = []
    for row in df.to_dict('records'):
        if pd.isna(row['frame']):
            raise MalformedInput("Pose data has a row without a frame number")
        frame_index = int(row['frame'])

        if has_timestamp and pd.notna(row['timestamp']):
            timestamp = float(row['timestamp'])
        elif fps:
            timestamp = frame_index / float(fps)
        else:
            timestamp = None

        keypoints = []
        for lm in landmarks:
            x = row[f'{lm.value}_x']
            y = row[f'{lm.value}_y']
            if pd.isna(x) or pd.isna(y):
                continue  # landmark not tracked in this frame
            visibility = row.get(f'{lm.value}_visibility', 1.0)
            visibility = 1.0 if pd.isna(visibility) else float(np.clip(visibility, 0.0, 1.0))
            keypoints.append(Keypoint(lm, float(x) * width, float(y) * height, visibility))

        frames.append(PoseFrame.from_keypoints(frame_index, keypoints, timestamp=timestamp))

    return validate_sequence(frames)


def load_pose_csv(csv_path, fps: Optional[float] = None, normalized: bool = False,
                  frame_size: tuple = (640, 480)) -> List[PoseFrame]:
    """
    Load a pose CSV file.

    Args:
        csv_path: Path to pose CSV file
        fps: Frame rate for timestamp derivation (optional)
        normalized: True if coordinates are in [0, 1] and need scaling to frame_size
        frame_size: (width, height) in pixels

    Returns:
        List of PoseFrame
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Pose CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)
    df.columns = [str(c).strip() for c in df.columns]
    frames = frames_from_dataframe(df, fps=fps, frame_size=frame_size if normalized else None)
    logger.info("Loaded %d pose frames from %s", len(frames), csv_path.name)
    return frames
