"""Shared pose builders."""

import math

import pandas as pd
import pytest

from rallylens.pose.types import Keypoint, Landmark, PoseFrame


def _extended_arm(shoulder, elbow_drop=80.0, forearm=80.0, angle=155.0):
    """Right elbow straight below the shoulder, wrist opened to `angle` degrees."""
    elbow = (shoulder[0], shoulder[1] + elbow_drop)
    theta = math.radians(angle)
    wrist = (elbow[0] + forearm * math.sin(theta), elbow[1] - forearm * math.cos(theta))
    return elbow, wrist


_RIGHT_ELBOW, _RIGHT_WRIST = _extended_arm((360.0, 150.0))

# Front-on player in a 640x480 frame, right side at larger x.
# Level shoulders and hips, right arm at 155 degrees, wrist low (a dink).
STANDING_POSE = {
    'nose': (320.0, 100.0),
    'left_shoulder': (280.0, 150.0),
    'right_shoulder': (360.0, 150.0),
    'left_elbow': (270.0, 210.0),
    'right_elbow': _RIGHT_ELBOW,
    'left_wrist': (265.0, 260.0),
    'right_wrist': _RIGHT_WRIST,
    'left_hip': (290.0, 280.0),
    'right_hip': (350.0, 280.0),
    'left_knee': (285.0, 350.0),
    'right_knee': (355.0, 350.0),
    'left_ankle': (275.0, 420.0),
    'right_ankle': (365.0, 420.0),
}

# Arm raised overhead: wrist and elbow above the shoulder
SERVE_ARM = {
    'right_elbow': (370.0, 120.0),
    'right_wrist': (330.0, 100.0),
}


def build_frame(frame_index=0, timestamp=None, overrides=None, drop=(), confidence=0.9):
    points = dict(STANDING_POSE)
    points.update(overrides or {})
    keypoints = []
    for name, value in points.items():
        if name in drop:
            continue
        x, y = value[0], value[1]
        score = value[2] if len(value) > 2 else confidence
        keypoints.append(Keypoint(Landmark(name), x, y, score))
    return PoseFrame.from_keypoints(frame_index, keypoints, timestamp=timestamp)


@pytest.fixture
def make_frame():
    return build_frame


@pytest.fixture
def standing_pose():
    return dict(STANDING_POSE)


@pytest.fixture
def serve_arm():
    return dict(SERVE_ARM)


@pytest.fixture
def rally_frames():
    """Six frames at 30 fps: a serve at frame 3, back to the low ready stance at frame 4."""
    return [
        build_frame(i, timestamp=i / 30.0, overrides=SERVE_ARM if i == 3 else None)
        for i in range(6)
    ]


@pytest.fixture
def write_pose_csv():
    """Write PoseFrames to the pose CSV layout (pixel coordinates, no timestamp column)."""
    def _write(path, frames):
        rows = []
        for frame in frames:
            row = {'frame': frame.frame_index}
            for landmark in Landmark:
                keypoint = frame.get(landmark)
                row[f'{landmark.value}_x'] = keypoint.x if keypoint else float('nan')
                row[f'{landmark.value}_y'] = keypoint.y if keypoint else float('nan')
                row[f'{landmark.value}_visibility'] = keypoint.confidence if keypoint else float('nan')
            rows.append(row)
        pd.DataFrame(rows).to_csv(path, index=False)
        return path
    return _write
