"""
Pose Data Module
================
Landmark types and pose CSV loading.
"""

from .types import Keypoint, Landmark, PoseFrame, validate_sequence
from .loader import frames_from_dataframe, load_pose_csv

__all__ = ['Keypoint', 'Landmark', 'PoseFrame', 'validate_sequence',
           'frames_from_dataframe', 'load_pose_csv']
