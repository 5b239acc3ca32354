"""
RallyLens - Pickleball Technique Analysis Library
=================================================

Modules:
    pose: Landmark types and pose CSV loading
    biomechanics: Technique metrics and skill-level benchmark comparison
    shots: Shot boundary detection, classification and scoring
    progress: Progress tracking and insights over a clip history
    analyzer: Clip-level analysis tying the components together
"""

from . import pose
from . import biomechanics
from . import shots
from . import progress
from .analyzer import ClipAnalysis, KeyMoment, RallyAnalyzer, analyze_pose_sequence
from .config import AnalysisConfig, ANALYSIS_CONFIG
from .errors import InvalidBenchmarkLevel, MalformedInput, RallyLensError

__version__ = '0.1.0'
