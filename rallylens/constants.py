"""
Shared Constants for RallyLens Technique Analysis
==================================================
Centralized definitions used across the project.
"""

# 4 built-in benchmark levels, weakest first
SKILL_LEVELS = [
    "beginner",
    "intermediate",
    "advanced",
    "professional"
]

# Technique metrics: (python field, camelCase key used by the storage layer)
# Order matters: comparisons, strengths and weaknesses follow it.
METRIC_FIELDS = [
    ('serve_arm_angle', 'serveArmAngle'),
    ('serve_follow_through', 'serveFollowThrough'),
    ('serve_body_rotation', 'serveBodyRotation'),
    ('stance_width', 'stanceWidth'),
    ('stance_balance', 'stanceBalance'),
    ('split_step_timing', 'splitStepTiming'),
    ('footwork_agility', 'footworkAgility'),
    ('paddle_height', 'paddleHeight'),
    ('paddle_angle', 'paddleAngle'),
    ('paddle_ready_position', 'paddleReadyPosition'),
    ('body_alignment', 'bodyAlignment'),
    ('ready_position', 'readyPosition'),
    ('center_of_gravity', 'centerOfGravity'),
]

METRIC_NAMES = [name for name, _ in METRIC_FIELDS]
OVERALL_METRIC = ('overall_technique', 'overallTechnique')

# overallTechnique is always the mean of these
OVERALL_COMPONENTS = [
    'serve_arm_angle',
    'paddle_angle',
    'body_alignment',
    'stance_balance',
    'footwork_agility',
]

# Fallback score for a metric whose landmarks are missing
DEFAULT_METRIC_SCORE = 75.0

# Score bounds
SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Progress tracking window (most recent analyses)
PROGRESS_WINDOW = 10
