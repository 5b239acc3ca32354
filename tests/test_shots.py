import pytest

from rallylens.config import DEFAULT_CONFIG
from rallylens.errors import MalformedInput
from rallylens.pose.types import PoseFrame
from rallylens.shots import (
    SHOT_RULES,
    ArmGeometry,
    Placement,
    ShotBoundaryDetector,
    ShotRule,
    ShotType,
    analyze_shot,
    classify_geometry,
    classify_shot,
    detect_shot_boundaries,
    determine_placement,
    estimate_shot_speed,
    score_shot_quality,
)

RIGHT_WRIST = (393.81, 302.5)


def moved(make_frame, index, dx=0.0, dy=0.0, confidence=0.9, timestamp=None):
    x, y = RIGHT_WRIST
    return make_frame(index, timestamp=timestamp, overrides={'right_wrist': (x + dx, y + dy, confidence)})


# ============================================
# BOUNDARY DETECTION
# ============================================

class TestBoundaryDetection:
    def test_stationary_wrist(self, make_frame):
        frames = [moved(make_frame, i) for i in range(5)]
        assert detect_shot_boundaries(frames) == []

    def test_fewer_than_two_frames(self, make_frame):
        assert detect_shot_boundaries([]) == []
        assert detect_shot_boundaries([make_frame()]) == []

    def test_fast_confident_movement(self, make_frame):
        frames = [moved(make_frame, 0), moved(make_frame, 1), moved(make_frame, 2, dx=40.0)]
        assert detect_shot_boundaries(frames) == [2]

    def test_movement_below_threshold(self, make_frame):
        frames = [moved(make_frame, 0), moved(make_frame, 1, dx=25.0)]
        assert detect_shot_boundaries(frames) == []

    def test_low_confidence_wrist_ignored(self, make_frame):
        frames = [moved(make_frame, 0), moved(make_frame, 1, dx=40.0, confidence=0.4)]
        assert detect_shot_boundaries(frames) == []

    def test_wrists_are_not_mixed_between_frames(self, make_frame):
        prev = make_frame(0, drop=('left_wrist',))
        cur = make_frame(1, drop=('right_wrist',))
        assert detect_shot_boundaries([prev, cur]) == []

    def test_left_wrist_used_when_right_missing(self, make_frame):
        prev = make_frame(0, drop=('right_wrist',))
        cur = make_frame(1, drop=('right_wrist',), overrides={'left_wrist': (265.0, 200.0)})
        assert detect_shot_boundaries([prev, cur]) == [1]

    def test_threshold_scales_with_frame_width(self, make_frame):
        detector = ShotBoundaryDetector(DEFAULT_CONFIG.with_frame_size(1280, 960))
        assert detector.threshold == 60.0
        assert detector.detect([moved(make_frame, 0), moved(make_frame, 1, dx=40.0)]) == []

    def test_unordered_frames_rejected(self, make_frame):
        with pytest.raises(MalformedInput):
            detect_shot_boundaries([make_frame(1), make_frame(0)])


# ============================================
# CLASSIFICATION
# ============================================

class TestClassifyGeometry:
    @pytest.mark.parametrize('arm, expected', [
        (ArmGeometry(-100, -120, -150, 0), ShotType.SERVE),
        (ArmGeometry(-150, -200, -150, 30), ShotType.BACKHAND),
        (ArmGeometry(-140, -200, -150, 0), ShotType.VOLLEY),
        (ArmGeometry(-210, -200, -150, 0), ShotType.DINK),
        (ArmGeometry(-160, -110, -150, 0), ShotType.SMASH),
        (ArmGeometry(-170, -160, -150, 0), ShotType.FOREHAND),
    ])
    def test_rule_table(self, arm, expected):
        assert classify_geometry(arm) is expected

    def test_serve_takes_priority_over_volley(self):
        arm = ArmGeometry(wrist_elevation=-100, elbow_elevation=-120, shoulder_elevation=-150, cross_body=0)
        volley_rule = next(r for r in SHOT_RULES if r.label is ShotType.VOLLEY)
        assert volley_rule.predicate(arm, DEFAULT_CONFIG)
        assert classify_geometry(arm) is ShotType.SERVE

    def test_custom_rule_table(self):
        rules = [ShotRule(ShotType.LOB, lambda a, c: a.wrist_elevation > a.shoulder_elevation + 100)]
        assert classify_geometry(ArmGeometry(0, -200, -150, 0), rules=rules) is ShotType.LOB
        assert classify_geometry(ArmGeometry(-100, -120, -150, 0), rules=rules) is ShotType.FOREHAND


class TestClassifyShot:
    def test_serve_pose(self, make_frame, serve_arm):
        result = classify_shot(make_frame(overrides=serve_arm))
        assert result.shot_type is ShotType.SERVE
        assert not result.low_confidence

    def test_low_wrist_is_dink(self, make_frame):
        assert classify_shot(make_frame()).shot_type is ShotType.DINK

    def test_wrist_across_body_is_backhand(self, make_frame):
        frame = make_frame(overrides={'right_elbow': (340.0, 200.0), 'right_wrist': (280.0, 150.0)})
        assert classify_shot(frame).shot_type is ShotType.BACKHAND

    def test_missing_arm_is_low_confidence_forehand(self, make_frame):
        result = classify_shot(make_frame(drop=('right_wrist', 'left_wrist')))
        assert result.shot_type is ShotType.FOREHAND
        assert result.low_confidence


# ============================================
# QUALITY, SPEED, PLACEMENT
# ============================================

class TestQuality:
    def test_level_body_and_extended_arm(self, make_frame):
        assert score_shot_quality(make_frame()) == 100.0

    def test_straight_arm_misses_extension_bonus(self, make_frame):
        frame = make_frame(overrides={'right_elbow': (390.0, 200.0), 'right_wrist': (420.0, 250.0)})
        assert score_shot_quality(frame) == 85.0

    def test_tilted_shoulders_miss_alignment_bonus(self, make_frame):
        frame = make_frame(overrides={'left_shoulder': (280.0, 170.0)})
        assert score_shot_quality(frame) == 85.0

    def test_missing_hips_miss_alignment_bonus(self, make_frame):
        assert score_shot_quality(make_frame(drop=('left_hip',))) == 85.0

    def test_nothing_tracked(self):
        assert score_shot_quality(PoseFrame(0)) == 70.0


class TestSpeed:
    def test_speed_from_timestamps(self, make_frame):
        prev = moved(make_frame, 0, timestamp=0.0)
        cur = moved(make_frame, 1, dx=20.0, timestamp=0.1)
        assert estimate_shot_speed(prev, cur) == pytest.approx(30.0)

    def test_speed_clamped(self, make_frame):
        prev = moved(make_frame, 0, timestamp=0.0)
        assert estimate_shot_speed(prev, moved(make_frame, 1, dx=100.0, timestamp=0.1)) == 60.0
        assert estimate_shot_speed(prev, moved(make_frame, 1, dx=1.0, timestamp=0.1)) == 10.0

    def test_default_elapsed_without_timestamps(self, make_frame):
        prev, cur = moved(make_frame, 0), moved(make_frame, 1, dx=5.0)
        assert estimate_shot_speed(prev, cur) == pytest.approx(5.0 / 0.033 * 0.15)

    def test_equal_timestamps_use_default_elapsed(self, make_frame):
        prev = moved(make_frame, 0, timestamp=0.5)
        cur = moved(make_frame, 1, dx=5.0, timestamp=0.5)
        assert estimate_shot_speed(prev, cur) == pytest.approx(5.0 / 0.033 * 0.15)

    def test_missing_wrist_uses_default_speed(self, make_frame):
        prev = make_frame(0, drop=('right_wrist', 'left_wrist'))
        assert estimate_shot_speed(prev, make_frame(1)) == 25.0


class TestPlacement:
    @pytest.mark.parametrize('x, expected', [
        (100.0, Placement.LEFT),
        (200.0, Placement.CENTER),
        (300.0, Placement.CENTER),
        (500.0, Placement.RIGHT),
    ])
    def test_breakpoints(self, make_frame, x, expected):
        assert determine_placement(make_frame(overrides={'right_wrist': (x, 300.0)})) is expected

    def test_breakpoints_scale_with_frame(self, make_frame):
        config = DEFAULT_CONFIG.with_frame_size(1280, 960)
        assert determine_placement(make_frame(overrides={'right_wrist': (500.0, 300.0)}), config) is Placement.CENTER

    def test_no_wrist_is_center(self, make_frame):
        assert determine_placement(make_frame(drop=('right_wrist', 'left_wrist'))) is Placement.CENTER


def test_analyze_shot(make_frame, serve_arm):
    prev = make_frame(0, timestamp=0.0)
    cur = make_frame(1, timestamp=1 / 30, overrides=serve_arm)
    shot = analyze_shot(prev, cur)
    assert shot.shot_type is ShotType.SERVE
    assert shot.quality == 85.0
    assert shot.speed == 60.0
    assert shot.placement is Placement.CENTER
    assert shot.source_frame_index == 1
    data = shot.to_dict()
    assert data['shotType'] == 'serve'
    assert data['placement'] == 'center'
    assert data['sourceFrameIndex'] == 1
    assert set(data['technique']) >= {'serveArmAngle', 'overallTechnique'}
