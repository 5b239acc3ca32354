import pytest

from rallylens.config import ANALYSIS_CONFIG, DEFAULT_CONFIG, AnalysisConfig


def test_defaults_match_config_dict():
    assert DEFAULT_CONFIG.motion_threshold == ANALYSIS_CONFIG['motion_threshold']
    assert DEFAULT_CONFIG.scale == 1.0


def test_scaling_follows_frame_width():
    config = DEFAULT_CONFIG.with_frame_size(1280, 720)
    assert config.scale == 2.0
    assert config.scaled(30) == 60.0
    assert DEFAULT_CONFIG.frame_width == 640.0


def test_elevation_respects_y_convention():
    assert DEFAULT_CONFIG.elevation(100.0) == -100.0
    assert AnalysisConfig(y_axis_down=False).elevation(100.0) == 100.0


def test_from_dict_overrides():
    config = AnalysisConfig.from_dict({'motion_threshold': 50.0})
    assert config.motion_threshold == 50.0
    assert config.dink_margin == DEFAULT_CONFIG.dink_margin


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError):
        AnalysisConfig.from_dict({'motion_treshold': 50.0})


@pytest.mark.parametrize('overrides', [
    {'frame_width': 0},
    {'placement_breakpoints': (0.7, 0.3)},
])
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        AnalysisConfig(**overrides)
