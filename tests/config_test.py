#!/usr/bin/env python3
"""
設定管理のテスト
"""

import pytest
import yaml

from depthguard.config import (
    ConfigManager, DepthGuardConfig, DetectorConfig, AlarmConfig, InputConfig
)


class TestConfigDefaults:

    def test_detector_defaults(self):
        config = DetectorConfig()
        config.validate()
        assert (config.width, config.height) == (640, 480)
        assert config.depth_threshold == 50
        assert config.min_region_size == 800
        assert config.pixel_count == 640 * 480

    def test_alarm_defaults(self):
        config = AlarmConfig()
        assert config.min_regions == 2
        assert config.backend == "auto"
        assert config.sound_file == "WARNING_INTRUDER.wav"

    @pytest.mark.parametrize("kwargs", [
        {"width": 0},
        {"height": -1},
        {"depth_threshold": -1},
        {"min_region_size": -1},
    ])
    def test_invalid_detector_config(self, kwargs):
        with pytest.raises(ValueError):
            DetectorConfig(**kwargs).validate()

    def test_input_defaults(self):
        config = InputConfig()
        config.validate()
        assert config.fps == 30
        assert (config.min_depth, config.max_depth) == (800, 4000)

    @pytest.mark.parametrize("kwargs", [
        {"fps": 0},
        {"fps": -30},
        {"min_depth": 4000, "max_depth": 800},
        {"min_depth": -1},
        {"timeout_ms": -1},
    ])
    def test_invalid_input_config(self, kwargs):
        with pytest.raises(ValueError):
            InputConfig(**kwargs).validate()


class TestConfigManager:

    def test_save_and_load(self, tmp_path):
        manager = ConfigManager()
        config = manager.load_config(tmp_path / "missing.yaml")
        config.detector.depth_threshold = 75
        config.alarm.backend = "null"
        config.input.fps = 15

        path = tmp_path / "depthguard.yaml"
        assert manager.save_config(path)

        loaded = ConfigManager().load_config(path)
        assert loaded.detector.depth_threshold == 75
        assert loaded.alarm.backend == "null"
        assert loaded.input.fps == 15

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ConfigManager().load_config(tmp_path / "missing.yaml")
        assert config == DepthGuardConfig()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.safe_dump({"detector": {"min_region_size": 100},
                                        "log_level": "DEBUG"}))

        config = ConfigManager().load_config(path)
        assert config.detector.min_region_size == 100
        assert config.detector.depth_threshold == 50
        assert config.log_level == "DEBUG"

    def test_unknown_keys_are_ignored(self, tmp_path):
        path = tmp_path / "unknown.yaml"
        path.write_text(yaml.safe_dump({"detector": {"dilation": 3}, "mesh": {"a": 1}}))

        config = ConfigManager().load_config(path)
        assert not hasattr(config.detector, "dilation")
        assert config.detector == DetectorConfig()

    def test_invalid_detector_values_fall_back(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text(yaml.safe_dump({"detector": {"depth_threshold": -10},
                                        "alarm": {"volume": 0.5}}))

        config = ConfigManager().load_config(path)
        assert config.detector == DetectorConfig()
        assert config.alarm.volume == 0.5

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        assert ConfigManager().load_config(path) == DepthGuardConfig()

    def test_broken_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("detector: [unclosed\n")
        assert ConfigManager().load_config(path) == DepthGuardConfig()

    def test_save_without_config(self, tmp_path):
        assert not ConfigManager().save_config(tmp_path / "out.yaml")

    def test_inverted_depth_range_falls_back(self, tmp_path):
        """深度範囲が逆転した入力設定は既定値に戻る"""
        path = tmp_path / "inverted.yaml"
        path.write_text(yaml.safe_dump({"input": {"min_depth": 4000, "max_depth": 800},
                                        "detector": {"depth_threshold": 70}}))

        config = ConfigManager().load_config(path)
        assert config.input == InputConfig()
        assert config.detector.depth_threshold == 70

    def test_zero_fps_falls_back(self, tmp_path):
        path = tmp_path / "fps.yaml"
        path.write_text(yaml.safe_dump({"input": {"fps": 0, "source": "openni"}}))

        config = ConfigManager().load_config(path)
        assert config.input.fps == 30
        assert config.input.source == "mock"
