"""
Smoke tests for configuration loading, profiles and validation.
"""

import logging

import pytest
import yaml

from models.config import Config, MatcherConfig, ParallelConfig, RatioBand, SelectorConfig
from ops.config import _deep_merge, apply_profile, build_config, load_config, validate_config
from ops.logging import setup_logging


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        """A complete valid config passes validation."""
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    def test_empty_config_passes(self):
        """Every section is optional; defaults fill the gaps."""
        assert validate_config({}) == (True, None)

    def test_section_must_be_mapping(self, valid_config):
        valid_config["matcher"] = [1, 2, 3]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "matcher" in error

    def test_negative_min_area(self, valid_config):
        valid_config["light_bar"]["min_area"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_area" in error

    def test_filling_ratio_above_100(self, valid_config):
        valid_config["light_bar"]["min_filling_ratio"] = 120

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_filling_ratio" in error

    def test_inverted_band(self, valid_config):
        valid_config["matcher"]["big_armor"]["min_width_distance_ratio"] = 30

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "big_armor" in error

    def test_non_positive_screen(self, valid_config):
        valid_config["selector"]["screen_width"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "screen_width" in error

    def test_zero_approval_threshold(self, valid_config):
        valid_config["track_gate"]["locking_approval_threshold"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "locking_approval_threshold" in error

    def test_overlap_ratio_out_of_range(self, valid_config):
        valid_config["track_gate"]["min_intersection_area_ratio"] = 1.5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_intersection_area_ratio" in error

    def test_bad_worker_count(self, valid_config):
        valid_config["parallel"]["max_workers"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "max_workers" in error

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for layered YAML loading."""

    def test_loads_default(self, temp_config_dir):
        config = load_config(str(temp_config_dir / "default.yaml"))

        assert config["selector"]["screen_width"] == 640
        assert config["log_level"] == "INFO"

    def test_local_overrides_merge(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("selector:\n  screen_width: 800\n")

        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["selector"]["screen_width"] == 800
        # Sibling keys survive the merge
        assert config["selector"]["screen_height"] == 480

    def test_explicit_path_wins(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("selector:\n  screen_width: 800\n")
        custom = temp_config_dir / "match.yaml"
        custom.write_text("selector:\n  screen_width: 1024\n")

        config = load_config(str(custom))

        assert config["selector"]["screen_width"] == 1024

    def test_missing_directory_gives_empty(self, tmp_path):
        assert load_config(str(tmp_path / "nowhere" / "config.yaml")) == {}

    def test_malformed_yaml_raises(self, temp_config_dir):
        bad = temp_config_dir / "bad.yaml"
        bad.write_text("selector: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(str(bad))

    def test_deep_merge(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}

        merged = _deep_merge(base, {"a": {"c": 5}, "e": 6})

        assert merged == {"a": {"b": 1, "c": 5}, "d": 3, "e": 6}


class TestApplyProfile:
    def test_red_profile(self, temp_config_dir):
        raw = load_config(str(temp_config_dir / "default.yaml"))

        resolved = apply_profile(raw, "red")

        assert resolved["light_bar"]["min_area"] == 25
        assert resolved["light_bar"]["min_filling_ratio"] == 50
        assert resolved["enemy_color"] == "red"
        assert "profiles" not in resolved

    def test_blue_profile(self, temp_config_dir):
        raw = load_config(str(temp_config_dir / "default.yaml"))

        resolved = apply_profile(raw, "blue")

        assert resolved["matcher"]["max_angle_difference"] == 10
        assert resolved["light_bar"]["min_area"] == 10

    def test_color_from_config(self, temp_config_dir):
        raw = load_config(str(temp_config_dir / "default.yaml"))
        raw["enemy_color"] = "blue"

        resolved = apply_profile(raw)

        assert resolved["matcher"]["max_angle_difference"] == 10

    def test_unknown_color_keeps_base(self, temp_config_dir):
        raw = load_config(str(temp_config_dir / "default.yaml"))

        resolved = apply_profile(raw, "green")

        assert resolved["light_bar"]["min_area"] == 10
        assert resolved["matcher"]["max_angle_difference"] == 15

    def test_does_not_modify_input(self, temp_config_dir):
        raw = load_config(str(temp_config_dir / "default.yaml"))

        apply_profile(raw, "red")

        assert raw["light_bar"]["min_area"] == 10
        assert "profiles" in raw


class TestBuildConfig:
    def test_typed_result(self, temp_config_dir):
        config = build_config(str(temp_config_dir / "default.yaml"), color="red")

        assert isinstance(config, Config)
        assert config.light_bar.min_area == 25
        assert config.selector.screen_width == 640
        assert config.enemy_color == "red"

    def test_invalid_raises(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("track_gate:\n  locking_startup_times: -2\n")

        with pytest.raises(ValueError, match="locking_startup_times"):
            build_config(str(temp_config_dir / "config.yaml"))


class TestTypedConfig:
    def test_defaults(self):
        config = Config()

        assert config.light_bar.min_area == 10.0
        assert config.matcher.big_armor.max_height_distance_ratio == 59.0
        assert config.matcher.small_armor.min_width_distance_ratio == 5.0
        assert config.selector.screen_width == 1280
        assert config.track_gate.locking_startup_times == 5
        assert config.parallel == ParallelConfig(enabled=True, max_workers=None)

    def test_from_dict_partial_band(self):
        matcher = MatcherConfig.from_dict({"big_armor": {"max_width_distance_ratio": 30}})

        assert matcher.big_armor == RatioBand(0.0, 59.0, 15.0, 30.0)
        assert matcher.small_armor == RatioBand(30.0, 100.0, 5.0, 20.0)

    def test_round_trip(self, valid_config):
        config = Config.from_dict(valid_config)

        assert Config.from_dict(config.to_dict()) == config

    def test_selector_from_dict(self):
        selector = SelectorConfig.from_dict({"screen_width": 640, "distance_c": 50})

        assert selector.screen_width == 640
        assert selector.screen_height == 1024
        assert selector.distance_c == 50


class TestSetupLogging:
    def test_creates_log_directory(self, tmp_path):
        log_path = tmp_path / "logs" / "armor.log"

        setup_logging(str(log_path), "DEBUG", console=False)
        logging.getLogger().debug("hello")

        assert log_path.parent.is_dir()
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in log_path.read_text()

    def test_console_only(self):
        setup_logging(None, "info")

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)
