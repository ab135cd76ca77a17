"""
Configuration loading, profile resolution and validation.

Layering (later wins):
- `config/default.yaml` (checked in)
- `config/config.yaml` (local overrides)
- the explicitly given config path

Thresholds can be tuned per enemy color. A `profiles` section holds
per-color overrides, merged over the base sections when `enemy_color`
is set (or when a color is passed explicitly).
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Any, Dict, Optional, Tuple

import yaml

from models.config import Config

SECTIONS = ("light_bar", "matcher", "selector", "track_gate", "parallel")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load the layered configuration as a raw dictionary.

    Raises:
        OSError, yaml.YAMLError: when a present file cannot be read or parsed.
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            base_cfg = _read_yaml(base_path)

        local_overrides_path = os.path.join(config_dir, "config.yaml")
        if os.path.exists(local_overrides_path):
            base_cfg = _deep_merge(base_cfg, _read_yaml(local_overrides_path))

        if os.path.exists(config_path) and os.path.abspath(config_path) not in (
            os.path.abspath(base_path),
            os.path.abspath(local_overrides_path),
        ):
            base_cfg = _deep_merge(base_cfg, _read_yaml(config_path))

        return base_cfg
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        raise


def apply_profile(config: Dict[str, Any], color: Optional[str] = None) -> Dict[str, Any]:
    """
    Merge the enemy-color profile over the base sections.

    Args:
        config: Raw configuration dictionary (not modified).
        color: Profile name; defaults to config["enemy_color"].

    Returns:
        A new dictionary without the `profiles` section.
    """
    resolved = copy.deepcopy(config)
    profiles = resolved.pop("profiles", None) or {}
    color = color or resolved.get("enemy_color")
    if not color:
        return resolved

    profile = profiles.get(color)
    if profile is None:
        logging.warning(f"No profile for enemy color '{color}', using base thresholds")
        return resolved

    resolved["enemy_color"] = color
    logging.info(f"Using '{color}' threshold profile")
    return _deep_merge(resolved, copy.deepcopy(profile))


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary (profiles already applied or not).

    Returns:
        Tuple of (is_valid, error_message)
    """
    for section in SECTIONS:
        if section in config and not isinstance(config[section], dict):
            return False, f"{section} must be a mapping"

    light_bar = config.get("light_bar", {}) or {}
    for key in ("min_area", "min_filling_ratio"):
        if key in light_bar:
            value = light_bar[key]
            if not isinstance(value, (int, float)) or value < 0:
                return False, f"light_bar.{key} must be a non-negative number"
    if "min_filling_ratio" in light_bar and light_bar["min_filling_ratio"] > 100:
        return False, "light_bar.min_filling_ratio must be at most 100"

    matcher = config.get("matcher", {}) or {}
    for key in ("max_angle_difference", "max_delta_y_height_ratio"):
        if key in matcher:
            value = matcher[key]
            if not isinstance(value, (int, float)) or value < 0:
                return False, f"matcher.{key} must be a non-negative number"
    for band in ("big_armor", "small_armor"):
        band_cfg = matcher.get(band, {}) or {}
        for kind in ("height", "width"):
            low = band_cfg.get(f"min_{kind}_distance_ratio")
            high = band_cfg.get(f"max_{kind}_distance_ratio")
            for name, value in ((f"min_{kind}_distance_ratio", low), (f"max_{kind}_distance_ratio", high)):
                if value is not None and not isinstance(value, (int, float)):
                    return False, f"matcher.{band}.{name} must be a number"
            if low is not None and high is not None and low > high:
                return False, f"matcher.{band}.min_{kind}_distance_ratio exceeds max"

    selector = config.get("selector", {}) or {}
    for key in ("screen_width", "screen_height", "locking_box_min_width", "locking_box_min_height"):
        if key in selector:
            value = selector[key]
            if not isinstance(value, int) or value <= 0:
                return False, f"selector.{key} must be a positive integer"
    for key in ("width_expand_ratio", "height_expand_ratio", "distance_a", "distance_b", "distance_c"):
        if key in selector and not isinstance(selector[key], (int, float)):
            return False, f"selector.{key} must be a number"

    track_gate = config.get("track_gate", {}) or {}
    for key in ("locking_startup_times", "locking_approval_threshold"):
        if key in track_gate:
            value = track_gate[key]
            if not isinstance(value, int) or value <= 0:
                return False, f"track_gate.{key} must be a positive integer"
    if "min_intersection_area_ratio" in track_gate:
        ratio = track_gate["min_intersection_area_ratio"]
        if not isinstance(ratio, (int, float)) or not (0 <= ratio <= 1):
            return False, "track_gate.min_intersection_area_ratio must be between 0 and 1"

    parallel = config.get("parallel", {}) or {}
    if parallel.get("max_workers") is not None:
        workers = parallel["max_workers"]
        if not isinstance(workers, int) or workers <= 0:
            return False, "parallel.max_workers must be a positive integer"

    profiles = config.get("profiles")
    if profiles is not None and not isinstance(profiles, dict):
        return False, "profiles must be a mapping of color to overrides"

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.get("log_level", "INFO") not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def build_config(config_path: str, color: Optional[str] = None) -> Config:
    """
    Load, resolve the color profile, validate and type the configuration.

    Raises:
        ValueError: if validation fails.
    """
    raw = apply_profile(load_config(config_path), color)
    is_valid, error = validate_config(raw)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error}")
        raise ValueError(error)
    return Config.from_dict(raw)
