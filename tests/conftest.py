"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import cv2  # noqa: E402


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
light_bar:
  min_area: 10
  min_filling_ratio: 50

matcher:
  max_angle_difference: 15
  max_delta_y_height_ratio: 30

selector:
  screen_width: 640
  screen_height: 480

track_gate:
  locking_startup_times: 5
  locking_approval_threshold: 2
  min_intersection_area_ratio: 0.6

profiles:
  red:
    light_bar:
      min_area: 25
  blue:
    matcher:
      max_angle_difference: 10

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "light_bar": {
            "min_area": 10,
            "min_filling_ratio": 50,
        },
        "matcher": {
            "max_angle_difference": 15,
            "max_delta_y_height_ratio": 30,
            "big_armor": {
                "min_height_distance_ratio": 0,
                "max_height_distance_ratio": 59,
                "min_width_distance_ratio": 15,
                "max_width_distance_ratio": 25,
            },
        },
        "selector": {
            "screen_width": 1280,
            "screen_height": 1024,
        },
        "track_gate": {
            "locking_startup_times": 5,
            "locking_approval_threshold": 2,
            "min_intersection_area_ratio": 0.6,
        },
        "parallel": {
            "enabled": False,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


@pytest.fixture
def armor_mask():
    """
    1280x1024 mask with one armor near the screen center.

    Two upright 10x50 bars, 70 px apart, midpoint about (639, 504).
    """
    mask = np.zeros((1024, 1280), dtype=np.uint8)
    cv2.rectangle(mask, (600, 480), (609, 529), 255, -1)
    cv2.rectangle(mask, (670, 480), (679, 529), 255, -1)
    return mask
