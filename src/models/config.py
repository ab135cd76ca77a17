"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LightBarConfig:
    """Light bar extraction thresholds."""
    min_area: float = 10.0
    min_filling_ratio: float = 50.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LightBarConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            min_area=d.get("min_area", 10.0),
            min_filling_ratio=d.get("min_filling_ratio", 50.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_area": self.min_area,
            "min_filling_ratio": self.min_filling_ratio,
        }


@dataclass
class RatioBand:
    """An armor size band expressed as ratios in percent."""
    min_height_distance_ratio: float = 0.0
    max_height_distance_ratio: float = 100.0
    min_width_distance_ratio: float = 0.0
    max_width_distance_ratio: float = 100.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any], defaults: "RatioBand") -> "RatioBand":
        return cls(
            min_height_distance_ratio=d.get("min_height_distance_ratio", defaults.min_height_distance_ratio),
            max_height_distance_ratio=d.get("max_height_distance_ratio", defaults.max_height_distance_ratio),
            min_width_distance_ratio=d.get("min_width_distance_ratio", defaults.min_width_distance_ratio),
            max_width_distance_ratio=d.get("max_width_distance_ratio", defaults.max_width_distance_ratio),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_height_distance_ratio": self.min_height_distance_ratio,
            "max_height_distance_ratio": self.max_height_distance_ratio,
            "min_width_distance_ratio": self.min_width_distance_ratio,
            "max_width_distance_ratio": self.max_width_distance_ratio,
        }


def _default_big_armor() -> RatioBand:
    return RatioBand(
        min_height_distance_ratio=0.0,
        max_height_distance_ratio=59.0,
        min_width_distance_ratio=15.0,
        max_width_distance_ratio=25.0,
    )


def _default_small_armor() -> RatioBand:
    return RatioBand(
        min_height_distance_ratio=30.0,
        max_height_distance_ratio=100.0,
        min_width_distance_ratio=5.0,
        max_width_distance_ratio=20.0,
    )


@dataclass
class MatcherConfig:
    """
    Armor matching gates.

    All ratios are in percent. Height-distance bands are inclusive,
    width-distance bands are exclusive.
    """
    max_angle_difference: float = 15.0
    max_delta_y_height_ratio: float = 30.0
    big_armor: RatioBand = field(default_factory=_default_big_armor)
    small_armor: RatioBand = field(default_factory=_default_small_armor)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MatcherConfig":
        return cls(
            max_angle_difference=d.get("max_angle_difference", 15.0),
            max_delta_y_height_ratio=d.get("max_delta_y_height_ratio", 30.0),
            big_armor=RatioBand.from_dict(d.get("big_armor", {}) or {}, _default_big_armor()),
            small_armor=RatioBand.from_dict(d.get("small_armor", {}) or {}, _default_small_armor()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_angle_difference": self.max_angle_difference,
            "max_delta_y_height_ratio": self.max_delta_y_height_ratio,
            "big_armor": self.big_armor.to_dict(),
            "small_armor": self.small_armor.to_dict(),
        }


@dataclass
class SelectorConfig:
    """
    Target selection, interest area and range model settings.

    Distance model: d = A * exp(-B * h) + C, with h the footprint height in
    pixels and d in centimeters.
    """
    screen_width: int = 1280
    screen_height: int = 1024
    locking_box_min_width: int = 240
    locking_box_min_height: int = 120
    width_expand_ratio: float = 1.0
    height_expand_ratio: float = 1.0
    distance_a: float = 1008.28
    distance_b: float = 0.08
    distance_c: float = 74.43

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SelectorConfig":
        return cls(
            screen_width=d.get("screen_width", 1280),
            screen_height=d.get("screen_height", 1024),
            locking_box_min_width=d.get("locking_box_min_width", 240),
            locking_box_min_height=d.get("locking_box_min_height", 120),
            width_expand_ratio=d.get("width_expand_ratio", 1.0),
            height_expand_ratio=d.get("height_expand_ratio", 1.0),
            distance_a=d.get("distance_a", 1008.28),
            distance_b=d.get("distance_b", 0.08),
            distance_c=d.get("distance_c", 74.43),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "screen_width": self.screen_width,
            "screen_height": self.screen_height,
            "locking_box_min_width": self.locking_box_min_width,
            "locking_box_min_height": self.locking_box_min_height,
            "width_expand_ratio": self.width_expand_ratio,
            "height_expand_ratio": self.height_expand_ratio,
            "distance_a": self.distance_a,
            "distance_b": self.distance_b,
            "distance_c": self.distance_c,
        }


@dataclass
class TrackGateConfig:
    """Lock hysteresis settings."""
    locking_startup_times: int = 5
    locking_approval_threshold: int = 2
    min_intersection_area_ratio: float = 0.6

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TrackGateConfig":
        return cls(
            locking_startup_times=d.get("locking_startup_times", 5),
            locking_approval_threshold=d.get("locking_approval_threshold", 2),
            min_intersection_area_ratio=d.get("min_intersection_area_ratio", 0.6),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locking_startup_times": self.locking_startup_times,
            "locking_approval_threshold": self.locking_approval_threshold,
            "min_intersection_area_ratio": self.min_intersection_area_ratio,
        }


@dataclass
class ParallelConfig:
    """Worker pool settings. max_workers=None lets the executor decide."""
    enabled: bool = True
    max_workers: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ParallelConfig":
        return cls(
            enabled=d.get("enabled", True),
            max_workers=d.get("max_workers"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"enabled": self.enabled}
        if self.max_workers is not None:
            d["max_workers"] = self.max_workers
        return d


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure. Profiles
    (per enemy color) are resolved before this object is built; see
    ``ops.config.apply_profile``.
    """
    light_bar: LightBarConfig = field(default_factory=LightBarConfig)
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    selector: SelectorConfig = field(default_factory=SelectorConfig)
    track_gate: TrackGateConfig = field(default_factory=TrackGateConfig)
    parallel: ParallelConfig = field(default_factory=ParallelConfig)
    enemy_color: Optional[str] = None
    log_path: str = "logs/armor_vision.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            light_bar=LightBarConfig.from_dict(d.get("light_bar", {}) or {}),
            matcher=MatcherConfig.from_dict(d.get("matcher", {}) or {}),
            selector=SelectorConfig.from_dict(d.get("selector", {}) or {}),
            track_gate=TrackGateConfig.from_dict(d.get("track_gate", {}) or {}),
            parallel=ParallelConfig.from_dict(d.get("parallel", {}) or {}),
            enemy_color=d.get("enemy_color"),
            log_path=d.get("log_path", "logs/armor_vision.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        d: Dict[str, Any] = {
            "light_bar": self.light_bar.to_dict(),
            "matcher": self.matcher.to_dict(),
            "selector": self.selector.to_dict(),
            "track_gate": self.track_gate.to_dict(),
            "parallel": self.parallel.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
        if self.enemy_color is not None:
            d["enemy_color"] = self.enemy_color
        return d
