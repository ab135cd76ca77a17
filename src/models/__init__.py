"""
Typed models for the armor vision pipeline.

Geometry, per-frame detection results and configuration are plain
dataclasses so every stage can pass them around without shared state.
"""

from .geometry import OrientedRectangle, Rect
from .armor import LightBar, ArmorCandidate, ScoredCandidate, SelectionResult
from .config import (
    Config,
    LightBarConfig,
    MatcherConfig,
    RatioBand,
    SelectorConfig,
    TrackGateConfig,
    ParallelConfig,
)

__all__ = [
    # Geometry
    "OrientedRectangle",
    "Rect",
    # Detection
    "LightBar",
    "ArmorCandidate",
    "ScoredCandidate",
    "SelectionResult",
    # Config
    "Config",
    "LightBarConfig",
    "MatcherConfig",
    "RatioBand",
    "SelectorConfig",
    "TrackGateConfig",
    "ParallelConfig",
]
