"""
Tracking module.

Cross-frame lock state lives in tracking.gate.
"""

from .gate import (
    TrackGate,
    TrackState,
    CropDecision,
    Searching,
    Approving,
    Locked,
    advance,
    overlap_ratio,
)

__all__ = [
    "TrackGate",
    "TrackState",
    "CropDecision",
    "Searching",
    "Approving",
    "Locked",
    "advance",
    "overlap_ratio",
]
