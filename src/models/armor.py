"""
Detection models for light bars, armor candidates and selection results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .geometry import OrientedRectangle, Rect


@dataclass(frozen=True)
class LightBar:
    """
    A light bar accepted by the extractor.

    Attributes:
        raw: The rectangle exactly as ``cv2.minAreaRect`` reported it.
        feature: The normalized rectangle (size = (length, width), angle of
            the long axis in [0, 180)).
    """
    raw: OrientedRectangle
    feature: OrientedRectangle

    @property
    def center(self) -> Tuple[float, float]:
        return self.feature.center

    @property
    def length(self) -> float:
        return self.feature.size[0]

    @property
    def width(self) -> float:
        return self.feature.size[1]

    @property
    def angle(self) -> float:
        return self.feature.angle


@dataclass(frozen=True)
class ArmorCandidate:
    """
    An unordered pair of light bars from the same frame that passed every
    matching gate.
    """
    first: LightBar
    second: LightBar

    @property
    def raw_rectangles(self) -> Tuple[OrientedRectangle, OrientedRectangle]:
        return (self.first.raw, self.second.raw)

    @property
    def midpoint(self) -> Tuple[float, float]:
        (x1, y1), (x2, y2) = self.first.center, self.second.center
        return ((x1 + x2) / 2, (y1 + y2) / 2)


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with its selection score. Only lives during selection."""
    score: float
    candidate: ArmorCandidate


@dataclass(frozen=True)
class SelectionResult:
    """
    Outcome of target selection for one frame.

    When nothing is found, center, distance and interest_area keep the values
    of the last successful selection.

    Attributes:
        found: Whether a target was selected this frame.
        center: Target center (x, y) in full-frame pixels.
        distance: Estimated range in centimeters.
        interest_area: Region to crop around the target next frame.
    """
    found: bool = False
    center: Tuple[int, int] = (0, 0)
    distance: int = 0
    interest_area: Rect = field(default_factory=Rect)

    def to_dict(self) -> Dict[str, Any]:
        """Plain numeric fields consumed by the transmitter."""
        return {
            "found": self.found,
            "x": self.center[0],
            "y": self.center[1],
            "distance": self.distance,
        }
