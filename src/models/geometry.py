"""
Geometry models shared by every detection stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class OrientedRectangle:
    """
    A rotated rectangle as produced by ``cv2.minAreaRect``.

    The raw form carries OpenCV's +-90 degree ambiguity: the same shape can be
    reported with width and height swapped and the angle shifted by 90.
    Use ``algorithms.geometry.normalize`` before comparing angles or sizes.

    Attributes:
        center: Center point (x, y) in pixels.
        size: (width, height) in pixels.
        angle: Rotation of the width side in degrees.
    """
    center: Tuple[float, float]
    size: Tuple[float, float]
    angle: float

    @property
    def length(self) -> float:
        """Long side."""
        return max(self.size)

    @property
    def width(self) -> float:
        """Short side."""
        return min(self.size)

    @property
    def area(self) -> float:
        return self.size[0] * self.size[1]

    def as_cv(self) -> Tuple[Tuple[float, float], Tuple[float, float], float]:
        """Return as the ``((cx, cy), (w, h), angle)`` tuple OpenCV expects."""
        return (
            (float(self.center[0]), float(self.center[1])),
            (float(self.size[0]), float(self.size[1])),
            float(self.angle),
        )

    @classmethod
    def from_cv(cls, rect) -> "OrientedRectangle":
        """Adapter: create from a ``cv2.minAreaRect`` result."""
        (cx, cy), (w, h), angle = rect
        return cls(center=(float(cx), float(cy)), size=(float(w), float(h)), angle=float(angle))


@dataclass(frozen=True)
class Rect:
    """
    Integer axis-aligned rectangle in pixel coordinates.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent.
        height: Vertical extent.
    """
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def area(self) -> int:
        if self.width <= 0 or self.height <= 0:
            return 0
        return self.width * self.height

    @property
    def origin(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    def intersection(self, other: "Rect") -> "Rect":
        """Overlapping region, or an empty Rect when the two do not overlap."""
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x + self.width, other.x + other.width)
        y2 = min(self.y + self.height, other.y + other.height)
        if x2 <= x1 or y2 <= y1:
            return Rect()
        return Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def as_xyxy(self) -> Tuple[int, int, int, int]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @classmethod
    def from_tuple(cls, t: Tuple[int, int, int, int]) -> "Rect":
        """Create from (x, y, width, height) tuple."""
        return cls(x=int(t[0]), y=int(t[1]), width=int(t[2]), height=int(t[3]))

    @classmethod
    def full_frame(cls, frame_width: int, frame_height: int) -> "Rect":
        return cls(x=0, y=0, width=frame_width, height=frame_height)
