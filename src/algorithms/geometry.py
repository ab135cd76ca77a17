"""
Rectangle geometry helpers.

OpenCV reports rotated rectangles with an ambiguous width/height/angle
assignment. Everything that compares angles or sizes across rectangles
goes through ``normalize`` first.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

import cv2
import numpy as np

from models.geometry import OrientedRectangle, Rect


def normalize(rect: OrientedRectangle) -> OrientedRectangle:
    """
    Canonicalize a rotated rectangle.

    The result has size = (length, width) with length >= width, and its angle
    describes the long axis within [0, 180). Normalizing an already
    normalized rectangle returns it unchanged.
    """
    w, h = rect.size
    if w >= h:
        length, width, angle = w, h, rect.angle
    else:
        length, width, angle = h, w, rect.angle + 90.0

    angle = angle % 180.0
    if angle >= 180.0:
        # -tiny % 180 rounds up to 180.0
        angle = 0.0

    return OrientedRectangle(center=rect.center, size=(length, width), angle=angle)


def center_distance(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def box_points(rect: OrientedRectangle) -> np.ndarray:
    """The 4 corner points of a rotated rectangle as a (4, 2) float32 array."""
    return cv2.boxPoints(rect.as_cv())


def enclosing_rectangle(points: np.ndarray) -> OrientedRectangle:
    """Minimum-area rotated rectangle enclosing a point set."""
    pts = np.asarray(points, dtype=np.float32).reshape(-1, 2)
    return OrientedRectangle.from_cv(cv2.minAreaRect(pts))


def bounding_rect(points: Iterable[Sequence[float]]) -> Rect:
    """
    Integer axis-aligned box around float points.

    Uses floor of the minimum and ceil of the maximum with an inclusive
    extent, the same convention as ``cv::RotatedRect::boundingRect``.
    """
    pts = np.asarray(list(points), dtype=np.float64).reshape(-1, 2)
    x1 = math.floor(float(pts[:, 0].min()))
    y1 = math.floor(float(pts[:, 1].min()))
    x2 = math.ceil(float(pts[:, 0].max()))
    y2 = math.ceil(float(pts[:, 1].max()))
    return Rect(x=x1, y=y1, width=x2 - x1 + 1, height=y2 - y1 + 1)


def footprint(*rects: OrientedRectangle) -> Rect:
    """
    Axis-aligned box of the minimum-area rectangle around all corners.

    For an armor pair this is the 8 corners of both light bars.
    """
    corners = np.vstack([box_points(r) for r in rects])
    enclosing = enclosing_rectangle(corners)
    return bounding_rect(box_points(enclosing))
