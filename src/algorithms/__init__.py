"""
Pure geometry and range algorithms used by the detection stages.
"""

from .geometry import (
    normalize,
    center_distance,
    box_points,
    enclosing_rectangle,
    bounding_rect,
    footprint,
)
from .distance import estimate_distance

__all__ = [
    "normalize",
    "center_distance",
    "box_points",
    "enclosing_rectangle",
    "bounding_rect",
    "footprint",
    "estimate_distance",
]
