"""
Monocular range model.

The armor footprint height in pixels maps to range through an empirical
exponential fit: d = A * exp(-B * h) + C. The result is in centimeters,
though the fit is only good to about a meter.
"""

from __future__ import annotations

import math


def estimate_distance(height: float, a: float, b: float, c: float) -> int:
    """
    Estimate target range in centimeters from footprint height in pixels.

    Args:
        height: Footprint height in pixels.
        a: Scale factor A.
        b: Decay factor B.
        c: Constant offset C.
    """
    return int(a * math.exp(-b * height) + c)
