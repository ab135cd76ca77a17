"""
Light bar extraction from a binary mask.

Each external contour is judged on its own: area, fill ratio against its
minimum-area rectangle, and orientation. Near-horizontal blobs are
rejected since a light bar always stands roughly upright.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import cv2
import numpy as np

from algorithms.geometry import normalize
from models.armor import LightBar
from models.config import LightBarConfig
from models.geometry import OrientedRectangle
from runtime.parallel import ConcurrentSink, WorkerPool, run_each

# Normalized long-axis angle window (degrees) for an upright bar
MIN_BAR_ANGLE = 20.0
MAX_BAR_ANGLE = 160.0


def evaluate_contour(contour: np.ndarray, config: LightBarConfig) -> Optional[LightBar]:
    """
    Turn one contour into a LightBar, or None if it fails a threshold.

    Args:
        contour: Contour points as returned by cv2.findContours.
        config: Extraction thresholds.
    """
    area = cv2.contourArea(contour)
    if area < config.min_area:
        return None

    raw = OrientedRectangle.from_cv(cv2.minAreaRect(contour))
    enclosing_area = raw.area
    if enclosing_area <= 0:
        return None

    if area / enclosing_area * 100 < config.min_filling_ratio:
        return None

    feature = normalize(raw)
    if feature.angle < MIN_BAR_ANGLE or feature.angle > MAX_BAR_ANGLE:
        return None

    return LightBar(raw=raw, feature=feature)


class LightBarExtractor:
    """
    Extracts light bars from a single-channel 0/255 mask.

    Contours are evaluated across the worker pool when one is given;
    the output order is not guaranteed.

    Example:
        extractor = LightBarExtractor(LightBarConfig(min_area=20))
        bars = extractor.extract(mask)
    """

    def __init__(self, config: LightBarConfig, pool: Optional[WorkerPool] = None):
        self.config = config
        self._pool = pool

    def extract(self, mask: np.ndarray) -> List[LightBar]:
        """
        Extract light bars from a binary mask.

        Args:
            mask: Single-channel binary mask (0 or 255).

        Returns:
            Accepted light bars; empty if nothing qualifies.
        """
        if mask.ndim != 2:
            raise ValueError(f"mask must be single-channel, got shape {mask.shape}")
        if mask.dtype != np.uint8:
            mask = mask.astype(np.uint8)

        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
        if not contours:
            return []

        sink: ConcurrentSink[LightBar] = ConcurrentSink()

        def _evaluate(contour: np.ndarray) -> None:
            bar = evaluate_contour(contour, self.config)
            if bar is not None:
                sink.append(bar)

        run_each(self._pool, contours, _evaluate)

        light_bars = sink.items()
        logging.debug(f"[LIGHTBAR] contours={len(contours)} accepted={len(light_bars)}")
        return light_bars
