"""
Debug overlays for a processed frame.

Drawing happens on a copy in full-frame coordinates; light bars and
candidates are shifted by the frame's crop offset.
"""

from __future__ import annotations

import cv2
import numpy as np

from algorithms.geometry import box_points

from .engine import FrameResult

# Colors (BGR)
COLOR_LIGHT_BAR = (0, 255, 255)  # Yellow
COLOR_CANDIDATE = (255, 201, 0)  # Cyan
COLOR_TARGET = (0, 0, 255)  # Red
COLOR_CROP_LOCKED = (0, 255, 0)  # Green
COLOR_CROP_SEARCH = (128, 128, 128)  # Gray


def draw_overlays(frame: np.ndarray, result: FrameResult) -> np.ndarray:
    """
    Draw light bars, candidates, the selected target and the next crop.

    Args:
        frame: Full-resolution BGR frame.
        result: Output of ArmorPipeline.process for this frame.

    Returns:
        Annotated copy of the frame.
    """
    annotated = frame.copy()
    ox, oy = result.offset
    shift = np.array([ox, oy], dtype=np.float32)

    for bar in result.light_bars:
        pts = (box_points(bar.raw) + shift).astype(np.int32)
        cv2.polylines(annotated, [pts], True, COLOR_LIGHT_BAR, 1)

    for candidate in result.candidates:
        (x1, y1), (x2, y2) = candidate.first.center, candidate.second.center
        cv2.line(
            annotated,
            (int(x1 + ox), int(y1 + oy)),
            (int(x2 + ox), int(y2 + oy)),
            COLOR_CANDIDATE,
            1,
        )

    crop = result.crop.crop
    crop_color = COLOR_CROP_LOCKED if result.crop.approved else COLOR_CROP_SEARCH
    x1, y1, x2, y2 = crop.as_xyxy()
    cv2.rectangle(annotated, (x1, y1), (x2 - 1, y2 - 1), crop_color, 2)

    selection = result.selection
    if selection.found:
        cx, cy = selection.center
        cv2.drawMarker(annotated, (cx, cy), COLOR_TARGET, cv2.MARKER_CROSS, 20, 2)
        label = f"{selection.distance}cm"
        cv2.putText(annotated, label, (cx + 8, cy - 8),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, COLOR_TARGET, 1)

    return annotated
