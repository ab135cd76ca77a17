"""
Tests for light bar extraction from binary masks.
"""

import cv2
import numpy as np
import pytest

from detection.light_bars import LightBarExtractor, evaluate_contour
from models.config import LightBarConfig
from runtime.parallel import WorkerPool


def _blank(width=640, height=480):
    return np.zeros((height, width), dtype=np.uint8)


def _bar(mask, x, y, w, h):
    cv2.rectangle(mask, (x, y), (x + w - 1, y + h - 1), 255, -1)
    return mask


class TestExtractBasics:
    def test_empty_mask(self):
        extractor = LightBarExtractor(LightBarConfig())

        assert extractor.extract(_blank()) == []

    def test_all_white_mask_does_not_fail(self):
        """A saturated mask is one big horizontal blob; no special casing."""
        mask = np.full((480, 640), 255, dtype=np.uint8)
        extractor = LightBarExtractor(LightBarConfig())

        assert extractor.extract(mask) == []

    def test_upright_bar_accepted(self):
        mask = _bar(_blank(), 100, 100, 10, 50)
        extractor = LightBarExtractor(LightBarConfig(min_area=10, min_filling_ratio=50))

        bars = extractor.extract(mask)

        assert len(bars) == 1
        bar = bars[0]
        assert bar.angle == pytest.approx(90, abs=1)
        assert bar.length == pytest.approx(49, abs=1)
        assert bar.width == pytest.approx(9, abs=1)
        assert bar.center[0] == pytest.approx(104.5, abs=1)
        assert bar.center[1] == pytest.approx(124.5, abs=1)

    def test_raw_rectangle_retained(self):
        mask = _bar(_blank(), 100, 100, 10, 50)
        bars = LightBarExtractor(LightBarConfig()).extract(mask)

        raw = bars[0].raw
        assert raw.length == pytest.approx(bars[0].length)
        assert raw.width == pytest.approx(bars[0].width)

    def test_horizontal_bar_rejected(self):
        mask = _bar(_blank(), 100, 100, 50, 10)
        extractor = LightBarExtractor(LightBarConfig())

        assert extractor.extract(mask) == []

    def test_tilted_bar_within_window_accepted(self):
        mask = _blank()
        box = cv2.boxPoints(((300, 240), (10, 60), 25)).astype(np.int32)
        cv2.fillPoly(mask, [box], 255)

        bars = LightBarExtractor(LightBarConfig()).extract(mask)

        assert len(bars) == 1
        assert 20 <= bars[0].angle <= 160

    def test_small_blob_rejected_by_area(self):
        mask = _bar(_blank(), 100, 100, 3, 3)
        extractor = LightBarExtractor(LightBarConfig(min_area=10))

        assert extractor.extract(mask) == []

    def test_triangle_rejected_by_fill_ratio(self):
        """A triangle fills at most half of its enclosing rectangle."""
        mask = _blank()
        triangle = np.array([[200, 100], [215, 200], [185, 200]], dtype=np.int32)
        cv2.fillPoly(mask, [triangle], 255)

        strict = LightBarExtractor(LightBarConfig(min_area=10, min_filling_ratio=80))
        assert strict.extract(mask) == []

    def test_multi_channel_mask_rejected(self):
        mask = np.zeros((480, 640, 3), dtype=np.uint8)

        with pytest.raises(ValueError):
            LightBarExtractor(LightBarConfig()).extract(mask)

    def test_non_uint8_mask_converted(self):
        mask = _bar(_blank(), 100, 100, 10, 50).astype(np.int32)

        bars = LightBarExtractor(LightBarConfig()).extract(mask)

        assert len(bars) == 1


class TestEvaluateContour:
    def test_zero_area_contour(self):
        contour = np.array([[[10, 10]], [[10, 40]]], dtype=np.int32)

        assert evaluate_contour(contour, LightBarConfig(min_area=0, min_filling_ratio=0)) is None


class TestMonotonicity:
    def _mixed_mask(self):
        mask = _blank()
        for i, (w, h) in enumerate([(4, 12), (6, 20), (8, 30), (10, 45), (12, 60)]):
            _bar(mask, 40 + i * 80, 100, w, h)
        return mask

    def test_raising_min_area_never_adds_bars(self):
        mask = self._mixed_mask()
        counts = []
        for min_area in [0, 10, 50, 100, 200, 400, 800]:
            extractor = LightBarExtractor(LightBarConfig(min_area=min_area, min_filling_ratio=50))
            counts.append(len(extractor.extract(mask)))

        assert counts[0] == 5
        assert all(a >= b for a, b in zip(counts, counts[1:]))
        assert counts[-1] == 0


class TestParallelExtraction:
    def test_pool_matches_serial(self):
        mask = _blank()
        for i in range(6):
            _bar(mask, 30 + i * 100, 50 + i * 20, 10, 50)

        serial = LightBarExtractor(LightBarConfig()).extract(mask)
        with WorkerPool(max_workers=4) as pool:
            parallel = LightBarExtractor(LightBarConfig(), pool=pool).extract(mask)

        assert len(serial) == 6
        assert sorted(b.center for b in serial) == sorted(b.center for b in parallel)
