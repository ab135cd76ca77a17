"""
Armor matching: pairs of light bars that could bound one armor plate.

Every unordered pair of light bars is built up front, then the pairs are
judged in parallel by four geometric gates on normalized features:

1. Angle: the two bars lean the same way.
2. Vertical alignment: centers at roughly the same height.
3. Height-distance: bar length against the gap, inside the big or small
   armor band (inclusive bounds).
4. Width-distance: bar width against the gap, inside the big or small
   armor band (exclusive bounds).

Gates 3 and 4 differ in bound inclusiveness.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from algorithms.geometry import center_distance
from models.armor import ArmorCandidate, LightBar
from models.config import MatcherConfig, RatioBand
from runtime.parallel import ConcurrentSink, WorkerPool, run_each

LightBarPair = Tuple[LightBar, LightBar]


def make_pairs(light_bars: Sequence[LightBar]) -> List[LightBarPair]:
    """All n*(n-1)/2 unordered pairs of distinct light bars."""
    return list(combinations(light_bars, 2))


def angle_gate(first: LightBar, second: LightBar, config: MatcherConfig) -> bool:
    return abs(first.angle - second.angle) <= config.max_angle_difference


def vertical_alignment_gate(first: LightBar, second: LightBar, config: MatcherConfig) -> bool:
    height = max(first.length, second.length)
    if height <= 0:
        return False
    delta_y = abs(first.center[1] - second.center[1])
    return delta_y / height * 100 <= config.max_delta_y_height_ratio


def _in_closed(value: float, low: float, high: float) -> bool:
    return low <= value <= high


def _in_open(value: float, low: float, high: float) -> bool:
    return low < value < high


def height_distance_gate(first: LightBar, second: LightBar, config: MatcherConfig) -> bool:
    distance = center_distance(first.center, second.center)
    if distance <= 0:
        return False
    ratio = max(first.length, second.length) / distance * 100
    return _band_matches(ratio, config.big_armor, config.small_armor, height=True)


def width_distance_gate(first: LightBar, second: LightBar, config: MatcherConfig) -> bool:
    distance = center_distance(first.center, second.center)
    if distance <= 0:
        return False
    ratio = max(first.width, second.width) / distance * 100
    return _band_matches(ratio, config.big_armor, config.small_armor, height=False)


def _band_matches(ratio: float, big: RatioBand, small: RatioBand, height: bool) -> bool:
    """Either armor band is enough; height bands are closed, width bands open."""
    if height:
        return (
            _in_closed(ratio, big.min_height_distance_ratio, big.max_height_distance_ratio)
            or _in_closed(ratio, small.min_height_distance_ratio, small.max_height_distance_ratio)
        )
    return (
        _in_open(ratio, big.min_width_distance_ratio, big.max_width_distance_ratio)
        or _in_open(ratio, small.min_width_distance_ratio, small.max_width_distance_ratio)
    )


def is_armor_pair(first: LightBar, second: LightBar, config: MatcherConfig) -> bool:
    """True when the pair passes all four gates. Symmetric in its arguments."""
    return (
        angle_gate(first, second, config)
        and vertical_alignment_gate(first, second, config)
        and height_distance_gate(first, second, config)
        and width_distance_gate(first, second, config)
    )


class ArmorMatcher:
    """
    Matches light bars into armor candidates.

    Pair generation is serial and cheap; gate evaluation fans out over the
    worker pool when one is given.
    """

    def __init__(self, config: MatcherConfig, pool: Optional[WorkerPool] = None):
        self.config = config
        self._pool = pool

    def match(self, light_bars: Sequence[LightBar]) -> List[ArmorCandidate]:
        """
        Find every light bar pair that could be an armor plate.

        Args:
            light_bars: Light bars from the current frame.

        Returns:
            Armor candidates in no particular order; empty for fewer than
            two light bars.
        """
        pairs = make_pairs(light_bars)
        if not pairs:
            return []

        sink: ConcurrentSink[ArmorCandidate] = ConcurrentSink()

        def _evaluate(pair: LightBarPair) -> None:
            first, second = pair
            if is_armor_pair(first, second, self.config):
                sink.append(ArmorCandidate(first=first, second=second))

        run_each(self._pool, pairs, _evaluate)

        candidates = sink.items()
        logging.debug(f"[MATCH] pairs={len(pairs)} candidates={len(candidates)}")
        return candidates
