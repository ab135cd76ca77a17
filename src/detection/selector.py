"""
Armor selection: pick one target among the candidates.

Candidates are scored in parallel. The score favors large plates near the
screen center:

    score = span * bar_length / offset_distance ** 2

where span is the gap between the two bar centers, bar_length the longer
bar, and offset_distance the distance from the pair midpoint (in full-frame
coordinates) to the screen center.

The winner's footprint drives the next interest area and the range
estimate. Coordinates coming in are relative to the current crop; the
offset translates them back to the full frame.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from algorithms.distance import estimate_distance
from algorithms.geometry import center_distance, footprint
from models.armor import ArmorCandidate, ScoredCandidate, SelectionResult
from models.config import SelectorConfig
from models.geometry import Rect
from runtime.parallel import MaxReducer, WorkerPool, run_each

# Offset distances below this are treated as dead center
OFFSET_EPSILON = 1e-6


def score_candidate(
    candidate: ArmorCandidate,
    offset: Tuple[int, int],
    config: SelectorConfig,
) -> float:
    """
    Score one candidate. A candidate sitting on the screen center scores inf.

    Args:
        candidate: The armor candidate.
        offset: Global offset of the current crop.
        config: Selector settings (screen size).
    """
    first, second = candidate.first, candidate.second
    span = center_distance(first.center, second.center)
    bar_length = max(first.length, second.length)

    mx, my = candidate.midpoint
    screen_center = (config.screen_width / 2, config.screen_height / 2)
    offset_distance = center_distance((mx + offset[0], my + offset[1]), screen_center)

    if offset_distance < OFFSET_EPSILON:
        return math.inf
    return span * bar_length / (offset_distance * offset_distance)


def expand_interest_area(
    armor_footprint: Rect,
    offset: Tuple[int, int],
    config: SelectorConfig,
) -> Rect:
    """
    Grow a footprint into the interest area for the next frame.

    The size is scaled by (ratio + 1) and floored to the locking box
    minimum, the box is re-centered on the footprint in full-frame
    coordinates, then clamped: origin first, then size against the screen.
    """
    width = int(armor_footprint.width * (config.width_expand_ratio + 1))
    if width < config.locking_box_min_width:
        width = config.locking_box_min_width
    height = int(armor_footprint.height * (config.height_expand_ratio + 1))
    if height < config.locking_box_min_height:
        height = config.locking_box_min_height

    x = int(offset[0] + armor_footprint.x - 0.5 * (width - armor_footprint.width))
    if x < 0:
        x = 0
    y = int(offset[1] + armor_footprint.y - 0.5 * (height - armor_footprint.height))
    if y < 0:
        y = 0

    if x + width > config.screen_width:
        width = config.screen_width - x
    if y + height > config.screen_height:
        height = config.screen_height - y

    return Rect(x=x, y=y, width=width, height=height)


class ArmorSelector:
    """
    Selects the best armor candidate and derives aim, range and interest area.

    The selector holds no per-frame state; the previous result is passed in
    so that a missed frame keeps the last known center, distance and
    interest area.
    """

    def __init__(self, config: SelectorConfig, pool: Optional[WorkerPool] = None):
        self.config = config
        self._pool = pool

    def rank(
        self,
        candidates: Sequence[ArmorCandidate],
        offset: Tuple[int, int],
    ) -> Optional[ScoredCandidate]:
        """Score all candidates concurrently and return the best one."""
        if not candidates:
            return None

        reducer: MaxReducer[ArmorCandidate] = MaxReducer()

        def _score(candidate: ArmorCandidate) -> None:
            reducer.push(score_candidate(candidate, offset, self.config), candidate)

        run_each(self._pool, candidates, _score)

        best = reducer.best()
        if best is None:
            return None
        return ScoredCandidate(score=best[0], candidate=best[1])

    def select(
        self,
        candidates: Sequence[ArmorCandidate],
        offset: Tuple[int, int] = (0, 0),
        previous: Optional[SelectionResult] = None,
    ) -> SelectionResult:
        """
        Pick the target for this frame.

        Args:
            candidates: Armor candidates of the current frame.
            offset: Global offset of the crop the candidates were found in.
            previous: Result of the last frame.

        Returns:
            SelectionResult; found=False with the previous values otherwise.
        """
        if previous is None:
            previous = SelectionResult()

        best = self.rank(candidates, offset)
        if best is None:
            return replace(previous, found=False)

        candidate = best.candidate
        armor_footprint = footprint(*candidate.raw_rectangles)
        interest_area = expand_interest_area(armor_footprint, offset, self.config)
        distance = estimate_distance(
            armor_footprint.height,
            self.config.distance_a,
            self.config.distance_b,
            self.config.distance_c,
        )

        mx, my = candidate.midpoint
        center = (int(mx) + offset[0], int(my) + offset[1])

        logging.debug(
            f"[SELECT] candidates={len(candidates)} score={best.score:.4f} "
            f"center={center} footprint={armor_footprint.width}x{armor_footprint.height} "
            f"distance={distance}cm"
        )

        return SelectionResult(
            found=True,
            center=center,
            distance=distance,
            interest_area=interest_area,
        )
