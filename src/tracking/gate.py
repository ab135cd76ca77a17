"""
Lock hysteresis deciding where to look in the next frame.

The gate moves between three phases:

- Searching: no lock, no evidence. The next frame is processed in full.
- Approving(remaining): a target was seen; ``remaining`` more overlapping
  detections are needed before locking.
- Locked(remaining): the next frame is cropped to the interest area.
  ``remaining`` missed frames are tolerated before the lock drops.

A single lucky detection never locks, and a single missed frame never
unlocks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from models.config import TrackGateConfig
from models.geometry import Rect


@dataclass(frozen=True)
class Searching:
    """Not locked, no evidence yet."""


@dataclass(frozen=True)
class Approving:
    """Not locked, accumulating overlapping detections."""
    remaining: int


@dataclass(frozen=True)
class Locked:
    """Locked on a target; remaining is the number of misses tolerated."""
    remaining: int


LockPhase = Union[Searching, Approving, Locked]


@dataclass(frozen=True)
class TrackState:
    """
    Cross-frame gate state.

    Attributes:
        phase: Current lock phase.
        last_interest_area: Interest area of the most recent detection.
    """
    phase: LockPhase = field(default_factory=Searching)
    last_interest_area: Rect = field(default_factory=Rect)

    @property
    def is_locked(self) -> bool:
        return isinstance(self.phase, Locked)


@dataclass(frozen=True)
class CropDecision:
    """
    Where the next frame should be processed.

    Attributes:
        approved: Whether cropping was approved.
        crop: Region of the full frame to process next.
        offset: Origin of crop, to translate crop coordinates back.
    """
    approved: bool
    crop: Rect
    offset: Tuple[int, int] = (0, 0)


def overlap_ratio(interest_area: Rect, last_interest_area: Rect) -> float:
    """Share of interest_area covered by last_interest_area (0 for an empty area)."""
    area = interest_area.area
    if area == 0:
        return 0.0
    return interest_area.intersection(last_interest_area).area / area


def _lock(config: TrackGateConfig) -> LockPhase:
    if config.locking_startup_times <= 0:
        return Searching()
    return Locked(config.locking_startup_times)


def advance(
    phase: LockPhase,
    found: bool,
    overlap: float,
    config: TrackGateConfig,
) -> Tuple[LockPhase, bool]:
    """
    Compute the next phase and whether cropping is approved this frame.

    Args:
        phase: Current phase.
        found: Whether a target was selected this frame.
        overlap: Overlap ratio of this frame's interest area with the last
            one; ignored unless found and not locked.
        config: Gate settings.

    Returns:
        Tuple of (next phase, crop approved).
    """
    if found:
        if isinstance(phase, Locked):
            return _lock(config), True

        if isinstance(phase, Approving):
            remaining = phase.remaining
        else:
            remaining = config.locking_approval_threshold

        if overlap > config.min_intersection_area_ratio:
            remaining -= 1
        else:
            remaining = config.locking_approval_threshold

        if remaining <= 0:
            return _lock(config), True
        return Approving(remaining), False

    if isinstance(phase, Locked):
        remaining = phase.remaining - 1
        # The tick that exhausts the lock still crops this frame
        if remaining <= 0:
            return Searching(), True
        return Locked(remaining), True

    return phase, False


class TrackGate:
    """
    Per-frame hysteresis state machine choosing the next crop.

    The state is only touched by ``update``, which runs on the control
    thread after all parallel stages of the frame have finished.

    Example:
        gate = TrackGate(TrackGateConfig())
        decision = gate.update(result.found, result.interest_area, (1280, 1024))
    """

    def __init__(self, config: TrackGateConfig, state: Optional[TrackState] = None):
        self.config = config
        self._state = state if state is not None else TrackState()
        logging.info(
            f"Track gate initialized (startup={config.locking_startup_times}, "
            f"approval={config.locking_approval_threshold}, "
            f"min_overlap={config.min_intersection_area_ratio})"
        )

    @property
    def state(self) -> TrackState:
        return self._state

    @property
    def phase(self) -> LockPhase:
        return self._state.phase

    @property
    def locking_remain_times(self) -> int:
        """Misses left before the lock drops; 0 when not locked."""
        phase = self._state.phase
        return phase.remaining if isinstance(phase, Locked) else 0

    @property
    def approval_required_times(self) -> int:
        """Overlapping detections still needed before locking."""
        phase = self._state.phase
        if isinstance(phase, Approving):
            return phase.remaining
        return self.config.locking_approval_threshold

    def update(
        self,
        found: bool,
        interest_area: Optional[Rect],
        frame_size: Tuple[int, int],
    ) -> CropDecision:
        """
        Advance one frame.

        Args:
            found: Whether a target was selected this frame.
            interest_area: The selected target's interest area (ignored when
                not found).
            frame_size: Full frame (width, height), used when not cropping.

        Returns:
            CropDecision for the next frame.
        """
        state = self._state
        overlap = 0.0
        if found and interest_area is not None and not state.is_locked:
            overlap = overlap_ratio(interest_area, state.last_interest_area)

        phase, approved = advance(state.phase, found, overlap, self.config)

        last_interest_area = state.last_interest_area
        if found and interest_area is not None:
            last_interest_area = interest_area

        self._state = TrackState(phase=phase, last_interest_area=last_interest_area)
        self._log_transition(state.phase, phase)

        if approved:
            return CropDecision(
                approved=True,
                crop=last_interest_area,
                offset=last_interest_area.origin,
            )
        return CropDecision(
            approved=False,
            crop=Rect.full_frame(frame_size[0], frame_size[1]),
            offset=(0, 0),
        )

    def reset(self) -> None:
        """Drop any lock and forget the last interest area."""
        self._state = TrackState()

    def _log_transition(self, before: LockPhase, after: LockPhase) -> None:
        if isinstance(after, Locked) and not isinstance(before, Locked):
            logging.info(f"[GATE] target locked (remaining={after.remaining})")
        elif isinstance(before, Locked) and not isinstance(after, Locked):
            logging.info("[GATE] lock lost, searching full frame")
        else:
            logging.debug(f"[GATE] phase={after}")
