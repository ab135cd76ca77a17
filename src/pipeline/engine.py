"""
Pipeline engine for the armor vision system.

One call to ``ArmorPipeline.process`` runs a frame's mask through every
stage as a strict barrier sequence:

    mask -> light bars -> armor candidates -> selection -> crop decision

Each stage's output is handed to the next stage as an argument; nothing is
wired through long-lived fields. The only values kept across frames are
the last selection, the track gate state and the offset of the crop the
next mask will be produced from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from detection.light_bars import LightBarExtractor
from detection.matcher import ArmorMatcher
from detection.selector import ArmorSelector
from models.armor import ArmorCandidate, LightBar, SelectionResult
from models.config import Config
from runtime.parallel import WorkerPool
from tracking.gate import CropDecision, TrackGate


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        stats_log_interval: Frames between found-ratio debug messages.
    """
    stats_log_interval: int = 100


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    found_count: int = 0
    locked_frames: int = 0

    @property
    def found_ratio(self) -> float:
        if self.frame_count == 0:
            return 0.0
        return self.found_count / self.frame_count


@dataclass(frozen=True)
class FrameResult:
    """Everything one frame produced."""
    light_bars: List[LightBar]
    candidates: List[ArmorCandidate]
    selection: SelectionResult
    crop: CropDecision
    offset: Tuple[int, int] = (0, 0)


class ArmorPipeline:
    """
    Per-frame armor detection and tracking.

    Example:
        with create_pipeline_from_config(config) as pipeline:
            result = pipeline.process(mask)
            send(result.selection.to_dict())
            next_mask = crop_and_filter(frame, result.crop.crop)
    """

    def __init__(
        self,
        extractor: LightBarExtractor,
        matcher: ArmorMatcher,
        selector: ArmorSelector,
        gate: TrackGate,
        config: Optional[PipelineConfig] = None,
        pool: Optional[WorkerPool] = None,
    ):
        self.extractor = extractor
        self.matcher = matcher
        self.selector = selector
        self.gate = gate
        self.config = config or PipelineConfig()
        self.stats = PipelineStats()
        self._pool = pool
        self._last_selection = SelectionResult()
        self._next_offset: Tuple[int, int] = (0, 0)

    @property
    def last_selection(self) -> SelectionResult:
        return self._last_selection

    @property
    def next_offset(self) -> Tuple[int, int]:
        """Offset of the crop the next mask is expected to come from."""
        return self._next_offset

    @property
    def frame_size(self) -> Tuple[int, int]:
        return (self.selector.config.screen_width, self.selector.config.screen_height)

    def process(self, mask: np.ndarray, offset: Optional[Tuple[int, int]] = None) -> FrameResult:
        """
        Run one frame.

        Args:
            mask: Binary mask of the (possibly cropped) frame.
            offset: Origin of the crop the mask covers in the full frame.
                Defaults to the offset decided on the previous frame.

        Returns:
            FrameResult with every stage's output for this frame.
        """
        if offset is None:
            offset = self._next_offset

        light_bars = self.extractor.extract(mask)
        candidates = self.matcher.match(light_bars)
        selection = self.selector.select(candidates, offset, self._last_selection)
        crop = self.gate.update(selection.found, selection.interest_area, self.frame_size)

        self._last_selection = selection
        self._next_offset = crop.offset
        self._update_stats(selection, crop)

        return FrameResult(
            light_bars=light_bars,
            candidates=candidates,
            selection=selection,
            crop=crop,
            offset=offset,
        )

    def reset(self) -> None:
        """Forget the last target and lock, and restart statistics."""
        self.gate.reset()
        self._last_selection = SelectionResult()
        self._next_offset = (0, 0)
        self.stats = PipelineStats()

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
        logging.info(
            f"Pipeline stopped: frames={self.stats.frame_count}, "
            f"found={self.stats.found_count}"
        )

    def __enter__(self) -> "ArmorPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _update_stats(self, selection: SelectionResult, crop: CropDecision) -> None:
        self.stats.frame_count += 1
        if selection.found:
            self.stats.found_count += 1
        if crop.approved:
            self.stats.locked_frames += 1

        interval = self.config.stats_log_interval
        if interval > 0 and self.stats.frame_count % interval == 0:
            logging.debug(
                f"Pipeline stats: frames={self.stats.frame_count}, "
                f"found_ratio={self.stats.found_ratio:.1%}, "
                f"cropped={self.stats.locked_frames}"
            )


def create_pipeline_from_config(
    config: Config,
    pipeline_config: Optional[PipelineConfig] = None,
) -> ArmorPipeline:
    """
    Factory function to create an ArmorPipeline from typed config.

    Args:
        config: Typed application config (profile already applied).
        pipeline_config: Engine settings.
    """
    pool = None
    if config.parallel.enabled:
        pool = WorkerPool(max_workers=config.parallel.max_workers)

    extractor = LightBarExtractor(config.light_bar, pool=pool)
    matcher = ArmorMatcher(config.matcher, pool=pool)
    selector = ArmorSelector(config.selector, pool=pool)
    gate = TrackGate(config.track_gate)

    logging.info(
        f"Pipeline created: screen={config.selector.screen_width}x{config.selector.screen_height}, "
        f"enemy_color={config.enemy_color}, parallel={pool is not None}"
    )
    return ArmorPipeline(extractor, matcher, selector, gate, config=pipeline_config, pool=pool)
