"""
Pipeline module for the armor vision system.

The pipeline runs each frame through:
- Light bar extraction from the binary mask
- Armor matching over light bar pairs
- Target selection and range estimation
- Track gating that decides the next frame's crop
"""

from .engine import (
    ArmorPipeline,
    FrameResult,
    PipelineConfig,
    PipelineStats,
    create_pipeline_from_config,
)
from .annotate import draw_overlays

__all__ = [
    "ArmorPipeline",
    "FrameResult",
    "PipelineConfig",
    "PipelineStats",
    "create_pipeline_from_config",
    "draw_overlays",
]
