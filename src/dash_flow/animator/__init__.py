"""Frame timing, overlay geometry and rasterization for dashed-stroke animations."""

from .frame_document import PreparedDocument, apply_frame_state, prepare_document
from .frame_scheduler import FrameState, compute_frame_state, glint_pace_power, normalized_time
from .overlays import BaseOverlay, GlintOverlay, GradientSweep, OverlaySpec, select_overlay
from .raster_animation import iter_raster_frames, render_frames
from .rasterizer import BaseRasterizer, CairoSvgRasterizer
from .scene import DashedPath, VectorScene, load_scene, load_scene_file
from .speed import SPEED_PRESETS, SpeedConfig, SpeedCurve, SpeedCurveMapper, SpeedPreset

__all__ = [
    "PreparedDocument",
    "apply_frame_state",
    "prepare_document",
    "FrameState",
    "compute_frame_state",
    "glint_pace_power",
    "normalized_time",
    "BaseOverlay",
    "GlintOverlay",
    "GradientSweep",
    "OverlaySpec",
    "select_overlay",
    "iter_raster_frames",
    "render_frames",
    "BaseRasterizer",
    "CairoSvgRasterizer",
    "DashedPath",
    "VectorScene",
    "load_scene",
    "load_scene_file",
    "SPEED_PRESETS",
    "SpeedConfig",
    "SpeedCurve",
    "SpeedCurveMapper",
    "SpeedPreset",
]
