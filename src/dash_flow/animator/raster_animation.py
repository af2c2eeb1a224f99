"""Raster (Pillow) frame generation for dash-flow animations."""

import logging
import threading
from typing import Callable, Iterator

from PIL import Image

from ..config import AnimationConfig
from ..errors import GenerationCancelledError, InvalidSceneError, RasterContextError, RasterizerError
from .frame_document import apply_frame_state, prepare_document
from .frame_scheduler import compute_frame_state
from .overlays import select_overlay
from .rasterizer import BaseRasterizer, CairoSvgRasterizer
from .scene import VectorScene

logger = logging.getLogger(__name__)

FrameCallback = Callable[[int], None]


def allocate_surface(width: int, height: int, background: str) -> Image.Image:
    """
    Allocate an opaque RGB surface filled with the background color.

    Raises:
        RasterContextError: If the surface cannot be allocated
    """
    if width <= 0 or height <= 0:
        raise RasterContextError(f"Cannot allocate a {width}x{height} surface")
    try:
        return Image.new("RGB", (width, height), background)
    except (MemoryError, ValueError) as e:
        raise RasterContextError(f"Cannot allocate a {width}x{height} surface: {e}")


def iter_raster_frames(
    scene: VectorScene,
    frame_count: int,
    config: AnimationConfig,
    *,
    rasterizer: BaseRasterizer | None = None,
    cancel_event: threading.Event | None = None,
) -> Iterator[Image.Image]:
    """
    Render the frames of one animation cycle in index order.

    The scene is parsed and restyled once; each frame only patches offsets.
    Errors raised by the rasterizer propagate unchanged.
    """
    if not scene.paths:
        raise InvalidSceneError("No dashed paths to animate")
    if frame_count < 1:
        raise ValueError(f"frame_count must be at least 1 (got {frame_count})")

    overlay = select_overlay(config)
    document = prepare_document(scene, config, overlay)
    target = rasterizer or CairoSvgRasterizer()
    logger.info(
        "Rendering %d frames at %dx%d (overlay: %s)",
        frame_count, document.width, document.height, overlay.name if overlay else "none",
    )

    for index in range(frame_count):
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelledError(f"Cancelled before frame {index + 1} of {frame_count}")

        state = compute_frame_state(index, frame_count, document.dash_lengths, document.overlay_specs)
        serialized = apply_frame_state(document, state)
        surface = allocate_surface(document.width, document.height, config.background)
        rendered = target.rasterize(serialized, document.width, document.height)
        yield _composite(surface, rendered)
        logger.debug("Rendered frame %d/%d (t=%.3f)", index + 1, frame_count, state.t)


def render_frames(
    scene: VectorScene,
    frame_count: int,
    config: AnimationConfig,
    *,
    rasterizer: BaseRasterizer | None = None,
    on_frame: FrameCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> list[Image.Image]:
    """
    Render every frame into a list.

    Args:
        scene: Parsed scene with its dashed paths
        frame_count: Number of frames in the cycle
        config: Animation settings for this pass
        rasterizer: SVG rasterizer, cairosvg by default
        on_frame: Called with the 1-based index after each frame
        cancel_event: Checked between frames

    Returns:
        Opaque RGB frames in index order
    """
    frames: list[Image.Image] = []
    for image in iter_raster_frames(
        scene, frame_count, config, rasterizer=rasterizer, cancel_event=cancel_event
    ):
        frames.append(image)
        if on_frame is not None:
            on_frame(len(frames))
    return frames


def _composite(surface: Image.Image, rendered: Image.Image) -> Image.Image:
    if rendered.size != surface.size:
        raise RasterizerError(
            f"Rasterizer returned {rendered.size[0]}x{rendered.size[1]}, "
            f"expected {surface.size[0]}x{surface.size[1]}"
        )
    combined = surface.convert("RGBA")
    combined.alpha_composite(rendered.convert("RGBA"))
    return combined.convert("RGB")
