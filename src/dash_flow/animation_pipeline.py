"""Shared animation orchestration used by CLI and web app entry points."""

import threading
from contextlib import contextmanager
from typing import Any, Iterator

from .animator.raster_animation import render_frames
from .animator.rasterizer import BaseRasterizer
from .animator.scene import VectorScene, load_scene
from .animator.speed import SpeedCurveMapper
from .config import AnimationConfig, EncoderOptions
from .constants import DEFAULT_FPS
from .errors import DashFlowError, InvalidSceneError
from .output import encode_frames, resolve_output_provider
from .output.base import OutputProvider
from .progress import ProgressTracker, StepStatus

PIPELINE_STEPS: tuple[tuple[str, str], ...] = (
    ("scene", "Load scene"),
    ("render", "Render frames"),
    ("encode", "Encode animation"),
)


def frame_delay_ms(fps: int) -> int:
    """Per-frame delay for the output container."""
    return round(1000 / fps)


@contextmanager
def tracked_step(tracker: ProgressTracker, step_id: str) -> Iterator[None]:
    """Mark a step in progress, then completed, or errored if the body raises."""
    tracker.update_step(step_id, status=StepStatus.IN_PROGRESS)
    try:
        yield
    except DashFlowError as e:
        if e.stage is None:
            e.stage = step_id
        tracker.set_error(str(e), step_id)
        raise
    except Exception as e:
        tracker.set_error(str(e) or type(e).__name__, step_id)
        raise
    tracker.update_step(step_id, status=StepStatus.COMPLETED, progress=100)


def encode_animation(
    scene: VectorScene | str | bytes,
    config: AnimationConfig,
    output_path: str = "animation.gif",
    *,
    fps: int = DEFAULT_FPS,
    encoder_options: EncoderOptions | None = None,
    provider: OutputProvider[Any] | None = None,
    rasterizer: BaseRasterizer | None = None,
    tracker: ProgressTracker | None = None,
    speed_mapper: SpeedCurveMapper | None = None,
    cancel_event: threading.Event | None = None,
) -> bytes:
    """
    Render a dashed-stroke scene and encode it for the given output path.

    Args:
        scene: A parsed scene or raw SVG markup
        config: Animation settings
        output_path: Output path; its extension picks the format unless ``provider`` is given
        fps: Frames per second
        encoder_options: Container encoder settings
        provider: Explicit output provider
        rasterizer: SVG rasterizer, cairosvg by default
        tracker: Progress tracker to report the scene, render and encode steps to
        speed_mapper: Maps ``config.speed`` to a frame count
        cancel_event: Cooperative cancellation, checked between frames and while encoding

    Returns:
        The encoded animation

    Raises:
        InvalidSceneError: If the scene has no dashed paths to animate
        DashFlowError: For any other pipeline failure, with ``stage`` set
    """
    tracker = tracker or ProgressTracker()
    mapper = speed_mapper or SpeedCurveMapper()
    target_provider = provider or resolve_output_provider(output_path)
    tracker.start_process(PIPELINE_STEPS)

    with tracked_step(tracker, "scene"):
        vector_scene = scene if isinstance(scene, VectorScene) else load_scene(scene)
        if not vector_scene.paths:
            raise InvalidSceneError("No dashed paths to animate")
        frame_count = mapper.frame_count(config.speed, fps)
        tracker.update_step("scene", message=f"{len(vector_scene.paths)} dashed paths, {frame_count} frames")

    with tracked_step(tracker, "render"):
        frames = render_frames(
            vector_scene,
            frame_count,
            config,
            rasterizer=rasterizer,
            on_frame=lambda done: tracker.update_step(
                "render",
                progress=done / frame_count * 100,
                message=f"Frame {done}/{frame_count}",
            ),
            cancel_event=cancel_event,
        )

    with tracked_step(tracker, "encode"):
        return encode_frames(
            frames,
            frame_delay_ms(fps),
            encoder_options or EncoderOptions(background=config.background),
            on_progress=lambda fraction: tracker.update_step("encode", progress=fraction * 100),
            provider=target_provider,
            cancel_event=cancel_event,
        )
