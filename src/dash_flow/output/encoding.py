"""Frame normalization and encoding into a single animated container."""

import logging
import threading
from typing import Any, Sequence

from PIL import Image

from ..config import EncoderOptions
from ..errors import NoFramesError
from .base import OutputProvider, ProgressCallback
from .gif_provider import GifOutputProvider

logger = logging.getLogger(__name__)


class MonotonicProgress:
    """Rescales fractions into ``[start, end]`` and never reports a smaller value twice."""

    def __init__(self, callback: ProgressCallback | None, start: float = 0.0, end: float = 1.0):
        if not 0.0 <= start <= end <= 1.0:
            raise ValueError(f"Invalid progress range: ({start}, {end})")
        self.callback = callback
        self.start = start
        self.end = end
        self.value = start

    def __call__(self, fraction: float) -> None:
        clamped = min(1.0, max(0.0, fraction))
        scaled = self.start + (self.end - self.start) * clamped
        self.value = max(self.value, scaled)
        if self.callback is not None:
            self.callback(self.value)


def normalize_frame(frame: Image.Image, background: str) -> Image.Image:
    """Paint ``frame`` over a fresh opaque surface so no transparency remains."""
    surface = Image.new("RGBA", frame.size, background)
    surface.alpha_composite(frame.convert("RGBA"))
    return surface.convert("RGB")


def encode_frames(
    frames: Sequence[Image.Image],
    frame_delay_ms: int,
    options: EncoderOptions | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    provider: OutputProvider[Any] | None = None,
    progress_range: tuple[float, float] = (0.0, 1.0),
    cancel_event: threading.Event | None = None,
) -> bytes:
    """
    Encode an ordered frame sequence into one looping animated image.

    Args:
        frames: Frames in playback order; all must share one size
        frame_delay_ms: Delay per frame in milliseconds
        options: Encoder settings, defaults when omitted
        on_progress: Receives non-decreasing progress within ``progress_range``
        provider: Container encoder, GIF by default
        progress_range: Sub-range the encoder's 0-1 progress is mapped into
        cancel_event: Aborts encoding when set

    Returns:
        The encoded container bytes

    Raises:
        NoFramesError: If ``frames`` is empty; nothing is allocated in that case
        ValueError: If frame sizes differ
        EncodingAbortedError: If encoding was aborted
        EncoderError: If the container encoder failed
    """
    if not frames:
        raise NoFramesError()

    options = options or EncoderOptions()
    width, height = frames[0].size
    for index, frame in enumerate(frames):
        if frame.size != (width, height):
            raise ValueError(
                "All frames must have the same dimensions "
                f"(frame 0 is {width}x{height}, frame {index} is {frame.size[0]}x{frame.size[1]})"
            )

    target = provider or GifOutputProvider()
    progress = MonotonicProgress(on_progress, *progress_range)
    normalized = [normalize_frame(frame, options.background) for frame in frames]
    logger.info(
        "Encoding %d frames (%dx%d, %dms delay) with %s",
        len(normalized), width, height, frame_delay_ms, type(target).__name__,
    )
    return target.encode(
        iter(normalized),
        frame_delay_ms,
        options=options,
        on_progress=progress,
        cancel_event=cancel_event,
    )
