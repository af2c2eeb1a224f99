"""Base class for output format providers."""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from io import BytesIO
from typing import Callable, Generic, Iterator, TypeVar

from PIL import Image

from ..config import EncoderOptions
from ..errors import EncoderError, EncodingAbortedError, NoFramesError

FrameT = TypeVar("FrameT")
ProgressCallback = Callable[[float], None]

logger = logging.getLogger(__name__)


class OutputProvider(ABC, Generic[FrameT]):
    """Abstract base class for output format providers."""

    def __init__(self, path: str = ""):
        """
        Initialize the provider with an output file path.

        Args:
            path: Path to the output file
        """
        self.path = path

    @abstractmethod
    def encode(
        self,
        frames: Iterator[FrameT],
        frame_duration: int,
        options: EncoderOptions | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> bytes:
        """
        Encode frames into the output format.

        Args:
            frames: Iterator of frame payloads consumed by this provider
            frame_duration: Frame duration in milliseconds
            options: Encoder settings
            on_progress: Receives encoder progress as a fraction in [0, 1]
            cancel_event: Aborts encoding when set

        Returns:
            Encoded output as bytes

        Raises:
            NoFramesError: If there are no frames
            EncodingAbortedError: If ``cancel_event`` was set during encoding
            EncoderError: If the underlying encoder fails
        """
        raise NotImplementedError

    def write(self, data: bytes) -> None:
        """
        Write encoded data to a file.

        Args:
            data: Encoded data to write
        """
        if not self.path:
            raise ValueError("Output path not set")
        with open(self.path, "wb") as f:
            f.write(data)


class PillowSequenceOutputProvider(OutputProvider[Image.Image], ABC):
    """Template output provider for Pillow-supported animated image formats."""

    @property
    @abstractmethod
    def output_format(self) -> str:
        """Pillow format identifier (for example, ``gif`` or ``webp``)."""
        raise NotImplementedError

    def encode(
        self,
        frames: Iterator[Image.Image],
        frame_duration: int,
        options: EncoderOptions | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> bytes:
        frame_list = list(frames)
        if not frame_list:
            raise NoFramesError()
        options = options or EncoderOptions()
        total_steps = len(frame_list) + 1  # One step per frame, one for writing the container

        def report(fraction: float) -> None:
            if on_progress is not None:
                on_progress(fraction)

        def check_abort() -> None:
            if cancel_event is not None and cancel_event.is_set():
                raise EncodingAbortedError()

        check_abort()
        report(0.0)
        context = self.build_context(frame_list, options)
        prepared: list[Image.Image] = []
        with ThreadPoolExecutor(max_workers=options.workers) as executor:
            for frame in executor.map(lambda f: self.prepare_frame(f, options, context), frame_list):
                check_abort()
                prepared.append(frame)
                report(len(prepared) / total_steps)

        check_abort()
        buffer = BytesIO()
        try:
            prepared[0].save(
                buffer,
                format=self.output_format,
                save_all=True,
                append_images=prepared[1:],
                duration=frame_duration,
                loop=0,
                **self.save_options(options, prepared),
            )
        except (OSError, ValueError) as e:
            raise EncoderError(f"{self.output_format.upper()} encoding failed: {e}") from e

        logger.debug(
            "Encoded %d frames as %s (%d bytes)",
            len(prepared), self.output_format, buffer.tell(),
        )
        report(1.0)
        return buffer.getvalue()

    def build_context(self, frames: list[Image.Image], options: EncoderOptions) -> object:
        """Shared state computed once before frames are prepared (for example a palette)."""
        del frames, options
        return None

    def prepare_frame(self, frame: Image.Image, options: EncoderOptions, context: object) -> Image.Image:
        """Convert one frame into what the Pillow writer expects. Runs on worker threads."""
        del options, context
        return frame

    def save_options(self, options: EncoderOptions, frames: list[Image.Image]) -> dict[str, object]:
        """Additional Pillow ``save`` kwargs for this format."""
        del options, frames
        return {}
