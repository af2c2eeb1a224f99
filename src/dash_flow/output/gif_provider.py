"""GIF output provider."""

import math

from PIL import Image, ImageColor

from ..config import EncoderOptions
from ..constants import GIF_PALETTE_SIZE
from .base import PillowSequenceOutputProvider


def build_palette(frames: list[Image.Image], options: EncoderOptions) -> Image.Image:
    """
    Build an adaptive palette from pixel samples of the given frames.

    ``options.quality`` is the sampling interval: each frame is subsampled every
    ``round(sqrt(quality))`` pixels per axis before the palette is computed.
    """
    step = max(1, round(math.sqrt(options.quality)))
    samples = [_subsample(frame, step) for frame in frames]
    montage = Image.new(
        "RGB",
        (max(sample.width for sample in samples), sum(sample.height for sample in samples)),
        options.background,
    )
    y = 0
    for sample in samples:
        montage.paste(sample, (0, y))
        y += sample.height
    return montage.quantize(colors=GIF_PALETTE_SIZE, method=Image.Quantize.MEDIANCUT)


def nearest_palette_index(image: Image.Image, color: str) -> int:
    """Index of the palette entry closest to ``color``."""
    target = ImageColor.getrgb(color)[:3]
    palette = image.getpalette() or []
    entries = [tuple(palette[i:i + 3]) for i in range(0, len(palette) - 2, 3)]
    return min(
        range(len(entries)),
        key=lambda index: sum((a - b) ** 2 for a, b in zip(entries[index], target)),
    )


def _subsample(frame: Image.Image, step: int) -> Image.Image:
    rgb = frame.convert("RGB")
    if step == 1:
        return rgb
    size = (math.ceil(rgb.width / step), math.ceil(rgb.height / step))
    return rgb.resize(size, Image.Resampling.NEAREST)


class GifOutputProvider(PillowSequenceOutputProvider):
    """Output provider for GIF format."""

    @property
    def output_format(self) -> str:
        return "gif"

    def build_context(self, frames: list[Image.Image], options: EncoderOptions) -> Image.Image | None:
        if not options.global_palette:
            return None
        return build_palette(frames, options)

    def prepare_frame(self, frame: Image.Image, options: EncoderOptions, context: object) -> Image.Image:
        rgb = frame.convert("RGB")
        palette = context if isinstance(context, Image.Image) else build_palette([rgb], options)
        dither = Image.Dither.FLOYDSTEINBERG if options.dither else Image.Dither.NONE
        quantized = rgb.quantize(palette=palette, dither=dither)
        if options.transparent:
            quantized.info["transparency"] = nearest_palette_index(quantized, options.background)
        return quantized

    def save_options(self, options: EncoderOptions, frames: list[Image.Image]) -> dict[str, object]:
        save_options: dict[str, object] = {"optimize": False}
        if options.transparent:
            save_options["disposal"] = 2  # Clear to transparent between frames
        return save_options
