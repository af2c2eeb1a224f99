"""WebP output provider."""

from PIL import Image, ImageChops, ImageColor

from ..config import EncoderOptions
from .base import PillowSequenceOutputProvider


def key_out_background(frame: Image.Image, background: str) -> Image.Image:
    """Return an RGBA copy where pixels exactly matching ``background`` are transparent."""
    rgb = frame.convert("RGB")
    key = Image.new("RGB", rgb.size, ImageColor.getrgb(background)[:3])
    red, green, blue = ImageChops.difference(rgb, key).split()
    alpha = ImageChops.lighter(ImageChops.lighter(red, green), blue).point(lambda v: 255 if v else 0)
    keyed = rgb.copy()
    keyed.putalpha(alpha)
    return keyed


class WebPOutputProvider(PillowSequenceOutputProvider):
    """Output provider for WebP format."""

    @property
    def output_format(self) -> str:
        return "webp"

    def prepare_frame(self, frame: Image.Image, options: EncoderOptions, context: object) -> Image.Image:
        if options.transparent:
            return key_out_background(frame, options.background)
        return frame.convert("RGB")

    def save_options(self, options: EncoderOptions, frames: list[Image.Image]) -> dict[str, object]:
        return {
            "lossless": True,
            "quality": 100,
            "method": 4,
        }
