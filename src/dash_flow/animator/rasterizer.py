"""SVG rasterizers turning serialized documents into Pillow images."""

from abc import ABC, abstractmethod
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from ..errors import RasterizerError


class BaseRasterizer(ABC):
    """Abstract base class for SVG rasterizers."""

    @abstractmethod
    def rasterize(self, document: str, width: int, height: int) -> Image.Image:
        """
        Render an SVG document at an explicit pixel size.

        Args:
            document: Serialized SVG markup
            width: Output width in pixels
            height: Output height in pixels

        Returns:
            The rendered image, possibly with transparent regions
        """
        raise NotImplementedError


class CairoSvgRasterizer(BaseRasterizer):
    """Rasterizer backed by cairosvg."""

    def rasterize(self, document: str, width: int, height: int) -> Image.Image:
        # Imported here so the native cairo library is only loaded when rendering
        import cairosvg

        png = cairosvg.svg2png(
            bytestring=document.encode("utf-8"),
            output_width=width,
            output_height=height,
        )
        if not png:
            raise RasterizerError("cairosvg produced no output")
        try:
            image = Image.open(BytesIO(png))
            image.load()
        except UnidentifiedImageError as e:
            raise RasterizerError(f"cairosvg produced an unreadable image: {e}")
        return image.convert("RGBA")
