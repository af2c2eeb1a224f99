"""Animate dashed SVG strokes into looping GIF and WebP images."""

__version__ = "0.1.0"
