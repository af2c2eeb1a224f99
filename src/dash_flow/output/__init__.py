"""Animated image containers: GIF and WebP providers plus the format registry."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .base import OutputProvider, PillowSequenceOutputProvider
from .encoding import encode_frames
from .gif_provider import GifOutputProvider
from .webp_provider import WebPOutputProvider


@dataclass(frozen=True)
class OutputFormatSpec:
    """A container dash-flow can write: its file suffix, HTTP media type and encoder."""

    extension: str
    media_type: str
    provider_class: type[OutputProvider[Any]]


_OUTPUT_FORMATS: dict[str, OutputFormatSpec] = {
    "gif": OutputFormatSpec(".gif", "image/gif", GifOutputProvider),
    "webp": OutputFormatSpec(".webp", "image/webp", WebPOutputProvider),
}


def resolve_output_provider(file_path: str) -> OutputProvider[Any]:
    """
    Pick the animation encoder for an output file from its suffix.

    Args:
        file_path: Where the animation will be written; ``.gif`` or ``.webp``

    Returns:
        A provider bound to ``file_path``

    Raises:
        ValueError: If the suffix is not an animated container dash-flow writes
    """
    return _lookup(Path(file_path).suffix, by_extension=True).provider_class(file_path)


def supported_output_formats() -> tuple[str, ...]:
    return tuple(_OUTPUT_FORMATS)


def media_type_for_output_format(output_format: str) -> str:
    """HTTP ``Content-Type`` for an animation format name such as ``webp``."""
    return _lookup(output_format).media_type


def output_path_for_format(output_format: str, base_name: str = "output") -> str:
    """Placeholder file name for an animation that is returned rather than written."""
    return f"{base_name}{_lookup(output_format).extension}"


def _lookup(name: str, by_extension: bool = False) -> OutputFormatSpec:
    key = name.lower().removeprefix(".") if by_extension else name.lower()
    spec = _OUTPUT_FORMATS.get(key)
    if spec is not None:
        return spec
    if by_extension:
        allowed = ", ".join(fmt.extension for fmt in _OUTPUT_FORMATS.values())
        raise ValueError(
            f"Cannot write an animation to '{name or '(no extension)'}' files; use one of: {allowed}"
        )
    raise ValueError(
        f"Unknown animation format '{name}'; expected one of: {', '.join(_OUTPUT_FORMATS)}"
    )


__all__ = [
    "OutputFormatSpec",
    "OutputProvider",
    "PillowSequenceOutputProvider",
    "GifOutputProvider",
    "WebPOutputProvider",
    "encode_frames",
    "resolve_output_provider",
    "supported_output_formats",
    "media_type_for_output_format",
    "output_path_for_format",
]
