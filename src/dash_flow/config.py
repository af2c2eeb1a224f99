"""Runtime configuration for animation and encoding."""

import os
from dataclasses import dataclass

from PIL import ImageColor

from .constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_COLOR_FROM,
    DEFAULT_COLOR_TO,
    DEFAULT_ENCODER_QUALITY,
    DEFAULT_ENCODER_WORKERS,
    DEFAULT_GLINT_SPEED,
    DEFAULT_WAVE_BAND_WIDTH,
    DEFAULT_WAVE_FREQUENCY,
    SPEED_DEFAULT,
)

ENV_ENCODER_QUALITY = "DASH_FLOW_ENCODER_QUALITY"
ENV_ENCODER_WORKERS = "DASH_FLOW_ENCODER_WORKERS"


def _validate_color(name: str, value: str) -> None:
    try:
        ImageColor.getrgb(value)
    except ValueError:
        raise ValueError(f"Invalid color for {name}: {value!r}")


@dataclass(frozen=True)
class AnimationConfig:
    """Visual settings for one render pass. Fixed for the whole pass."""

    speed: float = SPEED_DEFAULT
    color_from: str = DEFAULT_COLOR_FROM
    color_to: str = DEFAULT_COLOR_TO
    use_glint_overlay: bool = False
    use_gradient_wave: bool = False
    wave_frequency: float = DEFAULT_WAVE_FREQUENCY
    wave_band_width: float = DEFAULT_WAVE_BAND_WIDTH
    glint_speed: float = DEFAULT_GLINT_SPEED
    stroke_width: float | None = None
    background: str = DEFAULT_BACKGROUND

    def __post_init__(self) -> None:
        if self.speed <= 0:
            raise ValueError(f"speed must be positive (got {self.speed})")
        if not 0 < self.glint_speed <= 1:
            raise ValueError(f"glint_speed must be in (0, 1] (got {self.glint_speed})")
        if self.wave_frequency <= 0:
            raise ValueError(f"wave_frequency must be positive (got {self.wave_frequency})")
        if not 0 <= self.wave_band_width <= 1:
            raise ValueError(f"wave_band_width must be in [0, 1] (got {self.wave_band_width})")
        if self.stroke_width is not None and self.stroke_width <= 0:
            raise ValueError(f"stroke_width must be positive (got {self.stroke_width})")
        _validate_color("color_from", self.color_from)
        _validate_color("color_to", self.color_to)
        _validate_color("background", self.background)


@dataclass(frozen=True)
class EncoderOptions:
    """
    Container encoder settings.

    Attributes:
        quality: Pixel sampling interval used to build palettes (1 samples every pixel)
        workers: Worker threads used for per-frame palette work
        transparent: Key the background color out as transparent
        dither: Dither while mapping frames to the palette
        global_palette: Share one palette across all frames to avoid flicker
        background: Opaque color painted behind every frame
    """

    quality: int = DEFAULT_ENCODER_QUALITY
    workers: int = DEFAULT_ENCODER_WORKERS
    transparent: bool = False
    dither: bool = False
    global_palette: bool = True
    background: str = DEFAULT_BACKGROUND

    def __post_init__(self) -> None:
        if self.quality < 1:
            raise ValueError(f"quality must be at least 1 (got {self.quality})")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1 (got {self.workers})")
        _validate_color("background", self.background)

    @classmethod
    def from_env(cls, **overrides: object) -> "EncoderOptions":
        """Build options from environment variables, with explicit overrides winning."""
        values: dict[str, object] = {}
        quality = os.getenv(ENV_ENCODER_QUALITY)
        if quality:
            values["quality"] = _int_from_env(ENV_ENCODER_QUALITY, quality)
        workers = os.getenv(ENV_ENCODER_WORKERS)
        if workers:
            values["workers"] = _int_from_env(ENV_ENCODER_WORKERS, workers)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)  # type: ignore[arg-type]


def _int_from_env(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})")
