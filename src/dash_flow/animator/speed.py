"""Speed curve mapping between slider positions, speeds, durations and frame counts."""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from ..constants import BASE_DURATION, MIN_FRAMES, SPEED_DEFAULT, SPEED_MAX, SPEED_MIN

logger = logging.getLogger(__name__)


class SpeedCurve(str, Enum):
    """Shape applied to the normalized slider position."""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    LOGARITHMIC = "logarithmic"
    EASE_IN_OUT = "ease-in-out"


@dataclass(frozen=True)
class SpeedConfig:
    min: float = SPEED_MIN
    max: float = SPEED_MAX
    default: float = SPEED_DEFAULT
    curve: SpeedCurve = SpeedCurve.EXPONENTIAL
    base_duration: float = BASE_DURATION  # Seconds per cycle at 1x speed
    min_frames: int = MIN_FRAMES

    def __post_init__(self) -> None:
        if not 0 < self.min < self.max:
            raise ValueError(f"Speed range must satisfy 0 < min < max (got {self.min}..{self.max})")
        if self.min_frames < 1:
            raise ValueError(f"min_frames must be at least 1 (got {self.min_frames})")


@dataclass(frozen=True)
class SpeedPreset:
    id: str
    name: str
    value: float
    duration: float  # Seconds per cycle
    description: str


SPEED_PRESETS: tuple[SpeedPreset, ...] = (
    SpeedPreset("cinematic", "Cinematic", 0.5, 1.0, "Slow, dramatic reveal"),
    SpeedPreset("smooth", "Smooth", 1.0, 0.5, "Gentle, easy to follow"),
    SpeedPreset("normal", "Normal", 2.0, 0.25, "Standard speed"),
    SpeedPreset("quick", "Quick", 4.0, 0.125, "Fast but visible"),
    SpeedPreset("rapid", "Rapid", 8.0, 0.0625, "Very fast animation"),
    SpeedPreset("instant", "Instant", 20.0, 0.025, "Near-instant reveal"),
)


def apply_speed_curve(normalized: float, curve: SpeedCurve) -> float:
    """Remap a normalized slider position (0-1) through the curve."""
    if curve is SpeedCurve.EXPONENTIAL:
        return normalized**3
    if curve is SpeedCurve.LOGARITHMIC:
        return math.log10(normalized * 9 + 1)
    if curve is SpeedCurve.EASE_IN_OUT:
        return (1 - math.cos(normalized * math.pi)) / 2
    return normalized


def invert_speed_curve(curved: float, curve: SpeedCurve) -> float:
    """Exact inverse of :func:`apply_speed_curve`."""
    if curve is SpeedCurve.EXPONENTIAL:
        return curved ** (1 / 3)
    if curve is SpeedCurve.LOGARITHMIC:
        return (10**curved - 1) / 9
    if curve is SpeedCurve.EASE_IN_OUT:
        return math.acos(min(1.0, max(-1.0, 1 - 2 * curved))) / math.pi
    return curved


class SpeedCurveMapper:
    """Maps the 0-100 speed slider to speed multipliers, durations and frame counts."""

    def __init__(self, config: SpeedConfig | None = None):
        self.config = config or SpeedConfig()

    def clamp_speed(self, speed: float) -> float:
        return min(self.config.max, max(self.config.min, speed))

    def slider_to_speed(self, slider: float) -> float:
        """Convert a slider position (0-100) to a speed multiplier."""
        normalized = min(100.0, max(0.0, slider)) / 100
        curved = apply_speed_curve(normalized, self.config.curve)
        speed = self.config.min + curved * (self.config.max - self.config.min)
        logger.debug(
            "Speed calculation: slider=%s normalized=%.4f curved=%.4f speed=%.4f",
            slider, normalized, curved, speed,
        )
        return speed

    def speed_to_slider(self, speed: float) -> float:
        """Convert a speed multiplier back to a slider position (0-100)."""
        clamped = self.clamp_speed(speed)
        normalized = (clamped - self.config.min) / (self.config.max - self.config.min)
        return invert_speed_curve(normalized, self.config.curve) * 100

    def duration(self, speed: float) -> float:
        """Animation cycle duration in seconds. Higher speed means a shorter cycle."""
        duration = self.config.base_duration / self.clamp_speed(speed)
        logger.debug("Duration calculation: speed=%s duration=%.4fs", speed, duration)
        return duration

    def frame_count(self, speed: float, fps: int) -> int:
        """Number of frames for one cycle, never fewer than ``min_frames``."""
        if fps <= 0:
            raise ValueError(f"fps must be positive (got {fps})")
        duration = self.duration(speed)
        frame_count = max(self.config.min_frames, round(fps * duration))
        logger.debug(
            "Frame count calculation: speed=%s fps=%s duration=%.4fs frames=%d",
            speed, fps, duration, frame_count,
        )
        return frame_count


def find_closest_preset(speed: float) -> SpeedPreset:
    return min(SPEED_PRESETS, key=lambda preset: abs(preset.value - speed))


def format_speed(speed: float) -> str:
    """Human readable speed, e.g. ``2.0× faster``."""
    if speed < 1:
        return f"{1 / speed:.1f}× slower"
    if speed == 1:
        return "1× (normal)"
    return f"{speed:.1f}× faster"


def format_duration(seconds: float) -> str:
    """Human readable duration: milliseconds below one second, seconds above."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 10:
        return f"{seconds:.2f}s"
    return f"{seconds:.1f}s"
