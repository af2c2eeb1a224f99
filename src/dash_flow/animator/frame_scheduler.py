"""Per-frame timing: normalized time, dash offsets and glint offsets."""

from dataclasses import dataclass
from typing import Sequence

from ..constants import GLINT_PACE_FAST, GLINT_PACE_SLOW, GLINT_SPEED_MIN
from .overlays.base_overlay import OverlaySpec


@dataclass(frozen=True)
class FrameState:
    """Offsets for every animated path at one frame."""

    index: int
    t: float
    dash_offsets: tuple[float, ...]
    glint_offsets: tuple[float, ...] | None = None


def normalized_time(frame_index: int, frame_count: int) -> float:
    """Position in the cycle: 0 at the first frame, 1 at the last."""
    if frame_count < 1:
        raise ValueError(f"frame_count must be at least 1 (got {frame_count})")
    if not 0 <= frame_index < frame_count:
        raise ValueError(f"frame_index {frame_index} out of range for {frame_count} frames")
    if frame_count == 1:
        return 1.0
    return frame_index / (frame_count - 1)


def glint_pace_power(speed_multiplier: float) -> float:
    """
    Easing exponent for the glint.

    Small multipliers give a large exponent (slow start, fast finish); a
    multiplier of 1 gives a small exponent (fast start, slow finish).
    """
    clamped = min(1.0, max(GLINT_SPEED_MIN, speed_multiplier))
    u = (clamped - GLINT_SPEED_MIN) / (1 - GLINT_SPEED_MIN)
    return GLINT_PACE_SLOW + (GLINT_PACE_FAST - GLINT_PACE_SLOW) * u


def compute_frame_state(
    frame_index: int,
    frame_count: int,
    dash_lengths: Sequence[float],
    overlay_specs: Sequence[OverlaySpec] | None = None,
) -> FrameState:
    """
    Compute dash and glint offsets for one frame.

    Args:
        frame_index: Zero-based frame index
        frame_count: Total frames in the cycle
        dash_lengths: Dash cycle length per animated path
        overlay_specs: Glint geometry per animated path, or None without glints

    Returns:
        The frame state; identical inputs always give identical output
    """
    t = normalized_time(frame_index, frame_count)
    # Negative offsets move the dash pattern forward along the path
    dash_offsets = tuple(-length * t for length in dash_lengths)

    glint_offsets = None
    if overlay_specs is not None:
        if len(overlay_specs) != len(dash_lengths):
            raise ValueError(
                f"Expected {len(dash_lengths)} overlay specs, got {len(overlay_specs)}"
            )
        glint_offsets = tuple(
            -spec.path_length * t ** glint_pace_power(spec.speed_multiplier)
            for spec in overlay_specs
        )

    return FrameState(
        index=frame_index,
        t=t,
        dash_offsets=dash_offsets,
        glint_offsets=glint_offsets,
    )
