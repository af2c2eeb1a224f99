"""Tests for per-frame dash and glint offsets."""

import pytest

from dash_flow.animator.frame_scheduler import (
    compute_frame_state,
    glint_pace_power,
    normalized_time,
)
from dash_flow.animator.overlays import OverlaySpec


def create_spec(path_length: float, speed_multiplier: float = 0.5) -> OverlaySpec:
    return OverlaySpec(
        glint_length=path_length * 0.1,
        gap_length=100_000,
        speed_multiplier=speed_multiplier,
        path_length=path_length,
    )


def test_normalized_time_spans_zero_to_one():
    """The first frame is t=0 and the last frame is t=1."""
    assert normalized_time(0, 6) == 0.0
    assert normalized_time(5, 6) == 1.0
    assert normalized_time(2, 5) == pytest.approx(0.5)


def test_normalized_time_single_frame():
    """A one-frame cycle shows the final state."""
    assert normalized_time(0, 1) == 1.0


@pytest.mark.parametrize("frame_index,frame_count", [(6, 6), (-1, 6), (0, 0)])
def test_normalized_time_rejects_out_of_range(frame_index, frame_count):
    with pytest.raises(ValueError):
        normalized_time(frame_index, frame_count)


def test_dash_offsets_scroll_one_full_cycle():
    """Offsets run from 0 to minus the dash cycle length."""
    first = compute_frame_state(0, 6, [120.0, 10.0])
    last = compute_frame_state(5, 6, [120.0, 10.0])

    assert first.dash_offsets == (0.0, 0.0)
    assert last.dash_offsets == pytest.approx((-120.0, -10.0))
    assert first.glint_offsets is None


def test_dash_offsets_decrease_monotonically():
    offsets = [compute_frame_state(i, 10, [40.0]).dash_offsets[0] for i in range(10)]

    assert offsets == sorted(offsets, reverse=True)


def test_frame_state_is_deterministic():
    specs = [create_spec(200)]

    assert compute_frame_state(3, 8, [12.0], specs) == compute_frame_state(3, 8, [12.0], specs)


def test_glint_offsets_reach_path_length():
    """The glint travels the whole path over one cycle."""
    specs = [create_spec(200), create_spec(50, speed_multiplier=1.0)]

    first = compute_frame_state(0, 4, [10.0, 10.0], specs)
    last = compute_frame_state(3, 4, [10.0, 10.0], specs)

    assert first.glint_offsets == pytest.approx((0.0, 0.0))
    assert last.glint_offsets == pytest.approx((-200.0, -50.0))


def test_slow_glint_starts_slower_than_fast_glint():
    """A small speed multiplier delays the glint early in the cycle."""
    slow = compute_frame_state(1, 4, [10.0], [create_spec(100, speed_multiplier=0.05)])
    fast = compute_frame_state(1, 4, [10.0], [create_spec(100, speed_multiplier=1.0)])

    assert abs(slow.glint_offsets[0]) < abs(fast.glint_offsets[0])


def test_glint_pace_power_interpolates():
    assert glint_pace_power(0.05) == pytest.approx(3.0)
    assert glint_pace_power(1.0) == pytest.approx(0.5)
    assert glint_pace_power(0.0) == pytest.approx(3.0)
    assert 0.5 < glint_pace_power(0.5) < 3.0


def test_overlay_spec_count_must_match_paths():
    with pytest.raises(ValueError, match="overlay specs"):
        compute_frame_state(0, 3, [10.0, 20.0], [create_spec(100)])
