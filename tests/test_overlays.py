"""Tests for glint and gradient overlays."""

import xml.etree.ElementTree as ET

import pytest

from dash_flow.animator.frame_document import apply_frame_state, prepare_document
from dash_flow.animator.frame_scheduler import compute_frame_state
from dash_flow.animator.overlays import (
    GlintOverlay,
    GradientSweep,
    create_overlay,
    select_overlay,
    supported_overlay_names,
)
from dash_flow.animator.overlays.glint_overlay import glint_fraction
from dash_flow.animator.overlays.gradient_sweep import gradient_stops, wave_shift
from dash_flow.animator.scene import DashedPath, load_scene
from dash_flow.config import AnimationConfig
from dash_flow.constants import GLINT_PATH_ATTR, WAVE_GRADIENT_ID

SCENE = """<svg xmlns="http://www.w3.org/2000/svg" width="200" height="40">
  <g>
    <path id="line" d="M0 20 L200 20" stroke="#333" stroke-dasharray="10 5"/>
    <circle cx="5" cy="5" r="2"/>
  </g>
</svg>"""

SVG = "{http://www.w3.org/2000/svg}"


def create_path(total_length: float) -> DashedPath:
    return DashedPath(id="p", dash_pattern=(10.0, 5.0), total_length=total_length)


def test_glint_length_for_band_width():
    """A 0.3 band on a 200-long path gives a glint of 19 and one visible segment."""
    config = AnimationConfig(use_glint_overlay=True, wave_band_width=0.3)

    spec = GlintOverlay().build_overlay(create_path(200), config)

    assert spec.glint_length == pytest.approx(19)
    assert spec.gap_length >= 2 * 200
    assert spec.path_length == 200


def test_glint_length_never_below_minimum():
    config = AnimationConfig(use_glint_overlay=True, wave_band_width=0.0)

    spec = GlintOverlay().build_overlay(create_path(10), config)

    assert spec.glint_length == 2


def test_glint_gap_covers_long_paths():
    """The gap must outlast the path so only one glint is ever visible."""
    spec = GlintOverlay().build_overlay(create_path(80_000), AnimationConfig())

    assert spec.gap_length == 160_000


def test_glint_fraction_is_clamped():
    assert glint_fraction(0) == pytest.approx(0.03)
    assert glint_fraction(0.3) == pytest.approx(0.095)
    assert glint_fraction(1) == pytest.approx(0.20)


def test_glint_speed_multiplier_is_clamped():
    config = AnimationConfig(use_glint_overlay=True, glint_speed=0.01)

    spec = GlintOverlay().build_overlay(create_path(100), config)

    assert spec.speed_multiplier == pytest.approx(0.05)


def test_glint_install_adds_copy_after_base():
    """Each animated path should get a glint copy painted directly above it."""
    scene = load_scene(SCENE)
    config = AnimationConfig(use_glint_overlay=True, color_from="#111111", color_to="#ffcc00")

    document = prepare_document(scene, config, GlintOverlay())

    group = document.root.find(f"{SVG}g")
    children = list(group)
    assert [child.tag for child in children] == [f"{SVG}path", f"{SVG}path", f"{SVG}circle"]
    base, glint = children[0], children[1]
    assert base.get("stroke") == "#111111"
    assert glint.get("stroke") == "#ffcc00"
    assert glint.get(GLINT_PATH_ATTR) == "line"
    assert glint.get("id") is None
    assert glint.get("stroke-linecap") == "round"
    assert glint.get("stroke-dasharray") == "14 100000"


def test_glint_apply_sets_offsets_per_frame():
    scene = load_scene(SCENE)
    config = AnimationConfig(use_glint_overlay=True)
    document = prepare_document(scene, config, GlintOverlay())

    last = compute_frame_state(3, 4, document.dash_lengths, document.overlay_specs)
    root = ET.fromstring(apply_frame_state(document, last))

    glint = next(el for el in root.iter() if el.get(GLINT_PATH_ATTR) == "line")
    assert glint.get("stroke-dashoffset") == "-200"


def test_gradient_install_adds_repeating_gradient():
    scene = load_scene(SCENE)
    config = AnimationConfig(use_gradient_wave=True, wave_frequency=4, wave_band_width=0.2)

    document = prepare_document(scene, config, GradientSweep())

    gradient = next(el for el in document.root.iter() if el.get("id") == WAVE_GRADIENT_ID)
    assert gradient.get("x2") == "50"
    assert gradient.get("spreadMethod") == "repeat"
    offsets = [stop.get("offset") for stop in gradient]
    assert offsets == ["0%", "40%", "50%", "60%", "100%"]
    path = document.root.find(f"{SVG}g/{SVG}path")
    assert path.get("stroke") == f"url(#{WAVE_GRADIENT_ID})"
    assert document.overlay_specs is None


def test_gradient_apply_translates_gradient():
    scene = load_scene(SCENE)
    config = AnimationConfig(use_gradient_wave=True, wave_frequency=4)
    document = prepare_document(scene, config, GradientSweep())

    state = compute_frame_state(1, 3, document.dash_lengths)
    root = ET.fromstring(apply_frame_state(document, state))

    gradient = next(el for el in root.iter() if el.get("id") == WAVE_GRADIENT_ID)
    assert gradient.get("gradientTransform") == "translate(-30,0)"


def test_gradient_stops_center_the_band():
    stops = gradient_stops(0.4, "#000", "#fff")

    assert [offset for offset, _ in stops] == pytest.approx([0, 0.3, 0.5, 0.7, 1])
    assert stops[2][1] == "#fff"


def test_wave_shift_wraps():
    assert wave_shift(50, 0) == 0
    assert wave_shift(50, 0.5) == pytest.approx(30)
    assert wave_shift(50, 1) == pytest.approx(10)


def test_select_overlay_prefers_glint():
    assert isinstance(select_overlay(AnimationConfig(use_glint_overlay=True, use_gradient_wave=True)), GlintOverlay)
    assert isinstance(select_overlay(AnimationConfig(use_gradient_wave=True)), GradientSweep)
    assert select_overlay(AnimationConfig()) is None


def test_create_overlay_by_name():
    assert supported_overlay_names() == ("glint", "gradient")
    assert isinstance(create_overlay("glint"), GlintOverlay)
    with pytest.raises(ValueError, match="Unknown overlay"):
        create_overlay("sparkle")
