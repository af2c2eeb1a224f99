"""Tests for SVG scene loading and path measurement."""

import math

import pytest

from dash_flow.animator.scene import (
    dash_period,
    load_scene,
    load_scene_file,
    measure_path_length,
    parse_dash_pattern,
)
from dash_flow.constants import ANIMATED_PATH_ATTR
from dash_flow.errors import InvalidSceneError

SCENE = """<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100">
  <rect width="200" height="100" fill="#eeeeee"/>
  <path id="edge" d="M10 10 L110 10" stroke="#000" stroke-dasharray="8 4"/>
  <path d="M0 50 H50 V90" style="stroke: #000; stroke-dasharray: 5"/>
  <path id="solid" d="M0 0 L10 10" stroke="#000"/>
</svg>"""


def test_load_scene_collects_dashed_paths():
    """Only paths with a dash pattern should be animated."""
    scene = load_scene(SCENE)

    assert scene.width == 200
    assert scene.height == 100
    assert [path.id for path in scene.paths] == ["edge", "dash-1"]
    assert scene.paths[0].dash_pattern == (8.0, 4.0)
    assert scene.paths[0].total_length == pytest.approx(100.0)
    assert scene.paths[1].total_length == pytest.approx(90.0)


def test_load_scene_tags_animated_paths():
    scene = load_scene(SCENE)

    tagged = [el.get(ANIMATED_PATH_ATTR) for el in scene.root.iter() if el.get(ANIMATED_PATH_ATTR)]
    assert tagged == ["edge", "dash-1"]


def test_dash_lengths_use_full_cycle():
    """Odd-length dash patterns repeat, so their cycle is doubled."""
    scene = load_scene(SCENE)

    assert scene.dash_lengths == (12.0, 10.0)


def test_load_scene_uses_view_box_when_size_missing():
    markup = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64.5 32">'
        '<path d="M0 0 L10 0" stroke-dasharray="2 2"/></svg>'
    )

    scene = load_scene(markup)

    assert (scene.width, scene.height) == (65, 32)


def test_load_scene_without_dashed_paths():
    markup = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"><path d="M0 0 L5 5"/></svg>'

    with pytest.raises(InvalidSceneError, match="No dashed paths"):
        load_scene(markup)


def test_load_scene_rejects_malformed_markup():
    with pytest.raises(InvalidSceneError, match="Malformed"):
        load_scene("<svg><path></svg>")


def test_load_scene_rejects_non_svg_root():
    with pytest.raises(InvalidSceneError, match="<svg>"):
        load_scene("<html/>")


def test_load_scene_requires_size():
    markup = '<svg xmlns="http://www.w3.org/2000/svg"><path d="M0 0 L5 5" stroke-dasharray="2"/></svg>'

    with pytest.raises(InvalidSceneError, match="width and height"):
        load_scene(markup)


def test_duplicate_ids_are_made_unique():
    markup = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">'
        '<path id="a" d="M0 0 L5 0" stroke-dasharray="1 1"/>'
        '<path id="a" d="M0 5 L5 5" stroke-dasharray="1 1"/></svg>'
    )

    scene = load_scene(markup)

    assert len({path.id for path in scene.paths}) == 2


def test_unmeasurable_path_falls_back_to_dash_length():
    markup = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">'
        '<path d="M0 0 L5" stroke-dasharray="3 1"/></svg>'
    )

    scene = load_scene(markup)

    assert scene.paths[0].total_length == pytest.approx(4.0)


def test_load_scene_file(tmp_path):
    svg_file = tmp_path / "scene.svg"
    svg_file.write_text(SCENE)

    scene = load_scene_file(svg_file)

    assert len(scene.paths) == 2


@pytest.mark.parametrize(
    "value,expected",
    [
        ("5,3", (5.0, 3.0)),
        ("5 3 2", (5.0, 3.0, 2.0)),
        ("none", ()),
        (None, ()),
        ("", ()),
    ],
)
def test_parse_dash_pattern(value, expected):
    assert parse_dash_pattern(value) == expected


def test_parse_dash_pattern_rejects_negative():
    with pytest.raises(InvalidSceneError):
        parse_dash_pattern("4 -1")


def test_dash_period():
    assert dash_period((8.0, 4.0)) == 12.0
    assert dash_period((5.0,)) == 10.0
    assert dash_period((1.0, 2.0, 3.0)) == 12.0


def test_measure_lines_and_close_path():
    assert measure_path_length("M0 0 L30 40") == pytest.approx(50)
    assert measure_path_length("M0 0 h10 v10 z") == pytest.approx(20 + math.sqrt(200))
    assert measure_path_length("M0 0 10 0 10 10") == pytest.approx(20)
    assert measure_path_length("m5 5 l3 4") == pytest.approx(5)


def test_measure_cubic_and_quadratic_curves():
    """A straight cubic measures as its chord; a quarter-circle cubic is close to pi*r/2."""
    assert measure_path_length("M0 0 C10 0 20 0 30 0") == pytest.approx(30)
    quarter = measure_path_length("M100 0 C100 55.228 55.228 100 0 100")
    assert quarter == pytest.approx(math.pi * 50, rel=1e-3)
    assert measure_path_length("M0 0 Q10 0 20 0 T40 0") == pytest.approx(40)


@pytest.mark.parametrize(
    "d",
    [
        "M0 0 A50 50 0 0 1 100 0",
        "m0 0 a50 50 0 1 0 100 0",
        "M100 0 A100 100 0 0 1 0 100",
    ],
)
def test_measure_arcs_follow_the_curve(d):
    """Arcs measure along the curve, not across the chord."""
    assert measure_path_length(d) == pytest.approx(math.pi * 50, rel=1e-6)


def test_measure_full_circle():
    assert measure_path_length("M0 50 A50 50 0 0 1 100 50 A50 50 0 0 1 0 50") == pytest.approx(
        math.pi * 100, rel=1e-6
    )


def test_arc_path_total_length():
    markup = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="60">'
        '<path d="M0 50 A50 50 0 0 1 100 50" stroke-dasharray="6 4"/></svg>'
    )

    scene = load_scene(markup)

    assert scene.paths[0].total_length == pytest.approx(math.pi * 50, rel=1e-6)


def test_measure_rejects_malformed_data():
    with pytest.raises(ValueError):
        measure_path_length("10 10")
    with pytest.raises(ValueError):
        measure_path_length("M0 0 L5")
