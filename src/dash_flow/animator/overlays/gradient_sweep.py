"""Gradient sweep overlay: one repeating color band sliding across every animated path."""

import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Sequence

from ...constants import WAVE_GRADIENT_ID, WAVE_SPEED_FACTOR
from .._svg_shared import (
    find_animated_paths,
    find_or_create_defs,
    format_number,
    qualified_child_tag,
    set_presentation_attribute,
)
from .base_overlay import BaseOverlay

if TYPE_CHECKING:
    from ...config import AnimationConfig
    from ..frame_scheduler import FrameState
    from ..scene import DashedPath


def gradient_stops(band_width: float, color_from: str, color_to: str) -> list[tuple[float, str]]:
    """Stops for one wave cycle: ``color_to`` centered in a ``color_from`` field."""
    half_band = band_width / 2
    return [
        (0.0, color_from),
        (0.5 - half_band, color_from),
        (0.5, color_to),
        (0.5 + half_band, color_from),
        (1.0, color_from),
    ]


def wave_shift(wave_length: float, t: float) -> float:
    return (wave_length * t * WAVE_SPEED_FACTOR) % wave_length


class GradientSweep(BaseOverlay):
    """Strokes all animated paths with a shared user-space gradient and slides it each frame."""

    name = "gradient"

    def build_overlay(self, path: "DashedPath", config: "AnimationConfig") -> None:
        del path, config
        return None

    def install(
        self,
        root: ET.Element,
        paths: Sequence["DashedPath"],
        config: "AnimationConfig",
        width: int,
    ) -> None:
        wave_length = width / config.wave_frequency
        defs = find_or_create_defs(root)
        gradient = ET.SubElement(
            defs,
            qualified_child_tag(root, "linearGradient"),
            {
                "id": WAVE_GRADIENT_ID,
                "gradientUnits": "userSpaceOnUse",
                "x1": "0",
                "y1": "0",
                "x2": format_number(wave_length),
                "y2": "0",
                "spreadMethod": "repeat",
            },
        )
        for offset, color in gradient_stops(config.wave_band_width, config.color_from, config.color_to):
            ET.SubElement(
                gradient,
                qualified_child_tag(root, "stop"),
                {"offset": f"{format_number(offset * 100)}%", "stop-color": color},
            )

        elements = find_animated_paths(root)
        for path in paths:
            set_presentation_attribute(elements[path.id], "stroke", f"url(#{WAVE_GRADIENT_ID})")

    def apply(self, root: ET.Element, path_ids: Sequence[str], frame_state: "FrameState") -> None:
        del path_ids
        for element in root.iter():
            if element.get("id") == WAVE_GRADIENT_ID:
                wave_length = float(element.get("x2", "0"))
                if wave_length > 0:
                    shift = wave_shift(wave_length, frame_state.t)
                    element.set("gradientTransform", f"translate({format_number(-shift)},0)")
                return
