"""Glint overlay: a bright segment racing once along each path over a dim base stroke."""

import copy
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Sequence

from ...constants import (
    ANIMATED_PATH_ATTR,
    GLINT_FRACTION_BASE,
    GLINT_FRACTION_MAX,
    GLINT_FRACTION_MIN,
    GLINT_FRACTION_PER_BAND,
    GLINT_GAP_LENGTH,
    GLINT_MIN_LENGTH,
    GLINT_PATH_ATTR,
    GLINT_SPEED_MIN,
)
from .._svg_shared import (
    build_parent_map,
    find_animated_paths,
    format_number,
    set_presentation_attribute,
)
from .base_overlay import BaseOverlay, OverlaySpec

if TYPE_CHECKING:
    from ...config import AnimationConfig
    from ..frame_scheduler import FrameState
    from ..scene import DashedPath


def glint_fraction(band_width: float) -> float:
    fraction = GLINT_FRACTION_BASE + band_width * GLINT_FRACTION_PER_BAND
    return min(GLINT_FRACTION_MAX, max(GLINT_FRACTION_MIN, fraction))


class GlintOverlay(BaseOverlay):
    """Duplicates each animated outline and animates the copy as a single glint."""

    name = "glint"

    def build_overlay(self, path: "DashedPath", config: "AnimationConfig") -> OverlaySpec:
        glint_length = max(GLINT_MIN_LENGTH, path.total_length * glint_fraction(config.wave_band_width))
        return OverlaySpec(
            glint_length=glint_length,
            # Never shorter than the path, so the pattern shows one glint per traversal
            gap_length=max(GLINT_GAP_LENGTH, 2 * path.total_length),
            speed_multiplier=min(1.0, max(GLINT_SPEED_MIN, config.glint_speed)),
            path_length=path.total_length,
        )

    def install(
        self,
        root: ET.Element,
        paths: Sequence["DashedPath"],
        config: "AnimationConfig",
        width: int,
    ) -> None:
        del width
        elements = find_animated_paths(root)
        parents = build_parent_map(root)
        for path in paths:
            base = elements[path.id]
            spec = self.build_overlay(path, config)
            set_presentation_attribute(base, "stroke", config.color_from)

            glint = copy.deepcopy(base)
            glint.attrib.pop("id", None)
            del glint.attrib[ANIMATED_PATH_ATTR]
            glint.set(GLINT_PATH_ATTR, path.id)
            set_presentation_attribute(glint, "stroke", config.color_to)
            set_presentation_attribute(glint, "stroke-dasharray", spec.dash_array)
            set_presentation_attribute(glint, "stroke-dashoffset", "0")
            set_presentation_attribute(glint, "stroke-linecap", "round")
            set_presentation_attribute(glint, "fill", "none")

            # Directly after the base path so it paints on top
            parent = parents[base]
            parent.insert(list(parent).index(base) + 1, glint)

    def apply(self, root: ET.Element, path_ids: Sequence[str], frame_state: "FrameState") -> None:
        if frame_state.glint_offsets is None:
            return
        offsets = dict(zip(path_ids, frame_state.glint_offsets))
        for element in root.iter():
            source_id = element.get(GLINT_PATH_ATTR)
            if source_id is not None:
                set_presentation_attribute(
                    element, "stroke-dashoffset", format_number(offsets[source_id])
                )
