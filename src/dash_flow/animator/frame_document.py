"""Working SVG document for a render pass and per-frame serialization."""

import copy
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from ..config import AnimationConfig
from ._svg_shared import (
    find_animated_paths,
    format_number,
    local_name,
    set_presentation_attribute,
)
from .frame_scheduler import FrameState
from .overlays import BaseOverlay, OverlaySpec
from .scene import VectorScene


@dataclass(frozen=True)
class PreparedDocument:
    """
    An SVG template restyled for one render pass.

    Built once per pass; frames are produced from it with
    :func:`apply_frame_state`, which never modifies ``root``.
    """

    root: ET.Element
    width: int
    height: int
    path_ids: tuple[str, ...]
    dash_lengths: tuple[float, ...]
    overlay: BaseOverlay | None
    overlay_specs: tuple[OverlaySpec, ...] | None


def prepare_document(
    scene: VectorScene,
    config: AnimationConfig,
    overlay: BaseOverlay | None = None,
) -> PreparedDocument:
    """
    Copy the scene template and apply pass-wide styling.

    Applies the stroke width override, flattens the background to one opaque
    fill and installs the overlay. The scene itself is left untouched.
    """
    root = copy.deepcopy(scene.root)
    elements = find_animated_paths(root)

    if config.stroke_width is not None:
        for path in scene.paths:
            set_presentation_attribute(elements[path.id], "stroke-width", format_number(config.stroke_width))

    _normalize_background(root, config.background)

    overlay_specs = None
    if overlay is not None:
        overlay.install(root, scene.paths, config, scene.width)
        specs = [overlay.build_overlay(path, config) for path in scene.paths]
        if all(spec is not None for spec in specs):
            overlay_specs = tuple(specs)

    return PreparedDocument(
        root=root,
        width=scene.width,
        height=scene.height,
        path_ids=tuple(path.id for path in scene.paths),
        dash_lengths=scene.dash_lengths,
        overlay=overlay,
        overlay_specs=overlay_specs,
    )


def apply_frame_state(document: PreparedDocument, frame_state: FrameState) -> str:
    """Serialize the document with the offsets of one frame applied."""
    root = copy.deepcopy(document.root)
    elements = find_animated_paths(root)
    for path_id, offset in zip(document.path_ids, frame_state.dash_offsets):
        set_presentation_attribute(elements[path_id], "stroke-dashoffset", format_number(offset))
    if document.overlay is not None:
        document.overlay.apply(root, document.path_ids, frame_state)
    return ET.tostring(root, encoding="unicode")


def _normalize_background(root: ET.Element, background: str) -> None:
    root.set("style", f"background-color: {background}; display: block;")
    for element in root.iter():
        if local_name(element.tag) == "rect":
            element.set("fill", background)
            break
