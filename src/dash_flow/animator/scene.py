"""SVG scene ingestion: locate dashed paths and measure them."""

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from svgpathtools import parse_path

from ..constants import ANIMATED_PATH_ATTR, SVG_NAMESPACE, XLINK_NAMESPACE
from ..errors import InvalidSceneError
from ._svg_shared import get_presentation_attribute, local_name

logger = logging.getLogger(__name__)

ET.register_namespace("", SVG_NAMESPACE)
ET.register_namespace("xlink", XLINK_NAMESPACE)

_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px)?\s*$")
_DASH_SPLIT_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class DashedPath:
    """An animated path: stable id, dash pattern and total stroke length."""

    id: str
    dash_pattern: tuple[float, ...]
    total_length: float

    @property
    def dash_length(self) -> float:
        """Length of one full dash cycle (odd patterns repeat, as SVG renders them)."""
        return dash_period(self.dash_pattern)


@dataclass(frozen=True)
class VectorScene:
    """A parsed SVG template and the dashed paths found in it. Never mutated."""

    root: ET.Element
    width: int
    height: int
    paths: tuple[DashedPath, ...]

    @property
    def dash_lengths(self) -> tuple[float, ...]:
        return tuple(path.dash_length for path in self.paths)


def parse_dash_pattern(value: str | None) -> tuple[float, ...]:
    """
    Parse a ``stroke-dasharray`` value.

    Returns an empty tuple for ``none`` or a missing value.

    Raises:
        InvalidSceneError: If the pattern has non-numeric or negative entries
    """
    if value is None or value.strip().lower() in ("", "none"):
        return ()
    pattern = []
    for part in _DASH_SPLIT_RE.split(value.strip()):
        number = _parse_length(part)
        if number is None or number < 0:
            raise InvalidSceneError(f"Invalid stroke-dasharray: {value!r}")
        pattern.append(number)
    return tuple(pattern)


def dash_period(pattern: tuple[float, ...]) -> float:
    total = sum(pattern)
    return total * 2 if len(pattern) % 2 else total


def load_scene(markup: str | bytes) -> VectorScene:
    """
    Parse SVG markup and collect its dashed paths.

    Args:
        markup: SVG document text

    Returns:
        The scene with every dashed path tagged by id

    Raises:
        InvalidSceneError: If the document is malformed, has no usable size
            or contains no animatable dashed path
    """
    try:
        root = ET.fromstring(markup)
    except ET.ParseError as e:
        raise InvalidSceneError(f"Malformed SVG document: {e}")

    if local_name(root.tag) != "svg":
        raise InvalidSceneError(f"Root element must be <svg> (got <{local_name(root.tag)}>)")

    width, height = _scene_size(root)
    paths = _collect_dashed_paths(root)
    if not paths:
        raise InvalidSceneError("No dashed paths found in scene")

    logger.info("Loaded scene %dx%d with %d dashed paths", width, height, len(paths))
    return VectorScene(root=root, width=width, height=height, paths=tuple(paths))


def load_scene_file(file_path: str | Path) -> VectorScene:
    """Load a scene from an SVG file."""
    return load_scene(Path(file_path).read_bytes())


def _collect_dashed_paths(root: ET.Element) -> list[DashedPath]:
    paths: list[DashedPath] = []
    used_ids: set[str] = set()
    for index, element in enumerate(el for el in root.iter() if local_name(el.tag) == "path"):
        pattern = parse_dash_pattern(get_presentation_attribute(element, "stroke-dasharray"))
        if not pattern:
            continue
        if dash_period(pattern) <= 0:
            logger.warning("Skipping path %d: dash pattern %r has zero length", index, pattern)
            continue

        path_id = element.get("id") or f"dash-{index}"
        if path_id in used_ids:
            path_id = f"{path_id}-{index}"
        used_ids.add(path_id)

        total_length = _measure_total_length(element, pattern)
        element.set(ANIMATED_PATH_ATTR, path_id)
        paths.append(DashedPath(id=path_id, dash_pattern=pattern, total_length=total_length))
        logger.debug(
            "Dashed path %s: pattern=%s dash_length=%.2f total_length=%.2f",
            path_id, pattern, dash_period(pattern), total_length,
        )
    return paths


def measure_path_length(d: str) -> float:
    """
    Measure the length of an SVG path ``d`` attribute in user units.

    Raises:
        ValueError: If the path data is malformed
    """
    try:
        return float(parse_path(d).length())
    except IndexError as e:
        # The parser runs out of tokens on truncated commands
        raise ValueError(f"Truncated path data: {d!r}") from e


def _measure_total_length(element: ET.Element, pattern: tuple[float, ...]) -> float:
    d = element.get("d") or ""
    try:
        measured = measure_path_length(d)
    except ValueError as e:
        logger.warning("Could not measure path geometry, using dash length: %s", e)
        measured = 0.0
    return measured if measured > 0 else dash_period(pattern)


def _scene_size(root: ET.Element) -> tuple[int, int]:
    width = _parse_length(root.get("width"))
    height = _parse_length(root.get("height"))
    if width is None or height is None:
        view_box = root.get("viewBox")
        if view_box:
            parts = _DASH_SPLIT_RE.split(view_box.strip())
            if len(parts) == 4:
                width = width if width is not None else _parse_length(parts[2])
                height = height if height is not None else _parse_length(parts[3])
    if not width or not height or width <= 0 or height <= 0:
        raise InvalidSceneError("SVG must declare a positive width and height or a viewBox")
    return math.ceil(width), math.ceil(height)


def _parse_length(value: str | None) -> float | None:
    if value is None:
        return None
    match = _LENGTH_RE.match(value)
    if match is None:
        return None
    return float(match.group(1))
