"""Shared helpers for reading and patching SVG element trees."""

import xml.etree.ElementTree as ET
from functools import lru_cache

from ..constants import ANIMATED_PATH_ATTR


def local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""  # Comments and processing instructions
    return tag.rsplit("}", 1)[-1]


@lru_cache(maxsize=8192)
def format_number(value: float) -> str:
    if abs(value - round(value)) < 1e-9:
        return str(int(round(value)))
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def get_presentation_attribute(element: ET.Element, name: str) -> str | None:
    """Read a presentation property, preferring an inline ``style`` declaration."""
    for declaration in (element.get("style") or "").split(";"):
        key, _, value = declaration.partition(":")
        if key.strip() == name and value.strip():
            return value.strip()
    return element.get(name)


def set_presentation_attribute(element: ET.Element, name: str, value: str) -> None:
    """Set a presentation attribute, dropping any ``style`` declaration that would override it."""
    style = element.get("style")
    if style:
        kept = [
            declaration
            for declaration in style.split(";")
            if declaration.strip() and declaration.partition(":")[0].strip() != name
        ]
        if kept:
            element.set("style", ";".join(kept))
        else:
            del element.attrib["style"]
    element.set(name, value)


def find_animated_paths(root: ET.Element) -> dict[str, ET.Element]:
    """Map animated path ids to their elements, in document order."""
    return {
        element.get(ANIMATED_PATH_ATTR, ""): element
        for element in root.iter()
        if element.get(ANIMATED_PATH_ATTR) is not None
    }


def build_parent_map(root: ET.Element) -> dict[ET.Element, ET.Element]:
    return {child: parent for parent in root.iter() for child in parent}


def find_or_create_defs(root: ET.Element) -> ET.Element:
    for child in root:
        if local_name(child.tag) == "defs":
            return child
    defs = ET.Element(qualified_child_tag(root, "defs"))
    root.insert(0, defs)
    return defs


def qualified_child_tag(root: ET.Element, name: str) -> str:
    """Tag name for a new child, matching the namespace style of ``root``."""
    if isinstance(root.tag, str) and root.tag.startswith("{"):
        namespace = root.tag[1:].split("}", 1)[0]
        return f"{{{namespace}}}{name}"
    return name
