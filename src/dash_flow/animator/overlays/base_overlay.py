"""Base overlay interface for effects layered on animated dashed paths."""

import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from .._svg_shared import format_number

if TYPE_CHECKING:
    from ...config import AnimationConfig
    from ..frame_scheduler import FrameState
    from ..scene import DashedPath


@dataclass(frozen=True, slots=True)
class OverlaySpec:
    """Glint geometry for one path, derived once per render pass."""

    glint_length: float
    gap_length: float
    speed_multiplier: float
    path_length: float

    @property
    def dash_array(self) -> str:
        return f"{format_number(self.glint_length)} {format_number(self.gap_length)}"


class BaseOverlay(ABC):
    """Abstract base class for overlay effects."""

    name: str = ""

    @abstractmethod
    def build_overlay(self, path: "DashedPath", config: "AnimationConfig") -> OverlaySpec | None:
        """
        Derive per-path overlay geometry.

        Args:
            path: The animated path
            config: Animation settings for this pass

        Returns:
            Geometry consumed by the frame scheduler, or None when the overlay
            has no per-path timing
        """
        raise NotImplementedError

    @abstractmethod
    def install(
        self,
        root: ET.Element,
        paths: Sequence["DashedPath"],
        config: "AnimationConfig",
        width: int,
    ) -> None:
        """Make structural changes to the working document once per pass."""
        raise NotImplementedError

    def apply(self, root: ET.Element, path_ids: Sequence[str], frame_state: "FrameState") -> None:
        """Patch per-frame attributes on an installed document."""
        del root, path_ids, frame_state
