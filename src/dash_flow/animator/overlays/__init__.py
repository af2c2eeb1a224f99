"""Overlay effects for animated dashed paths."""

from typing import TYPE_CHECKING

from .base_overlay import BaseOverlay, OverlaySpec
from .glint_overlay import GlintOverlay
from .gradient_sweep import GradientSweep

if TYPE_CHECKING:
    from ...config import AnimationConfig

OVERLAY_TYPES: dict[str, type[BaseOverlay]] = {
    "glint": GlintOverlay,
    "gradient": GradientSweep,
}


def supported_overlay_names() -> tuple[str, ...]:
    """Return supported overlay names in deterministic order."""
    return tuple(OVERLAY_TYPES.keys())


def create_overlay(name: str) -> BaseOverlay:
    """Create an overlay instance by name."""
    overlay_class = OVERLAY_TYPES.get(name)
    if overlay_class is None:
        available = ", ".join(supported_overlay_names())
        raise ValueError(f"Unknown overlay '{name}'. Available: {available}")
    return overlay_class()


def select_overlay(config: "AnimationConfig") -> BaseOverlay | None:
    """Pick the overlay for a pass. The glint replaces the gradient rendering."""
    if config.use_glint_overlay:
        return create_overlay("glint")
    if config.use_gradient_wave:
        return create_overlay("gradient")
    return None


__all__ = [
    "BaseOverlay",
    "OverlaySpec",
    "GlintOverlay",
    "GradientSweep",
    "OVERLAY_TYPES",
    "supported_overlay_names",
    "create_overlay",
    "select_overlay",
]
