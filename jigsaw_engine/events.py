"""Input events accepted by :meth:`AssemblyEngine.handle_input`.

Pointer coordinates are canvas-local view-space pixels. Touch input maps onto
the same pointer events (first touch point only).
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Wheel:
    """Scroll wheel; negative ``delta_y`` (scroll up) zooms in."""

    delta_y: float


@dataclass(frozen=True)
class Tick:
    """Periodic timer tick from the host event loop."""


@dataclass(frozen=True)
class VisibilityChange:
    hidden: bool


InputEvent = Union[PointerDown, PointerMove, PointerUp, Wheel, Tick, VisibilityChange]
