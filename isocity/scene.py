"""Headless retained-mode scene: graphics handles, tweens and pointer input.

This stands in for the hosting game engine.  Handles are owned
explicitly: nothing is garbage collected out of the display list, and a
handle must be ``destroy()``-ed to release it.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from .errors import GraphicsDestroyedError
from .geometry import contains_point
from .models import Bounds

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

POINTER_OVER = "pointerover"
POINTER_OUT = "pointerout"
POINTER_DOWN = "pointerdown"


@dataclass(frozen=True)
class DrawCommand:
    kind: str                   # 'fill' or 'stroke'
    points: Tuple[Point, ...]
    color: int
    alpha: float
    width: float = 0.0


@dataclass
class Tween:
    targets: Tuple["Graphics", ...]
    scale: float
    duration_ms: int
    ease: str = "Quad.easeOut"


class Graphics:
    """A drawable, depth-sorted, optionally interactive display object."""

    _ids = itertools.count(1)

    def __init__(self, scene: "Scene"):
        self.id = next(self._ids)
        self.scene = scene
        self.commands: List[DrawCommand] = []
        self.depth = 0.0
        self.visible = True
        self.scale_x = 1.0
        self.scale_y = 1.0
        self.hit_area: Optional[Polygon] = None
        self.destroyed = False
        self._fill = (0xffffff, 1.0)
        self._line = (1.0, 0x000000, 1.0)
        self._handlers: Dict[str, List[Callable]] = {}

    def _check_alive(self):
        if self.destroyed:
            raise GraphicsDestroyedError(f"Graphics #{self.id} was destroyed")

    # ── Drawing ────────────────────────────────────────────────────────

    def clear(self) -> "Graphics":
        self._check_alive()
        self.commands.clear()
        return self

    def fill_style(self, color: int, alpha: float = 1.0) -> "Graphics":
        self._check_alive()
        self._fill = (color, alpha)
        return self

    def line_style(self, width: float, color: int, alpha: float = 1.0) -> "Graphics":
        self._check_alive()
        self._line = (width, color, alpha)
        return self

    def fill_polygon(self, points: Sequence[Point]) -> "Graphics":
        self._check_alive()
        color, alpha = self._fill
        self.commands.append(DrawCommand('fill', tuple(map(tuple, points)), color, alpha))
        return self

    def stroke_polygon(self, points: Sequence[Point]) -> "Graphics":
        self._check_alive()
        width, color, alpha = self._line
        self.commands.append(DrawCommand('stroke', tuple(map(tuple, points)),
                                         color, alpha, width))
        return self

    def extent(self) -> Optional[Bounds]:
        pts = [pt for cmd in self.commands for pt in cmd.points]
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return Bounds(min(xs), min(ys), max(xs), max(ys))

    # ── State ──────────────────────────────────────────────────────────

    def set_depth(self, depth: float) -> "Graphics":
        self.depth = depth
        return self

    def set_visible(self, visible: bool) -> "Graphics":
        self.visible = visible
        return self

    def set_scale(self, x: float, y: Optional[float] = None) -> "Graphics":
        self.scale_x = x
        self.scale_y = x if y is None else y
        return self

    # ── Interaction ────────────────────────────────────────────────────

    def set_interactive(self, hit_area: Polygon) -> "Graphics":
        self._check_alive()
        self.hit_area = hit_area
        return self

    @property
    def interactive(self) -> bool:
        return self.hit_area is not None

    def on(self, event: str, callback: Callable) -> "Graphics":
        self._handlers.setdefault(event, []).append(callback)
        return self

    def emit(self, event: str, *args) -> None:
        for callback in list(self._handlers.get(event, ())):
            callback(*args)

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        self._handlers.clear()
        self.hit_area = None
        self.commands = []
        self.scene._release(self)

    def __repr__(self):
        state = "destroyed" if self.destroyed else f"depth={self.depth:g}, visible={self.visible}"
        return f"<Graphics #{self.id} {state}>"


class InputPlugin:
    """Routes pointer positions to the top-most interactive handle."""

    def __init__(self, scene: "Scene"):
        self.scene = scene
        self.default_cursor = "default"
        self._hovered: Optional[Graphics] = None

    def set_default_cursor(self, cursor: str) -> None:
        self.default_cursor = cursor

    def hit_test(self, x: float, y: float) -> Optional[Graphics]:
        for graphics in reversed(self.scene.display_list()):
            if (graphics.visible and graphics.interactive
                    and contains_point(graphics.hit_area, x, y)):
                return graphics
        return None

    def pointer_move(self, x: float, y: float) -> Optional[Graphics]:
        target = self.hit_test(x, y)
        if target is not self._hovered:
            previous, self._hovered = self._hovered, target
            if previous is not None and not previous.destroyed:
                previous.emit(POINTER_OUT, x, y)
            if target is not None:
                target.emit(POINTER_OVER, x, y)
        return target

    def pointer_down(self, x: float, y: float) -> Optional[Graphics]:
        target = self.hit_test(x, y)
        if target is not None:
            target.emit(POINTER_DOWN, x, y)
        return target

    def _forget(self, graphics: Graphics) -> None:
        if self._hovered is graphics:
            self._hovered = None


class Scene:
    """Owns every live graphics handle and the active tweens.

    A handle has at most one active tween; a new tween on any of its
    targets replaces the old one, and releasing a handle drops its tweens.
    """

    def __init__(self) -> None:
        self._children: Dict[int, Graphics] = {}
        self.tweens: List[Tween] = []
        self.input = InputPlugin(self)

    def add_graphics(self) -> Graphics:
        graphics = Graphics(self)
        self._children[graphics.id] = graphics
        return graphics

    def add_tween(self, targets: Sequence[Graphics], scale: float,
                  duration_ms: int = 200, ease: str = "Quad.easeOut") -> Tween:
        """Start a scale tween, replacing any active tween on the same targets.

        The end state is applied immediately.  Destroyed handles are ignored.
        """
        live = tuple(t for t in targets if not t.destroyed)
        tween = Tween(live, scale, duration_ms, ease)
        self._drop_tweens(live)
        for target in live:
            target.set_scale(scale)
        if live:
            self.tweens.append(tween)
        return tween

    def display_list(self) -> List[Graphics]:
        """Live handles in painter's order (ascending depth, then creation)."""
        return sorted(self._children.values(), key=lambda g: (g.depth, g.id))

    def __len__(self) -> int:
        return len(self._children)

    def _release(self, graphics: Graphics) -> None:
        self._children.pop(graphics.id, None)
        self._drop_tweens((graphics,))
        self.input._forget(graphics)

    def _drop_tweens(self, targets: Sequence[Graphics]) -> None:
        ids = {t.id for t in targets}
        self.tweens = [tw for tw in self.tweens
                       if not any(t.id in ids for t in tw.targets)]

    def destroy(self) -> None:
        for graphics in list(self._children.values()):
            graphics.destroy()
        self.tweens.clear()
        logger.debug("Scene destroyed")
