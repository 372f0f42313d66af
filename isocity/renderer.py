"""BuildingRenderer — two-layer 2.5D building visuals with culling and picking.

Each building is drawn as a flat floor polygon plus one extruded quad per
south/east-facing edge.  Depth ordering uses a single scalar per object
(bounding-box centre y + extruded height), which gives correct isometric
front-to-back order without a z-buffer.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from shapely.geometry import Polygon

from .constants import (
    COLOR_SCHEMES, DEFAULT_BUILDING_HEIGHT, DEFAULT_ISOMETRIC_HEIGHT_SCALE,
    FLOOR_STROKE_WIDTH, HIGHLIGHT_ALPHA_BOOST, HIGHLIGHT_SCALE, HIGHLIGHT_TWEEN_MS,
    WALL_DEPTH_BIAS, WALL_STROKE_ALPHA_FACTOR, WALL_STROKE_WIDTH,
)
from .events import BUILDING_SELECTED, EventBus
from .geometry import contains_point, hit_polygon, visible_wall_edges, wall_quad
from .models import Bounds, Building, BuildingType, ColorScheme
from .scene import POINTER_DOWN, POINTER_OUT, POINTER_OVER, Graphics, Scene

logger = logging.getLogger(__name__)


@dataclass
class RenderedBuilding:
    """Visual resources owned by the renderer for one building id."""
    building: Building
    floor: Graphics
    walls: List[Graphics]
    bounds: Bounds
    hit_area: Polygon
    extrusion: float
    visible: bool = True
    highlighted: bool = False

    @property
    def depth(self) -> float:
        return self.floor.depth

    def release(self) -> None:
        self.floor.destroy()
        for wall in self.walls:
            wall.destroy()
        self.walls = []


class BuildingRenderer:
    def __init__(self, scene: Scene, event_bus: Optional[EventBus] = None,
                 isometric_height_scale: float = DEFAULT_ISOMETRIC_HEIGHT_SCALE):
        self.scene = scene
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.isometric_height_scale = isometric_height_scale
        self._buildings: Dict[str, RenderedBuilding] = {}

    @staticmethod
    def color_scheme(building_type: BuildingType) -> ColorScheme:
        return COLOR_SCHEMES[building_type]

    # ── Adding ─────────────────────────────────────────────────────────

    def add_building(self, building: Building) -> RenderedBuilding:
        """Render ``building``; an existing visual with the same id is replaced."""
        if building.id in self._buildings:
            logger.warning(f"Building {building.id} already rendered; replacing it")
            self.remove_building(building.id)

        rendered = self._render(building)
        self._buildings[building.id] = rendered
        return rendered

    def add_buildings(self, buildings: Iterable[Building]) -> None:
        for building in buildings:
            self.add_building(building)

    def _render(self, building: Building) -> RenderedBuilding:
        scheme = self.color_scheme(building.type)
        height = building.height or DEFAULT_BUILDING_HEIGHT
        extrusion = height * self.isometric_height_scale
        footprint = building.footprint
        bounds = Bounds.from_points(footprint)
        depth = bounds.center_y + extrusion

        # Walls first so they sit under the floor at equal depth
        walls = []
        for edge in visible_wall_edges(footprint):
            wall = self.scene.add_graphics()
            quad = wall_quad(edge, extrusion)
            wall.fill_style(scheme.wall, scheme.wall_alpha)
            wall.fill_polygon(quad)
            wall.line_style(WALL_STROKE_WIDTH, scheme.stroke,
                            scheme.stroke_alpha * WALL_STROKE_ALPHA_FACTOR)
            wall.stroke_polygon(quad)
            wall.set_depth(depth - WALL_DEPTH_BIAS)
            walls.append(wall)

        floor = self.scene.add_graphics()
        self._draw_floor(floor, building, scheme.floor, scheme.floor_alpha, scheme)
        floor.set_depth(depth)

        hit_area = hit_polygon(footprint)
        if building.interactive:
            self._setup_interactivity(floor, building, hit_area)

        return RenderedBuilding(building=building, floor=floor, walls=walls,
                                bounds=bounds, hit_area=hit_area, extrusion=extrusion)

    @staticmethod
    def _draw_floor(graphics: Graphics, building: Building, fill: int,
                    fill_alpha: float, scheme: ColorScheme) -> None:
        points = [(p.x, p.y) for p in building.footprint]
        graphics.clear()
        graphics.fill_style(fill, fill_alpha)
        graphics.fill_polygon(points)
        graphics.line_style(FLOOR_STROKE_WIDTH, scheme.stroke, scheme.stroke_alpha)
        graphics.stroke_polygon(points)

    # ── Interaction ────────────────────────────────────────────────────

    def _setup_interactivity(self, floor: Graphics, building: Building,
                             hit_area: Polygon) -> None:
        building_id = building.id

        def on_over(*_):
            self.set_highlight(building_id, True)
            self.scene.input.set_default_cursor("pointer")

        def on_out(*_):
            self.set_highlight(building_id, False)
            self.scene.input.set_default_cursor("default")

        def on_down(*_):
            self._handle_click(building)

        floor.set_interactive(hit_area)
        floor.on(POINTER_OVER, on_over)
        floor.on(POINTER_OUT, on_out)
        floor.on(POINTER_DOWN, on_down)

    def _handle_click(self, building: Building) -> None:
        logger.info(f"Building selected: {building.id} ({building.name or 'unnamed'})")
        self.event_bus.emit(BUILDING_SELECTED, {
            "building_id": building.id,
            "building": building,
        })

    def set_highlight(self, building_id: str, highlighted: bool) -> None:
        """Toggle hover highlight; a call that does not change state is a no-op."""
        rendered = self._buildings.get(building_id)
        if rendered is None or rendered.highlighted == highlighted:
            return

        rendered.highlighted = highlighted
        scheme = self.color_scheme(rendered.building.type)
        if highlighted:
            self._draw_floor(rendered.floor, rendered.building, scheme.highlight,
                             scheme.floor_alpha + HIGHLIGHT_ALPHA_BOOST, scheme)
        else:
            self._draw_floor(rendered.floor, rendered.building, scheme.floor,
                             scheme.floor_alpha, scheme)

        self.scene.add_tween([rendered.floor, *rendered.walls],
                             scale=HIGHLIGHT_SCALE if highlighted else 1.0,
                             duration_ms=HIGHLIGHT_TWEEN_MS)

    # ── Per-frame culling ──────────────────────────────────────────────

    def update_visibility(self, viewport: Bounds) -> int:
        """Cull against ``viewport``; returns how many buildings changed state.

        Visual handles are only touched on an actual transition.
        """
        changed = 0
        for rendered in self._buildings.values():
            is_visible = rendered.bounds.intersects(viewport)
            if rendered.visible != is_visible:
                rendered.visible = is_visible
                rendered.floor.set_visible(is_visible)
                for wall in rendered.walls:
                    wall.set_visible(is_visible)
                changed += 1
        return changed

    # ── Queries ────────────────────────────────────────────────────────

    def get_building_at(self, x: float, y: float) -> Optional[Building]:
        """Top-most visible building whose footprint contains (x, y)."""
        ordered = sorted(self._buildings.values(), key=lambda r: r.depth, reverse=True)
        for rendered in ordered:
            if not rendered.visible:
                continue
            if contains_point(rendered.hit_area, x, y):
                return rendered.building
        return None

    def get_building(self, building_id: str) -> Optional[Building]:
        rendered = self._buildings.get(building_id)
        return rendered.building if rendered else None

    def get_rendered(self, building_id: str) -> Optional[RenderedBuilding]:
        return self._buildings.get(building_id)

    def get_all_buildings(self) -> List[Building]:
        return [r.building for r in self._buildings.values()]

    def get_buildings_by_type(self, building_type: Union[BuildingType, Iterable[BuildingType]]
                              ) -> List[Building]:
        if isinstance(building_type, BuildingType):
            wanted = {building_type}
        else:
            wanted = set(building_type)
        return [b for b in self.get_all_buildings() if b.type in wanted]

    def get_stats(self) -> dict:
        stats = {"total": len(self._buildings), "visible": 0, "highlighted": 0, "by_type": {}}
        for rendered in self._buildings.values():
            key = rendered.building.type.value
            stats["by_type"][key] = stats["by_type"].get(key, 0) + 1
            if rendered.visible:
                stats["visible"] += 1
            if rendered.highlighted:
                stats["highlighted"] += 1
        return stats

    def set_isometric_height_scale(self, scale: float) -> None:
        """Applies to buildings added after the call."""
        self.isometric_height_scale = scale

    def __len__(self) -> int:
        return len(self._buildings)

    def __contains__(self, building_id: str) -> bool:
        return building_id in self._buildings

    # ── Teardown ───────────────────────────────────────────────────────

    def remove_building(self, building_id: str) -> bool:
        rendered = self._buildings.pop(building_id, None)
        if rendered is None:
            return False
        rendered.release()
        return True

    def clear_all(self) -> None:
        for rendered in self._buildings.values():
            rendered.release()
        self._buildings.clear()

    def destroy(self) -> None:
        count = len(self._buildings)
        self.clear_all()
        logger.debug(f"Renderer destroyed, released {count} buildings")
