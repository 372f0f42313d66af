"""BuildingFootprintSystem — ingest → transform → filter → classify → render.

Usage::

    scene = Scene()
    system = create_building_system(scene, "pittsburgh")
    system.load_geojson("pittsburgh-buildings.geojson")
    ...
    system.update_visibility(camera_view)   # once per frame
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .classification import classify_tag
from .constants import (
    DEFAULT_ISOMETRIC_HEIGHT_SCALE, DEFAULT_MAX_BUILDINGS, DEFAULT_MIN_BUILDING_AREA,
    DEFAULT_TILE_HEIGHT, DEFAULT_TILE_WIDTH,
)
from .errors import ConfigurationError
from .events import EventBus
from .geometry import shoelace_area
from .loader import GeoJSONLoader, GeoJSONSource
from .models import Bounds, Building, BuildingRecord, BuildingType, GeographicCoordinate, WorldCoordinate
from .renderer import BuildingRenderer
from .scene import Scene
from .transformer import CoordinateTransformer, TransformerConfig
from .venues import get_venue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FootprintConfig:
    origin: GeographicCoordinate
    meters_per_world_unit: float = 1.0
    world_offset: Tuple[float, float] = (0.0, 0.0)
    interactive: bool = True
    max_buildings: int = DEFAULT_MAX_BUILDINGS
    min_building_area: float = DEFAULT_MIN_BUILDING_AREA
    tile_width: float = DEFAULT_TILE_WIDTH
    tile_height: float = DEFAULT_TILE_HEIGHT
    isometric_height_scale: float = DEFAULT_ISOMETRIC_HEIGHT_SCALE

    def __post_init__(self):
        # raises ConfigurationError for a bad scale or tile size
        self.transformer_config
        if self.max_buildings < 0:
            raise ConfigurationError(f"max_buildings must be >= 0, got {self.max_buildings}")
        if self.min_building_area < 0:
            raise ConfigurationError(
                f"min_building_area must be >= 0, got {self.min_building_area}")
        object.__setattr__(self, "world_offset", tuple(float(v) for v in self.world_offset))

    @property
    def transformer_config(self) -> TransformerConfig:
        return TransformerConfig(self.origin, float(self.meters_per_world_unit),
                                 float(self.tile_width), float(self.tile_height))


class BuildingFootprintSystem:
    """Owns one CoordinateTransformer and one BuildingRenderer.

    All calls are synchronous and must come from a single thread.
    """

    def __init__(self, scene: Scene, config: FootprintConfig,
                 event_bus: Optional[EventBus] = None):
        self.scene = scene
        self.config = config
        self.transformer = self._make_transformer(config)
        self.renderer = BuildingRenderer(scene, event_bus=event_bus,
                                         isometric_height_scale=config.isometric_height_scale)
        self.loader = GeoJSONLoader(auto_simplify=True)
        self._is_loading = False

    @property
    def event_bus(self) -> EventBus:
        return self.renderer.event_bus

    @staticmethod
    def _make_transformer(config: FootprintConfig) -> CoordinateTransformer:
        return CoordinateTransformer.from_config(config.transformer_config)

    def configure(self, **changes) -> FootprintConfig:
        """Replace configuration fields and rebuild the transformer.

        Live buildings belong to the previous coordinate convention and are
        cleared.
        """
        config = dataclasses.replace(self.config, **changes)
        transformer = self._make_transformer(config)
        if len(self.renderer):
            logger.info(f"Reconfigured; clearing {len(self.renderer)} buildings")
        self.clear()
        self.config = config
        self.transformer = transformer
        self.renderer.set_isometric_height_scale(config.isometric_height_scale)
        return config

    # ── Ingest ─────────────────────────────────────────────────────────

    def ingest(self, records: Iterable[BuildingRecord]) -> int:
        """Transform, filter, classify and render ``records`` in input order.

        Returns the number of buildings accepted.  Records past
        ``max_buildings`` are dropped without being looked at.
        """
        max_buildings = self.config.max_buildings
        accepted = 0
        rejected = 0
        for record in records:
            if accepted >= max_buildings:
                logger.info(f"Reached max buildings limit ({max_buildings})")
                break
            building = self.transform_record(record)
            if building is None:
                rejected += 1
                continue
            self.renderer.add_building(building)
            accepted += 1

        logger.info(f"Rendered {accepted} buildings ({rejected} rejected)")
        return accepted

    def transform_record(self, record: BuildingRecord) -> Optional[Building]:
        """Build the renderer's Building for ``record``, or None if it is filtered out."""
        if len(record.footprint) < 3:
            logger.debug(f"Skipping {record.id}: fewer than 3 footprint points")
            return None

        off_x, off_y = self.config.world_offset
        footprint = [WorldCoordinate(p.x + off_x, p.y + off_y)
                     for p in self.transformer.transform_polygon(record.footprint)]

        area = shoelace_area(footprint)
        # `not area >= min` also drops NaN areas from unprojectable input
        if not area >= self.config.min_building_area:
            logger.debug(f"Skipping {record.id}: area {area:.1f} below minimum")
            return None

        return Building(
            id=record.id,
            type=classify_tag(record.source_tag),
            footprint=tuple(footprint),
            name=record.name,
            height=record.height,
            levels=record.levels,
            area=area,
            interactive=self.config.interactive,
            record=record,
        )

    def load_geojson(self, source: GeoJSONSource) -> int:
        """Parse a GeoJSON source with the bundled loader, then ``ingest`` it."""
        if self._is_loading:
            logger.warning("Already loading, ignoring re-entrant load")
            return 0

        self._is_loading = True
        try:
            records = self.loader.load(source)
            logger.info(f"Parsed {len(records)} buildings from GeoJSON")
            return self.ingest(records)
        finally:
            self._is_loading = False

    # ── Queries (delegated) ────────────────────────────────────────────

    def get_building_at(self, x: float, y: float) -> Optional[Building]:
        return self.renderer.get_building_at(x, y)

    def get_building(self, building_id: str) -> Optional[Building]:
        return self.renderer.get_building(building_id)

    def get_all_buildings(self) -> List[Building]:
        return self.renderer.get_all_buildings()

    def get_buildings_by_type(self, building_type: Union[BuildingType, Iterable[BuildingType]]
                              ) -> List[Building]:
        return self.renderer.get_buildings_by_type(building_type)

    def get_stats(self) -> dict:
        return self.renderer.get_stats()

    def update_visibility(self, viewport: Bounds) -> int:
        """Per-frame culling pass; call from the host's update loop."""
        return self.renderer.update_visibility(viewport)

    # ── Lifecycle ──────────────────────────────────────────────────────

    def clear(self) -> None:
        self.renderer.clear_all()

    def destroy(self) -> None:
        self.clear()
        self.renderer.destroy()


def create_building_system(scene: Scene, venue: str, event_bus: Optional[EventBus] = None,
                           **overrides) -> BuildingFootprintSystem:
    """Build a system anchored on a venue preset.

    Defaults to a 500-building cap and a 100 m² minimum footprint; any
    FootprintConfig field can be overridden.
    """
    preset = get_venue(venue)
    options = dict(
        origin=preset.origin,
        meters_per_world_unit=1.0,
        world_offset=preset.world_offset,
        interactive=True,
        max_buildings=500,
        min_building_area=100.0,
    )
    options.update(overrides)
    return BuildingFootprintSystem(scene, FootprintConfig(**options), event_bus=event_bus)
