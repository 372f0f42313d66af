"""IsoCity — isometric building footprints from open map data.

Converts geographic building footprints into depth-sorted, culled and
pickable 2.5D visuals on an isometric map.
"""

from isocity.models import (
    Bounds, Building, BuildingRecord, BuildingType, GeographicCoordinate,
    ProjectedCoordinate, ScreenCoordinate, WorldCoordinate,
)
from isocity.classification import classify_tag
from isocity.transformer import CoordinateTransformer, haversine_distance
from isocity.scene import Scene
from isocity.events import BUILDING_SELECTED, EventBus
from isocity.renderer import BuildingRenderer
from isocity.loader import GeoJSONLoader, load_geojson
from isocity.system import BuildingFootprintSystem, FootprintConfig, create_building_system
from isocity.venues import VENUE_PRESETS, get_venue

__version__ = "0.1.0"
