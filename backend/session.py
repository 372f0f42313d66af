"""Process-wide map session shared by the API routers."""

import logging
from typing import List, Optional

from isocity import BUILDING_SELECTED, Building, Scene, create_building_system
from isocity.system import BuildingFootprintSystem

from backend import config

logger = logging.getLogger(__name__)


class MapSession:
    """One scene plus one footprint system anchored on a venue preset.

    Route handlers are ``async def`` so every call runs on the event loop
    thread; the system itself is not thread-safe.
    """

    def __init__(self, venue: str = config.VENUE,
                 max_buildings: int = config.MAX_BUILDINGS,
                 min_building_area: float = config.MIN_BUILDING_AREA) -> None:
        self.venue = venue
        self.scene = Scene()
        self.system: BuildingFootprintSystem = create_building_system(
            self.scene, venue,
            max_buildings=max_buildings,
            min_building_area=min_building_area,
        )
        self.selections: List[str] = []
        self.system.event_bus.on(BUILDING_SELECTED, self._on_selected)
        logger.info(f"Map session ready for venue {venue}")

    def _on_selected(self, payload) -> None:
        self.selections.append(payload["building_id"])

    def close(self) -> None:
        self.system.destroy()
        self.scene.destroy()


_session: Optional[MapSession] = None


def get_session() -> MapSession:
    global _session
    if _session is None:
        _session = MapSession()
    return _session


def reset_session(venue: Optional[str] = None) -> MapSession:
    """Tear down the current session and start a new one."""
    global _session
    if _session is not None:
        _session.close()
    _session = MapSession(venue=venue or config.VENUE)
    return _session


def building_info(building: Building) -> dict:
    record = building.record
    return {
        "id": building.id,
        "type": building.type.value,
        "name": building.name,
        "source_tag": record.source_tag if record else None,
        "height": building.height,
        "levels": building.levels,
        "area": building.area,
        "footprint": [[p.x, p.y] for p in building.footprint],
    }
