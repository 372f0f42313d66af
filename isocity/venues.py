"""Read-only geographic anchors for known deployment venues."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Tuple

from .errors import UnknownVenueError
from .models import GeographicCoordinate

# Centre of the standard 2400x1800 world
DEFAULT_WORLD_OFFSET = (1200.0, 900.0)


@dataclass(frozen=True)
class VenuePreset:
    key: str
    display_name: str
    origin: GeographicCoordinate
    world_offset: Tuple[float, float] = DEFAULT_WORLD_OFFSET


VENUE_PRESETS = MappingProxyType({
    'pittsburgh': VenuePreset(
        'pittsburgh', 'CJS2026 Pittsburgh',
        GeographicCoordinate(lat=40.4462, lng=-79.9959)),
    'philadelphia': VenuePreset(
        'philadelphia', 'Philadelphia',
        GeographicCoordinate(lat=39.9550, lng=-75.1605)),
    'chapelhill': VenuePreset(
        'chapelhill', 'Chapel Hill',
        GeographicCoordinate(lat=35.9049, lng=-79.0469)),
})


def get_venue(key: str) -> VenuePreset:
    try:
        return VENUE_PRESETS[key.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(VENUE_PRESETS))
        raise UnknownVenueError(f"Unknown venue {key!r} (known: {known})") from None
