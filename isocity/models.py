"""Data classes shared by the transform, ingest and render stages."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple


class BuildingType(str, Enum):
    COMMERCIAL = "commercial"
    RESIDENTIAL = "residential"
    HOTEL = "hotel"
    RESTAURANT = "restaurant"
    OFFICE = "office"
    RETAIL = "retail"
    CULTURAL = "cultural"
    INDUSTRIAL = "industrial"
    PARK = "park"
    PARKING = "parking"


# ── Coordinate spaces ───────────────────────────────────────────────────

@dataclass(frozen=True)
class GeographicCoordinate:
    """WGS84 latitude/longitude in degrees."""
    lat: float
    lng: float


@dataclass(frozen=True)
class ProjectedCoordinate:
    """Spherical Mercator easting/northing in meters."""
    x: float
    y: float


@dataclass(frozen=True)
class WorldCoordinate:
    """Cartesian world units; y grows towards the south."""
    x: float
    y: float


@dataclass(frozen=True)
class ScreenCoordinate:
    """2:1 isometric screen position in pixels."""
    x: float
    y: float


# ── Bounds ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> "Bounds":
        """Build from a camera-style ``(x, y, width, height)`` rectangle."""
        return cls(x, y, x + width, y + height)

    @classmethod
    def from_points(cls, points: Iterable[WorldCoordinate]) -> "Bounds":
        points = list(points)
        if not points:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2

    @property
    def center_y(self) -> float:
        return (self.min_y + self.max_y) / 2

    def intersects(self, other: "Bounds") -> bool:
        """Inclusive rectangle overlap (touching edges count)."""
        return not (other.max_x < self.min_x or other.min_x > self.max_x
                    or other.max_y < self.min_y or other.min_y > self.max_y)

    def contains_point(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                      max(self.max_x, other.max_x), max(self.max_y, other.max_y))


# ── Buildings ───────────────────────────────────────────────────────────

def _freeze(properties: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(properties or {}))


@dataclass(frozen=True)
class BuildingRecord:
    """A normalized footprint as delivered by the ingestion boundary.

    ``footprint`` is the outer ring only; rings are never closed or
    re-wound here, so collinear and near-duplicate points pass through.
    """
    id: str
    source_tag: Optional[str]
    footprint: Tuple[GeographicCoordinate, ...]
    name: Optional[str] = None
    height: Optional[float] = None
    levels: Optional[int] = None
    properties: Mapping[str, Any] = field(default_factory=lambda: _freeze(None),
                                          compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "footprint", tuple(self.footprint))
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", _freeze(self.properties))

    @classmethod
    def from_lnglat(cls, id: str, ring: Sequence[Sequence[float]],
                    source_tag: Optional[str] = None, name: Optional[str] = None,
                    height: Optional[float] = None, levels: Optional[int] = None,
                    properties: Optional[Mapping[str, Any]] = None) -> "BuildingRecord":
        """Build a record from a GeoJSON-ordered ``[lng, lat]`` ring."""
        footprint = tuple(GeographicCoordinate(lat=float(pt[1]), lng=float(pt[0]))
                          for pt in ring)
        return cls(id=str(id), source_tag=source_tag, footprint=footprint,
                   name=name, height=height, levels=levels,
                   properties=_freeze(properties))


@dataclass(frozen=True)
class Building:
    """A classified building in world coordinates, ready for the renderer."""
    id: str
    type: BuildingType
    footprint: Tuple[WorldCoordinate, ...]
    name: Optional[str] = None
    height: Optional[float] = None
    levels: Optional[int] = None
    area: Optional[float] = None
    interactive: bool = True
    record: Optional[BuildingRecord] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "footprint", tuple(self.footprint))


@dataclass(frozen=True)
class ColorScheme:
    """Fill/stroke palette for one building type. Colors are 0xRRGGBB."""
    floor: int
    floor_alpha: float
    wall: int
    wall_alpha: float
    stroke: int
    stroke_alpha: float
    highlight: int
