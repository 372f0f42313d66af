"""Coordinate transforms between geographic, projected, world and screen space.

Pipeline::

    WGS84 (lat, lng)  →  spherical Mercator (m)  →  world units  →  2:1 isometric px

Every forward step has an exact inverse.  Transforms never raise on bad
coordinates: out-of-range or NaN input propagates as NaN/inf.  The only
hard failure is an unusable configuration, rejected at construction.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from .constants import DEFAULT_TILE_HEIGHT, DEFAULT_TILE_WIDTH, EARTH_RADIUS
from .errors import ConfigurationError
from .models import (
    GeographicCoordinate, ProjectedCoordinate, ScreenCoordinate, WorldCoordinate,
)


RingInput = Iterable[Union[GeographicCoordinate, Sequence[float]]]


@dataclass(frozen=True)
class TransformerConfig:
    origin: GeographicCoordinate
    meters_per_world_unit: float = 1.0
    tile_width: float = DEFAULT_TILE_WIDTH
    tile_height: float = DEFAULT_TILE_HEIGHT

    def __post_init__(self):
        # `not x > 0` also rejects NaN
        if not self.meters_per_world_unit > 0:
            raise ConfigurationError(
                f"meters_per_world_unit must be positive, got {self.meters_per_world_unit!r}")
        if not self.tile_width > 0 or not self.tile_height > 0:
            raise ConfigurationError(
                f"tile size must be positive, got {self.tile_width!r}x{self.tile_height!r}")


# ── Vectorized kernels ──────────────────────────────────────────────────

def _mercator_forward(lat_deg, lng_deg):
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        lat_rad = np.radians(lat_deg)
        x = EARTH_RADIUS * np.radians(lng_deg)
        y = EARTH_RADIUS * np.log(np.tan(np.pi / 4 + lat_rad / 2))
    return x, y


def _mercator_inverse(x, y):
    with np.errstate(over='ignore', invalid='ignore'):
        lng = np.degrees(np.asarray(x, dtype=float) / EARTH_RADIUS)
        lat = np.degrees(2 * np.arctan(np.exp(np.asarray(y, dtype=float) / EARTH_RADIUS))
                         - np.pi / 2)
    return lat, lng


def haversine_distance(c1: GeographicCoordinate, c2: GeographicCoordinate) -> float:
    """Great-circle distance in meters between two WGS84 points."""
    lat1 = math.radians(c1.lat)
    lat2 = math.radians(c2.lat)
    d_lat = math.radians(c2.lat - c1.lat)
    d_lng = math.radians(c2.lng - c1.lng)

    a = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2)
    a = min(a, 1.0)  # rounding near antipodes
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS * c


class CoordinateTransformer:
    """Converts between the four coordinate spaces for one fixed configuration.

    The configuration (origin, scale, tile size) cannot change after
    construction; build a new transformer to reconfigure.
    """

    def __init__(self, origin: GeographicCoordinate, meters_per_world_unit: float = 1.0,
                 tile_width: float = DEFAULT_TILE_WIDTH,
                 tile_height: float = DEFAULT_TILE_HEIGHT):
        self._config = TransformerConfig(origin, float(meters_per_world_unit),
                                         float(tile_width), float(tile_height))
        ox, oy = _mercator_forward(origin.lat, origin.lng)
        self._origin_x = float(ox)
        self._origin_y = float(oy)
        self._half_tile_w = self._config.tile_width / 2
        self._half_tile_h = self._config.tile_height / 2

    @classmethod
    def from_config(cls, config: TransformerConfig) -> "CoordinateTransformer":
        return cls(config.origin, config.meters_per_world_unit,
                   config.tile_width, config.tile_height)

    @property
    def config(self) -> TransformerConfig:
        return self._config

    @property
    def origin(self) -> GeographicCoordinate:
        return self._config.origin

    @property
    def origin_projected(self) -> ProjectedCoordinate:
        return ProjectedCoordinate(self._origin_x, self._origin_y)

    # ── Forward ────────────────────────────────────────────────────────

    def geographic_to_projected(self, c: GeographicCoordinate) -> ProjectedCoordinate:
        x, y = _mercator_forward(c.lat, c.lng)
        return ProjectedCoordinate(float(x), float(y))

    def projected_to_world(self, c: ProjectedCoordinate) -> WorldCoordinate:
        scale = self._config.meters_per_world_unit
        # world y grows south, Mercator y grows north
        return WorldCoordinate((c.x - self._origin_x) / scale,
                               -(c.y - self._origin_y) / scale)

    def world_to_screen(self, c: WorldCoordinate) -> ScreenCoordinate:
        return ScreenCoordinate((c.x - c.y) * self._half_tile_w,
                                (c.x + c.y) * self._half_tile_h)

    def geographic_to_world(self, c: GeographicCoordinate) -> WorldCoordinate:
        return self.projected_to_world(self.geographic_to_projected(c))

    def geographic_to_screen(self, c: GeographicCoordinate) -> ScreenCoordinate:
        return self.world_to_screen(self.geographic_to_world(c))

    # ── Inverse ────────────────────────────────────────────────────────

    def screen_to_world(self, c: ScreenCoordinate) -> WorldCoordinate:
        sx = c.x / self._half_tile_w
        sy = c.y / self._half_tile_h
        return WorldCoordinate((sx + sy) / 2, (sy - sx) / 2)

    def world_to_projected(self, c: WorldCoordinate) -> ProjectedCoordinate:
        scale = self._config.meters_per_world_unit
        return ProjectedCoordinate(self._origin_x + c.x * scale,
                                   self._origin_y - c.y * scale)

    def projected_to_geographic(self, c: ProjectedCoordinate) -> GeographicCoordinate:
        lat, lng = _mercator_inverse(c.x, c.y)
        return GeographicCoordinate(float(lat), float(lng))

    def world_to_geographic(self, c: WorldCoordinate) -> GeographicCoordinate:
        return self.projected_to_geographic(self.world_to_projected(c))

    # ── Polygons & distance ────────────────────────────────────────────

    def transform_polygon(self, ring: RingInput) -> List[WorldCoordinate]:
        """Map a geographic ring to world coordinates, preserving order and winding.

        Items may be GeographicCoordinate or GeoJSON-ordered ``[lng, lat]`` pairs.
        """
        lat, lng = self._ring_arrays(ring)
        if lat.size == 0:
            return []
        xs, ys = self.transform_arrays(lat, lng)
        return [WorldCoordinate(float(x), float(y)) for x, y in zip(xs, ys)]

    def transform_arrays(self, lat: np.ndarray, lng: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized geographic → world for parallel lat/lng arrays."""
        mx, my = _mercator_forward(np.asarray(lat, dtype=float), np.asarray(lng, dtype=float))
        scale = self._config.meters_per_world_unit
        return (mx - self._origin_x) / scale, -(my - self._origin_y) / scale

    def haversine_distance(self, c1: GeographicCoordinate, c2: GeographicCoordinate) -> float:
        return haversine_distance(c1, c2)

    @staticmethod
    def _ring_arrays(ring: RingInput) -> Tuple[np.ndarray, np.ndarray]:
        lats, lngs = [], []
        for pt in ring:
            if isinstance(pt, GeographicCoordinate):
                lats.append(pt.lat)
                lngs.append(pt.lng)
            else:
                lngs.append(pt[0])
                lats.append(pt[1])
        return np.asarray(lats, dtype=float), np.asarray(lngs, dtype=float)

    def __repr__(self):
        c = self._config
        return (f"CoordinateTransformer(origin=({c.origin.lat}, {c.origin.lng}), "
                f"meters_per_world_unit={c.meters_per_world_unit}, "
                f"tile={c.tile_width:g}x{c.tile_height:g})")
