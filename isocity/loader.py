"""GeoJSON footprint ingestion — turns FeatureCollections into BuildingRecords.

Handles OpenStreetMap-style attributes (``building``, ``building:levels``,
``height`` ...) as well as bare footprint datasets.  Only the outer ring of
each Polygon is kept.
"""

import json
import logging
import pathlib
import re
from typing import Any, List, Mapping, Optional, Sequence, Union

from pyproj import Transformer
from pyproj.exceptions import CRSError

from .constants import (
    DEFAULT_BUILDING_HEIGHT, DEFAULT_LEVELS, DEFAULT_SIMPLIFY_TOLERANCE, METERS_PER_LEVEL,
)
from .errors import GeoJSONError
from .geometry import simplify_ring, vertex_centroid
from .models import Bounds, BuildingRecord

logger = logging.getLogger(__name__)

NAME_FIELDS = ('name', 'Name', 'NAME', 'building_name', 'addr:housename')
TYPE_FIELDS = ('building', 'building:type', 'type', 'amenity', 'landuse')
LEVEL_FIELDS = ('building:levels', 'levels', 'building:floors', 'floors', 'stories')
HEIGHT_FIELDS = ('height', 'building:height', 'Height')

WGS84_NAMES = frozenset({
    'epsg:4326', 'urn:ogc:def:crs:epsg::4326',
    'urn:ogc:def:crs:ogc:1.3:crs84', 'ogc:crs84', 'crs84',
})

_NON_NUMERIC = re.compile(r'[^0-9.\-]')

GeoJSONSource = Union[str, pathlib.Path, Mapping[str, Any]]


class GeoJSONLoader:
    def __init__(self, default_height: float = DEFAULT_BUILDING_HEIGHT,
                 default_levels: Optional[int] = DEFAULT_LEVELS,
                 meters_per_level: float = METERS_PER_LEVEL,
                 simplify_tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE,
                 auto_simplify: bool = False):
        self.default_height = default_height
        self.default_levels = default_levels
        self.meters_per_level = meters_per_level
        self.simplify_tolerance = simplify_tolerance
        self.auto_simplify = auto_simplify

    # ── Entry points ───────────────────────────────────────────────────

    def load(self, source: GeoJSONSource) -> List[BuildingRecord]:
        """Load from a file path or an already-parsed FeatureCollection."""
        if isinstance(source, (str, pathlib.Path)):
            return self.load_file(source)
        return self.load_feature_collection(source)

    def load_file(self, path: Union[str, pathlib.Path]) -> List[BuildingRecord]:
        path = pathlib.Path(path)
        logger.info(f"Loading footprints from {path}")
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise GeoJSONError(f"{path} is not valid JSON: {e}") from e
        return self.load_feature_collection(data)

    def load_feature_collection(self, geojson: Mapping[str, Any]) -> List[BuildingRecord]:
        if not self.is_feature_collection(geojson):
            raise GeoJSONError("Invalid GeoJSON: expected a FeatureCollection")

        to_wgs84 = self._crs_transformer(geojson)
        records = []
        for index, feature in enumerate(geojson['features']):
            geometry = (feature or {}).get('geometry') or {}
            if geometry.get('type') != 'Polygon':
                continue
            try:
                records.append(self.parse_feature(feature, index, to_wgs84))
            except (KeyError, IndexError, TypeError, ValueError) as e:
                logger.warning(f"Skipping feature at index {index}: {e}")

        logger.info(f"Loaded {len(records)} buildings from GeoJSON")
        return records

    # ── Parsing ────────────────────────────────────────────────────────

    def parse_feature(self, feature: Mapping[str, Any], index: int,
                      to_wgs84: Optional[Transformer] = None) -> BuildingRecord:
        props = feature.get('properties') or {}

        if feature.get('id') is not None:
            building_id = str(feature['id'])
        elif props.get('id') is not None:
            building_id = str(props['id'])
        else:
            building_id = f"building_{index}"

        levels = self.extract_levels(props)
        height = self.extract_height(props, levels)

        ring = [list(pt[:2]) for pt in feature['geometry']['coordinates'][0]]
        if to_wgs84 is not None and ring:
            xs, ys = to_wgs84.transform([pt[0] for pt in ring], [pt[1] for pt in ring])
            ring = [[x, y] for x, y in zip(xs, ys)]
        if self.auto_simplify:
            ring = self.simplify_polygon(ring)

        return BuildingRecord.from_lnglat(
            building_id, ring,
            source_tag=self.extract_type(props),
            name=self.extract_name(props),
            height=height,
            levels=levels,
            properties=props,
        )

    @staticmethod
    def extract_name(props: Mapping[str, Any]) -> Optional[str]:
        for field in NAME_FIELDS:
            value = props.get(field)
            if value and isinstance(value, str):
                return value
        return None

    @staticmethod
    def extract_type(props: Mapping[str, Any]) -> Optional[str]:
        for field in TYPE_FIELDS:
            value = props.get(field)
            # OSM uses the generic 'yes' for untyped buildings
            if value and isinstance(value, str) and value != 'yes':
                return value
        return None

    def extract_levels(self, props: Mapping[str, Any]) -> Optional[int]:
        for field in LEVEL_FIELDS:
            value = _as_number(props.get(field))
            if value is not None and value > 0:
                return max(1, int(value))
        return self.default_levels

    def extract_height(self, props: Mapping[str, Any], levels: Optional[int] = None) -> float:
        for field in HEIGHT_FIELDS:
            value = _as_number(props.get(field), strip_units=True)
            if value is not None and value > 0:
                return max(1.0, value)

        if levels and levels > 0:
            return levels * self.meters_per_level
        return self.default_height

    # ── Helpers ────────────────────────────────────────────────────────

    def simplify_polygon(self, ring: Sequence[Sequence[float]],
                         tolerance: Optional[float] = None) -> List[List[float]]:
        tol = self.simplify_tolerance if tolerance is None else tolerance
        return simplify_ring(ring, tol)

    @staticmethod
    def filter_by_bounds(records: Sequence[BuildingRecord], bounds: Bounds
                         ) -> List[BuildingRecord]:
        """Keep records whose vertex-average centroid (lng, lat) lies in ``bounds``."""
        kept = []
        for record in records:
            if not record.footprint:
                continue
            lng, lat = vertex_centroid([(c.lng, c.lat) for c in record.footprint])
            if bounds.contains_point(lng, lat):
                kept.append(record)
        return kept

    @staticmethod
    def is_feature_collection(obj: Any) -> bool:
        return (isinstance(obj, Mapping)
                and obj.get('type') == 'FeatureCollection'
                and isinstance(obj.get('features'), list))

    @staticmethod
    def _crs_transformer(geojson: Mapping[str, Any]) -> Optional[Transformer]:
        crs = geojson.get('crs') or {}
        name = (crs.get('properties') or {}).get('name')
        if not name or name.strip().lower() in WGS84_NAMES:
            return None
        try:
            transformer = Transformer.from_crs(name, "EPSG:4326", always_xy=True)
        except CRSError as e:
            raise GeoJSONError(f"Unsupported CRS {name!r}: {e}") from e
        logger.info(f"Reprojecting footprints from {name} to EPSG:4326")
        return transformer


def _as_number(value: Any, strip_units: bool = False) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = _NON_NUMERIC.sub('', value) if strip_units else value.strip()
        try:
            return float(text)
        except ValueError:
            return None
    return None


def load_geojson(source: GeoJSONSource, **loader_options) -> List[BuildingRecord]:
    """Convenience wrapper around ``GeoJSONLoader(**loader_options).load``."""
    return GeoJSONLoader(**loader_options).load(source)
