"""Projection constants, render defaults, and per-type lookup tables."""

from types import MappingProxyType

from .models import BuildingType, ColorScheme

# ── Projection ──────────────────────────────────────────────────────────
EARTH_RADIUS = 6378137.0  # meters, spherical Mercator / haversine

DEFAULT_TILE_WIDTH = 64
DEFAULT_TILE_HEIGHT = 32

# ── Rendering ───────────────────────────────────────────────────────────
DEFAULT_ISOMETRIC_HEIGHT_SCALE = 0.5
DEFAULT_BUILDING_HEIGHT = 10.0      # meters, used when a building has none
WALL_DEPTH_BIAS = 0.1               # walls sort just behind their floor
HIGHLIGHT_ALPHA_BOOST = 0.2
HIGHLIGHT_SCALE = 1.02
HIGHLIGHT_TWEEN_MS = 200
FLOOR_STROKE_WIDTH = 2
WALL_STROKE_WIDTH = 1
WALL_STROKE_ALPHA_FACTOR = 0.6

# ── Ingestion ───────────────────────────────────────────────────────────
DEFAULT_LEVELS = 3
METERS_PER_LEVEL = 3.5
DEFAULT_SIMPLIFY_TOLERANCE = 0.00001  # degrees

DEFAULT_MAX_BUILDINGS = 1000
DEFAULT_MIN_BUILDING_AREA = 50.0      # square world units

# ── Tag classification ──────────────────────────────────────────────────
# Exact (normalized) tag → type.  Unmatched tags fall through to
# SUBSTRING_TAG_TYPES in order, then to COMMERCIAL.
EXACT_TAG_TYPES = MappingProxyType({
    'hotel': BuildingType.HOTEL,
    'motel': BuildingType.HOTEL,
    'restaurant': BuildingType.RESTAURANT,
    'cafe': BuildingType.RESTAURANT,
    'fast_food': BuildingType.RESTAURANT,
    'retail': BuildingType.RETAIL,
    'shop': BuildingType.RETAIL,
    'store': BuildingType.RETAIL,
    'supermarket': BuildingType.RETAIL,
    'mall': BuildingType.RETAIL,
    'office': BuildingType.OFFICE,
    'offices': BuildingType.OFFICE,
    'commercial': BuildingType.OFFICE,
    'parking': BuildingType.PARKING,
    'parking_garage': BuildingType.PARKING,
    'garage': BuildingType.PARKING,
    'industrial': BuildingType.INDUSTRIAL,
    'warehouse': BuildingType.INDUSTRIAL,
    'factory': BuildingType.INDUSTRIAL,
    'residential': BuildingType.RESIDENTIAL,
    'apartments': BuildingType.RESIDENTIAL,
    'house': BuildingType.RESIDENTIAL,
    'detached': BuildingType.RESIDENTIAL,
    'university': BuildingType.CULTURAL,
    'college': BuildingType.CULTURAL,
    'school': BuildingType.CULTURAL,
    'civic': BuildingType.CULTURAL,
    'public': BuildingType.CULTURAL,
    'government': BuildingType.CULTURAL,
    'park': BuildingType.PARK,
    'garden': BuildingType.PARK,
})

SUBSTRING_TAG_TYPES = (
    (('hotel', 'motel'), BuildingType.HOTEL),
    (('restaurant', 'cafe'), BuildingType.RESTAURANT),
    (('office',), BuildingType.OFFICE),
    (('residential', 'apartment'), BuildingType.RESIDENTIAL),
)

# ── Color schemes ───────────────────────────────────────────────────────
_INK = 0x2c3e50
_CREAM = 0xf5f0e6
_PARCHMENT = 0xf0ebe0

COLOR_SCHEMES = MappingProxyType({
    BuildingType.COMMERCIAL: ColorScheme(0x2a9d8f, 0.4, 0x217a70, 0.6, _INK, 0.8, 0x3dc2b0),   # teal
    BuildingType.RESIDENTIAL: ColorScheme(0xe9c46a, 0.4, 0xc49b4d, 0.6, _INK, 0.8, 0xf4d58d),  # beige
    BuildingType.HOTEL: ColorScheme(0x9b59b6, 0.4, 0x7d3c98, 0.6, _INK, 0.8, 0xbb6bd9),        # purple
    BuildingType.RESTAURANT: ColorScheme(0xe76f51, 0.4, 0xc8563d, 0.6, _INK, 0.8, 0xf4896d),   # orange-red
    BuildingType.OFFICE: ColorScheme(0x5d737e, 0.4, 0x475a64, 0.6, _INK, 0.8, 0x7b95a3),       # blue-grey
    BuildingType.RETAIL: ColorScheme(0xf4a261, 0.4, 0xcf8449, 0.6, _INK, 0.8, 0xf7b883),       # sandy orange
    BuildingType.CULTURAL: ColorScheme(0xdaa520, 0.4, 0xb8860b, 0.6, _INK, 0.8, 0xffd700),     # gold
    BuildingType.INDUSTRIAL: ColorScheme(0x8d99ae, 0.4, 0x6e788f, 0.6, _INK, 0.8, 0xa8b5cc),   # grey
    BuildingType.PARK: ColorScheme(0x52b788, 0.3, 0x3d8a66, 0.5, 0x2d6a4f, 0.7, 0x74c69d),     # green
    BuildingType.PARKING: ColorScheme(_PARCHMENT, 0.3, 0xd4cbb8, 0.5, _INK, 0.6, _CREAM),      # light grey
})
