import json

import pytest

from isocity import (
    BuildingRecord, CoordinateTransformer, Scene, WorldCoordinate, get_venue,
)
from isocity.models import Building, BuildingType

PITTSBURGH = get_venue("pittsburgh")


def world_rect(x, y, w, h):
    """Counter-clockwise-on-screen rectangle, open ring."""
    return [WorldCoordinate(x, y), WorldCoordinate(x + w, y),
            WorldCoordinate(x + w, y + h), WorldCoordinate(x, y + h)]


def lnglat_rect(transformer, x, y, w, h):
    """GeoJSON ``[lng, lat]`` closed ring that lands on the given world rectangle."""
    ring = []
    for p in world_rect(x, y, w, h):
        g = transformer.world_to_geographic(p)
        ring.append([g.lng, g.lat])
    ring.append(ring[0])
    return ring


@pytest.fixture
def scene():
    s = Scene()
    yield s
    s.destroy()


@pytest.fixture
def transformer():
    return CoordinateTransformer(PITTSBURGH.origin)


@pytest.fixture
def make_record(transformer):
    def _make(building_id, x=0.0, y=0.0, w=20.0, h=10.0, tag="hotel", **kwargs):
        return BuildingRecord.from_lnglat(building_id, lnglat_rect(transformer, x, y, w, h),
                                          source_tag=tag, **kwargs)
    return _make


@pytest.fixture
def make_building():
    def _make(building_id, x=0.0, y=0.0, w=20.0, h=10.0,
              building_type=BuildingType.COMMERCIAL, height=None, **kwargs):
        return Building(id=building_id, type=building_type,
                        footprint=world_rect(x, y, w, h), height=height, **kwargs)
    return _make


@pytest.fixture
def make_feature(transformer):
    def _make(x=0.0, y=0.0, w=20.0, h=10.0, properties=None, feature_id=None):
        feature = {
            "type": "Feature",
            "properties": properties or {},
            "geometry": {"type": "Polygon",
                         "coordinates": [lnglat_rect(transformer, x, y, w, h)]},
        }
        if feature_id is not None:
            feature["id"] = feature_id
        return feature
    return _make


@pytest.fixture
def feature_collection(make_feature):
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature(0, 0, 20, 10, {"building": "hotel", "name": "Westin"}, "way/1"),
            make_feature(40, 0, 30, 20, {"building": "office", "building:levels": "8"}, "way/2"),
            make_feature(0, 40, 15, 15, {"building": "parking"}, "way/3"),
            # 25 m², below the service minimum of 100
            make_feature(80, 80, 5, 5, {"building": "house"}, "way/4"),
            {"type": "Feature", "properties": {"building": "yes"},
             "geometry": {"type": "Point", "coordinates": [-79.99, 40.44]}},
        ],
    }


@pytest.fixture
def geojson_file(tmp_path, feature_collection):
    path = tmp_path / "buildings.geojson"
    path.write_text(json.dumps(feature_collection))
    return path
