import pytest

from isocity import (
    BUILDING_SELECTED, BuildingRecord, BuildingType, FootprintConfig, GeographicCoordinate,
    Scene, WorldCoordinate, create_building_system,
)
from isocity.errors import ConfigurationError, UnknownVenueError
from isocity.models import Bounds
from isocity.system import BuildingFootprintSystem

from conftest import PITTSBURGH


@pytest.fixture
def system(scene):
    s = create_building_system(scene, "pittsburgh")
    yield s
    s.destroy()


def test_pittsburgh_hotel(system, make_record):
    accepted = system.ingest([make_record("w1", tag="hotel", height=10.0)])
    assert accepted == 1

    building = system.get_building("w1")
    assert building.type is BuildingType.HOTEL
    assert building.area == pytest.approx(200.0, rel=1e-6)
    assert building.footprint[0].x == pytest.approx(1200.0, abs=1e-6)
    assert building.footprint[0].y == pytest.approx(900.0, abs=1e-6)
    rendered = system.renderer.get_rendered("w1")
    assert len(rendered.walls) == 2
    assert rendered.extrusion == 5.0
    assert system.get_buildings_by_type(BuildingType.HOTEL) == [building]


def test_service_defaults(system):
    assert system.config.max_buildings == 500
    assert system.config.min_building_area == 100.0
    assert system.config.world_offset == (1200.0, 900.0)
    assert system.config.origin == PITTSBURGH.origin


def test_small_footprints_are_filtered(system, make_record):
    records = [
        make_record("big", w=20, h=10),
        make_record("tiny", x=50, w=5, h=5),
        make_record("edge", x=100, w=10, h=10.001),
    ]
    assert system.ingest(records) == 2
    assert system.get_building("tiny") is None
    assert system.get_building("edge") is not None


def test_cap_stops_ingestion(scene, make_record):
    system = create_building_system(scene, "pittsburgh", min_building_area=0)
    records = [make_record(f"b{i}", x=(i % 40) * 30, y=(i // 40) * 30) for i in range(1200)]

    assert system.ingest(records) == 500
    assert len(system.get_all_buildings()) == 500
    assert system.get_building("b499") is not None
    assert system.get_building("b500") is None


def test_rejected_records_do_not_count_towards_cap(scene, make_record):
    system = create_building_system(scene, "pittsburgh", max_buildings=2)
    records = [make_record("tiny", w=1, h=1), make_record("a"), make_record("b", x=50),
               make_record("c", x=100)]
    assert system.ingest(records) == 2
    assert [b.id for b in system.get_all_buildings()] == ["a", "b"]


def test_records_with_fewer_than_three_points_are_skipped(system):
    record = BuildingRecord("line", "hotel", (GeographicCoordinate(40.44, -79.99),
                                              GeographicCoordinate(40.45, -79.98)))
    assert system.ingest([record]) == 0
    assert system.ingest([BuildingRecord("empty", "hotel", ())]) == 0


def test_unprojectable_footprint_is_dropped(system):
    nan = float("nan")
    record = BuildingRecord("nan", "hotel", tuple(GeographicCoordinate(nan, nan)
                                                  for _ in range(4)))
    assert system.ingest([record]) == 0


def test_classification_and_attributes_flow_through(system, make_record):
    system.ingest([make_record("p", tag="Parking_Garage", name="Garage A", height=12.0,
                               levels=4)])
    building = system.get_building("p")
    assert building.type is BuildingType.PARKING
    assert (building.name, building.height, building.levels) == ("Garage A", 12.0, 4)
    assert building.record.source_tag == "Parking_Garage"


def test_load_geojson(system, feature_collection):
    assert system.load_geojson(feature_collection) == 3
    stats = system.get_stats()
    assert stats["by_type"] == {"hotel": 1, "office": 1, "parking": 1}
    assert system.get_building("way/2").levels == 8


def test_load_geojson_from_file(system, geojson_file):
    assert system.load_geojson(geojson_file) == 3
    assert system.load_geojson(str(geojson_file)) == 3
    assert len(system.get_all_buildings()) == 3


def test_reentrant_load_is_ignored(system, feature_collection):
    system._is_loading = True
    assert system.load_geojson(feature_collection) == 0
    system._is_loading = False
    assert system.load_geojson(feature_collection) == 3


def test_query_delegation(system, make_record):
    system.ingest([make_record("a"), make_record("b", x=50, tag="office")])
    assert system.get_building_at(1210, 905).id == "a"
    assert [b.id for b in system.get_buildings_by_type(BuildingType.OFFICE)] == ["b"]

    changed = system.update_visibility(Bounds.from_rect(1190, 890, 30, 30))
    assert changed == 1
    assert system.get_stats()["visible"] == 1


def test_selection_reaches_shared_event_bus(scene, make_record):
    from isocity import EventBus
    bus = EventBus()
    selected = []
    bus.on(BUILDING_SELECTED, lambda payload: selected.append(payload["building_id"]))

    system = create_building_system(scene, "pittsburgh", event_bus=bus)
    system.ingest([make_record("a")])
    scene.input.pointer_down(1210, 905)
    assert selected == ["a"]
    assert system.event_bus is bus


def test_configure_rebuilds_and_clears(system, scene, make_record):
    system.ingest([make_record("a")])
    config = system.configure(min_building_area=500, world_offset=(0, 0))

    assert config.min_building_area == 500
    assert len(system.get_all_buildings()) == 0
    assert len(scene) == 0

    system.ingest([make_record("a"), make_record("big", x=50, w=30, h=30)])
    assert [b.id for b in system.get_all_buildings()] == ["big"]
    assert system.get_building("big").footprint[0].x == pytest.approx(50.0, abs=1e-6)


def test_configure_rejects_invalid_values(system, make_record):
    system.ingest([make_record("a")])
    with pytest.raises(ConfigurationError):
        system.configure(meters_per_world_unit=0)
    assert system.get_building("a") is not None


@pytest.mark.parametrize("overrides", [
    {"meters_per_world_unit": -1},
    {"max_buildings": -1},
    {"min_building_area": -5},
    {"tile_width": 0},
    {"tile_height": float("nan")},
    {"meters_per_world_unit": float("nan")},
])
def test_invalid_config(overrides):
    with pytest.raises(ConfigurationError):
        BuildingFootprintSystem(Scene(), FootprintConfig(origin=PITTSBURGH.origin, **overrides))


def test_unknown_venue(scene):
    with pytest.raises(UnknownVenueError):
        create_building_system(scene, "atlantis")


def test_venue_lookup_is_case_insensitive(scene):
    system = create_building_system(scene, " Philadelphia ")
    assert system.config.origin.lat == 39.9550


def test_destroy_releases_scene(system, scene, make_record):
    system.ingest([make_record("a")])
    system.destroy()
    assert len(scene) == 0


def test_config_shares_transformer_validation():
    config = FootprintConfig(origin=PITTSBURGH.origin, meters_per_world_unit=2.0, tile_width=48)
    transformer_config = config.transformer_config
    assert (transformer_config.meters_per_world_unit, transformer_config.tile_width,
            transformer_config.tile_height) == (2.0, 48.0, 32.0)
    with pytest.raises(ConfigurationError, match="tile size"):
        FootprintConfig(origin=PITTSBURGH.origin, tile_height=-1)


def test_configure_height_scale_applies_to_new_buildings(system, make_record):
    system.configure(isometric_height_scale=0.25)
    system.ingest([make_record("a", height=40.0)])

    rendered = system.renderer.get_rendered("a")
    assert rendered.extrusion == 10.0
    assert system.renderer.isometric_height_scale == 0.25


def test_geojson_loads_are_simplified(system, transformer):
    ring = []
    # (10, 0) sits on the southern edge and carries no shape information
    for x, y in [(0, 0), (10, 0), (20, 0), (20, 10), (0, 10), (0, 0)]:
        g = transformer.world_to_geographic(WorldCoordinate(x, y))
        ring.append([g.lng, g.lat])
    collection = {"type": "FeatureCollection", "features": [
        {"type": "Feature", "id": "w1", "properties": {"building": "hotel"},
         "geometry": {"type": "Polygon", "coordinates": [ring]}}]}

    assert system.loader.auto_simplify
    assert system.load_geojson(collection) == 1
    building = system.get_building("w1")
    assert len(building.footprint) == 5
    assert building.area == pytest.approx(200.0, rel=1e-6)
    assert len(system.renderer.get_rendered("w1").walls) == 2
