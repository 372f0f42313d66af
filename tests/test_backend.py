import pytest
from fastapi.testclient import TestClient

from backend import config
from backend.app import app
from backend.session import get_session, reset_session


@pytest.fixture
def client():
    reset_session("pittsburgh")
    with TestClient(app) as c:
        yield c
    reset_session()


@pytest.fixture
def loaded(client, feature_collection):
    response = client.post("/api/buildings/load", json=feature_collection)
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/").json() == {"status": "ok", "service": "IsoCity API"}


def test_list_venues(client):
    venues = {v["key"]: v for v in client.get("/api/venues").json()}
    assert set(venues) == {"pittsburgh", "philadelphia", "chapelhill"}
    assert venues["pittsburgh"]["active"]
    assert venues["pittsburgh"]["world_offset"] == [1200.0, 900.0]


def test_switch_venue(client, loaded):
    response = client.post("/api/venues/philadelphia")
    assert response.status_code == 200
    assert response.json()["active"]
    assert get_session().venue == "philadelphia"
    assert client.get("/api/stats").json()["total"] == 0

    assert client.post("/api/venues/atlantis").status_code == 404


def test_load_reports_accepted_and_stats(loaded):
    assert loaded["accepted"] == 3
    assert loaded["stats"]["total"] == 3
    assert loaded["stats"]["by_type"] == {"hotel": 1, "office": 1, "parking": 1}


def test_load_rejects_bad_collection(client):
    response = client.post("/api/buildings/load",
                           json={"type": "Feature", "features": []})
    assert response.status_code == 400


def test_list_and_filter_buildings(client, loaded):
    assert len(client.get("/api/buildings").json()) == 3

    hotels = client.get("/api/buildings", params={"type": "hotel"}).json()
    assert [b["id"] for b in hotels] == ["way/1"]
    assert hotels[0]["name"] == "Westin"
    assert hotels[0]["source_tag"] == "hotel"
    assert hotels[0]["area"] == pytest.approx(200.0, rel=1e-6)

    both = client.get("/api/buildings", params=[("type", "hotel"), ("type", "parking")])
    assert len(both.json()) == 2
    assert client.get("/api/buildings", params={"type": "castle"}).status_code == 422


def test_building_at(client, loaded):
    response = client.get("/api/buildings/at", params={"x": 1210, "y": 905})
    assert response.status_code == 200
    assert response.json()["id"] == "way/1"

    assert client.get("/api/buildings/at", params={"x": 0, "y": 0}).status_code == 404


def test_get_building_by_id(client, loaded):
    response = client.get("/api/buildings/way/2")
    assert response.status_code == 200
    assert response.json()["type"] == "office"
    assert response.json()["levels"] == 8
    assert client.get("/api/buildings/nope").status_code == 404


def test_visibility(client, loaded):
    response = client.post("/api/buildings/visibility",
                           json={"x": 5000, "y": 5000, "width": 100, "height": 100})
    body = response.json()
    assert body["changed"] == 3
    assert body["stats"]["visible"] == 0
    assert client.get("/api/buildings/at", params={"x": 1210, "y": 905}).status_code == 404


def test_clear(client, loaded):
    response = client.delete("/api/buildings")
    assert response.json()["total"] == 0
    assert client.get("/api/buildings").json() == []


def test_render_png(client, loaded):
    response = client.get("/api/render.png", params={"width": 160, "height": 120})
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_load_file_from_data_dir(client, geojson_file, monkeypatch):
    monkeypatch.setattr(config, "DATA_DIR", geojson_file.parent)

    response = client.post("/api/buildings/load-file", params={"name": geojson_file.name})
    assert response.json()["accepted"] == 3

    assert client.post("/api/buildings/load-file",
                       params={"name": "missing.geojson"}).status_code == 404
    assert client.post("/api/buildings/load-file",
                       params={"name": "../etc/passwd"}).status_code == 400


def test_export_to_output_dir(client, loaded, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "OUTPUT_DIR", tmp_path)

    response = client.post("/api/render", params={"name": "venue.png", "width": 64,
                                                  "height": 48})
    assert response.status_code == 200
    assert response.json()["buildings"] == 3
    assert (tmp_path / "venue.png").exists()
    assert client.post("/api/render", params={"name": "../x.png"}).status_code == 400


def test_selection_is_recorded(client, loaded):
    session = get_session()
    session.scene.input.pointer_down(1210, 905)
    assert session.selections == ["way/1"]
