"""Integration tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from gridforge.data import MemoryDataService
from gridforge.registry import RegistryMeta

SENSOR = {
    "name": "Thermal",
    "type": "Thermal",
    "color": "#ff0000",
    "min_range": 0,
    "max_range": 10,
    "resolution": 640,
    "circular_error_probable": 2.5,
    "min_detectable_velocity": "1 m/s",
}


@pytest.fixture
def client(monkeypatch):
    """Create test client with a fresh in-memory store."""
    monkeypatch.setenv("DATABASE_URL", "memory://")

    from gridforge.api.app import app

    with TestClient(app) as client:
        yield client


def create_row(client, table, data):
    response = client.post(f"/api/tables/{table}", json=data)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_aircraft(client, name="Reaper", sensors=(), altitude=7500):
    return create_row(
        client,
        "aircrafts",
        {
            "name": name,
            "op_altitude": altitude,
            "cruising_speed": 313,
            "endurance": 27,
            "sensors": list(sensors),
        },
    )


class TestAppState:
    def test_startup_objects_live_on_app_state(self, client):
        import gridforge.api.app as app_module

        state = client.app.state
        assert isinstance(state.registry_meta, RegistryMeta)
        assert isinstance(state.data_service, MemoryDataService)
        assert not hasattr(app_module, "registry_meta")
        assert not hasattr(app_module, "data_service")

    def test_state_is_cleared_on_shutdown(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "memory://")

        from gridforge.api.app import app

        with TestClient(app):
            pass
        assert app.state.registry_meta is None
        assert app.state.data_service is None


class TestMetadataEndpoints:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "tables": 4}

    def test_list_tables(self, client):
        data = client.get("/api/metadata").json()
        assert [t["name"] for t in data["tables"]] == [
            "callsigns",
            "sensors",
            "aircrafts",
            "scheduledFlights",
        ]

    def test_table_metadata(self, client):
        data = client.get("/api/metadata/aircrafts").json()
        assert data["label"] == "Aircrafts"
        assert data["fields"]["sensors"]["relation"]["table"] == "sensors"

    def test_unknown_table_metadata(self, client):
        assert client.get("/api/metadata/nope").status_code == 404


class TestColumnsEndpoint:
    def test_unknown_table_has_no_columns(self, client):
        response = client.get("/api/tables/nope/columns")
        assert response.status_code == 200
        assert response.json() == {"columns": []}

    def test_relation_options_come_from_related_rows(self, client):
        sensor = create_row(client, "sensors", SENSOR)
        create_aircraft(client, sensors=[sensor["_id"]])

        columns = client.get("/api/tables/aircrafts/columns").json()["columns"]
        sensors_column = next(c for c in columns if c["id"] == "sensors")
        assert sensors_column["meta"]["variant"] == "multiSelect"
        assert sensors_column["meta"]["options"] == [
            {"label": "Thermal", "value": sensor["_id"]}
        ]
        assert columns[0]["locked"] and columns[-1]["locked"]


class TestRowsEndpoint:
    def test_rows_include_relations(self, client):
        sensor = create_row(client, "sensors", SENSOR)
        create_aircraft(client, sensors=[sensor["_id"]])

        data = client.get("/api/tables/aircrafts/rows").json()
        assert data["total"] == 1
        assert data["relations"]["sensors"][0]["_id"] == sensor["_id"]
        assert data["joinOperator"] == "and"

    def test_url_filters_are_applied(self, client):
        create_aircraft(client, "Reaper", altitude=7500)
        create_aircraft(client, "Global Hawk", altitude=18000)
        filters = json.dumps(
            [
                {
                    "id": "op_altitude",
                    "value": "10000",
                    "variant": "number",
                    "operator": "gt",
                    "filterId": "f1",
                }
            ]
        )
        data = client.get("/api/tables/aircrafts/rows", params={"filters": filters}).json()
        assert [r["name"] for r in data["data"]] == ["Global Hawk"]
        assert data["filters"][0]["filterId"] == "f1"

    def test_filters_on_non_filterable_columns_are_ignored(self, client):
        first = create_aircraft(client, "Reaper")
        create_aircraft(client, "Global Hawk")
        filters = json.dumps(
            [
                {
                    "id": "_id",
                    "value": first["_id"],
                    "variant": "text",
                    "operator": "eq",
                    "filterId": "f1",
                }
            ]
        )
        data = client.get("/api/tables/aircrafts/rows", params={"filters": filters}).json()
        assert data["total"] == 2
        assert data["filters"] == []

    def test_invalid_filters_are_ignored(self, client):
        create_aircraft(client)
        data = client.get(
            "/api/tables/aircrafts/rows",
            params={"filters": "not json", "joinOperator": "xor"},
        ).json()
        assert data["total"] == 1
        assert data["filters"] == []
        assert data["joinOperator"] == "and"

    def test_search_sort_and_paginate(self, client):
        for name in ("Bravo", "Alpha", "Charlie"):
            create_row(client, "callsigns", {"name": name, "country": "US"})
        data = client.get(
            "/api/tables/callsigns/rows",
            params={"sort": "name", "limit": 2, "offset": 1},
        ).json()
        assert data["total"] == 3
        assert [r["name"] for r in data["data"]] == ["Bravo", "Charlie"]

        searched = client.get("/api/tables/callsigns/rows", params={"search": "arl"}).json()
        assert [r["name"] for r in searched["data"]] == ["Charlie"]

    def test_groups(self, client):
        create_row(client, "callsigns", {"name": "A", "country": "US"})
        create_row(client, "callsigns", {"name": "B", "country": "UK"})
        create_row(client, "callsigns", {"name": "C", "country": "US"})
        data = client.get("/api/tables/callsigns/rows", params={"group": "country"}).json()
        counts = {g["value"]: g["count"] for g in data["groups"]}
        assert counts == {"US": 2, "UK": 1}

    def test_unknown_table_rows(self, client):
        assert client.get("/api/tables/nope/rows").status_code == 404


class TestMutations:
    def test_negative_altitude_rejected(self, client):
        response = client.post(
            "/api/tables/aircrafts",
            json={
                "name": "Bad",
                "op_altitude": -1,
                "cruising_speed": 1,
                "endurance": 1,
                "sensors": [],
            },
        )
        assert response.status_code == 422
        assert "greater than 0" in response.json()["detail"]
        assert client.get("/api/tables/aircrafts/rows").json()["total"] == 0

    def test_update_row(self, client):
        row = create_aircraft(client)
        response = client.patch(f"/api/tables/aircrafts/{row['_id']}", json={"endurance": 30})
        assert response.status_code == 200
        assert response.json()["data"]["endurance"] == 30

    def test_update_missing_row(self, client):
        response = client.patch("/api/tables/aircrafts/missing", json={"endurance": 30})
        assert response.status_code == 404

    def test_delete_row(self, client):
        row = create_aircraft(client)
        assert client.delete(f"/api/tables/aircrafts/{row['_id']}").status_code == 200
        assert client.delete(f"/api/tables/aircrafts/{row['_id']}").status_code == 404

    def test_duplicate_row(self, client):
        row = create_aircraft(client)
        response = client.post(f"/api/tables/aircrafts/{row['_id']}/duplicate")
        assert response.status_code == 201
        copy = response.json()["data"]
        assert copy["_id"] != row["_id"]
        assert copy["name"] == row["name"]
        assert client.get("/api/tables/aircrafts/rows").json()["total"] == 2


class TestBatchEndpoints:
    def test_batch_update_partial_failure(self, client):
        first = create_aircraft(client, "One")
        third = create_aircraft(client, "Three")
        ids = [first["_id"], "missing", third["_id"]]

        response = client.post(
            "/api/tables/aircrafts/batch/update",
            json={"ids": ids, "field": "endurance", "value": 12},
        )

        assert response.status_code == 422
        body = response.json()
        assert list(body["failures"]) == ["missing"]
        assert body["succeeded"] == [first["_id"], third["_id"]]
        rows = client.get("/api/tables/aircrafts/rows").json()["data"]
        assert {r["endurance"] for r in rows} == {12}

    def test_batch_update_unknown_field(self, client):
        row = create_aircraft(client)
        response = client.post(
            "/api/tables/aircrafts/batch/update",
            json={"ids": [row["_id"]], "field": "wingspan", "value": 1},
        )
        assert response.status_code == 422

    def test_batch_delete(self, client):
        ids = [create_aircraft(client, name)["_id"] for name in ("A", "B")]
        response = client.post("/api/tables/aircrafts/batch/delete", json={"ids": ids})
        assert response.status_code == 200
        assert response.json() == {"deleted": ids}
        assert client.get("/api/tables/aircrafts/rows").json()["total"] == 0


class TestFormEndpoints:
    def test_create_form(self, client):
        data = client.get("/api/tables/callsigns/form").json()
        assert [f["name"] for f in data["fields"]] == ["name", "country"]
        assert data["values"] == {"name": None, "country": None}

    def test_edit_form_uses_row_values(self, client):
        row = create_row(client, "callsigns", {"name": "ALPHA", "country": "US"})
        data = client.get("/api/tables/callsigns/form", params={"id": row["_id"]}).json()
        assert data["values"] == {"name": "ALPHA", "country": "US"}

    def test_validate_form(self, client):
        response = client.post(
            "/api/tables/aircrafts/form/validate",
            json={"name": "Reaper", "op_altitude": -1},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is False
        assert "op_altitude" in body["errors"]
        assert body["errors"]["sensors"] == "Field required"
