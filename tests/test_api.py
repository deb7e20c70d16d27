# tests/test_api.py

from __future__ import annotations

from fastapi.testclient import TestClient

from tasklist.main import app, set_store
from tasklist.models import Base
from tasklist.store import TaskStore


def test_insert_and_find_all_over_http(call) -> None:
    status, body = call("insertOne", {"title": "Ship it", "description": "friday"})
    assert status == 200
    assert body["state"] == "complete"
    created = body["result"]
    assert created["checked"] is False

    status, body = call("findAll")
    assert status == 200
    assert body["result"] == [created]


def test_request_id_is_echoed(api: TestClient) -> None:
    response = api.post("/call", json={"op": "findAll", "ctx": {"requestId": "req-1"}})
    assert response.json()["requestId"] == "req-1"


def test_invalid_input_maps_to_400(call, store: TaskStore) -> None:
    status, body = call("insertOne", {"description": "missing title"})
    assert status == 400
    assert body["state"] == "error"
    assert body["error"]["code"] == "INVALID_INPUT"
    assert "title" in body["error"]["message"]
    assert store.count() == 0


def test_not_found_maps_to_404(call) -> None:
    status, body = call("deleteOne", {"id": 77})
    assert status == 404
    assert body["error"]["code"] == "NOT_FOUND"


def test_store_failure_maps_to_503(call, store: TaskStore) -> None:
    Base.metadata.drop_all(store._engine)
    status, body = call("findAll")
    assert status == 503
    assert body["error"]["code"] == "STORE_UNAVAILABLE"


def test_unknown_op(call) -> None:
    status, body = call("dropTable")
    assert status == 400
    assert body["error"]["code"] == "UNKNOWN_OP"


def test_missing_op(api: TestClient) -> None:
    response = api.post("/call", json={"args": {}})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_non_object_body(api: TestClient) -> None:
    response = api.post("/call", json=[1, 2, 3])
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_malformed_json(api: TestClient) -> None:
    response = api.post("/call", content=b"{not json", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_get_call_is_not_allowed(api: TestClient) -> None:
    response = api.get("/call")
    assert response.status_code == 405
    assert response.headers["allow"] == "POST"
    assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_update_then_delete_checked_flow(call) -> None:
    _, a = call("insertOne", {"title": "A"})
    _, b = call("insertOne", {"title": "B"})
    a_id, b_id = a["result"]["id"], b["result"]["id"]

    status, body = call("updateOne", {"id": a_id, "title": "A", "checked": True})
    assert status == 200
    assert body["result"]["checked"] is True

    status, body = call("deleteChecked", {"ids": [a_id, b_id]})
    assert status == 200
    assert body["result"] == {"count": 1}

    _, body = call("findAll")
    assert [t["id"] for t in body["result"]] == [b_id]


def test_out_of_range_id_is_invalid_input_not_internal_error(call) -> None:
    status, body = call("updateOne", {"id": 10**20, "title": "t", "checked": False})
    assert status == 400
    assert body["error"]["code"] == "INVALID_INPUT"

    status, body = call("deleteAll", {"ids": [10**20]})
    assert status == 400
    assert body["error"]["code"] == "INVALID_INPUT"


def test_null_description_over_http(call) -> None:
    status, body = call("insertOne", {"title": "x", "description": None})
    assert status == 400
    assert body["error"]["code"] == "INVALID_INPUT"


def test_unconfigured_store_echoes_request_id() -> None:
    set_store(None)
    # no lifespan: nothing installs a store
    client = TestClient(app)
    response = client.post("/call", json={"op": "findAll", "ctx": {"requestId": "req-503"}})
    assert response.status_code == 503
    assert response.json()["requestId"] == "req-503"
    assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"
