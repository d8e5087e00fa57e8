from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine

from api.app import create_app
from common.config import Settings
from common.exceptions import PersistenceError
from common.storage import SQLStore


def _create(client, **overrides):
    payload = {"description": "Coffee", "amount": "3.50", "category": "Food"}
    payload.update(overrides)
    return client.post("/expenses", json=payload)


def test_healthcheck(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_create_returns_created_row(client):
    response = _create(client)

    assert response.status_code == 201
    assert response.get_json() == {"id": 1, "description": "Coffee", "amount": 3.5, "category": "Food"}


def test_create_then_get_returns_same_row(client):
    created = _create(client, amount=12.25).get_json()

    response = client.get(f"/expenses/{created['id']}")

    assert response.status_code == 200
    assert response.get_json() == created


def test_create_with_empty_description_is_rejected(client):
    response = _create(client, description="", amount="5")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Description is required"}
    assert client.get("/expenses").get_json() == []


def test_create_with_negative_amount_is_rejected(client):
    response = _create(client, description="Lunch", amount="-4")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Valid amount is required"}


def test_create_without_category_is_rejected(client):
    response = client.post("/expenses", json={"description": "Lunch", "amount": "4"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Category is required"}


def test_create_requires_json_body(client):
    response = client.post("/expenses", data="description=Lunch")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Request content must be application/json"}


def test_create_rejects_non_object_json(client):
    response = client.post("/expenses", json=["Lunch", 4, "Food"])

    assert response.status_code == 400
    assert response.get_json() == {"error": "Request body must be a JSON object"}


def test_list_is_ordered_by_descending_id(client):
    for name in ("first", "second", "third"):
        _create(client, description=name)

    response = client.get("/expenses")

    assert response.status_code == 200
    assert [row["id"] for row in response.get_json()] == [3, 2, 1]


def test_get_with_bad_id_is_bad_request(client):
    response = client.get("/expenses/abc")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid ID"}


def test_get_missing_is_not_found(client):
    response = client.get("/expenses/7")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Expense not found"}


def test_update_replaces_row(client):
    created = _create(client).get_json()

    response = client.put(
        f"/expenses/{created['id']}",
        json={"description": "Dinner", "amount": "20", "category": "Food"},
    )

    assert response.status_code == 200
    assert response.get_json() == {"id": created["id"], "description": "Dinner", "amount": 20.0, "category": "Food"}


def test_update_missing_is_not_found_and_store_unchanged(client):
    created = _create(client).get_json()

    response = client.put("/expenses/999", json={"description": "Dinner", "amount": "20", "category": "Food"})

    assert response.status_code == 404
    assert client.get("/expenses").get_json() == [created]


def test_update_with_invalid_body_is_bad_request(client):
    created = _create(client).get_json()

    response = client.put(f"/expenses/{created['id']}", json={"description": "Dinner", "amount": "0", "category": "Food"})

    assert response.status_code == 400


def test_update_with_bad_id_is_bad_request(client):
    response = client.put("/expenses/x", json={"description": "Dinner", "amount": "20", "category": "Food"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid ID"}


def test_delete_returns_no_content_then_not_found(client):
    created = _create(client).get_json()

    response = client.delete(f"/expenses/{created['id']}")
    assert response.status_code == 204
    assert response.data == b""

    assert client.get(f"/expenses/{created['id']}").status_code == 404


def test_delete_on_empty_store_is_not_found(client):
    response = client.delete("/expenses/999")

    assert response.status_code == 404


def test_delete_with_bad_id_is_bad_request(client):
    assert client.delete("/expenses/nope").status_code == 400


def test_id_with_digit_separator_is_bad_request(client):
    response = client.get("/expenses/0_1")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid ID"}


def test_ids_beyond_column_range_are_not_found(client):
    created = _create(client).get_json()
    huge = "/expenses/99999999999999999999"

    get_response = client.get(huge)
    put_response = client.put(huge, json={"description": "Dinner", "amount": "20", "category": "Food"})
    delete_response = client.delete(huge)

    for response in (get_response, put_response, delete_response):
        assert response.status_code == 404
        assert response.get_json() == {"error": "Expense not found"}
    assert client.get("/expenses").get_json() == [created]


def test_store_failure_is_generic_server_error(settings, engine):
    # No schema has been created, so every statement fails.
    app = create_app(settings, store=SQLStore(engine))
    client = app.test_client()

    response = client.get("/expenses")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_store_failure_on_create_is_server_error(settings, store, monkeypatch):
    def fail(*_args, **_kwargs):
        raise PersistenceError("Unable to insert expense")

    monkeypatch.setattr(store, "insert", fail)
    client = create_app(settings, store=store).test_client()

    response = _create(client)

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_cors_allows_configured_origin(client):
    response = client.get("/expenses", headers={"Origin": "http://localhost:5173"})

    assert response.headers.get("Access-Control-Allow-Origin") == "http://localhost:5173"


def test_cors_ignores_unknown_origin(client):
    response = client.get("/expenses", headers={"Origin": "http://evil.example"})

    assert "Access-Control-Allow-Origin" not in response.headers


def test_dev_environment_allows_any_origin(store):
    app = create_app(Settings.from_env({"EXPENSE_TRACKER_ENV": "dev"}), store=store)

    response = app.test_client().get("/expenses", headers={"Origin": "http://anywhere.example"})

    assert response.headers.get("Access-Control-Allow-Origin") in {"*", "http://anywhere.example"}


@pytest.fixture()
def file_store(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'expenses.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    sql_store = SQLStore(engine)
    sql_store.create_schema()
    yield sql_store
    engine.dispose()


def test_concurrent_deletes_of_one_row(settings, file_store):
    app = create_app(settings, store=file_store)
    created = _create(app.test_client()).get_json()

    def delete_once(_):
        return app.test_client().delete(f"/expenses/{created['id']}").status_code

    with ThreadPoolExecutor(max_workers=2) as pool:
        statuses = sorted(pool.map(delete_once, range(2)))

    assert statuses == [204, 404]


def test_concurrent_creates_get_distinct_ids(settings, file_store):
    app = create_app(settings, store=file_store)

    def create_once(n):
        return _create(app.test_client(), description=f"item {n}").get_json()["id"]

    with ThreadPoolExecutor(max_workers=4) as pool:
        ids = list(pool.map(create_once, range(8)))

    assert len(set(ids)) == 8
    assert [row["id"] for row in app.test_client().get("/expenses").get_json()] == sorted(ids, reverse=True)
