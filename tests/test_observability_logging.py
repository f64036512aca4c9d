import json
import logging
from types import SimpleNamespace

from starlette.requests import Request

from app.inventory.core.principal import Role
from app.inventory.middleware.observability import build_request_log_payload

from tests.inventory_helpers import create_store, create_user, login_headers


def _request(path: str) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": [],
        "route": SimpleNamespace(path="/api/products/{product_id}"),
    }
    request = Request(scope)
    request.state.trace_id = "trace-log-1"
    request.state.tenant_id = "7"
    request.state.user_id = "11"
    request.state.role = "Owner"
    return request


def test_request_log_payload_uses_route_template():
    payload = build_request_log_payload(
        request=_request("/api/products/42"),
        response=SimpleNamespace(status_code=204),
        latency_ms=12.3456,
    )

    assert payload == {
        "event": "http_request",
        "trace_id": "trace-log-1",
        "tenant_id": "7",
        "user_id": "11",
        "role": "Owner",
        "route": "/api/products/{product_id}",
        "method": "GET",
        "status_code": 204,
        "latency_ms": 12.35,
        "error_code": None,
        "error_class": None,
    }


def test_request_log_payload_defaults_to_server_error_without_response():
    payload = build_request_log_payload(request=_request("/api/products/42"), response=None, latency_ms=1.0)

    assert payload["status_code"] == 500


def test_denied_request_is_logged_with_error_code(client, db_session, caplog):
    store = create_store(db_session, name="Store A")
    create_user(db_session, username="staff-a", role=Role.STAFF, store=store)
    headers = {**login_headers(client, "staff-a"), "X-Trace-ID": "trace-denied"}
    caplog.set_level(logging.INFO, logger="inventory.request")

    response = client.get("/api/products", headers=headers, params={"include_deleted": True})

    assert response.status_code == 403
    entries = [
        json.loads(record.getMessage())
        for record in caplog.records
        if record.name == "inventory.request"
    ]
    entry = next(item for item in entries if item["trace_id"] == "trace-denied")
    assert entry["route"] == "/api/products"
    assert entry["status_code"] == 403
    assert entry["error_code"] == "PERMISSION_DENIED"
    assert entry["role"] == "Staff"
    assert str(entry["tenant_id"]) == str(store.id)
