def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["trace_id"]


def test_ready(client):
    response = client.get("/ready", headers={"X-Trace-ID": "trace-ready"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["trace_id"] == "trace-ready"


def test_openapi_documents_error_envelope(client):
    response = client.get("/openapi.json")
    assert response.status_code == 200
    schema = response.json()
    delete_op = schema["paths"]["/api/products/{product_id}"]["delete"]
    assert {"400", "401", "403", "404", "409", "422"} <= set(delete_op["responses"])
    assert "ApiErrorResponse" in schema["components"]["schemas"]
