def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert "database" in payload
    assert payload["database"]["dialect"] == "sqlite"


def test_security_headers_are_set(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_oversized_request_is_rejected(client):
    response = client.post(
        "/api/absences",
        content=b"x" * 1_000_001,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert "message" in response.json()
