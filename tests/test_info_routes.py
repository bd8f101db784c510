from __future__ import annotations

from fastapi.testclient import TestClient


def test_root_returns_fixed_text(client: TestClient):
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.text == "Hello from the Restaurant API!"
    assert resp.headers["content-type"].startswith("text/plain")


def test_about_returns_fixed_text(client: TestClient):
    resp = client.get("/about")

    assert resp.status_code == 200
    assert resp.text == "This API is created by CB!"


def test_health_check(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_openapi_documents_rate_limit_response(client: TestClient):
    schema = client.get("/openapi.json").json()

    operation = schema["paths"]["/restaurants"]["post"]
    assert "429" in operation["responses"]
    assert {"Restaurants", "Info"} <= {tag["name"] for tag in schema["tags"]}
