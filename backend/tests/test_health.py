# backend/tests/test_health.py
import os

from fastapi.testclient import TestClient

os.environ.setdefault("EMAIL_VERIFY_ON_STARTUP", "false")

from contact_relay.main import app

client = TestClient(app)


def test_health():
    """Basic health endpoint returns status ok."""
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_health_accepts_allowed_origin():
    resp = client.get("/health", headers={"Origin": "http://localhost:3000"})
    assert resp.status_code == 200


def test_contact_route_answers_preflight():
    resp = client.options(
        "/api/contact",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status_code == 200


def test_contact_route_is_registered():
    resp = client.post("/api/contact", json={})
    assert resp.status_code == 400
    assert resp.json() == {"message": "All fields are required"}
