"""App health and authentication guard tests."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient) -> None:
    """Health endpoint should return status and version."""
    response = client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status"] == "ok"
    assert isinstance(payload["version"], str)


def test_election_routes_require_bearer_token(client: TestClient) -> None:
    """Requests without a token get the structured 401 error."""
    response = client.get("/elections")
    assert response.status_code == 401
    assert response.json() == {"error": "Missing authorization header", "code": "UNAUTHORIZED"}
