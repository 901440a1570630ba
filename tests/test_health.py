from fastapi import status

from conftest import API


def test_liveness(client):
    response = client.get(f"{API}/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"


def test_readiness_checks_database(client):
    response = client.get(f"{API}/health/ready")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ready"


def test_unknown_route_uses_error_body(client):
    response = client.get(f"{API}/does-not-exist")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Not Found"}
