"""Tests for container REST endpoints."""

from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from container_store.api.app import create_app
from container_store.domain.audit import AuditPhase, Operation

PAYLOAD = {
    "key": {"id": "c-1", "containerType": "BOX"},
    "name": "Crate",
    "size": 12.5,
    "unit": "kg",
}


def test_create_returns_created_record(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/rest/container/", json=PAYLOAD)

    assert response.status_code == 201
    assert response.json() == PAYLOAD


def test_create_then_fetch_returns_same_record(container) -> None:
    client = TestClient(create_app(container))
    client.post("/rest/container/", json=PAYLOAD)

    response = client.get(
        "/rest/container/", params={"id": "c-1", "containerType": "BOX"}
    )

    assert response.status_code == 200
    assert response.json() == PAYLOAD


def test_fetch_unknown_key_returns_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/rest/container/", params={"id": "missing", "containerType": "BOX"}
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Resource not found"}


def test_fetch_requires_both_key_parts(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/rest/container/", params={"id": "c-1"})

    assert response.status_code == 422


def test_create_rejects_invalid_payload(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/rest/container/", json={"key": {"id": "c-1"}, "name": "Crate"}
    )

    assert response.status_code == 422


def test_requests_are_audited(container, audit_sink) -> None:
    client = TestClient(create_app(container))

    client.post("/rest/container/", json=PAYLOAD)
    client.get("/rest/container/", params={"id": "c-1", "containerType": "BOX"})

    assert [(e.operation, e.phase) for e in audit_sink.events] == [
        (Operation.SAVE, AuditPhase.BEGIN),
        (Operation.SAVE, AuditPhase.END),
        (Operation.FETCH, AuditPhase.BEGIN),
        (Operation.FETCH, AuditPhase.END),
    ]
    assert {e.collection_name for e in audit_sink.events} == {"container"}


def test_store_failure_returns_500(container, audit_sink, raw_store) -> None:
    raw_store.error = ServerSelectionTimeoutError("no servers")
    client = TestClient(create_app(container))

    response = client.get(
        "/rest/container/", params={"id": "c-1", "containerType": "BOX"}
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert [e.phase for e in audit_sink.events] == [AuditPhase.BEGIN, AuditPhase.END]


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
