"""Tests for the HTTP API with dependency overrides (no database, no network)."""

import pytest
from fastapi.testclient import TestClient

from helpdesk.adapters.auth.static_token import StaticTokenDirectory
from helpdesk.application.ports.staff_directory import StaffMember
from helpdesk.application.use_cases.classify_ticket import ClassificationService
from helpdesk.infrastructure.api.dependencies import (
    get_classification_service,
    get_staff_directory,
    get_ticket_repo,
    get_ticket_stats,
)
from helpdesk.main import app

TOKEN = "staff-secret"
STAFF = StaffMember(id="admin-001", name="Admin")


@pytest.fixture
def anon(ticket_repo, ticket_stats):
    app.dependency_overrides[get_ticket_repo] = lambda: ticket_repo
    app.dependency_overrides[get_ticket_stats] = lambda: ticket_stats
    app.dependency_overrides[get_classification_service] = lambda: ClassificationService(remote=None)
    app.dependency_overrides[get_staff_directory] = lambda: StaticTokenDirectory(TOKEN, STAFF)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon):
    anon.headers["Authorization"] = f"Bearer {TOKEN}"
    return anon


def _create(client, **overrides):
    body = {
        "title": "System down",
        "description": "production database is down, urgent",
        "customerEmail": "ops@example.com",
        "customerName": "Ops",
    }
    body.update(overrides)
    return client.post("/api/tickets", json=body)


def test_classify_endpoint(client):
    resp = client.post(
        "/api/classify",
        json={"title": "Refund request", "description": "I was charged twice, please refund"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["suggestedCategory"] == "billing"
    assert data["suggestedQueue"] == "billing-support"
    assert data["suggestedPriority"] == "medium"
    assert data["confidence"] == 0.5
    assert data["classifiedAt"]


def test_classify_rejects_blank_input(client):
    resp = client.post("/api/classify", json={"title": "  ", "description": "x"})
    assert resp.status_code == 422


def test_create_ticket(client):
    resp = _create(client)
    assert resp.status_code == 201
    data = resp.json()
    assert data["id"] == 1
    assert data["priority"] == "critical"
    assert data["queue"] == "escalation"
    assert data["status"] == "open"
    assert data["aiClassification"]["suggestedQueue"] == "escalation"


def test_create_ticket_keeps_explicit_category(client):
    data = _create(client, category="billing", priority="low").json()
    assert data["category"] == "billing"
    assert data["priority"] == "low"


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "x" * 201},
        {"description": ""},
        {"customerEmail": "not-an-email"},
        {"priority": "extreme"},
    ],
)
def test_create_ticket_validation(client, overrides):
    assert _create(client, **overrides).status_code == 422


def test_get_and_missing_ticket(client):
    _create(client)
    assert client.get("/api/tickets/1").json()["title"] == "System down"
    assert client.get("/api/tickets/42").status_code == 404


def test_list_with_filters(client):
    _create(client)
    _create(client, title="Invoice", description="billing question")
    data = client.get("/api/tickets", params={"queue": "billing-support"}).json()
    assert data["total"] == 1
    assert data["tickets"][0]["title"] == "Invoice"

    assert client.get("/api/tickets", params={"queue": "nowhere"}).status_code == 422


def test_update_and_unassign(client):
    _create(client)
    data = client.put("/api/tickets/1", json={"status": "resolved", "assignedTo": "agent"}).json()
    assert data["status"] == "resolved"
    assert data["resolvedAt"] is not None
    assert data["assignedTo"] == "agent"

    data = client.put("/api/tickets/1", json={"assignedTo": None}).json()
    assert data["assignedTo"] is None


def test_comment_and_reclassify(client):
    _create(client)
    data = client.post(
        "/api/tickets/1/comments", json={"author": "Agent", "content": "On it", "isInternal": True}
    ).json()
    assert data["comments"][0]["isInternal"] is True

    data = client.post("/api/tickets/1/reclassify").json()
    assert data["aiClassification"]["reasoning"]
    assert client.post("/api/tickets/9/reclassify").status_code == 404


def test_customer_lookup(client):
    _create(client)
    data = client.get("/api/tickets/customer/OPS@example.com").json()
    assert data["total"] == 1


def test_admin_metrics_and_queues(client):
    _create(client)
    metrics = client.get("/api/admin/metrics").json()
    assert metrics["overview"]["total"] == 1
    assert metrics["by_queue"] == {"escalation": 1}
    assert metrics["performance"]["ai_agreement_pct"] == 100

    queues = client.get("/api/admin/queues").json()["queues"]
    assert {q["name"] for q in queues} >= {"escalation", "unassigned"}


# ─── Access control ─────────────────────────────────────────────────


def test_public_routes_need_no_token(anon):
    assert _create(anon).status_code == 201
    assert anon.get("/api/tickets/customer/ops@example.com").json()["total"] == 1
    resp = anon.post("/api/classify", json={"title": "Help", "description": "app is broken"})
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/tickets"),
        ("GET", "/api/tickets/1"),
        ("PUT", "/api/tickets/1"),
        ("POST", "/api/tickets/1/comments"),
        ("POST", "/api/tickets/1/reclassify"),
        ("GET", "/api/admin/metrics"),
        ("GET", "/api/admin/queues"),
        ("GET", "/api/admin/agents"),
        ("POST", "/api/admin/assign"),
        ("POST", "/api/admin/transfer"),
    ],
)
def test_staff_routes_require_token(anon, method, path):
    _create(anon)
    resp = anon.request(method, path, json={} if method != "GET" else None)
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"

    resp = anon.request(
        method, path,
        json={} if method != "GET" else None,
        headers={"Authorization": "Bearer wrong-token"},
    )
    assert resp.status_code == 401


def test_staff_route_with_token(anon):
    _create(anon)
    resp = anon.get("/api/tickets/1", headers={"Authorization": f"Bearer {TOKEN}"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "System down"


def test_unconfigured_token_locks_staff_routes(anon):
    app.dependency_overrides[get_staff_directory] = lambda: StaticTokenDirectory("", STAFF)
    resp = anon.get("/api/admin/metrics", headers={"Authorization": f"Bearer {TOKEN}"})
    assert resp.status_code == 401


# ─── Queues and bulk triage ─────────────────────────────────────────


def test_update_moves_ticket_back_to_unassigned(client):
    _create(client)
    data = client.put("/api/tickets/1", json={"queue": "unassigned"}).json()
    assert data["queue"] == "unassigned"

    assert client.put("/api/tickets/1", json={"queue": "nowhere"}).status_code == 422


def test_comment_author_defaults_to_staff_member(client):
    _create(client)
    data = client.post("/api/tickets/1/comments", json={"content": "Looking into it"}).json()
    assert data["comments"][0]["author"] == "Admin"


def test_bulk_assign_and_agents(client):
    _create(client)
    _create(client, title="Invoice", description="billing question")

    data = client.post("/api/admin/assign", json={"ticketIds": [1, 2, 9]}).json()
    assert data["updated"] == 2
    assert data["notFound"] == [9]

    ticket = client.get("/api/tickets/2").json()
    assert ticket["assignedTo"] == "admin-001"
    assert ticket["status"] == "in-progress"

    client.post("/api/admin/assign", json={"ticketIds": [2], "assignedTo": "agent-7"})
    agents = client.get("/api/admin/agents").json()["agents"]
    assert agents == [
        {"agent": "admin-001", "assigned_total": 1, "assigned_open": 1, "resolved_this_month": 0},
        {"agent": "agent-7", "assigned_total": 1, "assigned_open": 1, "resolved_this_month": 0},
    ]


def test_bulk_transfer(client):
    _create(client)
    client.post("/api/admin/assign", json={"ticketIds": [1]})

    data = client.post(
        "/api/admin/transfer", json={"ticketIds": [1], "queue": "billing-support"}
    ).json()
    assert data["updated"] == 1

    ticket = client.get("/api/tickets/1").json()
    assert ticket["queue"] == "billing-support"
    assert ticket["assignedTo"] is None


@pytest.mark.parametrize(
    "body",
    [
        {"ticketIds": [1], "queue": "nowhere"},
        {"ticketIds": [], "queue": "escalation"},
        {"queue": "escalation"},
    ],
)
def test_bulk_transfer_validation(client, body):
    _create(client)
    assert client.post("/api/admin/transfer", json=body).status_code == 422
