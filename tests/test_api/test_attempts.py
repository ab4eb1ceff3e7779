"""
API integration tests for /api/v2/jobs/{job_name}/job-attempts endpoints.

These use the test HTTP client from conftest.py, which talks to the FastAPI
app with the resolver wired to in-memory fakes. No orchestrator, no
Elasticsearch, no network.
"""

import httpx
import pytest

from resolver.errors import UpstreamError

BASE = "/api/v2/jobs/alice~train/job-attempts"


@pytest.mark.asyncio
async def test_healthz_enabled(client):
    response = await client.get(f"{BASE}/healthz")
    assert response.status_code == 200
    assert response.json() == {"is_enabled": True}


@pytest.mark.asyncio
async def test_healthz_disabled(client, history):
    history.health_status = 503

    response = await client.get(f"{BASE}/healthz")
    assert response.status_code == 501
    assert response.json() == {"is_enabled": False}


@pytest.mark.asyncio
async def test_list_attempts(client):
    """GET .../job-attempts returns live attempt first, then history."""
    response = await client.get(BASE)

    assert response.status_code == 200
    data = response.json()
    assert [a["attempt_index"] for a in data] == [3, 2, 1, 0]
    assert data[0]["is_latest"] is True
    assert all(a["is_latest"] is False for a in data[1:])
    assert data[0]["job_name"] == "alice~train"
    assert data[1]["state"] == "FAILED"


@pytest.mark.asyncio
async def test_list_attempts_unknown_job(client, orchestrator):
    orchestrator.status_code = 404
    orchestrator.data = {"message": "not found"}

    response = await client.get("/api/v2/jobs/alice~nope/job-attempts")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_attempts_history_unavailable(client, history):
    history.health_status = 500

    response = await client.get(BASE)
    assert response.status_code == 501


@pytest.mark.asyncio
async def test_get_live_attempt(client):
    response = await client.get(f"{BASE}/3")

    assert response.status_code == 200
    assert response.json()["is_latest"] is True
    assert response.json()["state"] == "RUNNING"


@pytest.mark.asyncio
async def test_get_history_attempt(client):
    response = await client.get(f"{BASE}/1")

    assert response.status_code == 200
    assert response.json()["attempt_index"] == 1
    assert response.json()["is_latest"] is False


@pytest.mark.asyncio
async def test_get_future_attempt_is_404(client):
    response = await client.get(f"{BASE}/4")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_negative_index_is_422(client):
    response = await client.get(f"{BASE}/-1")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_orchestrator_server_error_is_passed_through(client, orchestrator):
    orchestrator.status_code = 503
    orchestrator.data = {"message": "apiserver overloaded"}

    response = await client.get(BASE)
    assert response.status_code == 503
    assert response.json()["detail"] == "apiserver overloaded"
    assert response.json()["source"] == "orchestrator"


@pytest.mark.asyncio
async def test_orchestrator_client_error_becomes_502(client, orchestrator):
    orchestrator.status_code = 401
    orchestrator.data = {"message": "Unauthorized"}

    response = await client.get(f"{BASE}/0")
    assert response.status_code == 502
    assert response.json()["upstream_status"] == 401


@pytest.mark.asyncio
async def test_history_transport_failure_becomes_502(client, history):
    history.search_error = httpx.ConnectError("connection reset")

    response = await client.get(BASE)
    assert response.status_code == 502
    assert response.json()["source"] == "history"
    assert response.json()["upstream_status"] is None


@pytest.mark.asyncio
async def test_history_client_error_becomes_502(client, history):
    history.search_error = UpstreamError(400, "parsing_exception", source="history")

    response = await client.get(f"{BASE}/2")
    assert response.status_code == 502
    assert response.json()["source"] == "history"
    assert response.json()["upstream_status"] == 400
