"""
Shared test fixtures.

These replace real infrastructure with lightweight in-memory alternatives:
- Orchestrator API → FakeOrchestrator (returns a canned status + framework)
- Elasticsearch → FakeHistoryIndex (evaluates our aggregation queries over a
  list of snapshot documents, so query shape AND extraction are exercised)
- HTTP server → httpx.AsyncClient with ASGI transport (no network)

Both fakes count their calls, so tests can assert that a code path never
touched the history index.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import create_app
from api.dependencies import get_resolver
from clients.orchestrator import OrchestratorResponse
from config.settings import Settings
from resolver.factory import build_resolver


def make_framework(
    name: str = "alice~train",
    uid: str = "uid-1",
    attempt_id: int = 0,
    max_retry_count: int = 3,
    state: str = "AttemptRunning",
    completion_code: int | None = None,
) -> dict:
    """A framework object shaped like the framework controller's."""
    user, _, job = name.partition("~")
    attempt_status = {
        "id": attempt_id,
        "startTime": "2024-05-01T10:00:00Z",
        "taskRoleStatuses": [
            {
                "name": "worker",
                "taskStatuses": [
                    {
                        "index": 0,
                        "state": "TaskAttemptRunning",
                        "retryPolicyStatus": {"totalRetriedCount": 0},
                        "attemptStatus": {"podName": f"{uid}-worker-0", "podIP": "10.0.0.5"},
                    },
                ],
            },
        ],
    }
    if completion_code is not None:
        attempt_status["completionTime"] = "2024-05-01T11:00:00Z"
        attempt_status["completionStatus"] = {
            "code": completion_code,
            "phrase": "Succeeded" if completion_code == 0 else "ContainerFailed",
            "type": {"name": "Succeeded" if completion_code == 0 else "Failed"},
        }
    return {
        "metadata": {
            "name": name,
            "uid": uid,
            "creationTimestamp": "2024-05-01T09:59:00Z",
            "annotations": {"userName": user, "jobName": job},
        },
        "spec": {
            "executionType": "Start",
            "retryPolicy": {"fancyRetryPolicy": False, "maxRetryCount": max_retry_count},
            "taskRoles": [{"name": "worker", "taskNumber": 1}],
        },
        "status": {
            "state": state,
            "retryPolicyStatus": {"totalRetriedCount": attempt_id},
            "attemptStatus": attempt_status,
        },
    }


def make_snapshot(framework: dict, collect_time: str) -> dict:
    """A history index document wrapping a framework snapshot."""
    return {"collectTime": collect_time, "objectSnapshot": framework}


class FakeOrchestrator:

    def __init__(self, status_code: int = 200, data: dict | None = None, error: Exception | None = None):
        self.status_code = status_code
        self.data = data or {}
        self.error = error
        self.calls: list[tuple[str, dict | None]] = []

    async def get(self, path: str, headers: dict | None = None) -> OrchestratorResponse:
        self.calls.append((path, headers))
        if self.error is not None:
            raise self.error
        return OrchestratorResponse(status_code=self.status_code, data=self.data)

    async def close(self) -> None:
        pass


class FakeHistoryIndex:
    """
    In-memory stand-in for Elasticsearch that understands exactly the two
    aggregation shapes built by resolver/history.py.
    """

    def __init__(self, documents: list[dict] | None = None, health_status: int = 200,
                 health_error: Exception | None = None, search_error: Exception | None = None):
        self.documents = documents or []
        self.health_status = health_status
        self.health_error = health_error
        self.search_error = search_error
        self.health_calls = 0
        self.search_calls: list[tuple[str, dict]] = []

    async def health(self) -> int:
        self.health_calls += 1
        if self.health_error is not None:
            raise self.health_error
        return self.health_status

    async def search(self, index: str, body: dict) -> dict:
        self.search_calls.append((index, body))
        if self.search_error is not None:
            raise self.search_error
        uid = body["query"]["bool"]["filter"]["term"]["objectSnapshot.metadata.uid.keyword"]
        docs = [d for d in self.documents if d["objectSnapshot"]["metadata"]["uid"] == uid]
        group = body["aggs"]["attemptID_group"]

        if "terms" in group:
            by_attempt: dict[int, list[dict]] = {}
            for doc in docs:
                by_attempt.setdefault(_attempt_id(doc), []).append(doc)
            buckets = [
                {"key": key, "collectTime_latest_hits": _top_hit(by_attempt[key])}
                for key in sorted(by_attempt, reverse=True)[: group["terms"]["size"]]
            ]
            return {"aggregations": {"attemptID_group": {"buckets": buckets}}}

        wanted = group["filter"]["term"]["objectSnapshot.status.attemptStatus.id"]
        matching = [d for d in docs if _attempt_id(d) == wanted]
        return {
            "aggregations": {
                "attemptID_group": {
                    "doc_count": len(matching),
                    "collectTime_latest_hits": _top_hit(matching),
                },
            },
        }

    async def close(self) -> None:
        pass


def _attempt_id(doc: dict) -> int:
    return doc["objectSnapshot"]["status"]["attemptStatus"]["id"]


def _top_hit(docs: list[dict]) -> dict:
    latest = sorted(docs, key=lambda d: d["collectTime"], reverse=True)[:1]
    return {"hits": {"hits": [{"_source": d} for d in latest]}}


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        LAUNCHER_TYPE="k8s",
        ORCHESTRATOR_API_URL="http://orchestrator.test",
        ORCHESTRATOR_TOKEN="secret-token",
        ELASTICSEARCH_URI="http://es.test:9200",
    )


@pytest.fixture
def live_framework():
    """Live framework on its 4th attempt (id 3) with maxRetryCount 3."""
    return make_framework(attempt_id=3, max_retry_count=3)


@pytest.fixture
def orchestrator(live_framework):
    return FakeOrchestrator(status_code=200, data=live_framework)


@pytest.fixture
def history():
    """Attempts 0, 1, 2 of uid-1, each snapshotted twice, plus noise from another uid."""
    documents = []
    for attempt_id in range(3):
        early = make_framework(attempt_id=attempt_id, state="AttemptRunning")
        late = make_framework(attempt_id=attempt_id, state="AttemptCompleted", completion_code=1)
        documents.append(make_snapshot(early, f"2024-05-0{attempt_id + 1}T10:00:00Z"))
        documents.append(make_snapshot(late, f"2024-05-0{attempt_id + 1}T12:00:00Z"))
    documents.append(make_snapshot(make_framework(uid="other-uid", attempt_id=7), "2024-05-09T00:00:00Z"))
    return FakeHistoryIndex(documents)


@pytest.fixture
def resolver(test_settings, orchestrator, history):
    return build_resolver(test_settings, orchestrator=orchestrator, history=history).resolver


@pytest_asyncio.fixture
async def client(resolver):
    """
    Create a test HTTP client that talks directly to the FastAPI app.

    dependency_overrides swaps the real resolver (built during lifespan)
    for one wired to the in-memory fakes.
    """
    app = create_app()

    async def override_get_resolver():
        return resolver

    app.dependency_overrides[get_resolver] = override_get_resolver

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
