"""Pytest fixtures for Index Lifecycle Management tests."""
import pytest
from typing import Any, Generator, Optional

import httpx
from fastapi.testclient import TestClient

from index_lifecycle_management.config import (
    ClusterSettings,
    ConfigService,
    IndexLifecycleManagementConfig,
)
from index_lifecycle_management.core.rate_limit import limiter
from index_lifecycle_management.server import create_app


class FakeCluster:
    """In-memory cluster answering requests through an httpx.MockTransport."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.failures: set[tuple[str, str]] = set()
        self.license: dict = {
            "license": {"type": "basic", "status": "active", "uid": "test-uid"}
        }

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, body)

    def fail(self, method: str, path: str) -> None:
        """Make requests to a path fail without a response."""
        self.failures.add((method, path))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.failures:
            raise httpx.ConnectError("connection refused", request=request)
        if key == ("GET", "/_license"):
            return httpx.Response(200, json=self.license)
        if key not in self.routes:
            return httpx.Response(404, json={"error": {"type": "resource_not_found_exception"}})
        status, body = self.routes[key]
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        """Requests received for a method and path."""
        return [
            r for r in self.requests
            if r.method == method and r.url.path == path
        ]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# --- Rate Limiting Fixtures ---

@pytest.fixture(autouse=True)
def disable_rate_limiting():
    """Disable rate limiting for tests."""
    limiter.enabled = False
    yield
    limiter.enabled = True


# --- Cluster Fixtures ---

@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def plugin_config() -> IndexLifecycleManagementConfig:
    return IndexLifecycleManagementConfig(filtered_node_attributes=["rack"])


# --- Client Fixtures ---

@pytest.fixture
def make_client(fake_cluster: FakeCluster):
    """Factory fixture creating a test client for a given plugin config."""
    clients = []

    def _make(config: Optional[IndexLifecycleManagementConfig] = None) -> TestClient:
        config = config or IndexLifecycleManagementConfig()
        app = create_app(
            config_service=ConfigService(loader=lambda: config),
            cluster_settings=ClusterSettings(url="http://cluster.test"),
            transport=fake_cluster.transport,
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def test_client(make_client, plugin_config) -> Generator[TestClient, None, None]:
    """Create a test client backed by the fake cluster."""
    yield make_client(plugin_config)


# --- Sample Data Fixtures ---

@pytest.fixture
def sample_policies() -> dict:
    return {
        "hot-warm": {
            "version": 1,
            "modified_date": "2020-06-01T10:00:00.000Z",
            "policy": {"phases": {"hot": {"actions": {"rollover": {"max_size": "50gb"}}}}},
        },
        "delete-30d": {
            "version": 3,
            "modified_date": "2020-06-02T10:00:00.000Z",
            "policy": {"phases": {"delete": {"min_age": "30d", "actions": {"delete": {}}}}},
        },
    }


@pytest.fixture
def sample_explain() -> dict:
    return {
        "indices": {
            "logs-1": {"index": "logs-1", "managed": True, "policy": "hot-warm", "phase": "hot"},
            "logs-2": {"index": "logs-2", "managed": True, "policy": "hot-warm", "phase": "warm"},
            "metrics-1": {"index": "metrics-1", "managed": True, "policy": "unknown"},
        }
    }


@pytest.fixture
def sample_node_stats() -> dict:
    return {
        "nodes": {
            "node-a": {"name": "a", "attributes": {"box_type": "hot", "rack": "r1", "xpack.installed": "true"}},
            "node-b": {"name": "b", "attributes": {"box_type": "warm", "rack": "r1"}},
            "node-c": {"name": "c", "attributes": {"box_type": "hot"}},
            "node-d": {"name": "d"},
        }
    }
