"""Tests for the cluster HTTP client."""
import json

import httpx
import pytest

from index_lifecycle_management.core.cluster import ClusterClient, encode_name, encode_names
from index_lifecycle_management.errors import RemoteFetchError, is_es_error


def make_client(handler, auth=None) -> ClusterClient:
    return ClusterClient(
        "http://cluster.test/",
        auth=auth,
        transport=httpx.MockTransport(handler),
    )


class TestClusterClient:
    """Tests for ClusterClient.request."""

    @pytest.mark.asyncio
    async def test_returns_json(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"acknowledged": True})

        client = make_client(handler)
        result = await client.request(
            "PUT", "/_ilm/policy/p1", params={"master_timeout": "30s"}, body={"policy": {}}
        )

        assert result == {"acknowledged": True}
        assert seen[0].url.path == "/_ilm/policy/p1"
        assert seen[0].url.params["master_timeout"] == "30s"
        assert json.loads(seen[0].content) == {"policy": {}}
        await client.close()

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self):
        client = make_client(lambda request: httpx.Response(200))

        assert await client.request("POST", "/logs/_ilm/retry") == {}

    @pytest.mark.asyncio
    async def test_non_json_success_body_raises(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>proxy error</html>"))

        with pytest.raises(RemoteFetchError) as exc_info:
            await client.request("GET", "/_license")

        assert exc_info.value.status_code is None
        assert exc_info.value.body == "<html>proxy error</html>"

    @pytest.mark.asyncio
    async def test_error_status_raises_with_status_and_body(self):
        body = {"error": {"type": "resource_not_found_exception"}, "status": 404}
        client = make_client(lambda request: httpx.Response(404, json=body))

        with pytest.raises(RemoteFetchError) as exc_info:
            await client.request("GET", "/_ilm/policy/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == body
        assert is_es_error(exc_info.value) is True

    @pytest.mark.asyncio
    async def test_transport_error_raises_without_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(RemoteFetchError) as exc_info:
            await client.request("GET", "/_license")

        assert exc_info.value.status_code is None
        assert is_es_error(exc_info.value) is False
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestScopedClusterClient:
    """Tests for request-scoped callers."""

    @pytest.mark.asyncio
    async def test_forwards_user_authorization(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler, auth=("kibana", "secret"))
        scoped = client.as_scoped({
            "Authorization": "Bearer user-token",
            "Cookie": "sid=1",
        })

        await scoped("GET", "/*/_ilm/explain")

        assert scoped.headers == {"authorization": "Bearer user-token"}
        assert seen[0].headers["authorization"] == "Bearer user-token"
        assert "cookie" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_anonymous_request_sends_no_client_credentials(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler, auth=("kibana", "secret"))

        await client.as_scoped({})("GET", "/_nodes/stats")

        assert "authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_unscoped_request_uses_client_credentials(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler, auth=("kibana", "secret"))

        await client.request("GET", "/_license")

        assert seen[0].headers["authorization"].startswith("Basic ")


class TestIsEsError:
    def test_other_errors(self):
        assert is_es_error(ValueError("nope")) is False
        assert is_es_error(RemoteFetchError("timeout")) is False
        assert is_es_error(RemoteFetchError("bad request", status_code=400)) is True


class TestPathEncoding:
    def test_encode_name_escapes_reserved_characters(self):
        assert encode_name("logs-1") == "logs-1"
        assert encode_name("new?idx#1") == "new%3Fidx%231"
        assert encode_name("a/b,c*") == "a%2Fb%2Cc%2A"

    def test_encode_names_keeps_wildcards(self):
        assert encode_names(["logs-*", "metrics-1"]) == "logs-*,metrics-1"
        assert encode_names(["bad?", "x,y"]) == "bad%3F,x%2Cy"
