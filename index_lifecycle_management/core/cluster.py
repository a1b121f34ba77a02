"""
Search cluster HTTP client.

Wraps an httpx.AsyncClient and turns failed requests into RemoteFetchError.
Route handlers talk to the cluster on behalf of the end user through a
scoped client that forwards the user's credentials and never falls back to
the client's own.

Usage:
    client = ClusterClient("http://localhost:9200", auth=("elastic", "changeme"))
    scoped = client.as_scoped(request.headers)
    explain = await scoped("GET", "/*/_ilm/explain")
"""
import logging
from typing import Any, Awaitable, Iterable, Mapping, Optional, Protocol
from urllib.parse import quote

import httpx

from ..errors import RemoteFetchError

logger = logging.getLogger(__name__)

# Request headers forwarded from the end user to the cluster
FORWARDED_HEADERS = ("authorization",)


def encode_name(name: str) -> str:
    """Percent-encode a single index, template or policy name for a URL path."""
    return quote(name, safe="")


def encode_names(names: Iterable[str]) -> str:
    """Encode names as one comma-separated path segment, keeping ``*`` wildcards."""
    return ",".join(quote(name, safe="*") for name in names)


class ClusterCaller(Protocol):
    """Callable issuing a raw request against the cluster."""

    def __call__(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        body: Any = None,
    ) -> Awaitable[Any]:
        ...


class ClusterClient:
    """Async client for the cluster REST API."""

    def __init__(
        self,
        base_url: str,
        auth: Optional[tuple[str, str]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Cluster URL, e.g. http://localhost:9200
            auth: Optional (username, password) for the plugin's own
                requests, such as the license refresh
            timeout: Request timeout in seconds
            transport: Override the httpx transport (for testing)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> Any:
        """
        Send a request to the cluster.

        Args:
            method: HTTP method
            path: Request path with names already encoded, e.g. /_ilm/policy
            params: Query string parameters
            body: JSON body
            headers: Extra request headers
            auth: Per-request auth; None sends no client credentials

        Returns:
            Decoded JSON response, or an empty dict for empty bodies

        Raises:
            RemoteFetchError: If the request fails, the cluster returns
                an error status or the response body is not JSON
        """
        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=body,
                headers=dict(headers) if headers else None,
                auth=auth,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Cluster request {method} {path} failed: {e}")
            raise RemoteFetchError(f"Cluster request {method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise RemoteFetchError(
                f"Cluster returned {response.status_code} for {method} {path}",
                status_code=response.status_code,
                body=_decode(response),
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Cluster returned a non-JSON body for {method} {path}")
            raise RemoteFetchError(
                f"Cluster returned a non-JSON body for {method} {path}",
                body=response.text,
            ) from e

    def as_scoped(self, headers: Optional[Mapping[str, str]] = None) -> "ScopedClusterClient":
        """Return a client that forwards the end user's credentials."""
        forwarded = {}
        if headers:
            for name, value in headers.items():
                if name.lower() in FORWARDED_HEADERS and value:
                    forwarded[name.lower()] = value
        return ScopedClusterClient(self, forwarded)

    async def close(self) -> None:
        await self._client.aclose()


class ScopedClusterClient:
    """
    Cluster caller bound to the credentials of a single request.

    Requests carry only the forwarded user headers. Anonymous requests reach
    the cluster without credentials and are answered as such.
    """

    def __init__(self, client: ClusterClient, headers: dict[str, str]):
        self._client = client
        self.headers = headers

    async def __call__(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        body: Any = None,
    ) -> Any:
        return await self._client.request(
            method,
            path,
            params=params,
            body=body,
            headers=self.headers,
            auth=None,
        )


def _decode(response: httpx.Response) -> Any:
    """Decode an error body, falling back to text for non-JSON payloads."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text
