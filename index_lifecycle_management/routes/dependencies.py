"""FastAPI dependencies and error helpers shared by the API routes."""
from typing import NoReturn

from fastapi import HTTPException, Request

from ..core.cluster import ScopedClusterClient
from ..errors import RemoteFetchError
from ..types import RouteLib


def get_cluster_caller(request: Request) -> ScopedClusterClient:
    """Dependency returning a cluster caller bound to the request's credentials."""
    return request.app.state.cluster_client.as_scoped(request.headers)


def raise_for_error(error: Exception, lib: RouteLib) -> NoReturn:
    """
    Turn a cluster error response into an HTTP error.

    Errors that did not come from the cluster are re-raised untouched.

    Raises:
        HTTPException: With the cluster's status code and body
    """
    if lib.is_es_error(error):
        raise HTTPException(status_code=error.status_code, detail=error.body) from error
    raise error


def is_not_found(error: Exception) -> bool:
    return isinstance(error, RemoteFetchError) and error.status_code == 404
