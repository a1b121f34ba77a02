"""Adds index lifecycle state to index listings."""
from typing import List, Optional

from .constants import ILM_EXPLAIN_PATH
from .core.cluster import ClusterCaller
from .core.index_management import Index
from .errors import RemoteFetchError


async def index_lifecycle_data_enricher(
    indices_list: Optional[List[Index]],
    call_as_current_user: ClusterCaller,
) -> List[Index]:
    """
    Annotate each index with its lifecycle explain data under ``ilm``.

    Issues a single explain request across all indices. Indices missing
    from the response get an empty ``ilm`` dict. The input list and its
    items are left untouched.

    Args:
        indices_list: Index descriptors, each with a ``name``
        call_as_current_user: Cluster caller scoped to the current user

    Returns:
        New list of indices in the same order, each with an ``ilm`` field

    Raises:
        RemoteFetchError: If the explain request fails or returns a
            payload that is not an object
    """
    if not indices_list:
        return []

    response = await call_as_current_user("GET", ILM_EXPLAIN_PATH)
    if not isinstance(response, dict):
        raise RemoteFetchError(
            f"Unexpected explain response of type {type(response).__name__}",
            body=response,
        )
    ilm_indices_data = response.get("indices") or {}

    return [
        {
            **index,
            "ilm": {**(ilm_indices_data.get(index["name"]) or {})},
        }
        for index in indices_list
    ]
