"""Routes attaching, detaching and retrying policies on indices."""
from typing import Optional

from fastapi import Depends, Request
from pydantic import BaseModel, Field

from ..constants import API_BASE_PATH
from ..core.cluster import ScopedClusterClient, encode_name, encode_names
from ..core.rate_limit import limiter
from ..types import RouteDependencies
from .dependencies import get_cluster_caller, raise_for_error


class AddPolicyToIndex(BaseModel):
    index_name: str = Field(..., alias="indexName", min_length=1)
    policy_name: str = Field(..., alias="policyName", min_length=1)
    alias: Optional[str] = None


class IndexNames(BaseModel):
    index_names: list[str] = Field(..., alias="indexNames", min_length=1)


def lifecycle_settings(policy_name: str, alias: Optional[str]) -> dict:
    """Index settings binding an index to a policy."""
    lifecycle = {"name": policy_name}
    if alias:
        lifecycle["rollover_alias"] = alias
    return {"index": {"lifecycle": lifecycle}}


def register_index_routes(deps: RouteDependencies) -> None:
    router = deps.router
    guard = [Depends(deps.license.guard_api_route)]

    @router.post(f"{API_BASE_PATH}/index/add", dependencies=guard)
    @limiter.limit("30/minute")
    async def add_policy_to_index(
        request: Request,
        payload: AddPolicyToIndex,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Attach a lifecycle policy to an index."""
        try:
            return await caller(
                "PUT",
                f"/{encode_name(payload.index_name)}/_settings",
                body=lifecycle_settings(payload.policy_name, payload.alias),
            )
        except Exception as e:
            raise_for_error(e, deps.lib)

    @router.post(f"{API_BASE_PATH}/index/remove", dependencies=guard)
    @limiter.limit("30/minute")
    async def remove_policy_from_indices(
        request: Request,
        payload: IndexNames,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Detach the lifecycle policy from one or more indices."""
        try:
            return await caller("POST", f"/{encode_names(payload.index_names)}/_ilm/remove")
        except Exception as e:
            raise_for_error(e, deps.lib)

    @router.post(f"{API_BASE_PATH}/index/retry", dependencies=guard)
    @limiter.limit("30/minute")
    async def retry_lifecycle(
        request: Request,
        payload: IndexNames,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Retry the failed lifecycle step of one or more indices."""
        try:
            return await caller("POST", f"/{encode_names(payload.index_names)}/_ilm/retry")
        except Exception as e:
            raise_for_error(e, deps.lib)
