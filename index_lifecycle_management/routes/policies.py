"""Lifecycle policy routes."""
import asyncio
from typing import Any

from fastapi import Depends, Query, Request
from pydantic import BaseModel, Field

from ..constants import API_BASE_PATH, ILM_EXPLAIN_PATH
from ..core.cluster import ScopedClusterClient, encode_name
from ..core.rate_limit import limiter
from ..types import RouteDependencies
from .dependencies import get_cluster_caller, is_not_found, raise_for_error


class PolicyCreate(BaseModel):
    """Request model for creating or updating a policy."""
    name: str = Field(..., min_length=1)
    phases: dict[str, Any]


async def fetch_policies(caller: ScopedClusterClient) -> dict[str, dict]:
    """Fetch every lifecycle policy, keyed by name."""
    try:
        return await caller("GET", "/_ilm/policy")
    except Exception as e:
        if is_not_found(e):
            return {}
        raise


async def add_linked_indices(caller: ScopedClusterClient, policies_map: dict[str, dict]) -> None:
    """Attach the names of the indices managed by each policy as ``linkedIndices``."""
    response = await caller("GET", ILM_EXPLAIN_PATH, params={"only_managed": "true"})
    for index in (response.get("indices") or {}).values():
        policy_entry = policies_map.get(index.get("policy"))
        if policy_entry is not None:
            policy_entry.setdefault("linkedIndices", []).append(index["index"])


def format_policies(policies_map: dict[str, dict]) -> list[dict]:
    return [{**policy, "name": name} for name, policy in policies_map.items()]


def register_policies_routes(deps: RouteDependencies) -> None:
    router = deps.router
    guard = [Depends(deps.license.guard_api_route)]

    @router.get(f"{API_BASE_PATH}/policies", dependencies=guard)
    @limiter.limit("100/minute")
    async def list_policies(
        request: Request,
        with_indices: bool = Query(False, alias="withIndices"),
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """List lifecycle policies, optionally with the indices they manage."""
        try:
            policies_map = await fetch_policies(caller)
            if with_indices:
                await add_linked_indices(caller, policies_map)
            return format_policies(policies_map)
        except Exception as e:
            raise_for_error(e, deps.lib)

    @router.post(f"{API_BASE_PATH}/policies", dependencies=guard)
    @limiter.limit("30/minute")
    async def create_policy(
        request: Request,
        policy: PolicyCreate,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Create or update a lifecycle policy."""
        try:
            return await caller(
                "PUT",
                f"/_ilm/policy/{encode_name(policy.name)}",
                body={"policy": {"phases": policy.phases}},
            )
        except Exception as e:
            raise_for_error(e, deps.lib)

    @router.delete(f"{API_BASE_PATH}/policies/{{policy_names}}", dependencies=guard)
    @limiter.limit("30/minute")
    async def delete_policies(
        request: Request,
        policy_names: str,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Delete one or more comma-separated policies. Missing policies are ignored."""

        async def delete(name: str) -> None:
            try:
                await caller("DELETE", f"/_ilm/policy/{encode_name(name)}")
            except Exception as e:
                if not is_not_found(e):
                    raise

        names = [name for name in policy_names.split(",") if name]
        try:
            await asyncio.gather(*(delete(name) for name in names))
            return {}
        except Exception as e:
            raise_for_error(e, deps.lib)
