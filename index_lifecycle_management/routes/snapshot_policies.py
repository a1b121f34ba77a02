"""Snapshot lifecycle policy routes."""
from fastapi import Depends, Request

from ..constants import API_BASE_PATH
from ..core.cluster import ScopedClusterClient
from ..core.rate_limit import limiter
from ..types import RouteDependencies
from .dependencies import get_cluster_caller, is_not_found, raise_for_error


def register_snapshot_policies_routes(deps: RouteDependencies) -> None:
    guard = [Depends(deps.license.guard_api_route)]

    @deps.router.get(f"{API_BASE_PATH}/snapshot_policies", dependencies=guard)
    @limiter.limit("100/minute")
    async def list_snapshot_policies(
        request: Request,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """List snapshot policy names, used by the wait-for-snapshot action."""
        try:
            policies = await caller("GET", "/_slm/policy")
            return list(policies)
        except Exception as e:
            if is_not_found(e):
                return []
            raise_for_error(e, deps.lib)
