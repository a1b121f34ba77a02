"""Node attribute routes used to build shard allocation rules."""
from fastapi import Depends, Request

from ..constants import API_BASE_PATH
from ..core.cluster import ScopedClusterClient
from ..core.rate_limit import limiter
from ..types import RouteDependencies
from .dependencies import get_cluster_caller, raise_for_error

# Attributes set by the cluster itself, never useful for allocation
NODE_ATTRS_KEYS_TO_IGNORE = [
    "ml.enabled",
    "ml.machine_memory",
    "ml.max_open_jobs",
    "testattr",
    "transform.node",
    "xpack.installed",
]


def convert_stats_into_list(stats: dict, disallowed_node_attributes: list[str]) -> dict[str, list[str]]:
    """
    Group node ids by ``attribute:value``.

    Args:
        stats: ``_nodes/stats`` response
        disallowed_node_attributes: Attribute keys to leave out

    Returns:
        Mapping of "attr:value" to the ids of the nodes carrying it
    """
    nodes_by_attribute: dict[str, list[str]] = {}
    for node_id, node_stats in (stats.get("nodes") or {}).items():
        for key, value in (node_stats.get("attributes") or {}).items():
            if key in disallowed_node_attributes:
                continue
            nodes_by_attribute.setdefault(f"{key}:{value}", []).append(node_id)
    return nodes_by_attribute


def find_matching_nodes(stats: dict, node_attrs: str) -> list[dict]:
    """Return the nodes carrying the given ``attr:value`` pair."""
    matching = []
    for node_id, node_stats in (stats.get("nodes") or {}).items():
        attributes = node_stats.get("attributes") or {}
        if any(f"{key}:{value}" == node_attrs for key, value in attributes.items()):
            matching.append({"nodeId": node_id, "stats": node_stats})
    return matching


def register_nodes_routes(deps: RouteDependencies) -> None:
    router = deps.router
    guard = [Depends(deps.license.guard_api_route)]
    disallowed_node_attributes = NODE_ATTRS_KEYS_TO_IGNORE + list(deps.config.filtered_node_attributes)

    @router.get(f"{API_BASE_PATH}/nodes/list", dependencies=guard)
    @limiter.limit("100/minute")
    async def list_nodes(
        request: Request,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """List node attributes and the nodes that carry them."""
        try:
            stats = await caller("GET", "/_nodes/stats")
            return convert_stats_into_list(stats, disallowed_node_attributes)
        except Exception as e:
            raise_for_error(e, deps.lib)

    @router.get(f"{API_BASE_PATH}/nodes/{{node_attrs}}/details", dependencies=guard)
    @limiter.limit("100/minute")
    async def node_details(
        request: Request,
        node_attrs: str,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """Get stats for the nodes matching an ``attr:value`` pair."""
        try:
            stats = await caller("GET", "/_nodes/stats")
            return find_matching_nodes(stats, node_attrs)
        except Exception as e:
            raise_for_error(e, deps.lib)
