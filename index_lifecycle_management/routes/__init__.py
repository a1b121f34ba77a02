"""HTTP API routes for Index Lifecycle Management."""
from ..types import RouteDependencies
from .index import register_index_routes
from .nodes import register_nodes_routes
from .policies import register_policies_routes
from .snapshot_policies import register_snapshot_policies_routes
from .templates import register_templates_routes


def register_api_routes(deps: RouteDependencies) -> None:
    """Register every API route on the router in ``deps``."""
    register_index_routes(deps)
    register_nodes_routes(deps)
    register_policies_routes(deps)
    register_snapshot_policies_routes(deps)
    register_templates_routes(deps)


__all__ = ["register_api_routes"]
