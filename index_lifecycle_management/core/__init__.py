"""Host services used by the plugin: cluster access, HTTP, features and index listing."""
from .cluster import ClusterCaller, ClusterClient, ScopedClusterClient
from .context import CoreSetup, HttpServiceSetup, LoggerFactory, PluginInitializerContext
from .features import ElasticsearchFeature, FeaturePrivilege, FeatureRegistry
from .index_management import IndexDataEnricher, IndexManagementSetup, fetch_indices

__all__ = [
    "ClusterCaller",
    "ClusterClient",
    "ScopedClusterClient",
    "CoreSetup",
    "HttpServiceSetup",
    "LoggerFactory",
    "PluginInitializerContext",
    "ElasticsearchFeature",
    "FeaturePrivilege",
    "FeatureRegistry",
    "IndexDataEnricher",
    "IndexManagementSetup",
    "fetch_indices",
]
