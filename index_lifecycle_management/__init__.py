"""Index Lifecycle Management server plugin."""
from .enricher import index_lifecycle_data_enricher
from .errors import (
    ConfigResolutionError,
    LicenseInsufficientError,
    RemoteFetchError,
    is_es_error,
)
from .plugin import IndexLifecycleManagementServerPlugin

__version__ = "1.0.0"

__all__ = [
    "index_lifecycle_data_enricher",
    "ConfigResolutionError",
    "LicenseInsufficientError",
    "RemoteFetchError",
    "is_es_error",
    "IndexLifecycleManagementServerPlugin",
]
