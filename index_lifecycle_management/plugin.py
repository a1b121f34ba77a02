"""Index Lifecycle Management server plugin."""
import logging

from .config import IndexLifecycleManagementConfig, resolve_config
from .constants import LICENSE_CHECK_ERROR_MESSAGE, PLUGIN
from .core.context import CoreSetup, PluginInitializerContext
from .enricher import index_lifecycle_data_enricher
from .errors import is_es_error
from .license import License, LicenseDependencies, LicenseDescriptor
from .routes import register_api_routes
from .types import Dependencies, RouteDependencies, RouteLib

ILM_FEATURE = {
    "id": "index_lifecycle_management",
    "management": {
        "data": ["index_lifecycle_management"],
    },
    "privileges": [
        {
            "requiredClusterPrivileges": ["manage_ilm"],
            "ui": [],
        },
    ],
}


class IndexLifecycleManagementServerPlugin:
    """
    Wires the plugin into the host at startup.

    Setup resolves the configuration, starts the license gate, registers
    the ILM feature and API routes and, when the UI is enabled, adds the
    lifecycle data enricher to the index listing.
    """

    def __init__(self, initializer_context: PluginInitializerContext):
        self.logger: logging.Logger = initializer_context.logger.get()
        self.config_stream = initializer_context.config.create()
        self.license = License()

    async def setup(self, core: CoreSetup, dependencies: Dependencies) -> None:
        router = core.http.create_router()
        config: IndexLifecycleManagementConfig = await resolve_config(self.config_stream)

        self.license.setup(
            LicenseDescriptor(
                plugin_id=PLUGIN.ID,
                minimum_license_type=PLUGIN.minimum_license_type,
                default_error_message=LICENSE_CHECK_ERROR_MESSAGE,
            ),
            LicenseDependencies(
                licensing=dependencies.licensing,
                logger=self.logger,
            ),
        )

        dependencies.features.register_elasticsearch_feature(ILM_FEATURE)

        register_api_routes(
            RouteDependencies(
                router=router,
                config=config,
                license=self.license,
                lib=RouteLib(is_es_error=is_es_error),
            )
        )

        if config.ui.enabled:
            index_management = dependencies.index_management
            if index_management and index_management.index_data_enricher:
                index_management.index_data_enricher.add(index_lifecycle_data_enricher)
                self.logger.debug("Registered index lifecycle data enricher")

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass
