"""FastAPI application hosting the Index Lifecycle Management plugin."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import ClusterSettings, ConfigService, ServerSettings
from .constants import PLUGIN
from .core.cluster import ClusterClient, ScopedClusterClient
from .core.context import CoreSetup, HttpServiceSetup, LoggerFactory, PluginInitializerContext
from .core.features import FeatureRegistry
from .core.index_management import IndexManagementSetup, fetch_indices
from .core.rate_limit import limiter
from .errors import LicenseInsufficientError, RemoteFetchError
from .license import LicensingService
from .plugin import IndexLifecycleManagementServerPlugin
from .routes.dependencies import get_cluster_caller
from .types import Dependencies

logger = logging.getLogger(__name__)


async def license_error_handler(request: Request, exc: LicenseInsufficientError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"message": exc.message})


async def remote_fetch_error_handler(request: Request, exc: RemoteFetchError) -> JSONResponse:
    # No status code means the cluster never answered
    status_code = exc.status_code or 502
    return JSONResponse(
        status_code=status_code,
        content={"message": str(exc), "body": exc.body},
    )


def create_app(
    config_service: Optional[ConfigService] = None,
    cluster_settings: Optional[ClusterSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application and its host services.

    The plugin is set up when the application starts.

    Args:
        config_service: Plugin configuration source (defaults to environment)
        cluster_settings: Cluster connection settings (defaults to environment)
        transport: httpx transport for the cluster client (for testing)

    Returns:
        Configured FastAPI application
    """
    cluster_settings = cluster_settings or ClusterSettings()
    auth = None
    if cluster_settings.username and cluster_settings.password:
        auth = (cluster_settings.username, cluster_settings.password)

    cluster_client = ClusterClient(
        cluster_settings.url,
        auth=auth,
        timeout=cluster_settings.timeout,
        transport=transport,
    )
    licensing = LicensingService(
        cluster_client,
        refresh_interval=cluster_settings.license_refresh_interval,
    )
    features = FeatureRegistry()
    index_management = IndexManagementSetup()

    plugin = IndexLifecycleManagementServerPlugin(
        PluginInitializerContext(
            logger=LoggerFactory(f"plugins.{PLUGIN.ID}"),
            config=config_service or ConfigService(),
        )
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Set up the plugin on startup."""
        core = CoreSetup(http=HttpServiceSetup(app))
        await licensing.start()
        try:
            await plugin.setup(
                core,
                Dependencies(
                    licensing=licensing,
                    features=features,
                    index_management=index_management,
                ),
            )
            core.http.mount_routers()
            plugin.start()
            logger.info("Index Lifecycle Management plugin initialized")
            yield
            plugin.stop()
        finally:
            logger.info("Index Lifecycle Management shutting down")
            await licensing.stop()
            await cluster_client.close()

    app = FastAPI(
        title="Index Lifecycle Management API",
        description="Manage index lifecycle policies on a search cluster",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.state.cluster_client = cluster_client
    app.state.licensing = licensing
    app.state.features = features
    app.state.index_management = index_management
    app.state.plugin = plugin

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(LicenseInsufficientError, license_error_handler)
    app.add_exception_handler(RemoteFetchError, remote_fetch_error_handler)

    @app.get("/health")
    @limiter.limit("300/minute")
    async def health_check(request: Request):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "index-lifecycle-management",
            "version": "1.0.0",
        }

    @app.get("/api/index_management/indices")
    @limiter.limit("100/minute")
    async def list_indices(
        request: Request,
        caller: ScopedClusterClient = Depends(get_cluster_caller),
    ):
        """List indices, decorated by every registered enricher."""
        return await fetch_indices(caller, index_management.index_data_enricher)

    return app


def main() -> None:
    """Run the API server."""
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    settings = ServerSettings()
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


# Run with: python -m index_lifecycle_management.server
if __name__ == "__main__":
    main()
