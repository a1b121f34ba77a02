"""Tests for plugin setup."""
import pytest
from unittest.mock import MagicMock

from fastapi import FastAPI

from index_lifecycle_management.config import (
    ConfigService,
    IndexLifecycleManagementConfig,
    UIConfig,
)
from index_lifecycle_management.core.context import (
    CoreSetup,
    HttpServiceSetup,
    LoggerFactory,
    PluginInitializerContext,
)
from index_lifecycle_management.core.features import FeatureRegistry
from index_lifecycle_management.core.index_management import (
    IndexDataEnricher,
    IndexManagementSetup,
)
from index_lifecycle_management.enricher import index_lifecycle_data_enricher
from index_lifecycle_management.errors import ConfigResolutionError
from index_lifecycle_management.plugin import IndexLifecycleManagementServerPlugin
from index_lifecycle_management.types import Dependencies


def make_plugin(config=None, loader=None) -> IndexLifecycleManagementServerPlugin:
    if loader is None:
        config = config or IndexLifecycleManagementConfig()
        loader = lambda: config  # noqa: E731
    return IndexLifecycleManagementServerPlugin(
        PluginInitializerContext(
            logger=LoggerFactory("plugins.index_lifecycle_management"),
            config=ConfigService(loader=loader),
        )
    )


def make_core() -> CoreSetup:
    return CoreSetup(http=HttpServiceSetup(FastAPI()))


def make_dependencies(index_management=None) -> Dependencies:
    return Dependencies(
        licensing=MagicMock(),
        features=FeatureRegistry(),
        index_management=index_management,
    )


class TestPluginSetup:
    """Tests for IndexLifecycleManagementServerPlugin.setup."""

    @pytest.mark.asyncio
    async def test_registers_enricher_when_ui_enabled(self):
        index_management = IndexManagementSetup()
        plugin = make_plugin(IndexLifecycleManagementConfig(ui=UIConfig(enabled=True)))

        await plugin.setup(make_core(), make_dependencies(index_management))

        assert index_management.index_data_enricher.enrichers == [index_lifecycle_data_enricher]

    @pytest.mark.asyncio
    async def test_skips_enricher_when_ui_disabled(self):
        index_management = IndexManagementSetup()
        plugin = make_plugin(IndexLifecycleManagementConfig(ui=UIConfig(enabled=False)))

        await plugin.setup(make_core(), make_dependencies(index_management))

        assert index_management.index_data_enricher.enrichers == []

    @pytest.mark.asyncio
    async def test_skips_enricher_without_index_management(self):
        plugin = make_plugin()

        # Must not raise
        await plugin.setup(make_core(), make_dependencies(None))

    @pytest.mark.asyncio
    async def test_skips_enricher_without_extension_point(self):
        plugin = make_plugin()

        await plugin.setup(
            make_core(),
            make_dependencies(IndexManagementSetup(index_data_enricher=None)),
        )

    @pytest.mark.asyncio
    async def test_registers_feature(self):
        dependencies = make_dependencies()
        plugin = make_plugin()

        await plugin.setup(make_core(), dependencies)

        features = dependencies.features.get_elasticsearch_features()
        assert len(features) == 1
        feature = features[0]
        assert feature.id == "index_lifecycle_management"
        assert feature.management == {"data": ["index_lifecycle_management"]}
        assert feature.privileges[0].required_cluster_privileges == ["manage_ilm"]
        assert feature.privileges[0].ui == []

    @pytest.mark.asyncio
    async def test_sets_up_license_gate(self):
        dependencies = make_dependencies()
        plugin = make_plugin()

        await plugin.setup(make_core(), dependencies)

        dependencies.licensing.subscribe.assert_called_once()
        assert plugin.license.get_status().is_valid is False

    @pytest.mark.asyncio
    async def test_registers_routes(self):
        core = make_core()
        plugin = make_plugin()

        await plugin.setup(core, make_dependencies())
        router = core.http._routers[0]

        paths = {route.path for route in router.routes}
        assert "/api/index_lifecycle_management/policies" in paths
        assert "/api/index_lifecycle_management/nodes/list" in paths
        assert "/api/index_lifecycle_management/index/add" in paths
        assert "/api/index_lifecycle_management/templates" in paths
        assert "/api/index_lifecycle_management/snapshot_policies" in paths

    @pytest.mark.asyncio
    async def test_config_failure_aborts_setup(self):
        def broken_loader():
            raise ValueError("bad config")

        dependencies = make_dependencies()
        plugin = make_plugin(loader=broken_loader)

        with pytest.raises(ConfigResolutionError):
            await plugin.setup(make_core(), dependencies)

        dependencies.licensing.subscribe.assert_not_called()
        assert dependencies.features.get_elasticsearch_features() == []

    @pytest.mark.asyncio
    async def test_enricher_registration_error_propagates(self):
        enricher = MagicMock(spec=IndexDataEnricher)
        enricher.add.side_effect = RuntimeError("registry closed")
        plugin = make_plugin()

        with pytest.raises(RuntimeError, match="registry closed"):
            await plugin.setup(
                make_core(),
                make_dependencies(IndexManagementSetup(index_data_enricher=enricher)),
            )

    def test_start_and_stop_are_noops(self):
        plugin = make_plugin()
        assert plugin.start() is None
        assert plugin.stop() is None
