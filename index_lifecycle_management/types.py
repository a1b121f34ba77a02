"""Dependency bundles passed between the plugin and its routes."""
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import APIRouter

from .config import IndexLifecycleManagementConfig
from .core.features import FeatureRegistry
from .core.index_management import IndexManagementSetup
from .license import License, LicensingService


@dataclass
class Dependencies:
    """Setup contracts of the plugins this plugin depends on."""
    licensing: LicensingService
    features: FeatureRegistry
    index_management: Optional[IndexManagementSetup] = None


@dataclass
class RouteLib:
    is_es_error: Callable[[BaseException], bool]


@dataclass
class RouteDependencies:
    router: APIRouter
    config: IndexLifecycleManagementConfig
    license: License
    lib: RouteLib
