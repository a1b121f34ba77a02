"""License gating for Index Lifecycle Management."""
from .license import License, LicenseDependencies, LicenseDescriptor, LicenseStatus
from .licensing import (
    ClusterLicense,
    LicenseCheck,
    LicenseCheckState,
    LicenseType,
    LicensingService,
)

__all__ = [
    "License",
    "LicenseDependencies",
    "LicenseDescriptor",
    "LicenseStatus",
    "ClusterLicense",
    "LicenseCheck",
    "LicenseCheckState",
    "LicenseType",
    "LicensingService",
]
