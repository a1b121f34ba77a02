"""License gate for the plugin's API routes."""
import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import LicenseInsufficientError
from .licensing import ClusterLicense, LicenseCheckState, LicenseType, LicensingService


@dataclass
class LicenseDescriptor:
    """Identifies the plugin and the license tier it requires."""
    plugin_id: str
    minimum_license_type: LicenseType
    default_error_message: str


@dataclass
class LicenseDependencies:
    licensing: LicensingService
    logger: logging.Logger


@dataclass
class LicenseStatus:
    """Outcome of the latest license check."""
    is_valid: bool
    message: Optional[str] = None


class License:
    """
    Gates API routes on the cluster license.

    The gate subscribes to the licensing service during ``setup`` and
    re-checks the license each time it changes. Route handlers consult the
    latest status through ``ensure_valid`` or the ``guard_api_route``
    dependency.
    """

    def __init__(self):
        self._status = LicenseStatus(is_valid=False, message="Invalid License")
        self._descriptor: Optional[LicenseDescriptor] = None
        self._logger: Optional[logging.Logger] = None

    def setup(self, descriptor: LicenseDescriptor, dependencies: LicenseDependencies) -> None:
        """
        Start tracking the license for a plugin.

        Args:
            descriptor: Plugin id, minimum license tier and default error message
            dependencies: Licensing service and logger
        """
        self._descriptor = descriptor
        self._logger = dependencies.logger
        dependencies.licensing.subscribe(self._on_license)

    def _on_license(self, license: ClusterLicense) -> None:
        descriptor = self._descriptor
        check = license.check(descriptor.plugin_id, descriptor.minimum_license_type)

        if check.state == LicenseCheckState.VALID:
            self._status = LicenseStatus(is_valid=True)
            return

        self._status = LicenseStatus(
            is_valid=False,
            message=check.message or descriptor.default_error_message,
        )
        if check.message:
            self._logger.info(check.message)

    def get_status(self) -> LicenseStatus:
        return self._status

    def ensure_valid(self, message: Optional[str] = None) -> None:
        """
        Raise if the current license does not allow the plugin.

        Args:
            message: Error message overriding the license check message

        Raises:
            LicenseInsufficientError: If the license is not valid
        """
        status = self._status
        if status.is_valid:
            return

        default_message = self._descriptor.default_error_message if self._descriptor else ""
        raise LicenseInsufficientError(message or status.message or default_message)

    async def guard_api_route(self) -> None:
        """FastAPI dependency rejecting requests without a valid license."""
        self.ensure_valid()
