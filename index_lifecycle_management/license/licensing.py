"""Cluster license tracking.

The licensing service polls the cluster's ``/_license`` endpoint and
notifies subscribers whenever the license changes. Plugins check the
current license against their minimum tier with ``ClusterLicense.check``.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from ..errors import RemoteFetchError

logger = logging.getLogger(__name__)


class LicenseType(str, Enum):
    """Subscription levels, lowest first."""
    BASIC = "basic"
    STANDARD = "standard"
    GOLD = "gold"
    PLATINUM = "platinum"
    ENTERPRISE = "enterprise"
    TRIAL = "trial"

    @property
    def level(self) -> int:
        return _LICENSE_LEVELS[self]


_LICENSE_LEVELS = {
    LicenseType.BASIC: 10,
    LicenseType.STANDARD: 20,
    LicenseType.GOLD: 30,
    LicenseType.PLATINUM: 40,
    LicenseType.ENTERPRISE: 50,
    LicenseType.TRIAL: 60,
}


class LicenseCheckState(str, Enum):
    """Result of checking a license against a minimum tier."""
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"
    UNAVAILABLE = "unavailable"


@dataclass
class LicenseCheck:
    state: LicenseCheckState
    message: Optional[str] = None


@dataclass
class ClusterLicense:
    """License information reported by the cluster."""
    type: Optional[LicenseType] = None
    status: Optional[str] = None
    uid: Optional[str] = None
    expiry_date_in_millis: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.type is not None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @classmethod
    def from_api_response(cls, data: Any) -> "ClusterLicense":
        """Create ClusterLicense from a ``GET /_license`` response."""
        info = data.get("license") if isinstance(data, dict) else None
        if not isinstance(info, dict):
            return cls(error="License response has no license object")

        try:
            license_type = LicenseType(info.get("type", ""))
        except ValueError:
            return cls(error=f"Unknown license type: {info.get('type')}")

        return cls(
            type=license_type,
            status=info.get("status"),
            uid=info.get("uid"),
            expiry_date_in_millis=info.get("expiry_date_in_millis"),
        )

    def check(self, plugin_id: str, minimum_license_type: LicenseType) -> LicenseCheck:
        """
        Check if this license allows a plugin to run.

        Args:
            plugin_id: Plugin identifier used in the error messages
            minimum_license_type: Lowest license tier the plugin accepts

        Returns:
            LicenseCheck with the resulting state and a message when not valid
        """
        if not self.is_available:
            return LicenseCheck(
                state=LicenseCheckState.UNAVAILABLE,
                message=(
                    f"You cannot use {plugin_id} because license information "
                    "is not available at this time."
                ),
            )

        if not self.is_active:
            return LicenseCheck(
                state=LicenseCheckState.EXPIRED,
                message=(
                    f"You cannot use {plugin_id} because your {self.type.value} "
                    "license has expired."
                ),
            )

        if self.type.level < minimum_license_type.level:
            return LicenseCheck(
                state=LicenseCheckState.INVALID,
                message=(
                    f"Your {self.type.value} license does not support {plugin_id}. "
                    "Please upgrade your license."
                ),
            )

        return LicenseCheck(state=LicenseCheckState.VALID)


LicenseListener = Callable[[ClusterLicense], None]


class LicensingService:
    """
    Tracks the cluster license.

    Usage:
        licensing = LicensingService(cluster_client)
        licensing.subscribe(on_license)
        await licensing.start()
        ...
        await licensing.stop()
    """

    def __init__(self, client: Any, refresh_interval: float = 30.0):
        """
        Args:
            client: ClusterClient used to fetch the license
            refresh_interval: Seconds between refreshes once started
        """
        self._client = client
        self._refresh_interval = refresh_interval
        self._license: Optional[ClusterLicense] = None
        self._listeners: List[LicenseListener] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def license(self) -> Optional[ClusterLicense]:
        """Latest license, or None before the first refresh."""
        return self._license

    def subscribe(self, listener: LicenseListener) -> None:
        """
        Register a listener for license changes.

        The listener is called immediately if a license is already known.
        """
        self._listeners.append(listener)
        if self._license is not None:
            listener(self._license)

    async def refresh(self) -> ClusterLicense:
        """Fetch the license from the cluster and notify listeners on change."""
        try:
            data = await self._client.request("GET", "/_license")
            license = ClusterLicense.from_api_response(data)
        except RemoteFetchError as e:
            logger.warning(f"Unable to fetch cluster license: {e}")
            license = ClusterLicense(error=str(e))

        if license != self._license:
            self._license = license
            for listener in self._listeners:
                listener(license)

        return license

    async def start(self) -> None:
        """Fetch the license and keep refreshing it in the background."""
        await self.refresh()
        if self._task is None:
            self._task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval)
            try:
                await self.refresh()
            except Exception as e:
                logger.error(f"Error refreshing cluster license: {e}")
