"""Errors raised by the Index Lifecycle Management plugin."""
from typing import Any, Optional


class RemoteFetchError(Exception):
    """Raised when a request to the cluster fails.

    ``status_code`` is set when the cluster answered with an error response
    and is ``None`` when the request never got an answer (connection error,
    timeout).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class LicenseInsufficientError(Exception):
    """Raised when the current license does not allow the requested action."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigResolutionError(Exception):
    """Raised when the configuration stream fails or closes before emitting."""
    pass


def is_es_error(error: BaseException) -> bool:
    """Check if an error is an error response returned by the cluster."""
    return isinstance(error, RemoteFetchError) and error.status_code is not None
