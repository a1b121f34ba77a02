"""Configuration settings for the Index Lifecycle Management plugin."""
from typing import AsyncIterable, AsyncIterator, Callable, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .errors import ConfigResolutionError

T = TypeVar("T")


class UIConfig(BaseModel):
    """Settings for the management UI."""
    enabled: bool = True


class IndexLifecycleManagementConfig(BaseSettings):
    """Plugin settings loaded from environment.

    Nested values use a double underscore, e.g. ``ILM_UI__ENABLED=false``.
    """

    enabled: bool = True
    ui: UIConfig = Field(default_factory=UIConfig)

    # Node attributes hidden from the node allocation list
    filtered_node_attributes: list[str] = Field(default_factory=list)

    class Config:
        env_prefix = "ILM_"
        env_nested_delimiter = "__"
        env_file = ".env"
        extra = "ignore"


class ClusterSettings(BaseSettings):
    """Connection settings for the backing search cluster."""

    url: str = "http://localhost:9200"
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 30.0

    # Seconds between license refreshes
    license_refresh_interval: float = 30.0

    class Config:
        env_prefix = "ILM_CLUSTER_"
        env_file = ".env"
        extra = "ignore"


class ServerSettings(BaseSettings):
    """API server settings."""

    host: str = "127.0.0.1"
    port: int = 5601

    class Config:
        env_prefix = "ILM_API_"
        env_file = ".env"
        extra = "ignore"


class ConfigService:
    """
    Supplies configuration snapshots to the plugin.

    ``create()`` returns an async stream of snapshots. Settings are read
    lazily so that validation errors surface through the stream.

    Usage:
        service = ConfigService()
        config = await resolve_config(service.create())
    """

    def __init__(
        self,
        loader: Callable[[], IndexLifecycleManagementConfig] = IndexLifecycleManagementConfig,
    ):
        self._loader = loader

    def create(self) -> AsyncIterator[IndexLifecycleManagementConfig]:
        """Return a stream of configuration snapshots."""
        return self._stream()

    async def _stream(self) -> AsyncIterator[IndexLifecycleManagementConfig]:
        yield self._loader()


async def resolve_config(stream: AsyncIterable[T]) -> T:
    """
    Resolve the first value of a configuration stream.

    Args:
        stream: Async iterable of configuration snapshots

    Returns:
        The first snapshot emitted

    Raises:
        ConfigResolutionError: If the stream fails or closes without a value
    """
    iterator = stream.__aiter__()
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        raise ConfigResolutionError(
            "Configuration stream closed before emitting a value"
        ) from None
    except Exception as e:
        raise ConfigResolutionError(f"Failed to resolve configuration: {e}") from e
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()
