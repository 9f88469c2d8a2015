import threading
from logging import getLogger
from typing import Any, Optional, Protocol, runtime_checkable

from httpx import AsyncClient, Client

from .._config import Config
from .._utils._ssl_context import get_httpx_client_kwargs


@runtime_checkable
class ClientProvider(Protocol):
    """Supplies ready-to-use, pooled httpx clients.

    Implementations must be safe to call concurrently and should hand out the
    same pooled client to every caller.
    """

    def get_client(self) -> Client: ...

    def get_async_client(self) -> AsyncClient: ...


class HttpClientProvider:
    """Default ``ClientProvider`` holding one sync and one async httpx client.

    Clients are created lazily on first use and recreated if they were closed.
    Extra keyword arguments (for example ``transport``) are passed through to
    both clients and override the configured defaults.
    """

    def __init__(self, config: Optional[Config] = None, **client_kwargs: Any) -> None:
        self._logger = getLogger("apphttp")
        self._config = config or Config.from_env()
        self._client_kwargs = {
            **get_httpx_client_kwargs(self._config),
            **client_kwargs,
        }
        self._lock = threading.Lock()
        self._client: Optional[Client] = None
        self._client_async: Optional[AsyncClient] = None

    @property
    def config(self) -> Config:
        return self._config

    def get_client(self) -> Client:
        with self._lock:
            if self._client is None or self._client.is_closed:
                self._logger.debug("Creating pooled HTTP client")
                self._client = Client(**self._client_kwargs)
            return self._client

    def get_async_client(self) -> AsyncClient:
        with self._lock:
            if self._client_async is None or self._client_async.is_closed:
                self._logger.debug("Creating pooled async HTTP client")
                self._client_async = AsyncClient(**self._client_kwargs)
            return self._client_async

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()

    async def aclose(self) -> None:
        with self._lock:
            client_async, self._client_async = self._client_async, None
        if client_async is not None:
            await client_async.aclose()
        self.close()
