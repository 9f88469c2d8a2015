from ._transport_provider import ClientProvider, HttpClientProvider
from .app_http_client import AppHttpClient

__all__ = ["AppHttpClient", "ClientProvider", "HttpClientProvider"]
