import os
import ssl
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any, Dict, Optional

from httpx import Limits

from .constants import (
    APPLICATION_JSON,
    ENV_REQUESTS_CA_BUNDLE,
    ENV_SSL_CERT_DIR,
    ENV_SSL_CERT_FILE,
    HEADER_ACCEPT,
    HEADER_USER_AGENT,
)

if TYPE_CHECKING:
    from .._config import Config


def expand_path(path: Optional[str]) -> Optional[str]:
    """Resolve ``$VARS`` and ``~`` in a certificate path taken from the environment."""
    if not path:
        return path
    return os.path.expanduser(os.path.expandvars(path))


def create_ssl_context() -> ssl.SSLContext:
    """SSL context used by the pooled clients when verification is enabled.

    The operating system trust store is used through ``truststore``. Without
    it, CA locations come from ``SSL_CERT_FILE``, ``REQUESTS_CA_BUNDLE`` or
    ``SSL_CERT_DIR``, with certifi's bundle as the last resort.
    """
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        import certifi

        cafile = expand_path(os.environ.get(ENV_SSL_CERT_FILE)) or expand_path(
            os.environ.get(ENV_REQUESTS_CA_BUNDLE)
        )
        return ssl.create_default_context(
            cafile=cafile or certifi.where(),
            capath=expand_path(os.environ.get(ENV_SSL_CERT_DIR)),
        )


def user_agent_value() -> str:
    try:
        package_version = version("apphttp")
    except PackageNotFoundError:
        package_version = "0.0.0"
    return f"apphttp/{package_version}"


def get_httpx_client_kwargs(config: Optional["Config"] = None) -> Dict[str, Any]:
    """Keyword arguments shared by the sync and async httpx clients.

    Covers SSL verification, timeout, redirects, connection pool limits, the
    optional base URL and the default headers.
    """
    if config is None:
        from .._config import Config

        config = Config()

    client_kwargs: Dict[str, Any] = {
        "follow_redirects": config.follow_redirects,
        "timeout": config.timeout,
        "limits": Limits(
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_keepalive_connections,
        ),
        "verify": create_ssl_context() if config.verify_ssl else False,
        "headers": {
            HEADER_ACCEPT: APPLICATION_JSON,
            HEADER_USER_AGENT: user_agent_value(),
            **config.default_headers,
        },
    }
    if config.base_url:
        client_kwargs["base_url"] = config.base_url

    return client_kwargs
