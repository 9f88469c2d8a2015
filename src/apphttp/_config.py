import os
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ._utils.constants import (
    ENV_ACCESS_TOKEN,
    ENV_BASE_URL,
    ENV_DISABLE_SSL_VERIFY,
    ENV_MAX_CONNECTIONS,
    ENV_TIMEOUT,
)


class Config(BaseModel):
    """Settings shared by every client created from the same provider."""

    base_url: Optional[str] = None
    access_token: Optional[str] = None
    timeout: float = 30.0
    follow_redirects: bool = True
    max_connections: int = 100
    max_keepalive_connections: int = 20
    verify_ssl: bool = True
    default_headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build a config from ``APPHTTP_*`` environment variables.

        Keyword arguments take precedence over the environment.
        """
        values = {
            "base_url": os.getenv(ENV_BASE_URL) or None,
            "access_token": os.getenv(ENV_ACCESS_TOKEN) or None,
            "verify_ssl": os.getenv(ENV_DISABLE_SSL_VERIFY, "false").lower()
            not in ("1", "true", "yes"),
        }
        timeout = os.getenv(ENV_TIMEOUT)
        if timeout:
            values["timeout"] = float(timeout)
        max_connections = os.getenv(ENV_MAX_CONNECTIONS)
        if max_connections:
            values["max_connections"] = int(max_connections)

        values.update(overrides)
        return cls(**values)
