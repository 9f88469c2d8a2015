import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure local source package (src/apphttp) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from apphttp import AppHttpClient, Config  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    for name in (
        "APPHTTP_URL",
        "APPHTTP_ACCESS_TOKEN",
        "APPHTTP_TIMEOUT",
        "APPHTTP_MAX_CONNECTIONS",
        "APPHTTP_DISABLE_SSL_VERIFY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def base_url() -> str:
    return "https://test.example.com"


@pytest.fixture
def secret() -> str:
    return "secret"


@pytest.fixture
def config(base_url: str, secret: str) -> Config:
    return Config(base_url=base_url, access_token=secret, verify_ssl=False)


@pytest.fixture
def client(config: Config) -> Generator[AppHttpClient, None, None]:
    app_client = AppHttpClient(config=config)
    yield app_client
    app_client.close()
