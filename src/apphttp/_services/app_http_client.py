import asyncio
import codecs
from dataclasses import replace
from logging import getLogger
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from httpx import URL, AsyncClient, Client, Request, Response

from .._config import Config
from .._utils._curl import render_curl
from .._utils._errors import failure_from_exception, translate_transport_errors
from .._utils._json import deserialize
from .._utils._request_spec import HeaderTypes, RequestSpec
from .._utils._request_spec import build_request as _build_request
from .._utils.constants import (
    APPLICATION_JSON,
    DEFAULT_CHARSET,
    FORM_URLENCODED,
    MULTIPART_FORM_DATA,
)
from ..models.errors import Cancelled, DeserializationError, TransportException
from ..models.result import Result
from ._transport_provider import ClientProvider, HttpClientProvider

ClientT = TypeVar("ClientT", Client, AsyncClient)

REQUEST_ERROR = "Request error"
FORM_ERROR = "FormUrlEncoded error"
MULTIPART_ERROR = "Multipart error"


def response_encoding(response: Response) -> str:
    """Charset declared by the response, falling back to UTF-8."""
    charset = response.charset_encoding
    if not charset:
        return DEFAULT_CHARSET
    try:
        codec = codecs.lookup(charset)
    except LookupError:
        return DEFAULT_CHARSET
    # base64, hex, zlib and friends are bytes-to-bytes codecs
    if not getattr(codec, "_is_text_encoding", True):
        return DEFAULT_CHARSET
    return codec.name


def resolve_url(base_url: str, url: str) -> URL:
    """Merge a relative ``url`` onto ``base_url`` like ``httpx.Client`` does."""
    target = URL(url)
    if not target.is_relative_url:
        return target
    base = URL(base_url)
    base_path = base.raw_path if base.raw_path.endswith(b"/") else base.raw_path + b"/"
    return base.copy_with(raw_path=base_path + target.raw_path.lstrip(b"/"))


def read_text(response: Response) -> str:
    return response.content.decode(response_encoding(response), errors="replace")


async def _send_cancellable(
    client: AsyncClient, request: Request, cancel_event: asyncio.Event
) -> Response:
    if cancel_event.is_set():
        raise Cancelled()

    send_task = asyncio.ensure_future(client.send(request))
    cancel_task = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait(
            {send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        cancel_task.cancel()
        if not send_task.done():
            send_task.cancel()
        await asyncio.gather(send_task, cancel_task, return_exceptions=True)

    if send_task.cancelled():
        raise Cancelled()
    return send_task.result()


class AppHttpClient:
    """Sends JSON, form and multipart requests and returns uniform ``Result`` objects.

    Every entry point has a synchronous and an asynchronous variant. Calls never
    raise for HTTP error statuses, network failures, encoding problems or
    cancellation: the outcome is always reported through the returned
    ``Result``. The response body is decoded as JSON into ``response_type``
    unless ``response_type`` is ``str``, in which case the raw text is returned.

    Examples:
        >>> client = AppHttpClient(Config(base_url="https://api.example.com"))
        >>> result = client.get("/products/1", Product)
        >>> if result.success:
        ...     print(result.payload.price)
        ... else:
        ...     print(result.status_code, result.message)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        provider: Optional[ClientProvider] = None,
    ) -> None:
        self._logger = getLogger("apphttp")
        self._config = config or Config.from_env()
        self._owns_provider = provider is None
        self._provider = provider or HttpClientProvider(self._config)

    def build_request(
        self,
        url: str,
        method: str,
        *,
        headers: Optional[HeaderTypes] = None,
        body: Any = None,
        content_type: str = APPLICATION_JSON,
        bearer_token: Optional[str] = None,
    ) -> RequestSpec:
        """Build a request, using the configured access token when none is given."""
        return _build_request(
            url,
            method,
            headers=headers,
            body=body,
            content_type=content_type,
            bearer_token=bearer_token or self._config.access_token,
        )

    def get_curl(self, request: Union[RequestSpec, Request]) -> str:
        """Render ``request`` as a curl command. See ``render_curl``.

        Relative request URLs are resolved against the configured base URL, the
        same way they are when the request is sent.
        """
        if isinstance(request, RequestSpec) and self._config.base_url:
            request = replace(request, url=str(resolve_url(self._config.base_url, request.url)))
        return render_curl(request)

    def get(
        self, url: str, response_type: Any = Any, *, headers: Optional[HeaderTypes] = None
    ) -> Result[Any]:
        return self._call(url, "GET", None, APPLICATION_JSON, response_type, headers, REQUEST_ERROR)

    def post(
        self,
        url: str,
        data: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
    ) -> Result[Any]:
        return self._call(url, "POST", data, APPLICATION_JSON, response_type, headers, REQUEST_ERROR)

    def put(
        self,
        url: str,
        data: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
    ) -> Result[Any]:
        return self._call(url, "PUT", data, APPLICATION_JSON, response_type, headers, REQUEST_ERROR)

    def patch(
        self,
        url: str,
        data: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
    ) -> Result[Any]:
        return self._call(url, "PATCH", data, APPLICATION_JSON, response_type, headers, REQUEST_ERROR)

    def delete(
        self,
        url: str,
        data: Any = None,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
    ) -> Result[Any]:
        return self._call(url, "DELETE", data, APPLICATION_JSON, response_type, headers, REQUEST_ERROR)

    def post_form(
        self,
        url: str,
        form_data: Mapping[str, str],
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
    ) -> Result[Any]:
        """POST ``form_data`` as ``application/x-www-form-urlencoded``.

        Keys and values must be strings; anything else yields a failed result.
        """
        return self._call(url, "POST", form_data, FORM_URLENCODED, response_type, headers, FORM_ERROR)

    def post_multipart(
        self,
        url: str,
        model: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
    ) -> Result[Any]:
        """POST ``model`` as ``multipart/form-data``.

        ``model`` is either a list of multipart fields (``TextField``,
        ``FileField``, ``FileListField``, ``TextListField``, ``MapField``) or a
        record whose attributes are classified into such fields, see
        ``multipart_fields``.
        """
        return self._call(url, "POST", model, MULTIPART_FORM_DATA, response_type, headers, MULTIPART_ERROR)

    def send(
        self,
        request: RequestSpec,
        response_type: Any = Any,
        *,
        error_prefix: str = REQUEST_ERROR,
    ) -> Result[Any]:
        """Send a request built with ``build_request``."""
        try:
            client = self._acquire(self._provider.get_client)
            with request.to_httpx(client) as http_request:
                self._log_request(http_request)
                with translate_transport_errors():
                    response = client.send(http_request)
            return self._to_result(response, response_type)
        except Exception as e:
            return self._failure(e, error_prefix)

    async def get_async(
        self,
        url: str,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        return await self._call_async(
            url, "GET", None, APPLICATION_JSON, response_type, headers, cancel_event, REQUEST_ERROR
        )

    async def post_async(
        self,
        url: str,
        data: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        return await self._call_async(
            url, "POST", data, APPLICATION_JSON, response_type, headers, cancel_event, REQUEST_ERROR
        )

    async def put_async(
        self,
        url: str,
        data: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        return await self._call_async(
            url, "PUT", data, APPLICATION_JSON, response_type, headers, cancel_event, REQUEST_ERROR
        )

    async def patch_async(
        self,
        url: str,
        data: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        return await self._call_async(
            url, "PATCH", data, APPLICATION_JSON, response_type, headers, cancel_event, REQUEST_ERROR
        )

    async def delete_async(
        self,
        url: str,
        data: Any = None,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        return await self._call_async(
            url, "DELETE", data, APPLICATION_JSON, response_type, headers, cancel_event, REQUEST_ERROR
        )

    async def post_form_async(
        self,
        url: str,
        form_data: Mapping[str, str],
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        """Asynchronously POST ``form_data`` as ``application/x-www-form-urlencoded``."""
        return await self._call_async(
            url, "POST", form_data, FORM_URLENCODED, response_type, headers, cancel_event, FORM_ERROR
        )

    async def post_multipart_async(
        self,
        url: str,
        model: Any,
        response_type: Any = Any,
        *,
        headers: Optional[HeaderTypes] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[Any]:
        """Asynchronously POST ``model`` as ``multipart/form-data``."""
        return await self._call_async(
            url, "POST", model, MULTIPART_FORM_DATA, response_type, headers, cancel_event, MULTIPART_ERROR
        )

    async def send_async(
        self,
        request: RequestSpec,
        response_type: Any = Any,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        error_prefix: str = REQUEST_ERROR,
    ) -> Result[Any]:
        """Asynchronously send a request built with ``build_request``.

        If ``cancel_event`` is set before the response arrives the in-flight
        request is abandoned and a failed result of kind ``CANCELLED`` is
        returned.
        """
        try:
            client = self._acquire(self._provider.get_async_client)
            with request.to_httpx(client) as http_request:
                self._log_request(http_request)
                with translate_transport_errors():
                    if cancel_event is None:
                        response = await client.send(http_request)
                    else:
                        response = await _send_cancellable(client, http_request, cancel_event)
            return self._to_result(response, response_type)
        except Exception as e:
            return self._failure(e, error_prefix)

    def close(self) -> None:
        if self._owns_provider and isinstance(self._provider, HttpClientProvider):
            self._provider.close()

    async def aclose(self) -> None:
        if self._owns_provider and isinstance(self._provider, HttpClientProvider):
            await self._provider.aclose()

    def __enter__(self) -> "AppHttpClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    async def __aenter__(self) -> "AppHttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _call(
        self,
        url: str,
        method: str,
        body: Any,
        content_type: str,
        response_type: Any,
        headers: Optional[HeaderTypes],
        error_prefix: str,
    ) -> Result[Any]:
        try:
            request = self.build_request(
                url, method, headers=headers, body=body, content_type=content_type
            )
        except Exception as e:
            return self._failure(e, error_prefix)
        return self.send(request, response_type, error_prefix=error_prefix)

    async def _call_async(
        self,
        url: str,
        method: str,
        body: Any,
        content_type: str,
        response_type: Any,
        headers: Optional[HeaderTypes],
        cancel_event: Optional[asyncio.Event],
        error_prefix: str,
    ) -> Result[Any]:
        try:
            request = self.build_request(
                url, method, headers=headers, body=body, content_type=content_type
            )
        except Exception as e:
            return self._failure(e, error_prefix)
        return await self.send_async(
            request, response_type, cancel_event=cancel_event, error_prefix=error_prefix
        )

    def _acquire(self, factory: Callable[[], ClientT]) -> ClientT:
        try:
            return factory()
        except Exception as e:
            raise TransportException(f"Could not acquire an HTTP client: {e}") from e

    def _log_request(self, request: Request) -> None:
        self._logger.debug(f"Request: {request.method} {request.url}")

    def _to_result(self, response: Response, response_type: Any) -> Result[Any]:
        text = read_text(response)
        self._logger.debug(
            f"Response: {response.status_code} for {response.request.method} {response.request.url}"
        )

        if not response.is_success:
            self._logger.warning(
                f"HTTP {response.status_code} returned by {response.request.method} {response.request.url}"
            )
            return Result.failure_result(text, status_code=response.status_code)

        if response_type is str:
            return Result.success_result(text, status_code=response.status_code)

        if not text.strip():
            raise DeserializationError(
                "Response body is empty", status_code=response.status_code
            )
        try:
            payload = deserialize(text, response_type)
        except DeserializationError as e:
            e.status_code = response.status_code
            raise
        if payload is None:
            raise DeserializationError(
                "Response body decoded to null", status_code=response.status_code
            )
        return Result.success_result(payload, status_code=response.status_code)

    def _failure(self, exc: Exception, error_prefix: str) -> Result[Any]:
        result = failure_from_exception(exc, error_prefix)
        self._logger.warning(f"{result.message} ({result.error_kind.value})")
        return result
