from contextlib import contextmanager
from typing import Generator, Optional

import httpx

from ..models.errors import AppHttpError, TransportException
from ..models.result import ErrorDetail, Result


@contextmanager
def translate_transport_errors() -> Generator[None, None, None]:
    """Context manager converting transport failures into ``TransportException``.

    Wraps the send step of a call so that connection errors, timeouts, invalid
    URLs and stream errors raised by httpx surface as a single error type.

    Raises:
        TransportException: For any httpx error raised inside the block.
    """
    try:
        yield
    except AppHttpError:
        raise
    except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
        message = str(e) or type(e).__name__
        raise TransportException(message) from e


def failure_from_exception(exc: Exception, prefix: str) -> Result:
    """Map an exception raised during a call into a failure ``Result``.

    ``DeserializationError`` keeps the status code of the response it was
    raised for; every other failure happened before a usable response existed
    and carries no status code.
    """
    detail = ErrorDetail.from_exception(exc)
    status_code: Optional[int] = (
        exc.status_code if isinstance(exc, AppHttpError) else None
    )
    return Result.failure_result(
        f"{prefix}: {detail.message}", status_code=status_code, error=detail
    )
