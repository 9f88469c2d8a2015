import shlex
from typing import List, Optional, Tuple, Union

from httpx import Headers, Request, RequestNotRead

from ..models.multipart import FilePart, TextPart
from ._body import MultipartBody
from ._request_spec import RequestSpec

_SKIPPED_HEADERS = {"host", "content-length", "content-type"}


def render_curl(request: Union[RequestSpec, Request]) -> str:
    """Render ``request`` as an equivalent curl command for debugging.

    Rendering never sends the request and never reads a file stream: file parts
    of a multipart ``RequestSpec`` are rendered as ``-F name=@file`` arguments,
    and the body of an ``httpx.Request`` is only shown when it has already been
    loaded. Render an ``httpx.Request`` before sending it.

    Examples:
        >>> spec = build_request("https://api.example.com/items/1", "PATCH", body={"Price": 39.99})
        >>> print(render_curl(spec))
        curl -X PATCH \\
          -H 'Content-Type: application/json; charset=utf-8' \\
          -d '{"Price":39.99}' \\
          https://api.example.com/items/1
    """
    if isinstance(request, RequestSpec):
        method, url = request.method, request.url
        headers = request.headers
        content_type = request.body.content_type_header
        body = request.body.to_text()
        form_args = _form_args(request.body) if isinstance(request.body, MultipartBody) else []
    else:
        method, url = request.method, str(request.url)
        headers = request.headers
        content_type = request.headers.get("content-type")
        body = _loaded_body(request)
        form_args = []

    lines = [f"curl -X {method}"]
    lines.extend(
        f"-H {shlex.quote(f'{name}: {value}')}" for name, value in _grouped(headers)
    )
    if content_type:
        lines.append(f"-H {shlex.quote(f'Content-Type: {content_type}')}")
    lines.extend(form_args)
    if body:
        lines.append(f"-d {shlex.quote(body)}")
    lines.append(shlex.quote(url))

    return " \\\n  ".join(lines)


def _grouped(headers: Headers) -> List[Tuple[str, str]]:
    names: dict = {}
    values: dict = {}
    for raw_name, raw_value in headers.raw:
        name = raw_name.decode(headers.encoding)
        key = name.lower()
        if key in _SKIPPED_HEADERS:
            continue
        names.setdefault(key, name)
        values.setdefault(key, []).append(raw_value.decode(headers.encoding))
    return [(names[key], ", ".join(values[key])) for key in names]


def _form_args(body: MultipartBody) -> List[str]:
    args = []
    for part in body.parts:
        if isinstance(part, TextPart):
            args.append(f"--form-string {shlex.quote(f'{part.name}={part.value}')}")
        elif isinstance(part, FilePart):
            source = part.file.path or part.filename or "-"
            args.append(f"-F {shlex.quote(f'{part.name}=@{source};type={part.content_type}')}")
    return args


def _loaded_body(request: Request) -> Optional[str]:
    try:
        content = request.content
    except RequestNotRead:
        return None
    return content.decode("utf-8", errors="replace")
