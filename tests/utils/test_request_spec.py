import httpx
import pytest

from apphttp import (
    EncodingError,
    JsonBody,
    MultipartBody,
    NoBody,
    RequestSpec,
    UploadFile,
    build_request,
)


class TestBuildRequest:
    def test_bearer_token(self):
        spec = build_request("https://api.example.com/items", "get", bearer_token="tok")

        assert spec.method == "GET"
        assert spec.headers["Authorization"] == "Bearer tok"
        assert spec.bearer_token == "tok"

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_blank_token_sets_no_authorization(self, token):
        spec = build_request("https://api.example.com/items", "GET", bearer_token=token)

        assert "Authorization" not in spec.headers

    def test_headers_are_applied_verbatim(self):
        spec = build_request(
            "https://api.example.com/items",
            "GET",
            headers=[("X-Tag", "a"), ("X-Tag", "b"), ("X-Trace-Id", "abc")],
        )

        assert spec.headers.get_list("x-tag") == ["a", "b"]
        assert spec.headers["x-trace-id"] == "abc"

    def test_mapping_headers(self):
        spec = build_request(
            "https://api.example.com/items", "GET", headers={"Accept-Language": "tr"}
        )

        assert spec.headers["accept-language"] == "tr"

    def test_no_body(self):
        spec = build_request("https://api.example.com/items", "GET")

        assert spec.body == NoBody()
        assert "Content-Type" not in spec.request_headers()

    def test_content_type_is_derived_from_body(self):
        spec = build_request(
            "https://api.example.com/items",
            "POST",
            headers={"Content-Type": "text/plain"},
            body={"a": 1},
        )

        assert isinstance(spec.body, JsonBody)
        assert spec.request_headers()["Content-Type"] == "application/json; charset=utf-8"
        assert spec.request_headers().get_list("Content-Type") == [
            "application/json; charset=utf-8"
        ]

    def test_form_requires_string_mapping(self):
        with pytest.raises(EncodingError):
            build_request(
                "https://api.example.com/token",
                "POST",
                body={"count": 3},
                content_type="application/x-www-form-urlencoded",
            )

    def test_build_performs_no_io(self, tmp_path):
        spec = build_request(
            "https://api.example.com/uploads",
            "POST",
            body={"File": UploadFile(path=tmp_path / "not-there.bin")},
            content_type="multipart/form-data",
        )

        assert isinstance(spec.body, MultipartBody)


class TestRequestSpec:
    def test_to_httpx_json(self):
        spec = build_request(
            "https://api.example.com/items", "PUT", body={"a": 1}, bearer_token="tok"
        )

        with httpx.Client() as client:
            with spec.to_httpx(client) as request:
                assert request.method == "PUT"
                assert request.url == "https://api.example.com/items"
                assert request.content == b'{"a":1}'
                assert request.headers["Authorization"] == "Bearer tok"
                assert request.headers["Content-Type"] == "application/json; charset=utf-8"

    def test_to_httpx_form(self):
        spec = build_request(
            "https://api.example.com/token",
            "POST",
            body={"a": "1 2"},
            content_type="application/x-www-form-urlencoded",
        )

        with httpx.Client() as client:
            with spec.to_httpx(client) as request:
                assert request.content == b"a=1+2"
                assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"

    def test_to_httpx_multipart(self):
        spec = build_request(
            "https://api.example.com/uploads",
            "POST",
            body={"File": UploadFile.from_bytes(b"abc", "a.txt", "text/plain"), "N": "1"},
            content_type="multipart/form-data",
        )

        with httpx.Client() as client:
            with spec.to_httpx(client) as request:
                assert request.headers["Content-Type"].startswith(
                    "multipart/form-data; boundary="
                )
                content = request.read()

        assert b'name="File"; filename="a.txt"' in content
        assert b'name="N"' in content

    def test_defaults(self):
        spec = RequestSpec(method="GET", url="https://api.example.com")

        assert spec.body == NoBody()
        assert len(spec.headers) == 0
        assert spec.bearer_token is None
