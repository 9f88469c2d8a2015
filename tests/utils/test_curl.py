import httpx
import pytest

from apphttp import UploadFile, build_request, render_curl


@pytest.fixture
def patch_request():
    return build_request(
        "https://api.example.com/products/1",
        "PATCH",
        headers=[("X-Api-Key", "key-1"), ("X-Trace-Id", "abc")],
        body={"Price": 39.99},
    )


class TestRenderCurl:
    def test_patch_with_json_body(self, patch_request):
        curl = render_curl(patch_request)

        assert curl == (
            "curl -X PATCH \\\n"
            "  -H 'X-Api-Key: key-1' \\\n"
            "  -H 'X-Trace-Id: abc' \\\n"
            "  -H 'Content-Type: application/json; charset=utf-8' \\\n"
            "  -d '{\"Price\":39.99}' \\\n"
            "  https://api.example.com/products/1"
        )

    def test_rendering_is_repeatable(self, patch_request):
        assert render_curl(patch_request) == render_curl(patch_request)

    def test_get_without_body(self):
        curl = render_curl(build_request("https://api.example.com/items?page=2&size=10", "GET"))

        assert curl == "curl -X GET \\\n  'https://api.example.com/items?page=2&size=10'"

    def test_multi_valued_headers_are_joined(self):
        curl = render_curl(
            build_request(
                "https://api.example.com",
                "GET",
                headers=[("Accept", "application/json"), ("accept", "text/plain")],
            )
        )

        assert "-H 'Accept: application/json, text/plain'" in curl

    def test_bearer_token(self):
        curl = render_curl(build_request("https://api.example.com", "GET", bearer_token="tok"))

        assert "-H 'Authorization: Bearer tok'" in curl

    def test_body_with_quotes_is_shell_escaped(self):
        curl = render_curl(build_request("https://api.example.com", "POST", body="it's"))

        assert "-d '\"it'\"'\"'s\"'" in curl

    def test_form_body(self):
        curl = render_curl(
            build_request(
                "https://api.example.com/token",
                "POST",
                body={"grant_type": "password"},
                content_type="application/x-www-form-urlencoded",
            )
        )

        assert "-H 'Content-Type: application/x-www-form-urlencoded'" in curl
        assert "-d grant_type=password" in curl

    def test_multipart_does_not_open_files(self, tmp_path):
        missing = tmp_path / "missing.bin"
        curl = render_curl(
            build_request(
                "https://api.example.com/uploads",
                "POST",
                body={"File": UploadFile(path=missing), "Description": "@notes"},
                content_type="multipart/form-data",
            )
        )

        assert f"-F 'File=@{missing};type=application/octet-stream'" in curl
        assert "--form-string Description=@notes" in curl
        assert "Content-Type" not in curl

    def test_httpx_request_with_loaded_body(self):
        request = httpx.Request(
            "POST",
            "https://api.example.com/items",
            headers={"X-Trace-Id": "abc", "Content-Type": "application/json"},
            content=b'{"a":1}',
        )

        curl = render_curl(request)

        assert curl == (
            "curl -X POST \\\n"
            "  -H 'X-Trace-Id: abc' \\\n"
            "  -H 'Content-Type: application/json' \\\n"
            "  -d '{\"a\":1}' \\\n"
            "  https://api.example.com/items"
        )

    def test_httpx_request_stream_is_not_consumed(self):
        request = httpx.Request(
            "POST", "https://api.example.com/items", content=iter([b"chunk-1", b"chunk-2"])
        )

        curl = render_curl(request)

        assert "-d" not in curl
        assert request.read() == b"chunk-1chunk-2"
