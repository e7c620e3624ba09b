import json

import httpx
import pytest

from genai.transport import HttpTransport, model_resource_name
from models import Content, GenerateContentRequest, Part, TransportError


def make_request():
    return GenerateContentRequest(contents=[Content(role="user", parts=[Part(text="hi")])])


def make_transport(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport("test-key", base_url="https://example.test/", http_client=http_client), http_client


class TestHttpTransport:
    def test_model_resource_name(self):
        assert model_resource_name("gemini-1.5-flash") == "models/gemini-1.5-flash"
        assert model_resource_name("models/gemini-pro") == "models/gemini-pro"

    def test_endpoint(self):
        transport = HttpTransport("k", base_url="https://example.test/", api_version="v1")
        assert transport.endpoint("gemini-pro") == "https://example.test/v1/models/gemini-pro:generateContent"

    @pytest.mark.asyncio
    async def test_posts_wire_request_with_key_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"role": "model", "parts": [{"text": "hello"}]}}]},
            )

        transport, http_client = make_transport(handler)
        response = await transport.generate_content("gemini-1.5-flash", make_request())
        await http_client.aclose()

        assert seen["url"] == "https://example.test/v1beta/models/gemini-1.5-flash:generateContent"
        assert seen["key"] == "test-key"
        assert seen["body"] == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}
        assert response.text() == "hello"

    @pytest.mark.asyncio
    async def test_http_error_status_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}},
            )

        transport, http_client = make_transport(handler)
        with pytest.raises(TransportError) as exc_info:
            await transport.generate_content("gemini-1.5-flash", make_request())
        await http_client.aclose()

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "API key not valid"

    @pytest.mark.asyncio
    async def test_network_error_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport, http_client = make_transport(handler)
        with pytest.raises(TransportError) as exc_info:
            await transport.generate_content("gemini-1.5-flash", make_request())
        await http_client.aclose()
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_body_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        transport, http_client = make_transport(handler)
        with pytest.raises(TransportError):
            await transport.generate_content("gemini-1.5-flash", make_request())
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_does_not_close_borrowed_client(self):
        transport, http_client = make_transport(lambda request: httpx.Response(200, json={}))
        await transport.aclose()
        assert not http_client.is_closed
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_closes_owned_client(self):
        transport = HttpTransport("k")
        await transport.aclose()
        assert transport._client.is_closed
