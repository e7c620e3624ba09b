from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeGeminiTransport
from genai import Client, HttpTransport, resolve_api_key


class TestClient:
    def test_missing_key_without_transport(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        with pytest.raises(ValueError, match="No API key"):
            Client()

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
        assert resolve_api_key() == "env-key"
        assert resolve_api_key("explicit") == "explicit"
        assert isinstance(Client().transport, HttpTransport)

    def test_custom_transport_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        transport = FakeGeminiTransport()
        assert Client(transport=transport).transport is transport

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        async with Client("key") as client:
            transport = client.transport
        assert client.closed
        assert transport._client.is_closed
        with pytest.raises(RuntimeError):
            client.transport

    @pytest.mark.asyncio
    async def test_custom_transport_not_closed(self, client, fake_transport):
        await client.close()
        await client.close()
        assert fake_transport.closed is False

    @pytest.mark.asyncio
    async def test_usage_recorded_per_model(self, client):
        model = client.generative_model("gemini-1.5-flash")
        session = model.start_chat()
        await session.send_message("hello")
        await model.generate_content("hello again")

        usage = client.usage.get_usage("gemini-1.5-flash")
        assert usage.requests == 2
        assert usage.total_tokens == 16
        assert client.usage.total_tokens() == 16
        assert client.usage.get_usage("other").requests == 0

    def test_http_transport_built_from_options(self):
        with patch("genai.client.HttpTransport") as transport_cls:
            client = Client("explicit-key", base_url="https://example.test", api_version="v1", timeout=5)
        transport_cls.assert_called_once_with(
            "explicit-key", base_url="https://example.test", api_version="v1", timeout=5
        )
        assert client.transport is transport_cls.return_value

    @pytest.mark.asyncio
    async def test_close_releases_owned_transport(self):
        with patch("genai.client.HttpTransport") as transport_cls:
            transport_cls.return_value.aclose = AsyncMock()
            client = Client("explicit-key")
        await client.close()
        transport_cls.return_value.aclose.assert_awaited_once()
