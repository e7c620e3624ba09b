"""
Transport layer for the remote generateContent endpoint.

The chat session only depends on the ``Transport`` protocol; ``HttpTransport``
is the live backend and talks to the REST API with httpx. Tests substitute a
deterministic fake. No retries happen here: failures are raised as
TransportError and retry policy, if any, belongs to the caller.
"""

import json
import logging
from typing import Any, Dict, Optional, Protocol

import httpx
from pydantic import ValidationError

from config import API_BASE_URL, API_KEY_HEADER, API_VERSION, CONNECT_TIMEOUT_SECONDS, REQUEST_TIMEOUT_SECONDS
from logging_utils.fc_debug import FCModule, get_fc_logger
from models import GenerateContentRequest, GenerateContentResponse, TransportError

logger = logging.getLogger("GenAIClient")

fc_logger = get_fc_logger()


class Transport(Protocol):
    async def generate_content(
        self, model_name: str, request: GenerateContentRequest
    ) -> GenerateContentResponse: ...

    async def aclose(self) -> None: ...


def model_resource_name(model_name: str) -> str:
    """Normalize ``gemini-x`` and ``models/gemini-x`` to the latter."""
    if model_name.startswith(("models/", "tunedModels/")):
        return model_name
    return f"models/{model_name}"


def _error_message(response: httpx.Response) -> str:
    # Error bodies look like {"error": {"code": 400, "message": "...", "status": "..."}}
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text[:500] or response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        return str(error.get("message") or error.get("status") or body)
    return str(body)[:500]


class HttpTransport:
    """Live transport over the generativelanguage REST API.

    Args:
        api_key: Credential sent in the API key header.
        base_url: Service root URL.
        api_version: API version path segment.
        timeout: Total timeout of one request in seconds.
        http_client: Optional pre-built httpx.AsyncClient (the transport then
            does not own it and will not close it).
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = API_BASE_URL,
        api_version: str = API_VERSION,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT_SECONDS)
        )

    def endpoint(self, model_name: str) -> str:
        return f"{self._base_url}/{self._api_version}/{model_resource_name(model_name)}:generateContent"

    async def generate_content(
        self, model_name: str, request: GenerateContentRequest
    ) -> GenerateContentResponse:
        url = self.endpoint(model_name)
        payload: Dict[str, Any] = request.to_wire()
        fc_logger.payload(FCModule.TRANSPORT, f"POST {url}", payload)

        try:
            response = await self._client.post(
                url,
                json=payload,
                headers={API_KEY_HEADER: self._api_key},
            )
        except httpx.HTTPError as e:
            logger.error(f"generateContent request failed: {e!r}")
            raise TransportError(f"Request to {model_name} failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"generateContent returned HTTP {response.status_code}: {message}")
            raise TransportError(message, status_code=response.status_code)

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise TransportError(
                f"Response body is not JSON: {response.text[:200]!r}", status_code=response.status_code
            ) from e

        fc_logger.payload(FCModule.TRANSPORT, "response", data)

        try:
            return GenerateContentResponse.model_validate(data)
        except ValidationError as e:
            raise TransportError(f"Malformed generateContent response: {e}", status_code=response.status_code) from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
