"""
Client: credentials, the shared transport and the usage tracker.
"""

import logging
import os
from typing import Optional

from config import API_BASE_URL, API_KEY_ENV_VARS, API_VERSION, DEFAULT_MODEL, REQUEST_TIMEOUT_SECONDS

from .model import GenerativeModel
from .transport import HttpTransport, Transport
from .utils_ext.usage_tracker import UsageTracker

logger = logging.getLogger("GenAIClient")


def resolve_api_key(api_key: Optional[str] = None) -> Optional[str]:
    """Explicit key first, then the first non-empty credential environment variable."""
    if api_key:
        return api_key
    for env_var in API_KEY_ENV_VARS:
        value = os.environ.get(env_var, "").strip()
        if value:
            logger.debug(f"Using API key from {env_var}")
            return value
    return None


class Client:
    """Entry point of the library.

    Owns the transport and is shared by every model and chat session created
    from it. Close it with ``await client.close()`` or use it as an async
    context manager.

    Args:
        api_key: API key; falls back to GEMINI_API_KEY / GOOGLE_API_KEY.
        transport: Custom transport (e.g. a test fake). When given, no API
            key is required and the client does not close it.
        base_url: Service root URL for the default HTTP transport.
        api_version: API version for the default HTTP transport.
        timeout: Request timeout in seconds for the default HTTP transport.

    Raises:
        ValueError: No transport was given and no API key could be resolved.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        base_url: str = API_BASE_URL,
        api_version: str = API_VERSION,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if transport is None:
            key = resolve_api_key(api_key)
            if not key:
                raise ValueError(
                    f"No API key: pass api_key or set one of {', '.join(API_KEY_ENV_VARS)}"
                )
            transport = HttpTransport(key, base_url=base_url, api_version=api_version, timeout=timeout)
            self._owns_transport = True
        else:
            self._owns_transport = False
        self._transport: Transport = transport
        self._closed = False
        self.usage = UsageTracker()

    @property
    def transport(self) -> Transport:
        if self._closed:
            raise RuntimeError("Client is closed")
        return self._transport

    @property
    def closed(self) -> bool:
        return self._closed

    def generative_model(self, name: str = DEFAULT_MODEL) -> GenerativeModel:
        return GenerativeModel(self, name)

    async def close(self) -> None:
        """Release the transport. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._owns_transport:
            await self._transport.aclose()
        logger.debug("Client closed")

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
