"""
Function Calling Debug Logger

Tagged debug traces for the function calling pipeline. Every message is
prefixed with the pipeline stage it comes from, e.g. ``[FC:SESSION]``, so a
single run can be followed through schema conversion, the chat session,
local dispatch and the transport.

Output is gated by FUNCTION_CALLING_DEBUG; when the flag is off the calls are
no-ops apart from the flag check.
"""

import json
import logging
from enum import Enum
from typing import Any, Optional

from config.settings import FUNCTION_CALLING_DEBUG


class FCModule(str, Enum):
    """Pipeline stage tags used as message prefixes."""

    SCHEMA = "SCHEMA"
    SESSION = "SESSION"
    DISPATCH = "DISPATCH"
    TRANSPORT = "TRANSPORT"


class FCDebugLogger:
    """Thin wrapper around a stdlib logger that adds the stage prefix."""

    def __init__(self, logger: logging.Logger, enabled: bool = FUNCTION_CALLING_DEBUG) -> None:
        self._logger = logger
        self.enabled = enabled

    @staticmethod
    def _format(module: FCModule, message: str) -> str:
        return f"[FC:{module.value}] {message}"

    def debug(self, module: FCModule, message: str) -> None:
        if self.enabled:
            self._logger.debug(self._format(module, message))

    def info(self, module: FCModule, message: str) -> None:
        if self.enabled:
            self._logger.info(self._format(module, message))

    def warning(self, module: FCModule, message: str) -> None:
        # Warnings are always emitted, the flag only controls trace output.
        self._logger.warning(self._format(module, message))

    def payload(self, module: FCModule, label: str, data: Any) -> None:
        """Dump a JSON-serialisable payload at debug level."""
        if self.enabled:
            self._logger.debug(
                self._format(module, f"{label}: {json.dumps(data, ensure_ascii=False, default=str)}")
            )


_fc_logger: Optional[FCDebugLogger] = None


def get_fc_logger() -> FCDebugLogger:
    """Return the process-wide function calling debug logger."""
    global _fc_logger
    if _fc_logger is None:
        _fc_logger = FCDebugLogger(logging.getLogger("GenAIClient.fc"))
    return _fc_logger
