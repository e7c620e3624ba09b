import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from models import UsageMetadata

logger = logging.getLogger("GenAIClient.usage")


@dataclass
class ModelUsage:
    requests: int = 0
    prompt_tokens: int = 0
    candidates_tokens: int = 0
    total_tokens: int = 0


class UsageTracker:
    """
    Accumulates token usage per model name for one client.
    Updates are serialized via asyncio.Lock; snapshots are copies.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._usage: Dict[str, ModelUsage] = {}

    async def record(self, model_name: str, usage: Optional[UsageMetadata]) -> None:
        """Count one completed request, adding its token counts when present."""
        async with self._lock:
            entry = self._usage.setdefault(model_name, ModelUsage())
            entry.requests += 1
            if usage is not None:
                entry.prompt_tokens += usage.prompt_token_count
                entry.candidates_tokens += usage.candidates_token_count
                entry.total_tokens += usage.total_token_count
            logger.debug(
                f"Updated usage for {model_name}: +{usage.total_token_count if usage else 0} tokens "
                f"(Total: {entry.total_tokens}, requests: {entry.requests})"
            )

    def get_usage(self, model_name: str) -> ModelUsage:
        entry = self._usage.get(model_name)
        return ModelUsage(**asdict(entry)) if entry else ModelUsage()

    def snapshot(self) -> Dict[str, ModelUsage]:
        return {name: ModelUsage(**asdict(entry)) for name, entry in self._usage.items()}

    def total_tokens(self) -> int:
        return sum(entry.total_tokens for entry in self._usage.values())
