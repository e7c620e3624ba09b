from typing import List, Optional

from pydantic import Field

from .base import WireModel
from .content import Content
from .tools import Tool, ToolConfig


class GenerationConfig(WireModel):
    """Sampling parameters. Unset values are left to the service defaults."""

    temperature: Optional[float] = Field(default=None, ge=0.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=None, ge=1)
    max_output_tokens: Optional[int] = Field(default=None, ge=1)
    candidate_count: Optional[int] = Field(default=None, ge=1)
    stop_sequences: Optional[List[str]] = None


class GenerateContentRequest(WireModel):
    """Everything one generateContent exchange sends: history plus model configuration."""

    contents: List[Content]
    tools: Optional[List[Tool]] = None
    tool_config: Optional[ToolConfig] = None
    generation_config: Optional[GenerationConfig] = None
    system_instruction: Optional[Content] = None
