"""
GenerativeModel: a named remote model plus the configuration sent with every request.
"""

import copy
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from config import ROLE_USER
from logging_utils.fc_debug import FCModule, get_fc_logger
from models import (
    Content,
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionDeclaration,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    PartLike,
    Tool,
    ToolConfig,
    build_declaration_index,
    to_part,
)

from .chat import ChatSession, candidate_turn
from .utils_ext.function_calling import check_function_call_contract

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger("GenAIClient")

fc_logger = get_fc_logger()


class GenerativeModel:
    """A remote model with its tools and generation parameters.

    Configuration is plain mutable attributes, read when a request is built.
    Chat sessions take a snapshot at ``start_chat`` so later changes to the
    model do not affect sessions already running.

    Attributes:
        name: Remote model identifier, e.g. "gemini-2.5-flash".
        tools: Ordered tools offered to the model.
        tool_config: Function calling policy; None means AUTO.
        system_instruction: Optional instruction turn sent with every request.
    """

    def __init__(self, client: "Client", name: str) -> None:
        if not name or not isinstance(name, str):
            raise ValueError("Model name must be a non-empty string")
        self._client = client
        self.name = name
        self.temperature: Optional[float] = None
        self.top_p: Optional[float] = None
        self.top_k: Optional[int] = None
        self.max_output_tokens: Optional[int] = None
        self.candidate_count: Optional[int] = None
        self.stop_sequences: Optional[List[str]] = None
        self.tools: List[Tool] = []
        self.tool_config: Optional[ToolConfig] = None
        self.system_instruction: Optional[Content] = None

    def __repr__(self) -> str:
        return f"GenerativeModel(name={self.name!r}, tools={len(self.tools)}, mode={self.function_calling_mode.value})"

    @property
    def client(self) -> "Client":
        return self._client

    # ==================== Configuration ====================

    def set_temperature(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"temperature must be >= 0, got {value}")
        self.temperature = float(value)

    def set_tools(self, tools: Sequence[Tool]) -> None:
        """Replace the tools, rejecting duplicate function names across them."""
        tools = list(tools)
        build_declaration_index(tools)
        self.tools = tools

    def set_function_calling_mode(
        self, mode: FunctionCallingMode, allowed_function_names: Optional[List[str]] = None
    ) -> None:
        self.tool_config = ToolConfig(
            function_calling_config=FunctionCallingConfig(
                mode=FunctionCallingMode(mode), allowed_function_names=allowed_function_names
            )
        )

    def set_system_instruction(self, instruction: Optional[str]) -> None:
        if instruction is None:
            self.system_instruction = None
        else:
            self.system_instruction = Content(parts=[to_part(instruction)])

    @property
    def function_calling_mode(self) -> FunctionCallingMode:
        return (self.tool_config or ToolConfig()).mode

    def declarations(self) -> Dict[str, FunctionDeclaration]:
        """Declared functions by name, in declaration order."""
        return build_declaration_index(self.tools)

    def generation_config(self) -> Optional[GenerationConfig]:
        values = {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "max_output_tokens": self.max_output_tokens,
            "candidate_count": self.candidate_count,
            "stop_sequences": self.stop_sequences,
        }
        if all(value is None for value in values.values()):
            return None
        return GenerationConfig(**values)

    # ==================== Requests ====================

    def build_request(self, contents: Sequence[Content]) -> GenerateContentRequest:
        """Assemble a request for the given conversation contents.

        Raises:
            ValueError: Duplicate function names across tools, or an allowed
                function name that is not declared.
        """
        declarations = self.declarations()
        fc_config = self.tool_config.function_calling_config if self.tool_config else None
        if fc_config is not None and fc_config.allowed_function_names is not None:
            undeclared = [name for name in fc_config.allowed_function_names if name not in declarations]
            if undeclared:
                raise ValueError(
                    f"allowed_function_names {undeclared} are not declared; declared functions: {list(declarations)}"
                )
        return GenerateContentRequest(
            contents=list(contents),
            tools=list(self.tools) or None,
            tool_config=self.tool_config,
            generation_config=self.generation_config(),
            system_instruction=self.system_instruction,
        )

    async def generate_content(self, *parts: PartLike) -> GenerateContentResponse:
        """Run one stateless turn and check the function calling contract.

        Raises:
            TransportError: The remote call failed.
            BlockedResponseError: The response carries no candidate content.
            ModeViolationError: The response contradicts the function calling mode.
            UnknownFunctionError: The response calls an undeclared function.
        """
        if not parts:
            raise ValueError("generate_content requires at least one part")
        user_turn = Content(role=ROLE_USER, parts=[to_part(part) for part in parts])
        request = self.build_request([user_turn])

        response = await self._client.transport.generate_content(self.name, request)
        model_turn = candidate_turn(response)
        check_function_call_contract(model_turn.function_calls(), self.tool_config, self.declarations())
        await self._client.usage.record(self.name, response.usage_metadata)
        return response

    def start_chat(self, history: Optional[Sequence[Content]] = None) -> ChatSession:
        """Start a chat session on a snapshot of this model's configuration."""
        snapshot = copy.copy(self)
        snapshot.tools = copy.deepcopy(self.tools)
        snapshot.tool_config = copy.deepcopy(self.tool_config)
        snapshot.system_instruction = copy.deepcopy(self.system_instruction)
        snapshot.stop_sequences = list(self.stop_sequences) if self.stop_sequences is not None else None
        fc_logger.debug(FCModule.SESSION, f"Starting chat on {snapshot!r}")
        return ChatSession(snapshot, history=history)
