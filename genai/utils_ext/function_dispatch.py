"""
Local function dispatch.

Maps declared function names to Python handlers and drives the round trip
between model function calls and the FunctionResponses sent back to it.
"""

import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from config.settings import FUNCTION_CALLING_MAX_ROUNDS
from logging_utils.fc_debug import FCModule, get_fc_logger
from models import (
    FunctionCall,
    FunctionDeclaration,
    FunctionResponse,
    GenerateContentResponse,
    Tool,
    UnknownFunctionError,
    build_declaration_index,
)

if TYPE_CHECKING:
    from genai.chat import ChatSession

logger = logging.getLogger("GenAIClient")

fc_logger = get_fc_logger()

FunctionHandler = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]


class FunctionRegistry:
    """Handlers for the functions declared by a set of tools.

    Only declared names can be registered; each call is validated against its
    declaration before the handler runs. Handlers receive the argument dict
    and may be sync or async.
    """

    def __init__(self, tools: Sequence[Tool], handlers: Optional[Mapping[str, FunctionHandler]] = None) -> None:
        self._declarations: Dict[str, FunctionDeclaration] = build_declaration_index(tools)
        self._handlers: Dict[str, FunctionHandler] = {}
        for name, handler in (handlers or {}).items():
            self.register(name, handler)

    @property
    def declarations(self) -> Dict[str, FunctionDeclaration]:
        return dict(self._declarations)

    def register(self, name: str, handler: FunctionHandler) -> None:
        if name not in self._declarations:
            raise UnknownFunctionError(name, self._declarations.keys())
        if name in self._handlers:
            raise ValueError(f"Duplicate handler for function: {name}")
        self._handlers[name] = handler

    def has_handler(self, name: str) -> bool:
        return name in self._handlers

    async def execute(self, call: FunctionCall) -> FunctionResponse:
        """Validate and run one call.

        Raises:
            UnknownFunctionError: No declaration or no handler for the name.
            ArgumentError: The arguments do not match the declared schema.
        """
        declaration = self._declarations.get(call.name)
        handler = self._handlers.get(call.name)
        if declaration is None or handler is None:
            raise UnknownFunctionError(call.name, self._handlers.keys())

        call.validate_args(declaration)
        fc_logger.debug(FCModule.DISPATCH, f"Executing {call.name} args={call.args}")

        result = handler(dict(call.args))
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, dict):
            result = {"result": result}

        fc_logger.debug(FCModule.DISPATCH, f"{call.name} returned {result}")
        return FunctionResponse(id=call.id, name=call.name, response=result)

    async def execute_all(self, calls: Sequence[FunctionCall]) -> List[FunctionResponse]:
        return [await self.execute(call) for call in calls]


async def run_function_calls(
    session: "ChatSession",
    registry: FunctionRegistry,
    response: GenerateContentResponse,
    max_rounds: int = FUNCTION_CALLING_MAX_ROUNDS,
) -> GenerateContentResponse:
    """Answer function calls until the model replies without any.

    Args:
        session: Chat session the response came from.
        registry: Handlers for the declared functions.
        response: The latest response of the session.
        max_rounds: Upper bound on function call round trips.

    Returns:
        The first response that carries no function calls.

    Raises:
        RuntimeError: The model still calls functions after max_rounds round trips.
    """
    for round_index in range(max_rounds):
        calls = response.function_calls()
        if not calls:
            return response
        fc_logger.info(
            FCModule.DISPATCH,
            f"Round {round_index + 1}: executing {len(calls)} call(s) {[c.name for c in calls]}",
        )
        responses = await registry.execute_all(calls)
        response = await session.send_message(*responses)

    if response.function_calls():
        logger.warning(f"Reached max_rounds={max_rounds} with function calls still pending")
        raise RuntimeError(
            f"Model kept issuing function calls after {max_rounds} round(s); last: "
            f"{[c.name for c in response.function_calls()]}"
        )
    return response
