"""
ChatSession: a multi-turn conversation with a GenerativeModel.

A turn is atomic. The user turn and the model turn are appended together,
and only after the response arrived and passed the function calling checks.
A failed, timed out or cancelled send leaves the history and the pending
function calls exactly as they were.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from config import ROLE_MODEL, ROLE_USER
from logging_utils.fc_debug import FCModule, get_fc_logger
from models import (
    BlockedResponseError,
    Content,
    GenerateContentResponse,
    PartLike,
    function_calls_in,
    function_responses_in,
    to_part,
)

from .utils_ext.function_calling import PendingCall, PendingCallTracker, check_function_call_contract

if TYPE_CHECKING:
    from .model import GenerativeModel

logger = logging.getLogger("GenAIClient")

fc_logger = get_fc_logger()


class ChatSession:
    """Conversation state for one caller.

    Sends are serialized by a per-session lock, so at most one request of a
    session is in flight and turns are appended in send order.
    """

    def __init__(self, model: "GenerativeModel", history: Optional[Sequence[Content]] = None) -> None:
        self._model = model
        self._history: List[Content] = [turn.model_copy(deep=True) for turn in (history or [])]
        self._lock = asyncio.Lock()
        self._pending = PendingCallTracker()
        self._last: Optional[GenerateContentResponse] = None

        # A seeded history ending in a model turn with calls expects responses next
        if self._history and self._history[-1].role == ROLE_MODEL:
            self._pending.register_calls(self._history[-1].function_calls())

    @property
    def model(self) -> "GenerativeModel":
        return self._model

    @property
    def history(self) -> List[Content]:
        """Completed turns, oldest first. The returned list is a copy."""
        return list(self._history)

    @property
    def last(self) -> Optional[GenerateContentResponse]:
        """Response of the last completed turn."""
        return self._last

    @property
    def pending_function_calls(self) -> List[PendingCall]:
        """Calls of the last model turn that still expect a FunctionResponse."""
        return self._pending.get_pending_calls()

    async def send_message(self, *parts: PartLike, timeout: Optional[float] = None) -> GenerateContentResponse:
        """Send one user turn and return the model's response.

        Args:
            *parts: Text, Part or FunctionResponse values forming the user turn.
            timeout: Optional deadline in seconds for the remote call.

        Returns:
            The response; its first candidate has become the newest history turn.

        Raises:
            ValueError: The user turn is empty or contains a function call.
            UnknownFunctionError: A FunctionResponse answers no pending call, or
                the model called an undeclared function.
            ModeViolationError: The response contradicts the function calling mode.
            BlockedResponseError: The response carries no candidate content.
            TransportError: The remote call failed.
            asyncio.TimeoutError: The remote call exceeded ``timeout``.
        """
        user_parts = [to_part(part) for part in parts]
        if not user_parts:
            raise ValueError("send_message requires at least one part")
        if function_calls_in(user_parts):
            raise ValueError("A user turn cannot contain function calls")

        async with self._lock:
            responses = function_responses_in(user_parts)
            unanswered: List[PendingCall] = []
            if responses:
                _, unanswered = self._pending.match_responses(responses)
                fc_logger.debug(
                    FCModule.SESSION, f"Sending {len(responses)} function response(s): {[r.name for r in responses]}"
                )

            user_turn = Content(role=ROLE_USER, parts=user_parts)
            request = self._model.build_request(self._history + [user_turn])
            transport = self._model.client.transport

            if timeout is not None:
                response = await asyncio.wait_for(
                    transport.generate_content(self._model.name, request), timeout=timeout
                )
            else:
                response = await transport.generate_content(self._model.name, request)

            model_turn = candidate_turn(response)
            check_function_call_contract(
                model_turn.function_calls(), self._model.tool_config, self._model.declarations()
            )

            if unanswered:
                logger.warning(
                    f"Dropping {len(unanswered)} unanswered function call(s): "
                    f"{[p.function_name for p in unanswered]}"
                )

            # Commit point: nothing below suspends before the turn is recorded
            self._history.append(user_turn)
            self._history.append(model_turn)
            self._pending.register_calls(model_turn.function_calls())
            self._last = response

            await self._model.client.usage.record(self._model.name, response.usage_metadata)
            return response


def candidate_turn(response: GenerateContentResponse) -> Content:
    """The first candidate as a history turn.

    Parts carrying no data are dropped, since the service rejects them when
    the turn is sent back; part kinds without a typed field are kept as-is.

    Raises:
        BlockedResponseError: No candidate, or a candidate without usable parts.
    """
    if not response.candidates:
        reason = response.prompt_feedback.block_reason if response.prompt_feedback else None
        raise BlockedResponseError(reason)
    candidate = response.candidates[0]
    parts = [part for part in candidate.content.parts if not part.is_empty()] if candidate.content else []
    if not parts:
        reason = candidate.finish_reason
        if reason is None and response.prompt_feedback is not None:
            reason = response.prompt_feedback.block_reason
        raise BlockedResponseError(reason)
    return Content(
        role=candidate.content.role or ROLE_MODEL,
        parts=[part.model_copy(deep=True) for part in parts],
    )
