"""
Conversation content models: parts, turns, function calls and responses.

The projections on Content, Candidate and GenerateContentResponse
(``function_calls()``, ``text()``, ``parts()``) are pure and total: they never
mutate, never touch the network, and return empty results on empty input.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field, model_validator

from .base import WireModel
from .exceptions import ArgumentTypeError, MissingRequiredFieldError, UnknownFunctionError
from .schema import is_integral

if TYPE_CHECKING:
    from .tools import FunctionDeclaration


class FunctionCall(WireModel):
    """A function call requested by the model.

    ``args`` holds dynamically typed JSON values; use the typed accessors
    rather than indexing when a specific type is expected.
    """

    # Fields such as thoughtSignature must be echoed back unchanged in history
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.args.get(name, default)

    def _require(self, name: str) -> Any:
        if name not in self.args:
            raise MissingRequiredFieldError(name)
        return self.args[name]

    def get_string(self, name: str) -> str:
        value = self._require(name)
        if not isinstance(value, str):
            raise ArgumentTypeError(name, "STRING", value)
        return value

    def get_number(self, name: str) -> float:
        value = self._require(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ArgumentTypeError(name, "NUMBER", value)
        return float(value)

    def get_integer(self, name: str) -> int:
        value = self._require(name)
        if not is_integral(value):
            raise ArgumentTypeError(name, "INTEGER", value)
        return int(value)

    def get_bool(self, name: str) -> bool:
        value = self._require(name)
        if not isinstance(value, bool):
            raise ArgumentTypeError(name, "BOOLEAN", value)
        return value

    def get_object(self, name: str) -> Dict[str, Any]:
        value = self._require(name)
        if not isinstance(value, dict):
            raise ArgumentTypeError(name, "OBJECT", value)
        return value

    def get_list(self, name: str) -> List[Any]:
        value = self._require(name)
        if not isinstance(value, list):
            raise ArgumentTypeError(name, "ARRAY", value)
        return value

    def validate_args(self, declaration: "FunctionDeclaration") -> None:
        """Check ``args`` against the declaration's parameter schema.

        Raises:
            UnknownFunctionError: The declaration is for a different function.
            MissingRequiredFieldError: A required argument is absent.
            ArgumentTypeError: An argument has the wrong type.
        """
        if declaration.name != self.name:
            raise UnknownFunctionError(self.name, [declaration.name])
        if declaration.parameters is not None:
            declaration.parameters.validate_value(self.args)


class FunctionResponse(WireModel):
    """The result of a locally executed function, sent back to the model."""

    id: Optional[str] = None
    name: str
    response: Dict[str, Any] = Field(default_factory=dict)


class Part(WireModel):
    """One piece of a turn: text, a function call or a function response.

    At most one typed field is set. Part kinds this client does not model
    (e.g. executableCode) and part-level metadata are kept as extra fields,
    so they are sent back unchanged; the projections skip them.
    """

    model_config = ConfigDict(extra="allow")

    text: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None

    @model_validator(mode="after")
    def _check_single_kind(self) -> "Part":
        kinds = [
            kind
            for kind, value in (
                ("text", self.text),
                ("function_call", self.function_call),
                ("function_response", self.function_response),
            )
            if value is not None
        ]
        if len(kinds) > 1:
            raise ValueError(f"A part holds exactly one kind of data, got {kinds}")
        return self

    def is_empty(self) -> bool:
        """True when the part carries neither a typed field nor any extra data."""
        return (
            self.text is None
            and self.function_call is None
            and self.function_response is None
            and not self.model_extra
        )

    @classmethod
    def from_text(cls, value: str) -> "Part":
        return cls(text=value)

    @classmethod
    def from_function_call(cls, call: FunctionCall) -> "Part":
        return cls(function_call=call)

    @classmethod
    def from_function_response(cls, response: FunctionResponse) -> "Part":
        return cls(function_response=response)


PartLike = Union[str, Part, FunctionCall, FunctionResponse]


def text(value: str) -> Part:
    """Build a text part."""
    return Part.from_text(value)


def to_part(value: PartLike) -> Part:
    if isinstance(value, Part):
        return value
    if isinstance(value, str):
        return Part.from_text(value)
    if isinstance(value, FunctionResponse):
        return Part.from_function_response(value)
    if isinstance(value, FunctionCall):
        return Part.from_function_call(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a Part")


def function_calls_in(parts: List[Part]) -> List[FunctionCall]:
    return [part.function_call for part in parts if part.function_call is not None]


def function_responses_in(parts: List[Part]) -> List[FunctionResponse]:
    return [part.function_response for part in parts if part.function_response is not None]


def joined_text(parts: List[Part]) -> str:
    return "".join(part.text for part in parts if part.text is not None)


class Content(WireModel):
    """One turn of a conversation."""

    role: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)

    def function_calls(self) -> List[FunctionCall]:
        return function_calls_in(self.parts)

    def function_responses(self) -> List[FunctionResponse]:
        return function_responses_in(self.parts)

    def text(self) -> str:
        return joined_text(self.parts)


class Candidate(WireModel):
    """One alternative completion."""

    index: Optional[int] = None
    content: Optional[Content] = None
    finish_reason: Optional[str] = None

    def function_calls(self) -> List[FunctionCall]:
        if self.content is None:
            return []
        return self.content.function_calls()

    def text(self) -> str:
        if self.content is None:
            return ""
        return self.content.text()


class UsageMetadata(WireModel):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


class PromptFeedback(WireModel):
    block_reason: Optional[str] = None


class GenerateContentResponse(WireModel):
    """Response of one generateContent exchange."""

    candidates: List[Candidate] = Field(default_factory=list)
    prompt_feedback: Optional[PromptFeedback] = None
    usage_metadata: Optional[UsageMetadata] = None
    model_version: Optional[str] = None

    def parts(self) -> List[Part]:
        """Parts of the first candidate, empty when there is none."""
        if not self.candidates or self.candidates[0].content is None:
            return []
        return list(self.candidates[0].content.parts)

    def function_calls(self) -> List[FunctionCall]:
        """Function calls of the first candidate, in order."""
        return function_calls_in(self.parts())

    def text(self) -> str:
        """Concatenated text parts of the first candidate."""
        return joined_text(self.parts())
