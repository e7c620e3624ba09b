"""
Function Calling Utilities.

This module provides:
- Schema conversion from JSON Schema / OpenAI tool dicts to FunctionDeclaration models
- The function calling mode contract checked on every model turn
- Pending call tracking for matching FunctionResponses to the calls they answer
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from config import CALL_ID_HEX_LENGTH, CALL_ID_PREFIX
from config.settings import FUNCTION_CALLING_DEBUG
from logging_utils.fc_debug import FCModule, get_fc_logger
from models import (
    FunctionCall,
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionDeclaration,
    FunctionResponse,
    ModeViolationError,
    Tool,
    ToolConfig,
    UnknownFunctionError,
)

logger = logging.getLogger("GenAIClient")

# FC debug logger for schema conversion and contract checks
fc_logger = get_fc_logger()


# =============================================================================
# Schema Conversion: JSON Schema / OpenAI tools -> FunctionDeclaration
# =============================================================================


class SchemaConversionError(Exception):
    """Raised when schema conversion fails."""

    pass


class SchemaConverter:
    """Converts OpenAI-style tool definitions to FunctionDeclaration models.

    OpenAI Format:
    ```json
    {
        "type": "function",
        "function": {
            "name": "get_weather",
            "description": "Get weather for a location",
            "parameters": {
                "type": "object",
                "properties": {"location": {"type": "string"}},
                "required": ["location"]
            },
            "strict": true  # <-- Stripped (not supported)
        }
    }
    ```

    The flat format (``{"type": "function", "name": ..., "parameters": ...}``)
    is accepted too. Parameters go through a whitelist: only the keywords the
    Schema model carries survive, everything else is dropped.
    """

    ALLOWED_SCHEMA_FIELDS = {
        "type",
        "format",
        "description",
        "nullable",
        "enum",
        "items",
        "properties",
        "required",
    }

    # Fields that require special handling (recursion, conversion)
    SPECIAL_FIELDS = {"type", "properties", "items", "required", "enum", "anyOf", "const", "oneOf", "allOf"}

    TYPE_MAP = {
        "string": "STRING",
        "integer": "INTEGER",
        "number": "NUMBER",
        "boolean": "BOOLEAN",
        "array": "ARRAY",
        "object": "OBJECT",
    }

    def convert_tool(self, openai_tool: Mapping[str, Any]) -> Optional[FunctionDeclaration]:
        """Convert a single tool definition to a FunctionDeclaration.

        Args:
            openai_tool: OpenAI tool definition (nested or flat).

        Returns:
            The declaration, or None if the tool is not a function tool.

        Raises:
            SchemaConversionError: If the tool is a function but the format is invalid.
        """
        if not isinstance(openai_tool, Mapping):
            return None

        tool_type = openai_tool.get("type")
        if tool_type != "function":
            if FUNCTION_CALLING_DEBUG:
                logger.debug(f"Ignoring non-function tool type: {tool_type}")
            return None

        function_def = openai_tool.get("function")
        source = function_def if isinstance(function_def, Mapping) else openai_tool

        name = source.get("name")
        if not name or not isinstance(name, str):
            raise SchemaConversionError("Function 'name' is required and must be a string")

        fc_logger.debug(FCModule.SCHEMA, f"Converting tool: {name}")

        description = source.get("description")
        parameters = source.get("parameters")
        clean_params: Optional[Dict[str, Any]] = None
        if parameters and isinstance(parameters, Mapping):
            clean_params = self._clean_parameters(parameters)
            # Zero-argument functions are often declared as an empty object
            if not clean_params.get("properties"):
                clean_params = None

        try:
            declaration = FunctionDeclaration(
                name=name,
                description=description if isinstance(description, str) and description else None,
                parameters=clean_params,
            )
        except ValidationError as e:
            raise SchemaConversionError(f"Invalid function '{name}': {e}") from e

        if FUNCTION_CALLING_DEBUG:
            logger.debug(
                f"Converted tool '{name}': {json.dumps(declaration.to_wire(), ensure_ascii=False)}"
            )
        return declaration

    def convert_tools(self, openai_tools: Sequence[Mapping[str, Any]]) -> List[FunctionDeclaration]:
        """Convert a list of tool definitions, skipping non-function tools.

        Raises:
            SchemaConversionError: If any tool conversion fails or tools is not a list.
        """
        if not isinstance(openai_tools, (list, tuple)):
            raise SchemaConversionError(f"Tools must be a list, got {type(openai_tools).__name__}")

        declarations: List[FunctionDeclaration] = []
        for i, tool in enumerate(openai_tools):
            try:
                declaration = self.convert_tool(tool)
            except SchemaConversionError as e:
                raise SchemaConversionError(f"Error converting tool at index {i}: {e}") from e
            if declaration:
                declarations.append(declaration)

        fc_logger.info(FCModule.SCHEMA, f"Converted {len(declarations)} tool definition(s)")
        return declarations

    def to_tool(self, openai_tools: Sequence[Mapping[str, Any]]) -> Tool:
        """Convert a list of tool definitions into one Tool."""
        try:
            return Tool(function_declarations=self.convert_tools(openai_tools))
        except ValidationError as e:
            raise SchemaConversionError(str(e)) from e

    def _clean_parameters(self, schema: Mapping[str, Any]) -> Dict[str, Any]:
        """Reduce a JSON Schema to the keywords the Schema model accepts.

        Handles:
        - Type normalization (list to single type + nullable, upper-case names)
        - Conversion: const -> enum, anyOf/oneOf/allOf -> first non-null option
        - Type inference when "type" is missing
        - Recursive cleaning of properties and items
        """
        if not isinstance(schema, Mapping):
            return {"type": "STRING"}

        cleaned: Dict[str, Any] = {}

        # 1. Logic operators: keep the first non-null option
        for logic_field in ("anyOf", "oneOf", "allOf"):
            options = schema.get(logic_field)
            if isinstance(options, list) and options:
                for option in options:
                    if isinstance(option, Mapping) and option.get("type") != "null":
                        cleaned.update(self._clean_parameters(option))
                        break
                if any(isinstance(o, Mapping) and o.get("type") == "null" for o in options):
                    cleaned["nullable"] = True
                if "description" in schema and "description" not in cleaned:
                    cleaned["description"] = schema["description"]
                if cleaned:
                    return cleaned

        # 2. Type normalization: ["string", "null"] -> "STRING" + nullable
        raw_type = schema.get("type")
        nullable = bool(schema.get("nullable", False))
        if isinstance(raw_type, list):
            if "null" in raw_type:
                nullable = True
            types = [t for t in raw_type if t != "null"]
            raw_type = types[0] if types else None
        if not isinstance(raw_type, str):
            raw_type = self._infer_type(schema)
        cleaned["type"] = self.TYPE_MAP.get(raw_type.lower(), raw_type.upper())
        if nullable:
            cleaned["nullable"] = True

        # 3. Enum / const, STRING schemas only
        if cleaned["type"] == "STRING":
            if "const" in schema:
                cleaned["enum"] = [str(schema["const"])]
            elif isinstance(schema.get("enum"), list):
                cleaned["enum"] = [str(value) for value in schema["enum"] if value is not None]

        # 4. Properties and required (objects)
        if cleaned["type"] == "OBJECT" and isinstance(schema.get("properties"), Mapping):
            cleaned["properties"] = {
                prop_name: self._clean_parameters(prop_schema)
                for prop_name, prop_schema in schema["properties"].items()
            }
            required = schema.get("required")
            if isinstance(required, list):
                cleaned["required"] = [name for name in required if name in cleaned["properties"]]

        # 5. Items (arrays)
        if cleaned["type"] == "ARRAY" and isinstance(schema.get("items"), Mapping):
            cleaned["items"] = self._clean_parameters(schema["items"])

        # 6. Copy the remaining whitelisted fields as-is
        for key, value in schema.items():
            if key in self.SPECIAL_FIELDS or key not in self.ALLOWED_SCHEMA_FIELDS:
                continue
            if key == "nullable":
                continue
            cleaned.setdefault(key, value)

        return cleaned

    @staticmethod
    def _infer_type(schema: Mapping[str, Any]) -> str:
        if "properties" in schema:
            return "object"
        if "items" in schema:
            return "array"
        return "string"


# =============================================================================
# Function Calling Mode Contract
# =============================================================================


def check_function_call_contract(
    calls: Sequence[FunctionCall],
    tool_config: Optional[ToolConfig],
    declarations: Mapping[str, FunctionDeclaration],
) -> None:
    """Check a model turn's function calls against the requested policy.

    Args:
        calls: Function calls of the candidate, in order.
        tool_config: The tool config the request was sent with.
        declarations: Declared functions by name.

    Raises:
        ModeViolationError: Calls under NONE, no call under ANY, or a call
            outside allowed_function_names.
        UnknownFunctionError: A call names an undeclared function.
    """
    # An absent tool config means AUTO
    tool_config = tool_config or ToolConfig()
    mode = tool_config.mode
    names = [call.name for call in calls]

    if mode is FunctionCallingMode.NONE and calls:
        raise ModeViolationError(
            mode, names, f"Model returned {len(calls)} function call(s) {names} while mode is NONE"
        )
    if mode is FunctionCallingMode.ANY and not calls:
        raise ModeViolationError(mode, names, "Model returned no function call while mode is ANY")

    for call in calls:
        if call.name not in declarations:
            raise UnknownFunctionError(call.name, declarations.keys())

    fc_config: Optional[FunctionCallingConfig] = tool_config.function_calling_config
    if fc_config is not None and fc_config.allowed_function_names is not None:
        disallowed = [name for name in names if name not in fc_config.allowed_function_names]
        if disallowed:
            raise ModeViolationError(
                mode,
                names,
                f"Model called {disallowed}, outside allowed_function_names {fc_config.allowed_function_names}",
            )

    if calls:
        fc_logger.debug(FCModule.SESSION, f"Contract ok: mode={mode.value} calls={names}")


# =============================================================================
# Pending Call Tracking
# =============================================================================


@dataclass
class PendingCall:
    """A function call of the last model turn awaiting its response.

    Attributes:
        call_id: Identifier; the call's own id when the service sent one,
            otherwise generated (call_<hex>).
        function_name: Name of the function being called.
        arguments: Arguments passed to the function.
        timestamp: Unix timestamp when the call was registered.
    """

    call_id: str
    function_name: str
    arguments: Dict[str, Any]
    timestamp: float = field(default_factory=time.time)


class PendingCallTracker:
    """Tracks the function calls of the last model turn of a chat session.

    Each FunctionResponse sent back must answer one of these calls, matched
    by id when the response carries one, otherwise by function name in call
    order. Registering a new model turn replaces the pending set.
    """

    def __init__(self) -> None:
        self._pending_calls: Dict[str, PendingCall] = {}

    @staticmethod
    def generate_id() -> str:
        """Generate a call ID in format: call_<24-character-hex>."""
        return f"{CALL_ID_PREFIX}{uuid.uuid4().hex[:CALL_ID_HEX_LENGTH]}"

    def register_calls(self, calls: Sequence[FunctionCall]) -> List[PendingCall]:
        """Replace the pending set with the calls of a new model turn."""
        self._pending_calls = {}
        registered: List[PendingCall] = []
        for call in calls:
            pending = PendingCall(
                call_id=call.id or self.generate_id(),
                function_name=call.name,
                arguments=dict(call.args),
            )
            self._pending_calls[pending.call_id] = pending
            registered.append(pending)
        if registered:
            fc_logger.debug(
                FCModule.SESSION,
                f"Registered pending call(s): {[(p.call_id, p.function_name) for p in registered]}",
            )
        return registered

    def get_pending_calls(self) -> List[PendingCall]:
        return list(self._pending_calls.values())

    def match_responses(
        self, responses: Sequence[FunctionResponse]
    ) -> Tuple[List[PendingCall], List[PendingCall]]:
        """Match responses to pending calls without modifying the tracker.

        Returns:
            Tuple of (answered calls in response order, calls left unanswered).

        Raises:
            UnknownFunctionError: A response matches no pending call.
        """
        remaining = list(self._pending_calls.values())
        answered: List[PendingCall] = []
        for response in responses:
            match = None
            for pending in remaining:
                if response.id is not None and response.id != pending.call_id:
                    continue
                if pending.function_name == response.name:
                    match = pending
                    break
            if match is None:
                raise UnknownFunctionError(
                    response.name,
                    [p.function_name for p in self._pending_calls.values()],
                    message=(
                        f"FunctionResponse '{response.name}' does not answer any pending function call; "
                        f"pending: {[p.function_name for p in remaining] or 'none'}"
                    ),
                )
            remaining.remove(match)
            answered.append(match)
        return answered, remaining

    def clear(self) -> None:
        self._pending_calls.clear()


__all__ = [
    # Schema Conversion
    "SchemaConverter",
    "SchemaConversionError",
    # Mode contract
    "check_function_call_contract",
    # Pending calls
    "PendingCall",
    "PendingCallTracker",
]
