import re
from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import Field, field_validator, model_validator

from .base import WireModel
from .schema import Schema, Type

# Function names the remote service accepts.
FUNCTION_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]{0,63}$")


class FunctionDeclaration(WireModel):
    """A callable function the client exposes to the model.

    Attributes:
        name: Function name, unique across all tools of a model.
        description: What the function does; the model selects on this.
        parameters: OBJECT schema of the arguments, None for no arguments.
    """

    name: str
    description: Optional[str] = None
    parameters: Optional[Schema] = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not FUNCTION_NAME_PATTERN.match(value):
            raise ValueError(
                f"Invalid function name {value!r}: must start with a letter or underscore, "
                "contain only letters, digits, '_', '.', '-' and be at most 64 characters"
            )
        return value

    @field_validator("parameters")
    @classmethod
    def _check_parameters(cls, value: Optional[Schema]) -> Optional[Schema]:
        if value is not None and value.type is not Type.OBJECT:
            raise ValueError(f"Function parameters must be an OBJECT schema, got {value.type.value}")
        return value


class Tool(WireModel):
    """An ordered group of function declarations offered to the model as one unit."""

    function_declarations: List[FunctionDeclaration] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "Tool":
        seen = set()
        for declaration in self.function_declarations:
            if declaration.name in seen:
                raise ValueError(f"Duplicate function name in tool: {declaration.name}")
            seen.add(declaration.name)
        return self


class FunctionCallingMode(str, Enum):
    """Function calling policy sent to the remote model.

    - AUTO: the model may call zero or more declared functions or answer in text
    - ANY: the model must call at least one declared function
    - NONE: the model must not call any function
    """

    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"

    @classmethod
    def _missing_(cls, value: object) -> Optional["FunctionCallingMode"]:
        if isinstance(value, str):
            upper = value.upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class FunctionCallingConfig(WireModel):
    """Function calling behaviour.

    Attributes:
        mode: The function calling mode.
        allowed_function_names: Restricts which functions may be called, ANY mode only.
    """

    mode: FunctionCallingMode = FunctionCallingMode.AUTO
    allowed_function_names: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_allowed_names(self) -> "FunctionCallingConfig":
        if self.allowed_function_names is not None and self.mode is not FunctionCallingMode.ANY:
            raise ValueError("allowed_function_names is only valid with FunctionCallingMode.ANY")
        return self


class ToolConfig(WireModel):
    function_calling_config: Optional[FunctionCallingConfig] = None

    @property
    def mode(self) -> FunctionCallingMode:
        """Effective mode; an absent config means AUTO."""
        if self.function_calling_config is None:
            return FunctionCallingMode.AUTO
        return self.function_calling_config.mode


def build_declaration_index(tools: Sequence[Tool]) -> Dict[str, FunctionDeclaration]:
    """Index declarations by name across tools, preserving declaration order.

    Raises:
        ValueError: If a function name is declared more than once.
    """
    index: Dict[str, FunctionDeclaration] = {}
    for tool in tools:
        for declaration in tool.function_declarations:
            if declaration.name in index:
                raise ValueError(f"Duplicate function name: {declaration.name}")
            index[declaration.name] = declaration
    return index
