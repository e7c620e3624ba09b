"""
Schema model for function declaration parameters.

A Schema describes the JSON shape a declared function expects for its
arguments. It is sent to the remote model as part of the FunctionDeclaration,
and it is used locally to check the arguments of a returned FunctionCall.
Validation never coerces: a value either conforms or raises a typed error.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import model_validator

from .base import WireModel
from .exceptions import ArgumentTypeError, MissingRequiredFieldError


class Type(str, Enum):
    """Schema data types, as the remote service spells them."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Type"]:
        # JSON Schema spells types in lower case
        if isinstance(value, str):
            upper = value.upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class Schema(WireModel):
    """Typed description of a JSON value.

    Attributes:
        type: The data type of the value.
        format: Optional format hint (e.g. "date-time", "float").
        description: Human-readable description shown to the model.
        nullable: Whether null is accepted.
        enum: Allowed values, STRING schemas only.
        items: Element schema, ARRAY schemas only.
        properties: Property schemas, OBJECT schemas only.
        required: Property names that must be present, OBJECT schemas only.
    """

    type: Type
    format: Optional[str] = None
    description: Optional[str] = None
    nullable: Optional[bool] = None
    enum: Optional[List[str]] = None
    items: Optional["Schema"] = None
    properties: Optional[Dict[str, "Schema"]] = None
    required: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "Schema":
        if self.enum is not None and self.type is not Type.STRING:
            raise ValueError(f"'enum' is only allowed on STRING schemas, not {self.type.value}")
        if self.items is not None and self.type is not Type.ARRAY:
            raise ValueError(f"'items' is only allowed on ARRAY schemas, not {self.type.value}")
        if self.type is not Type.OBJECT and (self.properties is not None or self.required is not None):
            raise ValueError(
                f"'properties' and 'required' are only allowed on OBJECT schemas, not {self.type.value}"
            )
        if self.required:
            known = set(self.properties or {})
            missing = [name for name in self.required if name not in known]
            if missing:
                raise ValueError(f"'required' names undeclared properties: {missing}")
        return self

    def validate_value(self, value: Any, path: str = "") -> None:
        """Check ``value`` against this schema.

        Args:
            value: The received value, typically FunctionCall.args.
            path: Dotted argument path used in error messages.

        Raises:
            MissingRequiredFieldError: A required object property is absent.
            ArgumentTypeError: A value has the wrong type or is not an allowed enum value.
        """
        label = path or "<root>"

        if value is None:
            if self.nullable:
                return
            raise ArgumentTypeError(label, self.type.value, value)

        if self.type is Type.STRING:
            if not isinstance(value, str):
                raise ArgumentTypeError(label, "STRING", value)
            if self.enum is not None and value not in self.enum:
                raise ArgumentTypeError(label, f"one of {self.enum}", value)

        elif self.type is Type.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ArgumentTypeError(label, "NUMBER", value)

        elif self.type is Type.INTEGER:
            if not is_integral(value):
                raise ArgumentTypeError(label, "INTEGER", value)

        elif self.type is Type.BOOLEAN:
            if not isinstance(value, bool):
                raise ArgumentTypeError(label, "BOOLEAN", value)

        elif self.type is Type.ARRAY:
            if not isinstance(value, list):
                raise ArgumentTypeError(label, "ARRAY", value)
            if self.items is not None:
                for index, item in enumerate(value):
                    self.items.validate_value(item, f"{path}[{index}]")

        elif self.type is Type.OBJECT:
            if not isinstance(value, dict):
                raise ArgumentTypeError(label, "OBJECT", value)
            for name in self.required or []:
                if name not in value:
                    raise MissingRequiredFieldError(_join(path, name))
            for name, prop_schema in (self.properties or {}).items():
                if name in value:
                    prop_schema.validate_value(value[name], _join(path, name))


def is_integral(value: Any) -> bool:
    """True for ints and integral floats (JSON decoders may yield 3.0), never for bools."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


Schema.model_rebuild()
