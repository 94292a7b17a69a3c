"""
Annotation values for the MicroAPI IR.

Annotations carry positional and named configuration values. Each value
is one of a closed set of literal kinds, mirroring what a host compiler
can place in an annotation argument.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import TypeDescriptor

# Generic suffixes seen on annotation identifiers: "Dto<User>", "Dto`1"
_GENERIC_SUFFIX = re.compile(r"(<.*>|`\d+)$")
_ATTRIBUTE_SUFFIX = "Attribute"


class NullValue(BaseModel):
    """The null literal."""

    kind: Literal["null"] = "null"

    model_config = ConfigDict(frozen=True)


class StringValue(BaseModel):
    kind: Literal["string"] = "string"
    value: str

    model_config = ConfigDict(frozen=True)


class BoolValue(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool

    model_config = ConfigDict(frozen=True)


class CharValue(BaseModel):
    kind: Literal["char"] = "char"
    value: str

    model_config = ConfigDict(frozen=True)

    @field_validator("value")
    @classmethod
    def validate_single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"char value must be exactly one character, got {v!r}")
        return v


class PrimitiveValue(BaseModel):
    """
    A numeric literal.

    ``text`` keeps the host's literal spelling (e.g. ``1.5m``) when it
    differs from Python's rendering of ``value``.
    """

    kind: Literal["primitive"] = "primitive"
    value: int | float
    text: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def literal(self) -> str:
        return self.text if self.text is not None else str(self.value)


class TypeRefValue(BaseModel):
    """A type reference, e.g. ``typeof(User)``."""

    kind: Literal["type"] = "type"
    type: TypeDescriptor

    model_config = ConfigDict(frozen=True)


class EnumLiteralValue(BaseModel):
    """An enum member, e.g. ``HttpStatusCode.NotFound``."""

    kind: Literal["enum"] = "enum"
    type: str
    member: str

    model_config = ConfigDict(frozen=True)

    @property
    def literal(self) -> str:
        return f"{self.type}.{self.member}"


class ArrayValue(BaseModel):
    kind: Literal["array"] = "array"
    items: tuple[Value, ...] = ()

    model_config = ConfigDict(frozen=True)


Value = (
    NullValue
    | StringValue
    | BoolValue
    | CharValue
    | PrimitiveValue
    | TypeRefValue
    | EnumLiteralValue
    | ArrayValue
)


class Annotation(BaseModel):
    """
    An annotation instance attached to a declaration or member.

    Attributes:
        kind: Annotation type identifier, usually fully qualified
        type_arguments: Type arguments when applied in generic form
        positional: Ordered positional (constructor) values
        named: Named values, in declaration order
    """

    kind: str
    type_arguments: tuple[TypeDescriptor, ...] = ()
    positional: tuple[Value, ...] = ()
    named: dict[str, Value] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def simple_name(self) -> str:
        """Identifier without namespace, generic suffix, or ``Attribute`` suffix."""
        return simple_annotation_name(self.kind)

    @property
    def is_generic(self) -> bool:
        return bool(self.type_arguments)


def simple_annotation_name(kind: str) -> str:
    """
    Normalize an annotation identifier for marker matching.

    Examples:
        "MicroAPI.HttpFacadeAttribute" -> "HttpFacade"
        "Dto<User>" -> "Dto"
        "DtoAttribute`1" -> "Dto"
    """
    name = _GENERIC_SUFFIX.sub("", kind.strip())
    name = name.rsplit(".", 1)[-1]
    if name.endswith(_ATTRIBUTE_SUFFIX) and len(name) > len(_ATTRIBUTE_SUFFIX):
        name = name[: -len(_ATTRIBUTE_SUFFIX)]
    return name


def strip_generic_suffix(kind: str) -> str:
    return _GENERIC_SUFFIX.sub("", kind.strip())


ArrayValue.model_rebuild()
TypeRefValue.model_rebuild()
Annotation.model_rebuild()
