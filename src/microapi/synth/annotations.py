"""
Annotation resolver.

Reads positional and named configuration out of an annotation with
type-directed coercion, and formats values back into source literals
for propagation.

Formatting rules:
- null, booleans, strings, and chars use the target's literal tokens
- type references render as a type-reference expression over the
  fully-qualified name
- arrays render as a bracketed list of formatted elements, or as the
  empty string when the array has no elements, meaning the argument is
  omitted entirely
- other values use their literal text
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from microapi.core.errors import ResolutionError
from microapi.core.ir import (
    Annotation,
    ArrayValue,
    BoolValue,
    CharValue,
    EnumLiteralValue,
    NullValue,
    PrimitiveValue,
    StringValue,
    TypeDescriptor,
    TypeRefValue,
    Value,
)


def matches_marker(annotation: Annotation, names: Collection[str]) -> bool:
    """Match by simple name; generic-arity variants match too."""
    return annotation.simple_name in names


def find_marker(annotations: Collection[Annotation], names: Collection[str]) -> Annotation | None:
    """First annotation matching any of the marker names."""
    return next((a for a in annotations if matches_marker(a, names)), None)


class AnnotationReader:
    """
    Typed access to an annotation's configuration values.

    ``at`` is either a positional index or a named key.

    Example:
        reader = AnnotationReader(annotation)
        route = reader.string(0)
        method_name = reader.string("MethodName")
        ignored = reader.strings("IgnoredProperties")
    """

    def __init__(self, annotation: Annotation):
        self.annotation = annotation

    def positional(self, index: int) -> Value | None:
        if 0 <= index < len(self.annotation.positional):
            return self.annotation.positional[index]
        return None

    def named(self, key: str) -> Value | None:
        return self.annotation.named.get(key)

    def value(self, at: int | str) -> Value | None:
        """Raw value; null values read as absent."""
        value = self.positional(at) if isinstance(at, int) else self.named(at)
        if isinstance(value, NullValue):
            return None
        return value

    def string(self, at: int | str) -> str | None:
        value = self.value(at)
        if value is None:
            return None
        if isinstance(value, StringValue | CharValue):
            return value.value
        raise ResolutionError(
            f"{self.annotation.kind}: expected a string for {at!r}, got {value.kind}"
        )

    def type(self, at: int | str) -> TypeDescriptor | None:
        """Unwrap a type reference to the referenced type."""
        value = self.value(at)
        if value is None:
            return None
        if isinstance(value, TypeRefValue):
            return value.type
        raise ResolutionError(
            f"{self.annotation.kind}: expected a type reference for {at!r}, got {value.kind}"
        )

    def array(self, at: int | str) -> tuple[Value, ...] | None:
        """
        Array items with nulls filtered out.

        An empty array reads as absent.
        """
        value = self.value(at)
        if value is None:
            return None
        if not isinstance(value, ArrayValue):
            raise ResolutionError(
                f"{self.annotation.kind}: expected an array for {at!r}, got {value.kind}"
            )
        items = tuple(item for item in value.items if not isinstance(item, NullValue))
        return items or None

    def strings(self, at: int | str) -> tuple[str, ...]:
        """Non-empty strings of an array value."""
        items = self.array(at) or ()
        result: list[str] = []
        for item in items:
            if not isinstance(item, StringValue):
                raise ResolutionError(
                    f"{self.annotation.kind}: expected strings in {at!r}, got {item.kind}"
                )
            if item.value:
                result.append(item.value)
        return tuple(result)

    def types(self, at: int | str) -> tuple[TypeDescriptor, ...]:
        """Referenced types of an array value."""
        items = self.array(at) or ()
        result: list[TypeDescriptor] = []
        for item in items:
            if not isinstance(item, TypeRefValue):
                raise ResolutionError(
                    f"{self.annotation.kind}: expected type references in {at!r}, got {item.kind}"
                )
            result.append(item.type)
        return tuple(result)


@dataclass(frozen=True)
class LiteralStyle:
    """Literal tokens of a rendering target."""

    null: str
    true: str
    false: str
    char_quote: str
    type_ref: str
    array_open: str
    array_close: str
    named_separator: str


CSHARP_LITERALS = LiteralStyle(
    null="null",
    true="true",
    false="false",
    char_quote="'",
    type_ref="typeof({name})",
    array_open="new[] {",
    array_close="}",
    named_separator=" = ",
)

PYTHON_LITERALS = LiteralStyle(
    null="None",
    true="True",
    false="False",
    char_quote='"',
    type_ref="{name}",
    array_open="[",
    array_close="]",
    named_separator="=",
)


def quote_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_value(value: Value, style: LiteralStyle = CSHARP_LITERALS) -> str:
    """
    Format a value as a source literal.

    Returns the empty string for an empty array: the caller must omit
    the argument.
    """
    if isinstance(value, NullValue):
        return style.null
    if isinstance(value, ArrayValue):
        if not value.items:
            return ""
        items = ", ".join(format_value(item, style) for item in value.items)
        return f"{style.array_open}{items}{style.array_close}"
    if isinstance(value, TypeRefValue):
        return style.type_ref.format(name=str(value.type))
    if isinstance(value, StringValue):
        return quote_string(value.value)
    if isinstance(value, BoolValue):
        return style.true if value.value else style.false
    if isinstance(value, CharValue):
        q = style.char_quote
        char = value.value.replace("\\", "\\\\").replace(q, "\\" + q)
        return f"{q}{char}{q}"
    if isinstance(value, PrimitiveValue | EnumLiteralValue):
        return value.literal
    raise ResolutionError(f"Unsupported annotation value: {value!r}")


def format_arguments(annotation: Annotation, style: LiteralStyle = CSHARP_LITERALS) -> list[str]:
    """
    Format an annotation's arguments, positional first.

    Arguments that format to the empty string (empty arrays) are dropped.
    """
    args = [text for text in (format_value(v, style) for v in annotation.positional) if text]
    for key, value in annotation.named.items():
        text = format_value(value, style)
        if text:
            args.append(f"{key}{style.named_separator}{text}")
    return args
