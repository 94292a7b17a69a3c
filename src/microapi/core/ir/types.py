"""
Type descriptors for the MicroAPI IR.

A type descriptor is a recursive value describing a host type:

- PrimitiveType: built-in scalar (int, string, bool, ...)
- NamedType: a declared type, by fully-qualified name
- NullableType: wraps another descriptor
- ContainerType: generic type applied to ordered type arguments

Rendering is done by the synthesis targets; the helpers here only
inspect the tree.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PrimitiveType(BaseModel):
    """A built-in scalar type, e.g. ``int`` or ``string``."""

    kind: Literal["primitive"] = "primitive"
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class NamedType(BaseModel):
    """A reference to a declared type by fully-qualified name."""

    kind: Literal["named"] = "named"
    name: str = Field(description="Fully-qualified name, e.g. 'Shop.Models.User'")

    model_config = ConfigDict(frozen=True)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def __str__(self) -> str:
        return self.name


class NullableType(BaseModel):
    """A nullable wrapper around another type."""

    kind: Literal["nullable"] = "nullable"
    inner: TypeDescriptor

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.inner}?"


class ContainerType(BaseModel):
    """
    A generic type applied to type arguments.

    Example: ``List<User?>`` is
    ContainerType(name="System.Collections.Generic.List",
                  args=(NullableType(inner=NamedType(name="User")),))
    """

    kind: Literal["container"] = "container"
    name: str
    args: tuple[TypeDescriptor, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def __str__(self) -> str:
        return f"{self.name}<{', '.join(str(a) for a in self.args)}>"


TypeDescriptor = PrimitiveType | NamedType | NullableType | ContainerType


def strip_nullable(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Remove any nullable wrappers."""
    while isinstance(descriptor, NullableType):
        descriptor = descriptor.inner
    return descriptor


def is_nullable(descriptor: TypeDescriptor) -> bool:
    return isinstance(descriptor, NullableType)


def declared_name(descriptor: TypeDescriptor) -> str | None:
    """
    Get the fully-qualified name a descriptor points at.

    Returns None for primitives; nullable wrappers are looked through.
    """
    descriptor = strip_nullable(descriptor)
    if isinstance(descriptor, NamedType | ContainerType):
        return descriptor.name
    return None


NullableType.model_rebuild()
ContainerType.model_rebuild()
