"""
Declaration graph types for the MicroAPI IR.

These are the shapes the host supplies: declarations (classes and
interfaces), their members, member parameters, and the annotations
attached to both.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .location import SourceLocation
from .types import TypeDescriptor
from .values import Annotation

# Synthetic member emitted by the host for record equality
EQUALITY_CONTRACT = "EqualityContract"


class DeclarationKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"


class MemberKind(str, Enum):
    METHOD = "method"
    PROPERTY = "property"
    CONSTRUCTOR = "constructor"
    OTHER = "other"


class Parameter(BaseModel):
    """A method parameter."""

    name: str
    type: TypeDescriptor

    model_config = ConfigDict(frozen=True)


class Member(BaseModel):
    """
    A method or property of a declaration.

    Attributes:
        name: Member identifier
        kind: Method, property, constructor, ...
        type: Return type for methods, value type for properties
        parameters: Ordered parameters (methods only)
        annotations: Annotations applied to the member
        initializer: Literal initializer text as written in source, if any
        is_compiler_generated: Host-synthesized member (record machinery etc.)
    """

    name: str
    kind: MemberKind = MemberKind.METHOD
    type: TypeDescriptor
    parameters: tuple[Parameter, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    initializer: str | None = None
    is_compiler_generated: bool = False
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_method(self) -> bool:
        return self.kind == MemberKind.METHOD

    @property
    def is_property(self) -> bool:
        return self.kind == MemberKind.PROPERTY

    @property
    def is_equality_machinery(self) -> bool:
        return self.is_compiler_generated or self.name == EQUALITY_CONTRACT

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters)


class Declaration(BaseModel):
    """
    A class or interface declaration.

    The same identity may be reported several times when a declaration is
    split across source fragments; DeclarationGraph merges them.

    Attributes:
        identity: Fully-qualified name, the stable key
        name: Simple name (derived from identity when omitted)
        kind: Class or interface
        namespace: Containing namespace
        is_partial: Whether the declaration is open for generated members
        members: Ordered members
        annotations: Ordered annotations
        base_type: Single parent type, if any
        interfaces: Implemented interfaces in declared order
    """

    identity: str
    name: str = ""
    kind: DeclarationKind = DeclarationKind.CLASS
    namespace: str = ""
    is_partial: bool = False
    members: tuple[Member, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    base_type: TypeDescriptor | None = None
    interfaces: tuple[TypeDescriptor, ...] = ()
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def fill_names(cls, data: object) -> object:
        """Derive name and namespace from the identity when not given."""
        if isinstance(data, dict) and "identity" in data:
            data = dict(data)
            namespace, _, name = str(data["identity"]).rpartition(".")
            data.setdefault("name", name)
            data.setdefault("namespace", namespace)
        return data

    @property
    def is_interface(self) -> bool:
        return self.kind == DeclarationKind.INTERFACE

    @property
    def methods(self) -> list[Member]:
        return [m for m in self.members if m.is_method]

    @property
    def properties(self) -> list[Member]:
        return [m for m in self.members if m.is_property]


class GraphDocument(BaseModel):
    """Top-level document the host hands over: every declaration fragment."""

    declarations: list[Declaration] = Field(default_factory=list)
