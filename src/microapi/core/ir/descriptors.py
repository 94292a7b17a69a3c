"""
Resolved synthesis descriptors.

Descriptors are immutable snapshots produced by the metadata resolvers
and consumed by the synthesizers. They keep no reference into the
declaration graph beyond identity keys.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .location import SourceLocation
from .types import TypeDescriptor
from .values import Annotation


class HttpVerb(str, Enum):
    GET = "Get"
    POST = "Post"
    PUT = "Put"
    DELETE = "Delete"
    PATCH = "Patch"


class ParameterBinding(str, Enum):
    """How a source parameter is satisfied by the generated operation."""

    ROUTE_BOUND = "route_bound"
    FREE = "free"


class BoundParameter(BaseModel):
    """A source parameter with its route binding classification."""

    name: str
    type: TypeDescriptor
    binding: ParameterBinding

    model_config = ConfigDict(frozen=True)

    @property
    def is_route_bound(self) -> bool:
        return self.binding == ParameterBinding.ROUTE_BOUND


class RequestEnvelopeDescriptor(BaseModel):
    """Body carrier for the free parameters of a non-GET operation."""

    type_name: str
    fields: tuple[tuple[str, TypeDescriptor], ...]

    model_config = ConfigDict(frozen=True)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


class OperationDescriptor(BaseModel):
    """One HTTP-exposed method of a facade."""

    source_member_name: str
    http_verb: HttpVerb
    route_template: str
    route_param_names: frozenset[str] = frozenset()
    generated_method_name: str
    return_type: TypeDescriptor
    parameters: tuple[BoundParameter, ...] = ()
    request_envelope: RequestEnvelopeDescriptor | None = None
    propagated_annotations: tuple[Annotation, ...] = ()
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_get(self) -> bool:
        return self.http_verb == HttpVerb.GET


class FacadeDescriptor(BaseModel):
    """Everything needed to synthesize one controller."""

    source_identity: str
    controller_name: str
    service_type: TypeDescriptor
    controller_namespace: str
    dto_namespace: str
    operations: tuple[OperationDescriptor, ...] = ()

    model_config = ConfigDict(frozen=True)


class DtoDescriptor(BaseModel):
    """Everything needed to synthesize one projection declaration."""

    source_identity: str
    name: str
    namespace: str
    entity_type: TypeDescriptor
    ignored_properties: frozenset[str] = frozenset()
    ignored_attribute_types: frozenset[TypeDescriptor] = frozenset()
    explicit_member_names: frozenset[str] = frozenset()

    model_config = ConfigDict(frozen=True)
