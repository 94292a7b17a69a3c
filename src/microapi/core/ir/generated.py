"""
Target-neutral shapes of synthesized declarations.

The synthesizers build these from descriptors; a rendering target turns
them into source text. Member order is always source declaration order.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .descriptors import HttpVerb, RequestEnvelopeDescriptor
from .types import TypeDescriptor
from .values import Annotation

# Preferred names of the parameters a generated controller adds itself;
# suffixed when an operation already uses them
ENVELOPE_PARAMETER = "request"
SERVICE_PARAMETER = "service"


class ParameterSource(str, Enum):
    """Where the web framework reads a generated parameter from."""

    ROUTE = "route"
    QUERY = "query"
    BODY = "body"


class GeneratedParameter(BaseModel):
    name: str
    type: TypeDescriptor
    source: ParameterSource

    model_config = ConfigDict(frozen=True)


class CallArgument(BaseModel):
    """
    One argument of the call through to the service.

    ``envelope_field`` is set when the value is read from the request
    envelope rather than passed directly.
    """

    name: str
    envelope_field: str | None = None

    model_config = ConfigDict(frozen=True)


class GeneratedMethod(BaseModel):
    name: str
    source_member_name: str
    http_verb: HttpVerb
    route_template: str
    return_type: TypeDescriptor
    parameters: tuple[GeneratedParameter, ...] = ()
    call_arguments: tuple[CallArgument, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    request_envelope: RequestEnvelopeDescriptor | None = None

    model_config = ConfigDict(frozen=True)


class ControllerDeclaration(BaseModel):
    """A synthesized controller plus the envelopes its operations need."""

    source_identity: str
    controller_name: str
    type_name: str
    namespace: str
    dto_namespace: str
    service_type: TypeDescriptor
    service_name: str = SERVICE_PARAMETER
    methods: tuple[GeneratedMethod, ...] = ()
    envelopes: tuple[RequestEnvelopeDescriptor, ...] = ()

    model_config = ConfigDict(frozen=True)


class GeneratedProperty(BaseModel):
    name: str
    type: TypeDescriptor
    annotations: tuple[Annotation, ...] = ()
    initializer: str | None = None

    model_config = ConfigDict(frozen=True)


class DtoDeclaration(BaseModel):
    """The generated half of a partial projection declaration."""

    source_identity: str
    name: str
    namespace: str
    entity_type: TypeDescriptor
    properties: tuple[GeneratedProperty, ...] = ()

    model_config = ConfigDict(frozen=True)
