"""
Controller synthesizer.

Builds the generated controller declaration from a FacadeDescriptor:
one generated method per operation, parameter wiring per verb, and the
request envelopes non-GET operations need for their free parameters.
"""

from __future__ import annotations

from collections.abc import Collection

from microapi.core.ir import (
    ENVELOPE_PARAMETER,
    SERVICE_PARAMETER,
    CallArgument,
    ControllerDeclaration,
    FacadeDescriptor,
    GeneratedMethod,
    GeneratedParameter,
    HttpVerb,
    NamedType,
    OperationDescriptor,
    ParameterSource,
    RequestEnvelopeDescriptor,
)

from .routes import RouteBinding

ASYNC_SUFFIX = "Async"
CONTROLLER_SUFFIX = "Controller"
ENVELOPE_SUFFIX = "Request"


def trim_async_suffix(name: str) -> str:
    if name.endswith(ASYNC_SUFFIX) and len(name) > len(ASYNC_SUFFIX):
        return name[: -len(ASYNC_SUFFIX)]
    return name


def unique_name(base: str, taken: Collection[str] = ()) -> str:
    """First of ``base``, ``base2``, ``base3``... not in taken."""
    name = base
    counter = 2
    while name in taken:
        name = f"{base}{counter}"
        counter += 1
    return name


def envelope_type_name(source_member_name: str, taken: Collection[str] = ()) -> str:
    """
    Name of the request envelope for a method.

    ``CreateUserAsync`` -> ``CreateUserRequest``. Overloads that would
    collide get a numeric suffix.
    """
    return unique_name(trim_async_suffix(source_member_name) + ENVELOPE_SUFFIX, taken)


def plan_request_envelope(
    verb: HttpVerb,
    source_member_name: str,
    binding: RouteBinding,
    taken: Collection[str] = (),
) -> RequestEnvelopeDescriptor | None:
    """
    Decide whether an operation needs a request envelope.

    An envelope is built iff the verb is not GET and at least one
    parameter is free. Fields are the free parameters in declared order,
    named verbatim.
    """
    if verb == HttpVerb.GET:
        return None
    free = binding.free_parameters
    if not free:
        return None
    return RequestEnvelopeDescriptor(
        type_name=envelope_type_name(source_member_name, taken),
        fields=tuple((p.name, p.type) for p in free),
    )


def qualify(namespace: str, name: str) -> str:
    return f"{namespace}.{name}" if namespace else name


class ControllerSynthesizer:
    """Turns a FacadeDescriptor into a ControllerDeclaration."""

    def build(self, descriptor: FacadeDescriptor) -> ControllerDeclaration:
        # the service is shared by every method, so it avoids all their parameters
        service_name = unique_name(
            SERVICE_PARAMETER,
            {p.name for op in descriptor.operations for p in op.parameters},
        )
        methods = tuple(
            self.build_method(op, descriptor.dto_namespace, service_name)
            for op in descriptor.operations
        )
        envelopes = tuple(
            op.request_envelope for op in descriptor.operations if op.request_envelope is not None
        )
        return ControllerDeclaration(
            source_identity=descriptor.source_identity,
            controller_name=descriptor.controller_name,
            type_name=descriptor.controller_name + CONTROLLER_SUFFIX,
            namespace=descriptor.controller_namespace,
            dto_namespace=descriptor.dto_namespace,
            service_type=descriptor.service_type,
            service_name=service_name,
            methods=methods,
            envelopes=envelopes,
        )

    def build_method(
        self,
        op: OperationDescriptor,
        dto_namespace: str,
        service_name: str = SERVICE_PARAMETER,
    ) -> GeneratedMethod:
        """
        Wire one operation.

        GET: every parameter is generated, from the route when route-bound,
        else from the query string; arguments pass through unchanged.

        Other verbs: route-bound parameters, then the envelope (if any) from
        the body; arguments keep the original order, free parameters read
        from the envelope.

        Generated parameter names never shadow the operation's own.
        """
        parameters: list[GeneratedParameter] = []
        arguments: list[CallArgument] = []

        if op.is_get:
            for p in op.parameters:
                source = ParameterSource.ROUTE if p.is_route_bound else ParameterSource.QUERY
                parameters.append(GeneratedParameter(name=p.name, type=p.type, source=source))
                arguments.append(CallArgument(name=p.name))
        else:
            for p in op.parameters:
                if p.is_route_bound:
                    parameters.append(
                        GeneratedParameter(name=p.name, type=p.type, source=ParameterSource.ROUTE)
                    )
            envelope = op.request_envelope
            envelope_parameter = unique_name(
                ENVELOPE_PARAMETER, {p.name for p in op.parameters} | {service_name}
            )
            if envelope is not None:
                parameters.append(
                    GeneratedParameter(
                        name=envelope_parameter,
                        type=NamedType(name=qualify(dto_namespace, envelope.type_name)),
                        source=ParameterSource.BODY,
                    )
                )
            for p in op.parameters:
                if p.is_route_bound or envelope is None:
                    arguments.append(CallArgument(name=p.name))
                else:
                    arguments.append(CallArgument(name=envelope_parameter, envelope_field=p.name))

        return GeneratedMethod(
            name=op.generated_method_name,
            source_member_name=op.source_member_name,
            http_verb=op.http_verb,
            route_template=op.route_template,
            return_type=op.return_type,
            parameters=tuple(parameters),
            call_arguments=tuple(arguments),
            annotations=op.propagated_annotations,
            request_envelope=op.request_envelope,
        )
