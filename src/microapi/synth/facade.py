"""
Facade metadata resolver.

Turns a discovered facade declaration into a FacadeDescriptor: the
service type it delegates to, the controller name, the namespaces of
the generated code, and one OperationDescriptor per verb-marked method.
"""

from __future__ import annotations

import logging

from microapi.core.graph import DeclarationGraph
from microapi.core.ir import (
    Annotation,
    Declaration,
    DiagnosticCode,
    FacadeDescriptor,
    HttpVerb,
    Member,
    NamedType,
    OperationDescriptor,
    TypeDescriptor,
)

from .annotations import AnnotationReader, find_marker
from .config import SynthesisConfig
from .controller import plan_request_envelope, trim_async_suffix
from .diagnostics import DiagnosticReporter
from .discovery import FACADE_MARKERS, VERB_MARKERS
from .propagation import AttributePropagator
from .routes import bind_route

logger = logging.getLogger(__name__)

FACADE_SUFFIX = "Facade"
INTERFACE_PREFIX = "I"
CONTROLLERS_NAMESPACE = "Controllers"


def derive_controller_name(declaration: Declaration) -> str:
    """
    Controller name when none is configured.

    Classes drop a trailing ``Facade``; interfaces drop a leading ``I``.
    """
    name = declaration.name
    if declaration.is_interface:
        if len(name) > 1 and name.startswith(INTERFACE_PREFIX):
            return name[1:]
        return name
    if name.endswith(FACADE_SUFFIX) and len(name) > len(FACADE_SUFFIX):
        return name[: -len(FACADE_SUFFIX)]
    return name


class FacadeResolver:
    """Builds FacadeDescriptors from facade declarations."""

    def __init__(
        self,
        graph: DeclarationGraph,
        propagator: AttributePropagator,
        config: SynthesisConfig | None = None,
    ):
        self.graph = graph
        self.propagator = propagator
        self.config = config or SynthesisConfig()

    def resolve(
        self, declaration: Declaration, reporter: DiagnosticReporter
    ) -> FacadeDescriptor | None:
        """
        Resolve a facade declaration.

        Returns None, without a diagnostic, when no service type resolves.
        """
        marker = find_marker(declaration.annotations, FACADE_MARKERS)
        if marker is None:
            return None

        service_type = self.service_type(declaration, marker)
        if service_type is None:
            logger.debug("No service type for facade %s; skipping", declaration.identity)
            return None

        reader = AnnotationReader(marker)
        controller_name = reader.string(0) or derive_controller_name(declaration)
        controller_namespace = reader.string("ControllerNamespace") or (
            f"{declaration.namespace}.{CONTROLLERS_NAMESPACE}"
            if declaration.namespace
            else CONTROLLERS_NAMESPACE
        )
        dto_namespace = reader.string("DtoNamespace") or controller_namespace

        operations: list[OperationDescriptor] = []
        envelope_names: set[str] = set()
        for member in declaration.methods:
            verb_marker = find_marker(member.annotations, VERB_MARKERS)
            if verb_marker is None:
                continue
            op = self.resolve_operation(declaration, member, verb_marker, reporter, envelope_names)
            if op.request_envelope is not None:
                envelope_names.add(op.request_envelope.type_name)
            operations.append(op)

        return FacadeDescriptor(
            source_identity=declaration.identity,
            controller_name=controller_name,
            service_type=service_type,
            controller_namespace=controller_namespace,
            dto_namespace=dto_namespace,
            operations=tuple(operations),
        )

    def service_type(self, declaration: Declaration, marker: Annotation) -> TypeDescriptor | None:
        """
        The type the controller delegates to.

        Interfaces delegate to themselves. Classes use the generic marker
        argument, then the ``Service`` value, then their first interface.
        """
        if declaration.is_interface:
            return NamedType(name=declaration.identity)
        if marker.type_arguments:
            return marker.type_arguments[0]
        explicit = AnnotationReader(marker).type("Service")
        if explicit is not None:
            return explicit
        if declaration.interfaces:
            return declaration.interfaces[0]
        return None

    def resolve_operation(
        self,
        declaration: Declaration,
        member: Member,
        verb_marker: Annotation,
        reporter: DiagnosticReporter,
        taken_envelope_names: set[str],
    ) -> OperationDescriptor:
        reader = AnnotationReader(verb_marker)
        verb = HttpVerb(verb_marker.simple_name)

        route = reader.string(0)
        if route is None:
            route = reader.string("Route")
        if route is None:
            route = (
                trim_async_suffix(member.name) if self.config.strip_async_suffix else member.name
            )

        binding = bind_route(route, member.parameters)
        location = member.location or declaration.location
        for name in binding.unmatched:
            reporter.warning(
                DiagnosticCode.UNMATCHED_ROUTE_PARAMETER,
                f"Route parameter '{name}' in route '{route}' not found in method "
                f"signature of '{declaration.name}.{member.name}'",
                location,
            )

        return OperationDescriptor(
            source_member_name=member.name,
            http_verb=verb,
            route_template=route,
            route_param_names=binding.route_param_names,
            generated_method_name=reader.string("MethodName") or member.name,
            return_type=member.type,
            parameters=binding.parameters,
            request_envelope=plan_request_envelope(
                verb, member.name, binding, taken_envelope_names
            ),
            propagated_annotations=self.propagator.propagate(member.annotations),
            location=location,
        )
