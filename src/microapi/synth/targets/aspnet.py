"""
ASP.NET Core target.

Renders controllers, request envelopes, and dto halves as C# source:

- controllers derive from ControllerBase and delegate to the service
  through a primary constructor
- request envelopes are positional records in the dto namespace
- dtos are the generated half of the hand-written partial class
"""

from __future__ import annotations

from microapi.core.ir import (
    Annotation,
    ContainerType,
    ControllerDeclaration,
    DtoDeclaration,
    GeneratedMethod,
    GeneratedParameter,
    NullableType,
    ParameterSource,
    RequestEnvelopeDescriptor,
    TypeDescriptor,
)

from ..annotations import CSHARP_LITERALS, format_arguments
from .base import GENERATED_BANNER, Target, TargetRegistry

INDENT = "    "

PARAMETER_SOURCES = {
    ParameterSource.ROUTE: "FromRoute",
    ParameterSource.QUERY: "FromQuery",
    ParameterSource.BODY: "FromBody",
}


def _header(usings: list[str]) -> list[str]:
    lines = ["// <auto-generated/>", f"// {GENERATED_BANNER}"]
    lines.extend(f"using {u};" for u in usings)
    lines.extend(["", "#nullable enable", "#pragma warning disable", ""])
    return lines


def _wrap_namespace(namespace: str, body: list[str]) -> list[str]:
    """Place body lines inside a namespace block (or at top level)."""
    if not namespace:
        return body
    lines = [f"namespace {namespace}", "{"]
    lines.extend(f"{INDENT}{line}" if line else "" for line in body)
    lines.append("}")
    return lines


class AspNetTarget(Target):
    """Generate ASP.NET Core source."""

    name = "aspnet"
    literals = CSHARP_LITERALS

    def file_name(self, output_key: str) -> str:
        return f"{output_key}.g.cs"

    def render_type(self, descriptor: TypeDescriptor) -> str:
        if isinstance(descriptor, NullableType):
            inner = descriptor.inner
            while isinstance(inner, NullableType):
                inner = inner.inner
            return f"{self.render_type(inner)}?"
        if isinstance(descriptor, ContainerType):
            args = ", ".join(self.render_type(a) for a in descriptor.args)
            return f"{descriptor.name}<{args}>"
        return descriptor.name

    def render_annotation(self, annotation: Annotation) -> str:
        args = format_arguments(annotation, self.literals)
        name = self.annotation_name(annotation)
        if annotation.type_arguments:
            name += f"<{', '.join(self.render_type(t) for t in annotation.type_arguments)}>"
        if args:
            return f"[{name}({', '.join(args)})]"
        return f"[{name}]"

    # Controllers

    def render_controller(self, controller: ControllerDeclaration) -> str:
        service = self.render_type(controller.service_type)
        body = [
            "[ApiController]",
            '[Route("[controller]")]',
            f"public partial class {controller.type_name}({service} {controller.service_name})"
            " : ControllerBase",
            "{",
        ]
        for i, method in enumerate(controller.methods):
            if i:
                body.append("")
            body.extend(
                f"{INDENT}{line}"
                for line in self._render_method(method, controller.service_name)
            )
        body.append("}")

        lines = _header(["Microsoft.AspNetCore.Mvc"])
        lines.extend(_wrap_namespace(controller.namespace, body))
        return "\n".join(lines) + "\n"

    def _render_method(self, method: GeneratedMethod, service_name: str) -> list[str]:
        route = method.route_template.replace("\\", "\\\\").replace('"', '\\"')
        lines = [f'[Http{method.http_verb.value}("{route}")]']
        lines.extend(self.render_annotation(a) for a in method.annotations)

        params = ", ".join(self._render_parameter(p) for p in method.parameters)
        args = ", ".join(
            f"{a.name}.{a.envelope_field}" if a.envelope_field else a.name
            for a in method.call_arguments
        )
        returns = self.render_type(method.return_type)
        lines.append(f"public {returns} {method.name}({params})")
        lines.append(f"{INDENT}=> {service_name}.{method.source_member_name}({args});")
        return lines

    def _render_parameter(self, parameter: GeneratedParameter) -> str:
        source = PARAMETER_SOURCES[parameter.source]
        return f"[{source}] {self.render_type(parameter.type)} {parameter.name}"

    # Request envelopes

    def render_envelopes(self, controller: ControllerDeclaration) -> str:
        body: list[str] = []
        for i, envelope in enumerate(controller.envelopes):
            if i:
                body.append("")
            body.append(self._render_envelope(envelope))

        lines = _header([])
        lines.extend(_wrap_namespace(controller.dto_namespace, body))
        return "\n".join(lines) + "\n"

    def _render_envelope(self, envelope: RequestEnvelopeDescriptor) -> str:
        fields = ", ".join(f"{self.render_type(t)} {name}" for name, t in envelope.fields)
        return f"public record {envelope.type_name}({fields});"

    # Dtos

    def render_dto(self, dto: DtoDeclaration) -> str:
        body = [f"public partial class {dto.name}", "{"]
        for prop in dto.properties:
            for annotation in prop.annotations:
                body.append(f"{INDENT}{self.render_annotation(annotation)}")
            line = f"{INDENT}public {self.render_type(prop.type)} {prop.name} {{ get; set; }}"
            if prop.initializer is not None:
                line += f" = {prop.initializer};"
            body.append(line)
        body.append("}")

        lines = _header(["System"])
        lines.extend(_wrap_namespace(dto.namespace, body))
        return "\n".join(lines) + "\n"


TargetRegistry.register("aspnet", AspNetTarget)
