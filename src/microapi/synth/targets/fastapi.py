"""
FastAPI target.

Renders controllers as APIRouter modules, and request envelopes and
dtos as Pydantic models. Host types are mapped onto Python types;
declared types are imported from the module named by their namespace.
"""

from __future__ import annotations

import re
from collections import defaultdict

from microapi.core.ir import (
    Annotation,
    ContainerType,
    ControllerDeclaration,
    DtoDeclaration,
    GeneratedMethod,
    GeneratedParameter,
    NamedType,
    NullableType,
    ParameterSource,
    PrimitiveType,
    TypeDescriptor,
)

from ..annotations import PYTHON_LITERALS, format_arguments
from .base import GENERATED_BANNER, Target, TargetRegistry

# Host primitive names to Python builtins
PRIMITIVE_MAPPING = {
    "string": "str",
    "str": "str",
    "char": "str",
    "int": "int",
    "long": "int",
    "short": "int",
    "byte": "int",
    "uint": "int",
    "ulong": "int",
    "bool": "bool",
    "float": "float",
    "double": "float",
    "object": "Any",
    "void": "None",
    "decimal": "Decimal",
    "bytes": "bytes",
}

# Well-known declared types: (module, name)
WELL_KNOWN_TYPES = {
    "System.DateTime": ("datetime", "datetime"),
    "System.DateTimeOffset": ("datetime", "datetime"),
    "System.DateOnly": ("datetime", "date"),
    "System.TimeOnly": ("datetime", "time"),
    "System.TimeSpan": ("datetime", "timedelta"),
    "System.Guid": ("uuid", "UUID"),
    "System.Decimal": ("decimal", "Decimal"),
    "System.Object": ("typing", "Any"),
}

# Generic containers by simple name
CONTAINER_MAPPING = {
    "List": "list",
    "IList": "list",
    "IEnumerable": "list",
    "ICollection": "list",
    "IReadOnlyList": "list",
    "IReadOnlyCollection": "list",
    "Collection": "list",
    "list": "list",
    "HashSet": "set",
    "ISet": "set",
    "set": "set",
    "Dictionary": "dict",
    "IDictionary": "dict",
    "IReadOnlyDictionary": "dict",
    "dict": "dict",
}

AWAITABLE_CONTAINERS = frozenset({"Task", "ValueTask"})

STDLIB_MODULES = frozenset({"typing", "datetime", "decimal", "uuid"})
THIRD_PARTY_MODULES = frozenset({"fastapi", "pydantic"})

PARAMETER_SOURCES = {
    ParameterSource.ROUTE: "Path",
    ParameterSource.QUERY: "Query",
    ParameterSource.BODY: "Body",
}

_ROUTE_CONSTRAINT = re.compile(r"\{([^}:]+):(?!path\})[^}]*\}")


def snake_case(name: str) -> str:
    """Convert PascalCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def module_path(output_key: str) -> str:
    """Dotted module for an output key: namespace kept, name snake_cased."""
    namespace, _, name = output_key.rpartition(".")
    module = snake_case(name)
    return f"{namespace}.{module}" if namespace else module


def fastapi_route(template: str) -> str:
    """Route path relative to the router prefix; type constraints dropped."""
    path = _ROUTE_CONSTRAINT.sub(r"{\1}", template.strip("/"))
    return f"/{path}" if path else ""


def is_awaitable(descriptor: TypeDescriptor) -> bool:
    if isinstance(descriptor, ContainerType | NamedType):
        return descriptor.simple_name in AWAITABLE_CONTAINERS
    return False


class ImportSet:
    """Collects ``from module import name`` lines; rendered sorted and grouped."""

    def __init__(self) -> None:
        self._names: dict[str, set[str]] = defaultdict(set)

    def add(self, module: str, name: str) -> None:
        self._names[module].add(name)

    def render(self) -> list[str]:
        groups: list[list[str]] = [[], [], []]
        for module in sorted(self._names):
            root = module.split(".", 1)[0]
            if root in STDLIB_MODULES:
                group = groups[0]
            elif root in THIRD_PARTY_MODULES:
                group = groups[1]
            else:
                group = groups[2]
            names = ", ".join(sorted(self._names[module]))
            group.append(f"from {module} import {names}")
        lines: list[str] = []
        for group in groups:
            if group:
                if lines:
                    lines.append("")
                lines.extend(group)
        return lines


class PythonTypeRenderer:
    """Renders type descriptors as Python annotations, recording imports."""

    def __init__(self, imports: ImportSet):
        self.imports = imports

    def render(self, descriptor: TypeDescriptor) -> str:
        if isinstance(descriptor, NullableType):
            inner = descriptor.inner
            while isinstance(inner, NullableType):
                inner = inner.inner
            self.imports.add("typing", "Optional")
            return f"Optional[{self.render(inner)}]"
        if isinstance(descriptor, PrimitiveType):
            name = PRIMITIVE_MAPPING.get(descriptor.name, descriptor.name)
            if name == "Any":
                self.imports.add("typing", "Any")
            elif name == "Decimal":
                self.imports.add("decimal", "Decimal")
            return name
        if isinstance(descriptor, ContainerType):
            args = [self.render(a) for a in descriptor.args]
            if descriptor.simple_name in AWAITABLE_CONTAINERS:
                return args[0] if args else "None"
            generic = CONTAINER_MAPPING.get(descriptor.simple_name)
            if generic is None:
                generic = self.import_name(descriptor.name)
            return f"{generic}[{', '.join(args)}]" if args else generic
        if descriptor.simple_name in AWAITABLE_CONTAINERS:
            return "None"
        return self.import_name(descriptor.name)

    def import_name(self, qualified: str) -> str:
        """Import a declared name and return the local name to use."""
        if qualified in WELL_KNOWN_TYPES:
            module, name = WELL_KNOWN_TYPES[qualified]
            self.imports.add(module, name)
            return name
        module, _, name = qualified.rpartition(".")
        if module:
            self.imports.add(module, name)
        return name


def _module_docstring(*lines: str) -> list[str]:
    return ['"""', *lines, GENERATED_BANNER, '"""']


class FastAPITarget(Target):
    """Generate FastAPI routers and Pydantic models."""

    name = "fastapi"
    literals = PYTHON_LITERALS

    def file_name(self, output_key: str) -> str:
        return module_path(output_key).replace(".", "/") + ".py"

    def render_type(self, descriptor: TypeDescriptor) -> str:
        return PythonTypeRenderer(ImportSet()).render(descriptor)

    def render_annotation(self, annotation: Annotation, imports: ImportSet) -> str:
        """Annotation as a call expression, e.g. ``requires_role("admin")``."""
        types = PythonTypeRenderer(imports)
        name = types.import_name(self.annotation_name(annotation))
        if annotation.type_arguments:
            name += f"[{', '.join(types.render(t) for t in annotation.type_arguments)}]"
        args = format_arguments(annotation, self.literals)
        return f"{name}({', '.join(args)})"

    # Controllers

    def render_controller(self, controller: ControllerDeclaration) -> str:
        imports = ImportSet()
        imports.add("fastapi", "APIRouter")
        types = PythonTypeRenderer(imports)
        envelope_module = module_path(self.envelopes_key(controller))
        envelope_names = {e.type_name for e in controller.envelopes}

        service = types.render(controller.service_type)
        body: list[str] = []
        for method in controller.methods:
            body.extend(["", ""])
            body.extend(
                self._render_method(
                    method, controller.service_name, service, types, envelope_module, envelope_names
                )
            )

        lines = _module_docstring(f"{controller.type_name} API router.")
        lines.extend(imports.render())
        lines.append("")
        lines.append(
            f'router = APIRouter(prefix="/{controller.controller_name}", '
            f'tags=["{controller.controller_name}"])'
        )
        lines.extend(body)
        return "\n".join(lines) + "\n"

    def _render_method(
        self,
        method: GeneratedMethod,
        service_name: str,
        service: str,
        types: PythonTypeRenderer,
        envelope_module: str,
        envelope_names: set[str],
    ) -> list[str]:
        imports = types.imports
        verb = method.http_verb.value.lower()
        lines = [f'@router.{verb}("{fastapi_route(method.route_template)}")']
        lines.extend(f"@{self.render_annotation(a, imports)}" for a in method.annotations)

        is_async = is_awaitable(method.return_type)
        prefix = "async " if is_async else ""
        returns = types.render(method.return_type)
        lines.append(f"{prefix}def {method.name}(")
        lines.append("    *,")
        for parameter in method.parameters:
            lines.append(
                f"    {self._render_parameter(parameter, types, envelope_module, envelope_names)},"
            )
        imports.add("typing", "Annotated")
        imports.add("fastapi", "Depends")
        lines.append(f"    {service_name}: Annotated[{service}, Depends()],")
        lines.append(f") -> {returns}:")

        args = ", ".join(
            f"{a.name}.{a.envelope_field}" if a.envelope_field else a.name
            for a in method.call_arguments
        )
        call = f"{service_name}.{method.source_member_name}({args})"
        if is_async:
            call = f"await {call}"
        lines.append(f"    return {call}")
        return lines

    def _render_parameter(
        self,
        parameter: GeneratedParameter,
        types: PythonTypeRenderer,
        envelope_module: str,
        envelope_names: set[str],
    ) -> str:
        source = PARAMETER_SOURCES[parameter.source]
        types.imports.add("typing", "Annotated")
        types.imports.add("fastapi", source)
        descriptor = parameter.type
        if (
            parameter.source == ParameterSource.BODY
            and isinstance(descriptor, NamedType)
            and descriptor.simple_name in envelope_names
        ):
            types.imports.add(envelope_module, descriptor.simple_name)
            annotation = descriptor.simple_name
        else:
            annotation = types.render(descriptor)
        # path parameters may not carry defaults
        optional = parameter.source == ParameterSource.QUERY and isinstance(
            descriptor, NullableType
        )
        default = " = None" if optional else ""
        return f"{parameter.name}: Annotated[{annotation}, {source}()]{default}"

    # Request envelopes

    def render_envelopes(self, controller: ControllerDeclaration) -> str:
        imports = ImportSet()
        imports.add("pydantic", "BaseModel")
        types = PythonTypeRenderer(imports)

        body: list[str] = []
        for envelope in controller.envelopes:
            body.extend(["", "", f"class {envelope.type_name}(BaseModel):"])
            for name, descriptor in envelope.fields:
                default = " = None" if isinstance(descriptor, NullableType) else ""
                body.append(f"    {name}: {types.render(descriptor)}{default}")

        lines = _module_docstring(f"Request envelopes for {controller.type_name}.")
        lines.extend(imports.render())
        lines.extend(body)
        return "\n".join(lines) + "\n"

    # Dtos

    def render_dto(self, dto: DtoDeclaration) -> str:
        imports = ImportSet()
        imports.add("pydantic", "BaseModel")
        types = PythonTypeRenderer(imports)

        body = [
            "",
            "",
            f"class {dto.name}Generated(BaseModel):",
            f'    """Generated fields of {dto.name}; subclass it to add hand-written ones."""',
        ]
        if dto.properties:
            body.append("")
        for prop in dto.properties:
            annotation = types.render(prop.type)
            if prop.annotations:
                imports.add("typing", "Annotated")
                metadata = ", ".join(self.render_annotation(a, imports) for a in prop.annotations)
                annotation = f"Annotated[{annotation}, {metadata}]"
            line = f"    {prop.name}: {annotation}"
            if prop.initializer is not None:
                line += f" = {prop.initializer}"
            elif isinstance(prop.type, NullableType):
                line += " = None"
            body.append(line)

        lines = _module_docstring(f"Projection of {dto.entity_type} for {dto.name}.")
        lines.extend(imports.render())
        lines.extend(body)
        return "\n".join(lines) + "\n"


TargetRegistry.register("fastapi", FastAPITarget)
