"""
Base rendering target.

A target turns target-neutral generated declarations into source text
and decides the file each output key is written to. Output keys are
namespace-qualified so two declarations can only collide when they
really target the same generated name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from microapi.core.errors import UnknownTargetError
from microapi.core.ir import (
    Annotation,
    ControllerDeclaration,
    DtoDeclaration,
    TypeDescriptor,
    strip_generic_suffix,
)

from ..annotations import CSHARP_LITERALS, LiteralStyle
from ..controller import qualify
from ..generator import GeneratedUnit

REQUESTS_SUFFIX = "Requests"
GENERATED_BANNER = "Generated by microapi - DO NOT EDIT."


class Target(ABC):
    """
    Base class for rendering targets.

    Example:
        class MarkdownTarget(Target):
            name = "markdown"

            def render_controller(self, controller):
                ...
    """

    name: ClassVar[str] = ""
    literals: ClassVar[LiteralStyle] = CSHARP_LITERALS

    # Output keys

    def controller_key(self, controller: ControllerDeclaration) -> str:
        return qualify(controller.namespace, controller.type_name)

    def envelopes_key(self, controller: ControllerDeclaration) -> str:
        return qualify(controller.dto_namespace, controller.controller_name + REQUESTS_SUFFIX)

    def dto_key(self, dto: DtoDeclaration) -> str:
        return dto.source_identity

    @abstractmethod
    def file_name(self, output_key: str) -> str:
        """Path, relative to the output directory, for an output key."""
        pass

    # Rendering

    @abstractmethod
    def render_type(self, descriptor: TypeDescriptor) -> str:
        pass

    @abstractmethod
    def render_controller(self, controller: ControllerDeclaration) -> str:
        pass

    @abstractmethod
    def render_envelopes(self, controller: ControllerDeclaration) -> str:
        pass

    @abstractmethod
    def render_dto(self, dto: DtoDeclaration) -> str:
        pass

    def annotation_name(self, annotation: Annotation) -> str:
        """
        Annotation identifier without a generic suffix or trailing ``Attribute``.

        Type arguments are rendered separately from ``annotation.type_arguments``.
        """
        kind = strip_generic_suffix(annotation.kind)
        if kind.endswith("Attribute") and len(kind.rsplit(".", 1)[-1]) > len("Attribute"):
            return kind[: -len("Attribute")]
        return kind

    # Units

    def unit(self, output_key: str, source_text: str) -> GeneratedUnit:
        return GeneratedUnit(
            output_key=output_key,
            source_text=source_text,
            file_name=self.file_name(output_key),
        )

    def controller_units(self, controller: ControllerDeclaration) -> list[GeneratedUnit]:
        """The controller unit, plus an envelopes unit when any operation needs one."""
        units = [self.unit(self.controller_key(controller), self.render_controller(controller))]
        if controller.envelopes:
            units.append(
                self.unit(self.envelopes_key(controller), self.render_envelopes(controller))
            )
        return units

    def dto_units(self, dto: DtoDeclaration) -> list[GeneratedUnit]:
        return [self.unit(self.dto_key(dto), self.render_dto(dto))]


class TargetRegistry:
    """
    Registry for rendering targets.

    Maps configuration values to target implementations.
    """

    _targets: dict[str, type[Target]] = {}

    @classmethod
    def register(cls, name: str, target: type[Target]) -> None:
        """Register a target."""
        cls._targets[name] = target

    @classmethod
    def get(cls, name: str) -> type[Target] | None:
        """Get a target by name."""
        return cls._targets.get(name)

    @classmethod
    def create(cls, name: str) -> Target:
        """
        Instantiate a target by name.

        Raises:
            UnknownTargetError: If no target is registered under name
        """
        target = cls._targets.get(name)
        if target is None:
            known = ", ".join(sorted(cls._targets)) or "none"
            raise UnknownTargetError(f"Unknown target '{name}' (available: {known})")
        return target()

    @classmethod
    def list_targets(cls) -> list[str]:
        """List registered target names."""
        return list(cls._targets.keys())
