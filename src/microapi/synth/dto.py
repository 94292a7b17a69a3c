"""
Dto metadata resolver and synthesizer.

A dto declaration names an entity type; the synthesizer mirrors the
entity's properties onto the generated half of the (partial) dto,
skipping ignored properties, members written by hand, equality
machinery, and properties carrying an ignored attribute.
"""

from __future__ import annotations

import logging

from microapi.core.graph import DeclarationGraph
from microapi.core.ir import (
    Declaration,
    DiagnosticCode,
    DtoDeclaration,
    DtoDescriptor,
    GeneratedProperty,
    Member,
    NamedType,
    strip_nullable,
)

from .annotations import AnnotationReader, find_marker
from .diagnostics import DiagnosticReporter
from .discovery import DTO_MARKERS
from .propagation import AttributePropagator

logger = logging.getLogger(__name__)


class DtoResolver:
    """Builds DtoDescriptors from dto declarations."""

    def __init__(self, graph: DeclarationGraph):
        self.graph = graph

    def resolve(
        self, declaration: Declaration, reporter: DiagnosticReporter
    ) -> DtoDescriptor | None:
        """
        Resolve a dto declaration.

        Non-partial declarations get an error diagnostic and no descriptor.
        An unresolvable entity type yields None without a diagnostic.
        """
        marker = find_marker(declaration.annotations, DTO_MARKERS)
        if marker is None:
            return None

        if not declaration.is_partial:
            reporter.error(
                DiagnosticCode.NON_PARTIAL_DTO,
                f"Class '{declaration.name}' with [Dto] attribute must be declared as partial",
                declaration.location,
            )
            return None

        reader = AnnotationReader(marker)
        if marker.type_arguments:
            entity_type = marker.type_arguments[0]
        else:
            entity_type = reader.type(0)
        if entity_type is None:
            logger.debug("No entity type for dto %s; skipping", declaration.identity)
            return None

        return DtoDescriptor(
            source_identity=declaration.identity,
            name=declaration.name,
            namespace=declaration.namespace,
            entity_type=strip_nullable(entity_type),
            ignored_properties=frozenset(reader.strings("IgnoredProperties")),
            ignored_attribute_types=frozenset(reader.types("IgnoredAttributes")),
            explicit_member_names=frozenset(m.name for m in declaration.properties),
        )


class DtoSynthesizer:
    """Turns a DtoDescriptor into the generated half of the dto."""

    def __init__(self, graph: DeclarationGraph, propagator: AttributePropagator):
        self.graph = graph
        self.propagator = propagator

    def build(self, descriptor: DtoDescriptor) -> DtoDeclaration | None:
        """
        Mirror the entity's properties.

        Returns None when the entity type is not in the graph.
        """
        entity = self.graph.resolve(descriptor.entity_type)
        if entity is None:
            logger.debug(
                "Entity %s of dto %s not in graph; skipping",
                descriptor.entity_type,
                descriptor.source_identity,
            )
            return None

        properties = [
            self.build_property(member, descriptor)
            for member in entity.properties
            if self.is_projected(member, descriptor)
        ]
        return DtoDeclaration(
            source_identity=descriptor.source_identity,
            name=descriptor.name,
            namespace=descriptor.namespace,
            entity_type=NamedType(name=entity.identity),
            properties=tuple(properties),
        )

    def is_projected(self, member: Member, descriptor: DtoDescriptor) -> bool:
        if member.name in descriptor.ignored_properties:
            return False
        if member.name in descriptor.explicit_member_names:
            return False
        if member.is_equality_machinery:
            return False
        if self.propagator.carries_ignored(member.annotations, descriptor.ignored_attribute_types):
            return False
        return True

    def build_property(self, member: Member, descriptor: DtoDescriptor) -> GeneratedProperty:
        return GeneratedProperty(
            name=member.name,
            type=member.type,
            annotations=self.propagator.propagate(
                member.annotations, descriptor.ignored_attribute_types
            ),
            initializer=member.initializer,
        )
