"""
Attribute propagation engine.

Decides which annotations on a source member are copied onto the
generated member. Excluded are:

- the synthesis markers themselves (verb, facade, dto)
- annotations whose type is, or derives from, an ignored type
- annotations whose type lives in a host-internal namespace
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from microapi.core.graph import DeclarationGraph
from microapi.core.ir import Annotation, TypeDescriptor, declared_name

from .annotations import matches_marker
from .discovery import DTO_MARKERS, FACADE_MARKERS, VERB_MARKERS

logger = logging.getLogger(__name__)

SYNTHESIS_MARKERS = FACADE_MARKERS | DTO_MARKERS | VERB_MARKERS


class AttributePropagator:
    """Filters annotations for copying onto generated members."""

    def __init__(
        self,
        graph: DeclarationGraph,
        internal_namespaces: Iterable[str] = (),
        markers: Collection[str] = SYNTHESIS_MARKERS,
    ):
        self.graph = graph
        self.internal_namespaces = tuple(internal_namespaces)
        self.markers = frozenset(markers)

    def is_internal(self, annotation: Annotation) -> bool:
        """Whether the annotation type belongs to a host-internal namespace."""
        type_name = self.graph.annotation_type_name(annotation)
        return any(
            type_name == ns or type_name.startswith(ns + ".") for ns in self.internal_namespaces
        )

    def matches_ignored(
        self, annotation: Annotation, ignored: Collection[TypeDescriptor]
    ) -> bool:
        """Whether the annotation type is, or derives from, an ignored type."""
        names = [name for name in (declared_name(t) for t in ignored) if name]
        if not names:
            return False
        return self.graph.is_or_derives_from(self.graph.annotation_type_name(annotation), names)

    def carries_ignored(
        self, annotations: Iterable[Annotation], ignored: Collection[TypeDescriptor]
    ) -> bool:
        return any(self.matches_ignored(a, ignored) for a in annotations)

    def propagate(
        self,
        annotations: Iterable[Annotation],
        ignored: Collection[TypeDescriptor] = (),
    ) -> tuple[Annotation, ...]:
        """Annotations to copy, in source order."""
        kept: list[Annotation] = []
        for annotation in annotations:
            if matches_marker(annotation, self.markers):
                continue
            if self.is_internal(annotation):
                logger.debug("Skipping internal annotation %s", annotation.kind)
                continue
            if self.matches_ignored(annotation, ignored):
                logger.debug("Skipping ignored annotation %s", annotation.kind)
                continue
            kept.append(annotation)
        return tuple(kept)
