"""
Declaration graph adapter.

Read-only query surface over the declarations the host supplies. The
host may report one declaration as several fragments (a partial type
split across files); the graph keeps the raw fragment order for
discovery and exposes one merged symbol per identity for resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .ir import Annotation, Declaration, TypeDescriptor, declared_name, strip_generic_suffix

logger = logging.getLogger(__name__)

_ATTRIBUTE_SUFFIX = "Attribute"


def name_variants(name: str) -> frozenset[str]:
    """Return a type name with and without the ``Attribute`` suffix."""
    name = strip_generic_suffix(name)
    if name.endswith(_ATTRIBUTE_SUFFIX) and len(name) > len(_ATTRIBUTE_SUFFIX):
        return frozenset({name, name[: -len(_ATTRIBUTE_SUFFIX)]})
    return frozenset({name, name + _ATTRIBUTE_SUFFIX})


def _merge(fragments: list[Declaration]) -> Declaration:
    """Merge fragments of one identity; the first fragment supplies the header."""
    first = fragments[0]
    if len(fragments) == 1:
        return first
    members = tuple(m for f in fragments for m in f.members)
    annotations = tuple(a for f in fragments for a in f.annotations)
    interfaces: list[TypeDescriptor] = []
    for fragment in fragments:
        for iface in fragment.interfaces:
            if iface not in interfaces:
                interfaces.append(iface)
    base_type = next((f.base_type for f in fragments if f.base_type is not None), None)
    return first.model_copy(
        update={
            "members": members,
            "annotations": annotations,
            "interfaces": tuple(interfaces),
            "base_type": base_type,
            "is_partial": any(f.is_partial for f in fragments),
        }
    )


class DeclarationGraph:
    """
    Query surface over a snapshot of declarations.

    Example:
        graph = DeclarationGraph(load_graph(path).declarations)
        user = graph.get("Shop.Models.User")
        graph.is_or_derives_from("Shop.RequiredAttribute", {"Shop.ValidationAttribute"})
    """

    def __init__(self, declarations: Iterable[Declaration]):
        self._fragments = tuple(declarations)
        grouped: dict[str, list[Declaration]] = {}
        for fragment in self._fragments:
            grouped.setdefault(fragment.identity, []).append(fragment)
        self._symbols = {identity: _merge(frags) for identity, frags in grouped.items()}
        logger.debug(
            "Declaration graph: %d fragments, %d symbols",
            len(self._fragments),
            len(self._symbols),
        )

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, identity: object) -> bool:
        return identity in self._symbols

    def fragments(self) -> tuple[Declaration, ...]:
        """All fragments in the order the host reported them."""
        return self._fragments

    def declarations(self) -> list[Declaration]:
        """Merged symbols in first-occurrence order."""
        return list(self._symbols.values())

    def get(self, identity: str) -> Declaration | None:
        """Merged symbol for an identity, or None."""
        return self._symbols.get(identity)

    def resolve(self, descriptor: TypeDescriptor) -> Declaration | None:
        """Resolve a type descriptor to its declaration (nullable looked through)."""
        name = declared_name(descriptor)
        if name is None:
            return None
        return self._symbols.get(name)

    def resolve_name(self, name: str) -> Declaration | None:
        """Resolve a type name, tolerating a missing or extra ``Attribute`` suffix."""
        symbol = self._symbols.get(strip_generic_suffix(name))
        if symbol is not None:
            return symbol
        for variant in sorted(name_variants(name)):
            symbol = self._symbols.get(variant)
            if symbol is not None:
                return symbol
        return None

    def annotation_type_name(self, annotation: Annotation) -> str:
        """Fully-qualified name of an annotation's type, as far as the graph knows it."""
        symbol = self.resolve_name(annotation.kind)
        if symbol is not None:
            return symbol.identity
        return strip_generic_suffix(annotation.kind)

    def base_chain(self, name: str) -> list[str]:
        """
        Walk the single-parent base-type chain upward.

        Returns the type itself followed by each ancestor the graph knows.
        Cycles are cut at the first repeated name.
        """
        chain: list[str] = []
        symbol = self.resolve_name(name)
        current: str | None = symbol.identity if symbol else strip_generic_suffix(name)
        while current is not None and current not in chain:
            chain.append(current)
            symbol = self._symbols.get(current)
            if symbol is None or symbol.base_type is None:
                break
            current = declared_name(symbol.base_type)
        return chain

    def is_or_derives_from(self, name: str, candidates: Iterable[str]) -> bool:
        """Check whether a type is, or derives from, any of the candidate names."""
        wanted: set[str] = set()
        for candidate in candidates:
            wanted |= name_variants(candidate)
        if not wanted:
            return False
        return any(name_variants(link) & wanted for link in self.base_chain(name))
