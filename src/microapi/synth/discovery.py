"""
Declaration discovery.

Filters the declaration graph for facade and dto candidates by marker
annotation. A declaration reported as several fragments is discovered
once, at the position of its first fragment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from microapi.core.graph import DeclarationGraph
from microapi.core.ir import Declaration

from .annotations import find_marker

logger = logging.getLogger(__name__)

FACADE_MARKERS = frozenset({"HttpFacade"})
DTO_MARKERS = frozenset({"Dto"})
VERB_MARKERS = frozenset({"Get", "Post", "Put", "Delete", "Patch"})


@dataclass(frozen=True)
class DiscoveryResult:
    """Disjoint, deduplicated candidate declarations in discovery order."""

    facades: tuple[Declaration, ...] = ()
    dtos: tuple[Declaration, ...] = ()


def discover(graph: DeclarationGraph) -> DiscoveryResult:
    """
    Find facade and dto candidates.

    A declaration carrying both markers is treated as a facade only.
    The returned declarations are the graph's merged symbols.
    """
    facades: list[Declaration] = []
    dtos: list[Declaration] = []
    seen: set[str] = set()

    for fragment in graph.fragments():
        if fragment.identity in seen:
            continue
        symbol = graph.get(fragment.identity)
        if symbol is None:
            continue
        if find_marker(symbol.annotations, FACADE_MARKERS) is not None:
            facades.append(symbol)
        elif find_marker(symbol.annotations, DTO_MARKERS) is not None:
            dtos.append(symbol)
        else:
            continue
        seen.add(fragment.identity)

    logger.debug("Discovered %d facades and %d dtos", len(facades), len(dtos))
    return DiscoveryResult(facades=tuple(facades), dtos=tuple(dtos))
