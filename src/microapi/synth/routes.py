"""
Route binding resolver.

Parses route templates, extracts path-parameter names and classifies
each method parameter as route-bound or free.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from microapi.core.ir import BoundParameter, Parameter, ParameterBinding


def extract_route_parameters(template: str) -> tuple[str, ...]:
    """
    Extract path-parameter names from a route template.

    ``{name}`` and ``{name:constraint}`` segments name a parameter; the
    constraint is discarded. Names are returned once each, in template
    order.

    Examples:
        "{id}" -> ("id",)
        "users/{id:int}/orders/{orderId}" -> ("id", "orderId")
    """
    names: list[str] = []
    for segment in template.split("/"):
        if not segment or not (segment.startswith("{") and segment.endswith("}")):
            continue
        name = segment[1:-1]
        colon = name.find(":")
        if colon > 0:
            name = name[:colon]
        if name not in names:
            names.append(name)
    return tuple(names)


@dataclass(frozen=True)
class RouteBinding:
    """
    Result of matching a template against a method's parameters.

    Attributes:
        template: The route template
        parameter_names: Route parameter names, in template order
        parameters: Every method parameter with its binding, in declared order
        unmatched: Route parameter names no method parameter carries
    """

    template: str
    parameter_names: tuple[str, ...]
    parameters: tuple[BoundParameter, ...]
    unmatched: tuple[str, ...]

    @property
    def route_param_names(self) -> frozenset[str]:
        return frozenset(self.parameter_names)

    @property
    def free_parameters(self) -> tuple[BoundParameter, ...]:
        return tuple(p for p in self.parameters if not p.is_route_bound)


def bind_route(template: str, parameters: Sequence[Parameter]) -> RouteBinding:
    """Bind a route template to a method's parameters."""
    route_names = extract_route_parameters(template)
    bound = tuple(
        BoundParameter(
            name=p.name,
            type=p.type,
            binding=(
                ParameterBinding.ROUTE_BOUND if p.name in route_names else ParameterBinding.FREE
            ),
        )
        for p in parameters
    )
    declared = {p.name for p in parameters}
    unmatched = tuple(name for name in route_names if name not in declared)
    return RouteBinding(
        template=template,
        parameter_names=route_names,
        parameters=bound,
        unmatched=unmatched,
    )
