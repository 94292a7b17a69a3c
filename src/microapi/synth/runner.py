"""
Synthesis runner - orchestrates one synthesis pass.

Discovers candidates in the declaration graph, resolves each one into a
descriptor, synthesizes and renders it, and commits the staged output in
discovery order. Every declaration is isolated: its failure, cancellation,
or output-key collision never affects another declaration.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum

from microapi.core.errors import MicroApiError
from microapi.core.graph import DeclarationGraph
from microapi.core.ir import Declaration, DiagnosticCode

from .config import SynthesisConfig
from .controller import ControllerSynthesizer
from .diagnostics import DiagnosticReporter
from .discovery import discover
from .dto import DtoResolver, DtoSynthesizer
from .facade import FacadeResolver
from .generator import GeneratedUnit, SynthesisResult
from .propagation import AttributePropagator
from .targets import Target, TargetRegistry

logger = logging.getLogger(__name__)


class WorkKind(str, Enum):
    FACADE = "facade"
    DTO = "dto"


@dataclass(frozen=True)
class WorkItem:
    kind: WorkKind
    declaration: Declaration

    @property
    def identity(self) -> str:
        return self.declaration.identity


class SynthesisRunner:
    """
    Runs synthesis passes.

    A runner holds configuration and a target only; every pass recomputes
    everything from the graph it is given.

    Example:
        runner = SynthesisRunner(SynthesisConfig(target="fastapi"))
        result = runner.run(load_graph(Path("graph.json")))
        result.write(Path("generated"))
    """

    def __init__(self, config: SynthesisConfig | None = None, target: Target | None = None):
        self.config = config or SynthesisConfig()
        self.target = target or TargetRegistry.create(self.config.target)

    def run(
        self,
        graph: DeclarationGraph,
        cancelled: Callable[[str], bool] | None = None,
    ) -> SynthesisResult:
        """
        Run one pass over a graph snapshot.

        Args:
            graph: Declaration graph to synthesize from
            cancelled: Predicate over declaration identities; output of a
                declaration for which it returns True at commit time is
                discarded

        Returns:
            SynthesisResult with units and diagnostics in discovery order
        """
        discovery = discover(graph)
        work = [WorkItem(WorkKind.FACADE, d) for d in discovery.facades]
        work.extend(WorkItem(WorkKind.DTO, d) for d in discovery.dtos)

        staged = self._stage_all(graph, work)

        result = SynthesisResult()
        for item, outcome in zip(work, staged, strict=True):
            if cancelled is not None and cancelled(item.identity):
                logger.debug("Discarding output of cancelled declaration %s", item.identity)
                continue
            self._commit(result, item, outcome)

        logger.info(
            "Synthesized %d units from %d declarations (%d diagnostics)",
            len(result.units),
            len(work),
            len(result.diagnostics),
        )
        return result

    def _stage_all(self, graph: DeclarationGraph, work: list[WorkItem]) -> list[SynthesisResult]:
        """Synthesize every work item; order of the returned list matches work."""
        if self.config.max_workers <= 1 or len(work) <= 1:
            return [self.synthesize(graph, item) for item in work]

        max_workers = min(self.config.max_workers, len(work))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(self.synthesize, graph, item) for item in work]
            return [future.result() for future in futures]

    def _commit(self, result: SynthesisResult, item: WorkItem, outcome: SynthesisResult) -> None:
        """Commit one declaration's staged output atomically."""
        taken = set(result.output_keys)
        clashes = [u.output_key for u in outcome.units if u.output_key in taken]
        result.diagnostics.extend(outcome.diagnostics)
        if clashes:
            reporter = DiagnosticReporter(item.identity)
            for key in clashes:
                reporter.error(
                    DiagnosticCode.DUPLICATE_OUTPUT_KEY,
                    f"'{item.declaration.name}' generates '{key}', which another "
                    "declaration already generated",
                    item.declaration.location,
                )
            result.diagnostics.extend(reporter.diagnostics)
            return
        for unit in outcome.units:
            result.add_unit(unit)

    def synthesize(self, graph: DeclarationGraph, item: WorkItem) -> SynthesisResult:
        """
        Resolve, synthesize, and render one declaration.

        Any MicroApiError is turned into an error diagnostic for that
        declaration alone.
        """
        started = time.perf_counter()
        reporter = DiagnosticReporter(item.identity)
        outcome = SynthesisResult()
        try:
            if item.kind == WorkKind.FACADE:
                units = self._synthesize_facade(graph, item.declaration, reporter)
            else:
                units = self._synthesize_dto(graph, item.declaration, reporter)
            outcome.units.extend(units)
        except MicroApiError as e:
            logger.warning("Synthesis of %s failed: %s", item.identity, e.message)
            outcome.units.clear()
            reporter.error(
                DiagnosticCode.SYNTHESIS_FAILED,
                f"'{item.declaration.name}' could not be synthesized: {e.message}",
                e.location or item.declaration.location,
            )
        outcome.diagnostics.extend(reporter.diagnostics)
        logger.debug(
            "Synthesized %s %s in %.2fms",
            item.kind.value,
            item.identity,
            (time.perf_counter() - started) * 1000,
        )
        return outcome

    def _propagator(self, graph: DeclarationGraph) -> AttributePropagator:
        return AttributePropagator(graph, self.config.internal_namespaces)

    def _synthesize_facade(
        self, graph: DeclarationGraph, declaration: Declaration, reporter: DiagnosticReporter
    ) -> list[GeneratedUnit]:
        resolver = FacadeResolver(graph, self._propagator(graph), self.config)
        descriptor = resolver.resolve(declaration, reporter)
        if descriptor is None:
            return []
        controller = ControllerSynthesizer().build(descriptor)
        return self.target.controller_units(controller)

    def _synthesize_dto(
        self, graph: DeclarationGraph, declaration: Declaration, reporter: DiagnosticReporter
    ) -> list[GeneratedUnit]:
        descriptor = DtoResolver(graph).resolve(declaration, reporter)
        if descriptor is None:
            return []
        dto = DtoSynthesizer(graph, self._propagator(graph)).build(descriptor)
        if dto is None:
            return []
        return self.target.dto_units(dto)


def run_synthesis(
    graph: DeclarationGraph,
    config: SynthesisConfig | None = None,
    cancelled: Callable[[str], bool] | None = None,
) -> SynthesisResult:
    """Convenience wrapper: one pass with a fresh runner."""
    return SynthesisRunner(config).run(graph, cancelled)
