"""
Synthesis result types.

A synthesis pass produces generated declaration units, each keyed by a
deterministic output key, plus the diagnostics reported on the way.
Units staged per declaration are committed to the pass result in
discovery order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from microapi.core.errors import DuplicateOutputError
from microapi.core.ir import Diagnostic


@dataclass(frozen=True)
class GeneratedUnit:
    """
    One generated source unit.

    Attributes:
        output_key: Stable key derived from the source declaration
        source_text: Rendered source
        file_name: Path relative to the output directory
    """

    output_key: str
    source_text: str
    file_name: str


@dataclass
class SynthesisResult:
    """
    Result of synthesizing one declaration or a whole pass.

    Attributes:
        units: Generated units, in commit order
        diagnostics: Diagnostics, in report order
    """

    units: list[GeneratedUnit] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether the pass reported no error diagnostics."""
        return not any(d.is_error for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def output_keys(self) -> list[str]:
        return [u.output_key for u in self.units]

    def add_unit(self, unit: GeneratedUnit) -> None:
        """
        Append a unit.

        Raises:
            DuplicateOutputError: If the key is already taken
        """
        if any(u.output_key == unit.output_key for u in self.units):
            raise DuplicateOutputError(unit.output_key)
        self.units.append(unit)

    def as_mapping(self) -> dict[str, str]:
        """Output key to source text."""
        return {u.output_key: u.source_text for u in self.units}

    def write(self, output_dir: Path) -> list[Path]:
        """Write every unit below output_dir, creating directories as needed."""
        written: list[Path] = []
        for unit in self.units:
            path = output_dir / unit.file_name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(unit.source_text, encoding="utf-8")
            written.append(path)
        return written
