"""Source location tracking for declarations and members.

Records the file, line, and column where the host saw a declaration,
so diagnostics can point back at the annotated source.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SourceLocation(BaseModel):
    """Source position reported by the host.

    Attributes:
        file: Path to the source file (relative or absolute)
        line: 1-indexed line number
        column: 1-indexed column number
    """

    file: str
    line: int = 1
    column: int = 1

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"
