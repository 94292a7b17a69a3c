"""Diagnostic records reported alongside generated output."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .location import SourceLocation


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Stable diagnostic identifiers."""

    SYNTHESIS_FAILED = "MA001"
    NON_PARTIAL_DTO = "MA002"
    UNMATCHED_ROUTE_PARAMETER = "MA003"
    DUPLICATE_OUTPUT_KEY = "MA004"


DIAGNOSTIC_TITLES: dict[DiagnosticCode, str] = {
    DiagnosticCode.SYNTHESIS_FAILED: "Declaration could not be synthesized",
    DiagnosticCode.NON_PARTIAL_DTO: "Dto class must be partial",
    DiagnosticCode.UNMATCHED_ROUTE_PARAMETER: "Route parameter not found in method signature",
    DiagnosticCode.DUPLICATE_OUTPUT_KEY: "Generated output key already in use",
}


class Diagnostic(BaseModel):
    """
    A malformed-input finding.

    Attributes:
        code: Stable identifier (MA00x)
        severity: Warning or error
        message: Human-readable description
        location: Source position, when the host supplied one
        subject: Identity of the declaration the diagnostic belongs to
    """

    code: DiagnosticCode
    severity: Severity
    message: str
    location: SourceLocation | None = None
    subject: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def title(self) -> str:
        return DIAGNOSTIC_TITLES[self.code]

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        where = f"{self.location}: " if self.location else ""
        return f"{where}{self.severity.value} {self.code.value}: {self.message}"
