"""
Diagnostic reporter.

Accumulates malformed-input diagnostics for one declaration. The runner
gives every declaration its own reporter so nothing leaks between
declarations when one is cancelled or fails.
"""

from __future__ import annotations

import logging

from microapi.core.ir import Diagnostic, DiagnosticCode, Severity, SourceLocation

logger = logging.getLogger(__name__)


class DiagnosticReporter:
    """Collects diagnostics in report order."""

    def __init__(self, subject: str | None = None):
        self.subject = subject
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def report(
        self,
        code: DiagnosticCode,
        severity: Severity,
        message: str,
        location: SourceLocation | None = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            code=code,
            severity=severity,
            message=message,
            location=location,
            subject=self.subject,
        )
        self._diagnostics.append(diagnostic)
        logger.debug("Reported %s", diagnostic)
        return diagnostic

    def warning(
        self, code: DiagnosticCode, message: str, location: SourceLocation | None = None
    ) -> Diagnostic:
        return self.report(code, Severity.WARNING, message, location)

    def error(
        self, code: DiagnosticCode, message: str, location: SourceLocation | None = None
    ) -> Diagnostic:
        return self.report(code, Severity.ERROR, message, location)
