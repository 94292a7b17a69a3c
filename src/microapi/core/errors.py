"""
Error types for MicroAPI graph loading, configuration, and synthesis.

Malformed input inside a single declaration is reported as a diagnostic;
these exceptions cover failures of a whole pass and contract violations
that the runner turns into per-declaration diagnostics.
"""

from __future__ import annotations

from .ir.location import SourceLocation


class MicroApiError(Exception):
    """Base exception for all MicroAPI errors."""

    def __init__(self, message: str, location: SourceLocation | None = None):
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with location if available."""
        if self.location:
            return f"{self.location}\n{self.message}"
        return self.message


class GraphLoadError(MicroApiError):
    """
    Raised when a declaration graph document cannot be read.

    Examples:
    - File missing or unreadable
    - Invalid JSON
    - Declarations that do not match the graph schema
    """

    pass


class ConfigError(MicroApiError):
    """Raised when microapi.toml cannot be parsed or holds invalid values."""

    pass


class ResolutionError(MicroApiError):
    """
    Raised when annotation configuration has the wrong shape.

    Examples:
    - A string expected where a type reference was given
    - An array element of the wrong kind
    """

    pass


class SynthesisError(MicroApiError):
    """Raised when a descriptor cannot be turned into a declaration."""

    pass


class DuplicateOutputError(SynthesisError):
    """Raised when two declarations target the same output key."""

    def __init__(self, output_key: str, location: SourceLocation | None = None):
        self.output_key = output_key
        super().__init__(f"Output key '{output_key}' is already in use", location)


class UnknownTargetError(MicroApiError):
    """Raised when no rendering target is registered under a name."""

    pass
