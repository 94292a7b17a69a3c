"""
MicroAPI - controllers and dtos synthesized from annotated declarations.

Reads a graph of annotated facade and entity declarations and
deterministically generates web controllers bound to route templates
and projection (dto) types that mirror an entity's shape.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    ConfigError,
    GraphLoadError,
    MicroApiError,
    ResolutionError,
    SynthesisError,
)
from .core.graph import DeclarationGraph
from .core.loader import load_graph
from .synth import SynthesisConfig, SynthesisResult, SynthesisRunner, run_synthesis

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "DeclarationGraph",
    "load_graph",
    "SynthesisConfig",
    "SynthesisResult",
    "SynthesisRunner",
    "run_synthesis",
    "MicroApiError",
    "GraphLoadError",
    "ConfigError",
    "ResolutionError",
    "SynthesisError",
]
