"""Core MicroAPI types: IR, errors, and the declaration graph adapter."""

from . import ir
from .errors import (
    ConfigError,
    DuplicateOutputError,
    GraphLoadError,
    MicroApiError,
    ResolutionError,
    SynthesisError,
    UnknownTargetError,
)
from .graph import DeclarationGraph
from .loader import load_graph, load_graph_data

__all__ = [
    "ir",
    "DeclarationGraph",
    "load_graph",
    "load_graph_data",
    "MicroApiError",
    "GraphLoadError",
    "ConfigError",
    "ResolutionError",
    "SynthesisError",
    "DuplicateOutputError",
    "UnknownTargetError",
]
