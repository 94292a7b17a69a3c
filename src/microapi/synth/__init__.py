"""
MicroAPI synthesis pipelines.

Facade -> Controller and Entity -> Dto, plus the shared discovery,
annotation, route-binding, and attribute-propagation machinery.

Usage:
    microapi generate graph.json              # Write generated sources
    microapi generate graph.json -t fastapi   # Render for FastAPI
    microapi check graph.json                 # Diagnostics only
"""

from .annotations import AnnotationReader, format_arguments, format_value
from .config import SynthesisConfig, SynthesisOutputConfig, load_synthesis_config
from .controller import ControllerSynthesizer
from .diagnostics import DiagnosticReporter
from .discovery import DiscoveryResult, discover
from .dto import DtoResolver, DtoSynthesizer
from .facade import FacadeResolver
from .generator import GeneratedUnit, SynthesisResult
from .propagation import AttributePropagator
from .routes import RouteBinding, bind_route, extract_route_parameters
from .runner import SynthesisRunner, run_synthesis
from .targets import AspNetTarget, FastAPITarget, Target, TargetRegistry

__all__ = [
    # Config
    "SynthesisConfig",
    "SynthesisOutputConfig",
    "load_synthesis_config",
    # Discovery and resolution
    "discover",
    "DiscoveryResult",
    "AnnotationReader",
    "format_value",
    "format_arguments",
    "RouteBinding",
    "bind_route",
    "extract_route_parameters",
    "AttributePropagator",
    "FacadeResolver",
    "DtoResolver",
    # Synthesis
    "ControllerSynthesizer",
    "DtoSynthesizer",
    "DiagnosticReporter",
    "GeneratedUnit",
    "SynthesisResult",
    # Targets
    "Target",
    "TargetRegistry",
    "AspNetTarget",
    "FastAPITarget",
    # Runner
    "SynthesisRunner",
    "run_synthesis",
]
