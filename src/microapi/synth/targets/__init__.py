"""
Rendering targets for synthesized declarations.

- aspnet: ASP.NET Core controllers, records, and partial classes (C#)
- fastapi: FastAPI routers and Pydantic models (Python)
"""

from .aspnet import AspNetTarget
from .base import Target, TargetRegistry
from .fastapi import FastAPITarget

__all__ = [
    "Target",
    "TargetRegistry",
    "AspNetTarget",
    "FastAPITarget",
]
