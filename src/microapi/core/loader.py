"""
Declaration graph loading.

The host serializes its declaration graph to a JSON document
(``{"declarations": [...]}``); this module validates it into IR models.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import GraphLoadError
from .graph import DeclarationGraph
from .ir import GraphDocument

logger = logging.getLogger(__name__)


def load_graph_data(data: dict[str, Any] | list[Any]) -> DeclarationGraph:
    """
    Build a DeclarationGraph from already-parsed JSON data.

    A bare list is accepted as the declarations array.
    """
    if isinstance(data, list):
        data = {"declarations": data}
    try:
        document = GraphDocument.model_validate(data)
    except ValidationError as e:
        raise GraphLoadError(f"Invalid declaration graph: {e}") from e
    return DeclarationGraph(document.declarations)


def load_graph(path: Path) -> DeclarationGraph:
    """
    Load a declaration graph document from disk.

    Args:
        path: Path to the JSON graph document

    Returns:
        DeclarationGraph over every fragment in the document

    Raises:
        GraphLoadError: If the file is missing, not JSON, or off-schema
    """
    if not path.exists():
        raise GraphLoadError(f"Declaration graph not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"{path}: invalid JSON at line {e.lineno}: {e.msg}") from e

    graph = load_graph_data(data)
    logger.debug("Loaded %d declarations from %s", len(graph), path)
    return graph
