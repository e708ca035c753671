"""
Schema graph module.

Contains the schema node definitions, the graph registry and the parser
building it from a decoded OpenAPI document.
"""

from __future__ import annotations

from .nodes import SchemaGraph, SchemaKind, SchemaNode, canonical_path, normalize_ref
from .parser import SchemaParser

__all__ = [
    "SchemaGraph",
    "SchemaKind",
    "SchemaNode",
    "SchemaParser",
    "canonical_path",
    "normalize_ref",
]
