"""
Pipeline - OpenAPI schema to type model generator.

This module provides a multi-phase architecture for turning the schemas of
an OpenAPI document into ordered type declarations:

1. Phase 1 (Parser): Parse components/schemas into the Schema Graph
2. Phase 2 (Synthesizer): Resolve references, merge allOf, build unions
   and enums, compute field presence states
3. Phase 3 (Emitter): Isolate failures and order declarations, flagging
   cycle-broken references as deferred
4. Phase 4 (Renderer, optional): Plain-text summary of the type model
"""

from __future__ import annotations

from .analyzer import DeclKind, FieldDecl, Presence, RefKind, TypeDecl, TypeModel, TypeRef, UnionVariant
from .config import GeneratorConfig
from .emitter import TypeModelEmitter
from .generator import PipelineGenerator
from .renderers import render_json, render_summary
from .schema_graph import SchemaGraph, SchemaKind, SchemaNode, SchemaParser

__all__ = [
    "PipelineGenerator",
    "GeneratorConfig",
    "TypeModelEmitter",
    "SchemaGraph",
    "SchemaKind",
    "SchemaNode",
    "SchemaParser",
    "DeclKind",
    "FieldDecl",
    "Presence",
    "RefKind",
    "TypeDecl",
    "TypeModel",
    "TypeRef",
    "UnionVariant",
    "render_json",
    "render_summary",
]
