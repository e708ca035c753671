"""
Analyzer module.

Contains reference resolution, presence analysis, composition and enum
synthesis, and the IR the emitter orders.
"""

from __future__ import annotations

from .composition import MergedObject, UnionShape, merge_all_of, synthesize_union
from .enums import EnumShape, synthesize_enum
from .ir_nodes import (
    DeclKind,
    FieldDecl,
    RefKind,
    TypeDecl,
    TypeModel,
    TypeRef,
    UnionVariant,
)
from .presence import Presence, analyze_field, analyze_object, check_presence, presence_of
from .reference_resolver import LazyReference, ReferenceResolver
from .synthesizer import SchemaSynthesizer

__all__ = [
    "DeclKind",
    "EnumShape",
    "FieldDecl",
    "LazyReference",
    "MergedObject",
    "Presence",
    "RefKind",
    "ReferenceResolver",
    "SchemaSynthesizer",
    "TypeDecl",
    "TypeModel",
    "TypeRef",
    "UnionShape",
    "UnionVariant",
    "analyze_field",
    "analyze_object",
    "check_presence",
    "merge_all_of",
    "presence_of",
    "synthesize_enum",
    "synthesize_union",
]
