"""OpenAPI to Types

A Python package that turns the schemas of an OpenAPI document into an
ordered, cycle-safe model of named type declarations, with per-field
presence states, enum literal sets, flattened allOf compositions and
tagged or untagged unions, ready for an external code renderer.
"""

__version__ = "1.0.0"

from .errors import (
    AmbiguousDiscriminator,
    CompositionConflict,
    DependencyFailed,
    EmptyEnum,
    IgnoredKeywords,
    InvalidComposition,
    SchemaError,
    SchemaWarning,
    UndeclaredRequiredField,
    UnknownFormat,
    UnresolvedReference,
    UntypedAdditionalProperties,
)
from .pipeline import (
    DeclKind,
    GeneratorConfig,
    PipelineGenerator,
    Presence,
    RefKind,
    TypeDecl,
    TypeModel,
    TypeRef,
    render_json,
    render_summary,
)

__all__ = [
    "PipelineGenerator",
    "GeneratorConfig",
    "TypeModel",
    "TypeDecl",
    "TypeRef",
    "DeclKind",
    "RefKind",
    "Presence",
    "render_json",
    "render_summary",
    "SchemaError",
    "UnresolvedReference",
    "CompositionConflict",
    "InvalidComposition",
    "EmptyEnum",
    "DependencyFailed",
    "SchemaWarning",
    "UnknownFormat",
    "AmbiguousDiscriminator",
    "UntypedAdditionalProperties",
    "UndeclaredRequiredField",
    "IgnoredKeywords",
]
