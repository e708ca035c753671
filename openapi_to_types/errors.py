"""
Error and warning taxonomy.

Fatal errors are exceptions: they abort the synthesis of the named schema
they occur in (and of every schema depending on it). Warnings are plain
records attached to the affected TypeDecl; generation continues.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class SchemaError(Exception):
    """Base class for fatal, per-schema errors."""

    def __init__(self, schema_name: str, message: str):
        super().__init__(message)
        self.schema_name = schema_name
        self.message = message


class UnresolvedReference(SchemaError):
    """A $ref points to a path absent from the schema graph."""

    def __init__(self, path: str, detail: str = ""):
        message = f"Unresolved reference: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(path.rsplit("/", 1)[-1], message)
        self.path = path


class CompositionConflict(SchemaError):
    """Two allOf members declare incompatible shapes for the same field."""

    def __init__(self, schema_name: str, field_name: str):
        super().__init__(schema_name, f"Conflicting definitions of field '{field_name}' in allOf of {schema_name}")
        self.field_name = field_name


class InvalidComposition(SchemaError):
    """A non-object member appears in allOf."""

    def __init__(self, schema_name: str, reason: str = "non-object member in allOf"):
        super().__init__(schema_name, f"Invalid composition in {schema_name}: {reason}")
        self.reason = reason


class EmptyEnum(SchemaError):
    """An enum schema declares zero values."""

    def __init__(self, schema_name: str):
        super().__init__(schema_name, f"Enum {schema_name} declares no values")


class DependencyFailed(SchemaError):
    """A schema references another schema whose synthesis failed."""

    def __init__(self, schema_name: str, dependency: str):
        super().__init__(schema_name, f"{schema_name} depends on {dependency}, which failed")
        self.dependency = dependency


@dataclass
class SchemaWarning:
    """A recoverable problem, reported on the affected declaration."""

    schema_name: str = ""
    message: str = field(default="", init=False)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"code": self.code, "schema": self.schema_name, "message": self.message}


@dataclass
class UnknownFormat(SchemaWarning):
    """Unrecognized format hint; the field falls back to its base primitive."""

    field_name: str = ""
    format: str = ""

    def __post_init__(self):
        self.message = f"Unknown format '{self.format}' on {self.schema_name}.{self.field_name}, using base type"


@dataclass
class AmbiguousDiscriminator(SchemaWarning):
    """A discriminated union member has no resolvable literal tag."""

    reason: str = ""

    def __post_init__(self):
        self.message = f"Discriminator of {self.schema_name} is ambiguous ({self.reason}), emitting untagged union"


@dataclass
class UntypedAdditionalProperties(SchemaWarning):
    """additionalProperties: true carries no value type."""

    field_name: str = ""

    def __post_init__(self):
        location = f"{self.schema_name}.{self.field_name}" if self.field_name else self.schema_name
        self.message = f"additionalProperties of {location} is untyped, using any"


@dataclass
class UndeclaredRequiredField(SchemaWarning):
    """A required field name has no matching property."""

    field_name: str = ""

    def __post_init__(self):
        self.message = f"{self.schema_name} requires '{self.field_name}' but does not declare it, ignoring"


@dataclass
class IgnoredKeywords(SchemaWarning):
    """Keywords the schema declares but the generated type does not represent."""

    path: str = ""
    keywords: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.message = f"Ignoring {', '.join(self.keywords)} at {self.path} in {self.schema_name}"
