"""
IR (Intermediate Representation) node definitions.

These nodes are the engine's output: named type declarations with their
resolved structural shape, ready for an external renderer. Declarations
refer to each other by name only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from ...errors import SchemaError, SchemaWarning
from .presence import Presence


class DeclKind(Enum):
    """Kind of a top-level declaration."""

    OBJECT = "object"  # fields + optional index signature
    UNION = "union"  # tagged or untagged variants
    ENUM = "enum"  # literal set
    ALIAS = "alias"  # another name for a type reference


class RefKind(Enum):
    """Kind of a type reference."""

    PRIMITIVE = "primitive"  # string, integer, number, boolean
    NAMED = "named"  # Another declaration, by name
    ARRAY = "array"  # list[T]
    MAP = "map"  # dict[str, T]
    LITERAL = "literal"  # Literal["a", "b"]
    UNION = "union"  # T | U
    ANY = "any"  # Any


@dataclass
class TypeRef:
    """A resolved type reference."""

    kind: RefKind = RefKind.ANY
    name: str = ""  # Primitive type name or target declaration name
    format: str | None = None
    nullable: bool = False

    # Array items / map values
    items: TypeRef | None = None

    # Inline union variants
    variants: list[TypeRef] = field(default_factory=list)

    # Literal values
    literals: list[Any] = field(default_factory=list)

    # Set by the emitter on cycle-broken edges
    deferred: bool = False

    def walk(self) -> Iterator[TypeRef]:
        """Yield this reference and every nested one, depth first."""
        yield self
        if self.items is not None:
            yield from self.items.walk()
        for variant in self.variants:
            yield from variant.walk()

    def referenced_names(self) -> list[str]:
        names = []
        for ref in self.walk():
            if ref.kind == RefKind.NAMED and ref.name not in names:
                names.append(ref.name)
        return names

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"kind": self.kind.value}
        if self.name:
            d["name"] = self.name
        if self.format:
            d["format"] = self.format
        if self.nullable:
            d["nullable"] = True
        if self.items is not None:
            d["items"] = self.items.to_dict()
        if self.variants:
            d["variants"] = [v.to_dict() for v in self.variants]
        if self.kind == RefKind.LITERAL:
            d["literals"] = list(self.literals)
        if self.kind == RefKind.NAMED:
            d["deferred"] = self.deferred
        return d


@dataclass
class FieldDecl:
    """A field of an object declaration."""

    name: str = ""
    type_ref: TypeRef | None = None
    presence: Presence = Presence.OPTIONAL
    description: str | None = None
    default: Any = None
    has_default: bool = False

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "type": self.type_ref.to_dict() if self.type_ref else None,
            "presence": self.presence.value,
            "required": self.presence.is_required,
            "nullable": self.presence.is_nullable,
        }
        if self.description:
            d["description"] = self.description
        if self.has_default:
            d["default"] = self.default
        return d


@dataclass
class UnionVariant:
    """A union member with its structural signature."""

    type_ref: TypeRef | None = None
    tag: str | None = None  # Discriminator literal (tagged unions)
    required_fields: tuple[str, ...] = ()
    property_names: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        d = {
            "type": self.type_ref.to_dict() if self.type_ref else None,
            "required_fields": list(self.required_fields),
            "property_names": list(self.property_names),
        }
        if self.tag is not None:
            d["tag"] = self.tag
        return d


@dataclass
class TypeDecl:
    """A named type declaration."""

    name: str = ""
    kind: DeclKind = DeclKind.ALIAS
    description: str | None = None
    source_path: str = ""
    nullable: bool = False

    # Objects
    fields: list[FieldDecl] = field(default_factory=list)
    additional_properties: TypeRef | None = None
    composed_from: list[str] = field(default_factory=list)

    # Unions
    variants: list[UnionVariant] = field(default_factory=list)
    union_type: str | None = None  # "oneOf" or "anyOf"
    discriminator: str | None = None
    tagged: bool = False

    # Enums
    enum_type: str | None = None
    literals: list[Any] = field(default_factory=list)
    member_names: dict[str, Any] = field(default_factory=dict)

    # Aliases
    target: TypeRef | None = None

    # Name of the named schema this anonymous declaration was hoisted from
    owner: str | None = None

    warnings: list[SchemaWarning] = field(default_factory=list)

    def type_refs(self) -> Iterator[TypeRef]:
        """Yield every top-level type reference held by this declaration."""
        for field_decl in self.fields:
            if field_decl.type_ref is not None:
                yield field_decl.type_ref
        if self.additional_properties is not None:
            yield self.additional_properties
        for variant in self.variants:
            if variant.type_ref is not None:
                yield variant.type_ref
        if self.target is not None:
            yield self.target

    def references(self) -> list[str]:
        """Names of the declarations referenced directly, in first-use order."""
        names = []
        for type_ref in self.type_refs():
            for name in type_ref.referenced_names():
                if name not in names:
                    names.append(name)
        return names

    def deferred_references(self) -> list[str]:
        names = []
        for type_ref in self.type_refs():
            for ref in type_ref.walk():
                if ref.kind == RefKind.NAMED and ref.deferred and ref.name not in names:
                    names.append(ref.name)
        return names

    def get_field(self, name: str) -> FieldDecl | None:
        for field_decl in self.fields:
            if field_decl.name == name:
                return field_decl
        return None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.description:
            d["description"] = self.description
        if self.nullable:
            d["nullable"] = True
        if self.kind == DeclKind.OBJECT:
            d["fields"] = [f.to_dict() for f in self.fields]
            if self.additional_properties is not None:
                d["additional_properties"] = self.additional_properties.to_dict()
            if self.composed_from:
                d["composed_from"] = list(self.composed_from)
        elif self.kind == DeclKind.UNION:
            d["union_type"] = self.union_type
            d["tagged"] = self.tagged
            if self.discriminator:
                d["discriminator"] = self.discriminator
            d["variants"] = [v.to_dict() for v in self.variants]
            if self.fields:
                d["fields"] = [f.to_dict() for f in self.fields]
            if self.additional_properties is not None:
                d["additional_properties"] = self.additional_properties.to_dict()
        elif self.kind == DeclKind.ENUM:
            d["enum_type"] = self.enum_type
            d["literals"] = list(self.literals)
            d["member_names"] = dict(self.member_names)
        elif self.target is not None:
            d["target"] = self.target.to_dict()
        if self.owner:
            d["owner"] = self.owner
        if self.warnings:
            d["warnings"] = [w.to_dict() for w in self.warnings]
        return d


@dataclass
class TypeModel:
    """The ordered output of a generation run."""

    declarations: list[TypeDecl] = field(default_factory=list)

    # Named schema -> fatal error that dropped it
    failures: dict[str, SchemaError] = field(default_factory=dict)

    # (source, target) edges broken to order a cycle
    deferred_edges: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def names(self) -> list[str]:
        return [decl.name for decl in self.declarations]

    def get(self, name: str) -> TypeDecl | None:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None

    def warnings(self) -> list[SchemaWarning]:
        return [warning for decl in self.declarations for warning in decl.warnings]

    def to_dict(self) -> dict:
        return {
            "declarations": [decl.to_dict() for decl in self.declarations],
            "deferred_edges": [list(edge) for edge in self.deferred_edges],
            "failures": {name: {"error": type(error).__name__, "message": error.message} for name, error in self.failures.items()},
        }
