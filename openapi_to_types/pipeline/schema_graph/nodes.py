"""
Schema graph node definitions.

These nodes hold the raw structure of an OpenAPI document's schemas before
any reference resolution or type synthesis. Every node reachable from the
graph is owned by it; references between named schemas are kept as
canonical paths, never as direct links.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

COMPONENTS_PREFIX = "#/components/schemas/"


class SchemaKind(Enum):
    """Closed set of schema node kinds."""

    PRIMITIVE = "primitive"  # string, integer, number, boolean, untyped
    OBJECT = "object"  # properties / additionalProperties
    ARRAY = "array"  # items
    ENUM = "enum"  # enum values
    COMPOSITION = "composition"  # allOf
    REFERENCE = "reference"  # $ref
    UNION = "union"  # oneOf / anyOf


@dataclass
class SchemaNode:
    """One named or anonymous schema unit."""

    kind: SchemaKind = SchemaKind.PRIMITIVE

    # Only set on top-level named schemas
    name: str | None = None

    # Location in the source document (for error messages)
    path: str = ""

    # Base JSON type: "string", "integer", "number", "boolean", "object" or None
    type_name: str | None = None
    format: str | None = None
    description: str | None = None
    nullable: bool = False

    # Object structure
    required_fields: set[str] = field(default_factory=set)
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    additional_properties: SchemaNode | bool | None = None

    # Array items
    items: SchemaNode | None = None

    # Enum literals in declaration order
    enum_values: list[Any] = field(default_factory=list)

    # allOf / oneOf / anyOf members
    members: list[SchemaNode] = field(default_factory=list)
    composition_type: str | None = None
    discriminator_field: str | None = None
    discriminator_mapping: dict[str, str] = field(default_factory=dict)

    # $ref target (canonical path)
    ref_path: str | None = None

    default: Any = None
    has_default: bool = False

    # x-* extensions
    metadata: dict[str, Any] = field(default_factory=dict)

    # Keywords present in the source but not represented by this node
    ignored_keywords: list[str] = field(default_factory=list)

    def walk(self) -> Iterator[SchemaNode]:
        """Yield this node and every nested anonymous node, depth first."""
        yield self
        for prop in self.properties.values():
            yield from prop.walk()
        if isinstance(self.additional_properties, SchemaNode):
            yield from self.additional_properties.walk()
        if self.items is not None:
            yield from self.items.walk()
        for member in self.members:
            yield from member.walk()

    @property
    def is_object(self) -> bool:
        return self.kind == SchemaKind.OBJECT

    @property
    def is_reference(self) -> bool:
        return self.kind == SchemaKind.REFERENCE


def canonical_path(name: str) -> str:
    """Return the canonical components path of a schema name."""
    return f"{COMPONENTS_PREFIX}{name}"


def normalize_ref(ref_path: str) -> str:
    """Map JSON-Schema style definition paths onto the components namespace."""
    for prefix in ("#/definitions/", "#/$defs/"):
        if ref_path.startswith(prefix):
            return canonical_path(ref_path[len(prefix) :])
    return ref_path


class SchemaGraph:
    """Registry of named schemas, keyed by canonical path.

    Built once per generation run by the parser and read-only afterwards.
    Iteration follows the document's definition order.
    """

    def __init__(self, nodes: dict[str, SchemaNode] | None = None):
        self._nodes: dict[str, SchemaNode] = dict(nodes or {})

    def add(self, node: SchemaNode) -> None:
        """Register a named node (parser use only)."""
        if not node.name:
            raise ValueError("Only named schemas can be registered in the graph")
        self._nodes[canonical_path(node.name)] = node

    def get(self, path: str) -> SchemaNode | None:
        return self._nodes.get(normalize_ref(path))

    def by_name(self, name: str) -> SchemaNode | None:
        return self._nodes.get(canonical_path(name))

    def paths(self) -> list[str]:
        return list(self._nodes)

    def names(self) -> list[str]:
        return [node.name for node in self._nodes.values()]

    def __contains__(self, path: str) -> bool:
        return normalize_ref(path) in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[SchemaNode]:
        return iter(self._nodes.values())
