"""
Nullability/optionality analysis.

A field's presence state combines two independent flags: whether the owning
object lists it in `required`, and whether the property itself declares
`nullable: true`. Nothing else is consulted; nullability is never inherited
through references.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from ..schema_graph.nodes import SchemaNode

_MISSING = object()


class Presence(Enum):
    """The four presence states of an object field."""

    MANDATORY = "mandatory"  # key present, value non-null
    MANDATORY_NULLABLE = "mandatory_nullable"  # key present, value may be null
    OPTIONAL = "optional"  # key may be absent, non-null when present
    OPTIONAL_NULLABLE = "optional_nullable"  # key may be absent, may be null

    @property
    def is_required(self) -> bool:
        return self in (Presence.MANDATORY, Presence.MANDATORY_NULLABLE)

    @property
    def is_nullable(self) -> bool:
        return self in (Presence.MANDATORY_NULLABLE, Presence.OPTIONAL_NULLABLE)

    def admits(self, present: bool, value: Any = None) -> bool:
        """Whether a payload key in this state may be absent / present with `value`."""
        if not present:
            return not self.is_required
        return value is not None or self.is_nullable


_PRESENCE_TABLE = {
    (True, False): Presence.MANDATORY,
    (True, True): Presence.MANDATORY_NULLABLE,
    (False, False): Presence.OPTIONAL,
    (False, True): Presence.OPTIONAL_NULLABLE,
}


def presence_of(is_required: bool, is_nullable: bool) -> Presence:
    """Map the two independent flags to a presence state."""
    return _PRESENCE_TABLE[(bool(is_required), bool(is_nullable))]


def analyze_field(owner: SchemaNode, field_name: str) -> Presence:
    """
    Compute the presence state of one property of an object schema.

    Args:
        owner: The object schema declaring the property
        field_name: The property name

    Returns:
        The field's Presence
    """
    prop = owner.properties[field_name]
    return presence_of(field_name in owner.required_fields, prop.nullable)


def analyze_object(owner: SchemaNode) -> dict[str, Presence]:
    """Presence state of every property, in declaration order."""
    return {name: analyze_field(owner, name) for name in owner.properties}


def check_presence(fields: Mapping[str, Presence], payload: Mapping[str, Any]) -> list[str]:
    """
    Check a decoded payload against per-field presence states.

    Only key presence and null values are checked; value types are not.

    Returns:
        A list of violation messages (empty when the payload is valid)
    """
    violations = []
    for name, presence in fields.items():
        value = payload.get(name, _MISSING)
        present = value is not _MISSING
        if presence.admits(present, value if present else None):
            continue
        if not present:
            violations.append(f"missing required field '{name}'")
        else:
            violations.append(f"field '{name}' must not be null")
    return violations
