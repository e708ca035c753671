"""
Enum synthesis: collapse declared enum values into an ordered literal set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...errors import EmptyEnum
from ...utils import to_constant_name
from ..schema_graph.nodes import SchemaNode


@dataclass
class EnumShape:
    """Deduplicated literal set of an enum schema."""

    value_type: str = "string"
    values: list[Any] = field(default_factory=list)
    member_names: dict[str, Any] = field(default_factory=dict)  # constant name -> value
    includes_null: bool = False


def infer_type(value: Any) -> str:
    """Infer the JSON type of a literal value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def synthesize_enum(schema_name: str, node: SchemaNode) -> EnumShape:
    """
    Build the literal set of an enum schema.

    Declaration order is kept (it may carry meaning, e.g. a state
    progression); duplicates collapse to their first occurrence. A `null`
    entry is dropped from the literal set and recorded on the shape.

    Args:
        schema_name: Name used in error messages
        node: An enum SchemaNode

    Returns:
        EnumShape with unique values and constant names

    Raises:
        EmptyEnum: No non-null values are declared
    """
    values = []
    seen = set()
    includes_null = False
    for value in node.enum_values:
        if value is None:
            includes_null = True
            continue
        # Key on the type too, so that 1 and True stay distinct
        key = (type(value).__name__, repr(value))
        if key in seen:
            continue
        seen.add(key)
        values.append(value)

    if not values:
        raise EmptyEnum(schema_name)

    value_type = node.type_name or infer_type(values[0])
    return EnumShape(
        value_type=value_type,
        values=values,
        member_names=_member_names(node, values),
        includes_null=includes_null,
    )


def _member_names(node: SchemaNode, values: list[Any]) -> dict[str, Any]:
    """Constant names from x-enum-varnames / x-enum-members, else generated."""
    varnames = node.metadata.get("x-enum-varnames")
    members = dict(node.metadata.get("x-enum-members") or {})
    if isinstance(varnames, list):
        # Positional names refer to the declared (not deduplicated) values
        for declared, varname in zip(node.enum_values, varnames):
            members.setdefault(str(declared), varname)

    names: dict[str, Any] = {}
    for value in values:
        if str(value) in members:
            name = str(members[str(value)])
        else:
            name = to_constant_name(value)

        unique_name = name
        suffix = 2
        while unique_name in names:
            unique_name = f"{name}_{suffix}"
            suffix += 1
        names[unique_name] = value
    return names
