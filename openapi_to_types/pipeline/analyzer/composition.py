"""
Composition synthesis.

- allOf: flatten the members into one object shape, refusing non-object
  members and fields declared twice with different shapes.
- oneOf / anyOf: collect the branches of a union and, when a discriminator
  is declared, the literal tag of every branch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...errors import AmbiguousDiscriminator, CompositionConflict, DependencyFailed, InvalidComposition, SchemaError, SchemaWarning
from ...log import get_logger
from ..schema_graph.nodes import SchemaKind, SchemaNode, canonical_path
from .reference_resolver import LazyReference, ReferenceResolver

logger = get_logger("composition")


@dataclass
class MergedObject:
    """Flattened result of an allOf composition."""

    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required_fields: set[str] = field(default_factory=set)
    additional_properties: SchemaNode | bool | None = None

    # Names of the referenced schemas merged in, in member order
    composed_from: list[str] = field(default_factory=list)


@dataclass
class UnionMember:
    """One branch of a oneOf / anyOf union."""

    node: SchemaNode  # As declared (reference or inline)
    target: SchemaNode | LazyReference | None = None  # After reference resolution
    tag: str | None = None
    required_fields: tuple[str, ...] = ()
    property_names: tuple[str, ...] = ()


@dataclass
class UnionShape:
    """Result of oneOf / anyOf synthesis."""

    members: list[UnionMember] = field(default_factory=list)
    union_type: str = "oneOf"
    discriminator: str | None = None
    tagged: bool = False
    warnings: list[SchemaWarning] = field(default_factory=list)


def merge_all_of(schema_name: str, node: SchemaNode, resolver: ReferenceResolver) -> MergedObject:
    """
    Flatten an allOf composition, left to right.

    Args:
        schema_name: Name used in error messages
        node: A composition SchemaNode
        resolver: Resolver of the current run

    Returns:
        MergedObject with the union of required fields and merged properties

    Raises:
        InvalidComposition: A member is not an object (or is circular)
        CompositionConflict: A field is declared twice with different shapes
    """
    merged = MergedObject()
    _merge_members(schema_name, node, resolver, merged)
    return merged


def _merge_members(schema_name: str, node: SchemaNode, resolver: ReferenceResolver, merged: MergedObject) -> None:
    for member in node.members:
        if not member.is_reference:
            _merge_member(schema_name, member, resolver, merged)
            continue

        target = resolver.resolve(member.ref_path)
        if isinstance(target, LazyReference):
            raise InvalidComposition(schema_name, f"circular allOf through {target.name}")
        merged.composed_from.append(target.name or resolver.name_for(member.ref_path))
        with resolver.visiting(canonical_path(target.name) if target.name else member.ref_path):
            _merge_member(schema_name, target, resolver, merged)


def _merge_member(schema_name: str, member: SchemaNode, resolver: ReferenceResolver, merged: MergedObject) -> None:
    if member.kind == SchemaKind.COMPOSITION:
        _merge_members(schema_name, member, resolver, merged)
        return

    if member.kind != SchemaKind.OBJECT:
        raise InvalidComposition(schema_name, f"{member.kind.value} member at {member.path}")

    for name, prop in member.properties.items():
        existing = merged.properties.get(name)
        if existing is None:
            merged.properties[name] = prop
        elif shape_signature(existing, resolver) != shape_signature(prop, resolver):
            raise CompositionConflict(schema_name, name)

    merged.required_fields |= member.required_fields
    if member.additional_properties is not None:
        merged.additional_properties = member.additional_properties


def shape_signature(node: SchemaNode, resolver: ReferenceResolver) -> tuple:
    """
    Structural identity of a property schema, used to compare allOf fields.

    Named objects, unions and compositions compare by resolved path; aliases
    of primitives, enums and arrays compare by their resolved structure.
    `nullable` is the property's own flag.
    """
    nullable = node.nullable
    target: SchemaNode | LazyReference = node
    if node.is_reference:
        target = resolver.resolve(node.ref_path)
        if isinstance(target, LazyReference):
            return ("named", target.path, nullable)
        if target.kind in (SchemaKind.OBJECT, SchemaKind.COMPOSITION, SchemaKind.UNION):
            return ("named", canonical_path(target.name) if target.name else node.ref_path, nullable)
        with resolver.visiting(canonical_path(target.name) if target.name else node.ref_path):
            return _structural_signature(target, resolver, nullable)
    return _structural_signature(target, resolver, nullable)


def _structural_signature(node: SchemaNode, resolver: ReferenceResolver, nullable: bool) -> tuple:
    kind = node.kind
    if kind == SchemaKind.PRIMITIVE:
        return ("primitive", node.type_name, node.format, nullable)
    if kind == SchemaKind.ENUM:
        return ("enum", node.type_name, tuple(repr(v) for v in node.enum_values), nullable)
    if kind == SchemaKind.ARRAY:
        items = shape_signature(node.items, resolver) if node.items is not None else None
        return ("array", items, nullable)
    if kind == SchemaKind.OBJECT:
        props = tuple((name, shape_signature(prop, resolver)) for name, prop in node.properties.items())
        return ("object", props, tuple(sorted(node.required_fields)), nullable)
    # Anonymous unions (with their shared properties) and compositions
    props = tuple((name, shape_signature(prop, resolver)) for name, prop in node.properties.items())
    members = tuple(shape_signature(m, resolver) for m in node.members)
    return (kind.value, node.composition_type, props, members, nullable)


def synthesize_union(schema_name: str, node: SchemaNode, resolver: ReferenceResolver) -> UnionShape:
    """
    Collect the branches of a oneOf / anyOf union.

    anyOf and oneOf produce the same shape. With a discriminator, every
    branch must be an object exposing the discriminator property as a single
    string literal (or be named in discriminator.mapping); otherwise an
    AmbiguousDiscriminator warning is recorded and the union is untagged.
    Properties declared next to oneOf / anyOf are shared by every branch.

    Args:
        schema_name: Name used in messages
        node: A union SchemaNode
        resolver: Resolver of the current run

    Returns:
        UnionShape with one UnionMember per branch

    Raises:
        CompositionConflict: A branch redeclares a shared property differently
        DependencyFailed: A named allOf branch cannot be flattened
    """
    shape = UnionShape(union_type=node.composition_type or "oneOf", discriminator=node.discriminator_field)

    for member in node.members:
        union_member = UnionMember(node=member)
        union_member.target = resolver.resolve_node(member)
        properties, required = _object_structure(schema_name, union_member.target, resolver)
        if node.properties or node.required_fields:
            properties, required = _with_base(schema_name, node, properties, required, resolver)
        union_member.property_names = tuple(properties)
        union_member.required_fields = tuple(sorted(name for name in required if name in properties))
        if node.discriminator_field:
            union_member.tag = _member_tag(node, member, properties, resolver)
        shape.members.append(union_member)

    if node.discriminator_field:
        reason = _tag_problem(shape)
        if reason:
            warning = AmbiguousDiscriminator(schema_name, reason=reason)
            logger.warning(warning.message)
            shape.warnings.append(warning)
            for union_member in shape.members:
                union_member.tag = None
        else:
            shape.tagged = True

    return shape


def _object_structure(
    schema_name: str,
    target: SchemaNode | LazyReference,
    resolver: ReferenceResolver,
) -> tuple[dict[str, SchemaNode], set[str]]:
    """Properties and required names of an object-like union branch.

    A branch that is in progress is still referenced by name, but its shape
    is read from the graph: reading a node's own properties does not recurse.

    Raises:
        DependencyFailed: A named allOf branch cannot be flattened
    """
    if isinstance(target, LazyReference):
        node = resolver.target_of(target.path)
        if node.kind == SchemaKind.COMPOSITION:
            return _merge_branch(schema_name, node, resolver)
        target = node

    if target.kind == SchemaKind.OBJECT:
        return target.properties, target.required_fields
    if target.kind == SchemaKind.COMPOSITION:
        if not target.name:
            merged = merge_all_of(schema_name, target, resolver)
            return merged.properties, merged.required_fields
        with resolver.visiting(canonical_path(target.name)):
            return _merge_branch(schema_name, target, resolver)
    return {}, set()


def _merge_branch(schema_name: str, target: SchemaNode, resolver: ReferenceResolver) -> tuple[dict[str, SchemaNode], set[str]]:
    try:
        merged = merge_all_of(target.name, target, resolver)
    except SchemaError as error:
        # The branch fails on its own; the union only depends on it
        raise DependencyFailed(schema_name, target.name) from error
    return merged.properties, merged.required_fields


def _with_base(
    schema_name: str,
    node: SchemaNode,
    properties: dict[str, SchemaNode],
    required: set[str],
    resolver: ReferenceResolver,
) -> tuple[dict[str, SchemaNode], set[str]]:
    """Add the union's own (shared) properties in front of a branch's."""
    combined = dict(node.properties)
    for name, prop in properties.items():
        existing = combined.get(name)
        if existing is not None and shape_signature(existing, resolver) != shape_signature(prop, resolver):
            raise CompositionConflict(schema_name, name)
        combined[name] = prop
    return combined, node.required_fields | required


def _member_tag(
    node: SchemaNode,
    member: SchemaNode,
    properties: dict[str, SchemaNode],
    resolver: ReferenceResolver,
) -> str | None:
    prop = properties.get(node.discriminator_field)
    if prop is not None:
        literal = single_literal(prop, resolver)
        if literal is not None:
            return literal

    if member.is_reference:
        for tag, target_path in node.discriminator_mapping.items():
            if target_path == member.ref_path:
                return tag
    return None


def single_literal(prop: SchemaNode, resolver: ReferenceResolver) -> str | None:
    """The string value of a single-literal enum property, if it is one."""
    target = resolver.resolve_node(prop)
    if isinstance(target, LazyReference) or target.kind != SchemaKind.ENUM:
        return None
    values: list[Any] = []
    for value in target.enum_values:
        if value is not None and value not in values:
            values.append(value)
    if len(values) != 1 or not isinstance(values[0], str):
        return None
    return values[0]


def _tag_problem(shape: UnionShape) -> str | None:
    """Describe why the union cannot be tagged, or None when it can."""
    seen: dict[str, int] = {}
    for i, member in enumerate(shape.members):
        label = _member_label(member, i)
        if member.tag is None:
            return f"{label} has no literal '{shape.discriminator}' value"
        if member.tag in seen:
            return f"tag '{member.tag}' is used by more than one member"
        seen[member.tag] = i
    return None


def _member_label(member: UnionMember, index: int) -> str:
    if member.node.is_reference:
        return f"member {member.node.ref_path.rsplit('/', 1)[-1]}"
    return f"member #{index}"
