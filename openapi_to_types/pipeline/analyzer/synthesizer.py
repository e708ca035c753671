"""
Schema synthesizer that turns one named schema into TypeDecls.

Each named schema is an isolated unit: it produces its own declaration plus
the declarations hoisted out of its anonymous sub-schemas. Other named
schemas are referenced by name only.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...errors import IgnoredKeywords, UndeclaredRequiredField, UnknownFormat, UnresolvedReference, UntypedAdditionalProperties
from ...log import get_logger
from ..config import GeneratorConfig
from ..schema_graph.nodes import SchemaGraph, SchemaKind, SchemaNode, canonical_path
from .composition import merge_all_of, synthesize_union
from .enums import synthesize_enum
from .formats import FormatRegistry
from .ir_nodes import DeclKind, FieldDecl, RefKind, TypeDecl, TypeRef, UnionVariant
from .name_resolver import NameAllocator
from .presence import Presence, analyze_object, presence_of
from .reference_resolver import ReferenceResolver

logger = get_logger("synthesizer")

# Union members that can stay inline in a field type
_INLINE_UNION_KINDS = (SchemaKind.PRIMITIVE, SchemaKind.ENUM)


@dataclass
class _Unit:
    """State of the named schema being synthesized."""

    root: str
    names: NameAllocator
    hoisted: list[TypeDecl] = field(default_factory=list)


class SchemaSynthesizer:
    """Synthesizes TypeDecls for named schemas."""

    def __init__(self, graph: SchemaGraph, resolver: ReferenceResolver, config: GeneratorConfig):
        """
        Initialize the synthesizer.

        Args:
            graph: The schema graph of the current run
            resolver: Resolver shared by the run
            config: Generation configuration
        """
        self.graph = graph
        self.resolver = resolver
        self.config = config
        self.formats = FormatRegistry(config.extra_formats)

    def synthesize(self, name: str) -> list[TypeDecl]:
        """
        Synthesize one named schema.

        Args:
            name: Name of a schema in the graph

        Returns:
            The schema's declaration followed by its hoisted declarations

        Raises:
            SchemaError: A fatal problem in this schema
        """
        node = self.graph.by_name(name)
        if node is None:
            raise UnresolvedReference(canonical_path(name))

        unit = _Unit(root=name, names=NameAllocator(self.graph.names()))
        with self.resolver.visiting(canonical_path(name)):
            decl = self._declare(unit, name, node)

        for nested in node.walk():
            if nested.ignored_keywords:
                self._warn(decl, IgnoredKeywords(name, path=nested.path, keywords=list(nested.ignored_keywords)))

        logger.debug("Synthesized %s (%s) with %d hoisted declarations", name, decl.kind.value, len(unit.hoisted))
        return [decl] + unit.hoisted

    def _declare(self, unit: _Unit, name: str, node: SchemaNode) -> TypeDecl:
        """Build the declaration of `node` under `name`."""
        decl = TypeDecl(
            name=name,
            description=node.description,
            source_path=node.path,
            nullable=node.nullable,
            owner=unit.root if name != unit.root else None,
        )

        if node.kind == SchemaKind.OBJECT:
            decl.kind = DeclKind.OBJECT
            self._fill_object(unit, decl, node.properties, analyze_object(node), node.required_fields, node.additional_properties)

        elif node.kind == SchemaKind.COMPOSITION:
            merged = merge_all_of(name, node, self.resolver)
            decl.kind = DeclKind.OBJECT
            decl.composed_from = merged.composed_from
            presences = {prop_name: presence_of(prop_name in merged.required_fields, prop.nullable) for prop_name, prop in merged.properties.items()}
            self._fill_object(unit, decl, merged.properties, presences, merged.required_fields, merged.additional_properties)

        elif node.kind == SchemaKind.UNION:
            self._fill_union(unit, decl, node)

        elif node.kind == SchemaKind.ENUM:
            shape = synthesize_enum(name, node)
            decl.kind = DeclKind.ENUM
            decl.enum_type = shape.value_type
            decl.literals = shape.values
            decl.member_names = shape.member_names
            decl.nullable = node.nullable or shape.includes_null

        elif node.kind == SchemaKind.REFERENCE:
            # Aliases must reach a real schema; loops of pure aliases are fatal
            self.resolver.target_of(node.ref_path)
            decl.kind = DeclKind.ALIAS
            decl.target = self._type_ref(unit, decl, node, field_name="", hint="")

        else:
            decl.kind = DeclKind.ALIAS
            decl.target = self._type_ref(unit, decl, node, field_name="", hint="")

        return decl

    def _fill_object(
        self,
        unit: _Unit,
        decl: TypeDecl,
        properties: dict[str, SchemaNode],
        presences: dict[str, Presence],
        required: set[str],
        additional: SchemaNode | bool | None,
    ) -> None:
        for prop_name, prop in properties.items():
            decl.fields.append(
                FieldDecl(
                    name=prop_name,
                    type_ref=self._type_ref(unit, decl, prop, field_name=prop_name, hint=prop_name),
                    presence=presences[prop_name],
                    description=prop.description,
                    default=prop.default,
                    has_default=prop.has_default,
                )
            )

        for prop_name in sorted(required - set(properties)):
            self._warn(decl, UndeclaredRequiredField(decl.name, field_name=prop_name))

        if isinstance(additional, SchemaNode):
            decl.additional_properties = self._type_ref(unit, decl, additional, field_name="", hint="value")
        elif additional is True:
            self._warn(decl, UntypedAdditionalProperties(decl.name))
            decl.additional_properties = TypeRef(kind=RefKind.ANY)

    def _fill_union(self, unit: _Unit, decl: TypeDecl, node: SchemaNode) -> None:
        shape = synthesize_union(decl.name, node, self.resolver)
        decl.kind = DeclKind.UNION
        decl.union_type = shape.union_type
        decl.discriminator = shape.discriminator
        decl.tagged = shape.tagged
        decl.warnings.extend(shape.warnings)

        # Properties shared by every branch
        if node.properties or node.required_fields:
            self._fill_object(unit, decl, node.properties, analyze_object(node), node.required_fields, node.additional_properties)

        for i, member in enumerate(shape.members):
            decl.variants.append(
                UnionVariant(
                    type_ref=self._type_ref(unit, decl, member.node, field_name="", hint=f"option_{i + 1}"),
                    tag=member.tag,
                    required_fields=member.required_fields,
                    property_names=member.property_names,
                )
            )

    def _type_ref(self, unit: _Unit, decl: TypeDecl, node: SchemaNode, field_name: str, hint: str) -> TypeRef:
        """
        Build the type reference of a field, array item, map value or variant.

        Args:
            unit: The named schema being synthesized
            decl: The declaration holding the reference (receives warnings
                and names hoisted declarations)
            node: The schema of the referenced type
            field_name: Field name used in warnings ("" when not a field)
            hint: Suffix for hoisted declaration names

        Returns:
            TypeRef describing the type
        """
        kind = node.kind

        if kind == SchemaKind.REFERENCE:
            if node.ref_path not in self.graph:
                raise UnresolvedReference(node.ref_path)
            return TypeRef(kind=RefKind.NAMED, name=self.resolver.name_for(node.ref_path), nullable=node.nullable)

        if kind == SchemaKind.PRIMITIVE:
            if node.type_name is None:
                return TypeRef(kind=RefKind.ANY, nullable=node.nullable)
            type_format = node.format
            if type_format and not self.formats.is_known(node.type_name, type_format):
                self._warn(decl, UnknownFormat(decl.name, field_name=field_name, format=type_format))
                type_format = None
            return TypeRef(kind=RefKind.PRIMITIVE, name=node.type_name, format=type_format, nullable=node.nullable)

        if kind == SchemaKind.ENUM:
            shape = synthesize_enum(decl.name, node)
            return TypeRef(
                kind=RefKind.LITERAL,
                name=shape.value_type,
                literals=shape.values,
                nullable=node.nullable or shape.includes_null,
            )

        if kind == SchemaKind.ARRAY:
            if node.items is None:
                items = TypeRef(kind=RefKind.ANY)
            else:
                items = self._type_ref(unit, decl, node.items, field_name=field_name, hint=f"{hint}_item")
            return TypeRef(kind=RefKind.ARRAY, name="array", items=items, nullable=node.nullable)

        if kind == SchemaKind.OBJECT and not node.properties:
            return self._map_ref(unit, decl, node, field_name, hint)

        if kind == SchemaKind.UNION and not node.discriminator_field and not node.properties and all(m.kind in _INLINE_UNION_KINDS for m in node.members):
            variants = [self._type_ref(unit, decl, member, field_name=field_name, hint=hint) for member in node.members]
            return TypeRef(kind=RefKind.UNION, name="union", variants=variants, nullable=node.nullable)

        # Objects with properties, compositions and unions of structured members
        return self._hoist(unit, decl, node, hint)

    def _map_ref(self, unit: _Unit, decl: TypeDecl, node: SchemaNode, field_name: str, hint: str) -> TypeRef:
        """Type of an object without properties: a map, or any object."""
        additional = node.additional_properties
        if isinstance(additional, SchemaNode):
            values = self._type_ref(unit, decl, additional, field_name=field_name, hint=f"{hint}_value")
            return TypeRef(kind=RefKind.MAP, name="map", items=values, nullable=node.nullable)
        if additional is True:
            self._warn(decl, UntypedAdditionalProperties(decl.name, field_name=field_name))
            return TypeRef(kind=RefKind.MAP, name="map", items=TypeRef(kind=RefKind.ANY), nullable=node.nullable)
        return TypeRef(kind=RefKind.ANY, name="object", nullable=node.nullable)

    def _hoist(self, unit: _Unit, decl: TypeDecl, node: SchemaNode, hint: str) -> TypeRef:
        """Declare an anonymous schema under a generated name and reference it."""
        name = unit.names.allocate(decl.name, hint)
        hoisted = self._declare(unit, name, node)
        unit.hoisted.append(hoisted)
        return TypeRef(kind=RefKind.NAMED, name=name, nullable=node.nullable)

    def _warn(self, decl: TypeDecl, warning) -> None:
        logger.warning(warning.message)
        decl.warnings.append(warning)
