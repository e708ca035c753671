"""
OpenAPI schema parser that builds the schema graph.

Phase 1 of the pipeline: turn the decoded document's schema objects into
SchemaNodes without resolving references or synthesizing types.
"""

from __future__ import annotations

from typing import Any

from ...log import get_logger
from .nodes import SchemaGraph, SchemaKind, SchemaNode, canonical_path, normalize_ref

logger = get_logger("parser")


class SchemaParser:
    """Parses the components/schemas section of an OpenAPI document."""

    # Primitive type names
    PRIMITIVE_TYPES = {"string", "integer", "number", "boolean"}

    # Keywords describing an object shape
    OBJECT_KEYWORDS = ("properties", "required", "additionalProperties")

    # Keywords that each shape a node; a node kind consumes only some of them
    STRUCTURAL_KEYWORDS = ("$ref", "allOf", "oneOf", "anyOf", "enum", "const", "items", *OBJECT_KEYWORDS)

    # Keywords outside the supported OpenAPI 3.0 subset
    UNSUPPORTED_KEYWORDS = ("not", "if", "then", "else", "patternProperties", "dependentSchemas")

    def parse(self, document: dict[str, Any]) -> SchemaGraph:
        """
        Parse a decoded OpenAPI document into a SchemaGraph.

        Args:
            document: The decoded document (components/schemas, or
                definitions / $defs for plain JSON Schema documents)

        Returns:
            SchemaGraph holding one node per named schema
        """
        graph = SchemaGraph()
        schemas = self._find_schemas(document)

        for name, raw in schemas.items():
            # Skip comment fields (strings) and _comment prefixed keys
            if not isinstance(raw, dict) or name.startswith("_comment"):
                continue

            node = self._parse_schema_node(raw, canonical_path(name))
            node.name = name
            graph.add(node)

        logger.debug("Parsed %d named schemas", len(graph))
        return graph

    def _find_schemas(self, document: dict[str, Any]) -> dict[str, Any]:
        components = document.get("components") or {}
        schemas = components.get("schemas")
        if schemas is None:
            schemas = document.get("definitions") or document.get("$defs") or {}
        return schemas

    def _parse_schema_node(self, schema: Any, path: str) -> SchemaNode:
        """
        Parse a schema node recursively.

        Args:
            schema: The raw schema object
            path: Current path in the document (for error messages)

        Returns:
            SchemaNode of the matching kind
        """
        # `true` / `{}` accept anything
        if not isinstance(schema, dict):
            return SchemaNode(kind=SchemaKind.PRIMITIVE, path=path)

        if "$ref" in schema:
            node = self._parse_ref_node(schema, path)
            consumed = ("$ref",)
        elif "allOf" in schema:
            node = self._parse_allof_node(schema, path)
            consumed = ("allOf", *self.OBJECT_KEYWORDS)
        elif "oneOf" in schema or "anyOf" in schema:
            node = self._parse_union_node(schema, path)
            consumed = (node.composition_type, *self.OBJECT_KEYWORDS)
        elif "enum" in schema or "const" in schema:
            node = self._parse_enum_node(schema, path)
            consumed = ("enum", "const")
        else:
            node = self._parse_type_node(schema, path)
            consumed = self._consumed_by_type(node)

        node.ignored_keywords = [key for key in self.STRUCTURAL_KEYWORDS if key in schema and key not in consumed]
        node.ignored_keywords.extend(key for key in self.UNSUPPORTED_KEYWORDS if key in schema)
        if node.ignored_keywords:
            logger.debug("Ignoring %s at %s", ", ".join(node.ignored_keywords), path)

        self._apply_common(node, schema)
        return node

    def _consumed_by_type(self, node: SchemaNode) -> tuple[str, ...]:
        """Structural keywords represented by a node parsed from `type`."""
        if node.kind == SchemaKind.OBJECT:
            return self.OBJECT_KEYWORDS
        if node.kind == SchemaKind.ARRAY:
            return ("items",)
        if node.kind == SchemaKind.UNION:
            # Type lists hand each keyword to the branch of the matching type
            return self.STRUCTURAL_KEYWORDS
        return ()

    def _apply_common(self, node: SchemaNode, schema: dict[str, Any]) -> None:
        """Copy keywords shared by every kind of schema."""
        node.description = schema.get("description", node.description)
        node.nullable = node.nullable or schema.get("nullable") is True
        if "default" in schema:
            node.default = schema["default"]
            node.has_default = True
        for key, value in schema.items():
            if key.startswith("x-"):
                node.metadata[key] = value

    def _parse_ref_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse a $ref node."""
        return SchemaNode(
            kind=SchemaKind.REFERENCE,
            path=path,
            ref_path=normalize_ref(schema["$ref"]),
        )

    def _parse_allof_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse an allOf composition."""
        allof = schema["allOf"]
        has_siblings = any(key in schema for key in self.OBJECT_KEYWORDS)

        # `allOf: [{$ref: X}]` is the usual way of attaching nullable/description to a $ref
        if len(allof) == 1 and isinstance(allof[0], dict) and "$ref" in allof[0] and not has_siblings:
            return self._parse_ref_node(allof[0], path)

        members = [self._parse_schema_node(member, f"{path}/allOf/{i}") for i, member in enumerate(allof)]

        # Sibling properties act as a trailing member
        if has_siblings:
            members.append(self._parse_object_node(schema, f"{path}/properties"))

        return SchemaNode(
            kind=SchemaKind.COMPOSITION,
            path=path,
            type_name="object",
            members=members,
            composition_type="allOf",
        )

    def _parse_union_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse a oneOf or anyOf union node."""
        union_type = "oneOf" if "oneOf" in schema else "anyOf"
        members = [self._parse_schema_node(member, f"{path}/{union_type}/{i}") for i, member in enumerate(schema[union_type])]

        node = SchemaNode(
            kind=SchemaKind.UNION,
            path=path,
            members=members,
            composition_type=union_type,
        )

        # Sibling properties are a base shared by every branch
        if any(key in schema for key in self.OBJECT_KEYWORDS):
            base = self._parse_object_node(schema, path)
            node.type_name = "object"
            node.properties = base.properties
            node.required_fields = base.required_fields
            node.additional_properties = base.additional_properties

        discriminator = schema.get("discriminator")
        if isinstance(discriminator, dict) and discriminator.get("propertyName"):
            node.discriminator_field = discriminator["propertyName"]
            for tag, target in (discriminator.get("mapping") or {}).items():
                # Mapping values are either schema names or $ref paths
                target_path = normalize_ref(target) if target.startswith("#") else canonical_path(target)
                node.discriminator_mapping[str(tag)] = target_path

        return node

    def _parse_enum_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse an enum node; `const` is read as a single-value enum."""
        values = list(schema["enum"]) if "enum" in schema else [schema["const"]]
        type_name = schema.get("type")
        nullable = False
        if isinstance(type_name, list):
            nullable = "null" in type_name
            non_null = [t for t in type_name if t != "null"]
            type_name = non_null[0] if len(non_null) == 1 else None

        return SchemaNode(
            kind=SchemaKind.ENUM,
            path=path,
            type_name=type_name,
            format=schema.get("format"),
            enum_values=values,
            nullable=nullable,
        )

    def _parse_type_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse a type-based node."""
        type_value = schema.get("type")
        nullable = False

        # Handle array of types (e.g. ["string", "null"])
        if isinstance(type_value, list):
            nullable = "null" in type_value
            non_null = [t for t in type_value if t != "null"]
            if len(non_null) > 1:
                node = self._parse_type_union(schema, non_null, path)
                node.nullable = nullable
                return node
            type_value = non_null[0] if non_null else None

        if type_value == "array":
            node = self._parse_array_node(schema, path)
        elif type_value == "object" or (type_value is None and any(key in schema for key in self.OBJECT_KEYWORDS)):
            node = self._parse_object_node(schema, path)
        else:
            node = SchemaNode(
                kind=SchemaKind.PRIMITIVE,
                path=path,
                type_name=type_value if type_value in self.PRIMITIVE_TYPES else None,
                format=schema.get("format"),
            )

        node.nullable = nullable
        return node

    def _parse_type_union(self, schema: dict[str, Any], types: list[str], path: str) -> SchemaNode:
        """Parse a union of types (e.g., ["string", "integer"])."""
        members = []
        for t in types:
            branch = {**schema, "type": t}
            if t != "object":
                for key in self.OBJECT_KEYWORDS:
                    branch.pop(key, None)
            if t != "array":
                branch.pop("items", None)
            members.append(self._parse_type_node(branch, f"{path}/type/{t}"))
        return SchemaNode(
            kind=SchemaKind.UNION,
            path=path,
            members=members,
            composition_type="anyOf",
        )

    def _parse_array_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse an array type node."""
        items_schema = schema.get("items")
        items = None
        if isinstance(items_schema, list):
            # Tuple-style items are outside the subset, use the first item type
            logger.debug("Tuple-style items at %s, using the first item schema", path)
            items_schema = items_schema[0] if items_schema else None
        if items_schema is not None:
            items = self._parse_schema_node(items_schema, f"{path}/items")

        return SchemaNode(
            kind=SchemaKind.ARRAY,
            path=path,
            type_name="array",
            items=items,
        )

    def _parse_object_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """Parse an object type node."""
        properties = {}
        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            properties[prop_name] = self._parse_schema_node(prop_schema, f"{path}/properties/{prop_name}")

        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            additional = self._parse_schema_node(additional, f"{path}/additionalProperties")
        elif additional is not None:
            additional = bool(additional)

        return SchemaNode(
            kind=SchemaKind.OBJECT,
            path=path,
            type_name="object",
            required_fields=set(schema.get("required") or []),
            properties=properties,
            additional_properties=additional,
        )
