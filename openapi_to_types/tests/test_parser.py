"""
Tests for building the schema graph from a decoded document.
"""

from __future__ import annotations

from unittest import TestCase

import pytest

from openapi_to_types.pipeline.schema_graph import SchemaGraph, SchemaKind, SchemaNode, SchemaParser, canonical_path, normalize_ref


def _parse(schemas):
    return SchemaParser().parse({"components": {"schemas": schemas}})


class TestSchemaParser(TestCase):
    """Keyword dispatch to schema kinds"""

    def test_kinds(self):
        graph = _parse(
            {
                "Ref": {"$ref": "#/components/schemas/Obj"},
                "Obj": {"type": "object", "properties": {"a": {"type": "string"}}},
                "Arr": {"type": "array", "items": {"type": "integer"}},
                "Enum": {"type": "string", "enum": ["x"]},
                "Comp": {"allOf": [{"$ref": "#/components/schemas/Obj"}, {"properties": {"b": {"type": "string"}}}]},
                "Union": {"anyOf": [{"type": "string"}, {"type": "integer"}]},
                "Prim": {"type": "number", "format": "double"},
                "Untyped": {},
            }
        )
        kinds = {node.name: node.kind for node in graph}
        self.assertEqual(
            kinds,
            {
                "Ref": SchemaKind.REFERENCE,
                "Obj": SchemaKind.OBJECT,
                "Arr": SchemaKind.ARRAY,
                "Enum": SchemaKind.ENUM,
                "Comp": SchemaKind.COMPOSITION,
                "Union": SchemaKind.UNION,
                "Prim": SchemaKind.PRIMITIVE,
                "Untyped": SchemaKind.PRIMITIVE,
            },
        )
        self.assertIsNone(graph.by_name("Untyped").type_name)
        self.assertEqual(graph.by_name("Union").composition_type, "anyOf")

    def test_document_order(self):
        graph = _parse({"Zeta": {"type": "string"}, "_comment": "ignored", "Alpha": {"type": "string"}})
        self.assertEqual(graph.names(), ["Zeta", "Alpha"])
        self.assertEqual(len(graph), 2)

    def test_single_ref_all_of_is_a_reference(self):
        graph = _parse(
            {
                "Wrapped": {"allOf": [{"$ref": "#/components/schemas/Obj"}], "nullable": True, "description": "Maybe"},
                "Obj": {"type": "object"},
            }
        )
        node = graph.by_name("Wrapped")
        self.assertEqual(node.kind, SchemaKind.REFERENCE)
        self.assertEqual(node.ref_path, "#/components/schemas/Obj")
        self.assertTrue(node.nullable)
        self.assertEqual(node.description, "Maybe")

    def test_all_of_sibling_properties(self):
        graph = _parse({"Comp": {"allOf": [{"$ref": "#/components/schemas/Obj"}], "required": ["b"], "properties": {"b": {"type": "string"}}}})
        node = graph.by_name("Comp")
        self.assertEqual(node.kind, SchemaKind.COMPOSITION)
        self.assertEqual(len(node.members), 2)
        self.assertEqual(node.members[1].required_fields, {"b"})

    def test_type_lists(self):
        graph = _parse({"Maybe": {"type": ["integer", "null"]}, "Either": {"type": ["string", "integer", "null"]}})
        maybe = graph.by_name("Maybe")
        self.assertEqual(maybe.kind, SchemaKind.PRIMITIVE)
        self.assertEqual(maybe.type_name, "integer")
        self.assertTrue(maybe.nullable)

        either = graph.by_name("Either")
        self.assertEqual(either.kind, SchemaKind.UNION)
        self.assertTrue(either.nullable)
        self.assertEqual([m.type_name for m in either.members], ["string", "integer"])

    def test_discriminator_mapping(self):
        graph = _parse(
            {
                "Pet": {
                    "oneOf": [{"$ref": "#/components/schemas/Cat"}],
                    "discriminator": {"propertyName": "kind", "mapping": {"cat": "Cat", "dog": "#/definitions/Dog"}},
                }
            }
        )
        node = graph.by_name("Pet")
        self.assertEqual(node.discriminator_field, "kind")
        self.assertEqual(
            node.discriminator_mapping,
            {"cat": "#/components/schemas/Cat", "dog": "#/components/schemas/Dog"},
        )

    def test_additional_properties(self):
        graph = _parse(
            {
                "Typed": {"type": "object", "additionalProperties": {"type": "string"}},
                "Open": {"type": "object", "additionalProperties": True},
                "Closed": {"type": "object", "additionalProperties": False},
                "Plain": {"type": "object"},
            }
        )
        self.assertIsInstance(graph.by_name("Typed").additional_properties, SchemaNode)
        self.assertIs(graph.by_name("Open").additional_properties, True)
        self.assertIs(graph.by_name("Closed").additional_properties, False)
        self.assertIsNone(graph.by_name("Plain").additional_properties)

    def test_common_keywords(self):
        graph = _parse({"Flag": {"type": "boolean", "default": False, "description": "A flag", "x-internal": True}})
        node = graph.by_name("Flag")
        self.assertTrue(node.has_default)
        self.assertIs(node.default, False)
        self.assertEqual(node.description, "A flag")
        self.assertEqual(node.metadata, {"x-internal": True})

    def test_union_with_sibling_properties(self):
        graph = _parse(
            {
                "Pet": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}},
                    "oneOf": [{"$ref": "#/components/schemas/Cat"}],
                    "allOf": [{"$ref": "#/components/schemas/Base"}],
                }
            }
        )
        node = graph.by_name("Pet")
        self.assertEqual(node.kind, SchemaKind.COMPOSITION)
        self.assertEqual(node.ignored_keywords, ["oneOf"])

        graph = _parse({"Pet": {"required": ["name"], "properties": {"name": {"type": "string"}}, "anyOf": [{"type": "object"}]}})
        node = graph.by_name("Pet")
        self.assertEqual(node.kind, SchemaKind.UNION)
        self.assertEqual(list(node.properties), ["name"])
        self.assertEqual(node.required_fields, {"name"})
        self.assertEqual(node.ignored_keywords, [])

    def test_unsupported_keywords_are_recorded(self):
        graph = _parse({"Code": {"type": "string", "not": {"enum": ["x"]}, "items": {"type": "string"}}})
        self.assertEqual(graph.by_name("Code").ignored_keywords, ["items", "not"])

    def test_type_list_with_object_keywords(self):
        """Object keywords only shape the object branch of a type list"""
        graph = _parse({"X": {"type": ["string", "object"], "properties": {"a": {"type": "integer"}}}})
        node = graph.by_name("X")
        self.assertEqual(node.kind, SchemaKind.UNION)
        self.assertEqual([m.kind for m in node.members], [SchemaKind.PRIMITIVE, SchemaKind.OBJECT])
        self.assertEqual(node.members[0].type_name, "string")
        self.assertEqual(list(node.members[1].properties), ["a"])
        self.assertEqual([n.ignored_keywords for n in node.walk()], [[], [], [], []])

    def test_definitions_fallback(self):
        graph = SchemaParser().parse({"$defs": {"Item": {"type": "string"}}})
        self.assertEqual(graph.names(), ["Item"])


def test_paths():
    assert canonical_path("User") == "#/components/schemas/User"
    assert normalize_ref("#/definitions/User") == "#/components/schemas/User"
    assert normalize_ref("#/$defs/User") == "#/components/schemas/User"
    assert normalize_ref("#/components/schemas/User") == "#/components/schemas/User"


def test_graph_lookup_normalizes():
    graph = SchemaGraph()
    graph.add(SchemaNode(kind=SchemaKind.PRIMITIVE, name="User", type_name="string"))
    assert "#/definitions/User" in graph
    assert graph.get("#/$defs/User") is graph.by_name("User")
    with pytest.raises(ValueError):
        graph.add(SchemaNode(kind=SchemaKind.PRIMITIVE))


if __name__ == "__main__":
    pytest.main([__file__])
