"""
Tests for field presence analysis (required x nullable).
"""

from __future__ import annotations

from unittest import TestCase

import pytest

from openapi_to_types.pipeline.analyzer.presence import Presence, analyze_field, analyze_object, check_presence, presence_of
from openapi_to_types.pipeline.schema_graph import SchemaParser


def _parse(schemas):
    return SchemaParser().parse({"components": {"schemas": schemas}})


@pytest.mark.parametrize(
    "is_required, is_nullable, expected",
    [
        (True, False, Presence.MANDATORY),
        (True, True, Presence.MANDATORY_NULLABLE),
        (False, False, Presence.OPTIONAL),
        (False, True, Presence.OPTIONAL_NULLABLE),
    ],
)
def test_presence_table(is_required, is_nullable, expected):
    presence = presence_of(is_required, is_nullable)
    assert presence == expected
    assert presence.is_required == is_required
    assert presence.is_nullable == is_nullable


class TestAnalyzeField(TestCase):
    """Presence states computed from schema nodes"""

    def setUp(self):
        self.graph = _parse(
            {
                "User": {
                    "type": "object",
                    "required": ["id", "email", "managerId"],
                    "properties": {
                        "id": {"type": "string"},
                        "email": {"type": "string"},
                        "managerId": {"type": "string", "nullable": True},
                        "nickname": {"type": "string"},
                        "bio": {"type": "string", "nullable": True},
                        "team": {"$ref": "#/components/schemas/Team"},
                    },
                },
                "Team": {"type": "object", "nullable": True, "properties": {"name": {"type": "string"}}},
                "Maybe": {"type": ["string", "null"]},
            }
        )
        self.user = self.graph.by_name("User")

    def test_four_states(self):
        """Each combination of required and nullable maps to its own state"""
        self.assertEqual(analyze_field(self.user, "id"), Presence.MANDATORY)
        self.assertEqual(analyze_field(self.user, "managerId"), Presence.MANDATORY_NULLABLE)
        self.assertEqual(analyze_field(self.user, "nickname"), Presence.OPTIONAL)
        self.assertEqual(analyze_field(self.user, "bio"), Presence.OPTIONAL_NULLABLE)

    def test_nullability_not_inherited_through_ref(self):
        """A nullable target schema does not make the referencing field nullable"""
        self.assertEqual(analyze_field(self.user, "team"), Presence.OPTIONAL)

    def test_declaration_order(self):
        presences = analyze_object(self.user)
        self.assertEqual(list(presences), ["id", "email", "managerId", "nickname", "bio", "team"])

    def test_type_list_with_null(self):
        self.assertTrue(self.graph.by_name("Maybe").nullable)


class TestCheckPresence(TestCase):
    """Payload checks against presence states"""

    def setUp(self):
        graph = _parse(
            {
                "User": {
                    "type": "object",
                    "required": ["id", "email", "managerId"],
                    "properties": {
                        "id": {"type": "string"},
                        "email": {"type": "string"},
                        "managerId": {"type": "string", "nullable": True},
                        "nickname": {"type": "string"},
                        "bio": {"type": "string", "nullable": True},
                    },
                }
            }
        )
        self.fields = analyze_object(graph.by_name("User"))

    def test_valid_payloads(self):
        self.assertEqual(check_presence(self.fields, {"id": "1", "email": "a@b.c", "managerId": None}), [])
        self.assertEqual(
            check_presence(self.fields, {"id": "1", "email": "a@b.c", "managerId": "2", "nickname": "x", "bio": None}),
            [],
        )

    def test_missing_mandatory_nullable(self):
        violations = check_presence(self.fields, {"id": "1", "email": "a@b.c"})
        self.assertEqual(violations, ["missing required field 'managerId'"])

    def test_null_in_non_nullable(self):
        violations = check_presence(self.fields, {"id": None, "email": "a@b.c", "managerId": None, "nickname": None})
        self.assertEqual(violations, ["field 'id' must not be null", "field 'nickname' must not be null"])


if __name__ == "__main__":
    pytest.main([__file__])
