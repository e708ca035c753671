"""
Functional tests for the full parse -> synthesize -> emit pipeline.

Each case in test_data/functional_tests.json is a components/schemas section
together with the expected declaration order, field presence states,
per-schema failures and warning codes.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from openapi_to_types.pipeline import GeneratorConfig, PipelineGenerator

TEST_DATA_DIR = Path(__file__).parent / "test_data"


def load_all_test_cases():
    """Load all test cases from test_data/functional_tests.json."""
    with open(TEST_DATA_DIR / "functional_tests.json") as f:
        return json.load(f)


def _generate(schemas, config_dict=None):
    """Helper to run the pipeline on a components/schemas section."""
    config = GeneratorConfig.from_dict(config_dict or {})
    document = {"openapi": "3.0.3", "components": {"schemas": schemas}}
    return PipelineGenerator(document, config).generate()


@pytest.mark.parametrize("test_case", load_all_test_cases(), ids=lambda tc: tc["name"])
def test_functional_generation(test_case):
    """Unified test for all JSON test cases using a single pattern."""
    model = _generate(test_case["schemas"], test_case.get("config"))

    # Named declarations only, in emitted order
    named = [name for name in model.names() if name in test_case["schemas"]]
    assert named == test_case["expected_order"]

    for decl_name, fields in test_case["expected_presence"].items():
        decl = model.get(decl_name)
        assert decl is not None, f"{decl_name} was not emitted"
        actual = {field_decl.name: field_decl.presence.value for field_decl in decl.fields}
        assert actual == fields

    failures = {name: type(error).__name__ for name, error in model.failures.items()}
    assert failures == test_case["expected_failures"]

    codes = {warning.code for warning in model.warnings()}
    assert codes == set(test_case["expected_warnings"])


@pytest.mark.parametrize("max_workers", [1, 4])
def test_petstore(max_workers):
    """The petstore document exercises every feature at once."""
    with open(TEST_DATA_DIR / "petstore.json") as f:
        document = json.load(f)

    model = PipelineGenerator(document, GeneratorConfig(max_workers=max_workers)).generate()

    assert model.ok
    assert model.names() == [
        "PetStatus",
        "Cat",
        "Dog",
        "Lizard",
        "Pet",
        "PetBase",
        "UserAddress",
        "User",
        "TreeNode",
    ]
    assert model.deferred_edges == [("TreeNode", "TreeNode")]

    pet = model.get("Pet")
    assert pet.tagged
    assert pet.discriminator == "type"
    assert [variant.tag for variant in pet.variants] == ["cat", "dog", "lizard"]

    dog = model.get("Dog")
    assert [f.name for f in dog.fields] == ["id", "name", "status", "type", "breed"]
    assert dog.composed_from == ["PetBase"]

    assert model.get("PetStatus").literals == ["available", "pending", "sold"]

    user = model.get("User")
    presences = {f.name: f.presence.value for f in user.fields}
    assert presences == {
        "id": "mandatory",
        "email": "mandatory",
        "managerId": "mandatory_nullable",
        "bio": "optional_nullable",
        "nickname": "optional",
        "address": "optional",
        "labels": "optional",
    }
    assert user.get_field("address").type_ref.name == "UserAddress"
    assert user.get_field("labels").type_ref.kind.value == "map"

    address = model.get("UserAddress")
    assert address.owner == "User"
    assert [w.code for w in address.warnings] == ["UnknownFormat"]
    assert address.get_field("zip").type_ref.format is None

    children = model.get("TreeNode").get_field("children").type_ref
    assert children.items.deferred


def test_order_schemas_config():
    """Configured schemas are visited first when ordering."""
    schemas = {
        "A": {"type": "object", "properties": {"x": {"type": "string"}}},
        "B": {"type": "object", "properties": {"y": {"type": "string"}}},
    }
    model = _generate(schemas, {"order_schemas": ["B"]})
    assert model.names() == ["B", "A"]


def test_definitions_document():
    """Plain JSON Schema documents with definitions are accepted."""
    document = {
        "definitions": {
            "Wrapper": {"type": "object", "properties": {"inner": {"$ref": "#/definitions/Inner"}}},
            "Inner": {"type": "string", "enum": ["a", "b"]},
        }
    }
    model = PipelineGenerator(document).generate()
    assert model.names() == ["Inner", "Wrapper"]
    assert model.get("Wrapper").get_field("inner").type_ref.name == "Inner"


if __name__ == "__main__":
    pytest.main([__file__])
