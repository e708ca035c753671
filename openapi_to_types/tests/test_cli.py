"""
Tests for the openapi_to_types command line.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from openapi_to_types.openapi_to_types import openapi_to_types

PETSTORE = Path(__file__).parent / "test_data" / "petstore.json"


def _write_document(path, schemas):
    path.write_text(json.dumps({"openapi": "3.0.3", "components": {"schemas": schemas}}))
    return path


def test_json_output(tmp_path):
    output = tmp_path / "model.json"
    result = CliRunner().invoke(openapi_to_types, [str(PETSTORE), str(output)])

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text())
    assert data["deferred_edges"] == [["TreeNode", "TreeNode"]]
    assert data["failures"] == {}


def test_summary_output(tmp_path):
    output = tmp_path / "model.txt"
    result = CliRunner().invoke(openapi_to_types, [str(PETSTORE), str(output), "--format", "summary"])

    assert result.exit_code == 0, result.output
    summary = output.read_text()
    assert "# Command: openapi_to_types petstore.json" in summary
    assert "--format summary" in summary
    assert "union Pet" in summary


def test_failures_exit_code(tmp_path):
    document = _write_document(
        tmp_path / "broken.json",
        {
            "Broken": {"type": "object", "properties": {"x": {"$ref": "#/components/schemas/Missing"}}},
            "Fine": {"type": "string"},
        },
    )
    output = tmp_path / "model.json"
    result = CliRunner().invoke(openapi_to_types, [str(document), str(output)])

    assert result.exit_code == 1
    data = json.loads(output.read_text())
    assert [decl["name"] for decl in data["declarations"]] == ["Fine"]
    assert data["failures"]["Broken"]["error"] == "UnresolvedReference"


def test_fail_fast(tmp_path):
    document = _write_document(tmp_path / "broken.json", {"Empty": {"type": "string", "enum": []}})
    output = tmp_path / "model.json"
    result = CliRunner().invoke(openapi_to_types, [str(document), str(output), "--fail-fast"])

    assert result.exit_code == 1
    assert "Enum Empty declares no values" in result.output
    assert not output.exists()


def test_config_file(tmp_path):
    document = _write_document(
        tmp_path / "doc.json",
        {
            "A": {"type": "string", "format": "iban"},
            "B": {"type": "integer"},
        },
    )
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"order_schemas": ["B"], "extra_formats": {"string": ["iban"]}}))
    output = tmp_path / "model.json"

    result = CliRunner().invoke(openapi_to_types, [str(document), str(output), "-c", str(config)])

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text())
    assert [decl["name"] for decl in data["declarations"]] == ["B", "A"]
    a = data["declarations"][1]
    assert a["target"]["format"] == "iban"
    assert "warnings" not in a


def test_missing_input():
    result = CliRunner().invoke(openapi_to_types, ["does-not-exist.json"])
    assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__])
