"""
Plain-text and JSON views of a TypeModel.

These are inspection aids for the CLI, not target-language renderers.
"""

from __future__ import annotations

import json
from pathlib import Path

import jinja2

from ... import __version__
from ..analyzer.ir_nodes import RefKind, TypeModel, TypeRef

TEMPLATES_DIR = Path(__file__).parent.resolve().absolute() / "templates"


def format_type_ref(type_ref: TypeRef | None) -> str:
    """Compact, human-readable rendering of a type reference."""
    if type_ref is None:
        return "any"

    kind = type_ref.kind
    if kind == RefKind.PRIMITIVE:
        text = f"{type_ref.name}<{type_ref.format}>" if type_ref.format else type_ref.name
    elif kind == RefKind.NAMED:
        text = f"~{type_ref.name}" if type_ref.deferred else type_ref.name
    elif kind == RefKind.ARRAY:
        text = f"array[{format_type_ref(type_ref.items)}]"
    elif kind == RefKind.MAP:
        text = f"map[string, {format_type_ref(type_ref.items)}]"
    elif kind == RefKind.LITERAL:
        text = " | ".join(json.dumps(value) for value in type_ref.literals)
    elif kind == RefKind.UNION:
        text = " | ".join(format_type_ref(variant) for variant in type_ref.variants)
    else:
        text = "any"

    if type_ref.nullable:
        text = f"{text} | null"
    return text


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATES_DIR)),
        lstrip_blocks=True,
        trim_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["type_ref"] = format_type_ref
    env.filters["tojson_value"] = json.dumps
    env.filters["error_name"] = lambda error: type(error).__name__
    return env


def render_summary(model: TypeModel, command_line: str | None = None) -> str:
    """
    Render a plain-text summary of the type model.

    Args:
        model: The emitted type model
        command_line: Optional command line recorded in the header

    Returns:
        The summary text
    """
    template = _environment().get_template("summary.txt.jinja2")
    return template.render(
        model=model,
        version=__version__,
        command_line=command_line,
    )


def render_json(model: TypeModel, indent: int = 2) -> str:
    """Serialize the type model to JSON (the output contract for renderers)."""
    return json.dumps(model.to_dict(), indent=indent, default=str) + "\n"
