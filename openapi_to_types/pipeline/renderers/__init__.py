"""
Renderers for inspecting a TypeModel.
"""

from __future__ import annotations

from .summary import format_type_ref, render_json, render_summary

__all__ = [
    "format_type_ref",
    "render_json",
    "render_summary",
]
