"""
Registry of recognized `format` hints per base type.
"""

from __future__ import annotations

KNOWN_FORMATS: dict[str, frozenset[str]] = {
    "string": frozenset(
        {
            "date",
            "date-time",
            "time",
            "duration",
            "email",
            "idn-email",
            "hostname",
            "idn-hostname",
            "ipv4",
            "ipv6",
            "uri",
            "uri-reference",
            "iri",
            "iri-reference",
            "uuid",
            "byte",
            "binary",
            "password",
            "regex",
            "json-pointer",
        }
    ),
    "integer": frozenset({"int32", "int64"}),
    "number": frozenset({"float", "double", "decimal"}),
    "boolean": frozenset(),
}


class FormatRegistry:
    """Known formats, extended by GeneratorConfig.extra_formats."""

    def __init__(self, extra_formats: dict[str, list[str]] | None = None):
        self._formats = {base: set(formats) for base, formats in KNOWN_FORMATS.items()}
        for base, formats in (extra_formats or {}).items():
            self._formats.setdefault(base, set()).update(formats)

    def is_known(self, type_name: str | None, format_name: str) -> bool:
        if type_name is None:
            # Untyped schema: accept a format known for any base type
            return any(format_name in formats for formats in self._formats.values())
        return format_name in self._formats.get(type_name, set())
