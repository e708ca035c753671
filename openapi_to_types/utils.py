"""
Utility functions for the OpenAPI type generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Used for the names of hoisted declarations, which join the owning
    schema name with a field-derived hint.

    Examples:
        "shipping_address" -> "ShippingAddress"
        "tags_item" -> "TagsItem"
        "petType" -> "PetType"
        "option_1" -> "Option1"
        "api.v1" -> "ApiV1"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def to_constant_name(value: object) -> str:
    """Convert an enum value to an UPPER_SNAKE_CASE constant name.

    Examples:
        "active" -> "ACTIVE"
        "in-progress" -> "IN_PROGRESS"
        "dateTime" -> "DATE_TIME"
        42 -> "VALUE_42"
    """
    words = _split_into_words(_normalize_separators(str(value)))
    name = "_".join(word.upper() for word in words if word)
    if not name or not name[0].isalpha():
        return f"VALUE_{name}" if name else "VALUE"
    return name
