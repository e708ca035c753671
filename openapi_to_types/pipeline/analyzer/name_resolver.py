"""
Name allocation for hoisted (anonymous) declarations.

Anonymous objects, compositions and unions found inside a named schema are
hoisted into their own declarations, named after their owner and the field
they were found in ("User" + "shipping_address" -> "UserShippingAddress").
"""

from __future__ import annotations

from typing import Iterable

from ...utils import snake_to_pascal_case


class NameAllocator:
    """Allocates unique hoisted names within one named schema."""

    def __init__(self, reserved: Iterable[str]):
        """
        Initialize the allocator.

        Args:
            reserved: Names that are already taken (the named schemas)
        """
        self._reserved = set(reserved)
        self._allocated: set[str] = set()

    def allocate(self, owner: str, hint: str) -> str:
        """Return a fresh name built from the owner name and a field hint."""
        base = f"{owner}{snake_to_pascal_case(hint)}"
        return self.unique(base)

    def unique(self, base: str) -> str:
        name = base
        suffix = 2
        while name in self._reserved or name in self._allocated:
            name = f"{base}{suffix}"
            suffix += 1
        self._allocated.add(name)
        return name
