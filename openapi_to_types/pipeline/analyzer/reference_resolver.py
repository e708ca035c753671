"""
Reference resolver for $ref resolution.

Resolves canonical $ref paths to their schema graph nodes, memoizing the
result. Paths that are being resolved further up the current call chain
yield a LazyReference instead of recursing, which turns structural cycles
into name-based back edges.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from ...errors import UnresolvedReference
from ...log import get_logger
from ..schema_graph.nodes import SchemaGraph, SchemaNode, canonical_path, normalize_ref

logger = get_logger("resolver")


@dataclass(frozen=True)
class LazyReference:
    """Marker for a path re-entered while in progress: reference it by name."""

    path: str = ""
    name: str = ""


class ReferenceResolver:
    """Resolves $ref paths against a SchemaGraph.

    One resolver serves one generation run. The memoization cache is shared
    between threads (first writer wins; resolution is pure so concurrent
    writers agree), the in-progress set belongs to each thread's call chain.
    """

    def __init__(self, graph: SchemaGraph):
        """
        Initialize the resolver.

        Args:
            graph: The schema graph of the current run
        """
        self.graph = graph
        self._cache: dict[str, SchemaNode] = {}
        self._lock = threading.Lock()
        self._local = threading.local()
        self._hits = 0
        self._misses = 0

    @property
    def in_progress(self) -> set[str]:
        """Paths being resolved on the current thread's call chain."""
        paths = getattr(self._local, "in_progress", None)
        if paths is None:
            paths = self._local.in_progress = set()
        return paths

    def resolve(self, path: str) -> SchemaNode | LazyReference:
        """
        Resolve a canonical path to its (non-reference) schema node.

        Args:
            path: A $ref path such as "#/components/schemas/User"

        Returns:
            The target SchemaNode, or a LazyReference when the path is
            already in progress on the current call chain

        Raises:
            UnresolvedReference: The path (or a path it aliases) is absent
        """
        path = normalize_ref(path)
        if path in self.in_progress:
            return LazyReference(path=path, name=self.name_for(path))

        with self._lock:
            target = self._cache.get(path)
            if target is not None:
                self._hits += 1

        if target is None:
            target = self._follow_aliases(path)
            if isinstance(target, LazyReference):
                return target
            with self._lock:
                self._misses += 1
                target = self._cache.setdefault(path, target)
            logger.debug("Resolved %s to %s", path, target.name or target.path)

        # An alias of an in-progress schema is a back edge too
        target_path = canonical_path(target.name) if target.name else path
        if target_path in self.in_progress:
            return LazyReference(path=target_path, name=target.name)
        return target

    def resolve_node(self, node: SchemaNode) -> SchemaNode | LazyReference:
        """Resolve `node` if it is a reference, otherwise return it unchanged."""
        if node.is_reference:
            return self.resolve(node.ref_path)
        return node

    def target_of(self, path: str) -> SchemaNode:
        """Follow an alias chain to its end, ignoring the in-progress set.

        Raises:
            UnresolvedReference: A path on the chain is absent, or the chain loops
        """
        return self._follow_aliases(normalize_ref(path), lazy=False)

    def _follow_aliases(self, path: str, lazy: bool = True) -> SchemaNode | LazyReference:
        """Follow `A: {$ref: B}` chains to the first non-reference node."""
        chain = [path]
        current = path
        while True:
            node = self.graph.get(current)
            if node is None:
                detail = f"via {path}" if current != path else ""
                raise UnresolvedReference(current, detail)
            if not node.is_reference:
                return node

            next_path = node.ref_path
            if lazy and next_path in self.in_progress:
                return LazyReference(path=next_path, name=self.name_for(next_path))
            if next_path in chain:
                raise UnresolvedReference(path, "circular alias " + " -> ".join(chain + [next_path]))
            chain.append(next_path)
            current = next_path

    @contextmanager
    def visiting(self, path: str) -> Iterator[None]:
        """Mark `path` as in progress for the duration of the block."""
        path = normalize_ref(path)
        paths = self.in_progress
        entered = path not in paths
        paths.add(path)
        try:
            yield
        finally:
            if entered:
                paths.discard(path)

    def name_for(self, path: str) -> str:
        """Declaration name of a canonical path."""
        node = self.graph.get(path)
        if node is not None and node.name:
            return node.name
        return path.rsplit("/", 1)[-1]

    def cache_info(self) -> dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "size": len(self._cache)}
