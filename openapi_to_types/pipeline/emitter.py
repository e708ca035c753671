"""
Type model emitter.

Runs the synthesizer over every named schema, isolates failures to the
failing schema and its dependents, and orders the surviving declarations so
that each type comes before its first use. Cycles are broken at one edge,
which is recorded and flagged as deferred.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from ..errors import DependencyFailed, SchemaError
from ..log import get_logger
from .analyzer.ir_nodes import RefKind, TypeDecl, TypeModel
from .analyzer.reference_resolver import ReferenceResolver
from .analyzer.synthesizer import SchemaSynthesizer
from .config import GeneratorConfig
from .schema_graph.nodes import SchemaGraph

logger = get_logger("emitter")


class TypeModelEmitter:
    """Builds the ordered TypeModel of one generation run."""

    def __init__(self, graph: SchemaGraph, config: GeneratorConfig | None = None):
        """
        Initialize the emitter.

        Args:
            graph: The parsed schema graph
            config: Generation configuration
        """
        self.graph = graph
        self.config = config or GeneratorConfig()
        self.resolver = ReferenceResolver(graph)
        self.synthesizer = SchemaSynthesizer(graph, self.resolver, self.config)

    def emit(self) -> TypeModel:
        """
        Synthesize, isolate failures and order all declarations.

        Returns:
            TypeModel with declarations in dependency order

        Raises:
            SchemaError: Only when config.fail_fast is set
        """
        model = TypeModel()
        names = self._schema_order()

        units: dict[str, list[TypeDecl]] = {}
        for name, result in zip(names, self._synthesize_all(names)):
            if isinstance(result, SchemaError):
                logger.error("Skipping %s: %s", name, result.message)
                model.failures[name] = result
            else:
                units[name] = result

        self._rename_hoisted_collisions(units)
        self._drop_failed_dependents(units, model)

        declarations = [decl for decls in units.values() for decl in decls]
        model.declarations, model.deferred_edges = self._topological_order(declarations)
        self._mark_deferred(model)

        logger.debug(
            "Emitted %d declarations (%d failures, %d deferred edges)",
            len(model.declarations),
            len(model.failures),
            len(model.deferred_edges),
        )
        return model

    def _schema_order(self) -> list[str]:
        """Configured schemas first, then the rest in document order."""
        names = self.graph.names()
        ordered = [name for name in self.config.order_schemas if name in names]
        ordered.extend(name for name in names if name not in ordered)
        return ordered

    def _synthesize_all(self, names: list[str]) -> list[list[TypeDecl] | SchemaError]:
        if self.config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                return list(executor.map(self._synthesize_unit, names))
        return [self._synthesize_unit(name) for name in names]

    def _synthesize_unit(self, name: str) -> list[TypeDecl] | SchemaError:
        try:
            return self.synthesizer.synthesize(name)
        except SchemaError as error:
            if self.config.fail_fast:
                raise
            return error

    def _rename_hoisted_collisions(self, units: dict[str, list[TypeDecl]]) -> None:
        """Give hoisted declarations unique names across units, in document order."""
        taken = set(self.graph.names())
        for decls in units.values():
            renames = {}
            own_names = {decl.name for decl in decls}
            for decl in decls[1:]:
                if decl.name not in taken:
                    taken.add(decl.name)
                    continue
                base = decl.name
                suffix = 2
                while f"{base}{suffix}" in taken or f"{base}{suffix}" in own_names:
                    suffix += 1
                renames[base] = f"{base}{suffix}"
                taken.add(renames[base])

            if not renames:
                continue
            # Hoisted names are only referenced from within their own unit
            for decl in decls:
                decl.name = renames.get(decl.name, decl.name)
                for type_ref in decl.type_refs():
                    for ref in type_ref.walk():
                        if ref.kind == RefKind.NAMED and ref.name in renames:
                            ref.name = renames[ref.name]

    def _drop_failed_dependents(self, units: dict[str, list[TypeDecl]], model: TypeModel) -> None:
        """Fail every unit that references a failed schema, transitively."""
        decl_unit = {decl.name: unit_name for unit_name, decls in units.items() for decl in decls}

        changed = True
        while changed:
            changed = False
            for unit_name, decls in list(units.items()):
                dependency = self._failed_dependency(decls, decl_unit, model)
                if dependency is None:
                    continue
                error = DependencyFailed(unit_name, dependency)
                logger.error("Skipping %s: %s", unit_name, error.message)
                model.failures[unit_name] = error
                del units[unit_name]
                changed = True

    def _failed_dependency(self, decls: list[TypeDecl], decl_unit: dict[str, str], model: TypeModel) -> str | None:
        for decl in decls:
            for name in decl.references():
                unit_name = decl_unit.get(name)
                if unit_name is None or unit_name in model.failures:
                    return name
        return None

    def _topological_order(self, declarations: list[TypeDecl]) -> tuple[list[TypeDecl], list[tuple[str, str]]]:
        """
        Depth-first topological sort over direct name references.

        Roots are visited in input order and dependencies in first-use order,
        so the result is deterministic. An edge into a declaration that is
        still on the DFS stack closes a cycle and is returned as deferred.

        Returns:
            (ordered declarations, deferred (source, target) edges)
        """
        by_name = {decl.name: decl for decl in declarations}
        ordered: list[TypeDecl] = []
        deferred: list[tuple[str, str]] = []
        done: set[str] = set()
        on_stack: set[str] = set()

        for root in by_name:
            if root in done:
                continue
            on_stack.add(root)
            stack = [(root, iter(by_name[root].references()))]
            while stack:
                name, dependencies = stack[-1]
                for dependency in dependencies:
                    if dependency not in by_name or dependency in done:
                        continue
                    if dependency in on_stack:
                        if (name, dependency) not in deferred:
                            deferred.append((name, dependency))
                        continue
                    on_stack.add(dependency)
                    stack.append((dependency, iter(by_name[dependency].references())))
                    break
                else:
                    stack.pop()
                    on_stack.discard(name)
                    done.add(name)
                    ordered.append(by_name[name])

        return ordered, deferred

    def _mark_deferred(self, model: TypeModel) -> None:
        by_name = {decl.name: decl for decl in model.declarations}
        for source, target in model.deferred_edges:
            for type_ref in by_name[source].type_refs():
                for ref in type_ref.walk():
                    if ref.kind == RefKind.NAMED and ref.name == target:
                        ref.deferred = True
