"""
Pipeline generator: decoded OpenAPI document -> ordered type model.
"""

from __future__ import annotations

from typing import Any

from ..log import get_logger
from .analyzer.ir_nodes import TypeModel
from .config import GeneratorConfig
from .emitter import TypeModelEmitter
from .schema_graph.nodes import SchemaGraph
from .schema_graph.parser import SchemaParser

logger = get_logger("generator")


class PipelineGenerator:
    """Runs the parse -> synthesize -> emit pipeline for one document.

    Every call to generate() is an independent run: the schema graph and the
    resolver cache are rebuilt and discarded afterwards.
    """

    def __init__(self, document: dict[str, Any], config: GeneratorConfig | None = None):
        """
        Initialize the generator.

        Args:
            document: The decoded OpenAPI document
            config: Generation configuration
        """
        self.document = document
        self.config = config or GeneratorConfig()

    def parse(self) -> SchemaGraph:
        """Phase 1: build the schema graph."""
        return SchemaParser().parse(self.document)

    def generate(self) -> TypeModel:
        """
        Run the full pipeline.

        Returns:
            TypeModel with ordered declarations and per-schema failures
        """
        graph = self.parse()
        model = TypeModelEmitter(graph, self.config).emit()
        if model.failures:
            logger.info("%d of %d schemas failed", len(model.failures), len(graph))
        return model
