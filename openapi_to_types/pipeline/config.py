"""
Configuration for the type generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GeneratorConfig:
    """Configuration options for type model generation."""

    # Schemas to visit first when ordering declarations (empty = document order)
    order_schemas: list[str] = field(default_factory=list)

    # Additional format hints accepted per base type, e.g. {"string": ["iban"]}
    extra_formats: dict[str, list[str]] = field(default_factory=dict)

    # Raise the first fatal schema error instead of isolating it
    fail_fast: bool = False

    # Number of threads synthesizing named schemas (1 = sequential)
    max_workers: int = 1

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "order_schemas": self.order_schemas,
            "extra_formats": self.extra_formats,
            "fail_fast": self.fail_fast,
            "max_workers": self.max_workers,
        }
