# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Provider-agnostic model definitions.

This module defines the ModelDefinition class that describes a model the
application can invoke, independent of the provider that serves it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

TEXT_INPUT = "text"
IMAGE_INPUT = "image"


@dataclass(frozen=True)
class ModelCost:
    """Per-million-token pricing for a model."""

    input: float = 0.0
    output: float = 0.0
    cache_read: float = 0.0
    cache_write: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "input": self.input,
            "output": self.output,
            "cacheRead": self.cache_read,
            "cacheWrite": self.cache_write,
        }


@dataclass(frozen=True)
class ModelDefinition:
    """A model the application can select, as produced by discovery."""

    id: str
    name: str
    reasoning: bool = False
    input: Tuple[str, ...] = (TEXT_INPUT,)
    cost: ModelCost = field(default_factory=ModelCost)
    context_window: int = 0
    max_tokens: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the definition to the application's configuration shape.

        Returns:
            Dictionary with camelCase keys
        """
        return {
            "id": self.id,
            "name": self.name,
            "reasoning": self.reasoning,
            "input": list(self.input),
            "cost": self.cost.to_dict(),
            "contextWindow": self.context_window,
            "maxTokens": self.max_tokens,
        }
