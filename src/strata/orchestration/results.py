"""Result types for orchestrator runs."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class StackResult:
    """Outcome of one stack operation."""

    layer: str
    stack_id: str
    region: str
    action: str
    outputs: Dict[str, Any] = field(default_factory=dict)
    duration_seconds: float = 0.0


@dataclass
class LayerResult:
    """Outcome of one layer's batch."""

    name: str
    stacks: List[StackResult] = field(default_factory=list)
    skipped: bool = False


@dataclass
class RunResult:
    """Outcome of a full, successful orchestrator run."""

    action: str
    environment: str
    layers: List[LayerResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_stacks(self) -> int:
        """Number of stack operations that completed."""
        return sum(len(layer.stacks) for layer in self.layers)

    @property
    def executed_layers(self) -> List[str]:
        """Names of layers that ran, in execution order."""
        return [layer.name for layer in self.layers if not layer.skipped]

    @property
    def skipped_layers(self) -> List[str]:
        return [layer.name for layer in self.layers if layer.skipped]
