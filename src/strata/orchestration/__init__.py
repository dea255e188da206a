"""Orchestration package - layered stack execution."""

from strata.orchestration.context import Action, ExecutionContext
from strata.orchestration.engine import Orchestrator
from strata.orchestration.registry import (
    Layer,
    LayerRegistry,
    StackInstance,
    StackTarget,
    default_registry,
    expand_global,
    expand_regional,
)
from strata.orchestration.results import LayerResult, RunResult, StackResult

__all__ = [
    "Action",
    "ExecutionContext",
    "Layer",
    "LayerRegistry",
    "LayerResult",
    "Orchestrator",
    "RunResult",
    "StackInstance",
    "StackResult",
    "StackTarget",
    "default_registry",
    "expand_global",
    "expand_regional",
]
