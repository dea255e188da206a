"""Execution context for a single orchestrator run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from strata.core.errors import ConfigurationError


class Action(str, Enum):
    """What an orchestrator run does to every selected stack."""

    PREVIEW = "preview"
    DEPLOY = "deploy"
    DESTROY = "destroy"

    @classmethod
    def parse(cls, value: str) -> "Action":
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(a.value for a in cls)
            raise ConfigurationError(
                f"Unknown action '{value}'. Expected one of: {valid}",
                details={"action": value},
            ) from None


@dataclass(frozen=True)
class ExecutionContext:
    """
    Immutable description of one invocation.

    An empty scope means every layer is selected.
    """

    action: Action
    environment: str
    scope: frozenset[str] = field(default_factory=frozenset)
    regions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.environment:
            raise ConfigurationError("An environment is required")

    @classmethod
    def build(
        cls,
        action: str | Action,
        environment: str | None,
        scope: Iterable[str] | None = None,
        regions: Iterable[str] | None = None,
    ) -> "ExecutionContext":
        """Build a context from loosely typed input (CLI arguments, settings)."""
        if not isinstance(action, Action):
            action = Action.parse(action)
        if not environment:
            raise ConfigurationError(
                "No environment given. Pass it as an argument or set STRATA_ENVIRONMENT"
            )
        return cls(
            action=action,
            environment=environment,
            scope=frozenset(s for s in (scope or ()) if s),
            regions=tuple(r for r in (regions or ()) if r),
        )

    def in_scope(self, layer_name: str) -> bool:
        return not self.scope or layer_name in self.scope


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated CLI value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
