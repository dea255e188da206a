from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol

ProgramFn = Callable[[str], dict[str, Any]]


@dataclass(frozen=True)
class StackHandle:
    """Reference to a created or selected stack."""

    project: str
    stack: str
    work_dir: Path | None = None

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.project}/{self.stack}"


@dataclass(frozen=True)
class OutputOptions:
    """Options forwarded to every refresh/preview/apply/destroy call."""

    on_output: Callable[[str], None] | None = None
    color: str = "never"
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class ApplySummary:
    """Outcome of applying a stack."""

    stack: str
    result: str = "succeeded"
    outputs: dict[str, Any] = field(default_factory=dict)


class StackRuntime(Protocol):
    """Contract for the control plane adapter the orchestrator drives."""

    async def create_or_select(self, project: str, stack: str, program: ProgramFn) -> StackHandle:
        ...

    async def configure(self, handle: StackHandle, key: str, value: str) -> None:
        ...

    async def install_plugin(self, handle: StackHandle, name: str, version: str) -> None:
        ...

    async def refresh(self, handle: StackHandle, options: OutputOptions) -> None:
        ...

    async def preview(self, handle: StackHandle, options: OutputOptions) -> None:
        ...

    async def apply(self, handle: StackHandle, options: OutputOptions) -> ApplySummary:
        ...

    async def destroy(self, handle: StackHandle, options: OutputOptions) -> None:
        ...
