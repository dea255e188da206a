from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from strata.core.errors import StackCommandError
from strata.runtime.base import ApplySummary, OutputOptions, ProgramFn, StackHandle


@dataclass
class InMemoryStack:
    project: str
    stack: str
    program: dict[str, Any]
    config: dict[str, str] = field(default_factory=dict)
    plugins: dict[str, str] = field(default_factory=dict)
    deployed: bool = False
    outputs: dict[str, Any] = field(default_factory=dict)


class InMemoryStackRuntime:
    """In-process stack runtime for local dry runs and tests.

    Every call is appended to ``events`` as ``(step, "project/stack")``.
    ``fail`` maps a ``"project/stack"`` name to the step that should raise.
    """

    def __init__(
        self,
        *,
        delay: float = 0.0,
        fail: dict[str, str] | None = None,
    ) -> None:
        self.stacks: dict[str, InMemoryStack] = {}
        self.events: list[tuple[str, str]] = []
        self._delay = delay
        self._fail = dict(fail or {})

    async def _step(self, step: str, name: str) -> None:
        self.events.append((step, name))
        await asyncio.sleep(self._delay)
        if self._fail.get(name) == step:
            raise StackCommandError(step, name, 1, "injected failure")

    async def create_or_select(self, project: str, stack: str, program: ProgramFn) -> StackHandle:
        name = f"{project}/{stack}"
        if name not in self.stacks:
            self.stacks[name] = InMemoryStack(project=project, stack=stack, program=program(stack))
        await self._step("select", name)
        return StackHandle(project=project, stack=stack)

    async def configure(self, handle: StackHandle, key: str, value: str) -> None:
        await self._step("configure", handle.fully_qualified_name)
        self.stacks[handle.fully_qualified_name].config[key] = value

    async def install_plugin(self, handle: StackHandle, name: str, version: str) -> None:
        await self._step("install_plugin", handle.fully_qualified_name)
        self.stacks[handle.fully_qualified_name].plugins[name] = version

    async def refresh(self, handle: StackHandle, options: OutputOptions) -> None:
        await self._step("refresh", handle.fully_qualified_name)

    async def preview(self, handle: StackHandle, options: OutputOptions) -> None:
        await self._step("preview", handle.fully_qualified_name)

    async def apply(self, handle: StackHandle, options: OutputOptions) -> ApplySummary:
        await self._step("apply", handle.fully_qualified_name)
        stack = self.stacks[handle.fully_qualified_name]
        stack.deployed = True
        stack.outputs = dict(stack.program.get("outputs") or {})
        return ApplySummary(stack=handle.stack, outputs=dict(stack.outputs))

    async def destroy(self, handle: StackHandle, options: OutputOptions) -> None:
        await self._step("destroy", handle.fully_qualified_name)
        stack = self.stacks[handle.fully_qualified_name]
        stack.deployed = False
        stack.outputs = {}
