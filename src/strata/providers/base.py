from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class CheckFailure:
    """A single input validation problem."""

    property: str
    reason: str


@dataclass(frozen=True)
class CheckResult:
    """Validated inputs plus any failures; apply must halt on failures."""

    inputs: dict[str, Any]
    failures: list[CheckFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class DiffResult:
    """Whether a resource changed and which properties force replacement."""

    changes: bool
    replaces: list[str] = field(default_factory=list)
    stables: list[str] = field(default_factory=list)

    @property
    def requires_replace(self) -> bool:
        return self.changes and bool(self.replaces)


@dataclass(frozen=True)
class CreateResult:
    id: str
    outs: dict[str, Any]


@dataclass(frozen=True)
class UpdateResult:
    outs: dict[str, Any]


@dataclass(frozen=True)
class ReadResult:
    id: str
    props: dict[str, Any]


class ResourceProvider(Protocol):
    """Lifecycle contract for a custom-managed resource."""

    async def check(
        self, news: dict[str, Any], olds: dict[str, Any] | None = None
    ) -> CheckResult:
        ...

    async def diff(self, id: str, olds: dict[str, Any], news: dict[str, Any]) -> DiffResult:
        ...

    async def create(self, inputs: dict[str, Any]) -> CreateResult:
        ...

    async def update(self, id: str, olds: dict[str, Any], news: dict[str, Any]) -> UpdateResult:
        ...

    async def delete(self, id: str) -> None:
        ...

    async def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        ...
