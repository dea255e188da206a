"""Layer descriptors and the ordered layer registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from strata.core.errors import ConfigurationError
from strata.orchestration.context import Action
from strata.stacks import programs


@dataclass(frozen=True)
class StackTarget:
    """One expanded stack identifier, with its region when regional."""

    stack_id: str
    region: str | None = None


@dataclass(frozen=True)
class StackInstance:
    """A layer name combined with one expanded stack. Never persisted."""

    layer: str
    stack_id: str
    region: str


ExpandFn = Callable[[str, Sequence[str]], list[StackTarget]]
ProvisionFn = Callable[[str], dict[str, Any]]


def expand_global(environment: str, regions: Sequence[str]) -> list[StackTarget]:
    """A single environment-wide stack, regardless of regions."""
    return [StackTarget(stack_id=environment)]


def expand_regional(environment: str, regions: Sequence[str]) -> list[StackTarget]:
    """One stack per region, named ``{region}-{environment}``."""
    return [StackTarget(stack_id=f"{region}-{environment}", region=region) for region in regions]


@dataclass(frozen=True)
class Layer:
    """A named stage in the provisioning order."""

    name: str
    expand: ExpandFn
    provision: ProvisionFn
    description: str = ""

    def expand_stacks(self, environment: str, regions: Sequence[str]) -> list[StackTarget]:
        return list(self.expand(environment, regions))


class LayerRegistry:
    """
    Read-only ordered collection of layers.

    Declaration order is the dependency order. The only reordering ever
    applied is a full reversal for destroy.
    """

    def __init__(self, layers: Sequence[Layer]) -> None:
        names = [layer.name for layer in layers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate layer names: {', '.join(duplicates)}",
                details={"layers": duplicates},
            )
        self._layers: tuple[Layer, ...] = tuple(layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def names(self) -> list[str]:
        return [layer.name for layer in self._layers]

    def get(self, name: str) -> Layer | None:
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    def ordered(self, action: Action) -> list[Layer]:
        """Layers in execution order for the given action."""
        if action is Action.DESTROY:
            return list(reversed(self._layers))
        return list(self._layers)


def default_registry() -> LayerRegistry:
    """The standard account/network/data/platform/workloads layering."""
    return LayerRegistry(
        [
            Layer(
                "acct-baseline",
                expand_global,
                programs.acct_baseline,
                "Account-wide baseline (IAM, guardrails)",
            ),
            Layer(
                "net-foundation",
                expand_regional,
                programs.net_foundation,
                "Regional networking (VPCs, subnets, endpoints)",
            ),
            Layer(
                "stateful-data",
                expand_regional,
                programs.stateful_data,
                "Databases, buckets and caches",
            ),
            Layer(
                "svc-platform",
                expand_regional,
                programs.svc_platform,
                "Container platform and registries",
            ),
            Layer(
                "workloads",
                expand_regional,
                programs.workloads,
                "Application services and batch jobs",
            ),
        ]
    )
