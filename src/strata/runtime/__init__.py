"""Stack runtime adapters."""

from __future__ import annotations

from strata.config import Settings
from strata.core.errors import ConfigurationError
from strata.runtime.base import ApplySummary, OutputOptions, StackHandle, StackRuntime
from strata.runtime.memory import InMemoryStackRuntime
from strata.runtime.pulumi import PulumiCliRuntime

RUNTIMES = ("pulumi", "memory")


def create_runtime(kind: str, settings: Settings) -> StackRuntime:
    """Build the runtime named on the command line."""
    if kind == "memory":
        return InMemoryStackRuntime()
    if kind == "pulumi":
        return PulumiCliRuntime(
            settings.work_dir,
            binary=settings.pulumi_binary,
            backend_url=settings.backend_url,
        )
    raise ConfigurationError(f"Unknown stack runtime '{kind}'", details={"runtime": kind})


__all__ = [
    "ApplySummary",
    "InMemoryStackRuntime",
    "OutputOptions",
    "PulumiCliRuntime",
    "RUNTIMES",
    "StackHandle",
    "StackRuntime",
    "create_runtime",
]
