"""Root test configuration and shared fixtures."""

import logging

import pytest
import structlog

from strata.config import Settings
from strata.orchestration.registry import Layer, LayerRegistry, expand_global, expand_regional
from strata.runtime.memory import InMemoryStackRuntime


def pytest_configure(config):
    """Keep structlog quiet during tests."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class ProgramRecorder:
    """Provisioning callbacks that record which stacks they were built for."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def for_layer(self, layer: str):
        def provision(stack_id: str) -> dict:
            self.calls.append((layer, stack_id))
            return {"resources": {}, "outputs": {"message": f"{layer}:{stack_id}"}}

        return provision

    def stacks_for(self, layer: str) -> list[str]:
        return [stack for name, stack in self.calls if name == layer]


@pytest.fixture
def recorder():
    return ProgramRecorder()


@pytest.fixture
def two_layer_registry(recorder):
    """Layer A (global) followed by layer B (regional)."""
    return LayerRegistry(
        [
            Layer("A", expand_global, recorder.for_layer("A")),
            Layer("B", expand_regional, recorder.for_layer("B")),
        ]
    )


@pytest.fixture
def three_layer_registry(recorder):
    return LayerRegistry(
        [
            Layer("A", expand_global, recorder.for_layer("A")),
            Layer("B", expand_regional, recorder.for_layer("B")),
            Layer("C", expand_regional, recorder.for_layer("C")),
        ]
    )


@pytest.fixture
def settings():
    return Settings(
        environment=None,
        regions=["r1", "r2"],
        home_region="home-1",
        stack_timeout_seconds=600,
        max_concurrency=0,
    )


@pytest.fixture
def runtime():
    return InMemoryStackRuntime(delay=0.01)
