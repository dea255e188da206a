"""
Layered execution engine.

Walks the layer registry (reversed for destroy), expands each selected
layer into its stacks, runs every stack of a layer concurrently and waits
for all of them to settle before moving to the next layer.
"""

from __future__ import annotations

import asyncio
import time

import structlog

from strata.config import Settings, get_settings
from strata.core.errors import StackOperationError
from strata.logging import bind_context
from strata.orchestration.context import Action, ExecutionContext
from strata.orchestration.registry import Layer, LayerRegistry, StackInstance, default_registry
from strata.orchestration.results import LayerResult, RunResult, StackResult
from strata.runtime.base import OutputOptions, StackRuntime

logger = structlog.get_logger()

REGION_CONFIG_KEY = "aws:region"
PROVIDER_PLUGIN = "aws"


class Orchestrator:
    """Runs preview/deploy/destroy across every layer of a registry."""

    def __init__(
        self,
        runtime: StackRuntime,
        registry: LayerRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._runtime = runtime
        self._registry = registry if registry is not None else default_registry()
        self._settings = settings or get_settings()

    @property
    def registry(self) -> LayerRegistry:
        return self._registry

    async def run(self, ctx: ExecutionContext) -> RunResult:
        """
        Execute ``ctx.action`` over the selected layers.

        Returns:
            RunResult describing every layer and stack processed

        Raises:
            StackOperationError: wrapping the first stack failure. Later
                layers are never started once a layer has failed.
        """
        start = time.monotonic()
        log = bind_context(action=ctx.action.value, environment=ctx.environment)

        unknown = sorted(ctx.scope - set(self._registry.names()))
        if unknown:
            log.warning("unknown_scope_layers", layers=unknown)

        result = RunResult(action=ctx.action.value, environment=ctx.environment)
        log.info("run_started", regions=list(ctx.regions), scope=sorted(ctx.scope))

        for layer in self._registry.ordered(ctx.action):
            if not ctx.in_scope(layer.name):
                log.info("layer_skipped", layer=layer.name)
                result.layers.append(LayerResult(name=layer.name, skipped=True))
                continue
            result.layers.append(await self._run_layer(layer, ctx))

        result.duration_seconds = time.monotonic() - start
        log.info(
            "run_completed",
            stacks=result.total_stacks,
            duration_seconds=round(result.duration_seconds, 2),
        )
        return result

    def _instances(self, layer: Layer, ctx: ExecutionContext) -> list[StackInstance]:
        targets = layer.expand_stacks(ctx.environment, ctx.regions)
        if ctx.action is Action.DESTROY:
            # Only initiation order changes; every stack still runs concurrently.
            targets.reverse()
        return [
            StackInstance(
                layer=layer.name,
                stack_id=target.stack_id,
                region=target.region or self._settings.home_region,
            )
            for target in targets
        ]

    async def _run_layer(self, layer: Layer, ctx: ExecutionContext) -> LayerResult:
        instances = self._instances(layer, ctx)
        logger.info(
            "layer_started",
            layer=layer.name,
            action=ctx.action.value,
            stacks=[i.stack_id for i in instances],
        )

        limit = self._settings.max_concurrency
        semaphore = asyncio.Semaphore(limit) if limit > 0 else None
        failures: list[tuple[StackInstance, Exception]] = []

        async def run_one(instance: StackInstance) -> StackResult:
            try:
                if semaphore is None:
                    return await self._run_stack(layer, instance, ctx)
                async with semaphore:
                    return await self._run_stack(layer, instance, ctx)
            except Exception as exc:
                failures.append((instance, exc))
                raise

        tasks = [asyncio.create_task(run_one(instance)) for instance in instances]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        if failures:
            instance, exc = failures[0]
            logger.error(
                "layer_failed",
                layer=layer.name,
                stack=instance.stack_id,
                failed=len(failures),
                total=len(instances),
                error=str(exc),
            )
            raise StackOperationError(layer.name, instance.stack_id, ctx.action.value, exc) from exc

        stacks: list[StackResult] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            stacks.append(outcome)

        logger.info("layer_completed", layer=layer.name, stacks=len(stacks))
        return LayerResult(name=layer.name, stacks=stacks)

    async def _run_stack(
        self, layer: Layer, instance: StackInstance, ctx: ExecutionContext
    ) -> StackResult:
        log = bind_context(layer=layer.name, stack=instance.stack_id, action=ctx.action.value)
        start = time.monotonic()
        log.info("stack_operation_started", region=instance.region)

        timeout = self._settings.stack_timeout_seconds
        options = OutputOptions(
            on_output=lambda line: log.debug("stack_output", line=line),
            timeout_seconds=timeout if timeout > 0 else None,
        )

        handle = await self._runtime.create_or_select(layer.name, instance.stack_id, layer.provision)
        await self._runtime.configure(handle, REGION_CONFIG_KEY, instance.region)
        await self._runtime.install_plugin(handle, PROVIDER_PLUGIN, self._settings.aws_plugin_version)
        await self._runtime.refresh(handle, options)

        outputs = {}
        if ctx.action is Action.PREVIEW:
            await self._runtime.preview(handle, options)
        elif ctx.action is Action.DEPLOY:
            summary = await self._runtime.apply(handle, options)
            outputs = dict(summary.outputs)
        else:
            await self._runtime.destroy(handle, options)

        duration = time.monotonic() - start
        log.info("stack_operation_completed", duration_seconds=round(duration, 2))
        return StackResult(
            layer=layer.name,
            stack_id=instance.stack_id,
            region=instance.region,
            action=ctx.action.value,
            outputs=outputs,
            duration_seconds=duration,
        )
