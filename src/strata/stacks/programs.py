"""
Provisioning callbacks for the default layers.

Each callback receives a stack id and returns a declarative program
document (``resources`` and ``outputs``) that the stack runtime hands to
the control plane. The resource bodies are still placeholders; every
stack publishes an informational ``message`` output.
"""

from __future__ import annotations

from typing import Any

import structlog

logger = structlog.get_logger()


def _placeholder(layer: str, summary: str, stack_id: str) -> dict[str, Any]:
    logger.info("stack_program_built", layer=layer, stack=stack_id)
    return {
        "resources": {},
        "outputs": {"message": f"{summary} stack placeholder for {stack_id}"},
    }


def acct_baseline(stack_id: str) -> dict[str, Any]:
    return _placeholder("acct-baseline", "Account baseline", stack_id)


def net_foundation(stack_id: str) -> dict[str, Any]:
    return _placeholder("net-foundation", "Network foundation", stack_id)


def stateful_data(stack_id: str) -> dict[str, Any]:
    return _placeholder("stateful-data", "Stateful data", stack_id)


def svc_platform(stack_id: str) -> dict[str, Any]:
    return _placeholder("svc-platform", "Service platform", stack_id)


def workloads(stack_id: str) -> dict[str, Any]:
    return _placeholder("workloads", "Workloads", stack_id)
