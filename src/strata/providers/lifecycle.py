"""Drive a resource provider through its Absent/Present lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from strata.core.errors import ValidationError
from strata.providers.base import ResourceProvider

logger = structlog.get_logger()


@dataclass(frozen=True)
class SecretState:
    """A present secret: its external id and last known outputs."""

    id: str
    outputs: dict[str, Any]


async def reconcile_secret(
    provider: ResourceProvider,
    stored: SecretState | None,
    candidate: dict[str, Any],
) -> SecretState:
    """
    Bring a secret to the candidate inputs.

    Absent secrets are created. Present secrets are left alone when the
    diff reports no changes, replaced (delete then create) when it names
    properties to replace, and updated in place otherwise.

    Raises:
        ValidationError: if ``check`` reports any failure; nothing is applied
        InfrastructureError: if the secret store rejects an operation
    """
    checked = await provider.check(candidate, stored.outputs if stored else None)
    if not checked.ok:
        raise ValidationError(
            "Secret inputs failed validation",
            details={"failures": [f"{f.property}: {f.reason}" for f in checked.failures]},
        )
    inputs = checked.inputs

    if stored is None:
        created = await provider.create(inputs)
        return SecretState(id=created.id, outputs=created.outs)

    diff = await provider.diff(stored.id, stored.outputs, inputs)
    if not diff.changes:
        logger.debug("secret_unchanged", arn=stored.id)
        return stored

    if diff.requires_replace:
        logger.info("secret_replacing", arn=stored.id, replaces=diff.replaces)
        await provider.delete(stored.id)
        created = await provider.create(inputs)
        return SecretState(id=created.id, outputs=created.outs)

    updated = await provider.update(stored.id, stored.outputs, inputs)
    return SecretState(id=stored.id, outputs=updated.outs)


async def refresh_secret(provider: ResourceProvider, state: SecretState) -> SecretState:
    """Re-read a present secret from the store."""
    result = await provider.read(state.id, state.outputs)
    return SecretState(id=result.id, outputs=result.props)


async def destroy_secret(provider: ResourceProvider, state: SecretState) -> None:
    """Delete a present secret. There is no recovery window."""
    await provider.delete(state.id)
