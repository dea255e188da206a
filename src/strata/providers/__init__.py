"""Custom resource providers."""

from strata.providers.base import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    ResourceProvider,
    UpdateResult,
)
from strata.providers.lifecycle import (
    SecretState,
    destroy_secret,
    reconcile_secret,
    refresh_secret,
)
from strata.providers.secret import ManagedSecretProvider, secret_access_policy

__all__ = [
    "CheckFailure",
    "CheckResult",
    "CreateResult",
    "DiffResult",
    "ManagedSecretProvider",
    "ReadResult",
    "ResourceProvider",
    "SecretState",
    "UpdateResult",
    "destroy_secret",
    "reconcile_secret",
    "refresh_secret",
    "secret_access_policy",
]
