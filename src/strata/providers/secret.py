"""
Managed secret resource backed by AWS Secrets Manager.

A managed secret combines system-generated ``automated_values`` with
operator-supplied ``manual_values``. The persisted blob is the JSON
serialisation of the merged mapping, with no envelope.

Only ``automated_values`` participate in drift detection: a change there
replaces the secret, while edits to ``manual_values`` alone are not
detected. ``update`` overlays new automated values on whatever is
currently stored and never re-applies ``manual_values``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Sequence

import aioboto3
import structlog

from strata.config import get_settings
from strata.core.errors import InfrastructureError
from strata.providers.base import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    UpdateResult,
)

logger = structlog.get_logger()

RESOURCE = "Secret"

SECRET_ACCESS_ACTIONS = [
    "secretsmanager:GetSecretValue",
    "secretsmanager:DescribeSecret",
    "secretsmanager:ListSecrets",
    "secretsmanager:PutSecretValue",
    "secretsmanager:DeleteSecret",
]


def _serialize(values: Mapping[str, Any]) -> str:
    return json.dumps(values, indent=4, default=str)


def _canonical(values: Any) -> str:
    return json.dumps(values, sort_keys=True, default=str)


class ManagedSecretProvider:
    """Check/diff/create/update/delete/read for a managed secret.

    Holds no cache; every call goes to Secrets Manager, so operations on
    distinct secrets are safe to run concurrently.
    """

    def __init__(self, region: str | None = None) -> None:
        self._region = region or get_settings().home_region

    def _client(self) -> Any:
        session = aioboto3.Session(region_name=self._region)
        return session.client("secretsmanager")

    async def check(
        self, news: dict[str, Any], olds: dict[str, Any] | None = None
    ) -> CheckResult:
        failures: list[CheckFailure] = []

        secret_id = news.get("secret_id")
        if not isinstance(secret_id, str) or not secret_id:
            failures.append(
                CheckFailure(
                    property="secret_id",
                    reason="secret_id is required and must be a non-empty string.",
                )
            )

        if "automated_values" in news and not isinstance(news["automated_values"], Mapping):
            failures.append(
                CheckFailure(
                    property="automated_values",
                    reason="automated_values must be a non-null mapping.",
                )
            )

        manual = news.get("manual_values")
        if manual is not None and not isinstance(manual, Mapping):
            failures.append(
                CheckFailure(
                    property="manual_values",
                    reason="manual_values must be a mapping when supplied.",
                )
            )

        return CheckResult(inputs=news, failures=failures)

    async def diff(self, id: str, olds: dict[str, Any], news: dict[str, Any]) -> DiffResult:
        changes = _canonical(olds.get("automated_values")) != _canonical(
            news.get("automated_values")
        )
        return DiffResult(
            changes=changes,
            replaces=["automated_values"] if changes else [],
            stables=["arn", "secret_id"],
        )

    async def create(self, inputs: dict[str, Any]) -> CreateResult:
        secret_id = inputs.get("secret_id")
        try:
            resolved = {
                **(inputs.get("automated_values") or {}),
                **(inputs.get("manual_values") or {}),
            }
            request: dict[str, Any] = {"Name": secret_id, "SecretString": _serialize(resolved)}
            if inputs.get("description") is not None:
                request["Description"] = inputs["description"]
            if inputs.get("encryption_key_id"):
                request["KmsKeyId"] = inputs["encryption_key_id"]

            async with self._client() as client:
                response = await client.create_secret(**request)
        except Exception as exc:
            logger.error("secret_create_failed", secret_id=secret_id, error=type(exc).__name__)
            raise InfrastructureError(RESOURCE, "create", exc) from exc

        arn = response.get("ARN") or ""
        logger.info("secret_created", secret_id=secret_id, keys=sorted(resolved))
        return CreateResult(id=arn, outs={**inputs, "arn": arn, "resolved_values": resolved})

    async def update(self, id: str, olds: dict[str, Any], news: dict[str, Any]) -> UpdateResult:
        try:
            merged = {
                **(olds.get("resolved_values") or {}),
                **(news.get("automated_values") or {}),
            }
            request: dict[str, Any] = {"SecretId": id, "SecretString": _serialize(merged)}
            if news.get("description") is not None:
                request["Description"] = news["description"]
            if news.get("encryption_key_id"):
                request["KmsKeyId"] = news["encryption_key_id"]

            async with self._client() as client:
                await client.update_secret(**request)
        except Exception as exc:
            logger.error("secret_update_failed", arn=id, error=type(exc).__name__)
            raise InfrastructureError(RESOURCE, "update", exc) from exc

        outs = {
            **olds,
            **{key: value for key, value in news.items() if value is not None},
            "arn": olds.get("arn") or id,
            "secret_id": olds.get("secret_id") or news.get("secret_id"),
            "resolved_values": merged,
        }
        logger.info("secret_updated", arn=id, keys=sorted(merged))
        return UpdateResult(outs=outs)

    async def delete(self, id: str) -> None:
        try:
            async with self._client() as client:
                await client.delete_secret(SecretId=id, ForceDeleteWithoutRecovery=True)
        except Exception as exc:
            logger.error("secret_delete_failed", arn=id, error=type(exc).__name__)
            raise InfrastructureError(RESOURCE, "delete", exc) from exc
        logger.info("secret_deleted", arn=id)

    async def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        try:
            async with self._client() as client:
                metadata = await client.describe_secret(SecretId=id)
                value = await client.get_secret_value(SecretId=id)
            current = json.loads(value.get("SecretString") or "{}")
        except Exception as exc:
            logger.error("secret_read_failed", arn=id, error=type(exc).__name__)
            raise InfrastructureError(RESOURCE, "read", exc) from exc

        arn = metadata.get("ARN") or id
        reconciled = {**props, "arn": arn, "resolved_values": current}
        if metadata.get("Name"):
            reconciled["secret_id"] = metadata["Name"]
        if "Description" in metadata:
            reconciled["description"] = metadata["Description"]
        if metadata.get("KmsKeyId"):
            reconciled["encryption_key_id"] = metadata["KmsKeyId"]
        return ReadResult(id=arn, props=reconciled)


def secret_access_policy(secret_arns: Sequence[str]) -> dict[str, Any]:
    """IAM policy document granting full access to the given secrets."""
    if not secret_arns:
        raise ValueError("At least one secret ARN is required")
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Action": list(SECRET_ACCESS_ACTIONS),
                "Resource": list(secret_arns),
            }
        ],
    }
