"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _read_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
    if parsed <= 0:
        raise ValueError(f"{name} must be greater than 0, got {parsed}")
    return parsed


def _read_path(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value


@dataclass(frozen=True)
class ProvisionerSettings:
    """Settings consumed by the reconciliation engine.

    Environment Variables:
        BUCKET_WAIT_TIMEOUT_SECONDS: Max wait for a new bucket to become visible (default: 60)
        OBJECT_WAIT_TIMEOUT_SECONDS: Max wait for a folder marker to become visible (default: 30)
        WAITER_DELAY_SECONDS: Delay between existence probes (default: 5)
        BUCKET_POLICY_PATH: Optional override for the bucket policy template
        KMS_POLICY_PATH: Optional override for the KMS key policy template
    """

    bucket_wait_timeout_seconds: int = 60
    object_wait_timeout_seconds: int = 30
    waiter_delay_seconds: int = 5
    bucket_policy_path: str | None = None
    kms_policy_path: str | None = None

    @classmethod
    def from_env(cls) -> ProvisionerSettings:
        """Build settings from environment variables."""
        return cls(
            bucket_wait_timeout_seconds=_read_int("BUCKET_WAIT_TIMEOUT_SECONDS", 60),
            object_wait_timeout_seconds=_read_int("OBJECT_WAIT_TIMEOUT_SECONDS", 30),
            waiter_delay_seconds=_read_int("WAITER_DELAY_SECONDS", 5),
            bucket_policy_path=_read_path("BUCKET_POLICY_PATH"),
            kms_policy_path=_read_path("KMS_POLICY_PATH"),
        )
