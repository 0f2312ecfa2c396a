"""Bucket versioning and noncurrent version expiration."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import LIFECYCLE_RULE_ID, LIFECYCLE_TRANSITION_MINIMUM_SIZE
from ...models import LifecyclePolicy
from ...results import FailureKind, Result
from ...utils.errors import format_bucket_error

logger = logging.getLogger(__name__)


def build_lifecycle_rule(policy: LifecyclePolicy) -> dict[str, Any]:
    """Build the bucket-wide rule expiring noncurrent versions."""
    return {
        "ID": LIFECYCLE_RULE_ID,
        "Status": "Enabled",
        "Filter": {},
        "NoncurrentVersionExpiration": {
            "NoncurrentDays": policy.days_after_noncurrent,
            "NewerNoncurrentVersions": policy.versions_to_retain,
        },
    }


def enable_bucket_versioning(
    s3_client: Any,
    bucket_name: str,
    lifecycle: LifecyclePolicy | None = None,
) -> Result[None]:
    """Enable versioning, then install the expiration rule if one is given.

    Without a lifecycle policy noncurrent versions are kept indefinitely.
    """
    logger.info(f"Enabling versioning for bucket '{bucket_name}'")
    try:
        s3_client.put_bucket_versioning(
            Bucket=bucket_name,
            VersioningConfiguration={"Status": "Enabled"},
        )
    except (ClientError, BotoCoreError) as e:
        error = format_bucket_error(bucket_name, "enabling versioning", e)
        logger.error(error)
        metrics.bucket_operations_total.labels(operation="put_versioning", result="failed").inc()
        return Result.error(error, FailureKind.REMOTE, e)

    metrics.bucket_operations_total.labels(operation="put_versioning", result="success").inc()
    logger.info(f"Versioning enabled for bucket '{bucket_name}'")

    if lifecycle is None:
        return Result.success()
    return apply_lifecycle_configuration(s3_client, bucket_name, lifecycle)


def apply_lifecycle_configuration(s3_client: Any, bucket_name: str, lifecycle: LifecyclePolicy) -> Result[None]:
    """Replace the bucket lifecycle configuration with the expiration rule."""
    logger.info(
        f"Applying lifecycle configuration for bucket '{bucket_name}': expire noncurrent versions after "
        f"{lifecycle.days_after_noncurrent} day(s), retaining {lifecycle.versions_to_retain}"
    )
    try:
        s3_client.put_bucket_lifecycle_configuration(
            Bucket=bucket_name,
            LifecycleConfiguration={"Rules": [build_lifecycle_rule(lifecycle)]},
            TransitionDefaultMinimumObjectSize=LIFECYCLE_TRANSITION_MINIMUM_SIZE,
        )
    except (ClientError, BotoCoreError) as e:
        error = format_bucket_error(bucket_name, "applying lifecycle configuration", e)
        logger.error(error)
        metrics.bucket_operations_total.labels(operation="put_lifecycle", result="failed").inc()
        return Result.error(error, FailureKind.REMOTE, e)

    metrics.bucket_operations_total.labels(operation="put_lifecycle", result="success").inc()
    return Result.success()
