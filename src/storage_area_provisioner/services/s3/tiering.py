"""S3 Intelligent-Tiering archive configuration."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import INTELLIGENT_TIERING_ID
from ...models import IntelligentTieringPolicy
from ...results import FailureKind, Result
from ...utils.errors import format_bucket_error

logger = logging.getLogger(__name__)


def build_tierings(policy: IntelligentTieringPolicy) -> list[dict[str, Any]]:
    tierings = []
    if policy.archive_access_enabled:
        tierings.append({"Days": policy.archive_access_days, "AccessTier": "ARCHIVE_ACCESS"})
    if policy.deep_archive_access_enabled:
        tierings.append({"Days": policy.deep_archive_access_days, "AccessTier": "DEEP_ARCHIVE_ACCESS"})
    return tierings


def apply_intelligent_tiering(
    s3_client: Any,
    bucket_name: str,
    policy: IntelligentTieringPolicy | None,
) -> Result[None]:
    """Put the intelligent-tiering configuration when a tier is enabled."""
    if policy is None or not policy.has_enabled_tier:
        return Result.success()

    logger.info(f"Applying intelligent-tiering configuration for bucket '{bucket_name}'")
    try:
        s3_client.put_bucket_intelligent_tiering_configuration(
            Bucket=bucket_name,
            Id=INTELLIGENT_TIERING_ID,
            IntelligentTieringConfiguration={
                "Id": INTELLIGENT_TIERING_ID,
                "Status": "Enabled",
                "Tierings": build_tierings(policy),
            },
        )
    except (ClientError, BotoCoreError) as e:
        error = format_bucket_error(bucket_name, "applying intelligent-tiering configuration", e)
        logger.error(error)
        metrics.bucket_operations_total.labels(operation="put_intelligent_tiering", result="failed").inc()
        return Result.error(error, FailureKind.REMOTE, e)

    metrics.bucket_operations_total.labels(operation="put_intelligent_tiering", result="success").inc()
    return Result.success()
