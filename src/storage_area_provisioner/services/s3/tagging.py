"""Bucket tagging."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...models import BucketTag
from ...results import FailureKind, Result
from ...utils.errors import format_bucket_error

logger = logging.getLogger(__name__)


def apply_bucket_tags(s3_client: Any, bucket_name: str, tags: Sequence[BucketTag] | None) -> Result[None]:
    """Replace the bucket's tag set with ``tags``.

    An empty or missing tag set is a no-op and issues no remote call.
    """
    if not tags:
        logger.info(f"No tags provided for bucket '{bucket_name}'. Skipping tag application.")
        return Result.success()

    logger.info(f"Applying {len(tags)} tag(s) to bucket '{bucket_name}'")
    try:
        s3_client.put_bucket_tagging(
            Bucket=bucket_name,
            Tagging={"TagSet": [{"Key": tag.key, "Value": tag.value} for tag in tags]},
        )
    except (ClientError, BotoCoreError) as e:
        error = format_bucket_error(bucket_name, "applying tags to the bucket", e)
        logger.error(error)
        metrics.bucket_operations_total.labels(operation="put_tagging", result="failed").inc()
        return Result.error(error, FailureKind.REMOTE, e)

    metrics.bucket_operations_total.labels(operation="put_tagging", result="success").inc()
    logger.info(f"Tags successfully applied to bucket '{bucket_name}'")
    return Result.success()
