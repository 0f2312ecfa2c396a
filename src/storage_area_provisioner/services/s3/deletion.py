"""Batched deletion of every object under a prefix."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import DELETE_BATCH_SIZE
from ...naming import ensure_trailing_separator
from ...results import FailedOperation, FailureKind, Problem, Result
from ...utils.errors import describe_error

logger = logging.getLogger(__name__)


def iter_object_keys(s3_client: Any, bucket_name: str, prefix: str) -> Iterator[str]:
    """Yield every key under ``prefix`` across all listing pages."""
    paginator = s3_client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=bucket_name, Prefix=prefix):
        for obj in page.get("Contents", []):
            yield obj["Key"]


def partition(keys: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    """Split ``keys`` into consecutive chunks of at most ``size`` items."""
    for start in range(0, len(keys), size):
        yield keys[start:start + size]


class BatchDeleter:
    """Deletes objects in DeleteObjects batches and aggregates item errors."""

    def __init__(self, batch_size: int = DELETE_BATCH_SIZE) -> None:
        if not 0 < batch_size <= DELETE_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {DELETE_BATCH_SIZE}")
        self.batch_size = batch_size

    def delete_by_prefix(self, s3_client: Any, bucket_name: str, prefix: str) -> Result[None]:
        """Delete every object under ``prefix`` and the prefix marker itself.

        The marker is always a deletion target, so an empty folder is removed
        too. Per-item errors from every batch are collected into one failure.
        """
        folder = ensure_trailing_separator(prefix)
        logger.info(f"Starting deletion of objects with prefix '{folder}' in bucket '{bucket_name}'")

        try:
            keys = list(iter_object_keys(s3_client, bucket_name, folder))
        except (ClientError, BotoCoreError) as e:
            error = (
                f"[Bucket: {bucket_name}, Prefix: {folder}] An error occurred while listing objects. "
                f"Details: {describe_error(e)}"
            )
            logger.error(error)
            return Result.error(error, FailureKind.REMOTE, e)

        if folder not in keys:
            keys.append(folder)
        logger.info(f"Deleting {len(keys)} object(s) with prefix '{folder}' in bucket '{bucket_name}'")

        return self.delete_keys(s3_client, bucket_name, keys, folder)

    def delete_keys(
        self,
        s3_client: Any,
        bucket_name: str,
        keys: Sequence[str],
        prefix: str | None = None,
    ) -> Result[None]:
        """Delete ``keys`` in batches of at most ``batch_size``."""
        context = f"[Bucket: {bucket_name}, Prefix: {prefix}]" if prefix else f"[Bucket: {bucket_name}]"
        problems: list[Problem] = []

        for batch_number, batch in enumerate(partition(keys, self.batch_size), start=1):
            try:
                response = s3_client.delete_objects(
                    Bucket=bucket_name,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
            except (ClientError, BotoCoreError) as e:
                metrics.delete_batches_total.labels(result="failed").inc()
                error = (
                    f"{context} An error occurred while deleting batch {batch_number} "
                    f"({len(batch)} object(s)). Details: {describe_error(e)}"
                )
                logger.error(error)
                return Result.fail(FailedOperation(
                    message=error,
                    problems=(*problems, Problem(error, e)),
                    kind=FailureKind.REMOTE,
                ))

            errors = response.get("Errors", [])
            metrics.delete_batches_total.labels(result="failed" if errors else "success").inc()
            metrics.objects_deleted_total.labels(result="success").inc(len(batch) - len(errors))
            if errors:
                metrics.objects_deleted_total.labels(result="failed").inc(len(errors))

            for item in errors:
                error = (
                    f"{context} Error deleting object with key '{item.get('Key')}': "
                    f"{item.get('Code', 'Unknown')}: {item.get('Message', '')}"
                )
                logger.error(error)
                problems.append(Problem(error))

        if problems:
            return Result.fail(FailedOperation(
                message=f"{context} {len(problems)} error(s) during object deletion.",
                problems=tuple(problems),
                kind=FailureKind.PARTIAL_BATCH,
            ))

        logger.info(f"{context} Successfully deleted {len(keys)} object(s)")
        return Result.success()
