"""Reconciliation of a storage area bucket against its desired state."""

from __future__ import annotations

import logging
import time
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...config import ProvisionerSettings
from ...constants import (
    DEFAULT_REGION,
    EVENT_REASON_BUCKET_CREATED,
    EVENT_REASON_FOLDER_CREATED,
    EVENT_REASON_FOLDER_DELETED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_RECONCILE_SUCCEEDED,
    EVENT_REASON_REGION_CONFLICT,
    LEGACY_REGION_ALIASES,
    NOT_FOUND_CODES,
)
from ...logging import log_operation_event
from ...models import ResourceLocator, StorageSpecific
from ...naming import ensure_trailing_separator
from ...results import FailureKind, Result
from ...tracing import bucket_attributes, trace_span
from ...utils.errors import describe_error, error_code, format_bucket_error
from ..aws.kms import KeyManager
from .deletion import BatchDeleter
from .encryption import EncryptionConfigurer
from .policy import PolicyApplier
from .tagging import apply_bucket_tags
from .tiering import apply_intelligent_tiering
from .versioning import enable_bucket_versioning
from .waiter import ExistenceWaiter

logger = logging.getLogger(__name__)


class BucketReconciler:
    """Makes a bucket match a StorageSpecific and manages component folders.

    Every operation returns a Result. ``reconcile`` stops at the first
    failing step and never rolls back earlier steps; every step except KMS
    key creation is idempotent, so re-running it is safe.
    """

    def __init__(
        self,
        settings: ProvisionerSettings | None = None,
        waiter: ExistenceWaiter | None = None,
        policy_applier: PolicyApplier | None = None,
        encryption: EncryptionConfigurer | None = None,
        deleter: BatchDeleter | None = None,
    ) -> None:
        self.settings = settings or ProvisionerSettings()
        self.waiter = waiter or ExistenceWaiter(self.settings.waiter_delay_seconds)
        self.policy_applier = policy_applier or PolicyApplier(self.settings.bucket_policy_path)
        self.encryption = encryption or EncryptionConfigurer(KeyManager(self.settings.kms_policy_path))
        self.deleter = deleter or BatchDeleter()

    def bucket_exists(self, s3_client: Any, bucket_name: str) -> Result[bool]:
        """Check whether the bucket exists and is reachable with these credentials."""
        logger.info(f"Checking if bucket '{bucket_name}' exists")
        try:
            s3_client.head_bucket(Bucket=bucket_name)
        except ClientError as e:
            if error_code(e) in NOT_FOUND_CODES:
                logger.info(f"Bucket '{bucket_name}' does not exist")
                return Result.success(False)
            error = format_bucket_error(bucket_name, "checking the bucket existence", e)
            logger.error(error)
            return Result.error(error, FailureKind.REMOTE, e)
        except BotoCoreError as e:
            error = format_bucket_error(bucket_name, "checking the bucket existence", e)
            logger.error(error)
            return Result.error(error, FailureKind.REMOTE, e)

        logger.info(f"Bucket '{bucket_name}' exists")
        return Result.success(True)

    def bucket_region(self, s3_client: Any, bucket_name: str) -> Result[str]:
        """Return the region the bucket lives in."""
        try:
            response = s3_client.get_bucket_location(Bucket=bucket_name)
        except (ClientError, BotoCoreError) as e:
            error = format_bucket_error(bucket_name, "getting the region of the bucket", e)
            logger.error(error)
            return Result.error(error, FailureKind.REMOTE, e)

        constraint = response.get("LocationConstraint") or DEFAULT_REGION
        region = LEGACY_REGION_ALIASES.get(constraint, constraint)
        logger.debug(f"Bucket '{bucket_name}' is located in region '{region}'")
        return Result.success(region)

    def create_bucket(self, s3_client: Any, bucket_name: str, region: str) -> Result[None]:
        """Create the bucket and wait until it is visible."""
        logger.info(f"Starting creation of bucket '{bucket_name}' in region '{region}'")
        params: dict[str, Any] = {"Bucket": bucket_name}
        if region != DEFAULT_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            s3_client.create_bucket(**params)
        except (ClientError, BotoCoreError) as e:
            error = format_bucket_error(bucket_name, "creating the bucket", e)
            logger.error(error)
            metrics.bucket_operations_total.labels(operation="create", result="failed").inc()
            return Result.error(error, FailureKind.REMOTE, e)

        metrics.bucket_operations_total.labels(operation="create", result="success").inc()
        waited = self.waiter.wait_for(
            s3_client,
            ResourceLocator(bucket_name),
            self.settings.bucket_wait_timeout_seconds,
        )
        if not waited.ok:
            return waited

        log_operation_event(
            logger, "create_bucket", bucket_name, "created", EVENT_REASON_BUCKET_CREATED,
            f"Bucket '{bucket_name}' created in region '{region}'", region=region,
        )
        return Result.success()

    def reconcile(
        self,
        s3_client: Any,
        kms_client: Any,
        bucket_name: str,
        specific: StorageSpecific,
        account_id: str,
    ) -> Result[None]:
        """Create the bucket if needed and converge its configuration.

        Order: existence → create/wait or region check → tags → access
        policy → encryption → versioning (+ lifecycle) → intelligent tiering.

        Args:
            s3_client: boto3 S3 client for ``specific.region``
            kms_client: boto3 KMS client for ``specific.region``
            bucket_name: Derived bucket name
            specific: Desired state
            account_id: Account owning the bucket and any created KMS key

        Returns:
            Success, or the failure of the first step that failed
        """
        start_time = time.time()
        with trace_span("reconcile_bucket", attributes=bucket_attributes(bucket_name, specific.region)):
            log_operation_event(
                logger, "reconcile", bucket_name, "started", EVENT_REASON_RECONCILE_STARTED,
                f"Reconciling bucket '{bucket_name}'", region=specific.region,
            )
            result = self._reconcile(s3_client, kms_client, bucket_name, specific, account_id)

        metrics.reconcile_duration_seconds.observe(time.time() - start_time)
        if result.ok:
            metrics.reconcile_total.labels(result="success").inc()
            log_operation_event(
                logger, "reconcile", bucket_name, "succeeded", EVENT_REASON_RECONCILE_SUCCEEDED,
                f"Bucket '{bucket_name}' is successfully created or updated in region '{specific.region}'",
            )
        else:
            metrics.reconcile_total.labels(result=result.failure.kind.value).inc()
            log_operation_event(
                logger, "reconcile", bucket_name, "failed", EVENT_REASON_RECONCILE_FAILED,
                result.failure.message, level=logging.ERROR, kind=result.failure.kind.value,
            )
        return result

    def _reconcile(
        self,
        s3_client: Any,
        kms_client: Any,
        bucket_name: str,
        specific: StorageSpecific,
        account_id: str,
    ) -> Result[None]:
        exists = self.bucket_exists(s3_client, bucket_name)
        if not exists.ok:
            return Result.fail(exists.failure)

        if not exists.value:
            created = self.create_bucket(s3_client, bucket_name, specific.region)
            if not created.ok:
                return created
        else:
            conflict = self.check_region(s3_client, bucket_name, specific.region)
            if not conflict.ok:
                return conflict

        logger.info(f"Starting the update of the bucket configurations of '{bucket_name}'")

        result = apply_bucket_tags(s3_client, bucket_name, specific.tags)
        if not result.ok:
            return result

        result = self.policy_applier.apply(s3_client, bucket_name)
        if not result.ok:
            return result

        result = self.encryption.apply(s3_client, kms_client, bucket_name, specific, account_id)
        if not result.ok:
            return result

        if specific.multiple_version:
            result = enable_bucket_versioning(s3_client, bucket_name, specific.lifecycle)
            if not result.ok:
                return result

        return apply_intelligent_tiering(s3_client, bucket_name, specific.intelligent_tiering)

    def check_region(self, s3_client: Any, bucket_name: str, desired_region: str) -> Result[None]:
        """Fail with CONFLICT if the existing bucket lives in another region."""
        existing = self.bucket_region(s3_client, bucket_name)
        if not existing.ok:
            return Result.fail(existing.failure)

        if existing.value != desired_region:
            error = (
                f"[Bucket: {bucket_name}] Error: The bucket already exists in region {existing.value} "
                f"and cannot be created or updated in region {desired_region}."
            )
            log_operation_event(
                logger, "reconcile", bucket_name, "conflict", EVENT_REASON_REGION_CONFLICT, error,
                level=logging.ERROR, existing_region=existing.value, desired_region=desired_region,
            )
            return Result.error(error, FailureKind.CONFLICT)
        return Result.success()

    def create_folder(self, s3_client: Any, bucket_name: str, folder_path: str) -> Result[None]:
        """Create a zero-byte folder marker and wait until it is visible."""
        folder = ensure_trailing_separator(folder_path)
        logger.info(f"Starting creation of the folder '{folder}' in bucket '{bucket_name}'")
        try:
            s3_client.put_object(Bucket=bucket_name, Key=folder, Body=b"")
        except (ClientError, BotoCoreError) as e:
            error = (
                f"[Bucket: {bucket_name}, Folder: {folder}] Error: An unexpected error occurred while "
                f"creating the folder. Details: {describe_error(e)}"
            )
            logger.error(error)
            metrics.bucket_operations_total.labels(operation="create_folder", result="failed").inc()
            return Result.error(error, FailureKind.REMOTE, e)

        metrics.bucket_operations_total.labels(operation="create_folder", result="success").inc()
        waited = self.waiter.wait_for(
            s3_client,
            ResourceLocator(bucket_name, folder),
            self.settings.object_wait_timeout_seconds,
        )
        if not waited.ok:
            return waited

        log_operation_event(
            logger, "create_folder", bucket_name, "created", EVENT_REASON_FOLDER_CREATED,
            f"Folder '{folder}' in bucket '{bucket_name}' is successfully created", folder=folder,
        )
        return Result.success()

    def delete_by_prefix(self, s3_client: Any, bucket_name: str, prefix: str) -> Result[None]:
        """Delete every object under ``prefix`` together with its folder marker."""
        with trace_span("delete_by_prefix", attributes=bucket_attributes(bucket_name, prefix=prefix)):
            result = self.deleter.delete_by_prefix(s3_client, bucket_name, prefix)

        if result.ok:
            log_operation_event(
                logger, "delete_by_prefix", bucket_name, "deleted", EVENT_REASON_FOLDER_DELETED,
                f"Successfully deleted all objects with prefix '{prefix}' in bucket '{bucket_name}'",
                prefix=prefix,
            )
        return result
