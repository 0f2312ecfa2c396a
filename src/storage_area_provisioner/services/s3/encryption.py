"""Default bucket encryption with SSE-S3 (AES256) or SSE-KMS."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import KMS_KEY_DESCRIPTION, NO_ENCRYPTION_CODE, SSE_AES256, SSE_AWS_KMS
from ...models import StorageSpecific
from ...results import FailureKind, Result
from ...utils.errors import error_code, format_bucket_error
from ..aws.kms import KeyManager

logger = logging.getLogger(__name__)


def _encryption_configuration(algorithm: str, kms_key_id: str | None = None) -> dict[str, Any]:
    default: dict[str, Any] = {"SSEAlgorithm": algorithm}
    if kms_key_id:
        default["KMSMasterKeyID"] = kms_key_id
    return {"Rules": [{"ApplyServerSideEncryptionByDefault": default}]}


def is_kms_enabled(response: dict[str, Any] | None) -> bool:
    """Whether a GetBucketEncryption response has an ``aws:kms`` default rule."""
    if not response:
        return False
    rules = response.get("ServerSideEncryptionConfiguration", {}).get("Rules", [])
    return any(
        rule.get("ApplyServerSideEncryptionByDefault", {}).get("SSEAlgorithm") == SSE_AWS_KMS
        for rule in rules
    )


class EncryptionConfigurer:
    """Applies SSE-S3 (AES256) or SSE-KMS default encryption to a bucket."""

    def __init__(self, key_manager: KeyManager | None = None) -> None:
        self.key_manager = key_manager or KeyManager()

    def apply(
        self,
        s3_client: Any,
        kms_client: Any,
        bucket_name: str,
        specific: StorageSpecific,
        account_id: str,
    ) -> Result[None]:
        """Apply the encryption mode requested by ``specific``."""
        if specific.server_side_encryption.value == SSE_AWS_KMS:
            return self.enable_kms(s3_client, kms_client, bucket_name, specific, account_id)
        return self.enable_aes256(s3_client, bucket_name)

    def enable_aes256(self, s3_client: Any, bucket_name: str) -> Result[None]:
        """Apply AES256 encryption. Reapplying it is harmless."""
        logger.info(f"Enabling AES256 encryption for bucket '{bucket_name}'")
        try:
            s3_client.put_bucket_encryption(
                Bucket=bucket_name,
                ServerSideEncryptionConfiguration=_encryption_configuration(SSE_AES256),
            )
        except (ClientError, BotoCoreError) as e:
            error = format_bucket_error(bucket_name, "enabling AES256 encryption", e)
            logger.error(error)
            metrics.bucket_operations_total.labels(operation="put_encryption", result="failed").inc()
            return Result.error(error, FailureKind.REMOTE, e)

        metrics.bucket_operations_total.labels(operation="put_encryption", result="success").inc()
        logger.info(f"AES256 encryption enabled for bucket '{bucket_name}'")
        return Result.success()

    def enable_kms(
        self,
        s3_client: Any,
        kms_client: Any,
        bucket_name: str,
        specific: StorageSpecific,
        account_id: str,
    ) -> Result[None]:
        """Enable SSE-KMS with a newly created key unless already enabled.

        A bucket already using ``aws:kms`` is left untouched. Otherwise a new
        key is created on every call; a failure between key creation and
        ``put_bucket_encryption`` leaves that key unused.
        """
        logger.info(f"Checking current encryption settings for bucket '{bucket_name}'")
        try:
            current = self._get_encryption(s3_client, bucket_name)
        except (ClientError, BotoCoreError) as e:
            error = format_bucket_error(bucket_name, "reading the encryption configuration", e)
            logger.error(error)
            metrics.bucket_operations_total.labels(operation="get_encryption", result="failed").inc()
            return Result.error(error, FailureKind.REMOTE, e)

        if is_kms_enabled(current):
            logger.info(f"KMS encryption is already enabled for bucket '{bucket_name}'")
            return Result.success()

        logger.info(f"KMS encryption not enabled. Creating a KMS key for bucket '{bucket_name}'")
        key = self.key_manager.create_key(
            kms_client,
            account_id,
            KMS_KEY_DESCRIPTION.format(bucket_name=bucket_name),
            specific.tags,
        )
        if not key.ok:
            return Result.fail(key.failure)

        try:
            s3_client.put_bucket_encryption(
                Bucket=bucket_name,
                ServerSideEncryptionConfiguration=_encryption_configuration(SSE_AWS_KMS, key.value),
            )
        except (ClientError, BotoCoreError) as e:
            error = format_bucket_error(bucket_name, f"enabling KMS encryption with key '{key.value}'", e)
            logger.error(error)
            logger.warning(f"KMS key '{key.value}' was created but is not attached to bucket '{bucket_name}'")
            metrics.bucket_operations_total.labels(operation="put_encryption", result="failed").inc()
            return Result.error(error, FailureKind.REMOTE, e)

        metrics.bucket_operations_total.labels(operation="put_encryption", result="success").inc()
        logger.info(f"KMS encryption enabled with key ID '{key.value}' for bucket '{bucket_name}'")
        return Result.success()

    @staticmethod
    def _get_encryption(s3_client: Any, bucket_name: str) -> dict[str, Any] | None:
        try:
            return s3_client.get_bucket_encryption(Bucket=bucket_name)
        except ClientError as e:
            # Encryption not configured
            if error_code(e) == NO_ENCRYPTION_CODE:
                return None
            raise
