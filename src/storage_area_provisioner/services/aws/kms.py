"""Creation of customer-managed KMS keys for bucket encryption."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import ACCOUNT_ID_PLACEHOLDER, KMS_POLICY_RESOURCE
from ...models import BucketTag
from ...results import FailureKind, Result
from ...utils.errors import describe_error
from ...utils.templates import load_template, render_template

logger = logging.getLogger(__name__)


class KeyManager:
    """Creates symmetric encrypt/decrypt keys in AWS KMS."""

    def __init__(self, policy_path: str | None = None) -> None:
        """Initialize the key manager.

        Args:
            policy_path: Optional override for the key policy template
        """
        self.policy_path = policy_path

    def create_key(
        self,
        kms_client: Any,
        account_id: str,
        description: str,
        tags: Sequence[BucketTag] = (),
    ) -> Result[str]:
        """Create a new symmetric key.

        Args:
            kms_client: boto3 KMS client
            account_id: Account id substituted into the key policy
            description: Human-readable key description
            tags: Tags attached to the key

        Returns:
            Result carrying the new key id
        """
        logger.info("Starting creation of a new KMS key")
        try:
            template = load_template(KMS_POLICY_RESOURCE, self.policy_path)
        except OSError as e:
            error = f"Error reading KMS policy file: {describe_error(e)}"
            logger.error(error)
            metrics.kms_keys_created_total.labels(result="failed").inc()
            return Result.error(error, FailureKind.KEY_MANAGEMENT, e)

        policy = render_template(template, ACCOUNT_ID_PLACEHOLDER, account_id)
        logger.debug(f"KMS key policy: {policy}")

        params: dict[str, Any] = {
            "Description": description,
            "KeySpec": "SYMMETRIC_DEFAULT",
            "KeyUsage": "ENCRYPT_DECRYPT",
            "Policy": policy,
        }
        if tags:
            params["Tags"] = [{"TagKey": t.key, "TagValue": t.value} for t in tags]

        try:
            response = kms_client.create_key(**params)
        except (ClientError, BotoCoreError) as e:
            error = f"Unexpected error during KMS key creation: {describe_error(e)}"
            logger.error(error)
            metrics.kms_keys_created_total.labels(result="failed").inc()
            return Result.error(error, FailureKind.KEY_MANAGEMENT, e)

        try:
            key_id = response["KeyMetadata"]["KeyId"]
        except (KeyError, TypeError) as e:
            error = f"Unexpected CreateKey response without a key id: {response!r}"
            logger.error(error)
            metrics.kms_keys_created_total.labels(result="failed").inc()
            return Result.error(error, FailureKind.KEY_MANAGEMENT, e)

        logger.info(f"Successfully created KMS key with ID: {key_id}")
        metrics.kms_keys_created_total.labels(result="success").inc()
        return Result.success(key_id)
