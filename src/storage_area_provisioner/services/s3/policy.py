"""Access policy applied to every storage area bucket."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import BUCKET_NAME_PLACEHOLDER, BUCKET_POLICY_RESOURCE
from ...results import FailureKind, Result
from ...utils.errors import format_bucket_error
from ...utils.templates import load_template, render_template

logger = logging.getLogger(__name__)


class PolicyApplier:
    """Renders the bucket policy template and applies it.

    The bundled template denies any request not sent over TLS.
    """

    def __init__(self, policy_path: str | None = None) -> None:
        self.policy_path = policy_path

    def render(self, bucket_name: str) -> str:
        """Render the policy document for ``bucket_name``.

        Raises:
            OSError: If the template cannot be read
        """
        template = load_template(BUCKET_POLICY_RESOURCE, self.policy_path)
        return render_template(template, BUCKET_NAME_PLACEHOLDER, bucket_name)

    def apply(self, s3_client: Any, bucket_name: str) -> Result[None]:
        """Apply the rendered policy to the bucket."""
        logger.info(f"Applying access policy for bucket '{bucket_name}'")
        try:
            policy = self.render(bucket_name)
            logger.debug(f"Bucket policy for '{bucket_name}': {policy}")
            s3_client.put_bucket_policy(Bucket=bucket_name, Policy=policy)
        except (OSError, ClientError, BotoCoreError) as e:
            error = format_bucket_error(bucket_name, "applying the access policy", e)
            logger.error(error)
            metrics.bucket_operations_total.labels(operation="put_policy", result="failed").inc()
            return Result.error(error, FailureKind.POLICY, e)

        metrics.bucket_operations_total.labels(operation="put_policy", result="success").inc()
        logger.info(f"Access policy applied for bucket '{bucket_name}'")
        return Result.success()
