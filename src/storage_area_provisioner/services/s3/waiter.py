"""Bounded polling for eventual-consistency propagation."""

from __future__ import annotations

import logging
import math
import time
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from ... import metrics
from ...constants import NOT_FOUND_CODES
from ...models import ResourceLocator
from ...results import FailureKind, Result
from ...utils.errors import describe_error

logger = logging.getLogger(__name__)


def _is_remote_failure(error: WaiterError) -> bool:
    """Whether a WaiterError was caused by an API error rather than absence."""
    last_response = error.last_response or {}
    code = last_response.get("Error", {}).get("Code")
    return code is not None and code not in NOT_FOUND_CODES


class ExistenceWaiter:
    """Waits until a bucket or object is visible, up to a timeout.

    Timing out and observing absence are the same outcome
    (``PROPAGATION_TIMEOUT``); API or transport errors while polling are
    reported as ``REMOTE``.
    """

    def __init__(self, delay_seconds: int = 5) -> None:
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be greater than 0")
        self.delay_seconds = delay_seconds

    def max_attempts(self, timeout_seconds: int) -> int:
        """Number of probes that fit in ``timeout_seconds``."""
        return max(1, math.ceil(timeout_seconds / self.delay_seconds))

    def wait_for(self, s3_client: Any, locator: ResourceLocator, timeout_seconds: int) -> Result[None]:
        """Block until ``locator`` exists or ``timeout_seconds`` elapse.

        Args:
            s3_client: boto3 S3 client
            locator: Bucket or object to wait for
            timeout_seconds: Upper bound of the wait

        Returns:
            Success, or a failure of kind PROPAGATION_TIMEOUT or REMOTE
        """
        target = "object" if locator.is_object else "bucket"
        params: dict[str, Any] = {"Bucket": locator.bucket}
        if locator.is_object:
            params["Key"] = locator.key

        logger.debug(f"Waiting for {target} {locator.describe()} to exist (timeout {timeout_seconds}s)")
        start_time = time.monotonic()
        try:
            waiter = s3_client.get_waiter(f"{target}_exists")
            waiter.wait(
                **params,
                WaiterConfig={"Delay": self.delay_seconds, "MaxAttempts": self.max_attempts(timeout_seconds)},
            )
        except WaiterError as e:
            self._observe(target, "failed", start_time)
            if _is_remote_failure(e):
                error = f"{locator.describe()} An error occurred while waiting for the {target} to exist: {describe_error(e)}"
                logger.error(error)
                return Result.error(error, FailureKind.REMOTE, e)
            error = (
                f"{locator.describe()} The {target} does not exist or could not be confirmed "
                f"within {timeout_seconds} seconds."
            )
            logger.error(error)
            return Result.error(error, FailureKind.PROPAGATION_TIMEOUT, e)
        except (ClientError, BotoCoreError) as e:
            self._observe(target, "failed", start_time)
            error = f"{locator.describe()} An error occurred while waiting for the {target} to exist: {describe_error(e)}"
            logger.error(error)
            return Result.error(error, FailureKind.REMOTE, e)

        self._observe(target, "success", start_time)
        logger.info(f"{locator.describe()} The {target} is confirmed to exist.")
        return Result.success()

    @staticmethod
    def _observe(target: str, result: str, start_time: float) -> None:
        metrics.wait_duration_seconds.labels(target=target, result=result).observe(time.monotonic() - start_time)
