"""Handler for validating storage area requests."""

from __future__ import annotations

from typing import Any

from ..constants import EVENT_REASON_VALIDATE_FAILED, EVENT_REASON_VALIDATE_SUCCEEDED
from ..models import ProvisionRequest
from ..results import Result
from ..services.aws.clients import ClientFactory
from ..services.s3.reconciler import BucketReconciler
from ..tracing import set_span_status, trace_span
from .base import BaseHandler


class StorageAreaValidationHandler(BaseHandler):
    """Validates that a storage area request can be provisioned."""

    def __init__(self, factory: ClientFactory, reconciler: BucketReconciler):
        super().__init__("validate", factory, reconciler)

    def validate_payload(self, payload: dict[str, Any]) -> Result[None]:
        """Parse a raw payload, then validate it."""
        request = self.parse_request(payload)
        if not request.ok:
            self.record(request)
            return Result.fail(request.failure)
        return self.validate(request.value)

    def validate(self, request: ProvisionRequest) -> Result[None]:
        """Check the component kind and that an existing bucket is in the desired region."""
        with trace_span("validate_storage_area"):
            result = self._validate(request)
            set_span_status(result.ok, None if result.ok else result.failure.message)
        self.record(result)
        return result

    def _validate(self, request: ProvisionRequest) -> Result[None]:
        component = self.get_storage_component(request)
        if not component.ok:
            return Result.fail(component.failure)

        region = component.value.specific.region
        s3_client = self.factory.s3(region)
        bucket_name = self.bucket_name(request)

        exists = self.reconciler.bucket_exists(s3_client, bucket_name)
        if not exists.ok:
            return Result.fail(exists.failure)

        if exists.value:
            conflict = self.reconciler.check_region(s3_client, bucket_name, region)
            if not conflict.ok:
                self.log_error(bucket_name, conflict.failure.message, reason=EVENT_REASON_VALIDATE_FAILED)
                return conflict

        self.log_info(bucket_name, f"Validation of {component.value.name} succeeded", reason=EVENT_REASON_VALIDATE_SUCCEEDED)
        return Result.success()
