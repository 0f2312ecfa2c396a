"""Base handler class with functionality shared by all operations."""

from __future__ import annotations

import logging
from typing import Any

from .. import metrics
from ..builders.request import create_provision_request_from_spec
from ..builders.specific import RequestValidationError
from ..logging import log_operation_event
from ..models import Component, ComponentKind, ProvisionRequest
from ..naming import component_folder, compute_bucket_name
from ..results import FailedOperation, FailureKind, Problem, Result
from ..services.aws.clients import ClientFactory
from ..services.s3.reconciler import BucketReconciler


class BaseHandler:
    """Base class for storage area operation handlers."""

    def __init__(self, operation: str, factory: ClientFactory, reconciler: BucketReconciler):
        """Initialize base handler.

        Args:
            operation: Operation name used in logs and metrics
            factory: Region-keyed AWS client factory
            reconciler: Bucket reconciler
        """
        self.operation = operation
        self.factory = factory
        self.reconciler = reconciler
        self.logger = logging.getLogger(__name__)

    def log_info(self, bucket: str, message: str, reason: str = "Info", **kwargs: Any) -> None:
        log_operation_event(self.logger, self.operation, bucket, "info", reason, message, **kwargs)

    def log_error(self, bucket: str, message: str, reason: str = "Error", **kwargs: Any) -> None:
        log_operation_event(
            self.logger, self.operation, bucket, "error", reason, message, level=logging.ERROR, **kwargs
        )

    def parse_request(self, payload: dict[str, Any]) -> Result[ProvisionRequest]:
        """Build a ProvisionRequest from a raw payload.

        Every missing or malformed input becomes its own Problem of a single
        PRECONDITION failure.
        """
        try:
            return Result.success(create_provision_request_from_spec(payload))
        except RequestValidationError as e:
            message = "Invalid request: " + "; ".join(e.errors)
            self.log_error("", message, reason="InvalidRequest")
            return Result.fail(FailedOperation(
                message=message,
                problems=tuple(Problem(error) for error in e.errors),
                kind=FailureKind.PRECONDITION,
            ))

    def get_storage_component(self, request: ProvisionRequest) -> Result[Component]:
        """Return the request's component if it is a storage area with a derivable bucket and folder."""
        component = request.component
        if component is None:
            error = f"Invalid operation request: Component is missing. Request: {request}"
            self.log_error("", error, reason="MissingComponent")
            return Result.error(error, FailureKind.PRECONDITION)

        if component.kind is not ComponentKind.STORAGE_AREA or component.specific is None:
            error = f"Invalid component type. {component.name} is not a valid Storage Area"
            self.log_error("", error, reason="InvalidComponentType", kind=component.kind.value)
            return Result.error(error, FailureKind.PRECONDITION)

        try:
            compute_bucket_name(request.data_product)
            component_folder(component)
        except ValueError as e:
            error = f"Invalid operation request: {e}"
            self.log_error("", error, reason="MissingRequiredInput")
            return Result.error(error, FailureKind.PRECONDITION, e)

        return Result.success(component)

    def bucket_name(self, request: ProvisionRequest) -> str:
        return compute_bucket_name(request.data_product)

    def record(self, result: Result[Any], operation: str | None = None) -> None:
        label = "success" if result.ok else result.failure.kind.value
        metrics.operation_total.labels(operation=operation or self.operation, result=label).inc()
