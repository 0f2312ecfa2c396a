"""Handler for provisioning and unprovisioning storage areas."""

from __future__ import annotations

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..models import ProvisionInfo, ProvisionRequest
from ..naming import component_folder
from ..results import FailureKind, Result
from ..services.aws.clients import ClientFactory
from ..services.s3.reconciler import BucketReconciler
from ..tracing import set_span_status, trace_span
from ..utils.errors import describe_error
from .base import BaseHandler


def _info_entry(label: str, value: str) -> dict[str, str]:
    return {"type": "string", "label": label, "value": value}


class StorageAreaProvisionHandler(BaseHandler):
    """Provisions a storage area folder inside its data product bucket."""

    def __init__(self, factory: ClientFactory, reconciler: BucketReconciler):
        super().__init__("provision", factory, reconciler)

    def provision_payload(self, payload: dict[str, Any]) -> Result[ProvisionInfo]:
        """Parse a raw payload, then provision it."""
        request = self.parse_request(payload)
        if not request.ok:
            self.record(request)
            return Result.fail(request.failure)
        return self.provision(request.value)

    def unprovision_payload(self, payload: dict[str, Any]) -> Result[ProvisionInfo]:
        """Parse a raw payload, then unprovision it."""
        request = self.parse_request(payload)
        if not request.ok:
            self.record(request, operation="unprovision")
            return Result.fail(request.failure)
        return self.unprovision(request.value)

    def provision(self, request: ProvisionRequest) -> Result[ProvisionInfo]:
        """Reconcile the data product bucket and create the component folder."""
        with trace_span("provision_storage_area"):
            result = self._provision(request)
            set_span_status(result.ok, None if result.ok else result.failure.message)
        self.record(result)
        return result

    def _provision(self, request: ProvisionRequest) -> Result[ProvisionInfo]:
        component = self.get_storage_component(request)
        if not component.ok:
            return Result.fail(component.failure)

        specific = component.value.specific
        s3_client = self.factory.s3(specific.region)
        kms_client = self.factory.kms(specific.region)
        bucket_name = self.bucket_name(request)

        try:
            account_id = self.factory.account_id()
        except (ClientError, BotoCoreError, KeyError) as e:
            error = f"[Bucket: {bucket_name}] Error: Unable to resolve the account identity. Details: {describe_error(e)}"
            self.log_error(bucket_name, error, reason="AccountLookupFailed")
            return Result.error(error, FailureKind.REMOTE, e)

        reconciled = self.reconciler.reconcile(s3_client, kms_client, bucket_name, specific, account_id)
        if not reconciled.ok:
            return Result.fail(reconciled.failure)

        folder = component_folder(component.value)
        created = self.reconciler.create_folder(s3_client, bucket_name, folder)
        if not created.ok:
            return Result.fail(created.failure)

        location = f"s3://{bucket_name}/{folder}"
        info = {
            "bucket": _info_entry("Bucket name", bucket_name),
            "folder": _info_entry("Folder name", folder),
            "location": _info_entry("Location", location),
        }
        self.log_info(
            bucket_name,
            f"Provisioning of {component.value.name} completed successfully",
            reason="ProvisionSucceeded",
            location=location,
        )
        return Result.success(ProvisionInfo(public_info=info, private_info=info))

    def unprovision(self, request: ProvisionRequest) -> Result[ProvisionInfo]:
        """Delete the component folder and everything under it.

        A missing bucket means there is nothing to remove.
        """
        with trace_span("unprovision_storage_area"):
            result = self._unprovision(request)
            set_span_status(result.ok, None if result.ok else result.failure.message)
        self.record(result, operation="unprovision")
        return result

    def _unprovision(self, request: ProvisionRequest) -> Result[ProvisionInfo]:
        component = self.get_storage_component(request)
        if not component.ok:
            return Result.fail(component.failure)

        s3_client = self.factory.s3(component.value.specific.region)
        bucket_name = self.bucket_name(request)

        exists = self.reconciler.bucket_exists(s3_client, bucket_name)
        if not exists.ok:
            return Result.fail(exists.failure)

        folder = component_folder(component.value)
        if exists.value:
            deleted = self.reconciler.delete_by_prefix(s3_client, bucket_name, folder)
            if not deleted.ok:
                return Result.fail(deleted.failure)
        else:
            self.log_info(bucket_name, f"Bucket '{bucket_name}' does not exist, nothing to delete")

        message = f"Unprovisioning of {component.value.name} completed successfully"
        self.log_info(bucket_name, message, reason="UnprovisionSucceeded", folder=folder)
        info = {"result": _info_entry("Operation result", message)}
        return Result.success(ProvisionInfo(public_info=info, private_info=info))
