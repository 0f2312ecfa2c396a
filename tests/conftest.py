"""Shared fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from storage_area_provisioner.models import BucketTag, EncryptionMode, LifecyclePolicy, StorageSpecific


def make_client_error(code: str, operation: str = "Operation", message: str = "") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": message or code}}, operation)


@pytest.fixture
def s3_client() -> MagicMock:
    """S3 client whose bucket already exists in eu-west-1."""
    client = MagicMock()
    client.head_bucket.return_value = {}
    client.get_bucket_location.return_value = {"LocationConstraint": "eu-west-1"}
    client.get_paginator.return_value.paginate.return_value = [{"KeyCount": 0}]
    client.delete_objects.return_value = {"Deleted": []}
    return client


@pytest.fixture
def kms_client() -> MagicMock:
    client = MagicMock()
    client.create_key.return_value = {"KeyMetadata": {"KeyId": "key-1234"}}
    return client


@pytest.fixture
def specific() -> StorageSpecific:
    return StorageSpecific(
        region="eu-west-1",
        server_side_encryption=EncryptionMode.AES256,
        multiple_version=True,
        lifecycle=LifecyclePolicy(days_after_noncurrent=30, versions_to_retain=3),
        tags=(BucketTag("team", "finance"),),
    )


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors."""
    return make_client_error
