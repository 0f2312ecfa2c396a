"""Unit tests for bucket versioning and lifecycle management."""

from __future__ import annotations

from unittest.mock import MagicMock

from storage_area_provisioner.models import LifecyclePolicy
from storage_area_provisioner.results import FailureKind
from storage_area_provisioner.services.s3.versioning import (
    apply_lifecycle_configuration,
    build_lifecycle_rule,
    enable_bucket_versioning,
)


class TestBucketVersioning:
    """Test enabling versioning with and without noncurrent expiration."""

    def test_versioning_without_lifecycle(self) -> None:
        client = MagicMock()

        result = enable_bucket_versioning(client, "my-bucket")

        assert result.ok
        client.put_bucket_versioning.assert_called_once_with(
            Bucket="my-bucket",
            VersioningConfiguration={"Status": "Enabled"},
        )
        client.put_bucket_lifecycle_configuration.assert_not_called()

    def test_versioning_with_lifecycle(self) -> None:
        client = MagicMock()

        result = enable_bucket_versioning(client, "my-bucket", LifecyclePolicy(30, 5))

        assert result.ok
        client.put_bucket_lifecycle_configuration.assert_called_once()
        kwargs = client.put_bucket_lifecycle_configuration.call_args.kwargs
        assert kwargs["Bucket"] == "my-bucket"
        assert kwargs["TransitionDefaultMinimumObjectSize"] == "all_storage_classes_128K"
        rules = kwargs["LifecycleConfiguration"]["Rules"]
        assert len(rules) == 1
        assert rules[0]["NoncurrentVersionExpiration"] == {"NoncurrentDays": 30, "NewerNoncurrentVersions": 5}

    def test_lifecycle_rule_is_bucket_wide(self) -> None:
        rule = build_lifecycle_rule(LifecyclePolicy(1, 1))

        assert rule["Status"] == "Enabled"
        assert rule["Filter"] == {}
        assert rule["NoncurrentVersionExpiration"] == {"NoncurrentDays": 1, "NewerNoncurrentVersions": 1}

    def test_versioning_failure_skips_lifecycle(self, client_error) -> None:
        client = MagicMock()
        client.put_bucket_versioning.side_effect = client_error("AccessDenied", "PutBucketVersioning")

        result = enable_bucket_versioning(client, "my-bucket", LifecyclePolicy(30, 5))

        assert not result.ok
        assert "enabling versioning" in result.failure.message
        client.put_bucket_lifecycle_configuration.assert_not_called()

    def test_lifecycle_failure(self, client_error) -> None:
        client = MagicMock()
        client.put_bucket_lifecycle_configuration.side_effect = client_error(
            "InvalidRequest", "PutBucketLifecycleConfiguration"
        )

        result = apply_lifecycle_configuration(client, "my-bucket", LifecyclePolicy(30, 5))

        assert not result.ok
        assert result.failure.kind is FailureKind.REMOTE
        assert "lifecycle configuration" in result.failure.message
