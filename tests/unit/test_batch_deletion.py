"""Unit tests for batched prefix deletion."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from storage_area_provisioner.results import FailureKind
from storage_area_provisioner.services.s3.deletion import BatchDeleter, iter_object_keys, partition


def _page(keys: list[str]) -> dict:
    return {"Contents": [{"Key": k} for k in keys], "KeyCount": len(keys)}


def _listing(client: MagicMock, *pages: dict) -> MagicMock:
    paginator = MagicMock()
    paginator.paginate.return_value = list(pages)
    client.get_paginator.return_value = paginator
    return paginator


def _deleted_keys(call) -> list[str]:
    return [obj["Key"] for obj in call.kwargs["Delete"]["Objects"]]


class TestListing:
    """Test paginated listing."""

    def test_reads_every_page(self) -> None:
        client = MagicMock()
        paginator = _listing(client, _page(["p/a", "p/b"]), _page(["p/c"]), _page(["p/d"]))

        keys = list(iter_object_keys(client, "my-bucket", "p/"))

        assert keys == ["p/a", "p/b", "p/c", "p/d"]
        client.get_paginator.assert_called_once_with("list_objects_v2")
        paginator.paginate.assert_called_once_with(Bucket="my-bucket", Prefix="p/")

    def test_empty_listing(self) -> None:
        client = MagicMock()
        _listing(client, {"KeyCount": 0})

        assert list(iter_object_keys(client, "my-bucket", "p/")) == []

    def test_partition(self) -> None:
        chunks = list(partition(list(range(2500)), 1000))
        assert [len(c) for c in chunks] == [1000, 1000, 500]


class TestBatchDeleter:
    """Test deleting objects in batches."""

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(ValueError):
            BatchDeleter(batch_size=1001)

    def test_empty_prefix_deletes_marker_only(self, s3_client: MagicMock) -> None:
        result = BatchDeleter().delete_by_prefix(s3_client, "my-bucket", "folder")

        assert result.ok
        s3_client.get_paginator.return_value.paginate.assert_called_once_with(Bucket="my-bucket", Prefix="folder/")
        s3_client.delete_objects.assert_called_once()
        assert _deleted_keys(s3_client.delete_objects.call_args) == ["folder/"]

    def test_marker_not_duplicated(self, s3_client: MagicMock) -> None:
        _listing(s3_client, _page(["folder/", "folder/a.csv"]))

        BatchDeleter().delete_by_prefix(s3_client, "my-bucket", "folder/")

        assert _deleted_keys(s3_client.delete_objects.call_args) == ["folder/", "folder/a.csv"]

    def test_2500_objects_use_three_batches(self, s3_client: MagicMock) -> None:
        keys = [f"folder/obj-{i}" for i in range(2499)]
        _listing(s3_client, _page(keys[:1000]), _page(keys[1000:2000]), _page(keys[2000:]))

        result = BatchDeleter().delete_by_prefix(s3_client, "my-bucket", "folder")

        assert result.ok
        calls = s3_client.delete_objects.call_args_list
        assert [len(_deleted_keys(c)) for c in calls] == [1000, 1000, 500]
        assert _deleted_keys(calls[2])[-1] == "folder/"

    def test_item_errors_are_aggregated(self, s3_client: MagicMock) -> None:
        keys = [f"folder/obj-{i}" for i in range(2500)]
        s3_client.delete_objects.side_effect = [
            {"Deleted": []},
            {"Errors": [
                {"Key": "folder/obj-1001", "Code": "AccessDenied", "Message": "Access Denied"},
                {"Key": "folder/obj-1002", "Code": "InternalError", "Message": "Try again"},
            ]},
            {"Deleted": []},
        ]

        result = BatchDeleter().delete_keys(s3_client, "my-bucket", keys, "folder/")

        assert s3_client.delete_objects.call_count == 3
        assert not result.ok
        assert result.failure.kind is FailureKind.PARTIAL_BATCH
        assert len(result.failure.problems) == 2
        assert "folder/obj-1001" in result.failure.problems[0].message
        assert "folder/obj-1002" in result.failure.problems[1].message

    def test_listing_failure(self, s3_client: MagicMock, client_error) -> None:
        s3_client.get_paginator.return_value.paginate.side_effect = client_error("AccessDenied", "ListObjectsV2")

        result = BatchDeleter().delete_by_prefix(s3_client, "my-bucket", "folder")

        assert not result.ok
        assert result.failure.kind is FailureKind.REMOTE
        assert "Prefix: folder/" in result.failure.message
        s3_client.delete_objects.assert_not_called()

    def test_batch_call_failure_keeps_earlier_problems(self, s3_client: MagicMock, client_error) -> None:
        keys = [f"k{i}" for i in range(1500)]
        s3_client.delete_objects.side_effect = [
            {"Errors": [{"Key": "k1", "Code": "AccessDenied", "Message": "denied"}]},
            client_error("SlowDown", "DeleteObjects"),
        ]

        result = BatchDeleter().delete_keys(s3_client, "my-bucket", keys)

        assert not result.ok
        assert result.failure.kind is FailureKind.REMOTE
        assert len(result.failure.problems) == 2
        assert "SlowDown" in result.failure.message
