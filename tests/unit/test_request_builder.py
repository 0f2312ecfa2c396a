"""Unit tests for the provision request builder."""

from __future__ import annotations

import pytest

from storage_area_provisioner.builders.request import create_provision_request_from_spec
from storage_area_provisioner.builders.specific import RequestValidationError
from storage_area_provisioner.models import ComponentKind


def _payload(kind: str = "storage", specific: dict | None = None) -> dict:
    return {
        "dataProduct": {"domain": "finance", "name": "reporting", "environment": "prod", "version": "1.2.0"},
        "component": {
            "id": "urn:dmb:cmp:finance:reporting:1:raw-storage-area",
            "name": "Raw Storage Area",
            "kind": kind,
            "specific": specific if specific is not None else {"region": "eu-west-1"},
        },
    }


def test_storage_component_parsed() -> None:
    request = create_provision_request_from_spec(_payload())

    assert request.data_product.domain == "finance"
    assert request.data_product.version == "1.2.0"
    assert request.component.kind is ComponentKind.STORAGE_AREA
    assert request.component.specific.region == "eu-west-1"


def test_other_kind_has_no_specific() -> None:
    request = create_provision_request_from_spec(_payload(kind="workload", specific={"anything": 1}))

    assert request.component.kind is ComponentKind.WORKLOAD
    assert request.component.specific is None


def test_unknown_kind() -> None:
    request = create_provision_request_from_spec(_payload(kind="mystery"))
    assert request.component.kind is ComponentKind.UNKNOWN


def test_missing_component() -> None:
    payload = _payload()
    del payload["component"]
    assert create_provision_request_from_spec(payload).component is None


def test_invalid_specific_raises() -> None:
    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(_payload(specific={"region": ""}))
    assert exc_info.value.errors == ["region must not be blank"]


@pytest.mark.parametrize("data_product", [None, {}, "finance"])
def test_missing_data_product_rejected(data_product) -> None:
    payload = _payload()
    payload["dataProduct"] = data_product

    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(payload)

    assert all(error.startswith("dataProduct") for error in exc_info.value.errors)


def test_blank_naming_fields_reported_together() -> None:
    payload = _payload()
    payload["dataProduct"] = {"domain": " ", "name": "reporting", "environment": None}

    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(payload)

    assert exc_info.value.errors == [
        "dataProduct.domain must not be blank",
        "dataProduct.environment must not be blank",
    ]


def test_data_product_and_specific_errors_combined() -> None:
    payload = _payload(specific={"region": ""})
    payload["dataProduct"] = {}

    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(payload)

    assert "region must not be blank" in exc_info.value.errors
    assert "dataProduct.domain must not be blank" in exc_info.value.errors


def test_storage_component_without_folder_name_rejected() -> None:
    payload = _payload()
    payload["component"]["id"] = ""
    payload["component"]["name"] = "  "

    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(payload)

    assert exc_info.value.errors == ["component.id or component.name must not be blank"]


@pytest.mark.parametrize("payload", [None, [], "request"])
def test_non_mapping_payload_rejected(payload) -> None:
    with pytest.raises(RequestValidationError):
        create_provision_request_from_spec(payload)


def test_non_mapping_component_rejected() -> None:
    payload = _payload()
    payload["component"] = ["storage"]

    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(payload)

    assert exc_info.value.errors == ["component must be an object"]


def test_non_mapping_specific_rejected() -> None:
    payload = _payload()
    payload["component"]["specific"] = "eu-west-1"

    with pytest.raises(RequestValidationError) as exc_info:
        create_provision_request_from_spec(payload)

    assert exc_info.value.errors == ["specific must be an object"]
