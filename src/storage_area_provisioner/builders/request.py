"""Builder for provisioning requests."""

from __future__ import annotations

import logging
from typing import Any

from ..models import Component, ComponentKind, DataProduct, ProvisionRequest
from ..naming import component_folder
from ..utils.errors import sanitize_dict
from .specific import RequestValidationError, SpecificValidationError, create_storage_specific_from_spec

logger = logging.getLogger(__name__)

# Data product fields the bucket name is derived from
REQUIRED_DATA_PRODUCT_FIELDS = ("domain", "name", "environment")


def _parse_kind(value: Any) -> ComponentKind:
    try:
        return ComponentKind(str(value or "").strip().lower())
    except ValueError:
        return ComponentKind.UNKNOWN


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def create_data_product_from_spec(spec: Any) -> DataProduct:
    """Create a DataProduct, requiring every field used for bucket naming.

    Raises:
        RequestValidationError: If the mapping is missing or a naming field is blank
    """
    if not isinstance(spec, dict):
        raise RequestValidationError(["dataProduct must be an object"])

    errors = [
        f"dataProduct.{field_name} must not be blank"
        for field_name in REQUIRED_DATA_PRODUCT_FIELDS
        if not _text(spec.get(field_name))
    ]
    if errors:
        raise RequestValidationError(errors)

    return DataProduct(
        domain=_text(spec["domain"]),
        name=_text(spec["name"]),
        environment=_text(spec["environment"]),
        version=_text(spec.get("version")) or "0.0.0",
    )


def create_component_from_spec(spec: Any) -> Component:
    """Create a Component, parsing the specific only for storage areas.

    Raises:
        RequestValidationError: If the component is not a mapping or a
            storage area has no usable folder name
        SpecificValidationError: If a storage area specific is invalid
    """
    if not isinstance(spec, dict):
        raise RequestValidationError(["component must be an object"])

    kind = _parse_kind(spec.get("kind"))
    component = Component(id=_text(spec.get("id")), name=_text(spec.get("name")), kind=kind)
    if kind is not ComponentKind.STORAGE_AREA:
        return component

    errors: list[str] = []
    try:
        component_folder(component)
    except ValueError:
        errors.append("component.id or component.name must not be blank")

    specific = None
    try:
        specific = create_storage_specific_from_spec(spec.get("specific") or {})
    except SpecificValidationError as e:
        errors.extend(e.errors)

    if errors:
        raise RequestValidationError(errors)

    return Component(id=component.id, name=component.name, kind=kind, specific=specific)


def create_provision_request_from_spec(payload: Any) -> ProvisionRequest:
    """Create a ProvisionRequest from a request payload.

    Args:
        payload: Mapping with ``dataProduct`` and ``component`` entries

    Returns:
        ProvisionRequest; ``component`` is None when the payload has none

    Raises:
        RequestValidationError: If required input is missing or malformed.
            Problems in the data product and the component are reported
            together.
    """
    if not isinstance(payload, dict):
        raise RequestValidationError(["request payload must be an object"])

    logger.debug(f"Building provision request from payload: {sanitize_dict(payload)}")

    errors: list[str] = []
    data_product = None
    try:
        data_product = create_data_product_from_spec(payload.get("dataProduct"))
    except RequestValidationError as e:
        errors.extend(e.errors)

    component = None
    component_spec = payload.get("component")
    if component_spec is not None:
        try:
            component = create_component_from_spec(component_spec)
        except RequestValidationError as e:
            errors.extend(e.errors)

    if errors:
        raise RequestValidationError(errors)

    return ProvisionRequest(data_product=data_product, component=component)
