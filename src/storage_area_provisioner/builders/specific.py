"""Builder for storage area specific configurations."""

from __future__ import annotations

from typing import Any

from ..constants import (
    ARCHIVE_ACCESS_MIN_DAYS,
    DEEP_ARCHIVE_ACCESS_MIN_DAYS,
    MAX_VERSIONS_TO_RETAIN,
    MIN_DAYS_AFTER_NONCURRENT,
    MIN_VERSIONS_TO_RETAIN,
    TIERING_MAX_DAYS,
)
from ..models import (
    BucketTag,
    EncryptionMode,
    IntelligentTieringPolicy,
    LifecyclePolicy,
    StorageSpecific,
)


class RequestValidationError(ValueError):
    """Raised when a request payload violates one or more constraints."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class SpecificValidationError(RequestValidationError):
    """Raised when a storage area specific violates one or more constraints."""


def _mapping(value: Any, field_name: str, errors: list[str]) -> dict[str, Any] | None:
    """Return ``value`` if it is a mapping, None if absent, recording an error otherwise."""
    if value is None:
        return None
    if not isinstance(value, dict):
        errors.append(f"{field_name} must be an object")
        return None
    return value


def _as_int(value: Any, field_name: str, errors: list[str]) -> int:
    if isinstance(value, bool):
        errors.append(f"{field_name} must be an integer")
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.append(f"{field_name} must be an integer")
        return 0


def _parse_encryption(value: Any, errors: list[str]) -> EncryptionMode:
    if value is None:
        return EncryptionMode.AES256
    normalized = str(value).strip()
    for mode in EncryptionMode:
        if normalized == mode.value or normalized.upper() == mode.name:
            return mode
    errors.append(
        f"serverSideEncryption must be one of {', '.join(m.value for m in EncryptionMode)}, got {value!r}"
    )
    return EncryptionMode.AES256


def _parse_lifecycle(spec: dict[str, Any], errors: list[str]) -> LifecyclePolicy | None:
    lifecycle = _mapping(spec.get("lifeCycleConfiguration"), "lifeCycleConfiguration", errors) or {}
    permanently_delete = _mapping(
        lifecycle.get("permanentlyDelete"), "lifeCycleConfiguration.permanentlyDelete", errors
    )
    if not permanently_delete:
        return None

    days = _as_int(permanently_delete.get("daysAfterBecomeNonCurrent"), "daysAfterBecomeNonCurrent", errors)
    versions = _as_int(permanently_delete.get("numberOfVersionsToRetain"), "numberOfVersionsToRetain", errors)

    if days < MIN_DAYS_AFTER_NONCURRENT:
        errors.append("daysAfterBecomeNonCurrent must be greater than 0")
    if versions < MIN_VERSIONS_TO_RETAIN:
        errors.append(f"numberOfVersionsToRetain must be at least {MIN_VERSIONS_TO_RETAIN}")
    if versions > MAX_VERSIONS_TO_RETAIN:
        errors.append(f"numberOfVersionsToRetain cannot be greater than {MAX_VERSIONS_TO_RETAIN}")

    return LifecyclePolicy(days_after_noncurrent=days, versions_to_retain=versions)


def _parse_tiering(spec: dict[str, Any], errors: list[str]) -> IntelligentTieringPolicy | None:
    tiering = _mapping(spec.get("intelligentTieringConfiguration"), "intelligentTieringConfiguration", errors)
    if not tiering:
        return None

    archive_enabled = bool(tiering.get("archiveAccessTierEnabled", False))
    deep_enabled = bool(tiering.get("deepArchiveAccessTierEnabled", False))
    archive_days = _as_int(tiering.get("archiveAccessTierDays", 0), "archiveAccessTierDays", errors)
    deep_days = _as_int(tiering.get("deepArchiveAccessTierDays", 0), "deepArchiveAccessTierDays", errors)

    if archive_enabled and not ARCHIVE_ACCESS_MIN_DAYS <= archive_days <= TIERING_MAX_DAYS:
        errors.append(
            f"archiveAccessTierDays must be at least {ARCHIVE_ACCESS_MIN_DAYS} and cannot be greater "
            f"than {TIERING_MAX_DAYS} if archiveAccessTierEnabled is true"
        )
    if deep_enabled and not DEEP_ARCHIVE_ACCESS_MIN_DAYS <= deep_days <= TIERING_MAX_DAYS:
        errors.append(
            f"deepArchiveAccessTierDays must be at least {DEEP_ARCHIVE_ACCESS_MIN_DAYS} and cannot be greater "
            f"than {TIERING_MAX_DAYS} if deepArchiveAccessTierEnabled is true"
        )

    return IntelligentTieringPolicy(
        archive_access_enabled=archive_enabled,
        archive_access_days=archive_days,
        deep_archive_access_enabled=deep_enabled,
        deep_archive_access_days=deep_days,
    )


def _parse_tags(spec: dict[str, Any], errors: list[str]) -> tuple[BucketTag, ...]:
    raw_tags = spec.get("bucketTags") or []
    if not isinstance(raw_tags, list):
        errors.append("bucketTags must be a list")
        return ()

    tags = []
    for index, tag in enumerate(raw_tags):
        if not isinstance(tag, dict):
            errors.append(f"bucketTags[{index}] must be an object with key and value")
            continue
        key = str(tag.get("key") or "").strip()
        value = str(tag.get("value") or "").strip()
        if not key:
            errors.append(f"bucketTags[{index}].key must not be blank")
        if not value:
            errors.append(f"bucketTags[{index}].value must not be blank")
        tags.append(BucketTag(key=key, value=value))
    return tuple(tags)


def create_storage_specific_from_spec(spec: dict[str, Any]) -> StorageSpecific:
    """Create a StorageSpecific from a component's specific payload.

    Args:
        spec: Raw ``specific`` mapping of a storage area component

    Returns:
        Validated StorageSpecific

    Raises:
        SpecificValidationError: If any constraint is violated. Every
            violation is reported, not only the first one.
    """
    if not isinstance(spec, dict):
        raise SpecificValidationError(["specific must be an object"])

    errors: list[str] = []

    region = str(spec.get("region") or "").strip()
    if not region:
        errors.append("region must not be blank")

    encryption = _parse_encryption(spec.get("serverSideEncryption"), errors)
    lifecycle = _parse_lifecycle(spec, errors)
    tiering = _parse_tiering(spec, errors)
    tags = _parse_tags(spec, errors)

    if errors:
        raise SpecificValidationError(errors)

    return StorageSpecific(
        region=region,
        server_side_encryption=encryption,
        multiple_version=bool(spec.get("multipleVersion", False)),
        lifecycle=lifecycle,
        intelligent_tiering=tiering,
        tags=tags,
    )
