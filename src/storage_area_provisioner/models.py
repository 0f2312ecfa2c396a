"""Models describing the desired state of a storage area."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .constants import KIND_STORAGE_AREA, SSE_AES256, SSE_AWS_KMS


class EncryptionMode(str, Enum):
    """Server-side encryption applied to the bucket."""

    AES256 = SSE_AES256
    AWS_KMS = SSE_AWS_KMS


class ComponentKind(str, Enum):
    """Kinds of data product components the provisioner is asked about."""

    STORAGE_AREA = KIND_STORAGE_AREA
    OUTPUT_PORT = "outputport"
    WORKLOAD = "workload"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BucketTag:
    """A single bucket tag."""

    key: str
    value: str


@dataclass(frozen=True)
class LifecyclePolicy:
    """Expiration of noncurrent object versions."""

    days_after_noncurrent: int
    versions_to_retain: int


@dataclass(frozen=True)
class IntelligentTieringPolicy:
    """Archive tiers of the S3 Intelligent-Tiering storage class."""

    archive_access_enabled: bool = False
    archive_access_days: int = 0
    deep_archive_access_enabled: bool = False
    deep_archive_access_days: int = 0

    @property
    def has_enabled_tier(self) -> bool:
        return self.archive_access_enabled or self.deep_archive_access_enabled


@dataclass(frozen=True)
class StorageSpecific:
    """Desired state of the bucket backing a storage area."""

    region: str
    server_side_encryption: EncryptionMode = EncryptionMode.AES256
    multiple_version: bool = False
    lifecycle: LifecyclePolicy | None = None
    intelligent_tiering: IntelligentTieringPolicy | None = None
    tags: tuple[BucketTag, ...] = ()


@dataclass(frozen=True)
class DataProduct:
    """The data product a component belongs to."""

    domain: str
    name: str
    environment: str
    version: str = "0.0.0"


@dataclass(frozen=True)
class Component:
    """A data product component.

    ``specific`` is only set for storage areas; the request builder parses
    it once so downstream code never inspects raw payloads.
    """

    id: str
    name: str
    kind: ComponentKind
    specific: StorageSpecific | None = None


@dataclass(frozen=True)
class ProvisionRequest:
    """A provisioning request for one component of a data product."""

    data_product: DataProduct
    component: Component | None


@dataclass(frozen=True)
class ResourceLocator:
    """Locates a bucket, or an object inside it when ``key`` is set."""

    bucket: str
    key: str | None = None

    @property
    def is_object(self) -> bool:
        return self.key is not None

    def describe(self) -> str:
        if self.key is None:
            return f"[Bucket: {self.bucket}]"
        return f"[Bucket: {self.bucket}, Object: {self.key}]"


@dataclass(frozen=True)
class ProvisionInfo:
    """Information returned to the caller after an operation."""

    public_info: dict[str, dict[str, str]] = field(default_factory=dict)
    private_info: dict[str, dict[str, str]] = field(default_factory=dict)
