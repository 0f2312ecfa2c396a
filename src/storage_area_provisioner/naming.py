"""Deterministic bucket and folder naming.

Bucket names are a persisted contract: a component must map to the same
bucket on every run. The name is the lower-cased, whitespace-free join of the
naming parts, cut to 58 characters, followed by the first 5 hex characters of
the SHA-256 digest of the full (uncut) join. Changing any of these rules
reassigns existing components to new buckets.
"""

from __future__ import annotations

import hashlib
import re
from typing import Iterable

from .constants import (
    BUCKET_NAME_HASH_LENGTH,
    BUCKET_NAME_PREFIX_MAX_LENGTH,
    BUCKET_NAME_SEPARATOR,
    FOLDER_SEPARATOR,
)
from .models import Component, DataProduct

_WHITESPACE = re.compile(r"\s+")


def sha256_hex(value: str) -> str:
    """Return the hex SHA-256 digest of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def derive_bucket_name(parts: Iterable[str]) -> str:
    """Derive a bucket name from ordered naming parts.

    Args:
        parts: Ordered logical naming parts, e.g. domain, product, environment

    Returns:
        Bucket name of at most 63 characters

    Raises:
        ValueError: If no parts are given or a part is blank
    """
    parts = list(parts)
    if not parts:
        raise ValueError("at least one naming part is required")
    if any(not _WHITESPACE.sub("", part) for part in parts):
        raise ValueError(f"naming parts must not be blank: {parts!r}")

    joined = BUCKET_NAME_SEPARATOR.join(parts)
    joined = _WHITESPACE.sub("", joined).lower()

    suffix = sha256_hex(joined)[:BUCKET_NAME_HASH_LENGTH]
    return joined[:BUCKET_NAME_PREFIX_MAX_LENGTH] + suffix


def compute_bucket_name(data_product: DataProduct) -> str:
    """Compute the bucket shared by every storage area of a data product."""
    return derive_bucket_name([data_product.domain, data_product.name, data_product.environment])


def component_folder(component: Component) -> str:
    """Return the folder path (with trailing separator) owned by a component.

    The component name is the last segment of its colon-separated id, e.g.
    ``urn:dmb:cmp:finance:reporting:0:raw-storage-area`` → ``raw-storage-area/``.

    Raises:
        ValueError: If neither the id nor the name yields a folder name
    """
    short_name = _WHITESPACE.sub("", component.id.rsplit(":", 1)[-1]) or _WHITESPACE.sub("", component.name)
    short_name = short_name.strip(FOLDER_SEPARATOR).lower()
    if not short_name:
        raise ValueError(f"component {component.id!r} has no usable folder name")
    return ensure_trailing_separator(short_name)


def ensure_trailing_separator(path: str) -> str:
    """Return ``path`` ending with exactly one folder separator appended if missing."""
    return path if path.endswith(FOLDER_SEPARATOR) else path + FOLDER_SEPARATOR
