"""Caller-facing provision, unprovision and validate operations."""

from .provision import StorageAreaProvisionHandler
from .validation import StorageAreaValidationHandler

__all__ = ["StorageAreaProvisionHandler", "StorageAreaValidationHandler"]
