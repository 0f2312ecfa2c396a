"""Utility helpers for the Storage Area Provisioner."""
