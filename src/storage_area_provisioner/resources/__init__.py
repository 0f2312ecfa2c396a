"""Bundled policy templates."""
