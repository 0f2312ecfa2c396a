"""Builders turning raw request payloads into typed models."""
