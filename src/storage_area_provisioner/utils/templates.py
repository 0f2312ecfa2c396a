"""Loading of JSON policy templates."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)


def load_template(resource_name: str, override_path: str | None = None) -> str:
    """Load a policy template.

    Args:
        resource_name: File name of the bundled default under ``resources/``
        override_path: Optional operator-provided path, takes precedence

    Returns:
        Template text

    Raises:
        OSError: If the template cannot be read
    """
    if override_path:
        logger.info(f"Using custom policy template: {override_path}")
        return Path(override_path).read_text(encoding="utf-8")

    logger.info(f"Using default policy template: {resource_name}")
    return resources.files("storage_area_provisioner.resources").joinpath(resource_name).read_text(encoding="utf-8")


def render_template(template: str, placeholder: str, value: str) -> str:
    """Replace every occurrence of ``placeholder`` with ``value``."""
    return template.replace(placeholder, value)
