"""
Bridges from configuration to kernel inputs.

The kernel never imports ``bundle_config``; these functions translate the
parsed settings into kernel types and apply the logging level.
"""

from __future__ import annotations

import logging

from bundle_config.schema import BundleSettings
from bundle_kernel.domain.settings import KernelSettings
from bundle_kernel.logging_config import configure_logging


def to_kernel_settings(settings: BundleSettings) -> KernelSettings:
    """KernelSettings for the generators."""
    return KernelSettings(
        resource_table=settings.resource_table,
        max_bundle_entries=settings.max_bundle_entries,
        reject_unrecognized_operations=settings.reject_unrecognized_operations,
    )


def configure_kernel_logging(settings: BundleSettings, handler: logging.Handler | None = None) -> None:
    """Configure the bundle_kernel logger hierarchy at the configured level."""
    configure_logging(level=logging.getLevelName(settings.log_level), handler=handler)
