"""
BundleSettings schema.

The human-authored configuration for the bundle kernel. YAML files are
parsed into this type by the loader; ``bridges.to_kernel_settings``
translates it into the kernel's own KernelSettings.
"""

from __future__ import annotations

from dataclasses import dataclass

VALID_LOG_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


@dataclass(frozen=True)
class BundleSettings:
    """Settings for one deployment of the bundle kernel."""

    resource_table: str = "resource-db"
    max_bundle_entries: int = 25  # store transaction item limit
    reject_unrecognized_operations: bool = True
    log_level: str = "INFO"
