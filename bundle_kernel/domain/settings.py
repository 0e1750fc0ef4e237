"""
KernelSettings -- runtime knobs consumed by the generators.

The kernel never reads configuration files or environment variables;
``bundle_config.bridges.to_kernel_settings`` builds this object from the
active configuration. Defaults are for tests and embedding.
"""

from dataclasses import dataclass

DEFAULT_RESOURCE_TABLE = "resource-db"

# Items allowed in one store transaction.
DEFAULT_MAX_BUNDLE_ENTRIES = 25


@dataclass(frozen=True)
class KernelSettings:
    resource_table: str = DEFAULT_RESOURCE_TABLE
    max_bundle_entries: int = DEFAULT_MAX_BUNDLE_ENTRIES
    reject_unrecognized_operations: bool = True

    def __post_init__(self) -> None:
        if not self.resource_table:
            raise ValueError("resource_table must be non-empty")
        if self.max_bundle_entries < 1:
            raise ValueError(
                f"max_bundle_entries must be >= 1, got {self.max_bundle_entries}"
            )
