"""
bundle_config -- single public entrypoint for bundle kernel configuration.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``. No other component reads configuration files
    or environment variables. The kernel never imports this package;
    ``bridges`` translates settings into kernel inputs.

Resolution order:
    1. ``config_path`` argument
    2. file named by the ``BUNDLE_CONFIG`` environment variable
    3. the packaged ``sets/default.yaml``

    The ``RESOURCE_TABLE`` environment variable, when set, overrides
    ``resource_table`` from whichever file was loaded.

Failure modes:
    - ``FileNotFoundError`` -- the resolved settings file does not exist.
    - ``ValueError`` -- schema validation failures.
    - ``yaml.YAMLError`` -- malformed YAML.

Audit relevance:
    Every successful ``get_active_settings()`` call emits a
    ``BUNDLE_CONFIG_TRACE`` log entry with the source path and checksum.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from bundle_config.bridges import configure_kernel_logging, to_kernel_settings
from bundle_config.loader import compute_checksum, load_settings, parse_settings
from bundle_config.schema import BundleSettings

_logger = logging.getLogger("bundle_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "BUNDLE_CONFIG"
RESOURCE_TABLE_ENV = "RESOURCE_TABLE"


def get_active_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> BundleSettings:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Explicit settings file; wins over the environment.
        environ: Environment mapping, ``os.environ`` when omitted.
    """
    env = os.environ if environ is None else environ

    if config_path is not None:
        path = Path(config_path)
    elif env.get(CONFIG_PATH_ENV):
        path = Path(env[CONFIG_PATH_ENV])
    else:
        path = _DEFAULT_CONFIG_PATH

    settings = load_settings(path)

    table_override = env.get(RESOURCE_TABLE_ENV, "").strip()
    if table_override:
        settings = replace(settings, resource_table=table_override)

    _logger.info(
        "BUNDLE_CONFIG_TRACE",
        extra={
            "trace_type": "BUNDLE_CONFIG_TRACE",
            "config_source": str(path),
            "checksum": compute_checksum(settings),
            "resource_table": settings.resource_table,
            "max_bundle_entries": settings.max_bundle_entries,
            "reject_unrecognized_operations": settings.reject_unrecognized_operations,
        },
    )
    return settings


__all__ = [
    "BundleSettings",
    "compute_checksum",
    "configure_kernel_logging",
    "get_active_settings",
    "load_settings",
    "parse_settings",
    "to_kernel_settings",
]
