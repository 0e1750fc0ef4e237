"""
Configuration Loader (``bundle_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into a frozen
``bundle_config.schema.BundleSettings``. Runtime callers go through
``bundle_config.get_active_settings()`` instead of calling this directly.

Invariants enforced
-------------------
* Unknown keys are rejected; a typo must not silently fall back to a default.
* Every value is type- and range-checked; bad values raise ``ValueError``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong types, out-of-range values, unknown keys  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import yaml

from bundle_config.schema import VALID_LOG_LEVELS, BundleSettings


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def _require_str(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} must be a non-empty string, got {value!r}")
    return value.strip()


def _require_bool(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _require_positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{key} must be a positive integer, got {value!r}")
    return value


def parse_settings(data: dict[str, Any]) -> BundleSettings:
    """
    Parse ``BundleSettings`` from a dict.

    Missing keys take the schema defaults. The whole file may also be nested
    under a top-level ``bundle`` key.
    """
    if "bundle" in data and isinstance(data["bundle"], dict):
        data = data["bundle"]

    known = {f.name for f in fields(BundleSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings key(s): {', '.join(unknown)}")

    defaults = BundleSettings()
    log_level = _require_str(data, "log_level", defaults.log_level).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ValueError(
            f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {log_level!r}"
        )

    return BundleSettings(
        resource_table=_require_str(data, "resource_table", defaults.resource_table),
        max_bundle_entries=_require_positive_int(
            data, "max_bundle_entries", defaults.max_bundle_entries
        ),
        reject_unrecognized_operations=_require_bool(
            data,
            "reject_unrecognized_operations",
            defaults.reject_unrecognized_operations,
        ),
        log_level=log_level,
    )


def load_settings(path: Path) -> BundleSettings:
    """Load and parse one settings file."""
    return parse_settings(load_yaml_file(path))


def compute_checksum(settings: BundleSettings) -> str:
    """Deterministic SHA-256 of the canonical JSON form of ``settings``."""
    canonical = json.dumps(asdict(settings), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
