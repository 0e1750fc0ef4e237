"""
Documents -- stored item layout.

Responsibility:
    Builds the plain store item for a staged version (public resource fields
    plus internal bookkeeping fields) and strips the bookkeeping fields again
    when an item is read back.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Internal fields never leak into a cleaned item
    - A tenant-scoped item keeps the plain id in ``_id`` so it can be
      restored after the hash key replaced ``id``
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from bundle_kernel.domain.identifiers import build_hash_key
from bundle_kernel.domain.status import DocumentStatus

DOCUMENT_STATUS_FIELD = "documentStatus"
LOCK_END_TS_FIELD = "lockEndTs"
VID_FIELD = "vid"
REFERENCES_FIELD = "_references"
TENANT_ID_FIELD = "_tenantId"
PLAIN_ID_FIELD = "_id"

INTERNAL_FIELDS: tuple[str, ...] = (
    DOCUMENT_STATUS_FIELD,
    LOCK_END_TS_FIELD,
    VID_FIELD,
    REFERENCES_FIELD,
    TENANT_ID_FIELD,
    PLAIN_ID_FIELD,
)


def collect_references(resource: Any) -> list[str]:
    """Every string ``reference`` value anywhere in the resource, sorted and unique."""
    found: set[str] = set()

    def walk(node: Any) -> None:
        if isinstance(node, Mapping):
            for key, value in node.items():
                if key == "reference" and isinstance(value, str):
                    found.add(value)
                else:
                    walk(value)
        elif isinstance(node, (list, tuple)):
            for value in node:
                walk(value)

    walk(resource)
    return sorted(found)


def prep_item_for_insert(
    resource: Mapping[str, Any],
    resource_id: str,
    vid: int,
    status: DocumentStatus,
    *,
    meta: Mapping[str, Any],
    lock_end_ts: int,
    tenant_id: str | None = None,
) -> dict[str, Any]:
    """Plain store item for one version of ``resource``."""
    item = copy.deepcopy(dict(resource))
    item["id"] = build_hash_key(resource_id, tenant_id)
    item[VID_FIELD] = vid
    item["meta"] = dict(meta)
    item[DOCUMENT_STATUS_FIELD] = status.value
    item[LOCK_END_TS_FIELD] = lock_end_ts
    item[REFERENCES_FIELD] = collect_references(resource)
    if tenant_id:
        item[TENANT_ID_FIELD] = tenant_id
        item[PLAIN_ID_FIELD] = resource_id
    return item


def clean_item(item: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of a stored item without internal fields and with the plain id."""
    cleaned = copy.deepcopy(dict(item))
    plain_id = cleaned.get(PLAIN_ID_FIELD)
    for name in INTERNAL_FIELDS:
        cleaned.pop(name, None)
    if plain_id:
        cleaned["id"] = plain_id
    return cleaned
