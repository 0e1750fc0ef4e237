"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the data that flows through a bundle attempt: BatchOperation
    (input), VersionedDocument (staged row), the request variants handed to
    the store executor, LockDescriptor / LockRelease (lock-table bookkeeping),
    BundleEntryResponse (per-entry outcome) and the three result envelopes.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - VersionedDocument.vid is a positive integer
    - Request variants are frozen; callers dispatch on type (``match``) or on
      the ``kind`` discriminator, never on dict shape
    - BundleEntryResponse is the only mutable DTO; ReadResultReconciler fills
      read placeholders in place

Failure modes:
    - ValueError on VersionedDocument with vid < 1
    - ValueError on ReconciliationResult.failure without an error

Data flow:
    BatchOperation -> VersionedDocument -> PutRequest
                   -> LockDescriptor
                   -> BundleEntryResponse -> DeleteRequest + LockRelease (rollback)
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from bundle_kernel.domain.documents import prep_item_for_insert
from bundle_kernel.domain.identifiers import build_hash_key
from bundle_kernel.domain.status import BundleOperation, DocumentStatus
from bundle_kernel.exceptions import ReadFulfillmentError


@dataclass(frozen=True)
class BatchOperation:
    """
    One logical entry of a bundle, as submitted by the caller.

    Contract:
        ``operation`` is normally a BundleOperation; a raw string is accepted
        so that unknown kinds reach the generator and are handled there.
        ``resource`` is required for create/update. For update, delete and
        read the identifier may come from ``id`` or from the resource's own
        ``id`` field; a create takes only ``id`` and otherwise gets a fresh one.
    """

    operation: BundleOperation | str
    resource_type: str
    id: str | None = None
    resource: Mapping[str, Any] | None = None

    @property
    def resource_id(self) -> str | None:
        if self.id:
            return self.id
        if self.resource is not None:
            return self.resource.get("id") or None
        return None


@dataclass(frozen=True)
class DocumentKey:
    """Physical key of one stored version: tenant-scoped hash key plus vid."""

    hash_key: str
    vid: int

    @classmethod
    def for_resource(
        cls, resource_id: str, vid: int, tenant_id: str | None = None
    ) -> DocumentKey:
        return cls(hash_key=build_hash_key(resource_id, tenant_id), vid=vid)

    def as_item(self) -> dict[str, Any]:
        return {"id": self.hash_key, "vid": self.vid}


@dataclass(frozen=True)
class VersionedDocument:
    """
    A resource version staged for write.

    Contract:
        Created fresh for each create/update entry with status PENDING.
        ``last_updated`` and ``lock_end_ts`` come from the injected clock.

    Guarantees:
        - vid >= 1
        - ``resource`` is a private deep copy of the caller's payload
    """

    resource_id: str
    vid: int
    resource_type: str
    resource: Mapping[str, Any]
    status: DocumentStatus
    last_updated: str
    lock_end_ts: int
    tenant_id: str | None = None

    def __post_init__(self) -> None:
        if self.vid < 1:
            raise ValueError(f"Document version must be positive, got {self.vid}")
        object.__setattr__(self, "resource", copy.deepcopy(dict(self.resource)))

    @property
    def key(self) -> DocumentKey:
        return DocumentKey.for_resource(self.resource_id, self.vid, self.tenant_id)

    @property
    def meta(self) -> dict[str, Any]:
        """Resource ``meta`` with this version's versionId and lastUpdated."""
        return {
            **(self.resource.get("meta") or {}),
            "versionId": str(self.vid),
            "lastUpdated": self.last_updated,
        }

    def to_item(self) -> dict[str, Any]:
        """Plain (not yet encoded) store item for this version."""
        return prep_item_for_insert(
            self.resource,
            self.resource_id,
            self.vid,
            self.status,
            meta=self.meta,
            lock_end_ts=self.lock_end_ts,
            tenant_id=self.tenant_id,
        )

    def to_response_resource(self) -> dict[str, Any]:
        """Payload returned to the caller: merged meta and the plain id."""
        resource = copy.deepcopy(dict(self.resource))
        resource["meta"] = self.meta
        resource["id"] = self.resource_id
        return resource


# ---------------------------------------------------------------------------
# Request variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PutRequest:
    """
    Write a new version row.

    ``item`` is the codec-encoded form of ``document.to_item()``.
    ``expect_absent`` asks the executor to make the put conditional on no
    row existing at the key, so a concurrent bundle that already wrote
    this version makes the transaction fail.
    """

    kind: ClassVar[str] = "put"

    table_name: str
    item: Mapping[str, Any]
    document: VersionedDocument
    expect_absent: bool = True

    @property
    def key(self) -> DocumentKey:
        return self.document.key


@dataclass(frozen=True)
class StatusTransitionRequest:
    """Move an existing row from one status to another; no new row."""

    kind: ClassVar[str] = "status_transition"

    table_name: str
    key: DocumentKey
    from_status: DocumentStatus
    to_status: DocumentStatus
    resource_type: str
    tenant_id: str | None = None


@dataclass(frozen=True)
class DeleteRequest:
    """Remove one version row (rollback compensation)."""

    kind: ClassVar[str] = "delete"

    table_name: str
    key: DocumentKey


@dataclass(frozen=True)
class GetRequest:
    """Point read of one version row."""

    kind: ClassVar[str] = "get"

    table_name: str
    key: DocumentKey


# ---------------------------------------------------------------------------
# Lock bookkeeping
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LockDescriptor:
    """
    Pending claim on a staged version.

    The external lock table promotes it on commit or purges it on rollback.
    ``is_original_update_item`` is False for update entries (the staged row is
    the new version, not the locked original) and None for creates.
    """

    id: str
    vid: int
    resource_type: str
    operation: BundleOperation
    is_original_update_item: bool | None = None


@dataclass(frozen=True)
class LockRelease:
    """Lock-table entry to drop when a staged version is rolled back."""

    id: str
    vid: str
    resource_type: str


# ---------------------------------------------------------------------------
# Responses and results
# ---------------------------------------------------------------------------


@dataclass
class BundleEntryResponse:
    """
    Per-entry outcome of a bundle.

    Create/update/delete responses are complete at staging time. Read
    responses start as placeholders (empty resource, empty last_modified)
    and are filled by ReadResultReconciler.
    """

    id: str
    vid: str
    operation: BundleOperation
    last_modified: str
    resource_type: str
    resource: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StagingResult:
    """
    Everything a staging pass produces.

    Guarantees:
        - ``responses`` has one entry per accepted operation, in input order
        - ``new_locks`` has one entry per create/update, in input order
        - write buckets are partitioned by kind only; no cross-bucket order
    """

    create_requests: tuple[PutRequest, ...]
    update_requests: tuple[PutRequest, ...]
    delete_requests: tuple[StatusTransitionRequest, ...]
    read_requests: tuple[GetRequest, ...]
    new_locks: tuple[LockDescriptor, ...]
    responses: list[BundleEntryResponse]


@dataclass(frozen=True)
class RollbackResult:
    """Compensating deletes and lock releases for one staged bundle."""

    transaction_requests: tuple[DeleteRequest, ...]
    items_to_remove_from_lock: tuple[LockRelease, ...]


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Result of merging read results into bundle responses.

    Contract:
        Either carries the fully populated responses OR a
        ReadFulfillmentError, never both.
    """

    responses: list[BundleEntryResponse] | None
    error: ReadFulfillmentError | None = None

    @classmethod
    def success(cls, responses: list[BundleEntryResponse]) -> ReconciliationResult:
        return cls(responses=responses, error=None)

    @classmethod
    def failure(cls, error: ReadFulfillmentError) -> ReconciliationResult:
        if error is None:
            raise ValueError("ReconciliationResult.failure requires an error")
        return cls(responses=None, error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.is_success

    def unwrap(self) -> list[BundleEntryResponse]:
        """Return the responses, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        assert self.responses is not None
        return self.responses
