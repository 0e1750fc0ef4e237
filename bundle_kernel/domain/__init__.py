"""
Pure domain layer.

This module contains the bundle staging, rollback and read reconciliation
logic with NO dependencies on:
- The store client or network
- Wall-clock time (Clock is injected)
- Randomness (IdGenerator is injected)
- Configuration files
"""

from bundle_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SequentialClock,
    SystemClock,
)
from bundle_kernel.domain.codec import AttributeValueCodec, DocumentCodec
from bundle_kernel.domain.documents import clean_item, prep_item_for_insert
from bundle_kernel.domain.dtos import (
    BatchOperation,
    BundleEntryResponse,
    DeleteRequest,
    DocumentKey,
    GetRequest,
    LockDescriptor,
    LockRelease,
    PutRequest,
    ReconciliationResult,
    RollbackResult,
    StagingResult,
    StatusTransitionRequest,
    VersionedDocument,
)
from bundle_kernel.domain.identifiers import (
    IdGenerator,
    SequentialIdGenerator,
    UuidIdGenerator,
    build_hash_key,
)
from bundle_kernel.domain.reconciliation import (
    ReadResultReconciler,
    populate_read_results,
    raw_items_from_transact_get,
)
from bundle_kernel.domain.rollback import (
    RollbackRequestGenerator,
    generate_rollback_requests,
)
from bundle_kernel.domain.settings import KernelSettings
from bundle_kernel.domain.staging import (
    StagingRequestGenerator,
    generate_staging_requests,
)
from bundle_kernel.domain.status import BundleOperation, DocumentStatus

__all__ = [
    # Vocabulary
    "BundleOperation",
    "DocumentStatus",
    # DTOs
    "BatchOperation",
    "BundleEntryResponse",
    "DocumentKey",
    "LockDescriptor",
    "LockRelease",
    "VersionedDocument",
    "StagingResult",
    "RollbackResult",
    "ReconciliationResult",
    # Request variants
    "PutRequest",
    "StatusTransitionRequest",
    "DeleteRequest",
    "GetRequest",
    # Collaborators
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "SequentialClock",
    "IdGenerator",
    "UuidIdGenerator",
    "SequentialIdGenerator",
    "build_hash_key",
    "DocumentCodec",
    "AttributeValueCodec",
    "prep_item_for_insert",
    "clean_item",
    "KernelSettings",
    # Generators
    "StagingRequestGenerator",
    "generate_staging_requests",
    "RollbackRequestGenerator",
    "generate_rollback_requests",
    "ReadResultReconciler",
    "populate_read_results",
    "raw_items_from_transact_get",
]
