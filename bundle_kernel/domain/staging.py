"""
StagingRequestGenerator -- Pure functional core for bundle staging.

Responsibility:
    Transforms an ordered batch of BatchOperations plus a snapshot of the
    current version of every referenced resource into the physical store
    requests of one bundle attempt: staged PENDING puts for create/update,
    LOCKED -> PENDING_DELETE transitions for delete, point reads for read,
    one LockDescriptor per staged version and one BundleEntryResponse per
    entry.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Clock, id generator, codec and settings are injected.

Invariants enforced:
    - len(responses) == len(accepted operations), same order, same kinds
    - create -> vid 1; update of X at V -> vid V + 1
    - exactly one LockDescriptor per create/update, none for delete/read
    - the whole batch is validated before any request is built; a bad entry
      yields an exception and no partial output

Failure modes:
    - BundleTooLargeError when the batch exceeds max_bundle_entries
    - UnrecognizedOperationError for an unknown kind (when rejecting)
    - MissingIdentifierError for update/delete/read without an id
    - UnknownVersionReferenceError for update/delete/read of an id absent
      from the version mapping
    - ResourceTypeMismatchError when a payload resourceType contradicts the
      entry's resource_type
    - CodecError when a staged item cannot be encoded

Concurrency:
    Optimistic. Staged puts target the next version computed from the
    caller's snapshot and are marked ``expect_absent``; if another bundle got
    there first the store rejects the transaction and the caller rolls back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from bundle_kernel.domain.clock import Clock, SystemClock, to_epoch_millis, to_iso_millis
from bundle_kernel.domain.codec import AttributeValueCodec, DocumentCodec
from bundle_kernel.domain.dtos import (
    BatchOperation,
    BundleEntryResponse,
    DocumentKey,
    GetRequest,
    LockDescriptor,
    PutRequest,
    StagingResult,
    StatusTransitionRequest,
    VersionedDocument,
)
from bundle_kernel.domain.identifiers import IdGenerator, UuidIdGenerator
from bundle_kernel.domain.settings import KernelSettings
from bundle_kernel.domain.status import BundleOperation, DocumentStatus
from bundle_kernel.exceptions import (
    BundleTooLargeError,
    MissingIdentifierError,
    ResourceTypeMismatchError,
    UnknownVersionReferenceError,
    UnrecognizedOperationError,
)
from bundle_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.staging")


@dataclass(frozen=True)
class _PlannedEntry:
    """A validated entry: its kind, resolved id and known current version."""

    index: int
    kind: BundleOperation
    operation: BatchOperation
    resource_id: str | None
    current_vid: int | None


class StagingRequestGenerator:
    """
    Builds the staged requests for one bundle attempt.

    Contract:
        ``generate()`` is a pure function of its arguments and the injected
        collaborators. The generator keeps no per-call state and can be
        shared across threads and bundles.

    Non-goals:
        - Does NOT execute requests or talk to the store
        - Does NOT validate resource content
        - Does NOT promote or release locks
    """

    def __init__(
        self,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        codec: DocumentCodec | None = None,
        settings: KernelSettings | None = None,
    ):
        self._clock = clock or SystemClock()
        self._id_generator = id_generator or UuidIdGenerator()
        self._codec = codec or AttributeValueCodec()
        self._settings = settings or KernelSettings()

    def generate(
        self,
        operations: Sequence[BatchOperation],
        id_to_version: Mapping[str, int],
        tenant_id: str | None = None,
    ) -> StagingResult:
        """
        Stage a batch.

        Args:
            operations: Bundle entries in submission order.
            id_to_version: Latest known version per resource id.
            tenant_id: Optional tenant scope for row keys.

        Returns:
            StagingResult with the request buckets, locks and responses.
        """
        with LogContext.bind(tenant_id=tenant_id):
            return self._generate(operations, id_to_version, tenant_id)

    def _generate(
        self,
        operations: Sequence[BatchOperation],
        id_to_version: Mapping[str, int],
        tenant_id: str | None,
    ) -> StagingResult:
        plan = self._plan(operations, id_to_version)

        create_requests: list[PutRequest] = []
        update_requests: list[PutRequest] = []
        delete_requests: list[StatusTransitionRequest] = []
        read_requests: list[GetRequest] = []
        new_locks: list[LockDescriptor] = []
        responses: list[BundleEntryResponse] = []

        for entry in plan:
            match entry.kind:
                case BundleOperation.CREATE:
                    resource_id = entry.resource_id or self._id_generator.new_id()
                    put, lock, response = self._stage_version(
                        entry, resource_id, 1, tenant_id
                    )
                    create_requests.append(put)
                    new_locks.append(lock)
                    responses.append(response)

                case BundleOperation.UPDATE:
                    put, lock, response = self._stage_version(
                        entry, entry.resource_id, entry.current_vid + 1, tenant_id
                    )
                    update_requests.append(put)
                    new_locks.append(lock)
                    responses.append(response)

                case BundleOperation.DELETE:
                    # Existing row only changes status; nothing new to lock
                    delete_requests.append(
                        StatusTransitionRequest(
                            table_name=self._settings.resource_table,
                            key=DocumentKey.for_resource(
                                entry.resource_id, entry.current_vid, tenant_id
                            ),
                            from_status=DocumentStatus.LOCKED,
                            to_status=DocumentStatus.PENDING_DELETE,
                            resource_type=entry.operation.resource_type,
                            tenant_id=tenant_id,
                        )
                    )
                    responses.append(
                        BundleEntryResponse(
                            id=entry.resource_id,
                            vid=str(entry.current_vid),
                            operation=BundleOperation.DELETE,
                            last_modified=to_iso_millis(self._clock.now_utc()),
                            resource_type=entry.operation.resource_type,
                            resource={},
                        )
                    )

                case BundleOperation.READ:
                    read_requests.append(
                        GetRequest(
                            table_name=self._settings.resource_table,
                            key=DocumentKey.for_resource(
                                entry.resource_id, entry.current_vid, tenant_id
                            ),
                        )
                    )
                    responses.append(
                        BundleEntryResponse(
                            id=entry.resource_id,
                            vid=str(entry.current_vid),
                            operation=BundleOperation.READ,
                            last_modified="",
                            resource_type=entry.operation.resource_type,
                            resource={},
                        )
                    )

        result = StagingResult(
            create_requests=tuple(create_requests),
            update_requests=tuple(update_requests),
            delete_requests=tuple(delete_requests),
            read_requests=tuple(read_requests),
            new_locks=tuple(new_locks),
            responses=responses,
        )
        logger.info(
            "staging_requests_generated",
            extra={
                "entry_count": len(operations),
                "create_count": len(create_requests),
                "update_count": len(update_requests),
                "delete_count": len(delete_requests),
                "read_count": len(read_requests),
                "lock_count": len(new_locks),
                "tenant_scoped": tenant_id is not None,
            },
        )
        return result

    def _plan(
        self,
        operations: Sequence[BatchOperation],
        id_to_version: Mapping[str, int],
    ) -> list[_PlannedEntry]:
        """Validate every entry up front; raise before anything is built."""
        max_entries = self._settings.max_bundle_entries
        if len(operations) > max_entries:
            raise BundleTooLargeError(len(operations), max_entries)

        plan: list[_PlannedEntry] = []
        for index, operation in enumerate(operations):
            kind = BundleOperation.parse(operation.operation)
            if kind is None:
                if self._settings.reject_unrecognized_operations:
                    raise UnrecognizedOperationError(str(operation.operation), index)
                logger.warning(
                    "unrecognized_operation_skipped",
                    extra={"operation": str(operation.operation), "entry_index": index},
                )
                continue

            payload_type = (operation.resource or {}).get("resourceType")
            if payload_type and payload_type != operation.resource_type:
                raise ResourceTypeMismatchError(operation.resource_type, payload_type, index)

            # A create never adopts the payload's own id
            resource_id = operation.id if kind is BundleOperation.CREATE else operation.resource_id
            current_vid: int | None = None
            if kind is not BundleOperation.CREATE:
                if not resource_id:
                    raise MissingIdentifierError(kind.value, index)
                current_vid = id_to_version.get(resource_id)
                if current_vid is None:
                    raise UnknownVersionReferenceError(resource_id, kind.value, index)

            plan.append(
                _PlannedEntry(
                    index=index,
                    kind=kind,
                    operation=operation,
                    resource_id=resource_id,
                    current_vid=current_vid,
                )
            )
        return plan

    def _stage_version(
        self,
        entry: _PlannedEntry,
        resource_id: str,
        vid: int,
        tenant_id: str | None,
    ) -> tuple[PutRequest, LockDescriptor, BundleEntryResponse]:
        """PENDING put, lock and full response for a create/update entry."""
        now = self._clock.now_utc()
        resource = dict(entry.operation.resource or {})
        resource.setdefault("resourceType", entry.operation.resource_type)

        document = VersionedDocument(
            resource_id=resource_id,
            vid=vid,
            resource_type=entry.operation.resource_type,
            resource=resource,
            status=DocumentStatus.PENDING,
            last_updated=to_iso_millis(now),
            lock_end_ts=to_epoch_millis(now),
            tenant_id=tenant_id,
        )
        put = PutRequest(
            table_name=self._settings.resource_table,
            item=self._codec.encode(document.to_item()),
            document=document,
        )
        lock = LockDescriptor(
            id=resource_id,
            vid=vid,
            resource_type=document.resource_type,
            operation=entry.kind,
            is_original_update_item=False if entry.kind is BundleOperation.UPDATE else None,
        )
        response = BundleEntryResponse(
            id=resource_id,
            vid=str(vid),
            operation=entry.kind,
            last_modified=document.last_updated,
            resource_type=document.resource_type,
            resource=document.to_response_resource(),
        )
        return put, lock, response


def generate_staging_requests(
    operations: Sequence[BatchOperation],
    id_to_version: Mapping[str, int],
    tenant_id: str | None = None,
    *,
    clock: Clock | None = None,
    id_generator: IdGenerator | None = None,
    codec: DocumentCodec | None = None,
    settings: KernelSettings | None = None,
) -> StagingResult:
    """Stage a batch with a one-off StagingRequestGenerator."""
    generator = StagingRequestGenerator(
        clock=clock, id_generator=id_generator, codec=codec, settings=settings
    )
    return generator.generate(operations, id_to_version, tenant_id)
