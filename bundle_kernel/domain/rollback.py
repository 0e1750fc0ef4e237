"""
RollbackRequestGenerator -- compensations for a failed bundle attempt.

Responsibility:
    Given the responses produced by a staging pass, computes the delete
    requests that remove every staged version and the lock-table entries to
    release. A pure function of already-produced data, so it is complete no
    matter how far execution got before the failure.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - one DeleteRequest and one LockRelease per create/update response, with
      matching id and version
    - nothing for delete/read responses: a delete only changed the status of
      an existing row (reverting it is the committer's job) and a read wrote
      nothing

Non-goals:
    - Output order carries no meaning; each compensation targets its own row
"""

from __future__ import annotations

from collections.abc import Sequence

from bundle_kernel.domain.dtos import (
    BundleEntryResponse,
    DeleteRequest,
    DocumentKey,
    LockRelease,
    RollbackResult,
)
from bundle_kernel.domain.settings import KernelSettings
from bundle_kernel.domain.status import BundleOperation
from bundle_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.rollback")


class RollbackRequestGenerator:
    """Builds the compensations that undo staged create/update versions."""

    def __init__(self, settings: KernelSettings | None = None):
        self._settings = settings or KernelSettings()

    def generate(
        self,
        responses: Sequence[BundleEntryResponse],
        tenant_id: str | None = None,
    ) -> RollbackResult:
        with LogContext.bind(tenant_id=tenant_id):
            return self._generate(responses, tenant_id)

    def _generate(
        self,
        responses: Sequence[BundleEntryResponse],
        tenant_id: str | None,
    ) -> RollbackResult:
        transaction_requests: list[DeleteRequest] = []
        items_to_remove_from_lock: list[LockRelease] = []

        for response in responses:
            kind = BundleOperation.parse(response.operation)
            if kind is None or not kind.creates_version:
                continue
            transaction_requests.append(
                DeleteRequest(
                    table_name=self._settings.resource_table,
                    key=DocumentKey.for_resource(
                        response.id, int(response.vid), tenant_id
                    ),
                )
            )
            items_to_remove_from_lock.append(
                LockRelease(
                    id=response.id,
                    vid=response.vid,
                    resource_type=response.resource_type,
                )
            )

        logger.info(
            "rollback_requests_generated",
            extra={
                "response_count": len(responses),
                "compensation_count": len(transaction_requests),
                "tenant_scoped": tenant_id is not None,
            },
        )
        return RollbackResult(
            transaction_requests=tuple(transaction_requests),
            items_to_remove_from_lock=tuple(items_to_remove_from_lock),
        )


def generate_rollback_requests(
    responses: Sequence[BundleEntryResponse],
    tenant_id: str | None = None,
    *,
    settings: KernelSettings | None = None,
) -> RollbackResult:
    """Compute compensations with a one-off RollbackRequestGenerator."""
    return RollbackRequestGenerator(settings=settings).generate(responses, tenant_id)
