"""
ReadResultReconciler -- merge read results into bundle responses.

Responsibility:
    Fills the read placeholders emitted by StagingRequestGenerator with the
    items returned by the store. The Nth read placeholder in the response
    list takes the Nth raw result; other entries are left alone.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - response order and length are unchanged
    - raw results are consumed strictly in placeholder order
    - all-or-nothing: every raw item is decoded before any response is
      touched, so a failure leaves the responses as they were

Failure modes:
    - ReadFulfillmentError (returned inside ReconciliationResult) when a
      placeholder has no raw result: the row was locked at staging time and
      disappeared before the read completed
    - CodecError (raised) when a raw item is not a valid attribute map
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from bundle_kernel.domain.codec import AttributeValueCodec, DocumentCodec
from bundle_kernel.domain.documents import clean_item
from bundle_kernel.domain.dtos import BundleEntryResponse, ReconciliationResult
from bundle_kernel.domain.status import BundleOperation
from bundle_kernel.exceptions import ReadFulfillmentError
from bundle_kernel.logging_config import get_logger

logger = get_logger("domain.reconciliation")

RawReadResult = Mapping[str, Any] | None


def raw_items_from_transact_get(response: Mapping[str, Any] | None) -> list[RawReadResult]:
    """
    Positional ``Item`` list from a transactional multi-get response.

    ``{"Responses": [{"Item": {...}}, {}, ...]}`` -> ``[{...}, None, ...]``.
    """
    if not response:
        return []
    return [(entry or {}).get("Item") for entry in response.get("Responses") or []]


class ReadResultReconciler:
    """Populates read placeholders from raw store items."""

    def __init__(self, codec: DocumentCodec | None = None):
        self._codec = codec or AttributeValueCodec()

    def populate(
        self,
        responses: list[BundleEntryResponse],
        raw_read_results: Sequence[RawReadResult],
    ) -> ReconciliationResult:
        """
        Fill every read placeholder in ``responses`` in place.

        Returns:
            ReconciliationResult.success(responses) -- the same list object --
            or ReconciliationResult.failure(ReadFulfillmentError).
        """
        updates: list[tuple[int, dict[str, Any]]] = []
        read_index = 0
        for position, response in enumerate(responses):
            if BundleOperation.parse(response.operation) is not BundleOperation.READ:
                continue
            raw = raw_read_results[read_index] if read_index < len(raw_read_results) else None
            if raw is None:
                error = ReadFulfillmentError(
                    resource_id=response.id,
                    vid=response.vid,
                    read_index=read_index,
                    results_available=len(raw_read_results),
                )
                logger.error(
                    "read_fulfillment_failed",
                    extra={
                        "resource_id": response.id,
                        "vid": response.vid,
                        "read_index": read_index,
                        "results_available": len(raw_read_results),
                    },
                )
                return ReconciliationResult.failure(error)
            updates.append((position, clean_item(self._codec.decode(raw))))
            read_index += 1

        for position, item in updates:
            response = responses[position]
            response.resource = item
            response.last_modified = (item.get("meta") or {}).get("lastUpdated") or ""

        logger.info(
            "read_results_populated",
            extra={
                "response_count": len(responses),
                "read_count": len(updates),
                "unused_results": len(raw_read_results) - read_index,
            },
        )
        return ReconciliationResult.success(responses)


def populate_read_results(
    responses: list[BundleEntryResponse],
    raw_read_results: Sequence[RawReadResult],
    *,
    codec: DocumentCodec | None = None,
) -> ReconciliationResult:
    """Reconcile with a one-off ReadResultReconciler."""
    return ReadResultReconciler(codec=codec).populate(responses, raw_read_results)
