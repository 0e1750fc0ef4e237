"""
End-to-end bundle scenarios through the module-level entry points.

Each scenario stages a batch, then reconciles or rolls back the way an
executor would after running the requests against the store.
"""

import pytest

from bundle_kernel.domain.clock import DeterministicClock
from bundle_kernel.domain.codec import AttributeValueCodec
from bundle_kernel.domain.dtos import BatchOperation, BundleEntryResponse, DocumentKey
from bundle_kernel.domain.reconciliation import populate_read_results
from bundle_kernel.domain.rollback import generate_rollback_requests
from bundle_kernel.domain.staging import generate_staging_requests
from bundle_kernel.domain.status import BundleOperation, DocumentStatus
from bundle_kernel.exceptions import ReadFulfillmentError
from tests.conftest import FIXED_TIME


@pytest.fixture
def stage():
    def _stage(operations, versions, tenant_id=None):
        return generate_staging_requests(
            operations, versions, tenant_id, clock=DeterministicClock(FIXED_TIME)
        )

    return _stage


def test_create_without_identifier(stage):
    result = stage([BatchOperation(BundleOperation.CREATE, "Patient", resource={"resourceType": "Patient"})], {})

    put = result.create_requests[0]
    assert put.document.vid == 1
    assert put.document.status is DocumentStatus.PENDING
    assert len(result.new_locks) == 1
    assert result.new_locks[0].operation is BundleOperation.CREATE
    generated_id = result.responses[0].resource["id"]
    assert generated_id
    assert put.document.resource_id == generated_id == result.new_locks[0].id


def test_update_known_identifier(stage):
    result = stage(
        [BatchOperation(BundleOperation.UPDATE, "Patient", id="p1", resource={"resourceType": "Patient", "id": "p1"})],
        {"p1": 2},
    )

    assert result.update_requests[0].document.vid == 3
    assert result.update_requests[0].document.status is DocumentStatus.PENDING
    assert result.new_locks[0].is_original_update_item is False
    assert result.responses[0].vid == "3"


def test_delete_known_identifier(stage):
    result = stage([BatchOperation(BundleOperation.DELETE, "X", id="p1")], {"p1": 3})

    transition = result.delete_requests[0]
    assert transition.from_status is DocumentStatus.LOCKED
    assert transition.to_status is DocumentStatus.PENDING_DELETE
    assert transition.key.vid == 3
    assert result.responses[0].vid == "3"
    assert result.responses[0].resource == {}
    assert result.responses[0].last_modified
    assert result.new_locks == ()


def test_read_then_reconcile(stage):
    codec = AttributeValueCodec()
    result = stage([BatchOperation(BundleOperation.READ, "Patient", id="p1")], {"p1": 1})

    assert result.read_requests[0].key == DocumentKey("p1", 1)
    assert result.responses[0].resource == {}
    assert result.responses[0].last_modified == ""

    raw = codec.encode(
        {
            "id": "p1",
            "vid": 1,
            "resourceType": "Patient",
            "documentStatus": "LOCKED",
            "meta": {"versionId": "1", "lastUpdated": "2024-02-02T10:00:00.000Z"},
        }
    )
    responses = populate_read_results(result.responses, [raw]).unwrap()

    assert responses[0].resource["resourceType"] == "Patient"
    assert responses[0].last_modified == "2024-02-02T10:00:00.000Z"


def test_read_with_missing_result(stage):
    result = stage([BatchOperation(BundleOperation.READ, "Patient", id="p1")], {"p1": 1})

    with pytest.raises(ReadFulfillmentError):
        populate_read_results(result.responses, []).unwrap()


def test_rollback_of_create():
    rollback = generate_rollback_requests(
        [BundleEntryResponse("p1", "1", BundleOperation.CREATE, "", "X", {})]
    )

    assert [d.key for d in rollback.transaction_requests] == [DocumentKey("p1", 1)]
    assert [(l.id, l.vid, l.resource_type) for l in rollback.items_to_remove_from_lock] == [
        ("p1", "1", "X")
    ]


@pytest.mark.parametrize("operation", [BundleOperation.DELETE, BundleOperation.READ])
def test_rollback_of_delete_or_read_is_empty(operation):
    rollback = generate_rollback_requests(
        [BundleEntryResponse("p1", "1", operation, "", "X", {})]
    )

    assert rollback.transaction_requests == ()
    assert rollback.items_to_remove_from_lock == ()
