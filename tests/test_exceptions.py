"""
Tests for the bundle kernel exception hierarchy.

Verifies:
- Every exception carries a stable machine-readable code
- Structured attributes are populated
- Family base classes catch their members
"""

import pytest

from bundle_kernel.exceptions import (
    BundleKernelError,
    BundleTooLargeError,
    CodecError,
    MissingIdentifierError,
    ReadFulfillmentError,
    ReconciliationError,
    ResourceTypeMismatchError,
    StagingError,
    UnknownVersionReferenceError,
    UnrecognizedOperationError,
)


@pytest.mark.parametrize(
    "exc, code",
    [
        (UnknownVersionReferenceError("p1", "update", 0), "UNKNOWN_VERSION_REFERENCE"),
        (MissingIdentifierError("read", 1), "MISSING_IDENTIFIER"),
        (UnrecognizedOperationError("patch", 2), "UNRECOGNIZED_OPERATION"),
        (ResourceTypeMismatchError("Patient", "Observation", 0), "RESOURCE_TYPE_MISMATCH"),
        (BundleTooLargeError(30, 25), "BUNDLE_TOO_LARGE"),
        (ReadFulfillmentError("p1", "2", 0, 0), "READ_FULFILLMENT_FAILED"),
        (CodecError("decode", "bad tag"), "CODEC_ERROR"),
    ],
)
def test_codes(exc, code):
    assert exc.code == code
    assert isinstance(exc, BundleKernelError)


def test_staging_family():
    for exc in (
        UnknownVersionReferenceError("p1", "delete", 0),
        MissingIdentifierError("update", 0),
        UnrecognizedOperationError("patch", 0),
        ResourceTypeMismatchError("Patient", "Group", 0),
        BundleTooLargeError(26, 25),
    ):
        assert isinstance(exc, StagingError)
    assert StagingError.code == "STAGING_ERROR"


def test_read_fulfillment_is_reconciliation_error():
    exc = ReadFulfillmentError("p9", "4", 1, 1)

    assert isinstance(exc, ReconciliationError)
    assert not isinstance(exc, StagingError)


def test_read_fulfillment_message_and_attributes():
    exc = ReadFulfillmentError("p9", "4", 1, 1)

    assert str(exc).startswith("Failed to fulfill all READ requests")
    assert "p9" in str(exc)
    assert exc.resource_id == "p9"
    assert exc.vid == "4"
    assert exc.read_index == 1
    assert exc.results_available == 1


def test_unknown_version_attributes():
    exc = UnknownVersionReferenceError("p1", "read", 5)

    assert exc.resource_id == "p1"
    assert exc.operation == "read"
    assert exc.entry_index == 5
    assert "p1" in str(exc)


def test_bundle_too_large_attributes():
    exc = BundleTooLargeError(40, 25)

    assert (exc.entry_count, exc.max_entries) == (40, 25)
    assert "40" in str(exc)


def test_codec_error_attributes():
    exc = CodecError("encode", "unsupported type")

    assert exc.direction == "encode"
    assert exc.reason == "unsupported type"
    assert str(exc) == "Cannot encode document: unsupported type"
