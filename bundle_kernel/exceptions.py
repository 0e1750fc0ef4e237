"""
Typed Exception Hierarchy for the Bundle Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A bundle either commits as a unit or is rolled back as a unit. Callers that
execute the generated requests must decide, per failure, whether to abort the
attempt, roll back staged versions, or surface the error to the client.
Parsing message strings for that decision is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        staged = generator.generate(operations, id_to_version, tenant_id)
    except UnknownVersionReferenceError as e:
        api_response(code=e.code, id=e.resource_id, operation=e.operation)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from BundleKernelError:

    BundleKernelError (base)
    |
    +-- StagingError
    |   +-- UnknownVersionReferenceError
    |   +-- MissingIdentifierError
    |   +-- UnrecognizedOperationError
    |   +-- ResourceTypeMismatchError
    |   +-- BundleTooLargeError
    |
    +-- ReconciliationError
    |   +-- ReadFulfillmentError
    |
    +-- CodecError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Staging         | UNKNOWN_VERSION_REFERENCE   | id missing from the version mapping
                | MISSING_IDENTIFIER          | update/delete/read without an id
                | UNRECOGNIZED_OPERATION      | operation outside create/update/delete/read
                | RESOURCE_TYPE_MISMATCH      | payload resourceType differs from the entry type
                | BUNDLE_TOO_LARGE            | more entries than one store transaction holds
----------------|-----------------------------|-----------------------------------------
Reconciliation  | READ_FULFILLMENT_FAILED     | read placeholder has no raw result
----------------|-----------------------------|-----------------------------------------
Codec           | CODEC_ERROR                 | payload cannot be (un)marshalled

===============================================================================
HANDLING PATTERNS
===============================================================================

1. STAGING ERRORS ABORT THE WHOLE BATCH. No request is emitted for any entry
   when one entry is invalid, so there is nothing to roll back.

2. READ FULFILLMENT IS RETURNED, NOT RAISED. ReadResultReconciler returns a
   ReconciliationResult carrying the ReadFulfillmentError; the caller decides
   between rollback and propagation:

    result = reconciler.populate(responses, raw_items)
    if not result:
        execute(generate_rollback_requests(responses, tenant_id))
        raise result.error
"""


class BundleKernelError(Exception):
    """
    Base exception for all bundle kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BUNDLE_KERNEL_ERROR"


# Staging exceptions


class StagingError(BundleKernelError):
    """Base exception for errors raised while generating staging requests."""

    code: str = "STAGING_ERROR"


class UnknownVersionReferenceError(StagingError):
    """
    An operation names an identifier with no entry in the version mapping.

    Without a current version there is no row to transition, read, or
    supersede, so the batch is rejected before any request is produced.
    """

    code: str = "UNKNOWN_VERSION_REFERENCE"

    def __init__(self, resource_id: str, operation: str, entry_index: int):
        self.resource_id = resource_id
        self.operation = operation
        self.entry_index = entry_index
        super().__init__(
            f"No current version known for {resource_id} "
            f"({operation} at bundle entry {entry_index})"
        )


class MissingIdentifierError(StagingError):
    """An update, delete or read entry carries no resource identifier."""

    code: str = "MISSING_IDENTIFIER"

    def __init__(self, operation: str, entry_index: int):
        self.operation = operation
        self.entry_index = entry_index
        super().__init__(
            f"Bundle entry {entry_index} ({operation}) has no resource id"
        )


class UnrecognizedOperationError(StagingError):
    """Operation kind is not one of create, update, delete, read."""

    code: str = "UNRECOGNIZED_OPERATION"

    def __init__(self, operation: str, entry_index: int):
        self.operation = operation
        self.entry_index = entry_index
        super().__init__(
            f"Unrecognized operation {operation!r} at bundle entry {entry_index}"
        )


class ResourceTypeMismatchError(StagingError):
    """Payload ``resourceType`` disagrees with the entry's declared type."""

    code: str = "RESOURCE_TYPE_MISMATCH"

    def __init__(self, declared_type: str, payload_type: str, entry_index: int):
        self.declared_type = declared_type
        self.payload_type = payload_type
        self.entry_index = entry_index
        super().__init__(
            f"Bundle entry {entry_index} declares {declared_type} "
            f"but its resource is a {payload_type}"
        )


class BundleTooLargeError(StagingError):
    """
    Bundle holds more entries than a single store transaction accepts.

    The store's native transaction is bounded in item count; a bundle that
    cannot fit is rejected up front rather than split.
    """

    code: str = "BUNDLE_TOO_LARGE"

    def __init__(self, entry_count: int, max_entries: int):
        self.entry_count = entry_count
        self.max_entries = max_entries
        super().__init__(
            f"Bundle has {entry_count} entries, maximum is {max_entries}"
        )


# Reconciliation exceptions


class ReconciliationError(BundleKernelError):
    """Base exception for errors while merging read results into responses."""

    code: str = "RECONCILIATION_ERROR"


class ReadFulfillmentError(ReconciliationError):
    """
    A read placeholder has no corresponding raw read result.

    The row was locked when the bundle was staged and vanished before the
    read completed. Fatal for the whole bundle: staged create/update
    versions must be rolled back.
    """

    code: str = "READ_FULFILLMENT_FAILED"

    def __init__(self, resource_id: str, vid: str, read_index: int, results_available: int):
        self.resource_id = resource_id
        self.vid = vid
        self.read_index = read_index
        self.results_available = results_available
        super().__init__(
            f"Failed to fulfill all READ requests: no result for read "
            f"{read_index} ({resource_id} v{vid}), "
            f"{results_available} result(s) available"
        )


# Codec exceptions


class CodecError(BundleKernelError):
    """Document payload could not be converted to or from the store format."""

    code: str = "CODEC_ERROR"

    def __init__(self, direction: str, reason: str):
        self.direction = direction
        self.reason = reason
        super().__init__(f"Cannot {direction} document: {reason}")
