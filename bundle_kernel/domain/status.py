"""
Status -- shared lifecycle and operation vocabulary.

Responsibility:
    Defines the four document lifecycle statuses written into stored rows and
    the four bundle operation kinds a batch entry may carry.

Architecture position:
    Kernel > Domain -- leaf module, imported by every other domain module.
"""

from enum import Enum


class DocumentStatus(str, Enum):
    """
    Lifecycle status of a stored document version.

    Contract:
        PENDING        -- staged by a bundle, not yet canonical.
        LOCKED         -- canonical, claimed by an in-flight bundle.
        PENDING_DELETE -- marked for deletion, canonical row still present.
        DELETED        -- terminal; set by the external committer only.

    This kernel writes PENDING and moves LOCKED -> PENDING_DELETE; the
    downstream meaning of each status belongs to the committer.
    """

    PENDING = "PENDING"
    LOCKED = "LOCKED"
    PENDING_DELETE = "PENDING_DELETE"
    DELETED = "DELETED"


class BundleOperation(str, Enum):
    """Kind of a bundle entry."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    READ = "read"

    @property
    def creates_version(self) -> bool:
        """True for operations that write a new version row."""
        return self in (BundleOperation.CREATE, BundleOperation.UPDATE)

    @classmethod
    def parse(cls, value: "BundleOperation | str") -> "BundleOperation | None":
        """Return the matching member, or None for an unknown kind."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None
