"""
Identifiers -- id generation and tenant-scoped row keys.

Responsibility:
    Supplies the injectable identifier generator used for id-less creates and
    the tenant-key builder that turns (id, tenant) into the physical hash key.

Architecture position:
    Kernel > Domain -- pure functional core. UuidIdGenerator is the one
    sanctioned source of randomness.
"""

from abc import ABC, abstractmethod
from uuid import uuid4

TENANT_SEPARATOR = "|"


def build_hash_key(resource_id: str, tenant_id: str | None = None) -> str:
    """
    Physical row key for a resource id.

    ``"<tenant>|<id>"`` when tenant-scoped, the plain id otherwise.
    """
    if tenant_id:
        return f"{tenant_id}{TENANT_SEPARATOR}{resource_id}"
    return resource_id


class IdGenerator(ABC):
    """Produces a fresh, unique resource identifier per call."""

    @abstractmethod
    def new_id(self) -> str:
        ...


class UuidIdGenerator(IdGenerator):
    """Production generator: random UUID4 strings."""

    def new_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator(IdGenerator):
    """
    Test generator returning ``<prefix>-1``, ``<prefix>-2``, ...

    Two generators built with the same prefix yield the same sequence,
    which makes staging output reproducible.
    """

    def __init__(self, prefix: str = "id"):
        self._prefix = prefix
        self._counter = 0

    def new_id(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter}"
