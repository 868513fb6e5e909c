"""
Entity identifiers.

Records that exist in the official store carry a PersistedId. Records
created inside a prediction draft carry a PendingId until they are committed
and the store assigns them a real id.
"""

import uuid
from dataclasses import dataclass, field
from typing import Union

# Only used when a pending id is rendered for display
PENDING_PREFIX = "temp_"


@dataclass(frozen=True)
class PersistedId:
    """Identifier assigned by the store."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PendingId:
    """Local reference for an entity that has not been written yet."""
    ref: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def new(cls) -> "PendingId":
        return cls()

    def __str__(self) -> str:
        return f"{PENDING_PREFIX}{self.ref}"


EntityId = Union[PersistedId, PendingId]


def is_pending(entity_id) -> bool:
    return isinstance(entity_id, PendingId)


def as_entity_id(value) -> EntityId:
    """Wrap a raw store id; ids that are already typed pass through."""
    if isinstance(value, (PersistedId, PendingId)):
        return value
    return PersistedId(str(value))
