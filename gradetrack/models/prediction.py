"""
Prediction change-plan models.

A ChangePlan is the ordered list of store operations that turns the official
record into the predictor draft. Plans are pure data so they can be
inspected (and tested) before anything is written.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .identity import EntityId


class Action(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class EntityKind(Enum):
    SEMESTER = "semester"
    COURSE = "course"


@dataclass
class Operation:
    """
    One store call.

    target: id of the entity being changed. For creates this is the draft's
        PendingId, which is mapped to the id the store assigns.
    parent: owning semester for course creates; may itself be a PendingId
        created earlier in the same plan.
    fields: values to write (empty for deletes).
    """
    action: Action
    entity: EntityKind
    target: EntityId
    fields: dict = field(default_factory=dict)
    parent: Optional[EntityId] = None

    def describe(self) -> str:
        return f"{self.action.value} {self.entity.value} {self.target}"


@dataclass
class ChangePlan:
    operations: list = field(default_factory=list)  # List of Operation, in order
    skipped: list = field(default_factory=list)     # Ids left alone as inconsistent

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def count(self, action: Action, entity: Optional[EntityKind] = None) -> int:
        return sum(
            1 for op in self.operations
            if op.action == action and (entity is None or op.entity == entity)
        )

    def __len__(self) -> int:
        return len(self.operations)


@dataclass
class CommitResult:
    """What a successful commit did."""
    applied: list = field(default_factory=list)     # Operations, in order
    assigned_ids: dict = field(default_factory=dict)  # PendingId -> PersistedId

    @property
    def is_noop(self) -> bool:
        return not self.applied
