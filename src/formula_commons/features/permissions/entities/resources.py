"""Actor and resource records consumed by the authorization engine.

Both are minimal views assembled by the host service from its own records.
An AuthorizationContext is built fresh for every request and never cached,
because role and ownership can change between calls.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ....core.value_objects import IdLike, id_value
from .protocols import ApproverLookup


@dataclass(frozen=True)
class Actor:
    """The caller: an id plus the fully resolved permission set."""

    id: str
    permission_set: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'id', id_value(self.id))
        if not self.id:
            raise ValueError("Actor id must be a non-empty string")
        if not isinstance(self.permission_set, int) or isinstance(self.permission_set, bool):
            raise ValueError(f"permission_set must be an integer, got: {self.permission_set!r}")


@dataclass(frozen=True)
class Resource:
    """A project-scoped record (project, drawing, scope item, material spec).

    owner_id is None until the record has been persisted.
    """

    id: Optional[str] = None
    owner_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'id', id_value(self.id))
        object.__setattr__(self, 'owner_id', id_value(self.owner_id))

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        owner_field: str = "created_by",
        id_field: str = "id",
    ) -> "Resource":
        """Build from a database row or API payload."""
        return cls(id=record.get(id_field), owner_id=record.get(owner_field))

    def is_owned_by(self, actor_id: Optional[IdLike]) -> bool:
        """Ownership holds only when both ids are present and equal."""
        actor = id_value(actor_id)
        return self.owner_id is not None and actor is not None and self.owner_id == actor


@dataclass(frozen=True)
class AuthorizationContext:
    """Per-request bundle handed to the authorization service."""

    actor: Actor
    resource: Optional[Resource] = None
    approver_lookup: Optional[ApproverLookup] = None

    @property
    def permission_set(self) -> int:
        return self.actor.permission_set

    @property
    def actor_id(self) -> str:
        return self.actor.id
