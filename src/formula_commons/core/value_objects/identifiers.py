"""Value objects for identifiers in formula-commons.

Identifiers arrive from the database as UUIDs or strings; both normalize
to their string form so ownership comparisons are plain string equality.
"""

from dataclasses import dataclass
from typing import Union
from uuid import UUID


def _normalize(value: Union[str, UUID], label: str) -> str:
    if isinstance(value, UUID):
        return str(value)
    if not value or not isinstance(value, str) or not value.strip():
        raise ValueError(f"{label} must be a non-empty string")
    return value.strip()


@dataclass(frozen=True)
class UserId:
    """Actor (user profile) identifier value object."""
    value: str

    def __post_init__(self):
        object.__setattr__(self, 'value', _normalize(self.value, "User ID"))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ResourceId:
    """Identifier of a project, drawing, scope item or material spec."""
    value: str

    def __post_init__(self):
        object.__setattr__(self, 'value', _normalize(self.value, "Resource ID"))

    def __str__(self) -> str:
        return self.value


IdLike = Union[str, UUID, UserId, ResourceId]


def id_value(identifier: IdLike | None) -> str | None:
    """Return the plain string form of any identifier, or None.

    Blank strings are not identifiers and come back as None, so two empty
    ids never compare equal as an ownership match.
    """
    if identifier is None:
        return None
    if isinstance(identifier, (UserId, ResourceId)):
        return identifier.value
    if isinstance(identifier, UUID):
        return str(identifier)
    if isinstance(identifier, str):
        return identifier.strip() or None
    return identifier
