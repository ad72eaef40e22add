"""Identifier value objects."""

from .identifiers import IdLike, ResourceId, UserId, id_value

__all__ = [
    "IdLike",
    "ResourceId",
    "UserId",
    "id_value",
]
