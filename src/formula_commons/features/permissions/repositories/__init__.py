"""Concrete collaborators for the permission feature."""

from .approver_repository import AsyncPGApproverRepository, InMemoryApproverLookup
from .profile_repository import AsyncPGActorProfileRepository

__all__ = [
    "AsyncPGApproverRepository",
    "AsyncPGActorProfileRepository",
    "InMemoryApproverLookup",
]
