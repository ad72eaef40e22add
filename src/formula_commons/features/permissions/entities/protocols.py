"""Protocol interfaces for permission feature dependency injection.

The engine never touches storage itself. Collaborators that do are injected
through these contracts so they can be replaced with in-memory fakes.
"""

from abc import abstractmethod
from typing import Awaitable, Optional, Protocol, Union, runtime_checkable

from ....config.constants import ApprovalType


@runtime_checkable
class ApproverLookup(Protocol):
    """Delegated approver relation: is actor a designated approver of a
    given type for a resource?

    Implementations may be synchronous or return an awaitable.
    """

    @abstractmethod
    def __call__(
        self,
        actor_id: str,
        resource_id: str,
        approval_type: ApprovalType,
    ) -> Union[bool, Awaitable[bool]]:
        ...


@runtime_checkable
class ActorProfileSource(Protocol):
    """Loads the stored permission columns of an actor's profile."""

    @abstractmethod
    async def get_permission_columns(self, actor_id: str) -> Optional[dict]:
        """Return {'id', 'role', 'permissions_bitwise', 'can_view_costs'} or None."""
        ...
