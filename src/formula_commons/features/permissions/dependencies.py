"""FastAPI permission dependencies.

The only place a False decision becomes an error: the dependencies below
raise PermissionDeniedError whenever the engine denies, without
distinguishing why. Services render it as 403 through
formula_commons.api.register_exception_handlers.
"""

import logging
from typing import Annotated, Any, Callable, List, Sequence

from fastapi import Depends

from ...core.exceptions import PermissionDeniedError
from .entities.flags import PermissionFlag
from .entities.resources import Actor
from .services import engine

logger = logging.getLogger(__name__)


def _denied(message: str, required: List[str]) -> PermissionDeniedError:
    return PermissionDeniedError(message, "PERMISSION_DENIED", {"required": required})


def _flag_label(flag: int) -> str:
    try:
        return PermissionFlag(flag).name or str(flag)
    except ValueError:
        return str(flag)


class PermissionDependencies:
    """FastAPI permission dependencies factory.

    ``actor_provider`` is the host service's dependency resolving the
    current Actor (session lookup plus profile load) for each request.
    """

    def __init__(self, actor_provider: Callable[..., Any]):
        self.actor_provider = actor_provider

    def require_flag(self, flag: int):
        """Require a single flag."""
        label = _flag_label(flag)

        async def dependency(
            actor: Annotated[Actor, Depends(self.actor_provider)]
        ) -> Actor:
            if not engine.has_flag(actor.permission_set, flag):
                logger.warning(f"Actor {actor.id} lacks permission: {label}")
                raise _denied(f"Permission required: {label}", [label])
            return actor

        return dependency

    def require_any(self, flags: Sequence[int]):
        """Require any of the specified flags."""
        flags = tuple(flags)
        labels = [_flag_label(flag) for flag in flags]

        async def dependency(
            actor: Annotated[Actor, Depends(self.actor_provider)]
        ) -> Actor:
            if not engine.has_any(actor.permission_set, flags):
                logger.warning(f"Actor {actor.id} lacks any permission from: {labels}")
                raise _denied(
                    f"One of these permissions required: {', '.join(labels)}",
                    labels,
                )
            return actor

        return dependency

    def require_all(self, flags: Sequence[int]):
        """Require all of the specified flags."""
        flags = tuple(flags)
        labels = [_flag_label(flag) for flag in flags]

        async def dependency(
            actor: Annotated[Actor, Depends(self.actor_provider)]
        ) -> Actor:
            if not engine.has_all(actor.permission_set, flags):
                logger.warning(f"Actor {actor.id} lacks required permissions: {labels}")
                raise _denied(
                    f"All permissions required: {', '.join(labels)}",
                    labels,
                )
            return actor

        return dependency

    def require_admin(self):
        """Require full user management."""
        return self.require_flag(PermissionFlag.MANAGE_ALL_USERS)
