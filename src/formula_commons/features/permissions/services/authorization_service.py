"""Authorization service orchestrating engine decisions for a request.

Bundles the injected approver lookup, the role table and settings so that
request handlers can ask context-level questions. Holds no per-request
state: every call reads the AuthorizationContext it is given.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from ....config.constants import ApprovalType
from ....config.settings import PermissionSettings, get_settings
from ..entities.flags import permission_names
from ..entities.protocols import ApproverLookup
from ..entities.resources import AuthorizationContext
from ..entities.roles import DEFAULT_ROLE_TABLE, RoleKey, RoleTable
from . import engine


logger = logging.getLogger(__name__)


class AuthorizationService:
    """Context-level facade over the bitwise engine."""

    def __init__(
        self,
        approver_lookup: Optional[ApproverLookup] = None,
        role_table: RoleTable = DEFAULT_ROLE_TABLE,
        settings: Optional[PermissionSettings] = None,
    ):
        self.approver_lookup = approver_lookup
        self.role_table = role_table
        self.settings = settings or get_settings()

    def _record(self, decision: bool, context: AuthorizationContext, what: str) -> bool:
        if not decision and self.settings.log_denials:
            logger.info(
                f"Denied {what} for actor {context.actor_id} "
                f"(permissions={context.permission_set})"
            )
        return decision

    # Role table

    def role_value(self, role: RoleKey) -> int:
        """Permission set for a role name; unknown roles resolve to 0."""
        return self.role_table.role_value(role)

    def describe(self, context: AuthorizationContext) -> dict:
        """Diagnostic summary of the actor's permissions."""
        role = self.role_table.role_for_permissions(context.permission_set)
        return {
            "actor_id": context.actor_id,
            "permission_set": context.permission_set,
            "role": role.value if role else None,
            "permissions": permission_names(context.permission_set),
            "is_admin": engine.is_admin(context.permission_set),
            "can_view_costs": engine.can_view_financial_data(context.permission_set),
        }

    # Flag checks

    def check(self, context: AuthorizationContext, flag: int) -> bool:
        """Check a single flag."""
        return self._record(
            engine.has_flag(context.permission_set, flag), context, f"flag {flag}"
        )

    def check_any(self, context: AuthorizationContext, flags: Sequence[int]) -> bool:
        """Check that at least one flag is held."""
        return self._record(
            engine.has_any(context.permission_set, flags), context, f"any of {list(flags)}"
        )

    def check_all(self, context: AuthorizationContext, flags: Sequence[int]) -> bool:
        """Check that every flag is held."""
        return self._record(
            engine.has_all(context.permission_set, flags), context, f"all of {list(flags)}"
        )

    # Resource checks

    def can_manage(self, context: AuthorizationContext) -> bool:
        """Manage the context's resource (ownership or MANAGE_ALL_PROJECTS)."""
        return self._record(
            engine.can_manage_resource(context.permission_set, context.resource, context.actor_id),
            context,
            "manage",
        )

    def can_access(self, context: AuthorizationContext, is_assigned: bool = False) -> bool:
        """View the context's resource."""
        return self._record(
            engine.can_access_resource(
                context.permission_set, context.resource, context.actor_id, is_assigned
            ),
            context,
            "access",
        )

    async def can_approve(
        self,
        context: AuthorizationContext,
        approval_type: Union[ApprovalType, str],
    ) -> bool:
        """Approve the context's resource; the context's lookup wins over the service's."""
        lookup = context.approver_lookup or self.approver_lookup
        decision = await engine.can_approve(
            context.permission_set,
            context.resource,
            context.actor_id,
            approval_type,
            lookup,
        )
        return self._record(decision, context, f"approve {approval_type}")

    # Data shaping

    def can_view_financial_data(self, context: AuthorizationContext) -> bool:
        """Role-only cost visibility."""
        return engine.can_view_financial_data(context.permission_set)

    def filter_financial_fields(
        self,
        context: AuthorizationContext,
        records: Sequence,
        field_names: Optional[Iterable[str]] = None,
    ) -> Union[Sequence, List[dict]]:
        """Strip configured cost fields unless the actor may see costs."""
        fields = field_names if field_names is not None else self.settings.cost_fields
        return engine.filter_financial_fields(records, context.permission_set, fields)
