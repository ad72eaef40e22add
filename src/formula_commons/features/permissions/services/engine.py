"""Bitwise authorization engine.

Every decision here is a pure function of its arguments: a permission set
(plain int), ids, a resource record and, for approvals only, an injected
approver lookup. Nothing is cached and nothing is shared, so the functions
are safe to call from any number of concurrent request handlers.

A denial is a False return, never an exception. Bits outside the registry
are inert: they are masked off before every test and never grant anything.
"""

import inspect
import logging
from typing import (
    Any,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from ....config.constants import ApprovalType, DEFAULT_COST_FIELDS
from ....core.value_objects import IdLike, id_value
from ..entities.flags import DEFINED_BITS_MASK, PermissionFlag
from ..entities.protocols import ApproverLookup
from ..entities.resources import Resource

logger = logging.getLogger(__name__)

F = PermissionFlag

ResourceLike = Union[Resource, Mapping[str, Any], None]
RecordT = TypeVar("RecordT")

# Holding any one flag of the set gives approval authority for that type
APPROVAL_FLAGS: Mapping[ApprovalType, Tuple[PermissionFlag, ...]] = {
    ApprovalType.SHOP_DRAWINGS: (F.APPROVE_SHOP_DRAWINGS, F.APPROVE_SHOP_DRAWINGS_CLIENT),
    ApprovalType.MATERIAL_SPECS: (F.MANAGE_MATERIALS,),
    ApprovalType.SCOPE_CHANGES: (F.APPROVE_SCOPE_CHANGES,),
}


def _as_bits(value: Any) -> int:
    """Reduce a permission set or flag to its defined bits.

    Non-integers, booleans and negative values contribute nothing.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value & DEFINED_BITS_MASK


def _coerce_approval_type(approval_type: Union[ApprovalType, str, None]) -> Optional[ApprovalType]:
    if isinstance(approval_type, ApprovalType):
        return approval_type
    try:
        return ApprovalType(approval_type)
    except ValueError:
        return None


def _resource_ids(resource: ResourceLike) -> Tuple[Optional[str], Optional[str]]:
    """(resource id, owner id) from a Resource or a raw record."""
    if resource is None:
        return None, None
    if isinstance(resource, Resource):
        return resource.id, resource.owner_id
    if isinstance(resource, Mapping):
        owner = resource.get("owner_id", resource.get("created_by"))
        return id_value(resource.get("id")), id_value(owner)
    return None, None


def _is_owner(resource: ResourceLike, actor_id: Optional[IdLike]) -> bool:
    _, owner_id = _resource_ids(resource)
    actor = id_value(actor_id)
    return owner_id is not None and actor is not None and owner_id == actor


# --- Flag tests -------------------------------------------------------------

def has_flag(permission_set: int, flag: int) -> bool:
    """True iff the permission set contains the flag."""
    return (_as_bits(permission_set) & _as_bits(flag)) != 0


def has_any(permission_set: int, flags: Iterable[int]) -> bool:
    """True if any flag is held; an empty list is never satisfied."""
    return any(has_flag(permission_set, flag) for flag in flags)


def has_all(permission_set: int, flags: Iterable[int]) -> bool:
    """True if every flag is held; an empty list is vacuously satisfied."""
    return all(has_flag(permission_set, flag) for flag in flags)


# --- Set arithmetic ---------------------------------------------------------

def add_flag(permission_set: int, flag: int) -> int:
    """Return a new permission set with the flag added."""
    if isinstance(flag, bool) or not isinstance(flag, int) or flag < 0:
        return permission_set
    return int(permission_set) | int(flag)


def remove_flag(permission_set: int, flag: int) -> int:
    """Return a new permission set with the flag removed."""
    if isinstance(flag, bool) or not isinstance(flag, int) or flag < 0:
        return permission_set
    # int() first: inverting an IntFlag stays inside the registry's bits
    return int(permission_set) & ~int(flag)


# --- Resource decisions -----------------------------------------------------

def can_manage_resource(
    permission_set: int,
    resource: ResourceLike,
    actor_id: Optional[IdLike],
) -> bool:
    """Owner of the resource, or holder of MANAGE_ALL_PROJECTS.

    Ownership needs no role flag at all. A resource without an owner id
    (not yet persisted) falls through to the role check.
    """
    return has_flag(permission_set, F.MANAGE_ALL_PROJECTS) or _is_owner(resource, actor_id)


def can_access_resource(
    permission_set: int,
    resource: ResourceLike,
    actor_id: Optional[IdLike],
    is_assigned: bool = False,
) -> bool:
    """View access: owner, VIEW_ALL_PROJECTS, or assigned with VIEW_ASSIGNED_PROJECTS."""
    if has_flag(permission_set, F.VIEW_ALL_PROJECTS):
        return True
    if _is_owner(resource, actor_id):
        return True
    return is_assigned is True and has_flag(permission_set, F.VIEW_ASSIGNED_PROJECTS)


def holds_approval_flag(
    permission_set: int,
    approval_type: Union[ApprovalType, str],
) -> bool:
    """Whether the role grants any approval authority for this type."""
    kind = _coerce_approval_type(approval_type)
    if kind is None:
        return False
    return has_any(permission_set, APPROVAL_FLAGS[kind])


def _approval_precheck(
    permission_set: int,
    resource: ResourceLike,
    actor_id: Optional[IdLike],
    approval_type: Union[ApprovalType, str],
) -> Tuple[Optional[bool], Optional[Tuple[str, str, ApprovalType]]]:
    """Everything in an approval decision that precedes the lookup.

    Returns (decision, lookup arguments). The decision is None only when the
    delegated approver relation alone can answer.
    """
    kind = _coerce_approval_type(approval_type)
    if kind is None or not has_any(permission_set, APPROVAL_FLAGS[kind]):
        return False, None

    if has_flag(permission_set, F.MANAGE_ALL_PROJECTS):
        return True, None

    if _is_owner(resource, actor_id):
        return True, None

    resource_id, _ = _resource_ids(resource)
    actor = id_value(actor_id)
    if resource_id is None or actor is None:
        return False, None
    return None, (actor, resource_id, kind)


async def can_approve(
    permission_set: int,
    resource: ResourceLike,
    actor_id: Optional[IdLike],
    approval_type: Union[ApprovalType, str],
    approver_lookup: Optional[ApproverLookup] = None,
) -> bool:
    """Approval decision for one resource.

    An approval flag for the type is mandatory; ownership and delegation
    never substitute for it. With a flag held, the actor qualifies through
    MANAGE_ALL_PROJECTS, then ownership, then the delegated approver
    relation. The lookup is called at most once, only when the first two
    checks failed, and any error it raises propagates unchanged.
    """
    decision, lookup_args = _approval_precheck(permission_set, resource, actor_id, approval_type)
    if decision is not None:
        return decision
    if approver_lookup is None:
        return False

    result = approver_lookup(*lookup_args)
    if inspect.isawaitable(result):
        result = await result
    return bool(result)


def can_approve_sync(
    permission_set: int,
    resource: ResourceLike,
    actor_id: Optional[IdLike],
    approval_type: Union[ApprovalType, str],
    approver_lookup: Optional[ApproverLookup] = None,
) -> bool:
    """Synchronous twin of can_approve for handlers with a blocking lookup.

    Raises:
        TypeError: the lookup returned an awaitable; use can_approve instead
    """
    decision, lookup_args = _approval_precheck(permission_set, resource, actor_id, approval_type)
    if decision is not None:
        return decision
    if approver_lookup is None:
        return False

    result = approver_lookup(*lookup_args)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError("approver_lookup is asynchronous; await can_approve() instead")
    return bool(result)


# --- Financial visibility ---------------------------------------------------

def can_view_financial_data(permission_set: int) -> bool:
    """Cost visibility is role-only; owning a project does not grant it."""
    return has_flag(permission_set, F.VIEW_FINANCIAL_DATA)


def can_edit_costs(permission_set: int) -> bool:
    """Editing costs needs both visibility and expense approval."""
    return has_all(permission_set, (F.VIEW_FINANCIAL_DATA, F.APPROVE_EXPENSES))


def is_admin(permission_set: int) -> bool:
    """Administrators are defined by full user management."""
    return has_flag(permission_set, F.MANAGE_ALL_USERS)


def _strip_fields(record: Any, fields: Sequence[str]) -> Any:
    if isinstance(record, Mapping):
        return {key: value for key, value in record.items() if key not in fields}
    if hasattr(record, "model_dump"):
        return record.model_dump(exclude=set(fields))
    raise TypeError(f"Cannot filter fields of {type(record).__name__}")


def filter_financial_fields(
    records: Sequence[RecordT],
    permission_set: int,
    field_names: Optional[Iterable[str]] = None,
) -> Union[Sequence[RecordT], List[dict]]:
    """Remove cost fields from records the actor may not see.

    With financial visibility the input collection is returned as is.
    Without it a new list of new dicts is returned with the named fields
    absent (not nulled); the input records are never modified.
    """
    if can_view_financial_data(permission_set):
        return records

    fields = tuple(field_names) if field_names is not None else DEFAULT_COST_FIELDS
    logger.debug(f"Stripping cost fields {fields} from {len(records)} records")
    return [_strip_fields(record, fields) for record in records]


def filter_financial_record(
    record: RecordT,
    permission_set: int,
    field_names: Optional[Iterable[str]] = None,
) -> Union[RecordT, dict]:
    """Single-record form of filter_financial_fields."""
    return filter_financial_fields([record], permission_set, field_names)[0]
