"""
Access policy evaluation.

Pure functions over a requester (an Account-like object, or None for an
anonymous caller) and the clearance/ownership facts of a resource. Nothing
here touches the database or raises: callers turn a denial into a
ForbiddenError using the reason returned by the ``*_denial`` helpers.

Each boolean check is defined as "its denial helper returned None", so the
yes/no answer and the explanation cannot disagree.
"""

import uuid
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Protocol, TypeVar

from sce_archive.kernel.models.account import AccountRole, ClearanceLevel

T = TypeVar("T")

LOWEST_CLEARANCE = int(ClearanceLevel.LEVEL_1)
HIGHEST_CLEARANCE = int(ClearanceLevel.LEVEL_5)

# Profile fields only an Admin may set, on anyone
ADMIN_ONLY_PROFILE_FIELDS = frozenset({"role", "clearance"})


class Requester(Protocol):
    id: uuid.UUID
    role: Any
    clearance: Optional[int]


class Action(str, Enum):
    """Privileged actions gated by role."""
    CREATE_CONTENT = "create_content"
    UPDATE_CONTENT = "update_content"
    DELETE_CONTENT = "delete_content"
    CHANGE_ACCOUNT_ROLE = "change_account_role"
    CHANGE_ACCOUNT_CLEARANCE = "change_account_clearance"
    CHANGE_ACCOUNT_POSITION = "change_account_position"
    VIEW_ALL_ACCOUNTS = "view_all_accounts"


# Actions an Admin may not aim at their own account
SELF_GUARDED_ACTIONS = {
    Action.CHANGE_ACCOUNT_ROLE: "role",
    Action.CHANGE_ACCOUNT_CLEARANCE: "clearance",
}


class DenialReason(str, Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    INSUFFICIENT_ROLE = "insufficient_role"
    INSUFFICIENT_CLEARANCE = "insufficient_clearance"
    SELF_MODIFICATION = "self_modification"
    EMAIL_NOT_VERIFIED = "email_not_verified"


def clearance_rank(level: Any, default: int = LOWEST_CLEARANCE) -> int:
    """
    Integer rank of a clearance value.

    Accepts ints, ClearanceLevel members, numeric strings and the legacy
    "LEVEL_n" spelling. An unset clearance ranks lowest; an unreadable one
    ranks as ``default``.
    """
    if level is None:
        return LOWEST_CLEARANCE
    if isinstance(level, int):
        return int(level)
    text = str(getattr(level, "value", level)).strip().upper()
    if text.startswith("LEVEL_"):
        text = text[len("LEVEL_"):]
    try:
        return int(text)
    except ValueError:
        return default


def _is_admin(requester: Optional[Requester]) -> bool:
    return requester is not None and requester.role == AccountRole.ADMIN


def _is_self(requester: Requester, account_id: Any) -> bool:
    return account_id is not None and str(account_id) == str(requester.id)


# -- Read visibility --------------------------------------------------------

def view_denial(requester: Optional[Requester], required_clearance: Any) -> Optional[DenialReason]:
    """Why ``requester`` may not view a resource gated at ``required_clearance``, or None."""
    if required_clearance is None:
        return None
    # An unreadable requirement gates at the top level
    required = clearance_rank(required_clearance, default=HIGHEST_CLEARANCE)
    if requester is None:
        if required == LOWEST_CLEARANCE:
            return None
        return DenialReason.NOT_AUTHENTICATED
    if clearance_rank(requester.clearance) >= required:
        return None
    return DenialReason.INSUFFICIENT_CLEARANCE


def can_view(requester: Optional[Requester], required_clearance: Any) -> bool:
    return view_denial(requester, required_clearance) is None


def filter_visible(
    requester: Optional[Requester],
    resources: Iterable[T],
    clearance_of: Callable[[T], Any],
) -> List[T]:
    """Resources the requester may view, in their original order."""
    return [r for r in resources if can_view(requester, clearance_of(r))]


# -- Privileged actions -----------------------------------------------------

def mutation_denial(
    requester: Optional[Requester],
    action: Action,
    target_account_id: Optional[uuid.UUID] = None,
) -> Optional[DenialReason]:
    """Why ``requester`` may not perform ``action``, or None."""
    if requester is None:
        return DenialReason.NOT_AUTHENTICATED
    if not _is_admin(requester):
        return DenialReason.INSUFFICIENT_ROLE
    if action in SELF_GUARDED_ACTIONS and _is_self(requester, target_account_id):
        return DenialReason.SELF_MODIFICATION
    return None


def can_mutate(
    requester: Optional[Requester],
    action: Action,
    target_account_id: Optional[uuid.UUID] = None,
) -> bool:
    return mutation_denial(requester, action, target_account_id) is None


# -- Profile editing --------------------------------------------------------

def can_edit_own_profile(requester: Optional[Requester], target_account_id: uuid.UUID) -> bool:
    """A profile is editable by its owner and by any Admin."""
    if requester is None:
        return False
    return _is_self(requester, target_account_id) or _is_admin(requester)


def profile_update_denial(
    requester: Optional[Requester],
    target_account_id: uuid.UUID,
    fields: Iterable[str] = (),
) -> Optional[DenialReason]:
    """
    Why ``requester`` may not write ``fields`` on the target profile, or None.

    role and clearance are Admin-only even on one's own profile, and an
    Admin may not change their own.
    """
    if requester is None:
        return DenialReason.NOT_AUTHENTICATED
    if not can_edit_own_profile(requester, target_account_id):
        return DenialReason.INSUFFICIENT_ROLE
    privileged = ADMIN_ONLY_PROFILE_FIELDS.intersection(fields)
    if privileged:
        if not _is_admin(requester):
            return DenialReason.INSUFFICIENT_ROLE
        if _is_self(requester, target_account_id):
            return DenialReason.SELF_MODIFICATION
    return None
