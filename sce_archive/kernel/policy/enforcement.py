"""
Turn policy denials into ForbiddenError for service-layer callers.
"""

import uuid
from typing import Any, Iterable, Optional

from sce_archive.errors import ForbiddenError
from sce_archive.kernel.policy.access_policy import (
    Action,
    ADMIN_ONLY_PROFILE_FIELDS,
    DenialReason,
    Requester,
    SELF_GUARDED_ACTIONS,
    mutation_denial,
    profile_update_denial,
    view_denial,
)
from sce_archive.logging_config import get_logger

logger = get_logger(__name__)

# Human phrasing of each action for insufficient_role messages
ACTION_DESCRIPTIONS = {
    Action.CREATE_CONTENT: "create content",
    Action.UPDATE_CONTENT: "update content",
    Action.DELETE_CONTENT: "delete content",
    Action.CHANGE_ACCOUNT_ROLE: "change account roles",
    Action.CHANGE_ACCOUNT_CLEARANCE: "change clearance levels",
    Action.CHANGE_ACCOUNT_POSITION: "change positions",
    Action.VIEW_ALL_ACCOUNTS: "view accounts",
}


def _deny(reason: DenialReason, requester: Optional[Requester], **params: Any) -> ForbiddenError:
    logger.warning(
        "Access denied",
        extra={
            "reason": reason.value,
            "requester_id": str(requester.id) if requester is not None else None,
            **{k: str(v) for k, v in params.items()},
        },
    )
    return ForbiddenError(reason, **params)


def require_view(requester: Optional[Requester], required_clearance: Any) -> None:
    reason = view_denial(requester, required_clearance)
    if reason is not None:
        raise _deny(reason, requester, required=required_clearance)


def require_mutation(
    requester: Optional[Requester],
    action: Action,
    target_account_id: Optional[uuid.UUID] = None,
) -> None:
    reason = mutation_denial(requester, action, target_account_id)
    if reason is not None:
        raise _deny(
            reason,
            requester,
            action=ACTION_DESCRIPTIONS[action],
            field=SELF_GUARDED_ACTIONS.get(action, ""),
        )


def require_profile_update(
    requester: Optional[Requester],
    target_account_id: uuid.UUID,
    fields: Iterable[str],
) -> None:
    fields = list(fields)
    reason = profile_update_denial(requester, target_account_id, fields)
    if reason is not None:
        privileged = sorted(ADMIN_ONLY_PROFILE_FIELDS.intersection(fields))
        raise _deny(
            reason,
            requester,
            action="edit this profile" if not privileged else f"change {' and '.join(privileged)}",
            field=" and ".join(privileged),
        )
