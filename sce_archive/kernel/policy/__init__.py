"""
Access Policy - clearance visibility and role-gated actions.
"""

from sce_archive.kernel.policy.access_policy import (
    Action,
    DenialReason,
    Requester,
    can_edit_own_profile,
    can_mutate,
    can_view,
    clearance_rank,
    filter_visible,
    mutation_denial,
    profile_update_denial,
    view_denial,
)
from sce_archive.kernel.policy.enforcement import (
    require_mutation,
    require_profile_update,
    require_view,
)

__all__ = [
    "Action",
    "DenialReason",
    "Requester",
    "can_edit_own_profile",
    "can_mutate",
    "can_view",
    "clearance_rank",
    "filter_visible",
    "mutation_denial",
    "profile_update_denial",
    "view_denial",
    "require_mutation",
    "require_profile_update",
    "require_view",
]
