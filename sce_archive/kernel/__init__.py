"""
Kernel Layer

- Models: accounts, content records, posts, audit events
- Record Store: uniform CRUD over each collection
- Access Policy: clearance visibility and role-gated actions
- Identity: registration, credentials, sessions
- Events: append-only audit log
"""

from sce_archive.kernel.models import (
    Account,
    AccountRole,
    ClearanceLevel,
    ContentRecord,
    ObjectClass,
    Post,
    PostCategory,
    EventLog,
    EventType,
)

__all__ = [
    "Account",
    "AccountRole",
    "ClearanceLevel",
    "ContentRecord",
    "ObjectClass",
    "Post",
    "PostCategory",
    "EventLog",
    "EventType",
]
