"""
Error taxonomy for archive operations.

Every failure a caller can observe is one of these. Each error carries a
machine-readable ``code``, a message-catalog key and the parameters needed
to render that message in the configured locale. The API layer turns them
into JSON responses; nothing below the API raises HTTPException.
"""

from typing import Any, Optional

from sce_archive.messages import DEFAULT_LOCALE, render_message


class ArchiveError(Exception):
    """Base class for all expected archive failures."""

    code = "archive_error"

    def __init__(self, message_key: str, **params: Any):
        self.message_key = message_key
        self.params = params
        super().__init__(self.render())

    def render(self, locale: str = DEFAULT_LOCALE) -> str:
        """Render the user-facing message in the given locale."""
        return render_message(self.message_key, locale, **self.params)

    def to_dict(self, locale: str = DEFAULT_LOCALE) -> dict[str, Any]:
        return {"detail": self.render(locale), "code": self.code}


class ValidationError(ArchiveError):
    """Missing/invalid input; never fatal."""

    code = "validation_error"

    @classmethod
    def required(cls, field: str) -> "ValidationError":
        return cls("validation.required_field", field=field)

    @classmethod
    def password_mismatch(cls) -> "ValidationError":
        return cls("validation.password_mismatch")


class DuplicateKeyError(ArchiveError):
    """A uniqueness invariant would be violated."""

    code = "duplicate_key"

    def __init__(self, field: str, value: Any = None):
        self.field = field
        self.value = value
        key = f"duplicate.{field}"
        if field not in ("email", "username", "external_number"):
            key = "duplicate.generic"
        super().__init__(key, field=field, value=value)

    def to_dict(self, locale: str = DEFAULT_LOCALE) -> dict[str, Any]:
        data = super().to_dict(locale)
        data["field"] = self.field
        return data


class NotFoundError(ArchiveError):
    """An operation targeted an id that does not exist."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        key = f"not_found.{entity}"
        if entity not in ("account", "content_record", "post"):
            key = "not_found.generic"
        super().__init__(key, entity=entity, id=entity_id)


class ForbiddenError(ArchiveError):
    """
    The access policy denied the action.

    ``reason`` distinguishes an anonymous caller (not_authenticated) from an
    authenticated one lacking role or clearance, and from a blocked
    self-modification.
    """

    code = "forbidden"

    def __init__(self, reason: Any, **params: Any):
        self.reason = str(getattr(reason, "value", reason))
        super().__init__(f"forbidden.{self.reason}", **params)

    @property
    def is_authentication_failure(self) -> bool:
        return self.reason == "not_authenticated"

    def to_dict(self, locale: str = DEFAULT_LOCALE) -> dict[str, Any]:
        data = super().to_dict(locale)
        data["reason"] = self.reason
        return data


class CredentialError(ArchiveError):
    """
    Login failed.

    The same message is used for an unknown email and a wrong password so the
    response does not reveal which accounts exist.
    """

    code = "invalid_credentials"

    def __init__(self, message_key: Optional[str] = None):
        super().__init__(message_key or "credential.invalid")
