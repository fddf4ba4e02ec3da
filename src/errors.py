"""Error taxonomy for pagecraft.

Three families, handled differently:

* ``ValidationIssue`` subclasses are plain data returned by the validation
  gate.  They are never raised.
* ``PersistenceError`` wraps network/server failures from an adapter.  It is
  the only error meant to reach the user as a message.
* ``InvariantViolation`` subclasses are programmer errors (bad placement,
  bad path, malformed patch).  Strict sessions raise them; lenient sessions
  log and ignore the offending call.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class PagecraftError(Exception):
    """Base class for all raised pagecraft errors."""


class PersistenceError(PagecraftError):
    """A fetch/save/publish/delete call to the backend failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message


class SchemaNotFound(PagecraftError, KeyError):
    """No document schema is registered under the requested name."""

    def __str__(self) -> str:
        return f"Unknown document schema: {self.args[0]!r}"


class InvariantViolation(PagecraftError):
    """A caller broke a structural rule of the document model."""


class InvalidPlacement(InvariantViolation):
    def __init__(self, placement: str, allowed: list[str]) -> None:
        super().__init__(f"Unknown placement {placement!r}; expected one of {allowed}")
        self.placement = placement


class UnknownCollection(InvariantViolation):
    def __init__(self, name: str) -> None:
        super().__init__(f"Document has no list named {name!r}")
        self.name = name


class InvalidPath(InvariantViolation):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot toggle {path!r}: {reason}")
        self.path = path


class InvalidPatch(InvariantViolation):
    """A patch produced a document that no longer validates."""


# ── Validation issues (data, never raised) ────────────────────────────


class IssueCode(StrEnum):
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INCOMPLETE_LOCALIZATION = "incomplete_localization"
    NON_FINITE_STYLE_VALUE = "non_finite_style_value"
    EMPTY_REQUIRED_COLLECTION = "empty_required_collection"


class ValidationIssue(BaseModel):
    """One user-fixable problem found by the validation gate."""

    model_config = ConfigDict(frozen=True)

    code: IssueCode

    @property
    def message(self) -> str:
        return self.code.value.replace("_", " ")


class MissingRequiredField(ValidationIssue):
    code: IssueCode = IssueCode.MISSING_REQUIRED_FIELD
    field: str

    @property
    def message(self) -> str:
        return f"'{self.field}' must be filled in at least one language"


class IncompleteLocalization(ValidationIssue):
    code: IssueCode = IssueCode.INCOMPLETE_LOCALIZATION
    list_name: str
    index: int

    @property
    def message(self) -> str:
        return f"'{self.list_name}' item #{self.index + 1} needs both MN and EN text"


class NonFiniteStyleValue(ValidationIssue):
    code: IssueCode = IssueCode.NON_FINITE_STYLE_VALUE
    path: str

    @property
    def message(self) -> str:
        return f"Style value at '{self.path}' is not a finite number"


class EmptyRequiredCollection(ValidationIssue):
    code: IssueCode = IssueCode.EMPTY_REQUIRED_COLLECTION
    collection: str

    @property
    def message(self) -> str:
        return f"'{self.collection}' needs at least one entry"
