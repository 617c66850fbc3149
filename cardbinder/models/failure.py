"""
Failure classification for catalog operations.

Every error the system knows how to explain is a KnownError subclass.
KnownError carries a FailureKind, a user-appropriate message, optional
technical detail and a suggested action. The API layer turns any KnownError
into a FailureDetail body with the error's status code.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Resource failures
    NOT_FOUND = "not_found"

    # Constraint violations
    CONSTRAINT_VIOLATION = "constraint_violation"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail body."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class MissingMetadataError(KnownError):
    """
    A series page lacks metadata required for ingestion.

    Raised when the "Release dates" block is missing or empty. The series
    cannot be told apart from others sharing its name, so the whole
    ingestion run for that page is abandoned.
    """

    def __init__(self, label: str, detail: str | None = None):
        self.label = label
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message=f"Couldn't parse {label.lower()} from the series page.",
            detail=detail,
            suggestion="Check that the page has an infobox with a release date.",
            status_code=422,
        )


class UnknownCardError(KnownError):
    """No card with the given number exists in the catalog."""

    def __init__(self, number: str):
        self.number = number
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Card '{number}' is not in the catalog.",
            suggestion="Load the series containing this card first.",
            status_code=404,
        )


class UnknownRarityError(KnownError):
    """An export references a rarity that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Encountered undefined rarity: {name}",
            suggestion="Add the rarity before loading cards that use it.",
            status_code=400,
        )


class NegativeCountError(KnownError):
    """An ownership delta would leave a card with fewer than zero copies."""

    def __init__(self, number: str, current: int, delta: int):
        self.number = number
        self.current = current
        self.delta = delta
        super().__init__(
            kind=FailureKind.CONSTRAINT_VIOLATION,
            message=f"Card '{number}' cannot go below zero copies.",
            detail=f"current={current} delta={delta}",
            status_code=409,
        )


class CatalogClientError(KnownError):
    """The catalog store could not be reached or rejected a request."""

    def __init__(self, message: str, detail: str | None = None, status_code: int = 502):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            detail=detail,
            suggestion="Check that the catalog server is running, then retry.",
            status_code=status_code,
        )


class OwnershipSyncError(KnownError):
    """
    An ownership adjustment failed.

    The local count has already been restored to its pre-adjustment value
    when this is raised.
    """

    def __init__(
        self,
        number: str,
        delta: int,
        message: str,
        kind: FailureKind = FailureKind.EXTERNAL_API_ERROR,
        detail: str | None = None,
    ):
        self.number = number
        self.delta = delta
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion="The count was left unchanged. Try again.",
            status_code=409 if kind == FailureKind.CONSTRAINT_VIOLATION else 502,
        )
