"""Draft error taxonomy.

Every precondition failure in the draft core surfaces as one of these.
Only ``ConflictError`` is safe to retry, and only after re-validating.
"""


class DraftError(Exception):
    """Base class for draft domain errors."""


class ValidationError(DraftError):
    """Raised when input or a pick violates draft rules."""


class InvalidStateError(DraftError):
    """Raised when an operation is attempted in the wrong league/draft state."""


class NotYourTurnError(DraftError):
    """Raised when a participant not on the clock tries to pick."""


class UnauthorizedError(DraftError):
    """Raised when the acting user may not act for a participant."""


class PlayerUnavailableError(ValidationError):
    """Raised when the player has already been drafted (or is not in the pool)."""


class PlayerNotAllowedError(ValidationError):
    """Raised when the player violates the roster-composition filter."""


class NoLegalPicksError(DraftError):
    """Raised when auto-pick finds an empty filtered pool.

    The remaining pool cannot satisfy the composition filter; an operator
    has to intervene.
    """


class ConflictError(DraftError):
    """Raised when a concurrent commit claimed the pick slot first."""


class NotFoundError(DraftError):
    """Raised when a record does not exist in the store."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} not found: {record_id}")
        self.entity = entity
        self.record_id = record_id
