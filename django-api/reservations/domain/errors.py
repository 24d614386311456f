"""Domain error codes for the reservations module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ATTRACTION_NOT_FOUND = "ATTRACTION_NOT_FOUND"
    INSTRUMENT_NOT_FOUND = "INSTRUMENT_NOT_FOUND"
    INVALID_ATTRACTION_ID = "INVALID_ATTRACTION_ID"
    COMMIT_IN_PROGRESS = "COMMIT_IN_PROGRESS"
    CODE_COLLISION = "CODE_COLLISION"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str
    field: str | None = None

    def __str__(self) -> str:
        if self.field:
            return f"{self.code.value}: {self.field}: {self.message}"
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when a guard fails; names the failing field where there is one."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message=message,
            field=field,
        )


class WorkflowTransitionError(DomainError):
    """Raised when a workflow is asked for a transition its table does not allow."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_TRANSITION, message=message)


class AttractionNotFoundError(DomainError):
    """Raised when an attraction is not found in the catalog."""

    def __init__(self, attraction_id: str) -> None:
        super().__init__(
            code=ErrorCode.ATTRACTION_NOT_FOUND,
            message="Attraction not found",
        )
        self.attraction_id = attraction_id


class InvalidAttractionIdError(DomainError):
    """Raised when an attraction ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ATTRACTION_ID,
            message="Invalid attraction ID format",
        )


class InstrumentNotFoundError(DomainError):
    """Raised when a gift instrument code is unknown or deleted."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.INSTRUMENT_NOT_FOUND,
            message="Gift instrument not found",
        )
        self.instrument_code = code


class CommitInProgressError(DomainError):
    """Raised when a commit is requested while the previous one is outstanding."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.COMMIT_IN_PROGRESS,
            message="A commit for this workflow is already in progress",
        )


class CodeCollisionError(DomainError):
    """Raised when no unused gift instrument code could be generated."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            code=ErrorCode.CODE_COLLISION,
            message="Could not generate a unique gift instrument code",
        )
        self.attempts = attempts


class PersistenceError(DomainError):
    """Raised when the persistence store rejects or fails a write. Retryable."""

    def __init__(self, message: str = "Could not save the record, please retry") -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_FAILED, message=message)
