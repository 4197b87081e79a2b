"""Domain error codes for the conference module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    EVENT_INACTIVE = "EVENT_INACTIVE"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_EVENT_DATA = "INVALID_EVENT_DATA"
    INVALID_USER_ID = "INVALID_USER_ID"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_REGISTERED = "NOT_REGISTERED"
    BANNED_FROM_EVENT = "BANNED_FROM_EVENT"
    USER_BANNED = "USER_BANNED"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    MIXED_SELECTION = "MIXED_SELECTION"
    EMPTY_SELECTION = "EMPTY_SELECTION"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INVALID_DOCUMENT = "INVALID_DOCUMENT"
    PARTIAL_BATCH_FAILURE = "PARTIAL_BATCH_FAILURE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class CapacityExceededError(DomainError):
    """Raised when an event has no seats left."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Event is at full capacity",
        )
        self.event_id = event_id


class EventInactiveError(DomainError):
    """Raised when registering for an event that is not orderable."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_INACTIVE,
            message="Event is no longer available",
        )
        self.event_id = event_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidEventDataError(DomainError):
    """Raised when event fields fail validation."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_DATA,
            message=f"Invalid event data: {detail}",
        )


class InvalidUserIdError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_USER_ID,
            message="Invalid user ID format",
        )


class NotAuthenticatedError(DomainError):
    """Raised when an operation needs a signed-in user."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_AUTHENTICATED,
            message="Login required",
        )


class NotRegisteredError(DomainError):
    """Raised when a user holds no registration for the event."""

    def __init__(self, user_id: str, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_REGISTERED,
            message="User is not registered for this event",
        )
        self.user_id = user_id
        self.event_id = event_id


class BannedFromEventError(DomainError):
    """Raised when a user is banned from the target event."""

    def __init__(self, user_id: str, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.BANNED_FROM_EVENT,
            message="User is banned from this event",
        )
        self.user_id = user_id
        self.event_id = event_id


class UserBannedError(DomainError):
    """Raised when a globally banned user tries to act."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.USER_BANNED,
            message="Account is banned",
        )
        self.user_id = user_id


class ProfileNotFoundError(DomainError):
    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.PROFILE_NOT_FOUND,
            message="User profile not found",
        )
        self.user_id = user_id


class MixedSelectionError(DomainError):
    """Raised when a bulk action does not fit every selected user."""

    def __init__(self, action: str) -> None:
        super().__init__(
            code=ErrorCode.MIXED_SELECTION,
            message=f"Cannot {action} this selection; select only users in the same ban state",
        )
        self.action = action


class EmptySelectionError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_SELECTION,
            message="Please select at least one user to perform this action",
        )


class StoreUnavailableError(DomainError):
    """Raised when the document store fails underneath an operation."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Storage is temporarily unavailable",
        )


class InvalidDocumentError(DomainError):
    """Raised when a stored document cannot be read back into a model."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DOCUMENT,
            message="Stored data could not be read",
        )
        self.kind = kind


class PartialBatchFailure(DomainError):
    """Raised when some items of a batch operation failed.

    ``failed`` holds one entry per failed sub-operation.
    """

    def __init__(self, failed: tuple, total: int) -> None:
        super().__init__(
            code=ErrorCode.PARTIAL_BATCH_FAILURE,
            message=f"Failed for {len(failed)} of {total} items",
        )
        self.failed = failed
