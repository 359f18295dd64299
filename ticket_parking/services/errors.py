"""Error taxonomy for ticket operations."""

from enum import Enum


class ErrorCode(Enum):
    INVALID_TICKET = "INVALID_TICKET"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class TicketError(Exception):
    """Base error with a code and a user-safe message."""

    code: ErrorCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class TicketValidationError(TicketError):
    """Creation or close input rejected before any storage access."""

    code = ErrorCode.INVALID_TICKET


class TicketNotFoundError(TicketError):
    """No ticket with this id in the expected collection."""

    code = ErrorCode.TICKET_NOT_FOUND

    def __init__(self, ticket_id: str, collection: str = "active"):
        super().__init__(f"Ticket {ticket_id} not found in {collection} tickets")
        self.ticket_id = ticket_id
        self.collection = collection


class TicketStorageError(TicketError):
    """The key-value store could not be read or written."""

    code = ErrorCode.STORAGE_FAILURE
