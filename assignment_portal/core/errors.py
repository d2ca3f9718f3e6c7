"""
Tassonomia degli errori del portale.

Ogni errore porta un ``kind`` stabile (il nome usato dai client per
distinguere i casi) e lo status HTTP con cui il router lo espone.
I ``DomainError`` sono esiti attesi; ``StorageFailure`` è l'unico
caso inatteso e viene gestito a livello di applicazione.
"""
from typing import List, Optional


class PortalError(Exception):
    kind = "PortalError"
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"kind": self.kind, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class DomainError(PortalError):
    kind = "DomainError"
    status_code = 400
    default_message = "Request rejected"


class Unauthenticated(DomainError):
    kind = "Unauthenticated"
    status_code = 401
    default_message = "Authentication required"


class InsufficientRole(DomainError):
    kind = "InsufficientRole"
    status_code = 403
    default_message = "Access denied. Insufficient permissions"


class NotOwner(DomainError):
    kind = "NotOwner"
    status_code = 403
    default_message = "Access denied"


class NotFound(DomainError):
    kind = "NotFound"
    status_code = 404
    default_message = "Resource not found"


class InvalidState(DomainError):
    kind = "InvalidState"
    default_message = "Operation not allowed in the current state"


class InvalidTransition(DomainError):
    kind = "InvalidTransition"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot change status from {from_status} to {to_status}")


class HasSubmissions(DomainError):
    kind = "HasSubmissions"
    default_message = "Cannot delete assignment with existing submissions"


class NotAvailable(DomainError):
    kind = "NotAvailable"
    default_message = "Assignment is not available for submission"


class DeadlinePassed(DomainError):
    kind = "DeadlinePassed"
    default_message = "Assignment due date has passed"


class AlreadySubmitted(DomainError):
    kind = "AlreadySubmitted"
    default_message = "You have already submitted this assignment"


class ValidationFailed(DomainError):
    kind = "ValidationFailed"
    default_message = "Validation failed"


class InvalidDueDate(ValidationFailed):
    def __init__(self):
        super().__init__(errors=["dueDate: Due date must be in the future"])


class StorageFailure(PortalError):
    kind = "StorageFailure"
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message)
