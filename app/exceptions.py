# app/exceptions.py
from typing import Dict, List, Optional

FieldErrors = Dict[str, List[str]]


class PortalError(Exception):
    """Base error for portal operations. Rendered by the handlers in app.main."""

    status_code = 500
    default_message = "An error occurred while processing your request. Please try again."

    def __init__(self, message: Optional[str] = None, errors: Optional[FieldErrors] = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(PortalError):
    """Field-scoped validation failure; carries every collected message."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: FieldErrors, message: Optional[str] = None):
        super().__init__(message, errors)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class Conflict(PortalError):
    status_code = 409
    default_message = "Conflict"

    @classmethod
    def on_field(cls, field: str, message: str) -> "Conflict":
        return cls(message, {field: [message]})


class StorageFailure(PortalError):
    status_code = 500
    default_message = "An error occurred while uploading the file"


class DependencyFailure(PortalError):
    status_code = 502
    default_message = "An external service failed"


class AuthenticationFailed(PortalError):
    status_code = 401
    default_message = "Invalid email or password"
