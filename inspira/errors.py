"""
Error taxonomy shared by every feature package.
Routers never build error bodies themselves; main.py converts these at the boundary.
"""

from typing import Optional


class InspiraError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "field": self.field}


class ValidationError(InspiraError):
    """Missing or malformed required field"""
    status_code = 400
    default_message = "Invalid request"


class AuthorizationError(InspiraError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AuthorizationError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(InspiraError):
    """Referenced course or user is absent where required"""
    status_code = 404
    default_message = "Not found"


class StorageError(InspiraError):
    """Transaction or I/O failure; the operation was aborted"""
    status_code = 500
    default_message = "Storage failure"


def validation_error_from(errors: list) -> ValidationError:
    """Collapse a pydantic error list into one field-level ValidationError"""
    if not errors:
        return ValidationError()
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    return ValidationError(first.get("msg", ValidationError.default_message), field=".".join(loc) or None)
