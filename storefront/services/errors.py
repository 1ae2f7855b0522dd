"""Error types raised by the service layer.

Each carries the code and HTTP status the API reports for it; see
``storefront.middleware.error_handler``.
"""


class StoreError(Exception):
    code = "ServerError"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self) -> dict:
        payload = {"success": False, "error": self.code, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvalidInput(StoreError):
    code = "InvalidInput"
    status_code = 400
    default_message = "Missing or invalid fields"


class DuplicateEmail(StoreError):
    code = "DuplicateEmail"
    status_code = 400
    default_message = "Email already registered"


class InvalidCredentials(StoreError):
    code = "InvalidCredentials"
    status_code = 400
    default_message = "Invalid email or password."


class Forbidden(StoreError):
    code = "Forbidden"
    status_code = 403
    default_message = "Access denied"


class NotFound(StoreError):
    code = "NotFound"
    status_code = 404
    default_message = "Resource not found"


class InsufficientStock(StoreError):
    code = "InsufficientStock"
    status_code = 409
    default_message = "Not enough stock to fulfil the order"
