"""Typed error kinds surfaced as JSON error bodies."""


class AppError(Exception):
    status_code = 400
    default_code = "bad_request"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_body(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationFailure(AppError):
    status_code = 400
    default_code = "validation_error"


class NotFoundError(AppError):
    status_code = 404
    default_code = "not_found"


class AuthenticationError(AppError):
    status_code = 401
    default_code = "unauthorized"


class UnexpectedFailure(AppError):
    status_code = 400
    default_code = "unexpected_error"


REQUIRED_FIELDS_MESSAGE = "All required fields must be filled"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
