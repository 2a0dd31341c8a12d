"""Domain errors raised by services and mapped to HTTP responses by the endpoints."""
from typing import Optional


class AccountServiceError(Exception):
    """Base class for account service errors."""

    detail = "Account service error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.detail)
        self.detail = detail or self.detail


class ConfigurationError(AccountServiceError):
    detail = "Invalid configuration"


class InvalidCredentialsError(AccountServiceError):
    # Same message for unknown login and wrong password
    detail = "Incorrect login or password"


class InvalidTokenError(AccountServiceError):
    detail = "Could not validate credentials"


class UserAlreadyExistsError(AccountServiceError):
    detail = "User with the same login already exist"


class UserNotFoundError(AccountServiceError):
    detail = "User with that id is not exist"
