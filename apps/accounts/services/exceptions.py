"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class UsernameTakenError(AccountsServiceError):
    """Raised when another account already uses the username."""
    pass


class UserValidationError(AccountsServiceError):
    """Raised when user input is unusable (short username or password, unknown role)."""
    pass


class SelfLockoutError(AccountsServiceError):
    """Raised when an admin tries to deactivate or demote their own account."""
    pass
