"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    UsernameTakenError,
    UserValidationError,
    SelfLockoutError,
)
from .user_authentication import authenticate_user
from .user_management import (
    list_users,
    create_user,
    update_user,
    set_user_password,
    deactivate_user,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'UsernameTakenError',
    'UserValidationError',
    'SelfLockoutError',
    # Services
    'authenticate_user',
    'list_users',
    'create_user',
    'update_user',
    'set_user_password',
    'deactivate_user',
]
