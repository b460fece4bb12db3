"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    PasswordConfirmationError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, ensure_can_sign_in
from .magic_link import request_magic_link, verify_magic_link
from .account_management import delete_user_account

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'UserNotFoundError',
    'PasswordConfirmationError',
    # Services
    'register_user',
    'authenticate_user',
    'ensure_can_sign_in',
    'request_magic_link',
    'verify_magic_link',
    'delete_user_account',
]
