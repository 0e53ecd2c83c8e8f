"""
Accounts services: registration, confirmation, sign-in, password reset
and admin account deletion.
"""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidTokenError,
    InvalidCredentialsError,
    InactiveAccountError,
    UnconfirmedAccountError,
    UserNotFoundError,
    AdminHasDebtsError,
)
from .user_registration import register_user
from .email_verification import verify_user_email
from .user_authentication import authenticate_user
from .password_reset import request_password_reset, confirm_password_reset
from .account_management import delete_user_account

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidTokenError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UnconfirmedAccountError',
    'UserNotFoundError',
    'AdminHasDebtsError',
    # Registration & confirmation
    'register_user',
    'verify_user_email',
    # Sign-in
    'authenticate_user',
    # Password reset
    'request_password_reset',
    'confirm_password_reset',
    # Account management
    'delete_user_account',
]
