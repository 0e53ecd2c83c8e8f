"""Errors raised by the accounts services; views map them to responses."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


# Registration & confirmation

class UserRegistrationError(AccountsServiceError):
    """The customer account could not be created."""
    pass


class InvalidTokenError(AccountsServiceError):
    """Unknown or already used confirmation / password reset token."""
    pass


# Sign-in

class InvalidCredentialsError(AccountsServiceError):
    """Unknown email or wrong password (never says which)."""
    pass


class InactiveAccountError(AccountsServiceError):
    pass


class UnconfirmedAccountError(AccountsServiceError):
    """Sign-in attempted before the email address was confirmed."""
    pass


# Account management

class UserNotFoundError(AccountsServiceError):
    pass


class AdminHasDebtsError(AccountsServiceError):
    """An admin who created debts cannot be deleted; the debts keep their author."""
    pass
