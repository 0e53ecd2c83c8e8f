"""Password reset service."""

from django.db import transaction
from django.contrib.auth import get_user_model
import secrets

from .emails import send_password_reset_email
from .exceptions import UserNotFoundError, InvalidTokenError

User = get_user_model()


def request_password_reset(*, email: str, locale: str) -> str:
    """
    Generate a password reset token and email it to the user.

    Args:
        email: User's email address
        locale: Locale for the reset link

    Returns:
        Reset token

    Raises:
        UserNotFoundError: If user does not exist
    """
    with transaction.atomic():
        try:
            user = (
                User.objects
                .select_for_update()
                .get(email__iexact=email, is_active=True)
            )
        except User.DoesNotExist:
            raise UserNotFoundError(f"No active user with email: {email}")

        reset_token = secrets.token_urlsafe(32)
        user.password_reset_token = reset_token
        user.save(update_fields=['password_reset_token'])

    send_password_reset_email(user, reset_token, locale)

    return reset_token


@transaction.atomic
def confirm_password_reset(*, token: str, new_password: str) -> User:
    """
    Reset user password with token.

    Args:
        token: Reset token
        new_password: New password

    Returns:
        User instance

    Raises:
        InvalidTokenError: If token is invalid or expired
    """
    if not token:
        raise InvalidTokenError("Invalid or expired reset token")

    try:
        user = (
            User.objects
            .select_for_update()
            .get(password_reset_token=token, is_active=True)
        )
    except User.DoesNotExist:
        raise InvalidTokenError("Invalid or expired reset token")

    # Set new password and clear token
    user.set_password(new_password)
    user.password_reset_token = None
    user.save(update_fields=['password', 'password_reset_token'])

    return user
