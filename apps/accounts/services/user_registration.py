"""User registration service."""

import logging
import secrets

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole

from .emails import send_confirmation_email
from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


def register_user(
    *,
    email: str,
    password: str,
    locale: str,
    display_name: str = ""
) -> User:
    """
    Register a new customer and email a confirmation link.

    The role is always customer; it is not taken from the caller.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        locale: Locale for the confirmation link
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If registration fails
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists.")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name,
                role=UserRole.CUSTOMER,
                verification_token=secrets.token_urlsafe(32),
            )
    except Exception as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("Registered customer %s", user.email)

    try:
        send_confirmation_email(user, locale)
    except Exception:
        logger.exception("Confirmation email to %s could not be sent", user.email)

    return user
