"""Sign-in service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError, UnconfirmedAccountError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check email and password for admins and customers alike.

    The email lookup ignores case. An unknown email still runs the
    password hasher once, so both failures take about as long.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account deactivated by an admin
        UnconfirmedAccountError: Email not confirmed yet
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email)
        .first()
    )

    if user is None:
        User().set_password(password)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("Failed sign-in for %s", user.email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    if not user.email_verified:
        raise UnconfirmedAccountError("Please confirm your email address first")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user
