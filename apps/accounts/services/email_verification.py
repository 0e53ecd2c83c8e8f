"""Email confirmation service."""

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.debts.services import link_debts_to_customer

from .exceptions import InvalidTokenError

User = get_user_model()


@transaction.atomic
def verify_user_email(*, token: str) -> User:
    """
    Confirm a user's email with the token sent at registration.

    A confirmed customer is linked to unassigned debts addressed to the
    same email.

    Args:
        token: Confirmation token

    Returns:
        User instance

    Raises:
        InvalidTokenError: If token is invalid
    """
    if not token:
        raise InvalidTokenError("Invalid confirmation token")

    try:
        user = (
            User.objects
            .select_for_update()
            .get(verification_token=token, email_verified=False)
        )
    except User.DoesNotExist:
        raise InvalidTokenError("Invalid confirmation token")

    user.email_verified = True
    user.verification_token = None
    user.save(update_fields=['email_verified', 'verification_token'])

    link_debts_to_customer(customer=user)

    return user
