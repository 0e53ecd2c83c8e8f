"""Account management service."""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import ProtectedError
from django.contrib.auth import get_user_model

from .exceptions import AdminHasDebtsError, UserNotFoundError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def delete_user_account(*, user_id: UUID, deleted_by: User) -> None:
    """
    Delete an account.

    Debts linked to a deleted customer stay, with the link cleared.
    An admin who created debts cannot be deleted.

    Args:
        user_id: ID of the account to delete
        deleted_by: Admin performing the deletion

    Raises:
        UserNotFoundError: If the account does not exist
        AdminHasDebtsError: If the account is an admin with created debts
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    try:
        user.delete()
    except ProtectedError:
        raise AdminHasDebtsError("Cannot delete an admin who has created debts")

    logger.info("Admin %s deleted account %s", deleted_by.email, user.email)
