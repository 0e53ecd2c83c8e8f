"""Debt management service - admin CRUD and notification dispatch."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import Sum

from apps.accounts.models import User
from apps.debts.models import Debt, DebtStatus
from apps.debts.tokens import MAX_TOKEN_ATTEMPTS, TokenGenerationError

from .exceptions import (
    DebtNotFoundError,
    DebtValidationError,
    NotificationDeliveryError,
)
from .lifecycle import record_notification
from .notification import send_debt_notification

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'amount',
    'due_date',
    'customer_email',
    'description',
    'status',
    'customer_user',
)


@dataclass(frozen=True)
class NotificationResult:
    debt: Debt
    notification_delivered: bool


def _validate(debt: Debt, exclude=None) -> None:
    try:
        debt.full_clean(exclude=exclude)
    except ValidationError as e:
        raise DebtValidationError(e.message_dict)


def _validate_customer(customer_user: Optional[User]) -> None:
    if customer_user is not None and not customer_user.is_customer:
        raise DebtValidationError({
            'customer_user': ['Debts can only be linked to customer accounts.']
        })


def _insert_with_unique_token(debt: Debt, token_supplied: bool) -> None:
    """
    Insert a new debt, regenerating its token on a storage collision.

    A supplied token is never replaced; a collision on it is a
    validation error. Other integrity failures propagate.
    """
    for attempt in range(MAX_TOKEN_ATTEMPTS):
        try:
            with transaction.atomic():
                debt.save()
            return
        except IntegrityError:
            if not Debt.objects.filter(token=debt.token).exists():
                raise
            if token_supplied or attempt == MAX_TOKEN_ATTEMPTS - 1:
                raise DebtValidationError({
                    'token': ['Debt with this token already exists.']
                })
            debt.token = ''
            debt._state.adding = True


def dispatch_notification(*, debt: Debt, locale: str) -> NotificationResult:
    """
    Send the notification and record it on the debt.

    The status update happens whether or not the send raised; a failed
    send is logged and reported back, never propagated.
    """
    delivered = True
    try:
        send_debt_notification(debt=debt, locale=locale)
    except NotificationDeliveryError:
        delivered = False
        logger.exception("Notification for debt %s could not be delivered", debt.pk)

    record_notification(debt)
    return NotificationResult(debt=debt, notification_delivered=delivered)


def create_debt(
    *,
    admin_user: User,
    locale: str,
    amount: Decimal,
    due_date: date,
    customer_email: str,
    description: str = '',
    customer_user: Optional[User] = None,
    token: Optional[str] = None
) -> NotificationResult:
    """
    Create a debt and notify the customer.

    This operation:
    1. Validates the record and assigns a unique token
    2. Inserts it (atomic on its own)
    3. Sends the notification email
    4. Advances status to notified, even if sending failed

    Args:
        admin_user: Admin creating the debt
        locale: Locale for the emailed link and formatting
        amount: Amount owed, must be positive
        due_date: Due date
        customer_email: Recipient of the notification
        description: Free-form description
        customer_user: Optional linked customer account
        token: Optional pre-set token (kept as is)

    Returns:
        NotificationResult with the created debt

    Raises:
        DebtValidationError: If any field is invalid
    """
    _validate_customer(customer_user)

    debt = Debt(
        admin_user=admin_user,
        amount=amount,
        due_date=due_date,
        customer_email=customer_email,
        description=description or '',
        customer_user=customer_user,
        token=token or '',
    )

    try:
        debt.assign_token()
    except TokenGenerationError as e:
        raise DebtValidationError({'token': [str(e)]})

    _validate(debt)
    _insert_with_unique_token(debt, token_supplied=bool(token))

    logger.info("Debt %s created by %s for %s", debt.pk, admin_user.email, debt.customer_email)

    return dispatch_notification(debt=debt, locale=locale)


def get_debt(*, debt_id: UUID) -> Debt:
    try:
        return Debt.objects.with_includes().get(id=debt_id)
    except Debt.DoesNotExist:
        raise DebtNotFoundError()


@transaction.atomic
def update_debt(*, debt: Debt, **changes) -> Debt:
    """
    Apply admin changes to a debt. The token cannot be changed.

    Raises:
        DebtValidationError: If the result is invalid
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise DebtValidationError({
            field: ['This field cannot be updated.'] for field in sorted(unknown)
        })

    if 'customer_user' in changes:
        _validate_customer(changes['customer_user'])

    for field, value in changes.items():
        setattr(debt, field, value)

    _validate(debt)
    debt.save()
    return debt


def resend_notification(*, debt: Debt, locale: str) -> NotificationResult:
    """Admin-requested resend of the notification email."""
    logger.info("Resending notification for debt %s", debt.pk)
    return dispatch_notification(debt=debt, locale=locale)


@transaction.atomic
def delete_debt(*, debt: Debt) -> None:
    logger.info("Debt %s deleted", debt.pk)
    debt.delete()


def get_dashboard_stats() -> dict:
    """Counts and the ten most recent debts for the admin dashboard."""
    return {
        'total_debts': Debt.objects.count(),
        'pending_debts': Debt.objects.filter(status=DebtStatus.PENDING).count(),
        'overdue_debts': Debt.objects.overdue().count(),
        'recent_debts': list(Debt.objects.with_includes().recent()[:10]),
    }


def get_customer_summary(*, customer: User) -> dict:
    """Debts linked to a customer, newest first, with totals."""
    debts = Debt.objects.filter(customer_user=customer).recent()
    total = debts.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    return {
        'count': debts.count(),
        'total_amount': total,
        'overdue_count': debts.overdue().count(),
        'resolved_count': debts.filter(status=DebtStatus.RESOLVED).count(),
        'results': list(debts),
    }


@transaction.atomic
def link_debts_to_customer(*, customer: User) -> int:
    """
    Link unassigned debts addressed to a confirmed customer's email.

    Status is left untouched; moving to registered stays an admin call.

    Returns:
        Number of debts linked
    """
    if not customer.is_customer or not customer.email_verified:
        return 0

    linked = (
        Debt.objects
        .for_customer_email(customer.email)
        .filter(customer_user__isnull=True)
        .update(customer_user=customer)
    )

    if linked:
        logger.info("Linked %s debt(s) to customer %s", linked, customer.email)
    return linked
