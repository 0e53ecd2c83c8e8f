"""
Debt status transitions.

    pending -> notified -> viewed -> registered -> resolved

Automatic transitions only move forward from `pending`; registered and
resolved are set by admins, who may also write any status directly.
"""

import logging

from django.db import transaction
from django.utils import timezone

from apps.debts.models import Debt, DebtStatus

logger = logging.getLogger(__name__)

# States an automatic transition may start from
NOTIFIABLE_STATES = frozenset({DebtStatus.PENDING})
VIEWABLE_STATES = frozenset({DebtStatus.PENDING})


@transaction.atomic
def record_notification(debt: Debt) -> Debt:
    """
    Stamp `notified_at` and advance pending debts to notified.

    Called after a notification attempt whatever its outcome. A debt
    already past pending keeps its status.
    """
    debt.notified_at = timezone.now()
    update_fields = ['notified_at', 'updated_at']

    if debt.status in NOTIFIABLE_STATES:
        debt.status = DebtStatus.NOTIFIED
        update_fields.append('status')

    debt.save(update_fields=update_fields)
    return debt


def record_first_view(debt: Debt) -> bool:
    """
    Mark a pending debt as viewed.

    A single conditional UPDATE touching only `status` and `viewed_at`;
    it skips model validation and save hooks, and of two concurrent
    first views only one matches the row.

    Returns:
        True if this call performed the transition
    """
    viewed_at = timezone.now()
    updated = (
        Debt.objects
        .filter(pk=debt.pk, status__in=VIEWABLE_STATES)
        .update(status=DebtStatus.VIEWED, viewed_at=viewed_at)
    )

    if updated:
        debt.status = DebtStatus.VIEWED
        debt.viewed_at = viewed_at
        logger.info("Debt %s viewed for the first time", debt.pk)

    return bool(updated)


def set_status(debt: Debt, status: str) -> Debt:
    """Admin write: any status is accepted."""
    debt.status = status
    debt.save(update_fields=['status', 'updated_at'])
    return debt


def mark_registered(debt: Debt) -> Debt:
    return set_status(debt, DebtStatus.REGISTERED)


def mark_resolved(debt: Debt) -> Debt:
    return set_status(debt, DebtStatus.RESOLVED)
