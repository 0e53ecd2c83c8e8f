"""
Debt notification emails.

The message carries the public token link, the amount and due date
formatted for the requested locale, and the description. Sending is
synchronous; callers decide what a failure means.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.urls import reverse
from django.utils import formats, translation
from django.utils.html import strip_tags

from apps.debts.models import Debt

from .exceptions import NotificationDeliveryError

logger = logging.getLogger(__name__)

NOTIFICATION_SUBJECT = 'Oznámení o dlužné částce / Debt notification'
CURRENCY_SUFFIX = 'Kč'


def build_public_debt_url(debt: Debt, locale: str) -> str:
    """Absolute, locale-prefixed URL of the public debt page."""
    with translation.override(locale):
        path = reverse('debts:public-debt', kwargs={'token': debt.token})
    return f"{settings.SITE_URL}{path}"


def format_amount(amount, locale: str) -> str:
    with translation.override(locale):
        number = formats.number_format(amount, decimal_pos=2, force_grouping=True)
    return f"{number} {CURRENCY_SUFFIX}"


def format_due_date(due_date, locale: str) -> str:
    with translation.override(locale):
        return formats.date_format(due_date, 'SHORT_DATE_FORMAT')


def build_notification_message(debt: Debt, locale: str) -> EmailMultiAlternatives:
    """Compose the notification without sending it."""
    context = {
        'debt': debt,
        'debt_url': build_public_debt_url(debt, locale),
        'amount_display': format_amount(debt.amount, locale),
        'due_date_display': format_due_date(debt.due_date, locale),
        'description_text': strip_tags(debt.description or ''),
    }

    with translation.override(locale):
        text_body = render_to_string('debts/email/debt_notification.txt', context)
        html_body = render_to_string('debts/email/debt_notification.html', context)

    message = EmailMultiAlternatives(
        subject=NOTIFICATION_SUBJECT,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[debt.customer_email],
        reply_to=[settings.DEBT_NOTIFICATION_REPLY_TO],
    )
    message.attach_alternative(html_body, 'text/html')
    return message


def send_debt_notification(*, debt: Debt, locale: str) -> None:
    """
    Send the notification email for a debt.

    Args:
        debt: Debt to notify about
        locale: Locale used for link prefix and formatting

    Raises:
        NotificationDeliveryError: If composing or sending fails
    """
    try:
        build_notification_message(debt, locale).send(fail_silently=False)
    except Exception as e:
        raise NotificationDeliveryError(
            f"Failed to send notification for debt {debt.pk}: {e}"
        ) from e

    logger.info("Notification for debt %s sent to %s", debt.pk, debt.customer_email)
