"""Account emails: confirmation and password reset."""

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.core.mail import send_mail
from django.urls import reverse
from django.utils import translation

logger = logging.getLogger(__name__)


def _absolute_url(view_name: str, locale: str, **query) -> str:
    with translation.override(locale):
        path = reverse(view_name)
    return f"{settings.SITE_URL}{path}?{urlencode(query)}"


def send_confirmation_email(user, locale: str) -> None:
    url = _absolute_url('users:confirm', locale, token=user.verification_token)
    send_mail(
        subject='Potvrzení registrace / Confirm your registration',
        message=(
            "Dobrý den,\n\npotvrďte prosím svou registraci:\n"
            f"{url}\n\n"
            "Hello,\n\nplease confirm your registration:\n"
            f"{url}\n"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
    )
    logger.info("Confirmation email sent to %s", user.email)


def send_password_reset_email(user, token: str, locale: str) -> None:
    url = _absolute_url('users:password-reset-confirm', locale, token=token)
    send_mail(
        subject='Obnovení hesla / Password reset',
        message=(
            "Pro nastavení nového hesla použijte tento odkaz:\n"
            f"{url}\n\n"
            "Use this link to set a new password:\n"
            f"{url}\n"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
    )
    logger.info("Password reset email sent to %s", user.email)
