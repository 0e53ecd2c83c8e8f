"""
Disclosure gate for the public debt page.

Given the viewer, a debt and the token from the request:
1. the linked customer gets the debt as its owner;
2. anyone presenting the exact token gets it as a token holder;
3. everyone else gets nothing, reported exactly like a missing token.
"""

from dataclasses import dataclass
from typing import Optional

from django.db import models

from apps.accounts.models import User
from apps.debts.abilities import is_debt_owner
from apps.debts.models import Debt
from apps.debts.tokens import tokens_match

from .exceptions import DebtNotFoundError
from .lifecycle import record_first_view


class DisclosureLevel(models.TextChoices):
    OWNER = 'owner', 'Owner'
    TOKEN = 'token', 'Token holder'


@dataclass(frozen=True)
class Disclosure:
    debt: Debt
    level: str

    @property
    def full_details(self) -> bool:
        return self.level == DisclosureLevel.OWNER


def decide_disclosure(
    viewer: Optional[User],
    debt: Optional[Debt],
    token: Optional[str]
) -> Optional[str]:
    """Return the disclosure level, or None when nothing may be shown."""
    if debt is None:
        return None
    if is_debt_owner(viewer, debt):
        return DisclosureLevel.OWNER
    if tokens_match(token, debt.token):
        return DisclosureLevel.TOKEN
    return None


def disclose_debt_by_token(*, viewer: Optional[User], token: str) -> Disclosure:
    """
    Resolve a public token for a viewer.

    A successful resolution moves a pending debt to viewed.

    Raises:
        DebtNotFoundError: If no debt may be disclosed
    """
    debt = (
        Debt.objects
        .select_related('customer_user')
        .filter(token=token)
        .first()
    ) if token else None

    level = decide_disclosure(viewer, debt, token)
    if level is None:
        raise DebtNotFoundError()

    record_first_view(debt)
    return Disclosure(debt=debt, level=level)
