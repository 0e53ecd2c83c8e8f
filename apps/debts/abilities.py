"""
Role/ability resolution.

Every viewer falls into exactly one class: admin, customer or anonymous
(no authenticated user). `resolve()` maps that class to a capability set;
`can()` adds the identity check for capabilities that are scoped to the
viewer's own records; `accessible_debts()` turns the same rules into a
queryset so out-of-scope records are simply not found.
"""

import enum
from typing import Optional

from django.db.models import QuerySet

from apps.accounts.models import User, UserRole

from .models import Debt


class Capability(str, enum.Enum):
    # Admin
    MANAGE_DEBTS = 'manage_debts'
    SEND_NOTIFICATION = 'send_notification'
    READ_DASHBOARD = 'read_dashboard'
    DELETE_ACCOUNTS = 'delete_accounts'

    # Customer
    READ_OWN_DEBTS = 'read_own_debts'
    UPDATE_OWN_ACCOUNT = 'update_own_account'

    # Everyone / anonymous
    READ_HOMEPAGE = 'read_homepage'
    SHOW_PUBLIC_DEBT = 'show_public_debt'
    ACCESS_REGISTRATION = 'access_registration'


ADMIN_CAPABILITIES = frozenset({
    Capability.MANAGE_DEBTS,
    Capability.SEND_NOTIFICATION,
    Capability.READ_DASHBOARD,
    Capability.DELETE_ACCOUNTS,
    Capability.READ_HOMEPAGE,
    Capability.SHOW_PUBLIC_DEBT,
})

CUSTOMER_CAPABILITIES = frozenset({
    Capability.READ_OWN_DEBTS,
    Capability.UPDATE_OWN_ACCOUNT,
    Capability.READ_HOMEPAGE,
    Capability.SHOW_PUBLIC_DEBT,
})

ANONYMOUS_CAPABILITIES = frozenset({
    Capability.READ_HOMEPAGE,
    Capability.SHOW_PUBLIC_DEBT,
    Capability.ACCESS_REGISTRATION,
})


def _authenticated(viewer: Optional[User]) -> Optional[User]:
    if viewer is None or not viewer.is_authenticated or not viewer.is_active:
        return None
    return viewer


def resolve(viewer: Optional[User]) -> frozenset:
    """Return the capability set of a viewer (None means anonymous)."""
    viewer = _authenticated(viewer)
    if viewer is None:
        return ANONYMOUS_CAPABILITIES

    if viewer.role == UserRole.ADMIN:
        return ADMIN_CAPABILITIES
    if viewer.role == UserRole.CUSTOMER:
        return CUSTOMER_CAPABILITIES

    # Unknown role value: grant nothing
    return frozenset()


def is_debt_owner(viewer: Optional[User], debt: Debt) -> bool:
    """True when viewer is the customer linked to the debt."""
    viewer = _authenticated(viewer)
    return (
        viewer is not None
        and viewer.role == UserRole.CUSTOMER
        and debt.customer_user_id is not None
        and debt.customer_user_id == viewer.pk
    )


def can(viewer: Optional[User], capability: Capability, debt: Optional[Debt] = None) -> bool:
    """
    Check one capability, optionally against a specific debt.

    READ_OWN_DEBTS against a debt additionally requires ownership.
    """
    if capability not in resolve(viewer):
        return False

    if debt is not None and capability == Capability.READ_OWN_DEBTS:
        return is_debt_owner(viewer, debt)

    return True


def accessible_debts(viewer: Optional[User]) -> QuerySet:
    """
    Debts a viewer may look up by internal identifier.

    Admins see everything, customers only debts linked to them,
    anonymous viewers nothing.
    """
    capabilities = resolve(viewer)

    if Capability.MANAGE_DEBTS in capabilities:
        return Debt.objects.all()
    if Capability.READ_OWN_DEBTS in capabilities:
        return Debt.objects.filter(customer_user=viewer)
    return Debt.objects.none()
