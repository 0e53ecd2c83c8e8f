"""
Permission classes built on the ability resolver.

Role checks run in `has_permission`, before any lookup or business
logic. Customer object access is narrowed by the viewset queryset, so
`IsDebtOwner.has_object_permission` only backs that up.
"""

from rest_framework.permissions import BasePermission

from .abilities import Capability, can

ACCESS_DENIED_MESSAGE = 'Access denied.'


class HasCapability(BasePermission):
    """Base: viewer must hold `capability`."""

    capability = None
    message = ACCESS_DENIED_MESSAGE

    def has_permission(self, request, view):
        return can(request.user, self.capability)


class IsAdminRole(HasCapability):
    """Permission: viewer is an admin (manage all debts)."""
    capability = Capability.MANAGE_DEBTS


class CanSendNotification(HasCapability):
    capability = Capability.SEND_NOTIFICATION


class CanReadDashboard(HasCapability):
    capability = Capability.READ_DASHBOARD


class CanDeleteAccounts(HasCapability):
    capability = Capability.DELETE_ACCOUNTS


class CanUpdateOwnAccount(HasCapability):
    capability = Capability.UPDATE_OWN_ACCOUNT


class CanAccessRegistration(HasCapability):
    """Permission: registration is for anonymous visitors only."""
    capability = Capability.ACCESS_REGISTRATION


class IsDebtOwner(HasCapability):
    """Permission: viewer is a customer reading a debt linked to them."""

    capability = Capability.READ_OWN_DEBTS

    def has_object_permission(self, request, view, obj):
        return can(request.user, self.capability, obj)
