"""
Domain-specific exceptions for debts services.

Service errors are caught in views and converted to HTTP responses.
`DebtNotFoundError` is also an APIException so the not-found outcome
has a single shape wherever it is raised.
"""

from rest_framework.exceptions import APIException


class DebtsServiceError(Exception):
    """Base exception for all debts service errors."""
    pass


class DebtValidationError(DebtsServiceError):
    """Raised when a debt fails validation; carries field messages."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(str(errors))


class NotificationDeliveryError(DebtsServiceError):
    """Raised when the mail transport fails to send a notification."""
    pass


class DebtNotFoundError(APIException):
    """Debt missing or outside the viewer's scope."""
    status_code = 404
    default_detail = 'Debt not found.'
    default_code = 'debt_not_found'
