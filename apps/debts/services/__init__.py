"""
Debts app services layer.

Views stay thin; debt creation, notification, disclosure and status
transitions live here.
"""

from .exceptions import (
    DebtsServiceError,
    DebtValidationError,
    NotificationDeliveryError,
    DebtNotFoundError,
)

from .debt_management import (
    NotificationResult,
    create_debt,
    get_debt,
    update_debt,
    delete_debt,
    resend_notification,
    dispatch_notification,
    get_dashboard_stats,
    get_customer_summary,
    link_debts_to_customer,
)

from .disclosure import (
    Disclosure,
    DisclosureLevel,
    decide_disclosure,
    disclose_debt_by_token,
)

from .lifecycle import (
    record_notification,
    record_first_view,
    set_status,
    mark_registered,
    mark_resolved,
)

from .notification import (
    build_notification_message,
    build_public_debt_url,
    send_debt_notification,
)


__all__ = [
    # Exceptions
    'DebtsServiceError',
    'DebtValidationError',
    'NotificationDeliveryError',
    'DebtNotFoundError',

    # Debt management
    'NotificationResult',
    'create_debt',
    'get_debt',
    'update_debt',
    'delete_debt',
    'resend_notification',
    'dispatch_notification',
    'get_dashboard_stats',
    'get_customer_summary',
    'link_debts_to_customer',

    # Disclosure
    'Disclosure',
    'DisclosureLevel',
    'decide_disclosure',
    'disclose_debt_by_token',

    # Lifecycle
    'record_notification',
    'record_first_view',
    'set_status',
    'mark_registered',
    'mark_resolved',

    # Notification
    'build_notification_message',
    'build_public_debt_url',
    'send_debt_notification',
]
