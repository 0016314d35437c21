"""ORM models for the mykahfi_portal domain."""

from mykahfi_portal.db.models.admin_contact import AdminContact
from mykahfi_portal.db.models.learner import Learner
from mykahfi_portal.db.models.notification_log import (
    NotificationEventKind,
    NotificationLog,
    NotificationStatus,
)
from mykahfi_portal.db.models.payment_transaction import PaymentTransaction
from mykahfi_portal.db.models.user_device import UserDevice
from mykahfi_portal.db.models.user_message import UserMessage

__all__ = [
    "AdminContact",
    "Learner",
    "NotificationEventKind",
    "NotificationLog",
    "NotificationStatus",
    "PaymentTransaction",
    "UserDevice",
    "UserMessage",
]
