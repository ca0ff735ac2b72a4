from .notification_service import (
    StatusNotificationService,
    NotificationResult,
    NotificationError,
    EmailSender,
    LoggingEmailSender,
)
from .email_templates import EmailTemplate, StatusUpdateEmailData, generate_status_update_email

__all__ = [
    "StatusNotificationService",
    "NotificationResult",
    "NotificationError",
    "EmailSender",
    "LoggingEmailSender",
    "EmailTemplate",
    "StatusUpdateEmailData",
    "generate_status_update_email",
]
