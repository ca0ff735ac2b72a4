"""
Status Notification Service

Sends the customer an email when staff change a request's status.

Delivery goes through an EmailSender. The default LoggingEmailSender only
logs the message; plug a real provider in by passing another sender.
A failed notification never affects the status change that triggered it.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from config import EMAIL_FROM_ADDRESS
from logger import logger

from .email_templates import (
    EmailTemplate,
    StatusUpdateEmailData,
    generate_status_update_email,
)


class NotificationError(Exception):
    """A status notification could not be delivered"""

    def __init__(self, request_id: str, reason: str):
        self.request_id = request_id
        self.reason = reason
        super().__init__(f"Notification for request {request_id} failed: {reason}")


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailSender(ABC):
    @abstractmethod
    async def send(self, template: EmailTemplate) -> NotificationResult:
        ...


class LoggingEmailSender(EmailSender):
    """Placeholder sender: records the email in the service log"""

    def __init__(self, from_address: str = EMAIL_FROM_ADDRESS):
        self.from_address = from_address

    async def send(self, template: EmailTemplate) -> NotificationResult:
        message_id = f"msg_{uuid.uuid4().hex[:16]}"
        logger.info(
            msg=f"Email queued from {self.from_address} to {template.to}: "
            f"{template.subject} ({len(template.html)} bytes)",
            extra={"message_id": message_id},
        )
        return NotificationResult(success=True, message_id=message_id)


class StatusNotificationService:
    """
    Usage:
        notifier = StatusNotificationService()
        result = await notifier.notify(email, request_id, "confirmed", ...)
    """

    def __init__(self, sender: EmailSender = None):
        self.sender = sender or LoggingEmailSender()

    async def notify(
        self,
        customer_email: str,
        request_id: str,
        new_status: str,
        pickup_date: str,
        pickup_time_slot: str,
        total_cost: float,
        special_instructions: Optional[str] = None,
        customer_name: Optional[str] = None,
    ) -> NotificationResult:
        template = generate_status_update_email(
            StatusUpdateEmailData(
                customer_email=customer_email,
                request_id=str(request_id),
                status=new_status,
                pickup_date=pickup_date,
                pickup_time_slot=pickup_time_slot,
                total_cost=float(total_cost or 0),
                special_instructions=special_instructions,
                customer_name=customer_name,
            )
        )

        try:
            result = await self.sender.send(template)
        except Exception as e:
            logger.error(
                msg=f"Status email for request {request_id} raised: {e}",
                extra={"request_id": request_id},
            )
            return NotificationResult(success=False, error=str(e))

        if not result.success:
            logger.warning(
                msg=f"Status email for request {request_id} failed: {result.error}",
                extra={"request_id": request_id},
            )

        return result
