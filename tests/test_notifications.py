import asyncio

from modules.notifications import (
    EmailSender,
    LoggingEmailSender,
    NotificationResult,
    StatusNotificationService,
    StatusUpdateEmailData,
    generate_status_update_email,
)


REQUEST_ID = "3f2b9c1a-0000-4000-8000-000000000001"


def email_data(**fields):
    data = {
        "customer_email": "jane@example.com",
        "request_id": REQUEST_ID,
        "status": "confirmed",
        "pickup_date": "2025-03-12",
        "pickup_time_slot": "morning",
        "total_cost": 10.0,
    }
    data.update(fields)
    return StatusUpdateEmailData(**data)


def test_subject_uses_short_request_id():
    template = generate_status_update_email(email_data())

    assert template.to == "jane@example.com"
    assert template.subject == "Laundry Service Update - Request #3f2b9c1a"


def test_body_contains_status_message_and_details():
    template = generate_status_update_email(email_data(status="completed"))

    assert "Your laundry is ready for delivery!" in template.text
    assert "Morning (8am - 12pm)" in template.text
    assert "March 12, 2025" in template.text
    assert "$10.00" in template.html
    assert "Status: Completed" in template.html


def test_user_values_are_escaped_in_html():
    template = generate_status_update_email(
        email_data(customer_name="<b>Jane</b>", special_instructions='<script>alert("x")</script>')
    )

    assert "<script>" not in template.html
    assert "&lt;script&gt;" in template.html
    assert "Hello &lt;b&gt;Jane&lt;/b&gt;!" in template.html
    assert '<script>alert("x")</script>' in template.text


def test_logging_sender_succeeds():
    result = asyncio.run(
        StatusNotificationService(LoggingEmailSender()).notify(
            "jane@example.com", REQUEST_ID, "in_progress", "2025-03-12", "evening", 5
        )
    )

    assert result.success
    assert result.message_id.startswith("msg_")


def test_sender_exception_becomes_failed_result():
    class BrokenSender(EmailSender):
        async def send(self, template):
            raise TimeoutError("provider timeout")

    result = asyncio.run(
        StatusNotificationService(BrokenSender()).notify(
            "jane@example.com", REQUEST_ID, "confirmed", "2025-03-12", "morning", 10
        )
    )

    assert not result.success
    assert result.error == "provider timeout"


def test_unsuccessful_send_is_returned():
    class RejectingSender(EmailSender):
        async def send(self, template):
            return NotificationResult(success=False, error="mailbox full")

    result = asyncio.run(
        StatusNotificationService(RejectingSender()).notify(
            "jane@example.com", REQUEST_ID, "confirmed", "2025-03-12", "morning", 10
        )
    )

    assert result == NotificationResult(success=False, error="mailbox full")
