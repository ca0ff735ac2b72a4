from dataclasses import dataclass
from html import escape
from typing import Optional

from config import EMAIL_SERVICE_NAME
from modules.pricing import PricingService
from utils.datetime import parse_date


STATUS_MESSAGES = {
    "pending": "Your laundry request has been received and is being reviewed.",
    "confirmed": "Your laundry request has been confirmed! We will pick up your items as scheduled.",
    "in_progress": "Your laundry is currently being processed.",
    "completed": "Your laundry is ready for delivery! We will contact you shortly to arrange delivery.",
}

STATUS_COLOURS = {
    "pending": "#f59e0b",
    "confirmed": "#3b82f6",
    "in_progress": "#8b5cf6",
    "completed": "#10b981",
}

TIME_SLOT_LABELS = {
    "morning": "Morning (8am - 12pm)",
    "afternoon": "Afternoon (12pm - 4pm)",
    "evening": "Evening (4pm - 8pm)",
}


@dataclass(frozen=True)
class EmailTemplate:
    to: str
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class StatusUpdateEmailData:
    customer_email: str
    request_id: str
    status: str
    pickup_date: str
    pickup_time_slot: str
    total_cost: float
    special_instructions: Optional[str] = None
    customer_name: Optional[str] = None


def status_label(status: str) -> str:
    """in_progress -> In progress"""
    return status.replace("_", " ").capitalize()


def _display_date(value: str) -> str:
    parsed = parse_date(value)
    return parsed.strftime("%B %d, %Y") if parsed else str(value or "")


def generate_status_update_email(data: StatusUpdateEmailData) -> EmailTemplate:
    """Build the subject, HTML and plain text bodies for a status change"""
    subject = f"{EMAIL_SERVICE_NAME} Update - Request #{data.request_id[:8]}"
    greeting = f"Hello {data.customer_name}!" if data.customer_name else "Hello!"
    message = STATUS_MESSAGES.get(data.status, f"Your request is now {status_label(data.status)}.")
    pickup_date = _display_date(data.pickup_date)
    pickup_time = TIME_SLOT_LABELS.get(data.pickup_time_slot, data.pickup_time_slot)
    total_cost = PricingService.format_currency(data.total_cost)
    colour = STATUS_COLOURS.get(data.status, "#6b7280")

    instructions_html = (
        f"<p><strong>Special Instructions:</strong> {escape(data.special_instructions)}</p>"
        if data.special_instructions
        else ""
    )

    html = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{escape(subject)}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="margin: 0; font-size: 28px;">{escape(EMAIL_SERVICE_NAME)}</h1>
  <h2 style="color: #1f2937;">{escape(greeting)}</h2>
  <div style="background: {colour}; color: white; padding: 15px; border-radius: 8px; text-align: center;">
    <h3 style="margin: 0; font-size: 18px;">Status: {escape(status_label(data.status))}</h3>
  </div>
  <p style="font-size: 16px;">{escape(message)}</p>
  <div style="background: #f9fafb; padding: 20px; border-radius: 8px;">
    <h4 style="margin-top: 0;">Request Details:</h4>
    <p><strong>Request ID:</strong> {escape(data.request_id)}</p>
    <p><strong>Pickup Date:</strong> {escape(pickup_date)}</p>
    <p><strong>Pickup Time:</strong> {escape(pickup_time)}</p>
    <p><strong>Total Cost:</strong> {escape(total_cost)}</p>
    {instructions_html}
  </div>
  <p style="color: #6b7280; font-size: 14px;">If you have any questions, please don't hesitate to contact us.</p>
</body>
</html>
"""

    text_lines = [
        greeting,
        "",
        message,
        "",
        "Request Details:",
        f"- Request ID: {data.request_id}",
        f"- Pickup Date: {pickup_date}",
        f"- Pickup Time: {pickup_time}",
        f"- Total Cost: {total_cost}",
    ]
    if data.special_instructions:
        text_lines.append(f"- Special Instructions: {data.special_instructions}")
    text_lines += [
        "",
        "If you have any questions, please don't hesitate to contact us.",
        f"Thank you for choosing {EMAIL_SERVICE_NAME}!",
    ]

    return EmailTemplate(
        to=data.customer_email,
        subject=subject,
        html=html,
        text="\n".join(text_lines),
    )
