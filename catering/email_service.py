"""
Email Service using Resend
Customer emails are written as MJML templates and compiled to HTML here
"""

import io
import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import BUSINESS_NAME, EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .domain.bookings.schemas import BookingRecord
from .domain.proposals.schemas import ProposalSnapshot
from .email_templates import booking_confirmation_template, payment_receipt_template, proposal_template

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailNotConfiguredError(Exception):
    """RESEND_API_KEY is not set"""


class EmailDeliveryError(Exception):
    """Resend rejected or failed to deliver the message"""


def is_email_configured() -> bool:
    return bool(resend.api_key)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(io.StringIO(mjml_content))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {str(e)}") from e

    if result.get("errors"):
        logger.warning(f"MJML compilation warnings: {result['errors']}")
    return result.get("html", "")


def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict

    Raises:
        EmailNotConfiguredError: If RESEND_API_KEY is missing
        EmailDeliveryError: If compiling or sending fails
    """
    if not is_email_configured():
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailNotConfiguredError("Email not configured - add RESEND_API_KEY to your environment variables.")

    recipients = [to] if isinstance(to, str) else to
    html_content = compile_mjml_to_html(mjml_content)

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e


# ============================================
# Pre-built Emails for Booking Events
# ============================================


def send_booking_confirmation_email(booking: BookingRecord, business_name: Optional[str] = None) -> dict:
    """Send the booking confirmation to the customer"""
    return send_email(
        to=booking.customer_email,
        subject=f"Booking Confirmed - {booking.event_date.isoformat()}",
        mjml_content=booking_confirmation_template(booking, business_name or BUSINESS_NAME),
    )


def send_payment_receipt_email(
    booking: BookingRecord,
    amount: float,
    method: str,
    business_name: Optional[str] = None,
) -> dict:
    """Send a payment receipt to the customer"""
    return send_email(
        to=booking.customer_email,
        subject=f"Payment Received - ${amount:,.2f}",
        mjml_content=payment_receipt_template(booking, amount, method, business_name or BUSINESS_NAME),
    )


def send_proposal_email(to: str, snapshot: ProposalSnapshot, proposal_url: str) -> dict:
    """Send a proposal link to the customer"""
    return send_email(
        to=to,
        subject=f"Your Event Proposal from {snapshot.businessName}",
        mjml_content=proposal_template(snapshot, proposal_url),
    )
