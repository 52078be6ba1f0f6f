"""
MJML Email Templates
Customer-facing booking emails, compiled to HTML by email_service
"""

from typing import Optional

from .domain.bookings.schemas import BookingRecord
from .domain.proposals.schemas import ProposalSnapshot
from .utils.sanitization import sanitize_string

THEME = {
    "primary": "#0ea5e9",
    "primary_light": "#e0f2fe",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#16a34a",
    "warning": "#f59e0b",
}


def format_money(amount: Optional[float]) -> str:
    return f"${amount or 0:,.2f}"


def guest_label(adults: int, children: int) -> str:
    if adults + children == 1:
        return "1 guest"
    label = f"{adults} adult{'s' if adults != 1 else ''}"
    if children:
        label += f" + {children} child{'ren' if children != 1 else ''}"
    return label


def detail_rows(rows: list[tuple[str, Optional[str]]]) -> str:
    """Label/value table; rows with an empty value are skipped"""
    cells = "".join(
        f"""
        <tr>
          <td style="padding: 8px 12px 8px 0; color: {THEME['text_muted']}; vertical-align: top;">{label}</td>
          <td style="padding: 8px 0; vertical-align: top;">{value}</td>
        </tr>"""
        for label, value in rows
        if value
    )
    return f"""
    <mj-table font-size="14px" color="{THEME['text_secondary']}" padding="8px 0 24px 0">
      {cells}
    </mj-table>
    """


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    business_name: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""
    business_name = sanitize_string(business_name)

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['primary']}" padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="22px" font-weight="700" color="#ffffff" padding="0">
              {business_name}
            </mj-text>
            <mj-text align="center" font-size="14px" color="{THEME['primary_light']}" padding="8px 0 0 0">
              {title}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="32px 40px 40px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              Questions? Just reply to this email. - {business_name}
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def booking_confirmation_template(booking: BookingRecord, business_name: str) -> str:
    """Booking confirmation MJML template"""
    deposit = None
    if booking.deposit_amount:
        deposit = format_money(booking.deposit_amount)
        if booking.deposit_due_date:
            deposit += f" by {booking.deposit_due_date.isoformat()}"

    balance = None
    if booking.balance_due_amount:
        balance = format_money(booking.balance_due_amount)
        if booking.balance_due_date:
            balance += f" by {booking.balance_due_date.isoformat()}"

    notes = sanitize_string(booking.notes)
    rows = detail_rows(
        [
            ("Date", f"<strong>{booking.event_date.isoformat()}</strong>"),
            ("Time", booking.event_time),
            ("Location", sanitize_string(booking.location)),
            ("Guests", guest_label(booking.adults, booking.children)),
            ("Total", f"<strong>{format_money(booking.total)}</strong>"),
            ("Deposit Due", deposit),
            ("Balance Due", balance),
            ("Notes", notes.replace("\n", "<br/>") if notes else None),
        ]
    )

    content = f"""
    <mj-text>
      Hi {sanitize_string(booking.customer_name)},
    </mj-text>

    <mj-text>
      Your booking with <strong>{sanitize_string(business_name)}</strong> is confirmed. Here are your event details:
    </mj-text>

    {rows}

    <mj-text>
      We look forward to serving you.
    </mj-text>
    """

    return get_base_template(
        title="Booking Confirmation",
        preview_text=f"Your event on {booking.event_date.isoformat()} is confirmed",
        content_sections=content,
        business_name=business_name,
    )


def payment_receipt_template(booking: BookingRecord, amount: float, method: str, business_name: str) -> str:
    """Payment receipt MJML template"""
    remaining = booking.balance_due_amount or 0
    if remaining > 0:
        balance_line = f"Remaining balance: <strong>{format_money(remaining)}</strong>"
    else:
        balance_line = f'<strong style="color: {THEME["success"]};">Paid in full</strong>'

    rows = detail_rows(
        [
            ("Amount", f"<strong>{format_money(amount)}</strong>"),
            ("Method", sanitize_string(method)),
            ("Event Total", format_money(booking.total)),
            ("Paid to Date", format_money(booking.amount_paid)),
        ]
    )

    content = f"""
    <mj-text>
      Hi {sanitize_string(booking.customer_name)},
    </mj-text>

    <mj-text>
      Thank you! We received your payment for the event on {booking.event_date.isoformat()}.
    </mj-text>

    {rows}

    <mj-text>
      {balance_line}
    </mj-text>
    """

    return get_base_template(
        title="Payment Receipt",
        preview_text=f"Payment of {format_money(amount)} received",
        content_sections=content,
        business_name=business_name,
    )


def proposal_template(snapshot: ProposalSnapshot, proposal_url: str) -> str:
    """Proposal link MJML template"""
    deposit = None
    if snapshot.depositAmount:
        deposit = format_money(snapshot.depositAmount)
        if snapshot.depositDueDate:
            deposit += f" by {snapshot.depositDueDate}"

    rows = detail_rows(
        [
            ("Event", sanitize_string(snapshot.eventType)),
            ("Date", snapshot.eventDate),
            ("Time", sanitize_string(snapshot.eventTime)),
            ("Location", sanitize_string(snapshot.location)),
            ("Guests", guest_label(snapshot.adults, snapshot.children)),
            ("Subtotal", format_money(snapshot.subtotal)),
            ("Gratuity", format_money(snapshot.gratuity)),
            ("Travel Fee", format_money(snapshot.distanceFee) if snapshot.distanceFee else None),
            ("Total", f"<strong>{format_money(snapshot.total)}</strong>"),
            ("Deposit", deposit),
        ]
    )

    content = f"""
    <mj-text>
      Hi {sanitize_string(snapshot.customerName)},
    </mj-text>

    <mj-text>
      Thanks for considering {sanitize_string(snapshot.businessName)}! Your event proposal is ready for review.
    </mj-text>

    {rows}

    <mj-text color="{THEME['text_muted']}">
      Review the full proposal and accept it online to reserve your date.
    </mj-text>
    """

    return get_base_template(
        title="Your Event Proposal",
        preview_text=f"Proposal for {snapshot.eventDate}: {format_money(snapshot.total)}",
        content_sections=content,
        business_name=snapshot.businessName,
        cta_url=proposal_url,
        cta_label="View &amp; Accept Proposal",
    )
