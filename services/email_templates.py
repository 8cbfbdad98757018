"""
HTML/text bodies for customer e-mails.
Every interpolated value is HTML-escaped; templates are plain f-strings.
"""
from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Any, Optional

from services.journey_catalog import EVENT_DEFINITIONS

BRAND_COLOR = "#BF0D0D"
FALLBACK_GREETING = "Update from Toyota Financial"

BRAND_FOOTER = """
      <tr>
        <td style="padding:24px 32px;background:#111827;color:#f9fafb;font-family:'Inter',Arial,sans-serif;font-size:12px;line-height:18px;">
          Toyota Motor Credit Corporation &middot; NMLS ID 8027<br />
          19001 South Western Avenue, Torrance, CA 90501
        </td>
      </tr>"""


def format_timestamp(value: datetime) -> str:
    """
    Medium date + time in the server's local zone, e.g. 'Jan 5, 2025, 3:04:05 PM'.
    Naive values are taken as already local.
    """
    if value.tzinfo is not None:
        value = value.astimezone()
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b} {value.day}, {value.year}, {hour}:{value:%M:%S} {meridiem}"


def format_usd(amount: Optional[float]) -> str:
    amount = amount or 0
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def build_event_email_html(
    event_type: str,
    *,
    customer_name: str,
    dealer_name: str,
    summary: str,
    occurred_at: datetime,
    reference_number: str,
) -> str:
    definition = EVENT_DEFINITIONS.get(event_type)
    title = escape(definition.greeting if definition else FALLBACK_GREETING)
    occurred = format_timestamp(occurred_at)

    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
  </head>
  <body style="margin:0;padding:0;background:#f3f4f6;font-family:'Inter',Arial,sans-serif;color:#111827;">
    <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="max-width:640px;margin:0 auto;background:#ffffff;border:1px solid #e5e7eb;">
      <tr>
        <td style="padding:24px 32px;border-bottom:4px solid {BRAND_COLOR};">
          <h1 style="margin:0;font-size:24px;line-height:32px;font-weight:700;color:{BRAND_COLOR};">Toyota Financial</h1>
          <p style="margin:8px 0 0;font-size:16px;line-height:24px;">{title}</p>
        </td>
      </tr>
      <tr>
        <td style="padding:24px 32px;">
          <p style="margin:0 0 16px;font-size:16px;line-height:24px;">Hi {escape(customer_name)},</p>
          <p style="margin:0 0 16px;font-size:16px;line-height:24px;">{escape(summary)}</p>
          <table role="presentation" width="100%" style="margin:24px 0;background:#f9fafb;border:1px solid #e5e7eb;border-radius:12px;">
            <tr>
              <td style="padding:20px 24px;">
                <p style="margin:0;font-size:12px;text-transform:uppercase;letter-spacing:1px;color:#6b7280;">Dealer</p>
                <p style="margin:4px 0 0;font-size:16px;font-weight:600;">{escape(dealer_name)}</p>
                <p style="margin:16px 0 0;font-size:12px;text-transform:uppercase;letter-spacing:1px;color:#6b7280;">Time</p>
                <p style="margin:4px 0 0;font-size:16px;font-weight:600;">{occurred}</p>
                <p style="margin:16px 0 0;font-size:12px;text-transform:uppercase;letter-spacing:1px;color:#6b7280;">Reference</p>
                <p style="margin:4px 0 0;font-size:16px;font-weight:600;">{escape(reference_number)}</p>
              </td>
            </tr>
          </table>
          <p style="margin:0;font-size:14px;line-height:22px;color:#4b5563;">Need help? Reply to this email or call us at 1-800-874-8822. We&apos;re here 7 days a week.</p>
        </td>
      </tr>{BRAND_FOOTER}
    </table>
  </body>
</html>"""


def _addons_summary(addons: list[dict[str, Any]]) -> str:
    if not addons:
        return "No add-ons selected."
    return "\n".join(f"• {a['name']} - {format_usd(a['price'])}" for a in addons)


def _appointment_summary(appointment: Optional[dict[str, Any]]) -> str:
    fallback = "Appointment details will be finalized soon."
    if not appointment:
        return fallback
    lines = []
    if appointment.get("method"):
        lines.append(f"Method: {appointment['method']}")
    if appointment.get("date"):
        lines.append(f"Date: {appointment['date']}")
    if appointment.get("time_slot"):
        lines.append(f"Time: {appointment['time_slot']}")
    return "\n".join(lines) or fallback


def build_purchase_confirmation(purchase: dict[str, Any]) -> tuple[str, str]:
    """Return (text, html) bodies for a completed purchase (snake_case dict)."""
    customer = purchase.get("customer") or {}
    customer_name = " ".join(
        part for part in (customer.get("first_name"), customer.get("last_name")) if part
    ).strip() or "there"
    contact = purchase.get("payment_contact_name") or "Not provided"
    addons = _addons_summary(purchase.get("selected_addons") or [])
    appointment = _appointment_summary(purchase.get("appointment"))

    rows = [
        ("Vehicle", purchase["vehicle_model_name"]),
        ("Offer Type", purchase["offer_type"]),
        ("Total Price", format_usd(purchase["purchase_total"])),
        ("Due at Signing", format_usd(purchase["amount_due_at_signing"])),
        ("Trade-In Value", format_usd(purchase.get("trade_in_value"))),
        ("Payment Contact", contact),
    ]

    details = "\n".join(f"{label}: {value}" for label, value in rows)
    text = (
        f"Hi {customer_name},\n\n"
        "Thanks for completing your purchase with Toyota Finance Navigator! "
        "Here are the details for your records:\n\n"
        f"{details}\n\n"
        f"Add-ons:\n{addons}\n\n"
        f"Appointment:\n{appointment}\n\n"
        "If you have any questions, reply to this email and our team will be happy to help.\n\n"
        "- The Toyota Finance Navigator Team"
    )

    table_rows = "\n".join(
        f'              <tr>\n'
        f'                <td style="padding:8px 0;width:40%;color:#6b7280;">{escape(label)}</td>\n'
        f'                <td style="padding:8px 0;font-weight:600;">{escape(str(value))}</td>\n'
        f'              </tr>'
        for label, value in rows
    )
    pre_style = (
        "margin:0;padding:16px;background:#f9fafb;border:1px solid #e5e7eb;"
        "border-radius:8px;font-family:inherit;white-space:pre-wrap;"
    )
    html = f"""<!DOCTYPE html>
<html lang="en">
  <body style="font-family:Arial,Helvetica,sans-serif;margin:0;padding:24px;background:#f5f6f8;color:#111827;">
    <table role="presentation" width="100%" style="max-width:640px;margin:0 auto;background:#ffffff;border-radius:12px;overflow:hidden;border:1px solid #e5e7eb;">
      <tr>
        <td style="background:{BRAND_COLOR};color:#ffffff;padding:20px 32px;">
          <h1 style="margin:0;font-size:24px;">Toyota Finance Navigator</h1>
          <p style="margin:8px 0 0;font-size:16px;">Purchase Confirmation</p>
        </td>
      </tr>
      <tr>
        <td style="padding:24px 32px;">
          <p style="margin:0 0 16px;font-size:16px;">Hi {escape(customer_name)},</p>
          <p style="margin:0 0 16px;font-size:16px;line-height:24px;">Thanks for completing your purchase with Toyota Finance Navigator! Here are the details for your records:</p>
          <table role="presentation" width="100%" style="margin:16px 0;border-collapse:collapse;">
            <tbody>
{table_rows}
            </tbody>
          </table>
          <div style="margin:24px 0;">
            <h2 style="margin:0 0 8px;font-size:18px;">Add-ons</h2>
            <pre style="{pre_style}">{escape(addons)}</pre>
          </div>
          <div style="margin:24px 0;">
            <h2 style="margin:0 0 8px;font-size:18px;">Appointment</h2>
            <pre style="{pre_style}">{escape(appointment)}</pre>
          </div>
          <p style="margin:0;font-size:14px;color:#4b5563;">If you have any questions, reply to this email and our team will be happy to help.</p>
        </td>
      </tr>
    </table>
  </body>
</html>"""
    return text, html


def build_subscription_text(name: Optional[str]) -> str:
    greeting_name = (name or "").strip() or "there"
    return (
        f"Hi {greeting_name},\n\n"
        "Thanks for subscribing to Genius Toyota updates! "
        "We'll keep you posted with the latest offers and announcements.\n\n"
        "If you ever want to unsubscribe, just reply to this email and we'll take care of it.\n\n"
        "- The Genius Toyota Team"
    )
