"""
Store-related email templates.
"""

from decimal import Decimal
from html import escape
from typing import Optional

from libs.common.config import get_settings
from libs.common.currency import format_money
from libs.common.emails.core import MailerSendClient, send_email


def build_order_confirmation(
    customer_name: str,
    order_number: str,
    items: list[dict],  # [{"name", "description", "quantity", "unit_price", "total_price"}]
    subtotal: Decimal,
    tax: Decimal,
    discount: Decimal,
    total: Decimal,
    currency: str = "KES",
) -> tuple[str, str, str]:
    """Return (subject, text body, html body) for an order confirmation."""
    settings = get_settings()
    subject = f"Order Confirmation - {order_number}"

    def money(amount) -> str:
        return format_money(amount, currency)

    items_text = "\n".join(
        f"  - {item['name']}: {item['quantity']} x {money(item['unit_price'])}"
        f" = {money(item['total_price'])}"
        for item in items
    )
    items_html = "".join(
        f"""
            <div class="order-item">
                <h4>{escape(item['name'])}</h4>
                <p>{escape(item.get('description') or '')}</p>
                <p><strong>Quantity:</strong> {item['quantity']} &times; {money(item['unit_price'])} = {money(item['total_price'])}</p>
            </div>"""
        for item in items
    )

    summary_lines = [f"Subtotal: {money(subtotal)}"]
    if tax > 0:
        summary_lines.append(f"Tax: {money(tax)}")
    if discount > 0:
        summary_lines.append(f"Discount: -{money(discount)}")
    summary_lines.append(f"Total: {money(total)}")
    summary_text = "\n".join(summary_lines)

    body = f"""Dear {customer_name},

Thank you for your purchase! Your order has been received and is being processed.

Order #{order_number}

Items:
{items_text}

{summary_text}

We will process your order and send you download links and license keys within 24 hours.
If you have any questions, please contact our support team at {settings.STORE_SUPPORT_EMAIL}

Best regards,
The Acadeemia Team
"""

    html_body = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Order Confirmation - {order_number}</title>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background-color: #697BBC; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }}
        .content {{ padding: 20px; background-color: #f9f9f9; border-radius: 0 0 8px 8px; }}
        .order-item {{ background-color: white; padding: 15px; margin: 10px 0; border-radius: 8px; border-left: 4px solid #697BBC; }}
        .total {{ background-color: #e8f4fd; padding: 15px; border-radius: 8px; margin-top: 20px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Order Confirmation</h1>
            <p style="margin: 0; opacity: 0.9;">Order #{order_number}</p>
        </div>
        <div class="content">
            <p>Dear {escape(customer_name)},</p>
            <p>Thank you for your purchase! Your order has been received and is being processed.</p>

            <h3>Order Details:</h3>
            {items_html}

            <div class="total">
                <h3>Order Summary</h3>
                <p><strong>Subtotal:</strong> {money(subtotal)}</p>
                {f"<p><strong>Tax:</strong> {money(tax)}</p>" if tax > 0 else ""}
                {f"<p><strong>Discount:</strong> -{money(discount)}</p>" if discount > 0 else ""}
                <p><strong>Total:</strong> {money(total)}</p>
            </div>

            <p>We will process your order and send you download links and license keys within 24 hours.</p>
            <p>If you have any questions, please contact our support team at {settings.STORE_SUPPORT_EMAIL}</p>

            <p>Best regards,<br>The Acadeemia Team</p>
        </div>
    </div>
</body>
</html>
"""
    return subject, body, html_body


async def send_store_order_confirmation_email(
    to_email: str,
    customer_name: str,
    order_number: str,
    items: list[dict],
    subtotal: Decimal,
    tax: Decimal,
    discount: Decimal,
    total: Decimal,
    currency: str = "KES",
    client: Optional[MailerSendClient] = None,
) -> bool:
    """
    Send the order confirmation email right after an order is placed.
    """
    subject, body, html_body = build_order_confirmation(
        customer_name=customer_name,
        order_number=order_number,
        items=items,
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=total,
        currency=currency,
    )
    return await send_email(
        to_email, subject, body, html_body, to_name=customer_name, client=client
    )
