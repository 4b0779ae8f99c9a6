"""Unit tests for MailerSend delivery and the order confirmation template."""

import json
from decimal import Decimal

import httpx
import pytest
from libs.common.emails.core import EmailAddress, MailerSendClient, MailerSendError, send_email
from libs.common.emails.store import (
    build_order_confirmation,
    send_store_order_confirmation_email,
)

ITEMS = [
    {
        "name": "QR Code Attendance",
        "description": "QR code-based attendance tracking system",
        "quantity": 1,
        "unit_price": Decimal("3999.00"),
        "total_price": Decimal("3999.00"),
    }
]


def _client(handler) -> MailerSendClient:
    return MailerSendClient(
        "mlsn.test-key",
        api_url="https://api.mailersend.com/v1/email",
        transport=httpx.MockTransport(handler),
    )


class TestMailerSendClient:
    @pytest.mark.asyncio
    async def test_send_posts_bearer_json(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(202)

        await _client(handler).send(
            sender=EmailAddress("noreply@acadeemia.com", "Acadeemia Store"),
            to=[EmailAddress("jane@demoacademy.com", "Jane")],
            subject="Hello",
            html="<p>Hi</p>",
            text="Hi",
        )

        request = captured["request"]
        assert request.method == "POST"
        assert str(request.url) == "https://api.mailersend.com/v1/email"
        assert request.headers["Authorization"] == "Bearer mlsn.test-key"
        body = json.loads(request.content)
        assert body["from"] == {"email": "noreply@acadeemia.com", "name": "Acadeemia Store"}
        assert body["to"] == [{"email": "jane@demoacademy.com", "name": "Jane"}]
        assert body["text"] == "Hi"

    @pytest.mark.asyncio
    async def test_send_raises_on_rejection(self):
        client = _client(lambda request: httpx.Response(422, text="invalid domain"))

        with pytest.raises(MailerSendError) as exc_info:
            await client.send(
                sender=EmailAddress("noreply@acadeemia.com"),
                to=[EmailAddress("jane@demoacademy.com")],
                subject="Hello",
                html="<p>Hi</p>",
            )
        assert exc_info.value.status_code == 422
        assert exc_info.value.response_text == "invalid domain"

    def test_api_key_required(self):
        with pytest.raises(ValueError):
            MailerSendClient("")


class TestSendEmail:
    @pytest.mark.asyncio
    async def test_returns_true_when_accepted(self):
        client = _client(lambda request: httpx.Response(202))
        assert await send_email("jane@demoacademy.com", "Hi", "Body", client=client)

    @pytest.mark.asyncio
    async def test_rejection_returns_false(self):
        client = _client(lambda request: httpx.Response(500))
        assert not await send_email("jane@demoacademy.com", "Hi", "Body", client=client)

    @pytest.mark.asyncio
    async def test_network_error_returns_false(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)
        assert not await send_email("jane@demoacademy.com", "Hi", "Body", client=client)


class TestOrderConfirmation:
    def test_subject_and_totals(self):
        subject, text, html = build_order_confirmation(
            customer_name="Jane Principal",
            order_number="ORD-1752051930123-K3Z9Q",
            items=ITEMS,
            subtotal=Decimal("3999.00"),
            tax=Decimal("0"),
            discount=Decimal("500"),
            total=Decimal("3499.00"),
        )

        assert subject == "Order Confirmation - ORD-1752051930123-K3Z9Q"
        assert "QR Code Attendance: 1 x KES 3,999 = KES 3,999" in text
        assert "Discount: -KES 500" in text
        assert "Tax:" not in text
        assert "Total: KES 3,499" in text
        assert "ORD-1752051930123-K3Z9Q" in html

    def test_zero_tax_and_discount_leave_no_gaps(self):
        _, text, _ = build_order_confirmation(
            customer_name="Jane Principal",
            order_number="ORD-1-AAAAA",
            items=ITEMS,
            subtotal=Decimal("3999.00"),
            tax=Decimal("0"),
            discount=Decimal("0"),
            total=Decimal("3999.00"),
        )

        assert "Subtotal: KES 3,999\nTotal: KES 3,999\n" in text
        assert "\n\n\n" not in text

    def test_customer_input_is_escaped_in_html(self):
        items = [dict(ITEMS[0], name="<script>alert(1)</script>")]
        _, _, html = build_order_confirmation(
            customer_name="<b>Jane</b>",
            order_number="ORD-1-AAAAA",
            items=items,
            subtotal=Decimal("1"),
            tax=Decimal("0"),
            discount=Decimal("0"),
            total=Decimal("1"),
        )

        assert "<script>" not in html
        assert "&lt;b&gt;Jane&lt;/b&gt;" in html

    @pytest.mark.asyncio
    async def test_send_confirmation_through_client(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(202)

        sent = await send_store_order_confirmation_email(
            to_email="jane@demoacademy.com",
            customer_name="Jane Principal",
            order_number="ORD-1752051930123-K3Z9Q",
            items=ITEMS,
            subtotal=Decimal("3999.00"),
            tax=Decimal("0"),
            discount=Decimal("0"),
            total=Decimal("3999.00"),
            client=_client(handler),
        )

        assert sent is True
        assert captured["body"]["subject"] == "Order Confirmation - ORD-1752051930123-K3Z9Q"
        assert captured["body"]["to"] == [
            {"email": "jane@demoacademy.com", "name": "Jane Principal"}
        ]
