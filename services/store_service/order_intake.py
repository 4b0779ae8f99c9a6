"""Order intake: validate a storefront order, persist it, notify the customer.

The sequence is linear:

1. validate the payload (400 on missing customer name, email or items)
2. insert the order row
3. insert the order items
4. bump ``download_count`` once per purchased item (best effort)
5. send a confirmation email when MailerSend is configured (best effort)

Steps 2 and 3 share one transaction. If the items cannot be written the
transaction is rolled back, so no order row is left behind without items.
Steps 4 and 5 run after the commit and never fail the request.
"""

from typing import Any, Optional

from libs.common.config import Settings, get_settings
from libs.common.emails.core import MailerSendClient
from libs.common.emails.store import send_store_order_confirmation_email
from libs.common.logging import get_logger
from pydantic import ValidationError
from services.store_service.exceptions import (
    InvalidOrderPayload,
    MissingOrderFields,
    OrderCreationFailed,
    OrderItemsCreationFailed,
)
from services.store_service.models import (
    Addon,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from services.store_service.schemas import (
    OrderIntakeItem,
    OrderIntakeRequest,
    OrderIntakeResponse,
)
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def parse_order_payload(raw: Any) -> OrderIntakeRequest:
    """Validate the raw JSON body and check the required fields."""
    if not isinstance(raw, dict):
        raise InvalidOrderPayload()
    try:
        payload = OrderIntakeRequest.model_validate(raw)
    except ValidationError as e:
        raise InvalidOrderPayload(details=e.errors(include_url=False, include_context=False))

    if not payload.customer_name or not payload.customer_email or not payload.items:
        raise MissingOrderFields()
    return payload


def build_order(payload: OrderIntakeRequest, settings: Settings) -> Order:
    return Order(
        order_number=Order.generate_order_number(),
        customer_name=payload.customer_name,
        customer_email=str(payload.customer_email),
        customer_phone=payload.customer_phone,
        institution_name=payload.institution_name,
        billing_address=payload.billing_address,
        payment_method=payload.payment_method,
        notes=payload.notes,
        subtotal=payload.subtotal,
        tax_amount=payload.tax_amount,
        discount_amount=payload.discount_amount,
        total_amount=payload.total_amount,
        currency=payload.currency or settings.STORE_DEFAULT_CURRENCY,
        order_status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
    )


def build_order_items(order: Order, items: list[OrderIntakeItem]) -> list[OrderItem]:
    return [
        OrderItem(
            order_id=order.id,
            addon_id=item.addon_id,
            addon_name=item.addon_name,
            addon_description=item.addon_description,
            addon_version=item.addon_version,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_price=item.total_price,
        )
        for item in items
    ]


async def persist_order(db: AsyncSession, payload: OrderIntakeRequest, settings: Settings) -> Order:
    """Insert the order and its items in one transaction."""
    order = build_order(payload, settings)
    db.add(order)
    try:
        await db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Order creation error: {e}")
        await db.rollback()
        raise OrderCreationFailed()

    db.add_all(build_order_items(order, payload.items))
    try:
        await db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Order items creation error for {order.order_number}: {e}")
        # Rolling back drops the order row written above
        await db.rollback()
        raise OrderItemsCreationFailed()

    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Order commit error for {order.order_number}: {e}")
        await db.rollback()
        raise OrderCreationFailed()

    logger.info(f"Created order {order.order_number} with {len(payload.items)} item(s)")
    return order


async def increment_download_counts(db: AsyncSession, items: list[OrderIntakeItem]) -> int:
    """
    Add one to ``download_count`` for every purchased item that names an add-on.

    Failures are logged and skipped. Returns how many increments succeeded.
    """
    incremented = 0
    for item in items:
        if item.addon_id is None:
            continue
        try:
            await db.execute(
                update(Addon)
                .where(Addon.id == item.addon_id)
                .values(download_count=Addon.download_count + 1)
            )
            await db.commit()
            incremented += 1
        except SQLAlchemyError as e:
            logger.warning(f"Could not increment download count for {item.addon_id}: {e}")
            await db.rollback()
    return incremented


async def send_order_confirmation(
    order_number: str, currency: str, payload: OrderIntakeRequest, settings: Settings
) -> bool:
    """Send the confirmation email. Returns whether it was accepted; never raises."""
    try:
        client = MailerSendClient(settings.MAILERSEND_API_KEY, settings.MAILERSEND_API_URL)
        return await send_store_order_confirmation_email(
            to_email=str(payload.customer_email),
            customer_name=payload.customer_name,
            order_number=order_number,
            items=[
                {
                    "name": item.addon_name,
                    "description": item.addon_description,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total_price": item.total_price,
                }
                for item in payload.items
            ],
            subtotal=payload.subtotal,
            tax=payload.tax_amount,
            discount=payload.discount_amount,
            total=payload.total_amount,
            currency=currency,
            client=client,
        )
    except Exception as e:
        logger.error(f"Email sending error for {order_number}: {e}")
        return False


async def process_store_order(
    db: AsyncSession, raw_payload: Any, settings: Optional[Settings] = None
) -> OrderIntakeResponse:
    """Run the whole intake sequence for one storefront order."""
    settings = settings or get_settings()
    payload = parse_order_payload(raw_payload)

    order = await persist_order(db, payload, settings)
    # Snapshot before the counter updates, which may roll back and expire the order
    order_id, order_number, currency = order.id, order.order_number, order.currency

    await increment_download_counts(db, payload.items)

    email_sent = False
    if settings.MAILERSEND_API_KEY:
        email_sent = await send_order_confirmation(
            order_number, currency, payload, settings
        )
    else:
        logger.info(f"MAILERSEND_API_KEY not set; skipping confirmation for {order_number}")

    return OrderIntakeResponse(
        order_id=order_id,
        order_number=order_number,
        email_sent=email_sent,
    )
