"""Order intake router: the storefront checkout endpoint."""

import json

from fastapi import APIRouter, Depends, Request
from libs.common.config import Settings, get_settings
from libs.db.session import get_async_db
from services.store_service.exceptions import InvalidOrderPayload
from services.store_service.order_intake import process_store_order
from services.store_service.schemas import OrderIntakeResponse
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


# ============================================================================
# ORDERS
# ============================================================================


@router.post("/orders", response_model=OrderIntakeResponse)
async def create_order(
    request: Request,
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings),
):
    """
    Place an order from the storefront cart.

    The body is read directly so that malformed input returns the same
    ``{"error": ...}`` shape as the rest of the intake flow.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidOrderPayload()

    return await process_store_order(db, payload, settings)
