"""Unit tests for the order status workflow map."""

import pytest
from services.store_service.models import OrderStatus, can_transition


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.PROCESSING),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.COMPLETED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
        (OrderStatus.COMPLETED, OrderStatus.REFUNDED),
        (OrderStatus.CANCELLED, OrderStatus.CANCELLED),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.COMPLETED),
        (OrderStatus.COMPLETED, OrderStatus.PENDING),
        (OrderStatus.CANCELLED, OrderStatus.PROCESSING),
        (OrderStatus.REFUNDED, OrderStatus.COMPLETED),
    ],
)
def test_disallowed_transitions(current, target):
    assert not can_transition(current, target)
