"""Unit tests for dashboard aggregates and money helpers."""

from decimal import Decimal

from libs.common.currency import format_money, to_decimal
from services.store_service.models import OrderStatus
from services.store_service.stats import compute_store_stats
from tests.factories import AddonFactory, OrderFactory


class TestComputeStoreStats:
    def test_counts_and_revenue(self):
        addons = [
            AddonFactory.create(is_published=True),
            AddonFactory.create(is_published=False),
            AddonFactory.create(is_published=True),
        ]
        orders = [
            OrderFactory.create(total_amount=Decimal("3999.00")),
            OrderFactory.create(
                total_amount=Decimal("1999.50"), order_status=OrderStatus.CANCELLED
            ),
        ]

        stats = compute_store_stats(addons, orders)

        assert stats.total_addons == 3
        assert stats.published_addons == 2
        assert stats.total_orders == 2
        assert stats.pending_orders == 1
        # Revenue sums every order, whatever its status
        assert stats.total_revenue == Decimal("5998.50")

    def test_empty_store(self):
        stats = compute_store_stats([], [])

        assert stats.total_addons == 0
        assert stats.total_orders == 0
        assert stats.total_revenue == Decimal("0")


class TestCurrency:
    def test_to_decimal_rounds_half_up(self):
        assert to_decimal("10.005") == Decimal("10.01")
        assert to_decimal(3999) == Decimal("3999.00")
        assert to_decimal(None) == Decimal("0.00")

    def test_format_whole_amount(self):
        assert format_money(Decimal("3999.00")) == "KES 3,999"

    def test_format_fractional_amount(self):
        assert format_money("45000.5", "USD") == "USD 45,000.50"
