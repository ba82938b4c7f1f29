"""Tests for order filtering and pagination."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from storefront.orders.filters import OrderFilter, filter_orders, matches_search, page_count, paginate


@pytest.fixture
def orders(make_order, now):
    return [
        make_order("ord_1", status="paid", created_at=now - timedelta(days=2), item_name="Ceramic Mug"),
        make_order("ord_2", status="paid", created_at=now - timedelta(days=10), item_name="Ceramic Bowl"),
        make_order("ord_3", status="shipped", created_at=now - timedelta(days=1), item_name="Ceramic Mug"),
        make_order(
            "ord_4",
            status="paid",
            created_at=now - timedelta(hours=3),
            item_name="Linen Towel",
            buyer_email="ALEX@example.com",
            store_id="store_2",
        ),
    ]


class TestOrderFilter:
    def test_defaults_match_everything(self, orders, now):
        assert filter_orders(orders, OrderFilter(), now=now) == orders

    def test_rejects_non_positive_window(self):
        with pytest.raises(ValidationError, match="at least 1"):
            OrderFilter(date_window_days=0)


class TestFilterOrders:
    """Criteria combine with AND."""

    def test_status_and_search_and_window(self, orders, now):
        result = filter_orders(
            orders,
            OrderFilter(status="paid", search_text="mug", date_window_days=7),
            now=now,
        )
        assert [o.id for o in result] == ["ord_1"]

    def test_status_exact_match(self, orders, now):
        result = filter_orders(orders, OrderFilter(status="shipped"), now=now)
        assert [o.id for o in result] == ["ord_3"]

    def test_unknown_status_matches_nothing(self, orders, now):
        assert filter_orders(orders, OrderFilter(status="disputed"), now=now) == []

    def test_search_is_case_insensitive_across_fields(self, orders, now):
        by_email = filter_orders(orders, OrderFilter(search_text="alex@"), now=now)
        by_id = filter_orders(orders, OrderFilter(search_text="ORD_2"), now=now)
        assert [o.id for o in by_email] == ["ord_4"]
        assert [o.id for o in by_id] == ["ord_2"]

    def test_window_boundary_is_inclusive(self, make_order, now):
        edge = make_order("edge", created_at=now - timedelta(days=7))
        older = make_order("older", created_at=now - timedelta(days=7, seconds=1))
        result = filter_orders([edge, older], OrderFilter(date_window_days=7), now=now)
        assert [o.id for o in result] == ["edge"]

    def test_naive_reference_time_is_utc(self, make_order, now):
        edge = make_order("edge", created_at=now - timedelta(days=7))
        older = make_order("older", created_at=now - timedelta(days=8))
        result = filter_orders([edge, older], OrderFilter(date_window_days=7), now=now.replace(tzinfo=None))
        assert [o.id for o in result] == ["edge"]

    def test_store_filter(self, orders, now):
        result = filter_orders(orders, OrderFilter(store_id="store_2"), now=now)
        assert [o.id for o in result] == ["ord_4"]
        assert filter_orders(orders, OrderFilter(store_id="all"), now=now) == orders

    def test_preserves_input_order(self, orders, now):
        reversed_orders = list(reversed(orders))
        assert filter_orders(reversed_orders, OrderFilter(), now=now) == reversed_orders


class TestMatchesSearch:
    def test_blank_matches(self, make_order):
        assert matches_search(make_order(), "   ") is True

    def test_buyer_and_shipping_names(self, make_order):
        order = make_order(buyerName="Bea Buyer", shippingAddress={"name": "Ship To Person"})
        assert matches_search(order, "bea") is True
        assert matches_search(order, "ship to") is True
        assert matches_search(order, "nobody") is False


class TestPaginate:
    """45 orders at 20 per page give pages of 20, 20, 5, then nothing."""

    @pytest.fixture
    def many(self, make_order):
        return [make_order(f"ord_{i}") for i in range(45)]

    def test_page_sizes(self, many):
        assert [len(paginate(many, page, 20)) for page in (1, 2, 3, 4)] == [20, 20, 5, 0]

    def test_page_contents(self, many):
        assert [o.id for o in paginate(many, 3, 20)] == [f"ord_{i}" for i in range(40, 45)]

    def test_page_count(self):
        assert page_count(45, 20) == 3
        assert page_count(40, 20) == 2
        assert page_count(0, 20) == 1

    @pytest.mark.parametrize("page", [0, -1])
    def test_page_below_one_is_empty(self, many, page):
        assert paginate(many, page, 20) == []

    def test_rejects_non_positive_page_size(self, many):
        with pytest.raises(ValueError, match="at least 1"):
            paginate(many, 1, 0)
