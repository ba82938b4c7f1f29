"""Tests for the order status display lookup and refund availability."""

from __future__ import annotations

import pytest

from storefront.domain.types import OrderStatus, StatusTone
from storefront.orders.status import (
    NEUTRAL_STYLE,
    STATUS_STYLES,
    can_refund,
    refund_action_label,
    status_label,
    status_style,
)


class TestStatusStyle:
    def test_every_status_has_a_style(self):
        assert set(STATUS_STYLES) == set(OrderStatus)

    @pytest.mark.parametrize(
        ("status", "tone"),
        [
            ("pending", StatusTone.WARNING),
            ("paid", StatusTone.SUCCESS),
            ("shipped", StatusTone.INFO),
            ("completed", StatusTone.NEUTRAL),
            ("refunded", StatusTone.DANGER),
            ("partially_refunded", StatusTone.CAUTION),
            ("cancelled", StatusTone.NEUTRAL),
        ],
    )
    def test_tones(self, status, tone):
        assert status_style(status).tone == tone

    def test_unknown_status_is_neutral(self):
        assert status_style("disputed") is NEUTRAL_STYLE
        assert status_style("") is NEUTRAL_STYLE


class TestStatusLabel:
    @pytest.mark.parametrize(
        ("status", "label"),
        [("partially_refunded", "Partially refunded"), ("paid", "Paid"), ("", "Unknown")],
    )
    def test_labels(self, status, label):
        assert status_label(status) == label


class TestRefundAvailability:
    @pytest.mark.parametrize(
        ("status", "allowed", "label"),
        [
            ("paid", True, "Issue Refund"),
            ("shipped", True, "Issue Refund"),
            ("partially_refunded", True, "Issue Additional Refund"),
            ("refunded", False, "Already Refunded"),
            ("cancelled", False, "Issue Refund"),
            ("disputed", True, "Issue Refund"),
        ],
    )
    def test_refund_action(self, make_order, status, allowed, label):
        order = make_order(status=status)
        assert can_refund(order) is allowed
        assert refund_action_label(order) == label
