"""
Tests for derived order money fields.

Tests cover:
- Payment status truth table (including the zero-total deposit case)
- Recompute is a pure re-derivation (idempotent)
- Discount clamping and the total invariant
- Balance helper
"""

import pytest
from decimal import Decimal

from apps.repairs.models import PaymentStatus, ServiceLine, ServicePart
from apps.repairs.services import (
    add_payment,
    compute_payment_status,
    get_order_balance,
    get_paid_minor,
    recompute_payment_status,
    recompute_totals,
    refund_payment,
)


class TestComputePaymentStatus:
    """compute_payment_status() is a pure function of total and paid."""

    @pytest.mark.parametrize('total, paid, expected', [
        (0, 500, PaymentStatus.PARTIAL),
        (0, 0, PaymentStatus.UNPAID),
        (0, -100, PaymentStatus.UNPAID),
        (10000, 10000, PaymentStatus.PAID),
        (10000, 12000, PaymentStatus.PAID),
        (10000, 4000, PaymentStatus.PARTIAL),
        (10000, 0, PaymentStatus.UNPAID),
        (10000, -500, PaymentStatus.UNPAID),
        (-1, 1, PaymentStatus.PARTIAL),
    ])
    def test_truth_table(self, total, paid, expected):
        assert compute_payment_status(total, paid) == expected

    def test_zero_total_is_never_paid(self):
        for paid in (1, 100, 10 ** 9):
            assert compute_payment_status(0, paid) != PaymentStatus.PAID


@pytest.mark.django_db
class TestRecomputeTotals:
    """Tests for recompute_totals()."""

    def test_sums_lines_and_parts(self, order, item):
        ServiceLine.objects.create(service_order=order, description='Resole', qty=2, price=Decimal('250.00'))
        ServiceLine.objects.create(service_order=order, description='Clean', qty=1, price=Decimal('0.10'))
        ServicePart.objects.create(service_order=order, item=item, qty=3, unit_price=Decimal('0.20'))

        recompute_totals(order)

        assert order.sub_total == Decimal('500.70')
        assert order.total == Decimal('500.70')

    def test_idempotent(self, priced_order):
        recompute_totals(priced_order)
        first = (priced_order.sub_total, priced_order.discount, priced_order.total)

        recompute_totals(priced_order)
        priced_order.refresh_from_db()

        assert (priced_order.sub_total, priced_order.discount, priced_order.total) == first

    def test_discount_clamped_to_sub_total(self, priced_order):
        recompute_totals(priced_order, discount='600.00')

        assert priced_order.discount == Decimal('500.00')
        assert priced_order.total == Decimal('0.00')

    def test_negative_discount_clamped_to_zero(self, priced_order):
        recompute_totals(priced_order, discount='-10')

        assert priced_order.discount == Decimal('0.00')
        assert priced_order.total == Decimal('500.00')

    def test_total_is_sub_total_minus_discount(self, priced_order):
        recompute_totals(priced_order, discount='120.55')

        assert priced_order.total == Decimal('379.45')
        assert priced_order.total == max(Decimal('0'), priced_order.sub_total - priced_order.discount)

    def test_stale_stored_values_are_rederived(self, priced_order):
        type(priced_order).objects.filter(id=priced_order.id).update(
            sub_total=Decimal('1.00'), total=Decimal('999.00')
        )
        priced_order.refresh_from_db()

        recompute_totals(priced_order)

        assert priced_order.sub_total == Decimal('500.00')
        assert priced_order.total == Decimal('500.00')


@pytest.mark.django_db
class TestPaidAndBalance:
    """Tests for get_paid_minor(), recompute_payment_status() and get_order_balance()."""

    def test_paid_includes_refunds(self, priced_order, clerk):
        payment = add_payment(order_id=priced_order.id, amount='300.00', actor=clerk)
        refund_payment(
            order_id=priced_order.id, payment_id=payment.id, amount='100.00',
            reason='Price adjusted', actor=clerk,
        )

        assert get_paid_minor(priced_order) == 20000

    def test_recompute_payment_status(self, priced_order, clerk):
        add_payment(order_id=priced_order.id, amount='500.00', actor=clerk)
        type(priced_order).objects.filter(id=priced_order.id).update(payment_status=PaymentStatus.UNPAID)
        priced_order.refresh_from_db()

        recompute_payment_status(priced_order)

        assert priced_order.payment_status == PaymentStatus.PAID

    def test_balance(self, priced_order, clerk):
        add_payment(order_id=priced_order.id, amount='125.50', actor=clerk)
        priced_order.refresh_from_db()

        balance = get_order_balance(priced_order)

        assert balance['total_minor'] == 50000
        assert balance['paid_minor'] == 12550
        assert balance['balance_minor'] == 37450
        assert balance['balance'] == '374.50'
        assert balance['payment_status'] == PaymentStatus.PARTIAL

    def test_overpayment_gives_negative_balance(self, priced_order, clerk):
        add_payment(order_id=priced_order.id, amount='520', actor=clerk)
        priced_order.refresh_from_db()

        balance = get_order_balance(priced_order)

        assert balance['balance'] == '-20.00'
        assert balance['payment_status'] == PaymentStatus.PAID
