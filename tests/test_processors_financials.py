from __future__ import annotations

from decimal import Decimal

import pytest

from dentdoc.models import BillItem, BillRequest, InvoiceInfo, ItemType, Patient
from dentdoc.processors.financials import compute_bill_summary, is_full_payment


def _request(status="Partial Payment", paid=500, discount=10, fee=200):
    return BillRequest(
        patient=Patient(name="Asha Rao"),
        invoice=InvoiceInfo(number="INV-1", date="2024-05-01", payment_method="Cash", payment_status=status),
        items=(
            BillItem("Root Canal Treatment", 1, 500, 500, ItemType.PROCEDURE),
            BillItem("Amoxicillin 500mg", 2, 50, 100, ItemType.MEDICINE),
        ),
        consultation_fee=fee,
        discount_percent=discount,
        amount_paid=paid,
    )


def test_partial_payment_scenario():
    summary = compute_bill_summary(_request())
    assert summary.subtotal == Decimal("800.00")
    assert summary.discount_amount == Decimal("80.00")
    assert summary.total == Decimal("720.00")
    assert summary.amount_paid == Decimal("500.00")
    assert summary.balance_due == Decimal("220.00")
    assert summary.is_full_payment is False


def test_two_medicines_with_consultation_fee():
    request = BillRequest(
        patient=Patient(name="Asha Rao"),
        invoice=InvoiceInfo(number="INV-2", date="2024-05-01", payment_method="Cash", payment_status="Partial Payment"),
        items=(
            BillItem("Paracetamol 500mg", 1, 100, 100, ItemType.MEDICINE),
            BillItem("Ibuprofen 400mg", 1, 200, 200, ItemType.MEDICINE),
        ),
        consultation_fee=500,
        discount_percent=10,
        amount_paid=500,
    )
    summary = compute_bill_summary(request)
    assert (summary.subtotal, summary.discount_amount, summary.total, summary.balance_due) == (
        Decimal("800.00"),
        Decimal("80.00"),
        Decimal("720.00"),
        Decimal("220.00"),
    )


def test_full_payment_overrides_amount_paid():
    summary = compute_bill_summary(_request(status="Full Payment", paid=100))
    assert summary.amount_paid == summary.total == Decimal("720.00")
    assert summary.balance_due == Decimal("0.00")


@pytest.mark.parametrize("discount", [0, 5, 12.5, 33.33, 100])
def test_total_identity(discount):
    summary = compute_bill_summary(_request(discount=discount))
    assert summary.total == summary.subtotal - summary.discount_amount
    assert summary.balance_due == summary.total - summary.amount_paid


def test_engine_ignores_item_recomputation():
    # 行合计按调用方给定值展示与汇总，不按 数量*单价 重新计算
    request = BillRequest(
        patient=Patient(name="X"),
        invoice=InvoiceInfo(payment_status="Full Payment"),
        items=(BillItem("Scaling", 2, 300, 550, ItemType.PROCEDURE),),
    )
    assert compute_bill_summary(request).subtotal == Decimal("550.00")


@pytest.mark.parametrize(
    "status, expected",
    [("Full Payment", True), (" full payment ", True), ("FULL", True), ("Partial Payment", False), ("", False)],
)
def test_full_payment_detection(status, expected):
    assert is_full_payment(status) is expected
