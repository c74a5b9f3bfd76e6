"""
文件路径：dentdoc/processors/financials.py

说明：账单汇总金额计算。

- 小计 = 全部账单行 total 之和 + 诊疗费；
- 折扣额 = 小计 × 折扣百分比 / 100；
- 合计 = 小计 − 折扣额；
- 全额付款时：已付 = 合计、欠款 = 0（忽略调用方提供的已付金额）；
  否则欠款 = 合计 − 已付。
- 所有金额以 Decimal 两位小数四舍五入。
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..components import get_logger, money2, to_decimal
from ..models import BillRequest
from ..variables import CONST_PAYMENT_STATUS_FULL


logger = get_logger(__name__)


@dataclass(frozen=True)
class BillSummary:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    is_full_payment: bool


def is_full_payment(payment_status: str) -> bool:
    """付款状态是否为全额付款（忽略大小写与首尾空白，兼容简写 "full"）。"""
    status = (payment_status or "").strip().lower()
    return status in {CONST_PAYMENT_STATUS_FULL.lower(), "full"}


def compute_bill_summary(request: BillRequest) -> BillSummary:
    """根据账单请求计算汇总金额。"""
    items_total = sum((to_decimal(item.total) for item in request.items), Decimal("0"))
    subtotal = money2(items_total + to_decimal(request.consultation_fee))
    percent = to_decimal(request.discount_percent)
    discount_amount = money2(subtotal * percent / Decimal("100"))
    total = money2(subtotal - discount_amount)

    full = is_full_payment(request.invoice.payment_status)
    if full:
        amount_paid = total
        balance_due = money2(0)
    else:
        amount_paid = money2(request.amount_paid)
        balance_due = money2(total - amount_paid)

    logger.info(
        "账单汇总：subtotal=%s discount=%s total=%s paid=%s balance=%s",
        subtotal,
        discount_amount,
        total,
        amount_paid,
        balance_due,
    )
    return BillSummary(
        subtotal=subtotal,
        discount_percent=percent,
        discount_amount=discount_amount,
        total=total,
        amount_paid=amount_paid,
        balance_due=balance_due,
        is_full_payment=full,
    )


__all__ = ["BillSummary", "is_full_payment", "compute_bill_summary"]
