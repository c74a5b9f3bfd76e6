"""
文件路径：dentdoc/components/formatters.py

说明：金额、数字与日期的格式化规则。

- 金额统一用 Decimal 两位小数、四舍五入（ROUND_HALF_UP），避免二进制浮点误差；
- en-IN 采用印度计数分组（末三位一组，其余两位一组）：1,23,456.00；
- en-US 采用三位分组：123,456.00；
- 日期仅输出数字格式（en-IN 为 日/月/年，en-US 为 月/日/年），不依赖系统 locale，
  保证不同机器渲染结果逐字节一致。
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from ..variables import CONST_CURRENCY_PREFIX, CONST_DATE_FORMATS

_Q2 = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """宽松转换为 Decimal；None/空串/非法值视为 0。"""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value if value not in (None, "") else 0))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def money2(value: Any) -> Decimal:
    """金额保留两位小数（四舍五入）。"""
    return to_decimal(value).quantize(_Q2, rounding=ROUND_HALF_UP)


def _group_digits(digits: str, locale: str) -> str:
    if locale == "en-IN":
        if len(digits) <= 3:
            return digits
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        return ",".join(groups + [tail])
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ",".join(groups)


def format_amount(amount: Any, locale: str = "en-IN") -> str:
    """格式化金额为带千分位、两位小数的字符串（不含币种）。

    示例：
        >>> format_amount(123456.5)
        '1,23,456.50'
        >>> format_amount(123456.5, locale="en-US")
        '123,456.50'
    """
    value = money2(amount)
    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):.2f}".partition(".")
    return f"{sign}{_group_digits(integer_part, locale)}.{fraction}"


def format_currency(amount: Any, locale: str = "en-IN") -> str:
    """格式化账单金额，如 `INR 1,23,456.00`。"""
    return CONST_CURRENCY_PREFIX + format_amount(amount, locale)


def format_number(value: Any) -> str:
    """以最短形式输出数字：整数不带小数点（10），小数保留有效位（12.5）。"""
    if value is None or value == "":
        return "0"
    try:
        f = float(value)
    except (TypeError, ValueError):
        return str(value)
    if f.is_integer():
        return str(int(f))
    return repr(f)


def parse_date(value: Any) -> Optional[date]:
    """解析日期：支持 date/datetime、ISO 字符串及 dd-mm-yyyy / dd/mm/yyyy。"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "")).date()
    except ValueError:
        pass
    for fmt in ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y"):
        try:
            return datetime.strptime(s[:10], fmt).date()
        except ValueError:
            continue
    return None


def format_date(value: Any, locale: str = "en-IN") -> str:
    """按 locale 输出两位日、两位月、四位年的日期。

    无法解析时原样返回去空白后的字符串（尽力而为，不中断渲染）。
    """
    d = parse_date(value)
    if d is None:
        return "" if value is None else str(value).strip()
    fmt = CONST_DATE_FORMATS.get(locale, CONST_DATE_FORMATS["en-IN"])
    return d.strftime(fmt)


__all__ = [
    "to_decimal",
    "money2",
    "format_amount",
    "format_currency",
    "format_number",
    "parse_date",
    "format_date",
]
