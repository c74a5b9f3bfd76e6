"""
文件路径：dentdoc/stock.py

模块职责：
- 账单渲染前的药品库存扣减协作方接口 `StockLedger`；
- 进程内实现 `InMemoryStockLedger`（按名称不区分大小写子串匹配，取首个匹配）；
- `review_stock_outcomes` 实施账单流程的放行策略：
  - 任一 error（药品未找到 / 更新失败）直接阻断；
  - 任一 warning（库存不足，未扣减）默认阻断，调用方确认（allow_shortfall=True）后放行。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from .components import ErrorHandler, get_logger
from .models import BillItem, ItemType
from .variables import (
    ERR_STOCK_INSUFFICIENT,
    ERR_STOCK_NOT_FOUND,
    STATUS_ERROR,
    STATUS_SUCCESS,
    STATUS_WARNING,
)


logger = get_logger(__name__)


@dataclass(frozen=True)
class StockOutcome:
    """单个药品的扣减结果。remaining 为扣减后的库存（仅 success 时有值）。"""

    name: str
    status: str
    message: str
    requested: int = 0
    remaining: Optional[int] = None


class StockCheckError(RuntimeError):
    """库存检查未通过，账单不予生成。"""

    def __init__(self, err_code: int, message: str, outcomes: Sequence[StockOutcome]) -> None:
        self.err_code = err_code
        self.outcomes = list(outcomes)
        super().__init__(ErrorHandler.format_error(err_code, message))


class InventoryLookupError(StockCheckError):
    """药品未找到或库存更新失败（不可人工放行）。"""


class StockShortfallError(StockCheckError):
    """库存不足（可由调用方确认后放行）。"""


class StockLedger(Protocol):
    def deduct(self, items: Sequence[BillItem]) -> List[StockOutcome]:
        ...


def medicine_items(items: Iterable[BillItem]) -> List[BillItem]:
    """只有药品类账单行参与库存扣减。"""
    return [item for item in items if item.item_type is ItemType.MEDICINE]


class InMemoryStockLedger:
    """内存库存表：名称 -> 数量。

    用法示例：
        ledger = InMemoryStockLedger({"Amoxicillin 500mg": 20})
        ledger.deduct([BillItem("amoxicillin", quantity=5, item_type=ItemType.MEDICINE)])
    """

    def __init__(self, stock: Mapping[str, int]) -> None:
        self._stock: Dict[str, int] = {str(k): int(v) for k, v in stock.items()}

    @property
    def quantities(self) -> Dict[str, int]:
        return dict(self._stock)

    def find(self, name: str) -> Optional[str]:
        """返回第一个名称包含 name（不区分大小写）的库存条目名。"""
        needle = (name or "").strip().lower()
        if not needle:
            return None
        for stock_name in self._stock:
            if needle in stock_name.lower():
                return stock_name
        return None

    def deduct(self, items: Sequence[BillItem]) -> List[StockOutcome]:
        outcomes: List[StockOutcome] = []
        for item in items:
            needed = int(item.quantity or 0)
            stock_name = self.find(item.description)
            if stock_name is None:
                outcomes.append(
                    StockOutcome(item.description, STATUS_ERROR, "Medicine not found in database", needed)
                )
                continue
            available = self._stock[stock_name]
            if available < needed:
                outcomes.append(
                    StockOutcome(
                        item.description,
                        STATUS_WARNING,
                        f"Insufficient stock ({available} available, {needed} needed)",
                        needed,
                    )
                )
                continue
            remaining = available - needed
            self._stock[stock_name] = remaining
            outcomes.append(
                StockOutcome(
                    item.description,
                    STATUS_SUCCESS,
                    f"Stock updated. Remaining: {remaining}",
                    needed,
                    remaining,
                )
            )
        return outcomes


def review_stock_outcomes(outcomes: Sequence[StockOutcome], allow_shortfall: bool = False) -> List[StockOutcome]:
    """按账单流程策略审核扣减结果；未通过时抛出 StockCheckError 子类。"""
    for outcome in outcomes:
        log = logger.info if outcome.status == STATUS_SUCCESS else logger.warning
        log("库存扣减：%s -> %s（%s）", outcome.name, outcome.status, outcome.message)

    errors = [o for o in outcomes if o.status == STATUS_ERROR]
    if errors:
        names = ", ".join(o.name for o in errors)
        raise InventoryLookupError(ERR_STOCK_NOT_FOUND, f"库存更新失败：{names}", errors)

    warnings = [o for o in outcomes if o.status == STATUS_WARNING]
    if warnings and not allow_shortfall:
        names = ", ".join(o.name for o in warnings)
        raise StockShortfallError(ERR_STOCK_INSUFFICIENT, f"库存不足：{names}", warnings)
    if warnings:
        logger.warning("库存不足已确认放行：%s 项", len(warnings))
    return list(outcomes)


__all__ = [
    "StockOutcome",
    "StockCheckError",
    "InventoryLookupError",
    "StockShortfallError",
    "StockLedger",
    "InMemoryStockLedger",
    "medicine_items",
    "review_stock_outcomes",
]
