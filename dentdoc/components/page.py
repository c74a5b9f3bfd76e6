"""
文件路径：dentdoc/components/page.py

说明：页面几何、版式状态、游标与分页控制器。

状态机：
- ACTIVE：当前页可绘制；
- TRANSITIONING：游标发现剩余空间不足，控制器正在开新页并盖续页页眉；
  完成后游标重置到续页内容起始位置，回到 ACTIVE。

分页控制器不关心内容类型，何时检查溢出由 composer 决定（如每行药品绘制前）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..variables import CONST_PAGE_HEIGHT, CONST_PAGE_WIDTH

# 浮点比较容差：恰好填满剩余空间不应触发分页
_EPS = 1e-6


class PageStatus(Enum):
    ACTIVE = "active"
    TRANSITIONING = "transitioning"


@dataclass(frozen=True)
class PageGeometry:
    """单页几何：A4 尺寸 + 内容区上下界（均为距页顶的 y）。"""

    content_top: float
    bottom_limit: float
    width: float = CONST_PAGE_WIDTH
    height: float = CONST_PAGE_HEIGHT

    @classmethod
    def with_bottom_margin(cls, content_top: float, bottom_margin: float) -> "PageGeometry":
        """以“距页底的最小边距”构造几何。"""
        return cls(content_top=content_top, bottom_limit=CONST_PAGE_HEIGHT - bottom_margin)

    @property
    def usable_height(self) -> float:
        return self.bottom_limit - self.content_top


@dataclass
class LayoutState:
    """单次渲染独占的可变状态：当前页句柄、游标 y、累计页数。"""

    page: Any = None
    y: float = 0.0
    page_count: int = 1
    status: PageStatus = PageStatus.ACTIVE


class PaginationController:
    """分配新页并盖续页页眉。

    参数：
        geometry: 页面几何。
        start_page: 结束当前页并开启新页的回调（通常为 canvas.showPage 的封装）。
        stamp_header: 在新页上绘制续页页眉的回调，入参为新页页码（1 基）。
    """

    def __init__(
        self,
        geometry: PageGeometry,
        start_page: Callable[[], None],
        stamp_header: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.geometry = geometry
        self._start_page = start_page
        self._stamp_header = stamp_header
        self._logger = logging.getLogger(__name__)

    def transition(self, state: LayoutState) -> None:
        state.status = PageStatus.TRANSITIONING
        self._start_page()
        state.page_count += 1
        if self._stamp_header is not None:
            self._stamp_header(state.page_count)
        state.y = self.geometry.content_top
        state.status = PageStatus.ACTIVE
        self._logger.info("内容溢出，已开启第 %s 页", state.page_count)


class PageCursor:
    """当前页上的垂直游标（距页顶的 y，单位 pt）。"""

    def __init__(self, state: LayoutState, geometry: PageGeometry, controller: PaginationController) -> None:
        self.state = state
        self.geometry = geometry
        self.controller = controller

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def page_count(self) -> int:
        return self.state.page_count

    def remaining(self) -> float:
        """当前页剩余可用高度。"""
        return self.geometry.bottom_limit - self.state.y

    def fits(self, height: float) -> bool:
        return self.state.y + height <= self.geometry.bottom_limit + _EPS

    def _on_fresh_page(self) -> bool:
        return self.state.page_count > 1 and abs(self.state.y - self.geometry.content_top) <= _EPS

    def ensure_space(self, height: float) -> bool:
        """确保当前页能容纳 height；不足则翻页。返回是否发生了翻页。

        在刚开启的续页顶部时不再翻页：超过整页高度的内容照常绘制，避免无限翻页。
        """
        if self.fits(height):
            return False
        if self._on_fresh_page():
            logging.getLogger(__name__).warning("内容高度 %.1f 超过单页可用高度 %.1f，将越界绘制", height, self.geometry.usable_height)
            return False
        self.controller.transition(self.state)
        return True

    def advance(self, dy: float) -> float:
        self.state.y += dy
        return self.state.y

    def move_to(self, y: float) -> float:
        self.state.y = y
        return self.state.y


__all__ = [
    "PageStatus",
    "PageGeometry",
    "LayoutState",
    "PaginationController",
    "PageCursor",
]
