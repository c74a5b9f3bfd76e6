from __future__ import annotations

import math

import pytest

from dentdoc.components import (
    LayoutState,
    PageCursor,
    PageGeometry,
    PageStatus,
    PaginationController,
)
from dentdoc.variables import CONST_PAGE_HEIGHT


def _make_cursor(usable: float, offset: float):
    """内容区 [0, usable]，首页已用 offset。返回 (cursor, 已盖页眉的页码列表)。"""
    stamped = []
    geometry = PageGeometry(content_top=0.0, bottom_limit=usable)
    state = LayoutState(y=offset)
    controller = PaginationController(geometry, start_page=lambda: None, stamp_header=stamped.append)
    return PageCursor(state, geometry, controller), stamped


def _place(cursor: PageCursor, n: int, h: float) -> int:
    for _ in range(n):
        cursor.ensure_space(h)
        cursor.advance(h)
    return cursor.page_count


def _expected_pages(p: float, h: float, o: float, n: int) -> int:
    if o + n * h <= p:
        return 1
    return math.ceil((o + n * h - p) / p) + 1


class TestPaginationCount:
    @pytest.mark.parametrize("n, pages", [(7, 1), (8, 2), (17, 2), (18, 3)])
    def test_boundaries(self, n, pages):
        cursor, _ = _make_cursor(100, 30)
        assert _place(cursor, n, 10) == pages
        assert pages == _expected_pages(100, 10, 30, n)

    @pytest.mark.parametrize("n", [0, 1, 5, 12, 25, 40])
    def test_matches_formula_when_height_divides_page(self, n):
        cursor, _ = _make_cursor(100, 20)
        assert _place(cursor, n, 20) == _expected_pages(100, 20, 20, n)

    def test_exact_fit_does_not_overflow(self):
        cursor, stamped = _make_cursor(100, 30)
        assert cursor.ensure_space(70) is False
        assert cursor.page_count == 1
        assert stamped == []

    def test_one_unit_over_overflows(self):
        cursor, stamped = _make_cursor(100, 30)
        assert cursor.ensure_space(71) is True
        assert cursor.page_count == 2
        assert stamped == [2]
        assert cursor.y == 0.0


class TestPaginationStateMachine:
    def test_returns_to_active_after_transition(self):
        cursor, _ = _make_cursor(100, 95)
        cursor.ensure_space(10)
        assert cursor.state.status is PageStatus.ACTIVE

    def test_tall_item_on_fresh_page_does_not_loop(self):
        cursor, stamped = _make_cursor(100, 30)
        # 首次超出：翻页
        assert cursor.ensure_space(150) is True
        # 续页顶部：不再翻页，照常绘制
        assert cursor.ensure_space(150) is False
        cursor.advance(150)
        # 再来一个：当前页已非新页，继续翻页
        assert cursor.ensure_space(150) is True
        assert stamped == [2, 3]

    def test_first_page_at_content_top_still_transitions(self):
        geometry = PageGeometry(content_top=0.0, bottom_limit=100)
        state = LayoutState(y=0.0)
        pages = []
        controller = PaginationController(geometry, start_page=lambda: pages.append("new"))
        cursor = PageCursor(state, geometry, controller)
        assert cursor.ensure_space(120) is True
        assert pages == ["new"]


def test_geometry_from_bottom_margin():
    geometry = PageGeometry.with_bottom_margin(content_top=100, bottom_margin=180)
    assert geometry.bottom_limit == pytest.approx(CONST_PAGE_HEIGHT - 180)
    assert geometry.usable_height == pytest.approx(CONST_PAGE_HEIGHT - 280)
