from __future__ import annotations

import pytest

from dentdoc.components import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_RIGHT,
    aligned_anchor,
    from_bottom,
    to_reportlab_xy,
)
from dentdoc.variables import CONST_PAGE_HEIGHT


def test_to_reportlab_flips_y():
    x, y = to_reportlab_xy(260, 173, CONST_PAGE_HEIGHT)
    assert x == 260
    assert y == pytest.approx(CONST_PAGE_HEIGHT - 173)


def test_from_bottom_round_trip_with_flip():
    # 距页底 180 -> 距页顶 661.89 -> ReportLab y 恢复为 180
    top = from_bottom(180, CONST_PAGE_HEIGHT)
    assert top == pytest.approx(661.89)
    assert to_reportlab_xy(0, top, CONST_PAGE_HEIGHT)[1] == pytest.approx(180)


@pytest.mark.parametrize(
    "align, expected",
    [(ALIGN_LEFT, 103.0), (ALIGN_CENTER, 150.0), (ALIGN_RIGHT, 197.0)],
)
def test_aligned_anchor(align, expected):
    assert aligned_anchor(100.0, 100.0, align, padding=3.0) == pytest.approx(expected)


def test_unknown_alignment_raises():
    with pytest.raises(ValueError):
        aligned_anchor(0, 10, "justify")
