"""
文件路径：dentdoc/processors/layout.py

说明：自由文本段落的布局函数（处方主诉、病史、口腔检查、医嘱）。

贴底段落（医嘱）行数受下方固定字段限制，超出部分由 `clip_lines` 截断。
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..components import measure_text_width, wrap_text
from ..variables import CONST_TABLE_ELLIPSIS


def section_start(anchor_y: float, previous_end: Optional[float], gap: float) -> float:
    """段落起始基线：不早于模板锚点，也不与上一段末尾重叠。

    previous_end 为上一段之后的下一条可用基线（见 `draw_lines` 返回值）；为空时直接用锚点。
    """
    if previous_end is None:
        return anchor_y
    return max(anchor_y, previous_end + gap)


def layout_lines(
    text: str,
    font_name: str,
    font_size: float,
    max_width: Optional[float],
) -> List[str]:
    """按最大行宽分行；max_width 为空时整段保持单行（空白会被规整为单个空格）。"""
    if max_width is None or max_width <= 0:
        joined = " ".join((text or "").split())
        return [joined] if joined else []
    return wrap_text(text, font_name, font_size, max_width)


def draw_lines(
    painter,
    lines: Sequence[str],
    x: float,
    y: float,
    line_spacing: float,
    *,
    size: Optional[float] = None,
) -> float:
    """自基线 y 起逐行绘制，返回最后一行之后的下一条基线。"""
    current_y = y
    for line in lines:
        painter.text(x, current_y, line, size=size)
        current_y += line_spacing
    return current_y


def clip_lines(
    lines: Sequence[str],
    max_lines: int,
    font_name: str,
    font_size: float,
    max_width: Optional[float],
    marker: str = CONST_TABLE_ELLIPSIS,
) -> List[str]:
    """最多保留 max_lines 行；有行被丢弃时，最后保留行末尾加省略号（不超过 max_width）。"""
    if max_lines <= 0:
        return []
    if len(lines) <= max_lines:
        return list(lines)
    kept = list(lines[:max_lines])
    last = kept[-1]
    if max_width is not None and max_width > 0:
        while last and measure_text_width(last + marker, font_name, font_size) > max_width:
            last = last[:-1]
    kept[-1] = last.rstrip() + marker
    return kept


__all__ = ["section_start", "layout_lines", "clip_lines", "draw_lines"]
