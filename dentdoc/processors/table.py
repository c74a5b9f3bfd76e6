"""
文件路径：dentdoc/processors/table.py

说明：等高行表格引擎（账单明细表）。

- 列宽由比例给出，比例之和必须为 1.0（容差 CONST_COLUMN_FRACTION_TOLERANCE），否则立即抛错；
- 表头：主色填充、白色加粗、标签居中；
- 数据行：按序号奇偶交替底色，高亮行（如诊疗费）使用高亮底色且优先于奇偶；
- 左对齐列按字符数截断，右对齐列距右缘固定内边距，居中列以列中点为锚；
- 每行底部细线；全部行绘制后补列分隔线（首列左缘除外）与外框。

绘制器只需提供 `text` / `rect` / `line` 三个方法（见 engines/reportlab.CanvasPainter），
测试中可用记录调用的假绘制器替代。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from ..components import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_RIGHT,
    ConfigurationError,
    aligned_anchor,
    truncate_text,
)
from ..models import ItemType
from ..style import DEFAULT_STYLE, LayoutStyle
from ..variables import CONST_COLUMN_FRACTION_TOLERANCE


class RowStyle(Enum):
    NORMAL = "normal"
    HIGHLIGHT = "highlight"


# 行样式在构造行时由账单行类型一次性确定
ROW_STYLE_BY_ITEM_TYPE = {
    ItemType.MEDICINE: RowStyle.NORMAL,
    ItemType.PROCEDURE: RowStyle.NORMAL,
    ItemType.CONSULTATION: RowStyle.HIGHLIGHT,
    ItemType.OTHER: RowStyle.NORMAL,
}


def row_style_for(item_type: ItemType) -> RowStyle:
    return ROW_STYLE_BY_ITEM_TYPE.get(item_type, RowStyle.NORMAL)


@dataclass(frozen=True)
class TableColumn:
    label: str
    fraction: float
    align: str = ALIGN_LEFT


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[str, ...]
    style: RowStyle = RowStyle.NORMAL


def validate_columns(columns: Sequence[TableColumn]) -> None:
    """校验列定义：至少一列、比例为正且之和为 1.0、对齐方式合法。

    异常：
        ConfigurationError: 列定义非法。
    """
    if not columns:
        raise ConfigurationError("表格至少需要一列")
    for col in columns:
        if col.fraction <= 0:
            raise ConfigurationError(f"列宽比例必须为正：{col.label}={col.fraction}")
        if col.align not in (ALIGN_LEFT, ALIGN_CENTER, ALIGN_RIGHT):
            raise ConfigurationError(f"未知对齐方式：{col.label}={col.align}")
    total = sum(col.fraction for col in columns)
    if abs(total - 1.0) > CONST_COLUMN_FRACTION_TOLERANCE:
        raise ConfigurationError(f"列宽比例之和应为 1.0，实际为 {total:.6f}")


def column_widths(columns: Sequence[TableColumn], total_width: float) -> List[float]:
    validate_columns(columns)
    return [col.fraction * total_width for col in columns]


def column_offsets(columns: Sequence[TableColumn], total_width: float, left: float = 0.0) -> List[float]:
    """各列左缘 x：从 left 开始对列宽做前缀和。

    示例：
        >>> cols = [TableColumn("a", 0.25), TableColumn("b", 0.75)]
        >>> column_offsets(cols, 100.0, left=10.0)
        [10.0, 35.0]
    """
    offsets: List[float] = []
    x = left
    for width in column_widths(columns, total_width):
        offsets.append(x)
        x += width
    return offsets


def render_table(
    painter,
    columns: Sequence[TableColumn],
    rows: Sequence[TableRow],
    origin: Tuple[float, float],
    total_width: float,
    row_height: float,
    *,
    style: LayoutStyle = DEFAULT_STYLE,
    start_index: int = 0,
) -> float:
    """绘制表头与数据行，返回表格底边 y（= origin.y + (行数 + 1) * 行高）。

    参数：
        painter: 绘制器（text / rect / line）。
        columns: 列定义。
        rows: 数据行；单元格数量须与列数一致。
        origin: 表格左上角 (x, y)，y 为距页顶。
        total_width: 表格总宽。
        row_height: 行高（表头与数据行相同）。
        style: 样式。
        start_index: 首行的全局序号，跨页续表时保持奇偶交替连续。
    """
    x0, y0 = origin
    widths = column_widths(columns, total_width)
    offsets = column_offsets(columns, total_width, left=x0)
    for row in rows:
        if len(row.cells) != len(columns):
            raise ConfigurationError(f"行单元格数 {len(row.cells)} 与列数 {len(columns)} 不一致")

    size = style.table_font_size
    baseline = style.table_text_baseline
    padding = style.table_cell_padding

    # 表头
    painter.rect(x0, y0, total_width, row_height, fill_rgb=style.primary_rgb)
    for col, left, width in zip(columns, offsets, widths):
        painter.text(
            aligned_anchor(left, width, ALIGN_CENTER),
            y0 + baseline,
            col.label,
            size=size,
            bold=True,
            rgb=style.header_text_rgb,
            align=ALIGN_CENTER,
        )

    y = y0 + row_height
    for i, row in enumerate(rows):
        if row.style is RowStyle.HIGHLIGHT:
            fill = style.row_highlight_rgb
        elif (start_index + i) % 2 == 0:
            fill = style.row_fill_even_rgb
        else:
            fill = style.row_fill_odd_rgb
        painter.rect(x0, y, total_width, row_height, fill_rgb=fill)

        for col, left, width, cell in zip(columns, offsets, widths, row.cells):
            value = cell
            if col.align == ALIGN_LEFT:
                value = truncate_text(cell, style.table_truncate_chars, style.table_ellipsis)
            painter.text(
                aligned_anchor(left, width, col.align, padding),
                y + baseline,
                value,
                size=size,
                rgb=style.text_rgb,
                align=col.align,
            )

        painter.line(x0, y + row_height, x0 + total_width, y + row_height, rgb=style.grid_rgb)
        y += row_height

    # 列分隔线与外框
    for left in offsets[1:]:
        painter.line(left, y0, left, y, rgb=style.grid_rgb)
    painter.rect(
        x0,
        y0,
        total_width,
        y - y0,
        stroke_rgb=style.primary_rgb,
        line_width=style.border_line_width,
    )
    return y


__all__ = [
    "RowStyle",
    "ROW_STYLE_BY_ITEM_TYPE",
    "row_style_for",
    "TableColumn",
    "TableRow",
    "validate_columns",
    "column_widths",
    "column_offsets",
    "render_table",
]
