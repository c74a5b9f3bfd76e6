"""
文件路径：dentdoc/style.py

模块职责：
- 将 `variables.py` 中的 STYLE_ / 表格常量收拢为不可变样式对象 `LayoutStyle`；
- 渲染时由 DocumentProcessor 显式传入 composer、表格引擎与绘制器，
  组件之间不再读取全局样式，便于同进程内以不同样式并行渲染。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .components import ensure_font
from .variables import (
    PATH_FONT_FILE,
    PATH_FONT_FILE_BOLD,
    STYLE_FONT_NAME,
    STYLE_FONT_NAME_BOLD,
    STYLE_FONT_SIZE_DEFAULT,
    STYLE_LINE_SPACING,
    STYLE_TEXT_COLOR_RGB,
    STYLE_PRIMARY_RGB,
    STYLE_SECONDARY_RGB,
    STYLE_MUTED_RGB,
    STYLE_FAINT_RGB,
    STYLE_HEADER_TEXT_RGB,
    STYLE_ROW_FILL_EVEN_RGB,
    STYLE_ROW_FILL_ODD_RGB,
    STYLE_ROW_HIGHLIGHT_RGB,
    STYLE_GRID_RGB,
    STYLE_TOTAL_FILL_RGB,
    STYLE_TOTAL_STROKE_RGB,
    STYLE_BALANCE_FILL_RGB,
    STYLE_BALANCE_STROKE_RGB,
    STYLE_BALANCE_TEXT_RGB,
    STYLE_GRID_LINE_WIDTH,
    STYLE_BORDER_LINE_WIDTH,
    CONST_TABLE_TRUNCATE_CHARS,
    CONST_TABLE_ELLIPSIS,
    CONST_TABLE_CELL_PADDING,
    CONST_TABLE_TEXT_BASELINE,
    CONST_TABLE_FONT_SIZE,
)

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class LayoutStyle:
    """渲染样式（字体、颜色、线宽、表格参数）。所有字段只读。"""

    font_name: str = STYLE_FONT_NAME
    font_name_bold: str = STYLE_FONT_NAME_BOLD
    font_file: Optional[Path] = PATH_FONT_FILE
    font_file_bold: Optional[Path] = PATH_FONT_FILE_BOLD
    font_size: float = STYLE_FONT_SIZE_DEFAULT
    line_spacing: float = STYLE_LINE_SPACING

    text_rgb: RGB = STYLE_TEXT_COLOR_RGB
    primary_rgb: RGB = STYLE_PRIMARY_RGB
    secondary_rgb: RGB = STYLE_SECONDARY_RGB
    muted_rgb: RGB = STYLE_MUTED_RGB
    faint_rgb: RGB = STYLE_FAINT_RGB

    header_text_rgb: RGB = STYLE_HEADER_TEXT_RGB
    row_fill_even_rgb: RGB = STYLE_ROW_FILL_EVEN_RGB
    row_fill_odd_rgb: RGB = STYLE_ROW_FILL_ODD_RGB
    row_highlight_rgb: RGB = STYLE_ROW_HIGHLIGHT_RGB
    grid_rgb: RGB = STYLE_GRID_RGB
    grid_line_width: float = STYLE_GRID_LINE_WIDTH
    border_line_width: float = STYLE_BORDER_LINE_WIDTH

    total_fill_rgb: RGB = STYLE_TOTAL_FILL_RGB
    total_stroke_rgb: RGB = STYLE_TOTAL_STROKE_RGB
    balance_fill_rgb: RGB = STYLE_BALANCE_FILL_RGB
    balance_stroke_rgb: RGB = STYLE_BALANCE_STROKE_RGB
    balance_text_rgb: RGB = STYLE_BALANCE_TEXT_RGB

    table_font_size: float = CONST_TABLE_FONT_SIZE
    table_truncate_chars: int = CONST_TABLE_TRUNCATE_CHARS
    table_ellipsis: str = CONST_TABLE_ELLIPSIS
    table_cell_padding: float = CONST_TABLE_CELL_PADDING
    table_text_baseline: float = CONST_TABLE_TEXT_BASELINE


def ensure_style_fonts(style: LayoutStyle) -> None:
    """渲染前校验/注册样式引用的常规与加粗字体；失败抛出 ConfigurationError。"""
    ensure_font(style.font_name, style.font_file)
    ensure_font(style.font_name_bold, style.font_file_bold)


DEFAULT_STYLE = LayoutStyle()


__all__ = ["RGB", "LayoutStyle", "DEFAULT_STYLE", "ensure_style_fonts"]
