"""
文件路径：dentdoc/components/text.py

说明：文本度量、分行与截断工具函数，从包入口拆分而来。

- 度量统一使用 ReportLab 字体度量（pdfmetrics.stringWidth），
  换行、对齐与表格截断都以此为准，保证同一输入多次渲染结果一致。
"""

from __future__ import annotations

from typing import List

from reportlab.pdfbase import pdfmetrics

from ..variables import CONST_TABLE_ELLIPSIS, CONST_TABLE_TRUNCATE_CHARS


def measure_text_width(text: str, font_name: str, font_size: float) -> float:
    """返回文本在指定字体、字号下的渲染宽度（pt）。

    参数：
        text: 待度量文本。
        font_name: 已注册的字体名（内置 Helvetica 系列无需注册）。
        font_size: 字号（pt）。

    返回：
        宽度（pt）；空文本为 0.0。
    """
    if not text:
        return 0.0
    return float(pdfmetrics.stringWidth(text, font_name, font_size))


def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    """按最大行宽将文本贪心分行（以空白分词）。

    - 逐词追加，直到 `当前行 + " " + 词` 的宽度超过 max_width 再换行；
    - 单个词宽于 max_width 时独占一行，不拆分、不加连字符；
    - 空文本或纯空白返回 []。

    同一输入多次调用结果相同；将结果以单个空格拼接后再次分行，得到相同的行。
    """
    words = (text or "").split()
    lines: List[str] = []
    current = ""
    for word in words:
        trial = f"{current} {word}" if current else word
        if not current or measure_text_width(trial, font_name, font_size) <= max_width:
            current = trial
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def truncate_text(
    text: str,
    max_chars: int = CONST_TABLE_TRUNCATE_CHARS,
    marker: str = CONST_TABLE_ELLIPSIS,
) -> str:
    """按字符数截断文本，超长时以省略号结尾，结果总长度恰为 max_chars。

    示例：
        >>> truncate_text("A" * 45)
        'AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA...'
    """
    if text is None:
        return ""
    if len(text) <= max_chars:
        return text
    keep = max(0, max_chars - len(marker))
    return text[:keep] + marker


__all__ = [
    "measure_text_width",
    "wrap_text",
    "truncate_text",
]
