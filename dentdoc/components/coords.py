"""
文件路径：dentdoc/components/coords.py

说明：坐标计算相关通用函数，从包入口拆分而来。

坐标系约定：
- 版式层（composer / cursor / table）一律使用“距页顶”的 y（向下为正），便于自上而下排版；
- ReportLab 原点在左下，绘制前由 `to_reportlab_xy` 做 Y 轴翻转；
- 模板中“贴底”字段（医嘱、复诊）以距页底的高度给出，经 `from_bottom` 转为距页顶。
"""

from __future__ import annotations

from typing import Tuple

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"


def to_reportlab_xy(x: float, y_top_based: float, page_height: float) -> Tuple[float, float]:
    """将距页顶的 Y 值转换为 ReportLab 底左原点的 Y。"""
    return x, page_height - y_top_based


def from_bottom(y_bottom_based: float, page_height: float) -> float:
    """将距页底的高度转换为距页顶的 y。"""
    return page_height - y_bottom_based


def aligned_anchor(left: float, width: float, align: str, padding: float = 0.0) -> float:
    """返回某一水平区间内按对齐方式绘制文字时的锚点 x。

    参数：
        left: 区间左边界。
        width: 区间宽度。
        align: "left" / "center" / "right"。
        padding: 左/右对齐时距边缘的内边距；居中时忽略。

    返回：
        左对齐为左边界 + padding；居中为区间中点；右对齐为右边界 - padding。
        调用方需配合相应的 drawString / drawCentredString / drawRightString 语义。
    """
    if align == ALIGN_CENTER:
        return left + width / 2.0
    if align == ALIGN_RIGHT:
        return left + width - padding
    if align == ALIGN_LEFT:
        return left + padding
    raise ValueError(f"未知对齐方式：{align}")


__all__ = [
    "ALIGN_LEFT",
    "ALIGN_CENTER",
    "ALIGN_RIGHT",
    "to_reportlab_xy",
    "from_bottom",
    "aligned_anchor",
]
