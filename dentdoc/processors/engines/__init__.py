"""
文件路径：dentdoc/processors/engines/__init__.py

说明：绘制引擎包；当前仅 `reportlab.py`（ReportLab 绘制 + PyPDF2 合并）。
"""

from typing import List

__all__: List[str] = []
