"""
文件路径：dentdoc/processors/__init__.py

说明：
- 版式实现包，由 `dentdoc/pdf_processor.py` 门面调用：
  - layout.py（自由文本段落的换行与起始位置）
  - table.py（等高行表格引擎）
  - financials.py（账单汇总金额）
  - prescription.py / bill.py（两种文档的 composer）
  - engines/reportlab.py（绘制器与底版合并）
"""

from typing import List

__all__: List[str] = []
