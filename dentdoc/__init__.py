"""
文件路径：dentdoc/__init__.py

说明：牙科处方 / 账单 PDF 版式与分页引擎。

- 渲染门面：`dentdoc.pdf_processor.DocumentProcessor`
- 请求模型：`dentdoc.models`
- 载荷解析：`dentdoc.data_handler`
"""

__version__ = "0.1.0"
