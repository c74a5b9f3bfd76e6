"""
文件路径：dentdoc/pdf_processor.py

模块职责：
- 渲染门面：接收处方/账单请求，调用对应 composer 排版，输出 PDF 字节；
- 处方：ReportLab 生成文字图层，PyPDF2 叠加到底版首页（无底版时为空白 A4）；
- 账单：ReportLab 直接绘制，先完成库存检查，未通过则不产生任何字节；
- 每次渲染独占自己的 canvas、缓冲与版式状态，多个渲染可并行；
  底版字节与字体注册为进程级只读缓存。

变量引用说明（来自 dentdoc/variables.py）：
- CONST_DOCUMENT_KIND_PRESCRIPTION, CONST_DOCUMENT_KIND_BILL

组件调用说明（来自 dentdoc/components）：
- FileHandler（输出路径、写文件重试）
- get_logger（日志输出）
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .components import FileHandler, get_logger
from .models import BillRequest, PrescriptionRequest
from .processors.bill import BillComposer
from .processors.engines.reportlab import CanvasPainter, load_template_bytes, merge_overlay
from .processors.financials import compute_bill_summary
from .processors.prescription import FieldAnchor, PrescriptionComposer
from .stock import StockLedger, StockOutcome, medicine_items, review_stock_outcomes
from .style import DEFAULT_STYLE, LayoutStyle, ensure_style_fonts
from .variables import CONST_DOCUMENT_KIND_BILL, CONST_DOCUMENT_KIND_PRESCRIPTION


logger = get_logger(__name__)


class DocumentProcessor:
    """处方与账单 PDF 渲染器。

    用法示例：
        processor = DocumentProcessor(prescription_template=Path("config/prescription-template.pdf"))
        pdf_bytes = processor.render_prescription(request)
        processor.write(pdf_bytes, Path("output/prescription-Asha-Rao.pdf"))

    参数：
        style: 不可变样式；构造时校验/注册其中的字体。
        prescription_template: 处方底版路径；为空时在空白 A4 上渲染。
        binding: 处方字段绑定覆盖（字段名 -> FieldAnchor）。
    """

    def __init__(
        self,
        style: LayoutStyle = DEFAULT_STYLE,
        prescription_template: Optional[Path] = None,
        binding: Optional[Mapping[str, FieldAnchor]] = None,
    ) -> None:
        ensure_style_fonts(style)
        self.style = style
        self.prescription_template = prescription_template
        self.binding = binding
        # 最近一次渲染统计：kind/pages/...（供 CLI 与日志展示）
        self.last_render_stats: Optional[dict] = None
        # 最近一次账单渲染的库存扣减结果
        self.last_stock_outcomes: List[StockOutcome] = []

    # -----------------------------
    # 处方
    # -----------------------------
    def render_prescription(self, request: PrescriptionRequest) -> bytes:
        """渲染处方，返回 PDF 字节。

        异常：
            ConfigurationError: 底版缺失、损坏、尺寸不符，或字段绑定非法。
        """
        template_bytes = None
        if self.prescription_template is not None:
            template_bytes = load_template_bytes(str(self.prescription_template))

        logger.info("开始渲染处方：%s", request.patient.name)
        buffer = io.BytesIO()
        try:
            painter = CanvasPainter(buffer, self.style)
            state = PrescriptionComposer(self.style, self.binding).compose(painter, request)
            painter.save()
            overlay = buffer.getvalue()
        finally:
            buffer.close()

        payload = merge_overlay(template_bytes, overlay, metadata=self._prescription_metadata(request))
        self.last_render_stats = {
            "kind": CONST_DOCUMENT_KIND_PRESCRIPTION,
            "pages": state.page_count,
            "medicines": len(request.medicines),
            "template": str(self.prescription_template) if self.prescription_template else None,
        }
        logger.info("处方渲染完成：%s 页，%s 字节", state.page_count, len(payload))
        return payload

    @staticmethod
    def _prescription_metadata(request: PrescriptionRequest) -> Dict[str, str]:
        return {
            "title": f"Prescription - {request.patient.name}",
            "author": request.clinic_title,
            "subject": "Dental Prescription",
        }

    # -----------------------------
    # 账单
    # -----------------------------
    def render_bill(
        self,
        request: BillRequest,
        stock_ledger: Optional[StockLedger] = None,
        allow_shortfall: bool = False,
    ) -> bytes:
        """渲染账单，返回 PDF 字节。

        提供 stock_ledger 时先扣减药品库存：
        - 任一药品未找到/更新失败：抛出 InventoryLookupError；
        - 库存不足且未设置 allow_shortfall：抛出 StockShortfallError。
        两种情况都在生成任何 PDF 字节之前发生。
        """
        self.last_stock_outcomes = []
        if stock_ledger is not None:
            meds = medicine_items(request.items)
            if meds:
                self.last_stock_outcomes = review_stock_outcomes(stock_ledger.deduct(meds), allow_shortfall)

        logger.info("开始渲染账单：%s（%s）", request.invoice.number, request.patient.name)
        summary = compute_bill_summary(request)
        buffer = io.BytesIO()
        try:
            painter = CanvasPainter(buffer, self.style)
            state = BillComposer(self.style).compose(painter, request, summary)
            painter.save()
            payload = buffer.getvalue()
        finally:
            buffer.close()

        self.last_render_stats = {
            "kind": CONST_DOCUMENT_KIND_BILL,
            "pages": state.page_count,
            "rows": len(request.items) + 1,
            "total": str(summary.total),
            "balance_due": str(summary.balance_due),
        }
        logger.info("账单渲染完成：%s 页，%s 字节", state.page_count, len(payload))
        return payload

    # -----------------------------
    # 输出
    # -----------------------------
    @staticmethod
    def write(payload: bytes, target: Path) -> Path:
        """写出渲染结果（IO 失败时重试）。"""
        out = FileHandler.write_bytes(target, payload)
        logger.info("已写出：%s", out)
        return out


__all__ = ["DocumentProcessor"]
