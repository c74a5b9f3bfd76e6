"""
文件路径：dentdoc/processors/bill.py

说明：账单版式 composer（A4，全部内容由代码绘制，无底版）。

版面自上而下：
- 诊所抬头（名称、标语、地址、联系方式）与分隔线、"INVOICE" 标题；
- 左右两栏：发票号/日期/付款方式/付款状态 与 患者姓名/年龄性别/患者编号；
- 可选“Treatment Information”小节；
- “Bill Items”明细表（含自动追加的诊疗费高亮行）；表格超出当前页时分段续表，
  续页重复表头，序号与奇偶底色连续；
- 金额汇总（小计、折扣、合计；非全额付款时追加已付与欠款）；
- 致谢语；条款固定在最后一页距页底 35 mm 处。
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from reportlab.lib.units import mm

from ..components import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_RIGHT,
    LayoutState,
    PageCursor,
    PageGeometry,
    PaginationController,
    format_currency,
    format_date,
    format_number,
    get_logger,
    wrap_text,
)
from ..models import BillItem, BillRequest, ItemType
from ..style import DEFAULT_STYLE, LayoutStyle
from ..variables import (
    CONST_BILL_BOTTOM_MARGIN,
    CONST_BILL_CONTENT_TOP,
    CONST_BILL_CONTINUATION_MARKER_Y,
    CONST_BILL_CONTINUATION_TITLE_Y,
    CONST_BILL_CONTINUED_MARKER,
    CONST_BILL_DATE_LOCALE,
    CONST_BILL_MARGIN,
    CONST_BILL_ROW_HEIGHT,
    CONST_BILL_TERMS_LINES,
    CONST_BILL_TERMS_OFFSET,
    CONST_BILL_TOTALS_WIDTH,
    CONST_BILL_VALUE_INSET,
    CONST_CONSULTATION_LABEL,
    CONST_PAGE_HEIGHT,
    CONST_PAGE_WIDTH,
    CONST_PLACEHOLDER_NA,
)
from .financials import BillSummary, compute_bill_summary
from .table import TableColumn, TableRow, render_table, row_style_for


logger = get_logger(__name__)


BILL_COLUMNS = (
    TableColumn("S.No", 0.08, ALIGN_CENTER),
    TableColumn("Description", 0.42, ALIGN_LEFT),
    TableColumn("Qty", 0.10, ALIGN_CENTER),
    TableColumn("Unit Price (in INR)", 0.20, ALIGN_RIGHT),
    TableColumn("Total (in INR)", 0.20, ALIGN_RIGHT),
)


def with_consultation_row(request: BillRequest) -> List[BillItem]:
    """账单行 + 末尾追加的诊疗费行。"""
    fee = request.consultation_fee or 0
    return list(request.items) + [
        BillItem(
            description=CONST_CONSULTATION_LABEL,
            quantity=1,
            unit_price=fee,
            total=fee,
            item_type=ItemType.CONSULTATION,
            id=len(request.items) + 1,
        )
    ]


def build_table_rows(items: Sequence[BillItem]) -> List[TableRow]:
    return [
        TableRow(
            cells=(
                str(index + 1),
                item.description or "",
                format_number(item.quantity),
                format_currency(item.unit_price),
                format_currency(item.total),
            ),
            style=row_style_for(item.item_type),
        )
        for index, item in enumerate(items)
    ]


def bill_metadata(request: BillRequest) -> Dict[str, str]:
    return {
        "title": f"Dental Bill - {request.patient.name}",
        "author": request.clinic.name,
        "subject": "Dental Bill",
        "keywords": "dental, invoice, bill",
        "creator": "Dental Clinic Billing System",
    }


class BillComposer:
    """在绘制器上排版一张账单（可能跨多页）。"""

    def __init__(self, style: LayoutStyle = DEFAULT_STYLE) -> None:
        self.style = style
        self.margin = CONST_BILL_MARGIN
        self.content_width = CONST_PAGE_WIDTH - 2 * self.margin
        self.row_height = CONST_BILL_ROW_HEIGHT

    def geometry(self) -> PageGeometry:
        return PageGeometry.with_bottom_margin(CONST_BILL_CONTENT_TOP, CONST_BILL_BOTTOM_MARGIN)

    # ---------- 续页页眉 ----------
    def stamp_continuation_header(self, painter, clinic_name: str) -> None:
        center = CONST_PAGE_WIDTH / 2.0
        painter.text(
            center,
            CONST_BILL_CONTINUATION_TITLE_Y,
            clinic_name,
            size=14,
            bold=True,
            rgb=self.style.primary_rgb,
            align=ALIGN_CENTER,
        )
        painter.text(
            center,
            CONST_BILL_CONTINUATION_MARKER_Y,
            CONST_BILL_CONTINUED_MARKER,
            size=10,
            rgb=self.style.muted_rgb,
            align=ALIGN_CENTER,
        )

    # ---------- 抬头 ----------
    def _draw_letterhead(self, painter, request: BillRequest, y: float) -> float:
        s = self.style
        center = CONST_PAGE_WIDTH / 2.0
        clinic = request.clinic
        painter.text(center, y, clinic.name, size=18, bold=True, rgb=s.primary_rgb, align=ALIGN_CENTER)
        y += 7 * mm
        painter.text(center, y, clinic.tagline, size=10, rgb=s.muted_rgb, align=ALIGN_CENTER)
        y += 5 * mm
        for line in clinic.address_lines:
            painter.text(center, y, line, size=8, rgb=s.muted_rgb, align=ALIGN_CENTER)
            y += 4 * mm
        painter.text(center, y, clinic.contact_line, size=8, rgb=s.muted_rgb, align=ALIGN_CENTER)
        y += 8 * mm

        painter.line(self.margin, y, CONST_PAGE_WIDTH - self.margin, y, rgb=s.primary_rgb, line_width=s.border_line_width)
        y += 8 * mm
        painter.text(center, y, "INVOICE", size=14, bold=True, rgb=s.secondary_rgb, align=ALIGN_CENTER)
        return y + 10 * mm

    def _draw_parties(self, painter, request: BillRequest, y: float) -> float:
        col_width = self.content_width / 2.0
        left_col = self.margin
        right_col = self.margin + col_width
        left_value_x = left_col + col_width - CONST_BILL_VALUE_INSET
        right_value_x = CONST_PAGE_WIDTH - self.margin

        invoice = request.invoice
        left_rows = (
            ("Invoice No:", invoice.number or CONST_PLACEHOLDER_NA),
            ("Date:", format_date(invoice.date, CONST_BILL_DATE_LOCALE) or CONST_PLACEHOLDER_NA),
            ("Payment Method:", invoice.payment_method or CONST_PLACEHOLDER_NA),
            ("Payment Status:", invoice.payment_status or CONST_PLACEHOLDER_NA),
        )
        for i, (label, value) in enumerate(left_rows):
            row_y = y + i * 7 * mm
            painter.text(left_col, row_y, label, size=10, bold=True)
            painter.text(left_value_x, row_y, value, size=10, align=ALIGN_RIGHT)

        # 右栏比左栏低一行距
        y += 7 * mm
        patient = request.patient
        right_rows = (
            ("Patient Name:", patient.name or CONST_PLACEHOLDER_NA),
            ("Age/Sex:", f"{patient.age or CONST_PLACEHOLDER_NA} / {patient.sex or CONST_PLACEHOLDER_NA}"),
            ("Patient ID:", patient.patient_id or CONST_PLACEHOLDER_NA),
        )
        for i, (label, value) in enumerate(right_rows):
            row_y = y + i * 7 * mm
            painter.text(right_col, row_y, label, size=10, bold=True)
            painter.text(right_value_x, row_y, value, size=10, align=ALIGN_RIGHT)
        return y + 25 * mm

    def _draw_treatment(self, painter, request: BillRequest, cursor: PageCursor) -> None:
        diagnosis = (request.diagnosis or "").strip()
        teeth = (request.teeth or "").strip()
        if not diagnosis and not teeth:
            return
        s = self.style
        lines = []
        if diagnosis:
            lines.extend(wrap_text(f"Diagnosis: {diagnosis}", s.font_name, 9, self.content_width))
        if teeth:
            lines.extend(wrap_text(f"Teeth Treated: {teeth}", s.font_name, 9, self.content_width))
        cursor.ensure_space(7 * mm + len(lines) * 5 * mm + 5 * mm)

        y = cursor.y
        painter.text(self.margin, y, "Treatment Information", size=12, bold=True, rgb=s.secondary_rgb)
        painter.line(self.margin, y + 1 * mm, self.margin + 40 * mm, y + 1 * mm, rgb=s.secondary_rgb)
        y += 7 * mm
        for line in lines:
            painter.text(self.margin, y, line, size=9)
            y += 5 * mm
        cursor.move_to(y + 5 * mm)

    # ---------- 明细表 ----------
    def _draw_items(self, painter, rows: Sequence[TableRow], cursor: PageCursor) -> None:
        s = self.style
        # 标题与表头、首行不分离
        cursor.ensure_space(7 * mm + 2 * self.row_height)
        painter.text(self.margin, cursor.y, "Bill Items", size=12, bold=True, rgb=s.secondary_rgb)
        cursor.advance(7 * mm)

        index = 0
        while index < len(rows):
            cursor.ensure_space(2 * self.row_height)
            capacity = max(1, math.floor(cursor.remaining() / self.row_height + 1e-9) - 1)
            chunk = rows[index:index + capacity]
            bottom = render_table(
                painter,
                BILL_COLUMNS,
                chunk,
                (self.margin, cursor.y),
                self.content_width,
                self.row_height,
                style=s,
                start_index=index,
            )
            cursor.move_to(bottom)
            index += len(chunk)
            if index < len(rows):
                logger.info("明细表跨页：已绘制 %s/%s 行", index, len(rows))

    # ---------- 汇总 ----------
    def _totals_height(self, summary: BillSummary) -> float:
        height = 10 * mm + 7 * mm + 10 * mm + 6 * mm
        if not summary.is_full_payment:
            height += 10 * mm + 9 * mm + 6 * mm
        return height

    def _draw_totals(self, painter, summary: BillSummary, cursor: PageCursor) -> None:
        s = self.style
        cursor.ensure_space(self._totals_height(summary))
        right = CONST_PAGE_WIDTH - self.margin
        totals_x = right - CONST_BILL_TOTALS_WIDTH
        box_x = totals_x - 3 * mm
        box_w = right - totals_x + 5 * mm

        y = cursor.y + 10 * mm
        painter.text(totals_x, y, "Subtotal:", size=10)
        painter.text(right, y, format_currency(summary.subtotal), size=10, align=ALIGN_RIGHT)
        y += 7 * mm
        painter.text(totals_x, y, f"Discount ({format_number(summary.discount_percent)}%):", size=10)
        painter.text(right, y, format_currency(summary.discount_amount), size=10, align=ALIGN_RIGHT)
        y += 10 * mm

        painter.rect(
            box_x,
            y - 5 * mm,
            box_w,
            10 * mm,
            fill_rgb=s.total_fill_rgb,
            stroke_rgb=s.total_stroke_rgb,
            line_width=s.grid_line_width * 3,
        )
        painter.text(totals_x, y + 1 * mm, "Total Amount:", size=11, bold=True, rgb=s.primary_rgb)
        painter.text(right, y + 1 * mm, format_currency(summary.total), size=11, bold=True, rgb=s.primary_rgb, align=ALIGN_RIGHT)
        y += 6 * mm

        if not summary.is_full_payment:
            y += 10 * mm
            painter.text(totals_x, y, "Amount Paid:", size=10)
            painter.text(right, y, format_currency(summary.amount_paid), size=10, align=ALIGN_RIGHT)
            y += 9 * mm
            painter.rect(
                box_x,
                y - 5 * mm,
                box_w,
                10 * mm,
                fill_rgb=s.balance_fill_rgb,
                stroke_rgb=s.balance_stroke_rgb,
                line_width=s.grid_line_width * 3,
            )
            painter.text(totals_x, y + 1 * mm, "Balance Due:", size=11, bold=True, rgb=s.balance_text_rgb)
            painter.text(
                right,
                y + 1 * mm,
                format_currency(summary.balance_due),
                size=11,
                bold=True,
                rgb=s.balance_text_rgb,
                align=ALIGN_RIGHT,
            )
            y += 6 * mm
        cursor.move_to(y)

    def _draw_footer(self, painter, request: BillRequest, cursor: PageCursor) -> None:
        s = self.style
        cursor.ensure_space(15 * mm + 10 * mm)
        center = CONST_PAGE_WIDTH / 2.0
        y = cursor.y + 15 * mm
        for line in (
            f"Thank you for choosing {request.clinic.name} for your dental care needs.",
            "We wish you a speedy recovery and the best of health.",
        ):
            painter.text(center, y, line, size=9, rgb=s.muted_rgb, align=ALIGN_CENTER)
            y += 5 * mm
        cursor.move_to(y)

        # 条款固定在当前（最后）一页底部
        terms_y = CONST_PAGE_HEIGHT - CONST_BILL_TERMS_OFFSET
        for i, line in enumerate(CONST_BILL_TERMS_LINES):
            painter.text(self.margin, terms_y + i * 5 * mm, line, size=8, rgb=s.faint_rgb)

    def compose(self, painter, request: BillRequest, summary: Optional[BillSummary] = None) -> LayoutState:
        """排版整张账单，返回本次渲染的版式状态。"""
        if summary is None:
            summary = compute_bill_summary(request)
        painter.set_metadata(bill_metadata(request))

        geometry = self.geometry()
        state = LayoutState(y=self.margin)
        controller = PaginationController(
            geometry,
            start_page=painter.show_page,
            stamp_header=lambda _page_no: self.stamp_continuation_header(painter, request.clinic.name),
        )
        cursor = PageCursor(state, geometry, controller)

        cursor.move_to(self._draw_letterhead(painter, request, cursor.y))
        cursor.move_to(self._draw_parties(painter, request, cursor.y))
        self._draw_treatment(painter, request, cursor)

        rows = build_table_rows(with_consultation_row(request))
        self._draw_items(painter, rows, cursor)
        self._draw_totals(painter, summary, cursor)
        self._draw_footer(painter, request, cursor)

        logger.info("账单排版完成：明细 %s 行，共 %s 页", len(rows), state.page_count)
        return state


__all__ = [
    "BILL_COLUMNS",
    "with_consultation_row",
    "build_table_rows",
    "bill_metadata",
    "BillComposer",
]
