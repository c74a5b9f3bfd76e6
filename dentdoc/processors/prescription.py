"""
文件路径：dentdoc/processors/prescription.py

说明：处方版式 composer。

绘制顺序（坐标均为距页顶的 pt，x/y 来自字段绑定表）：
1. 患者姓名、年龄、性别、就诊日期（固定位置单行）；
2. 主诉、病史、口腔检查（按行宽换行，后一段不与前一段重叠）；
3. 药品行：口腔检查段落之后留出间距开始，每行绘制前检查溢出，溢出时开续页；
4. 医嘱与复诊日期：绘制在最后一页的贴底位置。

字段绑定表 `DEFAULT_PRESCRIPTION_BINDING` 与底版 PDF 一一对应；更换底版时通过
`data_handler.load_template_binding` 从 JSON 覆盖，无需修改本模块。
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..components import (
    ALIGN_CENTER,
    LayoutState,
    PageCursor,
    PageGeometry,
    PaginationController,
    format_date,
    from_bottom,
    get_logger,
)
from ..models import PrescriptionRequest, ToothRecord
from ..style import DEFAULT_STYLE, LayoutStyle
from ..variables import (
    CONST_PAGE_HEIGHT,
    CONST_PAGE_WIDTH,
    CONST_PLACEHOLDER_ADVICE,
    CONST_PLACEHOLDER_FOLLOWUP,
    CONST_PLACEHOLDER_NA,
    CONST_PLACEHOLDER_NONE,
    CONST_PLACEHOLDER_NOT_RECORDED,
    CONST_RX_BOTTOM_MARGIN,
    CONST_RX_CONTENT_TOP,
    CONST_RX_CONTINUATION_MARKER_Y,
    CONST_RX_CONTINUATION_TITLE_Y,
    CONST_RX_CONTINUED_MARKER,
    CONST_RX_DATE_LOCALE,
    CONST_RX_MEDICINE_GAP,
    CONST_RX_MEDICINE_ROW_SPACING,
    CONST_RX_SECTION_GAP,
)
from .layout import clip_lines, draw_lines, layout_lines, section_start


logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldAnchor:
    """底版上某个字段的绘制位置。

    属性：
        x: 基线起点 x。
        y: 基线 y；from_bottom 为 True 时表示距页底的高度。药品列只使用 x。
        size: 字号。
        max_width: 换行宽度；为空表示单行。
        line_spacing: 多行时的行距。
        from_bottom: y 是否以页底为基准。
    """

    x: float
    y: float = 0.0
    size: float = 12
    max_width: Optional[float] = None
    line_spacing: float = 20.0
    from_bottom: bool = False

    def top_y(self, page_height: float = CONST_PAGE_HEIGHT) -> float:
        return from_bottom(self.y, page_height) if self.from_bottom else self.y


DEFAULT_PRESCRIPTION_BINDING: Mapping[str, FieldAnchor] = MappingProxyType(
    {
        "patient_name": FieldAnchor(x=260, y=173),
        "age": FieldAnchor(x=197, y=208),
        "sex": FieldAnchor(x=335, y=208),
        "date": FieldAnchor(x=507, y=173),
        "chief_complaint": FieldAnchor(x=197, y=242, max_width=340),
        "medical_history": FieldAnchor(x=197, y=281, max_width=340),
        "oral_exam": FieldAnchor(x=197, y=311, max_width=340),
        "medicine_name": FieldAnchor(x=160),
        "medicine_dosage": FieldAnchor(x=357),
        "medicine_duration": FieldAnchor(x=492),
        "advice": FieldAnchor(x=240, y=180, max_width=320, line_spacing=14, from_bottom=True),
        "followup": FieldAnchor(x=225, y=126, from_bottom=True),
    }
)

PRESCRIPTION_FIELDS = tuple(DEFAULT_PRESCRIPTION_BINDING)


def format_tooth_id(tooth_id: int) -> str:
    """FDI 牙位编号转显示文本：个位（象限后数字）为 9-13 时转为字母 A-E。

    示例：
        >>> format_tooth_id(19), format_tooth_id(53), format_tooth_id(413)
        ('1A', '53', '4E')
    """
    raw = str(tooth_id)
    quadrant, number = raw[:1], raw[1:]
    if number.isdigit() and 9 <= int(number) <= 13:
        return f"{quadrant}{chr(ord('A') + int(number) - 9)}"
    return raw


def format_dental_notation(teeth: Iterable[ToothRecord]) -> str:
    """选中牙位格式化为 `#1A (Caries); #21`；未记录病变时不带括号。"""
    parts = []
    for tooth in teeth:
        label = f"#{format_tooth_id(tooth.id)}"
        disease = (tooth.disease or "").strip()
        parts.append(f"{label} ({disease})" if disease else label)
    return "; ".join(parts)


def build_oral_exam_text(request: PrescriptionRequest) -> str:
    """口腔检查文本：`Teeth involved: <牙位>` 与临床备注以 "; " 连接；两者皆空为 "None"。"""
    notation = (
        format_dental_notation(request.selected_teeth)
        if request.selected_teeth
        else (request.dental_notation or "").strip()
    )
    notes = (request.clinical_notes or "").strip() or (request.diagnosis or "").strip()
    parts = []
    if notation:
        parts.append(f"Teeth involved: {notation}")
    if notes:
        parts.append(notes)
    return "; ".join(parts) if parts else CONST_PLACEHOLDER_NONE


def _or_placeholder(value: str, placeholder: str, field_name: str) -> str:
    text = (value or "").strip()
    if text:
        return text
    logger.info("字段 %s 为空，使用占位文本：%s", field_name, placeholder)
    return placeholder


class PrescriptionComposer:
    """在绘制器上按字段绑定表排版一张处方（可能跨多页）。

    参数：
        style: 不可变样式。
        binding: 字段名 -> FieldAnchor；缺失的字段回退到默认绑定。
    """

    def __init__(
        self,
        style: LayoutStyle = DEFAULT_STYLE,
        binding: Optional[Mapping[str, FieldAnchor]] = None,
    ) -> None:
        self.style = style
        merged = dict(DEFAULT_PRESCRIPTION_BINDING)
        merged.update(binding or {})
        self.binding: Mapping[str, FieldAnchor] = MappingProxyType(merged)

    def geometry(self) -> PageGeometry:
        # 药品行基线不得低于距页底 CONST_RX_BOTTOM_MARGIN；每行占一个行距
        return PageGeometry(
            content_top=CONST_RX_CONTENT_TOP,
            bottom_limit=CONST_PAGE_HEIGHT - CONST_RX_BOTTOM_MARGIN + CONST_RX_MEDICINE_ROW_SPACING,
        )

    def _draw_field(self, painter, name: str, value: str) -> None:
        anchor = self.binding[name]
        painter.text(anchor.x, anchor.top_y(), value, size=anchor.size)

    def _draw_section(self, painter, name: str, text: str, previous_end: Optional[float]) -> float:
        anchor = self.binding[name]
        lines = layout_lines(text, self.style.font_name, anchor.size, anchor.max_width)
        start = section_start(anchor.top_y(), previous_end, CONST_RX_SECTION_GAP)
        return draw_lines(painter, lines, anchor.x, start, anchor.line_spacing, size=anchor.size)

    def stamp_continuation_header(self, painter, title: str) -> None:
        center = CONST_PAGE_WIDTH / 2.0
        painter.text(center, CONST_RX_CONTINUATION_TITLE_Y, title, size=14, align=ALIGN_CENTER)
        painter.text(
            center,
            CONST_RX_CONTINUATION_MARKER_Y,
            CONST_RX_CONTINUED_MARKER,
            size=self.style.font_size,
            align=ALIGN_CENTER,
        )

    def compose(self, painter, request: PrescriptionRequest) -> LayoutState:
        """排版整张处方，返回本次渲染的版式状态（页数、游标位置）。"""
        patient = request.patient

        # 1. 固定位置字段
        self._draw_field(painter, "patient_name", _or_placeholder(patient.name, CONST_PLACEHOLDER_NA, "patient_name"))
        self._draw_field(painter, "age", _or_placeholder(patient.age, CONST_PLACEHOLDER_NA, "age"))
        self._draw_field(painter, "sex", _or_placeholder(patient.sex, CONST_PLACEHOLDER_NA, "sex"))
        visit_date = format_date(request.date, CONST_RX_DATE_LOCALE)
        self._draw_field(painter, "date", _or_placeholder(visit_date, CONST_PLACEHOLDER_NOT_RECORDED, "date"))

        # 2. 自由文本段落
        end = self._draw_section(
            painter,
            "chief_complaint",
            _or_placeholder(request.chief_complaint, CONST_PLACEHOLDER_NA, "chief_complaint"),
            None,
        )
        end = self._draw_section(
            painter,
            "medical_history",
            _or_placeholder(request.medical_history, CONST_PLACEHOLDER_NA, "medical_history"),
            end,
        )
        oral_anchor = self.binding["oral_exam"]
        oral_lines = layout_lines(
            build_oral_exam_text(request), self.style.font_name, oral_anchor.size, oral_anchor.max_width
        )
        oral_start = section_start(oral_anchor.top_y(), end, CONST_RX_SECTION_GAP)
        draw_lines(painter, oral_lines, oral_anchor.x, oral_start, oral_anchor.line_spacing, size=oral_anchor.size)

        # 3. 药品行
        geometry = self.geometry()
        state = LayoutState(
            y=oral_start + len(oral_lines) * oral_anchor.line_spacing + CONST_RX_MEDICINE_GAP,
        )
        controller = PaginationController(
            geometry,
            start_page=painter.show_page,
            stamp_header=lambda _page_no: self.stamp_continuation_header(painter, request.clinic_title),
        )
        cursor = PageCursor(state, geometry, controller)
        columns = (
            ("medicine_name", "name"),
            ("medicine_dosage", "dosage"),
            ("medicine_duration", "duration"),
        )
        for medicine in request.medicines:
            cursor.ensure_space(CONST_RX_MEDICINE_ROW_SPACING)
            for field_name, attr in columns:
                anchor = self.binding[field_name]
                painter.text(anchor.x, cursor.y, getattr(medicine, attr) or "", size=anchor.size)
            cursor.advance(CONST_RX_MEDICINE_ROW_SPACING)

        # 4. 医嘱与复诊（最后一页贴底）
        advice_anchor = self.binding["advice"]
        advice_lines = layout_lines(
            _or_placeholder(request.advice, CONST_PLACEHOLDER_ADVICE, "advice"),
            self.style.font_name,
            advice_anchor.size,
            advice_anchor.max_width,
        )
        # 医嘱自锚点向下排列，不得越过复诊日期所在基线
        room = self.binding["followup"].top_y() - advice_anchor.top_y()
        max_advice_lines = max(1, int(room // advice_anchor.line_spacing)) if advice_anchor.line_spacing > 0 else 1
        if len(advice_lines) > max_advice_lines:
            logger.warning("医嘱共 %s 行，超出可用 %s 行，已截断", len(advice_lines), max_advice_lines)
            advice_lines = clip_lines(
                advice_lines,
                max_advice_lines,
                self.style.font_name,
                advice_anchor.size,
                advice_anchor.max_width,
            )
        draw_lines(
            painter,
            advice_lines,
            advice_anchor.x,
            advice_anchor.top_y(),
            advice_anchor.line_spacing,
            size=advice_anchor.size,
        )
        followup = format_date(request.followup_date, CONST_RX_DATE_LOCALE)
        self._draw_field(painter, "followup", _or_placeholder(followup, CONST_PLACEHOLDER_FOLLOWUP, "followup"))

        logger.info(
            "处方排版完成：药品 %s 行，口腔检查 %s 行，共 %s 页",
            len(request.medicines),
            len(oral_lines),
            state.page_count,
        )
        return state


__all__ = [
    "FieldAnchor",
    "DEFAULT_PRESCRIPTION_BINDING",
    "PRESCRIPTION_FIELDS",
    "format_tooth_id",
    "format_dental_notation",
    "build_oral_exam_text",
    "PrescriptionComposer",
]
