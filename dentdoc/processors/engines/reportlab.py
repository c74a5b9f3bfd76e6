"""
文件路径：dentdoc/processors/engines/reportlab.py

说明：ReportLab 绘制器与 PyPDF2 底版合并。

- `CanvasPainter` 封装 reportlab canvas，对外提供“距页顶”坐标的绘制接口，
  composer 与表格引擎只与该接口交互，不直接接触 ReportLab 坐标；
- 处方底版：首页文字图层叠加到底版首页，溢出页原样追加；
- 底版字节在进程内缓存（lru_cache），多次渲染共享只读数据。
"""

from __future__ import annotations

import io
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

import pdfplumber
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError
from reportlab.pdfgen import canvas

from ...components import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_RIGHT,
    ConfigurationError,
    get_logger,
    to_reportlab_xy,
)
from ...style import DEFAULT_STYLE, RGB, LayoutStyle
from ...variables import (
    CONST_PAGE_HEIGHT,
    CONST_PAGE_SIZE_TOLERANCE,
    CONST_PAGE_WIDTH,
    ERR_PDF_MERGE_FAILED,
    ERR_TEMPLATE_INVALID,
)


logger = get_logger(__name__)


def _rgb(color: RGB) -> Tuple[float, float, float]:
    return tuple(v / 255.0 for v in color)  # type: ignore[return-value]


class CanvasPainter:
    """基于 reportlab canvas 的绘制器（A4 纵向，坐标为距页顶的 y）。

    参数：
        buffer: 输出缓冲（BytesIO），由调用方负责关闭。
        style: 不可变样式；未显式给出字号、颜色时使用其默认值。
    """

    def __init__(self, buffer: io.BytesIO, style: LayoutStyle = DEFAULT_STYLE) -> None:
        self.style = style
        self.page_width = CONST_PAGE_WIDTH
        self.page_height = CONST_PAGE_HEIGHT
        self.canvas = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))

    def text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        size: Optional[float] = None,
        bold: bool = False,
        rgb: Optional[RGB] = None,
        align: str = ALIGN_LEFT,
    ) -> None:
        """在基线 (x, y) 绘制单行文本；align 决定 x 是左端、中点还是右端。"""
        c = self.canvas
        font = self.style.font_name_bold if bold else self.style.font_name
        c.setFont(font, size if size is not None else self.style.font_size)
        c.setFillColorRGB(*_rgb(rgb if rgb is not None else self.style.text_rgb))
        rx, ry = to_reportlab_xy(x, y, self.page_height)
        if align == ALIGN_CENTER:
            c.drawCentredString(rx, ry, text)
        elif align == ALIGN_RIGHT:
            c.drawRightString(rx, ry, text)
        else:
            c.drawString(rx, ry, text)

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill_rgb: Optional[RGB] = None,
        stroke_rgb: Optional[RGB] = None,
        line_width: Optional[float] = None,
    ) -> None:
        """绘制矩形；(x, y) 为左上角。只给填充色则只填充，只给描边色则只描边。"""
        c = self.canvas
        if fill_rgb is not None:
            c.setFillColorRGB(*_rgb(fill_rgb))
        if stroke_rgb is not None:
            c.setStrokeColorRGB(*_rgb(stroke_rgb))
            c.setLineWidth(line_width if line_width is not None else self.style.grid_line_width)
        rx, ry = to_reportlab_xy(x, y + height, self.page_height)
        c.rect(rx, ry, width, height, stroke=int(stroke_rgb is not None), fill=int(fill_rgb is not None))

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        rgb: Optional[RGB] = None,
        line_width: Optional[float] = None,
    ) -> None:
        c = self.canvas
        c.setStrokeColorRGB(*_rgb(rgb if rgb is not None else self.style.text_rgb))
        c.setLineWidth(line_width if line_width is not None else self.style.grid_line_width)
        ax, ay = to_reportlab_xy(x1, y1, self.page_height)
        bx, by = to_reportlab_xy(x2, y2, self.page_height)
        c.line(ax, ay, bx, by)

    def show_page(self) -> None:
        """结束当前页并开启新页。"""
        self.canvas.showPage()

    def set_metadata(self, metadata: Dict[str, str]) -> None:
        c = self.canvas
        setters = {
            "title": c.setTitle,
            "author": c.setAuthor,
            "subject": c.setSubject,
            "keywords": c.setKeywords,
            "creator": c.setCreator,
        }
        for key, value in metadata.items():
            setter = setters.get(key)
            if setter is not None and value:
                setter(value)

    def save(self) -> None:
        self.canvas.save()


@lru_cache(maxsize=8)
def load_template_bytes(template_path: str) -> bytes:
    """读取并校验处方底版，返回原始字节（进程内缓存）。

    校验：文件存在、可解析、至少一页、首页尺寸为 A4（容差 CONST_PAGE_SIZE_TOLERANCE）。

    异常：
        ConfigurationError: 底版缺失、损坏或尺寸不符。
    """
    path = Path(template_path)
    if not path.exists() or not path.is_file():
        raise ConfigurationError(f"处方底版不存在：{path}", ERR_TEMPLATE_INVALID)
    payload = path.read_bytes()
    try:
        with pdfplumber.open(io.BytesIO(payload)) as pdf:
            if not pdf.pages:
                raise ConfigurationError(f"处方底版没有页面：{path}", ERR_TEMPLATE_INVALID)
            width, height = float(pdf.pages[0].width), float(pdf.pages[0].height)
    except ConfigurationError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise ConfigurationError(f"处方底版无法解析：{path}（{exc}）", ERR_TEMPLATE_INVALID) from exc

    if (
        abs(width - CONST_PAGE_WIDTH) > CONST_PAGE_SIZE_TOLERANCE
        or abs(height - CONST_PAGE_HEIGHT) > CONST_PAGE_SIZE_TOLERANCE
    ):
        raise ConfigurationError(
            f"处方底版尺寸 {width:.2f}x{height:.2f} 与 A4 不符：{path}", ERR_TEMPLATE_INVALID
        )
    logger.info("已加载处方底版：%s", path)
    return payload


def merge_overlay(
    template_bytes: Optional[bytes],
    overlay_bytes: bytes,
    metadata: Optional[Dict[str, str]] = None,
) -> bytes:
    """将文字图层首页叠加到底版首页，其余图层页原样追加，返回合并后的 PDF 字节。

    template_bytes 为空时直接返回图层（可附加元数据）。
    """
    try:
        overlay_reader = PdfReader(io.BytesIO(overlay_bytes))
        writer = PdfWriter()
        for i, page in enumerate(overlay_reader.pages):
            if i == 0 and template_bytes is not None:
                base_page = PdfReader(io.BytesIO(template_bytes)).pages[0]
                base_page.merge_page(page)  # PyPDF2 3.x API
                writer.add_page(base_page)
            else:
                writer.add_page(page)
        if metadata:
            writer.add_metadata({f"/{k.capitalize()}": v for k, v in metadata.items() if v})
        out = io.BytesIO()
        try:
            writer.write(out)
            return out.getvalue()
        finally:
            out.close()
    except PdfReadError as exc:
        raise RuntimeError(f"[{ERR_PDF_MERGE_FAILED}] 底版与文字图层合并失败：{exc}") from exc


__all__ = ["CanvasPainter", "load_template_bytes", "merge_overlay"]
