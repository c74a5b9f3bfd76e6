"""
文件路径：main.py

命令行入口：
- 功能：读取处方/账单 JSON，渲染 PDF 并保存到 output 目录。
- 依赖：`dentdoc/pdf_processor.py`、`dentdoc/data_handler.py`、`dentdoc/components`、`dentdoc/variables.py`。

快速使用示例：
    # 1) 生成示例处方底版（examples/prescription-template.pdf）
    python main.py --make-example

    # 2) 渲染处方（叠加到底版首页）
    python main.py --kind prescription --data-json examples/prescription.json --template examples/prescription-template.pdf

    # 3) 渲染账单，并在渲染前按库存表扣减药品
    python main.py --kind bill --data-json examples/bill.json --stock-json examples/stock.json

运行说明：
- 更换处方底版：--template 指定新底版，--binding-json 指定字段坐标覆盖（格式见 config/prescription_binding.json）
- 库存不足默认阻断账单，确认后可加 --allow-shortfall 放行；药品未找到始终阻断

变量引用说明（来自 dentdoc/variables.py）：
- PATH_EXAMPLES_DIR, PATH_PRESCRIPTION_BINDING_JSON, CONST_DOCUMENT_KIND_PRESCRIPTION, CONST_DOCUMENT_KIND_BILL

组件调用说明（来自 dentdoc/components / dentdoc/data_handler.py / dentdoc/pdf_processor.py）：
- get_logger, FileHandler.ensure_project_dirs/output_path
- parse_prescription_request, parse_bill_request, load_template_binding, load_stock_json
- DocumentProcessor.render_prescription / render_bill / write
"""

from __future__ import annotations

import argparse
from pathlib import Path

from dentdoc.components import ConfigurationError, FileHandler, get_logger
from dentdoc.data_handler import (
    load_json_file,
    load_stock_json,
    load_template_binding,
    parse_bill_request,
    parse_prescription_request,
)
from dentdoc.pdf_processor import DocumentProcessor
from dentdoc.stock import InMemoryStockLedger, StockCheckError
from dentdoc.variables import (
    PATH_EXAMPLES_DIR,
    PATH_PRESCRIPTION_BINDING_JSON,
    CONST_DOCUMENT_KIND_BILL,
    CONST_DOCUMENT_KIND_PRESCRIPTION,
    CONST_PAGE_HEIGHT,
    CONST_PAGE_WIDTH,
    CONST_RX_CONTINUATION_TITLE,
)


logger = get_logger(__name__)


def _ensure_example_template() -> Path:
    """若 `examples/prescription-template.pdf` 不存在，则生成一份示例处方底版。

    生成内容：页眉与各字段标签，标签位于默认字段绑定坐标的左侧。
    """
    from reportlab.pdfgen import canvas  # 延迟导入以加快 CLI 启动

    examples_dir = PATH_EXAMPLES_DIR
    examples_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = examples_dir / "prescription-template.pdf"
    if pdf_path.exists():
        return pdf_path

    h = CONST_PAGE_HEIGHT
    c = canvas.Canvas(str(pdf_path), pagesize=(CONST_PAGE_WIDTH, h))
    c.setFont("Helvetica-Bold", 18)
    c.drawCentredString(CONST_PAGE_WIDTH / 2, h - 70, CONST_RX_CONTINUATION_TITLE)
    c.setLineWidth(1)
    c.line(40, h - 140, CONST_PAGE_WIDTH - 40, h - 140)

    # 标签（注意：ReportLab 原点在左下，标签 y 与字段基线对齐）
    c.setFont("Helvetica-Bold", 11)
    for label, x, y in (
        ("Patient Name:", 170, h - 173),
        ("Date:", 472, h - 173),
        ("Age:", 150, h - 208),
        ("Sex:", 300, h - 208),
        ("C/C:", 150, h - 242),
        ("M/H:", 150, h - 281),
        ("O/E:", 150, h - 311),
        ("Advice:", 190, 180),
        ("Follow-up:", 160, 126),
    ):
        c.drawString(x, y, label)
    c.setFont("Helvetica-Bold", 20)
    c.drawString(60, h - 420, "Rx")
    c.line(40, 160, CONST_PAGE_WIDTH - 40, 160)
    c.save()
    logger.info("已生成示例处方底版：%s", pdf_path)
    return pdf_path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="牙科处方 / 账单 PDF 渲染工具")
    parser.add_argument(
        "--kind",
        type=str,
        choices=[CONST_DOCUMENT_KIND_PRESCRIPTION, CONST_DOCUMENT_KIND_BILL],
        default=CONST_DOCUMENT_KIND_PRESCRIPTION,
        help="文档类型：prescription/bill",
    )
    parser.add_argument("--data-json", dest="data_json", type=Path, default=None, help="处方或账单 JSON 载荷")
    parser.add_argument("--output", type=Path, default=None, help="输出 PDF 路径（可省略，按患者姓名自动生成）")
    parser.add_argument("--template", type=Path, default=None, help="处方底版 PDF（首页叠加）；省略时使用空白 A4")
    parser.add_argument(
        "--binding-json",
        dest="binding_json",
        type=Path,
        default=PATH_PRESCRIPTION_BINDING_JSON,
        help="处方字段坐标覆盖 JSON",
    )
    parser.add_argument("--stock-json", dest="stock_json", type=Path, default=None, help="账单渲染前扣减的库存表 JSON")
    parser.add_argument("--allow-shortfall", dest="allow_shortfall", action="store_true", help="库存不足时仍生成账单")
    parser.add_argument("--make-example", action="store_true", help="若示例处方底版不存在则生成一份")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    FileHandler.ensure_project_dirs()
    if args.make_example:
        pdf_path = _ensure_example_template()
        print(f"示例处方底版已就绪：{pdf_path}")
        return
    if args.data_json is None:
        raise SystemExit("请通过 --data-json 提供处方或账单数据")

    data = load_json_file(args.data_json)
    try:
        if args.kind == CONST_DOCUMENT_KIND_PRESCRIPTION:
            request = parse_prescription_request(data)
            processor = DocumentProcessor(
                prescription_template=args.template,
                binding=load_template_binding(args.binding_json),
            )
            payload = processor.render_prescription(request)
            out = args.output or FileHandler.output_path(args.kind, request.patient.name)
        else:
            request = parse_bill_request(data)
            ledger = None
            if args.stock_json is not None:
                ledger = InMemoryStockLedger(load_stock_json(args.stock_json))
            processor = DocumentProcessor()
            payload = processor.render_bill(request, stock_ledger=ledger, allow_shortfall=args.allow_shortfall)
            out = args.output or FileHandler.output_path(args.kind, request.patient.name, request.invoice.date)
            for outcome in processor.last_stock_outcomes:
                print(f"库存：{outcome.name} -> {outcome.status}（{outcome.message}）")
    except ConfigurationError as exc:
        raise SystemExit(f"配置错误：{exc}") from exc
    except StockCheckError as exc:
        for outcome in exc.outcomes:
            print(f"库存：{outcome.name} -> {outcome.status}（{outcome.message}）")
        raise SystemExit(f"账单未生成：{exc}") from exc

    DocumentProcessor.write(payload, out)
    stats = processor.last_render_stats or {}
    print(f"渲染完成（{stats.get('pages', '?')} 页），保存至：{out}")


if __name__ == "__main__":
    main()
