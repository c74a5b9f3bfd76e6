"""
文件路径：dentdoc/variables.py

模块职责：
- 统一管理全局跨模块变量，确保模块化、无冲突、可追溯，可复用。
- 变量命名规范：{分类前缀}_{描述性名称}（全大写+下划线）。
  - PATH_：路径相关
  - STYLE_：样式相关（颜色、字体、线宽）
  - STATUS_：状态标识
  - CONST_：通用常量（页面几何、版式尺寸、占位文本、格式）
  - ERR_：错误码

使用说明：
- 业务模块严禁定义新的全局变量，必须从本模块导入所需常量。
- 样式常量只作为 `dentdoc.style.LayoutStyle` 的默认值；渲染时以显式传入的样式对象为准。
- 坐标与尺寸单位均为 pt（1/72 英寸）；账单版式沿用毫米设计稿，经 `_MM` 换算。
- 目录路径均使用 pathlib.Path 对象表示，使用时如需字符串请显式 str() 转换。
"""

from pathlib import Path
from typing import Dict, Optional, Tuple


# 毫米 -> pt 换算系数（仅本模块内部使用）
_MM: float = 72.0 / 25.4


# =============================
# 路径（PATH_）
# =============================
# 项目根目录：定位到当前文件（variables.py）的上两级目录
PATH_ROOT: Path = Path(__file__).resolve().parents[1]

# 各功能目录
PATH_CONFIG_DIR: Path = PATH_ROOT / "config"
PATH_EXAMPLES_DIR: Path = PATH_ROOT / "examples"
PATH_OUTPUT_DIR: Path = PATH_ROOT / "output"
PATH_LOGS_DIR: Path = PATH_ROOT / "logs"

# 关键文件路径
PATH_PRESCRIPTION_BINDING_JSON: Path = PATH_CONFIG_DIR / "prescription_binding.json"  # 字段坐标绑定覆盖（可选）
PATH_LOG_FILE: Path = PATH_LOGS_DIR / "app.log"  # 应用运行日志

# 字体文件（为空则使用 ReportLab 内置 Helvetica 系列，无需嵌入）
PATH_FONT_FILE: Optional[Path] = None
PATH_FONT_FILE_BOLD: Optional[Path] = None


# =============================
# 样式（STYLE_）
# =============================
STYLE_FONT_NAME: str = "Helvetica"  # 度量与绘制统一使用的常规字体
STYLE_FONT_NAME_BOLD: str = "Helvetica-Bold"  # 表头、合计等加粗文本
STYLE_FONT_SIZE_DEFAULT: int = 12  # 处方正文字号（pt）
STYLE_LINE_SPACING: float = 20.0  # 处方多行文本行距（pt）

STYLE_TEXT_COLOR_RGB: Tuple[int, int, int] = (0, 0, 0)  # 正文黑色
STYLE_PRIMARY_RGB: Tuple[int, int, int] = (26, 86, 219)  # 主色蓝：诊所名、表头、表格外框
STYLE_SECONDARY_RGB: Tuple[int, int, int] = (6, 78, 59)  # 辅色青：小节标题
STYLE_MUTED_RGB: Tuple[int, int, int] = (102, 102, 102)  # 次要文本灰（#666666）
STYLE_FAINT_RGB: Tuple[int, int, int] = (153, 153, 153)  # 条款浅灰（#999999）
STYLE_HEADER_TEXT_RGB: Tuple[int, int, int] = (255, 255, 255)  # 表头白字

# 表格行底色
STYLE_ROW_FILL_EVEN_RGB: Tuple[int, int, int] = (240, 240, 240)  # 偶数行浅灰
STYLE_ROW_FILL_ODD_RGB: Tuple[int, int, int] = (255, 255, 255)  # 奇数行白色
STYLE_ROW_HIGHLIGHT_RGB: Tuple[int, int, int] = (230, 240, 255)  # 高亮行（诊疗费）浅蓝
STYLE_GRID_RGB: Tuple[int, int, int] = (200, 200, 200)  # 行分隔线与列分隔线

# 合计与欠款框
STYLE_TOTAL_FILL_RGB: Tuple[int, int, int] = (240, 249, 255)
STYLE_TOTAL_STROKE_RGB: Tuple[int, int, int] = (59, 130, 246)
STYLE_BALANCE_FILL_RGB: Tuple[int, int, int] = (254, 226, 226)
STYLE_BALANCE_STROKE_RGB: Tuple[int, int, int] = (239, 68, 68)
STYLE_BALANCE_TEXT_RGB: Tuple[int, int, int] = (185, 28, 28)

# 线宽（pt）
STYLE_GRID_LINE_WIDTH: float = 0.1 * _MM
STYLE_BORDER_LINE_WIDTH: float = 0.5 * _MM


# =============================
# 状态（STATUS_）
# =============================
STATUS_SUCCESS: str = "success"  # 库存扣减成功
STATUS_WARNING: str = "warning"  # 库存不足，可人工确认后继续
STATUS_ERROR: str = "error"  # 药品未找到或更新失败，阻断账单生成


# =============================
# 常量（CONST_）
# =============================
CONST_ENCODING: str = "utf-8"  # 文件读写默认编码
CONST_MAX_RETRY: int = 2  # 通用重试次数，仅用于输出文件写入

# 页面几何：仅支持 A4 纵向
CONST_PAGE_WIDTH: float = 595.28
CONST_PAGE_HEIGHT: float = 841.89
CONST_PAGE_SIZE_TOLERANCE: float = 1.0  # 底版页面尺寸与 A4 的允许偏差（pt）

# 表格引擎
CONST_COLUMN_FRACTION_TOLERANCE: float = 1e-6  # 列宽比例之和与 1.0 的允许偏差
CONST_TABLE_TRUNCATE_CHARS: int = 40  # 描述列最大字符数，超出截断
CONST_TABLE_ELLIPSIS: str = "..."
CONST_TABLE_CELL_PADDING: float = 3 * _MM  # 左/右对齐单元格的内边距
CONST_TABLE_TEXT_BASELINE: float = 5.5 * _MM  # 单元格文字基线相对行顶的偏移
CONST_TABLE_FONT_SIZE: float = 9

# 处方版式（pt，y 为距页顶的偏移）
CONST_RX_SECTION_GAP: float = 10.0  # 相邻自由文本段落的最小间距
CONST_RX_MEDICINE_GAP: float = 60.0  # 口腔检查段落与药品行之间的间距
CONST_RX_MEDICINE_ROW_SPACING: float = 25.0  # 药品行距
CONST_RX_BOTTOM_MARGIN: float = 180.0  # 药品行不可低于距页底该高度（医嘱固定行）
CONST_RX_CONTINUATION_TITLE_Y: float = 50.0
CONST_RX_CONTINUATION_MARKER_Y: float = 70.0
CONST_RX_CONTENT_TOP: float = 100.0  # 续页内容起始位置
CONST_RX_CONTINUATION_TITLE: str = "DANTSRI DENTAL HOSPITAL"
CONST_RX_CONTINUED_MARKER: str = "Prescription Continued"
CONST_RX_DATE_LOCALE: str = "en-US"

# 账单版式（pt，y 为距页顶的偏移）
CONST_BILL_MARGIN: float = 20 * _MM
CONST_BILL_ROW_HEIGHT: float = 8 * _MM
CONST_BILL_TOTALS_WIDTH: float = 70 * _MM
CONST_BILL_VALUE_INSET: float = 5 * _MM  # 左栏数值右对齐时距栏右缘
CONST_BILL_TERMS_OFFSET: float = 35 * _MM  # 条款首行距页底
CONST_BILL_BOTTOM_MARGIN: float = 42 * _MM  # 正文内容不可越过该距页底高度（为条款预留）
CONST_BILL_CONTINUATION_TITLE_Y: float = 20 * _MM
CONST_BILL_CONTINUATION_MARKER_Y: float = 27 * _MM
CONST_BILL_CONTENT_TOP: float = 40 * _MM
CONST_BILL_CONTINUED_MARKER: str = "Invoice Continued"
CONST_BILL_DATE_LOCALE: str = "en-IN"
CONST_CONSULTATION_LABEL: str = "Consultation Fee"
CONST_PAYMENT_STATUS_FULL: str = "Full Payment"
CONST_BILL_TERMS_LINES: Tuple[str, ...] = (
    "Terms & Conditions:",
    "1. This is a computer-generated invoice and does not require a signature.",
    "2. Please bring this invoice for any future reference or in case of follow-up visits.",
    "3. Payment is due at the time of service.",
)

# 诊所默认信息（请求未提供时使用）
CONST_CLINIC_NAME_DEFAULT: str = "Dantsri Dental Clinic"
CONST_CLINIC_TAGLINE_DEFAULT: str = "Professional Dental Care Services"
CONST_CLINIC_ADDRESS_LINES_DEFAULT: Tuple[str, ...] = (
    "123 Dental Avenue, Medical District",
    "Mumbai, Maharashtra - 400001",
)
CONST_CLINIC_CONTACT_DEFAULT: str = "Phone: +91 98765 43210 | Email: info@dantsridental.com"

# 缺失字段占位文本
CONST_PLACEHOLDER_NA: str = "N/A"
CONST_PLACEHOLDER_NOT_RECORDED: str = "Not recorded"
CONST_PLACEHOLDER_NONE: str = "None"
CONST_PLACEHOLDER_ADVICE: str = "No specific advice"
CONST_PLACEHOLDER_FOLLOWUP: str = "No follow-up scheduled"

# 金额与日期格式
CONST_CURRENCY_PREFIX: str = "INR "
CONST_DATE_FORMATS: Dict[str, str] = {
    "en-IN": "%d/%m/%Y",
    "en-US": "%m/%d/%Y",
}

# 文档类型（CLI/文件命名统一约定）
CONST_DOCUMENT_KIND_PRESCRIPTION: str = "prescription"
CONST_DOCUMENT_KIND_BILL: str = "bill"

# 日志格式（供 logging.basicConfig 使用）
CONST_LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONST_LOG_DATEFMT: str = "%Y-%m-%d %H:%M:%S"


# =============================
# 错误码（ERR_）
# =============================
# 1xxx：文件/资源相关
ERR_FILE_NOT_FOUND: int = 1001  # 输入文件不存在
ERR_TEMPLATE_INVALID: int = 1002  # 底版 PDF 缺失、损坏或尺寸不符
ERR_PATH_NOT_WRITABLE: int = 1003  # 目标路径不可写
ERR_FONT_INVALID: int = 1004  # 字体文件缺失或无法注册

# 3xxx：合并/写入相关
ERR_PDF_MERGE_FAILED: int = 3001  # 底版与文字图层合并失败

# 4xxx：配置/数据相关
ERR_CONFIG_LOAD_FAILED: int = 4001  # 配置加载失败
ERR_DATA_INVALID: int = 4002  # 输入数据非法
ERR_CONFIG_INVALID: int = 4003  # 版式配置非法（如列宽比例之和不为 1）

# 5xxx：库存协作方
ERR_STOCK_NOT_FOUND: int = 5001  # 药品未找到或库存更新失败
ERR_STOCK_INSUFFICIENT: int = 5002  # 库存不足


# =============================
# 导出声明
# =============================
__all__ = [
    # PATH_
    "PATH_ROOT",
    "PATH_CONFIG_DIR",
    "PATH_EXAMPLES_DIR",
    "PATH_OUTPUT_DIR",
    "PATH_LOGS_DIR",
    "PATH_PRESCRIPTION_BINDING_JSON",
    "PATH_LOG_FILE",
    "PATH_FONT_FILE",
    "PATH_FONT_FILE_BOLD",
    # STYLE_
    "STYLE_FONT_NAME",
    "STYLE_FONT_NAME_BOLD",
    "STYLE_FONT_SIZE_DEFAULT",
    "STYLE_LINE_SPACING",
    "STYLE_TEXT_COLOR_RGB",
    "STYLE_PRIMARY_RGB",
    "STYLE_SECONDARY_RGB",
    "STYLE_MUTED_RGB",
    "STYLE_FAINT_RGB",
    "STYLE_HEADER_TEXT_RGB",
    "STYLE_ROW_FILL_EVEN_RGB",
    "STYLE_ROW_FILL_ODD_RGB",
    "STYLE_ROW_HIGHLIGHT_RGB",
    "STYLE_GRID_RGB",
    "STYLE_TOTAL_FILL_RGB",
    "STYLE_TOTAL_STROKE_RGB",
    "STYLE_BALANCE_FILL_RGB",
    "STYLE_BALANCE_STROKE_RGB",
    "STYLE_BALANCE_TEXT_RGB",
    "STYLE_GRID_LINE_WIDTH",
    "STYLE_BORDER_LINE_WIDTH",
    # STATUS_
    "STATUS_SUCCESS",
    "STATUS_WARNING",
    "STATUS_ERROR",
    # CONST_
    "CONST_ENCODING",
    "CONST_MAX_RETRY",
    "CONST_PAGE_WIDTH",
    "CONST_PAGE_HEIGHT",
    "CONST_PAGE_SIZE_TOLERANCE",
    "CONST_COLUMN_FRACTION_TOLERANCE",
    "CONST_TABLE_TRUNCATE_CHARS",
    "CONST_TABLE_ELLIPSIS",
    "CONST_TABLE_CELL_PADDING",
    "CONST_TABLE_TEXT_BASELINE",
    "CONST_TABLE_FONT_SIZE",
    "CONST_RX_SECTION_GAP",
    "CONST_RX_MEDICINE_GAP",
    "CONST_RX_MEDICINE_ROW_SPACING",
    "CONST_RX_BOTTOM_MARGIN",
    "CONST_RX_CONTINUATION_TITLE_Y",
    "CONST_RX_CONTINUATION_MARKER_Y",
    "CONST_RX_CONTENT_TOP",
    "CONST_RX_CONTINUATION_TITLE",
    "CONST_RX_CONTINUED_MARKER",
    "CONST_RX_DATE_LOCALE",
    "CONST_BILL_MARGIN",
    "CONST_BILL_ROW_HEIGHT",
    "CONST_BILL_TOTALS_WIDTH",
    "CONST_BILL_VALUE_INSET",
    "CONST_BILL_TERMS_OFFSET",
    "CONST_BILL_BOTTOM_MARGIN",
    "CONST_BILL_CONTINUATION_TITLE_Y",
    "CONST_BILL_CONTINUATION_MARKER_Y",
    "CONST_BILL_CONTENT_TOP",
    "CONST_BILL_CONTINUED_MARKER",
    "CONST_BILL_DATE_LOCALE",
    "CONST_CONSULTATION_LABEL",
    "CONST_PAYMENT_STATUS_FULL",
    "CONST_BILL_TERMS_LINES",
    "CONST_CLINIC_NAME_DEFAULT",
    "CONST_CLINIC_TAGLINE_DEFAULT",
    "CONST_CLINIC_ADDRESS_LINES_DEFAULT",
    "CONST_CLINIC_CONTACT_DEFAULT",
    "CONST_PLACEHOLDER_NA",
    "CONST_PLACEHOLDER_NOT_RECORDED",
    "CONST_PLACEHOLDER_NONE",
    "CONST_PLACEHOLDER_ADVICE",
    "CONST_PLACEHOLDER_FOLLOWUP",
    "CONST_CURRENCY_PREFIX",
    "CONST_DATE_FORMATS",
    "CONST_DOCUMENT_KIND_PRESCRIPTION",
    "CONST_DOCUMENT_KIND_BILL",
    "CONST_LOG_FORMAT",
    "CONST_LOG_DATEFMT",
    # ERR_
    "ERR_FILE_NOT_FOUND",
    "ERR_TEMPLATE_INVALID",
    "ERR_PATH_NOT_WRITABLE",
    "ERR_FONT_INVALID",
    "ERR_PDF_MERGE_FAILED",
    "ERR_CONFIG_LOAD_FAILED",
    "ERR_DATA_INVALID",
    "ERR_CONFIG_INVALID",
    "ERR_STOCK_NOT_FOUND",
    "ERR_STOCK_INSUFFICIENT",
]
