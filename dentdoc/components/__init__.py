"""
文件路径：dentdoc/components/__init__.py

说明：
- 组件包入口：日志、文件操作、重试机制，并聚合导出各子模块；
- 子模块：`coords.py`（坐标）、`text.py`（度量/截断）、`fonts.py`（字体）、
  `formatters.py`（金额/日期）、`page.py`（分页）、`errors.py`（异常）；
- 业务模块与测试统一使用 `from dentdoc.components import ...` 导入。
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Type

from ..variables import (
    PATH_LOGS_DIR,
    PATH_OUTPUT_DIR,
    PATH_LOG_FILE,
    CONST_DOCUMENT_KIND_BILL,
    CONST_LOG_FORMAT,
    CONST_LOG_DATEFMT,
    CONST_MAX_RETRY,
    ERR_PATH_NOT_WRITABLE,
    ERR_FILE_NOT_FOUND,
)

# 聚合导出：拆分后的子模块
from .coords import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_RIGHT,
    aligned_anchor,
    from_bottom,
    to_reportlab_xy,
)
from .errors import ConfigurationError, ErrorHandler
from .fonts import ensure_font
from .formatters import (
    format_amount,
    format_currency,
    format_date,
    format_number,
    money2,
    parse_date,
    to_decimal,
)
from .page import LayoutState, PageCursor, PageGeometry, PageStatus, PaginationController
from .text import measure_text_width, truncate_text, wrap_text


# =============================
# 日志工具
# =============================
_LOGGER_CONFIGURED: bool = False


def get_logger(name: str) -> logging.Logger:
    """获取 logger，首次调用时配置文件与控制台双输出。

    参数：
        name: 日志记录器名称（一般使用 __name__）。

    返回：
        logging.Logger 对象。
    """
    global _LOGGER_CONFIGURED
    if not _LOGGER_CONFIGURED:
        # 确保日志目录存在
        PATH_LOGS_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(PATH_LOG_FILE, encoding="utf-8")
        console_handler = logging.StreamHandler()
        logging.basicConfig(
            level=logging.INFO,
            format=CONST_LOG_FORMAT,
            datefmt=CONST_LOG_DATEFMT,
            handlers=[file_handler, console_handler],
        )
        _LOGGER_CONFIGURED = True
    return logging.getLogger(name)


# =============================
# 重试机制
# =============================
def retry_on_exception(
    retries: int = CONST_MAX_RETRY,
    exceptions: Iterable[Type[BaseException]] = (OSError,),
    delay_s: float = 0.2,
    backoff: float = 2.0,
) -> Callable[[Callable[..., object]], Callable[..., object]]:
    """装饰器：异常自动重试，含指数退避。

    参数：
        retries: 重试次数（不含首次）。
        exceptions: 触发重试的异常类型集合。
        delay_s: 初始等待秒数。
        backoff: 每次重试的等待倍数。

    返回：
        包装后的可调用对象。
    """
    exceptions = tuple(exceptions)

    def decorator(func: Callable[..., object]) -> Callable[..., object]:
        def wrapper(*args, **kwargs):
            wait = delay_s
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:  # type: ignore[misc]
                    if attempt >= retries:
                        raise
                    logger = get_logger(func.__module__)
                    logger.warning("操作失败，准备重试（第 %s 次）：%s", attempt + 1, exc)
                    time.sleep(wait)
                    wait *= backoff
                    attempt += 1

        return wrapper

    return decorator


# =============================
# 文件操作
# =============================
class FileHandler:
    """文件与路径相关的通用处理器。"""

    @staticmethod
    def ensure_project_dirs() -> None:
        """确保项目运行所需目录存在：logs/output。"""
        for d in (PATH_LOGS_DIR, PATH_OUTPUT_DIR):
            d.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def validate_readable_file(path: Path) -> None:
        """校验文件可读。

        异常：
            FileNotFoundError: 文件不存在或不可读。
        """
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"[{ERR_FILE_NOT_FOUND}] 文件不存在或不可读: {path}")

    @staticmethod
    def ensure_parent_writable(target: Path) -> None:
        """确保目标文件的父目录可写，不存在则创建。

        异常：
            PermissionError: 目录不可写。
        """
        parent = target.parent
        parent.mkdir(parents=True, exist_ok=True)
        # Windows 上 os.access 可能不可靠，尝试创建临时文件验证
        probe = parent / f".__writable_probe_{int(time.time()*1000)}"
        try:
            with open(probe, "w", encoding="utf-8") as f:  # noqa: P103
                f.write("probe")
        except OSError as exc:
            raise PermissionError(f"[{ERR_PATH_NOT_WRITABLE}] 目录不可写: {parent}") from exc
        else:
            probe.unlink(missing_ok=True)

    @staticmethod
    def suggested_filename(kind: str, patient_name: str, document_date: Optional[str] = None) -> str:
        """生成调用方附带下载时使用的文件名。

        规则：
        - 患者姓名中的连续空白替换为单个 "-"；
        - 账单追加开票日期：bill-<姓名>-<日期>.pdf；处方：prescription-<姓名>.pdf。

        示例：
            >>> FileHandler.suggested_filename("bill", "Asha  Rao", "2024-05-01")
            'bill-Asha-Rao-2024-05-01.pdf'
        """
        name = re.sub(r"\s+", "-", (patient_name or "").strip()) or "patient"
        if kind == CONST_DOCUMENT_KIND_BILL and document_date:
            return f"{kind}-{name}-{document_date}.pdf"
        return f"{kind}-{name}.pdf"

    @staticmethod
    def output_path(
        kind: str,
        patient_name: str,
        document_date: Optional[str] = None,
        output_dir: Optional[Path] = None,
    ) -> Path:
        """在 output 目录（或指定目录）下生成输出路径。"""
        target_dir = output_dir if output_dir is not None else PATH_OUTPUT_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        return target_dir / FileHandler.suggested_filename(kind, patient_name, document_date)

    @staticmethod
    @retry_on_exception()
    def write_bytes(target: Path, payload: bytes) -> Path:
        """将渲染结果写入文件（IO 失败时按指数退避重试）。"""
        FileHandler.ensure_parent_writable(target)
        with open(target, "wb") as f:  # noqa: P103
            f.write(payload)
        return target


# =============================
# 导出声明
# =============================
__all__ = [
    # 日志工具
    "get_logger",
    # 文件操作
    "FileHandler",
    # 重试与错误处理
    "retry_on_exception",
    "ErrorHandler",
    "ConfigurationError",
    # 坐标处理
    "ALIGN_LEFT",
    "ALIGN_CENTER",
    "ALIGN_RIGHT",
    "aligned_anchor",
    "from_bottom",
    "to_reportlab_xy",
    # 字体
    "ensure_font",
    # 文本度量
    "measure_text_width",
    "truncate_text",
    "wrap_text",
    # 格式化
    "to_decimal",
    "money2",
    "format_amount",
    "format_currency",
    "format_number",
    "parse_date",
    "format_date",
    # 分页
    "PageStatus",
    "PageGeometry",
    "LayoutState",
    "PaginationController",
    "PageCursor",
]
