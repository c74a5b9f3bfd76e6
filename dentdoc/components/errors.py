"""
文件路径：dentdoc/components/errors.py

说明：统一错误信息格式与版式配置异常，从包入口拆分而来。
"""

from __future__ import annotations

from ..variables import ERR_CONFIG_INVALID


class ErrorHandler:
    """错误处理相关工具。"""

    @staticmethod
    def format_error(err_code: int, message: str) -> str:
        """生成统一错误信息字符串。"""
        return f"[{err_code}] {message}"


class ConfigurationError(RuntimeError):
    """版式或静态资源配置错误（列宽比例、底版、字体）。

    属于调用方/部署问题，渲染立即中止且不重试。
    """

    def __init__(self, message: str, err_code: int = ERR_CONFIG_INVALID) -> None:
        self.err_code = err_code
        super().__init__(ErrorHandler.format_error(err_code, message))


__all__ = ["ErrorHandler", "ConfigurationError"]
