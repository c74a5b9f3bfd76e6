"""
文件路径：dentdoc/components/fonts.py

说明：字体校验与注册。

- 内置 Type1 字体（Helvetica 系列）无需文件，直接校验可用；
- 指定 TTF/OTF 文件时注册到 ReportLab 全局字体表，进程内只注册一次（lru_cache），
  之后所有渲染共享同一份只读字体；
- 字体缺失或损坏属于配置错误，直接抛出 ConfigurationError，不做回退。
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..variables import ERR_FONT_INVALID
from .errors import ConfigurationError


logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _register_font_file(font_name: str, font_path: str) -> str:
    path = Path(font_path)
    if not path.exists() or not path.is_file():
        raise ConfigurationError(f"字体文件不存在：{path}", ERR_FONT_INVALID)
    if path.suffix.lower() not in {".ttf", ".otf"}:
        raise ConfigurationError(f"仅支持 TTF/OTF 字体：{path}", ERR_FONT_INVALID)
    try:
        pdfmetrics.registerFont(TTFont(font_name, str(path)))
    except Exception as exc:  # noqa: BLE001
        raise ConfigurationError(f"字体注册失败：{font_name} -> {path}（{exc}）", ERR_FONT_INVALID) from exc
    logger.info("已注册字体：%s -> %s", font_name, path)
    return font_name


def ensure_font(font_name: str, font_file: Optional[Path] = None) -> str:
    """确保字体可用于度量与绘制，返回字体名。

    参数：
        font_name: 字体名；未提供文件时须为 ReportLab 已知字体。
        font_file: 可选 TTF/OTF 文件路径。

    异常：
        ConfigurationError: 字体未知、文件缺失或无法解析。
    """
    if font_file is not None:
        return _register_font_file(font_name, str(font_file))
    try:
        pdfmetrics.getFont(font_name)
    except Exception as exc:  # noqa: BLE001
        raise ConfigurationError(f"未知字体：{font_name}", ERR_FONT_INVALID) from exc
    return font_name


__all__ = ["ensure_font"]
