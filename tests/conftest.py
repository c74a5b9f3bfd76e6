from __future__ import annotations

"""
pytest 全局配置：将项目根目录加入 sys.path，确保 `from dentdoc...` 与 `import main` 可被导入。
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


class RecordingPainter:
    """记录绘制调用的假绘制器；page 为调用发生时的页码（1 基）。"""

    def __init__(self) -> None:
        self.page = 1
        self.calls = []
        self.metadata = {}

    def text(self, x, y, text, *, size=None, bold=False, rgb=None, align="left"):
        self.calls.append(
            {"op": "text", "page": self.page, "x": x, "y": y, "text": text, "size": size, "bold": bold, "rgb": rgb, "align": align}
        )

    def rect(self, x, y, width, height, *, fill_rgb=None, stroke_rgb=None, line_width=None):
        self.calls.append(
            {"op": "rect", "page": self.page, "x": x, "y": y, "w": width, "h": height, "fill": fill_rgb, "stroke": stroke_rgb}
        )

    def line(self, x1, y1, x2, y2, *, rgb=None, line_width=None):
        self.calls.append({"op": "line", "page": self.page, "x1": x1, "y1": y1, "x2": x2, "y2": y2, "rgb": rgb})

    def show_page(self):
        self.page += 1

    def set_metadata(self, metadata):
        self.metadata.update(metadata)

    # 便捷查询
    def texts(self, page=None):
        return [c for c in self.calls if c["op"] == "text" and (page is None or c["page"] == page)]

    def find_text(self, text):
        return [c for c in self.calls if c["op"] == "text" and c["text"] == text]


@pytest.fixture
def painter() -> RecordingPainter:
    return RecordingPainter()
