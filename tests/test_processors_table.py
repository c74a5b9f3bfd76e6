from __future__ import annotations

import pytest

from dentdoc.components import ConfigurationError
from dentdoc.models import ItemType
from dentdoc.processors.table import (
    ROW_STYLE_BY_ITEM_TYPE,
    RowStyle,
    TableColumn,
    TableRow,
    column_offsets,
    render_table,
    row_style_for,
)
from dentdoc.style import DEFAULT_STYLE

COLUMNS = (
    TableColumn("S.No", 0.08, "center"),
    TableColumn("Description", 0.42, "left"),
    TableColumn("Qty", 0.10, "center"),
    TableColumn("Unit Price", 0.20, "right"),
    TableColumn("Total", 0.20, "right"),
)


def _rows(n, highlight_last=False):
    rows = [TableRow((str(i + 1), f"Item {i + 1}", "1", "INR 10.00", "INR 10.00")) for i in range(n)]
    if highlight_last:
        rows[-1] = TableRow(rows[-1].cells, RowStyle.HIGHLIGHT)
    return rows


class TestColumnOffsets:
    def test_prefix_sums_from_origin(self):
        offsets = column_offsets(COLUMNS, 500.0, left=50.0)
        assert offsets == pytest.approx([50.0, 90.0, 300.0, 350.0, 450.0])

    def test_monotonic_and_spanning_total_width(self):
        offsets = column_offsets(COLUMNS, 480.0, left=20.0)
        assert all(a < b for a, b in zip(offsets, offsets[1:]))
        assert offsets[-1] + COLUMNS[-1].fraction * 480.0 == pytest.approx(500.0)

    def test_fractions_must_sum_to_one(self):
        bad = (TableColumn("a", 0.5), TableColumn("b", 0.4))
        with pytest.raises(ConfigurationError):
            column_offsets(bad, 100.0)

    def test_non_positive_fraction_rejected(self):
        with pytest.raises(ConfigurationError):
            column_offsets((TableColumn("a", 1.2), TableColumn("b", -0.2)), 100.0)


class TestRenderTable:
    def test_returns_bottom_after_header_and_rows(self, painter):
        y = render_table(painter, COLUMNS, _rows(4), (20.0, 100.0), 500.0, 20.0)
        assert y == pytest.approx(100.0 + 5 * 20.0)

    def test_header_labels_centered_bold_white(self, painter):
        render_table(painter, COLUMNS, _rows(1), (0.0, 0.0), 500.0, 20.0)
        header = painter.find_text("Description")[0]
        assert header["align"] == "center"
        assert header["bold"] is True
        assert header["rgb"] == DEFAULT_STYLE.header_text_rgb
        assert header["x"] == pytest.approx(40.0 + 210.0 / 2)

    def test_row_fills_alternate_and_highlight_wins(self, painter):
        render_table(painter, COLUMNS, _rows(3, highlight_last=True), (0.0, 0.0), 500.0, 20.0)
        fills = [c["fill"] for c in painter.calls if c["op"] == "rect" and c["fill"] is not None]
        # 表头 + 三行：偶、奇、高亮（本应为偶）
        assert fills == [
            DEFAULT_STYLE.primary_rgb,
            DEFAULT_STYLE.row_fill_even_rgb,
            DEFAULT_STYLE.row_fill_odd_rgb,
            DEFAULT_STYLE.row_highlight_rgb,
        ]

    def test_start_index_continues_parity(self, painter):
        render_table(painter, COLUMNS, _rows(1), (0.0, 0.0), 500.0, 20.0, start_index=5)
        fills = [c["fill"] for c in painter.calls if c["op"] == "rect" and c["fill"] is not None]
        assert fills[1] == DEFAULT_STYLE.row_fill_odd_rgb

    def test_left_column_truncated(self, painter):
        long = "Comprehensive full mouth scaling and root planing session"
        rows = [TableRow(("1", long, "1", "INR 1.00", "INR 1.00"))]
        render_table(painter, COLUMNS, rows, (0.0, 0.0), 500.0, 20.0)
        drawn = [c["text"] for c in painter.texts() if c["text"].startswith("Comprehensive")]
        assert drawn == [long[:37] + "..."]

    def test_right_column_padded_from_edge(self, painter):
        render_table(painter, COLUMNS, _rows(1), (0.0, 0.0), 500.0, 20.0)
        totals = [c for c in painter.find_text("INR 10.00")]
        right_edges = [c["x"] for c in totals]
        pad = DEFAULT_STYLE.table_cell_padding
        assert right_edges == pytest.approx([400.0 - pad, 500.0 - pad])
        assert all(c["align"] == "right" for c in totals)

    def test_grid_and_border(self, painter):
        render_table(painter, COLUMNS, _rows(2), (10.0, 30.0), 500.0, 20.0)
        lines = [c for c in painter.calls if c["op"] == "line"]
        verticals = [c for c in lines if c["x1"] == c["x2"]]
        horizontals = [c for c in lines if c["y1"] == c["y2"]]
        assert len(horizontals) == 2
        assert len(verticals) == len(COLUMNS) - 1
        assert all(v["y1"] == 30.0 and v["y2"] == pytest.approx(90.0) for v in verticals)
        border = painter.calls[-1]
        assert border["op"] == "rect" and border["stroke"] == DEFAULT_STYLE.primary_rgb
        assert border["h"] == pytest.approx(60.0)

    def test_cell_count_mismatch(self, painter):
        with pytest.raises(ConfigurationError):
            render_table(painter, COLUMNS, [TableRow(("1", "x"))], (0.0, 0.0), 500.0, 20.0)


def test_item_type_row_styles():
    assert row_style_for(ItemType.CONSULTATION) is RowStyle.HIGHLIGHT
    assert row_style_for(ItemType.MEDICINE) is RowStyle.NORMAL
    assert set(ROW_STYLE_BY_ITEM_TYPE) == set(ItemType)
