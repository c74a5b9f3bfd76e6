from __future__ import annotations

from dataclasses import replace

import pytest
from reportlab.lib.units import mm

from dentdoc.components import measure_text_width
from dentdoc.models import BillItem, BillRequest, InvoiceInfo, ItemType, Patient
from dentdoc.processors.bill import BILL_COLUMNS, BillComposer, build_table_rows, with_consultation_row
from dentdoc.processors.table import RowStyle, validate_columns
from dentdoc.variables import CONST_BILL_BOTTOM_MARGIN, CONST_BILL_TERMS_LINES, CONST_PAGE_HEIGHT


def _bill(status="Partial Payment", n_items=2, diagnosis="Pulpitis"):
    items = tuple(
        BillItem(f"Item {i + 1}", 1, 100, 100, ItemType.MEDICINE if i % 2 else ItemType.PROCEDURE) for i in range(n_items)
    )
    return BillRequest(
        patient=Patient(name="Asha Rao", age="34", sex="F"),
        invoice=InvoiceInfo(number="INV-7", date="2024-05-01", payment_method="Cash", payment_status=status),
        items=items,
        consultation_fee=500,
        discount_percent=10,
        amount_paid=100,
        diagnosis=diagnosis,
    )


def test_bill_columns_are_valid():
    validate_columns(BILL_COLUMNS)


def test_consultation_row_appended_and_highlighted():
    rows = build_table_rows(with_consultation_row(_bill()))
    assert [r.cells[0] for r in rows] == ["1", "2", "3"]
    assert rows[-1].cells[1] == "Consultation Fee"
    assert rows[-1].cells[4] == "INR 500.00"
    assert rows[-1].style is RowStyle.HIGHLIGHT
    assert rows[0].style is RowStyle.NORMAL


def test_single_page_partial_payment(painter):
    state = BillComposer().compose(painter, _bill())
    assert state.page_count == 1
    assert painter.find_text("Balance Due:")
    assert painter.find_text("INR 530.00")  # (200 + 500) * 0.9 - 100
    assert painter.find_text("Date:")
    assert painter.find_text("01/05/2024")
    assert painter.metadata["title"] == "Dental Bill - Asha Rao"


def test_full_payment_and_no_treatment_section(painter):
    BillComposer().compose(painter, _bill(status="full payment", diagnosis=""))
    assert not painter.find_text("Balance Due:")
    assert not painter.find_text("Amount Paid:")
    assert not painter.find_text("Treatment Information")


def test_long_bill_splits_table_with_repeated_header(painter):
    state = BillComposer().compose(painter, _bill(n_items=60))
    table_pages = sorted({c["page"] for c in painter.find_text("S.No")})
    assert len(table_pages) >= 3
    assert table_pages == list(range(1, len(table_pages) + 1))
    for page in range(2, state.page_count + 1):
        assert [c for c in painter.texts(page) if c["text"] == "Invoice Continued"]
    # 序号跨页连续，诊疗费行位于表格最后一段
    assert painter.find_text("61")
    assert painter.find_text("Consultation Fee")[0]["page"] == table_pages[-1]


def test_terms_only_on_last_page(painter):
    state = BillComposer().compose(painter, _bill(n_items=60))
    for line in CONST_BILL_TERMS_LINES:
        hits = painter.find_text(line)
        assert [h["page"] for h in hits] == [state.page_count]


def test_boxes_stay_above_reserved_footer(painter):
    BillComposer().compose(painter, _bill(n_items=60))
    bottom_limit = CONST_PAGE_HEIGHT - CONST_BILL_BOTTOM_MARGIN
    for call in painter.calls:
        if call["op"] == "rect":
            assert call["y"] + call["h"] <= bottom_limit + 1e-6


def test_missing_age_and_sex_use_placeholder(painter):
    request = replace(_bill(), patient=Patient(name="A"))
    BillComposer().compose(painter, request)
    assert painter.find_text("N/A / N/A")
    assert not painter.find_text(" / ")


def test_long_treatment_text_wraps_within_content_width(painter):
    composer = BillComposer()
    diagnosis = " ".join(["Irreversible pulpitis with periapical abscess"] * 6)
    composer.compose(painter, _bill(diagnosis=diagnosis))
    lines = [c for c in painter.texts() if c["size"] == 9 and c["x"] == composer.margin]
    assert len(lines) > 1
    assert lines[0]["text"].startswith("Diagnosis: ")
    assert " ".join(c["text"] for c in lines) == f"Diagnosis: {diagnosis}"
    for line in lines:
        assert measure_text_width(line["text"], composer.style.font_name, 9) <= composer.content_width
    # 行距 5 mm
    assert lines[1]["y"] - lines[0]["y"] == pytest.approx(5 * mm)
