from __future__ import annotations

import pytest

from dentdoc.models import BillItem, ItemType
from dentdoc.stock import (
    InMemoryStockLedger,
    InventoryLookupError,
    StockShortfallError,
    medicine_items,
    review_stock_outcomes,
)
from dentdoc.variables import STATUS_ERROR, STATUS_SUCCESS, STATUS_WARNING


def _med(name, qty):
    return BillItem(name, quantity=qty, unit_price=10, total=10 * qty, item_type=ItemType.MEDICINE)


class TestInMemoryStockLedger:
    def test_case_insensitive_substring_first_match(self):
        ledger = InMemoryStockLedger({"Amoxicillin 250mg": 5, "Amoxicillin 500mg": 50})
        outcome = ledger.deduct([_med("amoxicillin", 3)])[0]
        assert outcome.status == STATUS_SUCCESS
        assert outcome.message == "Stock updated. Remaining: 2"
        assert ledger.quantities == {"Amoxicillin 250mg": 2, "Amoxicillin 500mg": 50}

    def test_not_found_is_error(self):
        ledger = InMemoryStockLedger({"Ibuprofen 400mg": 10})
        outcome = ledger.deduct([_med("Paracetamol", 1)])[0]
        assert outcome.status == STATUS_ERROR
        assert outcome.message == "Medicine not found in database"

    def test_shortfall_is_warning_without_deduction(self):
        ledger = InMemoryStockLedger({"Ibuprofen 400mg": 3})
        outcome = ledger.deduct([_med("Ibuprofen", 5)])[0]
        assert outcome.status == STATUS_WARNING
        assert outcome.message == "Insufficient stock (3 available, 5 needed)"
        assert ledger.quantities["Ibuprofen 400mg"] == 3

    def test_exact_stock_is_success(self):
        ledger = InMemoryStockLedger({"Ibuprofen 400mg": 5})
        outcome = ledger.deduct([_med("Ibuprofen", 5)])[0]
        assert outcome.status == STATUS_SUCCESS
        assert outcome.remaining == 0


class TestReview:
    def test_error_blocks_even_with_override(self):
        ledger = InMemoryStockLedger({})
        outcomes = ledger.deduct([_med("Paracetamol", 1)])
        with pytest.raises(InventoryLookupError) as exc_info:
            review_stock_outcomes(outcomes, allow_shortfall=True)
        assert exc_info.value.outcomes[0].name == "Paracetamol"

    def test_warning_blocks_without_override(self):
        outcomes = InMemoryStockLedger({"Ibuprofen": 1}).deduct([_med("Ibuprofen", 2)])
        with pytest.raises(StockShortfallError):
            review_stock_outcomes(outcomes)

    def test_warning_passes_with_override(self):
        outcomes = InMemoryStockLedger({"Ibuprofen": 1}).deduct([_med("Ibuprofen", 2)])
        assert review_stock_outcomes(outcomes, allow_shortfall=True) == outcomes


def test_only_medicine_items_are_deducted():
    items = [
        _med("Ibuprofen", 1),
        BillItem("Scaling", 1, 500, 500, ItemType.PROCEDURE),
        BillItem("Misc", 1, 5, 5),
    ]
    assert [i.description for i in medicine_items(items)] == ["Ibuprofen"]
