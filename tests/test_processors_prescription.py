from __future__ import annotations

import pytest

from dentdoc.components import measure_text_width
from dentdoc.models import MedicineEntry, Patient, PrescriptionRequest, ToothRecord
from dentdoc.processors.layout import clip_lines
from dentdoc.processors.prescription import (
    DEFAULT_PRESCRIPTION_BINDING,
    FieldAnchor,
    PrescriptionComposer,
    build_oral_exam_text,
    format_dental_notation,
    format_tooth_id,
)
from dentdoc.variables import CONST_PAGE_HEIGHT


def _request(**overrides):
    base = dict(
        patient=Patient(name="Asha Rao", age="34", sex="F"),
        date="2024-05-01",
        chief_complaint="Pain while chewing",
        medical_history="None reported",
    )
    base.update(overrides)
    return PrescriptionRequest(**base)


def _medicines(n):
    return tuple(MedicineEntry(f"Medicine {i + 1}", "1-0-1", "5 days") for i in range(n))


class TestToothNotation:
    @pytest.mark.parametrize("tooth_id, expected", [(19, "1A"), (21, "21"), (53, "53"), (110, "1B"), (413, "4E"), (48, "48")])
    def test_tooth_ids(self, tooth_id, expected):
        assert format_tooth_id(tooth_id) == expected

    def test_notation_joined(self):
        teeth = (ToothRecord(19, disease="Caries"), ToothRecord(46, disease="Fracture"), ToothRecord(21))
        assert format_dental_notation(teeth) == "#1A (Caries); #46 (Fracture); #21"


class TestOralExamText:
    def test_none_when_empty(self):
        assert build_oral_exam_text(_request()) == "None"

    def test_teeth_and_notes(self):
        req = _request(selected_teeth=(ToothRecord(46, disease="Caries"),), clinical_notes="Deep caries")
        assert build_oral_exam_text(req) == "Teeth involved: #46 (Caries); Deep caries"

    def test_selected_teeth_override_notation_text(self):
        req = _request(dental_notation="stale", selected_teeth=(ToothRecord(19, disease="Caries"),))
        assert build_oral_exam_text(req) == "Teeth involved: #1A (Caries)"

    def test_notes_fall_back_to_diagnosis(self):
        assert build_oral_exam_text(_request(diagnosis="Pulpitis")) == "Pulpitis"


class TestPrescriptionComposer:
    def test_identity_fields_at_anchors(self, painter):
        PrescriptionComposer().compose(painter, _request())
        name = painter.find_text("Asha Rao")[0]
        assert (name["x"], name["y"]) == (260, 173)
        assert painter.find_text("05/01/2024")[0]["x"] == 507

    def test_placeholders(self, painter):
        req = _request(patient=Patient(name="X"), chief_complaint="", medical_history="")
        PrescriptionComposer().compose(painter, req)
        assert len(painter.find_text("N/A")) == 4  # 年龄、性别、主诉、病史
        assert painter.find_text("None")
        assert painter.find_text("No specific advice")
        assert painter.find_text("No follow-up scheduled")

    def test_medicines_start_after_oral_exam(self, painter):
        PrescriptionComposer().compose(painter, _request(medicines=_medicines(2)))
        first = painter.find_text("Medicine 1")[0]
        # 口腔检查 "None" 单行：311 + 1*20 + 60
        assert first["y"] == pytest.approx(391)
        assert first["x"] == 160
        assert painter.find_text("Medicine 2")[0]["y"] == pytest.approx(416)

    def test_sections_never_overlap(self, painter):
        long_cc = " ".join(["tenderness"] * 40)
        PrescriptionComposer().compose(painter, _request(chief_complaint=long_cc, medical_history="Diabetic"))
        cc_lines = [c for c in painter.texts() if c["text"].startswith("tenderness")]
        mh = painter.find_text("Diabetic")[0]
        assert len(cc_lines) > 2
        assert mh["y"] >= cc_lines[-1]["y"] + 20

    def test_eleven_rows_fit_first_page(self, painter):
        state = PrescriptionComposer().compose(painter, _request(medicines=_medicines(11)))
        assert state.page_count == 1
        last = painter.find_text("Medicine 11")[0]
        assert last["y"] <= CONST_PAGE_HEIGHT - 180

    def test_twelfth_row_opens_continuation_page(self, painter):
        state = PrescriptionComposer().compose(painter, _request(medicines=_medicines(12)))
        assert state.page_count == 2
        row = painter.find_text("Medicine 12")[0]
        assert row["page"] == 2
        assert row["y"] == pytest.approx(100)
        titles = [c["text"] for c in painter.texts(page=2)][:2]
        assert titles == ["DANTSRI DENTAL HOSPITAL", "Prescription Continued"]

    def test_advice_and_followup_on_last_page(self, painter):
        req = _request(medicines=_medicines(30), advice="Warm saline rinse", followup_date="2024-05-08")
        state = PrescriptionComposer().compose(painter, req)
        advice = painter.find_text("Warm saline rinse")[0]
        followup = painter.find_text("05/08/2024")[0]
        assert advice["page"] == followup["page"] == state.page_count
        assert advice["y"] == pytest.approx(CONST_PAGE_HEIGHT - 180)
        assert followup["y"] == pytest.approx(CONST_PAGE_HEIGHT - 126)

    def test_long_advice_stops_above_followup(self, painter):
        advice = " ".join(["Rinse with warm saline water three times daily after meals"] * 5)
        composer = PrescriptionComposer()
        composer.compose(painter, _request(advice=advice, followup_date="2024-05-08"))
        anchor = composer.binding["advice"]
        followup = painter.find_text("05/08/2024")[0]
        advice_lines = [c for c in painter.texts() if c["x"] == anchor.x]
        assert len(advice_lines) == 3
        assert all(c["y"] < followup["y"] for c in advice_lines)
        assert advice_lines[-1]["text"].endswith("...")
        for line in advice_lines:
            assert measure_text_width(line["text"], composer.style.font_name, anchor.size) <= anchor.max_width

    def test_short_advice_is_not_clipped(self):
        lines = clip_lines(["Warm saline rinse"], 3, "Helvetica", 12, 320)
        assert lines == ["Warm saline rinse"]

    def test_binding_override(self, painter):
        binding = {"patient_name": FieldAnchor(x=100, y=150)}
        composer = PrescriptionComposer(binding=binding)
        composer.compose(painter, _request())
        name = painter.find_text("Asha Rao")[0]
        assert (name["x"], name["y"]) == (100, 150)
        # 未覆盖字段沿用默认
        assert composer.binding["age"] == DEFAULT_PRESCRIPTION_BINDING["age"]
