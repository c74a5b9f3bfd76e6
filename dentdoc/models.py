"""
文件路径：dentdoc/models.py

模块职责：
- 定义渲染请求（Document Request）的数据结构：处方请求与账单请求；
- 请求对象在创建后不可变（frozen dataclass + tuple），引擎只读不写；
- 账单行的 total 由调用方按 quantity * unit_price 预先计算，引擎只负责展示。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from .variables import (
    CONST_CLINIC_ADDRESS_LINES_DEFAULT,
    CONST_CLINIC_CONTACT_DEFAULT,
    CONST_CLINIC_NAME_DEFAULT,
    CONST_CLINIC_TAGLINE_DEFAULT,
    CONST_RX_CONTINUATION_TITLE,
)


class ItemType(str, Enum):
    """账单行类型标签；决定表格行样式。"""

    MEDICINE = "medicine"
    PROCEDURE = "procedure"
    CONSULTATION = "consultation"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "ItemType":
        """宽松解析：未知或缺失的标签归为 OTHER。"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Patient:
    name: str = ""
    age: str = ""
    sex: str = ""
    patient_id: str = ""
    contact: str = ""


@dataclass(frozen=True)
class ToothRecord:
    """牙位图中选中的牙齿（FDI 编号）。"""

    id: int
    type: str = ""
    category: str = ""
    disease: str = ""


@dataclass(frozen=True)
class MedicineEntry:
    name: str
    dosage: str = ""
    duration: str = ""


@dataclass(frozen=True)
class PrescriptionRequest:
    """处方渲染请求。

    属性：
        patient: 患者身份信息。
        date: 就诊日期（ISO 字符串）。
        chief_complaint / medical_history / diagnosis: 主诉、病史、诊断。
        clinical_notes: 口腔检查备注；为空时回退到 diagnosis。
        dental_notation: 牙位记录文本；selected_teeth 非空时以其格式化结果为准。
        medicines: 药品行。
        advice / followup_date: 医嘱、复诊日期。
        clinic_title: 续页页眉标题。
    """

    patient: Patient
    date: str = ""
    chief_complaint: str = ""
    medical_history: str = ""
    diagnosis: str = ""
    clinical_notes: str = ""
    dental_notation: str = ""
    selected_teeth: Tuple[ToothRecord, ...] = ()
    medicines: Tuple[MedicineEntry, ...] = ()
    advice: str = ""
    followup_date: str = ""
    clinic_title: str = CONST_RX_CONTINUATION_TITLE


@dataclass(frozen=True)
class BillItem:
    description: str
    quantity: float = 1
    unit_price: float = 0.0
    total: float = 0.0
    item_type: ItemType = ItemType.OTHER
    id: Optional[int] = None


@dataclass(frozen=True)
class ClinicInfo:
    name: str = CONST_CLINIC_NAME_DEFAULT
    tagline: str = CONST_CLINIC_TAGLINE_DEFAULT
    address_lines: Tuple[str, ...] = CONST_CLINIC_ADDRESS_LINES_DEFAULT
    contact_line: str = CONST_CLINIC_CONTACT_DEFAULT


@dataclass(frozen=True)
class InvoiceInfo:
    number: str = ""
    date: str = ""
    payment_method: str = ""
    payment_status: str = ""


@dataclass(frozen=True)
class BillRequest:
    """账单渲染请求。

    汇总金额（小计、折扣、合计、欠款）由引擎根据 items、consultation_fee、
    discount_percent、amount_paid 计算，调用方无需也无法覆盖。
    """

    patient: Patient
    invoice: InvoiceInfo
    clinic: ClinicInfo = field(default_factory=ClinicInfo)
    items: Tuple[BillItem, ...] = ()
    consultation_fee: float = 0.0
    discount_percent: float = 0.0
    amount_paid: float = 0.0
    teeth: str = ""
    diagnosis: str = ""


__all__ = [
    "ItemType",
    "Patient",
    "ToothRecord",
    "MedicineEntry",
    "PrescriptionRequest",
    "BillItem",
    "ClinicInfo",
    "InvoiceInfo",
    "BillRequest",
]
