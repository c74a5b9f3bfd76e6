"""
文件路径：dentdoc/data_handler.py

模块职责：
- 将 JSON 载荷（兼容原 Web 表单的 camelCase 键）转换为不可变的渲染请求；
- 加载处方字段绑定覆盖（更换底版时调整坐标，无需改代码）；
- 加载库存表 JSON（供 InMemoryStockLedger 使用）。

变量引用说明（来自 dentdoc/variables.py）：
- PATH_PRESCRIPTION_BINDING_JSON, CONST_ENCODING, ERR_CONFIG_LOAD_FAILED, ERR_DATA_INVALID
"""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .components import ConfigurationError, FileHandler, get_logger, money2
from .models import (
    BillItem,
    BillRequest,
    ClinicInfo,
    InvoiceInfo,
    ItemType,
    MedicineEntry,
    Patient,
    PrescriptionRequest,
    ToothRecord,
)
from .processors.financials import compute_bill_summary
from .processors.prescription import PRESCRIPTION_FIELDS, FieldAnchor
from .variables import (
    PATH_PRESCRIPTION_BINDING_JSON,
    CONST_ENCODING,
    ERR_CONFIG_LOAD_FAILED,
    ERR_DATA_INVALID,
)


logger = get_logger(__name__)


def _json_loads_strip_bom(content: str):
    """解析 JSON 字符串，自动去除 UTF-8 BOM。"""
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return json.loads(content)


def load_json_file(path: Path) -> Any:
    """读取 JSON 文件。

    异常：
        FileNotFoundError: 文件不存在。
        RuntimeError: JSON 无法解析。
    """
    FileHandler.validate_readable_file(path)
    try:
        return _json_loads_strip_bom(path.read_text(encoding=CONST_ENCODING))
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"[{ERR_CONFIG_LOAD_FAILED}] JSON 加载失败: {path}（{exc}）") from exc


# =============================
# 载荷字段读取
# =============================
def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """按顺序返回第一个存在且非 None 的键值（兼容 snake_case 与 camelCase）。"""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _number(value: Any, field_name: str) -> float:
    if value in (None, ""):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"[{ERR_DATA_INVALID}] 字段 {field_name} 不是数字：{value!r}") from exc


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise RuntimeError(f"[{ERR_DATA_INVALID}] 字段 {field_name} 应为对象")
    return value


def _sequence(value: Any, field_name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise RuntimeError(f"[{ERR_DATA_INVALID}] 字段 {field_name} 应为数组")
    return value


def _parse_patient(data: Mapping[str, Any]) -> Patient:
    return Patient(
        name=_text(_pick(data, "name", "patientName", "patient_name")),
        age=_text(_pick(data, "age")),
        sex=_text(_pick(data, "sex", "gender")),
        patient_id=_text(_pick(data, "id", "patientId", "patient_id")),
        contact=_text(_pick(data, "contact", "phone")),
    )


# =============================
# 处方请求
# =============================
def parse_prescription_request(data: Mapping[str, Any]) -> PrescriptionRequest:
    """将处方载荷转换为 PrescriptionRequest。

    支持两种患者写法：
    - 扁平：{"patientName": "...", "age": "...", "sex": "..."}（原表单提交格式）
    - 嵌套：{"patient": {"name": "...", "age": "...", "sex": "..."}}
    """
    data = _mapping(data, "prescription")
    patient_block = _pick(data, "patient")
    patient = _parse_patient(_mapping(patient_block, "patient") if patient_block is not None else data)

    medicines = []
    for i, raw in enumerate(_sequence(_pick(data, "medicines"), "medicines")):
        entry = _mapping(raw, f"medicines[{i}]")
        name = _text(entry.get("name"))
        if not name:
            logger.info("忽略无名称的药品行：medicines[%s]", i)
            continue
        medicines.append(
            MedicineEntry(name=name, dosage=_text(entry.get("dosage")), duration=_text(entry.get("duration")))
        )

    teeth = []
    for i, raw in enumerate(_sequence(_pick(data, "selectedTeeth", "selected_teeth"), "selectedTeeth")):
        tooth = _mapping(raw, f"selectedTeeth[{i}]")
        try:
            tooth_id = int(tooth.get("id"))
        except (TypeError, ValueError) as exc:
            raise RuntimeError(f"[{ERR_DATA_INVALID}] 牙位编号非法：{tooth.get('id')!r}") from exc
        teeth.append(
            ToothRecord(
                id=tooth_id,
                type=_text(tooth.get("type")),
                category=_text(tooth.get("category")),
                disease=_text(tooth.get("disease")),
            )
        )

    kwargs: Dict[str, Any] = dict(
        patient=patient,
        date=_text(_pick(data, "date")),
        chief_complaint=_text(_pick(data, "cc", "chiefComplaint", "chief_complaint")),
        medical_history=_text(_pick(data, "mh", "medicalHistory", "medical_history")),
        diagnosis=_text(_pick(data, "de", "diagnosis")),
        clinical_notes=_text(_pick(data, "clinicalNotes", "clinical_notes")),
        dental_notation=_text(_pick(data, "dentalNotation", "dental_notation")),
        selected_teeth=tuple(teeth),
        medicines=tuple(medicines),
        advice=_text(_pick(data, "advice")),
        followup_date=_text(_pick(data, "followupDate", "followup_date")),
    )
    clinic_title = _text(_pick(data, "clinicTitle", "clinic_title"))
    if clinic_title:
        kwargs["clinic_title"] = clinic_title
    return PrescriptionRequest(**kwargs)


# =============================
# 账单请求
# =============================
def _parse_bill_item(raw: Any, index: int) -> BillItem:
    item = _mapping(raw, f"items[{index}]")
    quantity = _number(_pick(item, "quantity", default=1), f"items[{index}].quantity")
    unit_price = _number(_pick(item, "unitPrice", "unit_price"), f"items[{index}].unitPrice")
    total_raw = _pick(item, "total")
    # 载荷未给出行合计时按 数量 * 单价 补齐
    total = _number(total_raw, f"items[{index}].total") if total_raw is not None else quantity * unit_price
    raw_id = _pick(item, "id")
    return BillItem(
        description=_text(_pick(item, "description", "name")),
        quantity=quantity,
        unit_price=unit_price,
        total=total,
        item_type=ItemType.parse(_pick(item, "itemType", "item_type", "type")),
        id=int(raw_id) if isinstance(raw_id, (int, float)) or (isinstance(raw_id, str) and raw_id.isdigit()) else None,
    )


def parse_bill_request(data: Mapping[str, Any]) -> BillRequest:
    """将账单载荷（原 generate-bill 接口格式）转换为 BillRequest。

    载荷中 financials 的 subtotal/total/balanceDue 等汇总值不会被采用，
    汇总金额统一由渲染引擎计算；与引擎结果不一致时记录警告。
    """
    data = _mapping(data, "bill")
    patient = _parse_patient(_mapping(_pick(data, "patient"), "patient"))
    invoice_raw = _mapping(_pick(data, "invoice"), "invoice")
    invoice = InvoiceInfo(
        number=_text(_pick(invoice_raw, "number", "invoiceNumber")),
        date=_text(_pick(invoice_raw, "date")),
        payment_method=_text(_pick(invoice_raw, "paymentMethod", "payment_method")),
        payment_status=_text(_pick(invoice_raw, "paymentStatus", "payment_status")),
    )

    clinic_raw = _mapping(_pick(data, "clinic"), "clinic")
    default_clinic = ClinicInfo()
    address = _pick(clinic_raw, "addressLines", "address_lines")
    clinic = ClinicInfo(
        name=_text(_pick(clinic_raw, "name")) or default_clinic.name,
        tagline=_text(_pick(clinic_raw, "tagline")) or default_clinic.tagline,
        address_lines=tuple(_text(a) for a in _sequence(address, "clinic.addressLines")) or default_clinic.address_lines,
        contact_line=_text(_pick(clinic_raw, "contactLine", "contact_line")) or default_clinic.contact_line,
    )

    items = tuple(_parse_bill_item(raw, i) for i, raw in enumerate(_sequence(_pick(data, "items"), "items")))
    financials = _mapping(_pick(data, "financials"), "financials")
    request = BillRequest(
        patient=patient,
        invoice=invoice,
        clinic=clinic,
        items=items,
        consultation_fee=_number(
            _pick(financials, "consultationFee", "consultation_fee", default=_pick(data, "consultationFee")),
            "consultationFee",
        ),
        discount_percent=_number(_pick(financials, "discountPercent", "discount_percent"), "discountPercent"),
        amount_paid=_number(_pick(financials, "amountPaid", "amount_paid"), "amountPaid"),
        teeth=_text(_pick(data, "teeth")),
        diagnosis=_text(_pick(data, "diagnosis")),
    )
    _warn_on_total_mismatch(request, financials)
    return request


def _warn_on_total_mismatch(request: BillRequest, financials: Mapping[str, Any]) -> None:
    supplied = _pick(financials, "total")
    if supplied is None:
        return
    computed = compute_bill_summary(request).total
    if money2(supplied) != computed:
        logger.warning("载荷合计 %s 与计算结果 %s 不一致，以计算结果为准", supplied, computed)


# =============================
# 字段绑定与库存表
# =============================
_ANCHOR_KEYS = {f.name for f in fields(FieldAnchor)}


def load_template_binding(config_path: Optional[Path] = None) -> Dict[str, FieldAnchor]:
    """加载处方字段绑定覆盖 JSON。

    文件格式：{"patient_name": {"x": 260, "y": 173}, "advice": {"x": 240, "y": 180, "from_bottom": true}}
    未出现的字段沿用默认绑定；文件不存在时返回空覆盖。

    异常：
        ConfigurationError: 未知字段名、未知属性或缺少 x。
    """
    path = config_path or PATH_PRESCRIPTION_BINDING_JSON
    if not path.exists():
        logger.warning("找不到字段绑定文件，将使用默认绑定：%s", path)
        return {}
    raw = load_json_file(path)
    if not isinstance(raw, dict):
        raise ConfigurationError(f"字段绑定文件应为对象：{path}")

    result: Dict[str, FieldAnchor] = {}
    for name, cfg in raw.items():
        if str(name).startswith("_"):
            continue  # 注释项
        if name not in PRESCRIPTION_FIELDS:
            raise ConfigurationError(f"未知处方字段：{name}")
        if not isinstance(cfg, dict) or "x" not in cfg:
            raise ConfigurationError(f"字段 {name} 的绑定需为包含 x 的对象")
        unknown = set(cfg) - _ANCHOR_KEYS
        if unknown:
            raise ConfigurationError(f"字段 {name} 含未知属性：{sorted(unknown)}")
        result[name] = FieldAnchor(**cfg)
    logger.info("已加载字段绑定覆盖：%s 项", len(result))
    return result


def load_stock_json(path: Path) -> Dict[str, int]:
    """加载库存表：{"药品名": 数量} 或 [{"name": "...", "quantity": 10}, ...]。"""
    data = load_json_file(path)
    if isinstance(data, dict):
        pairs = data.items()
    elif isinstance(data, list):
        pairs = ((_text(obj.get("name")), obj.get("quantity")) for obj in data if isinstance(obj, dict))
    else:
        raise RuntimeError(f"[{ERR_DATA_INVALID}] 库存 JSON 结构需为对象或数组")
    stock: Dict[str, int] = {}
    for name, qty in pairs:
        if not name:
            continue
        stock[str(name)] = int(_number(qty, f"stock[{name}]"))
    return stock


__all__ = [
    "load_json_file",
    "parse_prescription_request",
    "parse_bill_request",
    "load_template_binding",
    "load_stock_json",
]
