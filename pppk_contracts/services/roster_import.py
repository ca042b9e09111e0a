# pppk_contracts/services/roster_import.py
from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from io import BytesIO
from typing import Any, Dict, List, Optional

from openpyxl import load_workbook
from pydantic import ValidationError

from pppk_contracts.errors import RosterImportError
from pppk_contracts.schemas import ContractType, Employee, Gender

logger = logging.getLogger("pppk.import")

# Spreadsheet header -> Employee field
COLUMN_MAPPING: Dict[str, str] = {
    "Nomor Kontrak P3K": "contract_number",
    "NIK": "nik",
    "No Peserta": "participant_id",
    "Nama": "full_name",
    "Tempat Lahir": "birth_place",
    "Tanggal Lahir": "birth_date",
    "Jenis Kelamin": "gender",
    "NI P3K": "ni_pppk",
    "Alamat": "address",
    "Jabatan": "position",
    "Unit Kerja": "unit_name",
    "Pendidikan": "education",
    "Golongan": "grade_class",
    "Gaji": "salary_numeric",
    "Terbilang": "salary_words",
    "Tahun Lulus": "graduation_year",
}

EXCEL_EPOCH = date(1899, 12, 30)
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")


def _text(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        # long identifiers typed as numbers in Excel
        return str(int(v))
    return str(v).strip()


def parse_birth_date(v: Any) -> Optional[date]:
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, (int, float)):
        return EXCEL_EPOCH + timedelta(days=int(v))
    s = str(v).strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognised date: {s!r}")


def parse_salary(v: Any) -> float:
    if v is None or v == "":
        return 0.0
    if isinstance(v, (int, float)):
        return float(v)
    s = re.sub(r"(?i)rp\.?|\s|,-$", "", str(v))
    # id-ID: '.' groups thousands, ',' marks decimals
    s = s.replace(".", "").replace(",", ".")
    return float(s) if s else 0.0


def parse_gender(v: Any) -> Optional[Gender]:
    s = _text(v).upper()
    if not s:
        return None
    return Gender.MALE if s in {"L", "LAKI-LAKI"} else Gender.FEMALE


def contract_type_for(participant_id: str) -> ContractType:
    if (participant_id or "").strip().upper().startswith("PW"):
        return ContractType.PARUH_WAKTU
    return ContractType.PENUH_WAKTU


def row_to_employee(raw: Dict[str, Any], row_number: int) -> Employee:
    ni = _text(raw.get("ni_pppk"))
    if not ni:
        raise RosterImportError("missing required field 'NI P3K'", row=row_number)
    participant_id = _text(raw.get("participant_id"))
    try:
        return Employee(
            ni_pppk=ni,
            contract_number=_text(raw.get("contract_number")),
            nik=_text(raw.get("nik")),
            participant_id=participant_id,
            full_name=_text(raw.get("full_name")),
            birth_place=_text(raw.get("birth_place")),
            birth_date=parse_birth_date(raw.get("birth_date")),
            gender=parse_gender(raw.get("gender")),
            address=_text(raw.get("address")),
            position=_text(raw.get("position")),
            unit_name=_text(raw.get("unit_name")),
            education=_text(raw.get("education")),
            grade_class=_text(raw.get("grade_class")),
            salary_numeric=parse_salary(raw.get("salary_numeric")),
            salary_words=_text(raw.get("salary_words")),
            graduation_year=int(float(_text(raw.get("graduation_year")) or 0)),
            contract_type=contract_type_for(participant_id),
        )
    except (ValueError, ValidationError) as e:
        raise RosterImportError(str(e), row=row_number) from e


def parse_roster(data: bytes) -> List[Employee]:
    """Read the first sheet of an .xlsx roster; row 1 holds the headers."""
    try:
        wb = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except Exception as e:
        raise RosterImportError(f"not a readable spreadsheet ({e})") from e
    try:
        ws = wb.worksheets[0]
        rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()

    if len(rows) < 2:
        raise RosterImportError("spreadsheet is empty or has no data rows")

    header = [COLUMN_MAPPING.get(_text(h)) for h in rows[0]]
    if "ni_pppk" not in header:
        raise RosterImportError("header row has no 'NI P3K' column", row=1)

    employees: List[Employee] = []
    for idx, row in enumerate(rows[1:], start=2):
        if all(c is None or _text(c) == "" for c in row):
            continue
        raw = {key: value for key, value in zip(header, row) if key}
        employees.append(row_to_employee(raw, idx))

    logger.info("%d employees parsed from roster", len(employees))
    return employees
