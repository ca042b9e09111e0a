# pppk_contracts/services/placeholders.py
from __future__ import annotations

import re
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from pppk_contracts.errors import UnsupportedDurationError
from pppk_contracts.schemas import ContractDates, Employee
from pppk_contracts.services.contract_calculator import contract_duration_years

# Indonesian calendar names (date.weekday(): Monday == 0)
DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
MONTH_NAMES = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)

# Only the durations actually used by contract categories are spelled out.
DURATION_WORDS = {1: "satu", 5: "lima"}


def format_date_id(d: Optional[date]) -> str:
    """`14 Mei 2024` (dd MMMM yyyy)."""
    if d is None:
        return ""
    return f"{d.day:02d} {MONTH_NAMES[d.month - 1]} {d.year}"


def format_long_date_id(d: Optional[date]) -> str:
    """`Selasa, 14 Mei 2024`."""
    if d is None:
        return ""
    return f"{DAY_NAMES[d.weekday()]}, {format_date_id(d)}"


def format_rupiah(value: float) -> str:
    """id-ID grouping: 3250000 -> '3.250.000', 1500.5 -> '1.500,5'."""
    if float(value).is_integer():
        return f"{int(value):,}".replace(",", ".")
    integral, _, frac = f"{value:,.2f}".partition(".")
    frac = frac.rstrip("0")
    return integral.replace(",", ".") + ("," + frac if frac else "")


def duration_in_words(years: int) -> str:
    try:
        return DURATION_WORDS[years]
    except KeyError:
        raise UnsupportedDurationError(f"no word form for a {years}-year contract") from None


_Resolver = Callable[[Employee, ContractDates], str]

# (token, description, resolver); closed list, in display order
PLACEHOLDERS: List[Tuple[str, str, _Resolver]] = [
    ("{{NAMA_LENGKAP}}", "Nama Lengkap Pegawai",
     lambda e, d: e.full_name),
    ("{{NI_PPPK}}", "Nomor Induk PPPK",
     lambda e, d: e.ni_pppk),
    ("{{NIK}}", "Nomor Induk Kependudukan",
     lambda e, d: e.nik),
    ("{{JABATAN}}", "Jabatan Pegawai",
     lambda e, d: e.position),
    ("{{UNIT_KERJA}}", "Unit Kerja Penempatan",
     lambda e, d: e.unit_name),
    ("{{TEMPAT_LAHIR}}", "Tempat Lahir Pegawai",
     lambda e, d: e.birth_place),
    ("{{TANGGAL_LAHIR}}", "Tanggal Lahir (dd MMMM yyyy)",
     lambda e, d: format_date_id(e.birth_date)),
    ("{{PENDIDIKAN}}", "Pendidikan Terakhir",
     lambda e, d: e.education),
    ("{{ALAMAT}}", "Alamat Lengkap Pegawai",
     lambda e, d: e.address),
    ("{{GAJI_ANGKA}}", "Gaji Pokok (Angka)",
     lambda e, d: format_rupiah(e.salary_numeric)),
    ("{{GAJI_TERBILANG}}", "Gaji Pokok (Terbilang)",
     lambda e, d: e.salary_words),
    ("{{MASA_KONTRAK_TAHUN}}", "Durasi Kontrak (Angka, cth: 5)",
     lambda e, d: str(contract_duration_years(e.contract_type))),
    ("{{MASA_KONTRAK_TERBILANG}}", "Durasi Kontrak (Terbilang, cth: lima)",
     lambda e, d: duration_in_words(contract_duration_years(e.contract_type))),
    ("{{TANGGAL_MULAI_KONTRAK}}", "Tanggal Mulai Kontrak (dd MMMM yyyy)",
     lambda e, d: format_date_id(d.start_date)),
    ("{{TANGGAL_SELESAI_KONTRAK}}", "Tanggal Selesai Kontrak (dd MMMM yyyy)",
     lambda e, d: format_date_id(d.end_date)),
    ("{{HARI_INI_LONG}}", "Tanggal penandatanganan (Selasa, 14 Mei 2024)",
     lambda e, d: format_long_date_id(d.start_date)),
]

PLACEHOLDER_TOKENS = tuple(token for token, _, _ in PLACEHOLDERS)
_TOKEN_RE = re.compile("|".join(re.escape(t) for t in PLACEHOLDER_TOKENS))


def list_placeholders() -> List[Dict[str, str]]:
    return [{"placeholder": t, "description": desc} for t, desc, _ in PLACEHOLDERS]


def build_replacements(employee: Employee, dates: ContractDates) -> Dict[str, str]:
    return {token: fn(employee, dates) for token, _, fn in PLACEHOLDERS}


def resolve(text: Optional[str], employee: Employee, dates: ContractDates) -> str:
    """Replace every occurrence of every known token; unknown `{{...}}` stay as-is."""
    if not text:
        return ""
    if not _TOKEN_RE.search(text):
        return text
    replacements = build_replacements(employee, dates)
    # single pass: substituted values are never rescanned for tokens
    return _TOKEN_RE.sub(lambda m: replacements[m.group(0)], text)
