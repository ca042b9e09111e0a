# pppk_contracts/schemas.py
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _PPPKBase(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ContractType(str, Enum):
    PENUH_WAKTU = "PENUH_WAKTU"   # full-time
    PARUH_WAKTU = "PARUH_WAKTU"   # part-time


class EmployeeStatus(str, Enum):
    NEW = "New"
    GENERATED = "Generated"
    ARCHIVED = "Archived"
    ERROR = "Error"


class Gender(str, Enum):
    MALE = "LAKI-LAKI"
    FEMALE = "PEREMPUAN"


# ---- Employee record

class Employee(_PPPKBase):
    model_config = ConfigDict(extra="ignore", frozen=True)

    ni_pppk: str = Field(..., min_length=1)
    contract_number: str = ""
    nik: str = ""
    participant_id: str = ""
    full_name: str = ""
    birth_place: str = ""
    birth_date: Optional[date] = None
    gender: Optional[Gender] = None
    address: str = ""
    position: str = ""
    unit_name: str = ""
    education: str = ""
    grade_class: str = ""
    salary_numeric: float = 0
    salary_words: str = ""
    graduation_year: int = 0
    contract_type: ContractType = ContractType.PENUH_WAKTU
    status: EmployeeStatus = EmployeeStatus.NEW
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("ni_pppk", mode="before")
    @classmethod
    def _strip_id(cls, v: Any) -> Any:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator(
        "contract_number", "nik", "participant_id", "full_name", "birth_place",
        "address", "position", "unit_name", "education", "grade_class",
        "salary_words", mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @field_validator("salary_numeric", "graduation_year", mode="before")
    @classmethod
    def _blank_to_zero(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v

    @field_validator("gender", "birth_date", "start_date", "end_date", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ---- Templates

class TemplateSection(_PPPKBase):
    title: str = Field(..., min_length=1)
    subtitle: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class TemplatePayload(_PPPKBase):
    name: str = Field(..., min_length=3)
    contract_type: ContractType = ContractType.PENUH_WAKTU
    header_title: str = Field(..., min_length=1)
    opening_text: Optional[str] = None
    sections: List[TemplateSection] = Field(..., min_length=1)
    closing_text: Optional[str] = None


class ContractTemplate(TemplatePayload):
    id: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=datetime.now)


# ---- Dates

class ContractDates(_PPPKBase):
    start_date: date
    end_date: date


class EndDateResponse(_PPPKBase):
    contract_type: ContractType
    duration_years: int
    start_date: date
    end_date: date


# ---- API payloads

class PlaceholderInfo(_PPPKBase):
    placeholder: str
    description: str


class ImportResult(_PPPKBase):
    imported: int
    ids: List[str] = Field(default_factory=list)


class ArchiveResult(_PPPKBase):
    archived: bool
    validation_result: str
    locator: Optional[str] = None
    page_count: Optional[int] = None
