# pppk_contracts/services/contract_calculator.py
from __future__ import annotations

from datetime import date, timedelta

from pppk_contracts.schemas import ContractDates, ContractType

# Contract length in years, per category
CONTRACT_DURATION_YEARS = {
    ContractType.PENUH_WAKTU: 5,
    ContractType.PARUH_WAKTU: 1,
}


def contract_duration_years(contract_type: ContractType) -> int:
    return CONTRACT_DURATION_YEARS[ContractType(contract_type)]


def _add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29 Feb in a non-leap target year
        return d.replace(year=d.year + years, day=28)


def compute_end_date(start_date: date, contract_type: ContractType) -> date:
    """Start date + contract duration, minus one day.

    2024-01-01 full-time -> 2028-12-31; part-time -> 2024-12-31.
    """
    years = contract_duration_years(contract_type)
    return _add_years(start_date, years) - timedelta(days=1)


def compute_contract_dates(start_date: date, contract_type: ContractType) -> ContractDates:
    return ContractDates(
        start_date=start_date,
        end_date=compute_end_date(start_date, contract_type),
    )
