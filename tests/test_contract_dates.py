from datetime import date

from pppk_contracts.schemas import ContractType
from pppk_contracts.services.contract_calculator import (
    compute_contract_dates,
    compute_end_date,
    contract_duration_years,
)


def test_full_time_five_years_minus_one_day():
    assert compute_end_date(date(2024, 1, 1), ContractType.PENUH_WAKTU) == date(2028, 12, 31)


def test_part_time_one_year_minus_one_day():
    assert compute_end_date(date(2024, 1, 1), ContractType.PARUH_WAKTU) == date(2024, 12, 31)


def test_leap_day_start():
    # 29 Feb + 1 year lands on 28 Feb, then minus one day
    assert compute_end_date(date(2024, 2, 29), ContractType.PARUH_WAKTU) == date(2025, 2, 27)
    assert compute_end_date(date(2024, 3, 1), ContractType.PARUH_WAKTU) == date(2025, 2, 28)


def test_durations():
    assert contract_duration_years(ContractType.PENUH_WAKTU) == 5
    assert contract_duration_years("PARUH_WAKTU") == 1


def test_dates_pair():
    d = compute_contract_dates(date(2025, 7, 1), ContractType.PENUH_WAKTU)
    assert d.start_date == date(2025, 7, 1)
    assert d.end_date == date(2030, 6, 30)
