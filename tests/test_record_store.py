from pathlib import Path

import pytest

from pppk_contracts.errors import TemplateNotFoundError
from pppk_contracts.schemas import ContractType, Employee, EmployeeStatus, TemplatePayload, TemplateSection
from pppk_contracts.services.record_store import (
    EmployeeStore,
    TemplateStore,
    load_employees_file,
    load_templates_dir,
)

CATALOG = Path(__file__).resolve().parents[1] / "catalog"


def test_upsert_new_and_existing(employee):
    store = EmployeeStore()
    assert store.upsert_many([employee.model_copy(update={"status": EmployeeStatus.ARCHIVED})]) == 1
    assert store.get_by_id(employee.ni_pppk).status == EmployeeStatus.NEW

    store.update_status(employee.ni_pppk, EmployeeStatus.GENERATED)
    store.upsert_many([Employee(ni_pppk=employee.ni_pppk, full_name="Andi P.")])
    updated = store.get_by_id(employee.ni_pppk)
    assert updated.full_name == "Andi P."
    assert updated.position == "Guru Ahli Pertama"
    assert updated.status == EmployeeStatus.GENERATED


def test_get_all_sorted_by_name():
    store = EmployeeStore([
        Employee(ni_pppk="2", full_name="Budi"),
        Employee(ni_pppk="1", full_name="andi"),
        Employee(ni_pppk="3", full_name="Citra"),
    ])
    assert [e.full_name for e in store.get_all()] == ["andi", "Budi", "Citra"]


def test_update_status_unknown_id():
    assert EmployeeStore().update_status("tidak-ada", EmployeeStatus.ERROR) is False


def test_seed_file_loads():
    items = load_employees_file(CATALOG / "employees.yml")
    assert len(items) == 2
    assert {e.contract_type for e in items} == {ContractType.PENUH_WAKTU, ContractType.PARUH_WAKTU}


def test_catalog_templates_load():
    store = TemplateStore.from_directory(CATALOG / "templates")
    ids = {t.id for t in store.get_all()}
    assert {"pppk-penuh-waktu", "pppk-paruh-waktu"} <= ids
    part_time = store.get_all(ContractType.PARUH_WAKTU)
    assert [t.id for t in part_time] == ["pppk-paruh-waktu"]
    assert store.require("pppk-penuh-waktu").sections[0].title == "PASAL 1"


def test_invalid_template_file_skipped(tmp_path):
    (tmp_path / "rusak.yml").write_text("name: x\nsections: []\n", encoding="utf-8")
    (tmp_path / "bukan-mapping.yml").write_text("- a\n- b\n", encoding="utf-8")
    assert load_templates_dir(tmp_path) == []


def _payload(name="Template Baru", titles=("PASAL 1",)):
    return TemplatePayload(
        name=name,
        contract_type=ContractType.PENUH_WAKTU,
        header_title="PERJANJIAN KERJA",
        sections=[TemplateSection(title=t, subtitle="SUB", content="Isi.") for t in titles],
    )


def test_template_crud():
    store = TemplateStore()
    tpl = store.create(_payload())
    assert tpl.id == "template-baru"
    again = store.create(_payload())
    assert again.id != tpl.id

    updated = store.update(tpl.id, _payload(titles=("PASAL 1", "PASAL 2")))
    assert [s.title for s in updated.sections] == ["PASAL 1", "PASAL 2"]
    assert updated.created_at == tpl.created_at

    store.delete(tpl.id)
    assert store.get_by_id(tpl.id) is None
    with pytest.raises(TemplateNotFoundError):
        store.delete(tpl.id)
    with pytest.raises(TemplateNotFoundError):
        store.update("tidak-ada", _payload())


def test_template_needs_a_section():
    with pytest.raises(ValueError):
        TemplatePayload(name="Kosong", header_title="X", sections=[])
