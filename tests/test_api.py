from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from pppk_contracts import main
from pppk_contracts.services.archive_storage import FileArchive
from pppk_contracts.services.archive_workflow import ContractWorkflow
from pppk_contracts.services.contract_validator import LocalValidator
from pppk_contracts.services.record_store import EmployeeStore, TemplateStore


@pytest.fixture
def client(monkeypatch, tmp_path, employee, template):
    wf = ContractWorkflow(
        employees=EmployeeStore([employee]),
        templates=TemplateStore([template]),
        validator=LocalValidator(),
        archive=FileArchive(tmp_path),
    )
    monkeypatch.setattr(main, "workflow", wf)
    return TestClient(main.app)


def test_placeholders(client):
    r = client.get("/api/placeholders")
    assert r.status_code == 200
    assert len(r.json()["items"]) == 16


def test_employees(client, employee):
    r = client.get("/api/employees")
    assert [e["ni_pppk"] for e in r.json()["items"]] == [employee.ni_pppk]
    assert client.get(f"/api/employees/{employee.ni_pppk}").json()["full_name"] == "Andi Pratama"
    r = client.get("/api/employees/000")
    assert r.status_code == 404
    assert r.json()["error"] == "employee_not_found"


def test_end_date(client):
    r = client.get("/api/contracts/end-date", params={"start_date": "2024-01-01", "contract_type": "PARUH_WAKTU"})
    assert r.status_code == 200
    body = r.json()
    assert body["end_date"] == "2024-12-31"
    assert body["duration_years"] == 1


def test_draft_pdf(client, employee):
    r = client.post(
        f"/api/contracts/{employee.ni_pppk}/draft",
        data={"template_id": "tpl-test", "start_date": "2024-01-01"},
    )
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["x-contract-end-date"] == "2028-12-31"
    assert r.content.startswith(b"%PDF")


def test_draft_unknown_template(client, employee):
    r = client.post(
        f"/api/contracts/{employee.ni_pppk}/draft",
        data={"template_id": "tidak-ada", "start_date": "2024-01-01"},
    )
    assert r.status_code == 404
    assert r.json()["error"] == "template_not_found"


def test_archive(client, employee, make_pdf):
    r = client.post(
        f"/api/contracts/{employee.ni_pppk}/archive",
        data={"template_id": "tpl-test", "start_date": "2024-01-01"},
        files={"signature_file": (f"{employee.ni_pppk}_TTD.pdf", make_pdf(), "application/pdf")},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["archived"] is True
    assert body["page_count"] == 2
    assert client.get(f"/api/employees/{employee.ni_pppk}").json()["status"] == "Archived"


def test_archive_wrong_filename(client, employee, make_pdf):
    r = client.post(
        f"/api/contracts/{employee.ni_pppk}/archive",
        data={"template_id": "tpl-test", "start_date": "2024-01-01"},
        files={"signature_file": ("orang_lain_TTD.pdf", make_pdf(), "application/pdf")},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_input"


def test_archive_broken_signature(client, employee):
    r = client.post(
        f"/api/contracts/{employee.ni_pppk}/archive",
        data={"template_id": "tpl-test", "start_date": "2024-01-01"},
        files={"signature_file": (f"{employee.ni_pppk}_TTD.pdf", b"rusak", "application/pdf")},
    )
    assert r.status_code == 422
    assert r.json()["document"] == "donor"


def test_template_crud(client):
    payload = {
        "name": "Template API",
        "contract_type": "PARUH_WAKTU",
        "header_title": "PERJANJIAN KERJA",
        "sections": [{"title": "PASAL 1", "subtitle": "MASA", "content": "Isi {{NAMA_LENGKAP}}."}],
    }
    r = client.post("/api/templates", json=payload)
    assert r.status_code == 201
    tid = r.json()["id"]

    assert client.get(f"/api/templates/{tid}").json()["name"] == "Template API"
    assert [t["id"] for t in client.get("/api/templates", params={"contract_type": "PARUH_WAKTU"}).json()["items"]] == [tid]

    payload["sections"].append({"title": "PASAL 2", "subtitle": "GAJI", "content": "Rp. {{GAJI_ANGKA}}"})
    r = client.put(f"/api/templates/{tid}", json=payload)
    assert len(r.json()["sections"]) == 2

    assert client.delete(f"/api/templates/{tid}").status_code == 200
    assert client.get(f"/api/templates/{tid}").status_code == 404


def test_template_without_sections_rejected(client):
    r = client.post("/api/templates", json={"name": "Kosong", "header_title": "X", "sections": []})
    assert r.status_code == 422


def test_import_roster(client):
    wb = Workbook()
    ws = wb.active
    ws.append(["NI P3K", "Nama", "No Peserta"])
    ws.append(["777", "Dewi Lestari", "PW123"])
    buf = BytesIO()
    wb.save(buf)
    r = client.post(
        "/api/employees/import",
        files={"file": ("roster.xlsx", buf.getvalue(), "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
    )
    assert r.status_code == 200
    assert r.json() == {"imported": 1, "ids": ["777"]}
    assert client.get("/api/employees/777").json()["contract_type"] == "PARUH_WAKTU"


def test_import_rejects_bad_file(client):
    r = client.post("/api/employees/import", files={"file": ("roster.xlsx", b"bukan excel", "application/octet-stream")})
    assert r.status_code == 400
    assert r.json()["error"] == "import_failed"
