# pppk_contracts/main.py

# Standard library
from datetime import date
from io import BytesIO
from typing import Optional
import logging

# Third-party
from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

# Local modules
from pppk_contracts import config
from pppk_contracts.errors import (
    CopyError,
    EmployeeNotFoundError,
    InputError,
    LoadError,
    PPPKError,
    RosterImportError,
    TemplateNotFoundError,
    UnsupportedDurationError,
)
from pppk_contracts.schemas import ContractType, EndDateResponse, ImportResult, TemplatePayload
from pppk_contracts.services.archive_storage import FileArchive
from pppk_contracts.services.archive_workflow import ContractWorkflow
from pppk_contracts.services.contract_calculator import compute_end_date, contract_duration_years
from pppk_contracts.services.contract_validator import get_validator
from pppk_contracts.services.placeholders import list_placeholders
from pppk_contracts.services.record_store import EmployeeStore, TemplateStore, load_employees_file
from pppk_contracts.services.roster_import import parse_roster

logger = logging.getLogger("pppk")
if not logger.handlers:
    logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title="PPPK Contracts", version="0.1")

# --- stores & workflow (process-wide, replaced in tests) ---
employees = EmployeeStore(load_employees_file(config.EMPLOYEES_SEED))
templates = TemplateStore.from_directory(config.TEMPLATES_DIR)
workflow = ContractWorkflow(
    employees=employees,
    templates=templates,
    validator=get_validator(),
    archive=FileArchive(config.ARCHIVE_DIR),
)


# ========== Helpers ==========

_STATUS_BY_ERROR = (
    (EmployeeNotFoundError, 404, "employee_not_found"),
    (TemplateNotFoundError, 404, "template_not_found"),
    (InputError, 400, "invalid_input"),
    (RosterImportError, 400, "import_failed"),
    (LoadError, 422, "pdf_load_failed"),
    (CopyError, 422, "pdf_copy_failed"),
    (UnsupportedDurationError, 422, "unsupported_duration"),
)


def _error_response(e: PPPKError) -> JSONResponse:
    for cls, status, code in _STATUS_BY_ERROR:
        if isinstance(e, cls):
            payload = {"error": code, "detail": str(e)}
            document = getattr(e, "document", None)
            if document:
                payload["document"] = document
            return JSONResponse(payload, status_code=status)
    logger.exception("unhandled domain error: %s", e)
    return JSONResponse({"error": "internal_error", "detail": str(e)}, status_code=500)


# ========== API Employees ==========

@app.get("/api/employees")
async def api_employees():
    items = [e.model_dump(mode="json") for e in workflow.employees.get_all()]
    return JSONResponse({"items": items})


@app.get("/api/employees/{ni_pppk}")
async def api_employee(ni_pppk: str):
    e = workflow.employees.get_by_id(ni_pppk)
    if e is None:
        return _error_response(EmployeeNotFoundError(f"unknown employee: {ni_pppk}"))
    return JSONResponse(e.model_dump(mode="json"))


@app.post("/api/employees/import", response_model=ImportResult)
async def api_employees_import(file: UploadFile = File(...)):
    data = await file.read()
    try:
        parsed = await run_in_threadpool(parse_roster, data)
    except RosterImportError as e:
        logger.warning("roster import %s failed: %s", file.filename, e)
        return _error_response(e)
    workflow.employees.upsert_many(parsed)
    return ImportResult(imported=len(parsed), ids=[e.ni_pppk for e in parsed])


# ========== API Templates ==========

@app.get("/api/placeholders")
async def api_placeholders():
    return JSONResponse({"items": list_placeholders()})


@app.get("/api/templates")
async def api_templates(contract_type: Optional[ContractType] = None):
    items = [t.model_dump(mode="json") for t in workflow.templates.get_all(contract_type)]
    return JSONResponse({"items": items})


@app.get("/api/templates/{template_id}")
async def api_template(template_id: str):
    try:
        tpl = workflow.templates.require(template_id)
    except TemplateNotFoundError as e:
        return _error_response(e)
    return JSONResponse(tpl.model_dump(mode="json"))


@app.post("/api/templates", status_code=201)
async def api_template_create(payload: TemplatePayload):
    tpl = workflow.templates.create(payload)
    return JSONResponse(tpl.model_dump(mode="json"), status_code=201)


@app.put("/api/templates/{template_id}")
async def api_template_update(template_id: str, payload: TemplatePayload):
    try:
        tpl = workflow.templates.update(template_id, payload)
    except TemplateNotFoundError as e:
        return _error_response(e)
    return JSONResponse(tpl.model_dump(mode="json"))


@app.delete("/api/templates/{template_id}")
async def api_template_delete(template_id: str):
    try:
        workflow.templates.delete(template_id)
    except TemplateNotFoundError as e:
        return _error_response(e)
    return JSONResponse({"deleted": template_id})


# ========== API Contracts ==========

@app.get("/api/contracts/end-date", response_model=EndDateResponse)
async def api_contract_end_date(start_date: date, contract_type: ContractType = ContractType.PENUH_WAKTU):
    return EndDateResponse(
        contract_type=contract_type,
        duration_years=contract_duration_years(contract_type),
        start_date=start_date,
        end_date=compute_end_date(start_date, contract_type),
    )


@app.post("/api/contracts/{ni_pppk}/draft")
async def api_contract_draft(
    ni_pppk: str,
    template_id: str = Form(...),
    start_date: date = Form(...),
):
    try:
        pdf_bytes, dates = await run_in_threadpool(workflow.generate_draft, ni_pppk, template_id, start_date)
    except PPPKError as e:
        return _error_response(e)
    headers = {
        "Content-Disposition": f'inline; filename="{ni_pppk}_DRAFT.pdf"',
        "X-Contract-End-Date": dates.end_date.isoformat(),
    }
    return StreamingResponse(BytesIO(pdf_bytes), media_type="application/pdf", headers=headers)


@app.post("/api/contracts/{ni_pppk}/archive")
async def api_contract_archive(
    ni_pppk: str,
    template_id: str = Form(...),
    start_date: date = Form(...),
    signature_file: UploadFile = File(...),
):
    if signature_file.content_type not in (None, "", "application/pdf", "application/octet-stream"):
        return _error_response(InputError("signature_file", "only PDF files are allowed"))
    signature = await signature_file.read()
    try:
        result = await run_in_threadpool(
            workflow.archive_contract,
            ni_pppk, template_id, start_date, signature_file.filename or "", signature,
        )
    except PPPKError as e:
        logger.warning("archive of %s aborted: %s", ni_pppk, e)
        return _error_response(e)
    return JSONResponse(result.model_dump(mode="json"))
