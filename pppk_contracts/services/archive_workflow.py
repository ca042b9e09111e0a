# pppk_contracts/services/archive_workflow.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Tuple

from pppk_contracts.errors import EmployeeNotFoundError, InputError
from pppk_contracts.schemas import ArchiveResult, ContractDates, Employee, EmployeeStatus
from pppk_contracts.services.archive_storage import FileArchive, archive_path
from pppk_contracts.services.contract_calculator import compute_contract_dates
from pppk_contracts.services.contract_composer import compose
from pppk_contracts.services.pdf_merger import merge, page_count
from pppk_contracts.services.record_store import EmployeeStore, TemplateStore

logger = logging.getLogger("pppk.workflow")

# {ni_pppk}_<suffix>.pdf, e.g. 199001012024211001_TTD.pdf
SIGNATURE_FILENAME_RE = re.compile(r"^(?P<id>[^_/\\]+)_(?P<suffix>[^/\\]+)\.pdf$", re.IGNORECASE)


def check_signature_filename(filename: str, ni_pppk: str) -> None:
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    m = SIGNATURE_FILENAME_RE.match(name)
    if not m:
        raise InputError("signature_file", f"expected '{{NI PPPK}}_<suffix>.pdf', got {name!r}")
    if m.group("id") != ni_pppk:
        raise InputError("signature_file", "NI PPPK in filename does not match the selected employee")


@dataclass
class ContractWorkflow:
    """generate -> merge -> validate -> archive, stopping at the first failure.

    Nothing is retried here; the caller decides whether to run again.
    """

    employees: EmployeeStore
    templates: TemplateStore
    validator: Any
    archive: FileArchive

    def _employee(self, ni_pppk: str) -> Employee:
        e = self.employees.get_by_id(ni_pppk)
        if e is None:
            raise EmployeeNotFoundError(f"unknown employee: {ni_pppk}")
        return e

    def _compose_draft(self, ni_pppk: str, template_id: str, start_date: date) -> Tuple[Employee, bytes, ContractDates]:
        employee = self._employee(ni_pppk)
        template = self.templates.require(template_id)
        if template.contract_type != employee.contract_type:
            logger.warning(
                "template %s is for %s but employee %s is %s",
                template.id, template.contract_type.value, ni_pppk, employee.contract_type.value,
            )
        dates = compute_contract_dates(start_date, employee.contract_type)
        draft = compose(template, employee, dates.start_date, dates.end_date)
        return employee, draft, dates

    def generate_draft(self, ni_pppk: str, template_id: str, start_date: date) -> Tuple[bytes, ContractDates]:
        employee, draft, dates = self._compose_draft(ni_pppk, template_id, start_date)
        if employee.status == EmployeeStatus.NEW:
            self.employees.update_status(ni_pppk, EmployeeStatus.GENERATED)
        return draft, dates

    def archive_contract(
        self,
        ni_pppk: str,
        template_id: str,
        start_date: date,
        signature_filename: str,
        signature_bytes: bytes,
    ) -> ArchiveResult:
        self._employee(ni_pppk)
        check_signature_filename(signature_filename, ni_pppk)

        # status is written only once the outcome is known
        _, draft, dates = self._compose_draft(ni_pppk, template_id, start_date)
        final = merge(draft, signature_bytes)

        outcome = self.validator.validate(final)
        if not outcome.passed:
            logger.warning("contract %s failed validation: %s", ni_pppk, outcome.reason)
            self.employees.update_status(ni_pppk, EmployeeStatus.ERROR)
            return ArchiveResult(archived=False, validation_result=outcome.reason)

        try:
            locator: Optional[str] = self.archive.store(archive_path(ni_pppk), final)
        except (OSError, ValueError) as e:
            logger.error("archiving %s failed: %s", ni_pppk, e)
            return ArchiveResult(archived=False, validation_result=f"Archiving failed: {e}")

        self.employees.update_status(
            ni_pppk, EmployeeStatus.ARCHIVED,
            start_date=dates.start_date, end_date=dates.end_date,
        )
        return ArchiveResult(
            archived=True,
            validation_result=outcome.reason,
            locator=locator,
            page_count=page_count(final),
        )
