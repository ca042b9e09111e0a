# pppk_contracts/services/record_store.py
from __future__ import annotations

import logging
import re
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from pppk_contracts.errors import TemplateNotFoundError
from pppk_contracts.schemas import (
    ContractTemplate,
    ContractType,
    Employee,
    EmployeeStatus,
    TemplatePayload,
)

logger = logging.getLogger("pppk.store")


# ========== Employees ==========

class EmployeeStore:
    """In-memory employee records keyed by NI PPPK."""

    def __init__(self, employees: Optional[Iterable[Employee]] = None):
        self._lock = threading.Lock()
        self._items: Dict[str, Employee] = {}
        for e in employees or []:
            self._items[e.ni_pppk] = e

    def get_all(self) -> List[Employee]:
        with self._lock:
            items = list(self._items.values())
        return sorted(items, key=lambda e: e.full_name.lower())

    def get_by_id(self, ni_pppk: str) -> Optional[Employee]:
        with self._lock:
            return self._items.get(ni_pppk)

    def upsert_many(self, employees: Iterable[Employee]) -> int:
        """New records start as `New`; existing ones are refreshed, keeping their status."""
        count = 0
        with self._lock:
            for e in employees:
                current = self._items.get(e.ni_pppk)
                if current is None:
                    self._items[e.ni_pppk] = e.model_copy(update={"status": EmployeeStatus.NEW})
                else:
                    fields = e.model_dump(exclude={"status"}, exclude_unset=True)
                    self._items[e.ni_pppk] = current.model_copy(update=fields)
                count += 1
        logger.info("%d employee records processed", count)
        return count

    def update_status(self, ni_pppk: str, status: EmployeeStatus, **dates: Any) -> bool:
        with self._lock:
            current = self._items.get(ni_pppk)
            if current is None:
                logger.error("update_status: employee %s not found", ni_pppk)
                return False
            update: Dict[str, Any] = {"status": EmployeeStatus(status)}
            update.update({k: v for k, v in dates.items() if k in ("start_date", "end_date")})
            self._items[ni_pppk] = current.model_copy(update=update)
        logger.info("employee %s -> %s", ni_pppk, EmployeeStatus(status).value)
        return True


def load_employees_file(p: Path) -> List[Employee]:
    """Seed records from a YAML list (`employees: [...]` or a bare list)."""
    if not p.exists():
        return []
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or []
    except (OSError, yaml.YAMLError) as e:
        logger.warning("employee seed %s unreadable: %s", p.name, e)
        return []
    if isinstance(data, dict):
        data = data.get("employees") or []
    out: List[Employee] = []
    for i, raw in enumerate(data):
        try:
            out.append(Employee.model_validate(raw))
        except ValidationError as e:
            logger.warning("employee seed %s #%d skipped: %s", p.name, i, e)
    return out


# ========== Templates ==========

def _slug(text: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return s or "template"


def load_template_file(p: Path) -> Optional[ContractTemplate]:
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("template %s unreadable: %s", p.name, e)
        return None
    if not isinstance(data, dict):
        logger.warning("template %s: expected a mapping at top level", p.name)
        return None
    data.setdefault("id", p.stem)
    try:
        return ContractTemplate.model_validate(data)
    except ValidationError as e:
        logger.warning("template %s invalid: %s", p.name, e)
        return None


def load_templates_dir(root: Path) -> List[ContractTemplate]:
    out: List[ContractTemplate] = []
    if not root.exists():
        return out
    for p in sorted(root.glob("*.yml")) + sorted(root.glob("*.yaml")):
        tpl = load_template_file(p)
        if tpl is not None:
            out.append(tpl)
    return out


class TemplateStore:
    def __init__(self, templates: Optional[Iterable[ContractTemplate]] = None):
        self._lock = threading.Lock()
        self._items: Dict[str, ContractTemplate] = {}
        for t in templates or []:
            self._items[t.id] = t

    @classmethod
    def from_directory(cls, root: Path) -> "TemplateStore":
        templates = load_templates_dir(root)
        logger.info("%d contract templates loaded from %s", len(templates), root)
        return cls(templates)

    def get_all(self, contract_type: Optional[ContractType] = None) -> List[ContractTemplate]:
        with self._lock:
            items = list(self._items.values())
        if contract_type is not None:
            items = [t for t in items if t.contract_type == ContractType(contract_type)]
        return sorted(items, key=lambda t: t.created_at, reverse=True)

    def get_by_id(self, template_id: str) -> Optional[ContractTemplate]:
        with self._lock:
            return self._items.get(template_id)

    def require(self, template_id: str) -> ContractTemplate:
        tpl = self.get_by_id(template_id)
        if tpl is None:
            raise TemplateNotFoundError(f"unknown template: {template_id}")
        return tpl

    def create(self, payload: TemplatePayload) -> ContractTemplate:
        with self._lock:
            tid = _slug(payload.name)
            if tid in self._items:
                tid = f"{tid}-{uuid.uuid4().hex[:8]}"
            tpl = ContractTemplate(id=tid, **payload.model_dump())
            self._items[tid] = tpl
        logger.info("template %s created", tid)
        return tpl

    def update(self, template_id: str, payload: TemplatePayload) -> ContractTemplate:
        with self._lock:
            current = self._items.get(template_id)
            if current is None:
                raise TemplateNotFoundError(f"unknown template: {template_id}")
            tpl = ContractTemplate(id=template_id, created_at=current.created_at, **payload.model_dump())
            self._items[template_id] = tpl
        logger.info("template %s updated", template_id)
        return tpl

    def delete(self, template_id: str) -> None:
        with self._lock:
            if self._items.pop(template_id, None) is None:
                raise TemplateNotFoundError(f"unknown template: {template_id}")
        logger.info("template %s deleted", template_id)
