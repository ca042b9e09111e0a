# pppk_contracts/services/contract_validator.py
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import requests
from PyPDF2 import PdfReader
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from pppk_contracts import config
from pppk_contracts.services.text_layout import F4_SIZE

logger = logging.getLogger("pppk.validator")

VALIDATED = "Contract Validated"


@dataclass
class ValidationOutcome:
    passed: bool
    reason: str


def check_structure(pdf_bytes: bytes, tolerance: float = 1.0) -> ValidationOutcome:
    """Local checks: readable PDF, F4 pages, body plus signature page."""
    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        pages = list(reader.pages)
    except Exception as e:
        return ValidationOutcome(False, f"PDF cannot be read: {e}")

    problems = []
    if len(pages) < 2:
        problems.append(f"expected at least 2 pages, found {len(pages)}")
    w_ref, h_ref = F4_SIZE
    for i, page in enumerate(pages, start=1):
        w = float(page.mediabox.width)
        h = float(page.mediabox.height)
        if abs(w - w_ref) > tolerance or abs(h - h_ref) > tolerance:
            problems.append(f"page {i} is {w:g}x{h:g}, not F4 {w_ref}x{h_ref}")
    if problems:
        return ValidationOutcome(False, "; ".join(problems))
    return ValidationOutcome(True, VALIDATED)


class RemoteValidator:
    """POSTs the final PDF to an external validation service.

    The service answers JSON `{"result": "..."}`; anything other than
    "Contract Validated" is a failure description.
    """

    def __init__(self, url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._install_retries()

    def _install_retries(self, total: int = 2, backoff: float = 0.5) -> None:
        retry = Retry(
            total=total,
            backoff_factor=backoff,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset(["POST"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def validate(self, pdf_bytes: bytes) -> ValidationOutcome:
        data_uri = "data:application/pdf;base64," + base64.b64encode(pdf_bytes).decode("ascii")
        try:
            r = self._session.post(self.url, json={"pdfDataUri": data_uri}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("validator unreachable: %s", e)
            return ValidationOutcome(False, f"Validator unreachable: {e}")
        if r.status_code >= 400:
            return ValidationOutcome(False, f"Validator HTTP {r.status_code}: {r.text[:200]}")
        try:
            result = str((r.json() or {}).get("result") or "").strip()
        except ValueError:
            result = r.text.strip()
        return ValidationOutcome(result == VALIDATED, result or "empty validator response")


class LocalValidator:
    def validate(self, pdf_bytes: bytes) -> ValidationOutcome:
        return check_structure(pdf_bytes)


def get_validator():
    if config.VALIDATOR_URL:
        return RemoteValidator(config.VALIDATOR_URL, timeout=config.VALIDATOR_TIMEOUT)
    return LocalValidator()
