# pppk_contracts/errors.py
from __future__ import annotations

from typing import Optional


class PPPKError(RuntimeError):
    pass


class InputError(PPPKError):
    """Record rejected before layout starts (e.g. blank NI PPPK)."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class UnsupportedDurationError(PPPKError):
    pass


class TemplateNotFoundError(PPPKError):
    pass


class RosterImportError(PPPKError):
    def __init__(self, message: str, row: Optional[int] = None):
        self.row = row
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)


class MergeError(PPPKError):
    """Draft/donor merge failure. `document` is "draft" or "donor"."""

    def __init__(self, document: str, reason: str):
        self.document = document
        self.reason = reason
        super().__init__(f"{document} document: {reason}")


class LoadError(MergeError):
    pass


class CopyError(MergeError):
    pass


class EmployeeNotFoundError(PPPKError):
    pass
