# pppk_contracts/services/pdf_merger.py
from __future__ import annotations

import logging
from io import BytesIO

from PyPDF2 import PdfReader, PdfWriter

from pppk_contracts.errors import CopyError, LoadError

logger = logging.getLogger("pppk.merger")


def _load(pdf_bytes: bytes, document: str) -> PdfReader:
    if not pdf_bytes:
        raise LoadError(document, "empty input")
    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        # page tree is parsed lazily; force it so broken files fail here
        len(reader.pages)
    except Exception as e:
        raise LoadError(document, f"not a readable PDF ({e})") from e
    return reader


def page_count(pdf_bytes: bytes) -> int:
    return len(_load(pdf_bytes, "input").pages)


def merge(draft_bytes: bytes, donor_bytes: bytes) -> bytes:
    """Replace the draft's last page (signature placeholder) with donor page 0.

    A draft of N pages gives a result of N pages.
    """
    draft = _load(draft_bytes, "draft")
    donor = _load(donor_bytes, "donor")

    if len(donor.pages) == 0:
        raise CopyError("donor", "has no pages to copy")
    if len(draft.pages) == 0:
        raise LoadError("draft", "has no pages, expected a signature placeholder page")

    writer = PdfWriter()
    for i in range(len(draft.pages) - 1):
        writer.add_page(draft.pages[i])
    writer.add_page(donor.pages[0])

    out = BytesIO()
    writer.write(out)
    logger.info(
        "merged draft (%d pages) with donor (%d pages)",
        len(draft.pages), len(donor.pages),
    )
    return out.getvalue()
