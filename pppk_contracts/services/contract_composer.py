# pppk_contracts/services/contract_composer.py
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from pppk_contracts.errors import InputError
from pppk_contracts.schemas import ContractDates, ContractTemplate, Employee
from pppk_contracts.services.placeholders import resolve
from pppk_contracts.services.text_layout import (
    F4_SIZE,
    LayoutState,
    draw_centered,
    draw_rule,
    draw_text,
    draw_text_block,
    ensure_space,
    finish,
    new_layout_state,
    new_page,
)

logger = logging.getLogger("pppk.composer")

HEADER_SIZE = 14
BODY_SIZE = 12
LINE_HEIGHT = 18
BLOCK_GAP = 20          # after opening / section body / closing
SECTION_MIN_SPACE = 60  # keep a clause title with the start of its body
TITLE_GAP = 18
SUBTITLE_GAP = 24
HEADER_BODY_OFFSET = 60

SIGNATURE_TITLE = "Halaman Tanda Tangan"
SIGNATURE_PLACEHOLDER = "[Placeholder - Halaman ini akan diganti dengan TTD basah]"


def ensure_generatable(employee: Employee) -> None:
    if not (employee.ni_pppk or "").strip():
        raise InputError("ni_pppk", "required and must not be empty")


def _draw_header(state: LayoutState, template: ContractTemplate, employee: Employee, dates: ContractDates) -> None:
    top = state.top
    draw_centered(state, resolve(template.header_title, employee, dates), state.bold_font, HEADER_SIZE)
    state.y -= 20
    draw_centered(state, f"Nomor: {employee.contract_number}", state.regular_font, BODY_SIZE)
    draw_rule(state, state.y - 10)
    state.y = top - HEADER_BODY_OFFSET


def _draw_block(state: LayoutState, text: Optional[str], employee: Employee, dates: ContractDates) -> None:
    draw_text_block(state, resolve(text, employee, dates), state.regular_font, BODY_SIZE, LINE_HEIGHT)
    state.y -= BLOCK_GAP


def _draw_signature_placeholder(state: LayoutState) -> None:
    new_page(state)
    draw_text(state, state.margin, SIGNATURE_TITLE, state.bold_font, 16)
    state.y = state.page_height / 2
    draw_text(state, state.margin, SIGNATURE_PLACEHOLDER, state.regular_font, BODY_SIZE)


def render_contract(
    template: ContractTemplate,
    employee: Employee,
    start_date: date,
    end_date: date,
) -> LayoutState:
    """Render the draft contract and return the finished layout state.

    Order is fixed: header, opening text, sections in template order, closing
    text, then a single signature placeholder page. `state.pdf` holds the bytes.
    """
    ensure_generatable(employee)
    dates = ContractDates(start_date=start_date, end_date=end_date)

    state = new_layout_state(F4_SIZE, title=resolve(template.header_title, employee, dates))
    _draw_header(state, template, employee, dates)

    if template.opening_text:
        _draw_block(state, template.opening_text, employee, dates)

    for section in template.sections:
        ensure_space(state, SECTION_MIN_SPACE)
        draw_centered(state, resolve(section.title, employee, dates), state.bold_font, BODY_SIZE)
        state.y -= TITLE_GAP
        draw_centered(state, resolve(section.subtitle, employee, dates), state.bold_font, BODY_SIZE)
        state.y -= SUBTITLE_GAP
        _draw_block(state, section.content, employee, dates)

    if template.closing_text:
        _draw_block(state, template.closing_text, employee, dates)

    _draw_signature_placeholder(state)
    finish(state)
    logger.info(
        "contract %s rendered with template %s: %d pages",
        employee.ni_pppk, template.id, state.page_number,
    )
    return state


def compose(template: ContractTemplate, employee: Employee, start_date: date, end_date: date) -> bytes:
    return render_contract(template, employee, start_date, end_date).pdf
