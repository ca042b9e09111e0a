#!/usr/bin/env python3
"""Render a draft contract from the command line.

    python scripts/render_contract.py catalog/templates/pppk-penuh-waktu.yml \
        employee.yml --start 2024-01-01 -o draft.pdf [--signature 1990_TTD.pdf]

The employee file is YAML (or JSON) holding one record.
"""
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

import yaml

from pppk_contracts.errors import PPPKError
from pppk_contracts.schemas import Employee
from pppk_contracts.services.contract_calculator import compute_contract_dates
from pppk_contracts.services.contract_composer import render_contract
from pppk_contracts.services.pdf_merger import merge
from pppk_contracts.services.record_store import load_template_file


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("template", type=Path, help="template YAML")
    ap.add_argument("employee", type=Path, help="employee record (YAML/JSON)")
    ap.add_argument("--start", required=True, type=date.fromisoformat, help="contract start date (YYYY-MM-DD)")
    ap.add_argument("-o", "--output", type=Path, default=Path("draft.pdf"))
    ap.add_argument("--signature", type=Path, help="signed page PDF to merge in place of the placeholder")
    args = ap.parse_args()

    tpl = load_template_file(args.template)
    if tpl is None:
        print(f"[ERR] template unusable: {args.template}", file=sys.stderr)
        return 1
    try:
        employee = Employee.model_validate(yaml.safe_load(args.employee.read_text(encoding="utf-8")) or {})
    except Exception as e:
        print(f"[ERR] employee record invalid: {e}", file=sys.stderr)
        return 1

    dates = compute_contract_dates(args.start, employee.contract_type)
    try:
        state = render_contract(tpl, employee, dates.start_date, dates.end_date)
        pdf = state.pdf
        if args.signature:
            pdf = merge(pdf, args.signature.read_bytes())
    except PPPKError as e:
        print(f"[ERR] {e}", file=sys.stderr)
        return 1

    args.output.write_bytes(pdf)
    print(f"{args.output}: {state.page_number} page(s), contract {dates.start_date} -> {dates.end_date}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
