#!/usr/bin/env python3
import sys
import re
import argparse
from pathlib import Path
import yaml

from pppk_contracts.schemas import ContractType
from pppk_contracts.services.placeholders import PLACEHOLDER_TOKENS

ROOT = Path(__file__).resolve().parents[1]
TEMPLATES = ROOT / "catalog" / "templates"

TOKEN_RE = re.compile(r"\{\{[^{}]*\}\}")
TEXT_KEYS = ("header_title", "opening_text", "closing_text")
SECTION_KEYS = ("title", "subtitle", "content")


def load_yaml(p: Path):
    try:
        return yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as e:
        print(f"[ERR] invalid YAML: {p}: {e}")
        return None


def unknown_tokens(text) -> list:
    if not isinstance(text, str):
        return []
    known = set(PLACEHOLDER_TOKENS)
    return [t for t in TOKEN_RE.findall(text) if t not in known]


def check_template(p: Path, data):
    """Returns (errors, warnings) for one template file."""
    errors, warnings = [], []
    if not isinstance(data, dict):
        return [f"{p}: top level must be a mapping"], warnings

    for k in ("name", "header_title", "sections"):
        if not data.get(k):
            errors.append(f"{p}: missing '{k}'")
    ct = data.get("contract_type")
    if ct is not None and ct not in {c.value for c in ContractType}:
        errors.append(f"{p}: contract_type '{ct}' must be PENUH_WAKTU or PARUH_WAKTU")

    sections = data.get("sections") or []
    if not isinstance(sections, list):
        errors.append(f"{p}: 'sections' must be a list")
        sections = []
    for i, s in enumerate(sections, start=1):
        if not isinstance(s, dict):
            errors.append(f"{p}: section #{i} must be a mapping")
            continue
        for k in SECTION_KEYS:
            v = s.get(k)
            if not isinstance(v, str) or not v.strip():
                errors.append(f"{p}: section #{i} missing '{k}'")
            for t in unknown_tokens(v):
                warnings.append(f"{p}: section #{i} {k}: unknown placeholder {t}")

    for k in TEXT_KEYS:
        for t in unknown_tokens(data.get(k)):
            warnings.append(f"{p}: {k}: unknown placeholder {t}")
    return errors, warnings


def main():
    ap = argparse.ArgumentParser(description="Check contract template YAML files")
    ap.add_argument("paths", nargs="*", type=Path, help="files or folders (default: catalog/templates)")
    ap.add_argument("--strict", action="store_true", help="treat unknown placeholders as errors")
    args = ap.parse_args()

    files = []
    for root in (args.paths or [TEMPLATES]):
        if root.is_dir():
            files.extend(sorted(root.glob("*.yml")) + sorted(root.glob("*.yaml")))
        else:
            files.append(root)

    ok = True
    for p in files:
        data = load_yaml(p)
        if data is None:
            ok = False
            continue
        errors, warnings = check_template(p, data)
        for e in errors:
            print(f"[ERR] {e}")
        for w in warnings:
            print(f"[{'ERR' if args.strict else 'WARN'}] {w}")
        if errors or (args.strict and warnings):
            ok = False

    print(f"{len(files)} template(s) checked")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
