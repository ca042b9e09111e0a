# pppk_contracts/config.py
import os
from pathlib import Path
from typing import Optional

APP_DIR = Path(__file__).resolve().parent          # .../pppk_contracts
ROOT = APP_DIR.parent                              # repo root


def _env(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None or str(v).strip() == "":
        return None
    return v


def _env_float(name: str, default: float) -> float:
    v = _env(name)
    if v is None:
        return default
    try:
        return float(v.replace(",", "."))
    except ValueError:
        return default


# --- paths ---
TEMPLATES_DIR = Path(_env("PPPK_TEMPLATES_DIR") or ROOT / "catalog" / "templates")
ARCHIVE_DIR = Path(_env("PPPK_ARCHIVE_DIR") or ROOT / "var")
EMPLOYEES_SEED = Path(_env("PPPK_EMPLOYEES_SEED") or ROOT / "catalog" / "employees.yml")

# --- external validator (optional) ---
VALIDATOR_URL = _env("PPPK_VALIDATOR_URL")
VALIDATOR_TIMEOUT = _env_float("PPPK_VALIDATOR_TIMEOUT", 30.0)

LOG_LEVEL = (_env("PPPK_LOG_LEVEL") or "INFO").upper()
