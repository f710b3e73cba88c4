"""Environment-driven settings for the mortgage calculator."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", key, raw, default)
        return default


def _env_int(key: str, default: int) -> int:
    return int(_env_float(key, default))


# ── Scenario storage ─────────────────────────────────────────────────
DATA_DIR = Path(os.getenv("MORTGAGE_DATA_DIR") or "data/scenarios")
SCENARIO_STORE_KEY = os.getenv("MORTGAGE_SCENARIO_KEY") or "savedMortgages"

# ── Rate comparison ──────────────────────────────────────────────────
RATE_SWEEP_SPAN = _env_float("MORTGAGE_RATE_SWEEP_SPAN", 2.0)    # +/- percentage points
RATE_SWEEP_STEP = _env_float("MORTGAGE_RATE_SWEEP_STEP", 0.125)
RATE_DECIMALS = 3

# ── Refinance ────────────────────────────────────────────────────────
REFI_WORTH_IT_MONTHS = _env_int("MORTGAGE_REFI_WORTH_IT_MONTHS", 24)
REFI_HORIZONS_MONTHS = (60, 120)

# ── PMI ──────────────────────────────────────────────────────────────
PMI_DOWN_PAYMENT_THRESHOLD = 0.20

# ── Logging ──────────────────────────────────────────────────────────
LOG_LEVEL = (os.getenv("MORTGAGE_LOG_LEVEL") or "INFO").upper()

# Starting form values
DEFAULT_LOAN_PARAMETERS = {
    "home_value": 400_000.0,
    "down_payment": 80_000.0,
    "interest_rate": 6.48,
    "loan_term_years": 30,
    "property_tax_yearly": 3_000.0,
    "pmi_rate_pct": 0.5,
    "home_insurance_yearly": 1_500.0,
    "monthly_hoa": 0.0,
}
