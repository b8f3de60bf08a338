"""Bring the current-role salary band into the target role's currency."""

from __future__ import annotations

import logging

from gapzero.models.plan import SalaryAnalysis
from gapzero.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

# Approximate value of one unit in EUR
TO_EUR: dict[str, float] = {
    "EUR": 1.0,
    "USD": 0.92,
    "GBP": 1.17,
    "CHF": 1.05,
    "RON": 0.20,
    "PLN": 0.23,
    "CZK": 0.04,
    "HUF": 0.0025,
    "SEK": 0.088,
    "DKK": 0.134,
    "NOK": 0.087,
    "CAD": 0.68,
    "AUD": 0.60,
    "INR": 0.011,
    "SGD": 0.69,
    "JPY": 0.0062,
    "BRL": 0.17,
}

GROSS_ANNUAL = "(gross annual)"


def conversion_rate(source: str, target: str) -> float:
    """Multiplier from *source* to *target*; unknown codes count as 1."""
    return TO_EUR.get(source, 1.0) / TO_EUR.get(target, 1.0)


def normalize_salary_currencies(salary: SalaryAnalysis) -> bool:
    """Convert the current-role band in place. Returns True if anything changed."""
    current = salary.current_role_market
    target = salary.target_role_market
    if current.currency == target.currency:
        return False

    rate = conversion_rate(current.currency, target.currency)
    logger.info("Converting current-role salary %s -> %s at %.4f", current.currency, target.currency, rate)
    current.low = round_half_up(current.low * rate)
    current.mid = round_half_up(current.mid * rate)
    current.high = round_half_up(current.high * rate)
    current.currency = target.currency
    current.region = current.region.replace(
        GROSS_ANNUAL, f"(converted to {target.currency}, gross annual)", 1
    )
    return True
