"""
Tax Data Module
===============
Progressive tax brackets (income tax plus employee payroll contributions)
for the countries in the reference dataset. Salaries are in USD; brackets are
converted from local currency using the stored exchange rates.

Data source: exchange_rates and tax_brackets tables in the Salary Compass
database. Loaded once at module import time and cached.

Main entry point:
    estimate_tax_rate(income_usd, country) -> effective rate in percent (0-60)

Country resolution:
    1. bracket table with that exact name ("United Kingdom")
    2. the reference country's tax table (aliases: "UK", "england")
    3. the default table (United States)

Marginal rates within a table never decrease, so the effective rate is
non-decreasing in income.
"""

import math

from config import DEFAULT_TAX_COUNTRY, MAX_TAX_RATE, get_db, get_logger
from currency import EXCHANGE_RATES
from reference_data import find_country

logger = get_logger(__name__)

INFINITE_THRESHOLD = 999999999999


# ─── Database Loading ─────────────────────────────────────────────────────────


def _load_all_brackets(fx: dict[str, float]) -> dict[str, list[tuple[float, float]]]:
    """
    Load all tax brackets from DB, converting thresholds from local currency to USD.

    Returns dict keyed by country -> list of (threshold_usd, rate) tuples.
    DB stores 999999999999 for infinity; we convert back to float('inf').
    """
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT country, threshold_lc, rate, currency "
            "FROM tax_brackets ORDER BY country, bracket_order"
        )
        brackets: dict[str, list[tuple[float, float]]] = {}
        for country, threshold_lc, rate, currency in cursor.fetchall():
            if threshold_lc >= INFINITE_THRESHOLD:
                threshold_usd = math.inf
            elif currency == "USD":
                threshold_usd = threshold_lc
            else:
                threshold_usd = threshold_lc / fx[currency]
            brackets.setdefault(country, []).append((threshold_usd, rate))
    return brackets


# ─── Module-level caches (loaded once at import time) ─────────────────────────

FX = EXCHANGE_RATES
_ALL_BRACKETS = _load_all_brackets(FX)

if DEFAULT_TAX_COUNTRY not in _ALL_BRACKETS:
    raise RuntimeError(f"Default tax table '{DEFAULT_TAX_COUNTRY}' is missing from the database")


# ─── Helper Functions ─────────────────────────────────────────────────────────


def _apply_brackets(gross_usd: float, brackets: list[tuple[float, float]]) -> float:
    """
    Apply progressive tax brackets.
    brackets: list of (threshold_usd, rate) tuples.
              threshold is the UPPER bound of the bracket (use float('inf') for last).
              The first bracket starts at 0.
    Returns total tax in USD.
    """
    tax = 0.0
    prev_threshold = 0.0
    for threshold, rate in brackets:
        if gross_usd <= prev_threshold:
            break
        taxable = min(gross_usd, threshold) - prev_threshold
        if taxable > 0:
            tax += taxable * rate
        prev_threshold = threshold
    return tax


def tax_table_for(country: str) -> str:
    """Name of the bracket table used for `country`."""
    if country in _ALL_BRACKETS:
        return country
    profile = find_country(country) if country else None
    if profile is not None and profile.tax_table in _ALL_BRACKETS:
        return profile.tax_table
    logger.debug("No tax table for %r, using %s brackets", country, DEFAULT_TAX_COUNTRY)
    return DEFAULT_TAX_COUNTRY


def get_brackets(country: str) -> list[tuple[float, float]]:
    """Brackets (threshold_usd, rate) that apply to `country`."""
    return list(_ALL_BRACKETS[tax_table_for(country)])


# ═══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════════


def estimate_tax_rate(income_usd: float, country: str) -> float:
    """
    Effective tax rate, in percent, on an annual gross income.

    Args:
        income_usd: Annual gross income in USD
        country: Country name or alias; unknown countries use the default table

    Returns:
        Effective rate in [0, MAX_TAX_RATE]. Zero, negative and NaN incomes
        pay nothing; an infinite income pays the top marginal rate.
    """
    brackets = _ALL_BRACKETS[tax_table_for(country)]

    if income_usd is None or math.isnan(income_usd) or income_usd <= 0:
        return 0.0
    if math.isinf(income_usd):
        rate = brackets[-1][1] * 100
    else:
        rate = _apply_brackets(income_usd, brackets) / income_usd * 100

    return min(max(rate, 0.0), MAX_TAX_RATE)


def calculate_annual_tax(income_usd: float, country: str) -> float:
    """Annual tax owed in USD at the effective rate."""
    if income_usd is None or math.isnan(income_usd) or income_usd <= 0:
        return 0.0
    return income_usd * estimate_tax_rate(income_usd, country) / 100


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    test_cases = [
        ("United States", 150_000),
        ("United Kingdom", 80_000),
        ("Germany", 75_000),
        ("Switzerland", 130_000),
        ("Canada", 90_000),
        ("India", 25_000),
        ("Singapore", 80_000),
        ("United Arab Emirates", 80_000),
        ("Atlantis", 80_000),
    ]

    print(f"{'Country':<22} {'Table':<16} {'Gross':>10} {'Eff Rate':>9}")
    print("-" * 60)
    for country, gross in test_cases:
        rate = estimate_tax_rate(gross, country)
        print(f"{country:<22} {tax_table_for(country):<16} ${gross:>9,.0f} {rate:>8.1f}%")
