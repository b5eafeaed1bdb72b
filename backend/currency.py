"""
Currency Module
===============
Static exchange rates and salary-string parsing.

Rates are stored as local currency per 1 USD (exchange_rates table) and
loaded once at import time. There is no live rate fetching.

Main entry points:
    parse_salary_string(text) -> ParsedSalary | None
    convert_to_usd(amount, currency) -> float
"""

import re
from dataclasses import asdict, dataclass
from typing import Optional

from config import (
    DAYS_PER_YEAR,
    HOURS_PER_YEAR,
    MONTHS_PER_YEAR,
    REFERENCE_CURRENCY,
    WEEKS_PER_YEAR,
    get_db,
    get_logger,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedSalary:
    """
    A salary figure pulled out of free text.

    min/max are annualized amounts in `currency`; `period` records how the
    figure was quoted ("year", "month", "week", "day" or "hour").
    """

    min: float
    max: float
    currency: str
    period: str = "year"

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def to_dict(self) -> dict:
        return asdict(self)


# ─── Database Loading ─────────────────────────────────────────────────────────


def _load_exchange_rates() -> dict[str, float]:
    """Load exchange rates (local currency per 1 USD) from DB."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT currency, rate_per_usd FROM exchange_rates")
        return {row["currency"]: row["rate_per_usd"] for row in cursor.fetchall()}


# ─── Module-level caches (loaded once at import time) ─────────────────────────

EXCHANGE_RATES: dict[str, float] = _load_exchange_rates()


# ═══════════════════════════════════════════════════════════════════════════════
# SALARY PARSING
# ═══════════════════════════════════════════════════════════════════════════════

# Prefixed dollar variants must be tried before the bare symbols
_SYMBOL_CURRENCIES = [
    ("HK$", "HKD"),
    ("NZ$", "NZD"),
    ("NT$", "TWD"),
    ("MX$", "MXN"),
    ("CA$", "CAD"),
    ("AU$", "AUD"),
    ("SG$", "SGD"),
    ("C$", "CAD"),
    ("A$", "AUD"),
    ("S$", "SGD"),
    ("R$", "BRL"),
    ("£", "GBP"),
    ("€", "EUR"),
    ("₹", "INR"),
    ("₩", "KRW"),
    ("¥", "JPY"),
    ("₪", "ILS"),
    ("₺", "TRY"),
    ("₱", "PHP"),
    ("₦", "NGN"),
    ("$", "USD"),
]

# "80", "80,000", "80.000", "85.5", "1,250,000.50" followed by an optional k/M
_NUMBER_RE = re.compile(
    r"(?<![\w.,])(\d+(?:[.,]\d+)*)(?:\s?([kKmM])(?![a-zA-Z]))?(?!\s?%)(?![\d.,]*\d)"
)

# Retirement plans ("401k", "401(k)", "403b") are benefits, not amounts
_RETIREMENT_PLAN_RE = re.compile(r"(?<![$£€¥₹])\b40[13]\s*\(?[kKbB]\)?(?![a-zA-Z])")

# A number followed by one of these counts something other than money
_QUANTITY_UNIT_RE = re.compile(
    r"\s*\+?\s*(?:days?|hours?|hrs?|weeks?|wks?|months?|years?|yrs?|"
    r"employees|people|staff|holidays?|weekends?|sick)\b",
    re.I,
)

# What may sit between the two bounds of a range: "-", " to ", " - $", " EUR - "
_RANGE_GAP_RE = re.compile(
    r"^\s*(?:[A-Z]{3}\s*)?(?:[-–—]|(?i:to|and))\s*(?:[A-Z]{2,3}\s?\$?|[^\w\s])?\s*$"
)

# Annual wording anywhere in the text: "per annum", "annual salary", "p.a."
_ANNUAL_RE = re.compile(
    r"\bper\s+(?:year|annum)\b|/\s*(?:yr|year|annum)\b|"
    r"\bannual\s+(?:salary|pay|base|compensation)\b|\bannually\b|\byearly\b|"
    r"\bp\.\s?a\b\.?|\bp/a\b",
    re.I,
)

# Period wording right after an amount: "$50/hour", "€3,000 per month", "£50k pa"
_PERIOD_SUFFIXES = [
    ("year", re.compile(r"\s*(?:[A-Z]{3}\s*)?(?:(?:per|a)\s+|/\s*)(?:yr|year|annum)\b|\s*(?:annually|yearly|p\.\s?a\b\.?|pa\b)", re.I), 1),
    ("hour", re.compile(r"\s*(?:[A-Z]{3}\s*)?(?:(?:per|an|a)\s+|/\s*)h(?:ou)?rs?\b|\s*hourly\b|\s*p/?h\b", re.I), HOURS_PER_YEAR),
    ("day", re.compile(r"\s*(?:[A-Z]{3}\s*)?(?:(?:per|a)\s+|/\s*)day\b|\s*daily\b|\s*day\s+rate\b", re.I), DAYS_PER_YEAR),
    ("week", re.compile(r"\s*(?:[A-Z]{3}\s*)?(?:(?:per|a)\s+|/\s*)(?:wk|week)\b|\s*weekly\b|\s*p/?w\b", re.I), WEEKS_PER_YEAR),
    ("month", re.compile(r"\s*(?:[A-Z]{3}\s*)?(?:(?:per|a)\s+|/\s*)mo(?:nth)?\b|\s*monthly\b|\s*pcm\b", re.I), MONTHS_PER_YEAR),
]

# Period label just before the first amount: "Hourly rate: $50", "Day rate £500"
_PERIOD_PREFIX_RE = re.compile(r"\b(hourly|day\s+rate|daily|weekly|monthly)\b[^\d]{0,15}$", re.I)
_PREFIX_PERIODS = {
    "hourly": ("hour", HOURS_PER_YEAR),
    "daily": ("day", DAYS_PER_YEAR),
    "day rate": ("day", DAYS_PER_YEAR),
    "weekly": ("week", WEEKS_PER_YEAR),
    "monthly": ("month", MONTHS_PER_YEAR),
}


def _detect_currency(text: str) -> str:
    """Currency code written in the text, else symbol, else USD."""
    codes = "|".join(sorted(EXCHANGE_RATES, key=len, reverse=True))
    code_match = re.search(rf"(?<![A-Za-z])({codes})(?![A-Za-z])", text)
    if code_match:
        return code_match.group(1)

    for symbol, code in _SYMBOL_CURRENCIES:
        if symbol in text:
            return code
    return REFERENCE_CURRENCY


def _has_currency_marker(text: str) -> bool:
    """True when `text` ends in a currency symbol or code ("$", "EUR ")."""
    tail = text.rstrip()
    if any(tail.endswith(symbol) for symbol, _ in _SYMBOL_CURRENCIES):
        return True
    return tail[-3:] in EXCHANGE_RATES and not tail[-4:-3].isalpha()


def _parse_number(digits: str) -> Optional[float]:
    """
    Interpret thousands separators and decimal marks.

    "80,000" and "80.000" are groupings; "85.5" and "1,5" are decimals;
    with both marks present the last one is the decimal mark.
    """
    if "," in digits and "." in digits:
        decimal_mark = "," if digits.rfind(",") > digits.rfind(".") else "."
        grouping = "." if decimal_mark == "," else ","
        digits = digits.replace(grouping, "").replace(decimal_mark, ".")
    elif "," in digits or "." in digits:
        mark = "," if "," in digits else "."
        groups = digits.split(mark)
        if len(groups) > 2 or all(len(group) == 3 for group in groups[1:]):
            digits = "".join(groups)
        else:
            digits = digits.replace(mark, ".")
    try:
        return float(digits)
    except ValueError:
        return None


def _money_amounts(text: str) -> list:
    """
    Number matches that can be money: quantities such as "25 days" or
    "5+ years" are skipped unless a currency marker precedes them.
    """
    matches = []
    for match in _NUMBER_RE.finditer(text):
        if _QUANTITY_UNIT_RE.match(text, match.end()) and not _has_currency_marker(text[: match.start()]):
            continue
        if _parse_number(match.group(1)) is None:
            continue
        matches.append(match)
    return matches


def _detect_period(text: str, amounts: list) -> tuple[str, int]:
    """
    Quoting period of the salary amounts.

    A period phrase directly after an amount decides. Failing that, annual
    wording anywhere means "year", then a label before the first amount
    ("Hourly rate: $50") is used. Hours or days mentioned elsewhere in the
    text ("40 hours per week") never rescale the salary.
    """
    for match in amounts:
        for period, pattern, multiplier in _PERIOD_SUFFIXES:
            if pattern.match(text, match.end()):
                return period, multiplier

    if _ANNUAL_RE.search(text):
        return "year", 1

    label = _PERIOD_PREFIX_RE.search(text[: amounts[0].start()])
    if label:
        return _PREFIX_PERIODS[" ".join(label.group(1).lower().split())]
    return "year", 1


def parse_salary_string(text: str) -> Optional[ParsedSalary]:
    """
    Parse a free-text salary into an annualized range.

    Examples:
        "$80,000 - $120,000 per year"  -> 80000..120000 USD
        "€45k-55k"                      -> 45000..55000 EUR
        "$50/hour"                      -> 104000..104000 USD (x2080)
        "$100k + 25 days holiday"       -> 100000..100000 USD
        "Competitive", "401k match", "" -> None

    The first money amount is the lower bound; a second one counts only when
    a range separator joins it to the first. Percentages ("10% bonus") and
    retirement plans are skipped.
    """
    if not text:
        return None
    text = _RETIREMENT_PLAN_RE.sub(" ", text)
    if not re.search(r"\d", text):
        return None

    matches = _money_amounts(text)
    if not matches:
        return None

    bounds = matches[:1]
    if len(matches) > 1 and _RANGE_GAP_RE.match(text[matches[0].end() : matches[1].start()]):
        bounds.append(matches[1])

    amounts = [(_parse_number(m.group(1)), (m.group(2) or "").lower()) for m in bounds]

    # "80-120k": a bare lower bound borrows the upper bound's suffix
    if len(amounts) == 2 and amounts[1][1] and not amounts[0][1] and amounts[0][0] < 1000:
        amounts[0] = (amounts[0][0], amounts[1][1])

    scale = {"": 1, "k": 1_000, "m": 1_000_000}
    values = [value * scale[suffix] for value, suffix in amounts]

    period, multiplier = _detect_period(text, bounds)
    values = [value * multiplier for value in values]

    if min(values) <= 0:
        return None

    return ParsedSalary(
        min=min(values),
        max=max(values),
        currency=_detect_currency(text),
        period=period,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# CONVERSION
# ═══════════════════════════════════════════════════════════════════════════════


class CurrencyConverter:
    """Converts amounts between currencies through USD."""

    def __init__(self, rates: Optional[dict[str, float]] = None):
        self.rates = dict(EXCHANGE_RATES if rates is None else rates)

    def supported_currencies(self) -> list[str]:
        return sorted(self.rates)

    def _rate(self, currency: str) -> float:
        code = (currency or "").upper()
        if code not in self.rates:
            raise ValueError(f"Unsupported currency: {currency!r}")
        return self.rates[code]

    def convert_to_usd(self, amount: float, currency: str) -> float:
        """Convert `amount` in `currency` to USD."""
        return amount / self._rate(currency)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert between any two supported currencies."""
        return self.convert_to_usd(amount, from_currency) * self._rate(to_currency)

    def parse_salary_string(self, text: str) -> Optional[ParsedSalary]:
        return parse_salary_string(text)


_default_converter = CurrencyConverter()


def convert_to_usd(amount: float, currency: str) -> float:
    """Convert `amount` in `currency` to USD using the stored rates."""
    return _default_converter.convert_to_usd(amount, currency)
