"""
Reference Data Module
=====================
Static geography tables used by the location resolver:

  - countries with their canonical name, continent, default city and
    major cities (cities with independently tracked cost data)
  - alternative country names ("usa", "holland", "uae")
  - states / provinces ("Texas", "TX", "Ontario")
  - regional keywords ("europe", "apac", "nordics") with a hub city
  - timezone abbreviations and company headquarters

Data source: reference tables in the Salary Compass database.
Loaded once at module import time and cached; nothing here writes.

Matching is case- and accent-insensitive: "Sao Paulo" finds "São Paulo".
"""

import re
import unicodedata
from dataclasses import asdict, dataclass
from typing import Optional

from config import get_db, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CountryProfile:
    """A country as known to the reference dataset."""

    key: str
    name: str  # Canonical display name, e.g. "United States"
    region: str  # Continent, e.g. "North America"
    default_city: str
    major_cities: tuple[str, ...]
    currency: str
    tax_table: Optional[str]  # Bracket table name, None -> default table

    def to_dict(self) -> dict:
        data = asdict(self)
        data["major_cities"] = list(self.major_cities)
        return data


@dataclass(frozen=True)
class RegionDefault:
    """Hub location for a regional keyword such as "europe" or "apac"."""

    keyword: str
    country: CountryProfile
    city: str
    level: str  # "country", "region" or "continent"
    members: frozenset

    def includes(self, country: CountryProfile) -> bool:
        return country.key in self.members


@dataclass(frozen=True)
class Subdivision:
    name: str
    country: CountryProfile


@dataclass(frozen=True)
class Headquarters:
    city: str
    state: Optional[str]
    country: CountryProfile


# ─── Text Normalization ──────────────────────────────────────────────────────


def fold(text: str) -> str:
    """Lower-case, strip accents and collapse whitespace."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(text))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.lower().split())


def contains_phrase(text: str, phrase: str) -> bool:
    """True if `phrase` appears in `text` as whole words (both pre-folded)."""
    if not phrase:
        return False
    return re.search(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)", text) is not None


# ─── Database Loading ────────────────────────────────────────────────────────


def _load_countries() -> dict[str, CountryProfile]:
    """Load countries with their ordered major-city lists."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT country_key, city FROM major_cities ORDER BY country_key, city_order"
        )
        cities: dict[str, list[str]] = {}
        for row in cursor.fetchall():
            cities.setdefault(row["country_key"], []).append(row["city"])

        cursor.execute(
            "SELECT key, name, region, default_city, currency, tax_table "
            "FROM countries ORDER BY rowid"
        )
        return {
            row["key"]: CountryProfile(
                key=row["key"],
                name=row["name"],
                region=row["region"],
                default_city=row["default_city"],
                major_cities=tuple(cities.get(row["key"], ())),
                currency=row["currency"],
                tax_table=row["tax_table"],
            )
            for row in cursor.fetchall()
        }


def _load_key_map(table: str, key_column: str) -> dict[str, str]:
    """Load a `<key_column> -> country_key` mapping table."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {key_column}, country_key FROM {table}")
        return {row[0]: row[1] for row in cursor.fetchall()}


def _load_subdivisions() -> dict[str, Subdivision]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT alias, name, country_key FROM subdivisions")
        return {
            row["alias"]: Subdivision(row["name"], COUNTRIES[row["country_key"]])
            for row in cursor.fetchall()
        }


def _load_region_defaults() -> dict[str, RegionDefault]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT keyword, country_key FROM region_members")
        members: dict[str, set] = {}
        for row in cursor.fetchall():
            members.setdefault(row["keyword"], set()).add(row["country_key"])

        cursor.execute("SELECT keyword, country_key, city, level FROM region_defaults")
        return {
            row["keyword"]: RegionDefault(
                keyword=row["keyword"],
                country=COUNTRIES[row["country_key"]],
                city=row["city"],
                level=row["level"],
                members=frozenset(members.get(row["keyword"], ())),
            )
            for row in cursor.fetchall()
        }


def _load_timezones() -> dict[str, tuple[str, CountryProfile]]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT abbreviation, city, country_key FROM timezone_hints")
        return {
            row["abbreviation"]: (row["city"], COUNTRIES[row["country_key"]])
            for row in cursor.fetchall()
        }


def _load_headquarters() -> dict[str, Headquarters]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT company, city, state, country_key FROM company_headquarters")
        return {
            row["company"]: Headquarters(
                row["city"], row["state"], COUNTRIES[row["country_key"]]
            )
            for row in cursor.fetchall()
        }


# ─── Module-level caches (loaded once at import time) ────────────────────────

COUNTRIES: dict[str, CountryProfile] = _load_countries()
COUNTRY_ALIASES: dict[str, str] = _load_key_map("country_aliases", "alias")
SUBDIVISIONS: dict[str, Subdivision] = _load_subdivisions()
REGION_DEFAULTS: dict[str, RegionDefault] = _load_region_defaults()
TIMEZONES: dict[str, tuple[str, CountryProfile]] = _load_timezones()
HEADQUARTERS: dict[str, Headquarters] = _load_headquarters()

# Folded major city -> countries it belongs to, in table order
_CITY_INDEX: dict[str, list[CountryProfile]] = {}
for _country in COUNTRIES.values():
    for _city in _country.major_cities:
        _CITY_INDEX.setdefault(fold(_city), []).append(_country)

# Every lookup name (canonical + aliases), longest first for text scanning
_COUNTRY_NAMES: list[tuple[str, CountryProfile]] = sorted(
    [(key, c) for key, c in COUNTRIES.items()]
    + [(alias, COUNTRIES[key]) for alias, key in COUNTRY_ALIASES.items()],
    key=lambda item: -len(item[0]),
)

logger.debug(
    "Reference data loaded: %d countries, %d aliases, %d regions",
    len(COUNTRIES),
    len(COUNTRY_ALIASES),
    len(REGION_DEFAULTS),
)


# ─── Countries ───────────────────────────────────────────────────────────────


def find_country(name: str, partial: bool = True) -> Optional[CountryProfile]:
    """
    Match a country name to the reference dataset.

    Order: exact name, then alias, then (when `partial`) a whole-word match
    of a known name inside the text ("United States of America") or a
    prefix of a multi-word name ("Bosnia").
    """
    normalized = fold(name).strip(" .")
    if not normalized:
        return None

    if normalized in COUNTRIES:
        return COUNTRIES[normalized]
    dotted = fold(name).strip()
    for candidate in (normalized, dotted):
        if candidate in COUNTRY_ALIASES:
            return COUNTRIES[COUNTRY_ALIASES[candidate]]

    if not partial:
        return None

    for key, country in _COUNTRY_NAMES:
        # Short aliases ("us", "uk") only match exactly
        if len(key) > 3 and contains_phrase(normalized, key):
            return country
    if len(normalized) >= 4:
        for key, country in COUNTRIES.items():
            if key.startswith(normalized + " "):
                return country
    return None


def find_countries_in_text(text: str) -> list[CountryProfile]:
    """
    Countries mentioned anywhere in free text, in order of appearance.

    Short abbreviations ("US", "UK") count only when written in capitals so
    that "join us" does not read as the United States.
    """
    folded = fold(text)
    raw_text = text or ""
    hits: dict[str, tuple[int, CountryProfile]] = {}

    for key, country in _COUNTRY_NAMES:
        if len(key.strip(".")) <= 3:
            pattern = r"(?<!\w)" + re.escape(key.upper()) + r"(?!\w)"
            match = re.search(pattern, raw_text)
        else:
            match = re.search(r"(?<!\w)" + re.escape(key) + r"(?!\w)", folded)
        if match and (country.key not in hits or match.start() < hits[country.key][0]):
            hits[country.key] = (match.start(), country)

    return [country for _, country in sorted(hits.values(), key=lambda hit: hit[0])]


# ─── Cities ──────────────────────────────────────────────────────────────────


def is_major_city(city: str, country: CountryProfile, strict: bool = False) -> bool:
    """
    Whether `city` names one of the country's major cities.

    strict: the folded names must be equal.
    otherwise: a major city may also appear as whole words inside `city`
    ("Greater London", "New York City").
    """
    normalized = fold(city)
    if not normalized or country is None:
        return False
    for major in country.major_cities:
        folded_major = fold(major)
        if normalized == folded_major:
            return True
        if not strict and contains_phrase(normalized, folded_major):
            return True
    return False


def find_major_city_countries(city: str) -> list[CountryProfile]:
    """All countries that list `city` (exact, folded) as a major city."""
    return list(_CITY_INDEX.get(fold(city), ()))


def canonical_city_name(city: str, country: CountryProfile) -> str:
    """The dataset spelling of a major city ("sao paulo" -> "São Paulo")."""
    normalized = fold(city)
    for major in country.major_cities:
        if fold(major) == normalized:
            return major
    return city


def find_major_city_in_text(text: str) -> Optional[tuple[str, CountryProfile]]:
    """
    Longest major city mentioned as whole words in free text
    ("London office" -> London). Ties go to the earlier country.
    """
    folded = fold(text)
    if not folded:
        return None
    best = None
    for folded_city, countries in _CITY_INDEX.items():
        if contains_phrase(folded, folded_city):
            if best is None or len(folded_city) > len(best[0]):
                best = (folded_city, countries[0])
    if best is None:
        return None
    country = best[1]
    return canonical_city_name(best[0], country), country


# ─── Regions, states, timezones, companies ───────────────────────────────────


def find_region_default(region: str) -> Optional[RegionDefault]:
    """Exact (folded) regional keyword lookup."""
    return REGION_DEFAULTS.get(fold(region))


def find_subdivision(name: str) -> Optional[Subdivision]:
    """State / province by full name or abbreviation."""
    return SUBDIVISIONS.get(fold(name).strip(" ."))


def timezone_location(abbreviation: str) -> Optional[tuple[str, CountryProfile]]:
    return TIMEZONES.get(fold(abbreviation))


def company_headquarters(company: str) -> Optional[Headquarters]:
    """Case-insensitive, trimmed company name lookup."""
    return HEADQUARTERS.get(fold(company))
