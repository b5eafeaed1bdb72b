"""
Cost of Living Module
=====================
City cost-of-living profiles indexed against a baseline of 100.

Lookup order for get_city_data(city, country):
  1. the city's own row ("São Paulo" also matches "Sao Paulo")
  2. a tracked city named inside the text ("Greater London" -> London)
  3. the country-average row (stored with an empty city)

A miss on all three returns None; callers treat that as "insufficient data".

Data source: city_costs table in the Salary Compass database, read per call so
concurrent requests share no state.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from config import MONTHS_PER_YEAR, get_db, get_logger
from reference_data import contains_phrase, find_country, fold

logger = get_logger(__name__)


@dataclass(frozen=True)
class CityCostProfile:
    """Cost-of-living data for one city (or a country average when city is '')."""

    city: str
    country: str
    cost_of_living_index: float
    rent_index: Optional[float] = None
    groceries_index: Optional[float] = None
    transport_index: Optional[float] = None
    utilities_index: Optional[float] = None
    avg_monthly_net_salary_usd: Optional[float] = None
    income_tax_rate: Optional[float] = None
    data_source: Optional[str] = None
    sample_size: Optional[int] = None
    last_updated: Optional[str] = None

    @property
    def is_country_average(self) -> bool:
        return self.city == ""

    @property
    def avg_annual_net_salary_usd(self) -> Optional[float]:
        if self.avg_monthly_net_salary_usd is None:
            return None
        return self.avg_monthly_net_salary_usd * MONTHS_PER_YEAR

    def to_dict(self) -> dict:
        data = asdict(self)
        data["avg_annual_net_salary_usd"] = self.avg_annual_net_salary_usd
        data["is_country_average"] = self.is_country_average
        return data


_COLUMNS = (
    "city, city_key, country, cost_of_living_index, rent_index, groceries_index, "
    "transport_index, utilities_index, avg_monthly_net_salary_usd, income_tax_rate, "
    "data_source, sample_size, last_updated"
)


def _row_to_profile(row) -> CityCostProfile:
    return CityCostProfile(
        city=row["city"],
        country=row["country"],
        cost_of_living_index=row["cost_of_living_index"],
        rent_index=row["rent_index"],
        groceries_index=row["groceries_index"],
        transport_index=row["transport_index"],
        utilities_index=row["utilities_index"],
        avg_monthly_net_salary_usd=row["avg_monthly_net_salary_usd"],
        income_tax_rate=row["income_tax_rate"],
        data_source=row["data_source"],
        sample_size=row["sample_size"],
        last_updated=row["last_updated"],
    )


class CostOfLivingProvider:
    """Reads city cost profiles from the reference database."""

    def get_city_data(self, city: str, country: str) -> Optional[CityCostProfile]:
        """Cost profile for a city, falling back to the country average."""
        profile = find_country(country) if country else None
        if profile is None:
            logger.warning("No cost-of-living data for unknown country %r", country)
            return None

        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM city_costs WHERE country = ?", (profile.name,)
            )
            rows = cursor.fetchall()

        city_key = fold(city)
        by_key = {row["city_key"]: row for row in rows}

        if city_key and city_key in by_key:
            return _row_to_profile(by_key[city_key])

        named = [key for key in by_key if key and contains_phrase(city_key, key)]
        if named:
            return _row_to_profile(by_key[max(named, key=len)])

        if "" in by_key:
            logger.debug("Using %s country average for %r", profile.name, city)
            return _row_to_profile(by_key[""])

        logger.warning("No cost-of-living data for %r, %s", city, profile.name)
        return None

    def list_cities(self, country: Optional[str] = None) -> list[CityCostProfile]:
        """All tracked cities, optionally for one country."""
        query = f"SELECT {_COLUMNS} FROM city_costs WHERE city != ''"
        params: tuple = ()
        if country:
            profile = find_country(country)
            if profile is None:
                return []
            query += " AND country = ?"
            params = (profile.name,)
        query += " ORDER BY country, city"

        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [_row_to_profile(row) for row in cursor.fetchall()]


_default_provider = CostOfLivingProvider()


def get_city_data(city: str, country: str) -> Optional[CityCostProfile]:
    """Cost profile lookup through the default database provider."""
    return _default_provider.get_city_data(city, country)
