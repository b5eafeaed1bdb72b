"""
Database schema for the Salary Compass reference dataset.

Every table here is read-only at runtime: the importers populate them once and
the resolver, tax estimator and cost-of-living provider only SELECT.
"""

import sqlite3

from config import DB_PATH, get_logger

logger = get_logger(__name__)


def create_database():
    """Create the database schema"""
    conn = sqlite3.connect(DB_PATH)
    cursor = conn.cursor()

    # ─── Geography ──────────────────────────────────────────────────────────

    # Countries: key is the lower-case lookup name, name is canonical
    # tax_table names the tax_brackets country to use (NULL = default table)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS countries (
            key TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE,
            region TEXT NOT NULL,
            default_city TEXT NOT NULL,
            currency TEXT NOT NULL DEFAULT 'USD',
            tax_table TEXT
        )
    """)

    # Major cities: cities with independently tracked cost data
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS major_cities (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            country_key TEXT NOT NULL,
            city TEXT NOT NULL,
            city_order INTEGER NOT NULL,
            FOREIGN KEY (country_key) REFERENCES countries(key),
            UNIQUE(country_key, city)
        )
    """)

    # Alternative spellings and abbreviations: "usa", "uk", "holland"
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS country_aliases (
            alias TEXT PRIMARY KEY,
            country_key TEXT NOT NULL,
            FOREIGN KEY (country_key) REFERENCES countries(key)
        )
    """)

    # States / provinces that show up as the second segment of "City, State"
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS subdivisions (
            alias TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            country_key TEXT NOT NULL,
            FOREIGN KEY (country_key) REFERENCES countries(key)
        )
    """)

    # Vague / regional keywords: "europe", "apac", "usa"
    # level is 'country', 'region' or 'continent'
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS region_defaults (
            keyword TEXT PRIMARY KEY,
            country_key TEXT NOT NULL,
            city TEXT NOT NULL,
            level TEXT NOT NULL,
            FOREIGN KEY (country_key) REFERENCES countries(key)
        )
    """)

    # Which countries belong to each regional keyword
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS region_members (
            keyword TEXT NOT NULL,
            country_key TEXT NOT NULL,
            PRIMARY KEY (keyword, country_key)
        )
    """)

    # Timezone abbreviations mentioned in remote job postings
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS timezone_hints (
            abbreviation TEXT PRIMARY KEY,
            city TEXT NOT NULL,
            country_key TEXT NOT NULL,
            FOREIGN KEY (country_key) REFERENCES countries(key)
        )
    """)

    # Company headquarters used as a last-resort location signal
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS company_headquarters (
            company TEXT PRIMARY KEY,
            city TEXT NOT NULL,
            state TEXT,
            country_key TEXT NOT NULL,
            FOREIGN KEY (country_key) REFERENCES countries(key)
        )
    """)

    # ─── Money ──────────────────────────────────────────────────────────────

    # Exchange rates: local currency per 1 USD
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS exchange_rates (
            currency TEXT PRIMARY KEY,
            rate_per_usd REAL NOT NULL,
            symbol TEXT,
            country_name TEXT
        )
    """)

    # Tax brackets: marginal rates (income + payroll) per country
    # threshold_lc is the UPPER bound of the bracket in local currency;
    # 999999999999 stands for infinity
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS tax_brackets (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            country TEXT NOT NULL,
            bracket_order INTEGER NOT NULL,
            threshold_lc REAL NOT NULL,
            rate REAL NOT NULL,
            currency TEXT NOT NULL DEFAULT 'USD',
            UNIQUE(country, bracket_order)
        )
    """)

    # City cost-of-living profiles; city = '' holds the country average
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS city_costs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            city TEXT NOT NULL,
            city_key TEXT NOT NULL,
            country TEXT NOT NULL,
            cost_of_living_index REAL NOT NULL,
            rent_index REAL,
            groceries_index REAL,
            transport_index REAL,
            utilities_index REAL,
            avg_monthly_net_salary_usd REAL,
            income_tax_rate REAL,
            data_source TEXT,
            sample_size INTEGER,
            last_updated TEXT,
            UNIQUE(city_key, country)
        )
    """)

    # ─── Indexes ─────────────────────────────────────────────────────────────

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_major_cities_country ON major_cities(country_key)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_region_members_keyword ON region_members(keyword)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_tax_brackets_country ON tax_brackets(country)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_city_costs_lookup ON city_costs(country, city_key)"
    )

    conn.commit()
    conn.close()

    logger.info("Database created at: %s", DB_PATH)


if __name__ == "__main__":
    create_database()
