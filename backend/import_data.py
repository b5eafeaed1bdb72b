"""
Import city cost-of-living data from CSV into SQLite database

Rows with an empty city are country averages; the provider falls back to them
when a city has no row of its own.
"""
import sqlite3
import pandas as pd

from config import DB_PATH, DATA_DIR, get_logger

logger = get_logger(__name__)

CSV_PATH = DATA_DIR / "city_costs.csv"

INDEX_COLUMNS = [
    'cost_of_living_index', 'rent_index', 'groceries_index',
    'transport_index', 'utilities_index',
]


def _optional_float(value):
    return float(value) if pd.notna(value) else None


def _optional_int(value):
    return int(value) if pd.notna(value) else None


def import_city_costs(csv_path=CSV_PATH):
    """Import all city cost profiles from CSV into the city_costs table"""
    from reference_data import find_country, fold

    df = pd.read_csv(csv_path, dtype={'city': str, 'country': str})
    df = df.dropna(how='all')
    df = df[df['country'].notna() & df['cost_of_living_index'].notna()].copy()
    df['city'] = df['city'].fillna('').str.strip()

    bad_index = df[df['cost_of_living_index'] <= 0]
    if not bad_index.empty:
        raise ValueError(
            f"Non-positive cost_of_living_index for: {', '.join(bad_index['city'])}"
        )

    logger.info("Importing %d cost-of-living rows from %s", len(df), csv_path.name)

    conn = sqlite3.connect(DB_PATH)
    cursor = conn.cursor()

    # Clear existing data
    cursor.execute("DELETE FROM city_costs")

    skipped = 0
    for _, row in df.iterrows():
        # Store the canonical country name so lookups agree with the resolver
        country = find_country(row['country'])
        if country is None:
            logger.warning("Skipping row for unknown country: %s", row['country'])
            skipped += 1
            continue

        cursor.execute("""
            INSERT INTO city_costs (
                city, city_key, country, cost_of_living_index, rent_index,
                groceries_index, transport_index, utilities_index,
                avg_monthly_net_salary_usd, income_tax_rate, data_source,
                sample_size, last_updated
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            row['city'],
            fold(row['city']),
            country.name,
            *[_optional_float(row[column]) for column in INDEX_COLUMNS],
            _optional_float(row['avg_monthly_net_salary_usd']),
            _optional_float(row['income_tax_rate']),
            row['data_source'] if pd.notna(row['data_source']) else None,
            _optional_int(row['sample_size']),
            row['last_updated'] if pd.notna(row['last_updated']) else None,
        ))

    conn.commit()

    # Summary
    cursor.execute("SELECT COUNT(*) FROM city_costs WHERE city != ''")
    city_count = cursor.fetchone()[0]
    cursor.execute("SELECT COUNT(*) FROM city_costs WHERE city = ''")
    country_count = cursor.fetchone()[0]
    conn.close()

    logger.info(
        "Imported %d city profiles and %d country averages (%d skipped)",
        city_count, country_count, skipped,
    )


if __name__ == "__main__":
    from config import setup_logging

    setup_logging()
    import_city_costs()
