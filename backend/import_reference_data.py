"""
Import Reference Data into Database
====================================
Populates the read-only reference tables used by the location resolver,
the tax estimator and the currency converter:

  countries, major_cities, country_aliases, subdivisions, region_defaults,
  region_members, timezone_hints, company_headquarters, exchange_rates,
  tax_brackets

and finally imports the city cost-of-living CSV (see import_data.py).

Run once to build (or rebuild) the database:
    python3 import_reference_data.py
"""

import sqlite3

from config import DB_PATH, get_logger

logger = get_logger(__name__)

INFINITE_THRESHOLD = 999999999999


def import_all():
    """Import all reference data into the database."""
    # First ensure tables exist
    from database import create_database

    create_database()

    conn = sqlite3.connect(DB_PATH)
    cursor = conn.cursor()

    _import_countries(cursor)
    _import_country_aliases(cursor)
    _import_subdivisions(cursor)
    _import_regions(cursor)
    _import_timezone_hints(cursor)
    _import_company_headquarters(cursor)
    _import_exchange_rates(cursor)
    _import_tax_brackets(cursor)

    conn.commit()
    conn.close()

    from import_data import import_city_costs

    import_city_costs()
    logger.info("All reference data imported successfully.")


# ═════════════════════════════════════════════════════════════════════════════
# COUNTRIES & MAJOR CITIES
# ═════════════════════════════════════════════════════════════════════════════

# (name, region, default_city, currency, major_cities)
# Major cities are listed in lookup priority order; a city that appears under
# several countries resolves to the first country in this list.
COUNTRIES = [
    # ── North America ────────────────────────────────────────────────────
    (
        "United States",
        "North America",
        "New York",
        "USD",
        [
            "New York", "Los Angeles", "Chicago", "San Francisco", "Seattle",
            "Boston", "Austin", "Denver", "Atlanta", "Washington", "Miami",
            "San Diego", "Houston", "Dallas", "Philadelphia", "Portland",
        ],
    ),
    ("Canada", "North America", "Toronto", "CAD",
     ["Toronto", "Vancouver", "Montreal", "Calgary", "Ottawa"]),
    ("Mexico", "North America", "Mexico City", "MXN",
     ["Mexico City", "Guadalajara", "Monterrey"]),
    ("Costa Rica", "North America", "San José", "CRC", ["San José"]),
    ("Guatemala", "North America", "Guatemala City", "GTQ", ["Guatemala City"]),
    ("Panama", "North America", "Panama City", "USD", ["Panama City"]),
    ("Dominican Republic", "North America", "Santo Domingo", "DOP", ["Santo Domingo"]),
    ("Jamaica", "North America", "Kingston", "JMD", ["Kingston"]),
    # ── South America ────────────────────────────────────────────────────
    ("Argentina", "South America", "Buenos Aires", "ARS",
     ["Buenos Aires", "Córdoba", "Rosario"]),
    ("Bolivia", "South America", "La Paz", "BOB", ["La Paz", "Santa Cruz"]),
    ("Brazil", "South America", "São Paulo", "BRL",
     ["São Paulo", "Rio de Janeiro", "Brasília", "Salvador"]),
    ("Chile", "South America", "Santiago", "CLP", ["Santiago", "Valparaíso"]),
    ("Colombia", "South America", "Bogotá", "COP", ["Bogotá", "Medellín", "Cali"]),
    ("Ecuador", "South America", "Quito", "USD", ["Quito", "Guayaquil"]),
    ("Peru", "South America", "Lima", "PEN", ["Lima"]),
    ("Uruguay", "South America", "Montevideo", "UYU", ["Montevideo"]),
    ("Venezuela", "South America", "Caracas", "VES", ["Caracas"]),
    # ── Europe ───────────────────────────────────────────────────────────
    ("United Kingdom", "Europe", "London", "GBP",
     ["London", "Manchester", "Edinburgh", "Birmingham", "Bristol", "Glasgow"]),
    ("Ireland", "Europe", "Dublin", "EUR", ["Dublin", "Cork"]),
    ("Germany", "Europe", "Berlin", "EUR",
     ["Berlin", "Munich", "Hamburg", "Frankfurt", "Cologne", "Stuttgart"]),
    ("France", "Europe", "Paris", "EUR", ["Paris", "Lyon", "Marseille", "Toulouse"]),
    ("Netherlands", "Europe", "Amsterdam", "EUR",
     ["Amsterdam", "Rotterdam", "The Hague", "Eindhoven", "Utrecht"]),
    ("Belgium", "Europe", "Brussels", "EUR", ["Brussels", "Antwerp", "Ghent"]),
    ("Luxembourg", "Europe", "Luxembourg", "EUR", ["Luxembourg"]),
    ("Switzerland", "Europe", "Zurich", "CHF", ["Zurich", "Geneva", "Basel", "Lausanne"]),
    ("Austria", "Europe", "Vienna", "EUR", ["Vienna", "Salzburg", "Graz"]),
    ("Spain", "Europe", "Madrid", "EUR", ["Madrid", "Barcelona", "Valencia", "Seville"]),
    ("Portugal", "Europe", "Lisbon", "EUR", ["Lisbon", "Porto"]),
    ("Italy", "Europe", "Rome", "EUR", ["Rome", "Milan", "Naples", "Turin"]),
    ("Greece", "Europe", "Athens", "EUR", ["Athens", "Thessaloniki"]),
    ("Malta", "Europe", "Valletta", "EUR", ["Valletta"]),
    ("Cyprus", "Europe", "Nicosia", "EUR", ["Nicosia"]),
    ("Denmark", "Europe", "Copenhagen", "DKK", ["Copenhagen", "Aarhus"]),
    ("Sweden", "Europe", "Stockholm", "SEK", ["Stockholm", "Gothenburg", "Malmö"]),
    ("Norway", "Europe", "Oslo", "NOK", ["Oslo", "Bergen"]),
    ("Finland", "Europe", "Helsinki", "EUR", ["Helsinki", "Tampere"]),
    ("Iceland", "Europe", "Reykjavík", "ISK", ["Reykjavík"]),
    ("Estonia", "Europe", "Tallinn", "EUR", ["Tallinn"]),
    ("Latvia", "Europe", "Riga", "EUR", ["Riga"]),
    ("Lithuania", "Europe", "Vilnius", "EUR", ["Vilnius"]),
    ("Poland", "Europe", "Warsaw", "PLN", ["Warsaw", "Krakow", "Wrocław", "Gdańsk"]),
    ("Czech Republic", "Europe", "Prague", "CZK", ["Prague", "Brno"]),
    ("Slovakia", "Europe", "Bratislava", "EUR", ["Bratislava"]),
    ("Hungary", "Europe", "Budapest", "HUF", ["Budapest"]),
    ("Slovenia", "Europe", "Ljubljana", "EUR", ["Ljubljana"]),
    ("Croatia", "Europe", "Zagreb", "EUR", ["Zagreb"]),
    ("Romania", "Europe", "Bucharest", "RON", ["Bucharest", "Cluj-Napoca"]),
    ("Bulgaria", "Europe", "Sofia", "BGN", ["Sofia", "Plovdiv", "Varna"]),
    ("Serbia", "Europe", "Belgrade", "RSD", ["Belgrade"]),
    ("Bosnia and Herzegovina", "Europe", "Sarajevo", "BAM", ["Sarajevo"]),
    ("North Macedonia", "Europe", "Skopje", "MKD", ["Skopje"]),
    ("Albania", "Europe", "Tirana", "ALL", ["Tirana"]),
    ("Kosovo", "Europe", "Pristina", "EUR", ["Pristina"]),
    ("Moldova", "Europe", "Chișinău", "MDL", ["Chișinău"]),
    ("Ukraine", "Europe", "Kyiv", "UAH", ["Kyiv", "Kharkiv", "Lviv"]),
    ("Belarus", "Europe", "Minsk", "BYN", ["Minsk"]),
    ("Russia", "Europe", "Moscow", "RUB", ["Moscow", "St. Petersburg"]),
    ("Turkey", "Europe", "Istanbul", "TRY", ["Istanbul", "Ankara"]),
    # ── Asia & Middle East ───────────────────────────────────────────────
    ("India", "Asia", "Mumbai", "INR",
     ["Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai", "Pune", "Kolkata"]),
    ("Pakistan", "Asia", "Karachi", "PKR", ["Karachi", "Lahore", "Islamabad", "Hyderabad"]),
    ("Bangladesh", "Asia", "Dhaka", "BDT", ["Dhaka", "Chittagong"]),
    ("Sri Lanka", "Asia", "Colombo", "LKR", ["Colombo"]),
    ("Nepal", "Asia", "Kathmandu", "NPR", ["Kathmandu"]),
    ("China", "Asia", "Beijing", "CNY",
     ["Beijing", "Shanghai", "Guangzhou", "Shenzhen", "Chengdu", "Hangzhou"]),
    ("Hong Kong", "Asia", "Hong Kong", "HKD", ["Hong Kong"]),
    ("Macao", "Asia", "Macao", "MOP", ["Macao"]),
    ("Taiwan", "Asia", "Taipei", "TWD", ["Taipei"]),
    ("Japan", "Asia", "Tokyo", "JPY", ["Tokyo", "Osaka", "Yokohama", "Nagoya", "Kyoto"]),
    ("South Korea", "Asia", "Seoul", "KRW", ["Seoul", "Busan"]),
    ("Mongolia", "Asia", "Ulaanbaatar", "MNT", ["Ulaanbaatar"]),
    ("Singapore", "Asia", "Singapore", "SGD", ["Singapore"]),
    ("Malaysia", "Asia", "Kuala Lumpur", "MYR", ["Kuala Lumpur", "George Town"]),
    ("Indonesia", "Asia", "Jakarta", "IDR", ["Jakarta", "Surabaya", "Bandung"]),
    ("Thailand", "Asia", "Bangkok", "THB", ["Bangkok", "Chiang Mai"]),
    ("Vietnam", "Asia", "Ho Chi Minh City", "VND", ["Ho Chi Minh City", "Hanoi"]),
    ("Philippines", "Asia", "Manila", "PHP", ["Manila", "Cebu City"]),
    ("Cambodia", "Asia", "Phnom Penh", "KHR", ["Phnom Penh"]),
    ("Kazakhstan", "Asia", "Almaty", "KZT", ["Almaty", "Astana"]),
    ("Georgia", "Asia", "Tbilisi", "GEL", ["Tbilisi"]),
    ("Armenia", "Asia", "Yerevan", "AMD", ["Yerevan"]),
    ("Azerbaijan", "Asia", "Baku", "AZN", ["Baku"]),
    ("Israel", "Asia", "Tel Aviv", "ILS", ["Tel Aviv", "Jerusalem", "Haifa"]),
    ("United Arab Emirates", "Asia", "Dubai", "AED", ["Dubai", "Abu Dhabi"]),
    ("Saudi Arabia", "Asia", "Riyadh", "SAR", ["Riyadh", "Jeddah"]),
    ("Qatar", "Asia", "Doha", "QAR", ["Doha"]),
    ("Bahrain", "Asia", "Manama", "BHD", ["Manama"]),
    ("Kuwait", "Asia", "Kuwait City", "KWD", ["Kuwait City"]),
    ("Oman", "Asia", "Muscat", "OMR", ["Muscat"]),
    ("Jordan", "Asia", "Amman", "JOD", ["Amman"]),
    ("Lebanon", "Asia", "Beirut", "LBP", ["Beirut"]),
    # ── Africa ───────────────────────────────────────────────────────────
    ("South Africa", "Africa", "Cape Town", "ZAR", ["Cape Town", "Johannesburg", "Durban"]),
    ("Egypt", "Africa", "Cairo", "EGP", ["Cairo", "Alexandria"]),
    ("Morocco", "Africa", "Casablanca", "MAD", ["Casablanca", "Rabat"]),
    ("Nigeria", "Africa", "Lagos", "NGN", ["Lagos", "Abuja"]),
    ("Kenya", "Africa", "Nairobi", "KES", ["Nairobi", "Mombasa"]),
    ("Ghana", "Africa", "Accra", "GHS", ["Accra"]),
    ("Ethiopia", "Africa", "Addis Ababa", "ETB", ["Addis Ababa"]),
    ("Rwanda", "Africa", "Kigali", "RWF", ["Kigali"]),
    ("Algeria", "Africa", "Algiers", "DZD", ["Algiers"]),
    ("Tunisia", "Africa", "Tunis", "TND", ["Tunis"]),
    # ── Oceania ──────────────────────────────────────────────────────────
    ("Australia", "Oceania", "Sydney", "AUD",
     ["Sydney", "Melbourne", "Brisbane", "Perth", "Adelaide", "Canberra"]),
    ("New Zealand", "Oceania", "Auckland", "NZD", ["Auckland", "Wellington", "Christchurch"]),
    ("Fiji", "Oceania", "Suva", "FJD", ["Suva"]),
]


def _country_key(name):
    return name.lower()


def _import_countries(cursor):
    """Import countries and their major cities."""
    cursor.execute("DELETE FROM major_cities")
    cursor.execute("DELETE FROM countries")

    city_count = 0
    for name, region, default_city, currency, cities in COUNTRIES:
        key = _country_key(name)
        cursor.execute(
            "INSERT INTO countries (key, name, region, default_city, currency) "
            "VALUES (?, ?, ?, ?, ?)",
            (key, name, region, default_city, currency),
        )
        for order, city in enumerate(cities, start=1):
            cursor.execute(
                "INSERT INTO major_cities (country_key, city, city_order) VALUES (?, ?, ?)",
                (key, city, order),
            )
            city_count += 1

    logger.info("Imported %d countries with %d major cities", len(COUNTRIES), city_count)


# ═════════════════════════════════════════════════════════════════════════════
# COUNTRY ALIASES
# ═════════════════════════════════════════════════════════════════════════════


def _import_country_aliases(cursor):
    """Import alternative names and abbreviations for countries."""
    cursor.execute("DELETE FROM country_aliases")

    aliases = {
        "usa": "United States",
        "us": "United States",
        "u.s.": "United States",
        "u.s.a.": "United States",
        "america": "United States",
        "united states of america": "United States",
        "uk": "United Kingdom",
        "u.k.": "United Kingdom",
        "gb": "United Kingdom",
        "britain": "United Kingdom",
        "great britain": "United Kingdom",
        "england": "United Kingdom",
        "scotland": "United Kingdom",
        "wales": "United Kingdom",
        "northern ireland": "United Kingdom",
        "uae": "United Arab Emirates",
        "emirates": "United Arab Emirates",
        "korea": "South Korea",
        "republic of korea": "South Korea",
        "holland": "Netherlands",
        "the netherlands": "Netherlands",
        "czechia": "Czech Republic",
        "czech": "Czech Republic",
        "macedonia": "North Macedonia",
        "deutschland": "Germany",
        "espana": "Spain",
        "brasil": "Brazil",
        "turkiye": "Turkey",
        "hong kong sar": "Hong Kong",
        "prc": "China",
        "ksa": "Saudi Arabia",
    }

    for alias, country in aliases.items():
        cursor.execute(
            "INSERT INTO country_aliases (alias, country_key) VALUES (?, ?)",
            (alias, _country_key(country)),
        )
    logger.info("Imported %d country aliases", len(aliases))


# ═════════════════════════════════════════════════════════════════════════════
# STATES / PROVINCES
# ═════════════════════════════════════════════════════════════════════════════


def _import_subdivisions(cursor):
    """Import states and provinces, keyed by lower-case name and abbreviation."""
    cursor.execute("DELETE FROM subdivisions")

    us_states = {
        "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
        "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
        "DC": "District of Columbia", "FL": "Florida", "GA": "Georgia", "HI": "Hawaii",
        "ID": "Idaho", "IL": "Illinois", "IN": "Indiana", "IA": "Iowa",
        "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine",
        "MD": "Maryland", "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota",
        "MS": "Mississippi", "MO": "Missouri", "MT": "Montana", "NE": "Nebraska",
        "NV": "Nevada", "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico",
        "NY": "New York", "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio",
        "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island",
        "SC": "South Carolina", "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas",
        "UT": "Utah", "VT": "Vermont", "VA": "Virginia", "WA": "Washington",
        "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming",
    }
    canadian_provinces = {
        "AB": "Alberta", "BC": "British Columbia", "MB": "Manitoba",
        "NB": "New Brunswick", "NL": "Newfoundland and Labrador",
        "NS": "Nova Scotia", "ON": "Ontario", "PE": "Prince Edward Island",
        "QC": "Quebec", "SK": "Saskatchewan",
    }
    # Abbreviations that collide with US states are left out
    australian_states = {
        "NSW": "New South Wales", "VIC": "Victoria", "QLD": "Queensland",
        "TAS": "Tasmania", "ACT": "Australian Capital Territory",
        None: "Western Australia",
    }

    count = 0
    for country, table in (
        ("United States", us_states),
        ("Canada", canadian_provinces),
        ("Australia", australian_states),
    ):
        for abbreviation, name in table.items():
            keys = [name.lower()]
            if abbreviation:
                keys.append(abbreviation.lower())
            for key in keys:
                cursor.execute(
                    "INSERT OR IGNORE INTO subdivisions (alias, name, country_key) VALUES (?, ?, ?)",
                    (key, name, _country_key(country)),
                )
                count += 1
    cursor.execute(
        "INSERT OR IGNORE INTO subdivisions (alias, name, country_key) VALUES (?, ?, ?)",
        ("washington dc", "District of Columbia", _country_key("United States")),
    )
    logger.info("Imported %d subdivision aliases", count + 1)


# ═════════════════════════════════════════════════════════════════════════════
# REGIONS
# ═════════════════════════════════════════════════════════════════════════════


def _import_regions(cursor):
    """Import regional keywords, their default hub city and member countries.

    Levels:
      - country:   the keyword names a single country ("usa")
      - region:    a recognised business region ("emea", "nordics")
      - continent: a whole continent ("europe", "africa")
    """
    cursor.execute("DELETE FROM region_members")
    cursor.execute("DELETE FROM region_defaults")

    # keyword -> (country, city, level, members)
    # members: list of country names, or a tuple of continent names
    latam = [
        "Mexico", "Costa Rica", "Guatemala", "Panama", "Dominican Republic",
        "Argentina", "Bolivia", "Brazil", "Chile", "Colombia", "Ecuador",
        "Peru", "Uruguay", "Venezuela",
    ]
    middle_east = [
        "United Arab Emirates", "Saudi Arabia", "Qatar", "Bahrain", "Kuwait",
        "Oman", "Jordan", "Lebanon", "Israel", "Turkey", "Egypt",
    ]
    nordics = ["Denmark", "Sweden", "Norway", "Finland", "Iceland"]
    apac = [
        "Australia", "New Zealand", "Singapore", "Japan", "South Korea", "China",
        "Hong Kong", "Taiwan", "India", "Indonesia", "Malaysia", "Thailand",
        "Vietnam", "Philippines",
    ]
    eu = [
        "Ireland", "Germany", "France", "Netherlands", "Belgium", "Luxembourg",
        "Austria", "Spain", "Portugal", "Italy", "Greece", "Malta", "Cyprus",
        "Denmark", "Sweden", "Finland", "Estonia", "Latvia", "Lithuania",
        "Poland", "Czech Republic", "Slovakia", "Hungary", "Slovenia",
        "Croatia", "Romania", "Bulgaria",
    ]
    regions = {
        "usa": ("United States", "New York", "country", ["United States"]),
        "us": ("United States", "New York", "country", ["United States"]),
        "united states": ("United States", "New York", "country", ["United States"]),
        "america": ("United States", "New York", "country", ["United States"]),
        "uk": ("United Kingdom", "London", "country", ["United Kingdom"]),
        "north america": ("United States", "New York", "region",
                          ["United States", "Canada", "Mexico"]),
        "americas": ("United States", "New York", "region",
                     ("North America", "South America")),
        "eu": ("Germany", "Berlin", "region", eu),
        "emea": ("United Kingdom", "London", "region", ("Europe", "Africa")),
        "dach": ("Germany", "Berlin", "region", ["Germany", "Austria", "Switzerland"]),
        "benelux": ("Netherlands", "Amsterdam", "region",
                    ["Netherlands", "Belgium", "Luxembourg"]),
        "nordics": ("Sweden", "Stockholm", "region", nordics),
        "scandinavia": ("Sweden", "Stockholm", "region", nordics),
        "apac": ("Singapore", "Singapore", "region", apac),
        "asia pacific": ("Singapore", "Singapore", "region", apac),
        "latam": ("Brazil", "São Paulo", "region", latam),
        "latin america": ("Brazil", "São Paulo", "region", latam),
        "middle east": ("United Arab Emirates", "Dubai", "region", middle_east),
        "mena": ("United Arab Emirates", "Dubai", "region", middle_east),
        "gcc": ("United Arab Emirates", "Dubai", "region",
                ["United Arab Emirates", "Saudi Arabia", "Qatar", "Bahrain",
                 "Kuwait", "Oman"]),
        "europe": ("United Kingdom", "London", "continent", ("Europe",)),
        "asia": ("Singapore", "Singapore", "continent", ("Asia",)),
        "africa": ("South Africa", "Cape Town", "continent", ("Africa",)),
        "south america": ("Brazil", "São Paulo", "continent", ("South America",)),
        "oceania": ("Australia", "Sydney", "continent", ("Oceania",)),
    }

    member_count = 0
    for keyword, (country, city, level, members) in regions.items():
        cursor.execute(
            "INSERT INTO region_defaults (keyword, country_key, city, level) VALUES (?, ?, ?, ?)",
            (keyword, _country_key(country), city, level),
        )
        if isinstance(members, tuple):
            # Continent membership comes from the countries table
            for continent in members:
                cursor.execute(
                    "INSERT OR IGNORE INTO region_members (keyword, country_key) "
                    "SELECT ?, key FROM countries WHERE region = ?",
                    (keyword, continent),
                )
                member_count += cursor.rowcount
        else:
            for member in members:
                cursor.execute(
                    "INSERT OR IGNORE INTO region_members (keyword, country_key) VALUES (?, ?)",
                    (keyword, _country_key(member)),
                )
                member_count += 1

    logger.info(
        "Imported %d regional keywords with %d memberships", len(regions), member_count
    )


# ═════════════════════════════════════════════════════════════════════════════
# TIMEZONES
# ═════════════════════════════════════════════════════════════════════════════


def _import_timezone_hints(cursor):
    """Import timezone abbreviations mapped to a representative city."""
    cursor.execute("DELETE FROM timezone_hints")

    hints = {
        "pst": ("San Francisco", "United States"),
        "pdt": ("San Francisco", "United States"),
        "pt": ("San Francisco", "United States"),
        "est": ("New York", "United States"),
        "edt": ("New York", "United States"),
        "et": ("New York", "United States"),
        "cst": ("Chicago", "United States"),
        "cdt": ("Chicago", "United States"),
        "mst": ("Denver", "United States"),
        "mdt": ("Denver", "United States"),
        "gmt": ("London", "United Kingdom"),
        "bst": ("London", "United Kingdom"),
        "cet": ("Berlin", "Germany"),
        "cest": ("Berlin", "Germany"),
        "jst": ("Tokyo", "Japan"),
        "kst": ("Seoul", "South Korea"),
        "sgt": ("Singapore", "Singapore"),
        "aest": ("Sydney", "Australia"),
        "aedt": ("Sydney", "Australia"),
        "nzst": ("Auckland", "New Zealand"),
    }

    for abbreviation, (city, country) in hints.items():
        cursor.execute(
            "INSERT INTO timezone_hints (abbreviation, city, country_key) VALUES (?, ?, ?)",
            (abbreviation, city, _country_key(country)),
        )
    logger.info("Imported %d timezone hints", len(hints))


# ═════════════════════════════════════════════════════════════════════════════
# COMPANY HEADQUARTERS
# ═════════════════════════════════════════════════════════════════════════════


def _import_company_headquarters(cursor):
    """Import headquarters locations for well-known employers."""
    cursor.execute("DELETE FROM company_headquarters")

    # company -> (city, state, country)
    headquarters = {
        "google": ("Mountain View", "California", "United States"),
        "alphabet": ("Mountain View", "California", "United States"),
        "microsoft": ("Redmond", "Washington", "United States"),
        "amazon": ("Seattle", "Washington", "United States"),
        "apple": ("Cupertino", "California", "United States"),
        "meta": ("Menlo Park", "California", "United States"),
        "facebook": ("Menlo Park", "California", "United States"),
        "netflix": ("Los Gatos", "California", "United States"),
        "uber": ("San Francisco", "California", "United States"),
        "airbnb": ("San Francisco", "California", "United States"),
        "stripe": ("San Francisco", "California", "United States"),
        "salesforce": ("San Francisco", "California", "United States"),
        "ibm": ("Armonk", "New York", "United States"),
        "spotify": ("Stockholm", None, "Sweden"),
        "shopify": ("Ottawa", "Ontario", "Canada"),
        "atlassian": ("Sydney", "New South Wales", "Australia"),
        "canva": ("Sydney", "New South Wales", "Australia"),
        "booking.com": ("Amsterdam", None, "Netherlands"),
        "adyen": ("Amsterdam", None, "Netherlands"),
        "zalando": ("Berlin", None, "Germany"),
        "sap": ("Walldorf", None, "Germany"),
        "revolut": ("London", None, "United Kingdom"),
        "deepmind": ("London", None, "United Kingdom"),
        "grab": ("Singapore", None, "Singapore"),
        "infosys": ("Bangalore", None, "India"),
        "tcs": ("Mumbai", None, "India"),
        "mercadolibre": ("Buenos Aires", None, "Argentina"),
    }

    for company, (city, state, country) in headquarters.items():
        cursor.execute(
            "INSERT INTO company_headquarters (company, city, state, country_key) "
            "VALUES (?, ?, ?, ?)",
            (company, city, state, _country_key(country)),
        )
    logger.info("Imported %d company headquarters", len(headquarters))


# ═════════════════════════════════════════════════════════════════════════════
# EXCHANGE RATES
# ═════════════════════════════════════════════════════════════════════════════


def _import_exchange_rates(cursor):
    """Import exchange rates (local currency per 1 USD)."""
    rates = {
        "USD": (1.0, "$", "United States"),
        "GBP": (0.79, "£", "United Kingdom"),
        "EUR": (0.92, "€", "Eurozone"),
        "CAD": (1.36, "C$", "Canada"),
        "CHF": (0.88, "CHF", "Switzerland"),
        "AUD": (1.53, "A$", "Australia"),
        "NZD": (1.63, "NZ$", "New Zealand"),
        "INR": (83.5, "₹", "India"),
        "SGD": (1.34, "S$", "Singapore"),
        "HKD": (7.82, "HK$", "Hong Kong"),
        "JPY": (151.0, "¥", "Japan"),
        "KRW": (1430.0, "₩", "South Korea"),
        "ILS": (3.65, "₪", "Israel"),
        "CNY": (7.24, "CN¥", "China"),
        "TWD": (31.5, "NT$", "Taiwan"),
        "SEK": (10.5, "kr", "Sweden"),
        "DKK": (6.88, "kr", "Denmark"),
        "NOK": (10.7, "kr", "Norway"),
        "PLN": (4.0, "zł", "Poland"),
        "CZK": (23.0, "Kč", "Czech Republic"),
        "HUF": (365.0, "Ft", "Hungary"),
        "RON": (4.6, "lei", "Romania"),
        "TRY": (32.0, "₺", "Turkey"),
        "BRL": (5.9, "R$", "Brazil"),
        "MXN": (20.0, "MX$", "Mexico"),
        "ARS": (880.0, "AR$", "Argentina"),
        "CLP": (950.0, "CLP$", "Chile"),
        "COP": (4300.0, "COL$", "Colombia"),
        "ZAR": (16.5, "R", "South Africa"),
        "EGP": (48.0, "E£", "Egypt"),
        "NGN": (1500.0, "₦", "Nigeria"),
        "KES": (130.0, "KSh", "Kenya"),
        "PKR": (278.0, "₨", "Pakistan"),
        "AED": (3.67, "AED", "United Arab Emirates"),
        "SAR": (3.75, "SAR", "Saudi Arabia"),
        "MYR": (4.7, "RM", "Malaysia"),
        "THB": (36.5, "฿", "Thailand"),
        "IDR": (16000.0, "Rp", "Indonesia"),
        "PHP": (57.0, "₱", "Philippines"),
        "VND": (25000.0, "₫", "Vietnam"),
    }

    cursor.execute("DELETE FROM exchange_rates")
    for currency, (rate, symbol, country) in rates.items():
        cursor.execute(
            "INSERT INTO exchange_rates (currency, rate_per_usd, symbol, country_name) "
            "VALUES (?, ?, ?, ?)",
            (currency, rate, symbol, country),
        )
    logger.info("Imported %d exchange rates", len(rates))


# ═════════════════════════════════════════════════════════════════════════════
# TAX BRACKETS
# ═════════════════════════════════════════════════════════════════════════════


def _import_tax_brackets(cursor):
    """Import combined (income + payroll) marginal brackets per country.

    Marginal rates must be non-decreasing within a country so that the
    effective rate never falls as income rises.
    """
    cursor.execute("DELETE FROM tax_brackets")
    count = 0
    inf = float("inf")

    # Helper to insert brackets
    def insert_brackets(country, brackets, currency="USD"):
        nonlocal count
        for i, (threshold, rate) in enumerate(brackets):
            # Use a large number instead of infinity for DB storage
            t = threshold if threshold != inf else INFINITE_THRESHOLD
            cursor.execute(
                "INSERT INTO tax_brackets (country, bracket_order, threshold_lc, rate, currency) "
                "VALUES (?, ?, ?, ?, ?)",
                (country, i + 1, t, rate, currency),
            )
            count += 1

    # ── United States (federal + FICA + average state) ───────────────────
    insert_brackets(
        "United States",
        [
            (11600, 0.10),
            (47150, 0.19),
            (100525, 0.30),
            (191950, 0.33),
            (243725, 0.40),
            (609350, 0.43),
            (inf, 0.45),
        ],
    )

    # ── Canada (federal + Ontario + CPP/EI) ──────────────────────────────
    insert_brackets(
        "Canada",
        [
            (55867, 0.25),
            (111733, 0.32),
            (154906, 0.38),
            (220000, 0.42),
            (inf, 0.48),
        ],
        "CAD",
    )

    # ── United Kingdom (income tax + national insurance) ─────────────────
    insert_brackets(
        "United Kingdom",
        [
            (12570, 0.0),
            (50270, 0.28),
            (125140, 0.42),
            (inf, 0.47),
        ],
        "GBP",
    )

    # ── Ireland (income tax + USC + PRSI) ────────────────────────────────
    insert_brackets(
        "Ireland",
        [
            (12012, 0.045),
            (42000, 0.29),
            (70044, 0.49),
            (inf, 0.52),
        ],
        "EUR",
    )

    # ── Germany (income tax + social contributions) ──────────────────────
    insert_brackets(
        "Germany",
        [
            (11604, 0.20),
            (17005, 0.34),
            (66760, 0.44),
            (277825, 0.45),
            (inf, 0.48),
        ],
        "EUR",
    )

    # ── France ────────────────────────────────────────────────────────────
    insert_brackets(
        "France",
        [
            (11294, 0.10),
            (28797, 0.21),
            (82341, 0.40),
            (177106, 0.47),
            (inf, 0.50),
        ],
        "EUR",
    )

    # ── Netherlands ───────────────────────────────────────────────────────
    insert_brackets(
        "Netherlands",
        [
            (75518, 0.3697),
            (inf, 0.495),
        ],
        "EUR",
    )

    # ── Switzerland (federal + Zurich cantonal + social) ─────────────────
    insert_brackets(
        "Switzerland",
        [
            (14500, 0.13),
            (31600, 0.16),
            (55200, 0.20),
            (103600, 0.27),
            (176000, 0.33),
            (inf, 0.38),
        ],
        "CHF",
    )

    # ── Spain ─────────────────────────────────────────────────────────────
    insert_brackets(
        "Spain",
        [
            (12450, 0.25),
            (20200, 0.30),
            (35200, 0.36),
            (60000, 0.43),
            (300000, 0.45),
            (inf, 0.47),
        ],
        "EUR",
    )

    # ── Italy ─────────────────────────────────────────────────────────────
    insert_brackets(
        "Italy",
        [
            (28000, 0.32),
            (50000, 0.44),
            (inf, 0.52),
        ],
        "EUR",
    )

    # ── Portugal ──────────────────────────────────────────────────────────
    insert_brackets(
        "Portugal",
        [
            (7703, 0.2425),
            (11623, 0.29),
            (16472, 0.34),
            (21321, 0.37),
            (27146, 0.4375),
            (39791, 0.48),
            (51997, 0.545),
            (inf, 0.56),
        ],
        "EUR",
    )

    # ── Nordics ──────────────────────────────────────────────────────────
    insert_brackets(
        "Sweden",
        [
            (598500, 0.32),
            (inf, 0.52),  # 0.32 municipal + 0.20 state above threshold
        ],
        "SEK",
    )
    insert_brackets(
        "Denmark",
        [
            (49700, 0.08),
            (588900, 0.3709),
            (inf, 0.5207),
        ],
        "DKK",
    )
    insert_brackets(
        "Norway",
        [
            (208050, 0.30),
            (292850, 0.317),
            (670000, 0.34),
            (937900, 0.436),
            (1350000, 0.466),
            (inf, 0.476),
        ],
        "NOK",
    )

    # ── Poland ────────────────────────────────────────────────────────────
    insert_brackets(
        "Poland",
        [
            (120000, 0.25),
            (inf, 0.40),
        ],
        "PLN",
    )

    # ── India ─────────────────────────────────────────────────────────────
    insert_brackets(
        "India",
        [
            (300000, 0.0),
            (700000, 0.05),
            (1000000, 0.10),
            (1200000, 0.15),
            (1500000, 0.20),
            (inf, 0.30),
        ],
        "INR",
    )

    # ── Singapore ─────────────────────────────────────────────────────────
    insert_brackets(
        "Singapore",
        [
            (20000, 0.0),
            (30000, 0.02),
            (40000, 0.035),
            (80000, 0.07),
            (120000, 0.115),
            (160000, 0.15),
            (200000, 0.18),
            (240000, 0.19),
            (280000, 0.195),
            (320000, 0.20),
            (inf, 0.22),
        ],
        "SGD",
    )

    # ── Hong Kong ─────────────────────────────────────────────────────────
    insert_brackets(
        "Hong Kong",
        [
            (50000, 0.02),
            (100000, 0.06),
            (150000, 0.10),
            (200000, 0.14),
            (inf, 0.17),
        ],
        "HKD",
    )

    # ── Japan (income + resident tax + social) ───────────────────────────
    insert_brackets(
        "Japan",
        [
            (1950000, 0.20),
            (3300000, 0.25),
            (6950000, 0.35),
            (9000000, 0.38),
            (18000000, 0.43),
            (40000000, 0.50),
            (inf, 0.55),
        ],
        "JPY",
    )

    # ── South Korea ───────────────────────────────────────────────────────
    insert_brackets(
        "South Korea",
        [
            (14000000, 0.06),
            (50000000, 0.15),
            (88000000, 0.24),
            (150000000, 0.35),
            (300000000, 0.38),
            (500000000, 0.40),
            (1000000000, 0.42),
            (inf, 0.45),
        ],
        "KRW",
    )

    # ── China ─────────────────────────────────────────────────────────────
    insert_brackets(
        "China",
        [
            (36000, 0.03),
            (144000, 0.10),
            (300000, 0.20),
            (420000, 0.25),
            (660000, 0.30),
            (960000, 0.35),
            (inf, 0.45),
        ],
        "CNY",
    )

    # ── Israel ────────────────────────────────────────────────────────────
    insert_brackets(
        "Israel",
        [
            (81480, 0.10),
            (116760, 0.14),
            (167880, 0.20),
            (241680, 0.31),
            (502920, 0.35),
            (647640, 0.47),
            (inf, 0.50),
        ],
        "ILS",
    )

    # ── Australia (income tax + medicare levy) ───────────────────────────
    insert_brackets(
        "Australia",
        [
            (18200, 0.0),
            (45000, 0.18),
            (135000, 0.32),
            (190000, 0.39),
            (inf, 0.47),
        ],
        "AUD",
    )

    # ── New Zealand ───────────────────────────────────────────────────────
    insert_brackets(
        "New Zealand",
        [
            (14000, 0.105),
            (48000, 0.175),
            (70000, 0.30),
            (180000, 0.33),
            (inf, 0.39),
        ],
        "NZD",
    )

    # ── Brazil ────────────────────────────────────────────────────────────
    insert_brackets(
        "Brazil",
        [
            (26963.20, 0.0),
            (33919.80, 0.075),
            (45012.60, 0.15),
            (55976.16, 0.225),
            (inf, 0.275),
        ],
        "BRL",
    )

    # ── Mexico ────────────────────────────────────────────────────────────
    insert_brackets(
        "Mexico",
        [
            (8952.49, 0.0192),
            (75984.55, 0.064),
            (133536.07, 0.1088),
            (155229.80, 0.16),
            (185852.57, 0.1792),
            (374837.88, 0.2136),
            (590795.99, 0.2352),
            (1127926.84, 0.30),
            (1503902.46, 0.32),
            (4511707.37, 0.34),
            (inf, 0.35),
        ],
        "MXN",
    )

    # ── South Africa ──────────────────────────────────────────────────────
    insert_brackets(
        "South Africa",
        [
            (237100, 0.18),
            (370500, 0.26),
            (512800, 0.31),
            (673000, 0.36),
            (857900, 0.39),
            (1817000, 0.41),
            (inf, 0.45),
        ],
        "ZAR",
    )

    # ── Pakistan ──────────────────────────────────────────────────────────
    insert_brackets(
        "Pakistan",
        [
            (600000, 0.0),
            (1200000, 0.05),
            (2200000, 0.15),
            (3200000, 0.25),
            (4100000, 0.30),
            (inf, 0.35),
        ],
        "PKR",
    )

    # ── Gulf states: no personal income tax ──────────────────────────────
    insert_brackets("United Arab Emirates", [(inf, 0.0)], "AED")
    insert_brackets("Saudi Arabia", [(inf, 0.0)], "SAR")

    # Point each country at its own bracket table where one exists
    cursor.execute(
        "UPDATE countries SET tax_table = name "
        "WHERE name IN (SELECT DISTINCT country FROM tax_brackets)"
    )

    logger.info("Imported %d tax brackets", count)


if __name__ == "__main__":
    from config import setup_logging

    setup_logging()
    import_all()
