"""
Tests for the Salary Compass backend.

Covers: reference_data, location_resolver, affordability, tax_data, currency,
cost_of_living, salary_calculator, import_data and the Flask API.
Run with: cd backend && python -m pytest tests/ -v

conftest.py builds a temporary reference database before these imports run.
"""

import math
import sys
from pathlib import Path

# Ensure backend directory is on path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

# ═══════════════════════════════════════════════════════════════════════════════
# REFERENCE DATA TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from reference_data import (
    company_headquarters,
    find_countries_in_text,
    find_country,
    find_major_city_countries,
    find_major_city_in_text,
    find_region_default,
    find_subdivision,
    fold,
    is_major_city,
    timezone_location,
)


class TestReferenceData:
    """Test country, city and region lookups against the seeded tables."""

    def test_country_aliases(self):
        """Common abbreviations and local names map to canonical countries."""
        cases = {
            "USA": "United States",
            "u.s.": "United States",
            "UK": "United Kingdom",
            "England": "United Kingdom",
            "Deutschland": "Germany",
            "UAE": "United Arab Emirates",
        }
        for text, expected in cases.items():
            country = find_country(text)
            assert country is not None, f"{text!r} should be recognised"
            assert country.name == expected, f"{text!r}: expected {expected}, got {country.name}"

    def test_partial_country_match(self):
        """Longer phrasings still find the country when partial matching is on."""
        assert find_country("Federal Republic of Germany").name == "Germany"
        assert find_country("Federal Republic of Germany", partial=False) is None

    def test_unknown_country(self):
        """Made-up countries return None."""
        assert find_country("Atlantis") is None
        assert find_country("") is None

    def test_short_alias_needs_capitals_in_text(self):
        """'join us' must not read as the United States."""
        assert find_countries_in_text("Come join us in Berlin") == []
        names = [c.name for c in find_countries_in_text("Remote - US or Canada")]
        assert names == ["United States", "Canada"], f"Got {names}"

    def test_major_city_matching(self):
        """Major-city checks are accent-insensitive; loose mode allows containment."""
        brazil = find_country("Brazil")
        uk = find_country("UK")
        assert is_major_city("Sao Paulo", brazil)
        assert is_major_city("Greater London", uk)
        assert not is_major_city("Greater London", uk, strict=True)
        assert not is_major_city("Leeds", uk)

    def test_city_in_several_countries(self):
        """Hyderabad is listed under India first, then Pakistan."""
        names = [c.name for c in find_major_city_countries("Hyderabad")]
        assert names == ["India", "Pakistan"], f"Got {names}"

    def test_major_city_in_text(self):
        """The longest major city inside free text wins."""
        city, country = find_major_city_in_text("New York City office")
        assert city == "New York"
        assert country.name == "United States"
        assert find_major_city_in_text("Head office") is None

    def test_subdivisions(self):
        """States resolve by full name and abbreviation."""
        texas = find_subdivision("TX")
        assert texas.name == "Texas"
        assert texas.country.name == "United States"
        assert find_subdivision("Ontario").country.name == "Canada"

    def test_region_timezone_company(self):
        """Regional keywords, timezones and HQ lookups are case-insensitive."""
        assert find_region_default("APAC").city == "Singapore"
        city, country = timezone_location("EST")
        assert (city, country.name) == ("New York", "United States")
        hq = company_headquarters("  Google ")
        assert hq.city == "Mountain View"
        assert hq.country.name == "United States"

    def test_fold(self):
        assert fold("  São   Paulo ") == "sao paulo"
        assert fold(None) == ""


# ═══════════════════════════════════════════════════════════════════════════════
# LOCATION RESOLVER TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from location_resolver import (
    JobLocationContext,
    LocationResolution,
    LocationResolver,
    RESOLVED_BY,
    UserLocationProfile,
    get_location_alternatives,
    normalize_work_mode,
    resolve_location,
    validate_location,
)


@pytest.fixture
def denver_profile():
    """A user living in Denver with a family of four."""
    return UserLocationProfile(
        current_location="Denver",
        current_country="United States",
        current_state="Colorado",
        family_size=4,
        dependents=2,
    )


@pytest.fixture
def berlin_profile():
    """A single user in Berlin; country inferred from the major-city table."""
    return UserLocationProfile(current_location="Berlin")


def _resolve(text, mode=None, profile=None, company=None):
    return resolve_location(
        JobLocationContext(job_location=text, work_mode=mode, company=company), profile
    )


class TestWorkMode:
    """Test work mode normalisation."""

    def test_spellings(self):
        assert normalize_work_mode("On-Site") == "onsite"
        assert normalize_work_mode(" REMOTE ") == "remote"
        assert normalize_work_mode(None) is None
        assert normalize_work_mode("") is None

    def test_invalid_mode_raises(self):
        with pytest.raises(ValueError):
            JobLocationContext(job_location="London", work_mode="telepathic")


class TestUserProfile:
    """Test profile parsing and home-location inference."""

    def test_from_dict(self):
        """Numbers arrive as strings from forms; unknown keys are ignored."""
        profile = UserLocationProfile.from_dict(
            {"current_location": "Berlin", "family_size": "3", "dependents": 1, "theme": "dark"}
        )
        assert profile.family_size == 3
        assert profile.dependents == 1
        assert profile.preferred_currency == "USD"
        assert UserLocationProfile.from_dict(None) is None

    def test_home_country_inferred_from_city(self, berlin_profile):
        assert berlin_profile.home_location() == ("Berlin", "Germany", None)

    def test_home_from_city_state(self):
        profile = UserLocationProfile(current_location="Austin, TX")
        assert profile.home_location() == ("Austin", "United States", "Texas")

    def test_no_location(self):
        assert UserLocationProfile().home_location() is None

    def test_separators_only(self):
        """A blank City/Country form submits ", " and has no home location."""
        profile = UserLocationProfile(current_location=", ")
        assert profile.home_location() is None
        result = _resolve("Remote", "remote", profile)
        assert result.resolved_by != "user_profile"
        assert 0.0 <= result.confidence <= 1.0
        hybrid = _resolve("Hybrid", "hybrid", profile)
        assert hybrid.city.strip(" ,"), "separators must not become a city name"


class TestRemoteResolution:
    """Stage 1: remote jobs."""

    def test_remote_uses_profile(self, denver_profile):
        """Remote job + profile location -> user_profile at 0.9."""
        result = _resolve("Remote", "remote", denver_profile)
        assert result.resolved_by == "user_profile"
        assert result.confidence == 0.9
        assert result.is_remote
        assert (result.city, result.country) == ("Denver", "United States")
        assert "Using your profile location for remote job cost calculations" in result.warnings

    def test_remote_keyword_without_mode(self, denver_profile):
        """Keyword detection works without an explicit work mode."""
        result = _resolve("Work from home", None, denver_profile)
        assert result.resolved_by == "user_profile"

    def test_remote_timezone_hint(self):
        """A timezone in the posting picks its representative city."""
        result = _resolve("Remote (EST)")
        assert (result.city, result.country) == ("New York", "United States")
        assert result.confidence == 0.7
        assert result.resolved_by == "exact_match"
        assert result.is_remote

    def test_remote_country_hint(self):
        result = _resolve("Remote - UK")
        assert (result.city, result.country) == ("London", "United Kingdom")
        assert "Remote job with location preference detected" in result.warnings

    def test_remote_default(self):
        """No profile and no hints -> Remote/Global at 0.5."""
        result = _resolve("Fully remote", "remote")
        assert (result.city, result.country) == ("Remote", "Global")
        assert result.confidence == 0.5
        assert result.resolved_by == "remote_default"

    def test_anywhere_in_is_not_remote(self):
        """'anywhere in Europe' is a regional restriction, not a remote keyword."""
        result = _resolve("Anywhere in Europe")
        assert result.resolved_by == "region_mapping"


class TestHybridResolution:
    """Stage 2: hybrid jobs."""

    def test_hybrid_office_location(self):
        """Hybrid text with a parseable office -> office location, confidence -0.1."""
        result = _resolve("Hybrid - London, UK")
        assert (result.city, result.country) == ("London", "United Kingdom")
        assert not result.is_remote
        assert result.confidence == pytest.approx(0.8)
        assert "Hybrid role - calculations based on office location" in result.warnings

    def test_remote_option_is_hybrid(self):
        """'remote option' is a hybrid phrase, not a remote one."""
        result = _resolve("Seattle (remote option)")
        assert result.city == "Seattle"
        assert not result.is_remote
        assert result.confidence == pytest.approx(0.75)

    def test_hybrid_mode_with_state(self):
        result = _resolve("Austin, TX", "hybrid")
        assert result.state == "Texas"
        assert result.confidence == pytest.approx(0.8)

    def test_hybrid_falls_back_to_profile(self, berlin_profile):
        result = _resolve("Hybrid", None, berlin_profile)
        assert result.resolved_by == "user_profile"
        assert result.confidence == 0.6
        assert result.city == "Berlin"
        assert "Using your location - confirm actual office location" in result.warnings

    def test_hybrid_unclear_keeps_warning(self):
        """Without profile or office the unclear warning survives into the fallback."""
        result = _resolve("Hybrid")
        assert result.resolved_by == "fallback"
        assert result.confidence == 0.2
        assert "Hybrid job location unclear" in result.warnings
        assert "Could not determine location - using global remote" in result.warnings


class TestRegionalResolution:
    """Stage 3: vague and regional text."""

    def test_region_default(self):
        result = _resolve("APAC")
        assert (result.city, result.country) == ("Singapore", "Singapore")
        assert result.confidence == 0.7
        assert result.resolved_by == "region_mapping"

    def test_continent_is_broad(self):
        result = _resolve("Europe")
        assert result.confidence == 0.5
        assert "Very broad location - using major business hub as default" in result.warnings

    def test_user_inside_region(self, berlin_profile):
        """User's country belongs to the region -> user's city at 0.8."""
        result = _resolve("anywhere in Europe", None, berlin_profile)
        assert (result.city, result.country) == ("Berlin", "Germany")
        assert result.confidence == 0.8

    def test_user_outside_region(self, denver_profile):
        result = _resolve("EMEA", None, denver_profile)
        assert result.country == "United Kingdom"
        assert result.confidence == 0.7

    def test_unmapped_vague_text(self):
        """'Multiple Locations' warns and falls through to the terminal fallback."""
        result = _resolve("Multiple Locations", "onsite")
        assert "Location too vague to resolve" in result.warnings
        assert result.resolved_by == "fallback"


class TestStructuredResolution:
    """Stage 4 and 5: comma-separated text and bare cities."""

    def test_city_state_country(self):
        """'Austin, Texas, USA' -> United States, confidence >= 0.8."""
        result = _resolve("Austin, Texas, USA", "onsite")
        assert result.country == "United States"
        assert result.confidence >= 0.8
        assert result.confidence == 0.95
        assert result.state == "Texas"

    def test_city_country(self):
        result = _resolve("London, UK", "onsite")
        assert (result.city, result.country) == ("London", "United Kingdom")
        assert result.confidence == 0.9
        assert result.resolved_by == "exact_match"

    def test_city_state_abbreviation(self):
        result = _resolve("Austin, TX")
        assert result.country == "United States"
        assert result.state == "Texas"
        assert result.confidence == 0.9

    def test_state_beats_same_named_country(self):
        """Georgia the state wins when the city is a US major city."""
        result = _resolve("Atlanta, Georgia")
        assert result.country == "United States"
        assert result.confidence == 0.9

    def test_minor_city_in_state(self):
        result = _resolve("Paris, Texas")
        assert (result.city, result.country) == ("Paris", "United States")
        assert result.confidence == 0.75
        assert result.resolved_by == "fallback"

    def test_minor_city_in_country(self):
        """Unlisted city in a known country -> country's default city at 0.75."""
        result = _resolve("Zwickau, Germany")
        assert result.city == "Berlin"
        assert result.confidence == 0.75
        assert result.resolved_by == "major_city"

    def test_unverified_country(self):
        result = _resolve("Springfield, Atlantis")
        assert (result.city, result.country) == ("Springfield", "Atlantis")
        assert result.confidence == 0.6
        assert "Could not verify country - please confirm location accuracy" in result.warnings

    def test_country_only(self):
        result = _resolve("Germany")
        assert (result.city, result.country) == ("Berlin", "Germany")
        assert result.confidence == 0.8

    def test_bare_city(self):
        result = _resolve("Berlin")
        assert result.country == "Germany"
        assert result.confidence == 0.85
        assert result.alternatives == ()

    def test_ambiguous_city_lists_alternatives(self):
        result = _resolve("Hyderabad")
        assert result.country == "India"
        assert [alt.country for alt in result.alternatives] == ["Pakistan"]
        assert any("several countries" in w for w in result.warnings)

    def test_city_inside_text(self):
        """Stage 5 finds a major city inside looser text."""
        result = _resolve("London office", "onsite")
        assert result.city == "London"
        assert result.confidence == 0.85
        assert result.resolved_by == "major_city"


class TestFallbackResolution:
    """Stage 6 and 7: company headquarters and terminal fallback."""

    def test_company_headquarters(self):
        result = _resolve("", "onsite", company="  GOOGLE ")
        assert (result.city, result.state, result.country) == (
            "Mountain View", "California", "United States"
        )
        assert result.confidence == 0.7
        assert "Location inferred from company headquarters" in result.warnings

    def test_profile_fallback(self, denver_profile):
        result = _resolve("Somewhere Unknown", "onsite", denver_profile)
        assert result.city == "Denver"
        assert result.confidence == 0.3
        assert result.is_remote
        assert "Using your profile location as fallback" in result.warnings

    def test_global_fallback(self):
        result = _resolve("", "onsite")
        assert (result.city, result.country) == ("Remote", "Global")
        assert result.confidence == 0.2
        assert result.resolved_by == "fallback"

    def test_plain_string_context(self):
        """A bare string is accepted as the job location."""
        assert resolve_location("Berlin").country == "Germany"

    def test_confidence_always_in_range(self, denver_profile):
        """Every resolution, validated or not, has confidence in [0, 1]."""
        texts = [
            "", "Remote", "Hybrid", "APAC", "Europe", "Austin, Texas, USA",
            "Springfield, Atlantis", "Nowhere, Foo, Bar", "Hyderabad",
            "Multiple Locations", "Remote (PST)", "Hybrid - Paris, Texas",
        ]
        for text in texts:
            for mode in (None, "remote", "hybrid", "onsite"):
                for profile in (None, denver_profile):
                    result = _resolve(text, mode, profile)
                    validated = validate_location(result)
                    for r in (result, validated):
                        assert 0 <= r.confidence <= 1, f"{text!r}/{mode}: {r.confidence}"
                        assert r.resolved_by in RESOLVED_BY


class TestValidateLocation:
    """Test confidence penalties for data gaps."""

    def test_unknown_country_penalised(self):
        result = _resolve("Springfield, Atlantis")
        validated = validate_location(result)
        assert validated is not result
        assert result.confidence == 0.6, "Original resolution must be untouched"
        assert validated.confidence == pytest.approx(0.3)
        assert (
            "Country not found in our database - cost calculations may be less accurate"
            in validated.warnings
        )

    def test_minor_city_penalised(self):
        validated = validate_location(_resolve("", "onsite", company="Google"))
        assert validated.confidence == pytest.approx(0.6)
        assert "City not found in major cities list - using country averages" in validated.warnings

    def test_major_city_unchanged(self):
        validated = validate_location(_resolve("London, UK"))
        assert validated.confidence == 0.9

    def test_sentinel_not_penalised(self):
        result = _resolve("Remote", "remote")
        validated = validate_location(result)
        assert validated.confidence == result.confidence
        assert validated.warnings == result.warnings

    def test_confidence_floor(self):
        result = LocationResolution(
            city="Nowhere",
            country="Atlantis",
            is_remote=False,
            confidence=0.1,
            original_input="Nowhere, Atlantis",
            resolved_by="fallback",
        )
        assert validate_location(result).confidence == 0.05


class TestLocationAlternatives:
    """Test alternatives for ambiguous bare cities."""

    def test_ambiguous_city(self):
        alternatives = get_location_alternatives("Hyderabad")
        assert [a.country for a in alternatives] == ["India", "Pakistan"]
        assert all(a.confidence == 0.8 for a in alternatives)
        assert all(a.resolved_by == "major_city" for a in alternatives)

    def test_unambiguous_or_qualified(self):
        assert get_location_alternatives("Berlin") == []
        assert get_location_alternatives("Hyderabad, India") == []
        assert get_location_alternatives(JobLocationContext(job_location="")) == []

    def test_to_dict(self):
        data = _resolve("Hyderabad").to_dict()
        assert data["alternatives"][0]["country"] == "Pakistan"
        assert isinstance(data["warnings"], list)

    def test_custom_resolver_instance(self):
        """Resolvers are stateless; a fresh instance agrees with the default."""
        resolver = LocationResolver()
        context = JobLocationContext(job_location="Austin, TX")
        assert resolver.resolve_location(context) == resolve_location(context)


# ═══════════════════════════════════════════════════════════════════════════════
# AFFORDABILITY TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from affordability import (
    calculate_comfort_score,
    calculate_family_multiplier,
    calculate_housing_requirement,
    calculate_savings_potential,
    comfort_level,
    local_cost_baseline,
)


class TestFamilyMultiplier:
    """Test household cost multiplier."""

    def test_single_adult(self):
        assert calculate_family_multiplier(1, 0) == 1.0

    def test_capped(self):
        assert calculate_family_multiplier(10, 5) <= 3.0

    def test_formula(self):
        assert calculate_family_multiplier(2, 1) == pytest.approx(1.3 * 1.4)

    def test_monotone(self):
        """Never decreases as the household grows."""
        previous = 0
        for size in range(1, 8):
            for kids in range(0, 5):
                value = calculate_family_multiplier(size, kids)
                assert 1.0 <= value <= 3.0
            value = calculate_family_multiplier(size, 0)
            assert value >= previous, f"size {size}: {value} < {previous}"
            previous = value

    def test_clamps_bad_input(self):
        assert calculate_family_multiplier(0, -2) == 1.0


class TestComfortScore:
    """Test comfort scoring curve."""

    def test_breakpoints(self):
        assert calculate_comfort_score(40_000, 40_000) == pytest.approx(40.0)
        assert calculate_comfort_score(60_000, 40_000) == pytest.approx(60.0)
        assert calculate_comfort_score(0, 40_000) == 0.0

    def test_capped_at_100(self):
        assert calculate_comfort_score(10_000_000, 40_000) == 100.0

    def test_strictly_increasing(self):
        scores = [calculate_comfort_score(income, 40_000) for income in range(5_000, 150_000, 5_000)]
        assert all(b > a for a, b in zip(scores, scores[1:]))

    def test_family_lowers_score(self):
        single = calculate_comfort_score(80_000, 40_000)
        family = calculate_comfort_score(80_000, 40_000, calculate_family_multiplier(5, 0))
        assert family < single

    def test_invalid_baseline(self):
        with pytest.raises(ValueError):
            calculate_comfort_score(50_000, 0)
        with pytest.raises(ValueError):
            local_cost_baseline(-5)

    def test_levels(self):
        assert comfort_level(10) == "struggling"
        assert comfort_level(39.9) == "tight"
        assert comfort_level(50) == "comfortable"
        assert comfort_level(79) == "thriving"
        assert comfort_level(80) == "luxurious"

    def test_savings_potential(self):
        assert calculate_savings_potential(100_000, 60_000) == pytest.approx(40.0)
        assert calculate_savings_potential(50_000, 80_000) == 0.0
        assert calculate_savings_potential(0, 10_000) == 0.0


class TestHousingRequirement:
    """Test household rent estimates."""

    def test_single_adult_at_baseline(self):
        assert calculate_housing_requirement(1, 100) == pytest.approx(30_000)

    def test_scales_with_rent_index(self):
        assert calculate_housing_requirement(1, 150) == pytest.approx(45_000)

    def test_extra_members_add_quarter(self):
        """Each member beyond the first adds 25% to the base rent."""
        assert calculate_housing_requirement(3, 100) == pytest.approx(45_000)
        assert calculate_housing_requirement(0, 100) == pytest.approx(30_000)

    def test_rejects_non_positive_index(self):
        with pytest.raises(ValueError):
            calculate_housing_requirement(2, 0)


# ═══════════════════════════════════════════════════════════════════════════════
# TAX DATA TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from tax_data import calculate_annual_tax, estimate_tax_rate, get_brackets, tax_table_for


class TestTaxEstimate:
    """Test progressive tax bracket calculations."""

    def test_us_100k(self):
        """US at $100K: 23.77% combined effective rate."""
        rate = estimate_tax_rate(100_000, "United States")
        assert rate == pytest.approx(23.7695, abs=0.01), f"Got {rate:.2f}%"

    def test_non_decreasing(self):
        """Effective rate never falls as income rises."""
        for country in ["United States", "United Kingdom", "Germany", "Canada", "Switzerland"]:
            previous = 0.0
            for income in range(0, 1_000_001, 10_000):
                rate = estimate_tax_rate(income, country)
                assert rate >= previous - 1e-9, f"{country} ${income}: {rate} < {previous}"
                previous = rate

    def test_unknown_country_uses_default(self):
        assert estimate_tax_rate(85_000, "Atlantis") == estimate_tax_rate(85_000, "USA")
        assert tax_table_for("Atlantis") == "United States"

    def test_alias_resolves_table(self):
        assert tax_table_for("UK") == "United Kingdom"
        assert get_brackets("uk") == get_brackets("United Kingdom")

    def test_zero_tax_country(self):
        assert estimate_tax_rate(100_000, "UAE") == 0.0

    def test_edge_incomes(self):
        assert estimate_tax_rate(0, "Germany") == 0.0
        assert estimate_tax_rate(-5, "Germany") == 0.0
        assert estimate_tax_rate(float("nan"), "Germany") == 0.0
        assert estimate_tax_rate(math.inf, "United States") == pytest.approx(45.0)

    def test_always_clipped(self):
        for income in [1, 1_000, 1e7, 1e12]:
            assert 0 <= estimate_tax_rate(income, "Germany") <= 60

    def test_annual_tax(self):
        assert calculate_annual_tax(100_000, "UAE") == 0.0
        assert calculate_annual_tax(100_000, "USA") == pytest.approx(23_769.5, abs=1)


# ═══════════════════════════════════════════════════════════════════════════════
# CURRENCY TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from currency import CurrencyConverter, convert_to_usd, parse_salary_string


class TestSalaryParsing:
    """Test free-text salary parsing."""

    def test_usd_range(self):
        parsed = parse_salary_string("$80,000 - $120,000 per year")
        assert (parsed.min, parsed.max, parsed.currency) == (80_000, 120_000, "USD")
        assert parsed.period == "year"
        assert parsed.midpoint == 100_000

    def test_k_suffix_and_symbol(self):
        parsed = parse_salary_string("€45k-55k")
        assert (parsed.min, parsed.max, parsed.currency) == (45_000, 55_000, "EUR")

    def test_lower_bound_borrows_suffix(self):
        parsed = parse_salary_string("£80-100k")
        assert (parsed.min, parsed.max) == (80_000, 100_000)

    def test_hourly(self):
        parsed = parse_salary_string("$50/hour")
        assert parsed.min == parsed.max == 50 * 2080
        assert parsed.period == "hour"

    def test_monthly_code(self):
        parsed = parse_salary_string("INR 150,000 per month")
        assert parsed.currency == "INR"
        assert parsed.min == 1_800_000

    def test_european_grouping(self):
        assert parse_salary_string("€60.000").min == 60_000
        assert parse_salary_string("CHF 120,000").currency == "CHF"

    def test_percentages_skipped(self):
        parsed = parse_salary_string("10% bonus on $90,000")
        assert parsed.min == 90_000

    def test_no_salary(self):
        for text in ["", "   ", "Competitive", "DOE", "TBD", None]:
            assert parse_salary_string(text) is None, f"{text!r} should not parse"

    def test_annual_salary_with_working_hours(self):
        """Working hours elsewhere in the text must not rescale an annual salary."""
        parsed = parse_salary_string("$120,000 per year, 40 hours per week")
        assert (parsed.min, parsed.max) == (120_000, 120_000)
        assert parsed.period == "year"

        parsed = parse_salary_string("$120,000, 40 hours per week")
        assert (parsed.min, parsed.max, parsed.period) == (120_000, 120_000, "year")

    def test_period_must_follow_amount(self):
        parsed = parse_salary_string("€3,000 a month, 25 days a year holiday")
        assert parsed.period == "month"
        assert parsed.min == 36_000

    def test_annual_suffixes(self):
        assert parse_salary_string("£50k pa").min == 50_000
        assert parse_salary_string("€60.000 p.a.").period == "year"

    def test_period_label_before_amount(self):
        parsed = parse_salary_string("Hourly rate: $45")
        assert parsed.min == 45 * 2080
        assert parsed.period == "hour"

    def test_benefit_quantities_skipped(self):
        """Holiday days and experience years are not salary bounds."""
        parsed = parse_salary_string("$100k + 25 days holiday")
        assert (parsed.min, parsed.max) == (100_000, 100_000)
        parsed = parse_salary_string("5+ years experience, $90,000")
        assert (parsed.min, parsed.max) == (90_000, 90_000)

    def test_retirement_plan_is_not_salary(self):
        assert parse_salary_string("Competitive salary + 401k match") is None
        assert parse_salary_string("Great benefits, 401(k)") is None
        parsed = parse_salary_string("$95,000 + 401k")
        assert (parsed.min, parsed.max) == (95_000, 95_000)

    def test_second_amount_needs_range_separator(self):
        parsed = parse_salary_string("$100,000 plus $5,000 signing bonus")
        assert (parsed.min, parsed.max) == (100_000, 100_000)
        parsed = parse_salary_string("USD 80,000 to USD 100,000")
        assert (parsed.min, parsed.max, parsed.currency) == (80_000, 100_000, "USD")


class TestCurrencyConversion:
    """Test conversion through the stored rates."""

    def test_usd_identity(self):
        assert convert_to_usd(1000, "USD") == 1000

    def test_to_usd(self):
        converter = CurrencyConverter({"USD": 1.0, "EUR": 0.8})
        assert converter.convert_to_usd(80, "eur") == pytest.approx(100)
        assert converter.convert(100, "USD", "EUR") == pytest.approx(80)

    def test_unsupported_currency(self):
        with pytest.raises(ValueError):
            convert_to_usd(100, "XYZ")

    def test_supported_list(self):
        assert "GBP" in CurrencyConverter().supported_currencies()


# ═══════════════════════════════════════════════════════════════════════════════
# COST OF LIVING TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from cost_of_living import CityCostProfile, CostOfLivingProvider, get_city_data


class TestCostOfLiving:
    """Test city lookups with country-average fallback."""

    def test_city_row(self):
        profile = get_city_data("New York", "USA")
        assert profile.cost_of_living_index == 100.0
        assert profile.country == "United States"
        assert profile.avg_annual_net_salary_usd == 5900 * 12

    def test_accent_and_containment(self):
        assert get_city_data("Sao Paulo", "Brazil").city == "São Paulo"
        assert get_city_data("Greater London", "UK").city == "London"

    def test_country_average_fallback(self):
        profile = get_city_data("Springfield", "United States")
        assert profile.is_country_average
        assert profile.cost_of_living_index == pytest.approx(70.4)

    def test_unknown_country(self):
        assert get_city_data("Springfield", "Atlantis") is None

    def test_same_city_name_different_countries(self):
        india = get_city_data("Hyderabad", "India")
        pakistan = get_city_data("Hyderabad", "Pakistan")
        assert india.cost_of_living_index != pakistan.cost_of_living_index

    def test_list_cities(self):
        cities = CostOfLivingProvider().list_cities("Germany")
        assert cities, "Germany should have tracked cities"
        assert all(c.country == "Germany" and c.city for c in cities)


# ═══════════════════════════════════════════════════════════════════════════════
# SALARY CALCULATOR TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from salary_calculator import (
    SalaryCalculator,
    SalaryRange,
    calculate_enhanced_salary,
    determine_effective_location,
)


class StubCostProvider:
    """Returns the same cost index for every city."""

    def __init__(self, index, avg_monthly_net=None, rent_index=None):
        self.index = index
        self.avg_monthly_net = avg_monthly_net
        self.rent_index = rent_index

    def get_city_data(self, city, country):
        return CityCostProfile(
            city=city,
            country=country,
            cost_of_living_index=self.index,
            rent_index=self.rent_index,
            avg_monthly_net_salary_usd=self.avg_monthly_net,
        )


class MissingCostProvider:
    def get_city_data(self, city, country):
        return None


SALARY = "$80,000 - $120,000 per year"


class TestSalaryCalculator:
    """Test the full salary analysis pipeline."""

    @pytest.fixture
    def single(self):
        return UserLocationProfile(current_location="Denver", current_country="United States")

    @pytest.fixture
    def family_of_five(self):
        return UserLocationProfile(
            current_location="Denver", current_country="United States", family_size=5
        )

    def test_empty_salary(self, single):
        assert calculate_enhanced_salary("", "New York", "onsite", single) is None
        assert calculate_enhanced_salary("Competitive", "New York", "onsite", single) is None

    def test_invalid_work_mode(self, single):
        with pytest.raises(ValueError):
            calculate_enhanced_salary(SALARY, "New York", "sometimes", single)

    def test_basic_analysis(self, single):
        """Index 80: comfort and family comfort positive, net below gross."""
        calc = SalaryCalculator(cost_provider=StubCostProvider(80))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", single)
        assert result.comfort_score > 0
        assert result.family_comfort_score > 0
        assert result.net_salary.min < result.normalized_salary.min
        assert result.net_salary.max <= result.normalized_salary.max
        assert result.normalized_salary == SalaryRange(80_000, 120_000)
        assert result.tax_amount == pytest.approx(result.normalized_salary.midpoint * result.tax_estimate / 100)

    def test_cost_of_living_adjustment(self, single):
        """High index compresses purchasing power, low index expands it."""
        expensive = SalaryCalculator(cost_provider=StubCostProvider(180)).calculate_enhanced_salary(
            SALARY, "New York", "onsite", single
        )
        cheap = SalaryCalculator(cost_provider=StubCostProvider(40)).calculate_enhanced_salary(
            SALARY, "New York", "onsite", single
        )
        assert expensive.cost_of_living_adjusted.midpoint < expensive.normalized_salary.midpoint
        assert cheap.cost_of_living_adjusted.midpoint > cheap.normalized_salary.midpoint

    def test_family_comfort_lower(self, single, family_of_five):
        """Same income: a single adult is strictly more comfortable than a family of five."""
        calc = SalaryCalculator(cost_provider=StubCostProvider(80))
        one = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", single)
        five = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", family_of_five)
        assert one.family_comfort_score > five.family_comfort_score
        assert five.family_comfort_score <= five.comfort_score
        assert five.family_adjusted.family_multiplier == pytest.approx(2.2)

    def test_dependents_cost(self):
        profile = UserLocationProfile(family_size=3, dependents=2)
        calc = SalaryCalculator(cost_provider=StubCostProvider(100))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", profile)
        assert result.family_adjusted.cost_per_dependent == pytest.approx(10_000)
        assert result.family_adjusted.dependents_cost == pytest.approx(20_000)

    def test_housing_requirement_uses_rent_index(self):
        profile = UserLocationProfile(family_size=3)
        calc = SalaryCalculator(cost_provider=StubCostProvider(100, rent_index=200))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", profile)
        assert result.family_adjusted.housing_requirement == pytest.approx(90_000)
        expected_share = 90_000 / result.net_salary.midpoint * 100
        assert result.family_adjusted.housing_share == pytest.approx(expected_share)
        assert any("Housing for a household of 3" in w for w in result.warnings)

    def test_housing_falls_back_to_cost_index(self, single):
        calc = SalaryCalculator(cost_provider=StubCostProvider(80))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", single)
        assert result.family_adjusted.housing_requirement == pytest.approx(24_000)
        assert not any("Housing for" in w for w in result.warnings)

    def test_zero_cost_index_raises_value_error(self, single):
        """A broken provider row is an infrastructure fault, reported as ValueError."""
        calc = SalaryCalculator(cost_provider=StubCostProvider(0))
        with pytest.raises(ValueError):
            calc.calculate_enhanced_salary(SALARY, "New York", "onsite", single)

    def test_no_cost_data(self, single):
        calc = SalaryCalculator(cost_provider=MissingCostProvider())
        assert calc.calculate_enhanced_salary(SALARY, "New York", "onsite", single) is None
        assert calculate_enhanced_salary(SALARY, "Springfield, Atlantis", "onsite", single) is None

    def test_onsite_uses_job_location(self, single):
        result = calculate_enhanced_salary(SALARY, "San Francisco, CA", "onsite", single)
        assert result.location.city == "San Francisco"
        assert result.location_data.city == "San Francisco"

    def test_remote_uses_home(self, single):
        result = calculate_enhanced_salary(SALARY, "Remote", "remote", single)
        assert result.location.city == "Denver"
        assert result.location_data.city == "Denver"

    def test_no_location_uses_us_averages(self):
        location = determine_effective_location("", "remote", None)
        assert (location.city, location.country) == ("Remote", "United States")
        assert any("United States averages" in w for w in location.warnings)

        result = calculate_enhanced_salary(SALARY, "", "remote", None)
        assert result.location_data.is_country_average

    def test_foreign_currency(self, single):
        result = calculate_enhanced_salary("£55k-65k", "London, UK", "onsite", single)
        assert result.original_salary.currency == "GBP"
        assert result.normalized_salary.min > 55_000, "GBP is worth more than USD"

    def test_comparisons(self):
        profile = UserLocationProfile(
            expected_salary_min=130_000, expected_salary_max=150_000, current_salary=90_000
        )
        calc = SalaryCalculator(cost_provider=StubCostProvider(100))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", profile)
        assert result.comparison_to_expected.meets_min_expectation is False
        assert result.comparison_to_expected.exceeds_max_expectation is False
        assert "Salary range is below your minimum expectation" in result.warnings
        assert result.comparison_to_current.is_raise
        assert result.comparison_to_current.increase_usd == pytest.approx(10_000)
        assert result.comparison_to_current.increase_pct == pytest.approx(100 / 9)

    def test_no_comparisons_without_profile_data(self, single):
        calc = SalaryCalculator(cost_provider=StubCostProvider(100))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", single)
        assert result.comparison_to_expected is None
        assert result.comparison_to_current is None

    def test_recommendations(self):
        """Low comfort warns; high comfort and relocation produce recommendations."""
        profile = UserLocationProfile(current_location="Denver", open_to_relocation=True)
        rich = SalaryCalculator(cost_provider=StubCostProvider(40)).calculate_enhanced_salary(
            "$300,000", "Remote", "remote", profile
        )
        assert any("build savings" in r for r in rich.recommendations)
        assert any("consider relocating" in r for r in rich.recommendations)

        poor = SalaryCalculator(cost_provider=StubCostProvider(150)).calculate_enhanced_salary(
            "$30,000", "New York", "onsite", None
        )
        assert any("difficult to sustain" in w for w in poor.warnings)
        assert any("high cost-of-living" in w for w in poor.warnings)

    def test_location_warnings_carried(self):
        result = calculate_enhanced_salary(SALARY, "Zwickau, Germany", "onsite", None)
        assert "Using Berlin as default city for Germany" in result.warnings

    def test_relative_to_local_average(self):
        calc = SalaryCalculator(cost_provider=StubCostProvider(100, avg_monthly_net=5_000))
        result = calc.calculate_enhanced_salary(SALARY, "New York", "onsite", None)
        expected = result.net_salary.midpoint / 60_000 * 100
        assert result.relative_to_local_average == pytest.approx(expected)

    def test_to_dict(self, single):
        data = calculate_enhanced_salary(SALARY, "Austin, TX", "onsite", single).to_dict()
        assert data["location"]["state"] == "Texas"
        assert data["normalized_salary"]["midpoint"] == 100_000
        assert 0 <= data["comfort_score"] <= 100


# ═══════════════════════════════════════════════════════════════════════════════
# IMPORT TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from import_data import import_city_costs


class TestImportData:
    """Test CSV validation in the cost-of-living importer."""

    def test_rejects_non_positive_index(self, tmp_path):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text(
            "city,country,cost_of_living_index,rent_index,groceries_index,transport_index,"
            "utilities_index,avg_monthly_net_salary_usd,income_tax_rate,data_source,"
            "sample_size,last_updated\n"
            "Nowhere,Germany,0,1,1,1,1,1000,10,test,1,2024-01-01\n"
        )
        with pytest.raises(ValueError):
            import_city_costs(csv_path)
        assert get_city_data("Berlin", "Germany") is not None, "Existing data must survive"


# ═══════════════════════════════════════════════════════════════════════════════
# API TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    return app.test_client()


class TestApi:
    """Test the Flask endpoints."""

    def test_health(self, client):
        assert client.get("/api/health").get_json()["status"] == "ok"

    def test_resolve(self, client):
        response = client.post(
            "/api/location/resolve",
            json={"job_location": "Austin, Texas, USA", "work_mode": "on-site"},
        )
        assert response.status_code == 200
        resolution = response.get_json()["resolution"]
        assert resolution["country"] == "United States"
        assert resolution["confidence"] == 0.95

    def test_resolve_with_profile(self, client):
        response = client.post(
            "/api/location/resolve",
            json={
                "job_location": "Remote",
                "work_mode": "remote",
                "user_profile": {"current_location": "Berlin"},
            },
        )
        assert response.get_json()["resolution"]["resolved_by"] == "user_profile"

    def test_resolve_bad_work_mode(self, client):
        response = client.post(
            "/api/location/resolve", json={"job_location": "Berlin", "work_mode": "sometimes"}
        )
        assert response.status_code == 400

    def test_resolve_requires_json(self, client):
        response = client.post("/api/location/resolve", data="not json")
        assert response.status_code == 400

    def test_alternatives(self, client):
        data = client.post("/api/location/alternatives", json={"job_location": "Hyderabad"}).get_json()
        assert data["count"] == 2

    def test_salary_analysis(self, client):
        response = client.post(
            "/api/salary/analysis",
            json={
                "salary": SALARY,
                "job_location": "San Francisco, CA",
                "work_mode": "onsite",
                "user_profile": {"family_size": 2},
            },
        )
        analysis = response.get_json()["analysis"]
        assert analysis["family_adjusted"]["family_multiplier"] == pytest.approx(1.3)
        assert analysis["net_salary"]["min"] < analysis["normalized_salary"]["min"]

    def test_salary_analysis_insufficient(self, client):
        data = client.post(
            "/api/salary/analysis",
            json={"salary": "Competitive", "job_location": "Berlin", "work_mode": "onsite"},
        ).get_json()
        assert data["analysis"] is None
        assert data["reason"]

    def test_salary_required(self, client):
        response = client.post("/api/salary/analysis", json={"job_location": "Berlin"})
        assert response.status_code == 400

    def test_bad_profile_number(self, client):
        response = client.post(
            "/api/salary/analysis",
            json={"salary": SALARY, "user_profile": {"family_size": "lots"}},
        )
        assert response.status_code == 400

    def test_cost_of_living(self, client):
        data = client.get("/api/cost-of-living?city=Berlin&country=Germany").get_json()
        assert data["city"] == "Berlin"
        assert client.get("/api/cost-of-living?city=X&country=Atlantis").status_code == 404
        assert client.get("/api/cost-of-living?city=Berlin").status_code == 400

    def test_tax_rate(self, client):
        data = client.get("/api/tax-rate?income=100000&country=UK").get_json()
        assert data["tax_table"] == "United Kingdom"
        assert 0 < data["tax_rate"] < 60
        assert data["annual_tax_usd"] == pytest.approx(100_000 * data["tax_rate"] / 100, abs=1)
        assert data["brackets"][-1]["up_to_usd"] is None, "top bracket is open-ended"
        assert client.get("/api/tax-rate?income=-1").status_code == 400

    def test_cities(self, client):
        data = client.get("/api/cities?country=Germany").get_json()
        assert data["count"] == len(data["cities"]) > 0
        assert all(c["country"] == "Germany" for c in data["cities"])
        assert any(c["city"] == "Berlin" for c in data["cities"])
        assert client.get("/api/cities?country=Atlantis").get_json()["count"] == 0
        everything = client.get("/api/cities").get_json()
        assert everything["count"] > data["count"]

    def test_currencies(self, client):
        data = client.get("/api/currencies").get_json()
        assert "EUR" in data["currencies"]
        assert data["count"] == len(data["currencies"])

    def test_convert(self, client):
        data = client.get("/api/convert?amount=250&from=usd").get_json()
        assert (data["from"], data["to"], data["converted"]) == ("USD", "USD", 250)
        euros = client.get("/api/convert?amount=100&from=USD&to=EUR").get_json()
        assert euros["converted"] > 0
        assert client.get("/api/convert?amount=100&from=XYZ").status_code == 400
        assert client.get("/api/convert?from=USD").status_code == 400

    def test_family_multiplier(self, client):
        data = client.get("/api/family-multiplier?family_size=10&dependents=5").get_json()
        assert data["family_multiplier"] == 3.0
        assert client.get("/api/family-multiplier?family_size=0").status_code == 400

    def test_unknown_route(self, client):
        assert client.get("/api/nope").status_code == 404
