"""
Salary Calculator
=================
Location-aware analysis of a job's advertised salary for a specific user.

Pipeline for calculate_enhanced_salary(salary, job_location, work_mode, profile):
  1. Parse the salary text into an annual range (None if there is no number)
  2. Pick the effective location:
       onsite / hybrid -> the job location, resolved and validated
       remote          -> the user's home location
       neither known   -> Remote / United States averages
  3. Look up cost-of-living data for that city (None if unavailable)
  4. Convert to USD, estimate tax, compute net income
  5. Score comfort for a single adult and for the user's household
  6. Compare with the user's expectations and current salary
  7. Derive recommendations and warnings

Formulas:
  cost_of_living_adjusted = normalized x 100 / index
  net                     = normalized x (1 - tax_rate / 100)
  local_baseline          = BASELINE_ANNUAL_COST_USD x index / 100
  cost_per_dependent      = DEPENDENT_COST_FRACTION x local_baseline
  housing_requirement     = BASE_ANNUAL_RENT_USD x rent_index / 100 x (1 + 0.25 per extra member)

Insufficient data yields None, never an exception. All amounts are annual USD.
"""

from dataclasses import asdict, dataclass, replace
from typing import Optional

from affordability import (
    calculate_comfort_score,
    calculate_family_multiplier,
    calculate_housing_requirement,
    calculate_savings_potential,
    comfort_level,
    local_cost_baseline,
)
from config import (
    ABOVE_LOCAL_AVERAGE_PCT,
    BASELINE_COST_INDEX,
    BELOW_LOCAL_AVERAGE_PCT,
    DEFAULT_REMOTE_COUNTRY,
    DEPENDENT_COST_FRACTION,
    HIGH_COMFORT_SCORE,
    HIGH_COST_INDEX,
    LOW_COMFORT_SCORE,
    LOW_COST_INDEX,
    MAX_HOUSING_SHARE_PCT,
    REMOTE_CITY,
    REMOTE_SENTINEL_COUNTRIES,
    get_logger,
)
from cost_of_living import CityCostProfile, CostOfLivingProvider
from currency import CurrencyConverter, ParsedSalary
from location_resolver import (
    JobLocationContext,
    LocationResolution,
    LocationResolver,
    UserLocationProfile,
    location_resolver,
    normalize_work_mode,
)
from tax_data import estimate_tax_rate

logger = get_logger(__name__)


# ─── Result Types ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SalaryRange:
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def scaled(self, factor: float) -> "SalaryRange":
        return SalaryRange(self.min * factor, self.max * factor)

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "midpoint": self.midpoint}


@dataclass(frozen=True)
class FamilyAdjustment:
    """Household view of the net salary."""

    family_multiplier: float
    cost_per_dependent: float
    dependents_cost: float
    household_cost: float
    housing_requirement: float  # annual rent for the household
    housing_share: float  # housing_requirement as % of net midpoint
    adjusted: SalaryRange  # net income per single-adult equivalent

    def to_dict(self) -> dict:
        data = asdict(self)
        data["adjusted"] = self.adjusted.to_dict()
        return data


@dataclass(frozen=True)
class ExpectedComparison:
    meets_min_expectation: Optional[bool] = None
    exceeds_max_expectation: Optional[bool] = None
    percentage_of_min_expected: Optional[float] = None
    percentage_of_max_expected: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CurrentComparison:
    is_raise: bool
    increase_usd: float
    increase_pct: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EnhancedSalaryAnalysis:
    original_salary: ParsedSalary
    normalized_salary: SalaryRange
    cost_of_living_adjusted: SalaryRange
    net_salary: SalaryRange
    tax_estimate: float
    tax_amount: float
    family_adjusted: FamilyAdjustment
    comfort_score: float
    family_comfort_score: float
    comfort_level: str
    family_comfort_level: str
    purchasing_power: float
    savings_potential: float
    family_savings_potential: float
    relative_to_local_average: Optional[float]
    comparison_to_expected: Optional[ExpectedComparison]
    comparison_to_current: Optional[CurrentComparison]
    recommendations: tuple
    warnings: tuple
    location_data: CityCostProfile
    location: LocationResolution

    def to_dict(self) -> dict:
        return {
            "original_salary": self.original_salary.to_dict(),
            "normalized_salary": self.normalized_salary.to_dict(),
            "cost_of_living_adjusted": self.cost_of_living_adjusted.to_dict(),
            "net_salary": self.net_salary.to_dict(),
            "tax_estimate": round(self.tax_estimate, 2),
            "tax_amount": round(self.tax_amount, 2),
            "family_adjusted": self.family_adjusted.to_dict(),
            "comfort_score": round(self.comfort_score, 1),
            "family_comfort_score": round(self.family_comfort_score, 1),
            "comfort_level": self.comfort_level,
            "family_comfort_level": self.family_comfort_level,
            "purchasing_power": round(self.purchasing_power, 2),
            "savings_potential": round(self.savings_potential, 1),
            "family_savings_potential": round(self.family_savings_potential, 1),
            "relative_to_local_average": (
                round(self.relative_to_local_average, 1)
                if self.relative_to_local_average is not None
                else None
            ),
            "comparison_to_expected": (
                self.comparison_to_expected.to_dict() if self.comparison_to_expected else None
            ),
            "comparison_to_current": (
                self.comparison_to_current.to_dict() if self.comparison_to_current else None
            ),
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
            "location_data": self.location_data.to_dict(),
            "location": self.location.to_dict(),
        }


# ─── Effective Location ──────────────────────────────────────────────────────


def determine_effective_location(
    job_location: Optional[str],
    work_mode: Optional[str],
    user_profile: Optional[UserLocationProfile] = None,
    resolver: Optional[LocationResolver] = None,
) -> LocationResolution:
    """
    Location whose costs and taxes apply to this job.

    Onsite and hybrid jobs use the office; remote jobs use where the user
    lives. When neither can be pinned down, United States averages are used.
    """
    resolver = resolver or location_resolver
    mode = normalize_work_mode(work_mode)

    context = JobLocationContext(job_location=job_location or "", work_mode=mode)
    resolution = resolver.validate_location(resolver.resolve_location(context, user_profile))

    if resolution.country in REMOTE_SENTINEL_COUNTRIES:
        logger.debug("No usable location for %r, using %s averages", job_location, DEFAULT_REMOTE_COUNTRY)
        resolution = replace(
            resolution,
            city=REMOTE_CITY,
            country=DEFAULT_REMOTE_COUNTRY,
            state=None,
            is_remote=True,
            warnings=resolution.warnings
            + (f"No location available - using {DEFAULT_REMOTE_COUNTRY} averages",),
        )
    return resolution


# ─── Comparisons ─────────────────────────────────────────────────────────────


def _compare_to_expected(
    normalized: SalaryRange, profile: UserLocationProfile
) -> Optional[ExpectedComparison]:
    expected_min = profile.expected_salary_min
    expected_max = profile.expected_salary_max
    if not expected_min and not expected_max:
        return None

    comparison = ExpectedComparison()
    if expected_min:
        comparison = replace(
            comparison,
            meets_min_expectation=normalized.max >= expected_min,
            percentage_of_min_expected=normalized.midpoint / expected_min * 100,
        )
    if expected_max:
        comparison = replace(
            comparison,
            exceeds_max_expectation=normalized.min > expected_max,
            percentage_of_max_expected=normalized.midpoint / expected_max * 100,
        )
    return comparison


def _compare_to_current(
    normalized: SalaryRange, profile: UserLocationProfile
) -> Optional[CurrentComparison]:
    current = profile.current_salary
    if not current:
        return None
    increase = normalized.midpoint - current
    return CurrentComparison(
        is_raise=increase > 0,
        increase_usd=increase,
        increase_pct=increase / current * 100,
    )


# ═════════════════════════════════════════════════════════════════════════════
# CALCULATOR
# ═════════════════════════════════════════════════════════════════════════════


class SalaryCalculator:
    """
    Combines location resolution, cost-of-living data, currency conversion
    and tax estimation into one salary analysis.

    Collaborators are injectable; the defaults read the reference database.
    """

    def __init__(
        self,
        resolver: Optional[LocationResolver] = None,
        cost_provider=None,
        converter=None,
    ):
        self.resolver = resolver or location_resolver
        self.cost_provider = cost_provider or CostOfLivingProvider()
        self.converter = converter or CurrencyConverter()

    def calculate_enhanced_salary(
        self,
        salary_text: str,
        job_location_text: Optional[str],
        work_mode: Optional[str],
        user_profile: Optional[UserLocationProfile] = None,
    ) -> Optional[EnhancedSalaryAnalysis]:
        """
        Analyse an advertised salary for this user.

        Returns:
            EnhancedSalaryAnalysis, or None when the salary has no number or
            no cost-of-living data exists for the effective location.

        Raises:
            ValueError: unknown work mode.
        """
        mode = normalize_work_mode(work_mode)
        profile = user_profile or UserLocationProfile()

        parsed = self.converter.parse_salary_string(salary_text)
        if parsed is None:
            logger.debug("No numeric salary in %r", salary_text)
            return None

        location = determine_effective_location(job_location_text, mode, user_profile, self.resolver)

        city_data = self.cost_provider.get_city_data(location.city, location.country)
        if city_data is None:
            logger.info("No cost data for %s, %s; skipping analysis", location.city, location.country)
            return None

        try:
            normalized = SalaryRange(
                self.converter.convert_to_usd(parsed.min, parsed.currency),
                self.converter.convert_to_usd(parsed.max, parsed.currency),
            )
        except ValueError:
            logger.warning("Cannot convert %s salary to USD", parsed.currency)
            return None

        index = city_data.cost_of_living_index
        baseline = local_cost_baseline(index)
        adjusted = normalized.scaled(BASELINE_COST_INDEX / index)

        tax_rate = estimate_tax_rate(normalized.midpoint, location.country)
        net = normalized.scaled(1 - tax_rate / 100)
        tax_amount = normalized.midpoint * tax_rate / 100

        # ─── Household ───
        multiplier = calculate_family_multiplier(profile.family_size, profile.dependents)
        housing = calculate_housing_requirement(profile.family_size, city_data.rent_index or index)
        cost_per_dependent = DEPENDENT_COST_FRACTION * baseline
        family = FamilyAdjustment(
            family_multiplier=multiplier,
            cost_per_dependent=cost_per_dependent,
            dependents_cost=cost_per_dependent * max(profile.dependents or 0, 0),
            household_cost=baseline * multiplier,
            housing_requirement=housing,
            housing_share=housing / net.midpoint * 100,
            adjusted=net.scaled(1 / multiplier),
        )

        comfort = calculate_comfort_score(net.midpoint, baseline)
        family_comfort = calculate_comfort_score(net.midpoint, baseline, multiplier)

        local_average = city_data.avg_annual_net_salary_usd
        relative = net.midpoint / local_average * 100 if local_average else None

        expected = _compare_to_expected(normalized, profile)
        current = _compare_to_current(normalized, profile)

        recommendations, warnings = self._advise(
            location, city_data, profile, mode, comfort, family, family_comfort, relative, expected
        )

        analysis = EnhancedSalaryAnalysis(
            original_salary=parsed,
            normalized_salary=normalized,
            cost_of_living_adjusted=adjusted,
            net_salary=net,
            tax_estimate=tax_rate,
            tax_amount=tax_amount,
            family_adjusted=family,
            comfort_score=comfort,
            family_comfort_score=family_comfort,
            comfort_level=comfort_level(comfort),
            family_comfort_level=comfort_level(family_comfort),
            purchasing_power=net.midpoint * BASELINE_COST_INDEX / index,
            savings_potential=calculate_savings_potential(net.midpoint, baseline),
            family_savings_potential=calculate_savings_potential(net.midpoint, family.household_cost),
            relative_to_local_average=relative,
            comparison_to_expected=expected,
            comparison_to_current=current,
            recommendations=tuple(recommendations),
            warnings=tuple(warnings),
            location_data=city_data,
            location=location,
        )
        logger.debug(
            "Salary %r in %s, %s: net %.0f, comfort %.1f",
            salary_text,
            location.city,
            location.country,
            net.midpoint,
            comfort,
        )
        return analysis

    @staticmethod
    def _advise(location, city_data, profile, mode, comfort, family, family_comfort, relative, expected):
        """Threshold-driven recommendations and warnings."""
        place = city_data.city or city_data.country
        index = city_data.cost_of_living_index
        recommendations: list[str] = []
        warnings: list[str] = list(location.warnings)

        if comfort < LOW_COMFORT_SCORE:
            warnings.append(f"This salary may be difficult to sustain comfortable living in {place}")
        elif comfort >= HIGH_COMFORT_SCORE:
            recommendations.append(
                f"Strong salary for {place} - good opportunity to build savings and financial security"
            )

        household = max(profile.family_size or 1, 1)
        if (household > 1 or (profile.dependents or 0) > 0) and family_comfort < LOW_COMFORT_SCORE:
            warnings.append(f"May be tight for a household of {household} in {place}")
        if family.housing_share > MAX_HOUSING_SHARE_PCT:
            warnings.append(
                f"Housing for a household of {household} in {place} may take "
                f"{family.housing_share:.0f}% of net pay"
            )

        if index >= HIGH_COST_INDEX:
            warnings.append(f"{place} is a high cost-of-living area (index {index:.0f})")
        elif index <= LOW_COST_INDEX:
            recommendations.append(f"Low cost of living in {place} stretches this salary further")

        if relative is not None:
            if relative >= ABOVE_LOCAL_AVERAGE_PCT:
                recommendations.append(
                    f"Net pay is {relative:.0f}% of the local average in {place}"
                )
            elif relative < BELOW_LOCAL_AVERAGE_PCT:
                warnings.append(f"Net pay is below the local average in {place} ({relative:.0f}%)")

        if expected is not None and expected.meets_min_expectation is False:
            warnings.append("Salary range is below your minimum expectation")

        if (mode == "remote" or location.is_remote) and profile.open_to_relocation:
            recommendations.append(
                "Remote role - consider relocating to a lower cost-of-living area to stretch this salary further"
            )

        return recommendations, warnings


# ─── Module-level singleton ──────────────────────────────────────────────────

_default_calculator: Optional[SalaryCalculator] = None


def calculate_enhanced_salary(salary_text, job_location_text, work_mode, user_profile=None):
    """Salary analysis through a calculator backed by the reference database."""
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = SalaryCalculator()
    return _default_calculator.calculate_enhanced_salary(
        salary_text, job_location_text, work_mode, user_profile
    )


# ═════════════════════════════════════════════════════════════════════════════
# VALIDATION
# ═════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    family = UserLocationProfile(
        current_location="Denver",
        current_country="United States",
        family_size=4,
        dependents=2,
        expected_salary_min=90_000,
        open_to_relocation=True,
    )
    cases = [
        ("$80,000 - $120,000 per year", "San Francisco, CA", "onsite"),
        ("£55k-65k", "Hybrid - London, UK", "hybrid"),
        ("€60.000", "Berlin", "onsite"),
        ("$150k", "Remote (US)", "remote"),
        ("Competitive", "New York", "onsite"),
    ]

    print(f"{'Salary':<30} {'Location':<24} {'Net':>10} {'Comfort':>8} {'Family':>7}")
    print("-" * 84)
    for salary, job_location, mode in cases:
        result = calculate_enhanced_salary(salary, job_location, mode, family)
        if result is None:
            print(f"{salary:<30} {job_location:<24} {'n/a':>10}")
            continue
        where = f"{result.location.city}, {result.location.country}"
        print(
            f"{salary:<30} {where:<24} ${result.net_salary.midpoint:>9,.0f} "
            f"{result.comfort_score:>8.1f} {result.family_comfort_score:>7.1f}"
        )
