"""
Household Affordability Utilities
=================================
Pure household math shared by the salary calculator and the API:

  - family multiplier: how much more a household costs than a single adult
  - local cost baseline: annual spend of one adult at a given cost index
  - comfort score: 0-100 rating of net income against the local baseline
  - savings potential: share of net income left after living costs
  - housing requirement: annual rent a household needs at a rent index
"""

import math

from config import (
    BASE_ANNUAL_RENT_USD,
    BASELINE_ANNUAL_COST_USD,
    BASELINE_COST_INDEX,
    DEPENDENT_WEIGHT,
    FAMILY_MEMBER_WEIGHT,
    HOUSING_MEMBER_WEIGHT,
    MAX_FAMILY_MULTIPLIER,
)

# (income / baseline ratio, score) breakpoints, linear in between
COMFORT_CURVE = [
    (0.0, 0.0),
    (0.75, 20.0),
    (1.0, 40.0),
    (1.5, 60.0),
    (2.25, 80.0),
    (3.0, 95.0),
]
# Score gained per unit of ratio beyond the last breakpoint
COMFORT_TAIL_SLOPE = 5.0

COMFORT_LEVELS = [
    (20, "struggling"),
    (40, "tight"),
    (60, "comfortable"),
    (80, "thriving"),
]
TOP_COMFORT_LEVEL = "luxurious"


def calculate_family_multiplier(family_size: int, dependents: int) -> float:
    """
    Household cost relative to a single adult.

    (1 + 0.3 per extra member) x (1 + 0.4 per dependent), capped at 3.0.
    Sizes below 1 count as 1 and negative dependents as 0.
    """
    size = max(int(family_size or 1), 1)
    kids = max(int(dependents or 0), 0)
    multiplier = (1 + FAMILY_MEMBER_WEIGHT * (size - 1)) * (1 + DEPENDENT_WEIGHT * kids)
    return min(multiplier, MAX_FAMILY_MULTIPLIER)


def local_cost_baseline(cost_of_living_index: float) -> float:
    """Annual USD a single adult needs to live comfortably at this cost index."""
    if cost_of_living_index is None or not cost_of_living_index > 0:
        raise ValueError(f"Cost-of-living index must be positive, got {cost_of_living_index}")
    return BASELINE_ANNUAL_COST_USD * cost_of_living_index / BASELINE_COST_INDEX


def calculate_comfort_score(
    net_income: float, local_baseline: float, multiplier: float = 1.0
) -> float:
    """
    Rate annual net income against the local cost baseline.

    The income is first divided by the household multiplier, so a larger
    family needs proportionally more to reach the same score.

    Returns:
        Score in [0, 100], strictly increasing in income below the cap.
    """
    if not local_baseline > 0:
        raise ValueError(f"Local baseline must be positive, got {local_baseline}")
    if not multiplier > 0:
        raise ValueError(f"Household multiplier must be positive, got {multiplier}")
    if net_income is None or math.isnan(net_income) or net_income <= 0:
        return 0.0

    ratio = net_income / multiplier / local_baseline

    last_ratio, last_score = COMFORT_CURVE[-1]
    if ratio >= last_ratio:
        return min(last_score + COMFORT_TAIL_SLOPE * (ratio - last_ratio), 100.0)

    for (x0, y0), (x1, y1) in zip(COMFORT_CURVE, COMFORT_CURVE[1:]):
        if ratio <= x1:
            return y0 + (y1 - y0) * (ratio - x0) / (x1 - x0)
    return last_score


def comfort_level(score: float) -> str:
    """Label for a comfort score."""
    for upper, label in COMFORT_LEVELS:
        if score < upper:
            return label
    return TOP_COMFORT_LEVEL


def calculate_savings_potential(net_income: float, living_cost: float) -> float:
    """Percent of net income left after living costs, in [0, 100]."""
    if not net_income or net_income <= 0:
        return 0.0
    remaining = (net_income - max(living_cost, 0.0)) / net_income * 100
    return min(max(remaining, 0.0), 100.0)


def calculate_housing_requirement(family_size: int, rent_index: float) -> float:
    """
    Annual USD rent a household needs at this rent index.

    BASE_ANNUAL_RENT_USD scaled by rent_index / 100, plus 25% per household
    member beyond the first.
    """
    if rent_index is None or not rent_index > 0:
        raise ValueError(f"Rent index must be positive, got {rent_index}")
    size = max(int(family_size or 1), 1)
    base_rent = BASE_ANNUAL_RENT_USD * rent_index / BASELINE_COST_INDEX
    return base_rent * (1 + HOUSING_MEMBER_WEIGHT * (size - 1))
