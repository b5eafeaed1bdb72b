"""
Parameter Validation Module
===========================
Declarative validators for Flask request parameters and JSON bodies.

Usage:
    from validators import validate_params, INCOME, TAX_COUNTRY

    # In endpoint:
    params, error = validate_params(request.args, [INCOME, TAX_COUNTRY])
    if error:
        return error
    income = params["income"]
    country = params["country"]

The same validators accept a parsed JSON body (any dict).
"""

from dataclasses import dataclass
from typing import Optional, Union, Set, Tuple, Any
from flask import jsonify

from config import DEFAULT_TAX_COUNTRY, REFERENCE_CURRENCY


@dataclass
class ParamValidator:
    """
    Declarative validator for a single request parameter.

    Attributes:
        name: Parameter name in request.args or the JSON body
        param_type: Expected type (str, int, float)
        default: Default value if not provided (None means optional)
        required: Reject the request when the parameter is missing
        valid_values: Set of valid string values (for str type only)
        min_val: Minimum value (for int/float)
        max_val: Maximum value (for int/float)
        error_msg: Custom error message format
    """
    name: str
    param_type: type
    default: Any = None
    required: bool = False
    valid_values: Optional[Set[str]] = None
    min_val: Optional[Union[int, float]] = None
    max_val: Optional[Union[int, float]] = None
    error_msg: Optional[str] = None

    def validate(self, args: dict) -> Tuple[Optional[Any], Optional[Tuple]]:
        """
        Validate a parameter from request args.

        Args:
            args: Request args dict (request.args) or JSON body

        Returns:
            (value, None) on success
            (None, (jsonify_response, 400)) on error
        """
        raw = args.get(self.name)

        # Handle missing/empty values
        if raw is None or raw == "":
            if self.required:
                return None, (jsonify({"error": f"'{self.name}' is required"}), 400)
            return self.default, None

        # Type conversion
        try:
            if self.param_type == str:
                value = str(raw).strip()
            elif self.param_type == int:
                value = int(raw)
            elif self.param_type == float:
                value = float(raw)
            else:
                value = raw
        except (ValueError, TypeError):
            msg = self.error_msg or f"'{self.name}' must be a valid {self.param_type.__name__}"
            return None, (jsonify({"error": msg}), 400)

        # Validate against allowed values
        if self.valid_values and value.lower() not in self.valid_values:
            options = ", ".join(f"'{v}'" for v in sorted(self.valid_values))
            msg = self.error_msg or f"{self.name} must be one of: {options}"
            return None, (jsonify({"error": msg}), 400)

        # Validate numeric range
        if self.min_val is not None and value < self.min_val:
            msg = self.error_msg or f"{self.name} must be >= {self.min_val}"
            return None, (jsonify({"error": msg}), 400)

        if self.max_val is not None and value > self.max_val:
            msg = self.error_msg or f"{self.name} must be <= {self.max_val}"
            return None, (jsonify({"error": msg}), 400)

        return value, None


def validate_params(
    args: dict,
    validators: list[ParamValidator]
) -> Tuple[dict, Optional[Tuple]]:
    """
    Validate multiple parameters at once.

    Args:
        args: Request args dict (request.args) or JSON body
        validators: List of ParamValidator instances

    Returns:
        (params_dict, None) on success - dict maps param name to validated value
        ({}, error_tuple) on first validation error
    """
    result = {}
    for v in validators:
        value, error = v.validate(args)
        if error:
            return {}, error
        result[v.name] = value
    return result, None


# ═══════════════════════════════════════════════════════════════════════════════
# PREDEFINED VALIDATORS
# Common parameters used across multiple endpoints
# ═══════════════════════════════════════════════════════════════════════════════

WORK_MODE = ParamValidator(
    name="work_mode",
    param_type=str,
    valid_values={"remote", "hybrid", "onsite", "on-site"},
    error_msg="work_mode must be 'remote', 'hybrid', or 'onsite'",
)

JOB_LOCATION = ParamValidator(name="job_location", param_type=str, default="")

COMPANY = ParamValidator(name="company", param_type=str)

JOB_TITLE = ParamValidator(name="job_title", param_type=str)

SALARY = ParamValidator(name="salary", param_type=str, required=True)

CITY = ParamValidator(name="city", param_type=str, default="")

COUNTRY = ParamValidator(name="country", param_type=str, required=True)

TAX_COUNTRY = ParamValidator(name="country", param_type=str, default=DEFAULT_TAX_COUNTRY)

# Optional country filter for listings
CITY_COUNTRY = ParamValidator(name="country", param_type=str)

INCOME = ParamValidator(
    name="income",
    param_type=float,
    required=True,
    min_val=0,
    error_msg="income must be a non-negative number",
)

FAMILY_SIZE = ParamValidator(
    name="family_size",
    param_type=int,
    default=1,
    min_val=1,
    max_val=20,
    error_msg="family_size must be between 1 and 20",
)

DEPENDENTS = ParamValidator(
    name="dependents",
    param_type=int,
    default=0,
    min_val=0,
    max_val=20,
    error_msg="dependents must be between 0 and 20",
)

AMOUNT = ParamValidator(
    name="amount",
    param_type=float,
    required=True,
    min_val=0,
    error_msg="amount must be a non-negative number",
)

FROM_CURRENCY = ParamValidator(name="from", param_type=str, required=True)

TO_CURRENCY = ParamValidator(name="to", param_type=str, default=REFERENCE_CURRENCY)


# ═══════════════════════════════════════════════════════════════════════════════
# JSON BODIES
# ═══════════════════════════════════════════════════════════════════════════════

def require_json_object(data: Any) -> Tuple[Optional[dict], Optional[Tuple]]:
    """Accept a parsed JSON body only when it is an object."""
    if not isinstance(data, dict):
        return None, (jsonify({"error": "Request body must be a JSON object"}), 400)
    return data, None
