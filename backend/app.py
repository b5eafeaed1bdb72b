"""
Flask API for Salary Compass
Resolves job locations and analyses salaries against local living costs
"""

import math

from flask import Flask, jsonify, request
from flask_cors import CORS

from affordability import calculate_family_multiplier
from config import setup_logging, get_logger
from cost_of_living import CostOfLivingProvider, get_city_data
from currency import CurrencyConverter
from location_resolver import (
    JobLocationContext,
    UserLocationProfile,
    get_location_alternatives,
    resolve_location,
    validate_location,
)
from salary_calculator import calculate_enhanced_salary
from tax_data import calculate_annual_tax, estimate_tax_rate, get_brackets, tax_table_for
from validators import (
    validate_params,
    require_json_object,
    AMOUNT,
    CITY,
    CITY_COUNTRY,
    COMPANY,
    COUNTRY,
    DEPENDENTS,
    FAMILY_SIZE,
    FROM_CURRENCY,
    INCOME,
    JOB_LOCATION,
    JOB_TITLE,
    SALARY,
    TAX_COUNTRY,
    TO_CURRENCY,
    WORK_MODE,
)

setup_logging()
logger = get_logger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for the browser extension / frontend

cost_provider = CostOfLivingProvider()
converter = CurrencyConverter()


# ─── Global Error Handlers ───────────────────────────────────────────────────


@app.errorhandler(404)
def not_found(e):
    """Return JSON instead of HTML for 404 errors."""
    return jsonify({"error": "Resource not found"}), 404


@app.errorhandler(ValueError)
def handle_value_error(e):
    """Catch unhandled ValueErrors and return a 400 JSON response."""
    logger.warning("ValueError: %s", e)
    return jsonify({"error": str(e)}), 400


@app.errorhandler(Exception)
def handle_exception(e):
    """Catch-all for unhandled exceptions, returned as a 500 JSON response."""
    logger.exception("Unhandled exception: %s", e)
    return jsonify({"error": "Internal server error"}), 500


def _job_context(data):
    params, error = validate_params(data, [JOB_LOCATION, WORK_MODE, COMPANY, JOB_TITLE])
    if error:
        return None, error
    return JobLocationContext(**params), None


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint"""
    return jsonify({"status": "ok", "message": "Salary Compass API is running"})


# ─── Location ────────────────────────────────────────────────────────────────


@app.route("/api/location/resolve", methods=["POST"])
def resolve():
    """
    Resolve a job location
    Body:
      - job_location: free text ("Austin, TX", "Remote - EST")
      - work_mode: remote | hybrid | onsite
      - company, job_title: optional
      - user_profile: optional profile object
      - validate: apply data-coverage penalties (default true)
    """
    data, error = require_json_object(request.get_json(silent=True))
    if error:
        return error
    context, error = _job_context(data)
    if error:
        return error

    profile = UserLocationProfile.from_dict(data.get("user_profile"))
    resolution = resolve_location(context, profile)
    if data.get("validate", True):
        resolution = validate_location(resolution)

    return jsonify({"resolution": resolution.to_dict()})


@app.route("/api/location/alternatives", methods=["POST"])
def alternatives():
    """Other countries an ambiguous bare city name could refer to"""
    data, error = require_json_object(request.get_json(silent=True))
    if error:
        return error
    context, error = _job_context(data)
    if error:
        return error

    profile = UserLocationProfile.from_dict(data.get("user_profile"))
    results = get_location_alternatives(context, profile)
    return jsonify({"count": len(results), "alternatives": [r.to_dict() for r in results]})


# ─── Salary ──────────────────────────────────────────────────────────────────


@app.route("/api/salary/analysis", methods=["POST"])
def salary_analysis():
    """
    Full salary analysis for a job
    Body:
      - salary: free text ("$80,000 - $120,000 per year")
      - job_location, work_mode: as for /api/location/resolve
      - user_profile: optional profile object
    """
    data, error = require_json_object(request.get_json(silent=True))
    if error:
        return error
    params, error = validate_params(data, [SALARY, JOB_LOCATION, WORK_MODE])
    if error:
        return error

    profile = UserLocationProfile.from_dict(data.get("user_profile"))
    analysis = calculate_enhanced_salary(
        params["salary"], params["job_location"], params["work_mode"], profile
    )
    if analysis is None:
        return jsonify({
            "analysis": None,
            "reason": "Not enough data: no numeric salary or no cost-of-living data for this location",
        })

    return jsonify({"analysis": analysis.to_dict()})


# ─── Reference lookups ───────────────────────────────────────────────────────


@app.route("/api/cost-of-living", methods=["GET"])
def cost_of_living():
    """
    Cost-of-living profile for a city
    Query params:
      - city: city name (empty -> country average)
      - country: country name or alias (required)
    """
    params, error = validate_params(request.args, [CITY, COUNTRY])
    if error:
        return error

    profile = get_city_data(params["city"], params["country"])
    if profile is None:
        return jsonify({"error": "No cost-of-living data for this location"}), 404
    return jsonify(profile.to_dict())


@app.route("/api/cities", methods=["GET"])
def cities():
    """
    Cities with tracked cost-of-living data
    Query params:
      - country: country name or alias (optional, all countries if omitted)
    """
    params, error = validate_params(request.args, [CITY_COUNTRY])
    if error:
        return error

    profiles = cost_provider.list_cities(params["country"])
    return jsonify({"count": len(profiles), "cities": [p.to_dict() for p in profiles]})


@app.route("/api/tax-rate", methods=["GET"])
def tax_rate():
    """
    Effective tax rate
    Query params:
      - income: annual gross income in USD (required)
      - country: country name or alias (default United States)
    """
    params, error = validate_params(request.args, [INCOME, TAX_COUNTRY])
    if error:
        return error

    brackets = [
        {
            "up_to_usd": None if math.isinf(threshold) else round(threshold, 2),
            "rate": round(rate * 100, 2),
        }
        for threshold, rate in get_brackets(params["country"])
    ]

    return jsonify({
        "country": params["country"],
        "tax_table": tax_table_for(params["country"]),
        "income_usd": params["income"],
        "tax_rate": round(estimate_tax_rate(params["income"], params["country"]), 2),
        "annual_tax_usd": round(calculate_annual_tax(params["income"], params["country"]), 2),
        "brackets": brackets,
    })


# ─── Currency ────────────────────────────────────────────────────────────────


@app.route("/api/currencies", methods=["GET"])
def currencies():
    """Currency codes with a stored exchange rate"""
    codes = converter.supported_currencies()
    return jsonify({"count": len(codes), "currencies": codes})


@app.route("/api/convert", methods=["GET"])
def convert():
    """
    Convert an amount between currencies
    Query params:
      - amount: amount to convert (required)
      - from: source currency code (required)
      - to: target currency code (default USD)
    """
    params, error = validate_params(request.args, [AMOUNT, FROM_CURRENCY, TO_CURRENCY])
    if error:
        return error

    return jsonify({
        "amount": params["amount"],
        "from": params["from"].upper(),
        "to": params["to"].upper(),
        "converted": round(converter.convert(params["amount"], params["from"], params["to"]), 2),
    })


@app.route("/api/family-multiplier", methods=["GET"])
def family_multiplier():
    """Household cost multiplier for a family size and number of dependents"""
    params, error = validate_params(request.args, [FAMILY_SIZE, DEPENDENTS])
    if error:
        return error

    return jsonify({
        "family_size": params["family_size"],
        "dependents": params["dependents"],
        "family_multiplier": calculate_family_multiplier(
            params["family_size"], params["dependents"]
        ),
    })


if __name__ == "__main__":
    print("🚀 Starting Salary Compass API...")
    print("📍 API will be available at: http://localhost:5000")
    print("\n📚 Endpoints:")
    print("   GET  /api/health")
    print("   POST /api/location/resolve")
    print("   POST /api/location/alternatives")
    print("   POST /api/salary/analysis")
    print("   GET  /api/cost-of-living?city=<city>&country=<country>")
    print("   GET  /api/cities?country=<country>")
    print("   GET  /api/tax-rate?income=<usd>&country=<country>")
    print("   GET  /api/family-multiplier?family_size=<n>&dependents=<n>")
    print("   GET  /api/currencies")
    print("   GET  /api/convert?amount=<n>&from=<code>&to=<code>")
    print("\n🔗 Test it: http://localhost:5000/api/tax-rate?income=120000&country=Germany\n")

    app.run(debug=True, host="0.0.0.0", port=5000)
