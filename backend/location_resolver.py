"""
Location Resolver
=================
Turns a free-text job location ("Austin, TX", "Remote - EST", "Hybrid London",
"APAC") plus the work arrangement and an optional user profile into a single
canonical location with a confidence score.

Resolution runs an ordered list of stages; the first stage that produces a
result wins:

  1. remote      - remote work mode or keyword -> user's home, text hints, or Remote/Global
  2. hybrid      - hybrid work mode or keyword -> office location, else user's home
  3. vague       - whole text is a regional keyword ("europe", "nordics")
  4. structured  - "City", "Country", "City, Country", "City, State, Country"
  5. major city  - a major city named anywhere in the text ("London office")
  6. company HQ  - known employer headquarters
  7. fallback    - user's home (0.3) or Remote/Global (0.2)

Advisory warnings collected by earlier stages are carried into the result of
whichever stage finishes. Confidence is always in [0, 1].

Main entry points:
    resolve_location(job_context, user_profile=None) -> LocationResolution
    validate_location(resolution) -> LocationResolution
    get_location_alternatives(job_context, user_profile=None) -> list[LocationResolution]
"""

import re
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Optional, Union

from config import (
    GLOBAL_COUNTRY,
    MAX_ALTERNATIVES,
    MIN_CONFIDENCE,
    REMOTE_CITY,
    REMOTE_SENTINEL_COUNTRIES,
    get_logger,
)
from reference_data import (
    canonical_city_name,
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

logger = get_logger(__name__)

WORK_MODES = ("remote", "hybrid", "onsite")

# Spellings accepted for each work mode
_WORK_MODE_ALIASES = {
    "remote": "remote",
    "hybrid": "hybrid",
    "onsite": "onsite",
    "on-site": "onsite",
    "on site": "onsite",
    "on_site": "onsite",
    "office": "onsite",
    "in-office": "onsite",
    "in office": "onsite",
}

RESOLVED_BY = (
    "exact_match",
    "region_mapping",
    "major_city",
    "user_profile",
    "fallback",
    "remote_default",
)


# ─── Keyword Patterns ────────────────────────────────────────────────────────

# Phrases that mean "some remote, some office"; removed before remote detection
_HYBRID_RE = re.compile(
    r"\b(hybrid|flexible location|flexible|part[- ]remote|partial(ly)? remote|"
    r"remote options?|remote optional|office optional|mixed|"
    r"\d\s*days?\s*(a week\s*)?(in|from)\s*(the\s*)?office)\b",
    re.IGNORECASE,
)

_REMOTE_RE = re.compile(
    r"\b(remote(-first)?|fully remote|worldwide|globally|global|virtual|distributed|"
    r"work from home|wfh|telecommute|telecommuting|home office|location independent|"
    r"nomad friendly|work from anywhere|anywhere(?! in\b))\b"
)

# Leading/trailing words around a region name: "anywhere in Europe", "EU only"
_FILLER_PREFIX_RE = re.compile(
    r"^((anywhere|based|located|must be|must be based|must be located|only)\s+)?"
    r"(in|within|across|throughout)\s+(the\s+)?"
)
_FILLER_SUFFIX_RE = re.compile(r"\s+(only|based|region|area|wide)$")

_VAGUE_UNMAPPED = {
    "international",
    "multiple locations",
    "various locations",
    "several locations",
    "multiple",
    "nationwide",
    "tbd",
    "to be determined",
}


def normalize_work_mode(work_mode: Optional[str]) -> Optional[str]:
    """Canonical work mode ("remote", "hybrid", "onsite") or None if unset."""
    if work_mode is None:
        return None
    key = " ".join(str(work_mode).lower().split())
    if not key:
        return None
    if key not in _WORK_MODE_ALIASES:
        raise ValueError(f"Invalid work mode {work_mode!r}; expected one of {WORK_MODES}")
    return _WORK_MODE_ALIASES[key]


# ─── Data Types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LocationResolution:
    """A resolved location and how it was obtained."""

    city: str
    country: str
    is_remote: bool
    confidence: float
    original_input: str
    resolved_by: str
    state: Optional[str] = None
    alternatives: tuple = ()
    warnings: tuple = ()

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "country": self.country,
            "state": self.state,
            "is_remote": self.is_remote,
            "confidence": self.confidence,
            "original_input": self.original_input,
            "resolved_by": self.resolved_by,
            "alternatives": [alt.to_dict() for alt in self.alternatives],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class JobLocationContext:
    job_location: str = ""
    work_mode: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "job_location", (self.job_location or "").strip())
        object.__setattr__(self, "work_mode", normalize_work_mode(self.work_mode))


def _optional_number(value, cast=float):
    if value is None or value == "":
        return None
    return cast(value)


@dataclass(frozen=True)
class UserLocationProfile:
    """
    Where the user lives and what their household looks like.

    Expected and current salaries are annual USD amounts.
    """

    current_location: Optional[str] = None
    current_country: Optional[str] = None
    current_state: Optional[str] = None
    family_size: int = 1
    dependents: int = 0
    marital_status: Optional[str] = None
    expected_salary_min: Optional[float] = None
    expected_salary_max: Optional[float] = None
    current_salary: Optional[float] = None
    preferred_currency: str = "USD"
    open_to_relocation: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["UserLocationProfile"]:
        """Build a profile from a JSON body; unknown keys are ignored."""
        if not data:
            return None
        if not isinstance(data, dict):
            raise ValueError("user_profile must be an object")
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        for key in ("family_size", "dependents"):
            if values.get(key) is not None:
                values[key] = int(values[key])
            else:
                values.pop(key, None)
        for key in ("expected_salary_min", "expected_salary_max", "current_salary"):
            values[key] = _optional_number(values.get(key))
        if "open_to_relocation" in values:
            values["open_to_relocation"] = bool(values["open_to_relocation"])
        if not values.get("preferred_currency"):
            values.pop("preferred_currency", None)
        return cls(**values)

    def home_location(self) -> Optional[tuple[str, str, Optional[str]]]:
        """
        (city, country, state) of the user's home, or None.

        The country comes from the profile, else from a trailing
        "City, Country" / "City, State" segment, else from the major-city
        table ("Berlin" -> Germany).
        """
        location = (self.current_location or "").strip()
        if not location:
            return None

        parts = [p.strip() for p in location.split(",") if p.strip()]
        if not parts:
            return None
        city = parts[0]
        state = self.current_state

        if self.current_country:
            country = find_country(self.current_country)
            return city, country.name if country else self.current_country, state

        if len(parts) > 1:
            country = find_country(parts[-1], partial=False)
            if country:
                return city, country.name, state or (parts[1] if len(parts) > 2 else None)
            subdivision = find_subdivision(parts[-1])
            if subdivision:
                return city, subdivision.country.name, state or subdivision.name

        countries = find_major_city_countries(city)
        if countries:
            return canonical_city_name(city, countries[0]), countries[0].name, state
        return None

    def home_country(self):
        """Reference CountryProfile for the user's home, or None."""
        home = self.home_location()
        return find_country(home[1]) if home else None


# ─── Resolution Context ──────────────────────────────────────────────────────


def _clamp(confidence: float, floor: float = 0.0) -> float:
    return round(min(max(confidence, floor), 1.0), 4)


@dataclass
class _ResolutionContext:
    """Per-call state threaded through the stages."""

    text: str
    work_mode: Optional[str]
    company: Optional[str]
    user_profile: Optional[UserLocationProfile]
    warnings: list = field(default_factory=list)

    @property
    def folded(self) -> str:
        return fold(self.text)

    def result(
        self,
        city: str,
        country: str,
        confidence: float,
        resolved_by: str,
        *,
        is_remote: bool = False,
        state: Optional[str] = None,
        warnings=(),
        alternatives=(),
    ) -> LocationResolution:
        """Build a resolution carrying every warning collected so far."""
        return LocationResolution(
            city=city,
            country=country,
            state=state,
            is_remote=is_remote,
            confidence=_clamp(confidence),
            original_input=self.text,
            resolved_by=resolved_by,
            alternatives=tuple(alternatives),
            warnings=tuple(self.warnings) + tuple(warnings),
        )


Stage = Callable[[_ResolutionContext], Optional[LocationResolution]]


# ═════════════════════════════════════════════════════════════════════════════
# RESOLVER
# ═════════════════════════════════════════════════════════════════════════════


class LocationResolver:
    """Deterministic, stage-based resolver over the reference dataset."""

    def __init__(self):
        self._stages: list[tuple[str, Stage]] = [
            ("remote", self._resolve_remote),
            ("hybrid", self._resolve_hybrid),
            ("vague", self._resolve_vague),
            ("structured", self._resolve_structured),
            ("major_city", self._resolve_major_city),
            ("company", self._resolve_company),
            ("fallback", self._resolve_fallback),
        ]

    # ─── Public API ──────────────────────────────────────────────────────────

    def resolve_location(
        self,
        job_context: Union[JobLocationContext, str],
        user_profile: Optional[UserLocationProfile] = None,
    ) -> LocationResolution:
        """Resolve a job location to a single canonical city and country."""
        if isinstance(job_context, str):
            job_context = JobLocationContext(job_location=job_context)

        ctx = _ResolutionContext(
            text=job_context.job_location,
            work_mode=job_context.work_mode,
            company=job_context.company,
            user_profile=user_profile,
        )
        for name, stage in self._stages:
            resolution = stage(ctx)
            if resolution is not None:
                logger.debug(
                    "Resolved %r at stage %s -> %s, %s (%.2f)",
                    ctx.text,
                    name,
                    resolution.city,
                    resolution.country,
                    resolution.confidence,
                )
                return resolution

        # The fallback stage always answers
        raise RuntimeError("Location resolution stages returned no result")

    def validate_location(self, resolution: LocationResolution) -> LocationResolution:
        """
        Return a copy of `resolution` with confidence lowered for data gaps.

        Unknown country: -0.2. On-site city that is not a major city of its
        country (or whose country is unknown): a further -0.1. Never below
        MIN_CONFIDENCE.
        """
        warnings = list(resolution.warnings)
        confidence = resolution.confidence

        country = find_country(resolution.country)
        is_sentinel = resolution.country in REMOTE_SENTINEL_COUNTRIES

        if country is None and not is_sentinel:
            warnings.append(
                "Country not found in our database - cost calculations may be less accurate"
            )
            confidence -= 0.2

        if not resolution.is_remote and not is_sentinel:
            if country is None or not is_major_city(resolution.city, country):
                warnings.append("City not found in major cities list - using country averages")
                confidence -= 0.1

        return replace(
            resolution,
            confidence=_clamp(confidence, MIN_CONFIDENCE),
            warnings=tuple(warnings),
        )

    def get_location_alternatives(
        self,
        job_context: Union[JobLocationContext, str],
        user_profile: Optional[UserLocationProfile] = None,
    ) -> list[LocationResolution]:
        """Every country a bare city name could refer to, when there is more than one."""
        if isinstance(job_context, str):
            job_context = JobLocationContext(job_location=job_context)

        text = job_context.job_location
        if not text or "," in text:
            return []

        countries = find_major_city_countries(text)
        if len(countries) < 2:
            return []

        return [
            LocationResolution(
                city=canonical_city_name(text, country),
                country=country.name,
                is_remote=False,
                confidence=0.8,
                original_input=text,
                resolved_by="major_city",
            )
            for country in countries[:MAX_ALTERNATIVES]
        ]

    # ─── Stage 1: remote ─────────────────────────────────────────────────────

    @staticmethod
    def _is_remote(ctx: _ResolutionContext) -> bool:
        if ctx.work_mode == "remote":
            return True
        without_hybrid = _HYBRID_RE.sub(" ", ctx.folded)
        return _REMOTE_RE.search(without_hybrid) is not None

    def _resolve_remote(self, ctx: _ResolutionContext) -> Optional[LocationResolution]:
        if not self._is_remote(ctx):
            return None

        home = ctx.user_profile.home_location() if ctx.user_profile else None
        if home:
            city, country, state = home
            return ctx.result(
                city,
                country,
                0.9,
                "user_profile",
                is_remote=True,
                state=state,
                warnings=["Using your profile location for remote job cost calculations"],
            )

        hint = self._location_hint(ctx.text)
        if hint:
            city, country = hint
            return ctx.result(
                city,
                country,
                0.7,
                "exact_match",
                is_remote=True,
                warnings=["Remote job with location preference detected"],
            )

        return ctx.result(
            REMOTE_CITY,
            GLOBAL_COUNTRY,
            0.5,
            "remote_default",
            is_remote=True,
            warnings=["Add your location to profile for more accurate cost analysis"],
        )

    @staticmethod
    def _location_hint(text: str) -> Optional[tuple[str, str]]:
        """Timezone abbreviation or country mentioned in a remote posting."""
        for token in re.split(r"[^\w]+", fold(text)):
            tz = timezone_location(token) if token else None
            if tz:
                city, country = tz
                return city, country.name

        countries = find_countries_in_text(text)
        if countries:
            return countries[0].default_city, countries[0].name
        return None

    # ─── Stage 2: hybrid ─────────────────────────────────────────────────────

    def _resolve_hybrid(self, ctx: _ResolutionContext) -> Optional[LocationResolution]:
        if ctx.work_mode != "hybrid" and not _HYBRID_RE.search(ctx.folded):
            return None

        office_text = self._strip_hybrid_keywords(ctx.text)
        if office_text:
            office = self._parse_structured(ctx, office_text) or self._match_major_city(
                ctx, office_text
            )
            if office:
                return replace(
                    office,
                    is_remote=False,
                    confidence=_clamp(office.confidence - 0.1, 0.5),
                    warnings=office.warnings
                    + ("Hybrid role - calculations based on office location",),
                )

        profile = ctx.user_profile
        if profile and (profile.current_location or "").strip(" ,"):
            home = profile.home_location()
            city, country, state = home or (
                profile.current_location,
                profile.current_country or "Unknown",
                profile.current_state,
            )
            return ctx.result(
                city,
                country,
                0.6,
                "user_profile",
                state=state,
                warnings=["Using your location - confirm actual office location"],
            )

        ctx.warnings.append("Hybrid job location unclear")
        return self._resolve_fallback(ctx)

    @staticmethod
    def _strip_hybrid_keywords(text: str) -> str:
        """Remove hybrid phrases but keep the comma structure of the location."""
        cleaned = _HYBRID_RE.sub(" ", text)
        # Separators only; hyphenated names ("Winston-Salem") survive
        cleaned = re.sub(r"[()\[\]|/]+|(?<!\w)[-–]+|[-–]+(?!\w)", " ", cleaned)
        parts = [" ".join(part.split()) for part in cleaned.split(",")]
        return ", ".join(part for part in parts if part)

    # ─── Stage 3: vague / regional ───────────────────────────────────────────

    def _resolve_vague(self, ctx: _ResolutionContext) -> Optional[LocationResolution]:
        core = self._strip_filler(ctx.folded)
        if not core:
            return None

        region = find_region_default(core)
        if region is None:
            if core in _VAGUE_UNMAPPED:
                ctx.warnings.append("Location too vague to resolve")
            return None

        profile = ctx.user_profile
        home_country = profile.home_country() if profile else None
        if home_country is not None and region.includes(home_country):
            home = profile.home_location()
            return ctx.result(
                home[0] if home else region.city,
                home_country.name,
                0.8,
                "region_mapping",
                state=profile.current_state,
                warnings=["Using your location within the specified region"],
            )

        if region.level == "continent":
            return ctx.result(
                region.city,
                region.country.name,
                0.5,
                "region_mapping",
                warnings=["Very broad location - using major business hub as default"],
            )

        return ctx.result(
            region.city,
            region.country.name,
            0.7,
            "region_mapping",
            warnings=[f"Defaulting to major city in {region.country.name}"],
        )

    @staticmethod
    def _strip_filler(folded: str) -> str:
        core = folded.strip(" .!-()")
        core = _FILLER_PREFIX_RE.sub("", core)
        core = _FILLER_SUFFIX_RE.sub("", core)
        return core.strip(" .!-()")

    # ─── Stage 4: structured "City, State, Country" ──────────────────────────

    def _resolve_structured(self, ctx: _ResolutionContext) -> Optional[LocationResolution]:
        return self._parse_structured(ctx, ctx.text)

    def _parse_structured(
        self, ctx: _ResolutionContext, text: str
    ) -> Optional[LocationResolution]:
        parts = [part.strip() for part in (text or "").split(",") if part.strip()]
        if not parts:
            return None
        if len(parts) == 1:
            return self._parse_single(ctx, parts[0])
        if len(parts) == 2:
            return self._parse_city_region(ctx, parts[0], parts[1])
        return self._parse_city_state_country(ctx, parts[0], parts[1], parts[-1])

    def _parse_single(self, ctx: _ResolutionContext, single: str) -> Optional[LocationResolution]:
        country = find_country(single, partial=False)
        if country:
            return ctx.result(country.default_city, country.name, 0.8, "exact_match")

        countries = find_major_city_countries(single)
        if countries:
            return self._city_result(ctx, canonical_city_name(single, countries[0]), countries)

        subdivision = find_subdivision(single)
        if subdivision:
            return ctx.result(
                subdivision.name,
                subdivision.country.name,
                0.6,
                "fallback",
                state=subdivision.name,
                warnings=[f"Only a state or province given - using {subdivision.country.name} averages"],
            )

        country = find_country(single)
        if country:
            return ctx.result(country.default_city, country.name, 0.8, "exact_match")
        return None

    def _parse_city_region(
        self, ctx: _ResolutionContext, city: str, region: str
    ) -> LocationResolution:
        exact_country = find_country(region, partial=False)
        subdivision = find_subdivision(region)

        if exact_country and is_major_city(city, exact_country):
            return ctx.result(city, exact_country.name, 0.9, "exact_match")

        if subdivision and is_major_city(city, subdivision.country):
            return ctx.result(
                city, subdivision.country.name, 0.9, "exact_match", state=subdivision.name
            )

        if exact_country:
            return self._default_city_result(ctx, exact_country, 0.75)

        if subdivision:
            return ctx.result(
                city,
                subdivision.country.name,
                0.75,
                "fallback",
                state=subdivision.name,
                warnings=[
                    f"{city} is not a major city - using {subdivision.country.name} averages"
                ],
            )

        country = find_country(region)
        if country:
            if is_major_city(city, country):
                return ctx.result(city, country.name, 0.9, "exact_match")
            return self._default_city_result(ctx, country, 0.75)

        return ctx.result(
            city,
            region,
            0.6,
            "fallback",
            warnings=["Could not verify country - please confirm location accuracy"],
        )

    def _parse_city_state_country(
        self, ctx: _ResolutionContext, city: str, state: str, country_text: str
    ) -> LocationResolution:
        country = find_country(country_text)
        if country:
            if is_major_city(city, country):
                return ctx.result(city, country.name, 0.95, "exact_match", state=state)
            return self._default_city_result(ctx, country, 0.8, state=state)

        return ctx.result(
            city,
            country_text,
            0.6,
            "fallback",
            state=state,
            warnings=["Could not verify country - please confirm location accuracy"],
        )

    @staticmethod
    def _default_city_result(ctx, country, confidence, state=None) -> LocationResolution:
        return ctx.result(
            country.default_city,
            country.name,
            confidence,
            "major_city",
            state=state,
            warnings=[f"Using {country.default_city} as default city for {country.name}"],
        )

    # ─── Stage 5: major city anywhere in the text ────────────────────────────

    def _resolve_major_city(self, ctx: _ResolutionContext) -> Optional[LocationResolution]:
        return self._match_major_city(ctx, ctx.text)

    def _match_major_city(
        self, ctx: _ResolutionContext, text: str
    ) -> Optional[LocationResolution]:
        match = find_major_city_in_text(text)
        if match is None:
            return None
        city, _ = match
        return self._city_result(ctx, city, find_major_city_countries(city))

    def _city_result(self, ctx: _ResolutionContext, city: str, countries: list) -> LocationResolution:
        """Major-city result; a city shared by several countries lists the others."""
        chosen = countries[0]
        alternatives = [
            LocationResolution(
                city=canonical_city_name(city, other),
                country=other.name,
                is_remote=False,
                confidence=0.8,
                original_input=ctx.text,
                resolved_by="major_city",
            )
            for other in countries[1:MAX_ALTERNATIVES]
        ]
        warnings = []
        if alternatives:
            warnings.append(
                f"{city} exists in several countries - assuming {chosen.name}"
            )
        return ctx.result(
            city, chosen.name, 0.85, "major_city", warnings=warnings, alternatives=alternatives
        )

    # ─── Stage 6: company headquarters ───────────────────────────────────────

    def _resolve_company(self, ctx: _ResolutionContext) -> Optional[LocationResolution]:
        if not ctx.company:
            return None
        hq = company_headquarters(ctx.company)
        if hq is None:
            return None
        return ctx.result(
            hq.city,
            hq.country.name,
            0.7,
            "fallback",
            state=hq.state,
            warnings=["Location inferred from company headquarters"],
        )

    # ─── Stage 7: fallback ───────────────────────────────────────────────────

    def _resolve_fallback(self, ctx: _ResolutionContext) -> LocationResolution:
        home = ctx.user_profile.home_location() if ctx.user_profile else None
        if home:
            city, country, state = home
            return ctx.result(
                city,
                country,
                0.3,
                "fallback",
                is_remote=True,
                state=state,
                warnings=["Using your profile location as fallback"],
            )

        return ctx.result(
            REMOTE_CITY,
            GLOBAL_COUNTRY,
            0.2,
            "fallback",
            is_remote=True,
            warnings=["Could not determine location - using global remote"],
        )


# ─── Module-level singleton ──────────────────────────────────────────────────

location_resolver = LocationResolver()


def resolve_location(job_context, user_profile=None) -> LocationResolution:
    return location_resolver.resolve_location(job_context, user_profile)


def validate_location(resolution: LocationResolution) -> LocationResolution:
    return location_resolver.validate_location(resolution)


def get_location_alternatives(job_context, user_profile=None) -> list[LocationResolution]:
    return location_resolver.get_location_alternatives(job_context, user_profile)
