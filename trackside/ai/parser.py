"""Parse raw bot responses into typed signals.

Bot output is untrusted. Every public parser returns the typed analysis or
``None``; a ``None`` is treated downstream exactly like a bot that never
ran. Responses may arrive as a dict (already decoded) or as text, with or
without a ```json fence around the payload.
"""

import json
import logging
import re
from typing import Any

from trackside.models.coerce import as_bool, as_str_list, first_of
from trackside.models.signals import (
    BOT_CONFIDENCE_LEVELS,
    FIELD_TYPES,
    PACE_PROJECTIONS,
    SPREAD_LEVELS,
    SPREAD_MEDIUM,
    FieldSpreadAnalysis,
    MultiBotRawResults,
    PaceScenarioAnalysis,
    TripTroubleAnalysis,
    TripTroubleHorse,
    VulnerableFavoriteAnalysis,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class SignalParseError(ValueError):
    """Raised when a bot response cannot be decoded to a JSON object."""


def parse_bot_json(raw: Any) -> dict:
    """Decode a bot response to a dict, stripping markdown fences.

    Raises SignalParseError on anything that is not a JSON object.
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise SignalParseError("empty or non-text bot response")

    text = raw.strip()
    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()
    else:
        # Tolerate chatter around a bare object
        start, end = text.find("{"), text.rfind("}")
        if start != -1 and end > start:
            text = text[start:end + 1]

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SignalParseError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SignalParseError(f"expected object, got {type(data).__name__}")
    return data


def _as_enum(value: Any, allowed: tuple[str, ...]) -> str | None:
    if value is None:
        return None
    text = str(value).strip().upper().replace(" ", "_").replace("-", "_")
    return text if text in allowed else None


def _decode(raw: Any, bot: str) -> dict | None:
    try:
        return parse_bot_json(raw)
    except SignalParseError as e:
        logger.warning(f"{bot} bot response unparsable: {e}")
        return None


# ──────────────────────────────────────────────
# Per-bot parsers
# ──────────────────────────────────────────────

def parse_trip_trouble_response(raw: Any) -> TripTroubleAnalysis | None:
    """Parse the trip-trouble bot. Entries without a valid program number are dropped."""
    data = _decode(raw, "TripTrouble")
    if data is None:
        return None

    entries = first_of(data, "horsesWithTripTrouble", "horses_with_trip_trouble")
    if not isinstance(entries, list):
        logger.warning("TripTrouble bot response missing horse list")
        return None

    horses = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            pn = int(first_of(entry, "programNumber", "program_number"))
        except (TypeError, ValueError):
            continue
        if pn <= 0:
            continue
        horses.append(TripTroubleHorse(
            program_number=pn,
            horse_name=str(first_of(entry, "horseName", "horse_name", default="")),
            issue=str(first_of(entry, "issue", default="")),
            masked_ability=as_bool(first_of(entry, "maskedAbility", "masked_ability", default=False)),
        ))
    return TripTroubleAnalysis(horses_with_trip_trouble=horses)


def parse_pace_scenario_response(raw: Any) -> PaceScenarioAnalysis | None:
    """Parse the pace bot. An unknown pace projection invalidates the whole signal."""
    data = _decode(raw, "PaceScenario")
    if data is None:
        return None

    projection = _as_enum(first_of(data, "paceProjection", "pace_projection"), PACE_PROJECTIONS)
    if projection is None:
        logger.warning(f"PaceScenario bot returned unknown projection: {data.get('paceProjection')}")
        return None

    return PaceScenarioAnalysis(
        pace_projection=projection,
        advantaged_styles=[s.upper() for s in as_str_list(first_of(data, "advantagedStyles", "advantaged_styles"))],
        disadvantaged_styles=[s.upper() for s in as_str_list(first_of(data, "disadvantagedStyles", "disadvantaged_styles"))],
        lone_speed_exception=as_bool(first_of(data, "loneSpeedException", "lone_speed_exception", default=False)),
        speed_duel_likely=as_bool(first_of(data, "speedDuelLikely", "speed_duel_likely", default=False)),
    )


def parse_vulnerable_favorite_response(raw: Any) -> VulnerableFavoriteAnalysis | None:
    """Parse the vulnerable-favorite bot. Duplicate reasons collapse to one flag."""
    data = _decode(raw, "VulnerableFavorite")
    if data is None:
        return None

    confidence = _as_enum(first_of(data, "confidence"), BOT_CONFIDENCE_LEVELS)
    if confidence is None:
        logger.warning(f"VulnerableFavorite bot returned unknown confidence: {data.get('confidence')}")
        return None

    reasons: list[str] = []
    seen: set[str] = set()
    for reason in as_str_list(first_of(data, "reasons", default=[])):
        key = reason.lower()
        if key not in seen:
            seen.add(key)
            reasons.append(reason)

    return VulnerableFavoriteAnalysis(
        is_vulnerable=as_bool(first_of(data, "isVulnerable", "is_vulnerable", default=False)),
        reasons=reasons,
        confidence=confidence,
    )


def parse_field_spread_response(raw: Any) -> FieldSpreadAnalysis | None:
    """Parse the field-spread bot."""
    data = _decode(raw, "FieldSpread")
    if data is None:
        return None

    field_type = _as_enum(first_of(data, "fieldType", "field_type"), FIELD_TYPES)
    if field_type is None:
        logger.warning(f"FieldSpread bot returned unknown field type: {data.get('fieldType')}")
        return None

    try:
        top_tier = max(0, int(first_of(data, "topTierCount", "top_tier_count", default=0)))
    except (TypeError, ValueError):
        top_tier = 0

    spread = _as_enum(first_of(data, "recommendedSpread", "recommended_spread"), SPREAD_LEVELS)
    return FieldSpreadAnalysis(
        field_type=field_type,
        top_tier_count=top_tier,
        recommended_spread=spread or SPREAD_MEDIUM,
    )


def parse_multi_bot_results(data: dict | None) -> MultiBotRawResults:
    """Parse a bundle of bot outputs keyed by bot name (camelCase or snake_case)."""
    if not isinstance(data, dict):
        return MultiBotRawResults()

    def _section(*keys: str) -> Any:
        value = first_of(data, *keys)
        return value if value else None

    trip = _section("tripTrouble", "trip_trouble")
    pace = _section("paceScenario", "pace_scenario")
    vuln = _section("vulnerableFavorite", "vulnerable_favorite")
    spread = _section("fieldSpread", "field_spread")

    return MultiBotRawResults(
        trip_trouble=parse_trip_trouble_response(trip) if trip is not None else None,
        pace_scenario=parse_pace_scenario_response(pace) if pace is not None else None,
        vulnerable_favorite=parse_vulnerable_favorite_response(vuln) if vuln is not None else None,
        field_spread=parse_field_spread_response(spread) if spread is not None else None,
    )
