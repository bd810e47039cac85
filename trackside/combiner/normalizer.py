"""Signal normalizer.

Reduces the raw bot outputs and the algorithm ranking to the categorical
judgments the template layer branches on: race type and favorite status.
Also builds the per-horse ``HorseSignal`` view shared by the value-horse
identifier, the insight composer and the confidence score.

Every function here is pure. Missing signals mean "no evidence" and never
push a judgment in either direction.
"""

import logging
from dataclasses import dataclass

from trackside.models.race import ParsedRace, RaceScoringResult
from trackside.models.signals import (
    CONFIDENCE_HIGH,
    CONFIDENCE_MEDIUM,
    FIELD_COMPETITIVE,
    FIELD_DOMINANT,
    FIELD_MIXED,
    FIELD_SEPARATED,
    FIELD_TIGHT,
    FIELD_WIDE_OPEN,
    PACE_HOT,
    FieldSpreadAnalysis,
    MultiBotRawResults,
    PaceScenarioAnalysis,
    VulnerableFavoriteAnalysis,
)

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Constants
# ──────────────────────────────────────────────

# Race types
CHALK = "CHALK"
COMPETITIVE = "COMPETITIVE"
WIDE_OPEN = "WIDE_OPEN"

# Favorite status
SOLID = "SOLID"
VULNERABLE = "VULNERABLE"

WIDE_OPEN_SCORE_BAND = 30.0   # top-6 scores inside this band = wide open
WIDE_OPEN_TOP_N = 6

# Ranking-affecting vulnerability gate
VULNERABLE_GATE_MIN_REASONS = 2

FIELD_TYPE_TO_RACE_TYPE = {
    FIELD_DOMINANT: CHALK,
    FIELD_SEPARATED: CHALK,
    FIELD_COMPETITIVE: COMPETITIVE,
    FIELD_MIXED: COMPETITIVE,
    FIELD_TIGHT: COMPETITIVE,
    FIELD_WIDE_OPEN: WIDE_OPEN,
}

SPEED_STYLES = {"E", "E/P"}
CLOSER_STYLES = {"C", "S"}


@dataclass
class HorseSignal:
    """Per-horse view of the algorithm ranking plus bot flags."""

    program_number: int
    horse_name: str
    algorithm_rank: int
    algorithm_score: float
    running_style: str = ""
    morning_line_decimal: float | None = None
    trip_trouble_flagged: bool = False
    trip_trouble_issue: str | None = None
    pace_advantage_flagged: bool = False
    pace_edge_reason: str | None = None
    is_lone_speed: bool = False


# ──────────────────────────────────────────────
# Running style helpers
# ──────────────────────────────────────────────

def normalize_style(style: str | None) -> str:
    """Upper-case a DRF running style, mapping long forms to codes."""
    s = (style or "").strip().upper()
    if "EARLY" in s:
        return "E"
    if "CLOSER" in s:
        return "C"
    return s.replace(" ", "")


def is_speed_style(style: str | None) -> bool:
    return normalize_style(style) in SPEED_STYLES


def is_closer_style(style: str | None) -> bool:
    return normalize_style(style) in CLOSER_STYLES


def find_lone_speed_horse(signals: list[HorseSignal]) -> int | None:
    """Return the program number the lone-speed exception belongs to.

    That is the best-ranked E or E/P runner. None when the card has no
    early-speed runner.
    """
    speed = sorted(
        (s for s in signals if is_speed_style(s.running_style)),
        key=lambda s: s.algorithm_rank,
    )
    if not speed:
        return None
    if len(speed) > 1:
        logger.debug(
            f"{len(speed)} early-speed runners, lone speed goes to best-ranked #{speed[0].program_number}"
        )
    return speed[0].program_number


# ──────────────────────────────────────────────
# Aggregation
# ──────────────────────────────────────────────

def aggregate_signals(
    race: ParsedRace,
    scoring: RaceScoringResult,
    raw: MultiBotRawResults,
) -> list[HorseSignal]:
    """Build HorseSignal rows for non-scratched horses in algorithm rank order."""
    signals: list[HorseSignal] = []
    for score in scoring.ranked():
        entry = race.horse(score.program_number)
        if entry is not None and entry.is_scratched:
            continue
        ml = score.morning_line_decimal
        if ml is None and entry is not None:
            ml = entry.morning_line_decimal
        signals.append(HorseSignal(
            program_number=score.program_number,
            horse_name=score.horse_name or (entry.horse_name if entry else ""),
            algorithm_rank=score.rank,
            algorithm_score=score.final_score,
            running_style=normalize_style(entry.running_style if entry else ""),
            morning_line_decimal=ml,
        ))

    if raw.trip_trouble is not None:
        for s in signals:
            flagged = raw.trip_trouble.for_horse(s.program_number)
            if flagged is not None and flagged.masked_ability:
                s.trip_trouble_flagged = True
                s.trip_trouble_issue = flagged.issue or None

    if raw.pace_scenario is not None:
        _apply_pace_flags(signals, raw.pace_scenario)

    return signals


def _apply_pace_flags(signals: list[HorseSignal], pace: PaceScenarioAnalysis) -> None:
    """Flag the lone-speed horse and, in a HOT speed duel, the closers."""
    if pace.lone_speed_exception:
        lone = find_lone_speed_horse(signals)
        if lone is None:
            logger.debug("Lone speed exception set but no E or E/P runner")
        for s in signals:
            if s.program_number == lone:
                s.is_lone_speed = True
                s.pace_advantage_flagged = True
                s.pace_edge_reason = "Lone speed - clear tactical advantage"

    if pace.speed_duel_likely and pace.pace_projection == PACE_HOT:
        for s in signals:
            if is_closer_style(s.running_style) and not s.pace_advantage_flagged:
                s.pace_advantage_flagged = True
                s.pace_edge_reason = "Speed duel sets up for closing style"


# ──────────────────────────────────────────────
# Race type
# ──────────────────────────────────────────────

def derive_race_type(
    field_spread: FieldSpreadAnalysis | None,
    ranked_signals: list[HorseSignal],
    score_band: float = WIDE_OPEN_SCORE_BAND,
) -> str:
    """Classify the race as CHALK, COMPETITIVE or WIDE_OPEN.

    The field-spread bot wins when present. Without it, the top six scores
    inside ``score_band`` points means WIDE_OPEN, anything else COMPETITIVE.
    A lone score has zero spread and counts as WIDE_OPEN; no scores at all
    is COMPETITIVE. CHALK is never inferred from scores; it needs a positive
    classification.
    """
    if field_spread is not None:
        return FIELD_TYPE_TO_RACE_TYPE.get(field_spread.field_type, COMPETITIVE)

    scores = sorted((s.algorithm_score for s in ranked_signals), reverse=True)[:WIDE_OPEN_TOP_N]
    if not scores:
        return COMPETITIVE
    if scores[0] - scores[-1] <= score_band:
        return WIDE_OPEN
    return COMPETITIVE


# ──────────────────────────────────────────────
# Favorite status
# ──────────────────────────────────────────────

def determine_favorite_status(
    vulnerable_favorite: VulnerableFavoriteAnalysis | None,
) -> tuple[str, list[str]]:
    """Return (SOLID | VULNERABLE, flags).

    LOW confidence is noise and always SOLID regardless of flag count.
    """
    if vulnerable_favorite is None or not vulnerable_favorite.is_vulnerable:
        return SOLID, []
    if vulnerable_favorite.confidence not in (CONFIDENCE_HIGH, CONFIDENCE_MEDIUM):
        return SOLID, []
    return VULNERABLE, list(vulnerable_favorite.reasons)


def gate_favorite_status(
    status: str,
    vulnerable_favorite: VulnerableFavoriteAnalysis | None,
) -> str:
    """Apply the ranking-affecting gate: HIGH confidence and 2+ flags.

    A favorite that is flagged VULNERABLE for display but fails the gate is
    treated as SOLID by the template layer.
    """
    if status != VULNERABLE or vulnerable_favorite is None:
        return SOLID
    if (vulnerable_favorite.confidence == CONFIDENCE_HIGH
            and len(vulnerable_favorite.reasons) >= VULNERABLE_GATE_MIN_REASONS):
        return VULNERABLE
    return SOLID


def has_vulnerability_penalty(vulnerable_favorite: VulnerableFavoriteAnalysis | None) -> bool:
    """Confidence penalty applies for HIGH with 2+ flags, or any 3+ flags."""
    if vulnerable_favorite is None or not vulnerable_favorite.is_vulnerable:
        return False
    n = len(vulnerable_favorite.reasons)
    if vulnerable_favorite.confidence == CONFIDENCE_HIGH and n >= VULNERABLE_GATE_MIN_REASONS:
        return True
    return n >= 3
