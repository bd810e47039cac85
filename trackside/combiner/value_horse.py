"""Value-horse identification.

A value horse is a single non-top runner with a specific, evidenced edge the
algorithm's numbers cannot see: a trip-trouble line that masked ability, or
a pace setup (lone speed in a slow pace, a closer behind a hot speed duel).

Value horses must be rare. When two candidates tie at the strongest tier the
identifier abstains rather than guess.
"""

import logging
import re
from dataclasses import dataclass, field

from trackside.combiner.normalizer import HorseSignal, find_lone_speed_horse, is_closer_style
from trackside.models.signals import (
    PACE_HOT,
    PACE_SLOW,
    PaceScenarioAnalysis,
    TripTroubleAnalysis,
)

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Constants
# ──────────────────────────────────────────────

SOURCE_TRIP_TROUBLE = "TRIP_TROUBLE"
SOURCE_PACE = "PACE"

STRENGTH_NONE = "NONE"
STRENGTH_MODERATE = "MODERATE"
STRENGTH_STRONG = "STRONG"

_STRENGTH_ORDER = {STRENGTH_NONE: 0, STRENGTH_MODERATE: 1, STRENGTH_STRONG: 2}

VALUE_MIN_ODDS = 4.0      # morning line decimal, 4-1 or longer
VALUE_MIN_RANK = 5        # top 4 are the contenders, never "value"

# Trip issue mentions more than one troubled race
_MULTI_RACE_PATTERNS = [
    r"\b2 of\b", r"\btwo of\b", r"\b2 out of\b", r"\btwo out of\b",
    r"\btwice\b", r"\bboth\b", r"\bmultiple\b", r"\bconsecutive\b",
    r"\b2 races\b", r"\btwo races\b", r"\blast (?:2|two|3|three)\b",
    r"\b[23]/3\b", r"\brepeated(?:ly)?\b",
]
_MULTI_RACE_RE = re.compile("|".join(_MULTI_RACE_PATTERNS), re.IGNORECASE)


@dataclass
class ValueHorseIdentification:
    identified: bool = False
    program_number: int | None = None
    horse_name: str | None = None
    algorithm_rank: int | None = None
    sources: list[str] = field(default_factory=list)
    signal_strength: str = STRENGTH_NONE
    angle: str | None = None
    reasoning: str = ""


def mentions_multiple_races(issue: str | None) -> bool:
    """True when trip-trouble text describes trouble in 2+ races."""
    if not issue:
        return False
    return _MULTI_RACE_RE.search(issue) is not None


def _stronger(a: str, b: str) -> str:
    return a if _STRENGTH_ORDER[a] >= _STRENGTH_ORDER[b] else b


@dataclass
class _Evidence:
    signal: HorseSignal
    sources: list[str] = field(default_factory=list)
    strength: str = STRENGTH_NONE
    angles: list[str] = field(default_factory=list)

    def add(self, source: str, strength: str, angle: str) -> None:
        if source not in self.sources:
            self.sources.append(source)
        self.angles.append(angle)
        if len(self.sources) > 1:
            self.strength = STRENGTH_STRONG
        else:
            self.strength = _stronger(self.strength, strength)


def _candidate_pool(
    ranked_signals: list[HorseSignal],
    pace_scenario: PaceScenarioAnalysis | None,
    min_odds: float,
    min_rank: int,
) -> list[HorseSignal]:
    pool = [
        s for s in ranked_signals
        if s.algorithm_rank >= min_rank
        and s.morning_line_decimal is not None
        and s.morning_line_decimal >= min_odds
    ]

    if (pace_scenario is not None
            and pace_scenario.pace_projection == PACE_SLOW
            and pace_scenario.lone_speed_exception):
        lone = find_lone_speed_horse(ranked_signals)
        for s in ranked_signals:
            if s.program_number == lone and s.algorithm_rank > 1 and s not in pool:
                pool.append(s)
    return pool


def identify_value_horse(
    trip_trouble: TripTroubleAnalysis | None,
    pace_scenario: PaceScenarioAnalysis | None,
    ranked_signals: list[HorseSignal],
    min_odds: float = VALUE_MIN_ODDS,
    min_rank: int = VALUE_MIN_RANK,
) -> ValueHorseIdentification:
    """Find the single value horse in the field, if there is one.

    Args:
        trip_trouble: Trip-trouble bot output, or None.
        pace_scenario: Pace bot output, or None.
        ranked_signals: Aggregated horse signals in algorithm rank order.
        min_odds: Minimum morning-line decimal for the odds-based pool.
        min_rank: Minimum algorithm rank for the odds-based pool.

    Returns:
        ValueHorseIdentification; ``identified`` is False when no candidate
        has evidence or the strongest tier is shared.
    """
    if trip_trouble is None and pace_scenario is None:
        return ValueHorseIdentification(reasoning="No trip or pace signals available")

    pool = _candidate_pool(ranked_signals, pace_scenario, min_odds, min_rank)
    if not pool:
        return ValueHorseIdentification(reasoning="No horse in the value pool")

    lone = find_lone_speed_horse(ranked_signals)
    hot_duel = (
        pace_scenario is not None
        and pace_scenario.speed_duel_likely
        and pace_scenario.pace_projection == PACE_HOT
    )

    evidence: list[_Evidence] = []
    for s in pool:
        ev = _Evidence(signal=s)

        if trip_trouble is not None:
            flagged = trip_trouble.for_horse(s.program_number)
            if flagged is not None and flagged.masked_ability:
                strength = STRENGTH_STRONG if mentions_multiple_races(flagged.issue) else STRENGTH_MODERATE
                angle = "Trip trouble masked ability"
                if flagged.issue:
                    angle += f" ({flagged.issue})"
                ev.add(SOURCE_TRIP_TROUBLE, strength, angle)

        if pace_scenario is not None:
            if (pace_scenario.pace_projection == PACE_SLOW
                    and pace_scenario.lone_speed_exception
                    and s.program_number == lone):
                ev.add(SOURCE_PACE, STRENGTH_STRONG, "Lone speed in a slow pace")
            elif hot_duel and is_closer_style(s.running_style):
                ev.add(SOURCE_PACE, STRENGTH_MODERATE, "Closer set up by a hot speed duel")

        if ev.sources:
            evidence.append(ev)

    if not evidence:
        return ValueHorseIdentification(reasoning="No value-pool horse carries a trip or pace edge")

    best = max(_STRENGTH_ORDER[e.strength] for e in evidence)
    top = [e for e in evidence if _STRENGTH_ORDER[e.strength] == best]
    if len(top) > 1:
        tied = ", ".join(f"#{e.signal.program_number}" for e in top)
        logger.debug(f"Value horse tie at {top[0].strength} between {tied}, abstaining")
        return ValueHorseIdentification(
            reasoning=f"Tie between {tied} at {top[0].strength} strength, no pick",
        )

    winner = top[0]
    s = winner.signal
    angle = "; ".join(winner.angles)
    logger.debug(f"Value horse #{s.program_number} (rank {s.algorithm_rank}) {winner.strength} via {winner.sources}")
    return ValueHorseIdentification(
        identified=True,
        program_number=s.program_number,
        horse_name=s.horse_name,
        algorithm_rank=s.algorithm_rank,
        sources=list(winner.sources),
        signal_strength=winner.strength,
        angle=angle,
        reasoning=f"#{s.program_number} {s.horse_name} ranked {s.algorithm_rank}: {angle}",
    )
